"""Auth API Router"""

from fastapi import APIRouter, Depends, status
import logging

from ..dependencies import get_auth_service, get_current_user
from ..services import AuthService
from ..services.auth_service import to_user_response
from ..models.tracker_models import (
    AuthResponse,
    ForgotPasswordRequest,
    LoginRequest,
    RegisterRequest,
    ResetPasswordRequest,
    UserResponse,
)
from ..models.responses import ErrorResponse, MessageResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post(
    "/register",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}},
    summary="Create an account",
)
def register(
    request: RegisterRequest,
    service: AuthService = Depends(get_auth_service),
) -> AuthResponse:
    return service.register(request)


@router.post(
    "/login",
    response_model=AuthResponse,
    responses={400: {"model": ErrorResponse}},
    summary="Exchange email and password for a token",
)
def login(
    request: LoginRequest,
    service: AuthService = Depends(get_auth_service),
) -> AuthResponse:
    return service.login(request)


@router.get(
    "/me",
    response_model=UserResponse,
    responses={401: {"model": ErrorResponse}},
    summary="Current user",
)
def me(user: dict = Depends(get_current_user)) -> UserResponse:
    return to_user_response(user)


@router.post("/logout", response_model=MessageResponse, summary="Log out")
def logout() -> MessageResponse:
    # Tokens are stateless; the client discards its copy
    return MessageResponse(message="Logged out successfully")


@router.post(
    "/forgot-password",
    response_model=MessageResponse,
    responses={404: {"model": ErrorResponse}},
    summary="Request a password reset link",
)
def forgot_password(
    request: ForgotPasswordRequest,
    service: AuthService = Depends(get_auth_service),
) -> MessageResponse:
    return MessageResponse(message=service.forgot_password(request.email))


@router.post(
    "/reset-password/{token}",
    response_model=MessageResponse,
    responses={400: {"model": ErrorResponse}},
    summary="Set a new password with a reset token",
)
def reset_password(
    token: str,
    request: ResetPasswordRequest,
    service: AuthService = Depends(get_auth_service),
) -> MessageResponse:
    return MessageResponse(message=service.reset_password(token, request.password))
