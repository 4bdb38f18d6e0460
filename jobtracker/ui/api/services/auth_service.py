"""Account registration, login and password reset"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from ..config import APISettings, get_settings
from ..database import TrackerDatabase
from ..exceptions import (
    DuplicateResourceException,
    InvalidCredentialsException,
    InvalidResetTokenException,
    AuthenticationException,
    ResourceNotFoundException,
)
from ..models.tracker_models import (
    AuthResponse,
    LoginRequest,
    RegisterRequest,
    UserResponse,
)
from ..security import JwtService, PasswordHasher, generate_reset_token
from .mail_service import MailService

logger = logging.getLogger(__name__)

WRONG_CREDENTIALS = "Wrong email or password"


def to_user_response(row: dict) -> UserResponse:
    """Public view of a user row; the password hash never leaves the store"""
    return UserResponse(
        id=row["id"],
        name=row["name"],
        email=row["email"],
        created_at=row.get("created_at"),
    )


class AuthService:
    """Service for account and credential operations"""

    def __init__(
        self,
        db: TrackerDatabase,
        settings: Optional[APISettings] = None,
        hasher: Optional[PasswordHasher] = None,
        jwt_service: Optional[JwtService] = None,
        mail: Optional[MailService] = None,
    ):
        self.db = db
        self.settings = settings or get_settings()
        self.hasher = hasher or PasswordHasher()
        self.jwt = jwt_service or JwtService(self.settings)
        self.mail = mail or MailService(self.settings)

    def register(self, request: RegisterRequest) -> AuthResponse:
        if self.db.get_user_by_email(request.email):
            raise DuplicateResourceException("User", "email", request.email)

        row = self.db.create_user(
            name=request.name,
            email=request.email,
            password_hash=self.hasher.hash_password(request.password),
        )
        logger.info(f"Registered user {row['id']}")
        return AuthResponse(
            message="User created successfully",
            token=self.jwt.create_access_token(row["id"]),
            user=to_user_response(row),
        )

    def login(self, request: LoginRequest) -> AuthResponse:
        row = self.db.get_user_by_email(request.email)
        # Same message for unknown email and wrong password
        if not row or not self.hasher.verify_password(request.password, row["password_hash"]):
            raise InvalidCredentialsException(WRONG_CREDENTIALS)

        return AuthResponse(
            message="Login successful",
            token=self.jwt.create_access_token(row["id"]),
            user=to_user_response(row),
        )

    def user_from_token(self, token: str) -> dict:
        """Resolve a bearer token to its user row"""
        payload = self.jwt.verify_token(token)
        row = self.db.get_user(payload["sub"])
        if not row:
            raise AuthenticationException("Token is not valid")
        return row

    def forgot_password(self, email: str) -> str:
        """Issue a one-hour reset token and deliver the link"""
        row = self.db.get_user_by_email(email)
        if not row:
            raise ResourceNotFoundException("No user found with this email")

        token = generate_reset_token()
        expires_at = datetime.now(timezone.utc) + timedelta(
            minutes=self.settings.reset_token_ttl_minutes
        )
        self.db.set_reset_token(row["id"], token, expires_at)

        reset_url = f"{self.settings.public_base_url.rstrip('/')}/#reset/{token}"
        logger.warning(f"Password reset requested for {row['email']}: {reset_url}")

        if self.mail.send_reset_link(row["email"], reset_url):
            return "Password reset instructions have been sent to your email."
        return "Reset link generated! Check the server log for the link."

    def reset_password(self, token: str, password: str) -> str:
        row = self.db.get_user_by_reset_token(token, datetime.now(timezone.utc))
        if not row:
            raise InvalidResetTokenException()

        self.db.update_password(row["id"], self.hasher.hash_password(password))
        logger.info(f"Password reset for user {row['id']}")
        return "Password has been updated successfully."
