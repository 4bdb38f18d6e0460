"""Dependency injection for FastAPI"""

from typing import Optional
import logging

from fastapi import Depends, Header

from .config import get_settings
from .database import TrackerDatabase, get_tracker_database
from .exceptions import AuthenticationException
from .services import ApplicationService, AuthService

logger = logging.getLogger(__name__)


def get_db() -> TrackerDatabase:
    """Record store (singleton, overridable in tests)"""
    return get_tracker_database()


def get_auth_service(db: TrackerDatabase = Depends(get_db)) -> AuthService:
    return AuthService(db, settings=get_settings())


def get_application_service(db: TrackerDatabase = Depends(get_db)) -> ApplicationService:
    return ApplicationService(db)


def _bearer_token(authorization: Optional[str]) -> Optional[str]:
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


def get_current_user(
    authorization: Optional[str] = Header(None),
    auth_service: AuthService = Depends(get_auth_service),
) -> dict:
    """Resolve the bearer credential to the calling user's row"""
    token = _bearer_token(authorization)
    if token is None:
        raise AuthenticationException("No token, authorization denied")
    return auth_service.user_from_token(token)
