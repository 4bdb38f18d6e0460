"""
Password hashing and bearer token issuance
bcrypt for passwords, HS256 JWT (python-jose) for access tokens
"""
import logging
import secrets
from datetime import datetime, timedelta, timezone
from typing import Dict, Optional

import bcrypt
from jose import jwt, JWTError

from .config import APISettings, get_settings
from .exceptions import AuthenticationException

logger = logging.getLogger(__name__)

# bcrypt only looks at the first 72 bytes
_BCRYPT_MAX_BYTES = 72


def _password_bytes(password: str) -> bytes:
    return password.encode("utf-8")[:_BCRYPT_MAX_BYTES]


class PasswordHasher:
    """bcrypt password hasher"""

    def __init__(self, rounds: int = 12):
        self.rounds = rounds

    def hash_password(self, password: str) -> str:
        return bcrypt.hashpw(_password_bytes(password), bcrypt.gensalt(self.rounds)).decode("utf-8")

    def verify_password(self, password: str, password_hash: str) -> bool:
        try:
            return bcrypt.checkpw(_password_bytes(password), password_hash.encode("utf-8"))
        except ValueError:
            logger.warning("Stored password hash is malformed")
            return False


class JwtService:
    """Issues and verifies access tokens carrying the user id in ``sub``"""

    def __init__(self, settings: Optional[APISettings] = None):
        settings = settings or get_settings()
        self.secret_key = settings.jwt_secret_key
        self.algorithm = settings.jwt_algorithm
        self.expire_delta = timedelta(days=settings.jwt_expire_days)

    def create_access_token(self, user_id: str) -> str:
        now = datetime.now(timezone.utc)
        payload = {
            "sub": user_id,
            "iat": now,
            "exp": now + self.expire_delta,
            "type": "access",
        }
        return jwt.encode(payload, self.secret_key, algorithm=self.algorithm)

    def verify_token(self, token: str) -> Dict:
        """Decode a token, raising AuthenticationException when invalid or expired"""
        try:
            payload = jwt.decode(token, self.secret_key, algorithms=[self.algorithm])
        except JWTError as e:
            logger.warning(f"JWT verification failed: {e}")
            raise AuthenticationException("Token is not valid") from None

        if not payload.get("sub"):
            raise AuthenticationException("Token is not valid")
        return payload


def generate_reset_token() -> str:
    """Random 40-character hex token for password resets"""
    return secrets.token_hex(20)
