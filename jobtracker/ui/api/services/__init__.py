"""API Services"""

from .auth_service import AuthService
from .application_service import ApplicationService
from .mail_service import MailService

__all__ = [
    "AuthService",
    "ApplicationService",
    "MailService",
]
