"""API Routers"""

from .auth import router as auth_router
from .applications import router as applications_router

__all__ = [
    "auth_router",
    "applications_router",
]
