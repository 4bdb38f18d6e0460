"""Bearer credential and user identity for one client session"""

import json
import logging
from pathlib import Path
from typing import Optional

from .models import UserProfile

logger = logging.getLogger(__name__)


class TrackerSession:
    """Holds the bearer token of the logged-in user.

    When ``path`` is set the credential survives between CLI invocations;
    otherwise it lives only in memory.
    """

    def __init__(self, path: Optional[Path] = None):
        self.path = Path(path) if path else None
        self.token: Optional[str] = None
        self.user: Optional[UserProfile] = None
        if self.path:
            self._load()

    @property
    def is_authenticated(self) -> bool:
        return bool(self.token)

    def _load(self):
        if not self.path.exists():
            return
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.warning(f"Ignoring unreadable session file {self.path}: {e}")
            return
        self.token = data.get("token")
        if data.get("user"):
            self.user = UserProfile.model_validate(data["user"])

    def save(self):
        if not self.path:
            return
        self.path.parent.mkdir(parents=True, exist_ok=True)
        payload = {
            "token": self.token,
            "user": self.user.model_dump(by_alias=True, mode="json") if self.user else None,
        }
        self.path.write_text(json.dumps(payload, indent=2), encoding="utf-8")

    def set_credential(self, token: str, user: Optional[UserProfile] = None):
        self.token = token
        self.user = user
        self.save()

    def clear(self):
        """Discard the credential (logout or rejected token)"""
        self.token = None
        self.user = None
        if self.path and self.path.exists():
            self.path.unlink()
