"""Client-side error hierarchy"""

from typing import List, Optional


class TrackerClientError(Exception):
    """Base exception for all tracker client errors"""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class AuthError(TrackerClientError):
    """Login, registration or credential problem"""
    pass


class LoadError(TrackerClientError):
    """Fetching the working set failed; the working set is unchanged"""
    pass


class MutationError(TrackerClientError):
    """Create, update or delete failed; the working set is unchanged"""
    pass


class TrackerValidationError(TrackerClientError):
    """Required fields missing before a request was sent"""

    def __init__(self, fields: List[str]):
        self.fields = fields
        super().__init__("Please fill in all required fields: " + ", ".join(fields))
