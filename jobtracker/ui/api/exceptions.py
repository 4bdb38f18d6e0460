"""
Custom Exception Hierarchy
Errors raised by the record store and services, mapped to HTTP responses in main.py
"""
from typing import List, Optional


class TrackerException(Exception):
    """Base exception for all server-side tracker errors"""
    status_code = 500

    def __init__(self, message: str, errors: Optional[List[dict]] = None):
        self.message = message
        self.errors = errors
        super().__init__(message)


class AuthenticationException(TrackerException):
    """Missing, invalid or expired bearer credential"""
    status_code = 401


class InvalidCredentialsException(TrackerException):
    """Wrong email or password"""
    status_code = 400


class ValidationException(TrackerException):
    """Data validation failed"""
    status_code = 400

    def __init__(self, field: str, message: str):
        self.field = field
        super().__init__(message, errors=[{"field": field, "message": message}])


class InvalidIdentifierException(TrackerException):
    """Identifier is not well-formed for the store"""
    status_code = 400

    def __init__(self, resource_type: str, identifier: str):
        self.resource_type = resource_type
        self.identifier = identifier
        super().__init__(f"Invalid {resource_type.lower()} ID")


class ResourceNotFoundException(TrackerException):
    """Requested resource not found, or not owned by the caller"""
    status_code = 404


class DuplicateResourceException(TrackerException):
    """Resource already exists"""
    status_code = 400

    def __init__(self, resource_type: str, field: str, value: str):
        self.resource_type = resource_type
        self.field = field
        self.value = value
        super().__init__(f"{resource_type} already exists with this {field}")


class InvalidResetTokenException(TrackerException):
    """Password reset token unknown, used or expired"""
    status_code = 400

    def __init__(self):
        super().__init__("Password reset token is invalid or has expired.")
