"""Response models shared by all endpoints"""

from pydantic import BaseModel
from typing import Optional


class FieldError(BaseModel):
    """One failed field in a validation error"""
    field: str
    message: str


class MessageResponse(BaseModel):
    """Plain acknowledgement"""
    message: str


class ErrorResponse(BaseModel):
    """Error response format"""
    message: str
    errors: Optional[list[FieldError]] = None

    class Config:
        json_schema_extra = {
            "example": {
                "message": "Validation failed",
                "errors": [
                    {"field": "jobTitle", "message": "Job title is required"}
                ]
            }
        }


class HealthResponse(BaseModel):
    """Health check response"""
    status: str
    version: str
    environment: str
