"""Pydantic models for the auth and application endpoints"""

import datetime as dt
from typing import Optional
from pydantic import BaseModel, EmailStr, Field, field_validator
from pydantic.alias_generators import to_camel

from jobtracker.tracker.models import ApplicationStatus


class CamelModel(BaseModel):
    """camelCase on the wire, snake_case in Python"""

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        str_strip_whitespace = True


# ============== Auth Models ==============

class RegisterRequest(CamelModel):
    """Create account request"""
    name: str = Field(..., max_length=100)
    email: EmailStr
    password: str = Field(..., max_length=128)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        if len(v) < 2:
            raise ValueError("Name must be at least 2 characters")
        return v

    @field_validator("password")
    @classmethod
    def validate_password(cls, v: str) -> str:
        if len(v) < 6:
            raise ValueError("Password must be at least 6 characters")
        return v

    class Config:
        json_schema_extra = {
            "example": {
                "name": "Ada Lovelace",
                "email": "ada@example.com",
                "password": "analytical"
            }
        }


class LoginRequest(CamelModel):
    """Login request"""
    email: EmailStr
    password: str = Field(..., min_length=1, max_length=128)


class ForgotPasswordRequest(CamelModel):
    email: EmailStr


class ResetPasswordRequest(CamelModel):
    password: str = Field(..., max_length=128)

    @field_validator("password")
    @classmethod
    def validate_password(cls, v: str) -> str:
        if len(v) < 6:
            raise ValueError("Password must be at least 6 characters")
        return v


class UserResponse(CamelModel):
    """User without credentials"""
    id: str
    name: str
    email: str
    created_at: Optional[dt.datetime] = None


class AuthResponse(CamelModel):
    """Token plus the user it was issued for"""
    message: str
    token: str
    user: UserResponse


# ============== Application Models ==============

class ApplicationPayload(CamelModel):
    """Create/update application request"""
    job_title: str = Field(..., max_length=100)
    company: str = Field(..., max_length=100)
    location: Optional[str] = Field(None, max_length=100)
    date: dt.date
    status: ApplicationStatus = ApplicationStatus.APPLIED
    notes: Optional[str] = Field(None, max_length=500)

    @field_validator("job_title")
    @classmethod
    def validate_job_title(cls, v: str) -> str:
        if not v:
            raise ValueError("Job title is required")
        return v

    @field_validator("company")
    @classmethod
    def validate_company(cls, v: str) -> str:
        if not v:
            raise ValueError("Company name is required")
        return v

    @field_validator("location", "notes")
    @classmethod
    def blank_to_none(cls, v: Optional[str]) -> Optional[str]:
        return v or None

    def to_record(self) -> dict:
        data = self.model_dump()
        data["date"] = self.date.isoformat()
        data["status"] = self.status.value
        return data

    class Config:
        json_schema_extra = {
            "example": {
                "jobTitle": "Backend Engineer",
                "company": "TechCorp",
                "location": "Berlin",
                "date": "2026-10-12",
                "status": "applied",
                "notes": "Referral from Sam"
            }
        }


class ApplicationResponse(CamelModel):
    """Stored application record"""
    id: str
    user: str
    job_title: str
    company: str
    location: Optional[str] = None
    date: dt.date
    status: ApplicationStatus
    notes: Optional[str] = None
    created_at: dt.datetime
    updated_at: dt.datetime
