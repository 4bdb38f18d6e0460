"""Domain models shared by the tracker client and the API"""

from dataclasses import dataclass, field
import datetime as dt
from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, Field, field_validator
from pydantic.alias_generators import to_camel


class ApplicationStatus(str, Enum):
    """Application tracking status"""
    APPLIED = "applied"
    INTERVIEW = "interview"
    TEST = "test"
    OFFER = "offer"
    REJECTED = "rejected"
    CANCELED = "canceled"


STATUS_LABELS: Dict[ApplicationStatus, str] = {
    ApplicationStatus.APPLIED: "Applied",
    ApplicationStatus.INTERVIEW: "Interview",
    ApplicationStatus.TEST: "Test",
    ApplicationStatus.OFFER: "Offer",
    ApplicationStatus.REJECTED: "Rejected",
    ApplicationStatus.CANCELED: "Canceled",
}


def status_label(status: ApplicationStatus) -> str:
    """Human-readable label for a status.

    Accepts raw strings too; anything outside the enum raises ValueError.
    """
    return STATUS_LABELS[ApplicationStatus(status)]


# ============== Wire Models ==============

class ApplicationRecord(BaseModel):
    """Application record as returned by the API"""
    id: str
    user: Optional[str] = None
    job_title: str
    company: str
    location: Optional[str] = None
    date: Optional[dt.date] = None
    status: ApplicationStatus = ApplicationStatus.APPLIED
    notes: Optional[str] = None
    created_at: Optional[dt.datetime] = None
    updated_at: Optional[dt.datetime] = None

    class Config:
        alias_generator = to_camel
        populate_by_name = True

    @field_validator("date", mode="before")
    @classmethod
    def tolerate_bad_date(cls, v):
        """Unparseable dates become None so aggregation can skip them"""
        if isinstance(v, dt.datetime):
            return v.date()
        if v is None or isinstance(v, dt.date):
            return v
        text = str(v).strip()
        try:
            # Full ISO timestamps ("2024-03-05T00:00:00.000Z") keep their date part
            return dt.date.fromisoformat(text[:10])
        except ValueError:
            return None

    @property
    def status_label(self) -> str:
        return status_label(self.status)


class ApplicationInput(BaseModel):
    """Fields a user submits when creating or editing an application"""
    job_title: str = ""
    company: str = ""
    location: Optional[str] = None
    date: str = ""
    status: ApplicationStatus = ApplicationStatus.APPLIED
    notes: Optional[str] = None

    class Config:
        alias_generator = to_camel
        populate_by_name = True

    def missing_fields(self) -> List[str]:
        """Required fields that are empty after trimming"""
        missing = []
        if not self.job_title.strip():
            missing.append("jobTitle")
        if not self.company.strip():
            missing.append("company")
        if not self.date.strip():
            missing.append("date")
        return missing

    def to_payload(self) -> dict:
        return self.model_dump(by_alias=True, mode="json")


class UserProfile(BaseModel):
    """Authenticated user, never carries the password"""
    id: str
    name: str
    email: str
    created_at: Optional[dt.datetime] = None

    class Config:
        alias_generator = to_camel
        populate_by_name = True


# ============== Aggregation Buckets ==============

@dataclass
class WeeklyBucket:
    """Applications sharing an ISO (year, week) key"""
    week: int
    year: int
    count: int = 0
    applications: List[ApplicationRecord] = field(default_factory=list)

    @property
    def key(self) -> str:
        return f"{self.year}-W{self.week:02d}"

    @property
    def label(self) -> str:
        return f"Week {self.week}, {self.year}"

    @property
    def chart_label(self) -> str:
        return f"W{self.week} {self.year}"


@dataclass
class MonthlyBucket:
    """Applications sharing a calendar (year, month) key"""
    month: int
    year: int
    month_name: str
    count: int = 0
    applications: List[ApplicationRecord] = field(default_factory=list)

    @property
    def key(self) -> str:
        return f"{self.year}-{self.month:02d}"


@dataclass
class MonthOption:
    """A month present in the working set, for month filtering"""
    key: str
    name: str
    year: int
    month: int
