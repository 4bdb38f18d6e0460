"""Job application tracker client: working set, statistics and filtering"""

from .models import (
    ApplicationStatus,
    ApplicationRecord,
    ApplicationInput,
    UserProfile,
    WeeklyBucket,
    MonthlyBucket,
    MonthOption,
    STATUS_LABELS,
    status_label,
)
from .exceptions import (
    TrackerClientError,
    AuthError,
    LoadError,
    MutationError,
    TrackerValidationError,
)
from .stats import (
    StatsContext,
    DashboardSummary,
    StatisticsSummary,
    ChartData,
    iso_week,
    week_number,
    weekly_statistics,
    monthly_statistics,
    dashboard_summary,
    statistics_summary,
    chart_data,
)
from .filters import filter_applications, available_months, filter_by_month
from .session import TrackerSession
from .repository import ApplicationRepository

__all__ = [
    # Models
    "ApplicationStatus",
    "ApplicationRecord",
    "ApplicationInput",
    "UserProfile",
    "WeeklyBucket",
    "MonthlyBucket",
    "MonthOption",
    "STATUS_LABELS",
    "status_label",
    # Errors
    "TrackerClientError",
    "AuthError",
    "LoadError",
    "MutationError",
    "TrackerValidationError",
    # Statistics
    "StatsContext",
    "DashboardSummary",
    "StatisticsSummary",
    "ChartData",
    "iso_week",
    "week_number",
    "weekly_statistics",
    "monthly_statistics",
    "dashboard_summary",
    "statistics_summary",
    "chart_data",
    # Filtering
    "filter_applications",
    "available_months",
    "filter_by_month",
    # Repository
    "TrackerSession",
    "ApplicationRepository",
]
