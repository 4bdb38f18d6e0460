"""Statistics engine for the dashboard and statistics views.

Every function here is pure: it takes the working set (a list of
``ApplicationRecord``) and, where "now" matters, a ``StatsContext``. Nothing
is cached; callers recompute after each working-set change.

Week numbering follows ISO-8601 through the Thursday rule: a date belongs to
the week of its Monday-first week's Thursday, and the bucket year is the
Thursday's year. So 2024-12-30 lands in week 1 of 2025 and 2021-01-01 in
week 53 of 2020.
"""

import math
from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta
from typing import Dict, Iterable, List, Optional, Tuple

from .models import (
    ApplicationRecord,
    ApplicationStatus,
    MonthlyBucket,
    WeeklyBucket,
)

CHART_WEEKS = 8
RECENT_LIMIT = 5

WeekKey = Tuple[int, int]
MonthKey = Tuple[int, int]


@dataclass
class StatsContext:
    """Explicit "now" and display limits for the engine"""
    today: date = field(default_factory=date.today)
    chart_weeks: int = CHART_WEEKS
    recent_limit: int = RECENT_LIMIT


@dataclass
class DashboardSummary:
    """Numbers shown on the dashboard cards"""
    total: int
    this_week: int
    interviews: int
    offers: int
    success_rate: str
    recent: List[ApplicationRecord] = field(default_factory=list)


@dataclass
class StatisticsSummary:
    """Everything the statistics page renders"""
    total: int
    this_month: int
    interview_rate: str
    offer_rate: str
    current_week: int
    most_active_month: str
    weekly_average: str
    weeks: List[WeeklyBucket] = field(default_factory=list)
    months: List[MonthlyBucket] = field(default_factory=list)


@dataclass
class ChartData:
    """Chart-ready series"""
    status_labels: List[str]
    status_counts: List[int]
    timeline_labels: List[str]
    timeline_counts: List[int]


# ============== Week Arithmetic ==============

def _as_date(value) -> date:
    if isinstance(value, datetime):
        return value.date()
    return value


def iso_week(value) -> WeekKey:
    """Return the (bucket year, week number) of a date using the Thursday rule"""
    d = _as_date(value)
    # Sunday is weekday 7, Monday weekday 1
    thursday = d + timedelta(days=4 - d.isoweekday())
    jan1 = date(thursday.year, 1, 1)
    week = math.ceil(((thursday - jan1).days + 1) / 7)
    return thursday.year, week


def week_number(value) -> int:
    """ISO week number of a date, always in [1, 53]"""
    return iso_week(value)[1]


def current_week_bounds(today: date) -> Tuple[datetime, datetime]:
    """Monday 00:00:00.000 through Sunday 23:59:59.999 of today's week"""
    monday = today - timedelta(days=today.weekday())
    start = datetime.combine(monday, time.min)
    end = datetime.combine(monday + timedelta(days=6), time(23, 59, 59, 999000))
    return start, end


def is_in_current_week(app: ApplicationRecord, ctx: StatsContext) -> bool:
    if app.date is None:
        return False
    start, end = current_week_bounds(ctx.today)
    moment = datetime.combine(app.date, time.min)
    return start <= moment <= end


def _dated(apps: Iterable[ApplicationRecord]) -> List[ApplicationRecord]:
    return [app for app in apps if app.date is not None]


# ============== Bucketing ==============

def weekly_statistics(apps: Iterable[ApplicationRecord]) -> Dict[WeekKey, WeeklyBucket]:
    """Group applications by ISO (year, week), in first-seen order"""
    buckets: Dict[WeekKey, WeeklyBucket] = {}
    for app in _dated(apps):
        year, week = iso_week(app.date)
        bucket = buckets.get((year, week))
        if bucket is None:
            bucket = buckets[(year, week)] = WeeklyBucket(week=week, year=year)
        bucket.count += 1
        bucket.applications.append(app)
    return buckets


def monthly_statistics(apps: Iterable[ApplicationRecord]) -> Dict[MonthKey, MonthlyBucket]:
    """Group applications by calendar (year, month), in first-seen order"""
    buckets: Dict[MonthKey, MonthlyBucket] = {}
    for app in _dated(apps):
        key = (app.date.year, app.date.month)
        bucket = buckets.get(key)
        if bucket is None:
            bucket = buckets[key] = MonthlyBucket(
                month=app.date.month,
                year=app.date.year,
                month_name=month_name(app.date.year, app.date.month),
            )
        bucket.count += 1
        bucket.applications.append(app)
    return buckets


def month_name(year: int, month: int) -> str:
    """"October 2026" style label"""
    return date(year, month, 1).strftime("%B %Y")


def sorted_weeks(
    buckets: Dict[WeekKey, WeeklyBucket],
    descending: bool = True,
) -> List[WeeklyBucket]:
    return sorted(buckets.values(), key=lambda b: (b.year, b.week), reverse=descending)


def sorted_months(
    buckets: Dict[MonthKey, MonthlyBucket],
    descending: bool = True,
) -> List[MonthlyBucket]:
    return sorted(buckets.values(), key=lambda b: (b.year, b.month), reverse=descending)


def weekly_timeline(apps: Iterable[ApplicationRecord], limit: int = CHART_WEEKS) -> List[WeeklyBucket]:
    """Most recent ``limit`` weekly buckets, oldest first"""
    chronological = sorted_weeks(weekly_statistics(apps), descending=False)
    return chronological[-limit:] if limit > 0 else []


# ============== Summary Metrics ==============

def this_week_count(apps: Iterable[ApplicationRecord], ctx: StatsContext) -> int:
    return sum(1 for app in apps if is_in_current_week(app, ctx))


def this_month_count(apps: Iterable[ApplicationRecord], ctx: StatsContext) -> int:
    return sum(
        1 for app in _dated(apps)
        if app.date.month == ctx.today.month and app.date.year == ctx.today.year
    )


def most_active_month(monthly: Dict[MonthKey, MonthlyBucket]) -> str:
    """Name of the busiest month; the first-seen month wins a tie"""
    if not monthly:
        return "-"
    best: Optional[MonthlyBucket] = None
    for bucket in monthly.values():
        if best is None or bucket.count > best.count:
            best = bucket
    return best.month_name


def weekly_average(weekly: Dict[WeekKey, WeeklyBucket]) -> str:
    if not weekly:
        return "0"
    total = sum(bucket.count for bucket in weekly.values())
    return f"{total / len(weekly):.1f}"


def status_count(apps: Iterable[ApplicationRecord], status: ApplicationStatus) -> int:
    status = ApplicationStatus(status)
    return sum(1 for app in apps if app.status == status)


def status_rate(apps: List[ApplicationRecord], status: ApplicationStatus) -> float:
    """Share of the working set with ``status``, as a percentage in [0, 100]"""
    total = len(apps)
    if total == 0:
        return 0.0
    return status_count(apps, status) / total * 100


def format_rate(value: float) -> str:
    return f"{value:.1f}%"


def status_distribution(apps: Iterable[ApplicationRecord]) -> Dict[ApplicationStatus, int]:
    """Count per status, every status present, in enum order"""
    counts = {status: 0 for status in ApplicationStatus}
    for app in apps:
        counts[app.status] += 1
    return counts


def recent_applications(apps: Iterable[ApplicationRecord], limit: int = RECENT_LIMIT) -> List[ApplicationRecord]:
    """Latest applications by date; undated records sort last"""
    ordered = sorted(
        apps,
        key=lambda app: (app.date is not None, app.date or date.min),
        reverse=True,
    )
    return ordered[:limit]


# ============== Views ==============

def dashboard_summary(apps: List[ApplicationRecord], ctx: Optional[StatsContext] = None) -> DashboardSummary:
    ctx = ctx or StatsContext()
    return DashboardSummary(
        total=len(apps),
        this_week=this_week_count(apps, ctx),
        interviews=status_count(apps, ApplicationStatus.INTERVIEW),
        offers=status_count(apps, ApplicationStatus.OFFER),
        success_rate=format_rate(status_rate(apps, ApplicationStatus.OFFER)),
        recent=recent_applications(apps, ctx.recent_limit),
    )


def statistics_summary(apps: List[ApplicationRecord], ctx: Optional[StatsContext] = None) -> StatisticsSummary:
    ctx = ctx or StatsContext()
    weekly = weekly_statistics(apps)
    monthly = monthly_statistics(apps)
    return StatisticsSummary(
        total=len(apps),
        this_month=this_month_count(apps, ctx),
        interview_rate=format_rate(status_rate(apps, ApplicationStatus.INTERVIEW)),
        offer_rate=format_rate(status_rate(apps, ApplicationStatus.OFFER)),
        current_week=this_week_count(apps, ctx),
        most_active_month=most_active_month(monthly),
        weekly_average=weekly_average(weekly),
        weeks=sorted_weeks(weekly),
        months=sorted_months(monthly),
    )


def chart_data(apps: List[ApplicationRecord], ctx: Optional[StatsContext] = None) -> ChartData:
    ctx = ctx or StatsContext()
    distribution = status_distribution(apps)
    timeline = weekly_timeline(apps, ctx.chart_weeks)
    return ChartData(
        status_labels=[status.value for status in distribution],
        status_counts=list(distribution.values()),
        timeline_labels=[bucket.chart_label for bucket in timeline],
        timeline_counts=[bucket.count for bucket in timeline],
    )
