"""Filter and search over the working set.

All functions return new lists in the original relative order and never
touch the list they are given.
"""

from typing import Dict, Iterable, List, Optional, Union

from .models import ApplicationRecord, ApplicationStatus, MonthOption, status_label
from .stats import month_name

ALL = "all"


def filter_by_status(
    apps: Iterable[ApplicationRecord],
    status: Optional[Union[ApplicationStatus, str]] = ALL,
) -> List[ApplicationRecord]:
    """Keep records whose status equals ``status``; "all" keeps everything.

    A value outside the status enum matches no record.
    """
    if status is None or status == ALL:
        return list(apps)
    try:
        wanted = ApplicationStatus(status)
    except ValueError:
        return []
    return [app for app in apps if app.status == wanted]


def _searchable_fields(app: ApplicationRecord) -> List[str]:
    fields = [app.job_title, app.company]
    if app.location:
        fields.append(app.location)
    fields.append(status_label(app.status))
    return fields


def matches_text(app: ApplicationRecord, query: str) -> bool:
    needle = query.strip().lower()
    if not needle:
        return True
    return any(needle in value.lower() for value in _searchable_fields(app))


def filter_by_text(apps: Iterable[ApplicationRecord], query: Optional[str] = "") -> List[ApplicationRecord]:
    """Case-insensitive substring search over title, company, location and status label"""
    if not query or not query.strip():
        return list(apps)
    return [app for app in apps if matches_text(app, query)]


def filter_applications(
    apps: Iterable[ApplicationRecord],
    status: Optional[Union[ApplicationStatus, str]] = ALL,
    query: Optional[str] = "",
) -> List[ApplicationRecord]:
    """Status filter first, then text search (both must match)"""
    return filter_by_text(filter_by_status(apps, status), query)


# ============== Month Filter ==============

def available_months(apps: Iterable[ApplicationRecord]) -> List[MonthOption]:
    """Distinct months present in the working set, newest first"""
    seen: Dict[str, MonthOption] = {}
    for app in apps:
        if app.date is None:
            continue
        key = f"{app.date.year}-{app.date.month:02d}"
        if key not in seen:
            seen[key] = MonthOption(
                key=key,
                name=month_name(app.date.year, app.date.month),
                year=app.date.year,
                month=app.date.month,
            )
    return sorted(seen.values(), key=lambda m: (m.year, m.month), reverse=True)


def filter_by_month(apps: Iterable[ApplicationRecord], month_key: str = ALL) -> List[ApplicationRecord]:
    """Keep records dated in ``month_key`` ("YYYY-MM"); "all" keeps everything"""
    if month_key == ALL:
        return list(apps)
    try:
        year, month = (int(part) for part in month_key.split("-"))
    except ValueError:
        raise ValueError(f"Invalid month key: {month_key!r}, expected YYYY-MM") from None
    return [
        app for app in apps
        if app.date is not None and app.date.year == year and app.date.month == month
    ]
