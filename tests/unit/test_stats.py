"""Unit Tests for the Statistics Engine"""

import pytest
from datetime import date, datetime, timedelta

from jobtracker.tracker.models import ApplicationRecord, ApplicationStatus
from jobtracker.tracker.stats import (
    StatsContext,
    chart_data,
    current_week_bounds,
    dashboard_summary,
    iso_week,
    is_in_current_week,
    monthly_statistics,
    most_active_month,
    recent_applications,
    sorted_weeks,
    statistics_summary,
    status_distribution,
    status_rate,
    this_month_count,
    this_week_count,
    week_number,
    weekly_average,
    weekly_statistics,
    weekly_timeline,
)


def make_app(day, status=ApplicationStatus.APPLIED, idx=0, **kwargs) -> ApplicationRecord:
    return ApplicationRecord(
        id=f"app_{idx:012x}",
        job_title=kwargs.pop("job_title", "Engineer"),
        company=kwargs.pop("company", "TechCorp"),
        date=day,
        status=status,
        **kwargs,
    )


class TestIsoWeek:
    """Test week numbering"""

    def test_matches_isocalendar_across_years(self):
        """Every day from 2015 through 2030 agrees with the ISO calendar"""
        day = date(2015, 1, 1)
        end = date(2030, 12, 31)
        while day <= end:
            expected = day.isocalendar()
            assert iso_week(day) == (expected[0], expected[1]), day
            day += timedelta(days=1)

    def test_late_december_belongs_to_next_year(self):
        assert iso_week(date(2024, 12, 30)) == (2025, 1)

    def test_early_january_belongs_to_previous_year(self):
        assert iso_week(date(2021, 1, 1)) == (2020, 53)

    def test_accepts_datetime(self):
        assert iso_week(datetime(2024, 3, 5, 15, 30)) == (2024, 10)

    def test_week_number_range(self):
        for offset in range(0, 800, 3):
            assert 1 <= week_number(date(2019, 1, 1) + timedelta(days=offset)) <= 53


class TestCurrentWeek:
    """Test Monday-first current week membership"""

    def test_bounds_for_midweek_day(self):
        start, end = current_week_bounds(date(2024, 3, 6))  # Wednesday
        assert start == datetime(2024, 3, 4, 0, 0, 0)
        assert end == datetime(2024, 3, 10, 23, 59, 59, 999000)

    def test_sunday_belongs_to_week_that_started_monday(self):
        start, end = current_week_bounds(date(2024, 3, 10))  # Sunday
        assert start.date() == date(2024, 3, 4)
        assert end.date() == date(2024, 3, 10)

    def test_membership_edges(self):
        ctx = StatsContext(today=date(2024, 3, 6))
        assert is_in_current_week(make_app(date(2024, 3, 4)), ctx)
        assert is_in_current_week(make_app(date(2024, 3, 10)), ctx)
        assert not is_in_current_week(make_app(date(2024, 3, 3)), ctx)
        assert not is_in_current_week(make_app(date(2024, 3, 11)), ctx)

    def test_undated_record_is_not_in_week(self):
        ctx = StatsContext(today=date(2024, 3, 6))
        assert not is_in_current_week(make_app(None), ctx)

    def test_this_week_count(self):
        ctx = StatsContext(today=date(2024, 3, 6))
        apps = [make_app(date(2024, 3, 5)), make_app(date(2024, 3, 9)), make_app(date(2024, 2, 28))]
        assert this_week_count(apps, ctx) == 2


class TestBucketing:
    """Test weekly and monthly aggregation"""

    def test_counts_sum_to_dated_total(self):
        """One application per day for a full year: nothing lost, nothing doubled"""
        start = date(2024, 1, 1)
        apps = [make_app(start + timedelta(days=i), idx=i) for i in range(366)]
        apps.append(make_app(None, idx=999))

        weekly = weekly_statistics(apps)
        monthly = monthly_statistics(apps)

        assert sum(b.count for b in weekly.values()) == 366
        assert sum(b.count for b in monthly.values()) == 366
        assert len(monthly) == 12
        for bucket in weekly.values():
            assert bucket.count == len(bucket.applications)

    def test_year_boundary_week(self):
        apps = [make_app(date(2024, 12, 30)), make_app(date(2025, 1, 2))]
        weekly = weekly_statistics(apps)
        assert list(weekly) == [(2025, 1)]
        assert weekly[(2025, 1)].count == 2
        assert weekly[(2025, 1)].label == "Week 1, 2025"

    def test_month_names(self):
        monthly = monthly_statistics([make_app(date(2024, 3, 5))])
        assert monthly[(2024, 3)].month_name == "March 2024"
        assert monthly[(2024, 3)].key == "2024-03"

    def test_sorted_weeks_descending(self):
        apps = [make_app(date(2024, 1, 3)), make_app(date(2024, 2, 14)), make_app(date(2023, 12, 20))]
        weeks = sorted_weeks(weekly_statistics(apps))
        assert [(b.year, b.week) for b in weeks] == [(2024, 7), (2024, 1), (2023, 51)]

    def test_timeline_keeps_last_eight_weeks_oldest_first(self):
        monday = date(2024, 1, 1)
        apps = [make_app(monday + timedelta(weeks=i), idx=i) for i in range(12)]
        timeline = weekly_timeline(apps)

        assert len(timeline) == 8
        assert [b.week for b in timeline] == list(range(5, 13))
        assert timeline[0].chart_label == "W5 2024"


class TestSummaryMetrics:
    """Test dashboard and statistics metrics"""

    def test_weekly_average(self):
        start = date(2024, 1, 1)
        apps = (
            [make_app(start) for _ in range(2)]
            + [make_app(start + timedelta(weeks=1)) for _ in range(3)]
            + [make_app(start + timedelta(weeks=2)) for _ in range(4)]
        )
        assert weekly_average(weekly_statistics(apps)) == "3.0"

    def test_weekly_average_empty(self):
        assert weekly_average({}) == "0"

    def test_most_active_month_tie_goes_to_first_seen(self):
        apps = [
            make_app(date(2024, 4, 2)),
            make_app(date(2024, 3, 5)),
            make_app(date(2024, 3, 6)),
            make_app(date(2024, 4, 3)),
        ]
        assert most_active_month(monthly_statistics(apps)) == "April 2024"

    def test_most_active_month_empty(self):
        assert most_active_month({}) == "-"

    def test_rates_stay_in_range(self):
        statuses = list(ApplicationStatus)
        apps = [make_app(date(2024, 3, 1), statuses[i % len(statuses)], idx=i) for i in range(17)]
        for status in ApplicationStatus:
            assert 0.0 <= status_rate(apps, status) <= 100.0

    def test_rate_of_empty_set_is_zero(self):
        assert status_rate([], ApplicationStatus.OFFER) == 0.0

    def test_this_month_count(self):
        ctx = StatsContext(today=date(2024, 3, 20))
        apps = [make_app(date(2024, 3, 1)), make_app(date(2023, 3, 1)), make_app(date(2024, 2, 29))]
        assert this_month_count(apps, ctx) == 1

    def test_status_distribution_includes_every_status(self):
        dist = status_distribution([make_app(date(2024, 3, 1), ApplicationStatus.OFFER)])
        assert list(dist) == list(ApplicationStatus)
        assert dist[ApplicationStatus.OFFER] == 1
        assert dist[ApplicationStatus.CANCELED] == 0

    def test_recent_applications_newest_first_undated_last(self):
        apps = [
            make_app(None, idx=1),
            make_app(date(2024, 1, 1), idx=2),
            make_app(date(2024, 3, 1), idx=3),
        ]
        recent = recent_applications(apps, limit=5)
        assert [a.id for a in recent] == [apps[2].id, apps[1].id, apps[0].id]


class TestViews:
    """Test the composed dashboard, statistics and chart views"""

    @pytest.fixture
    def apps(self):
        return [
            make_app(date(2024, 3, 4), ApplicationStatus.APPLIED, idx=1),
            make_app(date(2024, 3, 5), ApplicationStatus.INTERVIEW, idx=2),
            make_app(date(2024, 2, 12), ApplicationStatus.OFFER, idx=3),
            make_app(date(2024, 1, 8), ApplicationStatus.REJECTED, idx=4),
        ]

    @pytest.fixture
    def ctx(self):
        return StatsContext(today=date(2024, 3, 6))

    def test_dashboard_summary(self, apps, ctx):
        summary = dashboard_summary(apps, ctx)
        assert summary.total == 4
        assert summary.this_week == 2
        assert summary.interviews == 1
        assert summary.offers == 1
        assert summary.success_rate == "25.0%"
        assert summary.recent[0].date == date(2024, 3, 5)

    def test_statistics_summary(self, apps, ctx):
        summary = statistics_summary(apps, ctx)
        assert summary.this_month == 2
        assert summary.interview_rate == "25.0%"
        assert summary.offer_rate == "25.0%"
        assert summary.most_active_month == "March 2024"
        assert summary.months[0].month_name == "March 2024"
        assert summary.weeks[0].week == 10

    def test_chart_data(self, apps, ctx):
        data = chart_data(apps, ctx)
        assert data.status_labels == [s.value for s in ApplicationStatus]
        assert sum(data.status_counts) == 4
        assert data.timeline_labels == ["W2 2024", "W7 2024", "W10 2024"]
        assert data.timeline_counts == [1, 1, 2]

    def test_empty_working_set(self, ctx):
        summary = dashboard_summary([], ctx)
        assert summary.total == 0
        assert summary.success_rate == "0.0%"
        assert summary.recent == []
