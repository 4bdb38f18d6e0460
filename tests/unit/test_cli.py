"""Unit Tests for the client CLI output"""

import asyncio
from datetime import date
from types import SimpleNamespace

import pytest
from typer.testing import CliRunner

from jobtracker.tracker import ApplicationRecord, ApplicationStatus
from jobtracker.ui import cli

runner = CliRunner()


@pytest.fixture
def todays_apps():
    return [
        ApplicationRecord(
            id=f"app_00000000000{i}",
            job_title="Engineer",
            company=f"Company {i}",
            date=date.today(),
            status=ApplicationStatus.APPLIED,
        )
        for i in range(1, 4)
    ]


@pytest.fixture
def offline_run(monkeypatch):
    """Replace the networked runner with one that serves a fixed working set"""
    def _offline_run(apps):
        def fake_run(action, load=False):
            return asyncio.run(action(SimpleNamespace(applications=apps)))
        monkeypatch.setattr(cli, "run", fake_run)
    return _offline_run


def row_for(output: str, label: str) -> str:
    return next(line for line in output.splitlines() if label in line)


class TestStatsCommand:
    """Test the statistics overview"""

    def test_this_week_shows_a_count(self, offline_run, todays_apps):
        offline_run(todays_apps)
        result = runner.invoke(cli.app, ["stats"])

        assert result.exit_code == 0, result.output
        row = row_for(result.output, "This Week")
        assert "3" in row
        assert "Week 3" not in row
        assert "Current Week" not in result.output

    def test_empty_working_set(self, offline_run):
        offline_run([])
        result = runner.invoke(cli.app, ["stats"])

        assert result.exit_code == 0, result.output
        assert "0" in row_for(result.output, "This Week")
        assert "0" in row_for(result.output, "Total Applications")


class TestDashboardCommand:
    """Test the dashboard summary"""

    def test_counts_todays_applications(self, offline_run, todays_apps):
        offline_run(todays_apps)
        result = runner.invoke(cli.app, ["dashboard"])

        assert result.exit_code == 0, result.output
        assert "3" in row_for(result.output, "This Week")
