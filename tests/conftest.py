"""
Shared fixtures for the reminder tests.

Time is injected explicitly: every test works from a fixed, offset-aware
"now" rather than the wall clock.
"""

from datetime import datetime, timedelta, timezone

import pytest

from reminder.memory import ReminderStore

# A non-UTC offset so round trips prove the offset survives
TEST_TZ = timezone(timedelta(hours=2))


@pytest.fixture
def now():
    return datetime(2026, 3, 14, 9, 30, 0, 123456, tzinfo=TEST_TZ)


@pytest.fixture
def storage_path(tmp_path):
    return tmp_path / "data" / "reminder" / "reminders.json"


@pytest.fixture
def store(storage_path):
    return ReminderStore(storage_path=storage_path)


@pytest.fixture
def data_file(tmp_path, monkeypatch):
    """Point the default storage location at a temporary file"""
    path = tmp_path / "env" / "reminders.json"
    monkeypatch.setenv("REMINDER_DATA_FILE", str(path))
    return path
