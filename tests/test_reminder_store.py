"""
Tests for reminder persistence and export

Covers the load/save round trip, corruption recovery, fatal I/O
failures, data path resolution and content export.
"""

import json
import logging
from datetime import timedelta
from pathlib import Path

import pytest

from reminder.memory import (
    ReminderExportError,
    ReminderNotFoundError,
    ReminderStore,
    ReminderStoreError,
    get_data_file_path,
)
from reminder.memory import reminder_store


# ============================================================================
# Load / save
# ============================================================================

def test_load_missing_file_returns_empty_store(storage_path):
    store = ReminderStore.load(storage_path)

    assert store.reminders == {}
    assert store.next_id == 0
    assert not storage_path.exists()


def test_round_trip_is_lossless(store, storage_path, now):
    store.add_reminder("Learn Rust", now=now)
    store.add_reminder("Ünïcödé ✓ content\nwith a second line", now=now - timedelta(days=3))
    removed = store.add_reminder("gone", now=now)
    store.remove_reminder(removed)
    store.review_reminder(0, now=now + timedelta(days=1))

    store.save()
    loaded = ReminderStore.load(storage_path)

    assert loaded.next_id == store.next_id == 3
    assert loaded.to_dict() == store.to_dict()
    for reminder_id, reminder in store.reminders.items():
        restored = loaded.reminders[reminder_id]
        assert restored == reminder
        assert restored.created_at.utcoffset() == timedelta(hours=2)
        assert restored.next_review.utcoffset() == timedelta(hours=2)


def test_saved_file_layout(store, storage_path, now):
    store.add_reminder("Learn Rust", now=now)
    store.save()

    data = json.loads(storage_path.read_text(encoding="utf-8"))

    assert data["next_id"] == 1
    assert data["reminders"]["0"] == {
        "id": 0,
        "content": "Learn Rust",
        "created_at": "2026-03-14T09:30:00.123456+02:00",
        "next_review": "2026-03-15T09:30:00.123456+02:00",
        "review_count": 0,
        "completed": False,
    }


def test_save_creates_parent_directories(store, storage_path):
    assert not storage_path.parent.exists()

    store.save()

    assert storage_path.exists()
    assert not storage_path.with_suffix(".tmp").exists()


def test_save_overwrites_previous_state(store, storage_path, now):
    store.add_reminder("first", now=now)
    store.save()
    store.remove_reminder(0)
    store.save()

    loaded = ReminderStore.load(storage_path)

    assert loaded.reminders == {}
    assert loaded.next_id == 1


def test_load_unparseable_file_recovers_with_warning(storage_path, caplog):
    storage_path.parent.mkdir(parents=True)
    storage_path.write_text("{ this is not json", encoding="utf-8")

    with caplog.at_level(logging.WARNING):
        store = ReminderStore.load(storage_path)

    assert store.reminders == {}
    assert store.next_id == 0
    assert "Could not parse reminder file" in caplog.text
    # Original content is kept aside before anything overwrites it
    backup = storage_path.with_suffix(".json.bak")
    assert backup.read_text(encoding="utf-8") == "{ this is not json"


@pytest.mark.parametrize("payload", [
    "[]",
    '{"next_id": 3}',
    '{"reminders": {}, "next_id": "three"}',
    '{"reminders": {"0": {"id": 0, "content": "x"}}, "next_id": 1}',
    '{"reminders": {"0": {"id": 0, "content": "x", "created_at": "yesterday",'
    ' "next_review": "today", "review_count": 0, "completed": false}}, "next_id": 1}',
    "[" * 200000,
])
def test_load_schema_mismatch_recovers(storage_path, payload, caplog):
    storage_path.parent.mkdir(parents=True)
    storage_path.write_text(payload, encoding="utf-8")

    with caplog.at_level(logging.WARNING):
        store = ReminderStore.load(storage_path)

    assert store.reminders == {}
    assert "Could not parse reminder file" in caplog.text


def test_load_out_of_range_timestamp_recovers(store, storage_path, monkeypatch, now):
    store.add_reminder("far future", now=now)
    store.save()

    def out_of_range(cls, data):
        raise OverflowError("date value out of range")

    monkeypatch.setattr(reminder_store.Reminder, "from_dict", classmethod(out_of_range))

    loaded = ReminderStore.load(storage_path)

    assert loaded.reminders == {}
    assert loaded.next_id == 0


def test_load_undecodable_bytes_recovers(storage_path):
    storage_path.parent.mkdir(parents=True)
    storage_path.write_bytes(b"\xff\xfe\x00garbage")

    store = ReminderStore.load(storage_path)

    assert store.reminders == {}


def test_load_unreadable_file_is_fatal(tmp_path):
    # A directory exists at the path but cannot be read as a file
    storage_path = tmp_path / "reminders.json"
    storage_path.mkdir()

    with pytest.raises(ReminderStoreError):
        ReminderStore.load(storage_path)


def test_save_failure_is_fatal(tmp_path, now):
    blocker = tmp_path / "not-a-directory"
    blocker.write_text("", encoding="utf-8")
    store = ReminderStore(storage_path=blocker / "reminders.json")
    store.add_reminder("x", now=now)

    with pytest.raises(ReminderStoreError) as exc_info:
        store.save()

    assert isinstance(exc_info.value.__cause__, OSError)


def test_save_failure_removes_partial_temp_file(store, storage_path, monkeypatch, now):
    store.add_reminder("x", now=now)

    def disk_full(data, f, **kwargs):
        f.write("{\"remind")
        raise OSError(28, "No space left on device")

    monkeypatch.setattr(reminder_store.json, "dump", disk_full)

    with pytest.raises(ReminderStoreError):
        store.save()

    assert not storage_path.with_suffix(".tmp").exists()
    assert not storage_path.exists()


def test_load_advances_stale_next_id(storage_path, now, caplog):
    store = ReminderStore(storage_path=storage_path)
    store.add_reminder("a", now=now)
    store.add_reminder("b", now=now)
    data = store.to_dict()
    data["next_id"] = 0
    storage_path.parent.mkdir(parents=True)
    storage_path.write_text(json.dumps(data), encoding="utf-8")

    with caplog.at_level(logging.WARNING):
        loaded = ReminderStore.load(storage_path)

    assert loaded.next_id == 2
    assert loaded.add_reminder("c", now=now) == 2


def test_load_accepts_naive_timestamps_as_local_time(storage_path):
    storage_path.parent.mkdir(parents=True)
    storage_path.write_text(json.dumps({
        "reminders": {"4": {
            "id": 4,
            "content": "hand edited",
            "created_at": "2026-03-14T09:30:00",
            "next_review": "2026-03-15T09:30:00",
            "review_count": 1,
            "completed": False,
        }},
        "next_id": 5,
    }), encoding="utf-8")

    store = ReminderStore.load(storage_path)

    reminder = store.get_reminder(4)
    assert reminder.created_at.tzinfo is not None
    assert reminder.next_review - reminder.created_at == timedelta(days=1)


# ============================================================================
# Data path
# ============================================================================

def test_data_path_uses_user_data_dir(tmp_path, monkeypatch):
    monkeypatch.delenv("REMINDER_DATA_FILE", raising=False)
    monkeypatch.setattr(reminder_store, "user_data_dir", lambda: str(tmp_path / "share"))

    assert get_data_file_path() == tmp_path / "share" / "reminder" / "reminders.json"


@pytest.mark.parametrize("resolved", ["", None])
def test_data_path_falls_back_to_current_directory(monkeypatch, resolved):
    monkeypatch.delenv("REMINDER_DATA_FILE", raising=False)
    monkeypatch.setattr(reminder_store, "user_data_dir", lambda: resolved)

    assert get_data_file_path() == Path(".") / "reminder" / "reminders.json"


def test_data_path_environment_override(data_file):
    assert get_data_file_path() == data_file


def test_default_store_resolves_path_on_each_call(tmp_path, monkeypatch, now):
    monkeypatch.setenv("REMINDER_DATA_FILE", str(tmp_path / "one.json"))
    store = ReminderStore.load()
    store.add_reminder("x", now=now)

    monkeypatch.setenv("REMINDER_DATA_FILE", str(tmp_path / "two.json"))
    store.save()

    assert not (tmp_path / "one.json").exists()
    assert (tmp_path / "two.json").exists()


# ============================================================================
# Export
# ============================================================================

def test_export_writes_exact_content(store, tmp_path, now):
    content = "line one\r\nline two\n  trailing spaces  "
    reminder_id = store.add_reminder(content, now=now)
    destination = tmp_path / "export.txt"
    destination.write_text("old content that should vanish", encoding="utf-8")

    result = store.export_reminder(reminder_id, destination)

    assert result == destination
    assert destination.read_bytes() == content.encode("utf-8")


def test_export_is_not_trimmed_and_does_not_mutate(store, tmp_path, now):
    content = "x" * 500
    reminder_id = store.add_reminder(content, now=now)
    before = store.to_dict()

    store.export_reminder(reminder_id, str(tmp_path / "long.txt"))

    assert (tmp_path / "long.txt").read_text(encoding="utf-8") == content
    assert store.to_dict() == before


def test_export_unknown_id_leaves_filesystem_untouched(store, tmp_path):
    destination = tmp_path / "never.txt"

    with pytest.raises(ReminderNotFoundError):
        store.export_reminder(3, destination)

    assert not destination.exists()


def test_export_io_failure_carries_cause(store, tmp_path, now):
    reminder_id = store.add_reminder("content", now=now)

    with pytest.raises(ReminderExportError) as exc_info:
        store.export_reminder(reminder_id, tmp_path / "missing" / "out.txt")

    assert isinstance(exc_info.value.__cause__, OSError)
