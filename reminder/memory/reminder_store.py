"""
Reminder Store - Persistent JSON Storage

Holds every reminder plus the id counter and implements the reminder
lifecycle (add, review, remove, export) on top of it.

Storage location: <user data dir>/reminder/reminders.json

Design:
- Loaded once per invocation, saved at most once
- Lifecycle operations mutate memory only; the caller decides when to save
- Unparseable file -> warning and an empty store
- Any other read or write failure -> ReminderStoreError
- No concurrent write handling (one process at a time)
"""

import json
import logging
import os
import shutil
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional, Union

from platformdirs import user_data_dir

from .reminder_models import Reminder, create_reminder, local_now, next_interval

logger = logging.getLogger(__name__)


class ReminderError(Exception):
    """Base exception for reminder errors"""
    pass


class ReminderNotFoundError(ReminderError):
    """Raised when no reminder exists with the requested ID"""

    def __init__(self, reminder_id: int):
        self.reminder_id = reminder_id
        super().__init__(f"Reminder with ID {reminder_id} not found")


class ReminderAlreadyCompletedError(ReminderError):
    """Raised when reviewing a reminder whose schedule is exhausted"""

    def __init__(self, reminder_id: int):
        self.reminder_id = reminder_id
        super().__init__(f"Reminder {reminder_id} is already completed")


class ReminderStoreError(ReminderError):
    """Raised when the storage file cannot be read or written"""
    pass


class ReminderExportError(ReminderError):
    """Raised when reminder content cannot be written to the export path"""
    pass


# Environment override for the storage file location
DATA_FILE_ENV = "REMINDER_DATA_FILE"


def get_data_file_path() -> Path:
    """
    Resolve the storage file path.

    REMINDER_DATA_FILE wins if set. Otherwise the platform user data
    directory is used, falling back to the current directory when none
    can be resolved.
    """
    override = os.environ.get(DATA_FILE_ENV)
    if override:
        return Path(override).expanduser()

    base = user_data_dir()
    base_dir = Path(base) if base else Path(".")
    return base_dir / ReminderStore.APP_DIR_NAME / ReminderStore.DEFAULT_STORAGE_FILE


class ReminderStore:
    """
    File-backed reminder collection.

    Philosophy:
    - User can inspect/edit the JSON file directly
    - Corruption is handled gracefully, I/O failures are not
    - IDs are handed out from next_id and never reused
    """

    APP_DIR_NAME = "reminder"
    DEFAULT_STORAGE_FILE = "reminders.json"

    def __init__(
        self,
        storage_path: Optional[Path] = None,
        reminders: Optional[Dict[int, Reminder]] = None,
        next_id: int = 0
    ):
        """
        Initialize an in-memory store. Use ReminderStore.load() to read from disk.

        Args:
            storage_path: Custom storage file path (default: resolved on every load/save)
            reminders: Initial reminders keyed by ID
            next_id: Next ID to hand out
        """
        self._storage_path = Path(storage_path) if storage_path else None
        self.reminders: Dict[int, Reminder] = dict(reminders or {})
        self.next_id = next_id

    @property
    def storage_path(self) -> Path:
        if self._storage_path is not None:
            return self._storage_path
        return get_data_file_path()

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    @classmethod
    def load(cls, storage_path: Optional[Path] = None) -> 'ReminderStore':
        """
        Load the store from disk.

        Args:
            storage_path: Custom storage file path

        Returns:
            Loaded store, or an empty one if the file is missing or unparseable

        Raises:
            ReminderStoreError: If an existing file cannot be read
        """
        store = cls(storage_path=storage_path)
        path = store.storage_path

        if not path.exists():
            logger.info(f"No reminder file at {path}, starting empty")
            return store

        try:
            with open(path, 'r', encoding='utf-8') as f:
                raw = f.read()
        except UnicodeDecodeError as e:
            store._recover_from_corruption(path, e)
            return store
        except OSError as e:
            logger.error(f"Failed to read reminder file {path}: {e}", exc_info=True)
            raise ReminderStoreError(f"Failed to read reminder file {path}: {e}") from e

        try:
            store._restore(json.loads(raw))
        except (ValueError, KeyError, TypeError, AttributeError, RecursionError, OverflowError) as e:
            store._recover_from_corruption(path, e)
            return store

        logger.info(f"Loaded {len(store.reminders)} reminders from {path}")
        return store

    def _restore(self, data: dict):
        """Populate from the persisted dict, raising on any schema problem"""
        if not isinstance(data, dict):
            raise TypeError(f"expected a JSON object, got {type(data).__name__}")

        reminders: Dict[int, Reminder] = {}
        for key, reminder_dict in data['reminders'].items():
            reminder = Reminder.from_dict(reminder_dict)
            if str(reminder.id) != str(key):
                raise ValueError(f"reminder key {key!r} does not match its id {reminder.id}")
            reminders[reminder.id] = reminder

        next_id = data['next_id']
        if isinstance(next_id, bool) or not isinstance(next_id, int) or next_id < 0:
            raise ValueError(f"next_id must be a non-negative integer, got {next_id!r}")

        if reminders and next_id <= max(reminders):
            logger.warning(f"next_id {next_id} would reuse a stored ID, advancing to {max(reminders) + 1}")
            next_id = max(reminders) + 1

        self.reminders = reminders
        self.next_id = next_id

    def _recover_from_corruption(self, path: Path, error: Exception):
        """
        Copy an unparseable file to reminders.json.bak and reset to empty.

        The backup is taken before any save can replace the original.
        """
        logger.warning(f"Could not parse reminder file ({error}). Starting fresh.")

        backup_path = path.with_suffix('.json.bak')
        try:
            shutil.copy2(path, backup_path)
            logger.warning(f"Backed up unparseable reminder file to: {backup_path}")
        except OSError as e:
            logger.error(f"Failed to back up reminder file: {e}")

        self.reminders = {}
        self.next_id = 0

    def to_dict(self) -> dict:
        """Convert to the persisted JSON structure"""
        return {
            'reminders': {
                str(reminder_id): reminder.to_dict()
                for reminder_id, reminder in sorted(self.reminders.items())
            },
            'next_id': self.next_id,
        }

    def save(self):
        """
        Save all reminders to storage.

        Raises:
            ReminderStoreError: If the directory or file cannot be written
        """
        path = self.storage_path
        # Write atomically (write to temp, then rename)
        temp_path = path.with_suffix('.tmp')

        try:
            path.parent.mkdir(parents=True, exist_ok=True)

            with open(temp_path, 'w', encoding='utf-8') as f:
                json.dump(self.to_dict(), f, indent=2, ensure_ascii=False)

            temp_path.replace(path)

            logger.debug(f"Saved {len(self.reminders)} reminders to {path}")

        except OSError as e:
            logger.error(f"Failed to save reminders: {e}", exc_info=True)
            if temp_path.exists():
                temp_path.unlink()
            raise ReminderStoreError(f"Cannot save reminders to {path}: {e}") from e

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def add_reminder(self, content: str, now: Optional[datetime] = None) -> int:
        """
        Add a new reminder, first review due one day from now.

        Args:
            content: Text to remember, accepted as-is
            now: Creation time (default: local now)

        Returns:
            The newly assigned ID
        """
        reminder_id = self.next_id
        self.next_id += 1

        self.reminders[reminder_id] = create_reminder(reminder_id, content, now=now)

        logger.info(f"Added reminder {reminder_id}")
        return reminder_id

    def get_reminder(self, reminder_id: int) -> Optional[Reminder]:
        """Get a specific reminder by ID, or None"""
        return self.reminders.get(reminder_id)

    def _require(self, reminder_id: int) -> Reminder:
        reminder = self.reminders.get(reminder_id)
        if reminder is None:
            logger.info(f"Reminder {reminder_id} not found")
            raise ReminderNotFoundError(reminder_id)
        return reminder

    def review_reminder(self, reminder_id: int, now: Optional[datetime] = None) -> Reminder:
        """
        Record a successful review and advance the schedule.

        The fourth review completes the reminder and leaves next_review
        where the third review put it.

        Args:
            reminder_id: ID of reminder to review
            now: Review time (default: local now)

        Returns:
            The updated reminder

        Raises:
            ReminderNotFoundError: If the ID does not exist
            ReminderAlreadyCompletedError: If the schedule is already exhausted
        """
        reminder = self._require(reminder_id)

        if reminder.completed:
            logger.info(f"Reminder {reminder_id} is already completed")
            raise ReminderAlreadyCompletedError(reminder_id)

        if now is None:
            now = local_now()

        reminder.review_count += 1
        interval = next_interval(reminder.review_count)

        if interval is None:
            reminder.completed = True
            logger.info(f"Reminder {reminder_id} completed after {reminder.review_count} reviews")
        else:
            reminder.next_review = now + interval
            logger.info(f"Reminder {reminder_id} reviewed, next review at {reminder.next_review.isoformat()}")

        return reminder

    def get_due_reminders(self, now: Optional[datetime] = None) -> List[Reminder]:
        """
        Get all reminders that are due now.

        Args:
            now: Current datetime (default: local now)

        Returns:
            Active reminders with next_review <= now, oldest first
        """
        if now is None:
            now = local_now()

        due = [r for r in self.reminders.values() if r.is_due(now)]
        due.sort(key=lambda r: (r.next_review, r.id))

        logger.info(f"Found {len(due)} due reminders")
        return due

    def get_all_reminders(self) -> List[Reminder]:
        """Every reminder, sorted ascending by next_review"""
        return sorted(self.reminders.values(), key=lambda r: (r.next_review, r.id))

    def remove_reminder(self, reminder_id: int) -> Reminder:
        """
        Delete a reminder, completed or not.

        Returns:
            The removed reminder

        Raises:
            ReminderNotFoundError: If the ID does not exist
        """
        self._require(reminder_id)
        removed = self.reminders.pop(reminder_id)

        logger.info(f"Removed reminder {reminder_id}")
        return removed

    def export_reminder(self, reminder_id: int, destination: Union[str, Path]) -> Path:
        """
        Write a reminder's full content, and nothing else, to a file.

        Args:
            reminder_id: ID of reminder to export
            destination: File to create or overwrite

        Returns:
            The destination path

        Raises:
            ReminderNotFoundError: If the ID does not exist
            ReminderExportError: If the file cannot be written
        """
        reminder = self._require(reminder_id)
        destination = Path(destination)

        try:
            with open(destination, 'w', encoding='utf-8', newline='') as f:
                f.write(reminder.content)
        except OSError as e:
            logger.error(f"Failed to export reminder {reminder_id}: {e}")
            raise ReminderExportError(f"Cannot export reminder {reminder_id} to {destination}: {e}") from e

        logger.info(f"Exported reminder {reminder_id} to {destination}")
        return destination

    def get_stats(self, now: Optional[datetime] = None) -> dict:
        """
        Get storage statistics.

        Returns:
            Dict with total, active, completed and due counts
        """
        if now is None:
            now = local_now()

        stats = {
            'total': len(self.reminders),
            'active': 0,
            'completed': 0,
            'due': 0
        }

        for reminder in self.reminders.values():
            if reminder.completed:
                stats['completed'] += 1
            else:
                stats['active'] += 1
                if reminder.is_due(now):
                    stats['due'] += 1

        return stats
