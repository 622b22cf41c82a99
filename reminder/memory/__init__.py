"""
Reminder Memory - Spaced Repetition Store

Reminder records, the fixed review schedule and JSON persistence.
"""

from .reminder_models import (
    Reminder,
    REVIEW_INTERVALS,
    FIRST_REVIEW_DELAY,
    create_reminder,
    local_now,
    next_interval,
)
from .reminder_store import (
    ReminderStore,
    ReminderError,
    ReminderNotFoundError,
    ReminderAlreadyCompletedError,
    ReminderStoreError,
    ReminderExportError,
    get_data_file_path,
)

__all__ = [
    # Models
    'Reminder',
    'REVIEW_INTERVALS',
    'FIRST_REVIEW_DELAY',
    'create_reminder',
    'local_now',
    'next_interval',
    # Store
    'ReminderStore',
    'ReminderError',
    'ReminderNotFoundError',
    'ReminderAlreadyCompletedError',
    'ReminderStoreError',
    'ReminderExportError',
    'get_data_file_path',
]
