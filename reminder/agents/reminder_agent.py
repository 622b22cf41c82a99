"""
Reminder Agent - Command Service

Responsibilities:
- Run exactly one store operation per command
- Persist the store after a successful mutation
- Render the result as text for the terminal

Business errors (unknown ID, already completed, export failure) propagate
to the caller as ReminderError subclasses.
"""

import logging
from datetime import datetime
from pathlib import Path
from typing import Optional, Union

from reminder.memory.reminder_models import Reminder
from reminder.memory.reminder_store import ReminderStore
from reminder.tools.formatting import format_duration_until, trim_content

logger = logging.getLogger(__name__)

WIDE_RULE = "=" * 70
HEADER_RULE = "=" * 50
ITEM_RULE = "-" * 50
DUE_ITEM_RULE = "-" * 30


class ReminderAgent:
    """
    Thin service between the CLI and the store.

    Design principles:
    - One command, one store operation
    - Save only when something changed
    - Trimming affects printed text only
    """

    def __init__(self, store: ReminderStore, trim: Optional[int] = None):
        """
        Initialize reminder agent.

        Args:
            store: Loaded ReminderStore
            trim: Maximum characters of content to print (None = full content)
        """
        self.store = store
        self.trim = trim
        logger.debug(f"ReminderAgent initialized (trim={trim})")

    def _display(self, content: str) -> str:
        return trim_content(content, self.trim)

    def add(self, content: str, now: Optional[datetime] = None) -> str:
        """Add a reminder and save"""
        reminder_id = self.store.add_reminder(content, now=now)
        self.store.save()

        return "\n".join([
            f"Added reminder with ID {reminder_id}: \"{self._display(content)}\"",
            "Next review: 1 day from now",
        ])

    def check(self, now: Optional[datetime] = None) -> str:
        """List reminders due for review"""
        due_reminders = self.store.get_due_reminders(now=now)

        if not due_reminders:
            return "No reminders due for review!"

        lines = ["Reminders due for review:", HEADER_RULE]
        for reminder in due_reminders:
            lines.append(f"ID: {reminder.id}")
            lines.append(f"Content: {self._display(reminder.content)}")
            lines.append(f"Review count: {reminder.review_count}")
            lines.append(f"Due: {format_duration_until(reminder.next_review, now=now)}")
            lines.append(DUE_ITEM_RULE)

        lines.append("")
        lines.append("Use 'reminder review <ID>' to mark a reminder as reviewed")
        return "\n".join(lines)

    def list_reminders(self, now: Optional[datetime] = None) -> str:
        """List every reminder, soonest review first"""
        reminders = self.store.get_all_reminders()

        if not reminders:
            return "No reminders found!"

        lines = ["All reminders:", WIDE_RULE]
        for reminder in reminders:
            lines.extend(self.format_reminder_for_user(reminder, now=now))
            lines.append(ITEM_RULE)

        return "\n".join(lines)

    def format_reminder_for_user(self, reminder: Reminder, now: Optional[datetime] = None) -> list:
        """
        Format one reminder for the list view.

        Args:
            reminder: Reminder to format
            now: Reference time for the relative phrase

        Returns:
            Lines of text, without a trailing separator
        """
        status = "✓ Completed" if reminder.completed else "⏳ Active"

        lines = [
            f"ID: {reminder.id} | {status} | Reviews: {reminder.review_count}",
            f"Content: {self._display(reminder.content)}",
        ]
        # Completed reminders have no upcoming review
        if not reminder.completed:
            lines.append(f"Next review: {format_duration_until(reminder.next_review, now=now)}")

        return lines

    def review(self, reminder_id: int, now: Optional[datetime] = None) -> str:
        """Record a review, save, and report the new state"""
        self.store.review_reminder(reminder_id, now=now)
        self.store.save()

        reminder = self.store.get_reminder(reminder_id)
        if reminder.completed:
            return "\n".join([
                f"Reminder {reminder_id} completed! 🎉",
                f"You've successfully reviewed this {reminder.review_count} times.",
            ])

        return "\n".join([
            f"Reminder {reminder_id} reviewed!",
            f"Next review: {format_duration_until(reminder.next_review, now=now)}",
        ])

    def remove(self, reminder_id: int) -> str:
        """Remove a reminder and save"""
        self.store.remove_reminder(reminder_id)
        self.store.save()
        return f"Reminder {reminder_id} removed successfully"

    def export(self, reminder_id: int, destination: Union[str, Path]) -> str:
        """Write a reminder's content to a file. The store is not saved."""
        path = self.store.export_reminder(reminder_id, destination)
        return f"Exported reminder {reminder_id} to {path}"

    def stats(self, now: Optional[datetime] = None) -> str:
        """Summarize reminder counts"""
        stats = self.store.get_stats(now=now)
        return "\n".join([
            f"Total reminders: {stats['total']}",
            f"Active: {stats['active']}",
            f"Completed: {stats['completed']}",
            f"Due now: {stats['due']}",
        ])
