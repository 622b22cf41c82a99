"""
Reminder Agents - command services used by the CLI
"""

from .reminder_agent import ReminderAgent

__all__ = ['ReminderAgent']
