"""
Reminder Formatting - Display Helpers

Turns timestamps into relative phrases and shortens content for printing.
Nothing here touches stored data.
"""

from datetime import datetime
from typing import Optional

from reminder.memory.reminder_models import local_now


ELLIPSIS = "..."

# (unit name, seconds per unit), largest first
_UNITS = (
    ("day", 86400),
    ("hour", 3600),
    ("minute", 60),
)


def _plural(count: int, unit: str) -> str:
    return f"{count} {unit}" if count == 1 else f"{count} {unit}s"


def format_duration_until(target: datetime, now: Optional[datetime] = None) -> str:
    """
    Describe how far a timestamp is from now.

    Uses the largest whole unit among days, hours and minutes.
    Past times read "3 days ago", future times "in 2 hours".
    Under a minute: "just now" for the past, "now" for the future or zero.

    Args:
        target: Timestamp to describe
        now: Reference time (default: local now)

    Returns:
        Human-readable relative phrase
    """
    if now is None:
        now = local_now()

    seconds = (target - now).total_seconds()
    in_past = seconds < 0
    magnitude = int(abs(seconds))

    for unit, unit_seconds in _UNITS:
        count = magnitude // unit_seconds
        if count >= 1:
            phrase = _plural(count, unit)
            return f"{phrase} ago" if in_past else f"in {phrase}"

    return "just now" if in_past else "now"


def trim_content(content: str, max_len: Optional[int] = None) -> str:
    """
    Shorten content for display.

    Args:
        content: Full reminder content
        max_len: Maximum characters to keep (None = no trimming)

    Returns:
        Content cut to max_len characters plus "..." when longer, else unchanged
    """
    if max_len is None or len(content) <= max_len:
        return content
    return content[:max_len] + ELLIPSIS
