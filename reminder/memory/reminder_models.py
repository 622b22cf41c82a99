"""
Reminder Models

Data structures for the spaced-repetition reminder tracker.

Philosophy:
- Fixed review schedule, no adaptive algorithm
- Timestamps are timezone-aware local time
- Pure data representation, persistence lives in the store
"""

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional


# Delay before the first review of a new reminder
FIRST_REVIEW_DELAY = timedelta(days=1)

# Interval after the Nth successful review, keyed on the new review count.
# A review count beyond the table completes the reminder.
REVIEW_INTERVALS = {
    1: timedelta(days=3),
    2: timedelta(days=7),
    3: timedelta(days=30),
}


def local_now() -> datetime:
    """Current time as an aware datetime in the local time zone"""
    return datetime.now().astimezone()


def next_interval(review_count: int) -> Optional[timedelta]:
    """
    Look up the delay before the next review.

    Args:
        review_count: Review count AFTER the review being recorded

    Returns:
        Interval to wait, or None when the schedule is exhausted
    """
    return REVIEW_INTERVALS.get(review_count)


def _parse_timestamp(value: str) -> datetime:
    parsed = datetime.fromisoformat(value)
    # Hand-edited files may drop the offset; treat those as local time
    if parsed.tzinfo is None:
        parsed = parsed.astimezone()
    return parsed


@dataclass
class Reminder:
    """
    A single item the user wants to remember.

    Design principles:
    - Content is stored in full, display trimming happens elsewhere
    - created_at never changes after creation
    - Once completed, the schedule fields are frozen
    """
    id: int
    content: str
    created_at: datetime
    next_review: datetime
    review_count: int = 0
    completed: bool = False

    def __post_init__(self):
        """Validate reminder data"""
        if isinstance(self.id, bool) or not isinstance(self.id, int) or self.id < 0:
            raise ValueError(f"Reminder ID must be a non-negative integer, got {self.id!r}")
        if not isinstance(self.content, str):
            raise TypeError("content must be str")
        if not isinstance(self.created_at, datetime):
            raise TypeError("created_at must be datetime")
        if not isinstance(self.next_review, datetime):
            raise TypeError("next_review must be datetime")
        if isinstance(self.review_count, bool) or not isinstance(self.review_count, int) \
                or self.review_count < 0:
            raise ValueError(f"review_count must be a non-negative integer, got {self.review_count!r}")
        if not isinstance(self.completed, bool):
            raise TypeError("completed must be bool")

    def is_due(self, now: datetime) -> bool:
        """
        Check if reminder is due for review.

        Logic: not completed and next_review <= now (exact or overdue)

        Args:
            now: Aware datetime to check against

        Returns:
            True if the reminder should be reviewed
        """
        return not self.completed and self.next_review <= now

    def to_dict(self) -> dict:
        """Convert to JSON-serializable dict"""
        return {
            'id': self.id,
            'content': self.content,
            'created_at': self.created_at.isoformat(),
            'next_review': self.next_review.isoformat(),
            'review_count': self.review_count,
            'completed': self.completed,
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'Reminder':
        """Create Reminder from dict"""
        return cls(
            id=data['id'],
            content=data['content'],
            created_at=_parse_timestamp(data['created_at']),
            next_review=_parse_timestamp(data['next_review']),
            review_count=data['review_count'],
            completed=data['completed'],
        )


def create_reminder(reminder_id: int, content: str, now: Optional[datetime] = None) -> Reminder:
    """
    Factory function to create a new reminder.

    Args:
        reminder_id: Identifier handed out by the store
        content: Text to remember (any string, including empty)
        now: Creation time (default: local_now())

    Returns:
        New Reminder due one day after creation
    """
    if now is None:
        now = local_now()

    return Reminder(
        id=reminder_id,
        content=content,
        created_at=now,
        next_review=now + FIRST_REVIEW_DELAY,
        review_count=0,
        completed=False,
    )
