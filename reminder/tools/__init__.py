"""
Reminder Tools - display utilities
"""

from .formatting import format_duration_until, trim_content

__all__ = ['format_duration_until', 'trim_content']
