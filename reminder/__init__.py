"""
Reminder - a spaced repetition reminder tracker

Record things to remember, check what is due, confirm reviews.
"""

__version__ = "0.1.0"
