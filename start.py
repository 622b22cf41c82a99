"""
Reminder Start - run the CLI from a source checkout

    python start.py add "Learn Rust"
    python start.py check
"""

import sys

from reminder.cli import main

if __name__ == "__main__":
    sys.exit(main())
