"""
Reminder CLI - Main Entry Point

One invocation runs one command:
    load store -> run command -> save if changed -> print -> exit

Exit status:
    0  success
    1  reminder error (unknown ID, already completed, export failed)
    2  storage failure or bad usage
"""

import argparse
import logging
import sys
from typing import List, Optional

from reminder import __version__
from reminder.agents.reminder_agent import ReminderAgent
from reminder.memory.reminder_store import ReminderError, ReminderStore, ReminderStoreError

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_REMINDER_ERROR = 1
EXIT_FATAL = 2

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def _non_negative_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected a whole number, got {value!r}")
    if number < 0:
        raise argparse.ArgumentTypeError(f"must not be negative, got {number}")
    return number


def _build_parser() -> argparse.ArgumentParser:
    """Build the command line parser"""

    parser = argparse.ArgumentParser(
        prog="reminder",
        description="A spaced repetition reminder system",
    )

    # --- global display / logging options ---
    parser.add_argument(
        "--trim",
        type=_non_negative_int,
        metavar="NUMBER",
        help="trim the reminder content to a specific number of characters",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="count",
        default=0,
        help="log progress to stderr (-vv for debug output)",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    # --- commands ---
    commands = parser.add_subparsers(dest="command", metavar="COMMAND")
    commands.required = True

    add = commands.add_parser("add", help="add a new reminder")
    add.add_argument("content", nargs="+", metavar="CONTENT", help="the content to remember")

    commands.add_parser("check", help="check for due reminders")
    commands.add_parser("list", help="list all reminders")
    commands.add_parser("stats", help="show reminder counts")

    review = commands.add_parser("review", help="mark a reminder as reviewed")
    review.add_argument("id", type=_non_negative_int, metavar="ID", help="the ID of the reminder to mark as reviewed")

    remove = commands.add_parser("remove", help="remove a reminder")
    remove.add_argument("id", type=_non_negative_int, metavar="ID", help="the ID of the reminder to remove")

    export = commands.add_parser("export", help="write a reminder's content to a file")
    export.add_argument("id", type=_non_negative_int, metavar="ID", help="the ID of the reminder to export")
    export.add_argument("path", metavar="PATH", help="destination file (overwritten)")

    return parser


def _configure_logging(verbosity: int):
    if verbosity >= 2:
        level = logging.DEBUG
    elif verbosity == 1:
        level = logging.INFO
    else:
        level = logging.WARNING

    logging.basicConfig(level=level, format=LOG_FORMAT, stream=sys.stderr)


def run_command(agent: ReminderAgent, args: argparse.Namespace) -> str:
    """Dispatch the parsed command to the agent and return its output"""
    if args.command == "add":
        return agent.add(" ".join(args.content))
    if args.command == "check":
        return agent.check()
    if args.command == "list":
        return agent.list_reminders()
    if args.command == "stats":
        return agent.stats()
    if args.command == "review":
        return agent.review(args.id)
    if args.command == "remove":
        return agent.remove(args.id)
    if args.command == "export":
        return agent.export(args.id, args.path)
    raise ValueError(f"Unknown command: {args.command}")


def main(argv: Optional[List[str]] = None) -> int:
    """
    Run the reminder CLI.

    Args:
        argv: Arguments without the program name (default: sys.argv[1:])

    Returns:
        Process exit status
    """
    args = _build_parser().parse_args(argv)
    _configure_logging(args.verbose)
    logger.info(f"Running command: {args.command}")

    try:
        store = ReminderStore.load()
        agent = ReminderAgent(store, trim=args.trim)
        output = run_command(agent, args)
    except ReminderStoreError as e:
        print(f"Fatal: {e}", file=sys.stderr)
        return EXIT_FATAL
    except ReminderError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_REMINDER_ERROR

    print(output)
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
