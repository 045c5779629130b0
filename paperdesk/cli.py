"""
Command-line interface for paperdesk.

Usage:
    paperdesk info document.json
    paperdesk snapshot document.json --page 2 --output page2.json
    paperdesk replay document.json messages.json --output result.json
    paperdesk version
"""

import argparse
import json
import logging
import sys
from typing import List, Optional

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .desk import Desk
from .exceptions import PaperdeskError
from .storage import dump_snapshot, load_messages, load_pages
from .surface import MemorySurface
from .utils.rich_logger import setup_logging
from .version import __version__

logger = logging.getLogger(__name__)


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="paperdesk",
        description="paperdesk - paginated document model",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  paperdesk info document.json
  paperdesk snapshot document.json --page 2
  paperdesk replay document.json messages.json -o result.json
  paperdesk version
        """,
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Log level (default: WARNING)"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Info command
    info_parser = subparsers.add_parser("info", help="Show pages, block and word counts")
    info_parser.add_argument("input", help="Document JSON file")

    # Snapshot command
    snapshot_parser = subparsers.add_parser("snapshot", help="Print a snapshot of the document")
    snapshot_parser.add_argument("input", help="Document JSON file")
    snapshot_parser.add_argument("-p", "--page", type=int, help="Snapshot just this page number")
    snapshot_parser.add_argument("-o", "--output", help="Write the snapshot to this file")

    # Replay command
    replay_parser = subparsers.add_parser("replay", help="Apply surface messages to a document")
    replay_parser.add_argument("input", help="Document JSON file")
    replay_parser.add_argument("messages", help="JSON list of messages")
    replay_parser.add_argument("-o", "--output", help="Write the resulting snapshot to this file")
    replay_parser.add_argument(
        "--save-on-change",
        action="store_true",
        help="Snapshot the whole document on every change"
    )
    replay_parser.add_argument(
        "--show-changes",
        action="store_true",
        help="Print every change notification"
    )

    # Version command
    subparsers.add_parser("version", help="Show version information")

    return parser


def _open_desk(path: str, **overrides) -> Desk:
    config = {'pages': load_pages(path)}
    config.update(overrides)
    return Desk(config, surface=MemorySurface())


def _print_snapshot(console: Console, snapshot: dict, output: Optional[str]) -> None:
    if output:
        dump_snapshot(snapshot, output)
        console.print(f"[green]✓ Snapshot written to {escape(output)}[/green]")
    else:
        console.print_json(json.dumps(snapshot, ensure_ascii=False))


def cmd_info(args, console: Console) -> int:
    """Handle info command."""
    desk = _open_desk(args.input)

    table = Table(title=f"{args.input}")
    table.add_column("Page", justify="right", style="cyan")
    table.add_column("ID", style="magenta")
    table.add_column("Blocks", justify="right")
    table.add_column("Words", justify="right")

    for page_number, page in enumerate(desk.pages, start=1):
        table.add_row(str(page_number), page.id, str(len(page)), str(desk.word_count(page_number=page_number)))

    console.print(table)
    console.print(f"Total words: {desk.word_count()}")
    return 0


def cmd_snapshot(args, console: Console) -> int:
    """Handle snapshot command."""
    desk = _open_desk(args.input)
    snapshot = desk.save(args.page)
    if args.page is not None and not snapshot['pages']:
        console.print(f"[red]✗ Page {args.page} does not exist[/red]")
        return 1
    _print_snapshot(console, snapshot, args.output)
    return 0


def cmd_replay(args, console: Console) -> int:
    """Handle replay command."""
    messages = load_messages(args.messages)

    def on_change(snapshot):
        if args.show_changes:
            console.print_json(json.dumps(snapshot, ensure_ascii=False))

    desk = _open_desk(args.input, save_on_change=args.save_on_change, on_change=on_change)

    applied = 0
    for message in messages:
        if desk.dispatch(message):
            applied += 1
        else:
            logger.warning(f"{type(message).__name__} for page {message.page_id} had no effect")

    logger.info(f"Applied {applied} of {len(messages)} messages")
    _print_snapshot(console, desk.save(), args.output)
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    console = Console()
    setup_logging(args.log_level)

    if args.command == "version":
        console.print(f"paperdesk {__version__}")
        return 0

    commands = {
        "info": cmd_info,
        "snapshot": cmd_snapshot,
        "replay": cmd_replay,
    }
    command = commands.get(args.command)
    if command is None:
        parser.print_help()
        return 1

    try:
        return command(args, console)
    except PaperdeskError as e:
        console.print(f"[red]✗ {escape(str(e))}[/red]")
        return 1


if __name__ == "__main__":
    sys.exit(main())
