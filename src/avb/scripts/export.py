#!/usr/bin/env python3
# src/avb/scripts/export.py
"""Headless export entry point.

Export every combination of a persisted session without the TUI.

Usage:
    python -m avb.scripts.export zip --state var/avb/state.json --out exports/
    python -m avb.scripts.export individual --yes
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from rich.console import Console
from rich.prompt import Confirm

STRATEGY_CHOICES = {
    "zip": "archive",
    "combined": "combined",
    "individual": "individual",
}


class RichConfirm:
    """Confirmation port backed by an interactive rich prompt."""

    def __init__(self, console: Console) -> None:
        self._console = console

    def confirm(self, message: str) -> bool:
        return Confirm.ask(message, console=self._console, default=False)


class ConsoleNotifier:
    """Notify port printing to a rich console."""

    _STYLES = {"information": "green", "warning": "yellow", "error": "red"}

    def __init__(self, console: Console) -> None:
        self._console = console

    def notify(self, message: str, severity: str = "information") -> None:
        self._console.print(f"[{self._STYLES.get(severity, 'white')}]{message}[/]")


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="avb-export",
        description="Ad Variations - export every combination",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    # One ZIP with one text file per ad
    python -m avb.scripts.export zip --state campaign.json

    # A single document with every ad
    python -m avb.scripts.export combined --out exports/

    # One file per ad, answering yes to every prompt
    python -m avb.scripts.export individual --yes
""",
    )

    parser.add_argument(
        "format",
        choices=sorted(STRATEGY_CHOICES),
        help="Output shape",
    )

    parser.add_argument(
        "--state",
        type=str,
        default=None,
        metavar="FILE",
        help="Session state file (default: AVB_STATE_PATH or ./var/avb/state.json)",
    )

    parser.add_argument(
        "--out",
        type=str,
        default=None,
        metavar="DIR",
        help="Directory for exported files (default: AVB_EXPORT_DIR)",
    )

    parser.add_argument(
        "--yes",
        "-y",
        action="store_true",
        help="Answer yes to every confirmation",
    )

    return parser


def main(argv: list[str] | None = None, console: Console | None = None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)
    console = console or Console()

    from avb.core.config import AvbSettings
    from avb.export import ExportPipeline, ExportStrategy
    from avb.ports import AlwaysConfirm, DirectorySaver
    from avb.session import Session
    from avb.store import JsonFileStore, SessionStore

    settings = AvbSettings()
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    state_path = Path(args.state or settings.state_path)
    if not state_path.exists():
        console.print(f"[red]Error:[/red] State file not found: {state_path}")
        return 1

    session = Session.load(SessionStore(JsonFileStore(state_path), settings), settings)
    out_dir = Path(args.out or settings.export_dir)
    pipeline = ExportPipeline(
        session,
        confirm=AlwaysConfirm(True) if args.yes else RichConfirm(console),
        saver=DirectorySaver(out_dir),
        notify=ConsoleNotifier(console),
    )

    if not pipeline.export_enabled:
        console.print("[yellow]Nothing to export:[/yellow] no slot is both enabled and non-empty")
        return 0

    strategy = ExportStrategy(STRATEGY_CHOICES[args.format])
    report = asyncio.run(pipeline.run(strategy))

    if report.declined:
        console.print("[yellow]Export declined[/yellow]; nothing written")
    elif report.completed:
        console.print(f"[bold]{report.written:,}[/bold] of {report.total:,} ads -> {out_dir}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
