#!/usr/bin/env python3
# src/avb/scripts/explorer.py
"""Explorer TUI Entry Point.

Launch the interactive ad explorer over a persisted session.

Usage:
    python -m avb.scripts.explorer
    python -m avb.scripts.explorer --state var/avb/state.json --headings
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="avb-explorer",
        description="Ad Variations - combination explorer TUI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    # Explore the default session file
    python -m avb.scripts.explorer

    # Explore a specific session and write exports elsewhere
    python -m avb.scripts.explorer --state campaign.json --out exports/

Keyboard shortcuts:
    ← / →   Previous / next ad
    /       Search
    1-9     Drop / restore a slot in this ad
    e       Edit this ad's full text
    z c i   Export ZIP / combined / individual files
    ?       Help
    q       Quit
""",
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

    headings = parser.add_mutually_exclusive_group()
    headings.add_argument(
        "--headings",
        dest="headings",
        action="store_const",
        const=True,
        default=None,
        help="Include slot names as headings",
    )
    headings.add_argument(
        "--no-headings",
        dest="headings",
        action="store_const",
        const=False,
        help="Compose without slot headings",
    )

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    from avb.core.config import AvbSettings
    from avb.session import Session
    from avb.store import JsonFileStore, SessionStore

    settings = AvbSettings()
    state_path = Path(args.state or settings.state_path)

    # The TUI owns the terminal; log next to the state file instead.
    state_path.parent.mkdir(parents=True, exist_ok=True)
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        filename=str(state_path.with_suffix(".log")),
    )

    session = Session.load(SessionStore(JsonFileStore(state_path), settings), settings)
    if args.headings is not None:
        session.set_include_headings(args.headings)

    # Import app here to avoid slow import on --help
    try:
        from avb.explorer import ExplorerApp
    except ImportError as e:
        print(f"Error: Failed to import explorer: {e}", file=sys.stderr)
        print("Hint: Install with `pip install textual`", file=sys.stderr)
        return 1

    app = ExplorerApp(session, export_dir=args.out or settings.export_dir)
    app.run()

    return 0


if __name__ == "__main__":
    sys.exit(main())
