"""CLI entry point for notebrotr.

Reads a file of Nostr events and archives them into a vault directory.

Examples:
    ```bash
    python -m notebrotr events.jsonl
    python -m notebrotr events.json --vault ~/Notes --batch-size 100
    python -m notebrotr events.jsonl --config config/archiver.yaml --log-level DEBUG
    ```
"""

import argparse
import asyncio
import logging
import signal
import sys
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from notebrotr.core.exceptions import NotebrotrError
from notebrotr.core.logger import Logger, StructuredFormatter
from notebrotr.core.yaml import load_yaml
from notebrotr.services.archiver import Archiver
from notebrotr.services.ingest import load_events
from notebrotr.services.vault import DirectoryVault


DEFAULT_VAULT = Path("vault")

logger = Logger("cli")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments for the archiver."""
    parser = argparse.ArgumentParser(
        prog="notebrotr",
        description="Archive Nostr events as cross-linked Markdown notes",
    )

    parser.add_argument(
        "events",
        type=Path,
        help="Event file: a JSON array or one JSON event per line",
    )

    parser.add_argument(
        "--vault",
        type=Path,
        default=DEFAULT_VAULT,
        help=f"Vault directory (default: {DEFAULT_VAULT})",
    )

    parser.add_argument(
        "--config",
        type=Path,
        help="Archiver YAML config path",
    )

    parser.add_argument(
        "--batch-size",
        type=int,
        help="Events per chunk (overrides the config file)",
    )

    parser.add_argument(
        "--delay-ms",
        type=int,
        help="Pause after each chunk in milliseconds (overrides the config file)",
    )

    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="INFO",
        help="Log level (default: INFO)",
    )

    return parser.parse_args(argv)


def setup_logging(level: str) -> None:
    """Configure the root logger with structured formatting.

    Installs a ``StructuredFormatter`` on the root handler so that output
    from ``Logger`` and from plain ``logging.getLogger()`` calls is unified
    as ``level name message key=value ...``.
    """
    handler = logging.StreamHandler()
    handler.setFormatter(StructuredFormatter())
    logging.root.addHandler(handler)
    logging.root.setLevel(getattr(logging, level))


def build_config(args: argparse.Namespace) -> dict[str, Any]:
    """Load the YAML config (if any) and apply command-line overrides."""
    config = load_yaml(args.config) if args.config else {}
    batch = config.setdefault("batch", {})
    if args.batch_size is not None:
        batch["size"] = args.batch_size
    if args.delay_ms is not None:
        batch["delay_ms"] = args.delay_ms
    return config


async def run(args: argparse.Namespace) -> int:
    """Load events and archive them. Returns the process exit code."""
    try:
        archiver = Archiver.from_dict(build_config(args), vault=DirectoryVault(args.vault))
        events = load_events(args.events)
    except (NotebrotrError, ValidationError) as e:
        logger.error("startup_failed", error=str(e))
        return 1

    stop_event = asyncio.Event()

    def handle_signal(sig: signal.Signals) -> None:
        logger.info("shutdown_signal", signal=sig.name)
        stop_event.set()

    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, handle_signal, sig)

    try:
        progress = await archiver.run(events, stop_event=stop_event)
    except Exception as e:  # Intentionally broad: CLI error boundary
        logger.error("archiver_failed", error=str(e))
        return 1
    finally:
        for sig in (signal.SIGINT, signal.SIGTERM):
            loop.remove_signal_handler(sig)

    return 130 if progress.stopped else 0


async def main(argv: list[str] | None = None) -> int:
    """Main entry point: parse args, set up logging, and run the archiver."""
    args = parse_args(argv)
    setup_logging(args.log_level)
    return await run(args)


def cli() -> None:
    """Synchronous entry point for console_scripts."""
    sys.exit(asyncio.run(main()))


if __name__ == "__main__":
    cli()
