from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from nativedb.app import (
    clear_feeds,
    import_natives,
    import_source_artifacts,
    translate_natives,
)
from nativedb.config import FeedKind, configure_logging

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

log = logging.getLogger(__name__)

IMPORT_TARGETS = ("native", "nativecfx", "sources", "clear")


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Maintain the native catalog")
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    import_parser = subparsers.add_parser("import", help="Import feeds or reversed sources")
    import_parser.add_argument(
        "target",
        choices=IMPORT_TARGETS,
        help="native / nativecfx feed, a sources directory, or clear cached feeds",
    )
    import_parser.add_argument(
        "path",
        nargs="?",
        type=str,
        help="Feed file or sources directory (defaults depend on the target)",
    )

    translate = subparsers.add_parser("translate", help="Translate pending natives")
    translate.add_argument(
        "--workers",
        type=int,
        default=None,
        help="Number of concurrent translation workers (defaults to AI_WORKERS)",
    )

    return parser.parse_args(list(argv))


def _validate(args: argparse.Namespace) -> None:
    if args.command == "import" and args.target == "clear" and args.path is not None:
        raise ValueError("import clear takes no path")
    if args.command == "translate" and args.workers is not None and args.workers < 1:
        raise ValueError("Workers must be a positive integer")


def _run_import(target: str, path: Path | None) -> None:
    if target == "clear":
        clear_feeds()
        return
    if target == "sources":
        result = import_source_artifacts(path)
        log.info(
            "Sources import finished: scanned=%s, updated=%s, unmatched=%s, failed=%s",
            result.scanned,
            result.updated,
            result.unmatched,
            result.failed,
        )
        return
    result = import_natives(FeedKind(target), path)
    log.info(
        "Native import finished: processed=%s, upserted=%s, examples_added=%s, failed=%s",
        result.processed,
        result.upserted,
        result.examples_added,
        result.failed,
    )


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    configure_logging()
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    parsed_args: argparse.Namespace
    try:
        parsed_args = _parse_args(args_list)
        _validate(parsed_args)
    except ValueError:
        log.exception("CLI validation error")
        sys.exit(2)

    if parsed_args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    try:
        if parsed_args.command == "import":
            path = Path(parsed_args.path) if parsed_args.path else None
            _run_import(parsed_args.target, path)
        elif parsed_args.command == "translate":
            result = translate_natives(workers=parsed_args.workers)
            log.info(
                "Translation finished: total=%s, translated=%s, skipped=%s, failed=%s",
                result.total,
                result.translated,
                result.skipped,
                result.failed,
            )
        else:
            raise ValueError(f"Unsupported command: {parsed_args.command}")  # noqa: TRY301

    except Exception:
        log.exception("Command failed")
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    """Console script entry point."""
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
