"""Command-line interface for the Morpho liquidation scanner."""
from __future__ import annotations

import argparse
import asyncio
import logging
import sys

from .config import load_config
from .errors import UpstreamQueryError
from .logging_setup import configure_logging
from .services import Scanner

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse CLI parser."""
    parser = argparse.ArgumentParser(
        prog="morpho-liquidator",
        description="Find and liquidate unsafe Morpho Blue positions",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Path to config.yaml (default: config.yaml in project root)",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: INFO)",
    )

    sub = parser.add_subparsers(dest="command")

    scan_parser = sub.add_parser("scan", help="Run a single scan and write the snapshot")
    scan_parser.add_argument(
        "--output",
        default=None,
        help="Snapshot path (overrides scan.output_path)",
    )

    run_parser = sub.add_parser("run", help="Rescan continuously")
    run_parser.add_argument(
        "interval",
        nargs="?",
        type=int,
        default=None,
        help="Seconds between scans (overrides config)",
    )

    return parser


async def _run(args: argparse.Namespace) -> int:
    """Execute the selected command; returns the process exit status."""
    try:
        config = load_config(args.config)
    except (FileNotFoundError, ValueError) as e:
        logger.error("Invalid configuration: %s", e)
        return 1

    scanner = Scanner(config)

    if args.command == "scan":
        try:
            report = await scanner.scan(args.output)
        except UpstreamQueryError as e:
            logger.error("Scan aborted, discovery failed: %s", e)
            return 1
        print(f"Done. Verified liquidations: {len(report.liquidations)}")
        return 0

    await scanner.run_continuous(args.interval)
    return 0


def main() -> None:
    """Entry point."""
    parser = build_parser()
    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        sys.exit(1)

    configure_logging(args.log_level)
    try:
        status = asyncio.run(_run(args))
    except KeyboardInterrupt:
        status = 130
    except Exception:
        logger.exception("Unhandled failure")
        status = 1
    sys.exit(status)
