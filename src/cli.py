"""Console entry point for the addon backup migration job."""

from __future__ import annotations

import argparse
import logging
import time
from typing import List

from dotenv import load_dotenv

from config import MigrationConfig
from errors import MigrationError
from log_utils import setup_logging
from migration import BackupMigration

logger = logging.getLogger(__name__)

# Names the import, so repeated runs are told apart by their start time.
PROCESS_START_MS = int(time.time() * 1000)


def build_parser() -> argparse.ArgumentParser:
    """Build and return the CLI argument parser.

    Every option falls back to its environment variable when omitted.
    """
    parser = argparse.ArgumentParser(
        description=(
            "Import the latest backup of a Northflank addon into another addon "
            "and restore it"
        )
    )
    parser.add_argument("--host", help="API host (NF_HOST)")
    parser.add_argument("--api-token", help="API token (NF_API_TOKEN)")
    parser.add_argument("--project", help="Project ID (NF_PROJECT_ID)")
    parser.add_argument("--source-addon", help="Source addon ID (NF_SOURCE_ADDON_ID)")
    parser.add_argument("--target-addon", help="Target addon ID (NF_TARGET_ADDON_ID)")
    parser.add_argument(
        "--addon-wait",
        metavar="MINUTES",
        help="Minutes to wait for each addon to be running (ADDON_WAIT_DURATION, default 3)",
    )
    parser.add_argument(
        "--backup-wait",
        metavar="MINUTES",
        help="Minutes to wait for the import to complete (BACKUP_WAIT_DURATION, default 15)",
    )
    parser.add_argument("--poll-interval", type=int, default=30, metavar="SECONDS")
    parser.add_argument("--report", metavar="PATH", help="Write a JSON report here")
    parser.add_argument("--log-file", metavar="PATH")
    parser.add_argument("--verbose", action="store_true")
    return parser


def main(argv: List[str] | None = None) -> int:
    """CLI main for console_scripts entry point."""
    parser = build_parser()
    args = parser.parse_args(args=argv)

    load_dotenv()
    setup_logging(verbose=args.verbose, log_file=args.log_file)

    try:
        config = MigrationConfig.from_args(args)
        BackupMigration(config, run_timestamp_ms=PROCESS_START_MS).run()
    except MigrationError as e:
        logger.error(f"Migration aborted: {e}")
        raise

    return 0
