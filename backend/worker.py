#!/usr/bin/env python3
"""
Taskboard recurrence worker.

Runs the recurrence reset job either once (for cron, CI or manual repair) or
under the SchedulerWorker, which triggers it every day at the configured local
time until SIGINT/SIGTERM.

Worker Architecture:
- SchedulerWorker: decides WHEN the reset runs
- RecurrenceResetJob: performs one reset pass when asked
"""

import argparse
import asyncio
import json
import signal
import sys
from typing import List, Optional

import psycopg
from pydantic import ValidationError

from taskboard.config import Settings, get_settings
from taskboard.database.core import AsyncDatabase
from taskboard.enums import LogEmoji, LoggerName, LogSource, ResetTrigger
from taskboard.models.reset_run_model import RunSummary
from taskboard.services.logger import get_service_logger, initialize_global_logger
from taskboard.workers.exceptions import WorkerInitializationError
from taskboard.workers.recurrence_reset_job import RecurrenceResetJob
from taskboard.workers.scheduler_worker import SchedulerWorker

logger = get_service_logger(LoggerName.SYSTEM, LogSource.SYSTEM)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Taskboard recurring task reset worker",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s                        # Start the daily scheduler
  %(prog)s --once                 # Reset recurring tasks now and exit
  %(prog)s --once --json          # Same, summary as JSON
  %(prog)s --once --deadline 60   # Give up after one minute
        """,
    )
    parser.add_argument(
        "--once",
        action="store_true",
        help="Run a single reset and exit instead of starting the scheduler",
    )
    parser.add_argument("--json", action="store_true", help="Output results as JSON")
    parser.add_argument(
        "--deadline",
        type=float,
        default=None,
        help="Seconds before a single run is abandoned (defaults to settings)",
    )
    return parser


async def run_once(
    settings: Settings, deadline_seconds: Optional[float] = None
) -> RunSummary:
    """Open the pool, run one reset, close the pool."""
    db = AsyncDatabase(
        settings.database_url, settings.db_pool_size, settings.db_pool_timeout
    )
    await db.initialize()
    try:
        if not await db.check_pool_health():
            raise WorkerInitializationError("Database health check failed")

        job = RecurrenceResetJob.from_database(db, settings)
        return await job.run(deadline_seconds=deadline_seconds, trigger=ResetTrigger.CLI)
    finally:
        await db.close()


async def run_scheduler(settings: Settings) -> None:
    """Run the scheduler worker until a shutdown signal arrives."""
    db = AsyncDatabase(
        settings.database_url, settings.db_pool_size, settings.db_pool_timeout
    )
    await db.initialize()

    stop_event = asyncio.Event()
    loop = asyncio.get_running_loop()
    for signum in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(signum, stop_event.set)

    scheduler_worker = SchedulerWorker.from_settings(
        RecurrenceResetJob.from_database(db, settings), settings
    )
    try:
        if not await db.check_pool_health():
            raise WorkerInitializationError("Database health check failed")

        await scheduler_worker.start()
        await stop_event.wait()
        logger.info("Shutdown signal received", emoji=LogEmoji.SHUTDOWN)
    finally:
        await scheduler_worker.stop()
        await db.close()


def _print_summary(summary: RunSummary) -> None:
    """Print human-readable run summary."""
    icon = "✅" if summary.success else "❌"
    print(f"{icon} {summary.message}")
    print(f"Candidates: {summary.candidates}")
    print(f"Reset: {summary.processed}")
    print(f"Mirrors updated: {summary.mirrors_updated}")
    print(f"Skipped: {summary.skipped}")
    print(f"Errors: {summary.errors}")
    if summary.duration_seconds is not None:
        print(f"Duration: {summary.duration_seconds:.2f}s")


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    args = build_parser().parse_args(argv)

    try:
        settings = get_settings()
    except ValidationError as e:
        print(f"❌ Invalid configuration: {e}", file=sys.stderr)
        return 1

    initialize_global_logger(settings.log_level, settings.log_file)

    try:
        if not args.once:
            asyncio.run(run_scheduler(settings))
            return 0

        summary = asyncio.run(run_once(settings, args.deadline))
    except (psycopg.Error, OSError, WorkerInitializationError) as e:
        if args.json:
            print(json.dumps({"error": str(e), "success": False}))
        else:
            print(f"❌ {e}")
        return 1

    if args.json:
        print(json.dumps(summary.to_log_dict(), indent=2))
    else:
        _print_summary(summary)

    return 0 if summary.success else 1


if __name__ == "__main__":
    sys.exit(main())
