"""Listing -> parse -> age check -> sync check -> delete pipeline.

Each listing line is resolved to exactly one Outcome before the next line is
read. The age check runs before the catalog lookup so files that are too
recent never cost a network request.
"""

from __future__ import annotations

import time
from collections.abc import Callable, Iterable
from typing import Protocol

from loguru import logger

from device.base_device import DeviceTransport
from processor.age_classifier import age_in_days, is_old_enough
from processor.deletion_executor import DeletionExecutor
from processor.models import (
    MEDIA_EXTENSIONS,
    FileRecord,
    Outcome,
    ParseFailure,
    RecordResult,
    RunConfig,
    RunStats,
    SyncStatus,
)
from processor.record_parser import parse_listing_line

PROGRESS_EVERY = 100


class SyncOracle(Protocol):
    def sync_status(self, filename: str) -> SyncStatus: ...


class CleanupPipeline:
    """Owns the per-file loop and the run's counters."""

    def __init__(
        self,
        config: RunConfig,
        device: DeviceTransport,
        oracle: SyncOracle,
        clock: Callable[[], float] = time.time,
    ):
        self.config = config
        self.device = device
        self.oracle = oracle
        self.clock = clock
        self.executor = DeletionExecutor(device, dry_run=config.dry_run)

    def process_line(self, line: str, now: int) -> RecordResult | None:
        parsed = parse_listing_line(line)
        if parsed is None:
            return None
        if isinstance(parsed, ParseFailure):
            logger.warning(f"Could not parse timestamp for: {parsed.line!r} ({parsed.reason})")
            return RecordResult(Outcome.TIMESTAMP_UNPARSABLE)
        return self.process_record(parsed, now)

    def process_record(self, record: FileRecord, now: int) -> RecordResult:
        days = age_in_days(record, now)
        logger.debug(f"[pipeline] processing: {record.name} ({days} days old)")

        if not is_old_enough(record, now, self.config.threshold_seconds):
            logger.debug(f"[pipeline]   skipping: only {days} days old")
            return RecordResult(Outcome.TOO_RECENT, name=record.name)

        status = self.oracle.sync_status(record.name)
        if not status.is_synced:
            logger.warning(f"NOT SYNCED - keeping: {record.name} ({days} days old, {status.value})")
            return RecordResult(Outcome.NOT_SYNCED, name=record.name)

        result = self.executor.execute(record, age_days=days)
        return RecordResult(result.outcome, bytes_freed=result.size_bytes, name=record.name)

    def process_lines(self, lines: Iterable[str], now: int) -> RunStats:
        stats = RunStats()
        for line in lines:
            result = self.process_line(line, now)
            if result is None:
                continue
            stats.record(result.outcome, result.bytes_freed)
            if stats.scanned == 1 or stats.scanned % PROGRESS_EVERY == 0:
                logger.debug(f"[pipeline] processed {stats.scanned} files so far... (current: {result.name or '?'})")
        return stats

    def run(self) -> RunStats:
        """One pass over the scan root. ListingFailedError aborts before any file is processed."""
        now = int(self.clock())
        logger.info("Processing files...")
        logger.info(f"Age threshold: {self.config.days_old} days")
        logger.info(f"Dry run: {self.config.dry_run}")

        lines = self.device.list_files(self.config.scan_path, MEDIA_EXTENSIONS)
        stats = self.process_lines(lines, now)
        logger.debug(
            f"[pipeline] complete: scanned={stats.scanned} deleted={stats.deleted} "
            f"errored={stats.errored}"
        )
        return stats


def run_cleanup(config: RunConfig, device: DeviceTransport, oracle: SyncOracle, now: int | None = None) -> RunStats:
    clock = time.time if now is None else (lambda: now)
    return CleanupPipeline(config, device, oracle, clock=clock).run()
