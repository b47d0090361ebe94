"""Age checks against the run's reference clock."""

from __future__ import annotations

from processor.models import SECONDS_PER_DAY, FileRecord


def file_age_seconds(record: FileRecord, now: int) -> int:
    return now - record.modified_at


def age_in_days(record: FileRecord, now: int) -> int:
    return file_age_seconds(record, now) // SECONDS_PER_DAY


def is_old_enough(record: FileRecord, now: int, threshold: int) -> bool:
    """True when the file has reached the threshold (boundary inclusive)."""
    return file_age_seconds(record, now) >= threshold
