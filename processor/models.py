"""Value types shared by the pruning pipeline."""

from __future__ import annotations

import posixpath
from dataclasses import dataclass
from enum import Enum

SECONDS_PER_DAY = 86_400

# Recognized media extensions, matched case-insensitively on the device.
MEDIA_EXTENSIONS: tuple[str, ...] = (
    "jpg", "jpeg", "png", "heic", "heif", "mp4", "mov", "webp", "gif",
)


class Outcome(str, Enum):
    """Terminal classification of one listing line."""

    TIMESTAMP_UNPARSABLE = "timestamp_unparsable"
    TOO_RECENT = "too_recent"
    NOT_SYNCED = "not_synced"
    DELETED = "deleted"
    DELETE_FAILED = "delete_failed"


class SyncStatus(str, Enum):
    SYNCED = "synced"
    NOT_SYNCED = "not_synced"
    QUERY_FAILED = "query_failed"

    @property
    def is_synced(self) -> bool:
        return self is SyncStatus.SYNCED


@dataclass(frozen=True)
class FileRecord:
    path: str
    modified_at: int  # epoch seconds, truncated

    @property
    def name(self) -> str:
        return posixpath.basename(self.path)


@dataclass(frozen=True)
class ParseFailure:
    line: str
    reason: str


@dataclass(frozen=True)
class RunConfig:
    server: str
    api_key: str
    scan_path: str
    days_old: int
    dry_run: bool = True
    verbose: bool = False

    @property
    def threshold_seconds(self) -> int:
        return self.days_old * SECONDS_PER_DAY


@dataclass(frozen=True)
class DeletionResult:
    outcome: Outcome
    size_bytes: int = 0
    simulated: bool = False


@dataclass(frozen=True)
class RecordResult:
    outcome: Outcome
    bytes_freed: int = 0
    name: str = ""


@dataclass
class RunStats:
    """Running totals for one pass over the listing.

    Only ``record`` mutates the counters: each call adds one scanned file and
    exactly one outcome, so the totals always add up to ``scanned``.
    """

    scanned: int = 0
    deleted: int = 0
    skipped_too_recent: int = 0
    skipped_not_synced: int = 0
    errored: int = 0
    bytes_freed: int = 0

    def record(self, outcome: Outcome, bytes_freed: int = 0) -> None:
        self.scanned += 1
        if outcome is Outcome.DELETED:
            self.deleted += 1
            self.bytes_freed += max(0, bytes_freed)
        elif outcome is Outcome.TOO_RECENT:
            self.skipped_too_recent += 1
        elif outcome is Outcome.NOT_SYNCED:
            self.skipped_not_synced += 1
        else:
            self.errored += 1

    @property
    def is_balanced(self) -> bool:
        resolved = (
            self.deleted + self.skipped_too_recent
            + self.skipped_not_synced + self.errored
        )
        return self.scanned == resolved
