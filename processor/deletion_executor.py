"""Delete (or simulate deleting) files approved by the pipeline."""

from __future__ import annotations

from loguru import logger

from device.base_device import DeviceTransport
from processor.errors import DeviceCommandError
from processor.models import DeletionResult, FileRecord, Outcome
from processor.summary import format_iec

ACTION_LEVEL = "ACTION"

# Size reported when the remote stat fails; the deletion still proceeds.
SIZE_LOOKUP_FALLBACK = 0


def ensure_action_level() -> None:
    try:
        logger.level(ACTION_LEVEL)
    except ValueError:
        logger.level(ACTION_LEVEL, no=25, color="<blue><bold>")


ensure_action_level()


class DeletionExecutor:
    def __init__(self, device: DeviceTransport, dry_run: bool = True):
        self.device = device
        self.dry_run = dry_run

    def lookup_size(self, record: FileRecord) -> int:
        try:
            return self.device.file_size(record.path)
        except DeviceCommandError as e:
            logger.debug(f"[delete] size lookup failed for {record.name}, using {SIZE_LOOKUP_FALLBACK}: {e}")
            return SIZE_LOOKUP_FALLBACK

    def execute(self, record: FileRecord, age_days: int | None = None) -> DeletionResult:
        size = self.lookup_size(record)
        detail = f"{age_days} days, {format_iec(size)}" if age_days is not None else format_iec(size)

        if self.dry_run:
            logger.log(ACTION_LEVEL, f"[DRY-RUN] Would delete: {record.name} ({detail})")
            return DeletionResult(Outcome.DELETED, size_bytes=size, simulated=True)

        logger.debug(f"[delete] deleting: {record.path}")
        if self.device.delete_file(record.path):
            logger.log(ACTION_LEVEL, f"Deleted: {record.name} ({detail})")
            return DeletionResult(Outcome.DELETED, size_bytes=size)

        logger.error(f"Failed to delete: {record.name}")
        return DeletionResult(Outcome.DELETE_FAILED)
