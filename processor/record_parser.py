"""Listing line parser.

The device listing prints one file per line as ``<mtime> <absolute path>``
where ``<mtime>`` comes from ``find -printf '%T@'`` and may carry a
fractional part. Only the first space separates the two fields: everything
after it is the path, spaces included.
"""

from __future__ import annotations

import re

from processor.models import FileRecord, ParseFailure

_TIMESTAMP_RE = re.compile(r"^\d+(?:\.\d*)?$")

REASON_TIMESTAMP = "timestamp_unparsable"
REASON_MISSING_PATH = "missing_path"


def parse_timestamp(raw: str) -> int | None:
    """Non-negative decimal epoch -> whole seconds, or None."""
    if not _TIMESTAMP_RE.match(raw):
        return None
    return int(raw.split(".", 1)[0])


def parse_listing_line(line: str) -> FileRecord | ParseFailure | None:
    """Parse one listing line.

    Returns None for blank lines, a ParseFailure for lines that cannot be
    used, otherwise a FileRecord. Never raises on malformed input.
    """
    line = line.rstrip("\r\n")
    if not line.strip():
        return None

    head, _, path = line.partition(" ")
    modified_at = parse_timestamp(head)
    if modified_at is None:
        return ParseFailure(line=line, reason=REASON_TIMESTAMP)
    if not path:
        return ParseFailure(line=line, reason=REASON_MISSING_PATH)
    return FileRecord(path=path, modified_at=modified_at)
