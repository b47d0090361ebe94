"""End-of-run summary rendering."""

from __future__ import annotations

import json

from processor.models import RunStats

_IEC_UNITS = ("K", "M", "G", "T", "P", "E")
_RULE = "═" * 63


def format_iec(num_bytes: int) -> str:
    """Human-readable size in the style of ``numfmt --to=iec``.

    Values are rounded away from zero; one decimal is kept below 10 units.
    """
    if num_bytes < 1024:
        return str(num_bytes)

    div = 1024
    unit = 0
    while num_bytes >= div * 1024 and unit < len(_IEC_UNITS) - 1:
        div *= 1024
        unit += 1

    tenths = -(-num_bytes * 10 // div)
    if tenths < 100:
        return f"{tenths // 10}.{tenths % 10}{_IEC_UNITS[unit]}"

    whole = -(-num_bytes // div)
    if whole >= 1024 and unit < len(_IEC_UNITS) - 1:
        return f"1.0{_IEC_UNITS[unit + 1]}"
    return f"{whole}{_IEC_UNITS[unit]}"


def _row(label: str, value) -> str:
    return f"  {label:<30} {value}"


def render_summary(stats: RunStats, dry_run: bool) -> str:
    lines = [
        "",
        _RULE,
        f"{'SUMMARY':^63}",
        _RULE,
        "",
        _row("Files scanned:", stats.scanned),
        _row("Files deleted:", stats.deleted),
        _row("Skipped (too recent):", stats.skipped_too_recent),
        _row("Skipped (not synced):", stats.skipped_not_synced),
        _row("Errors:", stats.errored),
        "",
    ]
    freed = format_iec(stats.bytes_freed)
    if dry_run:
        lines += [
            _row("Space that would be freed:", freed),
            "",
            "  This was a DRY RUN. No files were deleted.",
            "  Run with --execute to actually delete files.",
        ]
    else:
        lines.append(_row("Space freed:", freed))
    lines += ["", _RULE, ""]
    return "\n".join(lines)


def summary_dict(stats: RunStats) -> dict:
    """Six counters plus the human-readable size."""
    return {
        "scanned": stats.scanned,
        "deleted": stats.deleted,
        "skipped_too_recent": stats.skipped_too_recent,
        "skipped_not_synced": stats.skipped_not_synced,
        "errored": stats.errored,
        "bytes_freed": stats.bytes_freed,
        "bytes_freed_human": format_iec(stats.bytes_freed),
    }


def render_summary_json(stats: RunStats, dry_run: bool) -> str:
    payload = summary_dict(stats)
    payload["dry_run"] = dry_run
    return json.dumps(payload, indent=2)
