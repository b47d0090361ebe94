"""Delete photos from an Android device that are old AND already in Immich.

A file is removed only when it is older than --days and the Immich server
reports an asset with the same original filename. Dry run is the default.

Usage:
    python scripts/prune_synced_photos.py --dry-run
    python scripts/prune_synced_photos.py --execute --days 60
    python scripts/prune_synced_photos.py --server http://192.168.1.50:2283 --api-key abc123

Environment variables (or .env in the project root):
    IMMICH_SERVER, IMMICH_API_KEY, IMMICH_DCIM_PATH, IMMICH_DAYS_OLD,
    IMMICH_DEVICE_SERIAL, IMMICH_LOG_DIR
"""

import argparse
import sys
from datetime import datetime
from pathlib import Path

_root = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(_root))

from dotenv import load_dotenv  # noqa: E402
from loguru import logger  # noqa: E402

from catalog.immich import ImmichClient  # noqa: E402
from device.adb import AdbDevice  # noqa: E402
from processor.config import CleanupSettings, build_run_config  # noqa: E402
from processor.errors import PreflightError  # noqa: E402
from processor.pipeline import CleanupPipeline  # noqa: E402
from processor.preflight import run_preflight  # noqa: E402
from processor.summary import render_summary, render_summary_json  # noqa: E402

CONSOLE_FORMAT = "<level>[{time:YYYY-MM-DD HH:mm:ss}] [{level:<6}]</level> {message}"
FILE_FORMAT = "[{time:YYYY-MM-DD HH:mm:ss}] [{level:<6}] {message}"


def _non_negative_int(value: str) -> int:
    if not value.isdigit():
        raise argparse.ArgumentTypeError("--days requires a numeric argument")
    return int(value)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Delete photos from Android device that are older than N days AND synced to Immich.",
    )
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument("--dry-run", dest="dry_run", action="store_const", const=True,
                      help="Show what would be deleted without deleting (default)")
    mode.add_argument("--execute", "--no-dry-run", dest="dry_run", action="store_const", const=False,
                      help="Actually delete files (use with caution!)")
    parser.add_argument("--days", type=_non_negative_int, help="Delete files older than N days (default: 30)")
    parser.add_argument("--server", help="Immich server URL (e.g., http://192.168.1.50:2283)")
    parser.add_argument("--api-key", help="Immich API key")
    parser.add_argument("--path", help="Android path to scan (default: /sdcard/DCIM/Camera)")
    parser.add_argument("--serial", help="ADB serial of the device to use (default: first connected)")
    parser.add_argument("--json", action="store_true", help="Print the summary as JSON")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose debug output")
    return parser


def configure_logging(verbose: bool, log_dir: str) -> Path:
    """Console sink on stderr plus a per-run debug log file."""
    logger.remove()
    logger.add(sys.stderr, level="DEBUG" if verbose else "INFO", format=CONSOLE_FORMAT)

    directory = Path(log_dir).expanduser()
    directory.mkdir(parents=True, exist_ok=True)
    log_file = directory / f"photo_cleanup_{datetime.now().strftime('%Y%m%d_%H%M%S')}.log"
    logger.add(str(log_file), level="DEBUG", format=FILE_FORMAT, colorize=False, encoding="utf-8")
    return log_file


def main(argv: list[str] | None = None) -> int:
    load_dotenv(_root / ".env")
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        settings = CleanupSettings()
        config = build_run_config(
            settings,
            server=args.server,
            api_key=args.api_key,
            scan_path=args.path,
            days_old=args.days,
            dry_run=args.dry_run,
            verbose=True if args.verbose else None,
        )
    except ValueError as e:
        parser.error(str(e))

    log_file = configure_logging(config.verbose, settings.log_dir)

    print("\n  Android Photo Cleanup via ADB + Immich\n")
    logger.info("Starting photo cleanup")
    logger.info("Configuration:")
    logger.info(f"  Immich Server: {config.server}")
    logger.info(f"  Device Path:   {config.scan_path}")
    logger.info(f"  Age Threshold: {config.days_old} days")
    logger.info(f"  Dry Run:       {config.dry_run}")
    logger.info(f"  Verbose:       {config.verbose}")

    device = AdbDevice(
        adb_path=settings.adb_path,
        serial=args.serial or settings.device_serial,
        command_timeout=settings.adb_command_timeout_sec,
        listing_timeout=settings.listing_timeout_sec,
    )
    with ImmichClient(
        config.server,
        config.api_key,
        timeout=settings.request_timeout_sec,
        connect_timeout=settings.connect_timeout_sec,
    ) as client:
        try:
            run_preflight(config, device, client)
            stats = CleanupPipeline(config, device, client).run()
        except PreflightError as e:
            logger.error(e.message)
            for hint in e.hints:
                logger.error(hint)
            return 1

    if args.json:
        print(render_summary_json(stats, config.dry_run))
    else:
        print(render_summary(stats, config.dry_run))
    logger.info(f"Log file: {log_file}")
    logger.info("Cleanup complete")
    return 0


if __name__ == "__main__":
    sys.exit(main())
