"""Run settings.

Values come from IMMICH_* environment variables (``.env`` is loaded by the
CLI); command line flags override them through ``build_run_config``.
"""

from __future__ import annotations

import dataclasses
import posixpath
from pathlib import Path

from pydantic_settings import BaseSettings

from processor.models import RunConfig


class CleanupSettings(BaseSettings):
    # Immich
    server: str = "http://your-immich-server:2283"
    api_key: str = ""
    request_timeout_sec: float = 30.0
    connect_timeout_sec: float = 10.0

    # Device
    dcim_path: str = "/sdcard/DCIM/Camera"
    adb_path: str = "adb"
    device_serial: str = ""
    adb_command_timeout_sec: float = 60.0
    listing_timeout_sec: float = 600.0

    # Run
    days_old: int = 30
    dry_run: bool = True
    verbose: bool = False
    log_dir: str = str(Path.home())

    model_config = {"env_prefix": "IMMICH_"}


def build_run_config(settings: CleanupSettings, **overrides) -> RunConfig:
    """Merge non-None overrides over settings and validate the result."""
    config = RunConfig(
        server=settings.server,
        api_key=settings.api_key,
        scan_path=settings.dcim_path,
        days_old=settings.days_old,
        dry_run=settings.dry_run,
        verbose=settings.verbose,
    )
    changes = {k: v for k, v in overrides.items() if v is not None}
    if changes:
        config = dataclasses.replace(config, **changes)

    if config.days_old < 0:
        raise ValueError(f"days_old must be >= 0, got {config.days_old}")
    if not config.scan_path or not posixpath.isabs(config.scan_path):
        raise ValueError(f"scan path must be absolute, got {config.scan_path!r}")
    return config
