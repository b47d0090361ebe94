"""Fatal precondition checks run before the pipeline starts.

Each check either returns normally or raises a PreflightError subclass with
operator hints. Nothing on the device is modified here.
"""

from __future__ import annotations

import shutil
from collections.abc import Callable, Sequence

import httpx
from loguru import logger

from catalog.immich import PLACEHOLDER_SERVER, ImmichClient
from device.adb import AdbDevice, DeviceInfo
from processor.errors import (
    CatalogConfigError,
    CatalogUnreachableError,
    DeviceCommandError,
    DeviceUnavailableError,
    MissingDependencyError,
    ScanPathMissingError,
)
from processor.models import RunConfig

COMMON_CAMERA_PATHS = [
    "/sdcard/DCIM/Camera",
    "/sdcard/DCIM",
    "/storage/emulated/0/DCIM/Camera",
]

_PING_HINTS = {
    401: "Invalid API key",
    403: "API key lacks required permissions",
    404: "API endpoint not found - check server URL",
}


def check_dependencies(tools: Sequence[str], which: Callable[[str], str | None] = shutil.which) -> None:
    logger.info("Checking dependencies...")
    missing = []
    for tool in tools:
        found = which(tool)
        if found:
            logger.debug(f"Found: {tool} ({found})")
        else:
            logger.debug(f"Missing: {tool}")
            missing.append(tool)

    if missing:
        raise MissingDependencyError(
            f"Missing required dependencies: {' '.join(missing)}",
            hints=["Install Android platform tools, e.g.: sudo apt install adb"],
        )
    logger.debug("All dependencies satisfied")


def check_device(device: AdbDevice) -> DeviceInfo:
    """Verify a device is attached and pin the transport to one serial."""
    logger.info("Checking ADB connection...")
    device.start_server()

    try:
        ready, others = device.list_devices()
    except DeviceCommandError as e:
        raise DeviceUnavailableError(f"Could not query ADB devices: {e}") from e

    for serial, state in others:
        logger.warning(f"Ignoring device {serial} ({state})")

    no_device_hints = [
        "Connect your phone via USB and enable USB debugging",
        "Or connect wirelessly with: adb connect <phone-ip>:5555",
    ]
    if device.serial:
        if device.serial not in ready:
            raise DeviceUnavailableError(
                f"Configured device {device.serial} is not connected", hints=no_device_hints,
            )
    elif not ready:
        raise DeviceUnavailableError("No Android device connected via ADB", hints=no_device_hints)
    else:
        if len(ready) > 1:
            logger.warning("Multiple devices connected. Using first device.")
            for serial in ready:
                logger.warning(f"  {serial}")
        device.serial = ready[0]

    info = device.device_info()
    logger.info(f"Connected to: {info.model} (Android {info.android_version})")
    return info


def check_scan_path(device: AdbDevice, path: str) -> None:
    logger.info(f"Checking if path exists on device: {path}")
    if not device.path_exists(path):
        raise ScanPathMissingError(
            f"Path does not exist on device: {path}",
            hints=["Common camera paths:"] + [f"  {p}" for p in COMMON_CAMERA_PATHS],
        )
    count = device.count_entries(path)
    if count is not None:
        logger.info(f"Found {count} files in {path}")


def check_catalog(client: ImmichClient, config: RunConfig) -> str:
    """Validate credentials and reachability. Returns the server version."""
    logger.info("Testing Immich API connection...")

    if not config.api_key:
        raise CatalogConfigError(
            "Immich API key not set",
            hints=[
                "Get your API key from: Immich Web UI -> Account Settings -> API Keys",
                "Then set it with --api-key or IMMICH_API_KEY",
            ],
        )
    if config.server.rstrip("/") == PLACEHOLDER_SERVER or "XX" in config.server:
        raise CatalogConfigError(
            "Immich server URL not configured",
            hints=["Set it with --server or IMMICH_SERVER"],
        )

    logger.debug(f"Testing connection to {config.server}")
    try:
        status = client.ping()
    except httpx.HTTPError as e:
        raise CatalogUnreachableError(
            f"Failed to connect to Immich server at {config.server}",
            hints=[f"Check that the server is reachable and the URL is correct ({e})"],
        ) from e

    if status != 200:
        hint = _PING_HINTS.get(status)
        if hint is None and status >= 500:
            hint = "Server error - Immich may be down"
        raise CatalogUnreachableError(f"Immich API returned HTTP {status}", hints=[hint] if hint else [])

    version = client.server_version()
    logger.info(f"Connected to Immich server v{version}")
    return version


def run_preflight(config: RunConfig, device: AdbDevice, client: ImmichClient) -> None:
    check_dependencies([device.adb_path])
    check_device(device)
    check_scan_path(device, config.scan_path)
    check_catalog(client, config)
