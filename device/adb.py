"""ADB-backed device transport.

Every operation is a single blocking ``adb`` invocation with a timeout.
Remote shell arguments are quoted with ``shlex.quote`` since ``adb shell``
hands the joined command line to the device's shell.
"""

from __future__ import annotations

import shlex
import subprocess
from collections.abc import Iterator, Sequence
from dataclasses import dataclass

from loguru import logger

from device.base_device import DeviceTransport
from processor.errors import DeviceCommandError, ListingFailedError

LISTING_FORMAT = "%T@ %p\\n"


@dataclass(frozen=True)
class DeviceInfo:
    model: str
    android_version: str


def build_find_command(root: str, extensions: Sequence[str]) -> str:
    """Remote ``find`` for regular files directly in root, any-case extension."""
    name_expr = " -o ".join(f"-iname {shlex.quote('*.' + ext)}" for ext in extensions)
    return (
        f"find {shlex.quote(root)} -maxdepth 1 -type f "
        f"\\( {name_expr} \\) -printf '{LISTING_FORMAT}'"
    )


def parse_devices_output(output: str) -> tuple[list[str], list[tuple[str, str]]]:
    """Split ``adb devices`` output into ready serials and (serial, state) others."""
    ready: list[str] = []
    others: list[tuple[str, str]] = []
    for raw in output.splitlines():
        line = raw.strip()
        if not line or line.startswith("List of devices") or line.startswith("*"):
            continue
        parts = line.split()
        if len(parts) < 2:
            continue
        serial, state = parts[0], parts[1]
        if state == "device":
            ready.append(serial)
        else:
            others.append((serial, state))
    return ready, others


class AdbDevice(DeviceTransport):
    """One Android device reached through the ``adb`` executable."""

    def __init__(
        self,
        adb_path: str = "adb",
        serial: str | None = None,
        command_timeout: float = 60.0,
        listing_timeout: float = 600.0,
    ):
        self.adb_path = adb_path
        self.serial = serial or None
        self.command_timeout = command_timeout
        self.listing_timeout = listing_timeout

    # ── Low level ──

    def _base_args(self) -> list[str]:
        args = [self.adb_path]
        if self.serial:
            args += ["-s", self.serial]
        return args

    def _run(self, args: list[str], timeout: float | None = None) -> subprocess.CompletedProcess:
        label = " ".join(args)
        try:
            return subprocess.run(
                self._base_args() + args,
                capture_output=True,
                encoding="utf-8",
                errors="surrogateescape",
                timeout=timeout or self.command_timeout,
            )
        except FileNotFoundError as e:
            raise DeviceCommandError(label, f"adb executable not found ({self.adb_path})") from e
        except subprocess.TimeoutExpired as e:
            raise DeviceCommandError(label, f"timed out after {e.timeout}s") from e

    def shell(self, command: str, timeout: float | None = None) -> subprocess.CompletedProcess:
        return self._run(["shell", command], timeout=timeout)

    def _shell_output(self, command: str) -> str:
        result = self.shell(command)
        if result.returncode != 0:
            raise DeviceCommandError(command, (result.stderr or "").strip() or f"exit {result.returncode}")
        return result.stdout.replace("\r", "")

    # ── Connection ──

    def start_server(self) -> None:
        try:
            self._run(["start-server"])
        except DeviceCommandError as e:
            logger.debug(f"[adb] start-server failed: {e}")

    def list_devices(self) -> tuple[list[str], list[tuple[str, str]]]:
        result = self._run(["devices"])
        return parse_devices_output(result.stdout)

    def device_info(self) -> DeviceInfo:
        def _prop(name: str) -> str:
            try:
                return self._shell_output(f"getprop {name}").strip() or "unknown"
            except DeviceCommandError:
                return "unknown"

        return DeviceInfo(
            model=_prop("ro.product.model"),
            android_version=_prop("ro.build.version.release"),
        )

    # ── DeviceTransport ──

    def list_files(self, root: str, extensions: Sequence[str]) -> Iterator[str]:
        command = build_find_command(root, extensions)
        logger.debug(f"[adb] listing: {command}")
        try:
            result = self.shell(command, timeout=self.listing_timeout)
        except DeviceCommandError as e:
            raise ListingFailedError(f"Failed to list files in {root}: {e.detail}") from e

        if result.returncode != 0:
            detail = (result.stderr or "").strip() or f"exit {result.returncode}"
            raise ListingFailedError(
                f"Failed to list files in {root}: {detail}",
                hints=["Check that the device is still connected and the path is readable"],
            )

        lines = result.stdout.replace("\r", "").splitlines()
        logger.debug(f"[adb] listing returned {len(lines)} lines")
        return iter(lines)

    def file_size(self, path: str) -> int:
        command = f"stat -c %s {shlex.quote(path)}"
        output = self._shell_output(command).strip()
        try:
            return int(output)
        except ValueError as e:
            raise DeviceCommandError(command, f"unexpected output {output!r}") from e

    def delete_file(self, path: str) -> bool:
        try:
            result = self.shell(f"rm {shlex.quote(path)}")
        except DeviceCommandError as e:
            logger.debug(f"[adb] rm failed: {e}")
            return False
        if result.returncode != 0:
            logger.debug(f"[adb] rm exit {result.returncode}: {(result.stderr or '').strip()}")
            return False
        return True

    def path_exists(self, root: str) -> bool:
        try:
            result = self.shell(f"[ -d {shlex.quote(root)} ]")
        except DeviceCommandError:
            return False
        return result.returncode == 0

    def count_entries(self, root: str) -> int | None:
        try:
            output = self._shell_output(f"ls -1 {shlex.quote(root)} 2>/dev/null | wc -l")
            return int(output.strip())
        except (DeviceCommandError, ValueError):
            return None

    def __repr__(self):
        return f"AdbDevice(serial={self.serial or 'auto'})"
