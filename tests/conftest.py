"""Shared fakes for the device transport and the sync oracle."""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

import pytest

from device.base_device import DeviceTransport
from processor.errors import DeviceCommandError
from processor.models import RunConfig, SyncStatus


class FakeDevice(DeviceTransport):
    def __init__(self, lines=None, sizes=None, failing_deletes=(), listing_error=None):
        self.lines = list(lines or [])
        self.sizes = dict(sizes or {})
        self.failing_deletes = set(failing_deletes)
        self.listing_error = listing_error
        self.list_calls = []
        self.size_calls = []
        self.delete_calls = []

    def list_files(self, root, extensions):
        self.list_calls.append((root, tuple(extensions)))
        if self.listing_error is not None:
            raise self.listing_error
        return iter(list(self.lines))

    def file_size(self, path):
        self.size_calls.append(path)
        if path not in self.sizes:
            raise DeviceCommandError(f"stat -c %s {path}", "No such file")
        return self.sizes[path]

    def delete_file(self, path):
        self.delete_calls.append(path)
        return path not in self.failing_deletes

    def path_exists(self, root):
        return True


class FakeOracle:
    def __init__(self, statuses=None, default=SyncStatus.SYNCED):
        self.statuses = dict(statuses or {})
        self.default = default
        self.calls = []

    def sync_status(self, filename):
        self.calls.append(filename)
        return self.statuses.get(filename, self.default)


@pytest.fixture
def make_config():
    def _make(**overrides):
        values = dict(
            server="http://immich.local:2283",
            api_key="secret",
            scan_path="/root",
            days_old=1,
            dry_run=True,
        )
        values.update(overrides)
        return RunConfig(**values)

    return _make
