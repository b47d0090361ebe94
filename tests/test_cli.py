"""Command line entry point: argument handling and exit status."""

import json
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

import pytest
from loguru import logger

from conftest import FakeDevice, FakeOracle
from processor.errors import ListingFailedError, MissingDependencyError
from processor.models import SyncStatus
from scripts import prune_synced_photos as cli


class FakeCatalog(FakeOracle):
    def __init__(self, *args, **kwargs):
        super().__init__(statuses={"b.jpg": SyncStatus.NOT_SYNCED})

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return None


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path):
    for var in ("IMMICH_SERVER", "IMMICH_API_KEY", "IMMICH_DCIM_PATH", "IMMICH_DAYS_OLD", "IMMICH_DRY_RUN"):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setenv("IMMICH_LOG_DIR", str(tmp_path))
    monkeypatch.setattr(cli, "load_dotenv", lambda *a, **k: False)
    yield
    logger.remove()


def test_parser_defaults_leave_settings_in_charge():
    args = cli.build_parser().parse_args([])
    assert args.dry_run is None
    assert args.days is None
    assert args.verbose is False


def test_parser_execute_flags():
    assert cli.build_parser().parse_args(["--execute"]).dry_run is False
    assert cli.build_parser().parse_args(["--no-dry-run"]).dry_run is False
    assert cli.build_parser().parse_args(["--dry-run"]).dry_run is True


def test_parser_rejects_non_numeric_days():
    with pytest.raises(SystemExit) as exc:
        cli.build_parser().parse_args(["--days", "ten"])
    assert exc.value.code == 2


def test_parser_rejects_conflicting_modes():
    with pytest.raises(SystemExit):
        cli.build_parser().parse_args(["--dry-run", "--execute"])


def test_fatal_precondition_exits_1(monkeypatch, tmp_path):
    def fail(*args):
        raise MissingDependencyError("Missing required dependencies: adb")

    monkeypatch.setattr(cli, "run_preflight", fail)
    pipeline_runs = []
    monkeypatch.setattr(cli.CleanupPipeline, "run", lambda self: pipeline_runs.append(1))

    assert cli.main(["--api-key", "k", "--server", "http://immich.local:2283"]) == 1
    assert pipeline_runs == []


def test_listing_failure_exits_1(monkeypatch):
    monkeypatch.setattr(cli, "run_preflight", lambda *a: None)
    monkeypatch.setattr(cli, "ImmichClient", FakeCatalog)
    monkeypatch.setattr(
        cli, "AdbDevice",
        lambda **kw: FakeDevice(listing_error=ListingFailedError("find failed")),
    )
    assert cli.main(["--api-key", "k"]) == 1


def test_completed_run_prints_json_summary(monkeypatch, capsys, tmp_path):
    device = FakeDevice(
        lines=["1000000000 /root/a.jpg", "1000000001 /root/b.jpg", "bad line"],
        sizes={"/root/a.jpg": 2048},
    )
    monkeypatch.setattr(cli, "run_preflight", lambda *a: None)
    monkeypatch.setattr(cli, "ImmichClient", FakeCatalog)
    monkeypatch.setattr(cli, "AdbDevice", lambda **kw: device)

    code = cli.main(["--json", "--api-key", "k", "--path", "/root", "--days", "1"])

    assert code == 0
    out = capsys.readouterr().out
    summary = json.loads(out[out.index("{"):])
    assert summary["scanned"] == 3
    assert summary["deleted"] == 1
    assert summary["skipped_not_synced"] == 1
    assert summary["errored"] == 1
    assert summary["dry_run"] is True
    assert device.delete_calls == []
    assert list(tmp_path.glob("photo_cleanup_*.log"))


def test_invalid_path_is_usage_error():
    with pytest.raises(SystemExit) as exc:
        cli.main(["--path", "relative/dir"])
    assert exc.value.code == 2


def test_malformed_environment_value_is_usage_error(monkeypatch, capsys):
    monkeypatch.setenv("IMMICH_DAYS_OLD", "abc")
    with pytest.raises(SystemExit) as exc:
        cli.main([])
    assert exc.value.code == 2
    assert "days_old" in capsys.readouterr().err
