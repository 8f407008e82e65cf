"""
Integration tests for the report pipeline against real directories.
"""
import asyncio

import pytest

from src.config import REPORTS_STATUS_CACHE_KEY
from src.infrastructure.cache import InMemoryCache
from src.reports.application import ReportRunner, ReportsService, ReportTracker
from src.reports.infrastructure import FileSystemReportStorage


def _service(staging, parallel: bool = True) -> ReportsService:
    storage = FileSystemReportStorage(staging["tmp"], staging["out"])
    return ReportsService(storage, ReportTracker(), parallel=parallel)


def _stage(staging, name: str, *lines: str) -> None:
    (staging["tmp"] / name).write_text("\n".join(lines), encoding="utf-8")


def _output(staging, name: str) -> str:
    return (staging["out"] / name).read_text(encoding="utf-8")


# ========== Individual reports ==========

async def test_accounts_report(staging):
    _stage(staging, "ledger.csv", "2023-01-01,Cash,,1000,0", "2023-01-02,Cash,,0,300")
    service = _service(staging)

    assert await service.generate_accounts() is True

    assert _output(staging, "accounts.csv") == "Account,Balance\nCash,700.00"
    status = service.tracker.state("accounts")
    assert status.startswith("finished in ")
    assert status.endswith(" seconds")


async def test_accounts_report_reads_files_in_sorted_order(staging):
    _stage(staging, "b.csv", "2023-01-01,Inventory,,1,0")
    _stage(staging, "a.csv", "2023-01-01,Cash,,1,0")
    _stage(staging, "notes.txt", "2023-01-01,Ignored,,1,0")

    await _service(staging).generate_accounts()

    assert _output(staging, "accounts.csv") == "Account,Balance\nCash,1.00\nInventory,1.00"


async def test_yearly_report_has_one_row_per_year(staging):
    _stage(
        staging, "ledger.csv",
        "2024-02-01,Cash,,10,0",
        "2023-05-01,Cash,,100,0",
        "2023-05-02,Sales Revenue,,0,100",
    )

    assert await _service(staging).generate_yearly() is True

    assert _output(staging, "yearly.csv") == "Financial Year,Cash Balance\n2023,100.00\n2024,10.00"


async def test_yearly_and_fs_skip_their_own_output_name(staging):
    _stage(staging, "ledger.csv", "2023-01-01,Cash,,10,0")
    _stage(staging, "yearly.csv", "2023-01-01,Cash,,5000,0")
    _stage(staging, "fs.csv", "2023-01-01,Cash,,7000,0")
    service = _service(staging)

    await service.generate_yearly()
    await service.generate_fs()

    assert _output(staging, "yearly.csv").endswith("2023,7010.00")
    assert "Cash,5010.00" in _output(staging, "fs.csv").split("\n")


async def test_fs_report_excludes_unknown_accounts(staging):
    _stage(staging, "ledger.csv", "2023-01-01,Mystery,,500,0", "2023-01-01,Cash,,20,0")

    assert await _service(staging).generate_fs() is True

    text = _output(staging, "fs.csv")
    assert "Mystery" not in text
    assert "Total Assets,20.00" in text
    assert text.split("\n")[-1] == "Assets = Liabilities + Equity, 20.00 = 0.00"


async def test_bad_date_fails_only_the_yearly_report(staging):
    _stage(staging, "ledger.csv", "someday,Cash,,10,0")
    service = _service(staging)

    assert await service.run_all() is True

    states = service.tracker.states()
    assert states["yearly"] == "error: Invalid date 'someday'"
    assert states["accounts"].startswith("finished in ")
    assert states["fs"].startswith("finished in ")
    assert not (staging["out"] / "yearly.csv").exists()


async def test_missing_staging_directory_sets_error_status(tmp_path):
    storage = FileSystemReportStorage(tmp_path / "absent", tmp_path / "out")
    service = ReportsService(storage, ReportTracker())

    assert await service.generate_accounts() is False

    assert service.tracker.state("accounts").startswith("error: ")
    assert service.tracker.metrics().last_run_time.accounts == 0.0


# ========== Runs and status ==========

@pytest.mark.parametrize("parallel", [True, False])
async def test_run_all_records_metrics(staging, parallel):
    _stage(staging, "ledger.csv", "2023-01-01,Cash,,1000,0")
    service = _service(staging, parallel=parallel)

    assert await service.run_all() is True

    metrics = service.tracker.metrics()
    assert metrics.runs == 1
    assert metrics.last_run is not None
    for name in ("accounts", "yearly", "fs", "total"):
        assert metrics.last_run_time.get(name) >= 0
    assert {p.name for p in staging["out"].iterdir()} == {"accounts.csv", "yearly.csv", "fs.csv"}


async def test_status_reads_are_idempotent(staging):
    service = _service(staging)

    first = service.get_report_status()
    second = service.get_report_status()

    assert first == second
    assert first["accounts.csv"] == "idle"
    assert first["yearly.csv"] == "idle"
    assert first["fs.csv"] == "idle"
    assert first["metrics"]["runs"] == 0


async def test_ensure_directories_creates_missing_paths(tmp_path):
    storage = FileSystemReportStorage(tmp_path / "in" / "tmp", tmp_path / "in" / "out")
    ReportsService(storage, ReportTracker()).ensure_directories()

    assert (tmp_path / "in" / "tmp").is_dir()
    assert (tmp_path / "in" / "out").is_dir()


# ========== Background runner ==========

async def test_runner_invalidates_status_before_and_after_run(staging):
    _stage(staging, "ledger.csv", "2023-01-01,Cash,,1,0")
    service = _service(staging)
    cache = InMemoryCache()
    runner = ReportRunner(service, cache)

    await cache.set(REPORTS_STATUS_CACHE_KEY, {"stale": True})
    task = await runner.trigger()
    assert await cache.get(REPORTS_STATUS_CACHE_KEY) is None

    await cache.set(REPORTS_STATUS_CACHE_KEY, {"stale": True})
    assert await task is True
    assert await cache.get(REPORTS_STATUS_CACHE_KEY) is None
    assert service.tracker.metrics().runs == 1


async def test_runner_trigger_returns_before_run_finishes(staging):
    service = _service(staging)
    runner = ReportRunner(service, InMemoryCache())

    task = await runner.trigger()
    assert runner.is_running

    await runner.wait_idle()
    assert task.done()
    assert not runner.is_running


async def test_runner_survives_pipeline_failure(staging, monkeypatch):
    service = _service(staging)
    runner = ReportRunner(service, InMemoryCache())

    async def broken_run_all():
        raise RuntimeError("boom")

    monkeypatch.setattr(service, "run_all", broken_run_all)

    task = await runner.trigger()
    await asyncio.wait({task})

    assert isinstance(task.exception(), RuntimeError)
    assert not runner.is_running
