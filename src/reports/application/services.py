"""
Report Application Services
===========================

Application services for the report pipeline:
- ReportTracker: owner of per-report status strings and run metrics
- ReportsService: runs the three generators and records their outcome
- ReportRunner: starts a run in the background and returns immediately

Status and metrics are process-local. Every read and write goes through
the tracker's lock, so snapshots are consistent.
"""

import asyncio
import threading
import time
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Iterable, List, Optional, Set

from src.config import REPORT_TYPES, REPORTS_STATUS_CACHE_KEY, ReportStatus, ReportType
from src.core import ApplicationException
from src.infrastructure.cache import ICache
from src.reports.domain import (
    ReportMetrics,
    TransactionRow,
    build_accounts_report,
    build_fs_report,
    build_yearly_report,
    output_filename,
    parse_transactions,
)
from src.shared.infrastructure.logging import get_logger

logger = get_logger(__name__)


# ========== Storage Interface (Dependency Inversion) ==========

class IReportStorage(ABC):
    """Interface for reading staged input and writing report output."""

    @abstractmethod
    def ensure_directories(self) -> None:
        """Create the staging and output directories if absent."""
        pass

    @abstractmethod
    async def list_input_files(self, exclude: Optional[str] = None) -> List[str]:
        """Names of staged ``.csv`` files in sorted order."""
        pass

    @abstractmethod
    async def read_input(self, name: str) -> str:
        pass

    @abstractmethod
    async def write_output(self, name: str, content: str) -> None:
        pass


# ========== Tracker ==========

class ReportTracker:
    """
    Lock-guarded status and metrics for report runs.

    Running averages use ``(old * runs + duration) / (runs + 1)`` where
    ``runs`` is the shared counter before the current run completes.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._states: Dict[str, str] = {name: ReportStatus.IDLE for name in REPORT_TYPES}
        self._metrics = ReportMetrics()

    def set_status(self, report: str, status: str) -> None:
        with self._lock:
            self._states[report] = status

    def state(self, report: str) -> str:
        with self._lock:
            return self._states[report]

    def states(self) -> Dict[str, str]:
        with self._lock:
            return dict(self._states)

    def record_report_duration(self, report: str, duration_ms: float) -> None:
        """Record one generator's duration without advancing the run counter."""
        with self._lock:
            self._record(report, duration_ms)

    def record_run(self, total_ms: float, finished_at: Optional[datetime] = None) -> None:
        """Record a completed full run and advance the run counter."""
        with self._lock:
            self._record("total", total_ms)
            self._metrics.runs += 1
            self._metrics.last_run = finished_at or datetime.now(timezone.utc)

    def metrics(self) -> ReportMetrics:
        """Snapshot copy of the metrics."""
        with self._lock:
            return self._metrics.copy()

    def _record(self, name: str, duration_ms: float) -> None:
        runs = self._metrics.runs
        average = self._metrics.average_run_time.get(name)
        self._metrics.last_run_time.set(name, duration_ms)
        self._metrics.average_run_time.set(name, (average * runs + duration_ms) / (runs + 1))


# ========== Reports Service ==========

class ReportsService:
    """
    Service for generating the accounts, yearly and fs reports.

    Generators never raise: a failure becomes an ``error: <message>``
    status and a ``False`` return value.
    """

    def __init__(
        self,
        storage: IReportStorage,
        tracker: ReportTracker,
        parallel: bool = True
    ):
        self._storage = storage
        self._tracker = tracker
        self._parallel = parallel

    @property
    def tracker(self) -> ReportTracker:
        return self._tracker

    def ensure_directories(self) -> None:
        self._storage.ensure_directories()

    async def generate_accounts(self) -> bool:
        # accounts reads every staged file, including one named accounts.csv
        return await self._generate(ReportType.ACCOUNTS, build_accounts_report, exclude_own_output=False)

    async def generate_yearly(self) -> bool:
        return await self._generate(ReportType.YEARLY, build_yearly_report, exclude_own_output=True)

    async def generate_fs(self) -> bool:
        return await self._generate(ReportType.FINANCIAL_STATEMENTS, build_fs_report, exclude_own_output=True)

    async def run_all(self) -> bool:
        """
        Run all three generators and record the run.

        Returns:
            False only when the run itself failed; individual report
            failures show in their status strings.
        """
        start = time.perf_counter()
        logger.info("Starting report processing", extra={"parallel": self._parallel})

        try:
            if self._parallel:
                await asyncio.gather(
                    self.generate_accounts(),
                    self.generate_yearly(),
                    self.generate_fs(),
                )
            else:
                await self.generate_accounts()
                await self.generate_yearly()
                await self.generate_fs()

            total_ms = (time.perf_counter() - start) * 1000
            self._tracker.record_run(total_ms)
        except Exception:
            logger.exception("Error processing reports")
            return False

        logger.info("Report processing completed", extra={
            "duration_seconds": round(total_ms / 1000, 2),
            "states": self._tracker.states(),
        })
        return True

    def get_report_status(self) -> Dict[str, Any]:
        """Status strings keyed by output file name, plus metrics."""
        states = self._tracker.states()
        status: Dict[str, Any] = {
            output_filename(report): states[report.value] for report in ReportType
        }
        status["metrics"] = self._tracker.metrics().to_dict()
        return status

    async def _generate(
        self,
        report: ReportType,
        build: Callable[[Iterable[TransactionRow]], str],
        exclude_own_output: bool
    ) -> bool:
        name = report.value
        filename = output_filename(report)
        self._tracker.set_status(name, ReportStatus.STARTING)
        start = time.perf_counter()

        try:
            rows = await self._load_rows(exclude=filename if exclude_own_output else None)
            content = build(rows)
            await self._storage.write_output(filename, content)
        except Exception as e:
            message = e.message if isinstance(e, ApplicationException) else str(e)
            self._tracker.set_status(name, f"{ReportStatus.ERROR}: {message}")
            logger.error("Report generation failed", extra={
                "report": name,
                "error": message,
            }, exc_info=True)
            return False

        elapsed_ms = (time.perf_counter() - start) * 1000
        self._tracker.set_status(name, f"{ReportStatus.FINISHED} in {elapsed_ms / 1000:.2f} seconds")
        self._tracker.record_report_duration(name, elapsed_ms)
        logger.info("Report generated", extra={"report": name, "duration_ms": round(elapsed_ms, 2)})
        return True

    async def _load_rows(self, exclude: Optional[str]) -> List[TransactionRow]:
        rows: List[TransactionRow] = []
        for name in await self._storage.list_input_files(exclude=exclude):
            content = await self._storage.read_input(name)
            rows.extend(parse_transactions(content))
        return rows


# ========== Background Runner ==========

class ReportRunner:
    """
    Fire-and-forget trigger for report runs.

    The cached status is invalidated before a run starts and again when it
    finishes. Running tasks are referenced until done.
    """

    def __init__(self, service: ReportsService, cache: ICache):
        self._service = service
        self._cache = cache
        self._tasks: Set[asyncio.Task] = set()

    @property
    def is_running(self) -> bool:
        return any(not task.done() for task in self._tasks)

    async def trigger(self) -> asyncio.Task:
        """Start a report run in the background and return its task."""
        await self._cache.delete(REPORTS_STATUS_CACHE_KEY)

        task = asyncio.create_task(self._run(), name="report-run")
        self._tasks.add(task)
        task.add_done_callback(self._on_done)

        logger.info("Report generation started in background")
        return task

    async def wait_idle(self) -> None:
        """Wait for every running report task to finish."""
        if self._tasks:
            await asyncio.wait(set(self._tasks))

    async def _run(self) -> bool:
        try:
            return await self._service.run_all()
        finally:
            await self._cache.delete(REPORTS_STATUS_CACHE_KEY)

    def _on_done(self, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            logger.warning("Report task cancelled")
            return
        exc = task.exception()
        if exc is not None:
            logger.error("Report task failed", extra={"error": str(exc)}, exc_info=exc)
        elif task.result() is False:
            logger.error("Report run finished with errors")
