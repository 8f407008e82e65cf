"""
Report Domain Entities
======================

Value types for the report pipeline: a parsed transaction row and the
timing metrics kept across runs.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from src.config import ReportType


@dataclass(frozen=True)
class TransactionRow:
    """One line of a staged transaction file: date, account, -, debit, credit."""
    date: str
    account: str
    debit: float = 0.0
    credit: float = 0.0

    @property
    def amount(self) -> float:
        """Signed movement of the row (debit minus credit)."""
        return self.debit - self.credit


@dataclass
class ReportTimeMetrics:
    """Durations in milliseconds, per report and for a whole run."""
    accounts: float = 0.0
    yearly: float = 0.0
    fs: float = 0.0
    total: float = 0.0

    def get(self, name: str) -> float:
        return getattr(self, name)

    def set(self, name: str, value: float) -> None:
        if name not in ("accounts", "yearly", "fs", "total"):
            raise KeyError(name)
        setattr(self, name, value)

    def to_dict(self) -> dict:
        return {
            "accounts": self.accounts,
            "yearly": self.yearly,
            "fs": self.fs,
            "total": self.total,
        }


@dataclass
class ReportMetrics:
    """
    Performance metrics for report generation.

    ``runs`` counts completed full runs only. Individual generators read it
    for their running average but never advance it.
    """

    last_run_time: ReportTimeMetrics = field(default_factory=ReportTimeMetrics)
    average_run_time: ReportTimeMetrics = field(default_factory=ReportTimeMetrics)
    runs: int = 0
    last_run: Optional[datetime] = None

    def copy(self) -> "ReportMetrics":
        return ReportMetrics(
            last_run_time=ReportTimeMetrics(**self.last_run_time.to_dict()),
            average_run_time=ReportTimeMetrics(**self.average_run_time.to_dict()),
            runs=self.runs,
            last_run=self.last_run,
        )

    def to_dict(self) -> dict:
        """Convert to dictionary for API responses."""
        return {
            "last_run_time": self.last_run_time.to_dict(),
            "average_run_time": self.average_run_time.to_dict(),
            "runs": self.runs,
            "last_run": self.last_run.isoformat() if self.last_run else None,
        }


def output_filename(report: ReportType) -> str:
    """File name a report is written to (and excluded from input as)."""
    return f"{report.value}.csv"
