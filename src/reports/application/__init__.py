"""
Report Application Layer
========================

Contains:
- DTOs: response models for the report endpoints
- Services: tracker, report generation and the background runner
- Interfaces: storage abstraction
"""

from src.reports.application.dto import (
    AsyncProcessingResponse,
    ReportMetricsResponse,
    ReportsStatusResponse,
    ReportTimeMetricsResponse,
)
from src.reports.application.services import (
    IReportStorage,
    ReportRunner,
    ReportsService,
    ReportTracker,
)

__all__ = [
    # DTOs
    "AsyncProcessingResponse",
    "ReportMetricsResponse",
    "ReportsStatusResponse",
    "ReportTimeMetricsResponse",
    # Services
    "ReportRunner",
    "ReportsService",
    "ReportTracker",
    # Interfaces
    "IReportStorage",
]
