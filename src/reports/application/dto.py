"""
Report Application DTOs
=======================

Response models for the report endpoints.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class ReportTimeMetricsResponse(BaseModel):
    """Durations in milliseconds."""
    accounts: float = Field(0.0, examples=[1234.56])
    yearly: float = Field(0.0, examples=[2345.67])
    fs: float = Field(0.0, examples=[3456.78])
    total: float = Field(0.0, examples=[7890.12])


class ReportMetricsResponse(BaseModel):
    """Performance metrics for report generation."""
    last_run_time: ReportTimeMetricsResponse
    average_run_time: ReportTimeMetricsResponse
    runs: int = Field(..., description="Number of completed report runs", examples=[42])
    last_run: Optional[datetime] = Field(None, description="When the last run completed")


class ReportsStatusResponse(BaseModel):
    """Status of every report plus run metrics."""
    model_config = ConfigDict(populate_by_name=True)

    accounts: str = Field(
        ...,
        alias="accounts.csv",
        description="Accounts report status",
        examples=["finished in 1.23 seconds"],
    )
    yearly: str = Field(
        ...,
        alias="yearly.csv",
        description="Yearly report status",
        examples=["idle"],
    )
    fs: str = Field(
        ...,
        alias="fs.csv",
        description="Financial statement report status",
        examples=["starting"],
    )
    metrics: ReportMetricsResponse


class AsyncProcessingResponse(BaseModel):
    """Response when report generation is started in the background."""
    message: str = Field(..., examples=["Report generation started in background"])
    status: str = Field(..., examples=["processing"])
    check_status_at: str = Field(..., examples=["/api/v1/reports"])
