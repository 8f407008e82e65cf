"""
Report Controllers (API Routes)
===============================

FastAPI routes for the report pipeline: read the status snapshot and start
a run in the background.
"""

from fastapi import APIRouter, Depends, Request, status

from src.config import REPORTS_STATUS_CACHE_KEY, settings
from src.infrastructure.cache import ICache
from src.reports.application import (
    AsyncProcessingResponse,
    ReportRunner,
    ReportsService,
    ReportsStatusResponse,
)
from src.shared.api.dependencies import get_cache
from src.shared.infrastructure.logging import get_logger

logger = get_logger(__name__)
router = APIRouter(prefix="/api/v1/reports", tags=["reports"])


# ========== Dependencies ==========

def get_reports_service(request: Request) -> ReportsService:
    return request.app.state.reports_service


def get_report_runner(request: Request) -> ReportRunner:
    return request.app.state.report_runner


# ========== Route Handlers ==========

@router.get(
    "",
    response_model=ReportsStatusResponse,
    summary="Get report status",
    description="""
    Status of each report (`idle`, `starting`, `finished in N seconds`,
    `error: ...`) plus timing metrics. Reading the status never starts a run.
    """
)
async def get_report_status(
    service: ReportsService = Depends(get_reports_service),
    cache: ICache = Depends(get_cache),
):
    payload = await cache.get(REPORTS_STATUS_CACHE_KEY)
    if payload is None:
        payload = service.get_report_status()
        await cache.set(REPORTS_STATUS_CACHE_KEY, payload, settings.cache_ttl_seconds)
    return payload


@router.post(
    "",
    response_model=AsyncProcessingResponse,
    status_code=status.HTTP_202_ACCEPTED,
    summary="Generate reports",
    description="""
    Start generating `accounts.csv`, `yearly.csv` and `fs.csv` in the
    background. Returns immediately; poll `GET /api/v1/reports` for progress.
    """
)
async def generate_reports(runner: ReportRunner = Depends(get_report_runner)):
    await runner.trigger()

    return AsyncProcessingResponse(
        message="Report generation started in background",
        status="processing",
        check_status_at=router.prefix,
    )


# Export router for inclusion in main app
reports_router = router
