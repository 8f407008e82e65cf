"""
ACME Operations Backend - Main Application
==========================================

Operational backend for company tickets and financial reports.

Modules:
- Ticket Router: rule-driven ticket creation with transactional strike-off
- Report Pipeline: CSV aggregation into accounts, yearly and fs reports

Clean Architecture Layers:
- Interfaces: FastAPI controllers
- Application: Services and DTOs
- Domain: Entities, routing rules, report aggregation
- Infrastructure: Database, cache, filesystem
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

# Configuration
from src.config import settings

# Infrastructure
from src.infrastructure.cache import create_cache
from src.infrastructure.database import close_database, create_tables, init_database, ping_database

# Report Pipeline
from src.reports.application import ReportRunner, ReportsService, ReportTracker
from src.reports.infrastructure import FileSystemReportStorage

# Module Routers
from src.reports.interfaces import reports_router
from src.tickets.interfaces import tickets_router

# Middleware and Logging
from src.shared.api.middleware import (
    CorrelationIDMiddleware,
    LoggingMiddleware,
    register_exception_handlers,
)
from src.shared.infrastructure.logging import get_logger, setup_logging

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator:
    """
    Application lifespan manager.

    STARTUP:
    1. Setup structured logging
    2. Initialize database and create tables
    3. Initialize cache
    4. Wire the report pipeline

    SHUTDOWN:
    1. Wait for running report tasks
    2. Close cache
    3. Close database connections
    """
    # === STARTUP ===
    setup_logging(settings.log_level, settings.environment)
    logger.info("Starting ACME Operations Backend", extra={
        "version": settings.app_version,
        "environment": settings.environment
    })

    app.state.settings = settings

    logger.info("Initializing database")
    init_database(settings.database_url)

    # Create tables (no migrations in this service)
    # Note: If database is not available, the server will start but
    # ticket endpoints will fail
    logger.info("Creating database tables")
    try:
        await create_tables()
    except Exception as e:
        logger.warning(f"Database not available - running in degraded mode: {e}")

    cache = create_cache(settings.redis_url, settings.cache_ttl_seconds)
    app.state.cache = cache

    storage = FileSystemReportStorage(settings.reports_tmp_dir, settings.reports_output_dir)
    reports_service = ReportsService(
        storage,
        ReportTracker(),
        parallel=settings.reports_parallel_processing
    )
    reports_service.ensure_directories()
    app.state.reports_service = reports_service
    app.state.report_runner = ReportRunner(reports_service, cache)

    logger.info("ACME Operations Backend started successfully")

    yield  # Application runs here

    # === SHUTDOWN ===
    logger.info("Shutting down ACME Operations Backend")

    await app.state.report_runner.wait_idle()
    await cache.close()
    await close_database()

    logger.info("ACME Operations Backend shutdown complete")


# Create FastAPI application
app = FastAPI(
    title="ACME Operations API",
    description="""
    ## ACME Operations Backend

    ---

    ### 🎫 Ticket Router

    **Endpoints:**
    - `GET /api/v1/tickets` - List tickets with company and assignee
    - `POST /api/v1/tickets` - Create a ticket

    **Rules:**

    | Type | Category | Assignee |
    |------|----------|----------|
    | managementReport | accounting | newest accountant |
    | registrationAddressChange | corporate | corporate secretary, else director |
    | strikeOff | management | director; resolves all other open tickets |

    ---

    ### 📊 Report Pipeline

    **Endpoints:**
    - `GET /api/v1/reports` - Report status and timing metrics
    - `POST /api/v1/reports` - Generate reports in the background

    ---
    """,
    version=settings.app_version,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan
)

# === CORS Middleware ===
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# === Custom Middleware (from shared) ===
app.add_middleware(CorrelationIDMiddleware)
app.add_middleware(LoggingMiddleware)
register_exception_handlers(app)

# === Include Module Routers ===
app.include_router(tickets_router)
app.include_router(reports_router)


# === Health Check Endpoint ===

@app.get("/health", tags=["Health"], responses={
    200: {
        "description": "Service health",
        "content": {
            "application/json": {
                "example": {
                    "status": "healthy",
                    "version": "1.0.0",
                    "environment": "development",
                    "checks": {
                        "database": "connected",
                        "cache": "connected",
                        "reports": "idle"
                    }
                }
            }
        }
    }
})
async def health_check(request: Request):
    """
    Health check endpoint for load balancers and orchestrators.

    Returns service health status including:
    - Database connectivity
    - Cache connectivity
    - Report pipeline state
    """
    checks = {
        "database": "unavailable",
        "cache": "unavailable",
        "reports": "running" if request.app.state.report_runner.is_running else "idle"
    }

    try:
        if await ping_database():
            checks["database"] = "connected"
    except Exception as e:
        checks["database"] = f"error: {str(e)}"

    try:
        if await request.app.state.cache.ping():
            checks["cache"] = "connected"
    except Exception as e:
        checks["cache"] = f"error: {str(e)}"

    healthy = checks["database"] == "connected" and checks["cache"] == "connected"

    return {
        "status": "healthy" if healthy else "degraded",
        "version": settings.app_version,
        "environment": settings.environment,
        "checks": checks
    }


@app.get("/", tags=["Root"])
async def root():
    """Root endpoint with API information."""
    return {
        "service": settings.app_name,
        "version": settings.app_version,
        "architecture": "Clean Architecture / Modular Monolith",
        "docs": "/docs",
        "health": "/health",
        "modules": {
            "tickets": {
                "prefix": "/api/v1/tickets",
                "endpoints": [
                    "GET /api/v1/tickets - List tickets",
                    "POST /api/v1/tickets - Create ticket"
                ]
            },
            "reports": {
                "prefix": "/api/v1/reports",
                "endpoints": [
                    "GET /api/v1/reports - Report status",
                    "POST /api/v1/reports - Generate reports"
                ]
            }
        }
    }


# === Development Entry Point ===

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "src.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.environment == "development",
        log_level="info"
    )
