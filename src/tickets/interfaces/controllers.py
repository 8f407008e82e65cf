"""
Ticket Controllers (API Routes)
===============================

FastAPI routes for ticket endpoints.

Controllers are thin - they delegate to the ticket router service. Business
conflicts raised by the service become 409 through the shared exception
handlers.
"""

from typing import List

from fastapi import APIRouter, Depends, status

from src.config import TICKETS_CACHE_KEY, settings
from src.core import ResourceNotFoundException
from src.infrastructure.cache import ICache
from src.infrastructure.database import get_session_maker
from src.shared.api.dependencies import get_cache
from src.shared.infrastructure.logging import get_logger, log_latency
from src.tickets.application import (
    CreateTicketRequest,
    TicketDetailResponse,
    TicketResponse,
    TicketRouterService,
)
from src.tickets.infrastructure import SQLAlchemyUnitOfWork

logger = get_logger(__name__)
router = APIRouter(prefix="/api/v1/tickets", tags=["tickets"])


# ========== Example payloads for Swagger ==========

TICKET_RESPONSE_EXAMPLE = {
    "id": 1,
    "type": "managementReport",
    "company_id": 1,
    "assignee_id": 2,
    "status": "open",
    "category": "accounting"
}


# ========== Dependencies ==========

def get_ticket_router_service() -> TicketRouterService:
    """Get ticket router service bound to the application database."""
    session_maker = get_session_maker()
    return TicketRouterService(lambda: SQLAlchemyUnitOfWork(session_maker))


# ========== Route Handlers ==========

@router.get(
    "",
    response_model=List[TicketDetailResponse],
    summary="List all tickets",
    description="""
    Return every ticket with its company and assignee.

    Served from cache for up to an hour; creating a ticket invalidates it.
    """,
    responses={404: {"description": "No tickets found"}}
)
async def list_tickets(
    service: TicketRouterService = Depends(get_ticket_router_service),
    cache: ICache = Depends(get_cache),
):
    payload = await cache.get(TICKETS_CACHE_KEY)

    if payload is None:
        with log_latency(logger, "list_tickets"):
            details = await service.list_tickets()
        payload = [TicketDetailResponse.from_detail(d).model_dump(mode="json") for d in details]
        if payload:
            await cache.set(TICKETS_CACHE_KEY, payload, settings.cache_ttl_seconds)

    if not payload:
        raise ResourceNotFoundException("Ticket", message="No tickets found")

    return payload


@router.post(
    "",
    response_model=TicketResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a ticket",
    description="""
    Create a ticket; category and assignee are chosen by business rules.

    - `managementReport` → accounting, assigned to the newest accountant
    - `registrationAddressChange` → corporate, assigned to the corporate
      secretary (director as fallback); only one may be open per company
    - `strikeOff` → management, assigned to the director; resolves every
      other open ticket of the company in the same transaction
    """,
    responses={
        201: {
            "description": "Ticket successfully created",
            "content": {"application/json": {"example": TICKET_RESPONSE_EXAMPLE}}
        },
        400: {"description": "Invalid input data"},
        409: {"description": "Ticket already exists or cannot be created due to business rules"}
    }
)
async def create_ticket(
    request: CreateTicketRequest,
    service: TicketRouterService = Depends(get_ticket_router_service),
    cache: ICache = Depends(get_cache),
):
    ticket = await service.create_ticket(request.type, request.company_id)

    await cache.delete(TICKETS_CACHE_KEY)

    return TicketResponse.from_entity(ticket)


# Export router for inclusion in main app
tickets_router = router
