"""
Ticket Application Layer
========================

Contains:
- Services: the ticket router
- DTOs: request validation and response serialization

This layer depends on the domain layer and repository interfaces,
but not on concrete infrastructure implementations.
"""

from src.tickets.application.dto import (
    AssigneeSummary,
    CompanySummary,
    CreateTicketRequest,
    TicketDetailResponse,
    TicketResponse,
)
from src.tickets.application.services import (
    ITicketRepository,
    IUnitOfWork,
    IUserRepository,
    TicketRouterService,
)

__all__ = [
    # DTOs
    "AssigneeSummary",
    "CompanySummary",
    "CreateTicketRequest",
    "TicketDetailResponse",
    "TicketResponse",
    # Services
    "TicketRouterService",
    # Repository Interfaces
    "ITicketRepository",
    "IUnitOfWork",
    "IUserRepository",
]
