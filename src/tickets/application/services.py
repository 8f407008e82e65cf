"""
Ticket Application Services
===========================

Application services orchestrate the routing rules and coordinate the
repositories inside a unit of work.

Following SOLID principles:
- Single Responsibility: the router decides category and assignee, nothing else
- Dependency Inversion: depend on repository abstractions, not SQLAlchemy
"""

from abc import ABC, abstractmethod
from typing import Callable, List, Optional

from src.config import TicketCategory, TicketStatus, TicketType, UserRole
from src.core import ConflictException, StorageConflictException
from src.shared.infrastructure.logging import get_logger
from src.tickets.domain import (
    RoutingRule,
    Ticket,
    TicketDetail,
    User,
    pick_assignee,
    rule_for,
)

logger = get_logger(__name__)


# ========== Repository Interfaces (Dependency Inversion) ==========

class ITicketRepository(ABC):
    """Interface for ticket data access."""

    @abstractmethod
    async def create(
        self,
        ticket_type: TicketType,
        company_id: int,
        assignee_id: int,
        category: TicketCategory,
        status: TicketStatus = TicketStatus.OPEN,
    ) -> Ticket:
        """Insert a ticket and return it with its assigned id."""

    @abstractmethod
    async def find_open_by_type(self, company_id: int, ticket_type: TicketType) -> Optional[Ticket]:
        """Get an open ticket of the given type for the company, if any."""

    @abstractmethod
    async def resolve_open_for_company(self, company_id: int, exclude_ticket_id: int) -> int:
        """Resolve every open ticket of the company except one; return the count."""

    @abstractmethod
    async def list_with_relations(self) -> List[TicketDetail]:
        """List all tickets joined with company and assignee."""


class IUserRepository(ABC):
    """Interface for user lookups."""

    @abstractmethod
    async def find_by_company_and_role(self, company_id: int, role: UserRole) -> List[User]:
        """Users of the company with the role, most recently created first."""


class IUnitOfWork(ABC):
    """
    Transactional scope over the ticket and user repositories.

    Commits when the block exits cleanly, rolls back when it raises.
    """

    tickets: ITicketRepository
    users: IUserRepository

    @abstractmethod
    async def __aenter__(self) -> "IUnitOfWork":
        """Open the transaction."""

    @abstractmethod
    async def __aexit__(self, exc_type, exc, tb) -> None:
        """Commit or roll back."""


# ========== Application Services ==========

class TicketRouterService:
    """
    Creates tickets according to the routing rules.

    Every call runs inside its own unit of work; a strike-off creation and
    the bulk resolution it triggers share one transaction.
    """

    STRIKE_OFF_FAILURE_MESSAGE = "Failed to process strike off ticket. Please try again."
    DUPLICATE_REGISTRATION_MESSAGE = (
        "A registration address change ticket already exists for this company."
    )

    def __init__(self, uow_factory: Callable[[], IUnitOfWork]):
        self._uow_factory = uow_factory

    async def create_ticket(self, ticket_type: TicketType, company_id: int) -> Ticket:
        """
        Create a ticket, choosing its category and assignee.

        Args:
            ticket_type: Requested ticket type
            company_id: Company the ticket is raised against

        Returns:
            The persisted ticket

        Raises:
            ValidationException: Unknown ticket type
            ConflictException: Duplicate open ticket, missing or ambiguous assignee
            StorageConflictException: Unexpected failure during a strike-off
        """
        rule = rule_for(ticket_type)
        ticket_type = TicketType(ticket_type)

        if rule.transactional_strike_off:
            return await self._create_strike_off_ticket(company_id, rule)

        async with self._uow_factory() as uow:
            if rule.reject_open_duplicate:
                existing = await uow.tickets.find_open_by_type(company_id, ticket_type)
                if existing is not None:
                    raise ConflictException(
                        self.DUPLICATE_REGISTRATION_MESSAGE,
                        {"company_id": company_id, "existing_ticket_id": existing.id},
                    )

            assignee = await self._find_assignee(uow, company_id, rule)

            ticket = await uow.tickets.create(
                ticket_type=ticket_type,
                company_id=company_id,
                assignee_id=assignee.id,
                category=rule.category,
            )

        logger.info(
            "Ticket created",
            extra={
                "ticket_id": ticket.id,
                "ticket_type": ticket_type.value,
                "company_id": company_id,
                "assignee_id": assignee.id,
            }
        )
        return ticket

    async def list_tickets(self) -> List[TicketDetail]:
        """All tickets with company and assignee; may be empty."""
        async with self._uow_factory() as uow:
            return await uow.tickets.list_with_relations()

    async def _find_assignee(self, uow: IUnitOfWork, company_id: int, rule: RoutingRule) -> User:
        role = rule.candidate_role
        candidates = await uow.users.find_by_company_and_role(company_id, role)

        if not candidates and rule.fallback_role is not None:
            role = rule.fallback_role
            candidates = await uow.users.find_by_company_and_role(company_id, role)

        return pick_assignee(candidates, role)

    async def _create_strike_off_ticket(self, company_id: int, rule: RoutingRule) -> Ticket:
        try:
            async with self._uow_factory() as uow:
                directors = await uow.users.find_by_company_and_role(company_id, rule.candidate_role)
                director = pick_assignee(
                    directors, rule.candidate_role, action="create a strike off ticket"
                )

                ticket = await uow.tickets.create(
                    ticket_type=TicketType.STRIKE_OFF,
                    company_id=company_id,
                    assignee_id=director.id,
                    category=rule.category,
                )

                resolved = await uow.tickets.resolve_open_for_company(
                    company_id, exclude_ticket_id=ticket.id
                )
        except ConflictException:
            raise
        except Exception as e:
            logger.error(
                "Strike off transaction failed",
                exc_info=e,
                extra={"company_id": company_id, "error_type": type(e).__name__},
            )
            raise StorageConflictException(
                self.STRIKE_OFF_FAILURE_MESSAGE, {"company_id": company_id}
            ) from e

        logger.info(
            "Strike off ticket created",
            extra={
                "ticket_id": ticket.id,
                "company_id": company_id,
                "assignee_id": director.id,
                "tickets_resolved": resolved,
            }
        )
        return ticket
