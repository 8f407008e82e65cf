"""
Integration tests for the ticket router against a SQLite database.
"""
import pytest
from sqlalchemy import func, select

from src.config import TicketCategory, TicketStatus, TicketType, UserRole
from src.core import ConflictException, StorageConflictException
from src.infrastructure.database import get_session_context
from src.tickets.infrastructure import SQLAlchemyTicketRepository, TicketModel


async def _ticket_count() -> int:
    async with get_session_context() as session:
        return await session.scalar(select(func.count()).select_from(TicketModel))


async def _statuses(company_id: int) -> dict:
    async with get_session_context() as session:
        result = await session.execute(
            select(TicketModel.id, TicketModel.status).where(TicketModel.company_id == company_id)
        )
        return dict(result.all())


# ========== managementReport ==========

async def test_management_report_goes_to_the_accountant(router_service, make_company):
    company_id, (accountant_id,) = await make_company([UserRole.ACCOUNTANT])

    ticket = await router_service.create_ticket(TicketType.MANAGEMENT_REPORT, company_id)

    assert ticket.id is not None
    assert ticket.category == TicketCategory.ACCOUNTING
    assert ticket.assignee_id == accountant_id
    assert ticket.status == TicketStatus.OPEN


async def test_management_report_picks_newest_accountant(router_service, make_company):
    company_id, (older, newer) = await make_company([UserRole.ACCOUNTANT, UserRole.ACCOUNTANT])

    ticket = await router_service.create_ticket(TicketType.MANAGEMENT_REPORT, company_id)

    assert ticket.assignee_id == newer


async def test_management_report_without_accountant(router_service, make_company):
    company_id, _ = await make_company([UserRole.DIRECTOR])

    with pytest.raises(ConflictException, match="Cannot find user with role accountant"):
        await router_service.create_ticket(TicketType.MANAGEMENT_REPORT, company_id)

    assert await _ticket_count() == 0


# ========== registrationAddressChange ==========

async def test_registration_change_goes_to_corporate_secretary(router_service, make_company):
    company_id, (director_id, secretary_id) = await make_company(
        [UserRole.DIRECTOR, UserRole.CORPORATE_SECRETARY]
    )

    ticket = await router_service.create_ticket(TicketType.REGISTRATION_ADDRESS_CHANGE, company_id)

    assert ticket.category == TicketCategory.CORPORATE
    assert ticket.assignee_id == secretary_id


async def test_registration_change_falls_back_to_director(router_service, make_company):
    company_id, (director_id,) = await make_company([UserRole.DIRECTOR])

    ticket = await router_service.create_ticket(TicketType.REGISTRATION_ADDRESS_CHANGE, company_id)

    assert ticket.assignee_id == director_id


async def test_registration_change_with_two_secretaries(router_service, make_company):
    company_id, _ = await make_company([UserRole.CORPORATE_SECRETARY, UserRole.CORPORATE_SECRETARY])

    with pytest.raises(ConflictException, match="Multiple users with role corporateSecretary"):
        await router_service.create_ticket(TicketType.REGISTRATION_ADDRESS_CHANGE, company_id)


async def test_second_open_registration_change_is_rejected(router_service, make_company):
    company_id, _ = await make_company([UserRole.CORPORATE_SECRETARY])
    await router_service.create_ticket(TicketType.REGISTRATION_ADDRESS_CHANGE, company_id)

    with pytest.raises(ConflictException) as exc_info:
        await router_service.create_ticket(TicketType.REGISTRATION_ADDRESS_CHANGE, company_id)

    assert exc_info.value.message == (
        "A registration address change ticket already exists for this company."
    )
    assert await _ticket_count() == 1


async def test_duplicate_check_is_per_company(router_service, make_company):
    first, _ = await make_company([UserRole.CORPORATE_SECRETARY], name="Acme Corp")
    second, _ = await make_company([UserRole.CORPORATE_SECRETARY], name="Globex Industries")

    await router_service.create_ticket(TicketType.REGISTRATION_ADDRESS_CHANGE, first)
    await router_service.create_ticket(TicketType.REGISTRATION_ADDRESS_CHANGE, second)

    assert await _ticket_count() == 2


# ========== strikeOff ==========

async def test_strike_off_resolves_other_open_tickets(router_service, make_company):
    company_id, (director_id, _, _) = await make_company(
        [UserRole.DIRECTOR, UserRole.ACCOUNTANT, UserRole.CORPORATE_SECRETARY]
    )
    other_company, _ = await make_company([UserRole.ACCOUNTANT], name="Globex Industries")

    first = await router_service.create_ticket(TicketType.MANAGEMENT_REPORT, company_id)
    second = await router_service.create_ticket(TicketType.REGISTRATION_ADDRESS_CHANGE, company_id)
    untouched = await router_service.create_ticket(TicketType.MANAGEMENT_REPORT, other_company)
    before = await _ticket_count()

    ticket = await router_service.create_ticket(TicketType.STRIKE_OFF, company_id)

    assert ticket.category == TicketCategory.MANAGEMENT
    assert ticket.status == TicketStatus.OPEN
    assert ticket.assignee_id == director_id
    assert await _ticket_count() == before + 1

    statuses = await _statuses(company_id)
    assert statuses[first.id] == "resolved"
    assert statuses[second.id] == "resolved"
    assert statuses[ticket.id] == "open"
    assert (await _statuses(other_company))[untouched.id] == "open"


async def test_strike_off_without_other_open_tickets(router_service, make_company):
    company_id, (director_id,) = await make_company([UserRole.DIRECTOR])

    ticket = await router_service.create_ticket(TicketType.STRIKE_OFF, company_id)

    assert ticket.category == TicketCategory.MANAGEMENT
    assert ticket.status == TicketStatus.OPEN
    assert ticket.assignee_id == director_id
    assert await _ticket_count() == 1
    assert await _statuses(company_id) == {ticket.id: "open"}


@pytest.mark.parametrize("roles, message", [
    ([UserRole.ACCOUNTANT], "Cannot find user with role director to create a strike off ticket"),
    ([UserRole.DIRECTOR, UserRole.DIRECTOR], "Multiple users with role director. Cannot create a strike off ticket"),
])
async def test_strike_off_needs_exactly_one_director(router_service, make_company, roles, message):
    company_id, _ = await make_company(roles)

    with pytest.raises(ConflictException) as exc_info:
        await router_service.create_ticket(TicketType.STRIKE_OFF, company_id)

    assert not isinstance(exc_info.value, StorageConflictException)
    assert exc_info.value.message == message
    assert await _ticket_count() == 0


async def test_strike_off_failure_rolls_back_everything(router_service, make_company, monkeypatch):
    company_id, _ = await make_company([UserRole.DIRECTOR, UserRole.ACCOUNTANT])
    existing = await router_service.create_ticket(TicketType.MANAGEMENT_REPORT, company_id)

    async def broken_resolve(self, company_id, exclude_ticket_id):
        raise RuntimeError("disk on fire")

    monkeypatch.setattr(SQLAlchemyTicketRepository, "resolve_open_for_company", broken_resolve)

    with pytest.raises(StorageConflictException) as exc_info:
        await router_service.create_ticket(TicketType.STRIKE_OFF, company_id)

    assert exc_info.value.message == "Failed to process strike off ticket. Please try again."
    assert isinstance(exc_info.value.__cause__, RuntimeError)
    assert await _statuses(company_id) == {existing.id: "open"}


# ========== list ==========

async def test_list_tickets_empty(router_service):
    assert await router_service.list_tickets() == []


async def test_list_tickets_includes_company_and_assignee(router_service, make_company):
    company_id, (accountant_id,) = await make_company([UserRole.ACCOUNTANT], name="Wayne Enterprises")
    ticket = await router_service.create_ticket(TicketType.MANAGEMENT_REPORT, company_id)

    (detail,) = await router_service.list_tickets()

    assert detail.ticket.id == ticket.id
    assert detail.company.name == "Wayne Enterprises"
    assert detail.assignee.id == accountant_id
    assert detail.assignee.role == UserRole.ACCOUNTANT
