"""
Ticket Infrastructure Repositories
==================================

Concrete implementations of the repository interfaces using SQLAlchemy,
plus the unit of work that scopes them to one transaction.
"""

from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.orm import selectinload

from src.config import TicketCategory, TicketStatus, TicketType, UserRole
from src.core import RepositoryException
from src.tickets.application import ITicketRepository, IUnitOfWork, IUserRepository
from src.tickets.domain import Company, Ticket, TicketDetail, User
from src.tickets.infrastructure.models import CompanyModel, TicketModel, UserModel


def ticket_from_model(model: TicketModel) -> Ticket:
    return Ticket(
        id=model.id,
        type=TicketType(model.type),
        company_id=model.company_id,
        assignee_id=model.assignee_id,
        status=TicketStatus(model.status),
        category=TicketCategory(model.category),
        created_at=model.created_at,
        updated_at=model.updated_at,
    )


def user_from_model(model: UserModel) -> User:
    return User(
        id=model.id,
        name=model.name,
        role=UserRole(model.role),
        company_id=model.company_id,
        created_at=model.created_at,
    )


def company_from_model(model: CompanyModel) -> Company:
    return Company(id=model.id, name=model.name)


class SQLAlchemyTicketRepository(ITicketRepository):
    """
    SQLAlchemy implementation of ticket repository.

    Flushes but never commits; the unit of work owns the transaction.
    """

    def __init__(self, session: AsyncSession):
        self._session = session

    async def create(
        self,
        ticket_type: TicketType,
        company_id: int,
        assignee_id: int,
        category: TicketCategory,
        status: TicketStatus = TicketStatus.OPEN,
    ) -> Ticket:
        model = TicketModel(
            type=TicketType(ticket_type).value,
            company_id=company_id,
            assignee_id=assignee_id,
            category=TicketCategory(category).value,
            status=TicketStatus(status).value,
        )

        self._session.add(model)
        await self._session.flush()

        return ticket_from_model(model)

    async def find_open_by_type(self, company_id: int, ticket_type: TicketType) -> Optional[Ticket]:
        stmt = (
            select(TicketModel)
            .where(
                TicketModel.company_id == company_id,
                TicketModel.type == TicketType(ticket_type).value,
                TicketModel.status == TicketStatus.OPEN.value,
            )
            .limit(1)
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return ticket_from_model(model) if model else None

    async def resolve_open_for_company(self, company_id: int, exclude_ticket_id: int) -> int:
        stmt = (
            update(TicketModel)
            .where(
                TicketModel.company_id == company_id,
                TicketModel.status == TicketStatus.OPEN.value,
                TicketModel.id != exclude_ticket_id,
            )
            .values(
                status=TicketStatus.RESOLVED.value,
                updated_at=datetime.now(timezone.utc),
            )
            .execution_options(synchronize_session=False)
        )
        result = await self._session.execute(stmt)
        return result.rowcount or 0

    async def list_with_relations(self) -> List[TicketDetail]:
        stmt = (
            select(TicketModel)
            .options(selectinload(TicketModel.company), selectinload(TicketModel.assignee))
            .order_by(TicketModel.id.asc())
        )
        result = await self._session.execute(stmt)

        return [
            TicketDetail(
                ticket=ticket_from_model(model),
                company=company_from_model(model.company) if model.company else None,
                assignee=user_from_model(model.assignee) if model.assignee else None,
            )
            for model in result.scalars().all()
        ]


class SQLAlchemyUserRepository(IUserRepository):
    """SQLAlchemy implementation of user lookups."""

    def __init__(self, session: AsyncSession):
        self._session = session

    async def find_by_company_and_role(self, company_id: int, role: UserRole) -> List[User]:
        stmt = (
            select(UserModel)
            .where(UserModel.company_id == company_id, UserModel.role == UserRole(role).value)
            .order_by(UserModel.created_at.desc(), UserModel.id.desc())
        )
        result = await self._session.execute(stmt)
        return [user_from_model(model) for model in result.scalars().all()]


class SQLAlchemyUnitOfWork(IUnitOfWork):
    """
    One session, one transaction.

    Usage:
        async with SQLAlchemyUnitOfWork(get_session_maker()) as uow:
            directors = await uow.users.find_by_company_and_role(1, UserRole.DIRECTOR)
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory
        self._session: Optional[AsyncSession] = None

    async def __aenter__(self) -> "SQLAlchemyUnitOfWork":
        self._session = self._session_factory()
        self.tickets = SQLAlchemyTicketRepository(self._session)
        self.users = SQLAlchemyUserRepository(self._session)
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        session = self._session
        self._session = None
        try:
            if exc_type is None:
                await session.commit()
            else:
                await session.rollback()
        except SQLAlchemyError as e:
            raise RepositoryException("Database transaction failed") from e
        finally:
            await session.close()

        if isinstance(exc, SQLAlchemyError):
            raise RepositoryException("Database operation failed") from exc
