"""
Ticket Infrastructure Layer
===========================

Infrastructure implementations for the ticket router:
- Models: SQLAlchemy ORM models
- Repositories: data access and the unit of work
"""

from src.tickets.infrastructure.models import CompanyModel, TicketModel, UserModel
from src.tickets.infrastructure.repositories import (
    SQLAlchemyTicketRepository,
    SQLAlchemyUnitOfWork,
    SQLAlchemyUserRepository,
)

__all__ = [
    "CompanyModel",
    "TicketModel",
    "UserModel",
    "SQLAlchemyTicketRepository",
    "SQLAlchemyUnitOfWork",
    "SQLAlchemyUserRepository",
]
