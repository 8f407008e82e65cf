"""
Pytest configuration and shared fixtures.

Database tests run against a temporary SQLite file through aiosqlite; the
report pipeline runs against temporary directories.
"""

import os
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Dict, List, Sequence, Tuple

# Settings are read at import time; keep tests offline and local.
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///./acme-test.db")
os.environ.pop("REDIS_URL", None)

import pytest

from src.config import UserRole
from src.infrastructure.database import (
    close_database,
    create_tables,
    get_session_context,
    get_session_maker,
    init_database,
)
from src.tickets.application import TicketRouterService
from src.tickets.infrastructure import CompanyModel, SQLAlchemyUnitOfWork, UserModel


@pytest.fixture
def database_url(tmp_path: Path) -> str:
    return f"sqlite+aiosqlite:///{tmp_path / 'acme-test.db'}"


@pytest.fixture
async def db(database_url: str):
    """Initialized database with empty tables."""
    init_database(database_url)
    await create_tables()
    yield get_session_maker()
    await close_database()


@pytest.fixture
def router_service(db) -> TicketRouterService:
    return TicketRouterService(lambda: SQLAlchemyUnitOfWork(db))


@pytest.fixture
def make_company(db):
    """
    Factory creating a company with users of the given roles.

    Users are created one second apart, in the order given, so the last
    user of a role is the newest.
    """

    async def _make(
        roles: Sequence[UserRole] = (),
        name: str = "Acme Corp",
    ) -> Tuple[int, List[int]]:
        base = datetime(2024, 1, 1, tzinfo=timezone.utc)
        async with get_session_context() as session:
            company = CompanyModel(name=name)
            session.add(company)
            await session.flush()

            users = [
                UserModel(
                    name=f"{role.value} {index}",
                    role=role.value,
                    company_id=company.id,
                    created_at=base + timedelta(seconds=index),
                )
                for index, role in enumerate(roles)
            ]
            session.add_all(users)
            await session.flush()

            return company.id, [user.id for user in users]

    return _make


@pytest.fixture
def staging(tmp_path: Path) -> Dict[str, Path]:
    """Empty staging and output directories."""
    tmp_dir = tmp_path / "tmp"
    out_dir = tmp_path / "out"
    tmp_dir.mkdir()
    out_dir.mkdir()
    return {"tmp": tmp_dir, "out": out_dir}
