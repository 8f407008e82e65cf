#!/usr/bin/env python3
"""
Seed Demo Data
==============

Creates demo companies, users and tickets, and optionally a staged
transaction file for the report pipeline.

Usage:
    python scripts/seed_demo_data.py [--reset] [--transactions]
"""

import argparse
import asyncio
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from sqlalchemy import func, select

from src.config import TicketCategory, TicketStatus, TicketType, UserRole, settings
from src.infrastructure.database import (
    close_database,
    create_tables,
    drop_tables,
    get_session_context,
    init_database,
)
from src.shared.infrastructure.logging import get_logger, setup_logging
from src.tickets.infrastructure.models import CompanyModel, TicketModel, UserModel

logger = get_logger("seed_demo_data")


COMPANIES = ["Acme Corp", "Globex Industries", "Wayne Enterprises"]

# (name, role, company index)
USERS = [
    ("John Director", UserRole.DIRECTOR, 0),
    ("Mary Accountant", UserRole.ACCOUNTANT, 0),
    ("James Admin", UserRole.CORPORATE_SECRETARY, 0),
    ("Linda Director", UserRole.DIRECTOR, 1),
    ("Bruce Wayne", UserRole.DIRECTOR, 2),
]

# (type, status, category, company index, assignee index)
TICKETS = [
    (TicketType.MANAGEMENT_REPORT, TicketStatus.OPEN, TicketCategory.ACCOUNTING, 0, 1),
    (TicketType.REGISTRATION_ADDRESS_CHANGE, TicketStatus.OPEN, TicketCategory.CORPORATE, 1, 3),
    (TicketType.MANAGEMENT_REPORT, TicketStatus.RESOLVED, TicketCategory.ACCOUNTING, 2, 4),
    (TicketType.MANAGEMENT_REPORT, TicketStatus.OPEN, TicketCategory.ACCOUNTING, 0, 0),
    (TicketType.REGISTRATION_ADDRESS_CHANGE, TicketStatus.RESOLVED, TicketCategory.CORPORATE, 2, 4),
]

TRANSACTIONS = [
    "2023-01-15,Cash,,1000,0",
    "2023-01-15,Common Stock,,0,1000",
    "2023-03-02,Inventory,,400,0",
    "2023-03-02,Cash,,0,400",
    "2024-02-10,Cash,,750,0",
    "2024-02-10,Sales Revenue,,0,750",
    "2024-02-10,Cost of Goods Sold,,300,0",
    "2024-02-10,Inventory,,0,300",
    "2024-05-01,Rent Expense,,120,0",
    "2024-05-01,Cash,,0,120",
]


async def seed_database(reset: bool) -> None:
    if reset:
        logger.info("Dropping existing tables")
        await drop_tables()
    await create_tables()

    async with get_session_context() as session:
        existing = await session.scalar(select(func.count()).select_from(CompanyModel))
        if existing:
            logger.info("Database already seeded", extra={"companies": existing})
            return

        companies = [CompanyModel(name=name) for name in COMPANIES]
        session.add_all(companies)
        await session.flush()

        users = [
            UserModel(name=name, role=role.value, company_id=companies[company].id)
            for name, role, company in USERS
        ]
        session.add_all(users)
        await session.flush()

        session.add_all([
            TicketModel(
                type=ticket_type.value,
                status=status.value,
                category=category.value,
                company_id=companies[company].id,
                assignee_id=users[assignee].id,
            )
            for ticket_type, status, category, company, assignee in TICKETS
        ])

    logger.info("Seeded demo data", extra={
        "companies": len(COMPANIES),
        "users": len(USERS),
        "tickets": len(TICKETS),
    })


def write_transactions(tmp_dir: Path) -> Path:
    tmp_dir.mkdir(parents=True, exist_ok=True)
    path = tmp_dir / "demo-transactions.csv"
    path.write_text("\n".join(TRANSACTIONS), encoding="utf-8")
    logger.info("Wrote staged transactions", extra={"path": str(path), "rows": len(TRANSACTIONS)})
    return path


async def main() -> None:
    parser = argparse.ArgumentParser(description="Seed demo data")
    parser.add_argument("--reset", action="store_true", help="Drop and recreate tables first")
    parser.add_argument(
        "--transactions",
        action="store_true",
        help="Also write a demo transaction file to the staging directory"
    )
    args = parser.parse_args()

    setup_logging(settings.log_level, settings.environment)
    init_database(settings.database_url)
    try:
        await seed_database(args.reset)
    finally:
        await close_database()

    if args.transactions:
        write_transactions(settings.reports_tmp_dir)


if __name__ == "__main__":
    asyncio.run(main())
