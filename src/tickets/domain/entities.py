"""
Ticket Domain Entities
======================

Pure Python domain entities for ticket routing.

These entities carry no infrastructure concerns; repositories map ORM rows
onto them.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from src.config import TicketCategory, TicketStatus, TicketType, UserRole


@dataclass
class Company:
    """Company a ticket is raised against (read-only for the router)."""
    id: int
    name: str


@dataclass
class User:
    """Company user who may be assigned tickets (read-only for the router)."""
    id: int
    name: str
    role: UserRole
    company_id: int
    created_at: datetime


@dataclass
class Ticket:
    """
    Ticket entity.

    Created by the router; its status only ever moves from open to resolved.
    """

    id: int
    type: TicketType
    company_id: int
    assignee_id: int
    status: TicketStatus
    category: TicketCategory
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass
class TicketDetail:
    """Ticket enriched with its company and assignee for presentation."""
    ticket: Ticket
    company: Optional[Company]
    assignee: Optional[User]
