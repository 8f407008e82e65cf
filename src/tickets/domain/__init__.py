"""
Ticket Domain Layer
===================

Contains:
- Entities: Ticket, User, Company, TicketDetail
- Routing rules: category/assignee policy per ticket type

This layer has no dependencies on infrastructure - pure Python business logic.
"""

from src.tickets.domain.entities import Company, Ticket, TicketDetail, User
from src.tickets.domain.rules import (
    ROUTING_RULES,
    UNIQUE_ASSIGNEE_ROLES,
    RoutingRule,
    pick_assignee,
    rule_for,
)

__all__ = [
    # Entities
    "Company",
    "Ticket",
    "TicketDetail",
    "User",
    # Rules
    "ROUTING_RULES",
    "UNIQUE_ASSIGNEE_ROLES",
    "RoutingRule",
    "pick_assignee",
    "rule_for",
]
