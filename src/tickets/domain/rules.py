"""
Ticket Routing Rules
====================

Immutable routing rules: which category a ticket type lands in, which role
handles it, and which roles must be unique per company.
"""

from dataclasses import dataclass
from typing import Dict, FrozenSet, Optional, Sequence

from src.config import TicketCategory, TicketType, UserRole
from src.core import ConflictException, ValidationException
from src.tickets.domain.entities import User


@dataclass(frozen=True)
class RoutingRule:
    """How one ticket type is categorised and assigned."""
    category: TicketCategory
    candidate_role: UserRole
    fallback_role: Optional[UserRole] = None
    reject_open_duplicate: bool = False
    transactional_strike_off: bool = False


ROUTING_RULES: Dict[TicketType, RoutingRule] = {
    TicketType.MANAGEMENT_REPORT: RoutingRule(
        category=TicketCategory.ACCOUNTING,
        candidate_role=UserRole.ACCOUNTANT,
    ),
    TicketType.REGISTRATION_ADDRESS_CHANGE: RoutingRule(
        category=TicketCategory.CORPORATE,
        candidate_role=UserRole.CORPORATE_SECRETARY,
        fallback_role=UserRole.DIRECTOR,
        reject_open_duplicate=True,
    ),
    TicketType.STRIKE_OFF: RoutingRule(
        category=TicketCategory.MANAGEMENT,
        candidate_role=UserRole.DIRECTOR,
        transactional_strike_off=True,
    ),
}

# A company may have at most one of these; several is a data error
UNIQUE_ASSIGNEE_ROLES: FrozenSet[UserRole] = frozenset(
    {UserRole.CORPORATE_SECRETARY, UserRole.DIRECTOR}
)


def rule_for(ticket_type: TicketType) -> RoutingRule:
    """Look up the routing rule for a ticket type."""
    try:
        return ROUTING_RULES[TicketType(ticket_type)]
    except (KeyError, ValueError):
        raise ValidationException(f"Unknown ticket type: {ticket_type}")


def pick_assignee(
    candidates: Sequence[User],
    role: UserRole,
    action: str = "create a ticket",
) -> User:
    """
    Choose the assignee among users already filtered by role.

    Args:
        candidates: Users with the role, newest first
        role: The role that was searched for
        action: Wording for the conflict message

    Returns:
        The newest candidate

    Raises:
        ConflictException: No candidate, or several for a unique role
    """
    if not candidates:
        raise ConflictException(
            f"Cannot find user with role {role.value} to {action}",
            {"role": role.value},
        )

    if role in UNIQUE_ASSIGNEE_ROLES and len(candidates) > 1:
        raise ConflictException(
            f"Multiple users with role {role.value}. Cannot {action}",
            {"role": role.value, "candidates": len(candidates)},
        )

    return candidates[0]
