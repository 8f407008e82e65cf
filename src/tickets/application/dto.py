"""
Ticket Application DTOs
=======================

Data Transfer Objects for the ticket API layer.

These Pydantic models handle serialization/deserialization and validation
for API requests and responses.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from src.config import TicketCategory, TicketStatus, TicketType, UserRole
from src.tickets.domain import Ticket, TicketDetail


# ========== Request DTOs ==========

class CreateTicketRequest(BaseModel):
    """Request model for ticket creation."""
    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    type: TicketType = Field(..., description="Type of ticket to create")
    company_id: int = Field(
        ...,
        alias="companyId",
        description="Company ID that the ticket belongs to",
        examples=[1],
    )

    @field_validator("type", mode="before")
    @classmethod
    def validate_type(cls, v):
        """Reject anything outside the ticket type enum with a readable message."""
        if isinstance(v, TicketType):
            return v
        if not isinstance(v, str) or v not in {t.value for t in TicketType}:
            raise ValueError("Ticket type must be one of the valid types")
        return v

    @field_validator("company_id", mode="before")
    @classmethod
    def validate_company_id(cls, v):
        if isinstance(v, bool) or not isinstance(v, (int, float)):
            raise ValueError("Company ID must be a number")
        if v <= 0:
            raise ValueError("Company ID must be a positive number")
        if isinstance(v, float) and not v.is_integer():
            raise ValueError("Company ID must be a number")
        return int(v)


# ========== Response DTOs ==========

class TicketResponse(BaseModel):
    """Response model for a created ticket."""
    id: int = Field(..., description="Unique identifier for the ticket")
    type: TicketType
    company_id: int = Field(..., description="ID of the company this ticket belongs to")
    assignee_id: int = Field(..., description="ID of the user assigned to this ticket")
    status: TicketStatus
    category: TicketCategory

    @classmethod
    def from_entity(cls, ticket: Ticket) -> "TicketResponse":
        return cls(
            id=ticket.id,
            type=ticket.type,
            company_id=ticket.company_id,
            assignee_id=ticket.assignee_id,
            status=ticket.status,
            category=ticket.category,
        )


class CompanySummary(BaseModel):
    id: int
    name: str


class AssigneeSummary(BaseModel):
    id: int
    name: str
    role: UserRole


class TicketDetailResponse(TicketResponse):
    """Ticket joined with company and assignee identity."""
    company: Optional[CompanySummary] = None
    assignee: Optional[AssigneeSummary] = None

    @classmethod
    def from_detail(cls, detail: TicketDetail) -> "TicketDetailResponse":
        base = TicketResponse.from_entity(detail.ticket).model_dump()
        company = detail.company
        assignee = detail.assignee
        return cls(
            **base,
            company=CompanySummary(id=company.id, name=company.name) if company else None,
            assignee=(
                AssigneeSummary(id=assignee.id, name=assignee.name, role=assignee.role)
                if assignee else None
            ),
        )
