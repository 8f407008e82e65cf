"""
Core Exceptions
================

Custom exceptions for the application following clean architecture principles.

These exceptions define domain-specific errors that can be caught and handled
appropriately at the application boundaries.
"""

from typing import Optional


class ApplicationException(Exception):
    """Base exception for all application errors."""

    def __init__(self, message: str, details: Optional[dict] = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)


class DomainException(ApplicationException):
    """Base exception for domain logic violations."""


class RepositoryException(ApplicationException):
    """Base exception for repository/data access errors."""


class ValidationException(ApplicationException):
    """Exception for validation errors."""


class ResourceNotFoundException(ApplicationException):
    """Exception when a requested resource is not found."""

    def __init__(
        self,
        resource_type: str,
        resource_id: Optional[str] = None,
        details: Optional[dict] = None,
        message: Optional[str] = None
    ):
        self.resource_type = resource_type
        self.resource_id = resource_id
        if message is None:
            message = f"{resource_type}"
            if resource_id:
                message += f" with id '{resource_id}'"
            message += " not found"
        super().__init__(message, details)


class ConflictException(DomainException):
    """
    Business-rule conflict.

    Raised for duplicate open tickets and for missing or ambiguous
    assignees. Never retried automatically.
    """


class StorageConflictException(ConflictException):
    """
    Unexpected storage failure surfaced as a conflict.

    The underlying cause is chained and logged, never exposed in the message.
    """


class ConfigurationException(ApplicationException):
    """Exception for configuration errors."""


class ReportGenerationException(ApplicationException):
    """Exception for a report that could not be parsed or written."""

    def __init__(
        self,
        report: str,
        message: str,
        details: Optional[dict] = None
    ):
        self.report = report
        super().__init__(message, details or {"report": report})
