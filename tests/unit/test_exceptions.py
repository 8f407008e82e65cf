"""
Tests for the application exception hierarchy.
"""
from src.core import ApplicationException, ResourceNotFoundException


def test_not_found_message_from_resource():
    exc = ResourceNotFoundException("Ticket", "42")

    assert exc.message == "Ticket with id '42' not found"
    assert exc.resource_type == "Ticket"
    assert exc.resource_id == "42"


def test_not_found_message_override():
    exc = ResourceNotFoundException("Ticket", message="No tickets found")

    assert isinstance(exc, ApplicationException)
    assert exc.message == "No tickets found"
    assert str(exc) == "No tickets found"
