"""
Ticket Router Module
====================

Bounded Context for rule-driven ticket creation.

Responsibilities:
- Decide a new ticket's category from its type
- Pick the assignee by role, with fallback and uniqueness rules
- Reject a second open registration address change per company
- Strike-off: create the ticket and resolve every other open ticket of the
  company in one transaction
- List tickets with company and assignee for presentation
"""

__version__ = "1.0.0"
