"""
Shared Kernel Module
====================

Shared infrastructure used across both bounded contexts (Ticket Router and
Report Pipeline).

Architecture Pattern: Modular Monolith
- Each module (tickets, reports) is a bounded context
- Shared kernel contains only generic infrastructure

DO NOT add ticket routing or report aggregation logic to the shared kernel.
"""

__version__ = "1.0.0"
