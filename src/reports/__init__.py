"""
Report Pipeline Module
======================

Bounded Context for batch CSV reports.

Responsibilities:
- Aggregate staged transaction files into accounts, yearly and fs reports
- Track per-report status strings and timing metrics
- Run report generation in the background and expose a poll model
"""

__version__ = "1.0.0"
