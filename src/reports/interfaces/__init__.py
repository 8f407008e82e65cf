"""
Report Interfaces Layer
=======================

HTTP controllers for the report pipeline.
"""

from src.reports.interfaces.controllers import reports_router

__all__ = ["reports_router"]
