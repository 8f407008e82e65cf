"""
Report Infrastructure Layer
===========================

Filesystem implementation of the report storage interface.
"""

from src.reports.infrastructure.storage import FileSystemReportStorage

__all__ = ["FileSystemReportStorage"]
