"""
Report Domain Layer
===================

Contains:
- Entities: TransactionRow, ReportTimeMetrics, ReportMetrics
- Aggregation: parsing staged CSV content and rendering the three reports

This layer has no dependencies on infrastructure - pure Python business logic.
"""

from src.reports.domain.aggregation import (
    CASH_ACCOUNT,
    FS_ACCOUNTS,
    FS_CATEGORIES,
    aggregate_account_balances,
    aggregate_cash_by_year,
    aggregate_fs_balances,
    build_accounts_report,
    build_fs_report,
    build_yearly_report,
    format_amount,
    parse_amount,
    parse_transactions,
    parse_year,
    render_accounts,
    render_financial_statement,
    render_yearly,
)
from src.reports.domain.entities import (
    ReportMetrics,
    ReportTimeMetrics,
    TransactionRow,
    output_filename,
)

__all__ = [
    # Entities
    "ReportMetrics",
    "ReportTimeMetrics",
    "TransactionRow",
    "output_filename",
    # Aggregation
    "CASH_ACCOUNT",
    "FS_ACCOUNTS",
    "FS_CATEGORIES",
    "aggregate_account_balances",
    "aggregate_cash_by_year",
    "aggregate_fs_balances",
    "build_accounts_report",
    "build_fs_report",
    "build_yearly_report",
    "format_amount",
    "parse_amount",
    "parse_transactions",
    "parse_year",
    "render_accounts",
    "render_financial_statement",
    "render_yearly",
]
