"""
Report Aggregation
==================

Pure functions turning staged transaction rows into report content.

Each report is built in two steps: aggregate rows into balances, then
render the balances as CSV text. Amounts are always printed with two
decimals and lines are joined with ``\\n`` without a trailing newline.
"""

import csv
import math
import re
from datetime import datetime
from typing import Dict, Iterable, Iterator, List, Tuple

from src.config import ReportType
from src.core import ReportGenerationException
from src.reports.domain.entities import TransactionRow


CASH_ACCOUNT = "Cash"

_YEAR_PATTERN = re.compile(r"(?<!\d)(\d{4})(?!\d)")

# Closed account set of the financial statement, in print order
FS_CATEGORIES: Dict[str, Dict[str, Tuple[str, ...]]] = {
    "Income Statement": {
        "Revenues": ("Sales Revenue",),
        "Expenses": (
            "Cost of Goods Sold",
            "Salaries Expense",
            "Rent Expense",
            "Utilities Expense",
            "Interest Expense",
            "Tax Expense",
        ),
    },
    "Balance Sheet": {
        "Assets": (
            "Cash",
            "Accounts Receivable",
            "Inventory",
            "Fixed Assets",
            "Prepaid Expenses",
        ),
        "Liabilities": (
            "Accounts Payable",
            "Loan Payable",
            "Sales Tax Payable",
            "Accrued Liabilities",
            "Unearned Revenue",
            "Dividends Payable",
        ),
        "Equity": ("Common Stock", "Retained Earnings"),
    },
}

FS_ACCOUNTS = tuple(
    account
    for section in FS_CATEGORIES.values()
    for group in section.values()
    for account in group
)


# ========== Parsing ==========

def parse_amount(value: str) -> float:
    """Parse a debit/credit cell; missing or non-numeric values count as 0."""
    try:
        amount = float(value.strip())
    except (AttributeError, ValueError):
        return 0.0
    return amount if math.isfinite(amount) else 0.0


def parse_transactions(content: str) -> Iterator[TransactionRow]:
    """
    Parse the content of one staged CSV file.

    Blank lines and lines without an account are skipped.
    """
    for row in csv.reader(content.splitlines()):
        if len(row) < 2 or not row[1].strip():
            continue
        cells = row + [""] * (5 - len(row))
        yield TransactionRow(
            date=cells[0].strip(),
            account=cells[1].strip(),
            debit=parse_amount(cells[3]),
            credit=parse_amount(cells[4]),
        )


def parse_year(date: str) -> str:
    """
    Calendar year of a transaction date.

    ISO dates and datetimes are parsed directly. Any other layout
    (`2023/01/15`, `01/15/2023`, `15 Jan 2023`) falls back to its first
    standalone four-digit number. Raises ReportGenerationException only
    when no year can be found.
    """
    value = date.strip()
    iso_value = value[:-1] + "+00:00" if value.endswith("Z") else value
    try:
        return str(datetime.fromisoformat(iso_value).year)
    except ValueError:
        pass

    match = _YEAR_PATTERN.search(value)
    if match is None:
        raise ReportGenerationException(
            ReportType.YEARLY.value,
            f"Invalid date '{date}'",
        )
    return match.group(1)


# ========== Aggregation ==========

def aggregate_account_balances(rows: Iterable[TransactionRow]) -> Dict[str, float]:
    """Balance per account, in first-encountered order."""
    balances: Dict[str, float] = {}
    for row in rows:
        balances[row.account] = balances.get(row.account, 0.0) + row.amount
    return balances


def aggregate_cash_by_year(rows: Iterable[TransactionRow]) -> Dict[str, float]:
    """Cash balance per calendar year, sorted ascending by year."""
    cash_by_year: Dict[str, float] = {}
    for row in rows:
        if row.account != CASH_ACCOUNT:
            continue
        year = parse_year(row.date)
        cash_by_year[year] = cash_by_year.get(year, 0.0) + row.amount
    return dict(sorted(cash_by_year.items()))


def aggregate_fs_balances(rows: Iterable[TransactionRow]) -> Dict[str, float]:
    """Balances of the financial statement accounts; others are ignored."""
    balances = {account: 0.0 for account in FS_ACCOUNTS}
    for row in rows:
        if row.account in balances:
            balances[row.account] += row.amount
    return balances


# ========== Rendering ==========

def format_amount(value: float) -> str:
    # Adding 0.0 turns -0.0 into 0.0
    return f"{value + 0.0:.2f}"


def render_accounts(balances: Dict[str, float]) -> str:
    lines = ["Account,Balance"]
    lines.extend(f"{account},{format_amount(balance)}" for account, balance in balances.items())
    return "\n".join(lines)


def render_yearly(cash_by_year: Dict[str, float]) -> str:
    lines = ["Financial Year,Cash Balance"]
    lines.extend(f"{year},{format_amount(cash_by_year[year])}" for year in sorted(cash_by_year))
    return "\n".join(lines)


def render_financial_statement(balances: Dict[str, float]) -> str:
    """
    Render the basic financial statement.

    Net income is carried into equity as retained earnings. The closing
    ``Assets = Liabilities + Equity`` line is printed whether or not the
    two sides agree.
    """
    income = FS_CATEGORIES["Income Statement"]
    balance_sheet = FS_CATEGORIES["Balance Sheet"]
    lines: List[str] = ["Basic Financial Statement", "", "Income Statement"]

    def section(accounts: Tuple[str, ...]) -> float:
        total = 0.0
        for account in accounts:
            value = balances.get(account, 0.0)
            lines.append(f"{account},{format_amount(value)}")
            total += value
        return total

    total_revenue = section(income["Revenues"])
    total_expenses = section(income["Expenses"])
    net_income = total_revenue - total_expenses
    lines.extend([f"Net Income,{format_amount(net_income)}", "", "Balance Sheet"])

    lines.append("Assets")
    total_assets = section(balance_sheet["Assets"])
    lines.extend([f"Total Assets,{format_amount(total_assets)}", ""])

    lines.append("Liabilities")
    total_liabilities = section(balance_sheet["Liabilities"])
    lines.extend([f"Total Liabilities,{format_amount(total_liabilities)}", ""])

    lines.append("Equity")
    total_equity = section(balance_sheet["Equity"])
    lines.append(f"Retained Earnings (Net Income),{format_amount(net_income)}")
    total_equity += net_income
    lines.extend([f"Total Equity,{format_amount(total_equity)}", ""])

    lines.append(
        f"Assets = Liabilities + Equity, {format_amount(total_assets)} = "
        f"{format_amount(total_liabilities + total_equity)}"
    )
    return "\n".join(lines)


# ========== Report builders ==========

def build_accounts_report(rows: Iterable[TransactionRow]) -> str:
    return render_accounts(aggregate_account_balances(rows))


def build_yearly_report(rows: Iterable[TransactionRow]) -> str:
    return render_yearly(aggregate_cash_by_year(rows))


def build_fs_report(rows: Iterable[TransactionRow]) -> str:
    return render_financial_statement(aggregate_fs_balances(rows))
