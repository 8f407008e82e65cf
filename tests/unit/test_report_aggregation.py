"""
Tests for report parsing, aggregation and rendering.
"""
import pytest

from src.core import ReportGenerationException
from src.reports.domain import (
    FS_ACCOUNTS,
    TransactionRow,
    aggregate_account_balances,
    aggregate_cash_by_year,
    aggregate_fs_balances,
    build_accounts_report,
    build_yearly_report,
    format_amount,
    parse_amount,
    parse_transactions,
    parse_year,
    render_financial_statement,
)


def _rows(content: str):
    return list(parse_transactions(content))


# ========== Parsing ==========

def test_parse_transactions_reads_debit_and_credit():
    rows = _rows("2023-01-01,Cash,,1000,0\n2023-01-02,Cash,,0,300")
    assert rows == [
        TransactionRow(date="2023-01-01", account="Cash", debit=1000.0, credit=0.0),
        TransactionRow(date="2023-01-02", account="Cash", debit=0.0, credit=300.0),
    ]


def test_parse_transactions_skips_blank_lines_and_missing_accounts():
    rows = _rows("\n2023-01-01,Cash,,10,0\n\n2023-01-01,,,5,0\n2023-01-01\n")
    assert [row.account for row in rows] == ["Cash"]


def test_parse_transactions_defaults_missing_amounts_to_zero():
    rows = _rows("2023-01-01,Inventory")
    assert rows[0].debit == 0.0
    assert rows[0].credit == 0.0


@pytest.mark.parametrize("value, expected", [
    ("12.5", 12.5),
    (" 3 ", 3.0),
    ("", 0.0),
    ("n/a", 0.0),
    ("nan", 0.0),
    ("inf", 0.0),
    ("12abc", 0.0),
])
def test_parse_amount(value, expected):
    assert parse_amount(value) == expected


@pytest.mark.parametrize("date, year", [
    ("2023-04-01", "2023"),
    ("2024-12-31T23:59:59", "2024"),
    ("2022-06-15T10:00:00Z", "2022"),
    ("2023/01/15", "2023"),
    ("01/15/2023", "2023"),
    ("15 Jan 2021", "2021"),
])
def test_parse_year(date, year):
    assert parse_year(date) == year


def test_parse_year_rejects_garbage():
    with pytest.raises(ReportGenerationException, match="Invalid date 'yesterday'"):
        parse_year("yesterday")


def test_parse_year_ignores_digit_runs_longer_than_a_year():
    with pytest.raises(ReportGenerationException, match="Invalid date 'ref 202301-15'"):
        parse_year("ref 202301-15")


# ========== Accounts ==========

def test_accounts_balance_is_debit_minus_credit():
    rows = _rows("2023-01-01,Cash,,1000,0\n2023-01-02,Cash,,0,300")
    assert build_accounts_report(rows) == "Account,Balance\nCash,700.00"


def test_accounts_keep_first_encountered_order():
    rows = _rows(
        "2023-01-01,Inventory,,5,0\n"
        "2023-01-01,Cash,,1,0\n"
        "2023-01-02,Inventory,,0,2\n"
    )
    assert list(aggregate_account_balances(rows)) == ["Inventory", "Cash"]


def test_negative_zero_is_printed_as_zero():
    assert format_amount(-0.0) == "0.00"


# ========== Yearly ==========

def test_yearly_only_counts_cash_by_year_ascending():
    rows = _rows(
        "2024-03-01,Cash,,50,0\n"
        "2023-01-01,Cash,,100,0\n"
        "2023-06-01,Inventory,,999,0\n"
        "2023-07-01,Cash,,0,40\n"
    )
    assert aggregate_cash_by_year(rows) == {"2023": 60.0, "2024": 50.0}
    assert build_yearly_report(rows) == "Financial Year,Cash Balance\n2023,60.00\n2024,50.00"


def test_yearly_buckets_slash_dates_with_iso_dates():
    rows = _rows("2023/01/15,Cash,,10,0\n01/20/2023,Cash,,5,0\n2024-02-01,Cash,,1,0")
    assert build_yearly_report(rows) == "Financial Year,Cash Balance\n2023,15.00\n2024,1.00"


def test_yearly_does_not_parse_dates_of_other_accounts():
    rows = _rows("not-a-date,Inventory,,1,0\n2023-01-01,Cash,,2,0")
    assert aggregate_cash_by_year(rows) == {"2023": 2.0}


# ========== Financial statement ==========

def test_fs_balances_ignore_unknown_accounts():
    rows = _rows("2023-01-01,Mystery Account,,500,0\n2023-01-01,Cash,,10,0")
    balances = aggregate_fs_balances(rows)
    assert "Mystery Account" not in balances
    assert set(balances) == set(FS_ACCOUNTS)
    assert balances["Cash"] == 10.0


def test_fs_layout():
    balances = aggregate_fs_balances(_rows(
        "2023-01-01,Cash,,1000,0\n"
        "2023-01-01,Common Stock,,0,1000\n"
        "2023-02-01,Sales Revenue,,0,300\n"
        "2023-02-01,Rent Expense,,100,0\n"
    ))
    lines = render_financial_statement(balances).split("\n")

    assert lines[:3] == ["Basic Financial Statement", "", "Income Statement"]
    assert lines[3] == "Sales Revenue,-300.00"
    assert "Rent Expense,100.00" in lines
    assert "Net Income,-400.00" in lines
    assert "Total Assets,1000.00" in lines
    assert "Total Liabilities,0.00" in lines
    assert "Common Stock,-1000.00" in lines
    assert "Retained Earnings (Net Income),-400.00" in lines
    assert "Total Equity,-1400.00" in lines
    assert lines[-1] == "Assets = Liabilities + Equity, 1000.00 = -1400.00"


def test_fs_without_rows_still_prints_totals():
    text = render_financial_statement(aggregate_fs_balances([]))
    assert "Net Income,0.00" in text
    assert "Total Assets,0.00" in text
    assert text.endswith("Assets = Liabilities + Equity, 0.00 = 0.00")
    assert not text.endswith("\n")
