"""
Excel Export

Builds a workbook with three sheets:
- "Balance Sheet": one row per category group
- "Categories": one row per category label
- "Transactions": the full ledger, with the investor terms
"""

import io
from datetime import date
from typing import Iterable, Optional

from openpyxl import Workbook
from openpyxl.styles import Alignment, Font
from openpyxl.worksheet.worksheet import Worksheet

from wealthtrack.models.transaction import GroupedCategory, Transaction
from wealthtrack.reports.summary import category_stats, group_stats

EXCEL_MIME_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
CURRENCY_FORMAT = "₹ #,##0.00"
DATE_FORMAT = "DD/MM/YYYY"

TRANSACTION_HEADERS = [
    "Date",
    "Type",
    "Category",
    "Amount",
    "Payment Mode",
    "Note",
    "Investor Name",
    "Purpose",
    "ROI (%)",
    "Duration (Months)",
    "Maturity Date",
    "Periodic Interest",
]


def export_filename(on: Optional[date] = None) -> str:
    on = on or date.today()
    return f"WealthTrack_Report_{on.isoformat()}.xlsx"


def _write_header(sheet: Worksheet, headers: list[str]) -> None:
    sheet.append(headers)
    for cell in sheet[1]:
        cell.font = Font(bold=True)
        cell.alignment = Alignment(horizontal="center")


def _format_columns(
    sheet: Worksheet,
    currency_columns: Iterable[str] = (),
    date_columns: Iterable[str] = (),
) -> None:
    """Apply number formats below the header and size columns to their content."""
    for letter in currency_columns:
        for cell in sheet[letter][1:]:
            cell.number_format = CURRENCY_FORMAT
    for letter in date_columns:
        for cell in sheet[letter][1:]:
            cell.number_format = DATE_FORMAT

    for column in sheet.columns:
        width = max(len(str(cell.value)) if cell.value is not None else 0 for cell in column)
        sheet.column_dimensions[column[0].column_letter].width = width + 2


def _transaction_row(t: Transaction) -> list:
    details = t.investor_details
    row = [
        t.date,
        t.type.value,
        t.category,
        float(t.amount),
        t.payment_mode or "",
        t.note or "",
    ]
    if details is None:
        return row + [""] * 6
    return row + [
        details.investor_name,
        details.purpose or "",
        float(details.roi),
        details.duration_months,
        details.maturity_date or "",
        float(details.periodic_interest_amount) if details.periodic_interest_amount else "",
    ]


def export_workbook(
    transactions: Iterable[Transaction],
    categories: list[GroupedCategory],
) -> bytes:
    """
    Render the report workbook.

    Returns:
        The .xlsx file contents
    """
    transactions = list(transactions)
    workbook = Workbook()

    balance = workbook.active
    balance.title = "Balance Sheet"
    _write_header(balance, ["Group", "Total Income", "Total Expense", "Net Balance"])
    for stat in group_stats(transactions, categories):
        balance.append([stat.name, float(stat.income), float(stat.expense), float(stat.net)])
    _format_columns(balance, currency_columns=["B", "C", "D"])

    cats = workbook.create_sheet("Categories")
    _write_header(cats, ["Category", "Income", "Expense", "Net", "Tx Count"])
    for stat in category_stats(transactions).values():
        cats.append([stat.name, float(stat.income), float(stat.expense), float(stat.net), stat.count])
    _format_columns(cats, currency_columns=["B", "C", "D"])

    ledger = workbook.create_sheet("Transactions")
    _write_header(ledger, TRANSACTION_HEADERS)
    for t in transactions:
        ledger.append(_transaction_row(t))
    _format_columns(
        ledger,
        currency_columns=["D", "L"],
        date_columns=["A", "K"],
    )

    output = io.BytesIO()
    workbook.save(output)
    return output.getvalue()
