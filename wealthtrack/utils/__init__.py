"""Shared helpers."""

from wealthtrack.utils.dates import add_months, days_between, maturity_date_for
from wealthtrack.utils.currency import format_currency

__all__ = ["add_months", "days_between", "format_currency", "maturity_date_for"]
