"""
Calendar helpers shared by the models and the interest engine.

Month arithmetic goes through dateutil's relativedelta, which clamps
the day to the last valid day of the target month (Jan 31 + 1 month
is Feb 28, or Feb 29 in a leap year).
"""

from datetime import date

from dateutil.relativedelta import relativedelta


def add_months(start: date, months: int) -> date:
    """Add calendar months to a date, clamping the day-of-month."""
    return start + relativedelta(months=months)


def maturity_date_for(start: date, duration_months: int) -> date:
    """Maturity of an investment taken on `start` for `duration_months`."""
    return add_months(start, duration_months)


def days_between(start: date, end: date) -> int:
    """Whole days from start to end (negative when end is earlier)."""
    return (end - start).days
