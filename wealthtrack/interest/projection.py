"""
Interest Projection

Derives the interest and principal payments owed on an investor fund
from its start date, principal, rate, return period and duration.

DESIGN DECISION: Every due date is computed fresh from the start date
(start + N periods) rather than by stepping from the previous due date.
Stepping would lose the original day-of-month after the first clamp:
a monthly fund taken on Jan 31 is due Feb 28 (or 29), then Mar 31,
never Mar 28.

Projection is deterministic and single-pass. Nothing here is stored.
"""

from datetime import date
from decimal import Decimal
from typing import Iterator, Optional

from wealthtrack.models.interest import EventKind, InterestEvent
from wealthtrack.models.transaction import ReturnPeriod, Transaction
from wealthtrack.utils.dates import add_months, maturity_date_for

HUNDRED = Decimal("100")
TWELVE = Decimal("12")


def annual_interest(principal: Decimal, roi: Decimal) -> Decimal:
    """Interest for one full year at `roi` percent."""
    return Decimal(principal) * Decimal(roi) / HUNDRED


def periodic_interest_amount(
    principal: Decimal,
    roi: Decimal,
    period: ReturnPeriod,
    duration_months: int,
) -> Decimal:
    """
    Interest owed per payment.

    Periodic funds pay annual / periods-per-year each period.
    MATURITY funds pay annual x (duration / 12) once.
    """
    annual = annual_interest(principal, roi)
    if period == ReturnPeriod.MATURITY:
        return annual * Decimal(duration_months) / TWELVE
    return annual / Decimal(period.periods_per_year)


def interest_amount_for(transaction: Transaction) -> Decimal:
    """
    Interest per payment for a stored transaction.

    Prefers the amount fixed when the fund was recorded and falls back
    to computing it from the terms.
    """
    details = transaction.investor_details
    if details is None:
        return Decimal("0")

    if details.periodic_interest_amount:
        return details.periodic_interest_amount

    return periodic_interest_amount(
        principal=transaction.amount,
        roi=details.roi,
        period=details.return_period,
        duration_months=details.duration_months,
    )


def maturity_of(transaction: Transaction) -> Optional[date]:
    """Maturity date of an investor fund (None for ordinary transactions)."""
    details = transaction.investor_details
    if details is None:
        return None
    return details.maturity_date or maturity_date_for(
        transaction.date, details.duration_months
    )


def interest_due_dates(
    transaction: Transaction,
    max_periods: Optional[int] = None,
) -> Iterator[tuple[int, date]]:
    """
    Yield (period_number, due_date) for a periodic fund.

    Stops once a due date would fall after the maturity date, or after
    `max_periods` periods when a cap is given. Yields nothing for
    MATURITY funds and ordinary transactions.
    """
    details = transaction.investor_details
    if details is None:
        return

    step = details.return_period.months_per_period
    if not step:
        return

    maturity = maturity_of(transaction)
    n = 1
    while max_periods is None or n <= max_periods:
        due = add_months(transaction.date, step * n)
        if due > maturity:
            return
        yield n, due
        n += 1


def _interest_event(
    transaction: Transaction,
    due: date,
    amount: Decimal,
    sequence: int,
) -> InterestEvent:
    details = transaction.investor_details
    if details.return_period == ReturnPeriod.MATURITY:
        event_id = f"int-{transaction.id}-maturity"
        note = "Interest Due on Maturity"
    else:
        event_id = f"int-{transaction.id}-{sequence}"
        note = f"Interest Due ({details.return_period.value}) #{sequence}"

    return InterestEvent(
        id=event_id,
        kind=EventKind.INTEREST,
        date=due,
        amount=amount,
        sequence=sequence,
        investor_name=details.investor_name,
        purpose=details.purpose,
        note=note,
        transaction_id=transaction.id,
        roi=details.roi,
        return_period=details.return_period,
    )


def project_interest_events(
    transaction: Transaction,
    start: Optional[date] = None,
    end: Optional[date] = None,
    max_periods: Optional[int] = None,
) -> list[InterestEvent]:
    """
    Project the interest events of one investor fund within [start, end].

    Either bound may be None (open). Returns events in date order.
    No events are produced for ordinary transactions, a zero rate or a
    zero interest amount.
    """
    details = transaction.investor_details
    if details is None or not details.roi:
        return []

    amount = interest_amount_for(transaction)
    if amount <= 0:
        return []

    def in_window(day: date) -> bool:
        if start is not None and day < start:
            return False
        if end is not None and day > end:
            return False
        return True

    if details.return_period == ReturnPeriod.MATURITY:
        maturity = maturity_of(transaction)
        if not in_window(maturity):
            return []
        return [_interest_event(transaction, maturity, amount, 1)]

    events = []
    for sequence, due in interest_due_dates(transaction, max_periods):
        if end is not None and due > end:
            break
        if in_window(due):
            events.append(_interest_event(transaction, due, amount, sequence))
    return events


def interest_due_as_of(
    transaction: Transaction,
    as_of: date,
) -> list[InterestEvent]:
    """
    Interest that has already fallen due on or before `as_of`.

    A MATURITY fund contributes its single event only once the
    maturity date has been reached.
    """
    return project_interest_events(transaction, end=as_of)


def principal_maturity_event(transaction: Transaction) -> Optional[InterestEvent]:
    """The principal repayment owed on the maturity date."""
    details = transaction.investor_details
    if details is None:
        return None

    return InterestEvent(
        id=f"{transaction.id}-maturity",
        kind=EventKind.PRINCIPAL,
        date=maturity_of(transaction),
        amount=transaction.amount,
        investor_name=details.investor_name,
        purpose=details.purpose,
        note=transaction.note,
        transaction_id=transaction.id,
        roi=details.roi,
        return_period=details.return_period,
    )


def project_all_events(
    transaction: Transaction,
    start: Optional[date] = None,
    end: Optional[date] = None,
) -> list[InterestEvent]:
    """Interest events in the window plus the principal maturity event, date ordered."""
    events = project_interest_events(transaction, start=start, end=end)
    principal = principal_maturity_event(transaction)
    if principal is not None:
        events.append(principal)
    events.sort(key=lambda e: (e.date, e.kind == EventKind.PRINCIPAL))
    return events
