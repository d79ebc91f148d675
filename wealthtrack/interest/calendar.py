"""
Upcoming Payments Calendar

Flattens every investor fund into the principal maturities and
interest payments that fall due between today and the end of the
selected window, then lets the UI search, sort and colour them.
"""

from datetime import date, timedelta
from typing import Iterable, Optional

from wealthtrack.config import get_settings
from wealthtrack.interest.projection import (
    principal_maturity_event,
    project_interest_events,
)
from wealthtrack.models.interest import (
    EventKind,
    InterestEvent,
    SortOrder,
    TimeWindow,
    Urgency,
)
from wealthtrack.models.transaction import ReturnPeriod, Transaction
from wealthtrack.utils.dates import add_months, days_between

# Days-until-due at or below which an event counts as coming up soon
PRINCIPAL_SOON_DAYS = 30
INTEREST_SOON_DAYS = 15


def window_end(
    today: date,
    window: TimeWindow,
    lookahead_years: Optional[int] = None,
) -> date:
    """Last date covered by a calendar window."""
    if window.days is not None:
        return today + timedelta(days=window.days)
    if lookahead_years is None:
        lookahead_years = get_settings().app.calendar_lookahead_years
    return add_months(today, 12 * lookahead_years)


def upcoming_events(
    transactions: Iterable[Transaction],
    today: Optional[date] = None,
    window: TimeWindow = TimeWindow.ALL,
    lookahead_years: Optional[int] = None,
    max_periods: Optional[int] = None,
) -> list[InterestEvent]:
    """
    Principal and interest events due within [today, window end].

    Funds that pay interest on maturity contribute only their principal
    event here; their interest is settled together with the principal.
    Each event carries days_until_due relative to `today`.
    """
    today = today or date.today()
    end = window_end(today, window, lookahead_years)
    if max_periods is None:
        max_periods = get_settings().app.max_projected_periods

    events: list[InterestEvent] = []
    for t in transactions:
        details = t.investor_details
        if details is None:
            continue

        principal = principal_maturity_event(t)
        if today <= principal.date <= end:
            events.append(principal)

        if details.return_period == ReturnPeriod.MATURITY:
            continue

        events.extend(
            project_interest_events(t, start=today, end=end, max_periods=max_periods)
        )

    for event in events:
        event.days_until_due = days_between(today, event.date)

    events.sort(key=lambda e: e.date)
    return events


def filter_events(
    events: Iterable[InterestEvent],
    search: Optional[str],
) -> list[InterestEvent]:
    """Case-insensitive search on investor name, purpose or event kind."""
    events = list(events)
    if not search:
        return events

    needle = search.strip().lower()
    return [
        e for e in events
        if needle in e.investor_name.lower()
        or (e.purpose and needle in e.purpose.lower())
        or needle in e.kind_label
    ]


def sort_events(
    events: Iterable[InterestEvent],
    order: SortOrder = SortOrder.DATE_ASC,
) -> list[InterestEvent]:
    """Return the events in the requested order (stable)."""
    events = list(events)
    if order == SortOrder.DATE_ASC:
        return sorted(events, key=lambda e: e.date)
    if order == SortOrder.DATE_DESC:
        return sorted(events, key=lambda e: e.date, reverse=True)
    if order == SortOrder.AMOUNT_DESC:
        return sorted(events, key=lambda e: e.amount, reverse=True)
    if order == SortOrder.NAME_ASC:
        return sorted(events, key=lambda e: e.investor_name.lower())
    return events


def urgency(event: InterestEvent) -> Urgency:
    """
    Classify an event by how soon it falls due.

    upcoming_events never yields past dates, so OVERDUE only occurs for
    events a caller projected itself with days_until_due relative to a
    later reference date.
    """
    days = event.days_until_due
    if days is None:
        return Urgency.LATER
    if days < 0:
        return Urgency.OVERDUE

    threshold = (
        PRINCIPAL_SOON_DAYS if event.kind == EventKind.PRINCIPAL
        else INTEREST_SOON_DAYS
    )
    if days <= threshold:
        return Urgency.SOON
    return Urgency.LATER
