"""
Interest Engine Package

Projection of interest and principal events for investor funds,
per-investor ledgers and the upcoming-payments calendar.
"""

from wealthtrack.interest.calendar import (
    filter_events,
    sort_events,
    upcoming_events,
    urgency,
    window_end,
)
from wealthtrack.interest.ledger import (
    build_investor_accounts,
    find_account,
    investor_key,
    portfolio_totals,
)
from wealthtrack.interest.projection import (
    interest_amount_for,
    interest_due_as_of,
    interest_due_dates,
    maturity_of,
    periodic_interest_amount,
    principal_maturity_event,
    project_all_events,
    project_interest_events,
)

__all__ = [
    # Projection
    "interest_amount_for",
    "interest_due_as_of",
    "interest_due_dates",
    "maturity_of",
    "periodic_interest_amount",
    "principal_maturity_event",
    "project_all_events",
    "project_interest_events",
    # Ledger
    "build_investor_accounts",
    "find_account",
    "investor_key",
    "portfolio_totals",
    # Calendar
    "filter_events",
    "sort_events",
    "upcoming_events",
    "urgency",
    "window_end",
]
