"""Tests for month arithmetic and interest projection."""

from datetime import date
from decimal import Decimal

from wealthtrack.interest.projection import (
    interest_amount_for,
    interest_due_as_of,
    interest_due_dates,
    periodic_interest_amount,
    principal_maturity_event,
    project_all_events,
    project_interest_events,
)
from wealthtrack.models.interest import EventKind
from wealthtrack.models.transaction import ReturnPeriod
from wealthtrack.utils.dates import add_months, days_between, maturity_date_for


class TestMonthArithmetic:
    """Calendar-month addition clamps to the end of short months."""

    def test_month_end_clamps_in_leap_year(self):
        assert add_months(date(2024, 1, 31), 1) == date(2024, 2, 29)

    def test_month_end_clamps_in_common_year(self):
        assert add_months(date(2025, 1, 31), 1) == date(2025, 2, 28)

    def test_day_restored_after_short_month(self):
        """Computed from the start date, Jan 31 + 2 months is Mar 31."""
        assert add_months(date(2025, 1, 31), 2) == date(2025, 3, 31)

    def test_year_rollover(self):
        assert add_months(date(2024, 11, 30), 3) == date(2025, 2, 28)

    def test_maturity_date_for(self):
        assert maturity_date_for(date(2024, 1, 31), 13) == date(2025, 2, 28)
        assert maturity_date_for(date(2024, 6, 15), 12) == date(2025, 6, 15)

    def test_days_between(self):
        assert days_between(date(2024, 1, 1), date(2024, 1, 31)) == 30
        assert days_between(date(2024, 1, 31), date(2024, 1, 1)) == -30


class TestInterestAmounts:
    """Periodic interest amounts per return period."""

    def test_monthly(self):
        amount = periodic_interest_amount(Decimal("100000"), Decimal("12"), ReturnPeriod.MONTHLY, 12)
        assert amount == Decimal("1000")

    def test_quarterly_and_half_yearly(self):
        principal, roi = Decimal("100000"), Decimal("12")
        assert periodic_interest_amount(principal, roi, ReturnPeriod.QUARTERLY, 12) == Decimal("3000")
        assert periodic_interest_amount(principal, roi, ReturnPeriod.HALF_YEARLY, 12) == Decimal("6000")
        assert periodic_interest_amount(principal, roi, ReturnPeriod.YEARLY, 12) == Decimal("12000")

    def test_maturity_pays_full_term(self):
        amount = periodic_interest_amount(Decimal("100000"), Decimal("12"), ReturnPeriod.MATURITY, 18)
        assert amount == Decimal("18000")

    def test_stored_amount_preferred(self, make_fund):
        assert interest_amount_for(make_fund(periodic="1500")) == Decimal("1500")

    def test_computed_when_not_stored(self, make_fund):
        assert interest_amount_for(make_fund(periodic=None)) == Decimal("1000")

    def test_zero_stored_amount_falls_back(self, make_fund):
        assert interest_amount_for(make_fund(periodic="0")) == Decimal("1000")

    def test_ordinary_transaction_has_no_interest(self, make_transaction):
        assert interest_amount_for(make_transaction()) == Decimal("0")


class TestDueDates:
    """Due dates are computed fresh from the start date."""

    def test_month_end_start_does_not_drift(self, make_fund):
        fund = make_fund(on=date(2024, 1, 31), duration=3)
        assert list(interest_due_dates(fund)) == [
            (1, date(2024, 2, 29)),
            (2, date(2024, 3, 31)),
            (3, date(2024, 4, 30)),
        ]

    def test_common_year_sequence(self, make_fund):
        fund = make_fund(on=date(2025, 1, 31), duration=2)
        assert [d for _, d in interest_due_dates(fund)] == [
            date(2025, 2, 28),
            date(2025, 3, 31),
        ]

    def test_stops_at_maturity(self, make_fund):
        fund = make_fund(on=date(2024, 1, 15), duration=12)
        dates = list(interest_due_dates(fund))
        assert len(dates) == 12
        assert dates[-1] == (12, date(2025, 1, 15))

    def test_quarterly_dates(self, make_fund):
        fund = make_fund(period=ReturnPeriod.QUARTERLY, on=date(2024, 1, 15), duration=12)
        assert [d for _, d in interest_due_dates(fund)] == [
            date(2024, 4, 15),
            date(2024, 7, 15),
            date(2024, 10, 15),
            date(2025, 1, 15),
        ]

    def test_period_longer_than_term(self, make_fund):
        """A yearly fund for 6 months never reaches a due date."""
        fund = make_fund(period=ReturnPeriod.YEARLY, duration=6)
        assert list(interest_due_dates(fund)) == []

    def test_max_periods_cap(self, make_fund):
        fund = make_fund(duration=120)
        assert len(list(interest_due_dates(fund, max_periods=5))) == 5

    def test_maturity_period_has_no_periodic_dates(self, make_fund):
        assert list(interest_due_dates(make_fund(period=ReturnPeriod.MATURITY))) == []


class TestProjectInterestEvents:
    """Projection of interest events into a window."""

    def test_periodic_events(self, make_fund):
        fund = make_fund(on=date(2024, 1, 15), duration=3)
        events = project_interest_events(fund)

        assert [e.sequence for e in events] == [1, 2, 3]
        assert all(e.kind == EventKind.INTEREST for e in events)
        assert all(e.amount == Decimal("1000") for e in events)
        assert events[0].id == f"int-{fund.id}-1"
        assert events[0].note == "Interest Due (Monthly) #1"
        assert events[0].investor_name == "Ramesh"
        assert events[0].transaction_id == fund.id

    def test_window_bounds_inclusive(self, make_fund):
        fund = make_fund(on=date(2024, 1, 15), duration=12)
        events = project_interest_events(fund, start=date(2024, 3, 15), end=date(2024, 5, 15))
        assert [e.date for e in events] == [
            date(2024, 3, 15),
            date(2024, 4, 15),
            date(2024, 5, 15),
        ]
        assert [e.sequence for e in events] == [2, 3, 4]

    def test_no_events_without_rate(self, make_fund):
        assert project_interest_events(make_fund(roi="0")) == []

    def test_no_events_for_ordinary_transaction(self, make_transaction):
        assert project_interest_events(make_transaction()) == []

    def test_maturity_single_event(self, make_fund):
        fund = make_fund(period=ReturnPeriod.MATURITY, on=date(2024, 1, 15), duration=24)
        events = project_interest_events(fund)

        assert len(events) == 1
        event = events[0]
        assert event.id == f"int-{fund.id}-maturity"
        assert event.date == date(2026, 1, 15)
        assert event.amount == Decimal("24000")
        assert event.note == "Interest Due on Maturity"


class TestInterestDueAsOf:
    """Interest already fallen due at a reference date."""

    def test_periodic_accrual(self, make_fund):
        fund = make_fund(on=date(2024, 1, 15), duration=12)
        due = interest_due_as_of(fund, date(2024, 4, 14))
        assert [e.date for e in due] == [date(2024, 2, 15), date(2024, 3, 15)]

    def test_nothing_due_before_first_period(self, make_fund):
        fund = make_fund(on=date(2024, 1, 15))
        assert interest_due_as_of(fund, date(2024, 2, 14)) == []

    def test_maturity_only_after_maturity(self, make_fund):
        fund = make_fund(period=ReturnPeriod.MATURITY, on=date(2024, 1, 15), duration=12)
        assert interest_due_as_of(fund, date(2025, 1, 14)) == []

        due = interest_due_as_of(fund, date(2025, 1, 15))
        assert len(due) == 1
        assert due[0].amount == Decimal("12000")


class TestPrincipalEvent:
    """Principal repayment on maturity."""

    def test_principal_event(self, make_fund):
        fund = make_fund(on=date(2024, 1, 31), duration=1, purpose="Galaxy")
        event = principal_maturity_event(fund)

        assert event.kind == EventKind.PRINCIPAL
        assert event.id == f"{fund.id}-maturity"
        assert event.date == date(2024, 2, 29)
        assert event.amount == Decimal("100000")
        assert event.purpose == "Galaxy"

    def test_no_principal_for_ordinary_transaction(self, make_transaction):
        assert principal_maturity_event(make_transaction()) is None

    def test_all_events_put_interest_before_principal(self, make_fund):
        fund = make_fund(on=date(2024, 1, 15), duration=2)
        events = project_all_events(fund)
        assert [e.kind for e in events] == [
            EventKind.INTEREST,
            EventKind.INTEREST,
            EventKind.PRINCIPAL,
        ]
        assert events[-1].date == events[-2].date
