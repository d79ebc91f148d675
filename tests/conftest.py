"""Shared fixtures: transaction factories and an in-memory repository."""

from datetime import date, datetime

import pytest

from wealthtrack.models.transaction import (
    InvestorDetails,
    ReturnPeriod,
    Transaction,
    TransactionType,
)
from wealthtrack.services.storage import FinanceRepository, InMemoryStore


@pytest.fixture
def make_fund():
    """Factory for income transactions carrying investor details."""

    def _make(
        amount="100000",
        roi="12",
        period=ReturnPeriod.MONTHLY,
        duration=12,
        on=date(2024, 1, 15),
        investor="Ramesh",
        periodic=None,
        purpose=None,
        user_id="user-1",
        timestamp=None,
    ) -> Transaction:
        return Transaction(
            user_id=user_id,
            amount=amount,
            type=TransactionType.INCOME,
            category="Investor Funds",
            timestamp=timestamp or datetime(2024, 1, 1, 9, 0),
            investor_details=InvestorDetails(
                investor_name=investor,
                roi=roi,
                return_period=period,
                duration_months=duration,
                purpose=purpose,
                periodic_interest_amount=periodic,
            ),
            date=on,
        )

    return _make


@pytest.fixture
def make_transaction():
    """Factory for ordinary transactions."""

    def _make(
        amount="1000",
        category="Groceries",
        tx_type=TransactionType.EXPENSE,
        on=date(2024, 2, 1),
        note=None,
        user_id="user-1",
        timestamp=None,
        payment_mode=None,
    ) -> Transaction:
        return Transaction(
            user_id=user_id,
            amount=amount,
            type=tx_type,
            category=category,
            note=note,
            payment_mode=payment_mode,
            timestamp=timestamp or datetime(2024, 1, 1, 9, 0),
            date=on,
        )

    return _make


@pytest.fixture
def store():
    return InMemoryStore()


@pytest.fixture
def repository(store):
    return FinanceRepository(store)
