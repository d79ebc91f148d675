"""
Tests for WealthTrack models

Test strategy:
1. Unit tests for individual components (models, validators, engines)
2. Integration tests for flows (in-memory storage)
3. No real API calls in tests (use mocks)
"""

import pytest
from datetime import date, datetime
from decimal import Decimal
from uuid import uuid4

from wealthtrack.models.transaction import (
    GroupedCategory,
    InvestorDetails,
    ReturnPeriod,
    Transaction,
    TransactionDraft,
    TransactionType,
    User,
    ValidationIssue,
    ValidationResult,
)
from wealthtrack.models.interest import EventKind, InterestEvent, TimeWindow
from wealthtrack.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)
from wealthtrack.utils import format_currency


class TestTransactionModels:
    """Tests for transaction-related Pydantic models."""

    def test_transaction_creation(self):
        """Test Transaction model creation with defaults."""
        t = Transaction(
            user_id="u1",
            amount=Decimal("250.50"),
            type=TransactionType.EXPENSE,
            category="Groceries",
            date=date(2024, 3, 1),
        )
        assert t.id
        assert isinstance(t.timestamp, datetime)
        assert t.signed_amount == Decimal("-250.50")
        assert not t.is_investor_fund

    def test_transaction_strips_whitespace(self):
        """Test that whitespace is stripped from text fields."""
        t = Transaction(
            user_id="u1",
            amount=1,
            type=TransactionType.INCOME,
            category="  Salary  ",
            date=date(2024, 3, 1),
        )
        assert t.category == "Salary"

    def test_transaction_rejects_non_positive_amount(self):
        """Test that zero and negative amounts are rejected."""
        for amount in (Decimal("0"), Decimal("-5")):
            with pytest.raises(ValueError):
                Transaction(
                    user_id="u1",
                    amount=amount,
                    type=TransactionType.EXPENSE,
                    category="Groceries",
                    date=date(2024, 3, 1),
                )

    def test_investor_details_fill_maturity_date(self, make_fund):
        """Maturity is derived from the date and duration when missing."""
        fund = make_fund(on=date(2024, 1, 31), duration=1)
        assert fund.investor_details.maturity_date == date(2024, 2, 29)
        assert fund.is_investor_fund

    def test_explicit_maturity_date_kept(self):
        """A supplied maturity date is not overwritten."""
        t = Transaction(
            user_id="u1",
            amount=1000,
            type=TransactionType.INCOME,
            category="Investor Funds",
            investor_details=InvestorDetails(
                investor_name="Ramesh",
                roi=10,
                return_period=ReturnPeriod.YEARLY,
                duration_months=12,
                maturity_date=date(2030, 1, 1),
            ),
            date=date(2024, 1, 1),
        )
        assert t.investor_details.maturity_date == date(2030, 1, 1)

    def test_investor_details_only_on_income(self):
        """Test that investor details are refused on expenses."""
        with pytest.raises(ValueError, match="only be attached to income"):
            Transaction(
                user_id="u1",
                amount=1000,
                type=TransactionType.EXPENSE,
                category="Ramesh",
                investor_details=InvestorDetails(
                    investor_name="Ramesh",
                    roi=10,
                    return_period=ReturnPeriod.MONTHLY,
                    duration_months=12,
                ),
                date=date(2024, 1, 1),
            )

    def test_storage_uses_camel_case(self, make_fund):
        """Stored documents keep camelCase keys and round-trip."""
        fund = make_fund(periodic="1000")
        stored = fund.to_storage()

        assert stored["userId"] == "user-1"
        assert stored["investorDetails"]["investorName"] == "Ramesh"
        assert stored["investorDetails"]["returnPeriod"] == "Monthly"
        assert "linkedTransactionId" not in stored

        restored = Transaction.model_validate(stored)
        assert restored == fund

    def test_transaction_from_stored_document(self):
        """A raw camelCase document as read back from storage."""
        t = Transaction.model_validate({
            "id": "t-1",
            "userId": "user-1",
            "amount": 250000,
            "type": "INCOME",
            "category": "Investor Funds",
            "paymentMode": "Bank Transfer",
            "timestamp": "2024-03-01T10:30:00",
            "date": "2024-03-01",
            "investorDetails": {
                "investorName": "Suresh",
                "roi": 18,
                "returnPeriod": "Quarterly",
                "durationMonths": 24,
            },
        })

        assert t.date == date(2024, 3, 1)
        assert t.amount == Decimal("250000")
        assert t.payment_mode == "Bank Transfer"
        assert t.investor_details.return_period == ReturnPeriod.QUARTERLY
        assert t.investor_details.maturity_date == date(2026, 3, 1)

    def test_return_period_cadence(self):
        """Test months and payments per period."""
        assert ReturnPeriod.MONTHLY.months_per_period == 1
        assert ReturnPeriod.QUARTERLY.periods_per_year == 4
        assert ReturnPeriod.HALF_YEARLY.months_per_period == 6
        assert ReturnPeriod.YEARLY.periods_per_year == 1
        assert ReturnPeriod.MATURITY.months_per_period is None
        assert ReturnPeriod.MATURITY.periods_per_year is None

    def test_user_and_category_models(self):
        user = User(name=" Asha ")
        assert user.name == "Asha"
        assert user.to_storage()["createdAt"]

        group = GroupedCategory(group="Personal")
        assert group.items == []

    def test_draft_investor_flag(self):
        assert not TransactionDraft(amount="10").has_investor_details
        assert TransactionDraft(investor_name="Ramesh").has_investor_details


class TestValidationModels:
    """Tests for validation result models."""

    def test_validation_result_counts(self):
        result = ValidationResult(issues=[
            ValidationIssue(field="amount", issue_type="missing", message="a", severity="error"),
            ValidationIssue(field="date", issue_type="future_date", message="b", severity="warning"),
        ])
        assert result.has_errors
        assert not result.is_valid
        assert result.error_count == 1
        assert result.warnings == ["b"]

    def test_validation_issue_severity_pattern(self):
        with pytest.raises(ValueError):
            ValidationIssue(field="x", issue_type="y", message="z", severity="fatal")


class TestInterestModels:
    """Tests for calendar models."""

    def test_time_window_days(self):
        assert TimeWindow.DAYS_30.days == 30
        assert TimeWindow.DAYS_90.days == 90
        assert TimeWindow.ALL.days is None

    def test_event_kind_label(self):
        event = InterestEvent(
            id="x-maturity",
            kind=EventKind.PRINCIPAL,
            date=date(2024, 1, 1),
            amount=Decimal("100"),
            investor_name="Ramesh",
            transaction_id="x",
        )
        assert event.kind_label == "maturity"


class TestAuditModels:
    """Tests for audit-related models."""

    def test_audit_event_creation(self):
        """Test AuditEvent model creation."""
        event = AuditEvent(
            event_type=AuditEventType.TRANSACTION_SAVED,
            description="Saved",
        )
        assert event.severity == AuditSeverity.INFO
        assert event.event_id is not None

    def test_audit_event_to_log_dict(self):
        """Test conversion to log dictionary."""
        correlation_id = uuid4()
        event = AuditEvent(
            event_type=AuditEventType.STORAGE_ERROR,
            severity=AuditSeverity.ERROR,
            description="Write failed",
            correlation_id=correlation_id,
        )
        log_dict = event.to_log_dict()
        assert log_dict["event_type"] == "storage_error"
        assert log_dict["severity"] == "error"
        assert log_dict["correlation_id"] == str(correlation_id)

    def test_audit_event_builder_transaction_saved(self):
        """Test builder for transaction saves."""
        event = AuditEventBuilder.transaction_saved(
            transaction_id="t1",
            transaction_type="INCOME",
            category="Salary",
            amount="5000",
        )
        assert event.event_type == AuditEventType.TRANSACTION_SAVED
        assert event.entity_id == "t1"
        assert event.is_user_action
        assert "Salary" in event.description

    def test_audit_event_builder_categories_migrated(self):
        """Migrations are not user actions."""
        event = AuditEventBuilder.categories_changed(
            event_type=AuditEventType.CATEGORIES_MIGRATED,
            group_count=4,
        )
        assert not event.is_user_action
        assert event.description == "Categories migrated: 4 groups"


class TestCurrencyFormatting:
    """Tests for rupee formatting."""

    def test_indian_grouping(self):
        assert format_currency(123456) == "₹1,23,456"
        assert format_currency(Decimal("12345678")) == "₹1,23,45,678"
        assert format_currency(999) == "₹999"

    def test_negative_with_decimals(self):
        assert format_currency(Decimal("-1500.5"), decimals=2) == "-₹1,500.50"
