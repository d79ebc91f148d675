"""Tests for the end-to-end flows wired by create_app_components."""

import asyncio
from datetime import date
from unittest.mock import AsyncMock, MagicMock

import pytest

from wealthtrack.agents import CONNECTION_FALLBACK
from wealthtrack.constants import INTEREST_PAYMENT_NOTE, StorageKeys
from wealthtrack.models.audit import AuditEventType
from wealthtrack.models.transaction import ReturnPeriod, TransactionDraft, TransactionType
from wealthtrack.orchestrator import AdvisorFlow, create_app_components, create_store
from wealthtrack.services.storage import InMemoryStore

TODAY = date(2024, 6, 1)


@pytest.fixture
def components():
    return create_app_components(store=InMemoryStore())


def event_types(components):
    return [e.event_type for e in components.audit_logger.recent_events()]


def expense_draft(**overrides):
    fields = {
        "type": TransactionType.EXPENSE,
        "amount": "450",
        "category": "Groceries",
        "on_date": date(2024, 5, 30),
    }
    fields.update(overrides)
    return TransactionDraft(**fields)


class TestUserFlow:
    """Creating and switching users."""

    def test_create_user_becomes_active(self, components):
        user = components.users.create_user("  Asha ")

        assert user.name == "Asha"
        assert components.users.active_user() == user
        assert AuditEventType.USER_CREATED in event_types(components)

    def test_blank_name_rejected(self, components):
        with pytest.raises(ValueError):
            components.users.create_user("   ")
        assert components.users.list_users() == []

    def test_switch_and_logout(self, components):
        asha = components.users.create_user("Asha")
        ravi = components.users.create_user("Ravi")

        components.users.select_user(asha.id)
        assert components.users.active_user() == asha

        components.users.logout()
        assert components.users.active_user() is None
        assert [u.id for u in components.users.list_users()] == [asha.id, ravi.id]


class TestTransactionFlow:
    """Validate, save, audit."""

    def test_save_valid_expense(self, components):
        saved, result, _ = components.transactions.save_transaction(
            "u1", expense_draft(), today=TODAY
        )

        assert result.is_valid
        assert components.transactions.list_transactions("u1") == [saved]
        assert event_types(components)[0] == AuditEventType.TRANSACTION_SAVED

    def test_invalid_draft_never_saved(self, components):
        saved, result, message = components.transactions.save_transaction(
            "u1", expense_draft(amount="0"), today=TODAY
        )

        assert saved is None
        assert result.has_errors
        assert "greater than zero" in message
        assert components.transactions.list_transactions("u1") == []
        assert event_types(components) == [AuditEventType.VALIDATION_FAILED]

    def test_overlong_note_reported_not_raised(self, components):
        saved, result, message = components.transactions.save_transaction(
            "u1", expense_draft(note="x" * 1001), today=TODAY
        )

        assert saved is None
        assert "Note is too long" in message
        assert components.transactions.list_transactions("u1") == []
        assert event_types(components) == [AuditEventType.VALIDATION_FAILED]

    def test_investor_fund_registers_category(self, components):
        draft = expense_draft(
            type=TransactionType.INCOME,
            amount="100000",
            category="Investor Funds",
            investor_name="Ramesh",
            roi="12",
            return_period=ReturnPeriod.MONTHLY,
            duration_months=12,
        )

        saved, _, _ = components.transactions.save_transaction("u1", draft, today=TODAY)

        assert saved.investor_details.maturity_date == date(2025, 5, 30)
        investor = next(
            g for g in components.categories.get_categories()
            if g.group == "Investor Payments"
        )
        assert "Ramesh" in investor.items
        assert AuditEventType.INVESTOR_CATEGORY_ADDED in event_types(components)

    def test_prepare_payment(self, components):
        draft = components.transactions.prepare_payment("Suresh", on_date=TODAY)

        assert draft.type == TransactionType.EXPENSE
        assert draft.category == "Suresh"
        assert draft.note == INTEREST_PAYMENT_NOTE
        assert draft.on_date == TODAY
        assert draft.amount is None
        assert "Suresh" in components.repository.all_category_labels()

    def test_delete(self, components):
        saved, _, _ = components.transactions.save_transaction(
            "u1", expense_draft(), today=TODAY
        )

        assert components.transactions.delete_transaction(saved.id)
        assert not components.transactions.delete_transaction(saved.id)
        assert event_types(components).count(AuditEventType.TRANSACTION_DELETED) == 1


class TestCategoryFlow:
    """Editing the category list."""

    def test_add_and_remove_item(self, components):
        assert components.categories.add_item("Personal", "Pets")
        assert not components.categories.add_item("Personal", "Pets")
        assert not components.categories.add_item("Nowhere", "Pets")

        assert components.categories.remove_item("Personal", "Pets")
        assert not components.categories.remove_item("Personal", "Pets")

    def test_reset(self, components):
        components.categories.add_item("Personal", "Pets")
        groups = components.categories.reset_categories()

        personal = next(g for g in groups if g.group == "Personal")
        assert "Pets" not in personal.items
        assert event_types(components)[0] == AuditEventType.CATEGORIES_RESET

    def test_migration_is_audited(self):
        store = InMemoryStore()
        store.set_json(StorageKeys.CATEGORIES, [
            {"group": "Investor Payments", "items": []},
            {"group": "Personal", "items": ["Investor Funds"]},
        ])
        components = create_app_components(store=store)

        components.categories.get_categories()

        event = components.audit_logger.recent_events()[0]
        assert event.event_type == AuditEventType.CATEGORIES_MIGRATED
        assert event.details["migrations"][0] == "investor_funds_moved"


class TestAdvisorFlow:
    """The assistant never breaks the flow."""

    def test_answer_from_advisor(self, components):
        user = components.users.create_user("Asha")
        fake = MagicMock()
        fake.get_advice = AsyncMock(return_value="Looks healthy.")
        flow = AdvisorFlow(components.repository, advisor=fake,
                           audit_logger=components.audit_logger)

        assert asyncio.run(flow.ask("How am I doing?", user)) == "Looks healthy."
        fake.get_advice.assert_awaited_once_with("How am I doing?", [], "Asha")
        assert event_types(components)[0] == AuditEventType.ADVICE_REQUESTED

    def test_unconfigured_advisor_falls_back(self, components, monkeypatch):
        user = components.users.create_user("Asha")
        monkeypatch.setattr(
            "wealthtrack.orchestrator.FinancialAdvisor",
            MagicMock(side_effect=ValueError("GEMINI_API_KEY missing")),
        )

        answer = asyncio.run(components.advisor.ask("Hello?", user))

        assert answer == CONNECTION_FALLBACK
        assert event_types(components)[0] == AuditEventType.ADVICE_FAILED


class TestFactories:
    """Store selection."""

    def test_memory_store(self):
        assert isinstance(create_store("memory"), InMemoryStore)

    def test_unknown_backend(self):
        with pytest.raises(ValueError):
            create_store("floppy")
