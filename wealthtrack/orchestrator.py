"""
Main Orchestrator for WealthTrack

This module ties together all the components and defines the
end-to-end flows for:
1. Users (create, switch)
2. Transactions (form → validate → save → audit, delete, record payment)
3. Categories (edit, reset, migrate)
4. Assistant (question → Gemini → answer, with fallback text)

DESIGN DECISION: The orchestrator enforces the boundaries:
- Nothing is saved unless validation reports no errors
- Every change to the books is audited
- The assistant never breaks the UI: failures become fallback text

The UI talks only to these flows, never to storage directly.
"""

from datetime import date
from typing import NamedTuple, Optional
from uuid import UUID

import structlog

from wealthtrack.agents import CONNECTION_FALLBACK, FinancialAdvisor
from wealthtrack.audit import AuditLogger, create_correlation_id
from wealthtrack.config import get_settings
from wealthtrack.constants import DEFAULT_PAYMENT_MODE, INTEREST_PAYMENT_NOTE
from wealthtrack.models.audit import AuditEventType
from wealthtrack.models.transaction import (
    GroupedCategory,
    Transaction,
    TransactionDraft,
    TransactionType,
    User,
    ValidationResult,
)
from wealthtrack.services.storage import (
    FinanceRepository,
    GoogleSheetsClient,
    GoogleSheetsStore,
    InMemoryStore,
    KeyValueStore,
    LocalJsonStore,
)
from wealthtrack.validation import TransactionValidator

logger = structlog.get_logger(__name__)


class UserFlow:
    """Creating users and switching the active one."""

    def __init__(
        self,
        repository: FinanceRepository,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._repository = repository
        self._audit_logger = audit_logger

    def list_users(self) -> list[User]:
        return self._repository.get_users()

    def active_user(self) -> Optional[User]:
        """The remembered active user, if it still exists."""
        user_id = self._repository.get_active_user_id()
        if user_id is None:
            return None
        return self._repository.get_user(user_id)

    def create_user(self, name: str) -> User:
        """
        Create a user and make them the active one.

        Raises:
            ValueError: If the name is blank
        """
        name = name.strip()
        if not name:
            raise ValueError("Name is required")

        user = self._repository.save_user(name)
        self._repository.set_active_user_id(user.id)

        if self._audit_logger:
            self._audit_logger.log_user_created(user_id=user.id, name=user.name)
        return user

    def select_user(self, user_id: str) -> None:
        self._repository.set_active_user_id(user_id)
        if self._audit_logger:
            self._audit_logger.log_user_selected(user_id=user_id)

    def logout(self) -> None:
        self._repository.set_active_user_id(None)


class TransactionFlow:
    """
    Orchestrates saving and removing transactions.

    Flow:
    1. Validate → Two-stage validation of the form draft
    2. Build → Draft becomes a Transaction
    3. Save → Persist; investor funds also register their investor
       as a category so repayments can be booked against them
    4. Audit → Every step that changes data is logged

    A draft with errors is NEVER saved.
    """

    def __init__(
        self,
        repository: FinanceRepository,
        validator: Optional[TransactionValidator] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._repository = repository
        self._validator = validator or TransactionValidator()
        self._audit_logger = audit_logger

    def list_transactions(self, user_id: str) -> list[Transaction]:
        return self._repository.get_transactions(user_id)

    def validate(
        self,
        draft: TransactionDraft,
        today: Optional[date] = None,
    ) -> tuple[ValidationResult, str]:
        """
        Validate a draft without saving it.

        Returns:
            (validation_result, user_message)
        """
        result = self._validator.validate(draft, today=today)
        return result, self._validator.get_user_friendly_summary(result)

    def save_transaction(
        self,
        user_id: str,
        draft: TransactionDraft,
        today: Optional[date] = None,
        correlation_id: Optional[UUID] = None,
    ) -> tuple[Optional[Transaction], ValidationResult, str]:
        """
        Validate and save a new transaction.

        Returns:
            (saved_transaction or None, validation_result, user_message)
        """
        correlation_id = correlation_id or create_correlation_id()

        result, message = self.validate(draft, today=today)
        if result.has_errors:
            if self._audit_logger:
                issues = [
                    {"field": i.field, "type": i.issue_type, "message": i.message}
                    for i in result.issues
                ]
                self._audit_logger.log_validation_failed(
                    issues=issues,
                    correlation_id=correlation_id,
                )
            return None, result, message

        transaction = self._validator.build_transaction(draft, user_id=user_id)
        saved = self._repository.add_transaction(transaction)

        if saved.is_investor_fund:
            investor_name = saved.investor_details.investor_name
            if self._repository.ensure_investor_category(investor_name):
                if self._audit_logger:
                    self._audit_logger.log_investor_category_added(investor_name)

        if self._audit_logger:
            self._audit_logger.log_transaction_saved(
                transaction_id=saved.id,
                transaction_type=saved.type.value,
                category=saved.category,
                amount=str(saved.amount),
                correlation_id=correlation_id,
            )

        return saved, result, message

    def update_transaction(
        self,
        transaction: Transaction,
        correlation_id: Optional[UUID] = None,
    ) -> bool:
        """Replace a stored transaction. Returns False if it no longer exists."""
        updated = self._repository.update_transaction(transaction)
        if updated and self._audit_logger:
            self._audit_logger.log_transaction_updated(
                transaction_id=transaction.id,
                correlation_id=correlation_id,
            )
        return updated

    def delete_transaction(
        self,
        transaction_id: str,
        correlation_id: Optional[UUID] = None,
    ) -> bool:
        """Delete a transaction. Returns False if it was already gone."""
        deleted = self._repository.delete_transaction(transaction_id)
        if deleted and self._audit_logger:
            self._audit_logger.log_transaction_deleted(
                transaction_id=transaction_id,
                correlation_id=correlation_id,
            )
        return deleted

    def prepare_payment(
        self,
        investor_name: str,
        on_date: Optional[date] = None,
    ) -> TransactionDraft:
        """
        Pre-fill an expense paying an investor.

        Makes sure the investor exists as a category first, so the
        payment shows up in their ledger.
        """
        if self._repository.ensure_investor_category(investor_name):
            if self._audit_logger:
                self._audit_logger.log_investor_category_added(investor_name)

        return TransactionDraft(
            type=TransactionType.EXPENSE,
            category=investor_name.strip(),
            payment_mode=DEFAULT_PAYMENT_MODE,
            on_date=on_date or date.today(),
            note=INTEREST_PAYMENT_NOTE,
        )


class CategoryFlow:
    """Editing the grouped category list."""

    def __init__(
        self,
        repository: FinanceRepository,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._repository = repository
        self._audit_logger = audit_logger

    def get_categories(self) -> list[GroupedCategory]:
        return self._repository.get_categories()

    def save_categories(self, groups: list[GroupedCategory]) -> None:
        self._repository.save_categories(groups)
        if self._audit_logger:
            self._audit_logger.log_categories_changed(
                event_type=AuditEventType.CATEGORIES_SAVED,
                group_count=len(groups),
            )

    def add_item(self, group_name: str, item: str) -> bool:
        """
        Add a label to a group.

        Returns:
            False if the label is blank, already in the group, or the
            group does not exist
        """
        item = item.strip()
        if not item:
            return False

        groups = self.get_categories()
        group = next((g for g in groups if g.group == group_name), None)
        if group is None or item in group.items:
            return False

        group.items.append(item)
        self.save_categories(groups)
        return True

    def remove_item(self, group_name: str, item: str) -> bool:
        """Remove a label from a group. Existing transactions keep their label."""
        groups = self.get_categories()
        group = next((g for g in groups if g.group == group_name), None)
        if group is None or item not in group.items:
            return False

        group.items.remove(item)
        self.save_categories(groups)
        return True

    def reset_categories(self) -> list[GroupedCategory]:
        groups = self._repository.reset_categories()
        if self._audit_logger:
            self._audit_logger.log_categories_changed(
                event_type=AuditEventType.CATEGORIES_RESET,
                group_count=len(groups),
            )
        return groups


class AdvisorFlow:
    """
    Orchestrates the assistant.

    The advisor is created on first use so the rest of the app works
    without a Gemini API key; a missing key simply yields the
    connection fallback text.
    """

    def __init__(
        self,
        repository: FinanceRepository,
        advisor: Optional[FinancialAdvisor] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._repository = repository
        self._advisor = advisor
        self._audit_logger = audit_logger

    def _get_advisor(self) -> FinancialAdvisor:
        if self._advisor is None:
            self._advisor = FinancialAdvisor()
        return self._advisor

    async def ask(
        self,
        question: str,
        user: User,
        correlation_id: Optional[UUID] = None,
    ) -> str:
        """
        Answer a question about the user's transactions.

        Never raises; returns fallback text when the assistant is
        unavailable.
        """
        correlation_id = correlation_id or create_correlation_id()
        transactions = self._repository.get_transactions(user.id)

        if self._audit_logger:
            self._audit_logger.log_advice_requested(
                user_id=user.id,
                question=question,
                transaction_count=len(transactions),
                correlation_id=correlation_id,
            )

        try:
            advisor = self._get_advisor()
        except Exception as e:
            logger.warning("advisor_not_configured", error=str(e))
            if self._audit_logger:
                self._audit_logger.log_advice_failed(
                    error_message=str(e),
                    correlation_id=correlation_id,
                )
            return CONNECTION_FALLBACK

        answer = await advisor.get_advice(question, transactions, user.name)

        if answer == CONNECTION_FALLBACK and self._audit_logger:
            self._audit_logger.log_advice_failed(
                error_message="Assistant request failed",
                correlation_id=correlation_id,
            )
        return answer


class AppComponents(NamedTuple):
    users: UserFlow
    transactions: TransactionFlow
    categories: CategoryFlow
    advisor: AdvisorFlow
    repository: FinanceRepository
    audit_logger: AuditLogger


def create_store(backend: Optional[str] = None) -> KeyValueStore:
    """
    Build the configured key-value store.

    Args:
        backend: "local", "memory" or "google_sheets";
                 defaults to STORAGE_BACKEND
    """
    settings = get_settings().storage
    backend = backend or settings.backend

    if backend == "memory":
        return InMemoryStore()
    if backend == "google_sheets":
        return GoogleSheetsStore(GoogleSheetsClient())
    if backend == "local":
        return LocalJsonStore(settings.data_file)
    raise ValueError(f"Unknown storage backend: {backend}")


def create_app_components(
    use_storage: bool = True,
    store: Optional[KeyValueStore] = None,
) -> AppComponents:
    """
    Factory function to create all application components.

    Args:
        use_storage: Whether to use the configured persistent store.
                     Set to False for an in-memory session.
        store: Explicit store to use instead (tests)
    """
    if store is None:
        if use_storage:
            try:
                store = create_store()
            except Exception as e:
                # Storage not configured - continue in memory
                logger.warning("storage_not_configured", error=str(e))
                store = InMemoryStore()
        else:
            store = InMemoryStore()

    audit_logger = AuditLogger(store)

    def on_migrated(groups: list[GroupedCategory], applied: list[str]) -> None:
        audit_logger.log_categories_changed(
            event_type=AuditEventType.CATEGORIES_MIGRATED,
            group_count=len(groups),
            details={"migrations": applied},
        )

    repository = FinanceRepository(store, on_categories_migrated=on_migrated)

    return AppComponents(
        users=UserFlow(repository, audit_logger),
        transactions=TransactionFlow(repository, audit_logger=audit_logger),
        categories=CategoryFlow(repository, audit_logger),
        advisor=AdvisorFlow(repository, audit_logger=audit_logger),
        repository=repository,
        audit_logger=audit_logger,
    )
