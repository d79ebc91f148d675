"""
Finance Repository

Typed access to the documents kept in a KeyValueStore: users, the
active user, transactions and the grouped category list.

Every operation reads or writes a whole document. Missing keys
default to empty lists (or the default categories); stored entries
that no longer validate are skipped and logged rather than failing
the whole read.
"""

import copy
from datetime import datetime
from typing import Callable, Optional

import structlog
from pydantic import ValidationError

from wealthtrack.constants import (
    DEFAULT_CATEGORIES,
    INVESTMENTS_GROUP,
    INVESTOR_FUNDS_CATEGORY,
    INVESTOR_GROUP,
    PERSONAL_GROUP,
    StorageKeys,
)
from wealthtrack.models.transaction import (
    GroupedCategory,
    Transaction,
    User,
    new_id,
)
from wealthtrack.services.storage.interface import KeyValueStore

logger = structlog.get_logger(__name__)

# Items moved out of "Personal" when the Investments group was introduced
SIP_ITEMS = ["SIP (Regular)", "SIP (Gold)"]
NEW_INVESTMENTS_ITEMS = ["Mutual Funds", "Stocks"]


def default_categories() -> list[GroupedCategory]:
    return [GroupedCategory(**group) for group in copy.deepcopy(DEFAULT_CATEGORIES)]


def migrate_categories(groups: list[GroupedCategory]) -> tuple[list[GroupedCategory], list[str]]:
    """
    Bring a stored category list up to date, in place.

    Migrations:
    1. "Investor Funds" moves from Personal to the front of Investor Payments
    2. An Investments group is created (before Personal) when missing
    3. The SIP items move from Personal to the front of Investments

    Returns:
        (groups, names_of_applied_migrations)
    """
    applied = []

    def find(name: str) -> Optional[GroupedCategory]:
        return next((g for g in groups if g.group == name), None)

    personal = find(PERSONAL_GROUP)
    investor = find(INVESTOR_GROUP)

    if personal and investor and INVESTOR_FUNDS_CATEGORY in personal.items:
        personal.items.remove(INVESTOR_FUNDS_CATEGORY)
        if INVESTOR_FUNDS_CATEGORY not in investor.items:
            investor.items.insert(0, INVESTOR_FUNDS_CATEGORY)
        applied.append("investor_funds_moved")

    investments = find(INVESTMENTS_GROUP)
    if investments is None:
        investments = GroupedCategory(
            group=INVESTMENTS_GROUP,
            items=list(NEW_INVESTMENTS_ITEMS),
        )
        personal_idx = next(
            (i for i, g in enumerate(groups) if g.group == PERSONAL_GROUP),
            None,
        )
        if personal_idx is None:
            groups.append(investments)
        else:
            groups.insert(personal_idx, investments)
        applied.append("investments_group_created")

    if personal:
        for item in SIP_ITEMS:
            if item in personal.items:
                personal.items.remove(item)
                if item not in investments.items:
                    investments.items.insert(0, item)
                if "sip_items_moved" not in applied:
                    applied.append("sip_items_moved")

    return groups, applied


class FinanceRepository:
    """
    Repository for users, transactions and categories.

    All data lives in the given KeyValueStore under the fixed
    StorageKeys; the repository holds no state of its own.
    """

    def __init__(
        self,
        store: KeyValueStore,
        on_categories_migrated: Optional[Callable[[list[GroupedCategory], list[str]], None]] = None,
    ):
        """
        Args:
            store: Where the documents live
            on_categories_migrated: Called with (groups, migrations) after
                a stored category list was upgraded
        """
        self._store = store
        self._on_categories_migrated = on_categories_migrated

    @property
    def store(self) -> KeyValueStore:
        return self._store

    # -------------------------------------------------------------------------
    # Users
    # -------------------------------------------------------------------------

    def get_users(self) -> list[User]:
        """All users, in creation order."""
        users = []
        for raw in self._store.get_json(StorageKeys.USERS, default=[]) or []:
            try:
                users.append(User.model_validate(raw))
            except ValidationError as e:
                logger.warning("stored_user_invalid", error=str(e))
        return users

    def get_user(self, user_id: str) -> Optional[User]:
        return next((u for u in self.get_users() if u.id == user_id), None)

    def save_user(self, name: str) -> User:
        """Create and persist a new user."""
        user = User(name=name)
        users = self.get_users()
        users.append(user)
        self._store.set_json(StorageKeys.USERS, [u.to_storage() for u in users])
        logger.info("user_created", user_id=user.id)
        return user

    def get_active_user_id(self) -> Optional[str]:
        value = self._store.get_json(StorageKeys.ACTIVE_USER)
        return value if isinstance(value, str) and value else None

    def set_active_user_id(self, user_id: Optional[str]) -> None:
        if user_id is None:
            self._store.remove_item(StorageKeys.ACTIVE_USER)
        else:
            self._store.set_json(StorageKeys.ACTIVE_USER, user_id)

    # -------------------------------------------------------------------------
    # Transactions
    # -------------------------------------------------------------------------

    def _load_transactions(self) -> list[Transaction]:
        transactions = []
        for raw in self._store.get_json(StorageKeys.TRANSACTIONS, default=[]) or []:
            try:
                transactions.append(Transaction.model_validate(raw))
            except ValidationError as e:
                logger.warning(
                    "stored_transaction_invalid",
                    transaction_id=raw.get("id") if isinstance(raw, dict) else None,
                    error=str(e),
                )
        return transactions

    def _save_transactions(self, transactions: list[Transaction]) -> None:
        self._store.set_json(
            StorageKeys.TRANSACTIONS,
            [t.to_storage() for t in transactions],
        )

    def get_transactions(self, user_id: str) -> list[Transaction]:
        """A user's transactions, most recently created first."""
        return sorted(
            (t for t in self._load_transactions() if t.user_id == user_id),
            key=lambda t: t.timestamp,
            reverse=True,
        )

    def add_transaction(self, transaction: Transaction) -> Transaction:
        """
        Persist a new transaction.

        A fresh id and creation timestamp are always assigned.

        Returns:
            The stored transaction
        """
        stored = transaction.model_copy(
            update={"id": new_id(), "timestamp": datetime.now()}
        )
        transactions = self._load_transactions()
        transactions.append(stored)
        self._save_transactions(transactions)
        logger.info(
            "transaction_added",
            transaction_id=stored.id,
            type=stored.type.value,
            category=stored.category,
        )
        return stored

    def update_transaction(self, transaction: Transaction) -> bool:
        """
        Replace a stored transaction with the same id.

        Returns:
            False if no transaction has that id (nothing is written)
        """
        transactions = self._load_transactions()
        for idx, existing in enumerate(transactions):
            if existing.id == transaction.id:
                transactions[idx] = transaction
                self._save_transactions(transactions)
                return True
        return False

    def delete_transaction(self, transaction_id: str) -> bool:
        """
        Delete a transaction by id.

        Returns:
            True if something was deleted
        """
        transactions = self._load_transactions()
        remaining = [t for t in transactions if t.id != transaction_id]
        if len(remaining) == len(transactions):
            return False
        self._save_transactions(remaining)
        return True

    # -------------------------------------------------------------------------
    # Categories
    # -------------------------------------------------------------------------

    def get_categories(self) -> list[GroupedCategory]:
        """
        The grouped category list.

        Initializes the defaults on first use and applies the in-place
        migrations to older stored lists, saving only when something changed.
        """
        stored = self._store.get_json(StorageKeys.CATEGORIES)
        if stored is None:
            groups = default_categories()
            self.save_categories(groups)
            return groups

        groups = []
        for raw in stored:
            try:
                groups.append(GroupedCategory.model_validate(raw))
            except ValidationError as e:
                logger.warning("stored_category_group_invalid", error=str(e))

        groups, applied = migrate_categories(groups)
        if applied:
            self.save_categories(groups)
            logger.info("categories_migrated", migrations=applied)
            if self._on_categories_migrated:
                self._on_categories_migrated(groups, applied)

        return groups

    def save_categories(self, groups: list[GroupedCategory]) -> None:
        self._store.set_json(
            StorageKeys.CATEGORIES,
            [g.to_storage() for g in groups],
        )

    def reset_categories(self) -> list[GroupedCategory]:
        """Replace the stored list with the defaults."""
        groups = default_categories()
        self.save_categories(groups)
        return groups

    def ensure_investor_category(self, investor_name: str) -> bool:
        """
        Make sure an investor's name is a category in Investor Payments.

        The check is case-insensitive; a new entry keeps the given casing.
        The group is created if it has gone missing.

        Returns:
            True if the category was added
        """
        investor_name = investor_name.strip()
        if not investor_name:
            return False

        groups = self.get_categories()
        group = next((g for g in groups if g.group == INVESTOR_GROUP), None)
        if group is None:
            group = GroupedCategory(group=INVESTOR_GROUP, items=[])
            groups.append(group)

        wanted = investor_name.lower()
        if any(item.lower() == wanted for item in group.items):
            return False

        group.items.append(investor_name)
        self.save_categories(groups)
        return True

    def all_category_labels(self) -> list[str]:
        """Every category label across all groups, in display order."""
        return [item for group in self.get_categories() for item in group.items]
