"""
Report Aggregations

DESIGN DECISION: Reports are computed from the user's transaction
list on every view; nothing is cached or stored. Lists are small
(a few thousand entries at most), so a single pass is plenty.

All amounts stay Decimal; formatting is left to the UI.
"""

from decimal import Decimal
from typing import Iterable, Optional

from pydantic import BaseModel, Field

from wealthtrack.constants import PERSONAL_GROUP
from wealthtrack.models.transaction import (
    GroupedCategory,
    Transaction,
    TransactionType,
)

ZERO = Decimal("0")


class DashboardTotals(BaseModel):
    """Headline numbers for the dashboard."""

    income: Decimal = ZERO
    expense: Decimal = ZERO
    recent: list[Transaction] = Field(default_factory=list)

    @property
    def balance(self) -> Decimal:
        return self.income - self.expense


class CategoryStat(BaseModel):
    """Totals for one category label."""

    name: str
    income: Decimal = ZERO
    expense: Decimal = ZERO
    count: int = 0

    @property
    def net(self) -> Decimal:
        return self.income - self.expense


class GroupStat(BaseModel):
    """Totals for one category group (a balance-sheet line)."""

    name: str
    income: Decimal = ZERO
    expense: Decimal = ZERO

    @property
    def net(self) -> Decimal:
        return self.income - self.expense


def dashboard_totals(
    transactions: Iterable[Transaction],
    recent_count: int = 5,
) -> DashboardTotals:
    """Total income, total expense and the most recently created entries."""
    transactions = list(transactions)
    totals = DashboardTotals()

    for t in transactions:
        if t.type == TransactionType.INCOME:
            totals.income += t.amount
        else:
            totals.expense += t.amount

    totals.recent = sorted(
        transactions, key=lambda t: t.timestamp, reverse=True
    )[:recent_count]
    return totals


def category_stats(transactions: Iterable[Transaction]) -> dict[str, CategoryStat]:
    """Income, expense and count per category label, in first-seen order."""
    stats: dict[str, CategoryStat] = {}

    for t in transactions:
        stat = stats.setdefault(t.category, CategoryStat(name=t.category))
        if t.type == TransactionType.INCOME:
            stat.income += t.amount
        else:
            stat.expense += t.amount
        stat.count += 1

    return stats


def group_for_category(
    category: str,
    categories: list[GroupedCategory],
) -> str:
    """The group a label belongs to; unknown labels count as Personal."""
    for group in categories:
        if category in group.items:
            return group.group
    return PERSONAL_GROUP


def group_stats(
    transactions: Iterable[Transaction],
    categories: list[GroupedCategory],
) -> list[GroupStat]:
    """
    Balance sheet by category group.

    Sorted by the size of the net balance, largest first, regardless
    of sign.
    """
    stats: dict[str, GroupStat] = {}

    for t in transactions:
        name = group_for_category(t.category, categories)
        stat = stats.setdefault(name, GroupStat(name=name))
        if t.type == TransactionType.INCOME:
            stat.income += t.amount
        else:
            stat.expense += t.amount

    return sorted(stats.values(), key=lambda s: abs(s.net), reverse=True)


def category_ledger(
    transactions: Iterable[Transaction],
    category: Optional[str],
) -> list[Transaction]:
    """Every transaction of one category, most recently created first."""
    if not category:
        return []
    return sorted(
        (t for t in transactions if t.category == category),
        key=lambda t: t.timestamp,
        reverse=True,
    )
