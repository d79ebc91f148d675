"""
Investor Ledger Aggregation

Groups transactions into one account per investor:

- principal: income transactions carrying investor details
- interest accrued: projected interest already due as of the reference date
- paid: expense transactions whose category is the investor's name

Investors are matched case-insensitively. The display name is the
casing of the last income entry seen for that investor.
"""

from datetime import date, datetime, time
from typing import Iterable, Optional

from wealthtrack.interest.projection import interest_due_as_of
from wealthtrack.models.interest import (
    InterestEvent,
    InvestorAccount,
    PassbookEntry,
    PortfolioTotals,
)
from wealthtrack.models.transaction import Transaction, TransactionType


def investor_key(name: str) -> str:
    """Case-insensitive grouping key for an investor name."""
    return name.strip().lower()


def _epoch(day: date) -> float:
    return datetime.combine(day, time.min).timestamp()


def _real_entry(transaction: Transaction) -> PassbookEntry:
    is_credit = transaction.type == TransactionType.INCOME
    if transaction.note:
        description = transaction.note
    elif is_credit:
        description = "Principal received"
    else:
        description = "Payment made"

    return PassbookEntry(
        id=transaction.id,
        date=transaction.date,
        amount=transaction.amount,
        description=description,
        is_virtual=False,
        is_credit=is_credit,
        sort_key=transaction.timestamp.timestamp(),
        transaction=transaction,
    )


def _virtual_entry(event: InterestEvent) -> PassbookEntry:
    return PassbookEntry(
        id=event.id,
        date=event.date,
        amount=event.amount,
        description=event.note or "Interest Due",
        is_virtual=True,
        is_credit=False,
        sort_key=_epoch(event.date),
        related_transaction_id=event.transaction_id,
    )


def build_investor_accounts(
    transactions: Iterable[Transaction],
    as_of: Optional[date] = None,
) -> list[InvestorAccount]:
    """
    Build one InvestorAccount per investor.

    Args:
        transactions: All transactions of the current user
        as_of: Interest due on or before this date counts as accrued
               (defaults to today)

    Returns:
        Accounts in order of first appearance, each with a passbook
        sorted newest first.
    """
    as_of = as_of or date.today()
    transactions = list(transactions)
    accounts: dict[str, InvestorAccount] = {}

    # First pass: investors are defined by their income entries
    for t in transactions:
        if not t.is_investor_fund:
            continue

        name = t.investor_details.investor_name
        key = investor_key(name)
        account = accounts.get(key)
        if account is None:
            account = InvestorAccount(name=name)
            accounts[key] = account
        else:
            account.name = name

        account.total_principal += t.amount
        account.entries.append(_real_entry(t))

        for event in interest_due_as_of(t, as_of):
            account.total_interest_accrued += event.amount
            account.entries.append(_virtual_entry(event))

    # Second pass: payments recorded against an investor's category
    for t in transactions:
        if t.type != TransactionType.EXPENSE:
            continue
        account = accounts.get(investor_key(t.category))
        if account is None:
            continue
        account.total_paid += t.amount
        account.entries.append(_real_entry(t))

    for account in accounts.values():
        account.entries.sort(key=lambda e: (e.date, e.sort_key), reverse=True)

    return list(accounts.values())


def portfolio_totals(accounts: Iterable[InvestorAccount]) -> PortfolioTotals:
    """Sum principal, interest and payments across all investors."""
    totals = PortfolioTotals()
    for account in accounts:
        totals.principal += account.total_principal
        totals.interest += account.total_interest_accrued
        totals.paid += account.total_paid
        totals.investor_count += 1
    return totals


def find_account(
    accounts: Iterable[InvestorAccount],
    investor_name: str,
) -> Optional[InvestorAccount]:
    """Look up an account by investor name (case-insensitive)."""
    key = investor_key(investor_name)
    for account in accounts:
        if investor_key(account.name) == key:
            return account
    return None
