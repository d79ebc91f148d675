"""
Interest and Calendar Models

Projected events are VIRTUAL: they are derived from stored investor
transactions every time they are needed and are never persisted.
"""

import datetime as dt
from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from wealthtrack.models.transaction import ReturnPeriod, Transaction


class EventKind(str, Enum):
    """What falls due on a projected date."""
    INTEREST = "INTEREST"
    PRINCIPAL = "PRINCIPAL"


class Urgency(str, Enum):
    """How soon a calendar event needs attention."""
    OVERDUE = "overdue"
    SOON = "soon"
    LATER = "later"


class TimeWindow(str, Enum):
    """Look-ahead window of the payment calendar."""
    DAYS_30 = "30"
    DAYS_60 = "60"
    DAYS_90 = "90"
    ALL = "ALL"

    @property
    def days(self) -> Optional[int]:
        return None if self is TimeWindow.ALL else int(self.value)


class SortOrder(str, Enum):
    """Orderings offered by the payment calendar."""
    DATE_ASC = "DATE_ASC"
    DATE_DESC = "DATE_DESC"
    AMOUNT_DESC = "AMOUNT_DESC"
    NAME_ASC = "NAME_ASC"


class InterestEvent(BaseModel):
    """A projected interest or principal payment owed to an investor."""

    id: str = Field(..., description="Stable id derived from the source transaction")
    kind: EventKind
    date: dt.date
    amount: Decimal = Field(..., ge=0)
    sequence: int = Field(
        default=0,
        ge=0,
        description="1-based period number for interest, 0 for principal"
    )
    investor_name: str
    purpose: Optional[str] = None
    note: Optional[str] = None
    transaction_id: str
    roi: Optional[Decimal] = None
    return_period: Optional[ReturnPeriod] = None
    days_until_due: Optional[int] = Field(
        default=None,
        description="Days from the reference date (negative when past)"
    )

    @property
    def kind_label(self) -> str:
        return "maturity" if self.kind == EventKind.PRINCIPAL else "interest"


class PassbookEntry(BaseModel):
    """
    One line of an investor's passbook.

    Either a real stored transaction or a virtual interest-due entry.
    """

    id: str
    date: dt.date
    amount: Decimal
    description: str
    is_virtual: bool = False
    is_credit: bool = Field(
        ...,
        description="True when money came in from the investor"
    )
    sort_key: float = Field(
        ...,
        description="Epoch seconds used to order the passbook"
    )
    transaction: Optional[Transaction] = None
    related_transaction_id: Optional[str] = None


class InvestorAccount(BaseModel):
    """Everything owed to and paid to one investor."""

    name: str
    total_principal: Decimal = Decimal("0")
    total_interest_accrued: Decimal = Decimal("0")
    total_paid: Decimal = Decimal("0")
    entries: list[PassbookEntry] = Field(default_factory=list)

    @property
    def outstanding(self) -> Decimal:
        """Principal plus accrued interest minus payments."""
        return self.total_principal + self.total_interest_accrued - self.total_paid


class PortfolioTotals(BaseModel):
    """Sums over all investor accounts."""

    principal: Decimal = Decimal("0")
    interest: Decimal = Decimal("0")
    paid: Decimal = Decimal("0")
    investor_count: int = 0

    @property
    def outstanding(self) -> Decimal:
        return self.principal + self.interest - self.paid
