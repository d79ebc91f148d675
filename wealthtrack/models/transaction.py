"""
Core Data Models for WealthTrack

These models define the schemas for everything the app stores:
users, transactions (with optional investor details) and the
grouped category list.

DESIGN DECISION: Stored JSON uses camelCase keys (userId,
investorDetails, ...). The models generate those aliases and
accept snake_case too, so Python code reads naturally while the
stored documents keep their established shape.
"""

import datetime as dt
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Optional
from uuid import uuid4

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    model_validator,
)
from pydantic.alias_generators import to_camel

from wealthtrack.utils.dates import maturity_date_for


def new_id() -> str:
    return str(uuid4())


# =============================================================================
# ENUMS
# =============================================================================

class TransactionType(str, Enum):
    """Direction of money."""
    INCOME = "INCOME"
    EXPENSE = "EXPENSE"


class ReturnPeriod(str, Enum):
    """
    Cadence at which interest is due on an investor fund.

    MATURITY means all interest is paid together with the principal.
    """
    MONTHLY = "Monthly"
    QUARTERLY = "Quarterly"
    HALF_YEARLY = "Half-Yearly"
    YEARLY = "Yearly"
    MATURITY = "Maturity"

    @property
    def months_per_period(self) -> Optional[int]:
        """Calendar months between two interest dates (None for MATURITY)."""
        return _MONTHS_PER_PERIOD.get(self)

    @property
    def periods_per_year(self) -> Optional[int]:
        """Interest payments per year (None for MATURITY)."""
        months = self.months_per_period
        return 12 // months if months else None


_MONTHS_PER_PERIOD = {
    ReturnPeriod.MONTHLY: 1,
    ReturnPeriod.QUARTERLY: 3,
    ReturnPeriod.HALF_YEARLY: 6,
    ReturnPeriod.YEARLY: 12,
}


# =============================================================================
# STORED ENTITIES
# =============================================================================

class StoredModel(BaseModel):
    """Base for models persisted as camelCase JSON."""
    model_config = ConfigDict(
        str_strip_whitespace=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    def to_storage(self) -> dict:
        """Serialize to the JSON-ready dict written to storage."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class InvestorDetails(StoredModel):
    """
    Terms of a fund received from an investor.

    Attached only to INCOME transactions. The maturity date is
    filled in by Transaction when it is not supplied.
    """

    investor_name: str = Field(
        ...,
        min_length=1,
        max_length=200,
        description="Who lent the money"
    )
    roi: Decimal = Field(
        ...,
        ge=0,
        description="Annual rate of interest in percent"
    )
    return_period: ReturnPeriod = Field(
        ...,
        description="How often interest falls due"
    )
    duration_months: int = Field(
        ...,
        ge=1,
        le=1200,
        description="Term of the investment in months"
    )
    maturity_date: Optional[date] = Field(
        default=None,
        description="When the principal is due back"
    )
    purpose: Optional[str] = Field(
        default=None,
        max_length=500,
    )
    periodic_interest_amount: Optional[Decimal] = Field(
        default=None,
        ge=0,
        description="Interest per period, if fixed when the fund was recorded"
    )


class Transaction(StoredModel):
    """
    A single income or expense entry.

    Immutable once persisted except through an explicit edit or delete.
    """

    id: str = Field(default_factory=new_id)
    user_id: str = Field(
        ...,
        min_length=1,
        description="Owning user"
    )
    amount: Decimal = Field(
        ...,
        gt=0,
        description="Amount in the app currency"
    )
    type: TransactionType
    category: str = Field(
        ...,
        min_length=1,
        max_length=200,
    )
    payment_mode: Optional[str] = Field(default=None, max_length=100)
    note: Optional[str] = Field(default=None, max_length=1000)
    timestamp: datetime = Field(
        default_factory=datetime.now,
        description="When the entry was created"
    )
    investor_details: Optional[InvestorDetails] = None
    linked_transaction_id: Optional[str] = None
    date: dt.date = Field(
        ...,
        description="Calendar date of the transaction"
    )

    @model_validator(mode='after')
    def validate_investor_details(self) -> 'Transaction':
        """Investor details belong to income only and always carry a maturity date."""
        details = self.investor_details
        if details is None:
            return self

        if self.type != TransactionType.INCOME:
            raise ValueError("Investor details can only be attached to income")

        if details.maturity_date is None:
            details.maturity_date = maturity_date_for(
                self.date, details.duration_months
            )
        return self

    @property
    def is_investor_fund(self) -> bool:
        return (
            self.type == TransactionType.INCOME
            and self.investor_details is not None
        )

    @property
    def signed_amount(self) -> Decimal:
        """Amount with expenses negative."""
        if self.type == TransactionType.INCOME:
            return self.amount
        return -self.amount


class User(StoredModel):
    """A person whose transactions are tracked separately."""

    id: str = Field(default_factory=new_id)
    name: str = Field(..., min_length=1, max_length=100)
    created_at: datetime = Field(default_factory=datetime.now)


class GroupedCategory(StoredModel):
    """A named group of category labels, editable in settings."""

    group: str = Field(..., min_length=1, max_length=100)
    items: list[str] = Field(default_factory=list)


# =============================================================================
# FORM INPUT & VALIDATION MODELS
# =============================================================================

class TransactionDraft(BaseModel):
    """
    What the user typed into the transaction form.

    All fields are optional and loosely typed: this is PROPOSED data
    that goes through TransactionValidator before becoming a Transaction.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    type: TransactionType = TransactionType.EXPENSE
    amount: Optional[str] = None
    category: Optional[str] = None
    payment_mode: Optional[str] = None
    on_date: Optional[date] = None
    note: Optional[str] = None

    # Investor fund fields (income only)
    investor_name: Optional[str] = None
    roi: Optional[str] = None
    return_period: Optional[ReturnPeriod] = None
    duration_months: Optional[int] = None
    purpose: Optional[str] = None
    periodic_interest_amount: Optional[str] = None

    @property
    def has_investor_details(self) -> bool:
        return bool(self.investor_name)


class ValidationIssue(BaseModel):
    """A single validation issue found."""

    field: str = Field(
        ...,
        description="Field with the issue"
    )
    issue_type: str = Field(
        ...,
        description="Type of issue (e.g., 'missing', 'invalid_value')"
    )
    message: str = Field(
        ...,
        description="Human-readable description of the issue"
    )
    severity: str = Field(
        ...,
        pattern="^(error|warning|info)$",
        description="Issue severity"
    )


class ValidationResult(BaseModel):
    """Result of validating a TransactionDraft."""

    validated_at: datetime = Field(default_factory=datetime.now)
    issues: list[ValidationIssue] = Field(default_factory=list)

    @property
    def has_errors(self) -> bool:
        """Check if there are any error-level issues."""
        return any(issue.severity == "error" for issue in self.issues)

    @property
    def is_valid(self) -> bool:
        return not self.has_errors

    @property
    def error_count(self) -> int:
        """Count error-level issues."""
        return sum(1 for issue in self.issues if issue.severity == "error")

    @property
    def warnings(self) -> list[str]:
        return [i.message for i in self.issues if i.severity == "warning"]
