"""
Data Models Package

This package contains all Pydantic models used in WealthTrack.
All data flowing through the system must conform to these schemas.
"""

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
from wealthtrack.models.interest import (
    EventKind,
    InterestEvent,
    InvestorAccount,
    PassbookEntry,
    PortfolioTotals,
    SortOrder,
    TimeWindow,
    Urgency,
)
from wealthtrack.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Transaction models
    "GroupedCategory",
    "InvestorDetails",
    "ReturnPeriod",
    "Transaction",
    "TransactionDraft",
    "TransactionType",
    "User",
    "ValidationIssue",
    "ValidationResult",
    # Interest models
    "EventKind",
    "InterestEvent",
    "InvestorAccount",
    "PassbookEntry",
    "PortfolioTotals",
    "SortOrder",
    "TimeWindow",
    "Urgency",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
