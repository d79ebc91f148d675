"""AI Agents package."""

from wealthtrack.agents.advisor import (
    CONNECTION_FALLBACK,
    EMPTY_REPLY_FALLBACK,
    FinancialAdvisor,
    serialize_transactions,
)

__all__ = [
    "CONNECTION_FALLBACK",
    "EMPTY_REPLY_FALLBACK",
    "FinancialAdvisor",
    "serialize_transactions",
]
