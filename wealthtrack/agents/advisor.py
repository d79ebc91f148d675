"""
Financial Advice Assistant

The assistant answers free-form questions about the active user's
transactions. The whole transaction list is sent along with the
question; Gemini does the reading.

BOUNDARIES:
- CAN: Summarize totals, trends, payment-mode usage, project spend
- CANNOT: Change any data
- MUST: Degrade to a fixed message when the service is unreachable

The call is best-effort: one attempt, no retry. Any failure is logged
and replaced by CONNECTION_FALLBACK so the UI always has text to show.
"""

import json
from typing import Optional

import google.generativeai as genai
import structlog

from wealthtrack.config import get_settings
from wealthtrack.config.settings import GeminiSettings
from wealthtrack.models.transaction import Transaction

logger = structlog.get_logger(__name__)


SYSTEM_INSTRUCTION = (
    "You are a mobile app financial assistant. Keep answers short "
    "(under 150 words) and easy to read on a phone."
)

CONNECTION_FALLBACK = (
    "I'm having trouble connecting to the insights engine. "
    "Please check your internet connection."
)
EMPTY_REPLY_FALLBACK = "Sorry, I couldn't generate an insight right now."


def serialize_transactions(transactions: list[Transaction]) -> str:
    """Compact JSON of the fields the assistant needs."""
    return json.dumps(
        [
            {
                "date": t.date.isoformat(),
                "type": t.type.value,
                "amount": float(t.amount),
                "category": t.category,
                "paymentMode": t.payment_mode or "Unknown",
                "note": t.note,
            }
            for t in transactions
        ],
        ensure_ascii=False,
    )


def build_prompt(question: str, transactions: list[Transaction], user_name: str) -> str:
    return f"""User Name: {user_name}
Transaction Data (JSON): {serialize_transactions(transactions)}

User Question: {question}

You are a helpful and savvy financial assistant.
Use the provided transaction data to answer the user's question.
If the data is empty, tell them to add some transactions first.
Be concise, encouraging, and format your response nicely (markdown is supported).
Focus on totals, trends, payment modes (UPI/Cash usage), and specific project details if asked."""


class FinancialAdvisor:
    """
    Gemini-backed assistant for questions about the user's books.
    """

    def __init__(self, settings: Optional[GeminiSettings] = None):
        self._settings = settings or get_settings().gemini
        self._configure_genai()

    def _configure_genai(self):
        """Configure Google Generative AI."""
        genai.configure(api_key=self._settings.api_key)
        self._model = genai.GenerativeModel(
            model_name=self._settings.model_name,
            generation_config={
                "temperature": self._settings.temperature,
                "max_output_tokens": self._settings.max_tokens,
            },
            system_instruction=SYSTEM_INSTRUCTION,
        )

    async def get_advice(
        self,
        question: str,
        transactions: list[Transaction],
        user_name: str,
    ) -> str:
        """
        Answer a question about the given transactions.

        Never raises: failures return CONNECTION_FALLBACK and an
        empty reply returns EMPTY_REPLY_FALLBACK.
        """
        prompt = build_prompt(question, transactions, user_name)

        try:
            response = await self._model.generate_content_async(prompt)
            text = (response.text or "").strip()
        except Exception as e:
            logger.error(
                "advice_request_failed",
                error=str(e),
                model=self._settings.model_name,
            )
            return CONNECTION_FALLBACK

        return text or EMPTY_REPLY_FALLBACK
