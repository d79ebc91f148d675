"""
Audit Logger

DESIGN DECISION: Every significant change to the books is logged.
This provides:
1. Traceability of edits and deletions
2. Debugging capability
3. A history the user can inspect on the settings page

The audit logger:
- Gracefully handles failures (doesn't crash the app if logging fails)
- Supports correlation IDs to trace related events
- Keeps only the most recent events in storage
"""

from typing import Optional
from uuid import UUID, uuid4

import structlog

from wealthtrack.constants import StorageKeys
from wealthtrack.models.audit import AuditEvent, AuditEventBuilder, AuditEventType
from wealthtrack.services.storage.interface import KeyValueStore


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)

# Older events are dropped from storage beyond this many
MAX_STORED_EVENTS = 500


class AuditLogger:
    """
    Central audit logging service.

    Logs events both to:
    1. Structured local log (for debugging)
    2. The key-value store (for persistence and user visibility)
    """

    def __init__(
        self,
        store: Optional[KeyValueStore] = None,
        max_events: int = MAX_STORED_EVENTS,
    ):
        """
        Initialize audit logger.

        Args:
            store: Storage backend for persistence.
                   If None, only logs locally.
            max_events: How many events to keep in storage
        """
        self._store = store
        self._max_events = max_events
        self._logger = structlog.get_logger()

    def log(self, event: AuditEvent) -> bool:
        """
        Log an audit event.

        Always logs locally. Persists to storage if available.

        Returns True if storage write succeeded (or no storage configured).
        """
        log_dict = event.to_log_dict()

        if event.severity.value in ("error", "critical"):
            self._logger.error("audit_event", **log_dict)
        elif event.severity.value == "warning":
            self._logger.warning("audit_event", **log_dict)
        else:
            self._logger.info("audit_event", **log_dict)

        if self._store is None:
            return True

        try:
            events = self._store.get_json(StorageKeys.AUDIT_LOG, default=[]) or []
            events.append(event.model_dump(mode="json"))
            self._store.set_json(StorageKeys.AUDIT_LOG, events[-self._max_events:])
            return True
        except Exception as e:
            # Log failure but don't raise
            self._logger.error(
                "audit_storage_failed",
                error=str(e),
                event_id=str(event.event_id),
            )
            return False

    def recent_events(self, limit: int = 50) -> list[AuditEvent]:
        """Most recent stored events, newest first."""
        if self._store is None:
            return []
        raw_events = self._store.get_json(StorageKeys.AUDIT_LOG, default=[]) or []
        events = []
        for raw in reversed(raw_events[-limit:]):
            try:
                events.append(AuditEvent.model_validate(raw))
            except ValueError:
                continue
        return events

    def log_user_created(self, user_id: str, name: str) -> None:
        """Log user creation."""
        self.log(AuditEventBuilder.user_created(user_id=user_id, name=name))

    def log_user_selected(self, user_id: str) -> None:
        self.log(AuditEventBuilder.user_selected(user_id=user_id))

    def log_transaction_saved(
        self,
        transaction_id: str,
        transaction_type: str,
        category: str,
        amount: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log a new transaction."""
        event = AuditEventBuilder.transaction_saved(
            transaction_id=transaction_id,
            transaction_type=transaction_type,
            category=category,
            amount=amount,
            correlation_id=correlation_id,
        )
        self.log(event)

    def log_transaction_updated(
        self,
        transaction_id: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(AuditEventBuilder.transaction_updated(
            transaction_id=transaction_id,
            correlation_id=correlation_id,
        ))

    def log_transaction_deleted(
        self,
        transaction_id: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(AuditEventBuilder.transaction_deleted(
            transaction_id=transaction_id,
            correlation_id=correlation_id,
        ))

    def log_validation_failed(
        self,
        issues: list[dict],
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log a rejected transaction form."""
        self.log(AuditEventBuilder.validation_failed(
            issues=issues,
            correlation_id=correlation_id,
        ))

    def log_categories_changed(
        self,
        event_type: AuditEventType,
        group_count: int,
        details: Optional[dict] = None,
    ) -> None:
        """Log a save, reset or migration of the category list."""
        self.log(AuditEventBuilder.categories_changed(
            event_type=event_type,
            group_count=group_count,
            details=details,
        ))

    def log_investor_category_added(self, investor_name: str) -> None:
        self.log(AuditEventBuilder.investor_category_added(investor_name))

    def log_advice_requested(
        self,
        user_id: str,
        question: str,
        transaction_count: int,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(AuditEventBuilder.advice_requested(
            user_id=user_id,
            question=question,
            transaction_count=transaction_count,
            correlation_id=correlation_id,
        ))

    def log_advice_failed(
        self,
        error_message: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(AuditEventBuilder.advice_failed(
            error_message=error_message,
            correlation_id=correlation_id,
        ))

    def log_storage_error(self, key: str, error_message: str) -> None:
        self.log(AuditEventBuilder.storage_error(key=key, error_message=error_message))

    def log_error(
        self,
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log an error."""
        event = AuditEventBuilder.system_error(
            error_type=error_type,
            error_message=error_message,
            details=details,
            correlation_id=correlation_id,
        )
        self.log(event)


def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for tracking related events.

    Use this at the start of a new user action (e.g., saving a transaction).
    Pass it through all subsequent operations.
    """
    return uuid4()
