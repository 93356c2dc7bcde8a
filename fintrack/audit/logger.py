"""
Audit Logger

DESIGN DECISION: Every ledger mutation and every rejected command is logged.
This provides:
1. Complete traceability of how the ledger reached its state
2. Debugging capability for rejected input
3. A visible record of modify rollbacks

The audit logger:
- Is synchronous: the ledger core never suspends or performs I/O
- Keeps a bounded in-memory trail that callers can inspect
- Supports correlation IDs to group all events caused by one command
"""

import logging
from collections import deque
from typing import Optional
from uuid import UUID, uuid4

import structlog

from fintrack.models.audit import AuditEvent, AuditEventBuilder, AuditSeverity
from fintrack.models.records import BudgetStatus, Expense, ExpenseResult, Income


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


def configure_log_level(level: str) -> None:
    """Set the stdlib level that structlog's filter_by_level honours."""
    logging.basicConfig(format="%(message)s")
    logging.getLogger("fintrack").setLevel(level)


class AuditLogger:
    """
    Central audit logging service.

    Logs events both to:
    1. Structured local log (for debugging)
    2. An in-memory trail (for callers that want to show history)
    """

    def __init__(self, max_events: int = 500, enabled: bool = True):
        """
        Initialize audit logger.

        Args:
            max_events: Size of the in-memory trail. Oldest events are
                        dropped first.
            enabled: When False, events are neither logged nor kept.
        """
        self._events: deque[AuditEvent] = deque(maxlen=max_events)
        self._enabled = enabled
        self._logger = structlog.get_logger("fintrack.audit")

    def log(self, event: AuditEvent) -> None:
        """Log an audit event locally and append it to the trail."""
        if not self._enabled:
            return

        log_dict = event.to_log_dict()

        if event.severity is AuditSeverity.WARNING:
            self._logger.warning("audit_event", **log_dict)
        elif event.severity is AuditSeverity.DEBUG:
            self._logger.debug("audit_event", **log_dict)
        else:
            self._logger.info("audit_event", **log_dict)

        self._events.append(event)

    def recent_events(self, limit: int = 100) -> list[AuditEvent]:
        """Most recent events, newest first."""
        return list(reversed(self._events))[:limit]

    def events_by_correlation_id(self, correlation_id: UUID) -> list[AuditEvent]:
        """Events for one command, in the order they happened."""
        return [e for e in self._events if e.correlation_id == correlation_id]

    def log_command_received(self, keyword: str, correlation_id: UUID) -> None:
        self.log(AuditEventBuilder.command_received(keyword, correlation_id))

    def log_command_rejected(
        self,
        keyword: str,
        error_kind: str,
        error_message: str,
        correlation_id: UUID,
    ) -> None:
        self.log(AuditEventBuilder.command_rejected(
            keyword=keyword,
            error_kind=error_kind,
            error_message=error_message,
            correlation_id=correlation_id,
        ))

    def log_record_added(
        self,
        record: Expense | Income,
        correlation_id: UUID,
    ) -> None:
        self.log(AuditEventBuilder.record_added(record, correlation_id))

    def log_record_deleted(
        self,
        record: Expense | Income,
        index: int,
        correlation_id: UUID,
    ) -> None:
        self.log(AuditEventBuilder.record_deleted(record, index, correlation_id))

    def log_record_modified(
        self,
        index: int,
        new_record: Expense | Income,
        correlation_id: UUID,
    ) -> None:
        self.log(AuditEventBuilder.record_modified(index, new_record, correlation_id))

    def log_modify_rolled_back(
        self,
        entity_type: str,
        index: int,
        error_kind: str,
        error_message: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(AuditEventBuilder.modify_rolled_back(
            entity_type=entity_type,
            index=index,
            error_kind=error_kind,
            error_message=error_message,
            correlation_id=correlation_id,
        ))

    def log_budget_status(
        self,
        result: ExpenseResult,
        correlation_id: UUID,
    ) -> None:
        """Only near-threshold and over-limit results produce an event."""
        if result.budget_status is BudgetStatus.NORMAL:
            return
        self.log(AuditEventBuilder.budget_alert(
            category=result.record.category.value,
            status=result.budget_status,
            total=result.category_total,
            limit=result.budget_limit,
            correlation_id=correlation_id,
        ))


def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for tracking related events.

    Use this at the start of a new command. Pass it through all
    subsequent operations.
    """
    return uuid4()
