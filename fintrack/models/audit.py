"""
Audit Models for FinTrack

Every ledger mutation and every rejected command produces an audit event.
This provides:
1. Traceability of how the ledger reached its current state
2. Debugging information when a command is rejected
3. A record of rollbacks performed by modify

DESIGN DECISION: Audit events are append-only. We never modify them.
"""

from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field

from fintrack.models.records import BudgetStatus, Expense, Income


class AuditEventType(str, Enum):
    """
    Types of events we audit.
    """
    # Commands
    COMMAND_RECEIVED = "command_received"
    COMMAND_REJECTED = "command_rejected"

    # Records
    EXPENSE_ADDED = "expense_added"
    INCOME_ADDED = "income_added"
    EXPENSE_DELETED = "expense_deleted"
    INCOME_DELETED = "income_deleted"
    EXPENSE_MODIFIED = "expense_modified"
    INCOME_MODIFIED = "income_modified"
    MODIFY_ROLLED_BACK = "modify_rolled_back"

    # Budgets
    BUDGET_SET = "budget_set"
    BUDGET_DELETED = "budget_deleted"
    BUDGET_NEAR_LIMIT = "budget_near_limit"
    BUDGET_EXCEEDED = "budget_exceeded"

    # Export
    EXPORT_REQUESTED = "export_requested"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"


class AuditEvent(BaseModel):
    """
    A single audit event.

    This is the core unit of our audit trail.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="When the event occurred (UTC)"
    )

    # Event classification
    event_type: AuditEventType = Field(
        ...,
        description="Type of event"
    )
    severity: AuditSeverity = Field(
        default=AuditSeverity.INFO,
        description="Event severity"
    )

    # Context - what kind of entity is this about?
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (e.g., 'expense', 'income', 'budget', 'command')"
    )

    # Correlation - all events produced by one command share an ID
    correlation_id: Optional[UUID] = Field(
        default=None,
        description="ID to correlate events caused by the same command"
    )

    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data"
    )

    # Error information (if applicable)
    error_kind: Optional[str] = None
    error_message: Optional[str] = None

    is_user_action: bool = Field(
        default=False,
        description="Was this triggered directly by a user command?"
    )

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "correlation_id": str(self.correlation_id) if self.correlation_id else None,
            "description": self.description,
            "details": self.details,
            "error_kind": self.error_kind,
            "error_message": self.error_message,
            "is_user_action": self.is_user_action,
        }


def _record_details(record: Expense | Income) -> dict[str, Any]:
    return {
        "amount": str(record.amount),
        "category": record.category.value,
        "date": record.date.isoformat(),
        "description": record.description,
    }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.record_added(expense, correlation_id)
        event = AuditEventBuilder.command_rejected("add-expense", err, correlation_id)
    """

    @staticmethod
    def command_received(
        keyword: str,
        correlation_id: UUID,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.COMMAND_RECEIVED,
            severity=AuditSeverity.DEBUG,
            entity_type="command",
            correlation_id=correlation_id,
            description=f"Command received: {keyword}",
            details={"keyword": keyword},
            is_user_action=True,
        )

    @staticmethod
    def command_rejected(
        keyword: str,
        error_kind: str,
        error_message: str,
        correlation_id: UUID,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.COMMAND_REJECTED,
            severity=AuditSeverity.WARNING,
            entity_type="command",
            correlation_id=correlation_id,
            description=f"Command rejected: {keyword}",
            details={"keyword": keyword},
            error_kind=error_kind,
            error_message=error_message,
            is_user_action=True,
        )

    @staticmethod
    def record_added(
        record: Expense | Income,
        correlation_id: UUID,
    ) -> AuditEvent:
        is_expense = isinstance(record, Expense)
        return AuditEvent(
            event_type=(
                AuditEventType.EXPENSE_ADDED if is_expense else AuditEventType.INCOME_ADDED
            ),
            entity_type="expense" if is_expense else "income",
            correlation_id=correlation_id,
            description=f"{'Expense' if is_expense else 'Income'} of {record.amount} added",
            details=_record_details(record),
            is_user_action=True,
        )

    @staticmethod
    def record_deleted(
        record: Expense | Income,
        index: int,
        correlation_id: UUID,
    ) -> AuditEvent:
        is_expense = isinstance(record, Expense)
        return AuditEvent(
            event_type=(
                AuditEventType.EXPENSE_DELETED if is_expense else AuditEventType.INCOME_DELETED
            ),
            entity_type="expense" if is_expense else "income",
            correlation_id=correlation_id,
            description=f"{'Expense' if is_expense else 'Income'} at index {index} deleted",
            details={"index": index, **_record_details(record)},
            is_user_action=True,
        )

    @staticmethod
    def record_modified(
        index: int,
        new_record: Expense | Income,
        correlation_id: UUID,
    ) -> AuditEvent:
        is_expense = isinstance(new_record, Expense)
        return AuditEvent(
            event_type=(
                AuditEventType.EXPENSE_MODIFIED if is_expense else AuditEventType.INCOME_MODIFIED
            ),
            entity_type="expense" if is_expense else "income",
            correlation_id=correlation_id,
            description=f"{'Expense' if is_expense else 'Income'} at index {index} modified",
            details={"index": index, **_record_details(new_record)},
            is_user_action=True,
        )

    @staticmethod
    def modify_rolled_back(
        entity_type: str,
        index: int,
        error_kind: str,
        error_message: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.MODIFY_ROLLED_BACK,
            severity=AuditSeverity.WARNING,
            entity_type=entity_type,
            correlation_id=correlation_id,
            description=f"Modify of {entity_type} at index {index} rolled back",
            details={"index": index},
            error_kind=error_kind,
            error_message=error_message,
        )

    @staticmethod
    def budget_set(
        category: str,
        limit: Decimal,
        correlation_id: UUID,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.BUDGET_SET,
            entity_type="budget",
            correlation_id=correlation_id,
            description=f"Budget set for {category}: {limit}",
            details={"category": category, "limit": str(limit)},
            is_user_action=True,
        )

    @staticmethod
    def budget_deleted(
        category: str,
        correlation_id: UUID,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.BUDGET_DELETED,
            entity_type="budget",
            correlation_id=correlation_id,
            description=f"Budget deleted for {category}",
            details={"category": category},
            is_user_action=True,
        )

    @staticmethod
    def budget_alert(
        category: str,
        status: BudgetStatus,
        total: Decimal,
        limit: Optional[Decimal],
        correlation_id: UUID,
    ) -> AuditEvent:
        over = status is BudgetStatus.OVER_LIMIT
        return AuditEvent(
            event_type=(
                AuditEventType.BUDGET_EXCEEDED if over else AuditEventType.BUDGET_NEAR_LIMIT
            ),
            severity=AuditSeverity.WARNING,
            entity_type="budget",
            correlation_id=correlation_id,
            description=(
                f"Spending on {category} is {'over' if over else 'near'} its budget"
            ),
            details={
                "category": category,
                "status": status.value,
                "total": str(total),
                "limit": str(limit) if limit is not None else None,
            },
        )

    @staticmethod
    def export_requested(
        path: str,
        correlation_id: UUID,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPORT_REQUESTED,
            entity_type="command",
            correlation_id=correlation_id,
            description=f"Export requested to {path}",
            details={"path": path},
            is_user_action=True,
        )
