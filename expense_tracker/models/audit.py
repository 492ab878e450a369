"""
Audit Models for Expense Tracker

Every store operation the dashboard performs is logged for audit purposes.
This provides:
1. A trace of what the user did and what the store answered
2. Debugging information when the API misbehaves
3. A record of failures that were only shown as a transient notification

DESIGN DECISION: Audit events are written to the local structured log only.
The dashboard keeps no local persisted state.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Reads
    EXPENSES_LOADED = "expenses_loaded"
    LOAD_FAILED = "load_failed"

    # Create
    VALIDATION_FAILED = "validation_failed"
    EXPENSE_CREATED = "expense_created"
    CREATE_FAILED = "create_failed"

    # Delete
    EXPENSE_DELETED = "expense_deleted"
    EXPENSE_ALREADY_DELETED = "expense_already_deleted"
    DELETE_FAILED = "delete_failed"

    # Export
    DATA_EXPORTED = "data_exported"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class AuditEvent(BaseModel):
    """
    A single audit event.

    Every store operation creates one of these, success or failure.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=datetime.utcnow,
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

    # Context - which expense is this about?
    expense_id: Optional[str] = Field(
        default=None,
        description="Store id of the expense this event relates to"
    )

    # Correlation - ties a create/delete to the refresh that follows it
    correlation_id: Optional[UUID] = Field(
        default=None,
        description="ID to correlate related events"
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
    error_type: Optional[str] = None
    error_message: Optional[str] = None

    is_user_action: bool = Field(
        default=False,
        description="Was this triggered by a user action?"
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
            "expense_id": self.expense_id,
            "correlation_id": str(self.correlation_id) if self.correlation_id else None,
            "description": self.description,
            "details": self.details,
            "error_type": self.error_type,
            "error_message": self.error_message,
            "is_user_action": self.is_user_action,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.expenses_loaded(count, correlation_id)
        event = AuditEventBuilder.expense_deleted(expense_id, correlation_id)
    """

    @staticmethod
    def expenses_loaded(
        count: int,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPENSES_LOADED,
            correlation_id=correlation_id,
            description=f"Loaded {count} expenses",
            details={"count": count},
        )

    @staticmethod
    def load_failed(
        error_message: str,
        kept_count: int,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.LOAD_FAILED,
            severity=AuditSeverity.ERROR,
            correlation_id=correlation_id,
            description="Failed to load expenses; keeping previous list",
            details={"kept_count": kept_count},
            error_type="ConnectivityError",
            error_message=error_message,
        )

    @staticmethod
    def validation_failed(
        issues: list[dict],
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.VALIDATION_FAILED,
            severity=AuditSeverity.WARNING,
            correlation_id=correlation_id,
            description=f"Expense rejected before sending with {len(issues)} issues",
            details={"issues": issues},
            is_user_action=True,
        )

    @staticmethod
    def expense_created(
        expense_id: str,
        title: str,
        amount: str,
        category: str,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPENSE_CREATED,
            expense_id=expense_id,
            correlation_id=correlation_id,
            description=f"Expense created: {title} - {amount}",
            details={
                "title": title,
                "amount": amount,
                "category": category,
            },
            is_user_action=True,
        )

    @staticmethod
    def expense_deleted(
        expense_id: str,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPENSE_DELETED,
            expense_id=expense_id,
            correlation_id=correlation_id,
            description=f"Expense deleted: {expense_id}",
            is_user_action=True,
        )

    @staticmethod
    def expense_already_deleted(
        expense_id: str,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPENSE_ALREADY_DELETED,
            severity=AuditSeverity.WARNING,
            expense_id=expense_id,
            correlation_id=correlation_id,
            description=f"Expense {expense_id} was not found; treating delete as done",
            is_user_action=True,
        )

    @staticmethod
    def store_error(
        event_type: AuditEventType,
        error: Exception,
        expense_id: Optional[str] = None,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=event_type,
            severity=AuditSeverity.ERROR,
            expense_id=expense_id,
            correlation_id=correlation_id,
            description=f"Store operation failed: {event_type.value}",
            error_type=type(error).__name__,
            error_message=str(error),
            is_user_action=True,
        )

    @staticmethod
    def data_exported(
        total_transactions: int,
        filename: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.DATA_EXPORTED,
            description=f"Exported {total_transactions} expenses to {filename}",
            details={
                "total_transactions": total_transactions,
                "filename": filename,
            },
            is_user_action=True,
        )
