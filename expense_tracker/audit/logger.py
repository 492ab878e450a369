"""
Audit Logger

DESIGN DECISION: Every store operation is logged, success or failure.
Failures only reach the user as a transient notification, so the log is
the one place where the full error survives.

The audit logger:
- Is async so the controller can await it alongside store calls
- Never raises (a logging failure must not break the dashboard)
- Supports correlation IDs to tie a mutation to the refresh that follows it
"""

from typing import Optional
from uuid import UUID, uuid4

import structlog

from expense_tracker.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)


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


class AuditLogger:
    """
    Central audit logging service.

    Writes every event to the structured local log.
    """

    def __init__(self):
        self._logger = structlog.get_logger("expense_tracker.audit")

    async def log(self, event: AuditEvent) -> bool:
        """
        Log an audit event.

        Returns True if the event was written.
        """
        log_dict = event.to_log_dict()

        try:
            if event.severity == AuditSeverity.ERROR:
                self._logger.error("audit_event", **log_dict)
            elif event.severity == AuditSeverity.WARNING:
                self._logger.warning("audit_event", **log_dict)
            elif event.severity == AuditSeverity.DEBUG:
                self._logger.debug("audit_event", **log_dict)
            else:
                self._logger.info("audit_event", **log_dict)
        except Exception as e:
            # Don't raise - audit logging should not break the main flow
            self._logger.error(
                "audit_log_failed",
                error=str(e),
                event_id=str(event.event_id),
            )
            return False

        return True

    async def log_expenses_loaded(
        self,
        count: int,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log a successful fetch."""
        await self.log(AuditEventBuilder.expenses_loaded(
            count=count,
            correlation_id=correlation_id,
        ))

    async def log_load_failed(
        self,
        error_message: str,
        kept_count: int,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log a failed fetch; the previous list stays on screen."""
        await self.log(AuditEventBuilder.load_failed(
            error_message=error_message,
            kept_count=kept_count,
            correlation_id=correlation_id,
        ))

    async def log_validation_failed(
        self,
        issues: list[dict],
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log a draft rejected before any request was sent."""
        await self.log(AuditEventBuilder.validation_failed(
            issues=issues,
            correlation_id=correlation_id,
        ))

    async def log_expense_created(
        self,
        expense_id: str,
        title: str,
        amount: str,
        category: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log expense creation."""
        await self.log(AuditEventBuilder.expense_created(
            expense_id=expense_id,
            title=title,
            amount=amount,
            category=category,
            correlation_id=correlation_id,
        ))

    async def log_expense_deleted(
        self,
        expense_id: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log expense deletion."""
        await self.log(AuditEventBuilder.expense_deleted(
            expense_id=expense_id,
            correlation_id=correlation_id,
        ))

    async def log_expense_already_deleted(
        self,
        expense_id: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log a delete that hit a missing id."""
        await self.log(AuditEventBuilder.expense_already_deleted(
            expense_id=expense_id,
            correlation_id=correlation_id,
        ))

    async def log_store_error(
        self,
        event_type: AuditEventType,
        error: Exception,
        expense_id: Optional[str] = None,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log a failed create or delete."""
        await self.log(AuditEventBuilder.store_error(
            event_type=event_type,
            error=error,
            expense_id=expense_id,
            correlation_id=correlation_id,
        ))

    async def log_data_exported(
        self,
        total_transactions: int,
        filename: str,
    ) -> None:
        """Log an export snapshot."""
        await self.log(AuditEventBuilder.data_exported(
            total_transactions=total_transactions,
            filename=filename,
        ))


def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for tracking related events.

    Use this at the start of a user action (e.g., adding an expense)
    and pass it through the mutation and the refresh that follows.
    """
    return uuid4()
