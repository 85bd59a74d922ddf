"""
Audit Logger

DESIGN DECISION: Every change to the store is logged.
This provides:
1. Complete traceability of who-paid-what
2. Debugging capability
3. The provider can see today's history of edits

The audit logger:
- Is synchronous, like the store it serves
- Gracefully handles failures (doesn't crash the app if logging fails)
"""

from decimal import Decimal
from typing import Optional

import structlog

from dairy_ledger.models.audit import AuditEvent, AuditEventBuilder
from dairy_ledger.services.storage import AuditStorageInterface


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

    Logs events both to:
    1. Structured local log (for debugging)
    2. An audit storage backend (for the in-app history view)
    """

    def __init__(
        self,
        storage: Optional[AuditStorageInterface] = None,
    ):
        """
        Initialize audit logger.

        Args:
            storage: Storage backend for the audit trail.
                    If None, only logs locally.
        """
        self._storage = storage
        self._logger = structlog.get_logger()

    @property
    def storage(self) -> Optional[AuditStorageInterface]:
        return self._storage

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

        if self._storage is not None:
            try:
                return self._storage.append_event(event)
            except Exception as e:
                # Log failure but don't raise
                self._logger.error(
                    "audit_storage_failed",
                    error=str(e),
                    event_id=str(event.event_id),
                )
                return False

        return True

    def log_customer_saved(self, customer_id: str, name: str, created: bool) -> None:
        self.log(AuditEventBuilder.customer_saved(customer_id, name, created))

    def log_customer_deleted(
        self,
        customer_id: str,
        orphaned_logs: int,
        orphaned_payments: int,
    ) -> None:
        self.log(AuditEventBuilder.customer_deleted(
            customer_id=customer_id,
            orphaned_logs=orphaned_logs,
            orphaned_payments=orphaned_payments,
        ))

    def log_validation_failed(self, customer_id: str, issues: list[dict]) -> None:
        self.log(AuditEventBuilder.validation_failed(customer_id, issues))

    def log_delivery_recorded(
        self,
        log_id: str,
        customer_id: str,
        status: str,
        quantity: Decimal,
    ) -> None:
        self.log(AuditEventBuilder.delivery_recorded(
            log_id=log_id,
            customer_id=customer_id,
            status=status,
            quantity=quantity,
        ))

    def log_payment_recorded(
        self,
        payment_id: str,
        customer_id: str,
        amount: Decimal,
        mode: str,
    ) -> None:
        self.log(AuditEventBuilder.payment_recorded(
            payment_id=payment_id,
            customer_id=customer_id,
            amount=amount,
            mode=mode,
        ))

    def log_snapshot_exported(self, customers: int, logs: int, payments: int) -> None:
        self.log(AuditEventBuilder.snapshot_exported(customers, logs, payments))

    def log_snapshot_restored(self, customers: int, logs: int, payments: int) -> None:
        self.log(AuditEventBuilder.snapshot_restored(customers, logs, payments))

    def log_restore_rejected(self, reason: str) -> None:
        self.log(AuditEventBuilder.restore_rejected(reason))

    def log_statement_generated(
        self,
        customer_id: str,
        title: str,
        row_count: int,
        net_receivable: Decimal,
    ) -> None:
        self.log(AuditEventBuilder.statement_generated(
            customer_id=customer_id,
            title=title,
            row_count=row_count,
            net_receivable=net_receivable,
        ))

    def log_error(
        self,
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
    ) -> None:
        """Log an error."""
        self.log(AuditEventBuilder.system_error(
            error_type=error_type,
            error_message=error_message,
            details=details,
        ))
