"""
Audit Models for Dairy Ledger

Every change to the customer roster, the delivery logs or the payment
logs is recorded as an audit event. State lives only in memory, so the
audit trail is the one place a provider can see what happened today.

DESIGN DECISION: Audit logs are append-only. We never delete or modify them.
"""

from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Customer roster
    CUSTOMER_SAVED = "customer_saved"
    CUSTOMER_DELETED = "customer_deleted"
    VALIDATION_FAILED = "validation_failed"

    # Deliveries and payments
    DELIVERY_RECORDED = "delivery_recorded"
    PAYMENT_RECORDED = "payment_recorded"

    # Backup / restore
    SNAPSHOT_EXPORTED = "snapshot_exported"
    SNAPSHOT_RESTORED = "snapshot_restored"
    RESTORE_REJECTED = "restore_rejected"

    # Statements
    STATEMENT_GENERATED = "statement_generated"

    # System events
    SYSTEM_ERROR = "system_error"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class AuditEvent(BaseModel):
    """
    One entry in the audit trail.

    customer_id is set whenever the event touches a customer's account,
    so a customer's history can be pulled out regardless of whether the
    entity itself was the customer, a delivery log or a payment.
    """

    event_id: UUID = Field(default_factory=uuid4)
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="UTC"
    )

    event_type: AuditEventType
    severity: AuditSeverity = AuditSeverity.INFO

    # What was touched
    entity_type: Optional[str] = Field(
        default=None,
        description="'customer', 'delivery_log', 'payment' or 'snapshot'"
    )
    entity_id: Optional[str] = None
    customer_id: Optional[str] = Field(
        default=None,
        description="Account affected, if any"
    )

    description: str = Field(..., max_length=500)
    details: dict[str, Any] = Field(default_factory=dict)
    error_message: Optional[str] = None

    is_user_action: bool = Field(
        default=False,
        description="True for provider actions, False for system events"
    )

    def to_log_dict(self) -> dict:
        """JSON-safe dict for structlog."""
        return self.model_dump(mode="json")


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.customer_saved(customer_id, name, created=True)
        event = AuditEventBuilder.payment_recorded(payment_id, customer_id, amount, mode)
    """

    @staticmethod
    def customer_saved(customer_id: str, name: str, created: bool) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.CUSTOMER_SAVED,
            entity_type="customer",
            entity_id=customer_id,
            customer_id=customer_id,
            description=f"Customer {'added' if created else 'updated'}: {name}",
            details={"name": name, "created": created},
            is_user_action=True,
        )

    @staticmethod
    def customer_deleted(
        customer_id: str,
        orphaned_logs: int,
        orphaned_payments: int,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.CUSTOMER_DELETED,
            entity_type="customer",
            entity_id=customer_id,
            customer_id=customer_id,
            description=f"Customer deleted: {customer_id}",
            details={
                "orphaned_delivery_logs": orphaned_logs,
                "orphaned_payments": orphaned_payments,
            },
            is_user_action=True,
        )

    @staticmethod
    def validation_failed(customer_id: str, issues: list[dict]) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.VALIDATION_FAILED,
            severity=AuditSeverity.WARNING,
            entity_type="customer",
            entity_id=customer_id,
            customer_id=customer_id,
            description=f"Customer validation failed with {len(issues)} issues",
            details={"issues": issues},
            is_user_action=True,
        )

    @staticmethod
    def delivery_recorded(
        log_id: str,
        customer_id: str,
        status: str,
        quantity: Decimal,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.DELIVERY_RECORDED,
            entity_type="delivery_log",
            entity_id=log_id,
            customer_id=customer_id,
            description=f"Delivery marked {status} for customer {customer_id}",
            details={
                "status": status,
                "quantity": str(quantity),
            },
            is_user_action=True,
        )

    @staticmethod
    def payment_recorded(
        payment_id: str,
        customer_id: str,
        amount: Decimal,
        mode: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.PAYMENT_RECORDED,
            entity_type="payment",
            entity_id=payment_id,
            customer_id=customer_id,
            description=f"Payment recorded: ₹{amount} ({mode}) from customer {customer_id}",
            details={
                "amount": str(amount),
                "mode": mode,
            },
            is_user_action=True,
        )

    @staticmethod
    def snapshot_exported(customers: int, logs: int, payments: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SNAPSHOT_EXPORTED,
            entity_type="snapshot",
            description="Backup snapshot exported",
            details={"customers": customers, "delivery_logs": logs, "payments": payments},
            is_user_action=True,
        )

    @staticmethod
    def snapshot_restored(customers: int, logs: int, payments: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SNAPSHOT_RESTORED,
            severity=AuditSeverity.WARNING,
            entity_type="snapshot",
            description="All data replaced from backup snapshot",
            details={"customers": customers, "delivery_logs": logs, "payments": payments},
            is_user_action=True,
        )

    @staticmethod
    def restore_rejected(reason: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.RESTORE_REJECTED,
            severity=AuditSeverity.WARNING,
            entity_type="snapshot",
            description="Backup snapshot rejected",
            error_message=reason,
            is_user_action=True,
        )

    @staticmethod
    def statement_generated(
        customer_id: str,
        title: str,
        row_count: int,
        net_receivable: Decimal,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STATEMENT_GENERATED,
            entity_type="customer",
            entity_id=customer_id,
            customer_id=customer_id,
            description=f"{title} generated with {row_count} rows",
            details={
                "title": title,
                "row_count": row_count,
                "net_receivable": str(net_receivable),
            },
            is_user_action=True,
        )

    @staticmethod
    def system_error(
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SYSTEM_ERROR,
            severity=AuditSeverity.ERROR,
            description=f"System error: {error_type}",
            error_message=error_message,
            details=details or {},
        )
