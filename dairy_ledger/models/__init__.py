"""
Data Models Package

This package contains all Pydantic models used in Dairy Ledger.
All data flowing through the system must conform to these schemas.
"""

from dairy_ledger.models.entities import (
    Customer,
    DateRange,
    DeliveryLog,
    DeliveryShift,
    DeliveryStatus,
    MilkType,
    PaymentLog,
    PaymentMode,
    in_range,
    make_delivery_log_id,
)
from dairy_ledger.models.ledger import (
    BilledTotals,
    CustomerPeriodTotal,
    DashboardSummary,
    PeriodReport,
    RouteStop,
)
from dairy_ledger.models.snapshot import Snapshot
from dairy_ledger.models.statement import (
    EntryKind,
    Statement,
    StatementRow,
)
from dairy_ledger.models.validation import (
    ValidationIssue,
    ValidationResult,
)
from dairy_ledger.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Entities
    "Customer",
    "DateRange",
    "DeliveryLog",
    "DeliveryShift",
    "DeliveryStatus",
    "MilkType",
    "PaymentLog",
    "PaymentMode",
    "in_range",
    "make_delivery_log_id",
    # Derived figures
    "BilledTotals",
    "CustomerPeriodTotal",
    "DashboardSummary",
    "PeriodReport",
    "RouteStop",
    # Backup
    "Snapshot",
    # Statements
    "EntryKind",
    "Statement",
    "StatementRow",
    # Validation
    "ValidationIssue",
    "ValidationResult",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
