"""
Backup Snapshot Model

The whole business fits in one JSON document: every customer, every
delivery log, every payment. Restoring a snapshot replaces all three
collections at once.

Older backups name the arrays differently ('logs', 'payments');
both spellings are accepted, the canonical names are written.
"""

from datetime import datetime
from typing import Optional

from pydantic import AliasChoices, Field, model_validator

from dairy_ledger.models.entities import (
    Customer,
    DeliveryLog,
    LedgerModel,
    PaymentLog,
)


CUSTOMER_KEYS = ("customers",)
DELIVERY_LOG_KEYS = ("deliveryLogs", "logs", "delivery_logs")
PAYMENT_LOG_KEYS = ("paymentLogs", "payments", "payment_logs")


class Snapshot(LedgerModel):
    """A full copy of the store's three collections."""

    customers: list[Customer]
    delivery_logs: list[DeliveryLog] = Field(
        ...,
        validation_alias=AliasChoices(*DELIVERY_LOG_KEYS),
        serialization_alias="deliveryLogs",
    )
    payment_logs: list[PaymentLog] = Field(
        default_factory=list,
        validation_alias=AliasChoices(*PAYMENT_LOG_KEYS),
        serialization_alias="paymentLogs",
    )
    backup_date: Optional[datetime] = Field(
        default=None,
        description="When the snapshot was taken"
    )

    @model_validator(mode='after')
    def validate_unique_ids(self) -> 'Snapshot':
        """Ids are keys in every collection; a duplicate means a corrupt file."""
        for label, rows in (
            ("customer", self.customers),
            ("delivery log", self.delivery_logs),
            ("payment", self.payment_logs),
        ):
            seen = set()
            for row in rows:
                if row.id in seen:
                    raise ValueError(f"Duplicate {label} id '{row.id}' in snapshot")
                seen.add(row.id)
        return self
