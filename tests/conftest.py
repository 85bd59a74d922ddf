"""Shared fixtures for Dairy Ledger tests."""

from datetime import date
from decimal import Decimal

import pytest

from dairy_ledger.audit import AuditLogger
from dairy_ledger.models import (
    Customer,
    DeliveryLog,
    DeliveryShift,
    DeliveryStatus,
    MilkType,
    PaymentLog,
    PaymentMode,
)
from dairy_ledger.services.storage import InMemoryAuditStorage
from dairy_ledger.store import DairyStore


JAN_10 = date(2024, 1, 10)


@pytest.fixture
def customer() -> Customer:
    """A cow-milk customer at 60/L with 1000 carried over."""
    return Customer(
        id="c1",
        name="Sharma",
        mobile="9876543210",
        address="12 MG Road",
        milk_type=MilkType.COW,
        default_quantity=Decimal("2"),
        prices={MilkType.COW: Decimal("60"), MilkType.BUFFALO: Decimal("70")},
        delivery_time=DeliveryShift.MORNING,
        start_date=date(2024, 1, 1),
        balance=Decimal("1000"),
    )


def delivered(customer_id: str, day: date, litres: str = "2", milk_type=None) -> DeliveryLog:
    return DeliveryLog(
        customer_id=customer_id,
        date=day,
        status=DeliveryStatus.DELIVERED,
        quantity=Decimal(litres),
        milk_type=milk_type,
    )


def payment(customer_id: str, day: date, amount: str, mode=PaymentMode.CASH) -> PaymentLog:
    return PaymentLog(customer_id=customer_id, date=day, amount=Decimal(amount), mode=mode)


@pytest.fixture
def audit_storage() -> InMemoryAuditStorage:
    return InMemoryAuditStorage()


@pytest.fixture
def audit_logger(audit_storage) -> AuditLogger:
    return AuditLogger(audit_storage)


@pytest.fixture
def store(audit_logger) -> DairyStore:
    return DairyStore(audit_logger=audit_logger)
