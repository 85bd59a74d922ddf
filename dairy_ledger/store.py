"""
Dairy Store

DESIGN DECISION: One owned aggregate holds the three collections.
Every mutation goes through a named method that enforces the
cross-collection rules:

1. One delivery log per (customer, date): the derived id is the key
2. Recording a payment appends a PaymentLog AND decrements the
   customer's running balance, both or neither
3. opening_balance == balance + sum(customer's payments), always
4. Deleting a customer keeps their logs and payments (orphans are kept
   on purpose and can be listed)

Each mutation builds its new values first and commits with plain
assignments last, so a failure part-way leaves the store untouched.
"""

import datetime as dt
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Optional

from dairy_ledger.audit import AuditLogger
from dairy_ledger.ledger.engine import paid_amount
from dairy_ledger.models.entities import (
    Customer,
    DeliveryLog,
    DeliveryShift,
    DeliveryStatus,
    MilkType,
    PaymentLog,
    PaymentMode,
    make_delivery_log_id,
)
from dairy_ledger.models.ledger import RouteStop
from dairy_ledger.models.snapshot import Snapshot
from dairy_ledger.models.validation import ValidationResult
from dairy_ledger.validation import CustomerValidator, parse_positive_amount, parse_quantity


class StoreError(Exception):
    """Base exception for store operations."""
    pass


class CustomerNotFoundError(StoreError):
    """No customer with the given id."""

    def __init__(self, customer_id: str):
        super().__init__(f"Customer not found: {customer_id}")
        self.customer_id = customer_id


class CustomerValidationError(StoreError):
    """A customer record failed validation; nothing was saved."""

    def __init__(self, result: ValidationResult):
        super().__init__("; ".join(result.error_messages) or "Customer is invalid")
        self.result = result


class DairyStore:
    """
    In-memory store for customers, delivery logs and payment logs.

    Lists keep insertion order, which is the order rows were entered.
    Read accessors return copies; mutate only through the methods.
    """

    def __init__(
        self,
        customers: Optional[list[Customer]] = None,
        delivery_logs: Optional[list[DeliveryLog]] = None,
        payment_logs: Optional[list[PaymentLog]] = None,
        audit_logger: Optional[AuditLogger] = None,
        validator: Optional[CustomerValidator] = None,
    ):
        self._audit_logger = audit_logger
        self._validator = validator or CustomerValidator()
        self._delivery_logs: list[DeliveryLog] = []
        self._payment_logs: list[PaymentLog] = list(payment_logs or [])
        for log in delivery_logs or []:
            self._delivery_logs = self._upserted(self._delivery_logs, log)
        self._customers: list[Customer] = [
            self._with_opening_balance(c, self._payment_logs) for c in customers or []
        ]

    # =========================================================================
    # READ ACCESS
    # =========================================================================

    @property
    def customers(self) -> list[Customer]:
        return list(self._customers)

    @property
    def delivery_logs(self) -> list[DeliveryLog]:
        return list(self._delivery_logs)

    @property
    def payment_logs(self) -> list[PaymentLog]:
        return list(self._payment_logs)

    def get_customer(self, customer_id: str) -> Customer:
        for customer in self._customers:
            if customer.id == customer_id:
                return customer
        raise CustomerNotFoundError(customer_id)

    def find_customer(self, customer_id: str) -> Optional[Customer]:
        try:
            return self.get_customer(customer_id)
        except CustomerNotFoundError:
            return None

    def get_delivery_log(self, customer_id: str, day: dt.date) -> Optional[DeliveryLog]:
        log_id = make_delivery_log_id(customer_id, day)
        for log in self._delivery_logs:
            if log.id == log_id:
                return log
        return None

    def delivery_status_for(self, customer_id: str, day: dt.date) -> DeliveryStatus:
        """Status for a day; a day with no log is PENDING."""
        log = self.get_delivery_log(customer_id, day)
        return log.status if log else DeliveryStatus.PENDING

    def recent_delivery_logs(self, limit: int = 3) -> list[DeliveryLog]:
        """Most recently entered logs first."""
        return list(reversed(self._delivery_logs))[:limit]

    def orphaned_delivery_logs(self) -> list[DeliveryLog]:
        """Logs whose customer has been deleted."""
        ids = {c.id for c in self._customers}
        return [log for log in self._delivery_logs if log.customer_id not in ids]

    def orphaned_payments(self) -> list[PaymentLog]:
        """Payments whose customer has been deleted."""
        ids = {c.id for c in self._customers}
        return [p for p in self._payment_logs if p.customer_id not in ids]

    # =========================================================================
    # CUSTOMERS
    # =========================================================================

    def validate_customer(self, customer: Customer) -> ValidationResult:
        return self._validator.validate(customer)

    def upsert_customer(self, customer: Customer) -> Customer:
        """
        Add a new customer or replace the one with the same id.

        Raises:
            CustomerValidationError: name or mobile missing; nothing saved.
        """
        result = self._validator.validate(customer)
        if not result.is_valid:
            if self._audit_logger is not None:
                self._audit_logger.log_validation_failed(
                    customer.id,
                    [{"field": i.field, "type": i.issue_type, "message": i.message}
                     for i in result.issues],
                )
            raise CustomerValidationError(result)

        saved = self._with_opening_balance(customer, self._payment_logs)
        created = True
        customers = []
        for existing in self._customers:
            if existing.id == saved.id:
                customers.append(saved)
                created = False
            else:
                customers.append(existing)
        if created:
            customers.append(saved)

        self._customers = customers

        if self._audit_logger is not None:
            self._audit_logger.log_customer_saved(saved.id, saved.name, created)
        return saved

    def delete_customer(self, customer_id: str) -> Customer:
        """
        Remove a customer from the roster.

        Their delivery logs and payments are left in place.

        Raises:
            CustomerNotFoundError: no such customer.
        """
        removed = self.get_customer(customer_id)
        self._customers = [c for c in self._customers if c.id != customer_id]

        if self._audit_logger is not None:
            self._audit_logger.log_customer_deleted(
                customer_id=customer_id,
                orphaned_logs=sum(1 for l in self._delivery_logs if l.customer_id == customer_id),
                orphaned_payments=sum(1 for p in self._payment_logs if p.customer_id == customer_id),
            )
        return removed

    def set_paused(self, customer_id: str, is_paused: bool) -> Customer:
        customer = self.get_customer(customer_id)
        return self.upsert_customer(customer.model_copy(update={"is_paused": is_paused}))

    # =========================================================================
    # DELIVERIES
    # =========================================================================

    def set_delivery_status(
        self,
        customer_id: str,
        day: dt.date,
        status: DeliveryStatus,
        quantity: Any = None,
        milk_type: Optional[MilkType] = None,
    ) -> DeliveryLog:
        """
        Create or update the (customer, day) delivery log.

        quantity and milk_type default to the existing log's values,
        then to the customer's defaults. Extras are carried over.

        Raises:
            CustomerNotFoundError: no such customer.
            InvalidAmountError: quantity is not a non-negative number.
        """
        customer = self.get_customer(customer_id)
        existing = self.get_delivery_log(customer_id, day)

        if quantity is not None:
            qty = parse_quantity(quantity)
        elif existing:
            qty = existing.quantity
        else:
            qty = customer.default_quantity

        if milk_type is None:
            milk_type = (existing.milk_type if existing else None) or customer.milk_type

        log = DeliveryLog(
            customer_id=customer_id,
            date=day,
            status=status,
            quantity=qty,
            milk_type=milk_type,
            extras=list(existing.extras) if existing else [],
            extra_cost=existing.extra_cost if existing else Decimal("0"),
        )
        self._delivery_logs = self._upserted(self._delivery_logs, log)

        if self._audit_logger is not None:
            self._audit_logger.log_delivery_recorded(
                log_id=log.id,
                customer_id=customer_id,
                status=status.value,
                quantity=qty,
            )
        return log

    def daily_route(self, day: dt.date, shift: DeliveryShift) -> list[RouteStop]:
        """
        Active customers on a shift, with the day's resolved delivery.

        Customers not yet logged for the day come first; the sort is
        stable, so roster order is kept within each group.
        """
        stops = []
        for customer in self._customers:
            if customer.is_paused or customer.delivery_time != shift:
                continue
            log = self.get_delivery_log(customer.id, day)
            stops.append(RouteStop(
                customer=customer,
                log=log,
                status=log.status if log else DeliveryStatus.PENDING,
                quantity=log.quantity if log else customer.default_quantity,
                milk_type=(log.milk_type if log else None) or customer.milk_type,
            ))
        return sorted(stops, key=lambda stop: stop.is_logged)

    # =========================================================================
    # PAYMENTS
    # =========================================================================

    def apply_payment(
        self,
        customer_id: str,
        amount: Any,
        mode: PaymentMode,
        day: dt.date,
    ) -> PaymentLog:
        """
        Record a payment: append the PaymentLog and decrement the
        customer's running balance in one step.

        Raises:
            CustomerNotFoundError: no such customer.
            InvalidAmountError: amount is not a positive number.
        """
        customer = self.get_customer(customer_id)
        value = parse_positive_amount(amount)

        payment = PaymentLog(customer_id=customer_id, date=day, amount=value, mode=mode)
        updated = customer.model_copy(update={"balance": customer.balance - value})
        customers = [updated if c.id == customer_id else c for c in self._customers]
        payments = self._payment_logs + [payment]

        self._customers, self._payment_logs = customers, payments

        if self._audit_logger is not None:
            self._audit_logger.log_payment_recorded(
                payment_id=payment.id,
                customer_id=customer_id,
                amount=value,
                mode=mode.value,
            )
        return payment

    # =========================================================================
    # BACKUP / RESTORE
    # =========================================================================

    def export_snapshot(self, taken_at: Optional[datetime] = None) -> Snapshot:
        snapshot = Snapshot(
            customers=self.customers,
            delivery_logs=self.delivery_logs,
            payment_logs=self.payment_logs,
            backup_date=taken_at or datetime.now(timezone.utc),
        )
        if self._audit_logger is not None:
            self._audit_logger.log_snapshot_exported(
                len(snapshot.customers),
                len(snapshot.delivery_logs),
                len(snapshot.payment_logs),
            )
        return snapshot

    def restore_snapshot(self, snapshot: Snapshot) -> None:
        """Replace all three collections with the snapshot's."""
        payments = list(snapshot.payment_logs)
        logs: list[DeliveryLog] = []
        for log in snapshot.delivery_logs:
            logs = self._upserted(logs, log)
        customers = [self._with_opening_balance(c, payments) for c in snapshot.customers]

        self._customers, self._delivery_logs, self._payment_logs = customers, logs, payments

        if self._audit_logger is not None:
            self._audit_logger.log_snapshot_restored(len(customers), len(logs), len(payments))

    # =========================================================================
    # INTERNALS
    # =========================================================================

    @staticmethod
    def _upserted(logs: list[DeliveryLog], log: DeliveryLog) -> list[DeliveryLog]:
        """Copy of logs with `log` replacing the same id in place, or appended."""
        updated = list(logs)
        for i, existing in enumerate(updated):
            if existing.id == log.id:
                updated[i] = log
                return updated
        updated.append(log)
        return updated

    @staticmethod
    def _with_opening_balance(customer: Customer, payments: list[PaymentLog]) -> Customer:
        opening = customer.balance + paid_amount(customer.id, payments)
        return customer.model_copy(update={"opening_balance": opening})
