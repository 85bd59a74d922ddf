"""
Ledger Engine

DESIGN DECISION: Every figure the provider sees is recomputed from the
three collections on demand. Nothing here caches, mutates or raises.

The functions are deliberately small and composable:
- price_for resolves one log's price
- billed_amount / paid_amount sum one side of the ledger
- net_balance and opening_balance_for_range combine them

Balance semantics:
- customer.opening_balance is the due before any logged activity
- customer.balance is the running due, already net of recorded payments
The store keeps opening_balance == balance + sum(payments), so
statement math and dashboard math agree.
"""

import datetime as dt
from decimal import Decimal
from typing import Iterable, Optional

import structlog

from dairy_ledger.models.entities import (
    Customer,
    DateRange,
    DeliveryLog,
    DeliveryStatus,
    PaymentLog,
    in_range,
)
from dairy_ledger.models.ledger import BilledTotals


logger = structlog.get_logger(__name__)

ZERO = Decimal("0")


def price_for(customer: Customer, log: DeliveryLog) -> Decimal:
    """
    Price per litre for one delivery.

    The log's milk type overrides the customer's. A type with no
    configured price resolves to 0; the gap is logged, never raised.
    """
    milk_type = log.milk_type or customer.milk_type
    price = customer.price_of(milk_type)
    if price is None:
        logger.warning(
            "missing_price",
            customer_id=customer.id,
            milk_type=milk_type.value,
            log_id=log.id,
        )
        return ZERO
    return price


def delivered_logs(
    customer_id: str,
    logs: Iterable[DeliveryLog],
    date_range: Optional[DateRange] = None,
) -> list[DeliveryLog]:
    """Delivered logs for one customer, in input order."""
    return [
        log for log in logs
        if log.customer_id == customer_id
        and log.status == DeliveryStatus.DELIVERED
        and in_range(log.date, date_range)
    ]


def customer_payments(
    customer_id: str,
    payments: Iterable[PaymentLog],
    date_range: Optional[DateRange] = None,
) -> list[PaymentLog]:
    """Payments from one customer, in input order."""
    return [
        payment for payment in payments
        if payment.customer_id == customer_id
        and in_range(payment.date, date_range)
    ]


def billed_amount(
    customer: Customer,
    logs: Iterable[DeliveryLog],
    date_range: Optional[DateRange] = None,
) -> BilledTotals:
    """
    Value and litres of delivered milk.

    Only DELIVERED logs count; pending, missed and paused days are
    never billed.
    """
    amount = ZERO
    litres = ZERO
    for log in delivered_logs(customer.id, logs, date_range):
        amount += log.quantity * price_for(customer, log)
        litres += log.quantity
    return BilledTotals(amount=amount, litres=litres)


def paid_amount(
    customer_id: str,
    payments: Iterable[PaymentLog],
    date_range: Optional[DateRange] = None,
) -> Decimal:
    """Sum of payments received from one customer."""
    return sum(
        (payment.amount for payment in customer_payments(customer_id, payments, date_range)),
        ZERO,
    )


def net_balance(
    customer: Customer,
    logs: Iterable[DeliveryLog],
    payments: Iterable[PaymentLog],
    date_range: Optional[DateRange] = None,
) -> Decimal:
    """
    Amount owed: opening balance + billed - paid.

    Positive means the customer owes; negative means an advance.
    """
    logs = list(logs)
    payments = list(payments)
    return (
        customer.opening_balance
        + billed_amount(customer, logs, date_range).amount
        - paid_amount(customer.id, payments, date_range)
    )


def opening_balance_for_range(
    customer: Customer,
    logs: Iterable[DeliveryLog],
    payments: Iterable[PaymentLog],
    start: dt.date,
) -> Decimal:
    """
    Balance as of just before `start`, for a period bill.

    customer.balance is already net of every recorded payment, so the
    payments on or after `start` are added back, and the deliveries
    before `start` are added on:

        balance + paid(date >= start) + billed(date < start)

    Subtracting the in-range billed amount instead gives a different,
    wrong number.
    """
    since_start = DateRange(start=start)
    before_start = DateRange(end=start - dt.timedelta(days=1))
    return (
        customer.balance
        + paid_amount(customer.id, payments, since_start)
        + billed_amount(customer, logs, before_start).amount
    )
