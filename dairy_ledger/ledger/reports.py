"""
Reports

Roll-ups across customers for the dashboard, billing and reports screens.
Built only from the ledger engine's functions, so every figure on every
screen comes from the same arithmetic.
"""

import datetime as dt
from decimal import Decimal
from typing import Iterable, Optional

from dairy_ledger.ledger.engine import ZERO, billed_amount, delivered_logs, net_balance
from dairy_ledger.models.entities import (
    Customer,
    DateRange,
    DeliveryLog,
    DeliveryStatus,
    MilkType,
    PaymentLog,
)
from dairy_ledger.models.ledger import CustomerPeriodTotal, DashboardSummary, PeriodReport


def month_to_date(today: dt.date) -> DateRange:
    """First of the month through today."""
    return DateRange(start=today.replace(day=1), end=today)


def customer_period_total(
    customer: Customer,
    logs: Iterable[DeliveryLog],
    date_range: DateRange,
) -> CustomerPeriodTotal:
    logs = list(logs)
    totals = billed_amount(customer, logs, date_range)
    return CustomerPeriodTotal(
        customer_id=customer.id,
        customer_name=customer.name,
        milk_type=customer.milk_type,
        litres=totals.litres,
        amount=totals.amount,
        delivered_count=len(delivered_logs(customer.id, logs, date_range)),
    )


def period_report(
    customers: Iterable[Customer],
    logs: Iterable[DeliveryLog],
    date_range: DateRange,
    milk_type: Optional[MilkType] = None,
) -> PeriodReport:
    """
    Billed litres and amount per customer over a date range.

    milk_type filters on the customer's default milk type, matching the
    reports screen's filter; None includes everyone.
    """
    logs = list(logs)
    lines = [
        customer_period_total(customer, logs, date_range)
        for customer in customers
        if milk_type is None or customer.milk_type == milk_type
    ]
    return PeriodReport(
        date_range=date_range,
        milk_type_filter=milk_type,
        lines=lines,
        total_litres=sum((line.litres for line in lines), ZERO),
        total_amount=sum((line.amount for line in lines), ZERO),
    )


def total_outstanding(
    customers: Iterable[Customer],
    logs: Iterable[DeliveryLog],
    payments: Iterable[PaymentLog],
) -> Decimal:
    """Sum of every customer's net balance."""
    logs = list(logs)
    payments = list(payments)
    return sum(
        (net_balance(customer, logs, payments) for customer in customers),
        ZERO,
    )


def dashboard_summary(
    customers: Iterable[Customer],
    logs: Iterable[DeliveryLog],
    payments: Iterable[PaymentLog],
    today: dt.date,
) -> DashboardSummary:
    customers = list(customers)
    logs = list(logs)
    todays_logs = [log for log in logs if log.date == today]
    inactive = sum(1 for customer in customers if customer.is_paused)
    return DashboardSummary(
        today=today,
        total_outstanding=total_outstanding(customers, logs, payments),
        delivered_today=sum(
            1 for log in todays_logs if log.status == DeliveryStatus.DELIVERED
        ),
        logged_today=len(todays_logs),
        active_customers=len(customers) - inactive,
        inactive_customers=inactive,
    )
