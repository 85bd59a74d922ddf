"""Ledger computations package."""

from dairy_ledger.ledger.engine import (
    billed_amount,
    customer_payments,
    delivered_logs,
    net_balance,
    opening_balance_for_range,
    paid_amount,
    price_for,
)
from dairy_ledger.ledger.reports import (
    customer_period_total,
    dashboard_summary,
    month_to_date,
    period_report,
    total_outstanding,
)

__all__ = [
    "billed_amount",
    "customer_payments",
    "delivered_logs",
    "net_balance",
    "opening_balance_for_range",
    "paid_amount",
    "price_for",
    "customer_period_total",
    "dashboard_summary",
    "month_to_date",
    "period_report",
    "total_outstanding",
]
