"""
Derived figures produced by the ledger and report functions.

None of these are stored. They are recomputed on demand from the
three collections every time they are needed.
"""

import datetime as dt
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field

from dairy_ledger.models.entities import (
    Customer,
    DateRange,
    DeliveryLog,
    DeliveryStatus,
    MilkType,
)


class BilledTotals(BaseModel):
    """Value and volume of delivered milk for one customer."""

    amount: Decimal = Decimal("0")
    litres: Decimal = Decimal("0")


class CustomerPeriodTotal(BaseModel):
    """One line of the period report."""

    customer_id: str
    customer_name: str
    milk_type: MilkType
    litres: Decimal
    amount: Decimal
    delivered_count: int = Field(ge=0)


class PeriodReport(BaseModel):
    """
    Billed totals for every matching customer in a date range.

    milk_type_filter of None means all types.
    """

    date_range: DateRange
    milk_type_filter: Optional[MilkType] = None
    lines: list[CustomerPeriodTotal] = Field(default_factory=list)
    total_litres: Decimal = Decimal("0")
    total_amount: Decimal = Decimal("0")

    @property
    def customer_count(self) -> int:
        return len(self.lines)


class DashboardSummary(BaseModel):
    """Headline numbers for the provider dashboard."""

    today: dt.date
    total_outstanding: Decimal
    delivered_today: int = Field(ge=0)
    logged_today: int = Field(ge=0)
    active_customers: int = Field(ge=0)
    inactive_customers: int = Field(ge=0)


class RouteStop(BaseModel):
    """
    One customer on a day's delivery route.

    status, quantity and milk_type are resolved: they come from the day's
    log when one exists, otherwise from the customer's defaults.
    """

    customer: Customer
    log: Optional[DeliveryLog] = None
    status: DeliveryStatus
    quantity: Decimal
    milk_type: MilkType

    @property
    def is_logged(self) -> bool:
        return self.log is not None
