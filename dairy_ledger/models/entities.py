"""
Core Data Models for Dairy Ledger

These models define the strict schemas for the three collections the
business keeps: customers, delivery logs and payment logs.

They are designed to:
1. Reject malformed numbers at the boundary (no NaN, no infinity)
2. Round-trip through the JSON backup format unchanged
3. Read backups written by the original app (camelCase keys)

DESIGN DECISION: Money and litres are Decimal, never float.
Sums over a month of deliveries must come out to the paisa.
"""

import datetime as dt
from decimal import Decimal
from enum import Enum
from typing import Annotated, Optional
from uuid import uuid4

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    model_validator,
)
from pydantic.alias_generators import to_camel


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class MilkType(str, Enum):
    """Milk sold by the business. Prices are kept per type on each customer."""
    COW = "Cow"
    BUFFALO = "Buffalo"


class DeliveryStatus(str, Enum):
    """
    Outcome of one day's delivery to one customer.

    A day with no log at all is treated as PENDING.
    Only DELIVERED is ever billed.
    """
    PENDING = "Pending"
    DELIVERED = "Delivered"
    MISSED = "Missed"    # Customer wasn't home
    PAUSED = "Paused"    # Customer requested pause


class PaymentMode(str, Enum):
    """How a payment was received."""
    CASH = "Cash"
    ONLINE = "Online"  # UPI/NetBanking


class DeliveryShift(str, Enum):
    """Delivery round a customer belongs to."""
    MORNING = "Morning"
    EVENING = "Evening"


Litres = Annotated[Decimal, Field(ge=0)]
Price = Annotated[Decimal, Field(ge=0)]


def default_prices() -> dict[MilkType, Decimal]:
    return {
        MilkType.COW: Decimal("60"),
        MilkType.BUFFALO: Decimal("70"),
    }


def make_delivery_log_id(customer_id: str, day: dt.date) -> str:
    """
    Derive the delivery log id for a (customer, date) pair.

    The id is the upsert key: one customer has at most one log per day.
    """
    return f"{customer_id}-{day.isoformat()}"


class LedgerModel(BaseModel):
    """Base for all persisted models: camelCase on the wire, snake_case in Python."""
    model_config = ConfigDict(
        str_strip_whitespace=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


# =============================================================================
# CORE MODELS
# =============================================================================

class Customer(LedgerModel):
    """
    A customer on the delivery roster.

    Two balances are kept:
    - balance: the running due. Recording a payment decrements it.
    - opening_balance: the due before any logged delivery or payment.
      The store keeps opening_balance == balance + sum(payments).
    """

    id: str = Field(
        default_factory=lambda: uuid4().hex,
        min_length=1,
        description="Customer identifier"
    )
    name: str = Field(
        default="",
        max_length=200,
        description="Customer or household name (required by the validator)"
    )
    mobile: str = Field(
        default="",
        max_length=20,
        description="Contact number (required by the validator)"
    )
    address: str = Field(
        default="",
        max_length=500,
    )
    milk_type: MilkType = MilkType.COW
    default_quantity: Litres = Field(
        default=Decimal("1"),
        description="Litres delivered per day unless overridden"
    )
    prices: dict[MilkType, Price] = Field(
        default_factory=default_prices,
        description="Price per litre for each milk type"
    )
    delivery_time: DeliveryShift = DeliveryShift.MORNING
    start_date: dt.date = Field(default_factory=dt.date.today)
    payment_mode: PaymentMode = PaymentMode.CASH
    balance: Decimal = Field(
        default=Decimal("0"),
        description="Running due (positive = customer owes)"
    )
    is_paused: bool = Field(
        default=False,
        description="Inactive customers are left off the daily route"
    )
    opening_balance: Optional[Decimal] = Field(
        default=None,
        description="Due before any logged activity"
    )

    @model_validator(mode='after')
    def default_opening_balance(self) -> 'Customer':
        if self.opening_balance is None:
            self.opening_balance = self.balance
        return self

    def price_of(self, milk_type: MilkType) -> Optional[Decimal]:
        """Configured price per litre, or None when the type has no price."""
        return self.prices.get(milk_type)


class DeliveryLog(LedgerModel):
    """
    One day's delivery record for one customer.

    The id is always derived from (customer_id, date); a log carrying any
    other id is rejected.
    """

    id: str = Field(
        default="",
        description="Derived upsert key: '<customerId>-<YYYY-MM-DD>'"
    )
    customer_id: str = Field(..., min_length=1)
    date: dt.date
    status: DeliveryStatus = DeliveryStatus.PENDING
    quantity: Litres = Field(
        default=Decimal("0"),
        description="Litres for this day"
    )
    milk_type: Optional[MilkType] = Field(
        default=None,
        description="Overrides the customer's milk type for this day"
    )
    extras: list[str] = Field(
        default_factory=list,
        description="Extra items (e.g. Curd, Ghee); not billed by the ledger"
    )
    extra_cost: Decimal = Field(
        default=Decimal("0"),
        ge=0,
    )

    @model_validator(mode='after')
    def derive_id(self) -> 'DeliveryLog':
        expected = make_delivery_log_id(self.customer_id, self.date)
        if not self.id:
            self.id = expected
        elif self.id != expected:
            raise ValueError(
                f"Delivery log id '{self.id}' does not match its customer and date "
                f"(expected '{expected}')"
            )
        return self


class PaymentLog(LedgerModel):
    """A payment received from a customer. Positive amounts reduce the due."""

    id: str = Field(
        default_factory=lambda: f"pay-{uuid4().hex}",
        min_length=1,
    )
    customer_id: str = Field(..., min_length=1)
    date: dt.date
    amount: Decimal = Field(
        ...,
        description="Amount received"
    )
    mode: PaymentMode = PaymentMode.CASH


class DateRange(BaseModel):
    """
    Inclusive date window. Either end may be open.

    ISO dates order the same way as their strings, so comparing dates here
    matches the original string comparison.
    """

    start: Optional[dt.date] = None
    end: Optional[dt.date] = None

    @model_validator(mode='after')
    def validate_order(self) -> 'DateRange':
        if self.start and self.end and self.end < self.start:
            raise ValueError("Date range end cannot be before start")
        return self

    def contains(self, day: dt.date) -> bool:
        if self.start is not None and day < self.start:
            return False
        if self.end is not None and day > self.end:
            return False
        return True


def in_range(day: dt.date, date_range: Optional[DateRange]) -> bool:
    """True when no range is given or the day falls inside it."""
    return date_range is None or date_range.contains(day)
