"""
Statement Models

A statement is the ordered transaction ledger for one customer plus
its running totals. It is what the PDF renderer draws; it carries no
layout information of its own beyond the page split.
"""

import datetime as dt
from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from dairy_ledger.models.entities import DateRange


class EntryKind(str, Enum):
    """DEBIT rows are deliveries, CREDIT rows are payments."""
    DEBIT = "DEBIT"
    CREDIT = "CREDIT"


class StatementRow(BaseModel):
    """One line of the transaction table."""

    date: dt.date
    description: str = Field(..., max_length=100)
    rate: Decimal = Decimal("0")
    quantity: Decimal = Decimal("0")
    amount: Decimal
    kind: EntryKind

    @property
    def is_credit(self) -> bool:
        return self.kind == EntryKind.CREDIT

    @property
    def signed_amount(self) -> Decimal:
        """Credits print as negative amounts."""
        return -self.amount if self.is_credit else self.amount


class Statement(BaseModel):
    """
    A customer statement ready for rendering.

    INVARIANT: net_receivable == opening_balance + total_debit - total_credit
    """

    title: str
    generated_on: dt.date

    # Bill To
    customer_id: str
    customer_name: str
    customer_address: str = ""
    customer_mobile: str = ""

    date_range: Optional[DateRange] = None

    rows: list[StatementRow] = Field(default_factory=list)
    pages: list[list[StatementRow]] = Field(
        default_factory=list,
        description="Rows split by page; always at least one page"
    )

    opening_balance: Decimal
    total_debit: Decimal = Decimal("0")
    total_credit: Decimal = Decimal("0")
    total_litres: Decimal = Decimal("0")
    net_receivable: Decimal

    @property
    def is_empty(self) -> bool:
        return not self.rows

    @property
    def net_position(self) -> str:
        """'owed' when the customer owes money, 'credit' when in advance."""
        return "owed" if self.net_receivable > 0 else "credit"
