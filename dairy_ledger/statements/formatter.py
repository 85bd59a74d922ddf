"""
Statement Formatter

Turns one customer's deliveries and payments into an ordered
transaction ledger with running totals. Rendering is someone else's job:
this module only decides which rows appear, in what order, and what
they add up to.
"""

import datetime as dt
from decimal import Decimal
from typing import Iterable, Optional

from dairy_ledger.config import StatementSettings, get_settings
from dairy_ledger.ledger.engine import ZERO, customer_payments, delivered_logs, price_for
from dairy_ledger.models.entities import Customer, DateRange, DeliveryLog, PaymentLog
from dairy_ledger.models.statement import EntryKind, Statement, StatementRow


def delivery_row(customer: Customer, log: DeliveryLog) -> StatementRow:
    milk_type = log.milk_type or customer.milk_type
    rate = price_for(customer, log)
    return StatementRow(
        date=log.date,
        description=f"{milk_type.value} Milk",
        rate=rate,
        quantity=log.quantity,
        amount=log.quantity * rate,
        kind=EntryKind.DEBIT,
    )


def payment_row(payment: PaymentLog) -> StatementRow:
    return StatementRow(
        date=payment.date,
        description=f"Payment ({payment.mode.value})",
        amount=payment.amount,
        kind=EntryKind.CREDIT,
    )


def paginate(
    rows: list[StatementRow],
    first_page_rows: int,
    rows_per_page: int,
) -> list[list[StatementRow]]:
    """
    Split rows into pages.

    The first page holds fewer rows because the header and Bill To block
    sit above the table. An empty statement still has one (empty) page.
    """
    pages = [rows[:first_page_rows]]
    for i in range(first_page_rows, len(rows), rows_per_page):
        pages.append(rows[i:i + rows_per_page])
    return pages


def build_statement(
    customer: Customer,
    logs: Iterable[DeliveryLog],
    payments: Iterable[PaymentLog],
    title: str,
    opening_balance: Decimal,
    date_range: Optional[DateRange] = None,
    generated_on: Optional[dt.date] = None,
    settings: Optional[StatementSettings] = None,
) -> Statement:
    """
    Build a customer statement.

    Deliveries come first, then payments; a stable sort by date keeps
    that order for rows sharing a date.

    net_receivable = opening_balance + total_debit - total_credit
    """
    settings = settings or get_settings().statement

    debits = [delivery_row(customer, log) for log in delivered_logs(customer.id, logs, date_range)]
    credits = [payment_row(p) for p in customer_payments(customer.id, payments, date_range)]
    rows = sorted(debits + credits, key=lambda row: row.date)

    total_debit = ZERO
    total_credit = ZERO
    total_litres = ZERO
    for row in rows:
        if row.kind == EntryKind.DEBIT:
            total_debit += row.amount
            total_litres += row.quantity
        else:
            total_credit += row.amount

    return Statement(
        title=title,
        generated_on=generated_on or dt.date.today(),
        customer_id=customer.id,
        customer_name=customer.name,
        customer_address=customer.address,
        customer_mobile=customer.mobile,
        date_range=date_range,
        rows=rows,
        pages=paginate(rows, settings.first_page_rows, settings.rows_per_page),
        opening_balance=opening_balance,
        total_debit=total_debit,
        total_credit=total_credit,
        total_litres=total_litres,
        net_receivable=opening_balance + total_debit - total_credit,
    )
