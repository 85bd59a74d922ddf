"""Statement building and rendering package."""

from dairy_ledger.statements.formatter import (
    build_statement,
    delivery_row,
    paginate,
    payment_row,
)
from dairy_ledger.statements.pdf import render_statement_pdf, statement_filename

__all__ = [
    "build_statement",
    "delivery_row",
    "paginate",
    "payment_row",
    "render_statement_pdf",
    "statement_filename",
]
