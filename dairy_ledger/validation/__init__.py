"""Input validation package."""

from dairy_ledger.validation.validator import (
    CustomerValidator,
    InvalidAmountError,
    parse_amount,
    parse_positive_amount,
    parse_quantity,
)

__all__ = [
    "CustomerValidator",
    "InvalidAmountError",
    "parse_amount",
    "parse_positive_amount",
    "parse_quantity",
]
