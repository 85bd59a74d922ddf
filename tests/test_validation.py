"""
Tests for input parsing and the customer validator.
"""

import pytest
from decimal import Decimal

from dairy_ledger.models import Customer, MilkType
from dairy_ledger.validation import (
    CustomerValidator,
    InvalidAmountError,
    parse_amount,
    parse_positive_amount,
    parse_quantity,
)


class TestParseAmount:
    """Tests for parse_amount."""

    @pytest.mark.parametrize("value,expected", [
        ("250", Decimal("250")),
        (" 99.50 ", Decimal("99.50")),
        ("1,250.75", Decimal("1250.75")),
        (100, Decimal("100")),
        (2.5, Decimal("2.5")),
        (Decimal("0.1"), Decimal("0.1")),
        ("-40", Decimal("-40")),
    ])
    def test_accepts_numbers(self, value, expected):
        """Numbers in any of the usual shapes parse exactly."""
        assert parse_amount(value) == expected

    @pytest.mark.parametrize("value", [
        "abc", "", "   ", "nan", "Infinity", float("nan"), float("inf"), None, True, [],
    ])
    def test_rejects_non_numbers(self, value):
        """Anything that is not a finite number is rejected."""
        with pytest.raises(InvalidAmountError):
            parse_amount(value)

    def test_message_names_field(self):
        """The error says which input was wrong."""
        with pytest.raises(InvalidAmountError, match="Invalid amount: 'abc'"):
            parse_amount("abc")

    def test_is_value_error(self):
        """Callers catching ValueError also catch bad amounts."""
        with pytest.raises(ValueError):
            parse_amount("abc")


class TestParsePositiveAmount:
    """Tests for payment amounts."""

    def test_accepts_positive(self):
        assert parse_positive_amount("0.01") == Decimal("0.01")

    @pytest.mark.parametrize("value", ["0", "-1", 0])
    def test_rejects_zero_and_negative(self, value):
        """A payment of nothing, or less, is not a payment."""
        with pytest.raises(InvalidAmountError, match="greater than zero"):
            parse_positive_amount(value)


class TestParseQuantity:
    """Tests for litres."""

    def test_zero_allowed(self):
        """Zero litres is a valid entry."""
        assert parse_quantity("0") == Decimal("0")

    def test_negative_rejected(self):
        """Negative litres are not."""
        with pytest.raises(InvalidAmountError, match="Invalid quantity"):
            parse_quantity("-0.5")


class TestCustomerValidator:
    """Tests for CustomerValidator."""

    @pytest.fixture
    def validator(self):
        return CustomerValidator()

    def test_valid_customer(self, validator, customer):
        """A complete customer passes without warnings."""
        result = validator.validate(customer)
        assert result.is_valid
        assert result.issues == []
        assert result.entity_id == "c1"

    def test_name_and_mobile_required(self, validator):
        """Both missing gives two errors."""
        result = validator.validate(Customer(name="", mobile=""))
        assert not result.is_valid
        assert result.error_messages == ["Name is required", "Mobile is required"]

    def test_mobile_format_warning(self, validator):
        """Letters in a mobile number are flagged but allowed."""
        result = validator.validate(Customer(name="Rao", mobile="98x"))
        assert result.is_valid
        assert any("non-digits" in w for w in result.warnings)

    def test_mobile_with_country_code(self, validator):
        """'+91 98220 00000' is a normal number."""
        result = validator.validate(Customer(name="Rao", mobile="+91 98220 00000"))
        assert result.warnings == []

    def test_missing_price_warning(self, validator):
        """No price for the customer's milk is a warning, not an error."""
        customer = Customer(
            name="Rao", mobile="9",
            milk_type=MilkType.BUFFALO,
            prices={MilkType.COW: Decimal("60")},
        )
        result = validator.validate(customer)
        assert result.is_valid
        assert any(i.issue_type == "missing_price" for i in result.issues)

    def test_zero_quantity_warning(self, validator):
        """An active customer getting 0 litres a day is suspicious."""
        result = validator.validate(Customer(name="Rao", mobile="9", default_quantity=Decimal("0")))
        assert any(i.field == "default_quantity" for i in result.issues)

    def test_zero_quantity_ok_when_paused(self, validator):
        """Paused customers may have 0 litres."""
        result = validator.validate(
            Customer(name="Rao", mobile="9", default_quantity=Decimal("0"), is_paused=True)
        )
        assert result.issues == []

    def test_summary(self, validator):
        """The summary lists errors and fixes."""
        summary = validator.get_user_friendly_summary(validator.validate(Customer(name="", mobile="9")))
        assert "Please fix" in summary
        assert "Name is required" in summary

    def test_summary_all_good(self, validator, customer):
        assert "All checks passed" in validator.get_user_friendly_summary(validator.validate(customer))


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
