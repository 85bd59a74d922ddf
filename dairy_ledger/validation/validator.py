"""
Input Validation

DESIGN DECISION: Numbers typed by the provider are parsed at the boundary.
A non-numeric amount or quantity is rejected with a clear error instead of
flowing into the totals as NaN.

Customer records go through a validator that reports issues:
- Errors block the save (missing name or mobile)
- Warnings are shown but do not block (missing price, zero quantity)

IMPORTANT: Validation NEVER silently fixes issues.
It reports them for human review.
"""

import math
from decimal import Decimal, InvalidOperation
from typing import Any

from dairy_ledger.models.entities import Customer
from dairy_ledger.models.validation import ValidationIssue, ValidationResult


class InvalidAmountError(ValueError):
    """User-entered amount or quantity is not a usable number."""

    def __init__(self, value: Any, field: str = "amount", reason: str = "not a number"):
        super().__init__(f"Invalid {field}: {value!r} ({reason})")
        self.value = value
        self.field = field
        self.reason = reason


def parse_amount(value: Any, field: str = "amount") -> Decimal:
    """
    Parse user input into a finite Decimal.

    Accepts Decimal, int, float and numeric strings ("250", " 99.50 ").
    Rejects empty strings, NaN, infinity, booleans and anything else.
    """
    if isinstance(value, bool) or value is None:
        raise InvalidAmountError(value, field)

    if isinstance(value, Decimal):
        parsed = value
    elif isinstance(value, int):
        parsed = Decimal(value)
    elif isinstance(value, float):
        if math.isnan(value) or math.isinf(value):
            raise InvalidAmountError(value, field, "not finite")
        parsed = Decimal(str(value))
    elif isinstance(value, str):
        text = value.strip().replace(",", "")
        if not text:
            raise InvalidAmountError(value, field, "empty")
        try:
            parsed = Decimal(text)
        except InvalidOperation:
            raise InvalidAmountError(value, field) from None
    else:
        raise InvalidAmountError(value, field)

    if not parsed.is_finite():
        raise InvalidAmountError(value, field, "not finite")
    return parsed


def parse_positive_amount(value: Any, field: str = "amount") -> Decimal:
    """Parse a payment amount; it must be greater than zero."""
    parsed = parse_amount(value, field)
    if parsed <= 0:
        raise InvalidAmountError(value, field, "must be greater than zero")
    return parsed


def parse_quantity(value: Any) -> Decimal:
    """Parse litres; zero is allowed, negative is not."""
    parsed = parse_amount(value, "quantity")
    if parsed < 0:
        raise InvalidAmountError(value, "quantity", "cannot be negative")
    return parsed


class CustomerValidator:
    """Validates a customer record before it enters the store."""

    def validate(self, customer: Customer) -> ValidationResult:
        issues = []

        if not customer.name:
            issues.append(ValidationIssue(
                field="name",
                issue_type="missing",
                message="Name is required",
                severity="error",
                suggested_fix="Enter the customer or household name",
            ))

        if not customer.mobile:
            issues.append(ValidationIssue(
                field="mobile",
                issue_type="missing",
                message="Mobile is required",
                severity="error",
                suggested_fix="Enter a contact number",
            ))
        elif not customer.mobile.replace(" ", "").lstrip("+").isdigit():
            issues.append(ValidationIssue(
                field="mobile",
                issue_type="invalid_format",
                message=f"Mobile number '{customer.mobile}' contains non-digits",
                severity="warning",
                suggested_fix="Please verify the number",
            ))

        price = customer.price_of(customer.milk_type)
        if price is None:
            issues.append(ValidationIssue(
                field="prices",
                issue_type="missing_price",
                message=(
                    f"No price set for {customer.milk_type.value} milk; "
                    "deliveries will be billed at 0"
                ),
                severity="warning",
                suggested_fix=f"Set a {customer.milk_type.value} price per litre",
            ))
        elif price == 0:
            issues.append(ValidationIssue(
                field="prices",
                issue_type="zero_price",
                message=f"{customer.milk_type.value} milk is priced at 0 per litre",
                severity="warning",
                suggested_fix="Please verify the price",
            ))

        if customer.default_quantity == 0 and not customer.is_paused:
            issues.append(ValidationIssue(
                field="default_quantity",
                issue_type="suspicious_value",
                message="Default quantity is 0 litres for an active customer",
                severity="warning",
                suggested_fix="Set the usual daily litres, or mark the customer inactive",
            ))

        warnings = [issue.message for issue in issues if issue.severity == "warning"]
        is_valid = not any(issue.severity == "error" for issue in issues)

        return ValidationResult(
            entity_id=customer.id,
            is_valid=is_valid,
            issues=issues,
            warnings=warnings,
        )

    def get_user_friendly_summary(self, result: ValidationResult) -> str:
        """
        Generate a user-friendly summary of validation results.

        This is what we show in the customer form.
        """
        if result.is_valid and not result.warnings:
            return "✅ All checks passed."

        lines = []

        if not result.is_valid:
            lines.append("❌ Please fix the following:")
            for issue in result.issues:
                if issue.severity == "error":
                    lines.append(f"   • {issue.message}")
                    if issue.suggested_fix:
                        lines.append(f"     💡 {issue.suggested_fix}")

        if result.warnings:
            if lines:
                lines.append("")
            lines.append("⚠️ Please verify the following:")
            for warning in result.warnings:
                lines.append(f"   • {warning}")

        return "\n".join(lines)
