"""
Tests for Dairy Ledger

Test strategy:
1. Unit tests for individual components (models, validators, ledger)
2. Integration tests for flows (store, statements, backups)
3. No network and no real backup directory (use tmp_path)
"""

import pytest
from datetime import date
from decimal import Decimal

from pydantic import ValidationError

from dairy_ledger.models import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
    Customer,
    DateRange,
    DeliveryLog,
    DeliveryShift,
    DeliveryStatus,
    MilkType,
    PaymentLog,
    PaymentMode,
    StatementRow,
    EntryKind,
    ValidationIssue,
    ValidationResult,
    in_range,
    make_delivery_log_id,
)


class TestCustomerModel:
    """Tests for the Customer model."""

    def test_defaults(self):
        """A bare customer gets the usual prices and one litre a day."""
        customer = Customer(name="Patil", mobile="9000000000")
        assert customer.prices[MilkType.COW] == Decimal("60")
        assert customer.prices[MilkType.BUFFALO] == Decimal("70")
        assert customer.default_quantity == Decimal("1")
        assert customer.delivery_time == DeliveryShift.MORNING
        assert customer.is_paused is False
        assert customer.id

    def test_opening_balance_defaults_to_balance(self):
        """Without payments the opening balance is the balance."""
        customer = Customer(name="Patil", mobile="9", balance=Decimal("250"))
        assert customer.opening_balance == Decimal("250")

    def test_explicit_opening_balance_kept(self):
        """An explicit opening balance is not overwritten."""
        customer = Customer(
            name="Patil", mobile="9",
            balance=Decimal("100"), opening_balance=Decimal("600"),
        )
        assert customer.opening_balance == Decimal("600")

    def test_strips_whitespace(self):
        """Names and numbers typed with stray spaces are trimmed."""
        customer = Customer(name="  Patil  ", mobile=" 9000000000 ")
        assert customer.name == "Patil"
        assert customer.mobile == "9000000000"

    def test_rejects_nan_balance(self):
        """NaN never gets into a balance."""
        with pytest.raises(ValidationError):
            Customer(name="Patil", mobile="9", balance=Decimal("NaN"))

    def test_rejects_negative_quantity(self):
        """Default quantity cannot be negative."""
        with pytest.raises(ValidationError):
            Customer(name="Patil", mobile="9", default_quantity=Decimal("-1"))

    def test_reads_camel_case_keys(self):
        """Records from the browser app use camelCase keys."""
        customer = Customer.model_validate({
            "id": "abc",
            "name": "Joshi",
            "mobile": "9111111111",
            "address": "Lane 4",
            "milkType": "Buffalo",
            "defaultQuantity": 1.5,
            "prices": {"Cow": 60, "Buffalo": 72},
            "deliveryTime": "Evening",
            "startDate": "2024-01-01",
            "paymentMode": "Online",
            "balance": 0,
            "isPaused": True,
        })
        assert customer.milk_type == MilkType.BUFFALO
        assert customer.default_quantity == Decimal("1.5")
        assert customer.price_of(MilkType.BUFFALO) == Decimal("72")
        assert customer.delivery_time == DeliveryShift.EVENING
        assert customer.payment_mode == PaymentMode.ONLINE
        assert customer.is_paused is True

    def test_price_of_missing_type(self):
        """A milk type with no price returns None."""
        customer = Customer(name="Joshi", mobile="9", prices={MilkType.COW: Decimal("60")})
        assert customer.price_of(MilkType.BUFFALO) is None


class TestDeliveryLogModel:
    """Tests for the DeliveryLog model."""

    def test_id_is_derived(self):
        """The id is '<customerId>-<date>'."""
        log = DeliveryLog(customer_id="c1", date=date(2024, 1, 5))
        assert log.id == "c1-2024-01-05"
        assert log.id == make_delivery_log_id("c1", date(2024, 1, 5))

    def test_matching_id_accepted(self):
        """A log carrying its own derived id is fine."""
        log = DeliveryLog(id="c1-2024-01-05", customer_id="c1", date=date(2024, 1, 5))
        assert log.id == "c1-2024-01-05"

    def test_mismatched_id_rejected(self):
        """A log whose id disagrees with its customer and date is rejected."""
        with pytest.raises(ValidationError):
            DeliveryLog(id="c1-2024-01-06", customer_id="c1", date=date(2024, 1, 5))

    def test_default_status_is_pending(self):
        """New logs start as Pending."""
        log = DeliveryLog(customer_id="c1", date=date(2024, 1, 5))
        assert log.status == DeliveryStatus.PENDING

    def test_rejects_negative_quantity(self):
        """Litres cannot be negative."""
        with pytest.raises(ValidationError):
            DeliveryLog(customer_id="c1", date=date(2024, 1, 5), quantity=Decimal("-2"))


class TestPaymentLogModel:
    """Tests for the PaymentLog model."""

    def test_id_prefix(self):
        """Payment ids start with 'pay-'."""
        pay = PaymentLog(customer_id="c1", date=date(2024, 1, 5), amount=Decimal("100"))
        assert pay.id.startswith("pay-")

    def test_ids_unique(self):
        """Two payments never share an id."""
        a = PaymentLog(customer_id="c1", date=date(2024, 1, 5), amount=Decimal("100"))
        b = PaymentLog(customer_id="c1", date=date(2024, 1, 5), amount=Decimal("100"))
        assert a.id != b.id

    def test_rejects_infinite_amount(self):
        """Infinity is not an amount."""
        with pytest.raises(ValidationError):
            PaymentLog(customer_id="c1", date=date(2024, 1, 5), amount=Decimal("Infinity"))


class TestDateRange:
    """Tests for DateRange."""

    def test_inclusive_bounds(self):
        """Both ends are inside the range."""
        r = DateRange(start=date(2024, 1, 1), end=date(2024, 1, 31))
        assert r.contains(date(2024, 1, 1))
        assert r.contains(date(2024, 1, 31))
        assert not r.contains(date(2024, 2, 1))
        assert not r.contains(date(2023, 12, 31))

    def test_open_ends(self):
        """A missing end is unbounded."""
        assert DateRange(start=date(2024, 1, 1)).contains(date(2030, 1, 1))
        assert DateRange(end=date(2024, 1, 1)).contains(date(2000, 1, 1))

    def test_end_before_start_rejected(self):
        """A backwards range is an error."""
        with pytest.raises(ValidationError):
            DateRange(start=date(2024, 2, 1), end=date(2024, 1, 1))

    def test_in_range_without_range(self):
        """No range means everything is in range."""
        assert in_range(date(1999, 1, 1), None)


class TestStatementRow:
    """Tests for StatementRow."""

    def test_credit_signed_amount(self):
        """Payments print as negative amounts."""
        row = StatementRow(
            date=date(2024, 1, 5), description="Payment (Cash)",
            amount=Decimal("500"), kind=EntryKind.CREDIT,
        )
        assert row.is_credit
        assert row.signed_amount == Decimal("-500")

    def test_debit_signed_amount(self):
        """Deliveries print as positive amounts."""
        row = StatementRow(
            date=date(2024, 1, 5), description="Cow Milk",
            rate=Decimal("60"), quantity=Decimal("2"),
            amount=Decimal("120"), kind=EntryKind.DEBIT,
        )
        assert not row.is_credit
        assert row.signed_amount == Decimal("120")


class TestValidationModels:
    """Tests for validation-related models."""

    def test_validation_issue_creation(self):
        """Test ValidationIssue model creation."""
        issue = ValidationIssue(
            field="mobile",
            issue_type="missing",
            message="Mobile is required",
            severity="error",
        )
        assert issue.field == "mobile"
        assert issue.severity == "error"

    def test_validation_result_counts(self):
        """Errors are counted, warnings are not."""
        result = ValidationResult(
            entity_id="c1",
            is_valid=False,
            issues=[
                ValidationIssue(field="name", issue_type="missing", message="Name is required", severity="error"),
                ValidationIssue(field="prices", issue_type="missing_price", message="No price", severity="warning"),
            ],
        )
        assert result.has_errors
        assert result.error_count == 1
        assert result.error_messages == ["Name is required"]
        assert result.validated_at.tzinfo is not None


class TestAuditModels:
    """Tests for audit models."""

    def test_audit_event_creation(self):
        """Test AuditEvent model creation."""
        event = AuditEvent(
            event_type=AuditEventType.PAYMENT_RECORDED,
            description="Payment recorded",
        )
        assert event.event_id is not None
        assert event.timestamp.tzinfo is not None
        assert event.severity == AuditSeverity.INFO

    def test_payment_recorded_builder(self):
        """Payment events carry the amount as text."""
        event = AuditEventBuilder.payment_recorded(
            payment_id="pay-1", customer_id="c1", amount=Decimal("500"), mode="Cash",
        )
        assert event.event_type == AuditEventType.PAYMENT_RECORDED
        assert event.entity_type == "payment"
        assert event.details["amount"] == "500"
        assert event.is_user_action

    def test_snapshot_restored_is_warning(self):
        """Replacing all data is worth a warning."""
        event = AuditEventBuilder.snapshot_restored(3, 10, 2)
        assert event.severity == AuditSeverity.WARNING
        assert event.details == {"customers": 3, "delivery_logs": 10, "payments": 2}

    def test_to_log_dict(self):
        """Log dicts are JSON-friendly."""
        event = AuditEventBuilder.customer_saved("c1", "Sharma", created=True)
        log_dict = event.to_log_dict()
        assert log_dict["event_type"] == "customer_saved"
        assert isinstance(log_dict["event_id"], str)
        assert isinstance(log_dict["timestamp"], str)


class TestEnums:
    """Tests for the enums' wire values."""

    def test_status_values(self):
        """Statuses are stored capitalised."""
        assert [s.value for s in DeliveryStatus] == ["Pending", "Delivered", "Missed", "Paused"]

    def test_milk_and_mode_values(self):
        """Milk types, payment modes and shifts match the backup format."""
        assert MilkType("Cow") is MilkType.COW
        assert MilkType("Buffalo") is MilkType.BUFFALO
        assert PaymentMode("Online") is PaymentMode.ONLINE
        assert DeliveryShift("Evening") is DeliveryShift.EVENING


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
