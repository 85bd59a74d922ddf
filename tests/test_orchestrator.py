"""
Integration tests for the statement and backup flows.
"""

import json

import pytest
from datetime import date
from decimal import Decimal

from dairy_ledger.ledger import net_balance
from dairy_ledger.models import AuditEventType, Customer, DeliveryStatus, PaymentMode
from dairy_ledger.orchestrator import (
    BackupFlow,
    EmptyStatementError,
    StatementFlow,
    create_app_components,
    period_bill_title,
)
from dairy_ledger.services.storage import JsonFileSnapshotStorage, SnapshotFormatError
from dairy_ledger.store import CustomerNotFoundError, DairyStore


@pytest.fixture
def busy_store(store, customer) -> DairyStore:
    """January deliveries with two payments."""
    store.upsert_customer(customer)
    for d in range(1, 32):
        store.set_delivery_status("c1", date(2024, 1, d), DeliveryStatus.DELIVERED)
    store.set_delivery_status("c1", date(2024, 1, 15), DeliveryStatus.MISSED)
    store.apply_payment("c1", "1500", PaymentMode.CASH, date(2024, 1, 10))
    store.apply_payment("c1", "500", PaymentMode.ONLINE, date(2024, 2, 2))
    return store


class TestStatementFlow:
    """Tests for StatementFlow."""

    def test_account_statement_matches_net_balance(self, busy_store, audit_logger):
        """The all-time statement ends where the dashboard does."""
        flow = StatementFlow(busy_store, audit_logger)
        statement, pdf, filename = flow.account_statement("c1", today=date(2024, 2, 5))

        c = busy_store.get_customer("c1")
        assert statement.title == "Statement"
        assert statement.opening_balance == Decimal("1000")
        assert statement.net_receivable == net_balance(c, busy_store.delivery_logs, busy_store.payment_logs)
        assert statement.net_receivable == Decimal("1000") + 30 * Decimal("120") - Decimal("2000")
        assert pdf.startswith(b"%PDF")
        assert filename == "Statement_Sharma_2024-02-05.pdf"

    def test_period_bill(self, busy_store):
        """A second-half-of-January bill opens at the balance on the 16th."""
        flow = StatementFlow(busy_store)
        statement, pdf, _ = flow.period_bill("c1", date(2024, 1, 16), date(2024, 1, 31))

        # 1000 carried + 14 delivered days before the 16th - 1500 paid on the 10th
        assert statement.opening_balance == Decimal("1000") + 14 * Decimal("120") - Decimal("1500")
        assert statement.title == "Bill: 16 Jan - 31 Jan"
        assert len(statement.rows) == 16
        assert statement.total_credit == Decimal("0")
        assert pdf.startswith(b"%PDF")

    def test_period_bill_empty_range(self, busy_store):
        """Nothing in the range means no bill."""
        flow = StatementFlow(busy_store)
        with pytest.raises(EmptyStatementError, match="No transactions found"):
            flow.period_bill("c1", date(2023, 6, 1), date(2023, 6, 30))

    def test_period_bill_payment_only(self, busy_store):
        """A range with only a payment still produces a bill."""
        flow = StatementFlow(busy_store)
        statement, _, _ = flow.period_bill("c1", date(2024, 2, 1), date(2024, 2, 29))
        assert [row.description for row in statement.rows] == ["Payment (Online)"]

    def test_unknown_customer(self, busy_store):
        with pytest.raises(CustomerNotFoundError):
            StatementFlow(busy_store).account_statement("nobody")

    def test_generation_audited(self, busy_store, audit_logger, audit_storage):
        """Each statement leaves a statement_generated event."""
        StatementFlow(busy_store, audit_logger).account_statement("c1")
        assert audit_storage.get_recent_events(1)[0].event_type == AuditEventType.STATEMENT_GENERATED

    def test_period_bill_title(self):
        assert period_bill_title(date(2024, 1, 1), date(2024, 1, 31)) == "Bill: 1 Jan - 31 Jan"


class TestBackupFlow:
    """Tests for BackupFlow."""

    def test_export_json(self, busy_store, tmp_path):
        """The download is camelCase JSON with a dated filename."""
        flow = BackupFlow(busy_store, JsonFileSnapshotStorage(backup_dir=tmp_path))
        text, filename = flow.export_json()
        data = json.loads(text)
        assert len(data["customers"]) == 1
        assert len(data["deliveryLogs"]) == 31
        assert len(data["paymentLogs"]) == 2
        assert filename.startswith("milk_daily_backup_")
        assert filename.endswith(".json")

    def test_save_then_restore_file(self, busy_store, tmp_path):
        """A saved backup restores into a fresh store unchanged."""
        flow = BackupFlow(busy_store, JsonFileSnapshotStorage(backup_dir=tmp_path))
        path = flow.save_backup()
        assert flow.list_backups() == [path]

        fresh = DairyStore()
        BackupFlow(fresh, JsonFileSnapshotStorage(backup_dir=tmp_path)).restore_file(path)

        assert fresh.customers == busy_store.customers
        assert fresh.delivery_logs == busy_store.delivery_logs
        assert fresh.payment_logs == busy_store.payment_logs

    def test_restore_replaces(self, busy_store, tmp_path):
        """Restoring a backup replaces everything in the store."""
        flow = BackupFlow(busy_store, JsonFileSnapshotStorage(backup_dir=tmp_path))
        text, _ = flow.export_json()

        other = DairyStore()
        other.upsert_customer(Customer(id="x", name="Someone", mobile="9"))
        BackupFlow(other, JsonFileSnapshotStorage(backup_dir=tmp_path)).restore(text)

        assert [c.id for c in other.customers] == ["c1"]

    def test_bad_restore_changes_nothing(self, busy_store, audit_logger, audit_storage, tmp_path):
        """A malformed backup is rejected, audited, and leaves the store intact."""
        flow = BackupFlow(busy_store, JsonFileSnapshotStorage(backup_dir=tmp_path), audit_logger)
        before = (busy_store.customers, busy_store.delivery_logs, busy_store.payment_logs)

        with pytest.raises(SnapshotFormatError):
            flow.restore('{"customers": []}')

        assert (busy_store.customers, busy_store.delivery_logs, busy_store.payment_logs) == before
        assert audit_storage.get_recent_events(1)[0].event_type == AuditEventType.RESTORE_REJECTED


class TestCreateAppComponents:
    """Tests for the component factory."""

    def test_wired_together(self, tmp_path, customer):
        """The flows share the one store and audit trail."""
        store, statement_flow, backup_flow, audit_logger = create_app_components(backup_dir=tmp_path)
        store.upsert_customer(customer)

        statement, _, _ = statement_flow.account_statement("c1")
        assert statement.customer_name == "Sharma"
        assert backup_flow.save_backup().parent == tmp_path
        assert len(audit_logger.storage) >= 3

    def test_customer_history_recorded(self, tmp_path, customer):
        """Saves and payments land in the customer's history from the first event."""
        store, _, _, audit_logger = create_app_components(backup_dir=tmp_path)
        store.upsert_customer(customer)
        store.apply_payment("c1", "100", PaymentMode.CASH, date(2024, 1, 5))

        history = audit_logger.storage.get_events_for_customer("c1")
        assert [e.event_type for e in history] == [
            AuditEventType.CUSTOMER_SAVED,
            AuditEventType.PAYMENT_RECORDED,
        ]


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
