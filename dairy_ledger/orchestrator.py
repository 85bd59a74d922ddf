"""
Main Orchestrator for Dairy Ledger

This module ties together the store, the ledger, the statement
formatter and the backup storage, and defines the end-to-end flows for:
1. Statements (customer → rows and totals → PDF bytes)
2. Backups (store → snapshot → JSON file, and back)

DESIGN DECISION: The orchestrator enforces the boundaries:
- A rejected backup never touches the store
- A period bill with nothing in it is refused, not printed blank
- Every step is audited

The UI only ever talks to these flows and to the store.
"""

import datetime as dt
from pathlib import Path
from typing import Optional, Union

from dairy_ledger.audit import AuditLogger
from dairy_ledger.config import get_settings
from dairy_ledger.ledger import opening_balance_for_range
from dairy_ledger.ledger.engine import customer_payments, delivered_logs
from dairy_ledger.models.entities import DateRange
from dairy_ledger.models.snapshot import Snapshot
from dairy_ledger.models.statement import Statement
from dairy_ledger.services.storage import (
    InMemoryAuditStorage,
    JsonFileSnapshotStorage,
    SnapshotFormatError,
    SnapshotStorageInterface,
    dump_snapshot,
    parse_snapshot,
)
from dairy_ledger.statements import build_statement, render_statement_pdf, statement_filename
from dairy_ledger.store import DairyStore


ACCOUNT_STATEMENT_TITLE = "Statement"


class EmptyStatementError(Exception):
    """A period bill was requested for a range with no transactions."""

    def __init__(self, customer_id: str, date_range: DateRange):
        super().__init__(
            "No transactions found for this customer in the selected date range."
        )
        self.customer_id = customer_id
        self.date_range = date_range


def period_bill_title(start: dt.date, end: dt.date) -> str:
    """'Bill: 1 Jan - 31 Jan'"""
    return f"Bill: {start.day} {start.strftime('%b')} - {end.day} {end.strftime('%b')}"


class StatementFlow:
    """
    Orchestrates statement generation.

    Flow:
    1. Resolve the customer from the store
    2. Work out the opening balance for the window
    3. Build rows and totals
    4. Render the PDF
    5. Audit

    Returns (statement, pdf_bytes, filename) so the UI can offer a download.
    """

    def __init__(
        self,
        store: DairyStore,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._store = store
        self._audit_logger = audit_logger

    def account_statement(
        self,
        customer_id: str,
        today: Optional[dt.date] = None,
    ) -> tuple[Statement, bytes, str]:
        """
        All-time statement.

        Opens at the customer's opening balance, so net receivable
        matches the dashboard's net balance for the same customer.
        """
        customer = self._store.get_customer(customer_id)
        statement = build_statement(
            customer,
            self._store.delivery_logs,
            self._store.payment_logs,
            title=ACCOUNT_STATEMENT_TITLE,
            opening_balance=customer.opening_balance,
            generated_on=today,
        )
        return self._finish(statement)

    def period_bill(
        self,
        customer_id: str,
        start: dt.date,
        end: dt.date,
        today: Optional[dt.date] = None,
    ) -> tuple[Statement, bytes, str]:
        """
        Bill for an inclusive date range.

        Raises:
            CustomerNotFoundError: no such customer.
            EmptyStatementError: no deliveries and no payments in the range.
        """
        customer = self._store.get_customer(customer_id)
        date_range = DateRange(start=start, end=end)
        logs = self._store.delivery_logs
        payments = self._store.payment_logs

        if not (
            delivered_logs(customer_id, logs, date_range)
            or customer_payments(customer_id, payments, date_range)
        ):
            raise EmptyStatementError(customer_id, date_range)

        statement = build_statement(
            customer,
            logs,
            payments,
            title=period_bill_title(start, end),
            opening_balance=opening_balance_for_range(customer, logs, payments, start),
            date_range=date_range,
            generated_on=today,
        )
        return self._finish(statement)

    def _finish(self, statement: Statement) -> tuple[Statement, bytes, str]:
        pdf = render_statement_pdf(statement)
        if self._audit_logger is not None:
            self._audit_logger.log_statement_generated(
                customer_id=statement.customer_id,
                title=statement.title,
                row_count=len(statement.rows),
                net_receivable=statement.net_receivable,
            )
        return statement, pdf, statement_filename(statement)


class BackupFlow:
    """
    Orchestrates backup and restore.

    CRITICAL: A backup is parsed and validated in full BEFORE the store
    is touched. A bad file leaves every collection as it was.
    """

    def __init__(
        self,
        store: DairyStore,
        storage: Optional[SnapshotStorageInterface] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._store = store
        self._storage = storage or JsonFileSnapshotStorage()
        self._audit_logger = audit_logger

    def export_json(self) -> tuple[str, str]:
        """
        Serialize the store for download.

        Returns:
            (json_text, filename)
        """
        snapshot = self._store.export_snapshot()
        prefix = get_settings().storage.filename_prefix
        return dump_snapshot(snapshot), f"{prefix}{snapshot.backup_date.date().isoformat()}.json"

    def save_backup(self) -> Path:
        """Write today's backup file to the configured backup directory."""
        return self._storage.save(self._store.export_snapshot())

    def list_backups(self) -> list[Path]:
        return self._storage.list_backups()

    def restore(self, source: Union[str, bytes, dict, Snapshot]) -> Snapshot:
        """
        Replace all data with a backup.

        Raises:
            SnapshotFormatError: the backup is malformed; nothing changed.
        """
        try:
            snapshot = source if isinstance(source, Snapshot) else parse_snapshot(source)
        except SnapshotFormatError as e:
            if self._audit_logger is not None:
                self._audit_logger.log_restore_rejected(str(e))
            raise

        self._store.restore_snapshot(snapshot)
        return snapshot

    def restore_file(self, location: Path) -> Snapshot:
        """Restore from a backup previously written by save_backup."""
        try:
            snapshot = self._storage.load(location)
        except SnapshotFormatError as e:
            if self._audit_logger is not None:
                self._audit_logger.log_restore_rejected(str(e))
            raise
        return self.restore(snapshot)


def create_app_components(
    backup_dir: Optional[Union[str, Path]] = None,
) -> tuple[DairyStore, StatementFlow, BackupFlow, AuditLogger]:
    """
    Factory function to create all application components.

    Args:
        backup_dir: Where backup files go. Defaults to BACKUP_BACKUP_DIR.

    Returns:
        (store, statement_flow, backup_flow, audit_logger)
    """
    audit_logger = AuditLogger(InMemoryAuditStorage())
    store = DairyStore(audit_logger=audit_logger)

    statement_flow = StatementFlow(store, audit_logger=audit_logger)
    backup_flow = BackupFlow(
        store,
        storage=JsonFileSnapshotStorage(backup_dir=backup_dir),
        audit_logger=audit_logger,
    )

    return store, statement_flow, backup_flow, audit_logger
