"""
JSON File Snapshot Storage

DESIGN DECISION: Backups are plain, indented JSON files because:
1. The provider can open and read them
2. They can be shared over WhatsApp or email like any document
3. Backups from the original app restore without conversion

A backup is validated completely before it is handed back. Nothing
half-parsed ever reaches the store.
"""

import json
from datetime import date
from pathlib import Path
from typing import Optional, Union

import structlog
from pydantic import ValidationError

from dairy_ledger.config import get_settings
from dairy_ledger.models.snapshot import (
    CUSTOMER_KEYS,
    DELIVERY_LOG_KEYS,
    PAYMENT_LOG_KEYS,
    Snapshot,
)
from dairy_ledger.services.storage.interface import (
    NotFoundError,
    SnapshotFormatError,
    SnapshotStorageInterface,
    StorageError,
)


logger = structlog.get_logger(__name__)


def parse_snapshot(source: Union[str, bytes, dict]) -> Snapshot:
    """
    Validate a backup document and build a Snapshot from it.

    Accepts raw JSON text or an already-decoded dict.

    Raises:
        SnapshotFormatError: If the document is not JSON, lacks the
            customer or delivery-log arrays, or any row is invalid.
    """
    if isinstance(source, (str, bytes)):
        try:
            data = json.loads(source)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise SnapshotFormatError(f"Error reading backup file: {e}") from e
    else:
        data = source

    if not isinstance(data, dict):
        raise SnapshotFormatError("Invalid backup file. Expected a JSON object.")

    has_customers = any(isinstance(data.get(key), list) for key in CUSTOMER_KEYS)
    has_logs = any(isinstance(data.get(key), list) for key in DELIVERY_LOG_KEYS)
    if not (has_customers and has_logs):
        raise SnapshotFormatError("Invalid backup file. Missing customers or logs.")

    # A null payments array means "no payments yet"
    data = {
        key: value for key, value in data.items()
        if not (key in PAYMENT_LOG_KEYS and value is None)
    }

    try:
        return Snapshot.model_validate(data)
    except ValidationError as e:
        errors = [
            f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}"
            for err in e.errors()
        ]
        raise SnapshotFormatError(
            f"Invalid backup file: {e.error_count()} invalid entries",
            errors=errors,
        ) from e


def dump_snapshot(snapshot: Snapshot) -> str:
    """Serialize a snapshot to indented JSON with the canonical key names."""
    return snapshot.model_dump_json(by_alias=True, indent=2)


class JsonFileSnapshotStorage(SnapshotStorageInterface):
    """
    Stores one JSON file per backup day in a local directory.

    Saving twice on the same day overwrites that day's file.
    """

    def __init__(
        self,
        backup_dir: Optional[Union[str, Path]] = None,
        filename_prefix: Optional[str] = None,
    ):
        settings = get_settings().storage
        self._backup_dir = Path(backup_dir or settings.backup_dir)
        self._prefix = filename_prefix or settings.filename_prefix

    @property
    def backup_dir(self) -> Path:
        return self._backup_dir

    def filename_for(self, day: date) -> str:
        return f"{self._prefix}{day.isoformat()}.json"

    def save(self, snapshot: Snapshot) -> Path:
        day = snapshot.backup_date.date() if snapshot.backup_date else date.today()
        path = self._backup_dir / self.filename_for(day)
        try:
            self._backup_dir.mkdir(parents=True, exist_ok=True)
            path.write_text(dump_snapshot(snapshot), encoding="utf-8")
        except OSError as e:
            raise StorageError(f"Could not write backup to {path}: {e}") from e

        logger.info(
            "snapshot_saved",
            path=str(path),
            customers=len(snapshot.customers),
            delivery_logs=len(snapshot.delivery_logs),
            payments=len(snapshot.payment_logs),
        )
        return path

    def load(self, location: Path) -> Snapshot:
        path = Path(location)
        if not path.is_file():
            raise NotFoundError(f"No backup found at {path}")
        try:
            text = path.read_text(encoding="utf-8")
        except OSError as e:
            raise StorageError(f"Could not read backup {path}: {e}") from e
        return parse_snapshot(text)

    def list_backups(self) -> list[Path]:
        if not self._backup_dir.is_dir():
            return []
        return sorted(
            self._backup_dir.glob(f"{self._prefix}*.json"),
            key=lambda p: p.name,
            reverse=True,
        )
