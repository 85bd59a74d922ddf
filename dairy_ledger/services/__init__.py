"""Services package."""

from dairy_ledger.services.storage import (
    AuditStorageInterface,
    InMemoryAuditStorage,
    JsonFileSnapshotStorage,
    NotFoundError,
    SnapshotFormatError,
    SnapshotStorageInterface,
    StorageError,
    dump_snapshot,
    parse_snapshot,
)

__all__ = [
    "AuditStorageInterface",
    "InMemoryAuditStorage",
    "JsonFileSnapshotStorage",
    "NotFoundError",
    "SnapshotFormatError",
    "SnapshotStorageInterface",
    "StorageError",
    "dump_snapshot",
    "parse_snapshot",
]
