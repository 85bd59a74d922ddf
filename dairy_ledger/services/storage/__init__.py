"""
Storage Services Package

Provides abstract interfaces and concrete implementations for the data
that leaves the process: backup snapshots and the audit trail.
"""

from dairy_ledger.services.storage.interface import (
    AuditStorageInterface,
    NotFoundError,
    SnapshotFormatError,
    SnapshotStorageInterface,
    StorageError,
)
from dairy_ledger.services.storage.json_file import (
    JsonFileSnapshotStorage,
    dump_snapshot,
    parse_snapshot,
)
from dairy_ledger.services.storage.memory import InMemoryAuditStorage

__all__ = [
    # Interfaces
    "AuditStorageInterface",
    "SnapshotStorageInterface",
    # Exceptions
    "NotFoundError",
    "SnapshotFormatError",
    "StorageError",
    # Implementations
    "InMemoryAuditStorage",
    "JsonFileSnapshotStorage",
    "dump_snapshot",
    "parse_snapshot",
]
