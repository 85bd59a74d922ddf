"""
Abstract Storage Interface

DESIGN DECISION: We define abstract interfaces for the two things that
ever leave the process: backup snapshots and the audit trail.
This allows us to:
1. Keep backups as plain JSON files today
2. Use in-memory storage for testing
3. Swap either backend later without touching the store or the ledger

The interface is intentionally simple. Live state is the in-memory store;
these backends only see whole snapshots and append-only events.
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional

from dairy_ledger.models.audit import AuditEvent
from dairy_ledger.models.snapshot import Snapshot


class SnapshotStorageInterface(ABC):
    """
    Abstract interface for backup snapshot storage.

    Any backend (local JSON files, cloud drive, etc.)
    must implement these methods.
    """

    @abstractmethod
    def save(self, snapshot: Snapshot) -> Path:
        """
        Persist a snapshot.

        Args:
            snapshot: The snapshot to write

        Returns:
            Location of the written backup

        Raises:
            StorageError: If the write fails
        """
        pass

    @abstractmethod
    def load(self, location: Path) -> Snapshot:
        """
        Read and validate a snapshot.

        Args:
            location: Where the backup lives

        Returns:
            The validated snapshot

        Raises:
            NotFoundError: If no backup exists at location
            SnapshotFormatError: If the backup is malformed
        """
        pass

    @abstractmethod
    def list_backups(self) -> list[Path]:
        """
        List available backups, newest first.
        """
        pass


class AuditStorageInterface(ABC):
    """
    Abstract interface for audit log storage.

    Audit logs are append-only - we never delete or modify them.
    """

    @abstractmethod
    def append_event(self, event: AuditEvent) -> bool:
        """
        Append an audit event to the log.

        Args:
            event: The audit event to log

        Returns:
            True if logged successfully
        """
        pass

    @abstractmethod
    def get_events_by_entity(
        self,
        entity_type: str,
        entity_id: str,
    ) -> list[AuditEvent]:
        """
        Get all events for a specific entity, in chronological order.
        """
        pass

    @abstractmethod
    def get_recent_events(
        self,
        limit: int = 100,
    ) -> list[AuditEvent]:
        """
        Get the most recent audit events (newest first).
        """
        pass

    @abstractmethod
    def get_events_for_customer(self, customer_id: str) -> list[AuditEvent]:
        """
        Everything that touched one customer's account: profile edits,
        deliveries, payments and statements, oldest first.
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class NotFoundError(StorageError):
    """Backup not found in storage."""
    pass


class SnapshotFormatError(StorageError):
    """
    A backup document is not a valid snapshot.

    Raised before any state is touched, so a rejected restore
    leaves the store exactly as it was.
    """

    def __init__(self, message: str, errors: Optional[list[str]] = None):
        super().__init__(message)
        self.errors = errors or []
