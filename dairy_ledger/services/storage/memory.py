"""
In-memory audit storage.

The app keeps no database, so the audit trail lives for as long as
the process does, next to the store it describes.
"""

from dairy_ledger.models.audit import AuditEvent
from dairy_ledger.services.storage.interface import AuditStorageInterface


class InMemoryAuditStorage(AuditStorageInterface):
    """Append-only list of audit events."""

    def __init__(self):
        self._events: list[AuditEvent] = []

    def append_event(self, event: AuditEvent) -> bool:
        self._events.append(event)
        return True

    def get_events_by_entity(
        self,
        entity_type: str,
        entity_id: str,
    ) -> list[AuditEvent]:
        return [
            event for event in self._events
            if event.entity_type == entity_type and event.entity_id == entity_id
        ]

    def get_recent_events(self, limit: int = 100) -> list[AuditEvent]:
        return list(reversed(self._events))[:limit]

    def get_events_for_customer(self, customer_id: str) -> list[AuditEvent]:
        return [event for event in self._events if event.customer_id == customer_id]

    def __len__(self) -> int:
        return len(self._events)
