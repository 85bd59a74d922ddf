"""Audit logging package."""

from dairy_ledger.audit.logger import AuditLogger

__all__ = ["AuditLogger"]
