"""
Readiness record persistence.

The relational store belongs to the calling workflow; the pack services only
need ``get`` and ``upsert`` against it. ``InMemoryReadinessStore`` implements
that contract for the HTTP app and the tests.
"""

from __future__ import annotations

import threading
from typing import Any, Dict, Optional, Protocol

from models.records import ReadinessRecord
from logging_config import get_logger

logger = get_logger(__name__)


class ReadinessStore(Protocol):
    """Persistence collaborator for readiness records, keyed by purchase order id."""

    def get(self, po_id: str) -> Optional[ReadinessRecord]:
        ...

    def upsert(self, po_id: str, changes: Dict[str, Any], project_id: Optional[str] = None) -> ReadinessRecord:
        ...


class InMemoryReadinessStore:
    """
    Thread-safe dictionary store.

    Flask may serve requests from several threads; every operation holds
    the lock for its whole read-modify-write.
    """

    def __init__(self):
        self._records: Dict[str, ReadinessRecord] = {}
        self._projects: Dict[str, str] = {}
        self._lock = threading.Lock()

    def get(self, po_id: str) -> Optional[ReadinessRecord]:
        with self._lock:
            return self._records.get(po_id)

    def upsert(self, po_id: str, changes: Dict[str, Any], project_id: Optional[str] = None) -> ReadinessRecord:
        """
        Create or update the record of ``po_id`` with already typed values.

        Returns:
            The stored record after the change
        """
        with self._lock:
            current = self._records.get(po_id)
            record = (current or ReadinessRecord()).with_changes(**changes)
            self._records[po_id] = record
            if project_id:
                self._projects[po_id] = project_id
            action = "Updated" if current else "Created"
            logger.debug(f"{action} readiness record for {po_id}: {sorted(changes)}")
            return record

    def project_id(self, po_id: str) -> Optional[str]:
        with self._lock:
            return self._projects.get(po_id)

    def clear(self) -> int:
        """
        Remove all records.

        Returns:
            Number of records removed
        """
        with self._lock:
            count = len(self._records)
            self._records.clear()
            self._projects.clear()
            logger.info(f"Cleared {count} readiness records from store")
            return count
