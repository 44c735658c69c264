"""
Readiness record lifecycle.

A purchase order gets its readiness record the first time readiness is
evaluated, with ``needs_fnsku`` on and every packaging fact unset. Later
updates change individual fields.
"""

from __future__ import annotations

from dataclasses import fields
from typing import Any, Dict, Optional

from models.records import ProductIdentifiers, PurchaseOrder, ReadinessRecord
from models.validation import ReadinessResult
from modules.readiness import compute_readiness
from services.record_cache import RecordCache
from services.stores import ReadinessStore
from logging_config import get_logger

logger = get_logger(__name__)

# Pack version and dispatch timestamps belong to the version tracker
TRACKER_FIELDS = frozenset({
    "manufacturer_pack_generated_at",
    "manufacturer_pack_sent_at",
    "manufacturer_pack_version",
})

EDITABLE_FIELDS = frozenset(f.name for f in fields(ReadinessRecord)) - TRACKER_FIELDS


class ReadinessService:
    """Loads, initializes and updates readiness records through a store."""

    def __init__(self, store: ReadinessStore, cache: Optional[RecordCache[ReadinessRecord]] = None):
        self.store = store
        self.cache = cache

    def get(self, po_id: str) -> Optional[ReadinessRecord]:
        """Current record, or None when the order has none yet."""
        if self.cache is not None:
            cached = self.cache.get(po_id)
            if cached is not None:
                return cached
        record = self.store.get(po_id)
        if record is not None and self.cache is not None:
            self.cache.put(po_id, record)
        return record

    def load_or_initialize(self, po_id: str, project_id: Optional[str] = None) -> ReadinessRecord:
        record = self.get(po_id)
        if record is not None:
            return record
        logger.info(f"Initializing readiness record for purchase order {po_id}")
        record = self.store.upsert(po_id, {"needs_fnsku": True}, project_id=project_id)
        if self.cache is not None:
            self.cache.put(po_id, record)
        return record

    def update(self, po_id: str, values: Dict[str, Any], project_id: Optional[str] = None) -> ReadinessRecord:
        """
        Change editable fields of the record, creating it if needed.

        Raises:
            ValueError: if ``values`` names an unknown or tracker-owned field
        """
        unknown = sorted(set(values) - EDITABLE_FIELDS)
        if unknown:
            raise ValueError(f"Cannot update readiness fields: {', '.join(unknown)}")
        changes = {name: ReadinessRecord.coerce(name, value) for name, value in values.items()}
        record = self.store.upsert(po_id, changes, project_id=project_id)
        self.invalidate(po_id)
        return record

    def invalidate(self, po_id: str) -> None:
        if self.cache is not None:
            self.cache.invalidate(po_id)

    def evaluate(
        self,
        purchase_order: PurchaseOrder,
        identifiers: Optional[ProductIdentifiers],
    ) -> ReadinessResult:
        """Readiness gate for a stored order, initializing its record on first use."""
        record = self.load_or_initialize(purchase_order.id, purchase_order.project_id or None)
        result = compute_readiness(purchase_order, identifiers, record)
        logger.info(
            f"Readiness for {purchase_order.display_number}: "
            f"{'ready' if result.ready else f'{len(result.missing)} missing'}"
        )
        return result
