"""
Pack version and dispatch state.

Versions are plain integers: the first pack of an order is version 1 and
every regeneration takes ``previous + 1`` unless the caller pins a version.
The version is embedded in every file name of the pack from version 2 on.

State lifecycle:
    NOT_GENERATED -> GENERATED -> SENT
    regenerating a GENERATED or SENT pack returns it to GENERATED
"""

from __future__ import annotations

import re
from datetime import datetime
from typing import Dict, Optional

from core.exceptions import InvalidStateTransitionError, RecordNotFoundError
from models.pack import DocumentType, PackState
from models.records import ReadinessRecord
from services.stores import ReadinessStore
from logging_config import get_logger

logger = get_logger(__name__)

ARCHIVE_PREFIX = "ManufacturerPack"

_UNSAFE = re.compile(r"[^A-Za-z0-9._-]")


def next_version(previous: Optional[int], explicit: Optional[int] = None) -> int:
    """The version of the next pack."""
    if explicit is not None:
        if explicit < 1:
            raise ValueError(f"Pack version must be at least 1, got {explicit}")
        return explicit
    return (previous or 0) + 1


def version_suffix(version: int) -> str:
    """Empty at version 1 so first-time file names stay unchanged."""
    return f"_v{version}" if version > 1 else ""


def safe_name(po_number: str) -> str:
    """File-system safe form of an order number."""
    return _UNSAFE.sub("_", po_number) or "PO"


def document_filename(document_type: DocumentType, po_number: str, version: int) -> str:
    return f"{document_type.filename_prefix}_{safe_name(po_number)}{version_suffix(version)}.pdf"


def archive_filename(po_number: str, version: int) -> str:
    return f"{ARCHIVE_PREFIX}_{safe_name(po_number)}{version_suffix(version)}.zip"


def pack_filenames(po_number: str, version: int) -> Dict[str, str]:
    """Every file name of a pack, keyed by document type value plus ``archive``."""
    names = {doc.value: document_filename(doc, po_number, version) for doc in DocumentType}
    names["archive"] = archive_filename(po_number, version)
    return names


def pack_state(readiness: Optional[ReadinessRecord]) -> PackState:
    if readiness is None or readiness.manufacturer_pack_generated_at is None:
        return PackState.NOT_GENERATED
    if readiness.manufacturer_pack_sent_at is not None:
        return PackState.SENT
    return PackState.GENERATED


class VersionTracker:
    """
    Reads and writes pack metadata on the readiness record.

    Holds no state of its own; everything lives in the store.
    """

    def __init__(self, store: ReadinessStore):
        self.store = store

    def state(self, po_id: str) -> PackState:
        return pack_state(self.store.get(po_id))

    def next_version_for(self, po_id: str, explicit: Optional[int] = None) -> int:
        record = self.store.get(po_id)
        return next_version(record.manufacturer_pack_version if record else None, explicit)

    def record_generated(self, po_id: str, version: int, generated_at: Optional[datetime] = None) -> bool:
        """
        Persist ``{version, generated_at}`` and clear any previous sent stamp.

        Returns:
            True if stored, False if the store failed (the failure is logged)
        """
        changes = {
            "manufacturer_pack_version": version,
            "manufacturer_pack_generated_at": generated_at or datetime.now(),
            "manufacturer_pack_sent_at": None,
        }
        try:
            self.store.upsert(po_id, changes)
        except Exception as e:
            logger.error(f"Failed to record pack version {version} for {po_id}: {e}")
            return False
        logger.info(f"Recorded manufacturer pack v{version} for {po_id}")
        return True

    def mark_sent(self, po_id: str, sent_at: Optional[datetime] = None) -> ReadinessRecord:
        """
        Stamp the pack as dispatched.

        Raises:
            RecordNotFoundError: the order has no readiness record
            InvalidStateTransitionError: the pack is not in GENERATED state
        """
        record = self.store.get(po_id)
        if record is None:
            raise RecordNotFoundError(po_id)
        current = pack_state(record)
        if current is not PackState.GENERATED:
            raise InvalidStateTransitionError(current.value, PackState.SENT.value, po_id)
        updated = self.store.upsert(po_id, {"manufacturer_pack_sent_at": sent_at or datetime.now()})
        logger.info(f"Manufacturer pack v{record.manufacturer_pack_version} for {po_id} marked as sent")
        return updated

    def record_labels_generated(
        self,
        po_id: str,
        quantity: int,
        template: str,
        generated_at: Optional[datetime] = None,
    ) -> bool:
        """Persist the label run facts the readiness gate checks. Failures are logged."""
        changes = {
            "labels_generated_at": generated_at or datetime.now(),
            "labels_qty": quantity,
            "labels_template": template,
        }
        try:
            self.store.upsert(po_id, changes)
        except Exception as e:
            logger.error(f"Failed to record label generation for {po_id}: {e}")
            return False
        return True
