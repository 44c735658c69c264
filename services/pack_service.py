"""
Manufacturer pack workflow.

Validate -> assemble -> record the version -> hand the archive to the
optional uploader and audit sink. Only validation and rendering problems
reach the caller; once an archive exists it is always returned, and
bookkeeping failures are logged and reported on the outcome.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional, Protocol

from core.exceptions import PackValidationError
from models.pack import LabelConfiguration, PackResult, PackSelection
from models.records import PackInputs
from models.validation import PackValidation
from modules.pack_validator import validate_pack
from services.pack_assembler import PackAssembler
from services.version_tracker import VersionTracker, next_version
from logging_config import get_order_logger


class PackUploader(Protocol):
    """Stores a finished archive somewhere (cloud folder, file share)."""

    def upload(self, filename: str, content: bytes) -> None:
        ...


class AuditSink(Protocol):
    def record(self, event: str, payload: Dict[str, Any]) -> None:
        ...


@dataclass(frozen=True)
class PackOutcome:
    """Result of one pack request."""

    result: PackResult
    validation: PackValidation
    persisted: bool
    uploaded: Optional[bool] = None
    """None when no uploader is configured."""

    def to_dict(self) -> Dict[str, Any]:
        data = self.result.to_dict()
        data.update(
            warnings=list(self.validation.warnings),
            persisted=self.persisted,
            uploaded=self.uploaded,
        )
        return data


class PackService:
    def __init__(
        self,
        assembler: PackAssembler,
        tracker: VersionTracker,
        uploader: Optional[PackUploader] = None,
        audit_sink: Optional[AuditSink] = None,
    ):
        self.assembler = assembler
        self.tracker = tracker
        self.uploader = uploader
        self.audit_sink = audit_sink

    def validate(self, inputs: PackInputs, selection: PackSelection) -> PackValidation:
        return validate_pack(inputs.readiness, inputs.identifiers, selection)

    def generate(
        self,
        inputs: PackInputs,
        selection: PackSelection,
        label_config: Optional[LabelConfiguration] = None,
        version: Optional[int] = None,
        po_id: Optional[str] = None,
    ) -> PackOutcome:
        """
        Produce a pack and record it.

        Args:
            po_id: Key of the readiness record (defaults to the order id). When
                neither is set the pack is generated but not recorded.

        Raises:
            PackValidationError: blocking validation errors
            DocumentGenerationError: a renderer failed
        """
        po = inputs.purchase_order
        po_id = po_id or po.id
        order_logger = get_order_logger(po.display_number)

        validation = self.validate(inputs, selection)
        if not validation.valid:
            order_logger.warning(f"Pack blocked: {'; '.join(validation.errors)}")
            raise PackValidationError(validation.errors, validation.warnings)
        for warning in validation.warnings:
            order_logger.warning(f"Pack warning: {warning}")

        if version is None:
            version = self._next_version(inputs, po_id)
        generated_at = datetime.now()
        result = self.assembler.assemble(inputs, selection, label_config, version, generated_at)

        if po_id:
            persisted = self.tracker.record_generated(po_id, result.version, generated_at)
            if not persisted:
                order_logger.error(f"Pack v{result.version} was generated but its version was not saved")
        else:
            # Without an order id there is no record to version against
            order_logger.warning(f"Order has no id; pack v{result.version} was not recorded")
            persisted = False

        uploaded = None
        if self.uploader is not None:
            try:
                self.uploader.upload(result.archive_name, result.archive)
                uploaded = True
            except Exception as e:
                order_logger.error(f"Upload of {result.archive_name} failed: {e}")
                uploaded = False

        if self.audit_sink is not None:
            try:
                self.audit_sink.record(
                    "manufacturer_pack_generated",
                    {
                        "po_id": po_id,
                        "version": result.version,
                        "documents": selection.to_dict(),
                        "entries": list(result.entries),
                    },
                )
            except Exception as e:
                order_logger.warning(f"Audit record for pack v{result.version} failed: {e}")

        return PackOutcome(result=result, validation=validation, persisted=persisted, uploaded=uploaded)

    def _next_version(self, inputs: PackInputs, po_id: str) -> int:
        # The submitted record may predate the last generation
        stored = self.tracker.store.get(po_id) if po_id else None
        versions = [
            record.manufacturer_pack_version
            for record in (inputs.readiness, stored)
            if record is not None and record.manufacturer_pack_version
        ]
        return next_version(max(versions, default=None))
