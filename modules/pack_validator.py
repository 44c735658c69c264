"""
Pack pre-flight validation.

Stricter than the readiness gate and parameterized by the documents the
caller selected: a field is only required when a selected document prints
it. Carton dimensions and weight block carton labels but are only
recommended for a packing list on its own.
"""

from __future__ import annotations

from typing import Optional

from models.pack import DocumentType, PackSelection
from models.records import ProductIdentifiers, ReadinessRecord
from models.validation import PackValidation
from modules.rules import (
    Rule,
    RuleContext,
    Severity,
    all_of,
    carton_dimensions_set,
    evaluate_rules,
    field_positive,
    has_fnsku,
    has_label_code,
    labels_generated,
    needs_fnsku,
    not_selected,
    selected,
)
from logging_config import get_logger

logger = get_logger(__name__)

READINESS_REQUIRED = "Readiness data not initialized. Please fill the readiness section first."

_packaging = selected(DocumentType.PACKING_LIST, DocumentType.CARTON_LABELS)
_carton_labels = selected(DocumentType.CARTON_LABELS)
_packing_list_only = all_of(
    selected(DocumentType.PACKING_LIST), not_selected(DocumentType.CARTON_LABELS)
)
_labels = selected(DocumentType.IDENTIFICATION_LABELS)

PACK_RULES = (
    Rule(
        "Cartons count is required for Packing List and Carton Labels",
        field_positive("cartons_count"),
        applies=_packaging,
    ),
    Rule(
        "Units per carton is required for Packing List and Carton Labels",
        field_positive("units_per_carton"),
        applies=_packaging,
    ),
    Rule("Carton length is required for Carton Labels", field_positive("carton_length_cm"), applies=_carton_labels),
    Rule("Carton width is required for Carton Labels", field_positive("carton_width_cm"), applies=_carton_labels),
    Rule("Carton height is required for Carton Labels", field_positive("carton_height_cm"), applies=_carton_labels),
    Rule("Carton weight is required for Carton Labels", field_positive("carton_weight_kg"), applies=_carton_labels),
    Rule(
        "Carton dimensions not set (recommended for Packing List)",
        carton_dimensions_set,
        severity=Severity.WARNING,
        applies=_packing_list_only,
    ),
    Rule(
        "Carton weight not set (recommended for Packing List)",
        field_positive("carton_weight_kg"),
        severity=Severity.WARNING,
        applies=_packing_list_only,
    ),
    Rule(
        "FNSKU not set in project identifiers. Please add FNSKU to the project first.",
        has_fnsku,
        applies=all_of(_labels, needs_fnsku),
    ),
    Rule(
        "No FNSKU or GTIN available to encode on identification labels",
        has_label_code,
        # With FNSKU required the rule above already reports the gap
        applies=all_of(_labels, lambda ctx: not ctx.readiness.needs_fnsku),
    ),
    Rule(
        "FNSKU labels not generated yet. They will be generated now.",
        labels_generated,
        severity=Severity.WARNING,
        applies=all_of(_labels, needs_fnsku),
    ),
)


def validate_pack(
    readiness: Optional[ReadinessRecord],
    identifiers: Optional[ProductIdentifiers],
    selection: PackSelection,
) -> PackValidation:
    """
    Check that every selected document can be produced.

    Returns:
        PackValidation with blocking ``errors`` and advisory ``warnings``
    """
    if selection.is_empty:
        return PackValidation(valid=False, errors=["Select at least one document for the pack"])

    needs_readiness = any(
        selection.includes(doc)
        for doc in (
            DocumentType.IDENTIFICATION_LABELS,
            DocumentType.PACKING_LIST,
            DocumentType.CARTON_LABELS,
        )
    )
    if readiness is None:
        if needs_readiness:
            return PackValidation(valid=False, errors=[READINESS_REQUIRED])
        # The order sheet alone is printed from the purchase order only
        return PackValidation(valid=True)

    errors, warnings = evaluate_rules(PACK_RULES, RuleContext(readiness, identifiers, selection))
    if errors:
        logger.debug(f"Pack validation failed: {errors}")
    return PackValidation(valid=not errors, errors=errors, warnings=warnings)
