"""
Readiness gate.

Decides whether a purchase order carries enough identification, packaging
and labeling data to produce compliant inbound shipment documents.
"""

from __future__ import annotations

from typing import Optional

from models.records import ProductIdentifiers, PurchaseOrder, ReadinessRecord
from models.validation import ReadinessResult
from modules.rules import (
    Rule,
    RuleContext,
    all_of,
    evaluate_rules,
    field_positive,
    has_fnsku,
    labels_generated,
    needs_fnsku,
)

NOT_INITIALIZED = "Readiness data not initialized"

# FNSKU reasons first, then the packaging fields in a fixed order.
READINESS_RULES = (
    Rule("FNSKU not set in project identifiers", has_fnsku, applies=needs_fnsku),
    Rule("FNSKU labels not generated", labels_generated, applies=needs_fnsku),
    Rule(
        "FNSKU labels quantity must be > 0",
        field_positive("labels_qty"),
        # Only meaningful once a batch exists; an ungenerated batch is one reason
        applies=all_of(needs_fnsku, labels_generated),
    ),
    Rule("Units per carton not set", field_positive("units_per_carton")),
    Rule("Cartons count not set", field_positive("cartons_count")),
    Rule("Carton length (cm) not set", field_positive("carton_length_cm")),
    Rule("Carton width (cm) not set", field_positive("carton_width_cm")),
    Rule("Carton height (cm) not set", field_positive("carton_height_cm")),
    Rule("Carton weight (kg) not set", field_positive("carton_weight_kg")),
)


def compute_readiness(
    purchase_order: Optional[PurchaseOrder],
    identifiers: Optional[ProductIdentifiers],
    readiness: Optional[ReadinessRecord],
) -> ReadinessResult:
    """
    Evaluate the readiness gate.

    The purchase order is accepted for signature symmetry with the callers;
    none of the current rules read it.

    Returns:
        ReadinessResult with ``ready`` and the ordered ``missing`` reasons
    """
    if readiness is None:
        return ReadinessResult(ready=False, missing=[NOT_INITIALIZED])

    errors, _ = evaluate_rules(READINESS_RULES, RuleContext(readiness, identifiers))
    return ReadinessResult(ready=not errors, missing=errors)
