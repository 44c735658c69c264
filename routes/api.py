"""
API routes: health and the readiness/validation gates.

Handles:
- /health - Health check endpoint
- /api/readiness - Readiness gate for a purchase order
- /api/packs/validate - Pre-flight check of a pack selection
"""

from flask import Blueprint, current_app

from models.records import ProductIdentifiers, PurchaseOrder
from modules.readiness import compute_readiness
from routes.payload import json_body, parse_inputs, parse_selection
from logging_config import get_logger


# Module logger
logger = get_logger(__name__)

api_bp = Blueprint("api", __name__)


@api_bp.route("/health", methods=["GET"])
def health():
    """Health check endpoint with service status."""
    health_status = {
        "status": "ok",
        "environment": current_app.config.get("ENVIRONMENT", "unknown"),
        "checks": {},
    }

    for key, name in (
        ("READINESS_SERVICE", "readiness_service"),
        ("PACK_SERVICE", "pack_service"),
        ("VERSION_TRACKER", "version_tracker"),
    ):
        if current_app.config.get(key) is not None:
            health_status["checks"][name] = "ok"
        else:
            health_status["checks"][name] = "not_available"
            health_status["status"] = "degraded"

    status_code = 200 if health_status["status"] == "ok" else 503
    return health_status, status_code


@api_bp.route("/api/readiness", methods=["POST"])
def readiness():
    """
    Evaluate the readiness gate.

    With a ``readiness`` object in the body the gate is computed on it
    directly. Otherwise the stored record of ``purchase_order_id`` is used,
    and created with defaults on first access.
    """
    data = json_body()

    if data.get("readiness") is not None:
        inputs = parse_inputs(data)
        result = compute_readiness(inputs.purchase_order, inputs.identifiers, inputs.readiness)
        return result.to_dict()

    po_data = data.get("purchase_order") or data.get("purchaseOrder") or {}
    po_id = data.get("purchase_order_id") or data.get("purchaseOrderId") or po_data.get("id")
    if not po_id:
        return {"error": "purchase_order_id is required"}, 400

    purchase_order = PurchaseOrder.from_dict({**po_data, "id": po_id})
    identifiers = ProductIdentifiers.from_dict(data.get("identifiers"))
    result = current_app.config["READINESS_SERVICE"].evaluate(purchase_order, identifiers)
    return result.to_dict()


@api_bp.route("/api/packs/validate", methods=["POST"])
def validate():
    """Report blocking errors and warnings for a pack selection."""
    data = json_body()
    inputs = parse_inputs(data)
    validation = current_app.config["PACK_SERVICE"].validate(inputs, parse_selection(data))
    return validation.to_dict()
