"""
Manufacturer pack routes.

Handles:
- /api/packs - Generate the pack and download it as a ZIP
- /api/packs/<po_id>/sent - Mark the current pack as sent
"""

import io

from flask import Blueprint, current_app, send_file
from werkzeug.exceptions import BadRequest

from routes.payload import json_body, parse_inputs, parse_label_config, parse_selection
from logging_config import get_logger


# Module logger
logger = get_logger(__name__)

packs_bp = Blueprint("packs", __name__)


@packs_bp.route("/api/packs", methods=["POST"])
def generate_pack():
    """
    Validate, assemble and record a manufacturer pack.

    Body:
        purchase_order, supplier, project, company, identifiers, readiness
        selection: document flags (all documents by default)
        label_config: identification label settings (optional)
        version: pin the pack version (optional)

    Validation failures map to 422 and generation failures to 500 through
    the app error handlers.
    """
    data = json_body()
    inputs = parse_inputs(data)
    version = data.get("version")
    if version is not None and (not str(version).isdigit() or int(version) < 1):
        raise BadRequest("version must be a positive integer")

    pack_service = current_app.config["PACK_SERVICE"]
    outcome = pack_service.generate(
        inputs,
        parse_selection(data),
        label_config=parse_label_config(data.get("label_config") or data.get("fnskuLabelsConfig")),
        version=int(version) if version is not None else None,
    )
    current_app.config["READINESS_SERVICE"].invalidate(inputs.purchase_order.id)

    result = outcome.result
    response = send_file(
        io.BytesIO(result.archive),
        mimetype="application/zip",
        as_attachment=True,
        download_name=result.archive_name,
    )
    response.headers["X-Pack-Version"] = str(result.version)
    response.headers["X-Pack-Persisted"] = "1" if outcome.persisted else "0"
    if outcome.validation.warnings:
        response.headers["X-Pack-Warnings"] = str(len(outcome.validation.warnings))
    return response


@packs_bp.route("/api/packs/<po_id>/sent", methods=["POST"])
def mark_sent(po_id: str):
    """Record that the generated pack was dispatched to the manufacturer."""
    record = current_app.config["VERSION_TRACKER"].mark_sent(po_id)
    current_app.config["READINESS_SERVICE"].invalidate(po_id)
    return {
        "po_id": po_id,
        "state": "sent",
        "version": record.manufacturer_pack_version,
        "sent_at": record.manufacturer_pack_sent_at.isoformat(),
    }
