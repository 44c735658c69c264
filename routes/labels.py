"""
Identification label routes.

Handles:
- /api/labels/pdf - Label sheet (or alignment test print) as PDF
- /api/labels/zpl - The same labels as a ZPL program for thermal printers
"""

import io

from flask import Blueprint, Response, current_app, send_file
from werkzeug.exceptions import BadRequest

from models.pack import LabelConfiguration
from models.records import ProductIdentifiers, Project
from modules.label_layout import render_identification_labels
from modules.zpl import render_labels_zpl
from routes.payload import json_body, parse_label_config
from services.version_tracker import safe_name
from logging_config import get_logger


# Module logger
logger = get_logger(__name__)

labels_bp = Blueprint("labels", __name__)


def _label_request():
    data = json_body()
    config = parse_label_config(data.get("label_config") or data.get("config") or {})
    identifiers = ProductIdentifiers.from_dict(data.get("identifiers"))
    project = Project.from_dict(data.get("project"))
    po_id = data.get("purchase_order_id") or data.get("purchaseOrderId")
    return data, config, identifiers, project, po_id


def _code_or_400(identifiers, config: LabelConfiguration) -> str:
    code = identifiers.label_code() if identifiers else None
    if code is None and not config.test_print:
        raise BadRequest("FNSKU or GTIN is required to generate identification labels")
    return code[1] if code else ""


@labels_bp.route("/api/labels/pdf", methods=["POST"])
def labels_pdf():
    """
    Render identification labels.

    When ``purchase_order_id`` is given and this is not a test print, the
    label run is recorded on the order's readiness record.
    """
    _, config, identifiers, project, po_id = _label_request()
    code = _code_or_400(identifiers, config)

    content = render_identification_labels(identifiers, config, project)

    if po_id and not config.test_print:
        tracker = current_app.config["VERSION_TRACKER"]
        if tracker.record_labels_generated(po_id, config.quantity, config.template.value):
            current_app.config["READINESS_SERVICE"].invalidate(po_id)

    filename = "Labels_TestPrint.pdf" if config.test_print else f"FNSKU_Labels_{safe_name(code)}.pdf"
    return send_file(
        io.BytesIO(content),
        mimetype="application/pdf",
        as_attachment=True,
        download_name=filename,
    )


@labels_bp.route("/api/labels/zpl", methods=["POST"])
def labels_zpl():
    """ZPL for the requested labels; ``dpi`` selects the printer density."""
    data, config, identifiers, project, _ = _label_request()
    code = _code_or_400(identifiers, config)
    if not code:
        raise BadRequest("ZPL output has no test print mode")

    dpi = data.get("dpi")
    try:
        program = render_labels_zpl(identifiers, config, project, dpi=int(dpi) if dpi else None)
    except ValueError as e:
        raise BadRequest(str(e)) from e

    return Response(
        program,
        mimetype="text/plain",
        headers={"Content-Disposition": f"attachment; filename=FNSKU_Labels_{safe_name(code)}.zpl"},
    )
