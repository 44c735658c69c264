"""
Request payload helpers shared by the API blueprints.

Every string in a JSON body is stripped of markup before it reaches the
models, since free text ends up printed on documents sent to third parties.
"""

from __future__ import annotations

import html
from dataclasses import replace
from typing import Any, Dict, Optional

import bleach
from flask import current_app, request
from werkzeug.exceptions import BadRequest

from models.pack import LabelConfiguration, PackSelection
from models.records import PackInputs

MAX_TEXT_LENGTH = 2000


def _sanitize_text(text: str, max_length: Optional[int] = MAX_TEXT_LENGTH) -> str:
    """
    Sanitize user input text to prevent markup and script injection.

    Args:
        text: Raw input text
        max_length: Optional maximum length to enforce

    Returns:
        Sanitized text safe for rendering
    """
    if not text:
        return ""

    text = text.strip()
    # Documents are not HTML, so entities escaped by bleach are turned back into characters
    text = html.unescape(bleach.clean(text, tags=[], strip=True))

    if max_length and len(text) > max_length:
        text = text[:max_length]

    return text


def sanitize_payload(value: Any) -> Any:
    """Apply ``_sanitize_text`` to every string in a decoded JSON value."""
    if isinstance(value, str):
        return _sanitize_text(value)
    if isinstance(value, dict):
        return {key: sanitize_payload(item) for key, item in value.items()}
    if isinstance(value, list):
        return [sanitize_payload(item) for item in value]
    return value


def json_body() -> Dict[str, Any]:
    """
    The sanitized JSON object of the current request.

    Raises:
        BadRequest: body missing or not a JSON object
    """
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise BadRequest("Request body must be a JSON object")
    return sanitize_payload(data)


def parse_inputs(data: Dict[str, Any]) -> PackInputs:
    """
    Build the pack inputs, filling in the stored readiness record when the
    body does not carry one.
    """
    try:
        inputs = PackInputs.from_dict(data)
    except (TypeError, ValueError, OverflowError) as e:
        raise BadRequest(f"Invalid pack input: {e}") from e
    if inputs.readiness is None and inputs.purchase_order.id:
        stored = current_app.config["READINESS_SERVICE"].get(inputs.purchase_order.id)
        if stored is not None:
            inputs = replace(inputs, readiness=stored)
    return inputs


def parse_selection(data: Dict[str, Any]) -> PackSelection:
    return PackSelection.from_dict(data.get("selection"))


def parse_label_config(data: Optional[Dict[str, Any]]) -> Optional[LabelConfiguration]:
    if data is None:
        return None
    try:
        return LabelConfiguration.from_dict(data)
    except (TypeError, ValueError, OverflowError) as e:
        raise BadRequest(f"Invalid label configuration: {e}") from e
