"""
Manufacturer Pack - Flask Application Entry Point.

This is a slim app factory that:
1. Configures logging
2. Creates the readiness store, cache and services
3. Registers route blueprints
4. Sets up JSON error handlers

ARCHITECTURE:
    Flask request thread
    ├── ReadinessService (store + TTL cache)
    ├── PackService
    │   ├── PackAssembler (renders documents sequentially)
    │   └── VersionTracker (pack version / sent state on the record)
    └── Labels (rendered directly from the request)

Requests for the same purchase order are expected to be serialized by the
client; the services take no per-order locks.
"""

from __future__ import annotations

import logging
import os

from flask import Flask
from werkzeug.exceptions import HTTPException

from logging_config import setup_logging, get_logger
from core.exceptions import (
    DocumentGenerationError,
    InvalidStateTransitionError,
    PackValidationError,
    RecordNotFoundError,
)
from services import (
    InMemoryReadinessStore,
    PackAssembler,
    PackService,
    ReadinessService,
    RecordCache,
    VersionTracker,
)
from routes import register_blueprints


# Module logger (configured after setup_logging)
logger = get_logger(__name__)


def create_app(config_object: str = "config.Config", store=None, uploader=None, audit_sink=None) -> Flask:
    """
    Application factory - creates and configures Flask app.

    Args:
        config_object: Import path of the configuration class
        store: Readiness store (an in-memory store by default)
        uploader: Optional archive uploader handed to the pack service
        audit_sink: Optional audit sink handed to the pack service

    Returns:
        Configured Flask application
    """
    app = Flask(__name__)
    app.config.from_object(config_object)

    # Configure logging
    log_level = logging.DEBUG if app.config.get("DEBUG") else logging.INFO
    enable_file_logging = app.config.get("ENVIRONMENT") == "production" and not app.config.get("TESTING")

    root_logger = setup_logging(
        log_level=log_level,
        enable_file_logging=enable_file_logging,
    )

    # Set Flask's logger to use our configured logger
    app.logger.handlers = root_logger.handlers
    app.logger.setLevel(log_level)

    logger.info(f"Starting {app.config.get('APP_NAME')} in {app.config.get('ENVIRONMENT')} mode")

    # =========================================================================
    # SERVICES INITIALIZATION
    # =========================================================================

    store = store if store is not None else InMemoryReadinessStore()
    cache = RecordCache(ttl=app.config.get("READINESS_CACHE_TTL", 30.0))
    tracker = VersionTracker(store)

    app.config["READINESS_STORE"] = store
    app.config["READINESS_SERVICE"] = ReadinessService(store, cache)
    app.config["VERSION_TRACKER"] = tracker
    app.config["PACK_SERVICE"] = PackService(
        PackAssembler(carton_labels_per_page=app.config.get("CARTON_LABELS_PER_PAGE")),
        tracker,
        uploader=uploader,
        audit_sink=audit_sink,
    )
    logger.info("Pack services initialized")

    # =========================================================================
    # REGISTER BLUEPRINTS
    # =========================================================================

    register_blueprints(app)

    # =========================================================================
    # ERROR HANDLERS
    # =========================================================================

    @app.errorhandler(PackValidationError)
    def handle_validation_error(e):
        return {"error": e.message, "errors": e.errors, "warnings": e.warnings}, 422

    @app.errorhandler(DocumentGenerationError)
    def handle_generation_error(e):
        logger.error(f"Pack generation failed: {e}")
        return {"error": e.message, "document": e.document_name}, 500

    @app.errorhandler(InvalidStateTransitionError)
    def handle_state_error(e):
        return {"error": e.message, "current": e.current, "target": e.target}, 409

    @app.errorhandler(RecordNotFoundError)
    def handle_not_found_record(e):
        return {"error": e.message, "po_id": e.po_id}, 404

    @app.errorhandler(HTTPException)
    def handle_http_error(e):
        return {"error": e.description}, e.code

    @app.errorhandler(500)
    def handle_server_error(e):
        logger.error(f"500 error: {e}", exc_info=True)
        return {"error": "An unexpected error occurred. Please try again."}, 500

    logger.info("Application initialized successfully")
    return app


if __name__ == "__main__":
    app = create_app()
    debug_mode = os.environ.get("FLASK_DEBUG", "1") == "1"
    app.run(debug=debug_mode)
