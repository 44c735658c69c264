"""
Flask route blueprints for the Manufacturer Pack API.

This module contains all route handlers organized by functionality:
- api: health check, readiness gate, pack validation
- packs: pack generation and dispatch state
- labels: identification labels as PDF or ZPL

Each blueprint is registered with the Flask app in create_app().
"""

from .api import api_bp
from .packs import packs_bp
from .labels import labels_bp

__all__ = [
    "api_bp",
    "packs_bp",
    "labels_bp",
]


def register_blueprints(app):
    """
    Register all blueprints with the Flask app.

    Args:
        app: Flask application instance
    """
    app.register_blueprint(api_bp)
    app.register_blueprint(packs_bp)
    app.register_blueprint(labels_bp)
