"""
Configuration for the Manufacturer Pack service.

Values come from the environment (optionally a .env file). Core modules read
their defaults from ``Config`` and accept per-call overrides, so the same
renderers work inside and outside the Flask app.
"""

import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env file early so environment variables are available for Config class
load_dotenv(override=True)

# Base directory (where this file lives)
BASE_DIR = Path(__file__).resolve().parent


class Config:
    """Default configuration for the Flask application and the pack core."""

    # Flask settings
    SECRET_KEY = os.environ.get("FLASK_SECRET_KEY", "dev-secret-key")
    MAX_CONTENT_LENGTH = 2 * 1024 * 1024  # JSON payloads only
    ENVIRONMENT = os.environ.get("FLASK_ENV", "development")
    DEBUG = os.environ.get("FLASK_DEBUG", "1") == "1"

    # ==========================================================================
    # Document branding
    # ==========================================================================
    # COMPANY_NAME is printed on carton labels and document banners when the
    # company settings record does not carry one.
    # APP_NAME appears in the "Generated by ..." footers.
    # ==========================================================================
    COMPANY_NAME = os.environ.get("COMPANY_NAME", "")
    APP_NAME = os.environ.get("APP_NAME", "Manufacturer Pack")

    # ==========================================================================
    # Label configuration
    # ==========================================================================
    # DEFAULT_LABEL_TEMPLATE: "A4_30UP" (multi-up sheet) or "LABEL_40x30"
    # LABEL_OFFSET_X_MM / LABEL_OFFSET_Y_MM: printer skew calibration applied
    #   to every label cell when a request does not supply its own offsets.
    # ZPL_BASE_DPI: density the ZPL coordinates are authored for.
    # ZPL_DEFAULT_DPI: density of the thermal printer when none is requested.
    # ==========================================================================
    DEFAULT_LABEL_TEMPLATE = os.environ.get("DEFAULT_LABEL_TEMPLATE", "A4_30UP")
    LABEL_OFFSET_X_MM = float(os.environ.get("LABEL_OFFSET_X_MM", "0"))
    LABEL_OFFSET_Y_MM = float(os.environ.get("LABEL_OFFSET_Y_MM", "0"))
    ZPL_BASE_DPI = 203
    ZPL_DEFAULT_DPI = int(os.environ.get("ZPL_DEFAULT_DPI", "203"))

    # Largest label run one request may ask for (PDF cells or ZPL blocks)
    MAX_LABEL_QUANTITY = int(os.environ.get("MAX_LABEL_QUANTITY", "3000"))

    # Carton labels per A4 page (1 or 2)
    CARTON_LABELS_PER_PAGE = int(os.environ.get("CARTON_LABELS_PER_PAGE", "1"))

    # Strip timestamps/IDs from PDFs so identical inputs give identical bytes
    PDF_INVARIANT = os.environ.get("PDF_INVARIANT", "0") == "1"

    # Seconds a readiness record may be served from the record cache
    READINESS_CACHE_TTL = float(os.environ.get("READINESS_CACHE_TTL", "30"))


class ProductionConfig(Config):
    """Production configuration."""
    DEBUG = False
    TESTING = False
    SESSION_COOKIE_SECURE = True
    SESSION_COOKIE_HTTPONLY = True


class DevelopmentConfig(Config):
    """Development configuration."""
    DEBUG = True
    TESTING = False


class TestingConfig(Config):
    """Testing configuration."""
    DEBUG = False
    TESTING = True
    PDF_INVARIANT = True
    READINESS_CACHE_TTL = 0.0
