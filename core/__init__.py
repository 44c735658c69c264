"""
Core module for the Manufacturer Pack service.

Contains the exception hierarchy shared by modules, services and routes.
"""

from .exceptions import (
    ManufacturerPackError,
    PackValidationError,
    DocumentGenerationError,
    BarcodeEncodingError,
    InvalidStateTransitionError,
    RecordNotFoundError,
)

__all__ = [
    "ManufacturerPackError",
    "PackValidationError",
    "DocumentGenerationError",
    "BarcodeEncodingError",
    "InvalidStateTransitionError",
    "RecordNotFoundError",
]
