"""
Custom exceptions for the Manufacturer Pack service.

Exception Hierarchy:
    ManufacturerPackError (base)
    ├── PackValidationError          - Required data missing (blocks generation)
    ├── DocumentGenerationError      - A renderer failed (aborts the whole pack)
    ├── BarcodeEncodingError         - Payload cannot be encoded (label falls back to text)
    ├── InvalidStateTransitionError  - Pack state machine violated
    └── RecordNotFoundError          - No readiness record for the purchase order

Usage:
    Validation errors carry the full list of problems so a caller can show
    every missing field at once. Generation errors name the failing document.
    Persistence and upload failures after a successful generation are logged
    by the services and never raised to the caller.
"""

from typing import Any, Dict, List, Optional


class ManufacturerPackError(Exception):
    """
    Base exception for all Manufacturer Pack errors.

    All custom exceptions inherit from this class, allowing callers to catch
    all application-specific errors with a single except clause if needed.
    """

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        """
        Initialize the exception.

        Args:
            message: Human-readable error message
            details: Optional dictionary with additional context for debugging
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class PackValidationError(ManufacturerPackError):
    """
    The requested documents cannot be generated from the current data.

    ``errors`` lists every blocking problem; ``warnings`` lists advisory
    ones that were found alongside them.
    """

    def __init__(self, errors: List[str], warnings: Optional[List[str]] = None):
        count = len(errors)
        message = f"Pack validation failed with {count} error{'s' if count != 1 else ''}"
        details = {
            "errors": list(errors),
            "warnings": list(warnings or []),
            "resolution": "Fill in the missing readiness fields and try again",
        }
        super().__init__(message, details)
        self.errors = list(errors)
        self.warnings = list(warnings or [])


class DocumentGenerationError(ManufacturerPackError):
    """
    Rendering one document of the pack failed.

    The pack assembly is aborted; no partial archive is produced. The
    original exception is chained as ``__cause__``.
    """

    def __init__(self, document_name: str, cause: BaseException):
        reason = str(cause) or cause.__class__.__name__
        message = f"Error generating {document_name} PDF: {reason}"
        details = {
            "document": document_name,
            "error_type": cause.__class__.__name__,
        }
        super().__init__(message, details)
        self.document_name = document_name
        self.cause = cause


class BarcodeEncodingError(ManufacturerPackError):
    """
    A barcode symbol could not be produced for the payload.

    The label engine catches this and prints the payload as text instead.
    """

    def __init__(self, payload: str, reason: str):
        message = f"Cannot encode {payload!r} as Code128: {reason}"
        super().__init__(message, {"payload": payload})
        self.payload = payload


class InvalidStateTransitionError(ManufacturerPackError):
    """
    A pack state change skipped a state.

    The only legal moves are not generated -> generated -> sent, plus
    regeneration of an already generated or sent pack.
    """

    def __init__(self, current: str, target: str, po_id: Optional[str] = None):
        message = f"Cannot move manufacturer pack from '{current}' to '{target}'"
        details: Dict[str, Any] = {"current": current, "target": target}
        if po_id:
            details["po_id"] = po_id
        super().__init__(message, details)
        self.current = current
        self.target = target


class RecordNotFoundError(ManufacturerPackError):
    """No readiness record exists for the purchase order."""

    def __init__(self, po_id: str):
        super().__init__(
            f"No readiness record for purchase order {po_id}",
            {"po_id": po_id, "resolution": "Evaluate readiness first to initialize the record"},
        )
        self.po_id = po_id
