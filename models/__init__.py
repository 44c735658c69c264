"""
Data models for the Manufacturer Pack service.

This module contains immutable dataclasses for:
- Input records: PurchaseOrder, Supplier, CompanySettings, Project,
  ProductIdentifiers, ReadinessRecord (bundled as PackInputs)
- Pack requests and results: DocumentType, PackSelection,
  LabelConfiguration, GeneratedDocument, PackResult, PackState
- Decisions: ReadinessResult, PackValidation
"""

from .records import (
    LineItem,
    ShippingSpecs,
    PurchaseOrder,
    Supplier,
    CompanySettings,
    Project,
    ProductIdentifiers,
    ReadinessRecord,
    PackInputs,
)
from .pack import (
    DocumentType,
    PackState,
    LabelTemplate,
    PackSelection,
    LabelConfiguration,
    GeneratedDocument,
    PackResult,
)
from .validation import ReadinessResult, PackValidation

__all__ = [
    # Input records
    "LineItem",
    "ShippingSpecs",
    "PurchaseOrder",
    "Supplier",
    "CompanySettings",
    "Project",
    "ProductIdentifiers",
    "ReadinessRecord",
    "PackInputs",
    # Pack models
    "DocumentType",
    "PackState",
    "LabelTemplate",
    "PackSelection",
    "LabelConfiguration",
    "GeneratedDocument",
    "PackResult",
    # Decisions
    "ReadinessResult",
    "PackValidation",
]
