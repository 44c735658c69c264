"""Pack core modules: readiness rules, validation, layout and renderers."""

__all__ = [
    "barcodes",
    "carton_labels",
    "document_layout",
    "formatting",
    "label_layout",
    "order_sheet",
    "pack_validator",
    "packing_list",
    "pdf_analyzer",
    "readiness",
    "rules",
    "surface",
    "zpl",
]
