"""
Pack data models.

These models describe what a caller asks the pack core to produce and what
comes back: the closed set of document types, the selection of documents,
the identification label configuration, the generated documents and the
resulting archive.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterator, List, Optional

from config import Config


class DocumentType(Enum):
    """
    The documents a manufacturer pack can contain.

    Declaration order is the rendering order of the pack.
    """

    ORDER_SHEET = "order_sheet"
    IDENTIFICATION_LABELS = "identification_labels"
    PACKING_LIST = "packing_list"
    CARTON_LABELS = "carton_labels"

    @property
    def filename_prefix(self) -> str:
        return _FILENAME_PREFIXES[self]

    @property
    def display_name(self) -> str:
        return _DISPLAY_NAMES[self]


_FILENAME_PREFIXES = {
    DocumentType.ORDER_SHEET: "PO",
    DocumentType.IDENTIFICATION_LABELS: "FNSKU_Labels",
    DocumentType.PACKING_LIST: "PackingList",
    DocumentType.CARTON_LABELS: "CartonLabels",
}

_DISPLAY_NAMES = {
    DocumentType.ORDER_SHEET: "PO",
    DocumentType.IDENTIFICATION_LABELS: "FNSKU labels",
    DocumentType.PACKING_LIST: "Packing List",
    DocumentType.CARTON_LABELS: "Carton Labels",
}


class PackState(Enum):
    """
    Dispatch state of a purchase order's pack.

    Lifecycle:
        NOT_GENERATED -> GENERATED -> SENT
        (regeneration moves GENERATED or SENT back to GENERATED)
    """

    NOT_GENERATED = "not_generated"
    GENERATED = "generated"
    SENT = "sent"


class LabelTemplate(Enum):
    """Physical label stock."""

    MULTI_UP = "A4_30UP"
    """Sheet of 3 x 10 labels."""

    SINGLE = "LABEL_40x30"
    """One 40 x 30 mm label per page."""

    @classmethod
    def parse(cls, value: Any) -> "LabelTemplate":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value))
        except ValueError:
            raise ValueError(
                f"Unknown label template {value!r}; expected one of "
                f"{', '.join(t.value for t in cls)}"
            ) from None


@dataclass(frozen=True)
class PackSelection:
    """Which documents to include in the pack."""

    order_sheet: bool = True
    identification_labels: bool = True
    packing_list: bool = True
    carton_labels: bool = True

    def includes(self, document_type: DocumentType) -> bool:
        return bool(getattr(self, document_type.value))

    def selected(self) -> Iterator[DocumentType]:
        """Selected document types, in rendering order."""
        return (doc for doc in DocumentType if self.includes(doc))

    @property
    def is_empty(self) -> bool:
        return not any(self.includes(doc) for doc in DocumentType)

    def to_dict(self) -> Dict[str, bool]:
        return {doc.value: self.includes(doc) for doc in DocumentType}

    @classmethod
    def only(cls, *document_types: DocumentType) -> "PackSelection":
        return cls(**{doc.value: doc in document_types for doc in DocumentType})

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "PackSelection":
        """
        Accepts the snake_case names as well as the ``includePO`` /
        ``includeFnskuLabels`` / ``includePackingList`` /
        ``includeCartonLabels`` flags sent by browser clients.
        """
        data = data or {}
        aliases = {
            DocumentType.ORDER_SHEET: "includePO",
            DocumentType.IDENTIFICATION_LABELS: "includeFnskuLabels",
            DocumentType.PACKING_LIST: "includePackingList",
            DocumentType.CARTON_LABELS: "includeCartonLabels",
        }
        values = {}
        for doc, alias in aliases.items():
            raw = data.get(doc.value, data.get(alias, True))
            values[doc.value] = bool(raw)
        return cls(**values)


@dataclass(frozen=True)
class LabelConfiguration:
    """
    How identification labels are laid out and what they show.

    ``offset_x_mm`` / ``offset_y_mm`` shift every cell to compensate printer
    skew. ``test_print`` draws alignment guides instead of label content.
    """

    template: LabelTemplate = LabelTemplate.MULTI_UP
    quantity: int = 1
    include_sku: bool = True
    include_name: bool = True
    offset_x_mm: float = 0.0
    offset_y_mm: float = 0.0
    test_print: bool = False

    def __post_init__(self) -> None:
        if self.quantity < 1:
            raise ValueError(f"Label quantity must be at least 1, got {self.quantity}")
        if self.quantity > Config.MAX_LABEL_QUANTITY:
            raise ValueError(
                f"Label quantity must be at most {Config.MAX_LABEL_QUANTITY}, got {self.quantity}"
            )

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "LabelConfiguration":
        data = data or {}
        return cls(
            template=LabelTemplate.parse(data.get("template", Config.DEFAULT_LABEL_TEMPLATE)),
            quantity=int(data.get("quantity", 1)),
            include_sku=bool(data.get("include_sku", data.get("includeSku", True))),
            include_name=bool(data.get("include_name", data.get("includeName", True))),
            offset_x_mm=float(data.get("offset_x_mm", data.get("offsetXmm", Config.LABEL_OFFSET_X_MM))),
            offset_y_mm=float(data.get("offset_y_mm", data.get("offsetYmm", Config.LABEL_OFFSET_Y_MM))),
            test_print=bool(data.get("test_print", data.get("testPrint", False))),
        )


@dataclass(frozen=True)
class GeneratedDocument:
    """One rendered file of a pack. Lives only for one assembly call."""

    document_type: DocumentType
    filename: str
    content: bytes

    @property
    def size_kb(self) -> float:
        return round(len(self.content) / 1024, 2)


@dataclass(frozen=True)
class PackResult:
    """The archive produced by one pack assembly."""

    archive_name: str
    archive: bytes
    version: int
    entries: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Metadata only; the archive bytes are delivered separately."""
        return {
            "archive_name": self.archive_name,
            "version": self.version,
            "entries": list(self.entries),
            "size_bytes": len(self.archive),
        }
