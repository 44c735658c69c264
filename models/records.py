"""
Input record models.

These are the plain records the calling workflow hands to the pack core:
purchase order, counterpart, buyer company, project, product identifiers and
the per-order readiness record. The core treats all of them as read-only;
only the services write readiness changes back through the store.

Dictionary keys follow the storage schema (snake_case). The camelCase names
used by browser clients are accepted as fallbacks.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field, fields, replace
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, List, Optional


def _pick(data: Dict[str, Any], key: str, alt: Optional[str] = None, default: Any = None) -> Any:
    """Read ``key`` or its camelCase alternative from ``data``."""
    if key in data and data[key] is not None:
        return data[key]
    if alt and alt in data and data[alt] is not None:
        return data[alt]
    return default


def _to_float(value: Any) -> Optional[float]:
    if value is None or value == "":
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _to_int(value: Any) -> Optional[int]:
    number = _to_float(value)
    if number is None:
        return None
    try:
        return int(number)
    except (OverflowError, ValueError):
        # inf and nan have no integer value
        return None


def _to_text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def _to_datetime(value: Any) -> Optional[datetime]:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    return datetime.fromisoformat(str(value))


def _to_decimal(value: Optional[float]) -> Decimal:
    if value is None:
        return Decimal("0")
    try:
        return Decimal(str(value))
    except InvalidOperation:
        return Decimal("0")


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


# =============================================================================
# PURCHASE ORDER
# =============================================================================

@dataclass(frozen=True)
class LineItem:
    """One line of a purchase order."""

    ref: str = ""
    description: str = ""
    quantity: Optional[float] = None
    unit: str = "pcs"
    unit_price: Optional[float] = None
    notes: str = ""

    @property
    def line_total(self) -> Decimal:
        """Unrounded ``quantity * unit_price``; missing operands count as 0."""
        return _to_decimal(self.quantity) * _to_decimal(self.unit_price)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "ref": self.ref,
            "description": self.description,
            "qty": self.quantity,
            "unit": self.unit,
            "unit_price": self.unit_price,
            "notes": self.notes,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "LineItem":
        return cls(
            ref=_to_text(data.get("ref")),
            description=_to_text(_pick(data, "description", "name")),
            quantity=_to_float(_pick(data, "qty", "quantity")),
            unit=_to_text(data.get("unit")) or "pcs",
            unit_price=_to_float(_pick(data, "unit_price", "unitPrice")),
            notes=_to_text(data.get("notes")),
        )


@dataclass(frozen=True)
class ShippingSpecs:
    """Shipping block of a purchase order, all free text as entered."""

    total_cartons: str = ""
    net_weight: str = ""
    gross_weight: str = ""
    total_volume: str = ""
    carton_size: str = ""
    shipping_mark: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ShippingSpecs":
        return cls(
            total_cartons=_to_text(_pick(data, "total_cartons", "totalCartons")),
            net_weight=_to_text(_pick(data, "net_weight", "netWeight")),
            gross_weight=_to_text(_pick(data, "gross_weight", "grossWeight")),
            total_volume=_to_text(_pick(data, "total_volume", "totalVolume")),
            carton_size=_to_text(_pick(data, "carton_size", "cartonSize")),
            shipping_mark=_to_text(_pick(data, "shipping_mark", "shippingMark")),
        )


@dataclass(frozen=True)
class PurchaseOrder:
    """
    A purchase order as owned by the calling workflow.

    Immutable: renderers and validators only read from it.
    """

    id: str = ""
    po_number: str = ""
    order_date: Optional[datetime] = None
    currency: str = "USD"
    incoterm: str = ""
    incoterm_location: str = ""
    payment_terms: str = ""
    quote_ref: str = ""
    quote_validity: str = ""
    sample_lead_time: str = ""
    production_lead_time: str = ""
    delivery_address: str = ""
    delivery_contact: str = ""
    delivery_phone: str = ""
    delivery_email: str = ""
    items: List[LineItem] = field(default_factory=list)
    shipping: ShippingSpecs = field(default_factory=ShippingSpecs)
    notes: str = ""
    project_id: str = ""

    @property
    def display_number(self) -> str:
        """Order number used in file names and headers."""
        return self.po_number or f"PO_{self.id}"

    @property
    def grand_total(self) -> Decimal:
        return sum((item.line_total for item in self.items), Decimal("0"))

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PurchaseOrder":
        raw_items = data.get("items") or []
        # Stored orders keep items as a JSON column
        if isinstance(raw_items, str):
            try:
                raw_items = json.loads(raw_items)
            except json.JSONDecodeError:
                raw_items = []
        items = [LineItem.from_dict(item) for item in raw_items if isinstance(item, dict)]

        shipping_data = data.get("shipping")
        if not isinstance(shipping_data, dict):
            # Flat storage rows carry the shipping columns on the order itself
            shipping_data = data

        return cls(
            id=_to_text(data.get("id")),
            po_number=_to_text(_pick(data, "po_number", "poNumber")),
            order_date=_to_datetime(_pick(data, "order_date", "orderDate")),
            currency=_to_text(data.get("currency")) or "USD",
            incoterm=_to_text(data.get("incoterm")),
            incoterm_location=_to_text(_pick(data, "incoterm_location", "incotermLocation")),
            payment_terms=_to_text(_pick(data, "payment_terms", "paymentTerms")),
            quote_ref=_to_text(_pick(data, "quote_ref", "quoteRef")),
            quote_validity=_to_text(_pick(data, "quote_validity", "quoteValidity")),
            sample_lead_time=_to_text(_pick(data, "sample_lead_time", "sampleLeadTime")),
            production_lead_time=_to_text(_pick(data, "production_lead_time", "productionLeadTime")),
            delivery_address=_to_text(_pick(data, "delivery_address", "deliveryAddress")),
            delivery_contact=_to_text(_pick(data, "delivery_contact", "deliveryContact")),
            delivery_phone=_to_text(_pick(data, "delivery_phone", "deliveryPhone")),
            delivery_email=_to_text(_pick(data, "delivery_email", "deliveryEmail")),
            items=items,
            shipping=ShippingSpecs.from_dict(shipping_data),
            notes=_to_text(data.get("notes")),
            project_id=_to_text(_pick(data, "project_id", "projectId")),
        )


# =============================================================================
# COUNTERPARTS
# =============================================================================

@dataclass(frozen=True)
class Supplier:
    """The production counterpart the pack is sent to."""

    name: str = ""
    address: str = ""
    contact_name: str = ""
    phone: str = ""
    email: str = ""

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "Supplier":
        data = data or {}
        return cls(
            name=_to_text(data.get("name")),
            address=_to_text(data.get("address")),
            contact_name=_to_text(_pick(data, "contact_name", "contactName")),
            phone=_to_text(data.get("phone")),
            email=_to_text(data.get("email")),
        )


@dataclass(frozen=True)
class CompanySettings:
    """The buyer company issuing the purchase order."""

    company_name: str = ""
    legal_name: str = ""
    address: str = ""
    postal_code: str = ""
    city: str = ""
    province: str = ""
    country: str = ""
    email: str = ""
    phone: str = ""
    tax_id: str = ""

    @property
    def full_address(self) -> str:
        """Street, postal code + city, province and country, skipping blanks."""
        locality = " ".join(part for part in (self.postal_code, self.city) if part)
        parts = [self.address, locality, self.province, self.country]
        return ", ".join(part for part in parts if part)

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "CompanySettings":
        data = data or {}
        return cls(
            company_name=_to_text(_pick(data, "company_name", "companyName")),
            legal_name=_to_text(_pick(data, "legal_name", "legalName")),
            address=_to_text(data.get("address")),
            postal_code=_to_text(_pick(data, "postal_code", "postalCode")),
            city=_to_text(data.get("city")),
            province=_to_text(data.get("province")),
            country=_to_text(data.get("country")),
            email=_to_text(data.get("email")),
            phone=_to_text(data.get("phone")),
            tax_id=_to_text(_pick(data, "tax_id", "taxId")),
        )


@dataclass(frozen=True)
class Project:
    """The product project a purchase order belongs to."""

    id: str = ""
    name: str = ""
    sku: str = ""
    project_code: str = ""

    @property
    def display_sku(self) -> str:
        return self.sku or self.project_code

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "Project":
        data = data or {}
        return cls(
            id=_to_text(data.get("id")),
            name=_to_text(data.get("name")),
            sku=_to_text(data.get("sku")),
            project_code=_to_text(_pick(data, "project_code", "projectCode")),
        )


# =============================================================================
# IDENTIFIERS
# =============================================================================

GTIN_EXEMPT = "GTIN_EXEMPT"


@dataclass(frozen=True)
class ProductIdentifiers:
    """
    The active identifier set of a project.

    GTIN (or an approved exemption) and SKU are independently required by
    the marketplace; FNSKU only when the fulfillment program labels units.
    """

    gtin_code: str = ""
    gtin_type: str = ""
    fnsku: str = ""
    asin: str = ""
    sku: str = ""

    @property
    def is_gtin_exempt(self) -> bool:
        return self.gtin_type.upper() == GTIN_EXEMPT

    def label_code(self) -> Optional[tuple[str, str]]:
        """
        The ``(caption, code)`` pair printed and encoded on unit labels.

        FNSKU wins; otherwise a real (non-exempt) GTIN is used. Returns None
        when there is nothing to encode.
        """
        if self.fnsku:
            return ("FNSKU", self.fnsku)
        if self.gtin_code and not self.is_gtin_exempt:
            return (self.gtin_type.upper() or "GTIN", self.gtin_code)
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "gtin_code": self.gtin_code or None,
            "gtin_type": self.gtin_type or None,
            "fnsku": self.fnsku or None,
            "asin": self.asin or None,
            "sku": self.sku or None,
        }

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> Optional["ProductIdentifiers"]:
        if not data:
            return None
        return cls(
            gtin_code=_to_text(_pick(data, "gtin_code", "gtinCode")),
            gtin_type=_to_text(_pick(data, "gtin_type", "gtinType")),
            fnsku=_to_text(data.get("fnsku")),
            asin=_to_text(data.get("asin")),
            sku=_to_text(data.get("sku")),
        )


# =============================================================================
# READINESS
# =============================================================================

_READINESS_KEYS = {
    "needs_fnsku": "needsFnsku",
    "units_per_carton": "unitsPerCarton",
    "cartons_count": "cartonsCount",
    "carton_length_cm": "cartonLengthCm",
    "carton_width_cm": "cartonWidthCm",
    "carton_height_cm": "cartonHeightCm",
    "carton_weight_kg": "cartonWeightKg",
    "labels_generated_at": "labelsGeneratedAt",
    "labels_qty": "labelsQty",
    "labels_template": "labelsTemplate",
    "manufacturer_pack_generated_at": "manufacturerPackGeneratedAt",
    "manufacturer_pack_sent_at": "manufacturerPackSentAt",
    "manufacturer_pack_version": "manufacturerPackVersion",
    "prep_type": "prepType",
    "notes": "notes",
}

_INT_FIELDS = {"units_per_carton", "cartons_count", "labels_qty", "manufacturer_pack_version"}
_FLOAT_FIELDS = {"carton_length_cm", "carton_width_cm", "carton_height_cm", "carton_weight_kg"}
_DATETIME_FIELDS = {"labels_generated_at", "manufacturer_pack_generated_at", "manufacturer_pack_sent_at"}


@dataclass(frozen=True)
class ReadinessRecord:
    """
    Packaging and labeling facts for one purchase order.

    Created lazily the first time readiness is evaluated (``needs_fnsku``
    defaults to True) and updated field by field afterwards. Changes are
    made with ``with_changes()``, which returns a new record.
    """

    needs_fnsku: bool = True
    units_per_carton: Optional[int] = None
    cartons_count: Optional[int] = None
    carton_length_cm: Optional[float] = None
    carton_width_cm: Optional[float] = None
    carton_height_cm: Optional[float] = None
    carton_weight_kg: Optional[float] = None
    labels_generated_at: Optional[datetime] = None
    labels_qty: Optional[int] = None
    labels_template: str = ""
    manufacturer_pack_generated_at: Optional[datetime] = None
    manufacturer_pack_sent_at: Optional[datetime] = None
    manufacturer_pack_version: Optional[int] = None
    prep_type: str = "none"
    notes: str = ""

    @property
    def has_dimensions(self) -> bool:
        return all(
            value is not None and value > 0
            for value in (self.carton_length_cm, self.carton_width_cm, self.carton_height_cm)
        )

    @property
    def total_units(self) -> Optional[int]:
        """``cartons_count * units_per_carton`` when both are set."""
        if self.cartons_count and self.units_per_carton:
            return self.cartons_count * self.units_per_carton
        return None

    @property
    def total_weight_kg(self) -> Optional[float]:
        """``cartons_count * carton_weight_kg`` when both are set."""
        if self.cartons_count and self.carton_weight_kg:
            return self.cartons_count * self.carton_weight_kg
        return None

    def with_changes(self, **changes: Any) -> "ReadinessRecord":
        return replace(self, **changes)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {}
        for item in fields(self):
            value = getattr(self, item.name)
            data[item.name] = _iso(value) if item.name in _DATETIME_FIELDS else value
        return data

    @classmethod
    def coerce(cls, name: str, value: Any) -> Any:
        """Convert a raw input value for field ``name`` to its model type."""
        if name in _INT_FIELDS:
            return _to_int(value)
        if name in _FLOAT_FIELDS:
            return _to_float(value)
        if name in _DATETIME_FIELDS:
            return _to_datetime(value)
        if name == "needs_fnsku":
            return True if value is None else bool(value)
        if name == "prep_type":
            return _to_text(value) or "none"
        return _to_text(value)

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> Optional["ReadinessRecord"]:
        if data is None:
            return None
        values = {
            name: cls.coerce(name, _pick(data, name, alt))
            for name, alt in _READINESS_KEYS.items()
        }
        return cls(**values)


@dataclass(frozen=True)
class PackInputs:
    """Everything the renderers read for one purchase order."""

    purchase_order: PurchaseOrder
    supplier: Supplier = field(default_factory=Supplier)
    project: Project = field(default_factory=Project)
    company: CompanySettings = field(default_factory=CompanySettings)
    identifiers: Optional[ProductIdentifiers] = None
    readiness: Optional[ReadinessRecord] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PackInputs":
        return cls(
            purchase_order=PurchaseOrder.from_dict(_pick(data, "purchase_order", "purchaseOrder", {})),
            supplier=Supplier.from_dict(data.get("supplier")),
            project=Project.from_dict(data.get("project")),
            company=CompanySettings.from_dict(_pick(data, "company", "companySettings")),
            identifiers=ProductIdentifiers.from_dict(data.get("identifiers")),
            readiness=ReadinessRecord.from_dict(data.get("readiness")),
        )
