"""
Unit tests for the readiness service, record cache and pack service.
"""

from dataclasses import replace

import pytest
from unittest.mock import MagicMock, patch

from core.exceptions import PackValidationError
from models import DocumentType, PackSelection, PurchaseOrder
from services.pack_assembler import PackAssembler
from services.pack_service import PackService
from services.readiness_service import ReadinessService
from services.record_cache import RecordCache
from services.stores import InMemoryReadinessStore
from services.version_tracker import VersionTracker


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


@pytest.fixture
def store():
    return InMemoryReadinessStore()


class TestRecordCache:

    def test_hit_before_expiry(self):
        clock = FakeClock()
        cache = RecordCache(ttl=30, clock=clock)
        cache.put("po-1", "record")

        clock.now = 29.9
        assert cache.get("po-1") == "record"

    def test_expires(self):
        clock = FakeClock()
        cache = RecordCache(ttl=30, clock=clock)
        cache.put("po-1", "record")

        clock.now = 30.0
        assert cache.get("po-1") is None

    def test_zero_ttl_disables_caching(self):
        cache = RecordCache(ttl=0)
        cache.put("po-1", "record")

        assert cache.get("po-1") is None

    def test_invalidate(self):
        cache = RecordCache(ttl=30)
        cache.put("po-1", "record")
        cache.invalidate("po-1")

        assert cache.get("po-1") is None

    def test_negative_ttl_rejected(self):
        with pytest.raises(ValueError):
            RecordCache(ttl=-1)


class TestReadinessService:

    def test_first_evaluation_initializes_record(self, store, identifiers):
        service = ReadinessService(store)

        result = service.evaluate(PurchaseOrder(id="po-1", project_id="prj-1"), identifiers)

        record = store.get("po-1")
        assert record is not None
        assert record.needs_fnsku is True
        assert store.project_id("po-1") == "prj-1"
        assert result.ready is False
        assert "Cartons count not set" in result.missing

    def test_load_existing_record(self, store):
        existing = store.upsert("po-1", {"cartons_count": 4})
        service = ReadinessService(store)

        assert service.load_or_initialize("po-1") == existing

    def test_update_coerces_values(self, store):
        service = ReadinessService(store)

        record = service.update("po-1", {"cartons_count": "10", "carton_weight_kg": "5.5", "needs_fnsku": False})

        assert record.cartons_count == 10
        assert record.carton_weight_kg == 5.5
        assert record.needs_fnsku is False

    def test_update_rejects_tracker_fields(self, store):
        service = ReadinessService(store)

        with pytest.raises(ValueError, match="manufacturer_pack_version"):
            service.update("po-1", {"manufacturer_pack_version": 9})

    def test_cache_served_until_update(self, store):
        cache = RecordCache(ttl=60, clock=FakeClock())
        service = ReadinessService(store, cache)
        service.update("po-1", {"cartons_count": 1})
        first = service.get("po-1")

        store.upsert("po-1", {"cartons_count": 2})
        assert service.get("po-1") is first

        service.update("po-1", {"cartons_count": 3})
        assert service.get("po-1").cartons_count == 3


@pytest.fixture
def pack_service(store):
    return PackService(PackAssembler(), VersionTracker(store))


class TestPackService:

    def test_generate_records_version(self, pack_service, store, pack_inputs):
        outcome = pack_service.generate(pack_inputs, PackSelection.only(DocumentType.ORDER_SHEET))

        assert outcome.persisted is True
        assert outcome.uploaded is None
        assert store.get("po-1").manufacturer_pack_version == 1
        assert store.get("po-1").manufacturer_pack_generated_at is not None

    def test_validation_errors_block(self, pack_service, store, pack_inputs):
        inputs = replace(pack_inputs, readiness=pack_inputs.readiness.with_changes(cartons_count=None))

        with pytest.raises(PackValidationError) as exc_info:
            pack_service.generate(inputs, PackSelection.only(DocumentType.CARTON_LABELS))

        assert any("Cartons count" in error for error in exc_info.value.errors)
        assert store.get("po-1") is None

    def test_warnings_are_returned(self, pack_service, pack_inputs):
        inputs = replace(pack_inputs, readiness=pack_inputs.readiness.with_changes(carton_weight_kg=None))

        outcome = pack_service.generate(inputs, PackSelection.only(DocumentType.PACKING_LIST))

        assert outcome.validation.warnings == ["Carton weight not set (recommended for Packing List)"]
        assert outcome.to_dict()["warnings"] == outcome.validation.warnings

    def test_persistence_failure_still_returns_archive(self, pack_inputs):
        store = MagicMock()
        store.get.return_value = None
        store.upsert.side_effect = ConnectionError("database unavailable")
        service = PackService(PackAssembler(), VersionTracker(store))

        outcome = service.generate(pack_inputs, PackSelection.only(DocumentType.ORDER_SHEET))

        assert outcome.persisted is False
        assert outcome.result.archive

    def test_upload_failure_is_not_fatal(self, store, pack_inputs):
        uploader = MagicMock()
        uploader.upload.side_effect = OSError("bucket unreachable")
        service = PackService(PackAssembler(), VersionTracker(store), uploader=uploader)

        outcome = service.generate(pack_inputs, PackSelection.only(DocumentType.ORDER_SHEET))

        assert outcome.uploaded is False
        uploader.upload.assert_called_once_with(outcome.result.archive_name, outcome.result.archive)

    def test_audit_failure_only_warns(self, store, pack_inputs):
        audit = MagicMock()
        audit.record.side_effect = RuntimeError("audit down")
        service = PackService(PackAssembler(), VersionTracker(store), audit_sink=audit)

        with patch("services.pack_service.get_order_logger") as get_logger:
            outcome = service.generate(pack_inputs, PackSelection.only(DocumentType.ORDER_SHEET))

        assert outcome.persisted is True
        get_logger.return_value.warning.assert_called_once()
        event, payload = audit.record.call_args.args
        assert event == "manufacturer_pack_generated"
        assert payload["version"] == 1

    def test_successful_upload(self, store, pack_inputs):
        uploader = MagicMock()
        service = PackService(PackAssembler(), VersionTracker(store), uploader=uploader)

        outcome = service.generate(pack_inputs, PackSelection.only(DocumentType.ORDER_SHEET))

        assert outcome.uploaded is True

    def test_orders_without_id_are_not_recorded(self, pack_service, store, pack_inputs):
        selection = PackSelection.only(DocumentType.ORDER_SHEET)
        first = replace(pack_inputs, purchase_order=replace(pack_inputs.purchase_order, id="", po_number="PO-A"))
        second = replace(pack_inputs, purchase_order=replace(pack_inputs.purchase_order, id="", po_number="PO-B"))

        outcome_a = pack_service.generate(first, selection)
        outcome_b = pack_service.generate(second, selection)

        assert outcome_a.persisted is False
        assert outcome_b.persisted is False
        assert outcome_b.result.version == 1
        assert outcome_b.result.archive_name == "ManufacturerPack_PO-B.zip"
        assert store.get("") is None
