"""
Unit tests for pack versioning and dispatch state.
"""

from datetime import datetime

import pytest
from unittest.mock import MagicMock, patch

from core.exceptions import InvalidStateTransitionError, RecordNotFoundError
from models import PackState, ReadinessRecord
from services.stores import InMemoryReadinessStore
from services.version_tracker import (
    VersionTracker,
    next_version,
    pack_filenames,
    pack_state,
    safe_name,
    version_suffix,
)


@pytest.fixture
def store():
    return InMemoryReadinessStore()


@pytest.fixture
def tracker(store):
    return VersionTracker(store)


class TestVersions:

    def test_first_version(self):
        assert next_version(None) == 1
        assert next_version(0) == 1

    def test_strictly_increasing(self):
        first = next_version(None)
        second = next_version(first)
        third = next_version(second)

        assert first < second < third

    def test_explicit_version_wins(self):
        assert next_version(4, explicit=2) == 2

    def test_explicit_version_must_be_positive(self):
        with pytest.raises(ValueError):
            next_version(None, explicit=0)

    def test_suffix(self):
        assert version_suffix(1) == ""
        assert version_suffix(2) == "_v2"
        assert version_suffix(11) == "_v11"

    def test_filenames(self):
        names = pack_filenames("PO-7", 2)

        assert names == {
            "order_sheet": "PO_PO-7_v2.pdf",
            "identification_labels": "FNSKU_Labels_PO-7_v2.pdf",
            "packing_list": "PackingList_PO-7_v2.pdf",
            "carton_labels": "CartonLabels_PO-7_v2.pdf",
            "archive": "ManufacturerPack_PO-7_v2.zip",
        }

    def test_filenames_are_stable(self):
        assert pack_filenames("PO-7", 3) == pack_filenames("PO-7", 3)

    def test_unsafe_characters_replaced(self):
        assert safe_name("PO 2026/01") == "PO_2026_01"


class TestState:

    def test_states(self):
        generated = datetime(2026, 3, 1)

        assert pack_state(None) is PackState.NOT_GENERATED
        assert pack_state(ReadinessRecord()) is PackState.NOT_GENERATED
        assert pack_state(ReadinessRecord(manufacturer_pack_generated_at=generated)) is PackState.GENERATED
        sent = ReadinessRecord(manufacturer_pack_generated_at=generated, manufacturer_pack_sent_at=generated)
        assert pack_state(sent) is PackState.SENT

    def test_generate_then_send(self, tracker, store):
        assert tracker.record_generated("po-1", 1) is True
        assert tracker.state("po-1") is PackState.GENERATED

        record = tracker.mark_sent("po-1")

        assert record.manufacturer_pack_sent_at is not None
        assert tracker.state("po-1") is PackState.SENT

    def test_regeneration_after_sent_returns_to_generated(self, tracker, store):
        tracker.record_generated("po-1", 1)
        tracker.mark_sent("po-1")

        tracker.record_generated("po-1", tracker.next_version_for("po-1"))

        record = store.get("po-1")
        assert record.manufacturer_pack_version == 2
        assert record.manufacturer_pack_sent_at is None
        assert tracker.state("po-1") is PackState.GENERATED

    def test_cannot_send_ungenerated_pack(self, tracker, store):
        store.upsert("po-1", {"needs_fnsku": True})

        with pytest.raises(InvalidStateTransitionError) as exc_info:
            tracker.mark_sent("po-1")

        assert exc_info.value.current == "not_generated"
        assert exc_info.value.target == "sent"

    def test_cannot_send_twice(self, tracker):
        tracker.record_generated("po-1", 1)
        tracker.mark_sent("po-1")

        with pytest.raises(InvalidStateTransitionError):
            tracker.mark_sent("po-1")

    def test_unknown_order(self, tracker):
        with pytest.raises(RecordNotFoundError):
            tracker.mark_sent("missing")


class TestPersistenceFailures:

    def test_store_failure_is_logged_not_raised(self):
        store = MagicMock()
        store.upsert.side_effect = ConnectionError("database unavailable")
        tracker = VersionTracker(store)

        with patch("services.version_tracker.logger") as logger:
            assert tracker.record_generated("po-1", 2) is False

        logger.error.assert_called_once()

    def test_label_run_recorded(self, tracker, store):
        assert tracker.record_labels_generated("po-1", 30, "A4_30UP") is True

        record = store.get("po-1")
        assert record.labels_qty == 30
        assert record.labels_template == "A4_30UP"
        assert record.labels_generated_at is not None
