"""
Tests for the HTTP API using the Flask test client.
"""

import io
import zipfile

import pytest
from unittest.mock import patch

from app import create_app
from routes.payload import sanitize_payload


@pytest.fixture
def app():
    return create_app("config.TestingConfig")


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def store(app):
    return app.config["READINESS_STORE"]


@pytest.fixture
def pack_payload():
    return {
        "purchase_order": {
            "id": "po-1",
            "po_number": "PO-2026-001",
            "order_date": "2026-02-15",
            "currency": "USD",
            "incoterm": "FCA",
            "incoterm_location": "Ningbo",
            "items": [
                {"ref": "MUG-350", "description": "Ceramic mug 350ml", "qty": 240, "unit_price": 1.235},
            ],
        },
        "supplier": {"name": "Ningbo Ceramics Co., Ltd."},
        "project": {"name": "Ceramic Coffee Mug 350ml", "sku": "FD-MUG-001"},
        "company": {"company_name": "Acme Goods"},
        "identifiers": {"fnsku": "X001ABC123", "gtin_code": "8437012345678", "gtin_type": "EAN"},
        "readiness": {
            "needs_fnsku": True,
            "units_per_carton": 24,
            "cartons_count": 3,
            "carton_length_cm": 30,
            "carton_width_cm": 20,
            "carton_height_cm": 15,
            "carton_weight_kg": 5.5,
            "labels_generated_at": "2026-03-01T09:00:00",
            "labels_qty": 30,
            "labels_template": "A4_30UP",
        },
    }


class TestHealth:

    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.get_json()["status"] == "ok"
        assert response.get_json()["checks"]["pack_service"] == "ok"


class TestReadiness:

    def test_first_access_initializes_record(self, client, store):
        response = client.post(
            "/api/readiness",
            json={"purchase_order_id": "po-9", "identifiers": {"fnsku": "X001ABC123"}},
        )

        body = response.get_json()
        assert response.status_code == 200
        assert body["ready"] is False
        assert body["missing"][0] == "FNSKU labels not generated"
        assert "Units per carton not set" in body["missing"]
        assert store.get("po-9").needs_fnsku is True

    def test_inline_readiness(self, client, pack_payload):
        response = client.post("/api/readiness", json=pack_payload)

        assert response.get_json() == {"ready": True, "missing": []}

    def test_order_id_required(self, client):
        response = client.post("/api/readiness", json={})

        assert response.status_code == 400

    def test_body_must_be_an_object(self, client):
        response = client.post("/api/readiness", json=["po-1"])

        assert response.status_code == 400
        assert "JSON object" in response.get_json()["error"]


class TestValidate:

    def test_reports_errors_and_warnings(self, client, pack_payload):
        pack_payload["readiness"]["carton_weight_kg"] = None
        pack_payload["selection"] = {"includePO": False, "includeFnskuLabels": False, "includeCartonLabels": False}

        body = client.post("/api/packs/validate", json=pack_payload).get_json()

        assert body["valid"] is True
        assert body["warnings"] == ["Carton weight not set (recommended for Packing List)"]


class TestPacks:

    def test_download_archive(self, client, store, pack_payload):
        response = client.post("/api/packs", json=pack_payload)

        assert response.status_code == 200
        assert response.mimetype == "application/zip"
        assert response.headers["X-Pack-Version"] == "1"
        assert response.headers["X-Pack-Persisted"] == "1"
        assert "ManufacturerPack_PO-2026-001.zip" in response.headers["Content-Disposition"]
        with zipfile.ZipFile(io.BytesIO(response.data)) as zf:
            assert zf.namelist() == [
                "PO_PO-2026-001.pdf",
                "FNSKU_Labels_PO-2026-001.pdf",
                "PackingList_PO-2026-001.pdf",
                "CartonLabels_PO-2026-001.pdf",
            ]
        assert store.get("po-1").manufacturer_pack_version == 1

    def test_regeneration_increments_version(self, client, pack_payload):
        client.post("/api/packs", json=pack_payload)

        response = client.post("/api/packs", json=pack_payload)

        assert response.headers["X-Pack-Version"] == "2"
        assert "ManufacturerPack_PO-2026-001_v2.zip" in response.headers["Content-Disposition"]

    def test_validation_failure(self, client, pack_payload):
        pack_payload["readiness"]["cartons_count"] = None

        response = client.post("/api/packs", json=pack_payload)

        body = response.get_json()
        assert response.status_code == 422
        assert "Cartons count is required for Packing List and Carton Labels" in body["errors"]

    def test_generation_failure(self, client, pack_payload):
        with patch("services.pack_assembler.render_order_sheet", side_effect=RuntimeError("font missing")):
            response = client.post("/api/packs", json=pack_payload)

        assert response.status_code == 500
        assert response.get_json()["error"] == "Error generating PO PDF: font missing"

    def test_invalid_version(self, client, pack_payload):
        pack_payload["version"] = 0

        assert client.post("/api/packs", json=pack_payload).status_code == 400

    def test_mark_sent(self, client, pack_payload):
        client.post("/api/packs", json=pack_payload)

        response = client.post("/api/packs/po-1/sent")

        body = response.get_json()
        assert response.status_code == 200
        assert body["state"] == "sent"
        assert body["version"] == 1

    def test_mark_sent_twice(self, client, pack_payload):
        client.post("/api/packs", json=pack_payload)
        client.post("/api/packs/po-1/sent")

        response = client.post("/api/packs/po-1/sent")

        assert response.status_code == 409
        assert response.get_json()["current"] == "sent"

    def test_mark_sent_unknown_order(self, client):
        assert client.post("/api/packs/nope/sent").status_code == 404


class TestLabels:

    def test_pdf_records_label_run(self, client, store):
        response = client.post(
            "/api/labels/pdf",
            json={
                "identifiers": {"fnsku": "X001ABC123"},
                "label_config": {"template": "LABEL_40x30", "quantity": 2},
                "purchase_order_id": "po-1",
            },
        )

        assert response.status_code == 200
        assert response.mimetype == "application/pdf"
        assert "FNSKU_Labels_X001ABC123.pdf" in response.headers["Content-Disposition"]
        record = store.get("po-1")
        assert record.labels_qty == 2
        assert record.labels_template == "LABEL_40x30"

    def test_test_print_is_not_recorded(self, client, store):
        response = client.post(
            "/api/labels/pdf",
            json={"config": {"test_print": True}, "purchase_order_id": "po-1"},
        )

        assert response.status_code == 200
        assert "Labels_TestPrint.pdf" in response.headers["Content-Disposition"]
        assert store.get("po-1") is None

    def test_pdf_requires_a_code(self, client):
        response = client.post("/api/labels/pdf", json={"identifiers": {"sku": "FD-MUG-001"}})

        assert response.status_code == 400

    def test_zpl(self, client):
        response = client.post(
            "/api/labels/zpl",
            json={"identifiers": {"fnsku": "X001ABC123"}, "config": {"quantity": 2}, "dpi": 203},
        )

        program = response.get_data(as_text=True)
        assert response.status_code == 200
        assert response.mimetype == "text/plain"
        assert program.count("^XA") == 2
        assert "^FO70,80^A0N,50,50^FDX001ABC123^FS" in program

    def test_zpl_rejects_bad_dpi(self, client):
        response = client.post(
            "/api/labels/zpl",
            json={"identifiers": {"fnsku": "X001ABC123"}, "dpi": -300},
        )

        assert response.status_code == 400


class TestSanitizing:

    def test_markup_is_stripped(self):
        data = {"notes": "<script>alert(1)</script>Fragile & heavy", "items": [{"ref": "<b>R1</b>"}], "qty": 3}

        clean = sanitize_payload(data)

        assert clean == {"notes": "alert(1)Fragile & heavy", "items": [{"ref": "R1"}], "qty": 3}


class TestInputLimits:

    def test_pack_without_order_id_is_not_recorded(self, client, store, pack_payload):
        pack_payload["purchase_order"]["id"] = ""
        pack_payload["selection"] = {"includeFnskuLabels": False, "includePackingList": False, "includeCartonLabels": False}

        first = client.post("/api/packs", json=pack_payload)
        second = client.post("/api/packs", json=pack_payload)

        assert first.headers["X-Pack-Persisted"] == "0"
        assert second.headers["X-Pack-Version"] == "1"
        assert store.get("") is None

    def test_non_finite_count_is_treated_as_missing(self, client, pack_payload):
        pack_payload["readiness"]["cartons_count"] = "Infinity"

        response = client.post("/api/readiness", json=pack_payload)

        assert response.status_code == 200
        assert response.get_json()["missing"] == ["Cartons count not set"]

    def test_label_quantity_above_limit(self, client, app):
        response = client.post(
            "/api/labels/zpl",
            json={
                "identifiers": {"fnsku": "X001ABC123"},
                "config": {"quantity": app.config["MAX_LABEL_QUANTITY"] + 1},
            },
        )

        assert response.status_code == 400
        assert "at most" in response.get_json()["error"]
