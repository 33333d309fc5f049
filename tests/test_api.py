"""
FastAPI endpoint tests for the Lab Report Validator API.

Uses httpx + FastAPI TestClient — no real server needed.
"""

from __future__ import annotations

import api
import pytest
from api import app
from fastapi.testclient import TestClient

from lab_validator.pipeline import LabReportValidationPipeline

from samples import CBC_TEXT, CBC_VALUES, LIPID_VALUES, SHOPPING_LIST

client = TestClient(app)


@pytest.fixture(scope="module", autouse=True)
def _warm_pipeline() -> None:
    """Initialise the pipeline once for all API tests (bypasses lifespan)."""
    api._pipeline = LabReportValidationPipeline()
    yield  # type: ignore[misc]
    api._pipeline = None


class TestHealthEndpoint:
    def test_health_returns_200(self) -> None:
        resp = client.get("/health")
        assert resp.status_code == 200

    def test_health_response_shape(self) -> None:
        data = client.get("/health").json()
        assert data["status"] == "healthy"
        assert data["version"] == "1.0.0"
        assert data["categories_loaded"] == 3


class TestCategoriesEndpoint:
    def test_lists_supported_categories(self) -> None:
        data = client.get("/categories").json()
        assert [c["id"] for c in data] == ["cbc", "lipid", "urinalysis"]

    def test_category_shape(self) -> None:
        cbc = client.get("/categories").json()[0]
        assert cbc["display_name"] == "CBC"
        assert "hemoglobin" in cbc["parameters"]
        assert "complete blood count" in cbc["keywords"]
        assert cbc["min_parameters"] >= 2


class TestValidateEndpoint:
    def test_accepts_cbc_text(self) -> None:
        resp = client.post("/validate", json={"category": "cbc", "raw_text": CBC_TEXT})
        assert resp.status_code == 200
        data = resp.json()
        assert data["is_valid"] is True
        assert data["confidence"] > 0.5
        assert data["confidence_tier"] == "high"
        assert len(data["text_result"]["matched_parameters"]) >= 4
        assert data["error"] is None

    def test_accepts_parsed_values(self) -> None:
        resp = client.post("/validate", json={"category": "lipid", "parsed_values": LIPID_VALUES})
        assert resp.status_code == 200
        assert resp.json()["is_valid"] is True

    def test_accepts_text_and_values(self) -> None:
        body = {"category": "cbc", "raw_text": CBC_TEXT, "parsed_values": CBC_VALUES}
        data = client.post("/validate", json=body).json()
        assert data["is_valid"] is True
        assert data["values_result"]["matched_parameters"][0] == "hemoglobin"

    def test_blocks_non_medical_document(self) -> None:
        resp = client.post("/validate", json={"category": "cbc", "raw_text": SHOPPING_LIST})
        assert resp.status_code == 422
        data = resp.json()
        assert data["code"] == "INVALID_LAB_IMAGE"
        assert data["details"]["selected_lab_type"] == "CBC"
        assert data["details"]["confidence_tier"] == "low"
        assert data["details"]["reasons"]
        assert data["details"]["suggestions"]

    def test_blocks_mismatched_lab_type(self) -> None:
        resp = client.post("/validate", json={"category": "urinalysis", "raw_text": CBC_TEXT})
        assert resp.status_code == 422
        data = resp.json()
        assert data["code"] == "MISMATCHED_LAB_TYPE"
        assert data["details"]["suggested_lab_type"] == "CBC"

    def test_warn_mode_returns_report(self) -> None:
        body = {"category": "cbc", "raw_text": SHOPPING_LIST, "mode": "warn"}
        resp = client.post("/validate", json=body)
        assert resp.status_code == 200
        data = resp.json()
        assert data["is_valid"] is False
        assert data["error"]["code"] == "INVALID_LAB_IMAGE"

    def test_original_hash_present(self) -> None:
        data = client.post("/validate", json={"category": "cbc", "raw_text": CBC_TEXT}).json()
        assert len(data["original_hash"]) == 64  # SHA-256 hex

    def test_lone_surrogate_in_text(self) -> None:
        resp = client.post(
            "/validate",
            content=b'{"category": "cbc", "raw_text": "Hemoglobin 14 \\ud800", "mode": "warn"}',
            headers={"Content-Type": "application/json"},
        )
        assert resp.status_code == 200
        assert len(resp.json()["original_hash"]) == 64


class TestRequestValidation:
    def test_unknown_category_returns_400(self) -> None:
        resp = client.post("/validate", json={"category": "thyroid", "raw_text": CBC_TEXT})
        assert resp.status_code == 400
        assert resp.json()["code"] == "UNKNOWN_CATEGORY"

    def test_empty_body_returns_422(self) -> None:
        resp = client.post("/validate", json={})
        assert resp.status_code == 422

    def test_missing_inputs_returns_422(self) -> None:
        resp = client.post("/validate", json={"category": "cbc"})
        assert resp.status_code == 422

    def test_unknown_mode_returns_422(self) -> None:
        resp = client.post("/validate", json={"category": "cbc", "raw_text": CBC_TEXT, "mode": "maybe"})
        assert resp.status_code == 422


class TestFileUploadEndpoint:
    def test_upload_text_file(self) -> None:
        resp = client.post(
            "/validate/file",
            params={"category": "cbc"},
            files={"file": ("report.txt", CBC_TEXT.encode("utf-8"), "text/plain")},
        )
        assert resp.status_code == 200
        assert resp.json()["is_valid"] is True

    def test_upload_non_medical_file(self) -> None:
        resp = client.post(
            "/validate/file",
            params={"category": "lipid"},
            files={"file": ("list.txt", SHOPPING_LIST.encode("utf-8"), "text/plain")},
        )
        assert resp.status_code == 422
        assert resp.json()["code"] == "INVALID_LAB_IMAGE"

    def test_upload_non_utf8_file(self) -> None:
        resp = client.post(
            "/validate/file",
            params={"category": "cbc"},
            files={"file": ("scan.bin", b"\xff\xfe\xfa\xfb", "application/octet-stream")},
        )
        assert resp.status_code == 400

    def test_upload_unknown_category(self) -> None:
        resp = client.post(
            "/validate/file",
            params={"category": "thyroid"},
            files={"file": ("report.txt", CBC_TEXT.encode("utf-8"), "text/plain")},
        )
        assert resp.status_code == 400
