"""Tests for the HTTP endpoints."""

import os
import sys

import pytest
from fastapi.testclient import TestClient

# Add backend to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import main
from config import PedigreeSettings
from conftest import ROUND_TRIP_FIELDS, ROUND_TRIP_TEXT


@pytest.fixture
def client():
    return TestClient(main.app)


class TestHealth:

    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "healthy"}


class TestParseEndpoint:
    """Tests for POST /pedigree/parse."""

    def test_round_trip(self, client):
        response = client.post("/pedigree/parse", json={"text": ROUND_TRIP_TEXT})
        assert response.status_code == 200

        data = response.json()
        assert data["fields"] == ROUND_TRIP_FIELDS
        assert data["depth"] == 2
        assert data["summary"]["populated"] == 4
        assert data["pedigree"]["generation1"]["father"] == "PADRE"
        assert data["pedigree"]["generation2"]["paternalGrandmother"] == "ABUELA PATERNA"
        assert data["pedigree"]["subject"]["birthYear"] == 2021
        assert "LASCAUX DU VERN" in data["message"]

    def test_full_sample(self, client, sample_text):
        response = client.post("/pedigree/parse", json={"text": sample_text})
        assert response.status_code == 200
        data = response.json()
        assert len(data["fields"]) == 62
        assert data["depth"] == 5
        assert len(data["pedigree"]["generation5"]["maternalLine"]) == 16

    def test_no_subject(self, client):
        response = client.post("/pedigree/parse", json={"text": "    ┌── PADRE\nLASCAUX\n"})
        assert response.status_code == 422
        assert response.json()["detail"]["reason"] == "no_subject"
        assert "(breed, sex, year)" in response.json()["detail"]["hint"]

    def test_ambiguous_subject(self, client):
        text = "A (Baudet du Poitou, Mâle, 2021)\n  P\nB (Baudet du Poitou, Hembra, 2020)\n"
        response = client.post("/pedigree/parse", json={"text": text})
        assert response.status_code == 422
        assert response.json()["detail"]["reason"] == "ambiguous_subject"

    def test_empty_tree(self, client):
        response = client.post("/pedigree/parse", json={"text": "A (Baudet du Poitou, Mâle, 2021)"})
        assert response.status_code == 422
        assert response.json()["detail"]["reason"] == "empty_tree"

    def test_too_many_lines(self, client, monkeypatch):
        monkeypatch.setattr(main, "settings", PedigreeSettings(max_lines=3))
        response = client.post("/pedigree/parse", json={"text": ROUND_TRIP_TEXT})
        assert response.status_code == 413

    def test_missing_text(self, client):
        response = client.post("/pedigree/parse", json={})
        assert response.status_code == 422


class TestUploadEndpoint:
    """Tests for POST /pedigree/upload."""

    def test_upload_utf8(self, client):
        files = {"file": ("pedigree.txt", ROUND_TRIP_TEXT.encode("utf-8"), "text/plain")}
        response = client.post("/pedigree/upload", files=files)
        assert response.status_code == 200
        assert response.json()["fields"] == ROUND_TRIP_FIELDS

    def test_upload_latin1(self, client):
        """Non-UTF-8 files fall back to latin-1."""
        text = "LASCAUX (Baudet du Poitou, Mâle, 2021)\n    `- MADRE\n"
        files = {"file": ("pedigree.txt", text.encode("latin-1"), "text/plain")}
        response = client.post("/pedigree/upload", files=files)
        assert response.status_code == 200
        assert response.json()["fields"] == {"mother_id": "MADRE"}
        assert response.json()["pedigree"]["subject"]["sex"] == "male"

    def test_upload_rejects_other_types(self, client):
        files = {"file": ("pedigree.pdf", b"%PDF-1.4", "application/pdf")}
        response = client.post("/pedigree/upload", files=files)
        assert response.status_code == 400
