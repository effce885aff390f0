"""Tests for the FastAPI endpoints."""

import json

import pytest
from fastapi.testclient import TestClient

import api.main as api_main
from occupancy.zones import BUILDINGS, TOWER_B


@pytest.fixture
def client() -> TestClient:
    return TestClient(api_main.app)


@pytest.fixture
def body(details_data):
    return {"detailsData": details_data, "zoneBreakdown": [{"zone": "Red Zone", "count": 2}]}


class TestMeta:
    def test_buildings(self, client: TestClient) -> None:
        resp = client.get("/meta/buildings")
        assert resp.status_code == 200
        assert resp.json() == {"buildings": list(BUILDINGS), "options": ["all", *BUILDINGS]}


class TestOccupancy:
    def test_overview(self, client: TestClient, body) -> None:
        resp = client.post("/occupancy", json=body)
        assert resp.status_code == 200
        data = resp.json()
        assert data["totals"]["total"] == 7
        assert [p["name"] for p in data["podium"]] == ["Acme", "Globex"]
        assert data["breakdowns"]["zone"] == [{"zone": "Red Zone", "count": 2}]

    def test_building_filter(self, client: TestClient, body) -> None:
        body["filters"] = {"building": TOWER_B}
        data = client.post("/occupancy", json=body).json()
        assert [c["name"] for c in data["companies"]] == ["Acme", "Unknown Company"]

    def test_malformed_groups_tolerated(self, client: TestClient) -> None:
        resp = client.post("/occupancy", json={"detailsData": {"a": "nope", "b": [{"zone": "Reception"}]}})
        assert resp.status_code == 200
        assert resp.json()["companies"][0]["name"] == "Unknown Company"

    def test_same_version_different_roster(self, client: TestClient) -> None:
        first = {"detailsData": {"g": [{"companyName": "Acme", "zone": "Red Zone"}]}, "version": "1"}
        second = {"detailsData": {"g": [{"companyName": "Other", "zone": "Tower B"}] * 3}, "version": "1"}
        assert client.post("/occupancy", json=first).json()["totals"]["total"] == 1
        data = client.post("/occupancy", json=second).json()
        assert data["totals"]["total"] == 3
        assert [c["name"] for c in data["companies"]] == ["Other"]

    def test_selected_company(self, client: TestClient, body) -> None:
        body["filters"] = {"company": "Acme"}
        data = client.post("/occupancy", json=body).json()
        assert data["selected_company"]["name"] == "Acme"
        assert len(data["selected_company"]["members"]) == 3

    def test_failure_returns_500(self, client: TestClient, body, monkeypatch) -> None:
        def boom(*args, **kwargs):
            raise RuntimeError("broken")

        monkeypatch.setattr(api_main, "compute_occupancy", boom)
        resp = client.post("/occupancy", json=body)
        assert resp.status_code == 500
        assert resp.json() == {"error": "broken", "type": "RuntimeError"}


class TestDrilldown:
    def test_company(self, client: TestClient, body) -> None:
        body.update(company="Acme", title="Acme staff")
        data = client.post("/drilldown/company", json=body).json()
        assert data["title"] == "Acme staff"
        assert [r["name"] for r in data["rows"]] == ["Zoe", "Amy", "Ann"]

    def test_building(self, client: TestClient, body) -> None:
        body.update(building=TOWER_B)
        data = client.post("/drilldown/building", json=body).json()
        assert [(r["seq"], r["company"]) for r in data["rows"]] == [(1, "Acme"), (2, "Unknown Company")]

    def test_company_building(self, client: TestClient, body) -> None:
        body.update(company="Globex", building="2nd Floor")
        data = client.post("/drilldown/company-building", json=body).json()
        assert [r["name"] for r in data["rows"]] == ["Carl"]

    def test_empty_match(self, client: TestClient, body) -> None:
        body.update(building="Nowhere")
        data = client.post("/drilldown/building", json=body).json()
        assert data["rows"] == []


class TestExport:
    def test_companies_csv(self, client: TestClient, body) -> None:
        resp = client.post("/export/companies", json=body)
        assert resp.status_code == 200
        assert resp.headers["content-type"].startswith("text/csv")
        lines = resp.text.strip().splitlines()
        assert lines[0] == "Rank,Company,Total,Podium Floor,2nd Floor,Tower B,Share %,Locations"
        assert len(lines) == 5

    def test_drilldown_csv(self, client: TestClient, body) -> None:
        body.update(building=TOWER_B)
        resp = client.post("/export/drilldown", json=body)
        lines = resp.text.strip().splitlines()
        assert lines[0].startswith("#,Company,Name")
        assert len(lines) == 3


class TestRoster:
    def test_reads_files_from_data_dir(self, client: TestClient, tmp_path, monkeypatch, details_data) -> None:
        (tmp_path / "occupancy.json").write_text(json.dumps({"detailsData": details_data}), encoding="utf-8")
        monkeypatch.setattr("occupancy.data.DATA_DIR", tmp_path)
        data = client.get("/roster", params={"building": "2nd floor"}).json()
        assert data["files"] == ["occupancy.json"]
        assert data["filters"]["building"] == "2nd Floor"
        assert [c["name"] for c in data["companies"]] == ["Globex", "Initech"]
