"""Integration tests for the HTTP API."""

import pytest
from fastapi.testclient import TestClient

from mercury_ci.api import app, get_pipeline
from mercury_ci.config import AppConfig
from mercury_ci.generators import MemoryExportSink
from mercury_ci.pipeline import MercuryPipeline
from mercury_ci.storage import InMemoryKeyValueStore


@pytest.fixture
def pipeline():
    return MercuryPipeline(
        AppConfig(random_seed=3),
        store=InMemoryKeyValueStore(),
        export_sink=MemoryExportSink(),
    )


@pytest.fixture
def client(pipeline):
    app.dependency_overrides[get_pipeline] = lambda: pipeline
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def _upload(client, name="notes.txt", content=b"Dear Sam,\nThe report is attached."):
    return client.post("/api/files", files={"file": (name, content, "text/plain")})


class TestBriefingRoutes:
    def test_create_and_fetch(self, client):
        response = client.post(
            "/api/briefings", json={"date": "2024-03-05", "company": "Acme Ltd"}
        )
        assert response.status_code == 201
        body = response.json()
        assert body["title"] == "Daily Intelligence Briefing - 5 March 2024"
        assert body["generatedAt"]

        assert client.get(f"/api/briefings/{body['id']}").json()["company"] == "Acme Ltd"
        assert [b["id"] for b in client.get("/api/briefings").json()] == [body["id"]]
        assert client.get("/api/briefings/archive").json() == []

    def test_invalid_date(self, client):
        response = client.post("/api/briefings", json={"date": "not a date"})
        assert response.status_code == 400

    def test_missing_briefing(self, client):
        assert client.get("/api/briefings/missing").status_code == 404
        assert client.delete("/api/briefings/missing").status_code == 404

    def test_delete(self, client):
        briefing_id = client.post("/api/briefings", json={"date": "05/03/2024"}).json()["id"]
        assert client.delete(f"/api/briefings/{briefing_id}").status_code == 204
        assert client.get("/api/briefings").json() == []


class TestFileRoutes:
    def test_upload_and_analyse(self, client):
        response = _upload(client)
        assert response.status_code == 201
        file_id = response.json()["id"]
        assert response.json()["status"] == "uploaded"

        analysed = client.post(f"/api/files/{file_id}/analyse")
        assert analysed.status_code == 200
        body = analysed.json()
        assert body["status"] == "processed"
        assert body["analysisResult"]["docType"] == "Report"
        assert body["analysisResult"]["recipient"] == "Sam"

    def test_reanalyse_conflicts(self, client):
        file_id = _upload(client).json()["id"]
        client.post(f"/api/files/{file_id}/analyse")
        assert client.post(f"/api/files/{file_id}/analyse").status_code == 409

    def test_unsupported_type(self, client):
        response = _upload(client, name="budget.xlsx", content=b"PK")
        assert response.status_code == 415
        detail = response.json()["detail"]
        assert detail["error_type"] == "UnsupportedFileTypeError"
        assert "docx" in detail["details"]["supported_extensions"]

    def test_batch_upload(self, client):
        response = client.post(
            "/api/files/batch",
            files=[
                ("files", ("a.txt", b"hello world", "text/plain")),
                ("files", ("b.xlsx", b"PK", "application/octet-stream")),
            ],
            data={"analyse": "true"},
        )
        assert response.status_code == 200
        body = response.json()
        assert [f["name"] for f in body["accepted"]] == ["a.txt"]
        assert body["accepted"][0]["status"] == "processed"
        assert body["rejected"][0]["name"] == "b.xlsx"

    def test_export(self, client):
        file_id = _upload(client).json()["id"]
        assert client.get(f"/api/files/{file_id}/export").status_code == 409

        client.post(f"/api/files/{file_id}/analyse")
        response = client.get(f"/api/files/{file_id}/export", params={"format": "csv"})
        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/csv")
        assert 'filename="notes_analysis.csv"' in response.headers["content-disposition"]
        assert response.text.startswith("Section,Item,Value")

        bad = client.get(f"/api/files/{file_id}/export", params={"format": "xlsx"})
        assert bad.status_code == 400

    def test_delete_and_missing(self, client):
        file_id = _upload(client).json()["id"]
        assert client.delete(f"/api/files/{file_id}").status_code == 204
        assert client.get(f"/api/files/{file_id}").status_code == 404
        assert client.post(f"/api/files/{file_id}/analyse").status_code == 404


class TestReportRoutes:
    def test_create_download_delete(self, client):
        response = client.post("/api/reports", json={"report_type": "market"})
        assert response.status_code == 201
        report_id = response.json()["id"]
        assert response.json()["metadata"]["confidence"] == 0.87

        download = client.get(f"/api/reports/{report_id}/download")
        assert download.status_code == 200
        assert download.headers["content-type"].startswith("text/markdown")
        assert download.text.startswith("# Market Intelligence Report")

        assert client.delete(f"/api/reports/{report_id}").status_code == 204
        assert client.get(f"/api/reports/{report_id}").status_code == 404

    def test_report_from_unanalysed_file(self, client):
        file_id = _upload(client).json()["id"]
        response = client.post("/api/reports", json={"report_type": "market", "file_id": file_id})
        assert response.status_code == 409

    def test_blank_report_type(self, client):
        assert client.post("/api/reports", json={"report_type": "  "}).status_code == 400
        assert client.post("/api/reports", json={"report_type": ""}).status_code == 422


class TestToolRoutes:
    def test_analyse_data(self, client):
        response = client.post(
            "/api/analyse-data", json={"data": "x,y\n1,2\n2,4\n3,6\n", "focus_areas": ["correlations"]}
        )
        assert response.status_code == 200
        body = response.json()
        assert body["metrics"]["Primary Correlation"] == 1.0
        assert body["keyFindings"][0] == "Strong correlation between x and y (r=1.00)"

    def test_stats(self, client):
        client.post("/api/briefings", json={"date": "2024-03-05"})
        _upload(client, name="budget.xlsx", content=b"PK")

        stats = client.get("/api/stats").json()
        assert stats["briefingsGenerated"] == 1
        assert stats["briefings"] == 1
        assert stats["files"] == 0
