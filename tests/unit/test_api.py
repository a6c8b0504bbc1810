"""API tests for upload, summary and report endpoints."""

import json

import pytest
from fastapi.testclient import TestClient

import main
from services.aggregator import Aggregator
from services.document import ReportWriter
from services.parser import LogParser
from services.storage import LogStore


@pytest.fixture
def client(tmp_path, monkeypatch):
    log_path = str(tmp_path / "access.jsonl")
    store = LogStore(log_path)
    monkeypatch.setattr(main, "LOG_FILE_PATH", log_path)
    monkeypatch.setattr(main, "REPORT_FILE_PATH", str(tmp_path / "out" / "report.html"))
    monkeypatch.setattr(main, "log_store", store)
    monkeypatch.setattr(main, "aggregator", Aggregator(store, LogParser()))
    return TestClient(main.app)


def upload(client, records):
    body = "\n".join(json.dumps(r) for r in records).encode()
    return client.post("/api/upload-log", files={"file": ("access.jsonl", body, "application/json")})


def test_upload_then_report(client, access_records):
    resp = upload(client, access_records)
    assert resp.status_code == 200
    assert resp.json()["written"] == 5

    resp = client.get("/api/report")
    assert resp.status_code == 200
    assert resp.headers["content-type"].startswith("text/html")
    assert '<h2 id="general">General Statistics</h2>' in resp.text
    assert "/index.html" in resp.text
    assert resp.text.rstrip().endswith("</html>")


def test_empty_upload_rejected(client):
    resp = client.post("/api/upload-log", files={"file": ("empty.jsonl", b"", "application/json")})
    assert resp.status_code == 400


def test_summary(client, access_records):
    upload(client, access_records)
    summary = client.get("/api/summary").json()["summary"]
    assert summary["processed"] == 5
    assert summary["unique_files"] == 2
    assert summary["unique_not_found"] == 1
    assert summary["static_files"] == 1
    assert summary["bandwidth"] == 2600


def test_health(client, access_records):
    assert client.get("/api/health").json()["log_file_exists"] is False
    upload(client, access_records)
    health = client.get("/api/health").json()
    assert health["log_file_exists"] is True
    assert health["total_lines"] == 5


def test_report_without_log(client):
    resp = client.get("/api/report")
    assert resp.status_code == 200
    assert "<tbody>\n</tbody>" in resp.text


def test_failed_render_keeps_previous_report(client, access_records, monkeypatch, tmp_path):
    upload(client, access_records)
    served = main.report()
    with open(served.path, encoding="utf-8") as f:
        before = f.read()
    assert before.endswith("</html>")

    def broken_footer(sink):
        raise OSError("No space left on device")

    monkeypatch.setattr(ReportWriter, "_write_footer", staticmethod(broken_footer))
    resp = client.get("/api/report")
    assert resp.status_code == 500

    with open(served.path, encoding="utf-8") as f:
        assert f.read() == before
    assert list((tmp_path / "out").glob("*.tmp")) == []


def test_report_replaced_on_success(client, access_records):
    client.get("/api/report")
    upload(client, access_records)
    resp = client.get("/api/report")
    assert "/index.html" in resp.text
    with open(main.REPORT_FILE_PATH, encoding="utf-8") as f:
        assert f.read() == resp.text
