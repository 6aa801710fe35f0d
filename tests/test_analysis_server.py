from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient

from chat_analyzer.infrastructure.http.analysis_server import AnalysisHttpServer

CHAT = "\n".join([
    "1/1/24, 9:00 AM - Messages and calls are end-to-end encrypted.",
    "1/1/24, 9:00 AM - Alice: happy new year",
    "2/1/24, 9:00 AM - Alice: hi",
    "2/1/24, 9:05 AM - Bob: hey",
    "a second line from Bob",
    "4/1/24, 10:00 PM - Alice: ping",
    "7/1/24, 23:59 - Alice: late",
])


def upload(client, content, filename="WhatsApp Chat.txt", headers=None):
    return client.post(
        "/api/chat/upload",
        files={"chatFile": (filename, content, "text/plain")},
        headers=headers or {}
    )


@pytest.fixture
def client(service):
    return TestClient(AnalysisHttpServer(analysis_service=service).app)


def test_root_and_health(client):
    assert client.get("/").text == "Chat Analyzer Backend Running"
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_upload_returns_report(client):
    response = upload(client, CHAT.encode("utf-8"))

    assert response.status_code == 200
    data = response.json()
    assert data["message"] == "Analysis complete"
    assert data["originalName"] == "WhatsApp Chat.txt"
    assert data["fileName"].endswith("-WhatsApp Chat.txt")
    assert data["window"] == {"start": "2024-01-01", "end": "2024-01-07"}
    assert [s["date"] for s in data["dailyStats"]] == [f"2024-01-0{d}" for d in range(1, 8)]
    assert data["dailyStats"][1] == {"date": "2024-01-02", "activeUsers": 2, "newUsers": 1}
    assert data["powerUsers"] == [{"user": "Alice", "activeDays": 4}]


def test_upload_accepts_byte_order_mark(client):
    response = upload(client, b"\xef\xbb\xbf" + CHAT.encode("utf-8"))

    assert response.status_code == 200


def test_missing_file_is_rejected(client):
    response = client.post("/api/chat/upload")

    assert response.status_code == 400
    assert response.json() == {"error": "No file uploaded"}


def test_empty_file_is_rejected(client):
    response = upload(client, b"")

    assert response.status_code == 400
    assert response.json()["error"] == "No file uploaded"


def test_file_without_messages_is_rejected(client):
    response = upload(client, b"this is not a chat export\njust notes\n")

    assert response.status_code == 400
    assert response.json()["error"].startswith("No valid messages found")


def test_binary_file_is_rejected(client):
    response = upload(client, b"\xff\xfe\x00\x81binary")

    assert response.status_code == 400
    assert "UTF-8" in response.json()["error"]


def test_oversized_file_is_rejected(service):
    client = TestClient(AnalysisHttpServer(analysis_service=service, max_upload_bytes=32).app)

    response = upload(client, CHAT.encode("utf-8"))

    assert response.status_code == 413


def test_unexpected_failure_maps_to_internal_error():
    failing_service = AsyncMock()
    failing_service.analyze_chat.side_effect = RuntimeError("disk on fire")
    client = TestClient(AnalysisHttpServer(analysis_service=failing_service).app)

    response = upload(client, CHAT.encode("utf-8"))

    assert response.status_code == 500
    assert response.json() == {"error": "File upload failed"}


def test_api_key_is_enforced_when_configured(service):
    client = TestClient(AnalysisHttpServer(analysis_service=service, api_key="secret").app)

    assert upload(client, CHAT.encode("utf-8")).status_code == 401
    assert upload(client, CHAT.encode("utf-8"), headers={"X-API-Key": "wrong"}).status_code == 401
    assert upload(client, CHAT.encode("utf-8"), headers={"X-API-Key": "secret"}).status_code == 200


def test_cors_headers_are_sent(client):
    response = client.get("/health", headers={"Origin": "http://localhost:3000"})

    assert response.headers["access-control-allow-origin"] == "*"
