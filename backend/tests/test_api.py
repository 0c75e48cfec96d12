"""API tests through FastAPI's TestClient with an in-process detection service."""

import asyncio
import threading
from concurrent.futures import ThreadPoolExecutor

import pytest
from fastapi.testclient import TestClient

from integrity.config import Settings
from integrity.container import build_container
from integrity.core.entities import MatchType, TextChunk
from integrity.main import create_app

VALID_TEXT = "This is a submitted essay with plenty of characters."


@pytest.fixture
def detection(fake_detection, make_result, make_match):
    fake_detection.result = make_result(
        overall_score=20.0,
        ai_score=10.0,
        chunks=[
            TextChunk(chunk_id=0, text="Copied sentence.", start_pos=0, end_pos=16),
            TextChunk(chunk_id=1, text="Original sentence.", start_pos=17, end_pos=35),
        ],
        matches=[
            make_match(chunk_id=0, source_id="A", score=0.92, match_type=MatchType.EXACT),
            make_match(chunk_id=1, source_id="B", score=0.3, match_type=MatchType.SEMANTIC),
            make_match(chunk_id=0, source_id="A", score=0.6, match_type=MatchType.PARAPHRASE),
        ],
    )
    return fake_detection


@pytest.fixture
def client(detection):
    container = build_container(Settings(), detection=detection)
    app = create_app(container=container)
    with TestClient(app) as c:
        yield c


@pytest.fixture
def session_id(client):
    r = client.post("/sessions")
    assert r.status_code == 201
    return r.json()["session_id"]


def test_health(client):
    assert client.get("/health").json()["status"] == "ok"
    detection = client.get("/health/detection")
    assert detection.status_code == 200
    assert detection.json()["status"] == "online"


def test_detection_status_is_not_overridden_by_remote(client, detection):
    async def degraded_health():
        return {"status": "degraded", "model_loaded": True, "index_ready": True}

    detection.check_health = degraded_health
    body = client.get("/health/detection").json()

    assert body["status"] == "online"
    assert body["detection"]["status"] == "degraded"
    assert client.get("/status").json()["system_status"] == "healthy"


def test_detection_offline_is_503(client, detection):
    detection.fail_on.add("health")
    r = client.get("/health/detection")
    assert r.status_code == 503
    assert "unavailable" in r.json()["detail"]
    assert client.get("/status").json()["system_status"] == "degraded"


def test_submit_text_returns_report(client, session_id):
    r = client.post(f"/sessions/{session_id}/submissions/text", json={"text": VALID_TEXT})
    assert r.status_code == 200
    body = r.json()
    report = body["report"]

    assert body["status"] == "completed"
    assert report["originality"] == 80
    assert report["risk"] == "low"
    assert [s["display_id"] for s in report["sources"]] == [1, 2]
    assert report["chunks"][0]["matched"] is True
    assert report["chunks"][0]["source_display_id"] == 1
    assert report["chunks"][0]["match_type"] == "exact"
    assert report["chunks"][1]["matched"] is False


def test_report_lookup_and_sources(client, session_id):
    report_id = client.post(f"/sessions/{session_id}/submissions/text", json={"text": VALID_TEXT}).json()["id"]

    r = client.get(f"/sessions/{session_id}/reports/{report_id}")
    assert r.status_code == 200
    assert r.json()["id"] == report_id

    source = client.get(f"/sessions/{session_id}/reports/{report_id}/sources/2")
    assert source.status_code == 200
    assert source.json()["source_id"] == "B"

    assert client.get(f"/sessions/{session_id}/reports/{report_id}/sources/3").status_code == 404
    missing = client.get(f"/sessions/{session_id}/reports/analysis_missing")
    assert missing.status_code == 404
    assert missing.json()["detail"] == "Report not found"


def test_upload_submission(client, session_id, detection):
    files = {"file": ("paper.txt", b"An uploaded paper with some text", "text/plain")}
    r = client.post(f"/sessions/{session_id}/submissions/upload", files=files)

    assert r.status_code == 200
    assert r.json()["filename"] == "paper.txt"
    assert ("upload", "paper.txt") in detection.calls


def test_short_text_is_400(client, session_id):
    r = client.post(f"/sessions/{session_id}/submissions/text", json={"text": "short"})
    assert r.status_code == 400
    assert client.get(f"/sessions/{session_id}/reports").json() == []


def test_failed_check_is_502_and_not_archived(client, session_id, detection):
    detection.check_success = False
    detection.check_error = "Index not ready"

    r = client.post(f"/sessions/{session_id}/submissions/text", json={"text": VALID_TEXT})

    assert r.status_code == 502
    assert r.json()["detail"] == "Index not ready"
    assert client.get(f"/sessions/{session_id}/reports").json() == []
    status = client.get(f"/sessions/{session_id}/pipeline").json()
    assert status["state"] == "idle"
    assert status["last_error"] == "Index not ready"


def test_analytics_and_dashboard(client, session_id):
    empty = client.get(f"/sessions/{session_id}/analytics").json()
    assert empty["avg_originality"] == 0
    assert empty["originality_trend"] == []

    client.post(f"/sessions/{session_id}/submissions/text", json={"text": VALID_TEXT})
    analytics = client.get(f"/sessions/{session_id}/analytics").json()

    assert analytics["avg_originality"] == 80
    assert analytics["avg_ai_score"] == 10
    assert analytics["low_risk_count"] == 1
    assert analytics["exact_matches"] == 1
    assert analytics["paraphrase_matches"] == 1
    assert analytics["semantic_matches"] == 1
    assert analytics["originality_trend"] == [{"label": "pasted_t", "value": 80}]

    dashboard = client.get(f"/sessions/{session_id}/dashboard").json()
    assert dashboard["total_submissions"] == 1
    assert dashboard["flags_review"] == 0
    assert dashboard["recent"][0]["originality"] == 80


def test_clear_history(client, session_id):
    report_id = client.post(f"/sessions/{session_id}/submissions/text", json={"text": VALID_TEXT}).json()["id"]

    assert client.delete(f"/sessions/{session_id}/history").status_code == 204
    assert client.get(f"/sessions/{session_id}/reports").json() == []
    # still reachable as the current analysis
    assert client.get(f"/sessions/{session_id}/reports/{report_id}").status_code == 200


def test_logout_discards_session(client, session_id):
    assert client.delete(f"/sessions/{session_id}").status_code == 204
    assert client.get(f"/sessions/{session_id}/reports").status_code == 404
    assert client.delete(f"/sessions/{session_id}").status_code == 404


def test_cancel_when_idle(client, session_id):
    assert client.post(f"/sessions/{session_id}/submissions/cancel").json() == {"cancelled": False}


def test_admin_passthroughs(client):
    assert client.get("/admin/stats").json()["stats"]["total_documents"] == 3
    assert client.post("/admin/rebuild-index").json()["success"] is True


def _hang_check(detection):
    started = threading.Event()

    async def hanging_check(*args, **kwargs):
        started.set()
        await asyncio.Event().wait()

    detection.check = hanging_check
    return started


def test_cancel_in_flight_submission(client, session_id, detection):
    started = _hang_check(detection)

    with ThreadPoolExecutor(max_workers=1) as pool:
        pending = pool.submit(client.post, f"/sessions/{session_id}/submissions/text", json={"text": VALID_TEXT})
        assert started.wait(timeout=5)
        cancel = client.post(f"/sessions/{session_id}/submissions/cancel")
        response = pending.result(timeout=5)

    assert cancel.json() == {"cancelled": True}
    assert response.status_code == 409
    assert client.get(f"/sessions/{session_id}/reports").json() == []
    status = client.get(f"/sessions/{session_id}/pipeline").json()
    assert status["state"] == "idle"
    assert status["progress"] == 0


def test_logout_cancels_in_flight_submission(client, session_id, detection):
    started = _hang_check(detection)

    with ThreadPoolExecutor(max_workers=1) as pool:
        pending = pool.submit(client.post, f"/sessions/{session_id}/submissions/text", json={"text": VALID_TEXT})
        assert started.wait(timeout=5)
        assert client.delete(f"/sessions/{session_id}").status_code == 204
        response = pending.result(timeout=5)

    assert response.status_code == 409
