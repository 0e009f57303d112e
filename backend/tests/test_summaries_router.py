# backend/tests/test_summaries_router.py

from fastapi.testclient import TestClient

from brains.main import create_app
from brains.summaries.router import get_summary_service
from brains.summaries.service import SummaryService


def create_test_client(llm_client) -> TestClient:
    app = create_app()
    app.dependency_overrides[get_summary_service] = lambda: SummaryService(llm_client)
    return TestClient(app)


def test_summarize_text_success(fake_llm_client):
    client = create_test_client(fake_llm_client())

    resp = client.post("/summaries/summarize-text", json={"text": "Long text", "maxLength": 200})

    assert resp.status_code == 200
    assert resp.json() == {"success": True, "summary": "Summary\n• a\n• b", "model": "claude"}


def test_summarize_text_without_keys_is_500(fake_llm_client):
    client = create_test_client(fake_llm_client(claude=False, openai=False))

    resp = client.post("/summaries/summarize-text", json={"text": "Long text"})

    assert resp.status_code == 500
    assert resp.json() == {
        "success": False,
        "error": "No API key available for the selected model",
    }
    assert resp.headers["access-control-allow-origin"] == "*"


def test_generate_summary(fake_llm_client):
    client = create_test_client(fake_llm_client(reply="## Executive Summary\nOK"))

    resp = client.post("/summaries/generate", json={"content": "Notes"})

    assert resp.status_code == 200
    assert resp.json()["summary"] == "## Executive Summary\nOK"
