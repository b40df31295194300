"""
FastAPI contract tests for the search endpoint.

A FakeOrchestrator is injected through dependency overrides so no search
provider, page fetch or model call happens.
"""

import pytest
from fastapi.testclient import TestClient

from models.search_result import AnswerResult, SourceDocument
from server.app import create_app
from server.dependencies import get_orchestrator_provider

pytestmark = pytest.mark.integration


class FakeOrchestrator:
    def __init__(self, result: AnswerResult):
        self.result = result
        self.calls: list[tuple[str, str | None]] = []

    def search(self, raw_query, trace_id=None):
        self.calls.append((raw_query, trace_id))
        return self.result


GOOD_RESULT = AnswerResult(
    answer="Spring Boot is a framework [1].",
    sources=(SourceDocument(id=1, title="Guide", url="https://example.com", snippet="intro"),),
)


@pytest.fixture
def fake_orchestrator():
    return FakeOrchestrator(GOOD_RESULT)


@pytest.fixture
def client(fake_orchestrator):
    app = create_app()
    app.dependency_overrides[get_orchestrator_provider] = lambda: lambda: fake_orchestrator
    with TestClient(app) as test_client:
        yield test_client


def test_health(client):
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json()["status"] == "healthy"


def test_search_returns_answer_and_sources(client, fake_orchestrator):
    r = client.get("/v1/search", params={"q": "  Spring  Boot "})

    assert r.status_code == 200
    body = r.json()
    assert body["answer"] == GOOD_RESULT.answer
    assert body["normalized_query"] == "spring boot"
    assert body["sources"][0] == {"id": 1, "title": "Guide", "url": "https://example.com", "snippet": "intro"}
    assert body["fallback"] is False
    assert fake_orchestrator.calls[0][0] == "  Spring  Boot "


@pytest.mark.parametrize("params", [{}, {"q": ""}, {"q": "   "}])
def test_blank_query_skips_pipeline(client, fake_orchestrator, params):
    r = client.get("/v1/search", params=params)

    assert r.status_code == 200
    body = r.json()
    assert body["answer"] is None
    assert body["sources"] == []
    assert fake_orchestrator.calls == []


def test_inbound_trace_id_is_reused_and_forwarded(client, fake_orchestrator):
    r = client.get("/v1/search", params={"q": "python"}, headers={"X-Trace-Id": "abc12345"})

    assert r.headers["X-Trace-Id"] == "abc12345"
    assert r.json()["trace_id"] == "abc12345"
    assert fake_orchestrator.calls == [("python", "abc12345")]


def test_trace_id_is_generated_when_missing(client, fake_orchestrator):
    r = client.get("/v1/search", params={"q": "python"})

    trace_id = r.headers["X-Trace-Id"]
    assert len(trace_id) == 8
    assert fake_orchestrator.calls == [("python", trace_id)]


def test_fallback_result_is_a_200_with_flag():
    app = create_app()
    fallback_orchestrator = FakeOrchestrator(AnswerResult.search_unavailable())
    app.dependency_overrides[get_orchestrator_provider] = lambda: lambda: fallback_orchestrator
    with TestClient(app) as client:
        r = client.get("/v1/search", params={"q": "outage"})

    assert r.status_code == 200
    assert r.json()["fallback"] is True
    assert r.json()["sources"] == []


def test_root_redirects_to_search(client):
    r = client.get("/", follow_redirects=False)
    assert r.status_code in (302, 307)
    assert r.headers["location"] == "/v1/search"


def _unconfigured_pipeline():
    raise ValueError("SEARCH_API_KEY not set in environment")


@pytest.mark.parametrize("params", [{}, {"q": "  "}])
def test_blank_query_returns_empty_state_when_pipeline_cannot_be_built(params):
    app = create_app()
    app.dependency_overrides[get_orchestrator_provider] = lambda: _unconfigured_pipeline
    with TestClient(app) as client:
        r = client.get("/v1/search", params=params)

    assert r.status_code == 200
    assert r.json()["answer"] is None
    assert r.json()["sources"] == []
