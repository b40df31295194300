import concurrent.futures
import os

import pytest
from dotenv import load_dotenv

# Load environment variables from .env file for tests
load_dotenv()

from models.search_result import SourceDocument  # noqa: E402


@pytest.fixture
def mock_env(monkeypatch):
    """Fixture to mock environment variables for testing."""
    env_vars = {
        "SEARCH_API_KEY": "test-search-key",
        "MODEL_TYPE": "gemini",
        "GOOGLE_GEMINI_API_KEY": "test-api-key",
        "DEFAULT_MODEL": "gemini-2.5-flash",
    }
    for key, value in env_vars.items():
        monkeypatch.setenv(key, value)
    return env_vars


@pytest.fixture
def executor():
    """Small real worker pool, shut down after each test."""
    pool = concurrent.futures.ThreadPoolExecutor(max_workers=4)
    yield pool
    pool.shutdown(wait=True, cancel_futures=True)


@pytest.fixture
def sample_sources():
    return [
        SourceDocument(id=1, title="Spring Boot Guide", url="https://example.com/a", snippet="intro"),
        SourceDocument(id=2, title="Spring Docs", url="https://example.com/b", snippet="docs"),
        SourceDocument(id=3, title="Boot FAQ", url="https://example.com/c", snippet="faq"),
    ]


def pytest_configure(config):
    config.addinivalue_line("markers", "integration: FastAPI layer tests using TestClient")
    os.environ.setdefault("LOG_LEVEL", "INFO")
