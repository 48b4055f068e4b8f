"""Pytest configuration and fixtures."""

import sys
from contextlib import contextmanager
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

# Add the backend source root to sys.path for imports
BACKEND_ROOT = Path(__file__).parent.parent / "backend"
sys.path.insert(0, str(BACKEND_ROOT))

from fastapi.testclient import TestClient  # noqa: E402

from config import Settings, get_settings  # noqa: E402
from main import app  # noqa: E402

TEST_API_KEY = "test-google-key-123"


@pytest.fixture
def fallback_settings():
    return Settings(_env_file=None, google_ai_api_key=None)


@pytest.fixture
def ai_settings():
    return Settings(_env_file=None, google_ai_api_key=TEST_API_KEY)


@pytest.fixture
def make_client():
    """Build a TestClient whose requests see the given settings."""

    def _make(settings: Settings) -> TestClient:
        app.dependency_overrides[get_settings] = lambda: settings
        return TestClient(app)

    yield _make
    app.dependency_overrides.clear()


@pytest.fixture
def fallback_client(make_client, fallback_settings):
    return make_client(fallback_settings)


@pytest.fixture
def ai_client(make_client, ai_settings):
    return make_client(ai_settings)


def build_gemini_payload(text="Paris", total_tokens=12):
    payload = {
        "candidates": [
            {
                "content": {"parts": [{"text": text}], "role": "model"},
                "finishReason": "STOP",
                "index": 0,
            }
        ],
    }
    if total_tokens is not None:
        payload["usageMetadata"] = {
            "promptTokenCount": 4,
            "candidatesTokenCount": total_tokens - 4,
            "totalTokenCount": total_tokens,
        }
    return payload


@pytest.fixture
def mock_google_ai():
    """Patch httpx.AsyncClient so the Google AI call returns a canned response."""

    @contextmanager
    def _mock(status_code=200, payload=None, text="", side_effect=None):
        with patch("httpx.AsyncClient") as mock_class:
            mock_instance = AsyncMock()
            mock_instance.__aenter__ = AsyncMock(return_value=mock_instance)
            mock_instance.__aexit__ = AsyncMock(return_value=False)

            mock_response = MagicMock()
            mock_response.status_code = status_code
            mock_response.is_success = 200 <= status_code < 300
            mock_response.text = text
            if isinstance(payload, Exception):
                mock_response.json.side_effect = payload
            else:
                mock_response.json.return_value = payload if payload is not None else build_gemini_payload()

            if side_effect is not None:
                mock_instance.post.side_effect = side_effect
            else:
                mock_instance.post.return_value = mock_response
            mock_class.return_value = mock_instance

            yield mock_instance

    return _mock


@pytest.fixture
def gemini_payload():
    return build_gemini_payload
