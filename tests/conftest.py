"""Shared fixtures for the chat proxy test suite."""

import pytest

from src.config.settings import get_settings


@pytest.fixture(autouse=True)
def no_provider_keys(monkeypatch):
    """Start every test with no upstream credentials, whatever the host env has."""
    monkeypatch.setenv("ANTHROPIC_API_KEY", "")
    monkeypatch.setenv("OPENROUTER_API_KEY", "")
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def chat_request_body() -> dict:
    """Request body as the browser client sends it (Anthropic Messages shape)."""
    return {
        "model": "claude-haiku-4-5-20251001",
        "max_tokens": 500,
        "system": "You are Carlitos.",
        "messages": [
            {"role": "user", "content": "Hola, ¿cómo estás?"},
            {
                "role": "user",
                "content": [
                    {"type": "text", "text": "a"},
                    {"type": "image", "source": {"type": "base64", "data": "..."}},
                    {"type": "text", "text": "b"},
                ],
            },
        ],
    }


@pytest.fixture
def override_settings(monkeypatch):
    """Factory fixture: set env vars and clear settings cache.

    Usage:
        override_settings(OPENROUTER_API_KEY="sk-or", RATE_LIMIT_REQUESTS=5)
    """
    def _override(**kwargs):
        for key, value in kwargs.items():
            monkeypatch.setenv(key.upper(), str(value))
        # Clear lru_cache so Settings re-reads env
        get_settings.cache_clear()

    yield _override

    get_settings.cache_clear()


def mock_upstream_response(status_code: int = 200, payload=None):
    """Build a MagicMock that looks like an httpx.Response."""
    from unittest.mock import MagicMock

    response = MagicMock()
    response.status_code = status_code
    response.json.return_value = payload if payload is not None else {}
    return response
