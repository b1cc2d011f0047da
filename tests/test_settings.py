"""Tests for src/config/settings.py — Settings and provider selection."""

from src.config.settings import get_settings
from src.providers.base import ProviderKind


class TestSettings:

    def test_defaults(self, override_settings):
        override_settings()
        s = get_settings()
        assert s.rate_limit_requests == 20
        assert s.rate_limit_window_seconds == 3600
        assert s.rate_limit_backend == "memory"
        assert s.anthropic_version == "2023-06-01"
        assert s.log_level == "INFO"

    def test_allowed_origins_default(self, override_settings):
        override_settings()
        assert get_settings().allowed_origins_list == [
            "https://contaleacarlitos.vercel.app",
            "https://heycarlitos.app",
            "http://localhost:3000",
        ]

    def test_allowed_origins_strips_empty(self, override_settings):
        override_settings(CORS_ALLOWED_ORIGINS="https://a.example, ,https://b.example,")
        assert get_settings().allowed_origins_list == ["https://a.example", "https://b.example"]

    def test_env_override(self, override_settings):
        override_settings(RATE_LIMIT_REQUESTS="5", RATE_LIMIT_WINDOW_SECONDS="60")
        s = get_settings()
        assert s.rate_limit_requests == 5
        assert s.rate_limit_window_seconds == 60


class TestProviderKind:

    def test_no_keys(self, override_settings):
        override_settings()
        assert get_settings().provider_kind is None

    def test_anthropic_only(self, override_settings):
        override_settings(ANTHROPIC_API_KEY="sk-ant")
        assert get_settings().provider_kind is ProviderKind.ANTHROPIC

    def test_openrouter_only(self, override_settings):
        override_settings(OPENROUTER_API_KEY="sk-or")
        assert get_settings().provider_kind is ProviderKind.OPENROUTER

    def test_anthropic_wins_when_both_set(self, override_settings):
        override_settings(ANTHROPIC_API_KEY="sk-ant", OPENROUTER_API_KEY="sk-or")
        s = get_settings()
        assert s.provider_kind is ProviderKind.ANTHROPIC
        assert s.api_key_for(ProviderKind.ANTHROPIC) == "sk-ant"
        assert s.api_key_for(ProviderKind.OPENROUTER) == "sk-or"
