"""Application settings loaded from environment variables."""

from functools import lru_cache

from pydantic_settings import BaseSettings

from src.providers.base import ProviderKind


class Settings(BaseSettings):
    # Upstream credentials. The Anthropic key wins whenever both are set
    anthropic_api_key: str = ""
    openrouter_api_key: str = ""

    # Upstream endpoints
    anthropic_base_url: str = "https://api.anthropic.com"
    anthropic_version: str = "2023-06-01"
    openrouter_base_url: str = "https://openrouter.ai/api"
    openrouter_referer: str = "https://contaleacarlitos.vercel.app"
    openrouter_title: str = "Contale a Carlitos"
    upstream_timeout_seconds: float = 60.0

    # CORS: first entry is echoed when the Origin is not listed
    cors_allowed_origins: str = (
        "https://contaleacarlitos.vercel.app,https://heycarlitos.app,http://localhost:3000"
    )

    # Rate limiting
    rate_limit_requests: int = 20  # Requests per window per caller
    rate_limit_window_seconds: int = 3600
    rate_limit_sweep_seconds: int = 300  # How often expired entries are purged
    rate_limit_backend: str = "memory"  # "memory" | "dynamodb"
    dynamodb_table_name: str = "chat-proxy-rate-limits"
    aws_region: str = "us-east-1"

    # Logging
    log_level: str = "INFO"
    audit_log_file: str = ""  # Empty = stdout only

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}

    @property
    def allowed_origins_list(self) -> list[str]:
        return [o.strip() for o in self.cors_allowed_origins.split(",") if o.strip()]

    @property
    def provider_kind(self) -> ProviderKind | None:
        """Which upstream serves requests, or None when no key is configured."""
        if self.anthropic_api_key:
            return ProviderKind.ANTHROPIC
        if self.openrouter_api_key:
            return ProviderKind.OPENROUTER
        return None

    def api_key_for(self, kind: ProviderKind) -> str:
        if kind is ProviderKind.ANTHROPIC:
            return self.anthropic_api_key
        return self.openrouter_api_key


@lru_cache
def get_settings() -> Settings:
    return Settings()
