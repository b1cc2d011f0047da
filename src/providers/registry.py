"""Provider registry — singleton map of provider kind → adapter instance."""

from src.config.settings import get_settings
from src.providers.anthropic import AnthropicAdapter
from src.providers.base import ProviderAdapter, ProviderKind
from src.providers.openrouter import OpenRouterAdapter

_providers: dict[ProviderKind, ProviderAdapter] = {}


def get_provider(kind: ProviderKind) -> ProviderAdapter:
    """Get or create an adapter for the given provider kind."""
    if kind in _providers:
        return _providers[kind]

    settings = get_settings()
    if kind is ProviderKind.ANTHROPIC:
        _providers[kind] = AnthropicAdapter(
            base_url=settings.anthropic_base_url,
            api_version=settings.anthropic_version,
            timeout=settings.upstream_timeout_seconds,
        )
    elif kind is ProviderKind.OPENROUTER:
        _providers[kind] = OpenRouterAdapter(
            base_url=settings.openrouter_base_url,
            referer=settings.openrouter_referer,
            title=settings.openrouter_title,
            timeout=settings.upstream_timeout_seconds,
        )
    else:
        raise ValueError(f"Unknown provider: {kind}")

    return _providers[kind]


async def close_all_providers() -> None:
    """Gracefully shut down all provider connections."""
    for provider in _providers.values():
        await provider.close()
    _providers.clear()
