"""Proxy handler — request shaping and routing to the configured provider."""

from fastapi import HTTPException

from src.config.settings import Settings
from src.logging.audit import bind
from src.providers.base import ProviderKind, ProviderResponse
from src.providers.registry import close_all_providers, get_provider

MAX_TOKENS_CEILING = 1500
DEFAULT_MAX_TOKENS = 1000

MISSING_CREDENTIALS_DETAIL = "API key not configured"


def has_valid_messages(body: dict) -> bool:
    """`messages`, when given, must be a list of message objects."""
    messages = body.get("messages")
    if messages is None:
        return True
    return isinstance(messages, list) and all(isinstance(m, dict) for m in messages)


def clamp_max_tokens(body: dict) -> dict:
    """Replace a missing, zero, non-numeric or oversized max_tokens with the default."""
    value = body.get("max_tokens")
    if (
        isinstance(value, bool)
        or not isinstance(value, (int, float))
        or not value
        or value > MAX_TOKENS_CEILING
    ):
        body["max_tokens"] = DEFAULT_MAX_TOKENS
    return body


def resolve_provider_kind(settings: Settings) -> ProviderKind:
    """Pick the upstream from configured credentials; 500 when there are none."""
    kind = settings.provider_kind
    if kind is None:
        raise HTTPException(status_code=500, detail=MISSING_CREDENTIALS_DETAIL)
    return kind


async def forward_to_provider(body: dict, settings: Settings) -> tuple[ProviderKind, ProviderResponse]:
    """Route a request to whichever provider the credentials select."""
    kind = resolve_provider_kind(settings)
    bind(provider=kind.value)
    provider = get_provider(kind)
    result = await provider.chat_completion(body=body, api_key=settings.api_key_for(kind))
    return kind, result


async def close_client() -> None:
    """Gracefully close all providers on shutdown."""
    await close_all_providers()
