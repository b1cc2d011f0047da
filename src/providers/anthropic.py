"""Anthropic Messages API adapter (primary provider)."""

from src.providers.base import ProviderAdapter, ProviderKind, UpstreamRequest

ALLOWED_MODELS = ("claude-sonnet-4-6", "claude-haiku-4-5-20251001")
DEFAULT_MODEL = "claude-sonnet-4-6"


class AnthropicAdapter(ProviderAdapter):
    """Forwards the inbound body almost unchanged, it is already in Messages shape."""

    kind = ProviderKind.ANTHROPIC

    def __init__(
        self,
        base_url: str = "https://api.anthropic.com",
        api_version: str = "2023-06-01",
        timeout: float = 60.0,
    ):
        super().__init__(timeout=timeout)
        self._base_url = base_url.rstrip("/")
        self._api_version = api_version

    def translate(self, body: dict, api_key: str) -> UpstreamRequest:
        request_body = dict(body)
        if request_body.get("model") not in ALLOWED_MODELS:
            request_body["model"] = DEFAULT_MODEL

        return UpstreamRequest(
            url=f"{self._base_url}/v1/messages",
            headers={
                "Content-Type": "application/json",
                "x-api-key": api_key,
                "anthropic-version": self._api_version,
            },
            body=request_body,
        )
