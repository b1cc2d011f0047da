"""Abstract base for upstream LLM provider adapters."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum

import httpx
from fastapi import HTTPException

UPSTREAM_ERROR_DETAIL = "Error connecting to the upstream API"


class ProviderKind(str, Enum):
    ANTHROPIC = "anthropic"    # primary
    OPENROUTER = "openrouter"  # secondary


@dataclass
class UpstreamRequest:
    url: str
    headers: dict
    body: dict


@dataclass
class ProviderResponse:
    status_code: int
    body: dict | list


class ProviderAdapter(ABC):
    """Translates inbound requests to one provider's wire shape and back.

    Subclasses implement `translate` and may override `normalize`; the
    HTTP round trip is shared.
    """

    kind: ProviderKind

    def __init__(self, timeout: float = 60.0):
        self._timeout = timeout
        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(timeout=httpx.Timeout(self._timeout, connect=10.0))
        return self._client

    @abstractmethod
    def translate(self, body: dict, api_key: str) -> UpstreamRequest:
        """Build the upstream request for an already clamped inbound body.

        Args:
            body: Inbound request body (Anthropic Messages shape).
            api_key: Credential for this provider.
        """
        ...

    def normalize(self, payload):
        """Map the upstream payload to the canonical shape. Default: verbatim."""
        return payload

    async def chat_completion(self, body: dict, api_key: str) -> ProviderResponse:
        """Translate, send and normalize a single chat completion.

        Transport failures and undecodable upstream bodies are both reported
        as a 502 with the same detail.
        """
        upstream = self.translate(body, api_key)

        client = await self._get_client()
        try:
            response = await client.post(upstream.url, json=upstream.body, headers=upstream.headers)
            payload = response.json()
        except (httpx.HTTPError, ValueError):
            raise HTTPException(status_code=502, detail=UPSTREAM_ERROR_DETAIL)

        return ProviderResponse(status_code=response.status_code, body=self.normalize(payload))

    async def close(self) -> None:
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None
