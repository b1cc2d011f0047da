"""OpenRouter chat-completions adapter (secondary provider).

Converts Anthropic-style messages to OpenAI-style ones on the way out and
repackages the completion text in the Anthropic content-block shape on the
way back, so the browser client only ever sees one response format.
"""

from src.logging.audit import get_audit_logger
from src.providers.base import ProviderAdapter, ProviderKind, UpstreamRequest

UPSTREAM_MODEL = "anthropic/claude-sonnet-4-5"


def flatten_content(content):
    """Join the text parts of a structured content list with newlines.

    Non-text parts (images, tool blocks) are dropped and a missing or null
    `text` counts as empty. Plain strings are returned as-is.
    """
    if isinstance(content, list):
        return "\n".join(
            _as_text(part.get("text"))
            for part in content
            if isinstance(part, dict) and part.get("type") == "text"
        )
    return content


def _as_text(value) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


class OpenRouterAdapter(ProviderAdapter):
    """Sends requests to OpenRouter with a fixed upstream model."""

    kind = ProviderKind.OPENROUTER

    def __init__(
        self,
        base_url: str = "https://openrouter.ai/api",
        referer: str = "",
        title: str = "",
        timeout: float = 60.0,
    ):
        super().__init__(timeout=timeout)
        self._base_url = base_url.rstrip("/")
        self._referer = referer
        self._title = title

    def translate(self, body: dict, api_key: str) -> UpstreamRequest:
        messages = [
            {"role": msg.get("role"), "content": flatten_content(msg.get("content"))}
            for msg in body.get("messages") or []
            if isinstance(msg, dict)
        ]

        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {api_key}",
        }
        if self._referer:
            headers["HTTP-Referer"] = self._referer
        if self._title:
            headers["X-Title"] = self._title

        return UpstreamRequest(
            url=f"{self._base_url}/v1/chat/completions",
            headers=headers,
            body={
                "model": UPSTREAM_MODEL,
                "max_tokens": body.get("max_tokens"),
                "messages": messages,
            },
        )

    def normalize(self, payload):
        """Wrap `choices[0].message.content` as a single text block.

        Payloads without that shape (upstream errors, unexpected formats)
        are passed through unchanged.
        """
        text = _completion_text(payload)
        if text:
            return {"content": [{"type": "text", "text": text}]}

        get_audit_logger().warning(
            "Unrecognized upstream response shape",
            extra={"audit_data": {
                "keys": sorted(payload) if isinstance(payload, dict) else type(payload).__name__,
            }},
        )
        return payload


def _completion_text(payload) -> str:
    if not isinstance(payload, dict):
        return ""
    choices = payload.get("choices")
    if not isinstance(choices, list) or not choices or not isinstance(choices[0], dict):
        return ""
    message = choices[0].get("message")
    if not isinstance(message, dict):
        return ""
    content = message.get("content")
    return content if isinstance(content, str) else ""
