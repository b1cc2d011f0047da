"""CORS headers for the browser client."""

from src.config.settings import Settings

ALLOW_METHODS = "POST, OPTIONS"
ALLOW_HEADERS = "Content-Type, x-user-id"


def cors_headers(origin: str | None, settings: Settings) -> dict[str, str]:
    """Echo the request Origin when allow-listed, else the first allowed origin."""
    allowed = settings.allowed_origins_list
    if origin and origin in allowed:
        allow_origin = origin
    else:
        allow_origin = allowed[0] if allowed else ""

    headers = {
        "Access-Control-Allow-Methods": ALLOW_METHODS,
        "Access-Control-Allow-Headers": ALLOW_HEADERS,
    }
    if allow_origin:
        headers["Access-Control-Allow-Origin"] = allow_origin
    return headers
