"""Chat Proxy — FastAPI application entry point.

Forwards chat requests from the browser client to Anthropic or
OpenRouter (whichever key is configured), applying per-caller rate
limits and CORS, and always answering in the Anthropic content shape.
"""

import math
import time
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse, PlainTextResponse, Response
from starlette.exceptions import HTTPException as StarletteHTTPException

from src.config.settings import get_settings
from src.logging.audit import bind_request, elapsed_ms, get_audit_logger, setup_logging
from src.proxy.cors import cors_headers
from src.proxy.handler import (
    clamp_max_tokens,
    close_client,
    forward_to_provider,
    has_valid_messages,
)
from src.proxy.identity import caller_id
from src.ratelimit.factory import close_rate_limiter, get_rate_limiter
from src.ratelimit.limiter import RateLimiter

VERSION = "1.0.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown lifecycle hooks."""
    setup_logging()
    settings = get_settings()
    kind = settings.provider_kind
    get_audit_logger().info(
        "Proxy started",
        extra={"audit_data": {
            "provider": kind.value if kind else None,
            "rate_limit_backend": settings.rate_limit_backend,
        }},
    )
    yield
    await close_client()
    await close_rate_limiter()
    get_audit_logger().info("Proxy stopped")


app = FastAPI(
    title="Chat Proxy",
    description="Rate-limited proxy for LLM chat requests",
    version=VERSION,
    lifespan=lifespan,
)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Render every HTTP error as `{"error": ...}` with CORS headers.

    405s (any method the proxy route does not serve) keep the plain-text body.
    """
    if exc.status_code == 405:
        return PlainTextResponse("Method not allowed", status_code=405)
    if exc.status_code >= 500:
        get_audit_logger().error(
            "Request failed",
            extra={"audit_data": {"status": exc.status_code, "error": exc.detail}},
        )
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=cors_headers(request.headers.get("origin"), get_settings()),
    )


@app.get("/health")
async def health():
    kind = get_settings().provider_kind
    return {"status": "healthy", "version": VERSION, "provider": kind.value if kind else None}


@app.options("/{path:path}")
async def preflight(request: Request, path: str):
    """CORS preflight for any path. Never touches the rate limiter."""
    return Response(status_code=204, headers=cors_headers(request.headers.get("origin"), get_settings()))


@app.post("/proxy")
async def proxy(request: Request, limiter: RateLimiter = Depends(get_rate_limiter)):
    """Single proxy endpoint.

    Pipeline: Caller ID -> Rate Limit -> Parse Body -> Clamp max_tokens -> Select Provider -> Forward -> Normalize -> Log
    """
    logger = get_audit_logger()
    caller = caller_id(request.headers)
    rid = bind_request(caller)

    settings = get_settings()
    cors = cors_headers(request.headers.get("origin"), settings)

    # 1. Rate limiting (per caller), counted before anything can fail
    rate_result = await limiter.check(caller)
    if not rate_result.allowed:
        logger.warning(
            "Rate limit exceeded",
            extra={"audit_data": {
                "rate_limit": rate_result.limit,
                "retry_after": rate_result.reset_seconds,
            }},
        )
        return JSONResponse(
            status_code=429,
            content={"error": "Too many requests. Please wait a while."},
            headers={
                **cors,
                "Retry-After": str(math.ceil(rate_result.reset_seconds)),
                "X-RateLimit-Limit": str(rate_result.limit),
                "X-RateLimit-Remaining": "0",
            },
        )

    # 2. Body parsing
    try:
        body = await request.json()
    except ValueError:
        body = None
    if not isinstance(body, dict) or not has_valid_messages(body):
        logger.info("Invalid request body")
        return JSONResponse(status_code=400, content={"error": "Invalid body"}, headers=cors)

    # 3. Output budget, applied the same way for every provider
    clamp_max_tokens(body)

    # 4. Provider selection + upstream call (500 / 502 raised as HTTPException)
    started = time.perf_counter()
    _, result = await forward_to_provider(body, settings)

    logger.info(
        "Request proxied",
        extra={"audit_data": {
            "model": body.get("model"),
            "max_tokens": body.get("max_tokens"),
            "upstream_status": result.status_code,
            "latency_ms": elapsed_ms(started),
            "rate_limit_remaining": rate_result.remaining,
        }},
    )

    return JSONResponse(
        status_code=result.status_code,
        content=result.body,
        headers={
            **cors,
            "X-RateLimit-Limit": str(rate_result.limit),
            "X-RateLimit-Remaining": str(rate_result.remaining),
            "X-Request-Id": rid,
        },
    )
