"""Caller identification for rate limiting."""

from starlette.datastructures import Headers

USER_ID_HEADER = "x-user-id"
FORWARDED_FOR_HEADER = "x-forwarded-for"
UNKNOWN_CALLER = "unknown"


def caller_id(headers: Headers) -> str:
    """Explicit user id, else the first X-Forwarded-For hop, else "unknown".

    Unidentified callers all share the "unknown" bucket.
    """
    user_id = headers.get(USER_ID_HEADER)
    if user_id:
        return user_id

    forwarded = headers.get(FORWARDED_FOR_HEADER)
    if forwarded:
        first_hop = forwarded.split(",")[0].strip()
        if first_hop:
            return first_hop

    return UNKNOWN_CALLER
