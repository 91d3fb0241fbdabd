"""Request interceptors composed around the router."""

import time
from typing import Awaitable, Callable, Sequence

import structlog
from fastapi import FastAPI, Request, Response
from fastapi.responses import PlainTextResponse
from starlette.middleware.base import BaseHTTPMiddleware

from bookstore.core.errors import InvalidContentTypeError

logger = structlog.get_logger(__name__)

CallNext = Callable[[Request], Awaitable[Response]]
Interceptor = Callable[[Request, CallNext], Awaitable[Response]]

# Methods that carry no body and skip the Content-Type check
READ_ONLY_METHODS = frozenset({"GET", "DELETE"})

JSON_MEDIA_TYPE = "application/json"

# RFC 2045 tspecials
_TSPECIALS = frozenset('()<>@,;:\\"/[]?=')


def _is_token(value: str) -> bool:
    return bool(value) and all(
        33 <= ord(c) < 127 and c not in _TSPECIALS for c in value
    )


def parse_media_type(value: str) -> tuple[str, dict[str, str]]:
    """
    Parse a Content-Type header into a lowercase media type and its parameters.

    Raises:
        InvalidContentTypeError: if the header is empty or malformed
    """
    base, _, rest = value.partition(";")
    base = base.strip().lower()
    major, slash, minor = base.partition("/")

    if not major:
        raise InvalidContentTypeError("mime: no media type")
    if not slash or not _is_token(major):
        raise InvalidContentTypeError("mime: expected slash after first token")
    if not minor:
        raise InvalidContentTypeError("mime: expected token after slash")
    if not _is_token(minor):
        raise InvalidContentTypeError("mime: unexpected content after media subtype")

    params: dict[str, str] = {}
    for part in rest.split(";"):
        part = part.strip()
        if not part:
            continue
        key, eq, val = part.partition("=")
        key = key.strip().lower()
        if not eq or not _is_token(key):
            raise InvalidContentTypeError("mime: invalid media parameter")
        params[key] = val.strip().strip('"')
    return f"{major}/{minor}", params


async def log_requests(request: Request, call_next: CallNext) -> Response:
    """Log a summary line for every request and its outcome."""
    client = request.client
    remote = f"{client.host}:{client.port}" if client else "unknown"
    logger.info(
        f"recv a {request.method} request from {remote}",
        method=request.method,
        path=request.url.path,
    )

    start = time.perf_counter()
    response = await call_next(request)
    logger.info(
        "Request handled",
        method=request.method,
        path=request.url.path,
        status=response.status_code,
        elapsed_ms=round((time.perf_counter() - start) * 1000, 2),
    )
    return response


async def validate_content_type(request: Request, call_next: CallNext) -> Response:
    """Reject write requests whose body is not declared as JSON."""
    if request.method in READ_ONLY_METHODS:
        return await call_next(request)

    try:
        media_type, _ = parse_media_type(request.headers.get("content-type", ""))
    except InvalidContentTypeError as e:
        logger.info("Rejected request", path=request.url.path, error=str(e))
        return PlainTextResponse(str(e), status_code=e.status_code)

    if media_type != JSON_MEDIA_TYPE:
        logger.info("Rejected request", path=request.url.path, media_type=media_type)
        return PlainTextResponse("invalid Content-Type", status_code=415)

    return await call_next(request)


# Outermost first
DEFAULT_CHAIN: tuple[Interceptor, ...] = (log_requests, validate_content_type)


def install_middleware(app: FastAPI, chain: Sequence[Interceptor] = DEFAULT_CHAIN) -> None:
    """Wrap the app's router in the given interceptors, first entry outermost."""
    # add_middleware pushes onto the outside, so install innermost first
    for interceptor in reversed(chain):
        app.add_middleware(BaseHTTPMiddleware, dispatch=interceptor)
