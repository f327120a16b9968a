"""
HTTP middleware — error normalization, bearer-token auth, request logging.

Each stage is an async callable ``(request, call_next) -> Response``. The
stages are listed once at startup and composed into a single Starlette
middleware, first stage outermost:

    Error -> Auth -> Logging -> route handler

The order is security-critical. The error stage must wrap auth so a fault
inside auth still yields JSON. The logging stage sits innermost, so it does
not log requests rejected by auth, and a fault raised below it skips its
log line on the way out to the error stage.
"""

from __future__ import annotations

from typing import Awaitable, Callable, Sequence

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from user_registry.api_server.errors import error_response, json_error
from user_registry.config import Settings
from user_registry.core.exceptions import AuthError
from user_registry.registry_logging import get_logger

logger = get_logger(__name__)

Stage = Callable[[Request, RequestResponseEndpoint], Awaitable[Response]]

MSG_INTERNAL_ERROR = "Internal server error."
MSG_AUTH_MISSING = "Authorization header missing"
MSG_AUTH_INVALID = "Invalid or expired token"


async def error_stage(request: Request, call_next: RequestResponseEndpoint) -> Response:
    """Catch any downstream fault and answer 500 {error, details}; never re-raise."""
    try:
        return await call_next(request)
    except Exception as e:
        logger.exception(
            "unhandled_exception",
            method=request.method,
            path=request.url.path,
            error=str(e),
        )
        return json_error(500, MSG_INTERNAL_ERROR, details=str(e))


def _is_bypass_path(path: str, bypass_path: str) -> bool:
    """True for the bypass path itself and any sub-path below it (segment match)."""
    path = path.lower()
    bypass_path = bypass_path.lower()
    return path == bypass_path or path.startswith(bypass_path + "/")


def make_auth_stage(expected_authorization: str, health_path: str) -> Stage:
    """
    Build the auth stage for one exact Authorization value.

    The health path bypasses the check. Otherwise a missing header or any
    value other than expected_authorization is answered with 401 and the
    downstream chain is never called.
    """

    async def auth_stage(request: Request, call_next: RequestResponseEndpoint) -> Response:
        if _is_bypass_path(request.url.path, health_path):
            return await call_next(request)

        token = request.headers.get("authorization")
        if token is None:
            logger.info("auth_rejected", path=request.url.path, reason="missing")
            return error_response(AuthError(MSG_AUTH_MISSING))
        if token != expected_authorization:
            logger.info("auth_rejected", path=request.url.path, reason="invalid")
            return error_response(AuthError(MSG_AUTH_INVALID))

        return await call_next(request)

    return auth_stage


async def logging_stage(request: Request, call_next: RequestResponseEndpoint) -> Response:
    """Log method, path and final status once the downstream response is ready."""
    method = request.method
    path = request.url.path

    response = await call_next(request)

    logger.info("request_completed", method=method, path=path, status=response.status_code)
    return response


def build_stages(settings: Settings) -> list[Stage]:
    """The fixed pipeline order: Error wraps Auth wraps Logging."""
    return [
        error_stage,
        make_auth_stage(settings.expected_authorization, settings.health_path),
        logging_stage,
    ]


def compose(stages: Sequence[Stage], endpoint: RequestResponseEndpoint) -> RequestResponseEndpoint:
    """Fold stages around endpoint so stages[0] is outermost."""
    handler = endpoint
    for stage in reversed(stages):
        handler = _bind(stage, handler)
    return handler


def _bind(stage: Stage, downstream: RequestResponseEndpoint) -> RequestResponseEndpoint:
    async def call(request: Request) -> Response:
        return await stage(request, downstream)

    return call


class PipelineMiddleware(BaseHTTPMiddleware):
    """Runs the ordered stage list around route dispatch."""

    def __init__(self, app: ASGIApp, stages: Sequence[Stage]) -> None:
        super().__init__(app)
        self.stages = tuple(stages)

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        return await compose(self.stages, call_next)(request)
