"""
FastAPI server — user CRUD behind the error/auth/logging pipeline.

create_app() builds a fresh app with its own registry; the module-level
``app`` is the process-wide instance served by uvicorn. Config via env
(see user_registry.config).
"""

from __future__ import annotations

from typing import Any

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from user_registry import __version__
from user_registry.api_server.errors import error_response
from user_registry.api_server.middleware import PipelineMiddleware, build_stages
from user_registry.api_server.routes import router as users_router
from user_registry.config import Settings, get_settings
from user_registry.core.exceptions import ValidationError
from user_registry.registry import UserRegistry
from user_registry.registry_logging import configure_logging, get_logger

logger = get_logger(__name__)

MSG_INVALID_BODY = "Invalid request body."


def create_app(settings: Settings | None = None, registry: UserRegistry | None = None) -> FastAPI:
    """Build the ASGI app: routes, JSON exception handlers and the middleware pipeline."""
    settings = settings or get_settings()
    configure_logging(settings.log_level, settings.log_format)

    app = FastAPI(
        title="User Registry API",
        description="CRUD over an in-memory user registry behind static bearer-token auth.",
        version=__version__,
    )
    app.state.settings = settings
    app.state.registry = registry if registry is not None else UserRegistry()

    app.include_router(users_router)

    @app.get(settings.health_path)
    def health() -> dict[str, str]:
        """Liveness probe; no auth required."""
        return {"status": "Healthy"}

    @app.exception_handler(StarletteHTTPException)
    def http_exception_handler(request: Any, exc: StarletteHTTPException) -> JSONResponse:
        """Consistent JSON error response for framework HTTP errors (unknown route, wrong method)."""
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": str(exc.detail)},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    def request_validation_handler(request: Any, exc: RequestValidationError) -> JSONResponse:
        """Malformed JSON or wrongly typed fields are a 400, like a failed field check."""
        logger.info("request_body_invalid", path=request.url.path, errors=len(exc.errors()))
        return error_response(ValidationError(MSG_INVALID_BODY))

    app.add_middleware(PipelineMiddleware, stages=build_stages(settings))
    return app


app = create_app()
