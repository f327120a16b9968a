"""
JSON error bodies shared by handlers, middleware and exception handlers.

Every non-2xx response carries {"error": ...}; the error stage also adds
"details".
"""

from __future__ import annotations

from fastapi.responses import JSONResponse

from user_registry.core.exceptions import RegistryError


def error_response(exc: RegistryError) -> JSONResponse:
    """Render a typed outcome as its status code and {"error": message}."""
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


def json_error(status_code: int, message: str, details: str | None = None) -> JSONResponse:
    content = {"error": message}
    if details is not None:
        content["details"] = details
    return JSONResponse(status_code=status_code, content=content)
