"""
Application-level exceptions.

Each class carries the HTTP status its outcome maps to. Handlers return
validation and not-found outcomes as JSON responses; only ConflictError is
raised across the registry boundary, and anything else unexpected is left
for the error stage.
"""

from __future__ import annotations


class RegistryError(Exception):
    """Base class for user registry errors."""

    status_code = 500

    def __init__(self, message: str = "") -> None:
        super().__init__(message)
        self.message = message


class ValidationError(RegistryError):
    """Missing required fields or malformed email."""

    status_code = 400


class AuthError(RegistryError):
    """Authorization header missing or not the expected bearer value."""

    status_code = 401


class NotFoundError(RegistryError):
    """No user with the requested id."""

    status_code = 404


class ConflictError(RegistryError):
    """Insert collided with an existing id, or a compare-and-swap update lost a race."""

    status_code = 500
