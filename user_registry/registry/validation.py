"""
Input validation and normalization for user create/update bodies.

Pure functions; no registry access. Email checks are shape-only (no DNS or
deliverability lookups).
"""

from __future__ import annotations

import re

from user_registry.registry.models import UserCandidate

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$", re.IGNORECASE)

MSG_REQUIRED = "Username and Email are required."
MSG_INVALID_EMAIL = "Invalid email format."


def _is_blank(value: str | None) -> bool:
    return value is None or not value.strip()


def is_valid_email(email: str | None) -> bool:
    """Return True if email is non-blank and looks like local@domain.tld."""
    if _is_blank(email):
        return False
    return EMAIL_PATTERN.match(email) is not None


def validate_user_input(username: str | None, email: str | None) -> str | None:
    """
    Check required fields, then email shape.

    Returns the client-facing error message, or None when the input is valid.
    The email is checked as received; surrounding whitespace fails the pattern.
    """
    if _is_blank(username) or _is_blank(email):
        return MSG_REQUIRED
    if not is_valid_email(email):
        return MSG_INVALID_EMAIL
    return None


def normalize(username: str, email: str, full_name: str | None = None) -> UserCandidate:
    """Trim all fields and lowercase the email."""
    return UserCandidate(
        username=username.strip(),
        email=email.strip().lower(),
        full_name=full_name.strip() if full_name is not None else None,
    )
