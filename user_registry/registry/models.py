"""
User record types held by the registry.

Records are frozen: an update stores a new User rather than mutating the old
one, which lets the store detect concurrent replacement by identity.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class UserCandidate:
    """Normalized client input for create/update (trimmed, email lowercased)."""

    username: str
    email: str
    full_name: str | None = None


@dataclass(frozen=True)
class User:
    id: int
    username: str
    email: str
    full_name: str | None
    created_at: datetime
    updated_at: datetime | None = None

