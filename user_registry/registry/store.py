"""
In-memory user registry — thread-safe id → User map.

One lock guards both the map and the id counter. Each public call holds the
lock only for its own critical section; there are no multi-call transactions.
Ids start at 1, only ever increase, and are never reused after a delete.
"""

from __future__ import annotations

import threading
from dataclasses import replace
from datetime import datetime, timezone
from typing import Callable

from user_registry.core.exceptions import ConflictError
from user_registry.registry.models import User, UserCandidate
from user_registry.registry_logging import get_logger

logger = get_logger(__name__)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class UserRegistry:
    """Authoritative store of User records for the lifetime of the process."""

    def __init__(self, clock: Callable[[], datetime] = utc_now) -> None:
        self._lock = threading.Lock()
        self._users: dict[int, User] = {}
        self._last_id = 0
        self._clock = clock

    def __len__(self) -> int:
        with self._lock:
            return len(self._users)

    def _next_id(self) -> int:
        with self._lock:
            self._last_id += 1
            return self._last_id

    def create(self, candidate: UserCandidate) -> User:
        """Assign the next id, stamp created_at, store and return the new record."""
        user = User(
            id=self._next_id(),
            username=candidate.username,
            email=candidate.email,
            full_name=candidate.full_name,
            created_at=self._clock(),
            updated_at=None,
        )
        with self._lock:
            if user.id in self._users:
                logger.error("registry_conflict", op="create", user_id=user.id)
                raise ConflictError(f"User id {user.id} already exists")
            self._users[user.id] = user
        return user

    def list_all(self) -> list[User]:
        """Snapshot of all records; order is not guaranteed."""
        with self._lock:
            return list(self._users.values())

    def get(self, user_id: int) -> User | None:
        with self._lock:
            return self._users.get(user_id)

    def update(self, user_id: int, candidate: UserCandidate) -> User | None:
        """
        Replace a record wholesale, keeping id and created_at.

        Returns None if the id is absent. The replacement is stored only if
        the record read at the start is still the stored one; otherwise
        (deleted or replaced in between) ConflictError is raised and nothing
        is written, so a deleted user is never brought back.
        """
        existing = self.get(user_id)
        if existing is None:
            return None
        updated = replace(
            existing,
            username=candidate.username,
            email=candidate.email,
            full_name=candidate.full_name,
            updated_at=self._clock(),
        )
        with self._lock:
            if self._users.get(user_id) is not existing:
                logger.warning("registry_conflict", op="update", user_id=user_id)
                raise ConflictError(f"User {user_id} changed during update")
            self._users[user_id] = updated
        return updated

    def delete(self, user_id: int) -> bool:
        """Remove a record. Returns False if the id is absent."""
        with self._lock:
            return self._users.pop(user_id, None) is not None
