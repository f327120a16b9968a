"""
Registry package — in-memory user store, record types and input validation.

The store is the only owner of User records; nothing else touches its map.
"""

from user_registry.registry.models import User, UserCandidate
from user_registry.registry.store import UserRegistry

__all__ = ["User", "UserCandidate", "UserRegistry"]
