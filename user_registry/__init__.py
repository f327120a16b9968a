"""
User Registry — minimal HTTP service for CRUD over an in-memory user store.

Requests pass through a fixed middleware pipeline (error normalization,
static bearer-token authentication, request logging) before reaching the
user handlers. State lives only in process memory.
"""

__version__ = "0.1.0"
