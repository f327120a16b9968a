"""
Configuration management for the User Registry service.

Loads settings from environment variables and an optional .env file at the
project root. Exposes a single source of truth for service configuration.
"""

from user_registry.config.settings import Settings, get_settings  # noqa: F401

__all__ = ["Settings", "get_settings"]
