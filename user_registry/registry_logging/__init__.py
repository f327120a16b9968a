"""
Structured logging for the User Registry service.

Use get_logger() in all modules so every line shares the same layout;
configure_logging() applies LOG_LEVEL / LOG_FORMAT from Settings.
"""

from user_registry.registry_logging.logger import configure_logging, get_logger

__all__ = ["configure_logging", "get_logger"]
