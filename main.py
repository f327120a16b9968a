"""
Main entrypoint: run the User Registry API with uvicorn.

Env: API_TOKEN, API_HOST, API_PORT, HEALTH_PATH, LOG_LEVEL, LOG_FORMAT (see
user_registry.config). State is in memory only and is lost on exit.

Equivalent: uvicorn user_registry.api_server.app:app --host 0.0.0.0 --port 8000
"""

# Default JSON logging until settings are loaded
from user_registry.registry_logging import configure_logging, get_logger

logger = get_logger("main")


def main() -> None:
    """Load settings and serve the API in the main thread until SIGINT/SIGTERM."""
    from user_registry.config import get_settings

    settings = get_settings()
    configure_logging(settings.log_level, settings.log_format)

    from user_registry.api_server.app import app
    import uvicorn

    logger.info("server_starting", host=settings.api_host, port=settings.api_port)
    uvicorn.run(app, host=settings.api_host, port=settings.api_port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    main()
