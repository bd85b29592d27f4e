"""
Main entrypoint: Credit Passport API server.

Env: GEMINI_API_KEY, PINATA_JWT (or PINATA_API_KEY + PINATA_SECRET_API_KEY),
API_HOST, API_PORT, LOG_LEVEL, LOG_FORMAT.

Equivalent: uvicorn credit_passport.api_server.app:app --host 0.0.0.0 --port 8000
"""

# Configure structured JSON logging before other imports that may log
from credit_passport.passport_logging import get_logger

logger = get_logger("main")


def main() -> None:
    """Check configuration, then run the FastAPI server in the main thread."""
    from credit_passport.config import get_settings

    settings = get_settings()
    if not settings.gemini_api_key:
        logger.warning("main_config_warning", message="GEMINI_API_KEY is not set; /api/extract will return 500")

    from credit_passport.api_server.app import app
    import uvicorn

    logger.info("main_server_starting", host=settings.api_host, port=settings.api_port)
    uvicorn.run(app, host=settings.api_host, port=settings.api_port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    main()
