"""
Application entry point.

Configures logging and error tracking, then builds the app for the service
selected by SERVICE_NAME.
"""

import logging

import sentry_sdk

from clinic.config.settings import get_settings
from clinic.core.app_factory import create_app
from clinic.core.shared.logger import configure_logging

settings = get_settings()

# Configure logging
configure_logging(level=settings.LOG_LEVEL, format_type=settings.LOG_FORMAT)
logger = logging.getLogger(__name__)

# Initialize Sentry for error tracking
if settings.SENTRY_DSN:
    sentry_sdk.init(
        dsn=settings.SENTRY_DSN,
        send_default_pii=False,
        environment=settings.ENVIRONMENT,
    )

# Create application using factory
app = create_app(settings)


def run() -> None:
    """Run the configured service with uvicorn."""
    import uvicorn

    logger.info(f"Starting {settings.SERVICE_NAME} service in {settings.ENVIRONMENT} mode")
    uvicorn.run(
        "clinic.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
    )


if __name__ == "__main__":
    run()
