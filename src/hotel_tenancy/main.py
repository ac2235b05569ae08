"""hotel-tenancy entry point."""

import uvicorn

from .config.logging_config import LoggingConfig
from .config.settings import get_settings

LoggingConfig.configure()

from .api.app import create_app  # noqa: E402

logger = LoggingConfig.get_logger(__name__)


def main() -> None:
    """Run the application."""
    settings = get_settings()
    logger.info(f"Starting {settings.app_name} on {settings.host}:{settings.port}")

    uvicorn.run(
        create_app(settings),
        host=settings.host,
        port=settings.port,
        log_level="debug" if settings.debug else "info",
        access_log=True,
    )


if __name__ == "__main__":
    main()
