import logging
import sys

from app.core.config import settings


def configure_logging(level: str | None = None) -> logging.Logger:
    """Attach a single stdout handler to the `app` logger hierarchy."""
    app_logger = logging.getLogger("app")
    app_logger.setLevel(level or settings.LOG_LEVEL)

    for handler in list(app_logger.handlers):
        app_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(settings.LOG_FORMAT))
    app_logger.addHandler(handler)

    # Keep app logs out of uvicorn's root handler to avoid duplicates.
    app_logger.propagate = False
    logging.getLogger("httpx").setLevel(logging.WARNING)
    return app_logger
