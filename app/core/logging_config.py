# app/core/logging_config.py
"""
Logging setup for the bundle app.

Application loggers (everything under ``app.``) follow LOG_LEVEL. Libraries
that would otherwise log every Shopify round trip or page hit are held at
WARNING.
"""

import logging
import os

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

# httpx/httpcore log each GraphQL POST; uvicorn.access logs each page load
QUIET_LOGGERS = ("httpx", "httpcore", "uvicorn.access")


def configure_logging(level: str | None = None):
    """Configure the root handler and per-library levels.

    ``level`` wins over the LOG_LEVEL environment variable; unknown names fall
    back to INFO.
    """
    level_name = (level or os.environ.get("LOG_LEVEL", "INFO")).upper()
    resolved = getattr(logging, level_name, logging.INFO)

    logging.basicConfig(level=resolved, format=LOG_FORMAT, handlers=[logging.StreamHandler()])

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    logging.getLogger("app").setLevel(resolved)

    logging.getLogger(__name__).info(f"Logging configured at level: {logging.getLevelName(resolved)}")
