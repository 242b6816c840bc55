"""Centralized logging configuration."""

import logging

from config import settings

# Libraries that log every request or query at INFO/DEBUG
QUIET_LOGGERS = (
    "sqlalchemy.engine",
    "sqlalchemy.pool",
    "httpx",
    "httpcore",
    "urllib3",
    "yfinance",
    "keyring",
)


def setup_logging(level: str | None = None) -> None:
    """Configure the root logger.

    Uses ``settings.LOG_LEVEL`` unless ``level`` is given, and caps the
    loggers in :data:`QUIET_LOGGERS` at WARNING.
    """
    logging.basicConfig(
        format="%(asctime)s %(levelname)-8s %(name)s  %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        level=getattr(logging, (level or settings.LOG_LEVEL).upper()),
        force=True,
    )

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
