# bookly/utils/my_logging.py
"""Logging configuration"""
import logging
import sys
from bookly.config.settings import get_settings

# Decision components log every rejected candidate at DEBUG
ENGINE_LOGGERS = [
    "bookly.services.availability",
    "bookly.services.scheduling",
]

# Third-party loggers that drown the booking trail when verbose is off
NOISY_LOGGERS = [
    "sqlalchemy",
    "sqlalchemy.engine",
    "sqlalchemy.pool",
    "alembic",
    "uvicorn",
    "uvicorn.error",
    "uvicorn.access",
]


def setup_logging(verbose=True):
    """Configure application logging"""
    settings = get_settings()

    level = getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO) if verbose else logging.WARNING

    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    engine_level = getattr(logging, settings.ENGINE_LOG_LEVEL.upper(), level)
    for name in ENGINE_LOGGERS:
        logging.getLogger(name).setLevel(engine_level)

    if not verbose:
        for name in NOISY_LOGGERS:
            logger = logging.getLogger(name)
            logger.setLevel(logging.ERROR)
            logger.propagate = False
