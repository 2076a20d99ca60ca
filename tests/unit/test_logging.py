"""
Unit tests for logging setup.
"""

import logging

import pytest

from bookly.config.settings import get_settings
from bookly.utils.my_logging import ENGINE_LOGGERS, setup_logging


@pytest.fixture(autouse=True)
def restore_levels():
    """Leave logger levels as they were."""
    names = ENGINE_LOGGERS + ["sqlalchemy"]
    saved = {name: (logging.getLogger(name).level, logging.getLogger(name).propagate) for name in names}
    yield
    for name, (level, propagate) in saved.items():
        logging.getLogger(name).setLevel(level)
        logging.getLogger(name).propagate = propagate


def test_engine_level_is_configurable(monkeypatch):
    """Decision tracing can be switched on without raising the global level."""
    monkeypatch.setattr(get_settings(), "ENGINE_LOG_LEVEL", "DEBUG")

    setup_logging()

    for name in ENGINE_LOGGERS:
        assert logging.getLogger(name).level == logging.DEBUG


def test_quiet_mode_silences_third_party_loggers():
    """Non-verbose runs only show errors from the database layer."""
    setup_logging(verbose=False)

    assert logging.getLogger("sqlalchemy").level == logging.ERROR
    assert logging.getLogger("sqlalchemy").propagate is False
