"""
Pytest configuration for envbind tests: shared fixtures for environment
isolation and logger state.
"""

import logging

import pytest

# Keys the environment-backed tests read; cleared before each test so a
# developer's shell cannot leak into results.
_TEST_KEYS = (
    "HOST", "PORT", "DB_HOST", "DB_PORT", "CACHE_HOST", "CACHE_PORT",
    "DB1_HOST", "DB1_PORT", "DB2_HOST", "DB2_PORT",
    "TEST_DB_HOST", "TEST_DB_PORT", "DEBUG", "TIMEOUT",
    "SVC_DB_HOST", "SVC_DB_PORT", "SVC_DEBUG", "SVC_TIMEOUT",
    "ENVBIND_LOG_LEVEL", "ENVBIND_LOG_FORMAT",
)


@pytest.fixture
def clean_env(monkeypatch):
    """Remove every key the suite uses from os.environ."""
    for key in _TEST_KEYS:
        monkeypatch.delenv(key, raising=False)
    return monkeypatch


@pytest.fixture(autouse=True)
def reset_envbind_logger():
    """Undo handlers and levels installed by configure_logging."""
    root = logging.getLogger("envbind")
    handlers = list(root.handlers)
    level = root.level
    yield
    for handler in list(root.handlers):
        if handler not in handlers:
            root.removeHandler(handler)
    root.setLevel(level)
