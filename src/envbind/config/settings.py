"""
Pydantic Settings for envbind itself
=====================================

The library reads only two settings of its own, both from ``ENVBIND_*``
environment variables, and uses them to set up logging for the CLI.
"""

import logging
import sys
from importlib import metadata

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_TEXT_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
_JSON_FORMAT = "%(message)s"


def _project_version() -> str:
    """Resolve the project version from package metadata."""
    try:
        return metadata.version("envbind")
    except metadata.PackageNotFoundError:
        return "0.0.0-dev"


class EnvBindSettings(BaseSettings):
    """
    Runtime settings for envbind.

    Environment variables:
      ENVBIND_LOG_LEVEL   DEBUG | INFO | WARNING | ERROR | CRITICAL
      ENVBIND_LOG_FORMAT  json | text
    """

    log_level: str = Field("WARNING", description="Log level for the envbind loggers")
    log_format: str = Field("text", description="Log format (json, text)")

    model_config = SettingsConfigDict(env_prefix='ENVBIND_', extra='ignore')

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        valid_levels = {'DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'}
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(f"Log level must be one of: {', '.join(sorted(valid_levels))}")
        return v_upper

    @field_validator('log_format')
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        v_lower = v.lower()
        if v_lower not in {'json', 'text'}:
            raise ValueError("Log format must be 'json' or 'text'")
        return v_lower


def configure_logging(settings: EnvBindSettings | None = None) -> logging.Logger:
    """
    Attach a stderr handler to the ``envbind`` logger.

    Structured log lines are already JSON, so the json format prints the
    message alone; the text format prefixes time, level and logger name.
    Calling this twice replaces the handler instead of stacking a second one.
    """
    settings = settings or EnvBindSettings()
    root = logging.getLogger("envbind")
    root.setLevel(settings.log_level)

    for handler in list(root.handlers):
        if getattr(handler, '_envbind_handler', False):
            root.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(_JSON_FORMAT if settings.log_format == 'json' else _TEXT_FORMAT))
    handler._envbind_handler = True
    root.addHandler(handler)
    return root
