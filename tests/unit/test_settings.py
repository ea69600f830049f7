"""Tests for envbind.config.settings: the library's own settings and logging setup"""

import logging

import pytest
from pydantic import ValidationError

from envbind.config.settings import EnvBindSettings, _project_version, configure_logging


class TestEnvBindSettings:
    def test_defaults(self, clean_env):
        settings = EnvBindSettings()
        assert settings.log_level == "WARNING"
        assert settings.log_format == "text"

    def test_reads_prefixed_environment(self, clean_env):
        clean_env.setenv("ENVBIND_LOG_LEVEL", "debug")
        clean_env.setenv("ENVBIND_LOG_FORMAT", "JSON")
        settings = EnvBindSettings()
        assert settings.log_level == "DEBUG"
        assert settings.log_format == "json"

    def test_invalid_level(self, clean_env):
        with pytest.raises(ValidationError, match="Log level"):
            EnvBindSettings(log_level="LOUD")

    def test_invalid_format(self, clean_env):
        with pytest.raises(ValidationError):
            EnvBindSettings(log_format="xml")

    def test_project_version_returns_string(self):
        assert isinstance(_project_version(), str)


class TestConfigureLogging:
    def test_sets_level(self, clean_env):
        root = configure_logging(EnvBindSettings(log_level="DEBUG"))
        assert root.name == "envbind"
        assert root.level == logging.DEBUG

    def test_does_not_stack_handlers(self, clean_env):
        configure_logging(EnvBindSettings())
        configure_logging(EnvBindSettings())
        owned = [h for h in logging.getLogger("envbind").handlers if getattr(h, '_envbind_handler', False)]
        assert len(owned) == 1

    def test_json_format_prints_message_only(self, clean_env):
        root = configure_logging(EnvBindSettings(log_format="json"))
        handler = [h for h in root.handlers if getattr(h, '_envbind_handler', False)][0]
        assert handler.formatter._fmt == "%(message)s"
