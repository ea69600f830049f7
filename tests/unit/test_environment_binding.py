"""
Tests for binding against the live process environment.
"""

from typing import Annotated, ClassVar

import pytest

from envbind.core.binder import bind_env
from envbind.core.exceptions import EnvVarMissingError, ParseError
from envbind.core.extraction import Env, EnvConfig


class DBConfig(EnvConfig):
    host: Annotated[str, Env(from_="HOST")]
    port: Annotated[int, Env(from_="PORT", default="5432")]


class Config(EnvConfig):
    db: Annotated[DBConfig, Env(prefix="DB_")]
    debug: bool | None


class PrefixedConfig(EnvConfig):
    env_prefix: ClassVar[str] = "TEST_"

    db_host: str
    db_port: int


class TestEnvironmentBinding:
    def test_init_from_env(self, clean_env):
        clean_env.setenv("DB_HOST", "localhost")
        clean_env.setenv("DB_PORT", "5432")
        clean_env.setenv("DEBUG", "true")

        config = Config.init_from_env()
        assert config.db.host == "localhost"
        assert config.db.port == 5432
        assert config.debug is True

    def test_init_is_init_from_env(self, clean_env):
        clean_env.setenv("DB_HOST", "localhost")
        assert Config.init() == Config.init_from_env()

    def test_missing_variable(self, clean_env):
        with pytest.raises(EnvVarMissingError) as exc_info:
            bind_env(Config)
        assert str(exc_info.value) == "Env variable is missing: DB_HOST"

    def test_unparseable_variable(self, clean_env):
        clean_env.setenv("DB_HOST", "localhost")
        clean_env.setenv("DB_PORT", "five")
        with pytest.raises(ParseError) as exc_info:
            bind_env(Config)
        assert str(exc_info.value) == "Failed to parse env variable: DB_PORT"

    def test_env_prefix(self, clean_env):
        clean_env.setenv("TEST_DB_HOST", "localhost")
        clean_env.setenv("TEST_DB_PORT", "5432")
        config = PrefixedConfig.init_from_env()
        assert (config.db_host, config.db_port) == ("localhost", 5432)

    def test_environment_changes_between_binds_are_seen(self, clean_env):
        clean_env.setenv("DB_HOST", "first")
        first = Config.init_from_env()
        clean_env.setenv("DB_HOST", "second")
        second = Config.init_from_env()
        assert (first.db.host, second.db.host) == ("first", "second")

    def test_init_or_exit(self, clean_env, capsys):
        with pytest.raises(SystemExit) as exc_info:
            Config.init_or_exit()
        assert exc_info.value.code == 1
        assert "DB_HOST" in capsys.readouterr().err

    def test_init_from_mapping_ignores_environment(self, clean_env):
        clean_env.setenv("DB_HOST", "from-env")
        config = Config.init_from_mapping({"DB_HOST": "from-map"})
        assert config.db.host == "from-map"
