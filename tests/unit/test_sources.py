"""
Tests for envbind.config.sources: environment and mapping lookups.
"""

from types import MappingProxyType

import pytest

from envbind.config.sources import EnvironmentSource, MapSource, ValueSource


class TestEnvironmentSource:
    def test_lookup_present(self, clean_env):
        clean_env.setenv("HOST", "localhost")
        assert EnvironmentSource().lookup("HOST") == "localhost"

    def test_lookup_absent(self, clean_env):
        source = EnvironmentSource()
        assert source.lookup("HOST") is None
        assert source.contains("HOST") is False

    def test_empty_value_is_present(self, clean_env):
        clean_env.setenv("HOST", "")
        source = EnvironmentSource()
        assert source.lookup("HOST") == ""
        assert source.contains("HOST") is True

    def test_reads_live_environment(self, clean_env):
        source = EnvironmentSource()
        clean_env.setenv("PORT", "1")
        assert source.lookup("PORT") == "1"
        clean_env.setenv("PORT", "2")
        assert source.lookup("PORT") == "2"


class TestMapSource:
    def test_lookup(self):
        source = MapSource({"DB_HOST": "localhost"})
        assert source.lookup("DB_HOST") == "localhost"
        assert source.lookup("DB_PORT") is None

    def test_keys_are_case_sensitive(self):
        assert MapSource({"HOST": "x"}).lookup("host") is None

    def test_wraps_by_reference(self):
        values = {}
        source = MapSource(values)
        values["HOST"] = "late"
        assert source.lookup("HOST") == "late"

    def test_accepts_read_only_mapping(self):
        source = MapSource(MappingProxyType({"HOST": "x"}))
        assert source.contains("HOST")

    def test_rejects_non_mapping(self):
        with pytest.raises(TypeError):
            MapSource([("HOST", "x")])


class TestValueSourceContract:
    def test_cannot_instantiate_abstract(self):
        with pytest.raises(TypeError):
            ValueSource()

    def test_default_contains_uses_lookup(self):
        class Fixed(ValueSource):
            def lookup(self, key):
                return "v" if key == "K" else None

        assert Fixed().contains("K") is True
        assert Fixed().contains("X") is False
