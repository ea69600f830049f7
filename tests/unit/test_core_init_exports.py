"""
Unit tests for the envbind public API exports.

Verifies that every symbol declared in ``__all__`` is importable from the
package and from ``envbind.core`` directly.
"""

from __future__ import annotations

import inspect


class TestInitExports:
    def test_core_symbols_importable(self):
        import envbind.core as core

        missing = [name for name in core.__all__ if not hasattr(core, name)]
        assert missing == [], f"Names in __all__ but not importable: {missing}"

    def test_package_symbols_importable(self):
        import envbind

        missing = [name for name in envbind.__all__ if not hasattr(envbind, name)]
        assert missing == [], f"Names in __all__ but not importable: {missing}"

    def test_bind_is_callable(self):
        from envbind import bind

        assert callable(bind)

    def test_env_config_is_class(self):
        from envbind import EnvConfig

        assert inspect.isclass(EnvConfig)

    def test_errors_share_base(self):
        from envbind import EnvBindError, EnvVarMissingError, ParseError, SchemaError

        for cls in (EnvVarMissingError, ParseError, SchemaError):
            assert issubclass(cls, EnvBindError)
