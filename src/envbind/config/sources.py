"""
Value Sources - Key Lookup Providers
=====================================

Abstracts where raw configuration strings come from, so the binder can be
pointed at the process environment in production and at a plain mapping in
tests without touching global state.

Architecture:
    ValueSource (ABC)
        ├─ EnvironmentSource (live os.environ)
        └─ MapSource (caller-owned mapping, read-only)
"""

import os
from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Optional


class ValueSource(ABC):
    """
    Abstract base class for value sources

    A source answers one question: what string, if any, is stored under a
    key. Lookups have no side effects.
    """

    name: str = "source"

    @abstractmethod
    def lookup(self, key: str) -> Optional[str]:
        """
        Get the raw value stored under a key

        Args:
            key: Fully qualified key

        Returns:
            The raw string, or None when the key is absent
        """
        pass

    def contains(self, key: str) -> bool:
        """Check if a key is present"""
        return self.lookup(key) is not None

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"


class EnvironmentSource(ValueSource):
    """
    Process environment source

    Reads ``os.environ`` on every lookup; nothing is snapshotted, so the
    environment must not change while a bind call is running.
    """

    name = "environment"

    def lookup(self, key: str) -> Optional[str]:
        return os.environ.get(key)

    def contains(self, key: str) -> bool:
        return key in os.environ


class MapSource(ValueSource):
    """
    Explicit key-value source

    Wraps a caller-owned mapping by reference. The mapping is never
    modified.

    Example:
        source = MapSource({"DB_HOST": "localhost", "DB_PORT": "5432"})
    """

    name = "mapping"

    def __init__(self, values: Mapping[str, str]):
        if not isinstance(values, Mapping):
            raise TypeError(f"MapSource expects a mapping, got {type(values).__name__}")
        self._values = values

    def lookup(self, key: str) -> Optional[str]:
        return self._values.get(key)

    def contains(self, key: str) -> bool:
        return key in self._values

    def __repr__(self) -> str:
        return f"MapSource(keys={len(self._values)})"
