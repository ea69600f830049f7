"""
Configuration sources and envbind's own settings.
"""

from .settings import EnvBindSettings, configure_logging
from .sources import EnvironmentSource, MapSource, ValueSource

__all__ = [
    'EnvBindSettings',
    'EnvironmentSource',
    'MapSource',
    'ValueSource',
    'configure_logging',
]
