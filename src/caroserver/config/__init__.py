"""Configuration for the Caro API server.

Config values come from a YAML file keyed by field tags, then from
environment variables of the same names. See ``ConfigLoader``.
"""

from .errors import ConfigError, ConfigLoadError, ConfigShapeError
from .fields import ConfigField, FieldKind, describe, group, setting
from .loader import ConfigLoader, LoadState, load_config
from .settings import (
    FacebookConfig,
    RethinkConfig,
    ServerConfig,
    ServiceConfig,
)

__all__ = [
    "ConfigError",
    "ConfigLoadError",
    "ConfigShapeError",
    "ConfigField",
    "FieldKind",
    "describe",
    "group",
    "setting",
    "ConfigLoader",
    "LoadState",
    "load_config",
    "FacebookConfig",
    "RethinkConfig",
    "ServerConfig",
    "ServiceConfig",
]
