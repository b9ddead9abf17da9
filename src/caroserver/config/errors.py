"""Configuration loading errors.

Two kinds of failure come out of the loader:

- ``ConfigLoadError``: the file could not be resolved, read or parsed.
  The caller decides whether to exit or try another path.
- ``ConfigShapeError``: the configuration dataclass itself is declared
  wrong (e.g. a tagged ``int`` field). Only fixable by editing the
  declaration, so callers normally escalate it to process exit.
"""

from pathlib import Path
from typing import Optional, Union


class ConfigError(Exception):
    """Base class for configuration errors."""


class ConfigLoadError(ConfigError):
    """Config file could not be loaded."""

    def __init__(self, reason: str, path: Optional[Union[str, Path]] = None):
        self.reason = reason
        self.path = str(path) if path is not None else None
        super().__init__(f"file could not be loaded: {reason}")


class ConfigShapeError(ConfigError):
    """Config dataclass declares a field the loader cannot fill."""

    def __init__(self, message: str, field: Optional[str] = None):
        self.field = field
        super().__init__(message)
