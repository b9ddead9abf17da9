"""Layered configuration loading: file first, then environment."""

import logging
import os
from enum import Enum
from pathlib import Path
from typing import Any, Mapping, Optional, TypeVar

import yaml

from .errors import ConfigLoadError
from .fields import ConfigField, FieldKind, describe

T = TypeVar("T")


class LoadState(Enum):
    """Progress of the most recent load."""
    NOT_LOADED = "not_loaded"
    FILE_LOADED = "file_loaded"
    OVERLAID = "overlaid"


class ConfigLoader:
    """Populate a config dataclass from a YAML file and the environment.

    Environment variables always win over file values. Lookups use each
    leaf's own tag only: a leaf tagged ``RETHINKDB_PORT`` inside the
    ``rethinkdb`` group is overridden by ``RETHINKDB_PORT``, never by
    ``rethinkdb_RETHINKDB_PORT``. Group tags are file keys, not env
    prefixes.

    The loader mutates the given dataclass in place. It is meant to run
    once at startup, before anything reads the config.
    """

    def __init__(
        self,
        logger: Optional[logging.Logger] = None,
        environ: Optional[Mapping[str, str]] = None,
    ):
        """
        Args:
            logger: Where to log loading steps. Defaults to this module's logger.
            environ: Mapping to read overrides from. Defaults to ``os.environ``
                as it is at the time of each lookup.
        """
        self.logger = logger or logging.getLogger(__name__)
        self._environ = environ
        self.state = LoadState.NOT_LOADED

    @property
    def environ(self) -> Mapping[str, str]:
        return os.environ if self._environ is None else self._environ

    def from_file_and_env(self, shape: T, config_path: str | Path) -> T:
        """Load ``config_path`` into ``shape``, then apply env overrides.

        A failed file load is re-raised without touching the environment
        step; ``shape`` is then partially filled and must not be used.

        Raises:
            ConfigLoadError: The file could not be resolved, read or parsed.
            ConfigShapeError: ``shape`` declares an unsupported field.
        """
        self.state = LoadState.NOT_LOADED
        self.from_file(shape, config_path)
        self.from_env(shape)
        return shape

    def from_file(self, shape: Any, config_path: str | Path) -> None:
        """Fill ``shape`` from a YAML (or JSON) file keyed by field tags."""
        try:
            abs_path = Path(config_path).expanduser().resolve()
        except (OSError, RuntimeError, ValueError) as e:
            raise ConfigLoadError(
                f"cannot resolve path {config_path!r}: {e}", config_path
            ) from e

        self.logger.info("Load config from file: %s", abs_path)
        try:
            text = abs_path.read_text(encoding="utf-8")
        except FileNotFoundError as e:
            raise ConfigLoadError(f"no such file: {abs_path}", abs_path) from e
        except IsADirectoryError as e:
            raise ConfigLoadError(f"not a file: {abs_path}", abs_path) from e
        except PermissionError as e:
            raise ConfigLoadError(f"permission denied: {abs_path}", abs_path) from e
        except UnicodeDecodeError as e:
            raise ConfigLoadError(f"{abs_path} is not valid UTF-8: {e}", abs_path) from e
        except OSError as e:
            raise ConfigLoadError(f"cannot read {abs_path}: {e}", abs_path) from e

        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as e:
            mark = getattr(e, "problem_mark", None)
            if mark is not None:
                reason = (
                    f"malformed config at line {mark.line + 1}, "
                    f"column {mark.column + 1} of {abs_path}: "
                    f"{getattr(e, 'problem', None) or e}"
                )
            else:
                reason = f"malformed config in {abs_path}: {e}"
            raise ConfigLoadError(reason, abs_path) from e

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ConfigLoadError(
                f"{abs_path} must contain a mapping at the top level, "
                f"got {type(data).__name__}",
                abs_path,
            )

        self._apply_mapping(shape, data, abs_path)
        self.state = LoadState.FILE_LOADED

    def _apply_mapping(
        self, shape: Any, data: dict, source: Path, path: str = ""
    ) -> None:
        fields = describe(shape, path)
        known = {f.tag for f in fields}
        for key in data:
            if key not in known:
                self.logger.debug("Ignoring unknown config key %r in %s", key, source)

        for f in fields:
            if f.tag not in data:
                continue
            value = data[f.tag]
            if value is None:
                continue

            if f.kind is FieldKind.GROUP:
                if not isinstance(value, dict):
                    raise ConfigLoadError(
                        f"{f.tag!r} must be a mapping, got {type(value).__name__}",
                        source,
                    )
                self._apply_mapping(f.get(shape), value, source, f.qualified_name)
            else:
                if not isinstance(value, str):
                    raise ConfigLoadError(
                        f"{f.tag!r} must be a string, got {type(value).__name__} "
                        f"(quote the value in the file)",
                        source,
                    )
                f.set(shape, value)

    def from_env(self, shape: Any, prefix: str = "") -> None:
        """Override text leaves of ``shape`` from environment variables.

        Args:
            shape: Config dataclass instance to update in place.
            prefix: Tag of the group being walked ("" at the root). Only
                used in log messages; it does not become part of the
                environment variable name.

        Raises:
            ConfigShapeError: ``shape`` is not a dataclass, or declares a
                tagged field that is neither ``str`` nor a config group.
        """
        self._overlay(shape, prefix, "")
        self.state = LoadState.OVERLAID

    def _overlay(self, shape: Any, prefix: str, path: str) -> None:
        for f in describe(shape, path):
            if f.kind is FieldKind.GROUP:
                self._overlay(f.get(shape), f.tag, f.qualified_name)
                continue
            self._overlay_leaf(shape, f, prefix)

    def _overlay_leaf(self, shape: Any, f: ConfigField, prefix: str) -> None:
        value = self.environ.get(f.tag, "")
        if value == "":
            return
        if prefix:
            self.logger.info("%s (in %s) set from environment", f.tag, prefix)
        else:
            self.logger.info("%s set from environment", f.tag)
        f.set(shape, value)


def load_config(
    shape: T,
    config_path: str | Path,
    logger: Optional[logging.Logger] = None,
) -> T:
    """Load ``config_path`` into ``shape`` and apply environment overrides."""
    return ConfigLoader(logger=logger).from_file_and_env(shape, config_path)
