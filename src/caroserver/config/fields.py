"""Declared configuration fields.

A configuration shape is a dataclass whose fields carry a lookup tag in
their metadata. The tag is both the key in the config file and the name
of the environment variable that overrides it::

    @dataclass
    class RethinkConfig:
        addr: str = setting("RETHINKDB_ADDR", "localhost")
        port: str = setting("RETHINKDB_PORT", "28015")

    @dataclass
    class ServiceConfig:
        rethinkdb: RethinkConfig = group("rethinkdb", RethinkConfig)

Only two kinds of tagged field are supported: ``str`` leaves and nested
dataclass groups. Untagged fields, and fields whose tag starts with
``-``, are left alone.
"""

import dataclasses
import typing
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Optional

from .errors import ConfigShapeError

TAG_KEY = "tag"
EXCLUDE_MARKER = "-"


class FieldKind(Enum):
    """Supported kinds of tagged field."""
    TEXT = "text"
    GROUP = "group"


def setting(tag: str, default: str = "") -> Any:
    """Declare a text leaf looked up by ``tag``."""
    return dataclasses.field(default=default, metadata={TAG_KEY: tag})


def group(tag: str, factory: Callable[[], Any]) -> Any:
    """Declare a nested config group stored under ``tag`` in the file."""
    return dataclasses.field(default_factory=factory, metadata={TAG_KEY: tag})


def is_excluded(tag: str) -> bool:
    return not tag or tag.startswith(EXCLUDE_MARKER)


@dataclass(frozen=True)
class ConfigField:
    """One tagged field of a config dataclass.

    Attributes:
        name: Attribute name on the dataclass
        tag: File key and environment variable name
        kind: Text leaf or nested group
        qualified_name: Dotted attribute path from the root, for messages
    """
    name: str
    tag: str
    kind: FieldKind
    qualified_name: str

    def get(self, shape: Any) -> Any:
        return getattr(shape, self.name)

    def set(self, shape: Any, value: Any) -> None:
        setattr(shape, self.name, value)


def _field_kind(hint: Any) -> Optional[FieldKind]:
    if hint is str:
        return FieldKind.TEXT
    if isinstance(hint, type) and dataclasses.is_dataclass(hint):
        return FieldKind.GROUP
    return None


def describe(shape: Any, path: str = "") -> list[ConfigField]:
    """List the tagged fields of ``shape`` in declaration order.

    Args:
        shape: Dataclass instance to inspect.
        path: Dotted attribute path of ``shape`` from the root config,
            used only to name fields in errors.

    Raises:
        ConfigShapeError: If ``shape`` is not a dataclass instance, or a
            tagged field is neither ``str`` nor a dataclass.
    """
    if not dataclasses.is_dataclass(shape) or isinstance(shape, type):
        raise ConfigShapeError(
            f"config must be a dataclass instance, got {type(shape).__name__}"
            + (f" at {path}" if path else ""),
            field=path or None,
        )

    try:
        hints = typing.get_type_hints(type(shape))
    except (NameError, TypeError) as e:
        raise ConfigShapeError(
            f"cannot resolve field types of {type(shape).__name__}: {e}",
            field=path or None,
        ) from e

    described = []
    for f in dataclasses.fields(shape):
        tag = f.metadata.get(TAG_KEY, "")
        if is_excluded(tag):
            continue

        qualified = f"{path}.{f.name}" if path else f.name
        kind = _field_kind(hints.get(f.name))
        if kind is None:
            raise ConfigShapeError(
                f"field {qualified} must be a string or a config group",
                field=qualified,
            )
        described.append(ConfigField(f.name, tag, kind, qualified))

    return described
