"""BindOptions: configuration shared by every binding entry point."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, replace
from typing import Final

from mapstostructs.tags import DEFAULT_TAG

DEFAULT_MAX_DEPTH: Final = 64


def _tag_names(value: object) -> tuple[str, ...]:
    """Validate the ``tags`` entry of a plain-data BindOptions payload."""
    if value is None:
        return ()
    if isinstance(value, str) or not isinstance(value, (list, tuple)):
        msg = "BindOptions.tags must be a list of tag names."
        raise TypeError(msg)
    for index, name in enumerate(value):
        if not isinstance(name, str) or not name:
            msg = f"BindOptions.tags[{index}] must be a non-empty string."
            raise TypeError(msg)
    return tuple(value)


def _default_tag(value: object) -> str:
    """Validate the ``default_tag`` entry; absent means the ``json`` tag."""
    if value is None:
        return DEFAULT_TAG
    if not isinstance(value, str) or not value:
        msg = "BindOptions.default_tag must be a non-empty string."
        raise TypeError(msg)
    return value


def _max_depth(value: object) -> int:
    """Validate the ``max_depth`` entry (booleans are rejected)."""
    if value is None:
        return DEFAULT_MAX_DEPTH
    if not isinstance(value, int) or isinstance(value, bool):
        msg = "BindOptions.max_depth must be an int."
        raise TypeError(msg)
    return value


@dataclass(frozen=True, slots=True)
class BindOptions:
    """How source keys are matched to fields and how deep a source may nest.

    ``tags`` are metadata tag names consulted, in order, before ``default_tag``.
    ``max_depth`` bounds the nesting of the source value; deeper input raises
    ``RecursionDepthError`` instead of exhausting the interpreter stack.
    """

    tags: tuple[str, ...] = ()
    default_tag: str = DEFAULT_TAG
    max_depth: int = DEFAULT_MAX_DEPTH

    def __post_init__(self) -> None:
        """Normalize tags to a tuple and validate limits."""
        object.__setattr__(self, "tags", tuple(self.tags))
        if not self.default_tag:
            msg = "default_tag must be a non-empty string."
            raise ValueError(msg)
        if self.max_depth < 1:
            msg = "max_depth must be >= 1."
            raise ValueError(msg)

    def with_tags(self, *tags: str) -> BindOptions:
        """Return options with ``tags`` consulted before the configured ones."""
        if not tags:
            return self
        return replace(self, tags=(*tags, *self.tags))

    def to_dict(self) -> dict[str, object]:
        """Serialize BindOptions to a plain dictionary."""
        return {
            "tags": list(self.tags),
            "default_tag": self.default_tag,
            "max_depth": self.max_depth,
        }

    @classmethod
    def from_dict(cls, value: Mapping[str, object]) -> BindOptions:
        """Deserialize BindOptions from a plain dictionary; absent keys take their defaults."""
        if not isinstance(value, Mapping):
            msg = "BindOptions must be a mapping."
            raise TypeError(msg)
        return cls(
            tags=_tag_names(value.get("tags")),
            default_tag=_default_tag(value.get("default_tag")),
            max_depth=_max_depth(value.get("max_depth")),
        )
