"""Field resolution: map external key names to dataclass fields via metadata tags.

Tags live in ``dataclasses.field(metadata=...)``::

    @dataclass
    class User:
        gender: str = field(default="", metadata={"json": "gender,omitempty", "alias": "sex"})
"""

from __future__ import annotations

import dataclasses
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Final

from mapstostructs.kinds import field_types, init_fields

DEFAULT_TAG: Final = "json"


def _external_name(field: dataclasses.Field[Any], tag_names: Sequence[str]) -> str:
    """Return the lowercased key a field is addressed by."""
    for tag_name in tag_names:
        tag = field.metadata.get(tag_name)
        if tag is None:
            continue
        # "name,omitempty" style modifiers are dropped; an empty name means "use the field name"
        name = str(tag).split(",", 1)[0].strip()
        if name:
            return name.lower()
        break
    return field.name.lower()


def build_tag_map(cls: type, tags: Sequence[str] = (), *, default_tag: str = DEFAULT_TAG) -> dict[str, str]:
    """Build a lowercased-key to field-name lookup for dataclass ``cls``.

    Each field is looked up under the caller's tag names in priority order,
    then under ``default_tag``; the first tag present wins. Untagged fields
    are addressed by their lowercased name. When two fields resolve to the
    same key, the later declared field wins.
    """
    if not (isinstance(cls, type) and dataclasses.is_dataclass(cls)):
        msg = f"{cls!r} is not a dataclass type."
        raise TypeError(msg)

    tag_names = (*tags, default_tag)
    return {_external_name(field, tag_names): field.name for field in init_fields(cls)}


@dataclass(frozen=True, slots=True)
class FieldTable:
    """Everything the struct populator needs to know about one dataclass."""

    struct: type
    by_key: Mapping[str, str]
    types: Mapping[str, object]

    def lookup(self, key: str) -> str | None:
        """Return the field name addressed by ``key`` (case-insensitive), if any."""
        return self.by_key.get(key.lower())


def field_table(cls: type, tags: Sequence[str] = (), *, default_tag: str = DEFAULT_TAG) -> FieldTable:
    """Build the ``FieldTable`` for ``cls``."""
    return FieldTable(
        struct=cls,
        by_key=build_tag_map(cls, tags, default_tag=default_tag),
        types=field_types(cls),
    )
