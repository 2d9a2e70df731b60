"""Type capability classification for binding targets.

A binding target is any type descriptor a dataclass field can be annotated
with: a class, a parametrized generic (``list[User]``, ``dict[int, str]``),
``X | None``, a union, ``Literal[...]``, ``Annotated[...]`` or ``Any``.
"""

from __future__ import annotations

import collections.abc
import dataclasses
import types
import typing
from dataclasses import dataclass
from enum import Enum
from typing import Annotated, Any, Literal, Union, get_args, get_origin

from mapstostructs.errors import ReceiverError

_NONE_TYPE = type(None)
_SEQUENCE_ORIGINS = (list, tuple, collections.abc.Sequence, collections.abc.MutableSequence)
_MAPPING_ORIGINS = (dict, collections.abc.Mapping, collections.abc.MutableMapping)
_ZERO_CONSTRUCTIBLE = (bool, int, float, str, bytes)


class Kind(Enum):
    """Capability category of a binding target."""

    SCALAR = "scalar"
    STRUCT = "struct"
    SLICE = "slice"
    MAP = "map"
    OPTIONAL = "optional"
    UNION = "union"
    ANY = "any"


@dataclass(frozen=True, slots=True)
class TypeInfo:
    """Classification result for one target descriptor."""

    kind: Kind
    target: object
    # concrete class to check against or build: the dataclass, list/tuple, dict or scalar class
    origin: type | None = None
    inner: object = Any
    element: object = Any
    key: object = Any
    value: object = Any
    # union members, or the allowed values of a Literal
    members: tuple[object, ...] = ()


def classify(target: object) -> TypeInfo:
    """Classify ``target`` into exactly one ``Kind``."""
    origin = get_origin(target)
    args = get_args(target)

    if origin is Annotated:
        return classify(args[0])
    supertype = getattr(target, "__supertype__", None)
    if supertype is not None:
        return classify(supertype)
    if target is Any or target is object or isinstance(target, typing.TypeVar):
        return TypeInfo(Kind.ANY, target)

    if origin is Union or origin is types.UnionType:
        members = tuple(arg for arg in args if arg is not _NONE_TYPE)
        if len(members) < len(args):
            inner = members[0] if len(members) == 1 else Union[members]
            return TypeInfo(Kind.OPTIONAL, target, inner=inner)
        return TypeInfo(Kind.UNION, target, members=members)

    if origin is Literal:
        return TypeInfo(Kind.SCALAR, target, members=args)

    if origin in _SEQUENCE_ORIGINS or target in _SEQUENCE_ORIGINS:
        container = tuple if tuple in (origin, target) else list
        if container is tuple and args and (len(args) != 2 or args[1] is not Ellipsis):
            # fixed-length tuples are records, not sequences
            return TypeInfo(Kind.SCALAR, target, origin=tuple)
        return TypeInfo(Kind.SLICE, target, origin=container, element=args[0] if args else Any)

    if origin in _MAPPING_ORIGINS or target in _MAPPING_ORIGINS:
        key, value = args if len(args) == 2 else (Any, Any)
        return TypeInfo(Kind.MAP, target, origin=dict, key=key, value=value)

    if isinstance(target, type) and dataclasses.is_dataclass(target):
        return TypeInfo(Kind.STRUCT, target, origin=target)
    if isinstance(origin, type) and dataclasses.is_dataclass(origin):
        return TypeInfo(Kind.STRUCT, target, origin=origin)

    if isinstance(target, type):
        return TypeInfo(Kind.SCALAR, target, origin=target)
    return TypeInfo(Kind.SCALAR, target, origin=origin if isinstance(origin, type) else None)


def type_name(target: object) -> str:
    """Render ``target`` for error messages; optional targets render as their inner type."""
    info = classify(target)
    if info.kind is Kind.OPTIONAL:
        return type_name(info.inner)
    if info.kind is Kind.ANY:
        return "object" if target is object else "Any"
    if info.kind is Kind.SLICE:
        if info.origin is tuple:
            return f"tuple[{type_name(info.element)}, ...]"
        return f"list[{type_name(info.element)}]"
    if info.kind is Kind.MAP:
        return f"dict[{type_name(info.key)}, {type_name(info.value)}]"
    if info.kind is Kind.UNION:
        return " | ".join(type_name(member) for member in info.members)
    if info.members:
        return f"Literal[{', '.join(repr(value) for value in info.members)}]"
    if isinstance(target, type):
        return target.__name__
    return str(target).replace("typing.", "")


def kind_name(target: object) -> str:
    """Describe what kind of thing ``target`` is, for receiver-shape errors."""
    if not _is_descriptor(target):
        return f"{type(target).__name__} instance"
    info = classify(target)
    if info.kind is Kind.STRUCT:
        return "dataclass"
    if info.kind is Kind.SLICE:
        return f"{type_name(target).split('[')[0]} of {kind_name(info.element)}"
    if info.kind is Kind.MAP:
        return "dict"
    if info.kind is Kind.OPTIONAL:
        return f"optional {kind_name(info.inner)}"
    return type_name(target)


def _is_descriptor(target: object) -> bool:
    """Return whether ``target`` looks like a type descriptor rather than a value."""
    return (
        isinstance(target, type)
        or get_origin(target) is not None
        or target is Any
        or hasattr(target, "__supertype__")
    )


def init_fields(cls: type) -> tuple[dataclasses.Field[Any], ...]:
    """Return the dataclass fields that can be passed to ``__init__``."""
    return tuple(field for field in dataclasses.fields(cls) if field.init)


def field_types(cls: type) -> dict[str, object]:
    """Return resolved annotations for the init fields of dataclass ``cls``.

    Raises ``ReceiverError`` when an annotation names a type that is not
    reachable from the module globals, such as a class local to a function.
    """
    try:
        hints = typing.get_type_hints(cls, include_extras=True)
    except NameError as exc:
        received = f"{cls.__name__} whose annotation {exc.name!r} is undefined"
        raise ReceiverError("receiver", "dataclass with resolvable annotations", received) from exc
    return {field.name: hints.get(field.name, Any) for field in init_fields(cls)}


def _has_default(field: dataclasses.Field[Any]) -> bool:
    """Return whether ``field`` declares a default or a default factory."""
    return field.default is not dataclasses.MISSING or field.default_factory is not dataclasses.MISSING


def build_struct(cls: type, values: dict[str, object], hints: dict[str, object] | None = None) -> object:
    """Instantiate dataclass ``cls`` from ``values``.

    Fields missing from ``values`` keep their declared default, or take the
    zero value of their type when they have none.
    """
    if hints is None:
        hints = field_types(cls)
    kwargs = dict(values)
    for field in init_fields(cls):
        if field.name not in kwargs and not _has_default(field):
            kwargs[field.name] = zero_value(hints[field.name])
    return cls(**kwargs)


def zero_value(target: object) -> object:
    """Return the value a target takes when no source value is supplied."""
    info = classify(target)
    if info.kind is Kind.STRUCT:
        return build_struct(info.origin, {})  # type: ignore[arg-type]
    if info.kind is Kind.SLICE:
        return info.origin()  # type: ignore[misc]
    if info.kind is Kind.MAP:
        return {}
    if info.kind is Kind.UNION:
        return zero_value(info.members[0])
    if info.kind is Kind.SCALAR and info.origin is not None and not info.members:
        if issubclass(info.origin, _ZERO_CONSTRUCTIBLE) and not issubclass(info.origin, Enum):
            return info.origin()
        if info.origin is tuple:
            return ()
    return None
