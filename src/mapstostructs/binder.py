"""Binder: recursive binding of loosely-typed data into dataclasses, lists and dicts.

The input is the kind of data ``json.loads`` (or a YAML loader, or a DB-API
cursor) hands back: dicts keyed by strings, lists of such dicts, numbers that
may have arrived as floats or strings. The target is a type descriptor, and
the result is a freshly built value of that type. Nothing is published on
failure: the first mismatch anywhere raises ``ConversionError`` with the path
to the offending value.
"""

from __future__ import annotations

import logging
import weakref
from collections.abc import Mapping, Sequence
from typing import Any, TypeVar

from mapstostructs.convert import NOT_CONVERTIBLE, convert_scalar
from mapstostructs.errors import ConversionError, RecursionDepthError, ReceiverError
from mapstostructs.kinds import Kind, TypeInfo, build_struct, classify, kind_name, type_name, zero_value
from mapstostructs.options import BindOptions
from mapstostructs.tags import FieldTable, field_table

logger = logging.getLogger(__name__)

T = TypeVar("T")

_TEXT_TYPES = (str, bytes, bytearray)


def _is_sequence(value: object) -> bool:
    """Return whether ``value`` is a sequence other than text or bytes."""
    return isinstance(value, Sequence) and not isinstance(value, _TEXT_TYPES)


def _is_str_keyed(value: Mapping[Any, object]) -> bool:
    """Return whether every key of ``value`` is a string."""
    return all(isinstance(key, str) for key in value)


def _deref(value: object) -> object:
    """Follow weak references; a dead reference reads as ``None``."""
    while isinstance(value, weakref.ref):
        value = value()
    return value


class _Assignment:
    """State of one top-level binding call.

    Field tables are memoized per dataclass for the duration of the call only,
    so a call never observes tag choices made by another.
    """

    def __init__(self, options: BindOptions) -> None:
        """Start a call with fresh field tables and zero depth."""
        self._options = options
        self._tables: dict[type, FieldTable] = {}
        self._depth = 0

    def _table(self, cls: type) -> FieldTable:
        """Return the field table for ``cls``, building it on first use in this call."""
        table = self._tables.get(cls)
        if table is None:
            table = field_table(cls, self._options.tags, default_tag=self._options.default_tag)
            self._tables[cls] = table
        return table

    def assign(self, target: object, value: object) -> object:
        """Bind ``value`` to ``target``, raising ``ConversionError`` on a mismatch."""
        value = _deref(value)
        info = classify(target)
        if info.kind is Kind.OPTIONAL:
            if value is None:
                return None
            return self.assign(info.inner, value)
        if value is None:
            return zero_value(target)

        self._depth += 1
        try:
            if self._depth > self._options.max_depth:
                raise RecursionDepthError(self._options.max_depth)
            return self._dispatch(info, value)
        finally:
            self._depth -= 1

    def _dispatch(self, info: TypeInfo, value: object) -> object:
        """Bind a non-``None`` value by the capability of its target."""
        converted = convert_scalar(value, info.target)
        if converted is not NOT_CONVERTIBLE:
            return converted

        if info.kind is Kind.STRUCT and isinstance(value, Mapping) and _is_str_keyed(value):
            return self.populate_struct(info.origin, value)  # type: ignore[arg-type]
        if info.kind is Kind.SLICE and _is_sequence(value):
            return self.populate_slice(info, value)  # type: ignore[arg-type]
        if info.kind is Kind.MAP and isinstance(value, Mapping):
            return self.populate_map(info, value)
        if info.kind is Kind.UNION:
            for member in info.members:
                try:
                    return self.assign(member, value)
                except ConversionError:
                    continue

        raise ConversionError.not_convertible(type_name(info.target), value)

    def populate_struct(self, cls: type, source: Mapping[str, object]) -> object:
        """Build a ``cls`` instance from a string-keyed mapping.

        Keys are matched case-insensitively through the field table; keys that
        match no field are ignored, and ``None`` values leave the field at its
        default.
        """
        table = self._table(cls)
        values: dict[str, object] = {}
        for key, item in source.items():
            field_name = table.lookup(key)
            if field_name is None or item is None:
                continue
            try:
                values[field_name] = self.assign(table.types[field_name], item)
            except ConversionError as exc:
                raise exc.in_field(field_name, cls.__name__) from None

        try:
            return build_struct(cls, values, dict(table.types))
        except (TypeError, ValueError) as exc:
            msg = f"could not build a struct of type {cls.__name__}: {exc}"
            raise ConversionError(msg, expected=cls.__name__, received=source) from exc

    def populate_slice(self, info: TypeInfo, source: Sequence[object]) -> list[object] | tuple[object, ...]:
        """Build a list (or tuple) by binding each source element in order."""
        items: list[object] = []
        for index, item in enumerate(source):
            try:
                items.append(self.assign(info.element, item))
            except ConversionError as exc:
                raise exc.in_row(index + 1) from None
        if info.origin is tuple:
            return tuple(items)
        return items

    def populate_map(self, info: TypeInfo, source: Mapping[Any, object]) -> dict[object, object]:
        """Build a dict, converting keys (numeral strings included) and binding values."""
        map_name = type_name(info.target)
        result: dict[object, object] = {}
        for key, item in source.items():
            converted_key = convert_scalar(key, info.key, parse_strings=True)
            if converted_key is NOT_CONVERTIBLE:
                raise ConversionError.bad_map_key(map_name, type_name(info.key), key)
            try:
                result[converted_key] = self.assign(info.value, item)
            except ConversionError as exc:
                raise exc.in_map_value(map_name) from None
        return result


class Binder:
    """Bind loosely-typed data to typed receivers with a fixed set of options.

    A Binder holds no per-call state and can be shared between threads.
    """

    def __init__(self, options: BindOptions | None = None) -> None:
        """Initialize with binding options (defaults when omitted)."""
        self._options = options if options is not None else BindOptions()

    @property
    def options(self) -> BindOptions:
        """Return the options used by every call on this Binder."""
        return self._options

    def _run(self, receiver: object, value: object, tags: tuple[str, ...]) -> Any:
        """Run one binding call, logging conversion failures before re-raising."""
        call = _Assignment(self._options.with_tags(*tags))
        try:
            return call.assign(receiver, value)
        except ConversionError as exc:
            logger.debug("Binding into %s failed: %s", type_name(receiver), exc)
            raise

    def bind(self, value: object, target: object, *tags: str) -> Any:
        """Bind any source value to any target descriptor, without receiver checks."""
        return self._run(target, value, tags)

    def maps_to_structs(self, input_maps: Sequence[Mapping[str, object]] | None, receiver: object, *tags: str) -> Any:
        """Bind a sequence of string-keyed mappings to a list of dataclasses.

        ``receiver`` is ``list[T]``, ``tuple[T, ...]`` or ``Sequence[T]`` with
        ``T`` a dataclass; a tuple receiver yields a tuple. ``tags`` name
        metadata tags to consult before the configured ones.
        """
        info = classify(receiver)
        if info.kind is not Kind.SLICE or classify(info.element).kind is not Kind.STRUCT:
            raise ReceiverError("receiver", "list of dataclass", kind_name(receiver))
        if input_maps is None:
            input_maps = ()
        elif not _is_sequence(input_maps):
            raise ReceiverError("input", "sequence of mappings", kind_name(input_maps))

        logger.debug("Binding %d rows into %s.", len(input_maps), type_name(receiver))
        return self._run(receiver, input_maps, tags)

    def map_to_struct(self, input_map: Mapping[str, object] | None, receiver: type[T], *tags: str) -> T:
        """Bind a string-keyed mapping to a new instance of dataclass ``receiver``."""
        if classify(receiver).kind is not Kind.STRUCT:
            raise ReceiverError("receiver", "dataclass", kind_name(receiver))
        if input_map is None:
            input_map = {}
        elif not isinstance(input_map, Mapping):
            raise ReceiverError("input", "mapping", kind_name(input_map))

        return self._run(receiver, input_map, tags)  # type: ignore[no-any-return]

    def map_to_map(self, input_map: Mapping[Any, object] | None, receiver: object, *tags: str) -> Any:
        """Bind a mapping to ``receiver`` (``dict[K, V]``), converting numeral-string keys."""
        if classify(receiver).kind is not Kind.MAP:
            raise ReceiverError("receiver", "dict", kind_name(receiver))
        if input_map is None:
            input_map = {}
        elif not isinstance(input_map, Mapping):
            raise ReceiverError("input", "mapping", kind_name(input_map))

        return self._run(receiver, input_map, tags)


def bind(value: object, target: object, *tags: str, options: BindOptions | None = None) -> Any:
    """Bind ``value`` to ``target``; see ``Binder.bind``."""
    return Binder(options).bind(value, target, *tags)


def maps_to_structs(
    input_maps: Sequence[Mapping[str, object]] | None,
    receiver: object,
    *tags: str,
    options: BindOptions | None = None,
) -> Any:
    """Bind a sequence of mappings to a list of dataclasses; see ``Binder.maps_to_structs``."""
    return Binder(options).maps_to_structs(input_maps, receiver, *tags)


def map_to_struct(
    input_map: Mapping[str, object] | None,
    receiver: type[T],
    *tags: str,
    options: BindOptions | None = None,
) -> T:
    """Bind a mapping to a dataclass instance; see ``Binder.map_to_struct``."""
    return Binder(options).map_to_struct(input_map, receiver, *tags)


def map_to_map(
    input_map: Mapping[Any, object] | None,
    receiver: object,
    *tags: str,
    options: BindOptions | None = None,
) -> Any:
    """Bind a mapping to a typed dict; see ``Binder.map_to_map``."""
    return Binder(options).map_to_map(input_map, receiver, *tags)
