"""Scalar conversion: identity, native conversion, and the opt-in numeric string parse."""

from __future__ import annotations

import math
import re
import weakref
from enum import Enum
from typing import Final

from mapstostructs.kinds import Kind, TypeInfo, classify
from mapstostructs.types import coerce_number, is_number_type, is_signed_type, is_unsigned_type


class _NotConvertible:
    """Sentinel type returned when a value cannot be converted."""

    def __repr__(self) -> str:
        return "NOT_CONVERTIBLE"


NOT_CONVERTIBLE: Final = _NotConvertible()

_SIGNED_DIGITS = re.compile(r"[+-]?[0-9]+")
_UNSIGNED_DIGITS = re.compile(r"[0-9]+")
_INFINITY = re.compile(r"[+-]?inf(inity)?", re.IGNORECASE)


def convert_scalar(value: object, target: object, *, parse_strings: bool = False) -> object:
    """Convert ``value`` to ``target`` or return ``NOT_CONVERTIBLE``.

    Conversion is attempted in order:

    1. identity, when the value already has the target type;
    2. native conversion (int/float widths, ``str``/``bytes`` subclasses,
       enum members or values, literal membership, dataclass instances);
       numbers are never turned into strings and booleans never into numbers;
    3. dereferencing a ``weakref.ref`` and retrying;
    4. with ``parse_strings``, parsing a numeral string for numeric targets
       and retrying without the parse so the exact width is enforced.
    """
    info = classify(target)
    converted = _convert_native(value, info)
    if converted is not NOT_CONVERTIBLE:
        return converted

    if isinstance(value, weakref.ref):
        referent = value()
        if referent is None:
            return NOT_CONVERTIBLE
        return convert_scalar(referent, target, parse_strings=parse_strings)

    if parse_strings and isinstance(value, str) and info.origin is not None and not info.members:
        parsed = _parse_number(value, info.origin)
        if parsed is None:
            return NOT_CONVERTIBLE
        return convert_scalar(parsed, target)

    return NOT_CONVERTIBLE


def _convert_native(value: object, info: TypeInfo) -> object:
    """Convert without parsing strings; ``NOT_CONVERTIBLE`` when the types do not fit."""
    if info.kind is Kind.ANY:
        return value
    origin = info.origin
    if info.kind is Kind.STRUCT:
        return value if isinstance(value, origin) else NOT_CONVERTIBLE  # type: ignore[arg-type]
    if info.kind is not Kind.SCALAR:
        return NOT_CONVERTIBLE

    if info.members:
        for allowed in info.members:
            if type(value) is type(allowed) and value == allowed:
                return value
        return NOT_CONVERTIBLE
    if origin is None:
        return NOT_CONVERTIBLE

    if isinstance(value, origin) and (issubclass(origin, bool) or not isinstance(value, bool)):
        return value

    if issubclass(origin, Enum):
        try:
            return origin(value)
        except (TypeError, ValueError):
            return NOT_CONVERTIBLE

    if is_number_type(origin):
        number = coerce_number(value, origin)
        return NOT_CONVERTIBLE if number is None else number

    # number to string conversion is deliberately unsupported
    if (issubclass(origin, str) and isinstance(value, str)) or (
        issubclass(origin, bytes) and isinstance(value, (bytes, bytearray))
    ):
        try:
            return origin(value)
        except (TypeError, ValueError):
            return NOT_CONVERTIBLE

    return NOT_CONVERTIBLE


def _parse_number(text: str, target: type) -> int | float | None:
    """Parse a base-10 numeral for a numeric ``target``; ``None`` when it does not parse."""
    if is_unsigned_type(target):
        return int(text) if _UNSIGNED_DIGITS.fullmatch(text) else None
    if is_signed_type(target):
        return int(text) if _SIGNED_DIGITS.fullmatch(text) else None
    if issubclass(target, float):
        if text != text.strip() or "_" in text:
            return None
        try:
            parsed = float(text)
        except ValueError:
            return None
        # overflowing numerals parse as infinity
        if math.isinf(parsed) and not _INFINITY.fullmatch(text):
            return None
        return parsed
    return None
