"""Sized numeric scalar types: Int8..Int64, UInt8..UInt64, Float32, Float64.

Python numbers are unbounded (int) or double precision (float). Dataclass
fields annotated with one of these types bind only values that fit the
declared width, which is what lets numeric strings and JSON floats be
recovered into exact fixed-width values.
"""

from __future__ import annotations

import math
import struct
import sys
from typing import ClassVar


class BoundedInt(int):
    """An ``int`` restricted to the closed range ``[MIN, MAX]``."""

    MIN: ClassVar[int]
    MAX: ClassVar[int]

    def __new__(cls, value: object = 0) -> BoundedInt:
        """Create the value, rejecting anything outside the type's range."""
        number = int(value)  # type: ignore[call-overload]
        if not cls.MIN <= number <= cls.MAX:
            msg = f"{number} is out of range for {cls.__name__} [{cls.MIN}, {cls.MAX}]."
            raise ValueError(msg)
        return super().__new__(cls, number)


class Int8(BoundedInt):
    MIN = -(2**7)
    MAX = 2**7 - 1


class Int16(BoundedInt):
    MIN = -(2**15)
    MAX = 2**15 - 1


class Int32(BoundedInt):
    MIN = -(2**31)
    MAX = 2**31 - 1


class Int64(BoundedInt):
    MIN = -(2**63)
    MAX = 2**63 - 1


class UInt8(BoundedInt):
    MIN = 0
    MAX = 2**8 - 1


class UInt16(BoundedInt):
    MIN = 0
    MAX = 2**16 - 1


class UInt32(BoundedInt):
    MIN = 0
    MAX = 2**32 - 1


class UInt64(BoundedInt):
    MIN = 0
    MAX = 2**64 - 1


class Float32(float):
    """A ``float`` rounded to IEEE-754 single precision."""

    MAX: ClassVar[float] = 3.4028234663852886e38

    def __new__(cls, value: object = 0.0) -> Float32:
        """Round to single precision; raise ``OverflowError`` when out of range."""
        number = float(value)  # type: ignore[arg-type]
        if math.isfinite(number):
            number = struct.unpack("<f", struct.pack("<f", number))[0]
        return super().__new__(cls, number)


class Float64(float):
    """A ``float`` spelled with its width, for symmetry with ``Float32``."""

    MAX: ClassVar[float] = sys.float_info.max


def is_number_type(target: type) -> bool:
    """Return whether ``target`` is an int or float type (``bool`` excluded)."""
    return issubclass(target, (int, float)) and not issubclass(target, bool)


def is_unsigned_type(target: type) -> bool:
    """Return whether ``target`` is one of the unsigned integer widths."""
    return issubclass(target, BoundedInt) and target.MIN == 0


def is_signed_type(target: type) -> bool:
    """Return whether ``target`` is a signed integer type of any width."""
    return issubclass(target, int) and not issubclass(target, bool) and not is_unsigned_type(target)


def coerce_number(value: object, target: type) -> int | float | None:
    """Convert a number into the numeric type ``target``.

    Returns ``None`` when the conversion would lose information: booleans,
    non-integral or non-finite floats for integer targets, and values outside
    the target's range.
    """
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None

    if issubclass(target, float):
        try:
            return target(value)
        except (OverflowError, struct.error):
            return None

    if isinstance(value, float):
        if not value.is_integer():
            return None
        value = int(value)
    try:
        return target(value)
    except ValueError:
        return None
