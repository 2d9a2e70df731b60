"""Tests for the sized numeric types and coerce_number."""

import math

import pytest

from mapstostructs.types import (
    Float32,
    Float64,
    Int8,
    Int16,
    Int32,
    Int64,
    UInt8,
    UInt16,
    UInt32,
    UInt64,
    coerce_number,
    is_number_type,
    is_signed_type,
    is_unsigned_type,
)

INT_TYPES = [Int8, Int16, Int32, Int64, UInt8, UInt16, UInt32, UInt64]


@pytest.mark.parametrize(
    ("cls", "low", "high"),
    [
        pytest.param(Int8, -128, 127, id="int8"),
        pytest.param(Int16, -32768, 32767, id="int16"),
        pytest.param(Int32, -2147483648, 2147483647, id="int32"),
        pytest.param(Int64, -9223372036854775808, 9223372036854775807, id="int64"),
        pytest.param(UInt8, 0, 255, id="uint8"),
        pytest.param(UInt16, 0, 65535, id="uint16"),
        pytest.param(UInt32, 0, 4294967295, id="uint32"),
        pytest.param(UInt64, 0, 18446744073709551615, id="uint64"),
    ],
)
def test_bounded_int_ranges(cls: type, low: int, high: int) -> None:
    assert cls.MIN == low
    assert cls.MAX == high
    assert cls(low) == low
    assert cls(high) == high
    with pytest.raises(ValueError, match="out of range"):
        cls(high + 1)
    with pytest.raises(ValueError, match="out of range"):
        cls(low - 1)


@pytest.mark.parametrize("cls", INT_TYPES)
def test_bounded_int_defaults_to_zero(cls: type) -> None:
    value = cls()
    assert value == 0
    assert type(value) is cls


def test_float32_rounds_to_single_precision() -> None:
    assert Float32(0.1) != 0.1
    assert Float32(0.1) == pytest.approx(0.1, rel=1e-7)
    assert Float32(0.5) == 0.5


def test_float32_max_is_exact() -> None:
    assert Float32(Float32.MAX) == Float32.MAX
    assert Float32(-Float32.MAX) == -Float32.MAX


def test_float32_overflow_raises() -> None:
    with pytest.raises(OverflowError):
        Float32(1e39)


def test_float32_keeps_non_finite_values() -> None:
    assert math.isinf(Float32(float("inf")))
    assert math.isnan(Float32(float("nan")))


def test_float64_is_a_float() -> None:
    assert Float64(1.5) == 1.5
    assert isinstance(Float64(1), float)


@pytest.mark.parametrize(
    ("target", "number", "unsigned", "signed"),
    [
        pytest.param(int, True, False, True, id="int"),
        pytest.param(Int8, True, False, True, id="int8"),
        pytest.param(UInt16, True, True, False, id="uint16"),
        pytest.param(float, True, False, False, id="float"),
        pytest.param(Float32, True, False, False, id="float32"),
        pytest.param(bool, False, False, False, id="bool"),
        pytest.param(str, False, False, False, id="str"),
    ],
)
def test_numeric_type_predicates(target: type, number: bool, unsigned: bool, signed: bool) -> None:
    assert is_number_type(target) is number
    assert is_unsigned_type(target) is unsigned
    assert is_signed_type(target) is signed


# =============================================================================
# coerce_number
# =============================================================================


@pytest.mark.parametrize(
    ("value", "target", "expected"),
    [
        pytest.param(19.0, int, 19, id="integral-float-to-int"),
        pytest.param(127, Int8, 127, id="int-to-int8"),
        pytest.param(255.0, UInt8, 255, id="integral-float-to-uint8"),
        pytest.param(3, float, 3.0, id="int-to-float"),
        pytest.param(2, Float32, 2.0, id="int-to-float32"),
        pytest.param(1.25, Float64, 1.25, id="float-to-float64"),
    ],
)
def test_coerce_number_converts(value: object, target: type, expected: object) -> None:
    result = coerce_number(value, target)
    assert result == expected
    assert isinstance(result, target)


@pytest.mark.parametrize(
    ("value", "target"),
    [
        pytest.param(19.5, int, id="fractional-float-to-int"),
        pytest.param(float("nan"), int, id="nan-to-int"),
        pytest.param(float("inf"), Int64, id="inf-to-int64"),
        pytest.param(128, Int8, id="int8-overflow"),
        pytest.param(-1, UInt32, id="negative-to-unsigned"),
        pytest.param(True, int, id="bool-to-int"),
        pytest.param(False, float, id="bool-to-float"),
        pytest.param("12", int, id="string-to-int"),
        pytest.param(10**400, float, id="huge-int-to-float"),
        pytest.param(1e300, Float32, id="float32-overflow"),
    ],
)
def test_coerce_number_rejects(value: object, target: type) -> None:
    assert coerce_number(value, target) is None
