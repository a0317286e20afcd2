"""Tests for built-in casters and the Coercer."""

import math
import struct
from typing import Optional

import pytest
from param_bind import (
    BUILTIN_CASTERS,
    Coercer,
    CoercionError,
    Kind,
    UnsupportedKindError,
    resolve_shape,
)
from param_bind.kinds import ZERO_VALUES


class TestEmptyStringDefault:
    """Empty input yields the kind's zero value."""

    @pytest.mark.parametrize("kind", list(Kind))
    def test_zero_value(self, kind):
        assert Coercer().coerce(kind, "") == ZERO_VALUES[kind]

    def test_zero_values_types(self):
        coercer = Coercer()

        assert coercer.coerce(Kind.INT, "") == 0
        assert coercer.coerce(Kind.FLOAT64, "") == 0.0
        assert coercer.coerce(Kind.BOOL, "") is False
        assert coercer.coerce(Kind.STRING, "") == ""


class TestIntegerCasters:
    """Signed and unsigned integer kinds."""

    @pytest.mark.parametrize("kind,value,expected", [
        (Kind.INT, "42", 42),
        (Kind.INT, "-42", -42),
        (Kind.INT, "+7", 7),
        (Kind.INT, "007", 7),
        (Kind.INT8, "127", 127),
        (Kind.INT8, "-128", -128),
        (Kind.INT16, "32767", 32767),
        (Kind.INT32, "-2147483648", -2147483648),
        (Kind.INT64, "9223372036854775807", 9223372036854775807),
        (Kind.UINT8, "255", 255),
        (Kind.UINT64, "18446744073709551615", 18446744073709551615),
    ])
    def test_valid(self, kind, value, expected):
        assert Coercer().coerce(kind, value) == expected

    @pytest.mark.parametrize("kind,value", [
        (Kind.INT8, "128"),
        (Kind.INT8, "-129"),
        (Kind.UINT8, "256"),
        (Kind.UINT16, "65536"),
        (Kind.INT, "9223372036854775808"),
        (Kind.UINT64, "18446744073709551616"),
    ])
    def test_out_of_range(self, kind, value):
        with pytest.raises(CoercionError) as exc_info:
            Coercer().coerce(kind, value)

        assert exc_info.value.reason == "value out of range"
        assert exc_info.value.kind is kind
        assert exc_info.value.value == value

    @pytest.mark.parametrize("kind", [Kind.INT, Kind.UINT64, Kind.INT8])
    def test_very_long_digit_string_is_out_of_range(self, kind):
        with pytest.raises(CoercionError, match="value out of range"):
            Coercer().coerce(kind, "1" * 5000)

    def test_leading_zeros_do_not_count_toward_width(self):
        assert Coercer().coerce(Kind.INT, "0" * 40 + "12") == 12

    @pytest.mark.parametrize("value", ["abc", "1.5", "1_000", " 1", "1 ", "0x10", "-"])
    def test_invalid_syntax_signed(self, value):
        with pytest.raises(CoercionError, match="invalid syntax"):
            Coercer().coerce(Kind.INT, value)

    @pytest.mark.parametrize("value", ["-1", "+1"])
    def test_unsigned_rejects_sign(self, value):
        with pytest.raises(CoercionError, match="invalid syntax"):
            Coercer().coerce(Kind.UINT, value)


class TestFloatCasters:
    """float32 / float64 kinds."""

    @pytest.mark.parametrize("value,expected", [
        ("1.5", 1.5),
        ("-2", -2.0),
        ("1.", 1.0),
        (".5", 0.5),
        ("1e3", 1000.0),
        ("2.5E-1", 0.25),
        ("0x1.8p1", 3.0),
    ])
    def test_valid_float64(self, value, expected):
        assert Coercer().coerce(Kind.FLOAT64, value) == expected

    def test_special_values(self):
        coercer = Coercer()

        assert coercer.coerce(Kind.FLOAT64, "inf") == math.inf
        assert coercer.coerce(Kind.FLOAT64, "-Infinity") == -math.inf
        assert math.isnan(coercer.coerce(Kind.FLOAT64, "NaN"))

    def test_float32_rounds_to_single_precision(self):
        value = Coercer().coerce(Kind.FLOAT32, "0.1")

        assert value == struct.unpack("f", struct.pack("f", 0.1))[0]
        assert value != 0.1

    def test_float32_overflow(self):
        with pytest.raises(CoercionError, match="value out of range"):
            Coercer().coerce(Kind.FLOAT32, "1e39")

    def test_float64_overflow(self):
        with pytest.raises(CoercionError, match="value out of range"):
            Coercer().coerce(Kind.FLOAT64, "1e400")

    def test_hex_exponent_overflow(self):
        with pytest.raises(CoercionError, match="value out of range"):
            Coercer().coerce(Kind.FLOAT64, "0x1p99999")

    @pytest.mark.parametrize("value", ["abc", "1,5", "1_0.0", " 1.0", "e5", "0x1.8"])
    def test_invalid(self, value):
        with pytest.raises(CoercionError, match="invalid syntax"):
            Coercer().coerce(Kind.FLOAT64, value)


class TestBoolCaster:
    """Only canonical boolean tokens are accepted."""

    @pytest.mark.parametrize("value", ["1", "t", "T", "TRUE", "true", "True"])
    def test_true_tokens(self, value):
        assert Coercer().coerce(Kind.BOOL, value) is True

    @pytest.mark.parametrize("value", ["0", "f", "F", "FALSE", "false", "False"])
    def test_false_tokens(self, value):
        assert Coercer().coerce(Kind.BOOL, value) is False

    @pytest.mark.parametrize("value", ["yes", "no", "on", "tRuE", "2"])
    def test_rejects_other_tokens(self, value):
        with pytest.raises(CoercionError):
            Coercer().coerce(Kind.BOOL, value)


class TestStringCaster:
    def test_string_is_verbatim(self):
        assert Coercer().coerce(Kind.STRING, "  spaced  ") == "  spaced  "


class TestCoercerConfiguration:
    """Custom casters and unknown kinds."""

    def test_builtin_table_covers_every_kind(self):
        assert set(BUILTIN_CASTERS) == set(Kind)

    def test_override_caster(self):
        coercer = Coercer({Kind.BOOL: lambda v: v == "yes"})

        assert coercer.coerce(Kind.BOOL, "yes") is True
        assert coercer.coerce(Kind.BOOL, "no") is False
        # other kinds keep the built-in caster
        assert coercer.coerce(Kind.INT, "3") == 3

    def test_override_does_not_leak_into_builtin_table(self):
        Coercer({Kind.BOOL: lambda v: True})

        with pytest.raises(CoercionError):
            Coercer().coerce(Kind.BOOL, "yes")

    def test_unknown_kind(self):
        with pytest.raises(UnsupportedKindError):
            Coercer().coerce("complex", "1")


class TestCoerceValue:
    """Shape-level coercion (pointers, unsupported shapes)."""

    def test_scalar_shape(self):
        assert Coercer().coerce_value(resolve_shape(int), "12") == 12

    def test_pointer_shape_returns_pointee(self):
        assert Coercer().coerce_value(resolve_shape(Optional[int]), "5") == 5

    def test_pointer_empty_string_is_zero_pointee(self):
        assert Coercer().coerce_value(resolve_shape(Optional[float]), "") == 0.0

    def test_pointer_parse_failure_surfaces(self):
        with pytest.raises(CoercionError):
            Coercer().coerce_value(resolve_shape(Optional[int]), "x")

    def test_unsupported_shape(self):
        with pytest.raises(UnsupportedKindError, match="dict"):
            Coercer().coerce_value(resolve_shape(dict), "x")

    def test_pointer_to_list_is_unsupported(self):
        with pytest.raises(UnsupportedKindError):
            Coercer().coerce_value(resolve_shape(Optional[list[int]]), "1")
