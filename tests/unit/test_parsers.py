"""Tests for defensive numeric parsers."""

import pytest

from cercalia_client.core.errors import CercaliaError, ErrorKind
from cercalia_client.core.parsers import (
    parse_float_or_none,
    parse_int_or_none,
    parse_long_or_none,
    parse_required_coordinate,
)


class TestParseFloatOrNone:
    """Tests for parse_float_or_none function."""

    def test_valid_number(self):
        assert parse_float_or_none("41.38") == 41.38

    def test_negative_number(self):
        assert parse_float_or_none("-3.7") == -3.7

    def test_surrounding_whitespace(self):
        assert parse_float_or_none(" 2.17 ") == 2.17

    @pytest.mark.parametrize("value", [None, "", "   ", "not-a-number", "1,5", "1_000"])
    def test_absent_values(self, value):
        """Test bad input returns None instead of raising."""
        assert parse_float_or_none(value) is None

    @pytest.mark.parametrize("value", ["nan", "NaN", "inf", "-Infinity", "infinity"])
    def test_non_numeric_float_words(self, value):
        """Test special float spellings are not accepted as numbers."""
        assert parse_float_or_none(value) is None

    def test_scientific_notation(self):
        assert parse_float_or_none("1.5e3") == 1500.0
        assert parse_float_or_none(".5") == 0.5


class TestParseIntOrNone:
    """Tests for parse_int_or_none function."""

    def test_valid_integer(self):
        assert parse_int_or_none("42") == 42

    def test_signed_integer(self):
        assert parse_int_or_none("-7") == -7
        assert parse_int_or_none("+7") == 7

    def test_decimal_is_absent(self):
        assert parse_int_or_none("1.0") is None

    def test_32_bit_bounds(self):
        assert parse_int_or_none("2147483647") == 2147483647
        assert parse_int_or_none("2147483648") is None
        assert parse_int_or_none("-2147483648") == -2147483648

    @pytest.mark.parametrize("value", [None, "", "abc", "1_000"])
    def test_absent_values(self, value):
        assert parse_int_or_none(value) is None


class TestParseLongOrNone:
    """Tests for parse_long_or_none function."""

    def test_beyond_32_bits(self):
        assert parse_long_or_none("2147483648") == 2147483648

    def test_64_bit_bounds(self):
        assert parse_long_or_none("9223372036854775807") == 9223372036854775807
        assert parse_long_or_none("9223372036854775808") is None

    @pytest.mark.parametrize("value", [None, "", "12.5", "x"])
    def test_absent_values(self, value):
        assert parse_long_or_none(value) is None


class TestParseRequiredCoordinate:
    """Tests for parse_required_coordinate function."""

    def test_valid_coordinate(self):
        assert parse_required_coordinate("41.38", "latitude") == 41.38

    def test_empty_names_axis(self):
        """Test missing value raises a validation error naming the axis."""
        with pytest.raises(CercaliaError) as exc_info:
            parse_required_coordinate("", "latitude")

        assert exc_info.value.kind is ErrorKind.VALIDATION
        assert "latitude" in str(exc_info.value)

    def test_none_names_axis(self):
        with pytest.raises(CercaliaError) as exc_info:
            parse_required_coordinate(None, "longitude")

        assert "longitude" in str(exc_info.value)

    def test_malformed_value(self):
        with pytest.raises(CercaliaError) as exc_info:
            parse_required_coordinate("abc", "longitude")

        assert exc_info.value.kind is ErrorKind.VALIDATION
        assert str(exc_info.value) == "Invalid longitude coordinate: abc"

    def test_non_finite_value(self):
        with pytest.raises(CercaliaError):
            parse_required_coordinate("NaN", "latitude")
