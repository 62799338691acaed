"""Tests for SCPI numeric field parsing and boolean tokens."""

from __future__ import annotations

import math

import pytest

from wtlink_scpi.number import BoolStyle, format_bool, parse_number, parse_numbers


class TestParseNumber:
    """Tests for parse_number."""

    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("42", 42.0),
            ("+7", 7.0),
            ("1.250", 1.25),
            ("-2.0", -2.0),
            (".5", 0.5),
            ("3.", 3.0),
            ("2.30100E+02", 230.1),
            ("5e-3", 0.005),
            ("  3.5 \r\n", 3.5),
        ],
    )
    def test_decimal_forms(self, text: str, expected: float) -> None:
        assert parse_number(text) == expected

    @pytest.mark.parametrize(
        ("text", "expected"),
        [("INF", math.inf), ("+INF", math.inf), ("-INF", -math.inf), ("NINF", -math.inf)],
    )
    def test_infinity_keywords(self, text: str, expected: float) -> None:
        assert parse_number(text) == expected

    def test_nan_keyword(self) -> None:
        assert math.isnan(parse_number("nan"))

    @pytest.mark.parametrize("text", ["", "abc", "1_000", "infinity", "0x10", "1.0.0", "E5", "--1"])
    def test_rejected(self, text: str) -> None:
        with pytest.raises(ValueError, match="Invalid SCPI number"):
            parse_number(text)


class TestParseNumbers:
    """Tests for parse_numbers."""

    def test_keeps_order_and_duplicates(self) -> None:
        assert parse_numbers("1.250,-2.0,1.250") == (1.25, -2.0, 1.25)

    def test_single_field(self) -> None:
        assert parse_numbers("7") == (7.0,)

    def test_spaces_around_fields(self) -> None:
        assert parse_numbers("1.0, 2.0 ,3.0") == (1.0, 2.0, 3.0)

    def test_empty_field_rejected(self) -> None:
        with pytest.raises(ValueError):
            parse_numbers("1.0,,2.0")


class TestFormatBool:
    """Tests for format_bool."""

    @pytest.mark.parametrize(
        ("style", "on", "off"),
        [(BoolStyle.NUMERIC, "1", "0"), (BoolStyle.SWITCH, "ON", "OFF")],
    )
    def test_styles(self, style: BoolStyle, on: str, off: str) -> None:
        assert format_bool(True, style) == on
        assert format_bool(False, style) == off

    def test_numeric_is_default(self) -> None:
        assert format_bool(True) == "1"
