"""Тесты форматирования чисел по шаблону."""

import pytest

from smartscript.exec.decfmt import compile_pattern, format_decimal


class TestFormatDecimal:

    @pytest.mark.parametrize("number, pattern, expected", [
        (3.14159, "0.00", "3.14"),
        (1234567, "#,##0", "1,234,567"),
        (1234.5, "$#,##0.00", "$1,234.50"),
        (0.256, "0.0%", "25.6%"),
        (2, "000", "002"),
        (1.5, "0.##", "1.5"),
        (1.0, "0.##", "1"),
        (0.001, "#.##", "0"),
        (-1.5, "0.00", "-1.50"),
        (-3, "0;(0)", "(3)"),
        (3, "0;(0)", "3"),
        (5, "'#'0", "#5"),
        (12, "0 'pcs'", "12 pcs"),
    ])
    def test_patterns(self, number, pattern, expected):
        assert format_decimal(number, pattern) == expected

    @pytest.mark.parametrize("number, expected", [
        (0.5, "0"),
        (1.5, "2"),
        (2.5, "2"),
        (3.5, "4"),
    ])
    def test_half_even_rounding(self, number, expected):
        assert format_decimal(number, "0") == expected

    def test_negative_zero_after_rounding(self):
        assert format_decimal(-0.001, "0.00") == "0.00"

    def test_special_values(self):
        assert format_decimal(float("nan"), "0.0") == "NaN"
        assert format_decimal(float("inf"), "0") == "∞"
        assert format_decimal(float("-inf"), "0") == "-∞"

    @pytest.mark.parametrize("pattern", ["abc", "", "0.0.0", "0.0,0"])
    def test_malformed_pattern(self, pattern):
        with pytest.raises(ValueError):
            format_decimal(1, pattern)

    def test_compile_pattern_is_cached(self):
        assert compile_pattern("#,##0.00") is compile_pattern("#,##0.00")
