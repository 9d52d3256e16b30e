"""Unit tests for unit codes and quantity parsing."""
import logging

import pytest

from dishbook.services.units import normalize_unit, parse_quantity


class TestNormalizeUnit:
    @pytest.mark.parametrize(
        "unit,expected",
        [
            ("g", "g"),
            ("G ", "g"),
            ("gram", "g"),
            ("kilogramy", "kg"),
            ("litr", "l"),
            ("Łyżka", "łyżka"),
            ("sztuki", "szt"),
        ],
    )
    def test_known_units(self, unit, expected):
        assert normalize_unit(unit) == expected

    @pytest.mark.parametrize("unit", [None, "", "   "])
    def test_missing_unit(self, unit):
        assert normalize_unit(unit) is None

    def test_unknown_unit_is_logged(self, caplog):
        with caplog.at_level(logging.WARNING, logger="dishbook.services.units"):
            assert normalize_unit("garść") is None

        assert "garść" in caplog.text


class TestParseQuantity:
    @pytest.mark.parametrize(
        "quantity,expected",
        [
            ("2", 2.0),
            ("200 g", 200.0),
            ("1,5 szklanki", 1.5),
            (" 0.25", 0.25),
        ],
    )
    def test_leading_number(self, quantity, expected):
        assert parse_quantity(quantity) == expected

    @pytest.mark.parametrize("quantity", [None, "", "szczypta", "do smaku"])
    def test_no_number(self, quantity):
        assert parse_quantity(quantity) is None
