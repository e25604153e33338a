"""Tests for utils module"""

from datetime import date, datetime

import pytest

from formrules.utils import ensure_path, is_empty, is_number, stringify, to_datetime, to_number


class TestIsEmpty:
    """Tests for is_empty function"""

    @pytest.mark.parametrize("value", [None, "", "   ", [], (), {}, set()])
    def test_empty_values(self, value):
        assert is_empty(value)

    @pytest.mark.parametrize("value", [0, False, "x", [None], {"a": 1}, 0.0])
    def test_non_empty_values(self, value):
        assert not is_empty(value)


class TestNumbers:
    """Tests for numeric helpers"""

    def test_booleans_are_not_numbers(self):
        assert not is_number(True)
        assert to_number(False) is None

    def test_numeric_strings(self):
        assert to_number(" 18 ") == 18.0
        assert to_number("3.5") == 3.5
        assert to_number("minor") is None
        assert to_number("") is None

    def test_numbers(self):
        assert to_number(16) == 16.0
        assert is_number(2.5)

    @pytest.mark.parametrize("value", ["nan", "NaN", "inf", "-Infinity", "1_000", float("nan"), float("inf")])
    def test_non_finite_and_underscore_forms_are_not_numbers(self, value):
        assert to_number(value) is None

    def test_huge_integer_is_not_a_number(self):
        assert to_number(10**400) is None


class TestToDatetime:
    """Tests for to_datetime function"""

    def test_iso_strings(self):
        assert to_datetime("2024-03-01") == datetime(2024, 3, 1)
        assert to_datetime("2024-03-01T10:30:00") == datetime(2024, 3, 1, 10, 30)

    def test_date_objects(self):
        assert to_datetime(date(2024, 3, 1)) == datetime(2024, 3, 1)

    def test_non_dates(self):
        assert to_datetime("yesterday") is None
        assert to_datetime(42) is None
        assert to_datetime("") is None


class TestStringify:
    """Tests for stringify function"""

    def test_booleans_render_lowercase(self):
        assert stringify(True) == "true"
        assert stringify(False) == "false"

    def test_integral_floats_drop_fraction(self):
        assert stringify(18.0) == "18"
        assert stringify(18.5) == "18.5"

    def test_none_is_empty_string(self):
        assert stringify(None) == ""


def test_ensure_path_creates_directory(tmp_path):
    target = tmp_path / "a" / "b"
    result = ensure_path(target)
    assert result.is_dir()
    assert result == target.resolve()
