"""
Tests coercion primitive
  to_str / to_number / to_bool / to_choice / to_str_list / string_map / new_id
"""
import sys, os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest

from lp_studio.core.coerce import (
    as_dict, new_id, non_blank, string_map, to_bool, to_choice, to_number,
    to_str, to_str_list, to_str_or,
)


# ── to_str ────────────────────────────────────────────────────────────────

class TestToStr:
    def test_string_unchanged(self):
        assert to_str("abc") == "abc"

    def test_none_gives_default(self):
        assert to_str(None) == ""
        assert to_str(None, "x") == "x"

    def test_bool(self):
        assert to_str(True) == "true"
        assert to_str(False) == "false"

    def test_integral_float(self):
        assert to_str(1.0) == "1"
        assert to_str(2.5) == "2.5"

    def test_int(self):
        assert to_str(42) == "42"

    def test_containers_give_default(self):
        assert to_str({"a": 1}) == ""
        assert to_str([1, 2], "d") == "d"

    def test_nan_gives_default(self):
        assert to_str(float("nan")) == ""

    def test_str_or_prefers_present_value(self):
        assert to_str_or("", "fallback") == ""
        assert to_str_or(None, "fallback") == "fallback"


# ── to_number ────────────────────────────────────────────────────────────

class TestToNumber:
    def test_numbers(self):
        assert to_number(3) == 3
        assert to_number(1.5) == 1.5

    def test_numeric_string(self):
        assert to_number(" 12 ") == 12
        assert to_number("0.25") == 0.25

    def test_bool_is_not_a_number(self):
        assert to_number(True, None) is None

    @pytest.mark.parametrize("value", ["", "abc", None, [], {}, float("inf")])
    def test_invalid_gives_default(self, value):
        assert to_number(value, 7) == 7


# ── Autres ────────────────────────────────────────────────────────────────

class TestMisc:
    def test_to_bool(self):
        assert to_bool(True) is True
        assert to_bool("true") is False
        assert to_bool(1, True) is True

    def test_to_choice(self):
        assert to_choice("b", ("a", "b"), "a") == "b"
        assert to_choice("z", ("a", "b"), "a") == "a"

    def test_to_str_list(self):
        assert to_str_list(["a", 1, None]) == ["a", "1", ""]
        assert to_str_list(["a", "", None], drop_empty=True) == ["a"]
        assert to_str_list("abc") == []

    def test_as_dict_copies(self):
        src = {"a": 1}
        out = as_dict(src)
        out["b"] = 2
        assert "b" not in src
        assert as_dict([1]) == {}

    def test_string_map(self):
        assert string_map({1: 2, "x": None}) == {"1": "2", "x": ""}
        assert string_map("nope") == {}

    def test_non_blank(self):
        assert non_blank("  ") is None
        assert non_blank("a") == "a"
        assert non_blank(3) is None

    def test_new_id_format(self):
        value = new_id("sec")
        assert value.startswith("sec_")
        assert len(value) == len("sec_") + 6
