"""Tests for the global template functions."""

from datetime import datetime

import pytest
from risma import helpers
from risma.helpers import GLOBAL_FUNCTIONS, stringify


class TestExports:
    def test_only_listed_names_are_exposed(self):
        """Only names in __all__ reach templates."""
        assert set(GLOBAL_FUNCTIONS) == set(helpers.__all__)
        assert "stringify" not in GLOBAL_FUNCTIONS
        assert "eval" not in GLOBAL_FUNCTIONS

    def test_table_is_read_only(self):
        """The global table cannot be modified."""
        with pytest.raises(TypeError):
            GLOBAL_FUNCTIONS["open"] = open


class TestStringify:
    @pytest.mark.parametrize(
        "value, expected",
        [(None, ""), (True, "1"), (False, ""), (3, "3"), (1.5, "1.5"), ("x", "x")],
    )
    def test_stringify(self, value, expected):
        """Test output text for each value type."""
        assert stringify(value) == expected


class TestStrings:
    def test_case(self):
        """Test case conversion helpers."""
        assert helpers.strtoupper("abc") == "ABC"
        assert helpers.strtolower("ABC") == "abc"
        assert helpers.ucfirst("hello world") == "Hello world"
        assert helpers.lcfirst("Hello") == "hello"
        assert helpers.ucwords("hello big\tworld") == "Hello Big\tWorld"
        assert helpers.ucfirst("") == ""

    def test_trim(self):
        """Test trimming helpers."""
        assert helpers.trim("  x  ") == "x"
        assert helpers.trim("--x--", "-") == "x"
        assert helpers.ltrim("  x  ") == "x  "
        assert helpers.rtrim("  x  ") == "  x"

    def test_str_replace(self):
        """Test str_replace."""
        assert helpers.str_replace("foo", "bar", "hello foo world") == "hello bar world"

    def test_substr(self):
        """Test substr with positive and negative bounds."""
        assert helpers.substr("abcdef", 1) == "bcdef"
        assert helpers.substr("abcdef", 1, 3) == "bcd"
        assert helpers.substr("abcdef", -2) == "ef"
        assert helpers.substr("abcdef", 0, -1) == "abcde"

    def test_str_pad(self):
        """Test padding on each side."""
        assert helpers.str_pad("5", 3, "0", "left") == "005"
        assert helpers.str_pad("ab", 5, "-") == "ab---"
        assert helpers.str_pad("ab", 6, "*", "both") == "**ab**"
        assert helpers.str_pad("abc", 2) == "abc"

    def test_misc(self):
        """Test the remaining string helpers."""
        assert helpers.str_repeat("ab", 3) == "ababab"
        assert helpers.strrev("abc") == "cba"
        assert helpers.strlen("héllo") == 5
        assert helpers.nl2br("a\nb") == "a<br />\nb"
        assert helpers.htmlspecialchars('<a href="x">') == "&lt;a href=&quot;x&quot;&gt;"
        assert helpers.sprintf("%s-%03d", "id", 7) == "id-007"
        assert helpers.slugify("Hello, World!") == "hello-world"
        assert helpers.json_encode({"a": 1}) == '{"a": 1}'

    def test_implode_explode(self):
        """Test joining and splitting."""
        assert helpers.explode(",", "a,b,c") == ["a", "b", "c"]
        assert helpers.implode(", ", ["a", "b"]) == "a, b"
        assert helpers.implode(["a", "b"], "-") == "a-b"
        with pytest.raises(ValueError):
            helpers.explode("", "abc")

    def test_pythonic_aliases(self):
        """Test the Python-style aliases."""
        assert helpers.upper("a") == "A"
        assert helpers.title("hello world") == "Hello World"
        assert helpers.capitalize("hELLO") == "Hello"
        assert helpers.replace("aXa", "X", "-") == "a-a"
        assert helpers.length([1, 2, 3]) == 3
        assert helpers.length(None) == 0
        assert helpers.default("", "n/a") == "n/a"
        assert helpers.default("x", "n/a") == "x"


class TestNumberFormat:
    @pytest.mark.parametrize(
        "args, expected",
        [
            ((1500.5, 2, ".", ","), "1,500.50"),
            ((1234567.891,), "1,234,568"),
            ((1234.5, 2, ",", "."), "1.234,50"),
            ((2.5,), "3"),
            ((-1234.567, 1), "-1,234.6"),
            ((-0.001, 2), "0.00"),
            (("42",), "42"),
        ],
    )
    def test_number_format(self, args, expected):
        """Test grouping and half-up rounding."""
        assert helpers.number_format(*args) == expected


class TestDate:
    def test_current_year(self):
        """Test the default timestamp."""
        assert helpers.date("Y") == str(datetime.now().year)

    def test_format_characters(self):
        """Test the supported format characters."""
        moment = datetime(2024, 3, 5, 14, 7, 9)
        stamp = moment.timestamp()
        assert helpers.date("Y-m-d H:i:s", stamp) == "2024-03-05 14:07:09"
        assert helpers.date("D, j M y", stamp) == "Tue, 5 Mar 24"
        assert helpers.date("l F g:i A", stamp) == "Tuesday March 2:07 PM"
        assert helpers.date("N w z t L", stamp) == "2 2 64 31 1"

    def test_escaped_characters(self):
        """A backslash makes a format character literal."""
        stamp = datetime(2024, 3, 5).timestamp()
        assert helpers.date("\\Y\\e\\a\\r: Y", stamp) == "Year: 2024"


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
