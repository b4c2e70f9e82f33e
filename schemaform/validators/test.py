"""Unit tests for validators module."""

import re

import pytest

from schemaform.validators import (
    const,
    is_empty_value,
    maximum,
    minimum,
    number_format,
    pattern,
    required,
    run_validators,
)


class TestRequired:
    """Tests for the required validator."""

    @pytest.mark.unit
    @pytest.mark.parametrize("value", [None, "", [], {}])
    def test_empty_values_fail(self, value):
        """Missing and empty values are rejected."""
        assert required(value) == {"required": True}

    @pytest.mark.unit
    @pytest.mark.parametrize("value", ["x", 0, False, " ", [1]])
    def test_filled_values_pass(self, value):
        """Falsy but present values are accepted."""
        assert required(value) is None


class TestPattern:
    """Tests for the pattern validator."""

    @pytest.mark.unit
    def test_full_match(self):
        """Patterns must match the whole value."""
        validator = pattern("^test\\s+\\d{2,4}$")
        assert validator("test\t123") is None
        errors = validator("abc")
        assert errors is not None
        assert errors["pattern"]["actual_value"] == "abc"
        assert errors["pattern"]["required_pattern"] == "^test\\s+\\d{2,4}$"

    @pytest.mark.unit
    def test_unanchored_source_is_anchored(self):
        """Unanchored sources behave as full matches, not searches."""
        validator = pattern("\\d+")
        assert validator("123") is None
        assert validator("a123b") is not None

    @pytest.mark.unit
    def test_compiled_pattern_requires_full_match(self):
        """Compiled patterns are not treated as searches either."""
        validator = pattern(re.compile("ab"))
        assert validator("ab") is None
        assert validator("xaby") is not None

    @pytest.mark.unit
    def test_empty_values_pass(self):
        """Empty values are left to required."""
        validator = pattern("^a$")
        assert validator(None) is None
        assert validator("") is None

    @pytest.mark.unit
    def test_non_strings_are_stringified(self):
        """Numbers are matched through their string form."""
        validator = pattern("^-?\\d+$")
        assert validator(42) is None
        assert validator(4.5) is not None

    @pytest.mark.unit
    def test_booleans_stringify_as_json(self):
        """Booleans use their JSON spelling."""
        assert pattern("^true$")(True) is None

    @pytest.mark.unit
    @pytest.mark.parametrize("source", ["\\p{L}+", "(", "a{2,1}"])
    def test_uncompilable_source_gives_no_validator(self, source):
        """Sources Python cannot compile build nothing instead of raising."""
        assert pattern(source) is None


class TestNumberFormat:
    """Tests for number_format validator."""

    @pytest.mark.unit
    def test_floats_in_plain_notation(self):
        """Exponent floats are matched in plain decimal form."""
        validator = number_format(re.compile(r"^[-+]?(\d+(\.\d+)?|\d*\.\d+)$"))
        assert validator(1e-05) is None
        assert validator(1e20) is None
        assert validator(-2.5) is None
        assert validator("1e5") is not None

    @pytest.mark.unit
    def test_integral_floats_are_integers(self):
        validator = number_format(re.compile(r"^[-+]?\d+$"))
        assert validator(3.0) is None
        assert validator(3.5) is not None
        assert validator(True) is not None


class TestConst:
    """Tests for the const validator."""

    @pytest.mark.unit
    def test_equal_value_passes(self):
        """Strictly equal values pass."""
        assert const("xc")("xc") is None

    @pytest.mark.unit
    def test_different_value_fails(self):
        """Other values report the expected constant."""
        assert const("xc")("x") == {"const": "Must be xc"}

    @pytest.mark.unit
    def test_null_is_not_empty_string(self):
        """A missing value does not satisfy a string const."""
        assert const("xc")(None) is not None

    @pytest.mark.unit
    def test_no_bool_int_coercion(self):
        """True is not 1 for const purposes."""
        assert const(1)(True) is not None
        assert const(True)(1) is not None
        assert const(1)(1.0) is None

    @pytest.mark.unit
    def test_null_const(self):
        """A null const reads as null in its message."""
        assert const(None)(None) is None
        assert const(None)("a") == {"const": "Must be null"}


class TestRange:
    """Tests for minimum and maximum validators."""

    @pytest.mark.unit
    def test_maximum(self):
        """Values above the maximum fail."""
        validator = maximum(10)
        assert validator(10) is None
        assert validator(11) == {"max": {"max": 10, "actual": 11}}

    @pytest.mark.unit
    def test_minimum(self):
        """Values below the minimum fail."""
        validator = minimum(2)
        assert validator(2) is None
        assert validator(1.5) == {"min": {"min": 2, "actual": 1.5}}

    @pytest.mark.unit
    def test_numeric_strings(self):
        """Numeric strings are compared as numbers."""
        assert maximum(10)("11") is not None
        assert minimum(10)("11") is None

    @pytest.mark.unit
    def test_absent_and_non_numeric_values_pass(self):
        """Absent or non-numeric values are not range-checked."""
        assert maximum(1)(None) is None
        assert maximum(1)("") is None
        assert maximum(1)("abc") is None
        assert maximum(0)(True) is None


class TestRunValidators:
    """Tests for validator composition."""

    @pytest.mark.unit
    def test_all_pass(self):
        """No failures yields None."""
        assert run_validators([minimum(1), maximum(3)], 2) is None

    @pytest.mark.unit
    def test_failures_merge(self):
        """Each failing validator contributes its key."""
        errors = run_validators([required, pattern("^a$"), const("b")], "c")
        assert set(errors) == {"pattern", "const"}

    @pytest.mark.unit
    def test_empty_list(self):
        """No validators means valid."""
        assert run_validators([], None) is None


class TestIsEmptyValue:
    """Tests for the emptiness helper."""

    @pytest.mark.unit
    def test_zero_is_not_empty(self):
        """Zero and False count as filled in."""
        assert not is_empty_value(0)
        assert not is_empty_value(False)
        assert is_empty_value("")
