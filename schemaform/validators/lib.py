"""Validator library for leaf controls.

A validator is a plain callable that receives a control value and returns
either None (valid) or a mapping from failure-reason key to detail. A
leaf runs every active validator independently and is valid only when all
of them return None.

Empty values (None and the empty string) are left to ``required``; every
other validator accepts them.
"""

import math
import re
from collections.abc import Callable, Iterable
from decimal import Decimal
from typing import Any

ValidationErrors = dict[str, Any]
Validator = Callable[[Any], ValidationErrors | None]


def is_empty_value(value: Any) -> bool:
    """Check for a value that counts as not filled in."""
    if value is None:
        return True
    if isinstance(value, (str, list, tuple, dict)):
        return len(value) == 0
    return False


def required(value: Any) -> ValidationErrors | None:
    """Fail when the value is missing or empty.

    This is a module-level function so validator sets can recognise it by
    identity and never hold it twice.
    """
    if is_empty_value(value):
        return {"required": True}
    return None


def _compile_pattern(regex: str | re.Pattern[str]) -> re.Pattern[str] | None:
    if isinstance(regex, re.Pattern):
        return regex
    anchored = str(regex)
    if not anchored.startswith("^"):
        anchored = f"^{anchored}"
    if not anchored.endswith("$"):
        anchored = f"{anchored}$"
    try:
        return re.compile(anchored)
    except re.error:
        return None


def _full_match(
    compiled: re.Pattern[str], source: str, to_text: Callable[[Any], str]
) -> Validator:
    def validate_pattern(value: Any) -> ValidationErrors | None:
        if is_empty_value(value):
            return None
        if compiled.fullmatch(to_text(value)) is not None:
            return None
        return {"pattern": {"required_pattern": source, "actual_value": value}}

    validate_pattern.__qualname__ = f"pattern({source!r})"
    return validate_pattern


def pattern(regex: str | re.Pattern[str]) -> Validator | None:
    """Build a full-match regular expression validator.

    String patterns are anchored with ``^`` and ``$`` unless they already
    are. Compiled patterns are used as given, but the value must still be
    matched in full.

    Args:
        regex: Pattern source or compiled pattern.

    Returns:
        Validator reporting ``pattern`` failures, or None when the source
        is not a regular expression Python can compile (for example the
        ECMA-only ``\\p{L}``).
    """
    compiled = _compile_pattern(regex)
    if compiled is None:
        return None
    source = regex.pattern if isinstance(regex, re.Pattern) else str(regex)
    return _full_match(compiled, source, _stringify)


def number_format(regex: str | re.Pattern[str]) -> Validator | None:
    """Build a pattern validator for numeric leaves.

    Floats are written out in plain decimal notation before matching, so
    ``1e-05`` is tested as ``0.00001`` and ``3.0`` as ``3``.
    """
    compiled = _compile_pattern(regex)
    if compiled is None:
        return None
    source = regex.pattern if isinstance(regex, re.Pattern) else str(regex)
    return _full_match(compiled, source, _number_text)


def const(expected: Any) -> Validator:
    """Build a validator requiring strict equality with ``expected``."""

    def validate_const(value: Any) -> ValidationErrors | None:
        if _strictly_equal(value, expected):
            return None
        return {"const": f"Must be {_describe(expected)}"}

    return validate_const


def maximum(limit: float) -> Validator:
    """Build a validator rejecting numbers greater than ``limit``."""

    def validate_max(value: Any) -> ValidationErrors | None:
        number = _to_number(value)
        if number is not None and number > limit:
            return {"max": {"max": limit, "actual": value}}
        return None

    return validate_max


def minimum(limit: float) -> Validator:
    """Build a validator rejecting numbers less than ``limit``."""

    def validate_min(value: Any) -> ValidationErrors | None:
        number = _to_number(value)
        if number is not None and number < limit:
            return {"min": {"min": limit, "actual": value}}
        return None

    return validate_min


def run_validators(
    validators: Iterable[Validator], value: Any
) -> ValidationErrors | None:
    """Run validators against a value and merge their failures.

    Args:
        validators: Validators to evaluate, in order.
        value: Value under test.

    Returns:
        Merged failure mapping, or None when every validator passes.
    """
    errors: ValidationErrors = {}
    for validator in validators:
        result = validator(value)
        if result:
            errors.update(result)
    return errors or None


def _stringify(value: Any) -> str:
    # JSON spelling for booleans so "true"/"false" patterns behave.
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _number_text(value: Any) -> str:
    if isinstance(value, float) and math.isfinite(value):
        if value.is_integer():
            return str(int(value))
        return format(Decimal(repr(value)), "f")
    return _stringify(value)


def _strictly_equal(value: Any, expected: Any) -> bool:
    # 1 == True and 1 == 1.0 in Python; a const only matches its own type.
    if isinstance(value, bool) or isinstance(expected, bool):
        return type(value) is type(expected) and value == expected
    if isinstance(expected, (int, float)) and isinstance(value, (int, float)):
        return value == expected
    return type(value) is type(expected) and value == expected


def _describe(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _to_number(value: Any) -> float | None:
    if is_empty_value(value) or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return value
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


__all__ = [
    "ValidationErrors",
    "Validator",
    "is_empty_value",
    "required",
    "pattern",
    "number_format",
    "const",
    "maximum",
    "minimum",
    "run_validators",
]
