"""Validator library for leaf controls."""

from .lib import (
    ValidationErrors,
    Validator,
    const,
    is_empty_value,
    maximum,
    minimum,
    number_format,
    pattern,
    required,
    run_validators,
)

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
