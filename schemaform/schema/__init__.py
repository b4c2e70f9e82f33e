"""Schema module - authoritative reading of JSON Schema nodes.

This module provides:
- The SchemaKind vocabulary and known string formats
- Keyword predicates over raw schema mappings
- The ordered classifier that picks a builder for each node
- Tolerant keyword accessors

Example usage:
    >>> from schemaform.schema import SchemaKind, classify
    >>> classify({"properties": {}})
    <SchemaKind.OBJECT: 'object'>
    >>> classify({"$ref": "#/definitions/x"})
    <SchemaKind.REFERENCE: 'reference'>
"""

from .lib import (
    CONCRETE_KINDS,
    DATE_OR_TIME_FORMATS,
    DATE_TIME_PATTERNS,
    INTEGER_PATTERN,
    NUMBER_PATTERN,
    NUMERIC_KINDS,
    STRING_KEYWORDS,
    Schema,
    SchemaKind,
    StringFormat,
    classify,
    declared_type,
    dependency_targets,
    has_dependencies,
    has_requirements,
    is_all_of_schema,
    is_any_of_schema,
    is_array_schema,
    is_boolean_schema,
    is_concrete_schema,
    is_conditional_object_schema,
    is_const_schema,
    is_date_or_time_schema,
    is_date_schema,
    is_date_time_schema,
    is_enum_schema,
    is_explicit_object_schema,
    is_format_schema,
    is_integer_schema,
    is_not_schema,
    is_null_schema,
    is_number_schema,
    is_numeric_schema,
    is_object_schema,
    is_one_of_schema,
    is_pattern_schema,
    is_ref,
    is_schema,
    is_string_schema,
    is_time_schema,
    resolve_string_format,
    schema_dependencies,
    schema_properties,
    schema_required,
)

__all__ = [
    # Vocabulary
    "Schema",
    "SchemaKind",
    "StringFormat",
    "CONCRETE_KINDS",
    "NUMERIC_KINDS",
    "DATE_OR_TIME_FORMATS",
    "DATE_TIME_PATTERNS",
    "INTEGER_PATTERN",
    "NUMBER_PATTERN",
    "STRING_KEYWORDS",
    # References and combinators
    "is_schema",
    "is_ref",
    "is_concrete_schema",
    "is_const_schema",
    "is_enum_schema",
    "is_any_of_schema",
    "is_one_of_schema",
    "is_all_of_schema",
    "is_not_schema",
    # Objects
    "is_object_schema",
    "is_explicit_object_schema",
    "is_conditional_object_schema",
    "has_requirements",
    "has_dependencies",
    # Strings
    "is_string_schema",
    "is_pattern_schema",
    "is_format_schema",
    "is_date_time_schema",
    "is_date_schema",
    "is_time_schema",
    "is_date_or_time_schema",
    "resolve_string_format",
    # Primitives
    "is_numeric_schema",
    "is_integer_schema",
    "is_number_schema",
    "is_boolean_schema",
    "is_null_schema",
    "is_array_schema",
    # Classification
    "declared_type",
    "classify",
    # Accessors
    "schema_properties",
    "schema_required",
    "schema_dependencies",
    "dependency_targets",
]
