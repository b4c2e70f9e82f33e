"""Authoritative Schema Module for JSON Schema form definitions.

This module is the single source of truth for how schemaform reads a
JSON Schema node. It provides:
- The semantic kind vocabulary (SchemaKind) and string formats
- Pure keyword predicates over raw schema mappings
- The ordered classifier used by the compiler to pick a builder
- Accessors that read keyword values without trusting their shape

Schema nodes are plain parsed-JSON mappings. Nothing here mutates a node
or raises on malformed content; a node that cannot be read is simply
unclassifiable.
"""

import re
from collections.abc import Mapping
from enum import Enum
from typing import Any

Schema = Mapping[str, Any]


class SchemaKind(str, Enum):
    """Semantic kind of a schema node.

    The first seven members are the concrete JSON Schema types. REFERENCE
    marks a ``$ref`` node and UNCLASSIFIABLE a node whose shape cannot be
    inferred; the compiler produces no control for either.
    """

    STRING = "string"
    NUMBER = "number"
    INTEGER = "integer"
    BOOLEAN = "boolean"
    NULL = "null"
    OBJECT = "object"
    ARRAY = "array"
    REFERENCE = "reference"
    UNCLASSIFIABLE = "unclassifiable"


CONCRETE_KINDS = frozenset(
    {
        SchemaKind.STRING,
        SchemaKind.NUMBER,
        SchemaKind.INTEGER,
        SchemaKind.BOOLEAN,
        SchemaKind.NULL,
        SchemaKind.OBJECT,
        SchemaKind.ARRAY,
    }
)

NUMERIC_KINDS = frozenset({SchemaKind.INTEGER, SchemaKind.NUMBER})


class StringFormat(str, Enum):
    """Known values of the ``format`` keyword."""

    # Dates and times
    DATE_TIME = "date-time"
    DATE = "date"
    TIME = "time"

    # Email addresses
    EMAIL = "email"
    IDN_EMAIL = "idn-email"

    # Hostnames and addresses
    HOSTNAME = "hostname"
    IDN_HOSTNAME = "idn-hostname"
    IPV4 = "ipv4"
    IPV6 = "ipv6"

    # Resource identifiers
    URI = "uri"
    URI_REFERENCE = "uri-reference"
    IRI = "iri"
    IRI_REFERENCE = "iri-reference"
    URI_TEMPLATE = "uri-template"

    # Pointers and expressions
    JSON_POINTER = "json-pointer"
    RELATIVE_JSON_POINTER = "relative-json-pointer"
    REGEX = "regex"


DATE_OR_TIME_FORMATS = frozenset(
    {StringFormat.DATE_TIME, StringFormat.DATE, StringFormat.TIME}
)

# Fixed validators for the date/time formats. Years are four digits with a
# non-zero leading digit.
DATE_TIME_PATTERNS: dict[StringFormat, re.Pattern[str]] = {
    StringFormat.DATE_TIME: re.compile(
        r"^[1-9]\d{3}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}([+-]\d{2}:\d{2}|Z)$"
    ),
    StringFormat.TIME: re.compile(r"^\d{2}:\d{2}:\d{2}([+-]\d{2}:\d{2}|Z)$"),
    StringFormat.DATE: re.compile(r"^[1-9]\d{3}-\d{2}-\d{2}$"),
}

INTEGER_PATTERN = re.compile(r"^[-+]?\d+$")
NUMBER_PATTERN = re.compile(r"^[-+]?(\d+(\.\d+)?|\d*\.\d+)$")

# Keywords that only make sense on a string schema.
STRING_KEYWORDS = ("pattern", "format", "maxLength", "minLength")


# === REFERENCES AND COMBINATORS ===


def is_schema(node: Any) -> bool:
    """Check that a value can be read as a schema node at all."""
    return isinstance(node, Mapping)


def is_ref(node: Any) -> bool:
    """Check for a ``$ref`` resolution pointer."""
    return is_schema(node) and node.get("$ref") is not None


def is_concrete_schema(node: Any) -> bool:
    """Check for a readable node that is not a reference."""
    return is_schema(node) and not is_ref(node)


def is_const_schema(node: Schema) -> bool:
    """Check for a ``const`` keyword; a null const still counts."""
    return "const" in node


def is_enum_schema(node: Schema) -> bool:
    return isinstance(node.get("enum"), list)


def is_any_of_schema(node: Schema) -> bool:
    return isinstance(node.get("anyOf"), list)


def is_one_of_schema(node: Schema) -> bool:
    return isinstance(node.get("oneOf"), list)


def is_all_of_schema(node: Schema) -> bool:
    return isinstance(node.get("allOf"), list)


def is_not_schema(node: Schema) -> bool:
    return is_schema(node.get("not"))


# === OBJECTS ===


def is_object_schema(node: Any) -> bool:
    """Check for an object node: explicit type or a ``properties`` map."""
    if not is_concrete_schema(node):
        return False
    return is_schema(node.get("properties")) or declared_type(node) == "object"


def is_explicit_object_schema(node: Any) -> bool:
    """Check for an object node that lists its properties."""
    return is_object_schema(node) and is_schema(node.get("properties"))


def is_conditional_object_schema(node: Schema) -> bool:
    """Check for ``if`` and ``then`` clauses on an object node."""
    return is_schema(node.get("if")) and is_schema(node.get("then"))


def has_requirements(node: Schema) -> bool:
    """Check for a non-empty ``required`` list."""
    required = node.get("required")
    return isinstance(required, list) and len(required) > 0


def has_dependencies(node: Schema) -> bool:
    return is_schema(node.get("dependencies"))


# === STRINGS ===


def is_string_schema(node: Schema) -> bool:
    """Check for a string node.

    A node is a string when it says so, when it carries a string-only
    keyword, or when its ``default`` or ``const`` is a string.
    """
    if declared_type(node) == "string":
        return True
    if any(keyword in node for keyword in STRING_KEYWORDS):
        return True
    return isinstance(node.get("default"), str) or isinstance(node.get("const"), str)


def is_pattern_schema(node: Schema) -> bool:
    return node.get("pattern") is not None


def _has_format(node: Schema, string_format: StringFormat | None = None) -> bool:
    value = node.get("format")
    if value is None:
        return False
    return string_format is None or value == string_format.value


def is_format_schema(node: Schema) -> bool:
    return _has_format(node)


def is_date_time_schema(node: Schema) -> bool:
    return _has_format(node, StringFormat.DATE_TIME)


def is_date_schema(node: Schema) -> bool:
    return _has_format(node, StringFormat.DATE)


def is_time_schema(node: Schema) -> bool:
    return _has_format(node, StringFormat.TIME)


def is_date_or_time_schema(node: Schema) -> bool:
    return any(_has_format(node, fmt) for fmt in DATE_OR_TIME_FORMATS)


def resolve_string_format(node: Schema) -> StringFormat | None:
    """Get the node's ``format`` as a StringFormat, or None if unknown."""
    value = node.get("format")
    if not isinstance(value, str):
        return None
    try:
        return StringFormat(value)
    except ValueError:
        return None


# === PRIMITIVES ===


def is_numeric_schema(node: Schema) -> bool:
    return declared_type(node) in ("integer", "number")


def is_integer_schema(node: Schema) -> bool:
    return declared_type(node) == "integer"


def is_number_schema(node: Schema) -> bool:
    return declared_type(node) == "number"


def is_boolean_schema(node: Schema) -> bool:
    return declared_type(node) == "boolean"


def is_null_schema(node: Schema) -> bool:
    return declared_type(node) == "null"


def is_array_schema(node: Schema) -> bool:
    return declared_type(node) == "array"


# === CLASSIFICATION ===


def declared_type(node: Schema) -> str | None:
    """Get the single concrete ``type`` a node declares, if any.

    A one-entry type list counts as that entry; longer union lists declare
    nothing and leave the node to structural inference.
    """
    value = node.get("type")
    if isinstance(value, str):
        return value
    if isinstance(value, list) and len(value) == 1 and isinstance(value[0], str):
        return value[0]
    return None


def classify(node: Any) -> SchemaKind:
    """Decide the semantic kind of a schema node.

    Resolution order:
        1. ``$ref`` nodes are REFERENCE.
        2. A declared single ``type`` is returned as-is (an unknown type
           name is UNCLASSIFIABLE).
        3. A ``properties`` map means OBJECT.
        4. String-only keywords or a string ``default``/``const`` mean STRING.
        5. Anything else is UNCLASSIFIABLE.

    Args:
        node: Raw schema node.

    Returns:
        Exactly one SchemaKind; never raises.
    """
    if not is_schema(node):
        return SchemaKind.UNCLASSIFIABLE
    if is_ref(node):
        return SchemaKind.REFERENCE

    type_name = declared_type(node)
    if type_name is not None:
        try:
            kind = SchemaKind(type_name)
        except ValueError:
            return SchemaKind.UNCLASSIFIABLE
        return kind if kind in CONCRETE_KINDS else SchemaKind.UNCLASSIFIABLE

    if is_object_schema(node):
        return SchemaKind.OBJECT
    if is_string_schema(node):
        return SchemaKind.STRING
    return SchemaKind.UNCLASSIFIABLE


# === KEYWORD ACCESSORS ===


def schema_properties(node: Schema) -> dict[str, Any]:
    """Get ``properties`` in declaration order, empty when unusable."""
    properties = node.get("properties")
    if not is_schema(properties):
        return {}
    return {str(name): child for name, child in properties.items()}


def schema_required(node: Schema) -> list[str]:
    """Get the string entries of ``required``."""
    if not has_requirements(node):
        return []
    return [name for name in node["required"] if isinstance(name, str)]


def schema_dependencies(node: Schema) -> dict[str, Any]:
    if not has_dependencies(node):
        return {}
    return dict(node["dependencies"])


def dependency_targets(dependency: Any) -> list[str] | None:
    """Get the property names of an array-form dependency.

    Returns None for the schema-object form, which is recognized but not
    interpreted.
    """
    if not isinstance(dependency, list):
        return None
    return [name for name in dependency if isinstance(name, str)]


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
