"""Schema compiler: JSON Schema object node -> reactive control tree.

The compiler walks a schema recursively. Each node is classified once and
dispatched to the builder for its kind:

- string  -> LeafControl with default, pattern, date/time and const checks
- number / integer -> LeafControl with range and numeric-format checks
- boolean -> LeafControl
- null    -> nothing (null properties are left out of the form)
- object  -> GroupControl, one child per buildable property, then the
             conditional engine and the dependency resolver
- array   -> empty CollectionControl

References and unclassifiable nodes produce no control. Nothing in the
schema can make the compiler raise.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from schemaform.conditional import wire_conditional
from schemaform.controls import CollectionControl, Control, GroupControl, LeafControl
from schemaform.core.log import get_logger
from schemaform.dependencies import apply_dependencies, apply_required
from schemaform.schema import (
    DATE_TIME_PATTERNS,
    INTEGER_PATTERN,
    NUMBER_PATTERN,
    Schema,
    SchemaKind,
    StringFormat,
    classify,
    has_dependencies,
    has_requirements,
    is_conditional_object_schema,
    is_const_schema,
    is_date_or_time_schema,
    is_explicit_object_schema,
    is_pattern_schema,
    resolve_string_format,
    schema_dependencies,
    schema_properties,
    schema_required,
)
from schemaform.validators import (
    Validator,
    const,
    maximum,
    minimum,
    number_format,
    pattern,
)

logger = get_logger("compiler")


class SchemaFormCompiler:
    """Compiles object schemas into GroupControl trees.

    Subclasses can swap the control classes through the ``new_leaf``,
    ``new_group`` and ``new_collection`` factories, or replace the
    date/time patterns.

    Example:
        >>> compiler = SchemaFormCompiler()
        >>> form = compiler.from_schema({"properties": {"x": {"type": "string"}}})
        >>> form.value
        {'x': None}
    """

    def __init__(
        self, date_time_patterns: Mapping[StringFormat, Any] | None = None
    ) -> None:
        self.date_time_patterns = dict(date_time_patterns or DATE_TIME_PATTERNS)

    # -------------------------------------------------------------------------
    # Control factories
    # -------------------------------------------------------------------------

    def new_leaf(self, schema: Schema) -> LeafControl:
        return LeafControl(schema=schema)

    def new_group(self, schema: Schema) -> GroupControl:
        return GroupControl(schema=schema)

    def new_collection(self, schema: Schema) -> CollectionControl:
        return CollectionControl(schema=schema)

    # -------------------------------------------------------------------------
    # Entry points
    # -------------------------------------------------------------------------

    def from_schema(self, schema: Schema) -> GroupControl:
        """Compile a root object schema.

        A root that is not an object yields an empty group.

        Args:
            schema: Parsed JSON Schema object node.

        Returns:
            Root GroupControl with validity already evaluated.
        """
        if classify(schema) == SchemaKind.OBJECT:
            group = self.build_object(schema)
        else:
            logger.debug("Root schema is not an object; compiling an empty form")
            group = self.new_group(schema if isinstance(schema, Mapping) else {})
        group.update_value_and_validity(emit_event=False)
        return group

    def process_schema(self, schema: Any, path: str = "") -> Control | None:
        """Compile any schema node, or return None for unsupported shapes."""
        kind = classify(schema)
        match kind:
            case SchemaKind.STRING:
                return self.build_string(schema, path)
            case SchemaKind.NUMBER | SchemaKind.INTEGER:
                return self.build_numeric(schema, kind)
            case SchemaKind.BOOLEAN:
                return self.build_boolean(schema)
            case SchemaKind.NULL:
                return self.build_null(schema)
            case SchemaKind.OBJECT:
                return self.build_object(schema, path)
            case SchemaKind.ARRAY:
                return self.build_array(schema)
            case SchemaKind.REFERENCE | SchemaKind.UNCLASSIFIABLE:
                logger.debug("Dropping %s node at %r", kind.value, path or "<root>")
                return None

    # -------------------------------------------------------------------------
    # Builders
    # -------------------------------------------------------------------------

    def build_string(self, schema: Schema, path: str = "") -> LeafControl:
        """Build a string leaf.

        A ``pattern`` Python cannot compile is dropped with a DEBUG log;
        the leaf is built without it.
        """
        control = self.new_leaf(schema)
        validators: list[Validator | None] = []

        default = schema.get("default")
        if isinstance(default, str):
            control.set_value(default, emit_event=False)
        if is_pattern_schema(schema):
            validator = pattern(str(schema["pattern"]))
            if validator is None:
                logger.debug(
                    "Ignoring invalid pattern %r at %r", schema["pattern"], path or "<root>"
                )
            validators.append(validator)
        if is_date_or_time_schema(schema):
            string_format = resolve_string_format(schema)
            regex = self.date_time_patterns.get(string_format)
            if regex is not None:
                validators.append(pattern(regex))
        if is_const_schema(schema):
            validators.append(const(schema["const"]))

        control.set_validators([v for v in validators if v is not None])
        control.update_value_and_validity(emit_event=False)
        return control

    def numeric_validators(self, schema: Schema, kind: SchemaKind) -> list[Validator]:
        """Derive range and format validators for a numeric schema.

        A ``maximum`` or ``minimum`` of exactly 0 is ignored, the same as an
        absent bound.
        """
        validators: list[Validator] = []

        upper = schema.get("maximum")
        if _is_number(upper) and upper:
            validators.append(maximum(upper))
        lower = schema.get("minimum")
        if _is_number(lower) and lower:
            validators.append(minimum(lower))

        numeric_format = number_format(
            INTEGER_PATTERN if kind == SchemaKind.INTEGER else NUMBER_PATTERN
        )
        if numeric_format is not None:
            validators.append(numeric_format)
        return validators

    def build_numeric(self, schema: Schema, kind: SchemaKind) -> LeafControl:
        control = self.new_leaf(schema)
        control.set_validators(self.numeric_validators(schema, kind))
        control.update_value_and_validity(emit_event=False)
        return control

    def build_boolean(self, schema: Schema) -> LeafControl:
        return self.new_leaf(schema)

    def build_null(self, schema: Schema) -> None:
        return None

    def build_array(self, schema: Schema) -> CollectionControl:
        return self.new_collection(schema)

    def build_object(self, schema: Schema, path: str = "") -> GroupControl:
        """Build a group for an object schema and wire its reactive rules."""
        group = self.new_group(schema)
        if not is_explicit_object_schema(schema):
            return group

        for name, node in schema_properties(schema).items():
            child_path = f"{path}.{name}" if path else name
            control = self.process_schema(node, child_path)
            if control is not None:
                group.add_control(name, control, emit_event=False)

        rule = None
        if is_conditional_object_schema(schema):
            rule = wire_conditional(
                group,
                schema,
                lambda node: self.process_schema(node, path),
            )
        if has_requirements(schema):
            apply_required(group, schema_required(schema), emit_event=False)
        if has_dependencies(schema):
            apply_dependencies(group, schema_dependencies(schema), emit_event=False)

        if rule is not None:
            # First evaluation, after the static requirements are in place.
            group.update_value_and_validity()
        return group


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


class SchemaLoadError(Exception):
    """A schema file could not be read or is not a JSON object."""

    def __init__(self, path: Path, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot load schema {path}: {reason}")


def load_schema(path: Path | str, base_dir: Path | None = None) -> Schema:
    """Read a JSON Schema document from disk.

    Args:
        path: Schema file; relative paths resolve against ``base_dir``.
        base_dir: Directory for relative paths (default: current directory).

    Returns:
        Parsed root schema mapping.

    Raises:
        SchemaLoadError: If the file is unreadable, is not valid JSON, or
            its root is not an object.
    """
    path = Path(path)
    if not path.is_absolute() and base_dir is not None:
        path = base_dir / path

    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise SchemaLoadError(path, e.strerror or str(e)) from e
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise SchemaLoadError(path, f"invalid JSON ({e.msg} at line {e.lineno})") from e
    if not isinstance(data, dict):
        raise SchemaLoadError(path, "root is not a JSON object")

    logger.debug("Loaded schema from %s", path)
    return data


_default_compiler = SchemaFormCompiler()


def compile_schema(schema: Schema) -> GroupControl:
    """Compile a root object schema with the default compiler."""
    return _default_compiler.from_schema(schema)


__all__ = [
    "SchemaFormCompiler",
    "SchemaLoadError",
    "compile_schema",
    "load_schema",
]
