"""Unit tests for the Schema module."""

import pytest

from schemaform.schema import (
    DATE_TIME_PATTERNS,
    INTEGER_PATTERN,
    NUMBER_PATTERN,
    SchemaKind,
    StringFormat,
    classify,
    declared_type,
    dependency_targets,
    has_dependencies,
    has_requirements,
    is_conditional_object_schema,
    is_const_schema,
    is_date_or_time_schema,
    is_enum_schema,
    is_explicit_object_schema,
    is_object_schema,
    is_ref,
    is_string_schema,
    resolve_string_format,
    schema_properties,
    schema_required,
)


class TestClassifyDeclaredType:
    """Tests for classification from an explicit ``type``."""

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "type_name,kind",
        [
            ("string", SchemaKind.STRING),
            ("number", SchemaKind.NUMBER),
            ("integer", SchemaKind.INTEGER),
            ("boolean", SchemaKind.BOOLEAN),
            ("null", SchemaKind.NULL),
            ("object", SchemaKind.OBJECT),
            ("array", SchemaKind.ARRAY),
        ],
    )
    def test_declared_type_wins(self, type_name, kind):
        """A declared type maps directly to its kind."""
        assert classify({"type": type_name}) == kind

    @pytest.mark.unit
    def test_declared_type_beats_inference(self):
        """Structural hints never override a declared type."""
        assert classify({"type": "integer", "pattern": "^x$"}) == SchemaKind.INTEGER

    @pytest.mark.unit
    def test_single_entry_type_list(self):
        """A one-entry type list counts as that type."""
        assert classify({"type": ["boolean"]}) == SchemaKind.BOOLEAN

    @pytest.mark.unit
    def test_union_type_list_falls_back_to_inference(self):
        """Union type lists are inferred structurally."""
        assert classify({"type": ["string", "null"]}) == SchemaKind.UNCLASSIFIABLE
        assert classify({"type": ["string", "null"], "default": "a"}) == (
            SchemaKind.STRING
        )

    @pytest.mark.unit
    def test_unknown_type_name(self):
        """An unknown type name is unclassifiable."""
        assert classify({"type": "date"}) == SchemaKind.UNCLASSIFIABLE

    @pytest.mark.unit
    def test_internal_kind_names_are_not_types(self):
        """The non-type kinds cannot be declared."""
        assert classify({"type": "reference"}) == SchemaKind.UNCLASSIFIABLE
        assert classify({"type": "unclassifiable"}) == SchemaKind.UNCLASSIFIABLE


class TestClassifyInference:
    """Tests for structural inference when ``type`` is absent."""

    @pytest.mark.unit
    def test_reference(self):
        """``$ref`` nodes are references even with other keywords."""
        assert classify({"$ref": "#/definitions/a"}) == SchemaKind.REFERENCE
        assert classify({"$ref": "#/a", "type": "string"}) == SchemaKind.REFERENCE

    @pytest.mark.unit
    def test_properties_mean_object(self):
        """A properties map means object."""
        assert classify({"properties": {}}) == SchemaKind.OBJECT

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "node",
        [
            {"pattern": "^a$"},
            {"format": "email"},
            {"minLength": 2},
            {"maxLength": 2},
            {"default": ""},
            {"const": "fixed"},
        ],
    )
    def test_string_hints(self, node):
        """String-only keywords and string defaults mean string."""
        assert classify(node) == SchemaKind.STRING

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "node",
        [
            {},
            {"default": 3},
            {"const": None},
            {"description": "no shape"},
            {"anyOf": [{"type": "string"}]},
        ],
    )
    def test_unclassifiable(self, node):
        """Nodes without shape hints are unclassifiable."""
        assert classify(node) == SchemaKind.UNCLASSIFIABLE

    @pytest.mark.unit
    @pytest.mark.parametrize("node", [None, 3, "string", ["type"], True])
    def test_non_mapping_nodes(self, node):
        """Values that are not mappings never raise."""
        assert classify(node) == SchemaKind.UNCLASSIFIABLE


class TestObjectPredicates:
    """Tests for object keyword predicates."""

    @pytest.mark.unit
    def test_object_schema(self):
        """Object detection uses type or properties."""
        assert is_object_schema({"type": "object"})
        assert is_object_schema({"properties": {"a": {}}})
        assert not is_object_schema({"$ref": "#/a", "properties": {}})
        assert not is_object_schema({"type": "string"})

    @pytest.mark.unit
    def test_explicit_object_schema(self):
        """Explicit objects list their properties."""
        assert is_explicit_object_schema({"properties": {}})
        assert not is_explicit_object_schema({"type": "object"})

    @pytest.mark.unit
    def test_conditional(self):
        """Conditionals need both if and then."""
        assert is_conditional_object_schema({"if": {}, "then": {}})
        assert not is_conditional_object_schema({"if": {}})
        assert not is_conditional_object_schema({"if": True, "then": {}})

    @pytest.mark.unit
    def test_requirements(self):
        """Only non-empty required lists count."""
        assert has_requirements({"required": ["a"]})
        assert not has_requirements({"required": []})
        assert not has_requirements({"required": "a"})

    @pytest.mark.unit
    def test_dependencies(self):
        """Dependencies must be a mapping."""
        assert has_dependencies({"dependencies": {"a": ["b"]}})
        assert not has_dependencies({"dependencies": ["a"]})


class TestPrimitivePredicates:
    """Tests for const, enum, ref and string predicates."""

    @pytest.mark.unit
    def test_null_const_is_const(self):
        """A const of null is still a const."""
        assert is_const_schema({"const": None})
        assert not is_const_schema({})

    @pytest.mark.unit
    def test_enum(self):
        """Enum must be a list."""
        assert is_enum_schema({"enum": ["a"]})
        assert not is_enum_schema({"enum": "a"})

    @pytest.mark.unit
    def test_ref(self):
        """A null $ref is not a reference."""
        assert is_ref({"$ref": "#"})
        assert not is_ref({"$ref": None})
        assert not is_ref("#")

    @pytest.mark.unit
    def test_string_schema_const_type(self):
        """Non-string const does not imply string."""
        assert is_string_schema({"const": "a"})
        assert not is_string_schema({"const": 1})

    @pytest.mark.unit
    def test_date_or_time(self):
        """Only the three date/time formats match."""
        assert is_date_or_time_schema({"format": "date"})
        assert is_date_or_time_schema({"format": "time"})
        assert is_date_or_time_schema({"format": "date-time"})
        assert not is_date_or_time_schema({"format": "email"})
        assert not is_date_or_time_schema({})

    @pytest.mark.unit
    def test_resolve_string_format(self):
        """Known formats resolve to the enum, others to None."""
        assert resolve_string_format({"format": "uri"}) == StringFormat.URI
        assert resolve_string_format({"format": "made-up"}) is None
        assert resolve_string_format({"format": 3}) is None


class TestPatterns:
    """Tests for the fixed format and numeric patterns."""

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "value", ["2020-02-04T11:10:23Z", "2020-02-04T11:10:23+05:00"]
    )
    def test_date_time_accepts(self, value):
        """Date-time accepts Z and offsets."""
        assert DATE_TIME_PATTERNS[StringFormat.DATE_TIME].match(value)

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "value", ["2020/02/04-11:10PM", "0999-02-04T11:10:23Z", "2020-02-04"]
    )
    def test_date_time_rejects(self, value):
        """Date-time rejects other layouts and zero-led years."""
        assert not DATE_TIME_PATTERNS[StringFormat.DATE_TIME].match(value)

    @pytest.mark.unit
    def test_date_and_time(self):
        """Date and time patterns are anchored."""
        assert DATE_TIME_PATTERNS[StringFormat.DATE].match("2020-02-04")
        assert not DATE_TIME_PATTERNS[StringFormat.DATE].match("2020-02-04T")
        assert DATE_TIME_PATTERNS[StringFormat.TIME].match("11:10:23Z")
        assert not DATE_TIME_PATTERNS[StringFormat.TIME].match("11:10")

    @pytest.mark.unit
    def test_numeric_patterns(self):
        """Integer and decimal patterns."""
        assert INTEGER_PATTERN.match("-42")
        assert not INTEGER_PATTERN.match("4.2")
        assert NUMBER_PATTERN.match("4.2")
        assert NUMBER_PATTERN.match(".5")
        assert NUMBER_PATTERN.match("+7")
        assert not NUMBER_PATTERN.match("4.")
        assert not NUMBER_PATTERN.match("abc")


class TestAccessors:
    """Tests for tolerant keyword accessors."""

    @pytest.mark.unit
    def test_properties_keep_order(self):
        """Property order follows declaration order."""
        node = {"properties": {"b": {}, "a": {}, "c": {}}}
        assert list(schema_properties(node)) == ["b", "a", "c"]

    @pytest.mark.unit
    def test_properties_malformed(self):
        """Malformed properties read as empty."""
        assert schema_properties({"properties": ["a"]}) == {}
        assert schema_properties({}) == {}

    @pytest.mark.unit
    def test_required_filters_non_strings(self):
        """Non-string required entries are ignored."""
        assert schema_required({"required": ["a", 3, "b"]}) == ["a", "b"]

    @pytest.mark.unit
    def test_dependency_targets(self):
        """Array dependencies list names; schema dependencies do not."""
        assert dependency_targets(["z"]) == ["z"]
        assert dependency_targets({"properties": {}}) is None

    @pytest.mark.unit
    def test_declared_type(self):
        """Declared type reads strings and single-entry lists."""
        assert declared_type({"type": "string"}) == "string"
        assert declared_type({"type": ["null"]}) == "null"
        assert declared_type({"type": ["a", "b"]}) is None
        assert declared_type({}) is None
