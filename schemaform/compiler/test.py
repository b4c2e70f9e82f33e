"""Unit tests for the schema compiler."""

import pytest

from schemaform.compiler import (
    SchemaFormCompiler,
    SchemaLoadError,
    compile_schema,
    load_schema,
)
from schemaform.controls import CollectionControl, GroupControl, LeafControl
from schemaform.validators import required


@pytest.fixture
def compiler() -> SchemaFormCompiler:
    return SchemaFormCompiler()


class TestDispatch:
    """Tests for per-kind dispatch."""

    @pytest.mark.unit
    def test_kinds_to_controls(self, compiler):
        """Each kind yields the expected control type."""
        assert isinstance(compiler.process_schema({"type": "string"}), LeafControl)
        assert isinstance(compiler.process_schema({"type": "number"}), LeafControl)
        assert isinstance(compiler.process_schema({"type": "integer"}), LeafControl)
        assert isinstance(compiler.process_schema({"type": "boolean"}), LeafControl)
        assert isinstance(compiler.process_schema({"properties": {}}), GroupControl)
        assert isinstance(compiler.process_schema({"type": "array"}), CollectionControl)

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "node",
        [{"type": "null"}, {"$ref": "#/definitions/a"}, {}, {"default": 3}, None, 5],
    )
    def test_no_control(self, compiler, node):
        """Null, reference and unclassifiable nodes produce nothing."""
        assert compiler.process_schema(node) is None

    @pytest.mark.unit
    def test_controls_keep_their_schema(self, compiler):
        """Controls remember the node they came from."""
        node = {"type": "string", "title": "Name"}
        assert compiler.process_schema(node).schema is node


class TestObjectBuilder:
    """Tests for group construction."""

    @pytest.mark.unit
    def test_properties_in_order(self):
        """Buildable properties appear in declaration order."""
        form = compile_schema(
            {
                "properties": {
                    "b": {"type": "string"},
                    "skip_null": {"type": "null"},
                    "a": {"type": "boolean"},
                    "skip_ref": {"$ref": "#/x"},
                    "c": {"pattern": "^c$"},
                    "skip_unknown": {"description": "?"},
                }
            }
        )
        assert list(form) == ["b", "a", "c"]

    @pytest.mark.unit
    def test_values_and_defaults(self):
        """String defaults seed values; others start as None."""
        form = compile_schema(
            {"properties": {"x": {"type": "string"}, "y": {"default": ""}}}
        )
        assert form.value == {"x": None, "y": ""}
        assert form.valid

    @pytest.mark.unit
    def test_non_string_default_not_seeded(self):
        """Only string defaults are written."""
        form = compile_schema({"properties": {"n": {"type": "number", "default": 3}}})
        assert form.value == {"n": None}

    @pytest.mark.unit
    def test_nested_objects(self):
        """Objects nest to any depth."""
        form = compile_schema(
            {
                "properties": {
                    "outer": {
                        "properties": {
                            "inner": {"properties": {"leaf": {"type": "string"}}}
                        }
                    }
                }
            }
        )
        assert form.value == {"outer": {"inner": {"leaf": None}}}
        assert form.get("outer.inner.leaf").path == "outer.inner.leaf"

    @pytest.mark.unit
    def test_object_without_properties(self):
        """An object type without properties is an empty group."""
        form = compile_schema({"properties": {"o": {"type": "object"}}})
        assert form.value == {"o": {}}

    @pytest.mark.unit
    def test_array_is_empty_collection(self):
        """Arrays compile to empty collections."""
        form = compile_schema(
            {"properties": {"tags": {"type": "array", "items": {"type": "string"}}}}
        )
        assert form.value == {"tags": []}

    @pytest.mark.unit
    def test_non_object_root(self):
        """A non-object root yields an empty group."""
        assert compile_schema({"type": "string"}).value == {}
        assert compile_schema({"$ref": "#"}).value == {}

    @pytest.mark.unit
    def test_required(self):
        """Required names get the Required validator."""
        form = compile_schema(
            {
                "properties": {
                    "x": {"type": "string"},
                    "y": {"default": "something"},
                    "z": {"type": "string"},
                },
                "required": ["x", "y", "missing"],
            }
        )
        assert form["x"].has_validator(required)
        assert form["y"].has_validator(required)
        assert not form["z"].has_validator(required)
        assert form.invalid


class TestStringBuilder:
    """Tests for string validators."""

    @pytest.mark.unit
    def test_pattern(self):
        """Pattern validators are anchored."""
        form = compile_schema({"properties": {"t": {"pattern": "^test\\s+\\d{2,4}$"}}})
        control = form["t"]
        assert control.valid
        control.set_value("abc")
        assert control.has_error("pattern")
        assert form.invalid
        control.set_value("test\t123")
        assert control.errors is None
        assert form.valid

    @pytest.mark.unit
    def test_uncompilable_pattern_dropped(self, caplog):
        """A pattern Python cannot compile is left off the leaf."""
        caplog.set_level("DEBUG", logger="schemaform.compiler")
        form = compile_schema(
            {"properties": {"name": {"type": "string", "pattern": "\\p{L}+"}}}
        )
        control = form["name"]
        assert control.validators == ()
        control.set_value("abc")
        assert form.valid
        assert "Ignoring invalid pattern" in caplog.text
        assert "'name'" in caplog.text

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "fmt,good,bad",
        [
            ("date-time", "2020-02-04T11:10:23Z", "2020/02/04-11:10PM"),
            ("date-time", "2020-02-04T11:10:23+05:00", "2020-02-04 11:10:23"),
            ("date", "2020-02-04", "04-02-2020"),
            ("time", "11:10:23Z", "11:10"),
        ],
    )
    def test_date_time_formats(self, compiler, fmt, good, bad):
        """Date/time formats carry fixed patterns."""
        control = compiler.process_schema({"format": fmt})
        control.set_value(good)
        assert control.valid
        control.set_value(bad)
        assert control.has_error("pattern")

    @pytest.mark.unit
    def test_other_formats_unchecked(self, compiler):
        """Formats without a fixed pattern attach nothing."""
        control = compiler.process_schema({"format": "email"})
        assert control.validators == ()

    @pytest.mark.unit
    def test_const(self, compiler):
        """Const values must match exactly."""
        control = compiler.process_schema({"const": "fixed"})
        assert control.has_error("const")
        control.set_value("fixed")
        assert control.valid

    @pytest.mark.unit
    def test_custom_date_patterns(self):
        """Compilers accept replacement date/time patterns."""
        from schemaform.schema import StringFormat

        custom = SchemaFormCompiler({StringFormat.DATE: "^\\d{8}$"})
        control = custom.process_schema({"format": "date"})
        control.set_value("20200204")
        assert control.valid
        assert custom.process_schema({"format": "time"}).validators == ()


class TestNumericBuilder:
    """Tests for number and integer validators."""

    @pytest.mark.unit
    def test_range(self, compiler):
        """Minimum and maximum are enforced."""
        control = compiler.process_schema({"type": "number", "minimum": 1, "maximum": 5})
        control.set_value(6)
        assert control.has_error("max")
        control.set_value(0.5)
        assert control.has_error("min")
        control.set_value(3)
        assert control.valid

    @pytest.mark.unit
    def test_zero_bounds_ignored(self, compiler):
        """Bounds of exactly 0 are treated as absent."""
        control = compiler.process_schema({"type": "integer", "minimum": 0, "maximum": 0})
        control.set_value(-4)
        assert control.valid
        control.set_value(4)
        assert control.valid

    @pytest.mark.unit
    def test_integer_format(self, compiler):
        """Integers reject fractions."""
        control = compiler.process_schema({"type": "integer"})
        control.set_value("12")
        assert control.valid
        control.set_value("1.5")
        assert control.has_error("pattern")

    @pytest.mark.unit
    def test_number_format(self, compiler):
        """Numbers accept decimals and reject text."""
        control = compiler.process_schema({"type": "number"})
        control.set_value("-1.25")
        assert control.valid
        control.set_value("one")
        assert control.has_error("pattern")

    @pytest.mark.unit
    def test_float_values(self, compiler):
        """Float values are checked in plain decimal notation."""
        number = compiler.process_schema({"type": "number"})
        number.set_value(1e-05)
        assert number.valid
        integer = compiler.process_schema({"type": "integer"})
        integer.set_value(3.0)
        assert integer.valid
        integer.set_value(2.5)
        assert integer.has_error("pattern")

    @pytest.mark.unit
    def test_empty_numeric_is_valid(self, compiler):
        """An unset number is valid unless required."""
        assert compiler.process_schema({"type": "number"}).valid


class TestFactories:
    """Tests for control factory overrides."""

    @pytest.mark.unit
    def test_subclass_factories(self):
        """Subclasses decide which control classes are built."""

        class TaggedLeaf(LeafControl):
            pass

        class TaggedCompiler(SchemaFormCompiler):
            def new_leaf(self, schema):
                return TaggedLeaf(schema=schema)

        form = TaggedCompiler().from_schema({"properties": {"x": {"type": "string"}}})
        assert isinstance(form["x"], TaggedLeaf)


class TestLogging:
    """Tests for compiler diagnostics."""

    @pytest.mark.unit
    def test_dropped_nodes_logged(self, caplog):
        """Dropped nodes are logged at DEBUG with their path."""
        caplog.set_level("DEBUG", logger="schemaform.compiler")
        compile_schema({"properties": {"outer": {"properties": {"r": {"$ref": "#"}}}}})
        assert "outer.r" in caplog.text


class TestLoadSchema:
    """Tests for reading schema files."""

    @pytest.mark.unit
    def test_load(self, tmp_path):
        """A JSON object file loads as a mapping."""
        path = tmp_path / "form.json"
        path.write_text('{"properties": {"x": {"type": "string"}}}', encoding="utf-8")
        schema = load_schema(path)
        assert compile_schema(schema).value == {"x": None}

    @pytest.mark.unit
    def test_relative_to_base_dir(self, tmp_path):
        """Relative paths resolve against the base directory."""
        (tmp_path / "form.json").write_text("{}", encoding="utf-8")
        assert load_schema("form.json", base_dir=tmp_path) == {}

    @pytest.mark.unit
    def test_missing_file(self, tmp_path):
        """Unreadable files raise SchemaLoadError."""
        with pytest.raises(SchemaLoadError) as exc_info:
            load_schema(tmp_path / "missing.json")
        assert exc_info.value.path == tmp_path / "missing.json"

    @pytest.mark.unit
    @pytest.mark.parametrize("content", ["{not json", "[1, 2]", '"text"'])
    def test_bad_content(self, tmp_path, content):
        """Invalid JSON and non-object roots raise SchemaLoadError."""
        path = tmp_path / "bad.json"
        path.write_text(content, encoding="utf-8")
        with pytest.raises(SchemaLoadError):
            load_schema(path)
