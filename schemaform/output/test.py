"""Tests for output module."""

import json

import pytest

from schemaform.compiler import compile_schema
from schemaform.output import (
    FormOutput,
    collect_errors,
    format_control_tree,
    render_form,
    snapshot,
)


@pytest.fixture
def sample_form():
    """Create a small form with one failing control."""
    return compile_schema(
        {
            "properties": {
                "name": {"type": "string"},
                "age": {"type": "integer"},
                "address": {"properties": {"city": {"type": "string"}}},
                "tags": {"type": "array"},
            },
            "required": ["name"],
        }
    )


class TestSnapshot:
    """Tests for serializable snapshots."""

    @pytest.mark.unit
    def test_form_fields(self, sample_form):
        """Form snapshot carries value, validity and errors."""
        result = snapshot(sample_form)
        assert result.valid is False
        assert result.value == {
            "name": None,
            "age": None,
            "address": {"city": None},
            "tags": [],
        }
        assert result.errors == {"name": {"required": True}}

    @pytest.mark.unit
    def test_control_tree(self, sample_form):
        """Control snapshots mirror the tree."""
        root = snapshot(sample_form).root
        assert root.control == "group"
        assert root.kind == "object"
        assert [c.name for c in root.children] == ["name", "age", "address", "tags"]
        age = root.children[1]
        assert age.kind == "integer"
        assert age.path == "age"
        assert root.children[2].children[0].path == "address.city"
        assert root.children[3].control == "collection"

    @pytest.mark.unit
    def test_disabled_controls_in_snapshot(self, sample_form):
        """Disabled controls keep their value in snapshots but not in errors."""
        sample_form["name"].disable()
        result = snapshot(sample_form)
        assert result.valid is True
        assert result.errors == {}
        assert "name" not in result.value
        assert result.root.children[0].enabled is False
        assert result.root.children[0].status == "DISABLED"

    @pytest.mark.unit
    def test_json_round_trip(self, sample_form):
        """Snapshots serialize to JSON."""
        data = json.loads(snapshot(sample_form).model_dump_json())
        assert data["valid"] is False
        assert data["root"]["children"][0]["name"] == "name"


class TestCollectErrors:
    """Tests for error collection."""

    @pytest.mark.unit
    def test_nested_paths(self):
        """Errors are keyed by dotted path."""
        form = compile_schema(
            {"properties": {"a": {"properties": {"b": {"pattern": "^x$"}}}}}
        )
        form.get("a.b").set_value("y")
        errors = collect_errors(form)
        assert list(errors) == ["a.b"]
        assert "pattern" in errors["a.b"]


class TestFormatControlTree:
    """Tests for format_control_tree function."""

    @pytest.mark.unit
    def test_nested_tree(self, sample_form):
        """Tree lists every control with connectors."""
        result = format_control_tree(sample_form)
        lines = result.splitlines()
        assert lines[0] == "form [group, INVALID]"
        assert "├── name [leaf string, INVALID] = null  (required)" in lines
        assert any(line.strip().startswith("└── city") for line in lines)
        assert lines[-1].startswith("└── tags [collection")

    @pytest.mark.unit
    def test_values_rendered_as_json(self, sample_form):
        """Leaf values use JSON spelling."""
        sample_form["name"].set_value("Ada")
        assert 'name [leaf string, VALID] = "Ada"' in format_control_tree(sample_form)


class TestRenderForm:
    """Tests for render_form."""

    @pytest.mark.unit
    def test_render(self, sample_form):
        """Render returns both read-outs."""
        output = render_form(sample_form)
        assert isinstance(output, FormOutput)
        assert output.control is sample_form
        assert output.text_tree.startswith("form [group")
        assert output.snapshot.valid is False
