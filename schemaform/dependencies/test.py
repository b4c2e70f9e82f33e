"""Unit tests for the dependency resolver."""

import pytest

from schemaform.controls import GroupControl, LeafControl
from schemaform.dependencies import (
    add_required,
    apply_dependencies,
    apply_required,
    remove_required,
)
from schemaform.validators import pattern, required


def _group() -> GroupControl:
    return GroupControl(
        {
            "x": LeafControl(),
            "y": LeafControl("something"),
            "z": LeafControl(),
        }
    )


class TestApplyRequired:
    """Tests for apply_required."""

    @pytest.mark.unit
    def test_marks_named_children(self):
        """Named children become required and validity updates."""
        group = _group()
        touched = apply_required(group, ["x", "y"])
        assert [c.name for c in touched] == ["x", "y"]
        assert group["x"].has_error("required")
        assert group["y"].valid
        assert group.invalid
        group["x"].set_value("test")
        assert group.valid

    @pytest.mark.unit
    def test_missing_names_skipped(self):
        """Unknown names are ignored without error."""
        group = _group()
        touched = apply_required(group, ["nope", "z"])
        assert [c.name for c in touched] == ["z"]

    @pytest.mark.unit
    def test_dotted_names_are_child_names(self):
        """A name containing a dot is a child name, not a path."""
        group = GroupControl({"a.b": LeafControl(), "a": GroupControl({"b": LeafControl()})})
        touched = apply_required(group, ["a.b"])
        assert touched == [group["a.b"]]
        assert group["a.b"].has_validator(required)
        assert not group["a"]["b"].has_validator(required)

    @pytest.mark.unit
    def test_idempotent(self):
        """Applying twice attaches a single Required validator."""
        group = _group()
        apply_required(group, ["x"])
        apply_required(group, ["x"])
        assert group["x"].validators.count(required) == 1


class TestRequiredMarks:
    """Tests for add_required / remove_required."""

    @pytest.mark.unit
    def test_remove_keeps_other_validators(self):
        """Removing Required leaves other validators attached."""
        digits = pattern("^\\d+$")
        leaf = LeafControl(validators=[digits])
        assert add_required(leaf) is True
        assert add_required(leaf) is False
        assert leaf.invalid
        assert remove_required(leaf) is True
        assert leaf.validators == (digits,)
        assert leaf.valid


class TestApplyDependencies:
    """Tests for apply_dependencies."""

    @pytest.mark.unit
    def test_array_dependencies(self):
        """Array dependencies require their targets regardless of the key."""
        group = _group()
        touched = apply_dependencies(group, {"y": ["z"]})
        assert [c.name for c in touched] == ["z"]
        assert group.invalid
        group["z"].set_value("fixed")
        assert group.valid

    @pytest.mark.unit
    def test_schema_dependencies_skipped(self):
        """Schema-form dependencies are not interpreted."""
        group = _group()
        touched = apply_dependencies(group, {"y": {"properties": {"z": {}}}})
        assert touched == []
        assert group.valid
