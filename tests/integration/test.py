"""Integration tests: compile whole schemas and drive the resulting forms."""

import pytest

from schemaform import compile_schema, format_control_tree, snapshot
from schemaform.controls import CollectionControl, GroupControl
from schemaform.validators import required


@pytest.mark.integration
class TestProfileForm:
    """A schema touching every builder kind."""

    def test_controls_follow_declaration_order(self, profile_form):
        """Only buildable properties appear, in schema order."""
        assert list(profile_form) == [
            "name",
            "nickname",
            "age",
            "born",
            "newsletter",
            "address",
            "tags",
        ]
        assert isinstance(profile_form["address"], GroupControl)
        assert isinstance(profile_form["tags"], CollectionControl)

    def test_initial_value(self, profile_form):
        assert profile_form.value == {
            "name": None,
            "nickname": "anon",
            "age": None,
            "born": None,
            "newsletter": None,
            "address": {"street": None, "city": None},
            "tags": [],
        }

    def test_initial_errors(self, profile_form):
        """Static requirements, dependencies and nested requirements apply."""
        assert snapshot(profile_form).errors == {
            "name": {"required": True},
            "born": {"required": True},
            "address.city": {"required": True},
        }

    def test_filling_in_the_form(self, profile_form):
        profile_form["name"].set_value("Ada")
        profile_form["born"].set_value("1815-12-10")
        profile_form.get("address.city").set_value("London")
        assert profile_form.valid

        profile_form["age"].set_value(200)
        assert profile_form["age"].get_error("max") == {"max": 130, "actual": 200}
        assert profile_form.invalid

        profile_form["age"].set_value(36)
        profile_form["name"].set_value("ada")
        assert profile_form["name"].has_error("pattern")

    def test_date_format(self, profile_form):
        born = profile_form["born"]
        born.set_value("20-01-01")
        assert born.has_error("pattern")
        born.set_value("2001-01-01")
        assert not born.has_error("pattern")

    def test_tree_read_out(self, profile_form):
        tree = format_control_tree(profile_form)
        assert "├── nickname [leaf string, VALID] = \"anon\"" in tree
        assert "legacy" not in tree
        assert "parent" not in tree


@pytest.mark.integration
class TestStaticRules:
    """Required, pattern, date-time and dependency behaviour."""

    def test_required_with_default(self):
        """A required property with a default only needs the other one."""
        form = compile_schema(
            {
                "properties": {
                    "x": {"type": "string"},
                    "y": {"type": "string", "default": "preset"},
                },
                "required": ["x", "y"],
            }
        )
        assert form.invalid
        form["x"].set_value("set")
        assert form.valid

    @pytest.mark.parametrize(
        "value,valid", [("abc", False), ("test\t123", True), ("test 12345", False)]
    )
    def test_pattern_is_full_match(self, value, valid):
        form = compile_schema(
            {"properties": {"p": {"type": "string", "pattern": "^test\\s+\\d{2,4}$"}}}
        )
        form["p"].set_value(value)
        assert form.valid is valid

    @pytest.mark.parametrize(
        "value,valid",
        [
            ("2020-02-04T11:10:23Z", True),
            ("2020-02-04T11:10:23+05:00", True),
            ("2020/02/04-11:10PM", False),
        ],
    )
    def test_date_time(self, value, valid):
        form = compile_schema(
            {"properties": {"at": {"type": "string", "format": "date-time"}}}
        )
        form["at"].set_value(value)
        assert form.valid is valid

    def test_dependencies(self):
        """A dependency target is required regardless of its source."""
        form = compile_schema(
            {
                "properties": {"y": {"type": "string"}, "z": {"type": "string"}},
                "dependencies": {"y": ["z"]},
            }
        )
        assert form.invalid
        form["y"].set_value("anything")
        assert form.invalid
        form["z"].set_value("set")
        assert form.valid


@pytest.mark.integration
class TestConditionalForm:
    """The if/then/else walkthrough, step by step."""

    def test_initial_shape(self, conditional_form):
        assert conditional_form.value == {"x": None, "y": None}
        assert conditional_form["z"].disabled
        assert conditional_form.valid

    def test_met_requires_z(self, conditional_form):
        conditional_form["x"].set_value("xc")
        assert conditional_form["z"].enabled
        assert conditional_form["z"].has_error("required")
        assert conditional_form.value == {"x": "xc", "y": None, "z": None}
        assert conditional_form.invalid

        conditional_form["z"].set_value("filled")
        assert conditional_form.valid

    def test_unmet_restores_initial_shape(self, conditional_form):
        conditional_form["x"].set_value("xc")
        conditional_form["x"].set_value("x")
        assert conditional_form.value == {"x": "x", "y": None}
        assert conditional_form["z"].disabled
        assert not conditional_form["z"].has_validator(required)
        assert conditional_form.valid

    def test_nested_else_is_not_activated(self, conditional_form):
        conditional_form["x"].set_value("xc")
        conditional_form["x"].set_value("x")
        conditional_form["x"].set_value("wc")
        assert conditional_form.value == {"x": "wc", "y": None}
        assert "w" not in conditional_form
        assert not conditional_form["y"].has_error("required")
        assert conditional_form.valid

    def test_one_event_per_write(self, conditional_form):
        """Each external write produces exactly one group notification."""
        events = []
        conditional_form.value_changes.subscribe(events.append)

        conditional_form["x"].set_value("xc")
        assert events == [{"x": "xc", "y": None, "z": None}]

        conditional_form["x"].set_value("x")
        assert events[-1] == {"x": "x", "y": None}
        assert len(events) == 2

    def test_snapshot_keeps_disabled_values(self, conditional_form):
        """Disabled controls stay in the control snapshot but not the value."""
        conditional_form["z"].set_value("hidden")
        result = snapshot(conditional_form)
        assert "z" not in result.value
        z = [c for c in result.root.children if c.name == "z"][0]
        assert z.enabled is False
        assert z.value == "hidden"

    def test_default_meeting_condition(self, conditional_schema):
        """A default that satisfies ``if`` enters the branch at compile time."""
        conditional_schema["properties"]["x"]["default"] = "xc"
        form = compile_schema(conditional_schema)
        assert form["z"].enabled
        assert form["z"].has_error("required")
        assert form.invalid

    def test_enum_and_pattern_matchers(self):
        form = compile_schema(
            {
                "properties": {
                    "kind": {"type": "string"},
                    "code": {"type": "string"},
                },
                "if": {
                    "properties": {
                        "kind": {"enum": ["a", "b"]},
                        "code": {"type": "string", "pattern": "^[0-9]+$"},
                    }
                },
                "then": {"properties": {"extra": {"type": "integer"}}},
            }
        )
        assert "extra" not in form.value
        form.patch_value({"kind": "b", "code": "42"})
        assert form.value == {"kind": "b", "code": "42", "extra": None}
        form["code"].set_value("4x")
        assert "extra" not in form.value

    def test_nested_conditional_in_branch(self):
        """Entering the outer branch leaves the inner condition's branch off."""
        form = compile_schema(
            {
                "properties": {"x": {"type": "string"}},
                "if": {"properties": {"x": {"const": "a"}}},
                "then": {
                    "properties": {
                        "inner": {
                            "properties": {"p": {"type": "string"}},
                            "if": {"properties": {"p": {"const": "v"}}},
                            "then": {
                                "properties": {"r": {"type": "string"}},
                                "required": ["r"],
                            },
                        }
                    }
                },
            }
        )
        form["x"].set_value("a")
        assert form.value == {"x": "a", "inner": {"p": None}}
        assert form["inner"]["r"].disabled
        assert form.valid
        form["inner"]["p"].set_value("v")
        assert form.value == {"x": "a", "inner": {"p": "v", "r": None}}
        assert form.invalid

    def test_dotted_property_name_required(self):
        form = compile_schema(
            {"properties": {"a.b": {"type": "string"}}, "required": ["a.b"]}
        )
        assert form["a.b"].has_error("required")
        assert form.invalid
        form["a.b"].set_value("set")
        assert form.valid
