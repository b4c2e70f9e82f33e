"""Unit tests for the conditional engine."""

import pytest

from schemaform.conditional import (
    Matcher,
    MatcherKind,
    build_condition,
    build_matchers,
    wire_conditional,
)
from schemaform.controls import GroupControl, LeafControl
from schemaform.validators import pattern, required


def _leaf_builder(node):
    """Minimal builder: one leaf per non-null property."""
    if node.get("type") == "null":
        return None
    return LeafControl(schema=node)


def _group(**values) -> GroupControl:
    return GroupControl({name: LeafControl(value) for name, value in values.items()})


CONDITIONAL = {
    "if": {"properties": {"x": {"const": "xc"}}},
    "then": {"properties": {"z": {"type": "string"}}, "required": ["z"]},
    "else": {"properties": {"w": {"type": "string"}}, "required": ["w"]},
}


class TestMatcher:
    """Tests for matcher construction and evaluation."""

    @pytest.mark.unit
    def test_kind_priority(self):
        """Const beats enum beats pattern."""
        node = {"const": "a", "enum": ["b"], "pattern": "^c$"}
        assert Matcher.from_schema("x", node).kind == MatcherKind.CONST
        node = {"enum": ["b"], "pattern": "^c$"}
        assert Matcher.from_schema("x", node).kind == MatcherKind.ENUM
        assert Matcher.from_schema("x", {"pattern": "^c$"}).kind == (
            MatcherKind.PATTERN
        )

    @pytest.mark.unit
    def test_unusable_nodes(self):
        """Nodes without a test give no matcher."""
        assert Matcher.from_schema("x", {"type": "string"}) is None
        assert Matcher.from_schema("x", True) is None

    @pytest.mark.unit
    def test_const(self):
        """Const matchers use strict equality."""
        matcher = Matcher.from_schema("x", {"const": "xc"})
        assert matcher.matches("xc")
        assert not matcher.matches("x")

    @pytest.mark.unit
    def test_enum(self):
        """Enum matchers test membership."""
        matcher = Matcher.from_schema("x", {"enum": ["a", 2]})
        assert matcher.matches("a")
        assert matcher.matches(2)
        assert not matcher.matches("2")

    @pytest.mark.unit
    def test_pattern_is_full_match(self):
        """Pattern matchers need the whole value to match."""
        matcher = Matcher.from_schema("x", {"pattern": "ab"})
        assert matcher.matches("ab")
        assert not matcher.matches("xaby")

    @pytest.mark.unit
    def test_checks_built_once(self, monkeypatch):
        """Evaluating a pattern matcher reuses the expression compiled up front."""
        matcher = Matcher.from_schema("x", {"pattern": "^[0-9]+$"})
        assert len(matcher.checks) == 1

        def no_compile(*args, **kwargs):
            raise AssertionError("pattern recompiled")

        monkeypatch.setattr("re.compile", no_compile)
        assert matcher.matches("42")
        assert not matcher.matches("4x")

    @pytest.mark.unit
    def test_missing_values_never_match(self):
        """None and empty strings fail every matcher."""
        assert not Matcher.from_schema("x", {"const": None}).matches(None)
        assert not Matcher.from_schema("x", {"enum": [""]}).matches("")

    @pytest.mark.unit
    def test_reference_never_matches(self):
        """Reference matchers always evaluate false."""
        matcher = Matcher.from_schema("x", {"$ref": "#/definitions/x"})
        assert matcher.kind == MatcherKind.REFERENCE
        assert not matcher.matches("anything")


class TestBuildMatchers:
    """Tests for engine activation preconditions."""

    @pytest.mark.unit
    def test_unknown_property_deactivates(self):
        """Naming a property the group lacks deactivates the engine."""
        group = _group(x=None)
        if_schema = {"properties": {"missing": {"const": 1}}}
        assert build_matchers(group, if_schema) is None

    @pytest.mark.unit
    def test_unusable_matcher_deactivates(self):
        """A property without const/enum/pattern deactivates the engine."""
        group = _group(x=None)
        assert build_matchers(group, {"properties": {"x": {}}}) is None

    @pytest.mark.unit
    def test_uncompilable_pattern_deactivates(self):
        """A pattern Python cannot compile leaves the engine inactive."""
        assert Matcher.from_schema("x", {"pattern": "("}) is None
        group = _group(x=None)
        schema = {
            "if": {"properties": {"x": {"type": "string", "pattern": "("}}},
            "then": CONDITIONAL["then"],
        }
        assert wire_conditional(group, schema, _leaf_builder) is None
        group["x"].set_value("a")
        assert group.value == {"x": "a"}

    @pytest.mark.unit
    def test_empty_if_deactivates(self):
        """An if clause naming nothing deactivates the engine."""
        assert build_matchers(_group(x=None), {"properties": {}}) is None
        assert build_matchers(_group(x=None), {"const": 1}) is None

    @pytest.mark.unit
    def test_then_must_list_properties(self):
        """A then clause without properties deactivates the engine."""
        group = _group(x=None)
        schema = {"if": CONDITIONAL["if"], "then": {"required": ["x"]}}
        assert build_condition(group, schema, _leaf_builder) is None
        assert "z" not in group


class TestBranchSetup:
    """Tests for branch construction."""

    @pytest.mark.unit
    def test_new_controls_added_disabled(self):
        """Branch-only properties are added to the group, disabled."""
        group = _group(x=None, y=None)
        rule = build_condition(group, CONDITIONAL, _leaf_builder)
        assert rule is not None
        assert list(group) == ["x", "y", "z", "w"]
        assert group["z"].disabled
        assert group["w"].disabled
        assert group.value == {"x": None, "y": None}

    @pytest.mark.unit
    def test_existing_properties_become_required(self):
        """Branch properties the group already has are marked required."""
        group = _group(x=None, y=None)
        schema = {
            "if": CONDITIONAL["if"],
            "then": {"properties": {"y": {"type": "string"}}},
        }
        rule = build_condition(group, schema, _leaf_builder)
        assert rule.then_branch.controls == []
        assert rule.then_branch.required == [group["y"]]

    @pytest.mark.unit
    def test_null_branch_properties_skipped(self):
        """Properties that compile to nothing are not added."""
        group = _group(x=None)
        schema = {
            "if": CONDITIONAL["if"],
            "then": {"properties": {"n": {"type": "null"}}},
        }
        build_condition(group, schema, _leaf_builder)
        assert "n" not in group


class TestTransitions:
    """Tests for the reactive state machine."""

    def _wired(self) -> GroupControl:
        group = _group(x=None, y=None)
        rule = wire_conditional(group, CONDITIONAL, _leaf_builder)
        assert rule is not None
        group.update_value_and_validity()
        return group

    @pytest.mark.unit
    def test_initial_unmet_is_silent(self):
        """The first Unmet evaluation does not apply the else branch."""
        group = self._wired()
        assert group["w"].disabled
        assert not group["w"].has_validator(required)
        assert group.valid

    @pytest.mark.unit
    def test_met_enables_then_branch(self):
        """Entering Met enables and requires the then controls."""
        group = self._wired()
        group["x"].set_value("xc")
        assert group["z"].enabled
        assert group["z"].has_error("required")
        assert group.value == {"x": "xc", "y": None, "z": None}
        assert group.invalid
        group["z"].set_value("now")
        assert group.valid

    @pytest.mark.unit
    def test_unmet_switches_to_else(self):
        """Leaving Met disables then and applies else."""
        group = self._wired()
        group["x"].set_value("xc")
        group["x"].set_value("other")
        assert group["z"].disabled
        assert not group["z"].has_validator(required)
        assert group["w"].enabled
        assert group["w"].has_validator(required)
        assert group.value == {"x": "other", "y": None, "w": None}
        assert group.invalid

    @pytest.mark.unit
    def test_repeated_transitions_are_idempotent(self):
        """Validators never pile up across transitions."""
        group = self._wired()
        for value in ("xc", "a", "xc", "b", "xc"):
            group["x"].set_value(value)
        assert group["z"].validators.count(required) == 1
        assert not group["w"].has_validator(required)

    @pytest.mark.unit
    def test_leave_keeps_static_validators(self):
        """Only the Required mark the branch added is removed."""
        digits = pattern("^\\d+$")
        group = GroupControl(
            {"x": LeafControl(), "y": LeafControl(validators=[digits, required])}
        )
        schema = {
            "if": CONDITIONAL["if"],
            "then": {"properties": {"y": {"type": "string"}}},
        }
        wire_conditional(group, schema, _leaf_builder)
        group["x"].set_value("xc")
        group["x"].set_value("no")
        assert group["y"].validators == (digits, required)

    @pytest.mark.unit
    def test_one_event_per_write(self):
        """Branch switching is folded into a single group event."""
        group = self._wired()
        events = []
        group.value_changes.subscribe(events.append)
        group["x"].set_value("xc")
        assert events == [{"x": "xc", "y": None, "z": None}]

    @pytest.mark.unit
    def test_met_on_first_evaluation(self):
        """A value that already satisfies the condition enters Met at once."""
        group = _group(x="xc", y=None)
        wire_conditional(group, CONDITIONAL, _leaf_builder)
        group.update_value_and_validity()
        assert group["z"].enabled
        assert group["w"].disabled

    @pytest.mark.unit
    def test_disabled_if_property_is_unmet(self):
        """A disabled if-property reads as missing."""
        group = self._wired()
        group["x"].set_value("xc")
        group["x"].disable()
        assert group["z"].disabled


class TestRestore:
    """Tests for re-enabling a group that carries a rule."""

    def _wired(self) -> GroupControl:
        group = _group(x=None)
        wire_conditional(group, CONDITIONAL, _leaf_builder)
        group.update_value_and_validity()
        return group

    @pytest.mark.unit
    def test_never_met_branches_stay_off(self):
        """Re-enabling keeps both branches off before the first Met."""
        group = self._wired()
        group.disable()
        group.enable()
        assert group["z"].disabled
        assert group["w"].disabled
        assert group.value == {"x": None}

    @pytest.mark.unit
    def test_active_branch_survives(self):
        """Only the inactive branch is switched back off."""
        group = self._wired()
        group["x"].set_value("xc")
        group["x"].set_value("other")
        group.disable()
        group.enable()
        assert group["z"].disabled
        assert group["w"].enabled
        assert group.value == {"x": "other", "w": None}

    @pytest.mark.unit
    def test_nested_rule_inside_outer_branch(self):
        """An inner rule keeps its branch off when the outer branch enables it."""
        outer = _group(x=None)
        inner = _group(p=None)
        inner_schema = {
            "if": {"properties": {"p": {"const": "v"}}},
            "then": {"properties": {"r": {"type": "string"}}},
        }
        wire_conditional(inner, inner_schema, _leaf_builder)
        inner.update_value_and_validity()

        outer_schema = {
            "if": {"properties": {"x": {"const": "a"}}},
            "then": {"properties": {"inner": {}}},
        }
        wire_conditional(outer, outer_schema, lambda node: inner)
        outer.update_value_and_validity()
        assert outer.value == {"x": None}

        outer["x"].set_value("a")
        assert outer.value == {"x": "a", "inner": {"p": None}}
        outer.get("inner.p").set_value("v")
        assert outer.value == {"x": "a", "inner": {"p": "v", "r": None}}
