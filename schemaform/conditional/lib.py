"""Conditional engine for ``if`` / ``then`` / ``else`` object schemas.

A conditional object schema names sibling properties in its ``if`` clause,
each bound to a matcher (``const``, ``enum`` or ``pattern``). The engine
builds the ``then`` and ``else`` branches into the group once, then
watches the group and switches between two states:

- Unmet (initial): the ``then`` branch is off.
- Met: every ``if`` property's current value satisfies its matcher.

Entering Met enables the controls the ``then`` branch introduced and marks
its required controls; entering Unmet undoes that and applies the ``else``
branch the same way. Transitions are edge-triggered. A leading run of
Unmet evaluations is silent, so the ``else`` branch is only applied after
the condition has been Met at least once.

The ``if`` clause of an ``else`` branch is not interpreted; only the
branch's own ``properties`` and ``required`` are used.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from schemaform.controls import Control, GroupControl
from schemaform.core.log import get_logger
from schemaform.dependencies import add_required, remove_required, resolve_controls
from schemaform.schema import (
    Schema,
    is_const_schema,
    is_enum_schema,
    is_explicit_object_schema,
    is_pattern_schema,
    is_ref,
    is_schema,
    is_string_schema,
    schema_properties,
    schema_required,
)
from schemaform.validators import Validator, const, is_empty_value, pattern

logger = get_logger("conditional")

ControlBuilder = Callable[[Any], Control | None]


class MatcherKind(str, Enum):
    """How a matcher tests a value, in priority order."""

    CONST = "const"
    ENUM = "enum"
    PATTERN = "pattern"
    REFERENCE = "reference"


@dataclass(frozen=True)
class Matcher:
    """Test for one ``if`` property's current value.

    The validators the test runs are built once, when the matcher is
    created; the value matches when any of them passes.
    """

    name: str
    kind: MatcherKind
    schema: Schema
    checks: tuple[Validator, ...] = field(default=(), compare=False, repr=False)

    @classmethod
    def from_schema(cls, name: str, node: Any) -> Matcher | None:
        """Build a matcher, or None when the node has no usable test."""
        if not is_schema(node):
            return None
        if is_ref(node):
            return cls(name, MatcherKind.REFERENCE, node)
        if is_const_schema(node):
            return cls(name, MatcherKind.CONST, node, (const(node["const"]),))
        if is_enum_schema(node):
            checks = tuple(const(option) for option in node["enum"])
            return cls(name, MatcherKind.ENUM, node, checks)
        if is_string_schema(node) and is_pattern_schema(node):
            validator = pattern(str(node["pattern"]))
            if validator is None:
                logger.debug("Conditional property %r has an invalid pattern", name)
                return None
            return cls(name, MatcherKind.PATTERN, node, (validator,))
        return None

    def matches(self, value: Any) -> bool:
        """Check a value; missing values never match."""
        if self.kind == MatcherKind.REFERENCE:
            return False
        if is_empty_value(value):
            return False
        return any(check(value) is None for check in self.checks)


@dataclass
class Branch:
    """Controls a ``then`` or ``else`` branch switches.

    Attributes:
        controls: Controls the branch added to the group (start disabled).
        required: Controls the branch marks required while active.
    """

    controls: list[Control] = field(default_factory=list)
    required: list[Control] = field(default_factory=list)
    _marked: list[Control] = field(default_factory=list, repr=False)

    def enter(self) -> None:
        for control in self.required:
            if add_required(control) and control not in self._marked:
                self._marked.append(control)
        for control in self.controls:
            control.enable()

    def leave(self) -> None:
        # Only Required marks this branch added are cleared.
        for control in self._marked:
            remove_required(control)
        self._marked = []
        for control in self.controls:
            control.disable()

    def suppress(self) -> None:
        """Disable the branch controls without touching Required marks."""
        for control in self.controls:
            if control.enabled:
                control.disable(emit_event=False)


@dataclass
class ConditionalRule:
    """Edge-triggered watcher for one conditional object schema.

    Attributes:
        matchers: One matcher per ``if`` property; all must hold.
        then_branch: Branch active while Met.
        else_branch: Branch active while Unmet (after the first Met).
        met: Last evaluated truth value, None before the first evaluation.
        fired: Whether any transition has been applied yet.
    """

    matchers: list[Matcher]
    then_branch: Branch
    else_branch: Branch
    met: bool | None = None
    fired: bool = False

    def evaluate(self, value: Mapping[str, Any]) -> bool:
        return all(m.matches(value.get(m.name)) for m in self.matchers)

    def __call__(self, group: GroupControl) -> None:
        if group.disabled:
            # Re-evaluated when the group is enabled again.
            return
        met = self.evaluate(group.value)
        if self.met is None and not met:
            self.met = False
            return
        if met == self.met:
            return

        # Record first: the branch updates below re-run this watcher.
        self.met = met
        self.fired = True
        logger.debug(
            "Condition on %r is now %s", group.path or "<root>", "met" if met else "unmet"
        )
        if met:
            self.then_branch.enter()
            self.else_branch.leave()
        else:
            self.then_branch.leave()
            self.else_branch.enter()

    def restore(self, group: GroupControl) -> None:
        """Switch inactive branches back off after ``group`` is re-enabled.

        Enabling a group enables every descendant, including the controls
        of the branch that is not active.
        """
        if self.met:
            self.else_branch.suppress()
            return
        self.then_branch.suppress()
        if not self.fired:
            self.else_branch.suppress()


# =============================================================================
# Construction
# =============================================================================


def build_matchers(group: GroupControl, if_schema: Any) -> list[Matcher] | None:
    """Build the ``if`` matchers for a group.

    Returns None (engine inactive) unless ``if`` lists at least one property,
    every listed property is a child of the group, and every property
    schema is a usable matcher.
    """
    if not is_explicit_object_schema(if_schema):
        return None
    properties = schema_properties(if_schema)
    if not properties:
        return None

    matchers: list[Matcher] = []
    for name, node in properties.items():
        if name not in group:
            logger.debug("Conditional names unknown property %r", name)
            return None
        matcher = Matcher.from_schema(name, node)
        if matcher is None:
            logger.debug("Conditional property %r has no usable matcher", name)
            return None
        matchers.append(matcher)
    return matchers


def build_branch(
    group: GroupControl, branch_schema: Schema, build: ControlBuilder
) -> Branch:
    """Add a branch's new properties to the group and collect its controls.

    Properties the group already has are kept and marked required while
    the branch is active; new properties are compiled with ``build``,
    added disabled, and enabled while the branch is active. The branch's
    own ``required`` names are resolved after the new controls exist.
    """
    branch = Branch()
    for name, node in schema_properties(branch_schema).items():
        existing = group[name] if name in group else None
        if existing is not None:
            branch.required.append(existing)
            continue
        control = build(node)
        if control is None:
            continue
        control.disable(emit_event=False)
        group.add_control(name, control, emit_event=False)
        branch.controls.append(control)

    for control in resolve_controls(group, schema_required(branch_schema)):
        if control not in branch.required:
            branch.required.append(control)
    return branch


def build_condition(
    group: GroupControl, schema: Schema, build: ControlBuilder
) -> ConditionalRule | None:
    """Build the conditional rule for a group, or None if it stays static.

    Args:
        group: Group compiled from ``schema``'s own properties.
        schema: Object schema carrying ``if`` and ``then``.
        build: Compiles a branch property schema into a control.
    """
    matchers = build_matchers(group, schema.get("if"))
    if matchers is None:
        return None
    then_schema = schema.get("then")
    if not is_explicit_object_schema(then_schema):
        return None

    then_branch = build_branch(group, then_schema, build)
    else_schema = schema.get("else")
    if is_explicit_object_schema(else_schema):
        else_branch = build_branch(group, else_schema, build)
    else:
        else_branch = Branch()

    return ConditionalRule(matchers, then_branch, else_branch)


def wire_conditional(
    group: GroupControl, schema: Schema, build: ControlBuilder
) -> ConditionalRule | None:
    """Build a conditional rule and register it as a group watcher.

    The rule first runs the next time the group settles.
    """
    rule = build_condition(group, schema, build)
    if rule is None:
        logger.debug("Conditional on %r is inactive", group.path or "<root>")
        return None
    group.add_watcher(rule)
    return rule


__all__ = [
    "ControlBuilder",
    "MatcherKind",
    "Matcher",
    "Branch",
    "ConditionalRule",
    "build_matchers",
    "build_branch",
    "build_condition",
    "wire_conditional",
]
