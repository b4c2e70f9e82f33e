"""Conditional engine for ``if`` / ``then`` / ``else`` object schemas."""

from .lib import (
    Branch,
    ConditionalRule,
    ControlBuilder,
    Matcher,
    MatcherKind,
    build_branch,
    build_condition,
    build_matchers,
    wire_conditional,
)

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
