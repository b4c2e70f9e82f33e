"""Dependency resolver.

Turns the ``required`` and ``dependencies`` keywords of an object schema
into Required validators on the named children of a compiled group.
Names that do not match a child are skipped.
"""

from collections.abc import Iterable, Mapping
from typing import Any

from schemaform.controls import Control, GroupControl
from schemaform.core.log import get_logger
from schemaform.schema import dependency_targets
from schemaform.validators import required

logger = get_logger("dependencies")


def add_required(control: Control, emit_event: bool = True) -> bool:
    """Mark one control as required and refresh its validity.

    Returns:
        True if the Required validator was not attached before.
    """
    added = control.add_validator(required)
    control.update_value_and_validity(emit_event)
    return added


def remove_required(control: Control, emit_event: bool = True) -> bool:
    """Clear a Required mark, leaving every other validator in place."""
    removed = control.remove_validator(required)
    control.update_value_and_validity(emit_event)
    return removed


def resolve_controls(group: GroupControl, names: Iterable[str]) -> list[Control]:
    """Look up direct children by name, skipping missing ones.

    Names are not split into paths, so a property called ``"a.b"`` is found.
    """
    controls: list[Control] = []
    for name in names:
        control = group[name] if isinstance(name, str) and name in group else None
        if control is None:
            logger.debug("No control %r under %r", name, group.path or "<root>")
            continue
        controls.append(control)
    return controls


def apply_required(
    group: GroupControl, names: Iterable[str], emit_event: bool = True
) -> list[Control]:
    """Attach the Required validator to each named child of ``group``.

    Args:
        group: Group holding the children.
        names: Child names; unknown names are ignored.
        emit_event: Notify after each change.

    Returns:
        The controls that were found.
    """
    controls = resolve_controls(group, names)
    for control in controls:
        add_required(control, emit_event)
    return controls


def apply_dependencies(
    group: GroupControl,
    dependencies: Mapping[str, Any],
    emit_event: bool = True,
) -> list[Control]:
    """Apply property dependencies as unconditional requirements.

    Only the array form (``{"y": ["z"]}``) is interpreted; the schema form
    is recognised and skipped.

    Returns:
        Every control that was marked required.
    """
    touched: list[Control] = []
    for name, dependency in dependencies.items():
        targets = dependency_targets(dependency)
        if targets is None:
            logger.debug("Skipping schema dependency %r", name)
            continue
        touched.extend(apply_required(group, targets, emit_event))
    return touched


__all__ = [
    "add_required",
    "remove_required",
    "resolve_controls",
    "apply_required",
    "apply_dependencies",
]
