"""Read-out of compiled forms.

Produces serializable snapshots and human-readable trees of a control
tree, for hosts that log or display a form's state.
"""

import json
from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, Field

from schemaform.controls import CollectionControl, Control, ControlStatus, GroupControl
from schemaform.schema import classify


class ControlSnapshot(BaseModel):
    """Serializable state of one control and its descendants."""

    name: str | None = Field(None, description="Key under the parent control")
    path: str = Field("", description="Dotted path from the root")
    control: str = Field(..., description="Control type: leaf, group, collection")
    kind: str | None = Field(
        None, description="Schema kind the control was compiled from"
    )
    enabled: bool = Field(True, description="Whether the control is enabled")
    status: ControlStatus = Field(..., description="VALID, INVALID or DISABLED")
    value: Any = Field(None, description="Value including disabled descendants")
    errors: dict[str, Any] | None = Field(
        None, description="Failure reasons of this control's own validators"
    )
    children: list["ControlSnapshot"] = Field(
        default_factory=list, description="Child snapshots in order"
    )

    model_config = {"use_enum_values": True}


class FormSnapshot(BaseModel):
    """Serializable state of a whole form."""

    value: Any = Field(..., description="Aggregate value, disabled branches omitted")
    valid: bool = Field(..., description="Overall validity")
    errors: dict[str, dict[str, Any]] = Field(
        default_factory=dict, description="Failure reasons keyed by control path"
    )
    root: ControlSnapshot


def snapshot_control(control: Control) -> ControlSnapshot:
    """Snapshot one control recursively."""
    children: list[Control] = []
    if isinstance(control, GroupControl):
        children = list(control.controls.values())
    elif isinstance(control, CollectionControl):
        children = control.items

    return ControlSnapshot(
        name=control.name,
        path=control.path,
        control=control.kind,
        kind=classify(control.schema).value if control.schema is not None else None,
        enabled=control.enabled,
        status=control.status,
        value=control.raw_value,
        errors=control.errors,
        children=[snapshot_control(child) for child in children],
    )


def collect_errors(control: Control) -> dict[str, dict[str, Any]]:
    """Map each enabled, failing control's path to its failure reasons."""
    errors: dict[str, dict[str, Any]] = {}

    def _walk(node: Control) -> None:
        if node.disabled:
            return
        if node.errors:
            errors[node.path or "<root>"] = dict(node.errors)
        if isinstance(node, GroupControl):
            for child in node.controls.values():
                _walk(child)
        elif isinstance(node, CollectionControl):
            for child in node.items:
                _walk(child)

    _walk(control)
    return errors


def snapshot(control: Control) -> FormSnapshot:
    """Snapshot a form for serialization.

    Example:
        >>> snapshot(form).model_dump_json(indent=2)
    """
    return FormSnapshot(
        value=control.value,
        valid=control.valid,
        errors=collect_errors(control),
        root=snapshot_control(control),
    )


def format_control_tree(control: Control) -> str:
    """Format a control tree for display.

    Example output:
        form [group, INVALID]
        ├── x [leaf string, VALID] = "xc"
        ├── y [leaf string, VALID] = null
        └── z [leaf string, INVALID] = null  (required)

    Args:
        control: Root of the tree to format.

    Returns:
        Formatted tree string.
    """
    lines: list[str] = []
    _format_node(control, lines, "", is_last=True, is_root=True)
    return "\n".join(lines)


def _format_node(
    control: Control,
    lines: list[str],
    prefix: str,
    is_last: bool,
    is_root: bool = False,
) -> None:
    """Recursively format a control and its children."""
    if is_root:
        connector = ""
        child_prefix = ""
    else:
        connector = "└── " if is_last else "├── "
        child_prefix = prefix + ("    " if is_last else "│   ")

    label = control.name or "form"
    type_name = control.kind
    if control.kind == "leaf" and control.schema is not None:
        type_name = f"leaf {classify(control.schema).value}"

    node_str = f"{label} [{type_name}, {control.status.value}]"
    if not isinstance(control, (GroupControl, CollectionControl)):
        node_str += f" = {json.dumps(control.value, default=str)}"
    if control.errors:
        node_str += f"  ({', '.join(control.errors)})"
    lines.append(f"{prefix}{connector}{node_str}")

    if isinstance(control, GroupControl):
        children = list(control.controls.values())
    elif isinstance(control, CollectionControl):
        children = control.items
    else:
        children = []
    for i, child in enumerate(children):
        _format_node(child, lines, child_prefix, i == len(children) - 1)


@dataclass
class FormOutput:
    """Complete read-out of a form.

    Attributes:
        text_tree: Human-readable tree representation.
        snapshot: Serializable snapshot.
        control: The form that was read.
    """

    text_tree: str
    snapshot: FormSnapshot
    control: Control


def render_form(control: Control) -> FormOutput:
    """Build both read-outs of a form."""
    return FormOutput(
        text_tree=format_control_tree(control),
        snapshot=snapshot(control),
        control=control,
    )


__all__ = [
    "ControlSnapshot",
    "FormSnapshot",
    "FormOutput",
    "snapshot_control",
    "collect_errors",
    "snapshot",
    "format_control_tree",
    "render_form",
]
