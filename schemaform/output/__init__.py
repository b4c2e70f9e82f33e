"""Read-out of compiled forms.

Provides serializable snapshots and human-readable trees of control
trees for logging and display.
"""

from schemaform.output.lib import (
    ControlSnapshot,
    FormOutput,
    FormSnapshot,
    collect_errors,
    format_control_tree,
    render_form,
    snapshot,
    snapshot_control,
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
