"""Dependency resolver for ``required`` and ``dependencies``."""

from .lib import (
    add_required,
    apply_dependencies,
    apply_required,
    remove_required,
    resolve_controls,
)

__all__ = [
    "add_required",
    "remove_required",
    "resolve_controls",
    "apply_required",
    "apply_dependencies",
]
