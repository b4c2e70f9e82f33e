"""schemaform: compile JSON Schema object nodes into reactive form controls.

Example:
    >>> from schemaform import compile_schema
    >>> form = compile_schema({
    ...     "properties": {"x": {"type": "string"}},
    ...     "required": ["x"],
    ... })
    >>> form.valid
    False
    >>> form["x"].set_value("hello")
    >>> form.value
    {'x': 'hello'}
"""

from .compiler import SchemaFormCompiler, SchemaLoadError, compile_schema, load_schema
from .controls import (
    CollectionControl,
    Control,
    ControlStatus,
    GroupControl,
    LeafControl,
)
from .output import FormSnapshot, format_control_tree, snapshot
from .schema import SchemaKind, classify

__version__ = "0.1.0"

__all__ = [
    # Compilation
    "SchemaFormCompiler",
    "SchemaLoadError",
    "compile_schema",
    "load_schema",
    # Controls
    "Control",
    "ControlStatus",
    "LeafControl",
    "GroupControl",
    "CollectionControl",
    # Classification
    "SchemaKind",
    "classify",
    # Read-out
    "FormSnapshot",
    "snapshot",
    "format_control_tree",
]
