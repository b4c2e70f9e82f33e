"""Schema compiler: JSON Schema object node -> reactive control tree."""

from .lib import SchemaFormCompiler, SchemaLoadError, compile_schema, load_schema

__all__ = [
    "SchemaFormCompiler",
    "SchemaLoadError",
    "compile_schema",
    "load_schema",
]
