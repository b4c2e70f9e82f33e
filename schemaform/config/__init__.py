"""Centralized configuration management for schemaform.

Provides unified access to all configuration via the `get_environment()` function.

Example:
    >>> from schemaform.config import EnvVar, get_environment
    >>>
    >>> level = get_environment(EnvVar.SCHEMAFORM_LOG_LEVEL)  # "WARNING"
    >>> passes = get_environment(EnvVar.SCHEMAFORM_MAX_SETTLE_PASSES, override=8)
    >>>
    >>> for var in list_environment_variables("forms"):
    ...     info = get_environment_info(var)
    ...     print(f"{info.name}: {info.description}")

Environment Variable Categories:
    logging: Package log level
    forms: Control model runtime behaviour (settle loop bound)
    cli: Command line defaults (schema directory)
"""

from .lib import (
    # Core types
    EnvConfig,
    EnvVar,
    # Main interface
    get_environment,
    get_environment_info,
    get_log_level,
    get_max_settle_passes,
    get_schema_dir,
    # Introspection
    list_environment_variables,
)

__all__ = [
    # Core types
    "EnvConfig",
    "EnvVar",
    # Main interface
    "get_environment",
    "get_environment_info",
    # Convenience functions
    "get_log_level",
    "get_max_settle_passes",
    "get_schema_dir",
    # Introspection
    "list_environment_variables",
]
