"""Environment configuration for schemaform.

Every tunable the package reads from the process environment is declared
once on the ``EnvVar`` enum, together with its type, default and a short
description. Values are read through ``get_environment()``, which applies
the same precedence everywhere: explicit override, then the environment,
then the declared default.

Example:
    >>> from schemaform.config import EnvVar, get_environment
    >>> get_environment(EnvVar.SCHEMAFORM_MAX_SETTLE_PASSES)
    32
    >>> get_environment(EnvVar.SCHEMAFORM_MAX_SETTLE_PASSES, override=4)
    4
"""

import os
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, overload

from schemaform.core.log import get_logger

logger = get_logger("config")


@dataclass(frozen=True)
class EnvConfig:
    """Declaration of one environment variable.

    Attributes:
        name: Variable name as read from ``os.environ``.
        default: Value used when the variable is unset, blank or unparseable.
        var_type: Type the raw string is converted to (str, int or Path).
        description: One-line description shown by ``python . env``.
        category: Group the variable is listed under.
    """

    name: str
    default: Any
    var_type: type
    description: str = ""
    category: str = "general"


class EnvVar(Enum):
    """Environment variables read by schemaform.

    Categories:
        - logging: package log level
        - forms: control model runtime limits
        - cli: command line defaults
    """

    # -------------------------------------------------------------------------
    # Logging
    # -------------------------------------------------------------------------
    SCHEMAFORM_LOG_LEVEL = EnvConfig(
        name="SCHEMAFORM_LOG_LEVEL",
        default="WARNING",
        var_type=str,
        description="Log level for the schemaform package logger",
        category="logging",
    )

    # -------------------------------------------------------------------------
    # Control model
    # -------------------------------------------------------------------------
    SCHEMAFORM_MAX_SETTLE_PASSES = EnvConfig(
        name="SCHEMAFORM_MAX_SETTLE_PASSES",
        default=32,
        var_type=int,
        description="Upper bound on watcher re-runs while a group settles",
        category="forms",
    )

    # -------------------------------------------------------------------------
    # CLI
    # -------------------------------------------------------------------------
    SCHEMAFORM_SCHEMA_DIR = EnvConfig(
        name="SCHEMAFORM_SCHEMA_DIR",
        default=None,  # current directory
        var_type=Path,
        description="Directory relative schema paths are resolved against",
        category="cli",
    )


# =============================================================================
# Conversion
# =============================================================================

_CONVERTERS: dict[type, Callable[[str], Any]] = {
    str: str,
    int: int,
    Path: Path,
}


def _convert(config: EnvConfig, raw: str | None) -> Any:
    """Turn a raw environment string into the declared type.

    Blank values count as unset. A value the converter rejects falls back
    to the default with a warning naming the variable.
    """
    if raw is None or not raw.strip():
        return config.default

    converter = _CONVERTERS.get(config.var_type)
    if converter is None:
        return raw
    try:
        return converter(raw.strip())
    except ValueError:
        logger.warning(
            "Ignoring %s=%r: expected %s, using %r",
            config.name,
            raw,
            config.var_type.__name__,
            config.default,
        )
        return config.default


# =============================================================================
# Main Interface
# =============================================================================


@overload
def get_environment(env_var: EnvVar, override: int) -> int: ...
@overload
def get_environment(env_var: EnvVar, override: str) -> str: ...
@overload
def get_environment(env_var: EnvVar, override: Path) -> Path: ...
@overload
def get_environment(env_var: EnvVar, override: None = None) -> Any: ...


def get_environment(env_var: EnvVar, override: Any = None) -> Any:
    """Read a configuration value.

    Precedence: ``override`` when given, then the environment variable,
    then the declared default.

    Args:
        env_var: Variable to read.
        override: Value that wins over the environment when not None.

    Returns:
        The value, converted to the variable's declared type.
    """
    if override is not None:
        return override
    config: EnvConfig = env_var.value
    return _convert(config, os.environ.get(config.name))


def get_environment_info(env_var: EnvVar) -> EnvConfig:
    """Get the declaration behind an ``EnvVar`` member."""
    return env_var.value


# =============================================================================
# Convenience Functions
# =============================================================================


def get_log_level(override: str | None = None) -> str:
    """Get the configured package log level name, upper-cased."""
    return str(get_environment(EnvVar.SCHEMAFORM_LOG_LEVEL, override)).upper()


def get_max_settle_passes(override: int | None = None) -> int:
    """Get the settle-loop bound, never below one pass."""
    passes = get_environment(EnvVar.SCHEMAFORM_MAX_SETTLE_PASSES, override)
    return max(1, int(passes))


def get_schema_dir(override: Path | str | None = None) -> Path:
    """Get the directory relative schema paths resolve against.

    Resolution: override > SCHEMAFORM_SCHEMA_DIR > current directory
    """
    if override is not None:
        return Path(override)

    env_path = get_environment(EnvVar.SCHEMAFORM_SCHEMA_DIR)
    if env_path:
        return env_path

    return Path.cwd()


def list_environment_variables(category: str | None = None) -> list[EnvVar]:
    """List declared variables, optionally only those in ``category``."""
    return [
        var for var in EnvVar if category is None or var.value.category == category
    ]


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
