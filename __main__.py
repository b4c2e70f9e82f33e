"""CLI entry point for schemaform.

Compiles JSON Schema files into form control trees so a schema's form
behaviour can be inspected from the shell: which controls it produces,
which are required, and how conditionals react to written values.
"""

import argparse
import json
import sys
from typing import Any

from dotenv import load_dotenv

from schemaform.compiler import SchemaLoadError, compile_schema, load_schema
from schemaform.config import (
    get_environment,
    get_environment_info,
    get_log_level,
    get_schema_dir,
    list_environment_variables,
)
from schemaform.controls import GroupControl, LeafControl
from schemaform.core import get_logger, setup_logging
from schemaform.output import format_control_tree, snapshot

# Load environment variables from .env file
load_dotenv()

logger = get_logger("cli")


# =============================================================================
# Helpers
# =============================================================================


def parse_assignment(text: str) -> tuple[str, Any]:
    """Parse a ``PATH=JSON`` write.

    The value is decoded as JSON; anything that is not valid JSON is used
    as a plain string, so ``--set name=Ada`` works without quoting.

    Raises:
        argparse.ArgumentTypeError: If there is no ``=`` or the path is empty.
    """
    path, sep, raw = text.partition("=")
    path = path.strip()
    if not sep or not path:
        raise argparse.ArgumentTypeError(f"expected PATH=VALUE, got {text!r}")
    try:
        value = json.loads(raw)
    except json.JSONDecodeError:
        value = raw
    return path, value


def apply_assignments(form: GroupControl, assignments: list[tuple[str, Any]]) -> bool:
    """Write values into a compiled form, in order.

    Returns:
        False if a path does not name a writable control.
    """
    for path, value in assignments:
        control = form.get(path)
        if isinstance(control, LeafControl):
            control.set_value(value)
        elif isinstance(control, GroupControl) and isinstance(value, dict):
            control.patch_value(value)
        elif control is None:
            logger.error(f"No control at path: {path}")
            return False
        else:
            logger.error(f"Cannot write {type(value).__name__} to {control.kind} {path}")
            return False
    return True


def _compile_from_args(args: argparse.Namespace) -> GroupControl | None:
    try:
        schema = load_schema(args.schema, base_dir=get_schema_dir())
    except SchemaLoadError as e:
        logger.error(str(e))
        return None

    form = compile_schema(schema)
    if not apply_assignments(form, args.assignments):
        return None
    return form


# =============================================================================
# Commands
# =============================================================================


def cmd_compile(args: argparse.Namespace) -> int:
    """Handle the compile command."""
    form = _compile_from_args(args)
    if form is None:
        return 2

    if args.json:
        print(snapshot(form).model_dump_json(indent=2))
    else:
        print(format_control_tree(form))
        print(f"\nValue: {json.dumps(form.value, default=str)}")
    return 0


def cmd_check(args: argparse.Namespace) -> int:
    """Handle the check command."""
    form = _compile_from_args(args)
    if form is None:
        return 2

    result = snapshot(form)
    if result.valid:
        print("valid")
        return 0

    print("invalid")
    for path, errors in result.errors.items():
        print(f"  {path}: {json.dumps(errors, default=str)}")
    return 1


def cmd_env(_args: argparse.Namespace) -> int:
    """Handle the env command."""
    for var in list_environment_variables():
        info = get_environment_info(var)
        value = get_environment(var)
        print(f"{info.name} [{info.category}]")
        print(f"  {info.description}")
        print(f"  value: {value!r} (default: {info.default!r})")
    return 0


# =============================================================================
# Parser
# =============================================================================


def _add_schema_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "schema",
        type=str,
        help="JSON Schema file (relative paths use SCHEMAFORM_SCHEMA_DIR)",
    )
    parser.add_argument(
        "--set",
        "-s",
        dest="assignments",
        metavar="PATH=JSON",
        type=parse_assignment,
        action="append",
        default=[],
        help="Write a value before reading the form (repeatable)",
    )


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for all commands."""
    parser = argparse.ArgumentParser(
        prog="python .",
        description="Compile JSON Schema object nodes into reactive forms",
    )
    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    compile_parser = subparsers.add_parser(
        "compile",
        help="Print the compiled control tree",
    )
    _add_schema_arguments(compile_parser)
    compile_parser.add_argument(
        "--json",
        action="store_true",
        help="Print a JSON snapshot instead of the tree",
    )
    compile_parser.set_defaults(handler=cmd_compile)

    check_parser = subparsers.add_parser(
        "check",
        help="Exit 0 if the form is valid, 1 if not",
    )
    _add_schema_arguments(check_parser)
    check_parser.set_defaults(handler=cmd_check)

    env_parser = subparsers.add_parser(
        "env",
        help="List configuration variables",
    )
    env_parser.set_defaults(handler=cmd_env)

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the CLI."""
    parser = build_parser()
    args = parser.parse_args(sys.argv[1:] if argv is None else argv)

    if args.command is None:
        parser.print_help()
        return 1

    setup_logging(get_log_level())
    return args.handler(args)


if __name__ == "__main__":
    sys.exit(main())
