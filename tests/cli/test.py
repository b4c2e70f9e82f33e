"""Tests for the schemaform CLI commands."""

import json
import os
import subprocess
import sys
from pathlib import Path

import pytest

REPO_ROOT = Path(__file__).resolve().parents[2]


def run_cli(*args: str, env: dict[str, str] | None = None) -> subprocess.CompletedProcess:
    """Run ``python . <args>`` from the repository root."""
    environ = {
        k: v for k, v in os.environ.items() if not k.startswith("SCHEMAFORM_")
    }
    environ.update(env or {})
    return subprocess.run(
        [sys.executable, ".", *args],
        capture_output=True,
        text=True,
        cwd=REPO_ROOT,
        env=environ,
        timeout=60,
    )


@pytest.fixture
def schema_file(tmp_path, conditional_schema):
    """Write the conditional schema to a temporary file."""
    path = tmp_path / "form.json"
    path.write_text(json.dumps(conditional_schema), encoding="utf-8")
    return path


@pytest.mark.integration
class TestCompileCommand:
    """Tests for ``python . compile``."""

    def test_prints_tree(self, schema_file):
        """compile prints the control tree and aggregate value."""
        result = run_cli("compile", str(schema_file))
        assert result.returncode == 0, result.stderr
        assert result.stdout.startswith("form [group, VALID]")
        assert 'Value: {"x": null, "y": null}' in result.stdout

    def test_writes_trigger_conditionals(self, schema_file):
        """--set writes run through the conditional engine."""
        result = run_cli("compile", str(schema_file), "--set", "x=xc")
        assert result.returncode == 0, result.stderr
        assert "z [leaf string, INVALID] = null  (required)" in result.stdout

    def test_json_snapshot(self, schema_file):
        """--json prints a parseable snapshot."""
        result = run_cli("compile", str(schema_file), "--json", "-s", 'x="xc"')
        assert result.returncode == 0, result.stderr
        data = json.loads(result.stdout)
        assert data["valid"] is False
        assert data["value"] == {"x": "xc", "y": None, "z": None}
        assert data["errors"] == {"z": {"required": True}}

    def test_relative_path_uses_schema_dir(self, schema_file):
        """Relative schema paths resolve against SCHEMAFORM_SCHEMA_DIR."""
        result = run_cli(
            "compile",
            schema_file.name,
            env={"SCHEMAFORM_SCHEMA_DIR": str(schema_file.parent)},
        )
        assert result.returncode == 0, result.stderr

    def test_missing_file(self, tmp_path):
        """A missing schema file exits with status 2."""
        result = run_cli("compile", str(tmp_path / "missing.json"))
        assert result.returncode == 2
        assert "Cannot load schema" in result.stderr

    def test_unknown_path(self, schema_file):
        """Writing to an unknown control exits with status 2."""
        result = run_cli("compile", str(schema_file), "--set", "nope=1")
        assert result.returncode == 2
        assert "No control at path: nope" in result.stderr


@pytest.mark.integration
class TestCheckCommand:
    """Tests for ``python . check``."""

    def test_valid(self, schema_file):
        result = run_cli("check", str(schema_file))
        assert result.returncode == 0
        assert result.stdout.strip() == "valid"

    def test_invalid_lists_errors(self, schema_file):
        result = run_cli("check", str(schema_file), "--set", "x=xc")
        assert result.returncode == 1
        assert 'z: {"required": true}' in result.stdout

    def test_valid_after_filling_required(self, schema_file):
        result = run_cli("check", str(schema_file), "-s", "x=xc", "-s", "z=filled")
        assert result.returncode == 0


@pytest.mark.integration
class TestEnvCommand:
    """Tests for ``python . env``."""

    def test_lists_variables(self):
        result = run_cli("env")
        assert result.returncode == 0
        assert "SCHEMAFORM_LOG_LEVEL [logging]" in result.stdout
        assert "SCHEMAFORM_MAX_SETTLE_PASSES [forms]" in result.stdout
        assert "SCHEMAFORM_SCHEMA_DIR [cli]" in result.stdout

    def test_shows_overrides(self):
        result = run_cli("env", env={"SCHEMAFORM_MAX_SETTLE_PASSES": "5"})
        assert "value: 5 (default: 32)" in result.stdout


@pytest.mark.integration
def test_no_command_prints_help():
    """Running without a command prints usage and exits 1."""
    result = run_cli()
    assert result.returncode == 1
    assert "usage:" in result.stdout
