"""Tests for environment configuration."""

from pathlib import Path

import pytest

from .lib import (
    EnvConfig,
    EnvVar,
    get_environment,
    get_environment_info,
    get_log_level,
    get_max_settle_passes,
    get_schema_dir,
    list_environment_variables,
)


class TestGetEnvironment:
    """Tests for get_environment precedence and conversion."""

    @pytest.mark.unit
    def test_unset_uses_default(self, monkeypatch):
        monkeypatch.delenv("SCHEMAFORM_MAX_SETTLE_PASSES", raising=False)
        assert get_environment(EnvVar.SCHEMAFORM_MAX_SETTLE_PASSES) == 32

    @pytest.mark.unit
    def test_override_wins(self, monkeypatch):
        """An override beats the environment."""
        monkeypatch.setenv("SCHEMAFORM_MAX_SETTLE_PASSES", "99")
        assert get_environment(EnvVar.SCHEMAFORM_MAX_SETTLE_PASSES, override=5) == 5

    @pytest.mark.unit
    def test_int_conversion(self, monkeypatch):
        monkeypatch.setenv("SCHEMAFORM_MAX_SETTLE_PASSES", " 8 ")
        result = get_environment(EnvVar.SCHEMAFORM_MAX_SETTLE_PASSES)
        assert result == 8
        assert isinstance(result, int)

    @pytest.mark.unit
    def test_unparseable_value_warns(self, monkeypatch, caplog):
        """A value that does not convert falls back to the default."""
        monkeypatch.setenv("SCHEMAFORM_MAX_SETTLE_PASSES", "lots")
        with caplog.at_level("WARNING", logger="schemaform.config"):
            assert get_environment(EnvVar.SCHEMAFORM_MAX_SETTLE_PASSES) == 32
        assert "SCHEMAFORM_MAX_SETTLE_PASSES" in caplog.text

    @pytest.mark.unit
    def test_blank_value_is_unset(self, monkeypatch):
        monkeypatch.setenv("SCHEMAFORM_LOG_LEVEL", "  ")
        assert get_environment(EnvVar.SCHEMAFORM_LOG_LEVEL) == "WARNING"

    @pytest.mark.unit
    def test_string_kept(self, monkeypatch):
        monkeypatch.setenv("SCHEMAFORM_LOG_LEVEL", "debug")
        assert get_environment(EnvVar.SCHEMAFORM_LOG_LEVEL) == "debug"

    @pytest.mark.unit
    def test_path_conversion(self, monkeypatch, tmp_path):
        monkeypatch.setenv("SCHEMAFORM_SCHEMA_DIR", str(tmp_path))
        result = get_environment(EnvVar.SCHEMAFORM_SCHEMA_DIR)
        assert result == tmp_path
        assert isinstance(result, Path)


class TestDeclarations:
    """Tests for variable metadata and listing."""

    @pytest.mark.unit
    def test_info(self):
        info = get_environment_info(EnvVar.SCHEMAFORM_MAX_SETTLE_PASSES)
        assert isinstance(info, EnvConfig)
        assert info.name == "SCHEMAFORM_MAX_SETTLE_PASSES"
        assert info.var_type is int
        assert info.category == "forms"

    @pytest.mark.unit
    def test_names_match_members(self):
        """Each member's declared name is its own name."""
        for var in EnvVar:
            assert get_environment_info(var).name == var.name
            assert get_environment_info(var).description

    @pytest.mark.unit
    def test_list_all(self):
        assert list_environment_variables() == list(EnvVar)

    @pytest.mark.unit
    def test_list_by_category(self):
        assert list_environment_variables("forms") == [
            EnvVar.SCHEMAFORM_MAX_SETTLE_PASSES
        ]
        assert list_environment_variables("network") == []


class TestConvenience:
    """Tests for typed convenience accessors."""

    @pytest.mark.unit
    def test_log_level_upper_cased(self, monkeypatch):
        monkeypatch.setenv("SCHEMAFORM_LOG_LEVEL", "debug")
        assert get_log_level() == "DEBUG"

    @pytest.mark.unit
    def test_log_level_default(self, monkeypatch):
        monkeypatch.delenv("SCHEMAFORM_LOG_LEVEL", raising=False)
        assert get_log_level() == "WARNING"

    @pytest.mark.unit
    def test_settle_passes_floor(self):
        """The settle bound never drops below one pass."""
        assert get_max_settle_passes(override=0) == 1
        assert get_max_settle_passes(override=-3) == 1

    @pytest.mark.unit
    def test_schema_dir_override(self, tmp_path, monkeypatch):
        monkeypatch.setenv("SCHEMAFORM_SCHEMA_DIR", "/nowhere")
        assert get_schema_dir(str(tmp_path)) == tmp_path

    @pytest.mark.unit
    def test_schema_dir_defaults_to_cwd(self, tmp_path, monkeypatch):
        monkeypatch.delenv("SCHEMAFORM_SCHEMA_DIR", raising=False)
        monkeypatch.chdir(tmp_path)
        assert get_schema_dir() == tmp_path
