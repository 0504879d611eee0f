# tests/unit/core/test_config.py
"""Tests for synthesis settings and their loading."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from stackforge.core.config import LoggingSettings, SynthSettings, _expand_env_vars, load_settings, resolve_config


@pytest.fixture(autouse=True)
def _clean_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep ambient STACKFORGE_* variables from leaking into settings."""
    import os

    for name in list(os.environ):
        if name.startswith("STACKFORGE_"):
            monkeypatch.delenv(name)


class TestSynthSettings:
    """Schema defaults and validation."""

    def test_defaults(self) -> None:
        settings = SynthSettings()
        assert settings.output_dir == Path("stackforge.out")
        assert settings.indent == 1
        assert settings.template_format_version == "2010-09-09"
        assert settings.logical_id_max_length == 255
        assert settings.logging == LoggingSettings(level="INFO", json_output=False)

    def test_frozen(self) -> None:
        settings = SynthSettings()
        with pytest.raises(ValidationError):
            settings.indent = 4  # type: ignore[misc]

    @pytest.mark.parametrize("indent", [-1, 9])
    def test_indent_bounds(self, indent: int) -> None:
        with pytest.raises(ValidationError):
            SynthSettings(indent=indent)

    @pytest.mark.parametrize("length", [15, 256])
    def test_logical_id_length_bounds(self, length: int) -> None:
        with pytest.raises(ValidationError):
            SynthSettings(logical_id_max_length=length)

    def test_level_normalized(self) -> None:
        assert LoggingSettings(level="debug").level == "DEBUG"  # type: ignore[arg-type]

    def test_unknown_level_rejected(self) -> None:
        with pytest.raises(ValidationError):
            LoggingSettings(level="verbose")  # type: ignore[arg-type]

    def test_resolve_config_is_json_safe(self) -> None:
        assert resolve_config(SynthSettings(indent=2)) == {
            "output_dir": "stackforge.out",
            "indent": 2,
            "template_format_version": "2010-09-09",
            "logical_id_max_length": 255,
            "logging": {"level": "INFO", "json_output": False},
        }


class TestLoadSettings:
    """Loading from YAML files and STACKFORGE_* environment variables."""

    def test_no_file_gives_defaults(self) -> None:
        assert load_settings() == SynthSettings()

    def test_yaml_file(self, tmp_path: Path) -> None:
        config = tmp_path / "settings.yaml"
        config.write_text("output_dir: build/templates\nindent: 2\nlogging:\n  level: debug\n  json_output: true\n")
        settings = load_settings(config)
        assert settings.output_dir == Path("build/templates")
        assert settings.indent == 2
        assert settings.logging.level == "DEBUG"
        assert settings.logging.json_output is True

    def test_missing_file_raises(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_settings(tmp_path / "missing.yaml")

    def test_environment_overrides_file(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        config = tmp_path / "settings.yaml"
        config.write_text("indent: 2\n")
        monkeypatch.setenv("STACKFORGE_INDENT", "4")
        assert load_settings(config).indent == 4

    def test_nested_environment_override(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("STACKFORGE_LOGGING__LEVEL", "error")
        assert load_settings().logging.level == "ERROR"

    def test_env_var_expansion(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        config = tmp_path / "settings.yaml"
        config.write_text('output_dir: "${TEMPLATE_DIR:-build/default}"\n')
        assert load_settings(config).output_dir == Path("build/default")
        monkeypatch.setenv("TEMPLATE_DIR", "build/custom")
        assert load_settings(config).output_dir == Path("build/custom")

    def test_invalid_value_raises_validation_error(self, tmp_path: Path) -> None:
        config = tmp_path / "settings.yaml"
        config.write_text("indent: 42\n")
        with pytest.raises(ValidationError):
            load_settings(config)


class TestExpandEnvVars:
    """${VAR} and ${VAR:-default} expansion."""

    def test_nested_structures(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("REGION_NAME", "eu-west-1")
        expanded = _expand_env_vars({"a": {"b": ["${REGION_NAME}", 3]}, "c": "x-${REGION_NAME}"})
        assert expanded == {"a": {"b": ["eu-west-1", 3]}, "c": "x-eu-west-1"}

    def test_unset_without_default_kept(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("NOT_SET_ANYWHERE", raising=False)
        assert _expand_env_vars({"a": "${NOT_SET_ANYWHERE}"}) == {"a": "${NOT_SET_ANYWHERE}"}
