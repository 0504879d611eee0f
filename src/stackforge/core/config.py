# src/stackforge/core/config.py
"""
Configuration schema and loading for stackforge synthesis.

Uses Pydantic for validation and Dynaconf for multi-source loading.
Settings are frozen (immutable) after construction.
"""

import os
import re
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, Field, field_validator


class LoggingSettings(BaseModel):
    """Logging configuration.

    Example YAML:
        logging:
          level: DEBUG
          json_output: true
    """

    model_config = {"frozen": True}

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Root log level",
    )
    json_output: bool = Field(
        default=False,
        description="Emit JSON log lines instead of console output",
    )

    @field_validator("level", mode="before")
    @classmethod
    def normalize_level(cls, v: Any) -> Any:
        """Accept lower-case level names from YAML and environment variables."""
        if isinstance(v, str):
            return v.upper()
        return v


class SynthSettings(BaseModel):
    """Top-level synthesis configuration.

    Example YAML:
        output_dir: build/templates
        indent: 2
        template_format_version: "2010-09-09"
        logical_id_max_length: 255
    """

    model_config = {"frozen": True}

    output_dir: Path = Field(
        default=Path("stackforge.out"),
        description="Directory receiving one <stack>.template.json per stack",
    )
    indent: int = Field(
        default=1,
        ge=0,
        le=8,
        description="JSON indentation of written templates (0 writes a single line)",
    )
    template_format_version: str | None = Field(
        default="2010-09-09",
        description="AWSTemplateFormatVersion of emitted templates (None omits the key)",
    )
    logical_id_max_length: int = Field(
        default=255,
        ge=16,
        le=255,
        description="Upper bound on generated logical ids",
    )
    logging: LoggingSettings = Field(
        default_factory=LoggingSettings,
        description="Logging configuration",
    )


# Regex pattern for ${VAR} or ${VAR:-default} syntax
_ENV_VAR_PATTERN = re.compile(r"\$\{([A-Z_][A-Z0-9_]*)(?::-([^}]*))?\}")


def _expand_env_vars(config: dict[str, Any]) -> dict[str, Any]:
    """Recursively expand ${VAR} and ${VAR:-default} patterns in config values.

    Args:
        config: Configuration dict (may contain nested structures)

    Returns:
        New dict with environment variables expanded
    """

    def _expand_string(value: str) -> str:
        def replacer(match: re.Match[str]) -> str:
            env_value = os.environ.get(match.group(1))
            if env_value is not None:
                return env_value
            default = match.group(2)
            if default is not None:
                return default
            # No env var and no default - keep original so validation reports it
            return match.group(0)

        return _ENV_VAR_PATTERN.sub(replacer, value)

    def _expand_value(value: Any) -> Any:
        if isinstance(value, str):
            return _expand_string(value)
        elif isinstance(value, dict):
            return {k: _expand_value(v) for k, v in value.items()}
        elif isinstance(value, list):
            return [_expand_value(item) for item in value]
        else:
            return value

    return {k: _expand_value(v) for k, v in config.items()}


def load_settings(config_path: Path | None = None) -> SynthSettings:
    """Load settings from a YAML file with environment variable overrides.

    Precedence:
    1. Environment variables (STACKFORGE_*) - highest priority
    2. Config file
    3. Defaults from the Pydantic schema - lowest priority

    Environment variable format: STACKFORGE_LOGGING__LEVEL for nested keys.

    Args:
        config_path: Path to a YAML configuration file, or None for
            environment variables and defaults only

    Returns:
        Validated SynthSettings instance

    Raises:
        ValidationError: If configuration fails Pydantic validation
        FileNotFoundError: If config_path is given but does not exist
    """
    from dynaconf import Dynaconf

    # Dynaconf silently accepts missing files
    if config_path is not None and not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    dynaconf_settings = Dynaconf(
        envvar_prefix="STACKFORGE",
        settings_files=[str(config_path)] if config_path is not None else [],
        environments=False,
        load_dotenv=False,
        merge_enabled=True,
    )

    # Dynaconf returns uppercase keys; Pydantic fields are lowercase
    internal_keys = {"LOAD_DOTENV", "ENVIRONMENTS", "SETTINGS_FILES"}
    raw_config = {k.lower(): v for k, v in dynaconf_settings.as_dict().items() if k not in internal_keys}
    raw_config = _lowercase_nested(raw_config)
    raw_config = _expand_env_vars(raw_config)

    return SynthSettings(**raw_config)


def _lowercase_nested(config: dict[str, Any]) -> dict[str, Any]:
    """Lowercase keys of nested sections (Dynaconf uppercases env-provided keys)."""
    return {k: _lowercase_nested(v) if isinstance(v, dict) else v for k, v in ((k.lower(), v) for k, v in config.items())}


def resolve_config(settings: SynthSettings) -> dict[str, Any]:
    """Settings (explicit + defaults) as a JSON-safe dict, for display and logging."""
    return settings.model_dump(mode="json")
