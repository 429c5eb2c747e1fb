"""Pydantic settings loaded from YAML configuration."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, SecretStr

from notifier.core.types import SchemaVariant

_settings: Settings | None = None

_DEFAULT_CONFIG_PATH = Path("config/settings.yaml")


class OpsgenieConfig(BaseModel):
    """Opsgenie alert API configuration."""

    api_url: str = "https://api.opsgenie.com"
    # Recipient key (team name) -> integration API key.
    api_keys: dict[str, SecretStr] = Field(default_factory=dict)
    timeout_secs: float = 10.0


class TemplateConfig(BaseModel):
    """A named notification template as written in YAML.

    The ``opsgenie`` block is kept raw here; its shape depends on the active
    ``schema_variant`` and is parsed when the template is compiled.
    """

    message: str = ""
    opsgenie: dict[str, Any] | None = None


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = "INFO"
    format: str = "json"


class Settings(BaseModel):
    """Root settings container."""

    opsgenie: OpsgenieConfig = OpsgenieConfig()
    schema_variant: SchemaVariant = SchemaVariant.STRUCTURED
    templates: dict[str, TemplateConfig] = Field(default_factory=dict)
    logging: LoggingConfig = LoggingConfig()


def load_settings(path: str | Path | None = None) -> Settings:
    """Load settings from a YAML file and cache globally.

    Args:
        path: Path to YAML config. Defaults to config/settings.yaml.

    Returns:
        Parsed Settings instance.
    """
    global _settings  # noqa: PLW0603

    config_path = Path(path) if path else _DEFAULT_CONFIG_PATH

    data: dict[str, Any] = {}
    if config_path.exists():
        with open(config_path) as f:
            raw = yaml.safe_load(f)
            if isinstance(raw, dict):
                data = raw

    _settings = Settings(**data)
    return _settings


def get_settings() -> Settings:
    """Return the cached settings, loading defaults if not yet loaded."""
    global _settings  # noqa: PLW0603
    if _settings is None:
        _settings = load_settings()
    return _settings


def reset_settings() -> None:
    """Reset the cached settings (useful for testing)."""
    global _settings  # noqa: PLW0603
    _settings = None
