"""Tests for notifier/core/config.py — YAML loading, defaults, SecretStr."""

from __future__ import annotations

from pathlib import Path

import pytest
import yaml

from notifier.core.config import (
    LoggingConfig,
    OpsgenieConfig,
    Settings,
    TemplateConfig,
    get_settings,
    load_settings,
    reset_settings,
)
from notifier.core.types import SchemaVariant


@pytest.fixture(autouse=True)
def _clean_settings() -> None:
    """Reset the global settings cache before each test."""
    reset_settings()


class TestDefaults:
    """Settings should have sensible defaults when no YAML is provided."""

    def test_default_opsgenie_config(self) -> None:
        cfg = OpsgenieConfig()
        assert cfg.api_url == "https://api.opsgenie.com"
        assert cfg.api_keys == {}
        assert cfg.timeout_secs == 10.0

    def test_default_logging_config(self) -> None:
        cfg = LoggingConfig()
        assert cfg.level == "INFO"
        assert cfg.format == "json"

    def test_default_template_config(self) -> None:
        cfg = TemplateConfig()
        assert cfg.message == ""
        assert cfg.opsgenie is None

    def test_default_settings(self) -> None:
        s = Settings()
        assert s.schema_variant == SchemaVariant.STRUCTURED
        assert s.templates == {}
        assert s.logging.level == "INFO"


class TestYamlLoading:
    """Settings should load correctly from YAML files."""

    def test_load_from_yaml(self, tmp_path: Path) -> None:
        config_data = {
            "opsgenie": {
                "api_url": "https://api.eu.opsgenie.com",
                "api_keys": {"team-x": "key-x", "team-y": "key-y"},
                "timeout_secs": 3,
            },
            "schema_variant": "templated",
            "templates": {
                "app-degraded": {
                    "message": "{{ app }} degraded",
                    "opsgenie": {"alias": "svc-{{ app }}", "tags": '["a"]'},
                },
            },
            "logging": {"level": "DEBUG", "format": "console"},
        }
        config_file = tmp_path / "settings.yaml"
        config_file.write_text(yaml.dump(config_data))

        settings = load_settings(config_file)

        assert settings.opsgenie.api_url == "https://api.eu.opsgenie.com"
        assert settings.opsgenie.api_keys["team-x"].get_secret_value() == "key-x"
        assert settings.opsgenie.timeout_secs == 3
        assert settings.schema_variant == SchemaVariant.TEMPLATED
        tpl = settings.templates["app-degraded"]
        assert tpl.message == "{{ app }} degraded"
        assert tpl.opsgenie == {"alias": "svc-{{ app }}", "tags": '["a"]'}
        assert settings.logging.level == "DEBUG"
        assert settings.logging.format == "console"

    def test_load_missing_file_uses_defaults(self, tmp_path: Path) -> None:
        settings = load_settings(tmp_path / "nonexistent.yaml")
        assert settings.opsgenie.api_url == "https://api.opsgenie.com"
        assert settings.templates == {}

    def test_load_empty_file_uses_defaults(self, tmp_path: Path) -> None:
        config_file = tmp_path / "empty.yaml"
        config_file.write_text("")
        settings = load_settings(config_file)
        assert settings.schema_variant == SchemaVariant.STRUCTURED

    def test_partial_yaml_merges_with_defaults(self, tmp_path: Path) -> None:
        config_file = tmp_path / "settings.yaml"
        config_file.write_text(yaml.dump({"opsgenie": {"timeout_secs": 1}}))

        settings = load_settings(config_file)
        assert settings.opsgenie.timeout_secs == 1
        # Other defaults still intact
        assert settings.opsgenie.api_url == "https://api.opsgenie.com"
        assert settings.logging.format == "json"

    def test_unknown_schema_variant_rejected(self, tmp_path: Path) -> None:
        config_file = tmp_path / "settings.yaml"
        config_file.write_text(yaml.dump({"schema_variant": "both"}))
        with pytest.raises(ValueError):
            load_settings(config_file)

    def test_get_settings_caches(self, tmp_path: Path) -> None:
        config_file = tmp_path / "settings.yaml"
        config_file.write_text(yaml.dump({"logging": {"level": "WARNING"}}))
        loaded = load_settings(config_file)
        assert get_settings() is loaded


class TestSecretStr:
    """API keys should use SecretStr to prevent leaking."""

    def test_secret_str_repr_does_not_leak(self) -> None:
        cfg = OpsgenieConfig(api_keys={"team-x": "super-secret"})  # type: ignore[dict-item]
        repr_str = repr(cfg)
        assert "super-secret" not in repr_str
        assert "**********" in repr_str

    def test_secret_str_get_value(self) -> None:
        cfg = OpsgenieConfig(api_keys={"team-x": "my-secret"})  # type: ignore[dict-item]
        assert cfg.api_keys["team-x"].get_secret_value() == "my-secret"
