"""Tests for TechSpecConfig and TechSpecSettings."""

from pathlib import Path

import pytest

from techspec.config import DEFAULT_CONFIG, TechSpecConfig
from techspec.converter.rules import DEFAULT_CODE_LANGUAGES
from techspec.errors import ConfigError, ErrorCategory, InvalidConfigError
from techspec.settings import TechSpecSettings


# =============================================================================
# TechSpecConfig Tests
# =============================================================================

class TestTechSpecConfig:
    """Tests for TechSpecConfig."""

    def test_defaults(self):
        config = TechSpecConfig()

        assert config.title == "Tech Spec"
        assert config.default_status == "Draft"
        assert config.list_indent == 2
        assert config.strict_markup is False
        assert config.code_languages == list(DEFAULT_CODE_LANGUAGES)
        assert DEFAULT_CONFIG.to_dict() == config.to_dict()

    def test_template_dir_path(self):
        config = TechSpecConfig(template_dir="templates")
        assert config.template_dir == Path("templates")

    def test_code_languages_lowercased(self):
        assert TechSpecConfig(code_languages=["SQL", "Python"]).code_languages == ["sql", "python"]

    @pytest.mark.parametrize("indent", [0, -2, "2"])
    def test_invalid_list_indent(self, indent):
        with pytest.raises(InvalidConfigError) as exc_info:
            TechSpecConfig(list_indent=indent)

        assert exc_info.value.key == "list_indent"
        assert exc_info.value.category == ErrorCategory.CONFIG

    def test_empty_title(self):
        with pytest.raises(InvalidConfigError):
            TechSpecConfig(title="")

    def test_from_dict(self):
        config = TechSpecConfig.from_dict({"default_owner": "Payments", "list_indent": 4})

        assert config.default_owner == "Payments"
        assert config.list_indent == 4

    def test_from_dict_unknown_key(self):
        with pytest.raises(InvalidConfigError) as exc_info:
            TechSpecConfig.from_dict({"colour": "blue"})

        assert exc_info.value.key == "colour"

    def test_dict_round_trip(self, tmp_path):
        config = TechSpecConfig(title="Specs", template_dir=tmp_path, strict_markup=True)
        assert TechSpecConfig.from_dict(config.to_dict()) == config

    def test_from_yaml(self, tmp_path):
        path = tmp_path / "techspec.yaml"
        path.write_text("default_owner: Payments\nstrict_markup: true\ncode_languages: [sql]\n")

        config = TechSpecConfig.from_yaml(path)

        assert config.default_owner == "Payments"
        assert config.strict_markup is True
        assert config.code_languages == ["sql"]

    def test_from_empty_yaml(self, tmp_path):
        path = tmp_path / "techspec.yaml"
        path.write_text("")

        assert TechSpecConfig.from_yaml(path) == TechSpecConfig()

    def test_from_yaml_missing_file(self, tmp_path):
        with pytest.raises(ConfigError):
            TechSpecConfig.from_yaml(tmp_path / "missing.yaml")

    def test_from_yaml_not_a_mapping(self, tmp_path):
        path = tmp_path / "techspec.yaml"
        path.write_text("- a\n")

        with pytest.raises(ConfigError):
            TechSpecConfig.from_yaml(path)


# =============================================================================
# TechSpecSettings Tests
# =============================================================================

class TestTechSpecSettings:
    """Tests for environment-driven settings."""

    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("TECHSPEC_LOG_LEVEL", raising=False)
        monkeypatch.delenv("TECHSPEC_CONFIG_FILE", raising=False)

        settings = TechSpecSettings()

        assert settings.log_level == "WARNING"
        assert settings.config_file is None
        assert settings.load_config() == TechSpecConfig()

    def test_env_prefix(self, monkeypatch):
        monkeypatch.setenv("TECHSPEC_LOG_LEVEL", "DEBUG")
        monkeypatch.setenv("TECHSPEC_LOG_JSON", "true")

        settings = TechSpecSettings()

        assert settings.log_level == "DEBUG"
        assert settings.log_json is True

    def test_load_config_from_env(self, monkeypatch, tmp_path):
        path = tmp_path / "techspec.yaml"
        path.write_text("title: Payments Specs\n")
        monkeypatch.setenv("TECHSPEC_CONFIG_FILE", str(path))

        config = TechSpecSettings().load_config()

        assert config.title == "Payments Specs"
