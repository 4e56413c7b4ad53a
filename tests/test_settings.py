"""Tests for dataknobs_verify.settings module."""

import json

import pytest
from dataknobs_config import Config

from dataknobs_verify.exceptions import ConfigurationError
from dataknobs_verify.settings import VerifySettings


class TestDefaults:
    """Default settings."""

    def test_defaults(self):
        """Defaults match the bundled English setup."""
        settings = VerifySettings()
        assert settings.locale == "en"
        assert settings.fallback_locale == "en"
        assert settings.locale_paths == []
        assert settings.batch is True
        assert settings.preload_rules == ["required", "string", "int", "array", "object"]

    def test_empty_locale_rejected(self):
        with pytest.raises(ConfigurationError):
            VerifySettings(locale="")


class TestFromDict:
    """Settings from plain mappings."""

    def test_known_keys(self):
        settings = VerifySettings.from_dict({"locale": "fr", "batch": "no"})
        assert settings.locale == "fr"
        assert settings.batch is False

    def test_unknown_keys(self):
        """Unknown keys are rejected with context."""
        with pytest.raises(ConfigurationError) as exc_info:
            VerifySettings.from_dict({"locale": "fr", "colour": "red"})
        assert exc_info.value.context["unknown"] == ["colour"]

    def test_bad_boolean(self):
        """Unparseable booleans are configuration errors."""
        with pytest.raises(ConfigurationError, match="boolean"):
            VerifySettings.from_dict({"batch": "sometimes"})


class TestFromConfig:
    """Settings come from the ``verify`` section of a dataknobs Config."""

    def test_section(self):
        config = Config({"verify": {"locale": "fr", "batch": False}}, use_env=False)
        settings = VerifySettings.from_config(config)
        assert settings.locale == "fr"
        assert settings.batch is False

    def test_missing_section_uses_defaults(self):
        assert VerifySettings.from_config(Config({}, use_env=False)) == VerifySettings()

    def test_named_entry(self):
        config = Config(
            {"verify": [{"name": "strict", "batch": False}, {"name": "lenient", "locale": "es"}]},
            use_env=False,
        )
        assert VerifySettings.from_config(config, "lenient").locale == "es"
        assert VerifySettings.from_config(config, "strict").batch is False

    def test_unknown_key_in_section(self):
        config = Config({"verify": {"colour": "red"}}, use_env=False)
        with pytest.raises(ConfigurationError):
            VerifySettings.from_config(config)


class TestFromFile:
    """YAML and JSON settings files."""

    def test_yaml(self, tmp_path):
        """A YAML verify section."""
        path = tmp_path / "verify.yaml"
        path.write_text(
            "verify:\n  locale: es\n  locale_paths:\n    - ./locales\n  batch: false\n",
            encoding="utf-8",
        )
        settings = VerifySettings.from_file(path, use_env=False)
        assert settings.locale == "es"
        assert settings.locale_paths == ["./locales"]
        assert settings.batch is False

    def test_json(self, tmp_path):
        """A JSON verify section."""
        path = tmp_path / "verify.json"
        path.write_text(json.dumps({"verify": {"fallback_locale": "fr"}}), encoding="utf-8")
        assert VerifySettings.from_file(str(path), use_env=False).fallback_locale == "fr"

    def test_empty_file(self, tmp_path):
        """An empty file yields the defaults."""
        path = tmp_path / "verify.yml"
        path.write_text("", encoding="utf-8")
        assert VerifySettings.from_file(path, use_env=False) == VerifySettings()

    def test_environment_overrides_file(self, tmp_path, monkeypatch):
        """DATAKNOBS_VERIFY__0__* variables win over file values."""
        path = tmp_path / "verify.yaml"
        path.write_text("verify:\n  locale: es\n", encoding="utf-8")
        monkeypatch.setenv("DATAKNOBS_VERIFY__0__LOCALE", "fr")
        assert VerifySettings.from_file(path).locale == "fr"
        assert VerifySettings.from_file(path, use_env=False).locale == "es"

    def test_missing_file(self, tmp_path):
        """A missing file is a configuration error."""
        with pytest.raises(ConfigurationError, match="not found"):
            VerifySettings.from_file(tmp_path / "none.yaml")

    def test_unsupported_format(self, tmp_path):
        path = tmp_path / "verify.toml"
        path.write_text("locale = 'fr'", encoding="utf-8")
        with pytest.raises(ConfigurationError, match="Unsupported"):
            VerifySettings.from_file(path)

    def test_malformed_file(self, tmp_path):
        path = tmp_path / "verify.json"
        path.write_text("{locale", encoding="utf-8")
        with pytest.raises(ConfigurationError, match="Cannot read"):
            VerifySettings.from_file(path)

    def test_non_mapping(self, tmp_path):
        """Content that is not a mapping is rejected."""
        path = tmp_path / "verify.yaml"
        path.write_text("- fr\n", encoding="utf-8")
        with pytest.raises(ConfigurationError, match="Cannot read"):
            VerifySettings.from_file(path)


class TestFromEnv:
    """Environment overrides use the dataknobs_config variable format."""

    def test_reads_prefixed_variables(self, monkeypatch):
        monkeypatch.setenv("DATAKNOBS_VERIFY__0__LOCALE", "fr")
        monkeypatch.setenv("DATAKNOBS_VERIFY__0__BATCH", "false")
        monkeypatch.setenv("DATAKNOBS_VERIFY__0__LOCALE_PATHS", "/a, /b")
        settings = VerifySettings.from_env()
        assert settings.locale == "fr"
        assert settings.batch is False
        assert settings.locale_paths == ["/a", "/b"]

    def test_comma_list(self, monkeypatch):
        monkeypatch.setenv("DATAKNOBS_VERIFY__0__PRELOAD_RULES", "required,email")
        assert VerifySettings.from_env().preload_rules == ["required", "email"]

    def test_no_variables(self, monkeypatch):
        monkeypatch.delenv("DATAKNOBS_VERIFY__0__LOCALE", raising=False)
        assert VerifySettings.from_env().locale == "en"


class TestMerge:
    """Combining settings."""

    def test_merge_mapping(self):
        merged = VerifySettings(locale="fr").merge({"batch": False})
        assert merged.locale == "fr"
        assert merged.batch is False

    def test_merge_settings_applies_non_defaults(self):
        """Only values that differ from the defaults override."""
        base = VerifySettings(locale="fr", batch=False)
        merged = base.merge(VerifySettings(locale="es"))
        assert merged.locale == "es"
        assert merged.batch is False

    def test_merge_unknown_key(self):
        with pytest.raises(ConfigurationError):
            VerifySettings().merge({"nope": 1})
