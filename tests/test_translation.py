"""Tests for dataknobs_verify.translation package."""

import json

import pytest

from dataknobs_verify.exceptions import (
    LocaleNotFoundError,
    OperationError,
    TranslationLoadError,
)
from dataknobs_verify.settings import VerifySettings
from dataknobs_verify.translation import (
    LoaderFactory,
    MessageCatalog,
    TranslationManager,
    flatten_messages,
)


class StaticTranslator:
    """Minimal custom translator."""

    locale = "xx"

    def resolve_message(self, key, params=None, locale=None, domain=None):
        if key == "validation.required":
            return f"[{params['field']}] missing"
        return key


# ---------------------------------------------------------------------------
# Loaders
# ---------------------------------------------------------------------------


class TestLoaders:
    """Translation resource loaders."""

    def test_flatten(self):
        """Nested keys flatten to dotted keys."""
        assert flatten_messages({"a": {"b": "x", "c": {"d": "y"}}}) == {"a.b": "x", "a.c.d": "y"}

    def test_dict_resource(self):
        factory = LoaderFactory.create_default()
        assert factory.load({"validation": {"even": "even"}}) == {"validation.even": "even"}

    def test_yaml_file(self, tmp_path):
        """YAML files load through the factory."""
        path = tmp_path / "it.yaml"
        path.write_text("validation:\n  required: \"Il campo {field} è obbligatorio\"\n", encoding="utf-8")
        messages = LoaderFactory.create_default().load(path)
        assert messages["validation.required"].startswith("Il campo")

    def test_json_file(self, tmp_path):
        path = tmp_path / "pt.json"
        path.write_text(json.dumps({"validation": {"required": "obrigatório"}}), encoding="utf-8")
        assert LoaderFactory.create_default().load(str(path)) == {"validation.required": "obrigatório"}

    def test_missing_file(self, tmp_path):
        """Missing files raise TranslationLoadError."""
        with pytest.raises(TranslationLoadError, match="file not found"):
            LoaderFactory.create_default().load(tmp_path / "none.yaml")

    def test_malformed_yaml(self, tmp_path):
        """Parse errors keep the file path."""
        path = tmp_path / "bad.yaml"
        path.write_text("validation: [unclosed\n", encoding="utf-8")
        with pytest.raises(TranslationLoadError, match="parse error"):
            LoaderFactory.create_default().load(path)

    def test_top_level_must_be_mapping(self, tmp_path):
        path = tmp_path / "list.json"
        path.write_text("[1, 2]", encoding="utf-8")
        with pytest.raises(TranslationLoadError, match="mapping"):
            LoaderFactory.create_default().load(path)

    def test_unsupported_resource(self):
        with pytest.raises(TranslationLoadError, match="no loader"):
            LoaderFactory.create_default().load("messages.ini")


# ---------------------------------------------------------------------------
# Catalog
# ---------------------------------------------------------------------------


class TestMessageCatalog:
    """Locale and domain message lookup."""

    @pytest.fixture
    def catalog(self):
        catalog = MessageCatalog("fr", "en")
        catalog.add_resource({"validation": {"required": "{field} is required", "only_en": "en"}}, "en")
        catalog.add_resource({"validation": {"required": "{field} est requis"}}, "fr")
        return catalog

    def test_current_locale(self, catalog):
        assert catalog.resolve_message("validation.required", {"field": "nom"}) == "nom est requis"

    def test_fallback_locale(self, catalog):
        """Missing keys fall back to the fallback locale."""
        assert catalog.resolve_message("validation.only_en") == "en"

    def test_unresolved_key(self, catalog):
        """An unresolved key returns the key itself."""
        assert catalog.resolve_message("validation.unknown") == "validation.unknown"

    def test_unknown_placeholders_are_kept(self, catalog):
        catalog.add_resource({"m": "{field} {other}"}, "fr")
        assert catalog.resolve_message("m", {"field": "a"}) == "a {other}"

    def test_copy_is_independent(self, catalog):
        """Copies do not share message maps."""
        clone = catalog.copy()
        clone.add_resource({"validation": {"required": "changed"}}, "fr")
        clone.locale = "en"
        assert catalog.resolve_message("validation.required", {"field": "x"}) == "x est requis"
        assert catalog.locale == "fr"


# ---------------------------------------------------------------------------
# Manager
# ---------------------------------------------------------------------------


class TestTranslationManager:
    """Per-validator translation state."""

    def test_default_english(self):
        manager = TranslationManager()
        assert manager.get_validation_message("required", "email", "null") == "The field email is required"

    def test_params_are_substituted(self):
        manager = TranslationManager()
        message = manager.get_validation_message("between", "age", "10", {"min": "18", "max": "100"})
        assert message == "The field age must be between 18 and 100"

    def test_bundled_locales(self):
        """English, French and Spanish ship with the package."""
        manager = TranslationManager()
        manager.set_locale("fr")
        assert manager.get_validation_message("required", "email", "") == "Le champ email est requis"
        manager.set_locale("es")
        assert manager.get_validation_message("required", "name", "") == "El campo name es obligatorio"

    def test_locale_from_settings(self):
        manager = TranslationManager(VerifySettings(locale="fr"))
        assert manager.locale == "fr"
        assert manager.get_validation_message("required", "email", "") == "Le champ email est requis"

    def test_unknown_rule_falls_back_to_generic(self):
        """Rules without a message get the generic text."""
        manager = TranslationManager()
        assert manager.get_validation_message("even", "n", "3") == "The field 'n' failed the test 'even'"

    def test_missing_translation_falls_back_to_english(self):
        manager = TranslationManager()
        manager.add_translations({"validation": {"even": "{field} must be even"}}, "en")
        manager.set_locale("fr")
        assert manager.get_validation_message("even", "n", "3") == "n must be even"

    def test_unknown_locale(self):
        """Locales without a file raise LocaleNotFoundError."""
        manager = TranslationManager()
        with pytest.raises(LocaleNotFoundError) as exc_info:
            manager.set_locale("zz")
        assert exc_info.value.locale == "zz"
        assert manager.locale == "en"

    def test_load_locale_from_path(self, locale_dir):
        manager = TranslationManager()
        manager.load_locale("de", locale_dir)
        manager.set_locale("de")
        assert manager.get_validation_message("required", "Name", "") == "Das Feld Name ist erforderlich"

    def test_locale_paths_setting(self, locale_dir):
        manager = TranslationManager(VerifySettings(locale="de", locale_paths=[str(locale_dir)]))
        assert manager.get_validation_message("required", "Name", "") == "Das Feld Name ist erforderlich"

    def test_instances_do_not_share_state(self):
        """Added messages stay on their manager."""
        first = TranslationManager()
        second = TranslationManager()
        first.add_translations({"validation": {"required": "changed"}})
        first.set_locale("fr")
        assert second.locale == "en"
        assert second.get_validation_message("required", "x", "") == "The field x is required"

    def test_base_catalog_is_cached(self):
        """The English catalog is read once per process."""
        TranslationManager()
        cached = TranslationManager._base_catalog
        TranslationManager()
        assert TranslationManager._base_catalog is cached
        TranslationManager.reset_cache()
        assert TranslationManager._base_catalog is None

    def test_custom_translator(self):
        manager = TranslationManager()
        manager.set_translator(StaticTranslator())
        assert manager.locale == "xx"
        assert manager.get_validation_message("required", "email", "") == "[email] missing"
        assert manager.get_validation_message("email", "email", "x") == "The field 'email' failed the test 'email'"

    def test_custom_translator_cannot_be_extended(self):
        """Custom translators own their messages."""
        manager = TranslationManager(translator=StaticTranslator())
        with pytest.raises(OperationError):
            manager.add_translations({"validation": {"x": "y"}})

    def test_set_translator_type_check(self):
        with pytest.raises(TypeError):
            TranslationManager().set_translator(object())
