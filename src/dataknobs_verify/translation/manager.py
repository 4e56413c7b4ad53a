"""Per-validator access to translated validation messages.

The bundled English catalog is read from disk once per process. Each
:class:`TranslationManager` works on its own copy, so switching locale or
adding messages on one validator never affects another.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Mapping
from pathlib import Path
from typing import Any, ClassVar, List, Union

from ..exceptions import LocaleNotFoundError, OperationError
from ..settings import VerifySettings
from .translator import DEFAULT_DOMAIN, MessageCatalog, Translator

logger = logging.getLogger(__name__)

LOCALES_DIR = Path(__file__).parent / "locales"
LOCALE_EXTENSIONS = (".yaml", ".yml", ".json")
BASE_LOCALE = "en"


def default_message(rule_name: str, display_name: str) -> str:
    """Message used when no translation exists for a rule."""
    return f"The field '{display_name}' failed the test '{rule_name}'"


class TranslationManager:
    """Resolves validation messages through a translator.

    Args:
        settings: Locale, fallback locale and extra locale directories
        translator: Custom translator replacing the bundled catalog
    """

    _base_catalog: ClassVar[MessageCatalog | None] = None
    _base_lock: ClassVar[threading.Lock] = threading.Lock()

    def __init__(
        self,
        settings: VerifySettings | None = None,
        translator: Translator | None = None,
    ):
        self._settings = settings or VerifySettings()
        self._locale = self._settings.locale
        if translator is not None:
            self._translator: Translator = translator
            self._uses_catalog = False
        else:
            catalog = self._get_base_catalog().copy()
            catalog.fallback_locale = self._settings.fallback_locale
            self._translator = catalog
            self._uses_catalog = True
            for locale in dict.fromkeys((self._settings.fallback_locale, self._locale)):
                self._ensure_loaded(locale)
            catalog.locale = self._locale

    @classmethod
    def _get_base_catalog(cls) -> MessageCatalog:
        with cls._base_lock:
            if cls._base_catalog is None:
                catalog = MessageCatalog(BASE_LOCALE, BASE_LOCALE)
                count = catalog.add_resource(LOCALES_DIR / f"{BASE_LOCALE}.yaml", BASE_LOCALE)
                logger.debug("Loaded base catalog with %d messages", count)
                cls._base_catalog = catalog
            return cls._base_catalog

    @classmethod
    def reset_cache(cls) -> None:
        """Forget the process-wide base catalog (test isolation hook)."""
        with cls._base_lock:
            cls._base_catalog = None

    @property
    def translator(self) -> Translator:
        return self._translator

    @property
    def locale(self) -> str:
        return self._locale

    def set_translator(self, translator: Translator) -> None:
        """Replace the bundled catalog with a custom translator."""
        if not isinstance(translator, Translator):
            raise TypeError(
                f"Translator must provide resolve_message() and locale, got {type(translator).__name__}"
            )
        self._translator = translator
        self._uses_catalog = False
        self._locale = translator.locale

    def set_locale(self, locale: str) -> None:
        """Switch the message locale, loading a bundled or configured file if needed.

        Raises:
            LocaleNotFoundError: If the bundled catalog has no file for the locale
        """
        if self._uses_catalog:
            self._ensure_loaded(locale)
            self._catalog.locale = locale
        self._locale = locale

    def add_translations(
        self,
        messages: Mapping[str, Any],
        locale: str | None = None,
        domain: str = DEFAULT_DOMAIN,
    ) -> None:
        """Add or override messages, typically for custom rules.

        Example:
            ```python
            manager.add_translations({"validation": {"even": "{field} must be even"}})
            ```

        Raises:
            OperationError: If a custom translator is in use
        """
        self._catalog.add_resource(messages, locale or self._locale, domain)

    def load_locale(self, locale: str, path: Union[str, Path, None] = None) -> None:
        """Load messages for a locale from a file or from the search path.

        Args:
            locale: Locale name (``"fr"``)
            path: Explicit file or directory; the configured ``locale_paths``
                and the bundled locales are searched when omitted

        Raises:
            LocaleNotFoundError: If no file is found
            TranslationLoadError: If the file cannot be parsed
            OperationError: If a custom translator is in use
        """
        catalog = self._catalog
        resource = self._find_locale_file(locale, path)
        count = catalog.add_resource(resource, locale)
        logger.debug("Loaded %d messages for locale '%s' from %s", count, locale, resource)

    def get_validation_message(
        self,
        rule_name: str,
        display_name: str,
        value: str,
        params: Mapping[str, Any] | None = None,
    ) -> str:
        """Render the message for a failed rule.

        ``value`` and ``params`` are expected to be display strings already.
        Falls back to a generic message when the translator has no entry.
        """
        key = f"validation.{rule_name}"
        parameters = {"field": display_name, "value": value}
        parameters.update(params or {})
        message = self._translator.resolve_message(
            key, parameters, locale=self._locale, domain=DEFAULT_DOMAIN
        )
        if not message or message == key:
            return default_message(rule_name, display_name)
        return message

    @property
    def _catalog(self) -> MessageCatalog:
        if not self._uses_catalog or not isinstance(self._translator, MessageCatalog):
            raise OperationError(
                "Cannot modify translations of a custom translator",
                context={"translator": type(self._translator).__name__},
            )
        return self._translator

    def _ensure_loaded(self, locale: str) -> None:
        if not self._catalog.has_locale(locale):
            self.load_locale(locale)

    def _find_locale_file(self, locale: str, path: Union[str, Path, None]) -> Path:
        if path is not None:
            candidate = Path(path)
            if candidate.is_file():
                return candidate
            directories = [candidate]
        else:
            directories = [Path(p) for p in self._settings.locale_paths] + [LOCALES_DIR]

        searched: List[str] = []
        for directory in directories:
            for extension in LOCALE_EXTENSIONS:
                candidate = directory / f"{locale}{extension}"
                searched.append(str(candidate))
                if candidate.is_file():
                    return candidate
        raise LocaleNotFoundError(locale, searched)
