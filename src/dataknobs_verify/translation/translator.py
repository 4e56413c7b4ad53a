"""The translator interface and the default message catalog."""

from __future__ import annotations

import copy
import logging
import re
from collections.abc import Mapping
from typing import Any, Dict, Protocol, runtime_checkable

from .loaders import LoaderFactory, Resource

logger = logging.getLogger(__name__)

DEFAULT_DOMAIN = "validators"

_PLACEHOLDER_RE = re.compile(r"\{(\w+)\}")


@runtime_checkable
class Translator(Protocol):
    """Anything able to turn a message key into display text.

    Implementations return the key itself when they cannot resolve it.
    """

    @property
    def locale(self) -> str: ...

    def resolve_message(
        self,
        key: str,
        params: Mapping[str, Any] | None = None,
        locale: str | None = None,
        domain: str | None = None,
    ) -> str: ...


def substitute(template: str, params: Mapping[str, Any] | None) -> str:
    """Replace ``{name}`` placeholders; unknown placeholders are left as-is."""
    if not params:
        return template

    def replace(match: re.Match) -> str:
        name = match.group(1)
        return str(params[name]) if name in params else match.group(0)

    return _PLACEHOLDER_RE.sub(replace, template)


class MessageCatalog:
    """In-memory translator keyed by locale, then domain, then message key.

    Example:
        ```python
        catalog = MessageCatalog("fr")
        catalog.add_resource({"validation": {"required": "Le champ {field} est requis"}}, "fr")
        catalog.resolve_message("validation.required", {"field": "email"})
        # 'Le champ email est requis'
        ```
    """

    def __init__(
        self,
        locale: str = "en",
        fallback_locale: str = "en",
        loader_factory: LoaderFactory | None = None,
    ):
        self._locale = locale
        self.fallback_locale = fallback_locale
        self._loader_factory = loader_factory or LoaderFactory.create_default()
        self._messages: Dict[str, Dict[str, Dict[str, str]]] = {}

    @property
    def locale(self) -> str:
        return self._locale

    @locale.setter
    def locale(self, value: str) -> None:
        self._locale = value

    def add_resource(self, resource: Resource, locale: str, domain: str = DEFAULT_DOMAIN) -> int:
        """Load a resource and merge its messages into a locale/domain.

        Later resources override earlier keys.

        Returns:
            Number of messages loaded from the resource
        """
        messages = self._loader_factory.load(resource)
        self._messages.setdefault(locale, {}).setdefault(domain, {}).update(messages)
        return len(messages)

    def has_locale(self, locale: str) -> bool:
        return locale in self._messages

    def get_message(self, key: str, locale: str, domain: str = DEFAULT_DOMAIN) -> str | None:
        return self._messages.get(locale, {}).get(domain, {}).get(key)

    def resolve_message(
        self,
        key: str,
        params: Mapping[str, Any] | None = None,
        locale: str | None = None,
        domain: str | None = None,
    ) -> str:
        locale = locale or self._locale
        domain = domain or DEFAULT_DOMAIN

        message = self.get_message(key, locale, domain)
        if message is None and locale != self.fallback_locale:
            message = self.get_message(key, self.fallback_locale, domain)
        if message is None:
            logger.debug("No message for '%s' in locale '%s'", key, locale)
            return key
        return substitute(message, params)

    def copy(self) -> MessageCatalog:
        """Independent copy sharing nothing mutable with this catalog."""
        clone = MessageCatalog(self._locale, self.fallback_locale, self._loader_factory)
        clone._messages = copy.deepcopy(self._messages)
        return clone
