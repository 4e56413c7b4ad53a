"""Settings for validators: locale, locale search paths, default mode.

Settings can be built from a dictionary, from a ``verify`` section of a
:class:`dataknobs_config.Config` (YAML/JSON files included) or from the
environment, and combined with :meth:`VerifySettings.merge`.

Example:
    ```python
    # verify.yaml
    # verify:
    #   locale: fr
    #   locale_paths: [./translations]
    #   batch: false

    settings = VerifySettings.from_file("verify.yaml")
    validator = Validator(data, settings=settings)
    ```

Environment variables follow the dataknobs_config override convention
``DATAKNOBS_<TYPE>__<NAME_OR_INDEX>__<ATTRIBUTE>``::

    DATAKNOBS_VERIFY__0__LOCALE=es
    DATAKNOBS_VERIFY__0__BATCH=false
    DATAKNOBS_VERIFY__0__LOCALE_PATHS=/etc/verify/locales,./locales
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, List, Mapping, Union

import yaml
from dataknobs_common import DataknobsError
from dataknobs_config import Config, ConfigNotFoundError

from .exceptions import ConfigurationError
from .rules.builtin import CORE_RULES

logger = logging.getLogger(__name__)

SECTION = "verify"

# Keys Config adds to every atomic configuration
_CONFIG_KEYS = ("type", "name")


def _parse_bool(name: str, value: Any) -> bool:
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in ("true", "yes", "1", "on"):
        return True
    if text in ("false", "no", "0", "off"):
        return False
    raise ConfigurationError(
        f"Setting '{name}' expects a boolean, got {value!r}",
        context={"setting": name, "value": value},
    )


def _parse_list(value: Any) -> List[str]:
    if isinstance(value, str):
        return [item.strip() for item in value.split(",") if item.strip()]
    return [str(item) for item in value]


@dataclass
class VerifySettings:
    """Validator settings.

    Attributes:
        locale: Locale used for error messages
        fallback_locale: Locale consulted when a message is missing
        locale_paths: Extra directories searched for ``<locale>.yaml|yml|json``
        batch: Default mode of ``verify()`` (True collects all errors)
        preload_rules: Built-in rules instantiated when the registry is created
    """

    locale: str = "en"
    fallback_locale: str = "en"
    locale_paths: List[str] = field(default_factory=list)
    batch: bool = True
    preload_rules: List[str] = field(default_factory=lambda: list(CORE_RULES))

    def __post_init__(self) -> None:
        if not self.locale or not self.fallback_locale:
            raise ConfigurationError("Locales must be non-empty strings")
        self.batch = _parse_bool("batch", self.batch)
        self.locale_paths = _parse_list(self.locale_paths)
        self.preload_rules = _parse_list(self.preload_rules)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> VerifySettings:
        """Build settings from a mapping.

        Raises:
            ConfigurationError: If the mapping contains unknown keys
        """
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigurationError(
                f"Unknown settings: {', '.join(unknown)}",
                context={"unknown": unknown, "allowed": sorted(known)},
            )
        return cls(**dict(data))

    @classmethod
    def from_config(cls, config: Config, name_or_index: Union[str, int] = 0) -> VerifySettings:
        """Build settings from the ``verify`` section of a Config.

        A config without a ``verify`` section yields the defaults.

        Args:
            config: Loaded configuration
            name_or_index: Which ``verify`` entry to use

        Raises:
            ConfigurationError: If the section contains unknown keys
        """
        try:
            section = config.get(SECTION, name_or_index)
        except ConfigNotFoundError:
            logger.debug("No '%s' configuration section; using default settings", SECTION)
            return cls()
        for key in _CONFIG_KEYS:
            section.pop(key, None)
        return cls.from_dict(section)

    @classmethod
    def from_file(cls, path: Union[str, Path], use_env: bool = True) -> VerifySettings:
        """Load settings from the ``verify`` section of a YAML or JSON file.

        Args:
            path: Configuration file
            use_env: Apply ``DATAKNOBS_VERIFY__...`` environment overrides

        Raises:
            ConfigurationError: If the file is missing, unreadable or malformed
        """
        try:
            config = Config(path, use_env=use_env)
        # Non-mapping content fails inside Config with AttributeError/TypeError
        except (DataknobsError, OSError, yaml.YAMLError, ValueError, AttributeError, TypeError) as e:
            raise ConfigurationError(
                f"Cannot read settings file {path}: {e}", context={"path": str(path)}
            ) from e
        logger.debug("Loaded verify settings from %s", path)
        return cls.from_config(config)

    @classmethod
    def from_env(cls) -> VerifySettings:
        """Build settings from ``DATAKNOBS_VERIFY__0__<FIELD>`` environment variables."""
        return cls.from_config(Config({SECTION: {}}))

    def merge(self, overrides: VerifySettings | Mapping[str, Any]) -> VerifySettings:
        """Return new settings with ``overrides`` applied on top of these.

        When ``overrides`` is a VerifySettings, only values that differ from
        the defaults are applied.
        """
        if isinstance(overrides, VerifySettings):
            defaults = asdict(VerifySettings())
            changes = {
                key: value
                for key, value in asdict(overrides).items()
                if value != defaults[key]
            }
        else:
            changes = dict(overrides)
        merged = asdict(self)
        merged.update(changes)
        return VerifySettings.from_dict(merged)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
