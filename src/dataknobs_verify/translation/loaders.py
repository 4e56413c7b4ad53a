"""Translation resource loaders.

A resource is either an in-memory mapping or a path to a YAML/JSON file.
Every loader returns a flat ``{dotted.key: message}`` dictionary, so nested
files such as::

    validation:
      required: "The field {field} is required"

produce the key ``validation.required``.
"""

from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Dict, List, Union

import yaml

from ..exceptions import TranslationLoadError

logger = logging.getLogger(__name__)

Resource = Union[Mapping[str, Any], str, Path]


def flatten_messages(messages: Mapping[str, Any], prefix: str = "") -> Dict[str, str]:
    """Flatten nested message mappings into dotted keys.

    Args:
        messages: Possibly nested mapping of messages
        prefix: Key prefix for the current nesting level

    Returns:
        Flat mapping of dotted key to message text
    """
    flat: Dict[str, str] = {}
    for key, value in messages.items():
        full_key = f"{prefix}.{key}" if prefix else str(key)
        if isinstance(value, Mapping):
            flat.update(flatten_messages(value, full_key))
        elif value is not None:
            flat[full_key] = str(value)
    return flat


class TranslationLoader(ABC):
    """Loads one kind of translation resource."""

    @abstractmethod
    def supports(self, resource: Resource) -> bool:
        pass

    @abstractmethod
    def load(self, resource: Resource) -> Dict[str, str]:
        """Load a resource into a flat message mapping.

        Raises:
            TranslationLoadError: If the resource cannot be read or parsed
        """
        pass


class DictLoader(TranslationLoader):
    """Loads messages from an in-memory mapping."""

    def supports(self, resource: Resource) -> bool:
        return isinstance(resource, Mapping)

    def load(self, resource: Resource) -> Dict[str, str]:
        if not isinstance(resource, Mapping):
            raise TranslationLoadError(resource, "expected a mapping of messages")
        return flatten_messages(resource)


class FileLoader(TranslationLoader):
    """Base for loaders reading a file with one of ``extensions``."""

    extensions: tuple[str, ...] = ()

    def supports(self, resource: Resource) -> bool:
        if not isinstance(resource, (str, Path)):
            return False
        return Path(resource).suffix.lower() in self.extensions

    def load(self, resource: Resource) -> Dict[str, str]:
        path = Path(resource)  # type: ignore[arg-type]
        if not path.is_file():
            raise TranslationLoadError(path, "file not found")
        try:
            with open(path, encoding="utf-8") as f:
                data = self.parse(f.read())
        except OSError as e:
            raise TranslationLoadError(path, str(e)) from e
        except (yaml.YAMLError, ValueError) as e:
            raise TranslationLoadError(path, f"parse error: {e}") from e

        if data is None:
            logger.warning("Translation file %s is empty", path)
            return {}
        if not isinstance(data, Mapping):
            raise TranslationLoadError(path, "top level must be a mapping")
        logger.debug("Loaded translations from %s", path)
        return flatten_messages(data)

    @abstractmethod
    def parse(self, text: str) -> Any:
        pass


class YamlLoader(FileLoader):
    """Loads ``.yaml``/``.yml`` files with ``yaml.safe_load``."""

    extensions = (".yaml", ".yml")

    def parse(self, text: str) -> Any:
        return yaml.safe_load(text)


class JsonLoader(FileLoader):
    """Loads ``.json`` files."""

    extensions = (".json",)

    def parse(self, text: str) -> Any:
        return json.loads(text)


class LoaderFactory:
    """Picks the first registered loader that supports a resource.

    Example:
        ```python
        factory = LoaderFactory.create_default()
        factory.load({"validation": {"even": "{field} must be even"}})
        # {'validation.even': '{field} must be even'}
        ```
    """

    def __init__(self, loaders: List[TranslationLoader] | None = None):
        self._loaders: List[TranslationLoader] = list(loaders or [])

    @classmethod
    def create_default(cls) -> LoaderFactory:
        return cls([DictLoader(), YamlLoader(), JsonLoader()])

    def register(self, loader: TranslationLoader) -> None:
        self._loaders.append(loader)

    def get_loader(self, resource: Resource) -> TranslationLoader:
        """Get the loader for a resource.

        Raises:
            TranslationLoadError: If no loader supports the resource
        """
        for loader in self._loaders:
            if loader.supports(resource):
                return loader
        raise TranslationLoadError(resource, "no loader supports this resource")

    def load(self, resource: Resource) -> Dict[str, str]:
        return self.get_loader(resource).load(resource)
