"""Translated validation messages."""

from .loaders import (
    DictLoader,
    JsonLoader,
    LoaderFactory,
    TranslationLoader,
    YamlLoader,
    flatten_messages,
)
from .manager import TranslationManager, default_message
from .translator import MessageCatalog, Translator

__all__ = [
    "DictLoader",
    "JsonLoader",
    "LoaderFactory",
    "MessageCatalog",
    "TranslationLoader",
    "TranslationManager",
    "Translator",
    "YamlLoader",
    "default_message",
    "flatten_messages",
]
