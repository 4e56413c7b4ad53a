"""Builds :class:`ValidationError` records for failed rules."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from datetime import date, datetime
from typing import TYPE_CHECKING, Any, Dict, Tuple

from .result import ValidationError
from .rules.metadata import RuleDefinition

if TYPE_CHECKING:
    from .handlers import FieldHandler
    from .rules.registry import RuleResolver
    from .translation.manager import TranslationManager

logger = logging.getLogger(__name__)


def format_value(value: Any) -> str:
    """Render a value for display inside an error message.

    Lists and tuples render as ``array`` and mappings or records as
    ``object``; ``None`` and booleans use their JSON spelling.
    """
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, datetime):
        return value.strftime("%Y-%m-%d %H:%M:%S")
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, (str, int, float)):
        return str(value)
    if isinstance(value, (list, tuple)):
        return "array"
    if isinstance(value, Mapping) or hasattr(value, "__dict__"):
        return "object"
    return str(value)


def format_param(value: Any) -> str:
    """Render a rule parameter; list parameters are joined with commas."""
    if isinstance(value, (list, tuple, set, frozenset)):
        items = sorted(value, key=str) if isinstance(value, (set, frozenset)) else value
        return ", ".join(format_value(item) for item in items)
    return format_value(value)


class ErrorManager:
    """Turns a failed rule invocation into a :class:`ValidationError`.

    Rule metadata is looked up once per rule name and cached, since the same
    rule typically fails on many records.
    """

    def __init__(self, resolver: RuleResolver, translations: TranslationManager):
        self._resolver = resolver
        self._translations = translations
        self._definitions: Dict[str, RuleDefinition | None] = {}

    def build_error(
        self,
        handler: FieldHandler,
        rule_name: str,
        value: Any,
        path: str,
        args: Tuple[Any, ...] = (),
        kwargs: Mapping[str, Any] | None = None,
    ) -> ValidationError:
        """Build the error for ``rule_name`` failing on ``value``.

        A custom message declared on the handler is used verbatim. Otherwise
        the arguments are mapped to the rule's parameter names and the
        translated template for ``validation.<rule_name>`` is rendered.

        Args:
            handler: Field or subfield the rule belongs to
            rule_name: Failed rule
            value: Value the rule was applied to
            path: Full dotted path of the field
            args: Positional rule arguments
            kwargs: Keyword rule arguments

        Returns:
            The error record
        """
        display_name = handler.alias or path
        if handler.error_message is not None:
            message = handler.error_message
        else:
            params = {
                name: format_param(param)
                for name, param in self._map_arguments(rule_name, args, dict(kwargs or {})).items()
            }
            message = self._translations.get_validation_message(
                rule_name, display_name, format_value(value), params
            )
        return ValidationError(
            field=path,
            alias=handler.alias,
            test=rule_name,
            message=message,
            value=value,
        )

    def clear_cache(self) -> None:
        self._definitions.clear()

    def _map_arguments(
        self, rule_name: str, args: Tuple[Any, ...], kwargs: Dict[str, Any]
    ) -> Dict[str, Any]:
        if rule_name not in self._definitions:
            self._definitions[rule_name] = self._resolver.find(rule_name)
        definition = self._definitions[rule_name]
        if definition is None or not definition.parameters:
            # No declared parameters: expose kwargs as-is, positional args by index
            mapped = {str(index): arg for index, arg in enumerate(args)}
            mapped.update(kwargs)
            return mapped
        return definition.map_arguments(args, kwargs)
