"""Rule definitions and the metadata attached to them.

A rule is a predicate ``(value, *args) -> bool``. Its metadata (description,
category, examples, parameter names and defaults) feeds rule listings and
maps positional arguments onto named placeholders in error messages.
Metadata is always optional: a predicate whose signature cannot be inspected
still runs, it just has no named parameters.
"""

from __future__ import annotations

import inspect
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Callable

logger = logging.getLogger(__name__)

Predicate = Callable[..., bool]

# Attribute name used by the @rule decorator
RULE_INFO_ATTR = "__verify_rule__"


@dataclass(frozen=True)
class RuleParam:
    """A declared rule parameter (everything after the value)."""

    name: str
    type: str = "Any"
    required: bool = True
    default: Any = None
    description: str | None = None
    example: Any = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "type": self.type,
            "required": self.required,
            "default": self.default,
            "description": self.description,
            "example": self.example,
        }


@dataclass(frozen=True)
class RuleDefinition:
    """An executable rule plus its optional metadata."""

    name: str
    predicate: Predicate
    description: str | None = None
    category: str | None = None
    examples: tuple[str, ...] = ()
    parameters: tuple[RuleParam, ...] = ()

    def __call__(self, value: Any, *args: Any, **kwargs: Any) -> bool:
        return bool(self.predicate(value, *args, **kwargs))

    def map_arguments(self, args: tuple[Any, ...], kwargs: dict[str, Any]) -> dict[str, Any]:
        """Map invocation arguments onto declared parameter names.

        Positional arguments are matched in declaration order, keyword
        arguments by name; anything omitted falls back to the declared default.

        Args:
            args: Positional arguments of the invocation
            kwargs: Keyword arguments of the invocation

        Returns:
            Mapping of parameter name to bound value
        """
        bound: dict[str, Any] = {}
        for index, param in enumerate(self.parameters):
            if index < len(args):
                bound[param.name] = args[index]
            elif param.name in kwargs:
                bound[param.name] = kwargs[param.name]
            else:
                bound[param.name] = param.default
        return bound

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "category": self.category,
            "examples": list(self.examples),
            "parameters": [param.to_dict() for param in self.parameters],
        }


@dataclass(frozen=True)
class RuleInfo:
    """Metadata recorded by the :func:`rule` decorator."""

    name: str
    description: str | None = None
    category: str | None = None
    examples: tuple[str, ...] = ()
    params: dict[str, str] = field(default_factory=dict)
    param_examples: dict[str, Any] = field(default_factory=dict)


class RuleStrategy(ABC):
    """Base class for class-based custom rules.

    Subclasses set ``name`` (and optionally ``description``, ``category`` and
    ``examples``) and implement :meth:`check`. Parameters after ``value`` in
    the ``check`` signature become named message placeholders.

    Example:
        ```python
        class Palindrome(RuleStrategy):
            name = "palindrome"
            description = "Validates that a string reads the same backwards"
            category = "String"

            def check(self, value, ignore_case=False):
                text = str(value).lower() if ignore_case else str(value)
                return text == text[::-1]

        validator.register_strategy(Palindrome())
        ```
    """

    name: str = ""
    description: str | None = None
    category: str | None = None
    examples: tuple[str, ...] = ()
    param_descriptions: dict[str, str] = {}

    @abstractmethod
    def check(self, value: Any, *args: Any) -> bool:
        """Return True if ``value`` passes this rule."""
        pass

    def __call__(self, value: Any, *args: Any, **kwargs: Any) -> bool:
        return self.check(value, *args, **kwargs)


def rule(
    name: str,
    description: str | None = None,
    category: str | None = None,
    examples: list[str] | tuple[str, ...] = (),
    params: dict[str, str] | None = None,
    param_examples: dict[str, Any] | None = None,
) -> Callable[[Predicate], Predicate]:
    """Attach rule metadata to a predicate function.

    Args:
        name: Rule name used in declarations
        description: Human description
        category: Grouping used by rule listings
        examples: Usage examples
        params: Parameter name to description
        param_examples: Parameter name to example value

    Returns:
        Decorator returning the predicate unchanged apart from the metadata
    """

    def decorator(func: Predicate) -> Predicate:
        setattr(
            func,
            RULE_INFO_ATTR,
            RuleInfo(
                name=name,
                description=description,
                category=category,
                examples=tuple(examples),
                params=dict(params or {}),
                param_examples=dict(param_examples or {}),
            ),
        )
        return func

    return decorator


def _type_name(annotation: Any) -> str:
    if annotation is inspect.Parameter.empty:
        return "Any"
    if isinstance(annotation, str):
        return annotation
    return getattr(annotation, "__name__", str(annotation))


def extract_parameters(
    predicate: Predicate,
    descriptions: dict[str, str] | None = None,
    examples: dict[str, Any] | None = None,
) -> tuple[RuleParam, ...]:
    """Derive parameter metadata from a predicate signature.

    The first positional parameter is the validated value and is skipped,
    as are ``*args``/``**kwargs`` catch-alls.

    Args:
        predicate: Function or callable object
        descriptions: Optional parameter descriptions
        examples: Optional parameter examples

    Returns:
        Tuple of parameters, empty when the signature is unavailable
    """
    target = predicate.check if isinstance(predicate, RuleStrategy) else predicate
    try:
        signature = inspect.signature(target)
    except (TypeError, ValueError):
        logger.debug("No inspectable signature for rule predicate %r", predicate)
        return ()

    descriptions = descriptions or {}
    examples = examples or {}
    params = []
    skipped_value = False
    for param in signature.parameters.values():
        if param.kind in (param.VAR_POSITIONAL, param.VAR_KEYWORD):
            continue
        if not skipped_value:
            skipped_value = True
            continue
        has_default = param.default is not inspect.Parameter.empty
        params.append(
            RuleParam(
                name=param.name,
                type=_type_name(param.annotation),
                required=not has_default,
                default=param.default if has_default else None,
                description=descriptions.get(param.name),
                example=examples.get(param.name),
            )
        )
    return tuple(params)


def build_definition(
    name: str | None,
    predicate: Predicate | RuleStrategy,
    description: str | None = None,
    category: str | None = None,
    examples: list[str] | tuple[str, ...] | None = None,
) -> RuleDefinition:
    """Build a :class:`RuleDefinition` from a function or strategy.

    Explicit arguments win over metadata carried by the predicate itself
    (decorator info or strategy class attributes).

    Args:
        name: Rule name; taken from the predicate when None
        predicate: Callable or :class:`RuleStrategy` instance
        description: Optional description override
        category: Optional category override
        examples: Optional examples override

    Returns:
        The rule definition

    Raises:
        TypeError: If the predicate is not callable or no name can be determined
    """
    if not callable(predicate):
        raise TypeError(f"Rule predicate must be callable, got {type(predicate).__name__}")

    info: RuleInfo | None = getattr(predicate, RULE_INFO_ATTR, None)
    param_descriptions: dict[str, str] = {}
    param_examples: dict[str, Any] = {}

    if isinstance(predicate, RuleStrategy):
        name = name or predicate.name
        description = description or predicate.description
        category = category or predicate.category
        examples = examples or predicate.examples
        param_descriptions = dict(predicate.param_descriptions)
    elif info is not None:
        name = name or info.name
        description = description or info.description
        category = category or info.category
        examples = examples or info.examples
        param_descriptions = info.params
        param_examples = info.param_examples

    if not name:
        raise TypeError("A rule name is required")

    return RuleDefinition(
        name=name,
        predicate=predicate,
        description=description,
        category=category,
        examples=tuple(examples or ()),
        parameters=extract_parameters(predicate, param_descriptions, param_examples),
    )
