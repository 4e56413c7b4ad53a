"""Rule registries: built-in, instance-scoped and process-wide.

Rule names are resolved through three layers in a fixed order:

1. :class:`BuiltinRuleRegistry`: the shipped catalogue, instantiated lazily
   by name on first use and cached
2. the validator's own :class:`RuleRegistry` (rules registered on one instance)
3. :class:`GlobalRuleRegistry`: process-wide rules visible to every validator

:class:`RuleResolver` walks the layers; a name unknown to all of them raises
:class:`~dataknobs_verify.exceptions.RuleNotFoundError`.

The built-in and global layers are process-wide singletons. Registration is
meant to happen at startup; reads are safe from any thread once populated.
Tests isolate themselves with the ``reset()`` hooks.

Example:
    ```python
    from dataknobs_verify.rules import GlobalRuleRegistry

    GlobalRuleRegistry.instance().register(
        "even", lambda value: value % 2 == 0, category="Numeric"
    )
    ```
"""

from __future__ import annotations

import logging
import threading
from dataclasses import replace
from typing import Any, Callable, ClassVar, Dict, List

from dataknobs_common import Registry

from ..exceptions import RuleNotFoundError
from .builtin import BUILTIN_RULES, CORE_RULES
from .metadata import Predicate, RuleDefinition, RuleStrategy, build_definition

logger = logging.getLogger(__name__)


class RuleRegistry(Registry[RuleDefinition]):
    """Registry of rule definitions with a category index.

    Used directly as the instance-scoped layer of a validator, and as the
    base of the built-in and global layers. Storage, locking and the
    ``OperationError``/``NotFoundError`` contract come from
    :class:`dataknobs_common.Registry`.
    """

    def __init__(self, name: str = "rules"):
        super().__init__(name)
        self._categories: Dict[str, set[str]] = {}

    def register_rule(
        self,
        name: str | None,
        predicate: Predicate | RuleStrategy,
        description: str | None = None,
        category: str | None = None,
        examples: List[str] | None = None,
        allow_overwrite: bool = True,
    ) -> RuleDefinition:
        """Register a predicate function under a rule name.

        Args:
            name: Rule name; taken from decorator or strategy metadata when None
            predicate: Callable ``(value, *args) -> bool`` or a RuleStrategy
            description: Optional description
            category: Optional category
            examples: Optional usage examples
            allow_overwrite: Replace an existing rule with the same name

        Returns:
            The registered definition

        Raises:
            OperationError: If the name exists and allow_overwrite is False
        """
        definition = build_definition(name, predicate, description, category, examples)
        self.add_definition(definition, allow_overwrite=allow_overwrite)
        return definition

    def register_strategy(self, strategy: RuleStrategy, allow_overwrite: bool = True) -> RuleDefinition:
        """Register a class-based rule using its own ``name`` and metadata."""
        if not isinstance(strategy, RuleStrategy):
            raise TypeError(f"Expected a RuleStrategy, got {type(strategy).__name__}")
        return self.register_rule(None, strategy, allow_overwrite=allow_overwrite)

    def add_definition(self, definition: RuleDefinition, allow_overwrite: bool = True) -> None:
        with self._lock:
            if definition.name in BUILTIN_RULES and not isinstance(self, BuiltinRuleRegistry):
                logger.warning(
                    "Rule '%s' registered in %s is shadowed by the built-in rule of the same name",
                    definition.name,
                    self._name,
                )
            previous = Registry.get_optional(self, definition.name)
            Registry.register(self, definition.name, definition, allow_overwrite=allow_overwrite)
            if previous is not None and previous.category:
                self._categories.get(previous.category, set()).discard(previous.name)
            if definition.category:
                self._categories.setdefault(definition.category, set()).add(definition.name)
        logger.debug("Registered rule '%s' in %s", definition.name, self._name)

    def unregister(self, key: str) -> RuleDefinition:
        with self._lock:
            definition = super().unregister(key)
            if definition.category:
                self._categories.get(definition.category, set()).discard(key)
            return definition

    def clear(self) -> None:
        with self._lock:
            super().clear()
            self._categories.clear()

    def execute(self, name: str, value: Any, *args: Any, **kwargs: Any) -> bool:
        """Run a rule by name.

        Raises:
            NotFoundError: If the rule is not registered here
        """
        return self.get(name)(value, *args, **kwargs)

    def categories(self) -> List[str]:
        with self._lock:
            return sorted(category for category, names in self._categories.items() if names)

    def list_rules(self, category: str | None = None) -> Dict[str, Dict[str, Any]]:
        """Describe the registered rules.

        Args:
            category: Only include rules of this category

        Returns:
            Mapping of rule name to its metadata dictionary
        """
        with self._lock:
            return {
                name: definition.to_dict()
                for name, definition in sorted(self.items())
                if category is None or definition.category == category
            }

    def get_metadata(self, name: str) -> Dict[str, Any] | None:
        definition = self.get_optional(name)
        return definition.to_dict() if definition is not None else None


class BuiltinRuleRegistry(RuleRegistry):
    """The shipped rule catalogue, loaded lazily by name.

    Only the core rules are instantiated up front; every other built-in is
    turned into a :class:`RuleDefinition` the first time it is looked up.
    """

    _instance: ClassVar[BuiltinRuleRegistry | None] = None
    _instance_lock: ClassVar[threading.Lock] = threading.Lock()

    def __init__(
        self,
        table: Dict[str, Callable[..., bool]] | None = None,
        preload: tuple[str, ...] | List[str] = CORE_RULES,
    ):
        super().__init__("builtin_rules")
        self._table = dict(BUILTIN_RULES if table is None else table)
        for name in preload:
            self.get_optional(name)

    @classmethod
    def instance(cls) -> BuiltinRuleRegistry:
        """Get the process-wide built-in registry."""
        with cls._instance_lock:
            if cls._instance is None:
                cls._instance = cls()
            return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Drop the process-wide instance (test isolation hook)."""
        with cls._instance_lock:
            cls._instance = None

    def get_optional(self, key: str) -> RuleDefinition | None:
        with self._lock:
            definition = super().get_optional(key)
            if definition is None and key in self._table:
                definition = build_definition(key, self._table[key])
                self.add_definition(definition)
                logger.debug("Lazily loaded built-in rule '%s'", key)
            return definition

    def get(self, key: str) -> RuleDefinition:
        # Base get() only sees loaded items; load on demand first
        self.get_optional(key)
        return super().get(key)

    def has(self, key: str) -> bool:
        return key in self._table

    def available(self) -> List[str]:
        """Names of every built-in rule, loaded or not."""
        return sorted(self._table)

    def load_all(self) -> None:
        for name in self._table:
            self.get_optional(name)

    def list_rules(self, category: str | None = None) -> Dict[str, Dict[str, Any]]:
        self.load_all()
        return super().list_rules(category)

    def categories(self) -> List[str]:
        self.load_all()
        return super().categories()


class GlobalRuleRegistry(RuleRegistry):
    """Process-wide custom rules visible to every validator.

    Example:
        ```python
        registry = GlobalRuleRegistry.instance()
        registry.register_many({
            "even": lambda value: value % 2 == 0,
            "odd": lambda value: value % 2 == 1,
        })
        ```
    """

    _instance: ClassVar[GlobalRuleRegistry | None] = None
    _instance_lock: ClassVar[threading.Lock] = threading.Lock()

    def __init__(self) -> None:
        super().__init__("global_rules")

    @classmethod
    def instance(cls) -> GlobalRuleRegistry:
        with cls._instance_lock:
            if cls._instance is None:
                cls._instance = cls()
            return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Drop every global rule (test isolation hook)."""
        with cls._instance_lock:
            if cls._instance is not None:
                cls._instance.clear()
            cls._instance = None

    def register(  # type: ignore[override]
        self,
        name: str | None,
        predicate: Predicate | RuleStrategy | RuleDefinition,
        description: str | None = None,
        category: str | None = None,
        examples: List[str] | None = None,
        allow_overwrite: bool = True,
    ) -> None:
        """Register a rule for all validators."""
        if isinstance(predicate, RuleDefinition):
            if name and name != predicate.name:
                predicate = replace(predicate, name=name)
            self.add_definition(predicate, allow_overwrite=allow_overwrite)
            return
        self.register_rule(name, predicate, description, category, examples, allow_overwrite)

    def register_many(self, rules: Dict[str, Predicate | RuleStrategy]) -> None:
        for name, predicate in rules.items():
            self.register_rule(name, predicate)


class RuleResolver:
    """Resolves rule names through the built-in, instance and global layers.

    Args:
        local: The validator's instance-scoped registry
        builtin: Built-in layer; the process-wide instance by default
        global_registry: Global layer; the process-wide instance by default
    """

    def __init__(
        self,
        local: RuleRegistry | None = None,
        builtin: BuiltinRuleRegistry | None = None,
        global_registry: GlobalRuleRegistry | None = None,
    ):
        self.local = local if local is not None else RuleRegistry("instance_rules")
        self._builtin = builtin
        self._global = global_registry

    @property
    def builtin(self) -> BuiltinRuleRegistry:
        return self._builtin if self._builtin is not None else BuiltinRuleRegistry.instance()

    @property
    def global_registry(self) -> GlobalRuleRegistry:
        return self._global if self._global is not None else GlobalRuleRegistry.instance()

    def layers(self) -> tuple[RuleRegistry, ...]:
        return (self.builtin, self.local, self.global_registry)

    def find(self, name: str) -> RuleDefinition | None:
        for layer in self.layers():
            definition = layer.get_optional(name)
            if definition is not None:
                return definition
        return None

    def resolve(self, name: str) -> RuleDefinition:
        """Resolve a rule name.

        Raises:
            RuleNotFoundError: If no layer knows the name
        """
        definition = self.find(name)
        if definition is None:
            raise RuleNotFoundError(name, self.available())
        return definition

    def has(self, name: str) -> bool:
        return any(layer.has(name) for layer in self.layers())

    def available(self) -> List[str]:
        names = set(self.builtin.available())
        names.update(self.local.list_keys())
        names.update(self.global_registry.list_keys())
        return sorted(names)

    def list_rules(self, category: str | None = None) -> Dict[str, Dict[str, Any]]:
        """Describe every resolvable rule; earlier layers win on name clashes."""
        merged: Dict[str, Dict[str, Any]] = {}
        for layer in self.layers():
            for name, info in layer.list_rules(category).items():
                merged.setdefault(name, info)
        return dict(sorted(merged.items()))

    def get_metadata(self, name: str) -> Dict[str, Any] | None:
        definition = self.find(name)
        return definition.to_dict() if definition is not None else None

    def categories(self) -> List[str]:
        found: set[str] = set()
        for layer in self.layers():
            found.update(layer.categories())
        return sorted(found)
