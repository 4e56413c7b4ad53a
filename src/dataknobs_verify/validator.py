"""The fluent validator façade.

Example:
    ```python
    from dataknobs_verify import Validator

    data = {"email": "x", "age": 10, "user": {"profile": {"age": 5}}}
    validator = (
        Validator(data)
        .field("email").required().email()
        .field("age").required().int().between(18, 100)
        .field("user").required().object()
        .subfield("profile", "age").required().int().greater_than(18)
    )
    if not validator.verify():
        for error in validator.get_errors():
            print(error["field"], error["message"])
    ```

Rules are called by name as methods (``.min_length(8)``). One trailing
underscore is dropped so Python keywords can be used: ``.in_([1, 2])`` runs
the ``in`` rule. Conditional rules are declared after a
``when()``/``and_()``/``or_()``/``then()`` chain and stay conditional until
the next ``field()``, ``subfield()``, ``nested()`` or ``when()``.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Mapping

from .conditions import ConditionalEngine, Operator
from .error_manager import ErrorManager
from .exceptions import (
    AlreadyVerifiedError,
    ConfigurationError,
    NoActiveFieldError,
    UnusedRuleError,
)
from .handlers import ConditionalRuleInvocation, FieldHandler, RuleInvocation
from .orchestrator import ValidationOrchestrator
from .result import ErrorCollection, ValidationError
from .rules.metadata import Predicate, RuleStrategy
from .rules.registry import GlobalRuleRegistry, RuleRegistry, RuleResolver
from .settings import VerifySettings
from .translation.manager import TranslationManager
from .translation.translator import Translator
from .traverser import DataTraverser

logger = logging.getLogger(__name__)


class Validator:
    """Declares rules for fields of one record and verifies them once.

    Args:
        data: Record to validate (mapping, list, or attribute record)
        settings: Locale and default-mode settings
        translator: Custom translator replacing the bundled messages

    Raises:
        ConfigurationError: If a preloaded rule is not a built-in rule
        LocaleNotFoundError: If the configured locale has no message file
    """

    def __init__(
        self,
        data: Any,
        *,
        settings: VerifySettings | None = None,
        translator: Translator | None = None,
    ):
        self._settings = settings or VerifySettings()
        self._traverser = DataTraverser(data)
        self._local_rules = RuleRegistry("instance_rules")
        self._resolver = RuleResolver(self._local_rules)
        self._preload(self._settings.preload_rules)
        self._translations = TranslationManager(self._settings, translator)
        self._error_manager = ErrorManager(self._resolver, self._translations)
        self._errors = ErrorCollection()
        self._conditions = ConditionalEngine()
        self._fields: List[FieldHandler] = []
        self._current_field: FieldHandler | None = None
        self._current: FieldHandler | None = None
        self._verified = False
        # rule accessors fetched by attribute and not called yet
        self._uncalled: List[Callable[..., Validator]] = []

    def _preload(self, names: List[str]) -> None:
        builtin = self._resolver.builtin
        for name in names:
            if builtin.get_optional(name) is None:
                raise ConfigurationError(
                    f"Cannot preload unknown built-in rule '{name}'",
                    context={"rule_name": name, "available": builtin.available()},
                )

    # -- Declaration contexts ------------------------------------------------

    def field(self, name: str) -> Validator:
        """Open a top-level field; later rules apply to it.

        Raises:
            IncompleteConditionError: If a when() chain is still open
        """
        self._ensure_called("field")
        self._conditions.ensure_complete("field")
        self._conditions.reset()
        handler = FieldHandler(name=name)
        self._fields.append(handler)
        self._current_field = handler
        self._current = handler
        return self

    def subfield(self, *segments: Any) -> Validator:
        """Open a path under the current top-level field.

        Args:
            *segments: Relative path segments; keys and list indices

        Raises:
            NoActiveFieldError: If no field is open
            IncompleteConditionError: If a when() chain is still open
        """
        if self._current_field is None:
            raise NoActiveFieldError("subfield")
        return self._open_subfield(self._current_field, segments, "subfield")

    def nested(self, *segments: Any) -> Validator:
        """Open a path under the current field or subfield.

        Raises:
            NoActiveFieldError: If no field is open
            IncompleteConditionError: If a when() chain is still open
        """
        if self._current is None:
            raise NoActiveFieldError("nested")
        return self._open_subfield(self._current, segments, "nested")

    def _open_subfield(self, parent: FieldHandler, segments: tuple, operation: str) -> Validator:
        if not segments:
            raise ValueError(f"{operation}() requires at least one path segment")
        self._ensure_called(operation)
        self._conditions.ensure_complete(operation)
        self._conditions.reset()
        self._current = parent.add_subfield(tuple(str(segment) for segment in segments))
        return self

    def alias(self, text: str) -> Validator:
        """Set the display name of the current field or subfield."""
        self._require_context("alias").alias = text
        return self

    def error_message(self, text: str) -> Validator:
        """Replace every message of the current field or subfield with ``text``."""
        self._require_context("error_message").error_message = text
        return self

    def _require_context(self, operation: str) -> FieldHandler:
        self._ensure_called(operation)
        if self._current is None:
            raise NoActiveFieldError(operation)
        return self._current

    # -- Rules ---------------------------------------------------------------

    def rule(self, name: str, *args: Any, **kwargs: Any) -> Validator:
        """Attach a rule to the current field or subfield.

        Inside an active ``then()`` block the rule is conditional.

        Raises:
            NoActiveFieldError: If no field is open
            IncompleteConditionError: If when() was not closed by then()
            RuleNotFoundError: If no registry layer knows the rule
        """
        handler = self._require_context(name)
        self._conditions.ensure_complete(name)
        self._resolver.resolve(name)

        condition_set = self._conditions.active_conditions
        if condition_set is not None:
            invocation: RuleInvocation = ConditionalRuleInvocation(
                rule_name=name, args=args, kwargs=dict(kwargs), condition_set=condition_set
            )
        else:
            invocation = RuleInvocation(rule_name=name, args=args, kwargs=dict(kwargs))
        handler.add_rule(invocation)
        return self

    def __getattr__(self, name: str) -> Callable[..., Validator]:
        if name.startswith("_"):
            raise AttributeError(name)
        rule_name = name[:-1] if name.endswith("_") else name

        def invoke(*args: Any, **kwargs: Any) -> Validator:
            if invoke in self._uncalled:
                self._uncalled.remove(invoke)
            return self.rule(rule_name, *args, **kwargs)

        invoke.__name__ = rule_name
        self._uncalled.append(invoke)
        return invoke

    def _ensure_called(self, operation: str) -> None:
        """Reject ``operation`` while a rule accessor was fetched but not called.

        Raises:
            UnusedRuleError: For ``validator.required`` written without parentheses
        """
        if self._uncalled:
            rule_name = self._uncalled[0].__name__
            self._uncalled.clear()
            raise UnusedRuleError(rule_name, operation)

    # -- Conditions ----------------------------------------------------------

    def when(self, path: str, operator: Operator | str, value: Any) -> Validator:
        """Start a condition chain; ``path`` is a dotted path from the root.

        Raises:
            NoActiveFieldError: If no field is open
            IncompleteConditionError: If a previous when() was not closed
            InvalidOperatorError: If the operator is unknown
        """
        self._require_context("when")
        self._conditions.when(path, operator, value)
        return self

    def and_(self, path: str, operator: Operator | str, value: Any) -> Validator:
        self._ensure_called("and")
        self._conditions.and_(path, operator, value)
        return self

    def or_(self, path: str, operator: Operator | str, value: Any) -> Validator:
        self._ensure_called("or")
        self._conditions.or_(path, operator, value)
        return self

    def then(self) -> Validator:
        """Close the chain; following rules are guarded by it."""
        self._ensure_called("then")
        self._conditions.then()
        return self

    # -- Execution -----------------------------------------------------------

    def verify(self, batch: bool | None = None) -> bool:
        """Run every declared rule. May be called once per validator.

        Args:
            batch: True collects every error, False stops at the first
                failing field; defaults to ``settings.batch``

        Returns:
            True if the record is valid

        Raises:
            AlreadyVerifiedError: On a second call
            IncompleteConditionError: If a when() chain was never closed
        """
        if self._verified:
            raise AlreadyVerifiedError()
        self._ensure_called("verify")
        self._conditions.ensure_complete("verify")
        self._verified = True

        batch = self._settings.batch if batch is None else batch
        logger.debug("Verifying %d field(s), batch=%s", len(self._fields), batch)
        orchestrator = ValidationOrchestrator(
            self._traverser, self._resolver, self._error_manager, self._errors
        )
        valid = orchestrator.verify(self._fields, batch)
        logger.debug("Verification finished with %d error(s)", len(self._errors))
        return valid

    @property
    def is_verified(self) -> bool:
        return self._verified

    @property
    def errors(self) -> ErrorCollection:
        return self._errors

    def get_errors(self, as_objects: bool = False) -> List[Dict[str, Any]] | List[ValidationError]:
        """Errors of the last run, as dictionaries or as ValidationError objects."""
        if as_objects:
            return self._errors.to_list()
        return self._errors.to_dicts()

    # -- Custom rules --------------------------------------------------------

    def register_rule(
        self,
        name: str | None,
        predicate: Predicate | RuleStrategy,
        description: str | None = None,
        category: str | None = None,
        examples: List[str] | None = None,
    ) -> Validator:
        """Register a rule for this validator only.

        Example:
            ```python
            validator.register_rule(
                "even", lambda value: value % 2 == 0, description="Even numbers"
            )
            validator.field("count").even()
            ```
        """
        self._local_rules.register_rule(name, predicate, description, category, examples)
        self._error_manager.clear_cache()
        return self

    def register_strategy(self, strategy: RuleStrategy) -> Validator:
        self._local_rules.register_strategy(strategy)
        self._error_manager.clear_cache()
        return self

    @classmethod
    def global_rules(cls) -> GlobalRuleRegistry:
        """The process-wide rule registry shared by every validator."""
        return GlobalRuleRegistry.instance()

    def list_rules(self, category: str | None = None) -> Dict[str, Dict[str, Any]]:
        return self._resolver.list_rules(category)

    def get_rule_metadata(self, name: str) -> Dict[str, Any] | None:
        return self._resolver.get_metadata(name)

    def rule_categories(self) -> List[str]:
        return self._resolver.categories()

    # -- Translation ---------------------------------------------------------

    def set_translator(self, translator: Translator) -> Validator:
        self._translations.set_translator(translator)
        return self

    def set_locale(self, locale: str) -> Validator:
        self._translations.set_locale(locale)
        return self

    def add_translations(self, messages: Mapping[str, Any], locale: str | None = None) -> Validator:
        self._translations.add_translations(messages, locale)
        return self

    def load_locale(self, locale: str, path: str | None = None) -> Validator:
        self._translations.load_locale(locale, path)
        return self

    @property
    def locale(self) -> str:
        return self._translations.locale
