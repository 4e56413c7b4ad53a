"""Fluent, chainable validation of nested records."""

from .conditions import ChainState, Combinator, Condition, ConditionalEngine, ConditionSet, Operator
from .exceptions import (
    AlreadyVerifiedError,
    ConditionalChainError,
    ConfigurationError,
    ContractViolationError,
    IncompleteConditionError,
    InvalidOperatorError,
    LocaleNotFoundError,
    MixedCombinatorError,
    NoActiveFieldError,
    RuleNotFoundError,
    TranslationLoadError,
    UnusedRuleError,
    VerifyError,
)
from .result import ErrorCollection, ValidationError
from .rules import GlobalRuleRegistry, RuleDefinition, RuleParam, RuleStrategy, rule
from .settings import VerifySettings
from .translation import MessageCatalog, TranslationManager, Translator
from .traverser import DataTraverser, is_empty
from .validator import Validator

__version__ = "0.1.0"

__all__ = [
    "AlreadyVerifiedError",
    "ChainState",
    "Combinator",
    "Condition",
    "ConditionSet",
    "ConditionalChainError",
    "ConditionalEngine",
    "ConfigurationError",
    "ContractViolationError",
    "DataTraverser",
    "ErrorCollection",
    "GlobalRuleRegistry",
    "IncompleteConditionError",
    "InvalidOperatorError",
    "LocaleNotFoundError",
    "MessageCatalog",
    "MixedCombinatorError",
    "NoActiveFieldError",
    "Operator",
    "RuleDefinition",
    "RuleNotFoundError",
    "UnusedRuleError",
    "RuleParam",
    "RuleStrategy",
    "TranslationLoadError",
    "TranslationManager",
    "Translator",
    "ValidationError",
    "Validator",
    "VerifyError",
    "VerifySettings",
    "is_empty",
    "rule",
]
