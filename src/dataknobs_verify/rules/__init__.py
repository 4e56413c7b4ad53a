"""Validation rules: built-in catalogue, metadata and layered registries."""

from .builtin import BUILTIN_RULES, CORE_RULES
from .metadata import RuleDefinition, RuleParam, RuleStrategy, rule
from .registry import (
    BuiltinRuleRegistry,
    GlobalRuleRegistry,
    RuleRegistry,
    RuleResolver,
)

__all__ = [
    "BUILTIN_RULES",
    "CORE_RULES",
    "BuiltinRuleRegistry",
    "GlobalRuleRegistry",
    "RuleDefinition",
    "RuleParam",
    "RuleRegistry",
    "RuleResolver",
    "RuleStrategy",
    "rule",
]
