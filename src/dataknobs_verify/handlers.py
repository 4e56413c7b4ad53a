"""Declaration model built by the fluent API and consumed by ``verify()``.

A :class:`FieldHandler` owns the rules declared for one top-level field; a
:class:`SubfieldHandler` does the same for a path relative to its parent and
may nest further subfields. Declaration order is preserved everywhere since
it defines execution and error order.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Tuple

from .conditions import ConditionSet


@dataclass(frozen=True)
class RuleInvocation:
    """A rule name bound to its arguments."""

    rule_name: str
    args: Tuple[Any, ...] = ()
    kwargs: Dict[str, Any] = field(default_factory=dict)

    @property
    def is_required(self) -> bool:
        return self.rule_name == "required"


@dataclass(frozen=True)
class ConditionalRuleInvocation(RuleInvocation):
    """A rule invocation guarded by a condition set, evaluated at verify time."""

    condition_set: ConditionSet | None = None


@dataclass(eq=False)
class FieldHandler:
    """Rules, alias and custom message of one top-level field.

    Attributes:
        name: Field key in the root record (used as-is, dots included)
        validations: Unconditional rules in declaration order
        conditional_validations: Guarded rules in declaration order
        subfields: Nested subfields in declaration order
        alias: Display name for error messages
        error_message: Message replacing every translated message of this field
    """

    name: str
    validations: List[RuleInvocation] = field(default_factory=list)
    conditional_validations: List[ConditionalRuleInvocation] = field(default_factory=list)
    subfields: List[SubfieldHandler] = field(default_factory=list)
    alias: str | None = None
    error_message: str | None = None

    @property
    def segments(self) -> Tuple[str, ...]:
        """Path segments relative to the parent value (the root for fields)."""
        return (self.name,)

    @property
    def path(self) -> str:
        """Full dotted path used in error reports."""
        return self.name

    def add_rule(self, invocation: RuleInvocation) -> None:
        if isinstance(invocation, ConditionalRuleInvocation):
            self.conditional_validations.append(invocation)
        else:
            self.validations.append(invocation)

    def add_subfield(self, segments: Tuple[str, ...]) -> SubfieldHandler:
        subfield = SubfieldHandler(name=".".join(segments), relative_path=segments, parent=self)
        self.subfields.append(subfield)
        return subfield

    @property
    def rule_count(self) -> int:
        return len(self.validations) + len(self.conditional_validations)


@dataclass(eq=False)
class SubfieldHandler(FieldHandler):
    """Rules for a path relative to a parent field or subfield."""

    relative_path: Tuple[str, ...] = ()
    parent: FieldHandler | None = field(default=None, repr=False)

    @property
    def segments(self) -> Tuple[str, ...]:
        return self.relative_path

    @property
    def path(self) -> str:
        prefix = self.parent.path if self.parent is not None else ""
        own = ".".join(self.relative_path)
        return f"{prefix}.{own}" if prefix else own
