"""Conditional activation of rules: the when/and/or/then chain.

A chain moves through three states:

- ``IDLE``: no pending chain
- ``BUILDING``: after ``when()``; ``and_()``/``or_()`` may extend the chain
- ``THEN_ACTIVE``: after ``then()``; rules declared now are conditional

The allowed moves are declared once in :data:`CHAIN_TRANSITIONS` and every
operation checks it before mutating anything, so an illegal call leaves the
chain untouched.

Conditions are not evaluated when declared. The frozen :class:`ConditionSet`
is stored with each guarded rule and evaluated when that rule is about to run
during ``verify()``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any

from .exceptions import (
    ConditionalChainError,
    IncompleteConditionError,
    InvalidOperatorError,
    MixedCombinatorError,
)

if TYPE_CHECKING:
    from .traverser import DataTraverser

logger = logging.getLogger(__name__)


class Operator(str, Enum):
    """Comparison operators usable in a condition."""

    EQ = "="
    NE = "!="
    GT = ">"
    GE = ">="
    LT = "<"
    LE = "<="
    IN = "in"
    NOT_IN = "not_in"

    @classmethod
    def parse(cls, operator: Operator | str) -> Operator:
        """Convert an operator string to an Operator.

        Raises:
            InvalidOperatorError: If the operator is not recognized
        """
        if isinstance(operator, cls):
            return operator
        try:
            return cls(operator)
        except ValueError as e:
            raise InvalidOperatorError(operator, [op.value for op in cls]) from e


class Combinator(str, Enum):
    """How the conditions of one set are combined."""

    AND = "and"
    OR = "or"


class ChainState(str, Enum):
    """States of the conditional chain."""

    IDLE = "idle"
    BUILDING = "building"
    THEN_ACTIVE = "then_active"


# state -> {action: next state}; anything absent is a contract violation
CHAIN_TRANSITIONS: dict[ChainState, dict[str, ChainState]] = {
    ChainState.IDLE: {"when": ChainState.BUILDING},
    ChainState.BUILDING: {
        "and": ChainState.BUILDING,
        "or": ChainState.BUILDING,
        "then": ChainState.THEN_ACTIVE,
    },
    ChainState.THEN_ACTIVE: {"when": ChainState.BUILDING},
}

_REJECTIONS: dict[tuple[ChainState, str], str] = {
    (ChainState.IDLE, "and"): "Cannot use 'and' without 'when()'. Start with when() first.",
    (ChainState.IDLE, "or"): "Cannot use 'or' without 'when()'. Start with when() first.",
    (ChainState.IDLE, "then"): "Cannot use 'then' without 'when()'. Use when() before then.",
    (ChainState.THEN_ACTIVE, "and"): "Cannot use 'and' after 'then'. Use 'and' before 'then'.",
    (ChainState.THEN_ACTIVE, "or"): "Cannot use 'or' after 'then'. Use 'or' before 'then'.",
    (ChainState.THEN_ACTIVE, "then"): "'then' is already active. Start a new chain with when().",
}

_SEQUENCE_TYPES = (list, tuple, set, frozenset)


def _strict_equals(left: Any, right: Any) -> bool:
    # No coercion: 1 != 1.0 != True != "1"
    return type(left) is type(right) and left == right


@dataclass(frozen=True)
class Condition:
    """A single ``left_path operator right_value`` comparison."""

    left_path: str
    operator: Operator
    right_value: Any

    def evaluate(self, actual: Any) -> bool:
        """Compare ``actual`` (the resolved left value) with the right value."""
        return compare(actual, self.operator, self.right_value)


@dataclass(frozen=True)
class ConditionSet:
    """Conditions combined uniformly by one combinator."""

    conditions: tuple[Condition, ...]
    combinator: Combinator = Combinator.AND

    def evaluate(self, traverser: DataTraverser) -> bool:
        """Evaluate every condition against the root record and combine them.

        Args:
            traverser: Traverser over the record being validated

        Returns:
            True if the set holds
        """
        results = [
            condition.evaluate(traverser.get_field_value(condition.left_path))
            for condition in self.conditions
        ]
        if len(results) == 1:
            return results[0]
        if self.combinator is Combinator.OR:
            return any(results)
        return all(results)

    def __len__(self) -> int:
        return len(self.conditions)


def compare(actual: Any, operator: Operator | str, expected: Any) -> bool:
    """Apply a comparison operator with strict, coercion-free semantics.

    Ordering comparisons between incomparable values (``None > 3``,
    ``"a" < 1``) are false rather than errors.

    Args:
        actual: Left-hand value
        operator: Operator or its string form
        expected: Right-hand value

    Returns:
        Comparison outcome
    """
    op = Operator.parse(operator)
    if op is Operator.EQ:
        return _strict_equals(actual, expected)
    if op is Operator.NE:
        return not _strict_equals(actual, expected)
    if op in (Operator.IN, Operator.NOT_IN):
        if not isinstance(expected, _SEQUENCE_TYPES):
            return False
        found = any(_strict_equals(actual, item) for item in expected)
        return found if op is Operator.IN else not found
    try:
        if op is Operator.GT:
            return bool(actual > expected)
        if op is Operator.GE:
            return bool(actual >= expected)
        if op is Operator.LT:
            return bool(actual < expected)
        return bool(actual <= expected)
    except TypeError:
        return False


@dataclass
class ConditionalEngine:
    """Owns the when/and/or/then state machine for one validator."""

    state: ChainState = ChainState.IDLE
    _pending: list[Condition] = field(default_factory=list)
    _combinator: Combinator | None = None
    _active: ConditionSet | None = None

    @property
    def active_conditions(self) -> ConditionSet | None:
        """The frozen condition set guarding rules declared right now."""
        return self._active if self.state is ChainState.THEN_ACTIVE else None

    def when(self, path: str, operator: Operator | str, value: Any) -> None:
        """Start a new chain with its first condition."""
        condition = self._make_condition(path, operator, value)
        self._advance("when")
        self._pending = [condition]
        self._combinator = None
        self._active = None

    def and_(self, path: str, operator: Operator | str, value: Any) -> None:
        """Extend the pending chain with an AND condition."""
        self._extend("and", Combinator.AND, path, operator, value)

    def or_(self, path: str, operator: Operator | str, value: Any) -> None:
        """Extend the pending chain with an OR condition."""
        self._extend("or", Combinator.OR, path, operator, value)

    def then(self) -> ConditionSet:
        """Freeze the pending chain and activate conditional mode.

        Returns:
            The frozen condition set
        """
        self._advance("then")
        self._active = ConditionSet(
            conditions=tuple(self._pending),
            combinator=self._combinator or Combinator.AND,
        )
        self._pending = []
        logger.debug(
            "Conditional mode active with %d condition(s) (%s)",
            len(self._active),
            self._active.combinator.value,
        )
        return self._active

    def ensure_complete(self, operation: str) -> None:
        """Reject ``operation`` while a chain is still being built.

        Raises:
            IncompleteConditionError: If ``when()`` has not been followed by ``then()``
        """
        if self.state is ChainState.BUILDING:
            raise IncompleteConditionError(operation)

    def reset(self) -> None:
        """Return to IDLE, dropping any active condition set."""
        self.state = ChainState.IDLE
        self._pending = []
        self._combinator = None
        self._active = None

    def _extend(
        self,
        action: str,
        combinator: Combinator,
        path: str,
        operator: Operator | str,
        value: Any,
    ) -> None:
        condition = self._make_condition(path, operator, value)
        self._advance(action)
        if self._combinator is not None and self._combinator is not combinator:
            raise MixedCombinatorError(combinator.value, self._combinator.value)
        self._combinator = combinator
        self._pending.append(condition)

    def _advance(self, action: str) -> None:
        allowed = CHAIN_TRANSITIONS[self.state]
        if action not in allowed:
            if self.state is ChainState.BUILDING and action == "when":
                raise IncompleteConditionError("when")
            raise ConditionalChainError(
                _REJECTIONS[(self.state, action)],
                context={"state": self.state.value, "action": action},
            )
        self.state = allowed[action]

    @staticmethod
    def _make_condition(path: str, operator: Operator | str, value: Any) -> Condition:
        op = Operator.parse(operator)
        if op in (Operator.IN, Operator.NOT_IN) and not isinstance(value, _SEQUENCE_TYPES):
            raise ConditionalChainError(
                f"Operator '{op.value}' requires a list of values, got {type(value).__name__}",
                context={"path": path, "operator": op.value},
            )
        return Condition(left_path=path, operator=op, right_value=value)
