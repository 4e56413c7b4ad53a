"""Executes declared fields and rules against the input record.

For every field, in declaration order:

1. unconditional rules run in order; ``required`` always runs, any other
   rule is skipped while the value is empty
2. conditional rules run in order, each one only if its condition set holds
   when it is reached; the same emptiness logic then applies
3. subfields are processed recursively, resolved from the parent's value and
   reported under their full dotted path

In fail-fast mode the first failing field stops the whole pass. This is
signalled by a boolean return from each step, never by an exception.
"""

from __future__ import annotations

import logging
from typing import Any, List

from .error_manager import ErrorManager
from .handlers import ConditionalRuleInvocation, FieldHandler, RuleInvocation
from .result import ErrorCollection
from .rules.registry import RuleResolver
from .traverser import DataTraverser, is_empty

logger = logging.getLogger(__name__)


class ValidationOrchestrator:
    """Runs one validation pass over a list of field handlers.

    Args:
        traverser: Traverser over the root record
        resolver: Layered rule resolver
        error_manager: Builds error records for failed rules
        errors: Collection receiving the errors
    """

    def __init__(
        self,
        traverser: DataTraverser,
        resolver: RuleResolver,
        error_manager: ErrorManager,
        errors: ErrorCollection,
    ):
        self._traverser = traverser
        self._resolver = resolver
        self._error_manager = error_manager
        self._errors = errors

    def verify(self, fields: List[FieldHandler], batch: bool = True) -> bool:
        """Validate every field.

        Args:
            fields: Field handlers in declaration order
            batch: True to collect every error, False to stop at the first failing field

        Returns:
            True if no error was produced
        """
        self._errors.clear()
        for handler in fields:
            value = self._traverser.get_value(handler.name)
            if not self._process(handler, value, batch) and not batch:
                break
        return self._errors.is_empty

    def _process(self, handler: FieldHandler, value: Any, batch: bool) -> bool:
        """Run a handler and its subfields; False means fail-fast must stop."""
        path = handler.path
        failed = False

        for invocation in handler.validations:
            if not self._run(handler, invocation, value, path):
                failed = True
                if not batch:
                    return False

        for conditional in handler.conditional_validations:
            if not self._conditions_hold(conditional):
                continue
            if not self._run(handler, conditional, value, path):
                failed = True
                if not batch:
                    return False

        for subfield in handler.subfields:
            sub_value = DataTraverser.resolve(value, subfield.segments)
            if not self._process(subfield, sub_value, batch) and not batch:
                return False

        return not failed

    def _conditions_hold(self, invocation: ConditionalRuleInvocation) -> bool:
        if invocation.condition_set is None:
            return True
        return invocation.condition_set.evaluate(self._traverser)

    def _run(self, handler: FieldHandler, invocation: RuleInvocation, value: Any, path: str) -> bool:
        """Run one rule; returns False if it produced an error."""
        if not invocation.is_required and is_empty(value):
            return True

        definition = self._resolver.resolve(invocation.rule_name)
        if definition(value, *invocation.args, **invocation.kwargs):
            return True

        logger.debug("Rule '%s' failed for '%s'", invocation.rule_name, path)
        self._errors.add(
            self._error_manager.build_error(
                handler,
                invocation.rule_name,
                value,
                path,
                invocation.args,
                invocation.kwargs,
            )
        )
        return False
