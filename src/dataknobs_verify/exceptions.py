"""Exception hierarchy for the verify package.

Built on the common exception framework from dataknobs_common. Two families
of failure exist and they are kept strictly apart:

- **Contract violations** are programmer errors in the code that declares
  validations (a rule called before ``field()``, a ``when()`` never closed by
  ``then()``, an unknown rule name, a second ``verify()``). They are raised
  immediately at the offending call.
- **Validation failures** are expected outcomes for bad input data. They are
  never raised; they are collected as
  :class:`~dataknobs_verify.result.ValidationError` records.

Collaborator failures (an unreadable locale file, a malformed settings file)
are raised as :class:`ResourceError` or :class:`ConfigurationError`.

Example:
    ```python
    from dataknobs_verify import Validator
    from dataknobs_verify.exceptions import ContractViolationError

    try:
        Validator({}).required()
    except ContractViolationError as e:
        print(e, e.context)
    ```
"""

from typing import Any, Dict

from dataknobs_common import (
    ConfigurationError,
    DataknobsError,
    NotFoundError,
    OperationError,
    ResourceError,
)

# Alias to the common root so callers can catch every verify failure by name
VerifyError = DataknobsError


class ContractViolationError(DataknobsError):
    """Raised when the declaring code breaks the usage contract of a validator.

    These errors indicate a bug in the calling code, not bad input data.
    """

    pass


class UnusedRuleError(ContractViolationError):
    """Raised when a rule was looked up as an attribute but never called.

    ``validator.required`` (without parentheses) declares nothing; the
    mistake is reported at the next declaration or at ``verify()``.
    """

    def __init__(self, rule_name: str, operation: str):
        self.rule_name = rule_name
        self.operation = operation
        super().__init__(
            f"Rule '{rule_name}' was referenced but never called before '{operation}'. "
            f"Use {rule_name}() to declare it.",
            context={"rule_name": rule_name, "operation": operation},
        )


class NoActiveFieldError(ContractViolationError):
    """Raised when an operation needs an open field or subfield and none exists."""

    def __init__(self, operation: str):
        self.operation = operation
        super().__init__(
            f"Cannot call '{operation}' without an active field or subfield. "
            "Call field() first.",
            context={"operation": operation},
        )


class ConditionalChainError(ContractViolationError):
    """Raised when a when/and/or/then chain is used out of order."""

    pass


class IncompleteConditionError(ConditionalChainError):
    """Raised when a ``when()`` chain is left open without ``then()``."""

    def __init__(self, operation: str):
        self.operation = operation
        super().__init__(
            f"Incomplete conditional validation before '{operation}'. "
            "Call then() after when() to complete the condition chain.",
            context={"operation": operation},
        )


class MixedCombinatorError(ConditionalChainError):
    """Raised when ``and_()`` and ``or_()`` are mixed in a single condition chain."""

    def __init__(self, attempted: str, established: str):
        self.attempted = attempted
        self.established = established
        super().__init__(
            f"Cannot mix '{attempted}' with '{established}' in one condition chain. "
            "Use separate when() blocks instead.",
            context={"attempted": attempted, "established": established},
        )


class InvalidOperatorError(ContractViolationError, ValueError):
    """Raised when a condition uses an unknown comparison operator."""

    def __init__(self, operator: Any, allowed: list[str]):
        self.operator = operator
        self.allowed = allowed
        super().__init__(
            f"Invalid operator '{operator}'. Allowed operators: {', '.join(allowed)}",
            context={"operator": operator, "allowed": allowed},
        )


class AlreadyVerifiedError(ContractViolationError):
    """Raised when ``verify()`` is called a second time on one validator."""

    def __init__(self) -> None:
        super().__init__(
            "Validator instance has already been verified. "
            "Create a new instance for each validation run."
        )


class RuleNotFoundError(ContractViolationError, NotFoundError):
    """Raised when a rule name is unknown to every registry layer.

    Attributes:
        rule_name: The rule name that could not be resolved
    """

    def __init__(self, rule_name: str, available: list[str] | None = None):
        self.rule_name = rule_name
        context: Dict[str, Any] = {"rule_name": rule_name}
        if available is not None:
            context["available"] = available
        super().__init__(f"Validation rule '{rule_name}' not found.", context=context)


class TranslationLoadError(ResourceError):
    """Raised when a translation resource cannot be loaded."""

    def __init__(self, resource: Any, message: str):
        self.resource = resource
        super().__init__(
            f"Failed to load translations from {resource}: {message}",
            context={"resource": str(resource)},
        )


class LocaleNotFoundError(ResourceError):
    """Raised when no translation file exists for a requested locale."""

    def __init__(self, locale: str, searched: list[str]):
        self.locale = locale
        self.searched = searched
        super().__init__(
            f"No translation file found for locale '{locale}'",
            context={"locale": locale, "searched": searched},
        )


__all__ = [
    "VerifyError",
    "ContractViolationError",
    "UnusedRuleError",
    "NotFoundError",
    "OperationError",
    "ConfigurationError",
    "ResourceError",
    "NoActiveFieldError",
    "ConditionalChainError",
    "IncompleteConditionError",
    "MixedCombinatorError",
    "InvalidOperatorError",
    "AlreadyVerifiedError",
    "RuleNotFoundError",
    "TranslationLoadError",
    "LocaleNotFoundError",
]
