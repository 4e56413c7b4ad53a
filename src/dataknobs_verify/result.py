"""Validation failure records collected during ``verify()``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterator


@dataclass(frozen=True)
class ValidationError:
    """One failed rule on one field or subfield.

    Not an exception: validation failures are data, collected in order.

    Attributes:
        field: Full dotted path of the field (``"user.profile.age"``)
        alias: Display name declared with ``alias()``, or None
        test: Name of the failed rule
        message: Rendered error message
        value: The value the rule was applied to
    """

    field: str
    alias: str | None
    test: str
    message: str
    value: Any = None

    @property
    def display_name(self) -> str:
        return self.alias or self.field

    def to_dict(self) -> dict[str, Any]:
        return {
            "field": self.field,
            "alias": self.alias,
            "test": self.test,
            "message": self.message,
            "value": self.value,
        }


class ErrorCollection:
    """Ordered list of validation errors for one validator run."""

    def __init__(self) -> None:
        self._errors: list[ValidationError] = []

    def add(self, error: ValidationError) -> None:
        self._errors.append(error)

    def clear(self) -> None:
        self._errors.clear()

    def for_field(self, path: str) -> list[ValidationError]:
        """Errors reported for exactly this path."""
        return [error for error in self._errors if error.field == path]

    def fields(self) -> list[str]:
        """Paths with at least one error, in first-failure order."""
        return list(dict.fromkeys(error.field for error in self._errors))

    def messages(self) -> list[str]:
        return [error.message for error in self._errors]

    def to_list(self) -> list[ValidationError]:
        return list(self._errors)

    def to_dicts(self) -> list[dict[str, Any]]:
        return [error.to_dict() for error in self._errors]

    @property
    def is_empty(self) -> bool:
        return not self._errors

    def __len__(self) -> int:
        return len(self._errors)

    def __iter__(self) -> Iterator[ValidationError]:
        return iter(list(self._errors))

    def __getitem__(self, index: int) -> ValidationError:
        return self._errors[index]

    def __repr__(self) -> str:
        return f"ErrorCollection({self._errors!r})"
