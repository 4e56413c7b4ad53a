"""Path resolution and emptiness semantics for nested input data.

Input records are arbitrary nests of mappings, lists/tuples and plain
attribute records (``SimpleNamespace``, dataclass instances). A path is an
ordered sequence of string segments; mapping keys and list indices are both
written as strings (``["items", "0", "sku"]``).
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence, Set
from numbers import Number
from typing import Any

# Sentinel for "no such key/index/attribute"; resolves to None for callers.
_MISSING = object()


def split_path(path: str) -> list[str]:
    """Split a dot-notation path into segments.

    Args:
        path: Path such as ``"user.address.city"``

    Returns:
        List of path segments
    """
    return path.split(".") if path else []


def is_empty(value: Any) -> bool:
    """Check whether a value counts as missing for validation purposes.

    Booleans and numbers are meaningful values and never empty, so ``False``,
    ``0`` and the numeric string ``"0"`` are all present. ``None``, ``""``,
    empty collections and attribute records without attributes are empty.

    Args:
        value: Value to inspect

    Returns:
        True if the value is empty
    """
    if value is None:
        return True
    if isinstance(value, (bool, Number)):
        return False
    if isinstance(value, (str, bytes, Mapping, Sequence, Set)):
        return len(value) == 0
    if _is_record(value):
        return not vars(value)
    return False


def _is_record(value: Any) -> bool:
    return (
        hasattr(value, "__dict__")
        and not isinstance(value, type)
        and not callable(value)
    )


def _step(node: Any, segment: str) -> Any:
    if isinstance(node, Mapping):
        if segment in node:
            return node[segment]
        # Mappings built from JSON-like sources may carry int keys
        if segment.lstrip("-").isdigit() and int(segment) in node:
            return node[int(segment)]
        return _MISSING
    if isinstance(node, Sequence) and not isinstance(node, (str, bytes)):
        if not segment.isdigit():
            return _MISSING
        index = int(segment)
        return node[index] if index < len(node) else _MISSING
    if _is_record(node):
        return vars(node).get(segment, _MISSING)
    return _MISSING


class DataTraverser:
    """Resolves paths against the root record of a validation run.

    Example:
        ```python
        traverser = DataTraverser({"user": {"tags": ["a", "b"]}})
        traverser.get_field_value("user.tags.1")
        # 'b'
        traverser.resolve(traverser.data, ["user", "tags"])
        # ['a', 'b']
        ```
    """

    def __init__(self, data: Any):
        self.data = data

    def get_value(self, name: str) -> Any:
        """Get a top-level value by its exact key (no dot splitting)."""
        return self.resolve(self.data, [name])

    def get_field_value(self, path: str) -> Any:
        """Get a value from the root using dot notation."""
        return self.resolve(self.data, split_path(path))

    @staticmethod
    def resolve(root: Any, path: Sequence[str]) -> Any:
        """Resolve a segment path against ``root``.

        Args:
            root: Starting value
            path: Ordered path segments

        Returns:
            The resolved value, or None when any segment cannot be followed
        """
        node = root
        for segment in path:
            node = _step(node, str(segment))
            if node is _MISSING:
                return None
        return node

    @staticmethod
    def is_empty(value: Any) -> bool:
        """Check emptiness (see :func:`is_empty`)."""
        return is_empty(value)
