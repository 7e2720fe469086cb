"""Unsaved-change tracking against the last persisted form state."""

import copy
import json
from typing import Any


def canonical_form(value: Any) -> Any:
    """
    Reduce a JSON-like value to a comparable representation.

    Mapping keys are sorted, tuples become lists, sets become sorted lists.
    List order is kept: reordering breeds or programs is a real change.
    A missing key and a key set to None remain different.

    >>> canonical_form({"b": (1, 2), "a": {"y": 1, "x": None}})
    [['a', [['x', None], ['y', 1]]], ['b', [1, 2]]]
    """
    if isinstance(value, dict):
        return [[str(key), canonical_form(value[key])] for key in sorted(value, key=str)]
    if isinstance(value, (list, tuple)):
        return [canonical_form(item) for item in value]
    if isinstance(value, (set, frozenset)):
        return sorted((canonical_form(item) for item in value), key=lambda item: json.dumps(item, sort_keys=True))
    return value


class ChangeTracker:
    """Holds the baseline snapshot and answers whether a form state differs from it."""

    def __init__(self, baseline: dict[str, Any] | None = None):
        self._baseline = canonical_form(copy.deepcopy(baseline or {}))

    def reset(self, state: dict[str, Any]) -> None:
        """Adopt ``state`` as the new baseline (after a confirmed save or publish)."""
        self._baseline = canonical_form(copy.deepcopy(state))

    def has_changes(self, state: dict[str, Any]) -> bool:
        return canonical_form(state) != self._baseline
