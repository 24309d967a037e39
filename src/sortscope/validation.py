# src/sortscope/validation.py
from __future__ import annotations

from collections import Counter
from typing import Any, Callable, Optional, Sequence

from .comparator import natural_order


def first_descent(seq: Sequence[Any], cmp: Callable[[Any, Any], int] = natural_order) -> Optional[int]:
    """Index of the first element smaller than its predecessor, or None."""
    for i in range(1, len(seq)):
        if cmp(seq[i - 1], seq[i]) > 0:
            return i
    return None


def is_permutation(original: Sequence[Any], result: Sequence[Any]) -> bool:
    if len(original) != len(result):
        return False
    try:
        return Counter(original) == Counter(result)
    except TypeError:
        # unhashable elements: fall back to pairing by identity, then equality
        remaining = list(result)
        for item in original:
            for idx, other in enumerate(remaining):
                if other is item or other == item:
                    del remaining[idx]
                    break
            else:
                return False
        return True


def check_postcondition(
    original: Sequence[Any],
    result: Any,
    cmp: Callable[[Any, Any], int] = natural_order,
) -> Optional[str]:
    """
    Return why ``result`` is not a sorted permutation of ``original``,
    or None when it is.
    """
    if not isinstance(result, list):
        return f"sort returned {type(result).__name__}, expected list"
    if len(result) != len(original):
        return f"length changed from {len(original)} to {len(result)}"
    if not is_permutation(original, result):
        return "output is not a permutation of the input"
    i = first_descent(result, cmp)
    if i is not None:
        return f"output not non-decreasing at index {i}: {result[i - 1]!r} > {result[i]!r}"
    return None
