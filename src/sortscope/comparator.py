# src/sortscope/comparator.py
from __future__ import annotations

from enum import IntEnum
from typing import Any, Callable, Optional


class Ordering(IntEnum):
    LESS = -1
    EQUAL = 0
    GREATER = 1


def natural_order(a: Any, b: Any) -> int:
    """Three-way comparison using the elements' own ``<``."""
    if a < b:
        return -1
    if b < a:
        return 1
    return 0


def key_order(key: Callable[[Any], Any]) -> Callable[[Any, Any], int]:
    """
    Build a three-way function that compares ``key(a)`` with ``key(b)``.
    Handy for sorting (key, original_index) pairs by key only.
    """
    def cmp(a: Any, b: Any) -> int:
        return natural_order(key(a), key(b))
    return cmp


class CountingComparator:
    """
    Wraps a three-way ordering function and counts how often it is called.

    Every call to :meth:`compare` increments the counter exactly once, whatever
    the outcome. One comparator belongs to one sort invocation; read
    :meth:`count` once the sort returns.
    """

    __slots__ = ("_cmp", "_count")

    def __init__(self, cmp: Optional[Callable[[Any, Any], int]] = None):
        self._cmp = cmp if cmp is not None else natural_order
        self._count = 0

    def compare(self, a: Any, b: Any) -> Ordering:
        self._count += 1
        r = self._cmp(a, b)
        if r < 0:
            return Ordering.LESS
        if r > 0:
            return Ordering.GREATER
        return Ordering.EQUAL

    __call__ = compare

    def count(self) -> int:
        return self._count

    def __repr__(self) -> str:
        return f"CountingComparator(count={self._count})"
