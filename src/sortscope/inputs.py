# src/sortscope/inputs.py
from __future__ import annotations

from enum import Enum
from typing import List, Optional, Union

import numpy as np

from .errors import InvalidConfiguration


class Distribution(str, Enum):
    UNIFORM_RANDOM = "uniform-random"
    ALREADY_SORTED = "already-sorted"
    REVERSE_SORTED = "reverse-sorted"
    FEW_UNIQUE = "few-unique"

    def __str__(self) -> str:
        return self.value


FEW_UNIQUE_VALUES = (0, 1, 2)

_ALIASES = {
    "random": Distribution.UNIFORM_RANDOM,
    "uniform": Distribution.UNIFORM_RANDOM,
    "sorted": Distribution.ALREADY_SORTED,
    "reverse": Distribution.REVERSE_SORTED,
    "reversed": Distribution.REVERSE_SORTED,
    "few_unique": Distribution.FEW_UNIQUE,
    "few-unique-values": Distribution.FEW_UNIQUE,
}


def parse_distribution(value: Union[str, Distribution]) -> Distribution:
    if isinstance(value, Distribution):
        return value
    if isinstance(value, str):
        key = value.strip().lower()
        if key in _ALIASES:
            return _ALIASES[key]
        try:
            return Distribution(key)
        except ValueError:
            pass
    choices = ", ".join(d.value for d in Distribution)
    raise InvalidConfiguration(f"unknown distribution {value!r}; choose from {choices}")


def generate(
    n: int,
    distribution: Union[str, Distribution],
    seed: Optional[int] = None,
    rng: Optional[np.random.Generator] = None,
) -> List[int]:
    """
    Build a list of ``n`` ints shaped like ``distribution``.

    Random shapes draw from ``rng`` if given, else from
    ``np.random.default_rng(seed)``. Same seed, same list; no seed, no promise.
    """
    if isinstance(n, bool) or not isinstance(n, (int, np.integer)):
        raise InvalidConfiguration(f"size must be an integer, got {n!r}")
    if n < 0:
        raise InvalidConfiguration(f"size must be >= 0, got {n}")
    n = int(n)
    kind = parse_distribution(distribution)

    if kind is Distribution.ALREADY_SORTED:
        return list(range(n))
    if kind is Distribution.REVERSE_SORTED:
        return list(range(n - 1, -1, -1))

    if rng is None:
        rng = np.random.default_rng(seed)
    if kind is Distribution.FEW_UNIQUE:
        return rng.choice(FEW_UNIQUE_VALUES, size=n).tolist()
    return rng.integers(0, max(n, 1) * 10, size=n).tolist()
