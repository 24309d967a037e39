# src/sortscope/algorithms.py
"""
Comparison sorts instrumented through :class:`CountingComparator`.

Every sorter takes ``(seq, comparator=None)``, sorts the list in place and
returns it. All element comparisons go through ``comparator.compare`` so the
comparison count is measured the same way for every algorithm.
"""
from __future__ import annotations

from dataclasses import dataclass
from functools import cmp_to_key
from typing import Any, Callable, Dict, List, Optional, Tuple

from .comparator import CountingComparator
from .errors import InvalidConfiguration

SortFunc = Callable[[List[Any], Optional[CountingComparator]], List[Any]]


def _resolve(seq: Any, comparator: Optional[CountingComparator]) -> CountingComparator:
    if not isinstance(seq, list):
        raise TypeError(f"expected a list to sort, got {type(seq).__name__}")
    return comparator if comparator is not None else CountingComparator()


def bubble_sort(seq: List[Any], comparator: Optional[CountingComparator] = None) -> List[Any]:
    """Bubble Sort: full adjacent-swap passes until a pass swaps nothing. Stable."""
    cmp = _resolve(seq, comparator).compare
    n = len(seq)
    swapped = True
    while swapped:
        swapped = False
        for i in range(1, n):
            if cmp(seq[i], seq[i - 1]) < 0:
                seq[i], seq[i - 1] = seq[i - 1], seq[i]
                swapped = True
    return seq


def insertion_sort(seq: List[Any], comparator: Optional[CountingComparator] = None) -> List[Any]:
    """Insertion Sort: shift greater prefix elements right, drop the key in. Stable."""
    cmp = _resolve(seq, comparator).compare
    for i in range(1, len(seq)):
        key = seq[i]
        j = i - 1
        while j >= 0 and cmp(seq[j], key) > 0:
            seq[j + 1] = seq[j]
            j -= 1
        seq[j + 1] = key
    return seq


def binary_insertion_sort(seq: List[Any], comparator: Optional[CountingComparator] = None) -> List[Any]:
    """
    Insertion Sort that locates the slot by binary search.

    The search returns the upper bound among equal keys, so the sort stays
    stable. Comparisons drop to O(n log n); element moves stay O(n^2).
    """
    cmp = _resolve(seq, comparator).compare
    for i in range(1, len(seq)):
        key = seq[i]
        lo, hi = 0, i
        while lo < hi:
            mid = (lo + hi) // 2
            if cmp(key, seq[mid]) < 0:
                hi = mid
            else:
                lo = mid + 1
        if lo != i:
            seq[lo + 1:i + 1] = seq[lo:i]
            seq[lo] = key
    return seq


def selection_sort(seq: List[Any], comparator: Optional[CountingComparator] = None) -> List[Any]:
    """Selection Sort: exactly n(n-1)/2 comparisons on every input. Not stable."""
    cmp = _resolve(seq, comparator).compare
    n = len(seq)
    for i in range(n - 1):
        smallest = i
        for j in range(i + 1, n):
            if cmp(seq[j], seq[smallest]) < 0:
                smallest = j
        if smallest != i:
            seq[i], seq[smallest] = seq[smallest], seq[i]
    return seq


def _median_of_three(seq: List[Any], lo: int, hi: int, cmp) -> int:
    # orders seq[lo] <= seq[mid] <= seq[hi] and returns mid
    mid = (lo + hi) // 2
    if cmp(seq[mid], seq[lo]) < 0:
        seq[mid], seq[lo] = seq[lo], seq[mid]
    if cmp(seq[hi], seq[lo]) < 0:
        seq[hi], seq[lo] = seq[lo], seq[hi]
    if cmp(seq[hi], seq[mid]) < 0:
        seq[hi], seq[mid] = seq[mid], seq[hi]
    return mid


def _quick_sort(seq: List[Any], lo: int, hi: int, cmp) -> None:
    # inclusive bounds; recurse into the smaller side, loop on the larger
    while lo < hi:
        if hi - lo == 1:
            if cmp(seq[hi], seq[lo]) < 0:
                seq[lo], seq[hi] = seq[hi], seq[lo]
            return
        pivot = seq[_median_of_three(seq, lo, hi, cmp)]
        if hi - lo == 2:
            return

        # Hoare partition around the pivot value
        i, j = lo - 1, hi + 1
        while True:
            i += 1
            while cmp(seq[i], pivot) < 0:
                i += 1
            j -= 1
            while cmp(seq[j], pivot) > 0:
                j -= 1
            if i >= j:
                break
            seq[i], seq[j] = seq[j], seq[i]

        if j - lo < hi - j:
            _quick_sort(seq, lo, j, cmp)
            lo = j + 1
        else:
            _quick_sort(seq, j + 1, hi, cmp)
            hi = j


def quick_sort(seq: List[Any], comparator: Optional[CountingComparator] = None) -> List[Any]:
    """
    Quick Sort with a median-of-three pivot and Hoare partitioning.

    The first, middle and last elements of each segment are put in order and
    the middle one becomes the pivot, so sorted and reverse-sorted inputs stay
    at O(n log n). Segments of two elements cost one comparison, segments of
    three are finished by the median-of-three step. Not stable.
    """
    cmp = _resolve(seq, comparator).compare
    if len(seq) > 1:
        _quick_sort(seq, 0, len(seq) - 1, cmp)
    return seq


def _sift_down(seq: List[Any], start: int, end: int, cmp) -> None:
    root = start
    while 2 * root + 1 <= end:
        child = 2 * root + 1
        swap = root
        if cmp(seq[swap], seq[child]) < 0:
            swap = child
        if child + 1 <= end and cmp(seq[swap], seq[child + 1]) < 0:
            swap = child + 1
        if swap == root:
            return
        seq[root], seq[swap] = seq[swap], seq[root]
        root = swap


def heap_sort(seq: List[Any], comparator: Optional[CountingComparator] = None) -> List[Any]:
    """Heap Sort: build a max-heap, then move the maximum to the end n-1 times."""
    cmp = _resolve(seq, comparator).compare
    n = len(seq)
    if n < 2:
        return seq
    for start in range((n - 2) // 2, -1, -1):
        _sift_down(seq, start, n - 1, cmp)
    for end in range(n - 1, 0, -1):
        seq[0], seq[end] = seq[end], seq[0]
        _sift_down(seq, 0, end - 1, cmp)
    return seq


def _merge_sort(seq: List[Any], buf: List[Any], lo: int, hi: int, cmp) -> None:
    # half-open [lo, hi)
    if hi - lo < 2:
        return
    mid = (lo + hi) // 2
    _merge_sort(seq, buf, lo, mid, cmp)
    _merge_sort(seq, buf, mid, hi, cmp)

    buf[lo:hi] = seq[lo:hi]
    i, j, k = lo, mid, lo
    while i < mid and j < hi:
        # ties come from the left run
        if cmp(buf[j], buf[i]) < 0:
            seq[k] = buf[j]
            j += 1
        else:
            seq[k] = buf[i]
            i += 1
        k += 1
    while i < mid:
        seq[k] = buf[i]
        i += 1
        k += 1
    # anything left in the right run is already in place


def merge_sort(seq: List[Any], comparator: Optional[CountingComparator] = None) -> List[Any]:
    """Top-down Merge Sort with an n-sized auxiliary buffer. Stable."""
    cmp = _resolve(seq, comparator).compare
    n = len(seq)
    if n < 2:
        return seq
    buf = list(seq)
    _merge_sort(seq, buf, 0, n, cmp)
    return seq


def builtin_sort(seq: List[Any], comparator: Optional[CountingComparator] = None) -> List[Any]:
    """Baseline: ``list.sort`` (Timsort) driven through the counting comparator."""
    comparator = _resolve(seq, comparator)
    seq.sort(key=cmp_to_key(comparator.compare))
    return seq


@dataclass(frozen=True)
class SortAlgorithm:
    name: str
    func: SortFunc
    stable: bool
    time_big_o: str
    space_big_o: str

    def __call__(self, seq: List[Any], comparator: Optional[CountingComparator] = None) -> List[Any]:
        return self.func(seq, comparator)


ALGORITHMS: Dict[str, SortAlgorithm] = {
    a.name: a
    for a in (
        SortAlgorithm("bubble", bubble_sort, True, "O(n^2)", "O(1)"),
        SortAlgorithm("insertion", insertion_sort, True, "O(n^2)", "O(1)"),
        SortAlgorithm("selection", selection_sort, False, "O(n^2)", "O(1)"),
        SortAlgorithm("quick", quick_sort, False, "O(n log n) avg, O(n^2) worst", "O(log n)"),
        SortAlgorithm("heap", heap_sort, False, "O(n log n)", "O(1)"),
        SortAlgorithm("merge", merge_sort, True, "O(n log n)", "O(n)"),
        SortAlgorithm("binary_insertion", binary_insertion_sort, True, "O(n log n) comparisons, O(n^2) moves", "O(1)"),
        SortAlgorithm("builtin", builtin_sort, True, "O(n log n)", "O(n)"),
    )
}

CLASSIC_ALGORITHMS: Tuple[str, ...] = ("bubble", "insertion", "selection", "quick", "heap", "merge")


def get_algorithm(name: str) -> SortAlgorithm:
    try:
        return ALGORITHMS[name]
    except KeyError:
        raise InvalidConfiguration(
            f"unknown algorithm {name!r}; choose from {', '.join(ALGORITHMS)}"
        ) from None
