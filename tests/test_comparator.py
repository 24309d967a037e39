from __future__ import annotations

from sortscope import CountingComparator, Ordering, key_order


def test_compare_outcomes():
    c = CountingComparator()
    assert c.compare(1, 2) is Ordering.LESS
    assert c.compare(2, 2) is Ordering.EQUAL
    assert c.compare(3, 2) is Ordering.GREATER


def test_counter_increments_once_per_call():
    c = CountingComparator()
    assert c.count() == 0
    for a, b in [(1, 2), (2, 2), (3, 1), (0, 0)]:
        c.compare(a, b)
    assert c.count() == 4
    c(5, 6)
    assert c.count() == 5


def test_custom_three_way_function():
    # descending order
    c = CountingComparator(lambda a, b: b - a)
    assert c.compare(1, 2) is Ordering.GREATER
    assert c.count() == 1


def test_key_order_ignores_payload():
    c = CountingComparator(key_order(lambda p: p[0]))
    assert c.compare((1, "a"), (1, "b")) is Ordering.EQUAL
    assert c.compare((0, "z"), (1, "a")) is Ordering.LESS
