from __future__ import annotations

import io

import numpy as np
import pytest

from sortscope import (
    BenchmarkDriver,
    DriverState,
    InvalidConfiguration,
    OutputError,
    PostconditionViolation,
    SortAlgorithm,
    TrialRecord,
    run_benchmark,
)


def drop_last(seq, comparator=None):
    """A broken sorter: sorts, then loses an element."""
    seq.sort()
    if comparator is not None and len(seq) > 1:
        comparator.compare(seq[0], seq[1])
    return seq[:-1]


BROKEN = SortAlgorithm("broken", drop_last, False, "?", "?")


def sort_descending(seq, comparator=None):
    seq.sort()
    seq.reverse()
    return seq


def overwrite_then_sort(seq, comparator=None):
    if seq:
        seq[0] = -1
    seq.sort()
    return seq


def explode(seq, comparator=None):
    raise RuntimeError("boom")


DESCENDING = SortAlgorithm("descending", sort_descending, False, "?", "?")
OVERWRITING = SortAlgorithm("overwriting", overwrite_then_sort, False, "?", "?")
EXPLODING = SortAlgorithm("exploding", explode, False, "?", "?")


class FailingStream(io.StringIO):
    def write(self, s):
        raise OSError("disk full")


@pytest.mark.parametrize(
    "kwargs",
    [
        dict(algorithms=[]),
        dict(algorithms=["bogosort"]),
        dict(sizes=[]),
        dict(sizes=[10, -1]),
        dict(sizes=[1.5]),
        dict(distributions=["zipf"]),
        dict(distributions=[]),
        dict(repetitions=0),
        dict(workers=0),
    ],
)
def test_invalid_configuration_fails_fast(kwargs):
    with pytest.raises(InvalidConfiguration):
        BenchmarkDriver(**kwargs)


def test_invalid_configuration_writes_nothing(tmp_path):
    out = tmp_path / "values.dat"
    with pytest.raises(InvalidConfiguration):
        run_benchmark(sizes=[-5], out=out)
    assert not out.exists()


def test_plan_order_and_row_count():
    driver = BenchmarkDriver(
        algorithms=["insertion", "merge"],
        sizes=[4, 8],
        distributions=["already-sorted", "reverse-sorted"],
        repetitions=2,
        seed=1,
    )
    records = list(driver.run())
    assert len(records) == 2 * 2 * 2 * 2
    keys = [(r.algorithm, r.n, r.distribution, r.repeat) for r in records]
    assert keys[:4] == [
        ("insertion", 4, "already-sorted", 0),
        ("insertion", 4, "already-sorted", 1),
        ("insertion", 4, "reverse-sorted", 0),
        ("insertion", 4, "reverse-sorted", 1),
    ]
    assert keys[-1] == ("merge", 8, "reverse-sorted", 1)
    assert all(isinstance(r, TrialRecord) and r.time >= 0 for r in records)


def test_state_machine():
    driver = BenchmarkDriver(algorithms=["heap"], sizes=[3], distributions=["uniform-random"], seed=0)
    assert driver.state is DriverState.CONFIGURING
    it = driver.run()
    assert driver.state is DriverState.RUNNING
    list(it)
    assert driver.state is DriverState.DONE
    with pytest.raises(RuntimeError):
        driver.run()


def test_known_comparison_counts_come_through():
    records = list(BenchmarkDriver(
        algorithms=["selection", "insertion"],
        sizes=[0, 1, 5],
        distributions=["already-sorted"],
    ).run())
    counts = {(r.algorithm, r.n): r.comparisons for r in records}
    assert counts[("selection", 0)] == 0
    assert counts[("selection", 1)] == 0
    assert counts[("selection", 5)] == 10
    assert counts[("insertion", 5)] == 4


def test_fixed_seed_is_reproducible():
    def counts():
        d = BenchmarkDriver(algorithms=["quick", "heap"], sizes=[64, 128], distributions=["uniform-random", "few-unique"], repetitions=2, seed=123)
        return [r.comparisons for r in d.run()]

    assert counts() == counts()


def test_all_algorithms_see_the_same_input_per_cell():
    # input seeds follow the (size, distribution, repetition) cell, not plan position
    d1 = BenchmarkDriver(algorithms=["builtin", "merge"], sizes=[50], distributions=["uniform-random"], seed=9)
    d2 = BenchmarkDriver(algorithms=["merge", "builtin"], sizes=[50], distributions=["uniform-random"], seed=9)
    c1 = {r.algorithm: r.comparisons for r in d1.run()}
    c2 = {r.algorithm: r.comparisons for r in d2.run()}
    assert c1 == c2


def test_postcondition_violation_goes_to_side_channel(capsys):
    driver = BenchmarkDriver(algorithms=["merge", BROKEN], sizes=[5], distributions=["uniform-random"], seed=3)
    records = list(driver.run())
    assert [r.algorithm for r in records] == ["merge"]
    assert len(driver.failures) == 1
    failure = driver.failures[0]
    assert failure.algorithm == "broken"
    assert "length changed" in failure.reason
    assert "validation failed" in capsys.readouterr().err
    assert driver.state is DriverState.DONE


def test_strict_mode_aborts():
    driver = BenchmarkDriver(algorithms=[BROKEN], sizes=[5], distributions=["uniform-random"], seed=3, strict=True)
    with pytest.raises(PostconditionViolation) as excinfo:
        list(driver.run())
    assert excinfo.value.failure is driver.failures[0]


def test_corrupt_rows_never_reach_the_table():
    buf = io.StringIO()
    result = run_benchmark(algorithms=["insertion", BROKEN], sizes=[3], distributions=["reverse-sorted"], out=buf)
    lines = buf.getvalue().splitlines()
    assert lines[0] == "algorithm n distribution comparisons time"
    assert len(lines) == 2
    assert lines[1].startswith("insertion 3 reverse-sorted 3 ")
    assert not result.ok
    assert len(result.records) == 1


def test_run_benchmark_writes_file(tmp_path):
    out = tmp_path / "out" / "values.dat"
    result = run_benchmark(algorithms=["bubble", "quick"], sizes=[10, 20], distributions=["uniform-random"], seed=5, out=out)
    assert result.ok
    assert result.table_path == str(out.resolve())
    lines = out.read_text(encoding="utf-8").splitlines()
    assert lines[0].split() == ["algorithm", "n", "distribution", "comparisons", "time"]
    assert len(lines) == 1 + 4


def test_output_failure_is_fatal():
    with pytest.raises(OutputError):
        run_benchmark(algorithms=["merge"], sizes=[4], distributions=["already-sorted"], out=FailingStream())


def test_verbose_progress(capsys):
    list(BenchmarkDriver(algorithms=["merge"], sizes=[4], distributions=["already-sorted"], verbose=True, warmup=1).run())
    out = capsys.readouterr().out
    assert "Benchmarking 1 algorithm(s)" in out
    assert "Benchmark complete" in out


def test_worker_pool_matches_serial_run():
    kwargs = dict(algorithms=["merge", "selection"], sizes=[32, 64], distributions=["uniform-random"], repetitions=2, seed=77)
    serial = [(r.algorithm, r.n, r.comparisons) for r in BenchmarkDriver(**kwargs).run()]
    pooled = [(r.algorithm, r.n, r.comparisons) for r in BenchmarkDriver(workers=2, **kwargs).run()]
    assert serial == pooled


def test_summary_collapses_repetitions():
    result = run_benchmark(algorithms=["selection"], sizes=[10], distributions=["uniform-random", "already-sorted"], repetitions=3, seed=2)
    summary = result.summary()
    assert [(s.distribution, s.trials) for s in summary] == [("uniform-random", 3), ("already-sorted", 3)]
    assert all(s.comparisons_mean == 45 for s in summary)
    assert all(s.time_ci.n == 3 for s in summary)


def test_same_length_unsorted_output_is_rejected():
    driver = BenchmarkDriver(algorithms=[DESCENDING], sizes=[5], distributions=["already-sorted"])
    assert list(driver.run()) == []
    assert len(driver.failures) == 1
    assert driver.failures[0].reason == "output not non-decreasing at index 1: 4 > 3"


def test_sorted_non_permutation_is_rejected():
    driver = BenchmarkDriver(algorithms=[OVERWRITING], sizes=[5], distributions=["already-sorted"])
    assert list(driver.run()) == []
    assert len(driver.failures) == 1
    assert driver.failures[0].reason == "output is not a permutation of the input"


def test_sort_exception_becomes_failure():
    driver = BenchmarkDriver(algorithms=[EXPLODING, "merge"], sizes=[4], distributions=["uniform-random"], seed=1)
    records = list(driver.run())
    assert [r.algorithm for r in records] == ["merge"]
    assert driver.failures[0].reason.startswith("sort raised RuntimeError")


def test_numpy_sizes_are_accepted():
    driver = BenchmarkDriver(algorithms=["insertion"], sizes=np.array([3, 6]), distributions=["reverse-sorted"])
    assert driver.sizes == [3, 6]
    records = list(driver.run())
    assert [r.n for r in records] == [3, 6]
    assert all(type(r.n) is int for r in records)


def test_warmup_error_is_reported_not_raised(capsys):
    driver = BenchmarkDriver(algorithms=[EXPLODING, "merge"], sizes=[4], distributions=["already-sorted"], warmup=2)
    records = list(driver.run())
    assert [r.algorithm for r in records] == ["merge"]
    warm = driver.failures[0]
    assert (warm.algorithm, warm.repeat) == ("exploding", -1)
    assert warm.reason.startswith("warmup raised RuntimeError")
    # the measured trial still fails on its own
    assert len(driver.failures) == 2
    assert driver.state is DriverState.DONE
    assert "warmup raised" in capsys.readouterr().err


def test_warmup_error_in_strict_mode_aborts():
    driver = BenchmarkDriver(algorithms=[EXPLODING], sizes=[4], distributions=["already-sorted"], warmup=1, strict=True)
    with pytest.raises(PostconditionViolation) as excinfo:
        list(driver.run())
    assert excinfo.value.failure.repeat == -1
    assert driver.state is DriverState.DONE
