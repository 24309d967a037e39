# src/sortscope/analyze.py
from __future__ import annotations

import gc
import multiprocessing as mp
import sys
import time
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, Iterator, List, Optional, Sequence, TextIO, Tuple, Union

import numpy as np

from .algorithms import CLASSIC_ALGORITHMS, SortAlgorithm, get_algorithm
from .comparator import CountingComparator
from .errors import InvalidConfiguration, PostconditionViolation
from .inputs import Distribution, generate, parse_distribution
from .utils import CIResult, confidence_interval, derive_seeds
from .validation import check_postcondition

DEFAULT_SIZES: List[int] = [100, 200, 400, 800]
TABLE_COLUMNS: Tuple[str, ...] = ("algorithm", "n", "distribution", "comparisons", "time")


@dataclass(frozen=True)
class TrialRecord:
    algorithm: str
    n: int
    distribution: str
    comparisons: int
    time: float  # seconds
    repeat: int = 0

    def as_row(self) -> Tuple[str, int, str, int, float]:
        return (self.algorithm, self.n, self.distribution, self.comparisons, self.time)


@dataclass(frozen=True)
class TrialFailure:
    algorithm: str
    n: int
    distribution: str
    repeat: int
    reason: str

    def __str__(self) -> str:
        return (
            f"{self.algorithm} n={self.n} distribution={self.distribution} "
            f"repeat={self.repeat}: {self.reason}"
        )


@dataclass(frozen=True)
class TrialSpec:
    index: int
    algorithm: SortAlgorithm
    n: int
    distribution: Distribution
    repeat: int
    seed: int
    gc_collect: bool = True


class DriverState(Enum):
    CONFIGURING = "configuring"
    RUNNING = "running"
    DONE = "done"


def sort_and_count(
    algorithm: Union[str, SortAlgorithm],
    seq: List[Any],
    cmp: Optional[Callable[[Any, Any], int]] = None,
) -> Tuple[List[Any], int]:
    """Sort ``seq`` with ``algorithm`` and return (result, comparisons)."""
    algo = get_algorithm(algorithm) if isinstance(algorithm, str) else algorithm
    comparator = CountingComparator(cmp)
    result = algo.func(seq, comparator)
    return result, comparator.count()


def execute_trial(spec: TrialSpec) -> Tuple[Optional[TrialRecord], Optional[TrialFailure]]:
    """
    Run one trial: build the input, time only the sort call, validate.
    Module-level so worker processes can unpickle it.
    """
    data = generate(spec.n, spec.distribution, seed=spec.seed)
    original = list(data)
    comparator = CountingComparator()

    if spec.gc_collect:
        gc.collect()
    try:
        t0 = time.perf_counter()
        result = spec.algorithm.func(data, comparator)
        elapsed = time.perf_counter() - t0
    except Exception as e:
        reason = f"sort raised {e!r}"
    else:
        reason = check_postcondition(original, result)
        if reason is None:
            return TrialRecord(
                algorithm=spec.algorithm.name,
                n=spec.n,
                distribution=spec.distribution.value,
                comparisons=comparator.count(),
                time=elapsed,
                repeat=spec.repeat,
            ), None

    return None, TrialFailure(
        algorithm=spec.algorithm.name,
        n=spec.n,
        distribution=spec.distribution.value,
        repeat=spec.repeat,
        reason=reason,
    )


def _as_algorithm(value: Union[str, SortAlgorithm]) -> SortAlgorithm:
    if isinstance(value, SortAlgorithm):
        return value
    if isinstance(value, str):
        return get_algorithm(value)
    raise InvalidConfiguration(f"algorithms must be names or SortAlgorithm entries, got {value!r}")


class BenchmarkDriver:
    """
    Runs every (algorithm, size, distribution) combination ``repetitions``
    times and yields one :class:`TrialRecord` per trial.

    Plan order is fixed: algorithm outermost, then size, then distribution,
    then repetition. Results whose output fails validation are kept out of the
    record stream and collected in :attr:`failures` instead.
    """

    def __init__(
        self,
        algorithms: Iterable[Union[str, SortAlgorithm]] = CLASSIC_ALGORITHMS,
        sizes: Iterable[int] = tuple(DEFAULT_SIZES),
        distributions: Iterable[Union[str, Distribution]] = tuple(Distribution),
        repetitions: int = 1,
        seed: Optional[int] = None,
        warmup: int = 0,
        gc_collect: bool = True,
        workers: int = 1,
        strict: bool = False,
        verbose: bool = False,
    ):
        # Validation
        self.algorithms: List[SortAlgorithm] = [_as_algorithm(a) for a in algorithms]
        if not self.algorithms:
            raise InvalidConfiguration("at least one algorithm is required")
        names = [a.name for a in self.algorithms]
        if len(set(names)) != len(names):
            raise InvalidConfiguration(f"duplicate algorithm names: {names}")

        sizes = list(sizes)
        if not sizes:
            raise InvalidConfiguration("sizes must be a non-empty list of integers")
        for n in sizes:
            if isinstance(n, bool) or not isinstance(n, (int, np.integer)) or n < 0:
                raise InvalidConfiguration(f"all sizes must be integers >= 0, got {n!r}")
        self.sizes: List[int] = [int(n) for n in sizes]

        self.distributions: List[Distribution] = [parse_distribution(d) for d in distributions]
        if not self.distributions:
            raise InvalidConfiguration("at least one distribution is required")

        if isinstance(repetitions, bool) or not isinstance(repetitions, int) or repetitions < 1:
            raise InvalidConfiguration(f"repetitions must be a positive integer, got {repetitions!r}")
        if not isinstance(warmup, int) or warmup < 0:
            raise InvalidConfiguration(f"warmup must be a non-negative integer, got {warmup!r}")
        if not isinstance(workers, int) or workers < 1:
            raise InvalidConfiguration(f"workers must be a positive integer, got {workers!r}")

        self.repetitions = repetitions
        self.seed = seed
        self.warmup = warmup
        self.gc_collect = gc_collect
        self.workers = workers
        self.strict = strict
        self.verbose = verbose

        self.state = DriverState.CONFIGURING
        self.failures: List[TrialFailure] = []
        self._plan: Optional[List[TrialSpec]] = None

    def trials(self) -> List[TrialSpec]:
        if self._plan is None:
            # one seed per (size, distribution, repetition) cell: every
            # algorithm sorts the same input for a given cell
            cells = [
                (si, di, rep)
                for si in range(len(self.sizes))
                for di in range(len(self.distributions))
                for rep in range(self.repetitions)
            ]
            seeds = dict(zip(cells, derive_seeds(self.seed, len(cells))))
            plan: List[TrialSpec] = []
            for algo in self.algorithms:
                for si, n in enumerate(self.sizes):
                    for di, dist in enumerate(self.distributions):
                        for rep in range(self.repetitions):
                            plan.append(TrialSpec(
                                len(plan), algo, n, dist, rep, seeds[(si, di, rep)], self.gc_collect
                            ))
            self._plan = plan
        return self._plan

    def run(self) -> Iterator[TrialRecord]:
        if self.state is not DriverState.CONFIGURING:
            raise RuntimeError(f"driver already {self.state.value}; create a new BenchmarkDriver to run again")
        self.state = DriverState.RUNNING
        return self._run()

    def _warmup(self) -> None:
        """Untimed runs on the smallest size; an algorithm that raises here is reported like a failed trial."""
        n = min(self.sizes)
        dist = self.distributions[0]
        for algo in self.algorithms:
            for _ in range(self.warmup):
                try:
                    algo.func(generate(n, dist, seed=self.seed), CountingComparator())
                except Exception as e:
                    self._fail(TrialFailure(algo.name, n, dist.value, -1, f"warmup raised {e!r}"))
                    break

    def _fail(self, failure: TrialFailure) -> None:
        self.failures.append(failure)
        print(f"❌ validation failed: {failure}", file=sys.stderr)
        if self.strict:
            self.state = DriverState.DONE
            raise PostconditionViolation(str(failure), failure)

    def _outcomes(self, plan: List[TrialSpec]) -> Iterator[Tuple[Optional[TrialRecord], Optional[TrialFailure]]]:
        if self.workers == 1:
            for spec in plan:
                yield execute_trial(spec)
            return
        with mp.Pool(self.workers) as pool:
            yield from pool.imap(execute_trial, plan)

    def _run(self) -> Iterator[TrialRecord]:
        plan = self.trials()
        if self.verbose:
            print(
                f"🔍 Benchmarking {len(self.algorithms)} algorithm(s) over {len(plan)} trial(s) "
                f"(sizes={self.sizes}, distributions={[d.value for d in self.distributions]})"
            )
        if self.warmup:
            self._warmup()

        current = None
        for record, failure in self._outcomes(plan):
            if failure is not None:
                self._fail(failure)
                continue
            if self.verbose and record.algorithm != current:
                current = record.algorithm
                print(f"  ⏱  {current}")
            yield record

        self.state = DriverState.DONE
        if self.verbose:
            status = "✅ Benchmark complete." if not self.failures else (
                f"⚠️  Benchmark complete with {len(self.failures)} failed trial(s)."
            )
            print(status)


@dataclass
class TrialSummary:
    algorithm: str
    n: int
    distribution: str
    trials: int
    comparisons_mean: float
    comparisons_min: int
    comparisons_max: int
    time_ci: CIResult


@dataclass
class BenchmarkResult:
    records: List[TrialRecord] = field(default_factory=list)
    failures: List[TrialFailure] = field(default_factory=list)
    table_path: Optional[str] = None

    @property
    def ok(self) -> bool:
        return not self.failures

    def summary(self, ci_method: str = "t", confidence: float = 0.95) -> List[TrialSummary]:
        return summarize(self.records, ci_method=ci_method, confidence=confidence)


def summarize(
    records: Sequence[TrialRecord],
    ci_method: str = "t",
    confidence: float = 0.95,
) -> List[TrialSummary]:
    """Collapse repetitions: one entry per (algorithm, n, distribution), first-seen order."""
    groups: Dict[Tuple[str, int, str], List[TrialRecord]] = {}
    for r in records:
        groups.setdefault((r.algorithm, r.n, r.distribution), []).append(r)

    out: List[TrialSummary] = []
    for (algorithm, n, distribution), rs in groups.items():
        counts = [r.comparisons for r in rs]
        out.append(TrialSummary(
            algorithm=algorithm,
            n=n,
            distribution=distribution,
            trials=len(rs),
            comparisons_mean=sum(counts) / len(counts),
            comparisons_min=min(counts),
            comparisons_max=max(counts),
            time_ci=confidence_interval([r.time for r in rs], ci_method, confidence),
        ))
    return out


def run_benchmark(
    algorithms: Iterable[Union[str, SortAlgorithm]] = CLASSIC_ALGORITHMS,
    sizes: Iterable[int] = tuple(DEFAULT_SIZES),
    distributions: Iterable[Union[str, Distribution]] = tuple(Distribution),
    repetitions: int = 1,
    seed: Optional[int] = None,
    out: Union[str, Path, TextIO, None] = None,
    delimiter: str = " ",
    **driver_kwargs: Any,
) -> BenchmarkResult:
    """
    Configure a :class:`BenchmarkDriver`, run it, and stream the table to
    ``out`` (a path or an open text stream) while trials complete.
    Configuration errors surface before anything is written.
    """
    from .io import TableWriter, open_table

    driver = BenchmarkDriver(
        algorithms=algorithms,
        sizes=sizes,
        distributions=distributions,
        repetitions=repetitions,
        seed=seed,
        **driver_kwargs,
    )
    result = BenchmarkResult(failures=driver.failures)

    if out is None:
        result.records.extend(driver.run())
        return result

    with open_table(out) as stream:
        writer = TableWriter(stream, delimiter=delimiter)
        writer.write_header()
        for record in driver.run():
            writer.write(record)
            result.records.append(record)
    if isinstance(out, (str, Path)):
        result.table_path = str(Path(out).resolve())
        if driver.verbose:
            print(f"📄 Table saved to: {result.table_path}")
    return result
