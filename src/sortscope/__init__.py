# src/sortscope/__init__.py
from .algorithms import (
    ALGORITHMS,
    CLASSIC_ALGORITHMS,
    SortAlgorithm,
    binary_insertion_sort,
    bubble_sort,
    builtin_sort,
    get_algorithm,
    heap_sort,
    insertion_sort,
    merge_sort,
    quick_sort,
    selection_sort,
)
from .analyze import (
    DEFAULT_SIZES,
    TABLE_COLUMNS,
    BenchmarkDriver,
    BenchmarkResult,
    DriverState,
    TrialFailure,
    TrialRecord,
    TrialSummary,
    run_benchmark,
    sort_and_count,
    summarize,
)
from .comparator import CountingComparator, Ordering, key_order, natural_order
from .errors import InvalidConfiguration, OutputError, PostconditionViolation, SortscopeError
from .inputs import Distribution, generate, parse_distribution
from .io import TableWriter, export_results_json, read_table, write_table
from .report import build_report

__version__ = "0.1.0"
