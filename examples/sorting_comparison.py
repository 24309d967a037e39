#!/usr/bin/env python3
"""
Sorting Algorithm Comparison
============================

Runs the six classic sorts over four input shapes, writes the result table to
``values.dat`` (readable with R's ``read.table(header=TRUE)``), and renders an
HTML report with comparison-count and runtime plots.
"""

from __future__ import annotations

import os
import sys

# Add src to path for development
REPO_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
SRC_PATH = os.path.join(REPO_ROOT, "src")
if SRC_PATH not in sys.path:
    sys.path.insert(0, SRC_PATH)

from sortscope import CLASSIC_ALGORITHMS, build_report, export_results_json, run_benchmark


def main():
    print("🔄 Sorting Algorithm Comparison")
    print("=" * 50)

    result = run_benchmark(
        algorithms=CLASSIC_ALGORITHMS,
        sizes=[100, 200, 400, 800, 1600],
        distributions=["uniform-random", "already-sorted", "reverse-sorted", "few-unique"],
        repetitions=3,
        seed=42,
        warmup=1,
        out="values.dat",
        verbose=True,
    )
    export_results_json(result, "values.json")
    build_report(
        result.records,
        result.failures,
        title="Sorting Algorithms: O(n²) vs O(n log n)",
        notes="Bubble, Insertion and Selection grow quadratically; Quick, Heap and Merge stay near n log n.",
        html_out="sorting_comparison.html",
        verbose=True,
    )
    return result


if __name__ == "__main__":
    sys.exit(0 if main().ok else 1)
