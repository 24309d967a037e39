from __future__ import annotations

from sortscope import Distribution, generate, run_benchmark, sort_and_count
from sortscope.plotting import comparisons_figure, save_figure


if __name__ == "__main__":
    # one input, every algorithm
    data = generate(1000, Distribution.UNIFORM_RANDOM, seed=7)
    for name in ("insertion", "binary_insertion", "quick", "merge", "builtin"):
        _, comparisons = sort_and_count(name, list(data))
        print(f"{name:>18}: {comparisons:>8} comparisons")

    # comparisons-vs-n scatter, one colour per algorithm
    result = run_benchmark(
        algorithms=["insertion", "binary_insertion", "merge", "builtin"],
        sizes=list(range(50, 1001, 50)),
        distributions=["uniform-random"],
        seed=7,
        out="examples/reports/values.dat",
    )
    save_figure(
        comparisons_figure(result.records, reference_curves=("nlogn", "n**2")),
        "examples/reports/comparisons.html",
    )
