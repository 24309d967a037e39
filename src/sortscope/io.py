# src/sortscope/io.py
from __future__ import annotations

import csv
import json
from contextlib import contextmanager
from dataclasses import asdict
from pathlib import Path
from typing import Any, Dict, Iterable, Iterator, List, TextIO, Tuple, Union

from .analyze import TABLE_COLUMNS, BenchmarkResult, TrialRecord
from .errors import OutputError
from .utils import human_time


class TableWriter:
    """
    Streams trial rows as a delimited table: one header row, then one row per
    record, columns ``algorithm n distribution comparisons time`` (seconds).

    The default single-space delimiter reads straight into R's
    ``read.table(header=TRUE)``; pass ``delimiter=","`` for CSV.
    """

    def __init__(self, stream: TextIO, delimiter: str = " "):
        if len(delimiter) != 1:
            raise ValueError("delimiter must be a single character")
        self.stream = stream
        self.delimiter = delimiter
        self._writer = csv.writer(stream, delimiter=delimiter, lineterminator="\n")
        self.rows_written = 0

    def _writerow(self, row: Iterable[Any]) -> None:
        try:
            self._writer.writerow(row)
            self.stream.flush()
        except (OSError, ValueError) as e:
            raise OutputError(f"failed to write result row: {e}") from e

    def write_header(self) -> None:
        self._writerow(TABLE_COLUMNS)

    def write(self, record: TrialRecord) -> None:
        self._writerow(record.as_row())
        self.rows_written += 1


@contextmanager
def open_table(out: Union[str, Path, TextIO]) -> Iterator[TextIO]:
    """Yield a writable text stream; paths are opened (and closed) here, streams are borrowed."""
    if isinstance(out, (str, Path)):
        path = Path(out)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            f = path.open("w", encoding="utf-8", newline="")
        except OSError as e:
            raise OutputError(f"cannot open {path} for writing: {e}") from e
        with f:
            yield f
    else:
        yield out


def write_table(records: Iterable[TrialRecord], out: Union[str, Path, TextIO], delimiter: str = " ") -> int:
    with open_table(out) as stream:
        writer = TableWriter(stream, delimiter=delimiter)
        writer.write_header()
        for r in records:
            writer.write(r)
    return writer.rows_written


def _split(line: str, delimiter: str) -> List[str]:
    if delimiter == " ":
        return line.split()
    return next(csv.reader([line], delimiter=delimiter))


def read_table(source: Union[str, Path, TextIO], delimiter: str = " ") -> List[TrialRecord]:
    """
    Parse a table written by :class:`TableWriter`. Columns are looked up by
    name, so extra columns are ignored; ``distribution`` may be absent.
    """
    if isinstance(source, (str, Path)):
        with Path(source).open("r", encoding="utf-8", newline="") as f:
            lines = f.read().splitlines()
    else:
        lines = source.read().splitlines()

    lines = [ln for ln in lines if ln.strip()]
    if not lines:
        return []
    header = _split(lines[0], delimiter)
    missing = [c for c in TABLE_COLUMNS if c != "distribution" and c not in header]
    if missing:
        raise ValueError(f"table header lacks column(s): {', '.join(missing)}")
    col = {name: idx for idx, name in enumerate(header)}

    seen: Dict[Tuple[str, int, str], int] = {}
    records: List[TrialRecord] = []
    for lineno, line in enumerate(lines[1:], start=2):
        cells = _split(line, delimiter)
        if len(cells) != len(header):
            raise ValueError(f"line {lineno}: expected {len(header)} cells, got {len(cells)}")
        algorithm = cells[col["algorithm"]]
        n = int(cells[col["n"]])
        distribution = cells[col["distribution"]] if "distribution" in col else ""
        key = (algorithm, n, distribution)
        repeat = seen.get(key, 0)
        seen[key] = repeat + 1
        records.append(TrialRecord(
            algorithm=algorithm,
            n=n,
            distribution=distribution,
            comparisons=int(cells[col["comparisons"]]),
            time=float(cells[col["time"]]),
            repeat=repeat,
        ))
    return records


def export_results_json(result: BenchmarkResult, out_path: str | Path, ci_method: str = "t") -> None:
    """
    Write records, failures and per-cell summaries as JSON for frontends that
    prefer structured data over the plain table.
    """
    out_path = Path(out_path)
    data: dict[str, Any] = {
        "columns": list(TABLE_COLUMNS),
        "time_unit": "seconds",
        "records": [asdict(r) for r in result.records],
        "failures": [asdict(f) for f in result.failures],
        "summary": [],
    }
    for s in result.summary(ci_method=ci_method):
        ci = s.time_ci
        data["summary"].append({
            "algorithm": s.algorithm,
            "n": s.n,
            "distribution": s.distribution,
            "trials": s.trials,
            "comparisons_mean": s.comparisons_mean,
            "comparisons_min": s.comparisons_min,
            "comparisons_max": s.comparisons_max,
            "time_ci": {
                "mean": ci.mean,
                "std": ci.std,
                "n": ci.n,
                "lower": ci.lower,
                "upper": ci.upper,
                "method": ci.method,
                "mean_human": human_time(ci.mean),
            },
        })

    try:
        out_path.parent.mkdir(parents=True, exist_ok=True)
        out_path.write_text(json.dumps(data, indent=2, default=str), encoding="utf-8")
    except OSError as e:
        raise OutputError(f"cannot write {out_path}: {e}") from e
