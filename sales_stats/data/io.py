"""
File readers and writers for sales input and results output.

**Conceptual**: This module is the only I/O boundary of the pipeline. The
aggregation engine never opens files itself; it consumes the line iterator
produced here and hands back results that the writers below persist.

**Reading**: `iter_input_lines` is a generator that yields one line at a time
from an open text handle. The handle lives inside a `with` block, so it is
closed when the generator is exhausted, when it raises, and when the consumer
stops early and the generator is closed or garbage collected. Any failure to
open or read the file surfaces as `InputReadError` carrying the path.

**Writing**:
  - `write_structured_json` saves the structured view as strict JSON.
  - `write_summary_csv` saves the tabular summary with pandas.
Both create nothing but the target file; the output directory must exist.
"""

import json
from pathlib import Path
from typing import Any, Iterator, Mapping

import pandas as pd


class InputReadError(OSError):
    """
    Raised when the input file cannot be opened, read or decoded.

    **Conceptual**: Reading failures are fatal for a run. Trackers hold no
    checkpoint, so a failure after N rows discards all progress and no result
    is written. The original exception is chained as `__cause__`.
    """
    pass


def iter_input_lines(
    path: Path | str,
    encoding: str = "utf-8",
) -> Iterator[str]:
    """
    Lazily yield the lines of a text file.

    **Functionally**:
      - Opens the file in text mode with universal newlines.
      - Yields lines one at a time (terminators included), never buffering
        more than the current line.
      - Releases the file handle on every exit path.

    Args:
        path: Path to the input file.
        encoding: Text encoding (default "utf-8").

    Yields:
        Raw lines in file order.

    Raises:
        InputReadError: If the file can't be opened, read, or decoded.

    Example:
        >>> for line in iter_input_lines("data/sales.csv"):
        ...     print(line.rstrip())
    """
    path = Path(path)

    try:
        with open(path, "r", encoding=encoding, newline=None) as handle:
            for line in handle:
                yield line
    except (OSError, UnicodeDecodeError) as e:
        raise InputReadError(
            f"{path}: Failed to read input. Error: {e}"
        ) from e


def structured_output_path(input_path: Path | str, output_dir: Path | str) -> Path:
    """
    Build the JSON output path for an input file.

    The file is named after the input's base name with a `.json` suffix and
    placed inside `output_dir`, e.g. `data/sales.csv` + `out/` -> `out/sales.json`.
    """
    return Path(output_dir) / f"{Path(input_path).stem}.json"


def summary_output_path(input_path: Path | str, output_dir: Path | str) -> Path:
    """Build the summary CSV path, e.g. `data/sales.csv` + `out/` -> `out/sales_summary.csv`."""
    return Path(output_dir) / f"{Path(input_path).stem}_summary.csv"


def write_structured_json(
    view: Mapping[str, Any],
    path: Path | str,
    indent: int = 2,
) -> None:
    """
    Write the structured view to disk as strict JSON.

    Args:
        view: Mapping produced by reporting.views.build_structured_view.
        path: Target file path. Parent directory must exist.
        indent: JSON indentation (default 2).

    Raises:
        OSError: If the file can't be written.
        ValueError: If the view holds NaN or infinite numbers (the view
                    builder replaces them with None).
    """
    path = Path(path)

    try:
        with open(path, "w", encoding="utf-8") as f:
            json.dump(view, f, indent=indent, allow_nan=False)
            f.write("\n")
    except OSError as e:
        raise OSError(
            f"{path}: Failed to write JSON. Error: {e}"
        ) from e


def write_summary_csv(
    df: pd.DataFrame,
    path: Path | str,
) -> None:
    """
    Write the per-metric summary table to CSV.

    Args:
        df: DataFrame produced by reporting.views.build_summary_frame.
        path: Target file path. Parent directory must exist.

    Raises:
        OSError: If the file can't be written.
    """
    path = Path(path)

    try:
        df.to_csv(path, index=False)
    except Exception as e:
        raise OSError(
            f"{path}: Failed to write CSV. Error: {e}"
        ) from e
