"""
Single-pass aggregation driver.

**Conceptual**: The driver pulls lines from any iterable exactly once. The
first line is the header and only fixes the schema; every later line is
decoded into a row and offered to each tracker. Nothing but the current row is
held, so memory does not grow with the number of data rows (apart from the
best-record references the trackers keep).

**Control flow**:
    first line      --> resolve_header --> schema
    each later line --> decode_row(schema) --> TrackerSet.offer

**Ordering**: Rows are folded strictly in stream order. Tie-breaking
("latest qualifying row wins") depends on this, so the fold must never be
parallelized or reordered.

**Failure model**: Any exception raised by the line source (e.g. InputReadError)
propagates out of `aggregate_lines` unchanged. There is no partial result.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Optional

from sales_stats.analytics.trackers import DEFAULT_METRICS, MetricDefinition, TrackerSet
from sales_stats.config.settings import SalesStatsSettings, get_settings
from sales_stats.data.decoding import decode_row
from sales_stats.data.io import iter_input_lines
from sales_stats.data.schemas import DEFAULT_DELIMITER, Schema, resolve_header


@dataclass
class AggregationResult:
    """
    Final state of one aggregation pass.

    Attributes:
        trackers: Tracker set holding the best score and record per metric.
        schema: Field names resolved from the header (empty if the input had
                no lines at all).
        rows_processed: Number of data lines consumed (header excluded).
    """
    trackers: TrackerSet
    schema: Schema = ()
    rows_processed: int = 0

    @property
    def has_header(self) -> bool:
        return len(self.schema) > 0


def aggregate_lines(
    lines: Iterable[str],
    delimiter: str = DEFAULT_DELIMITER,
    metrics: Iterable[MetricDefinition] = DEFAULT_METRICS,
) -> AggregationResult:
    """
    Fold a stream of CSV lines into running-maximum trackers.

    **Functionally**:
      - Consumes `lines` once, lazily.
      - Treats the first line as the header, whatever its content.
      - Decodes every following line and offers the row to all trackers in
        registration order.
      - Returns after the stream is exhausted; trackers that never saw a
        qualifying row stay unset.

    Args:
        lines: Any iterable of text lines (file handle, generator, list).
        delimiter: Field delimiter (default ",").
        metrics: Metric definitions to track (default: the four sales metrics).

    Returns:
        AggregationResult with final tracker states.

    Example:
        >>> result = aggregate_lines([
        ...     "unit price,quantity,percentage discount",
        ...     "10,5,0",
        ...     "20,3,10",
        ... ])
        >>> result.trackers["maxAmountWithoutDiscount"].value
        60
        >>> result.rows_processed
        2
    """
    trackers = TrackerSet(metrics)
    schema: Optional[Schema] = None
    rows_processed = 0

    for line in lines:
        if schema is None:
            schema = resolve_header(line, delimiter)
            continue

        row = decode_row(line, schema, delimiter)
        trackers.offer(row)
        rows_processed += 1

    return AggregationResult(
        trackers=trackers,
        schema=schema or (),
        rows_processed=rows_processed,
    )


def aggregate_file(
    path: Path | str,
    settings: Optional[SalesStatsSettings] = None,
    metrics: Iterable[MetricDefinition] = DEFAULT_METRICS,
) -> AggregationResult:
    """
    Aggregate a CSV file from disk.

    Opens the file through `iter_input_lines`, which closes the handle on
    completion and on error.

    Args:
        path: Path to the input CSV.
        settings: Settings supplying delimiter and encoding. Defaults to the
                  global settings loaded from the environment.
        metrics: Metric definitions to track.

    Returns:
        AggregationResult with final tracker states.

    Raises:
        InputReadError: If the file can't be opened, read or decoded.
    """
    settings = settings or get_settings()
    lines = iter_input_lines(path, encoding=settings.encoding)
    try:
        return aggregate_lines(lines, delimiter=settings.delimiter, metrics=metrics)
    finally:
        # Release the handle even if decoding or a tracker raised mid-stream
        lines.close()
