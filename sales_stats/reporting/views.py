"""
Result views: project final tracker state into text, JSON-ready or tabular form.

**Conceptual**: Views are pure projections. They read each tracker's final
(best score, best record) pair and format it; nothing is recomputed. Every view
lists metrics in tracker registration order:
maxAmountWithoutDiscount, maxAmountWithDiscount, maxQuantity,
maxDiffWithDiscount.

**Views**:
  - `build_text_view`: console report, one block per metric.
  - `build_structured_view`: {metric_id: {"value", "record"}} for JSON output.
  - `build_summary_frame`: one DataFrame row per metric for CSV export.

**Unset trackers** export value None and record None (null in JSON) and render
as "no data" in the text view. Non-finite numbers (from "Infinity" inputs) are
exported as None so the JSON output stays strict.
"""

import json
import math
from typing import Any, Dict, List, Optional

import pandas as pd

from sales_stats.analytics.aggregation import AggregationResult
from sales_stats.data.decoding import MAX_EXACT_INTEGER
from sales_stats.data.schemas import Row

NO_DATA_TEXT = "no data"

# Fixed leading columns of the summary table; schema fields with these names are skipped
_SUMMARY_COLUMNS = ("metric_id", "label", "value", "has_record")


def _json_safe(value: Any) -> Any:
    """Replace NaN/inf floats with None; pass everything else through."""
    if isinstance(value, float) and not math.isfinite(value):
        return None
    return value


def export_record(record: Optional[Row]) -> Optional[Dict[str, Any]]:
    """Copy a row into a plain, JSON-safe dict (None stays None)."""
    if record is None:
        return None
    return {name: _json_safe(value) for name, value in record.items()}


def format_score(value: Optional[float]) -> str:
    """
    Render a score for the text view.

    Integral floats up to 2**53 drop the trailing ".0" (50.0 -> "50"); other
    floats use Python's shortest repr (99.75 -> "99.75", 1e300 -> "1e+300");
    None renders as "no data".
    """
    if value is None:
        return NO_DATA_TEXT
    if isinstance(value, float):
        if math.isnan(value):
            return "NaN"
        if math.isinf(value):
            return "Infinity" if value > 0 else "-Infinity"
        if value.is_integer() and abs(value) <= MAX_EXACT_INTEGER:
            return str(int(value))
    return str(value)


def build_text_view(result: AggregationResult, indent: int = 2) -> str:
    """
    Build the human-readable report.

    Each block is the metric label with its score, then the pretty-printed
    best record; blocks are separated by a blank line.

    Args:
        result: Final aggregation result.
        indent: JSON indentation for the record (default 2).

    Returns:
        Multi-line report string (no trailing newline).

    Example:
        Max quantity between all the records: 7
        Record: {
          "unit price": 15,
          "quantity": 7,
          "percentage discount": 5
        }
    """
    blocks = []
    for tracker in result.trackers:
        record_text = json.dumps(export_record(tracker.record), indent=indent)
        blocks.append(
            f"{tracker.metric.label}: {format_score(tracker.value)}\n"
            f"Record: {record_text}"
        )
    return "\n\n".join(blocks)


def build_structured_view(result: AggregationResult) -> Dict[str, Dict[str, Any]]:
    """
    Build the serializable view: metric id -> {"value", "record"}.

    Returns:
        Dict keyed by metric id in registration order. Unset trackers map to
        {"value": None, "record": None}.
    """
    view: Dict[str, Dict[str, Any]] = {}
    for tracker in result.trackers:
        view[tracker.metric_id] = {
            "value": _json_safe(tracker.value),
            "record": export_record(tracker.record),
        }
    return view


def build_summary_frame(result: AggregationResult) -> pd.DataFrame:
    """
    Build a per-metric summary table.

    **Columns**:
      - metric_id, label, value, has_record
      - one column per schema field holding the best record's value
        (empty when the tracker is unset or the record lacks the field)

    Returns:
        DataFrame with one row per metric, in registration order.
    """
    field_columns: List[str] = [
        name for name in dict.fromkeys(result.schema) if name not in _SUMMARY_COLUMNS
    ]
    rows = []
    for tracker in result.trackers:
        record = export_record(tracker.record) or {}
        row = {
            "metric_id": tracker.metric_id,
            "label": tracker.metric.label,
            "value": _json_safe(tracker.value),
            "has_record": tracker.record is not None,
        }
        for name in field_columns:
            row[name] = record.get(name)
        rows.append(row)

    return pd.DataFrame(rows, columns=list(_SUMMARY_COLUMNS) + field_columns)
