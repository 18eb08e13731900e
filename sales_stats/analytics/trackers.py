"""
Incremental-maximum trackers over decoded sales rows.

**Conceptual**: Each metric answers "which line item scored highest on X?"
without storing the rows. A metric is a `MetricDefinition` (id, label, required
fields, scoring formula); its running answer is a `TrackerState` holding the
best score and a reference to the row that produced it. `fold_row` is the
single, pure update step; `MetricTracker` and `TrackerSet` just apply it to a
stream of rows.

**Update rule** (per row, per metric):
  1. If any required field is absent, or a required value is not numeric,
     the row does not count for this metric (state unchanged).
  2. If the tracker is unset, the row becomes the best.
  3. If the score is strictly less than the best, the row is ignored.
  4. Otherwise (greater OR equal) the row replaces the best.

Rule 4 means ties go to the *latest* qualifying row in stream order. This is a
reproducible contract that callers rely on; do not change it to "first wins".

**Unset state**: a tracker that never saw a qualifying row has
`best_score=None` and `best_record=None`. There is no -inf sentinel; exporters
read the None values directly.

**Metrics** (registration order is the output order):

| id                       | required fields                       | score                                  |
|--------------------------|---------------------------------------|----------------------------------------|
| maxAmountWithoutDiscount | unit price, quantity                  | unit_price * quantity                  |
| maxAmountWithDiscount    | unit price, quantity, pct. discount   | unit_price * quantity * (1 - d / 100)  |
| maxQuantity              | quantity                              | quantity                               |
| maxDiffWithDiscount      | unit price, quantity, pct. discount   | quantity * unit_price * d / 100        |
"""

import numbers
from dataclasses import dataclass, field
from typing import Callable, Iterable, Iterator, List, Mapping, Optional, Tuple

from sales_stats.data.schemas import (
    DISCOUNT_PERCENT_FIELD,
    QUANTITY_FIELD,
    UNIT_PRICE_FIELD,
    Row,
    missing_fields,
)

# A score function receives the numeric values of the required fields,
# keyed by field name, and returns the metric's score for the row.
ScoreFunction = Callable[[Mapping[str, float]], float]


def _is_number(value) -> bool:
    # bool is an int subclass but never produced by the decoder
    return isinstance(value, numbers.Real) and not isinstance(value, bool)


@dataclass(frozen=True)
class MetricDefinition:
    """
    Static description of one running-maximum metric.

    Attributes:
        metric_id: Stable identifier used as the key in structured output.
        label: Human-readable label used in the text view.
        required_fields: Field names that must be present in a row for the
                         row to count toward this metric.
        formula: Function computing the score from the required values.
    """
    metric_id: str
    label: str
    required_fields: Tuple[str, ...]
    formula: ScoreFunction

    def score(self, row: Row) -> Optional[float]:
        """
        Compute this metric's score for a row.

        Returns:
            The score, or None if a required field is absent or not numeric.
        """
        if missing_fields(row, self.required_fields):
            return None
        values = {name: row[name] for name in self.required_fields}
        if not all(_is_number(value) for value in values.values()):
            return None
        return self.formula(values)


@dataclass(frozen=True)
class TrackerState:
    """
    Immutable (best score, best record) pair for one metric.

    Both fields are None until the first qualifying row is folded in.
    """
    best_score: Optional[float] = None
    best_record: Optional[Row] = None

    @property
    def is_set(self) -> bool:
        """True once at least one qualifying row has been seen."""
        return self.best_record is not None


UNSET = TrackerState()


def fold_row(state: TrackerState, metric: MetricDefinition, row: Row) -> TrackerState:
    """
    Apply one row to a tracker state and return the resulting state.

    **Functionally**:
      - Score is None (guard failed) -> `state` unchanged.
      - `state` unset -> new state with this row.
      - score < best -> `state` unchanged.
      - score >= best -> new state with this row (latest row wins ties).

    Args:
        state: Current tracker state.
        metric: Metric to score the row with.
        row: Decoded row.

    Returns:
        The same `state` object if the row did not win, else a new TrackerState.

    Example:
        >>> state = fold_row(UNSET, MAX_QUANTITY, {"quantity": 3})
        >>> state.best_score
        3
        >>> fold_row(state, MAX_QUANTITY, {"quantity": 1}) is state
        True
    """
    score = metric.score(row)
    if score is None:
        return state

    if state.is_set and score < state.best_score:
        return state

    return TrackerState(best_score=score, best_record=row)


# ============================================================================
# Metric definitions
# ============================================================================

def _amount_without_discount(v: Mapping[str, float]) -> float:
    return v[UNIT_PRICE_FIELD] * v[QUANTITY_FIELD]


def _amount_with_discount(v: Mapping[str, float]) -> float:
    return v[UNIT_PRICE_FIELD] * v[QUANTITY_FIELD] * (1 - v[DISCOUNT_PERCENT_FIELD] / 100)


def _quantity(v: Mapping[str, float]) -> float:
    return v[QUANTITY_FIELD]


def _diff_with_discount(v: Mapping[str, float]) -> float:
    return v[QUANTITY_FIELD] * v[UNIT_PRICE_FIELD] * v[DISCOUNT_PERCENT_FIELD] / 100


MAX_AMOUNT_WITHOUT_DISCOUNT = MetricDefinition(
    metric_id="maxAmountWithoutDiscount",
    label="Max amount without discount",
    required_fields=(UNIT_PRICE_FIELD, QUANTITY_FIELD),
    formula=_amount_without_discount,
)

MAX_AMOUNT_WITH_DISCOUNT = MetricDefinition(
    metric_id="maxAmountWithDiscount",
    label="Max amount with discount",
    required_fields=(UNIT_PRICE_FIELD, QUANTITY_FIELD, DISCOUNT_PERCENT_FIELD),
    formula=_amount_with_discount,
)

MAX_QUANTITY = MetricDefinition(
    metric_id="maxQuantity",
    label="Max quantity between all the records",
    required_fields=(QUANTITY_FIELD,),
    formula=_quantity,
)

MAX_DIFF_WITH_DISCOUNT = MetricDefinition(
    metric_id="maxDiffWithDiscount",
    label="Max difference between total amount with and without discount",
    required_fields=(UNIT_PRICE_FIELD, QUANTITY_FIELD, DISCOUNT_PERCENT_FIELD),
    formula=_diff_with_discount,
)

# Output order of every view
DEFAULT_METRICS: Tuple[MetricDefinition, ...] = (
    MAX_AMOUNT_WITHOUT_DISCOUNT,
    MAX_AMOUNT_WITH_DISCOUNT,
    MAX_QUANTITY,
    MAX_DIFF_WITH_DISCOUNT,
)


# ============================================================================
# Stateful wrappers used by the aggregation driver
# ============================================================================

@dataclass
class MetricTracker:
    """
    Mutable holder of one metric's running state.

    The tracker owns no logic of its own; `offer` delegates to `fold_row`.
    """
    metric: MetricDefinition
    state: TrackerState = field(default=UNSET)

    @property
    def metric_id(self) -> str:
        return self.metric.metric_id

    @property
    def value(self) -> Optional[float]:
        """Best score, or None if unset."""
        return self.state.best_score

    @property
    def record(self) -> Optional[Row]:
        """Row that produced the best score, or None if unset."""
        return self.state.best_record

    def offer(self, row: Row) -> bool:
        """
        Fold a row into this tracker.

        Returns:
            True if the row became the new best record.
        """
        new_state = fold_row(self.state, self.metric, row)
        if new_state is self.state:
            return False
        self.state = new_state
        return True


class TrackerSet:
    """
    Ordered, fixed collection of independent trackers.

    **Conceptual**: One tracker per metric, created once per run. Iteration
    order is registration order, which is also the block order of the text
    view and the key order of the structured view.

    Example:
        >>> trackers = TrackerSet()
        >>> trackers.offer({"unit price": 10, "quantity": 5, "percentage discount": 0})
        >>> trackers["maxQuantity"].value
        5
    """

    def __init__(self, metrics: Iterable[MetricDefinition] = DEFAULT_METRICS):
        self._trackers: List[MetricTracker] = []
        seen = set()
        for metric in metrics:
            if metric.metric_id in seen:
                raise ValueError(f"Duplicate metric id: {metric.metric_id}")
            seen.add(metric.metric_id)
            self._trackers.append(MetricTracker(metric=metric))

    def offer(self, row: Row) -> None:
        """Offer a row to every tracker once, in registration order."""
        for tracker in self._trackers:
            tracker.offer(row)

    def __iter__(self) -> Iterator[MetricTracker]:
        return iter(self._trackers)

    def __len__(self) -> int:
        return len(self._trackers)

    def __getitem__(self, metric_id: str) -> MetricTracker:
        for tracker in self._trackers:
            if tracker.metric_id == metric_id:
                return tracker
        raise KeyError(metric_id)

    @property
    def metric_ids(self) -> List[str]:
        return [tracker.metric_id for tracker in self._trackers]
