"""
Header schema and row types for sales line-item CSVs.

**Conceptual**: The first line of every input file is a header that names the
columns. This module turns that line into a `Schema` (ordered, lower-cased
field names) and defines the `Row` type that the decoder produces for every
following line.

**Schema rules**:
  - Field names are trimmed and lower-cased; matching is therefore
    case-insensitive ("Unit Price" and "unit price" are the same field).
  - Order is preserved and defines positional alignment for data rows.
  - Duplicate names are kept as-is. When a row mapping is built, a later
    position overwrites an earlier one with the same name.
  - No column is mandatory at this stage. Each metric checks for the fields it
    needs on every row (see analytics/trackers.py).

**Rows**: A row is a read-only mapping from field name to value, where a value
is a number (int or float) or the raw text of the field. Rows are never copied;
trackers keep a reference to the row that produced their best score.
"""

from types import MappingProxyType
from typing import Mapping, Sequence, Tuple, Union

# Recognized field names (after lower-casing)
UNIT_PRICE_FIELD = "unit price"
QUANTITY_FIELD = "quantity"
DISCOUNT_PERCENT_FIELD = "percentage discount"

DEFAULT_DELIMITER = ","

Value = Union[int, float, str]
Schema = Tuple[str, ...]
Row = Mapping[str, Value]


def resolve_header(line: str, delimiter: str = DEFAULT_DELIMITER) -> Schema:
    """
    Parse the header line into an ordered schema.

    The line is stripped, split on the delimiter (no quoting support), and each
    token is trimmed and lower-cased.

    Args:
        line: First raw line of the input.
        delimiter: Field delimiter (default ",").

    Returns:
        Tuple of field names in column order.

    Example:
        >>> resolve_header("Product, Unit Price,QUANTITY,Percentage Discount\\n")
        ('product', 'unit price', 'quantity', 'percentage discount')
    """
    return tuple(token.strip().lower() for token in line.strip().split(delimiter))


def make_row(schema: Sequence[str], values: Sequence[Value]) -> Row:
    """
    Align decoded values with the schema and freeze the result.

    Values beyond the schema length are dropped; schema fields without a value
    are left out of the mapping entirely (absent, not None).

    Args:
        schema: Ordered field names.
        values: Decoded values in column order.

    Returns:
        Read-only mapping of field name to value, in schema order.
    """
    # zip stops at the shorter sequence: extras are dropped, missing fields absent
    fields = {}
    for name, value in zip(schema, values):
        fields[name] = value
    return MappingProxyType(fields)


def missing_fields(row: Row, required: Sequence[str]) -> list[str]:
    """Return the required field names that are absent from the row."""
    return [name for name in required if name not in row]
