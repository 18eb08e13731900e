"""
Row decoding: split a raw CSV line and coerce numeric-looking fields.

**Conceptual**: Every data line is split on the delimiter and each field is
offered to `coerce_value`. If the trimmed text is a well-formed number the row
stores the number, otherwise it stores the original text untouched. The result
is aligned with the header schema by position (see schemas.make_row).

**Numeric grammar** (applied to the trimmed text):
  - Empty text -> 0. An empty field is a valid number, not a missing value.
  - Optional sign, digits, optional fraction, optional exponent:
    "007" -> 7, "-3" -> -3, ".5" -> 0.5, "5." -> 5, "1e3" -> 1000
  - Unsigned hex/octal/binary integer literals: "0x1F" -> 31, "0o17" -> 15,
    "0b101" -> 5
  - "Infinity" with an optional sign -> float("inf") / float("-inf")
  - Anything else stays text: "abc", "NaN", "inf", "1_000", "1,5", "12 kg"

**Number representation**: every literal is read as a double. Integral
values within +/- 2**53 are then stored as int, so a quantity of "7" or "7.0"
round-trips to JSON as 7 rather than 7.0. Larger magnitudes stay float, and
literals beyond the double range become +/- inf. Arbitrarily long digit
strings therefore never produce unbounded ints.

**Not supported**: quoted fields, escaped delimiters, thousands separators or
locale-specific decimal marks. A comma inside a field always splits it.
"""

import math
import re
from typing import List, Sequence

from sales_stats.data.schemas import DEFAULT_DELIMITER, Row, Value, make_row

_DECIMAL_PATTERN = re.compile(
    r"""
    [+-]?
    (?:\d+\.\d*|\.\d+|\d+)                 # digits with optional fraction
    (?:[eE][+-]?\d+)?                      # optional exponent
    """,
    re.VERBOSE | re.ASCII,
)
_RADIX_PATTERN = re.compile(r"0(?P<prefix>[xXoObB])(?P<digits>[0-9a-fA-F]+)")
_INFINITY_PATTERN = re.compile(r"(?P<sign>[+-]?)Infinity")

_RADIX_BASES = {"x": 16, "o": 8, "b": 2}

# Largest magnitude at which every integer is exactly representable as a double
MAX_EXACT_INTEGER = 2 ** 53


def _normalize(number: float) -> Value:
    """Store integral doubles within the exact-integer range as int."""
    if math.isfinite(number) and number.is_integer() and abs(number) <= MAX_EXACT_INTEGER:
        return int(number)
    return number


def _radix_to_float(value: int) -> float:
    try:
        return float(value)
    except OverflowError:
        return math.inf


def _parse_number(text: str) -> Value | None:
    """Return the numeric value of already-trimmed text, or None if not numeric."""
    if text == "":
        return 0

    if _DECIMAL_PATTERN.fullmatch(text):
        # float() has no digit limit and saturates to inf past the double range
        return _normalize(float(text))

    match = _RADIX_PATTERN.fullmatch(text)
    if match:
        base = _RADIX_BASES[match.group("prefix").lower()]
        try:
            value = int(match.group("digits"), base)
        except ValueError:
            # Digits outside the base, e.g. "0b102"
            return None
        if value <= MAX_EXACT_INTEGER:
            return value
        return _radix_to_float(value)

    match = _INFINITY_PATTERN.fullmatch(text)
    if match:
        return float("-inf") if match.group("sign") == "-" else float("inf")

    return None


def coerce_value(raw: str) -> Value:
    """
    Coerce one raw field into a number when it is fully numeric.

    Args:
        raw: Field text exactly as split from the line (may carry whitespace).

    Returns:
        int or float if the trimmed text is numeric, else `raw` unchanged.

    Example:
        >>> coerce_value("007")
        7
        >>> coerce_value("abc")
        'abc'
        >>> coerce_value("")
        0
    """
    number = _parse_number(raw.strip())
    return raw if number is None else number


def split_line(line: str, delimiter: str = DEFAULT_DELIMITER) -> List[str]:
    """Strip surrounding whitespace and the line terminator, then split on the delimiter."""
    return line.strip().split(delimiter)


def decode_row(
    line: str,
    schema: Sequence[str],
    delimiter: str = DEFAULT_DELIMITER,
) -> Row:
    """
    Decode one data line into a row aligned with the schema.

    **Functionally**:
      - Splits the stripped line on the delimiter.
      - Coerces each token with `coerce_value`.
      - Pairs tokens with schema names by position: extra tokens are dropped,
        missing trailing tokens leave their fields absent from the row.

    Args:
        line: Raw data line (line terminator allowed).
        schema: Ordered field names from the header.
        delimiter: Field delimiter (default ",").

    Returns:
        Read-only mapping of field name to decoded value.

    Example:
        >>> schema = ("unit price", "quantity", "percentage discount")
        >>> dict(decode_row("10,5\\n", schema))
        {'unit price': 10, 'quantity': 5}
    """
    values = [coerce_value(token) for token in split_line(line, delimiter)]
    return make_row(schema, values)
