"""
Header schema, row decoding, and file I/O for sales line-item CSVs.

Handles resolving the header, coercing raw fields into numbers or text, and
reading input / writing results at a single I/O boundary.
"""
