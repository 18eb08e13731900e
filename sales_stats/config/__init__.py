"""
Configuration loading and validation for pipeline settings.

Provides a strongly typed settings object for the delimiter, encoding, accepted
input extension and output formatting, with upfront validation.
"""
