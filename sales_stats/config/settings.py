"""
Configuration settings for the sales statistics pipeline.

**Conceptual**: This module provides a strongly-typed configuration object that
loads from environment variables (via .env files). Settings are validated at
startup, so a bad delimiter or indent fails before any input is read.

**What is configurable**:
  - Field delimiter used to split header and data lines.
  - Text encoding used to open the input file.
  - File extension the command line accepts for input files.
  - Indentation of the structured (JSON) output.

This module uses python-dotenv to load .env files and dataclasses for type safety.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

# Load .env from project root (dev/local environments); missing file is a no-op
env_path = Path(__file__).parent.parent.parent / ".env"
load_dotenv(dotenv_path=env_path)


class ConfigurationError(ValueError):
    """
    Raised when settings or command-line arguments are invalid.

    **Conceptual**: Covers everything the user can fix before a run starts:
    missing or malformed arguments, an input path that does not exist or has
    the wrong extension, an output directory that does not exist, and invalid
    environment values. The message is meant to be shown to the user as-is.
    """
    pass


@dataclass(frozen=True)
class SalesStatsSettings:
    """
    Configuration for reading sales CSVs and writing results.

    Attributes:
        delimiter: Single character separating fields (default ",").
                   Quoting and escaping are not honored.
        encoding: Text encoding of the input file (default "utf-8").
        input_extension: Extension (without dot, case-insensitive) that input
                         paths must carry (default "csv").
        json_indent: Indentation for the structured JSON output (default 2).
    """
    delimiter: str = ","
    encoding: str = "utf-8"
    input_extension: str = "csv"
    json_indent: int = 2

    def __post_init__(self):
        """Validate settings after initialization."""
        if len(self.delimiter) != 1:
            raise ConfigurationError(
                f"Delimiter must be exactly one character, got: {self.delimiter!r}"
            )
        if self.delimiter in ("\n", "\r"):
            raise ConfigurationError("Delimiter cannot be a line break.")
        if not self.encoding:
            raise ConfigurationError("Encoding must not be empty.")
        if not self.input_extension or "." in self.input_extension:
            raise ConfigurationError(
                f"Input extension must be a bare extension like 'csv', got: {self.input_extension!r}"
            )
        if self.json_indent < 0:
            raise ConfigurationError(
                f"JSON indent must be non-negative, got: {self.json_indent}"
            )

    @classmethod
    def from_env(cls) -> "SalesStatsSettings":
        """
        Load settings from environment variables.

        **Environment variables** (all optional):
          - SALES_STATS_DELIMITER: field delimiter (default ",").
          - SALES_STATS_ENCODING: input encoding (default "utf-8").
          - SALES_STATS_INPUT_EXTENSION: accepted input extension (default "csv").
          - SALES_STATS_JSON_INDENT: JSON indentation (default 2).

        Returns:
            SalesStatsSettings object with values loaded from environment.

        Raises:
            ConfigurationError: If any variable has an invalid value.

        Usage example:
            >>> # In .env file:
            >>> # SALES_STATS_DELIMITER=;
            >>>
            >>> settings = SalesStatsSettings.from_env()
            >>> print(settings.delimiter)  # ";"
        """
        delimiter = os.getenv("SALES_STATS_DELIMITER", ",")
        encoding = os.getenv("SALES_STATS_ENCODING", "utf-8")
        input_extension = os.getenv("SALES_STATS_INPUT_EXTENSION", "csv").strip().lower()
        indent_str = os.getenv("SALES_STATS_JSON_INDENT", "2")

        try:
            json_indent = int(indent_str)
        except ValueError:
            raise ConfigurationError(
                f"SALES_STATS_JSON_INDENT must be an integer, got: {indent_str}"
            )

        return cls(
            delimiter=delimiter,
            encoding=encoding,
            input_extension=input_extension,
            json_indent=json_indent,
        )


# Cached settings for the process; tests should build SalesStatsSettings directly
# or call reset_settings() after changing the environment.
_default_settings: Optional[SalesStatsSettings] = None


def get_settings() -> SalesStatsSettings:
    """
    Get the global settings singleton.

    Settings are loaded from the environment on first call, then cached.

    Returns:
        Global SalesStatsSettings instance.

    Raises:
        ConfigurationError: If the environment holds invalid values.
    """
    global _default_settings

    if _default_settings is None:
        _default_settings = SalesStatsSettings.from_env()

    return _default_settings


def reset_settings():
    """
    Reset the global settings singleton (for testing).

    **Testing pattern**:
      ```python
      def test_something(monkeypatch):
          monkeypatch.setenv("SALES_STATS_DELIMITER", ";")
          reset_settings()
          assert get_settings().delimiter == ";"
      ```
    """
    global _default_settings
    _default_settings = None
