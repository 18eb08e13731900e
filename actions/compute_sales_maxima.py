#!/usr/bin/env python3
"""
Compute running-maximum sales statistics from a line-item CSV.

**Purpose**: Reads a sales CSV once and reports, for each metric, the highest
score seen and the row that produced it:
  - maxAmountWithoutDiscount: unit price * quantity
  - maxAmountWithDiscount: unit price * quantity * (1 - discount / 100)
  - maxQuantity: quantity
  - maxDiffWithDiscount: quantity * unit price * discount / 100

**Usage**:
    python actions/compute_sales_maxima.py data/sales.csv
    python actions/compute_sales_maxima.py data/sales.csv data/results
    python actions/compute_sales_maxima.py data/sales.csv data/results --summary-csv

**Outputs**:
  - Without OUTPUT_DIR: the text report is printed to stdout.
  - With OUTPUT_DIR: the structured view is saved as OUTPUT_DIR/<input name>.json
    (and OUTPUT_DIR/<input name>_summary.csv with --summary-csv).

Status lines go to stderr so stdout carries only the report.

**Exit codes**:
  - 0: Success
  - 1: Configuration error (bad arguments, missing paths, wrong extension)
  - 2: Fatal error while reading input or writing output
  - 130: Interrupted
"""

import argparse
import sys
from pathlib import Path
from typing import Optional, Sequence

# Add project root to Python path so we can import sales_stats modules
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from sales_stats.config.settings import (
    ConfigurationError,
    SalesStatsSettings,
    get_settings,
)
from sales_stats.analytics.aggregation import aggregate_file
from sales_stats.data.io import (
    structured_output_path,
    summary_output_path,
    write_structured_json,
    write_summary_csv,
)
from sales_stats.reporting.views import (
    build_structured_view,
    build_summary_frame,
    build_text_view,
)


def status(message: str) -> None:
    """Print a progress line to stderr."""
    print(message, file=sys.stderr)


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """
    Parse command line arguments.

    Returns:
        Namespace with attributes: input_path (str), output_dir (str | None),
        summary_csv (bool), delimiter (str | None).
    """
    parser = argparse.ArgumentParser(
        description="Compute running-maximum statistics from a sales line-item CSV",
        epilog="""
Examples:
  # Print the report to the console
  python actions/compute_sales_maxima.py data/sales.csv

  # Save data/results/sales.json
  python actions/compute_sales_maxima.py data/sales.csv data/results

  # Semicolon-separated input, also save a CSV summary
  python actions/compute_sales_maxima.py data/sales.csv data/results --delimiter ";" --summary-csv
        """,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "input_path",
        help="Path to the input CSV file (header line first)",
    )

    parser.add_argument(
        "output_dir",
        nargs="?",
        default=None,
        help="Existing directory to write <input name>.json into (default: print to console)",
    )

    parser.add_argument(
        "--summary-csv",
        action="store_true",
        help="Also write <input name>_summary.csv into OUTPUT_DIR",
    )

    parser.add_argument(
        "--delimiter",
        type=str,
        default=None,
        help="Field delimiter (default: SALES_STATS_DELIMITER or ',')",
    )

    return parser.parse_args(argv)


def validate_input_path(path_str: str, settings: SalesStatsSettings) -> Path:
    """
    Validate the input path: it must exist, be a file, and carry the expected extension.

    Relative paths resolve against the current working directory.

    Raises:
        ConfigurationError: If any check fails.
    """
    path_str = path_str.strip()
    if not path_str:
        raise ConfigurationError("Input CSV path not provided.")

    path = Path(path_str)

    if not path.exists():
        raise ConfigurationError(
            f"The provided input file does not exist: {path}. Check the path."
        )

    if not path.is_file():
        raise ConfigurationError(f"The provided input path is not a file: {path}")

    extension = path.suffix.lstrip(".").lower()
    if extension != settings.input_extension.lower():
        raise ConfigurationError(
            f"The provided file is not a {settings.input_extension.upper()} file: {path}"
        )

    return path


def validate_output_dir(path_str: Optional[str]) -> Optional[Path]:
    """
    Validate the optional output directory: if given, it must already exist.

    Returns:
        The directory as a Path, or None if not provided.

    Raises:
        ConfigurationError: If the directory does not exist or is not a directory.
    """
    if path_str is None:
        return None

    path = Path(path_str.strip())

    if not path.exists():
        raise ConfigurationError(
            f"The provided output directory does not exist: {path}. Check the path."
        )

    if not path.is_dir():
        raise ConfigurationError(f"The provided output path is not a directory: {path}")

    return path


def resolve_settings(delimiter: Optional[str]) -> SalesStatsSettings:
    """Load settings from the environment and apply command-line overrides."""
    settings = get_settings()
    if delimiter is None:
        return settings
    return SalesStatsSettings(
        delimiter=delimiter,
        encoding=settings.encoding,
        input_extension=settings.input_extension,
        json_indent=settings.json_indent,
    )


def run(args: argparse.Namespace) -> None:
    """
    Validate arguments, aggregate the input, and emit the requested view.

    Raises:
        ConfigurationError: On invalid arguments or settings.
        InputReadError: If the input can't be read.
        OSError: If an output file can't be written.
    """
    settings = resolve_settings(args.delimiter)
    input_path = validate_input_path(args.input_path, settings)
    output_dir = validate_output_dir(args.output_dir)

    if args.summary_csv and output_dir is None:
        raise ConfigurationError("--summary-csv requires an output directory.")

    status(f"Reading {input_path}...")
    result = aggregate_file(input_path, settings=settings)

    if not result.has_header:
        status("  ⚠ Input is empty (no header line)")
    status(f"  ✓ Processed {result.rows_processed} data rows")

    if output_dir is None:
        print(build_text_view(result, indent=settings.json_indent))
        return

    json_path = structured_output_path(input_path, output_dir)
    write_structured_json(build_structured_view(result), json_path, indent=settings.json_indent)
    status(f"  ✓ Saved results: {json_path}")

    if args.summary_csv:
        csv_path = summary_output_path(input_path, output_dir)
        write_summary_csv(build_summary_frame(result), csv_path)
        status(f"  ✓ Saved summary: {csv_path}")


def main(argv: Optional[Sequence[str]] = None) -> None:
    """
    Main entry point for the script.

    **Error handling strategy**:
      - Configuration problems: one "Error: ..." line, exit 1.
      - Read/write failures: one "Error: ..." line, exit 2. Nothing partial
        is written because views are only built after the full pass.
      - Unexpected errors: stack trace, exit 2.
    """
    try:
        args = parse_args(argv)
        run(args)
        sys.exit(0)

    except ConfigurationError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    except OSError as e:
        # InputReadError included
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(2)

    except KeyboardInterrupt:
        print("\nInterrupted by user. Exiting...", file=sys.stderr)
        sys.exit(130)

    except Exception as e:
        print(f"Fatal error: {e}", file=sys.stderr)
        import traceback
        traceback.print_exc()
        sys.exit(2)


if __name__ == "__main__":
    main()
