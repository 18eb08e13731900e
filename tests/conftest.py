"""
Pytest configuration file.

Ensures the repo root is on sys.path so that 'import sales_stats...' and
'import actions...' work, and isolates tests from SALES_STATS_* variables.
"""
import sys
from pathlib import Path

import pytest

# Add the repo root to sys.path
repo_root = Path(__file__).parent.parent
if str(repo_root) not in sys.path:
    sys.path.insert(0, str(repo_root))

from sales_stats.config.settings import reset_settings


SETTINGS_ENV_VARS = (
    "SALES_STATS_DELIMITER",
    "SALES_STATS_ENCODING",
    "SALES_STATS_INPUT_EXTENSION",
    "SALES_STATS_JSON_INDENT",
)


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch):
    """Clear settings variables and the cached settings around every test."""
    for name in SETTINGS_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def write_csv(tmp_path):
    """Return a helper that writes lines to a CSV file under tmp_path."""
    def _write(lines, name="sales.csv"):
        path = tmp_path / name
        path.write_text("".join(f"{line}\n" for line in lines), encoding="utf-8")
        return path
    return _write
