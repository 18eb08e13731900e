"""
Tests for settings loading and validation.
"""

import pytest

from sales_stats.config.settings import (
    ConfigurationError,
    SalesStatsSettings,
    get_settings,
    reset_settings,
)


def test_default_settings():
    settings = SalesStatsSettings()
    assert settings.delimiter == ","
    assert settings.encoding == "utf-8"
    assert settings.input_extension == "csv"
    assert settings.json_indent == 2


def test_from_env_reads_variables(monkeypatch):
    monkeypatch.setenv("SALES_STATS_DELIMITER", ";")
    monkeypatch.setenv("SALES_STATS_ENCODING", "latin-1")
    monkeypatch.setenv("SALES_STATS_INPUT_EXTENSION", "TXT")
    monkeypatch.setenv("SALES_STATS_JSON_INDENT", "4")

    settings = SalesStatsSettings.from_env()

    assert settings.delimiter == ";"
    assert settings.encoding == "latin-1"
    assert settings.input_extension == "txt"
    assert settings.json_indent == 4


def test_from_env_rejects_non_integer_indent(monkeypatch):
    monkeypatch.setenv("SALES_STATS_JSON_INDENT", "two")
    with pytest.raises(ConfigurationError, match="SALES_STATS_JSON_INDENT"):
        SalesStatsSettings.from_env()


@pytest.mark.parametrize(
    "kwargs",
    [
        {"delimiter": ""},
        {"delimiter": ",,"},
        {"delimiter": "\n"},
        {"encoding": ""},
        {"input_extension": ""},
        {"input_extension": ".csv"},
        {"json_indent": -1},
    ],
)
def test_invalid_settings_raise_configuration_error(kwargs):
    with pytest.raises(ConfigurationError):
        SalesStatsSettings(**kwargs)


def test_configuration_error_is_value_error():
    assert issubclass(ConfigurationError, ValueError)


def test_get_settings_is_cached_until_reset(monkeypatch):
    first = get_settings()
    monkeypatch.setenv("SALES_STATS_DELIMITER", "|")
    assert get_settings() is first

    reset_settings()
    assert get_settings().delimiter == "|"
