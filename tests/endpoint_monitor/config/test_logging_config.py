"""
Unit tests for the logging configuration module.

dictConfig is mocked so the tests never reconfigure the test runner's logging.
"""

import json
import logging
from pathlib import Path
from typing import Iterator
from unittest.mock import patch

import pytest

from endpoint_monitor.config.logging_config import (
    _get_local_package_file_path,
    _load_logging_config,
    _MonitorIdFilter,
    configure_logging,
)
from endpoint_monitor.config.monitoring_context import MonitoringContext


def _context(logging_type: str, logging_config_file: str = "") -> MonitoringContext:
    return MonitoringContext(
        monitor_id="test-monitor",
        config_file="",
        check_interval=30.0,
        tick_interval=0.1,
        probe_timeout=5.0,
        auto_check=True,
        check_on_start=True,
        reconcile_mode="id",
        overlap_policy="coalesce",
        save_on_exit=False,
        once=False,
        logging_type=logging_type,
        logging_config_file=logging_config_file,
    )


@pytest.fixture(autouse=True)
def remove_monitor_filters() -> Iterator[None]:
    yield
    root = logging.getLogger()
    for owner in [root, *root.handlers]:
        for f in list(owner.filters):
            if isinstance(f, _MonitorIdFilter):
                owner.removeFilter(f)


@pytest.mark.parametrize(
    "logging_type, file_name",
    [("dev", "logging-config-dev.json"), ("PROD", "logging-config-prod.json")],
)
def test_configure_logging_should_load_builtin_config(logging_type: str, file_name: str) -> None:
    # Arrange
    expected = json.loads(Path(_get_local_package_file_path(file_name)).read_text())

    # Act
    with patch("logging.config.dictConfig") as mock_dict_config:
        configure_logging(_context(logging_type))

    # Assert
    mock_dict_config.assert_called_once_with(expected)
    assert any(isinstance(f, _MonitorIdFilter) for f in logging.getLogger().filters)


def test_configure_logging_should_load_custom_file(tmp_path: Path) -> None:
    # Arrange
    config_file = tmp_path / "logging.json"
    config_file.write_text(json.dumps({"version": 1}))

    # Act
    with patch("logging.config.dictConfig") as mock_dict_config:
        configure_logging(_context("custom", str(config_file)))

    # Assert
    mock_dict_config.assert_called_once_with({"version": 1})


def test_configure_logging_should_require_custom_file() -> None:
    with pytest.raises(ValueError, match="Custom logging configuration file must be provided"):
        configure_logging(_context("custom"))


@pytest.mark.parametrize("logging_type", ["", "verbose"])
def test_configure_logging_should_reject_invalid_type(logging_type: str) -> None:
    with pytest.raises(ValueError):
        configure_logging(_context(logging_type))


def test_load_logging_config_should_raise_for_missing_file(tmp_path: Path) -> None:
    with pytest.raises(RuntimeError, match="not found"):
        _load_logging_config(str(tmp_path / "absent.json"))


def test_load_logging_config_should_raise_for_invalid_json(tmp_path: Path) -> None:
    config_file = tmp_path / "broken.json"
    config_file.write_text("{broken")

    with pytest.raises(RuntimeError, match="Invalid JSON"):
        _load_logging_config(str(config_file))


def test_builtin_configs_should_format_with_monitor_id() -> None:
    dev = json.loads(Path(_get_local_package_file_path("logging-config-dev.json")).read_text())

    assert "%(monitor_id)s" in dev["formatters"]["detailed"]["format"]


def test_monitor_id_filter_should_stamp_records() -> None:
    record = logging.LogRecord("test", logging.INFO, __file__, 1, "message", None, None)

    assert _MonitorIdFilter("monitor-1").filter(record) is True
    assert record.monitor_id == "monitor-1"
