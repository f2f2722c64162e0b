"""
Logging configuration module for the endpoint monitoring system.

This module configures logging for the application based on the provided
configuration context. It supports built-in development and production
configurations as well as a custom configuration file.
"""

import json
import logging.config
import os
from typing import Any, Dict

from endpoint_monitor.config.monitoring_context import MonitoringContext


def configure_logging(context: MonitoringContext) -> None:
    """
    Configure logging for the application based on the provided configuration.

    Supported logging types:
    - dev: Development logging configuration
    - prod: Production logging configuration
    - custom: Custom logging configuration from a specified file

    It also adds a monitor ID filter to the root logger's handlers so every
    record can be traced back to the monitor instance that emitted it.

    Args:
        context: Configuration context containing logging settings.

    Raises:
        ValueError: If the logging type is invalid or if a custom logging
            configuration file is not provided when using the 'custom' type.
    """
    logging_type: str = context.logging_type.lower()
    if not logging_type:
        raise ValueError("Logging type must be provided.")
    elif logging_type == "dev":
        file_path = _get_local_package_file_path("logging-config-dev.json")
        _load_logging_config(file_path)
    elif logging_type == "prod":
        file_path = _get_local_package_file_path("logging-config-prod.json")
        _load_logging_config(file_path)
    elif logging_type == "custom":
        if not context.logging_config_file:
            raise ValueError("Custom logging configuration file must be provided.")
        else:
            _load_logging_config(context.logging_config_file)
    else:
        raise ValueError(
            f"Invalid logging type: {context.logging_type}. Allowed values are: dev, prod, custom"
        )

    # Records from child loggers skip logger-level filters on the root,
    # so the filter goes on the handlers.
    instance_filter = _MonitorIdFilter(monitor_id=context.monitor_id)
    root_logger = logging.getLogger()
    root_logger.addFilter(instance_filter)
    for handler in root_logger.handlers:
        handler.addFilter(instance_filter)

    logging.debug("Logging configured and MonitorIdFilter added.")


def _load_logging_config(config_file: str) -> None:
    """
    Load logging configuration from a JSON file and apply it with dictConfig.

    Args:
        config_file: Path to the JSON file containing logging configuration.

    Raises:
        RuntimeError: If the file is not found, contains invalid JSON, or
            if there is any other error loading the configuration.
    """
    try:
        with open(config_file) as f:
            config: Dict[str, Any] = json.load(f)
            logging.config.dictConfig(config)
    except FileNotFoundError as err:
        raise RuntimeError(f"Logging config file not found: {config_file}") from err
    except json.JSONDecodeError as err:
        raise RuntimeError(f"Invalid JSON format in logging config file: {config_file}") from err
    except Exception as err:
        raise RuntimeError(f"Error loading logging config: {str(err)}") from err


def _get_local_package_file_path(config_file: str) -> str:
    """
    Get the absolute path to a file shipped in the same directory as this module.

    Args:
        config_file: Name of the file to locate.

    Returns:
        str: Absolute path to the specified file.
    """
    return os.path.join(os.path.dirname(__file__), config_file)


class _MonitorIdFilter(logging.Filter):
    """
    A logging filter that injects the monitor ID into every log record.

    Formatters can then reference '%(monitor_id)s'.
    """

    def __init__(self, monitor_id: str) -> None:
        super().__init__()
        self._monitor_id: str = monitor_id

    def filter(self, record: logging.LogRecord) -> bool:
        record.monitor_id = self._monitor_id
        return True
