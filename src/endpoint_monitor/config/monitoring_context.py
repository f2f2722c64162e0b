"""
Configuration context for the endpoint monitoring system.

This module defines a data structure that holds all configuration parameters
for the monitor. It serves as a central point for passing configuration
throughout the application.
"""

from typing import NamedTuple


class MonitoringContext(NamedTuple):
    """
    A data structure containing all configuration parameters for the monitor.

    This class is immutable and is created by parsing command-line arguments
    and environment variables.

    Attributes:
        monitor_id: Unique identifier for this monitor instance, stamped on log records.
        config_file: Path to the endpoint configuration file; empty means the default location (next to a frozen executable, else the working directory).
        check_interval: Seconds between automatic check cycles.
        tick_interval: Seconds between scheduler ticks.
        probe_timeout: Total timeout in seconds for a single HTTP probe.
        auto_check: Whether automatic checks start enabled.
        check_on_start: Whether to run a check cycle immediately at startup.
        reconcile_mode: How results are matched back to endpoints ('id' or 'position').
        overlap_policy: What a trigger does while a cycle runs ('coalesce' or 'concurrent').
        save_on_exit: Whether the registry is saved when the monitor stops.
        once: Run a single check cycle, render it and exit.
        logging_type: Type of logging configuration to use (dev, prod, or custom).
        logging_config_file: Path to custom logging configuration file (if logging_type is 'custom').
    """

    monitor_id: str
    config_file: str
    check_interval: float
    tick_interval: float
    probe_timeout: float
    auto_check: bool
    check_on_start: bool
    reconcile_mode: str
    overlap_policy: str
    save_on_exit: bool
    once: bool
    logging_type: str
    logging_config_file: str
