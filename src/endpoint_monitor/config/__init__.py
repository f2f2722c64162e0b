"""
Configuration module for the endpoint monitoring system.

This module provides functionality to parse command-line arguments and environment
variables to create a configuration context for the monitor. It defines
default values and help text for all configurable parameters.
"""

import argparse
import os
from typing import Any, List, Optional
from uuid import uuid4

from endpoint_monitor.config.constants import (
    DEFAULT_AUTO_CHECK,
    DEFAULT_CHECK_INTERVAL,
    DEFAULT_CHECK_ON_START,
    DEFAULT_CONFIG_FILE,
    DEFAULT_CONFIG_FILENAME,
    DEFAULT_LOGGING_CONFIG_FILE,
    DEFAULT_LOGGING_TYPE,
    DEFAULT_MONITOR_ID_PREFIX,
    DEFAULT_OVERLAP_POLICY,
    DEFAULT_PROBE_TIMEOUT,
    DEFAULT_RECONCILE_MODE,
    DEFAULT_SAVE_ON_EXIT,
    DEFAULT_TICK_INTERVAL,
)
from endpoint_monitor.config.monitoring_context import MonitoringContext

RECONCILE_MODES = ("id", "position")
OVERLAP_POLICIES = ("coalesce", "concurrent")


def _is_true(value: str) -> bool:
    return str(value).strip().lower() == "true"


def _positive_float(value: str) -> float:
    number = float(value)
    if number <= 0:
        raise argparse.ArgumentTypeError(f"must be a positive number, got {value}")
    return number


def get_context(argv: Optional[List[str]] = None) -> MonitoringContext:
    """
    Parse command-line arguments and environment variables to create a configuration context.

    For each option, the command-line argument wins, then the environment
    variable, and finally the default value.

    Args:
        argv: Arguments to parse; defaults to sys.argv[1:].

    Returns:
        MonitoringContext: A configuration context object containing all parsed settings.
    """
    parser = argparse.ArgumentParser(
        description="Monitors the reachability of a list of HTTP endpoints."
    )

    parser.add_argument(
        "-cf",
        "--config-file",
        type=str,
        default=os.getenv("ENDPOINT_MONITOR_CONFIG_FILE", DEFAULT_CONFIG_FILE),
        help="Path to the JSON file holding the endpoint list.\n"
        "If not provided, the value is read from the ENDPOINT_MONITOR_CONFIG_FILE environment variable.\n"
        f"If that is also absent, {DEFAULT_CONFIG_FILENAME} in the working directory (next to a frozen executable) is used.",
    )

    parser.add_argument(
        "-ci",
        "--check-interval",
        type=_positive_float,
        default=_positive_float(os.getenv("ENDPOINT_MONITOR_CHECK_INTERVAL", DEFAULT_CHECK_INTERVAL)),
        help="Seconds between automatic check cycles.\n"
        "If not provided, the value is read from the ENDPOINT_MONITOR_CHECK_INTERVAL environment variable.\n"
        f"If that is also absent, a default value of {DEFAULT_CHECK_INTERVAL} is used.",
    )

    parser.add_argument(
        "-ti",
        "--tick-interval",
        type=_positive_float,
        default=_positive_float(os.getenv("ENDPOINT_MONITOR_TICK_INTERVAL", DEFAULT_TICK_INTERVAL)),
        help="Seconds between scheduler ticks.\n"
        "If not provided, the value is read from the ENDPOINT_MONITOR_TICK_INTERVAL environment variable.\n"
        f"If that is also absent, a default value of {DEFAULT_TICK_INTERVAL} is used.",
    )

    parser.add_argument(
        "-pt",
        "--probe-timeout",
        type=_positive_float,
        default=_positive_float(os.getenv("ENDPOINT_MONITOR_PROBE_TIMEOUT", DEFAULT_PROBE_TIMEOUT)),
        help="Total timeout in seconds for a single HTTP probe.\n"
        "If not provided, the value is read from the ENDPOINT_MONITOR_PROBE_TIMEOUT environment variable.\n"
        f"If that is also absent, a default value of {DEFAULT_PROBE_TIMEOUT} is used.",
    )

    parser.add_argument(
        "-ac",
        "--auto-check",
        type=str,
        default=os.getenv("ENDPOINT_MONITOR_AUTO_CHECK", DEFAULT_AUTO_CHECK),
        help="Whether automatic periodic checks are enabled (true/false).\n"
        "If not provided, the value is read from the ENDPOINT_MONITOR_AUTO_CHECK environment variable.\n"
        f"If that is also absent, a default value of {DEFAULT_AUTO_CHECK} is used.",
    )

    parser.add_argument(
        "-cos",
        "--check-on-start",
        type=str,
        default=os.getenv("ENDPOINT_MONITOR_CHECK_ON_START", DEFAULT_CHECK_ON_START),
        help="Whether to run a check cycle immediately at startup (true/false).\n"
        "If not provided, the value is read from the ENDPOINT_MONITOR_CHECK_ON_START environment variable.\n"
        f"If that is also absent, a default value of {DEFAULT_CHECK_ON_START} is used.",
    )

    parser.add_argument(
        "-rm",
        "--reconcile-mode",
        type=str.lower,
        choices=RECONCILE_MODES,
        default=os.getenv("ENDPOINT_MONITOR_RECONCILE_MODE", DEFAULT_RECONCILE_MODE).lower(),
        help="How probe results are matched back to endpoints: by stable 'id' or by 'position'.\n"
        "If not provided, the value is read from the ENDPOINT_MONITOR_RECONCILE_MODE environment variable.\n"
        f"If that is also absent, a default value of {DEFAULT_RECONCILE_MODE} is used.",
    )

    parser.add_argument(
        "-op",
        "--overlap-policy",
        type=str.lower,
        choices=OVERLAP_POLICIES,
        default=os.getenv("ENDPOINT_MONITOR_OVERLAP_POLICY", DEFAULT_OVERLAP_POLICY).lower(),
        help="What a trigger does while a cycle is running: 'coalesce' into it or start a 'concurrent' one.\n"
        "If not provided, the value is read from the ENDPOINT_MONITOR_OVERLAP_POLICY environment variable.\n"
        f"If that is also absent, a default value of {DEFAULT_OVERLAP_POLICY} is used.",
    )

    parser.add_argument(
        "-soe",
        "--save-on-exit",
        type=str,
        default=os.getenv("ENDPOINT_MONITOR_SAVE_ON_EXIT", DEFAULT_SAVE_ON_EXIT),
        help="Whether the endpoint list is saved when the monitor stops (true/false).\n"
        "If not provided, the value is read from the ENDPOINT_MONITOR_SAVE_ON_EXIT environment variable.\n"
        f"If that is also absent, a default value of {DEFAULT_SAVE_ON_EXIT} is used.",
    )

    parser.add_argument(
        "--once",
        action="store_true",
        help="Run a single check cycle, print the result and exit.",
    )

    parser.add_argument(
        "-mid",
        "--monitor-id",
        type=str,
        default=os.getenv("ENDPOINT_MONITOR_ID", f"{DEFAULT_MONITOR_ID_PREFIX}{uuid4()}"),
        help="Specifies the identifier of this monitor instance.\n"
        "If not provided, the value is read from the ENDPOINT_MONITOR_ID environment variable.\n"
        f"If that is also absent, the default value will be {DEFAULT_MONITOR_ID_PREFIX}uuid4().",
    )

    parser.add_argument(
        "-lt",
        "--logging-type",
        type=str,
        default=os.getenv("ENDPOINT_MONITOR_LOGGING_TYPE", DEFAULT_LOGGING_TYPE),
        help="Specifies the logging configuration type to use.\n"
        "Allowed values: dev, prod, custom (case insensitive).\n"
        "For 'dev' and 'prod', system will use built-in configurations.\n"
        "For 'custom', the --logging-config-file argument is required.",
    )

    parser.add_argument(
        "-lcf",
        "--logging-config-file",
        type=str,
        default=os.getenv("ENDPOINT_MONITOR_LOGGING_CONFIG_FILE", DEFAULT_LOGGING_CONFIG_FILE),
        help="Path to custom logging configuration file.\n"
        "Required when --logging-type is set to 'custom'.",
    )

    # Parse the command-line arguments
    args: Any = parser.parse_args(argv)

    # Create and return a MonitoringContext with the parsed settings
    return MonitoringContext(
        monitor_id=args.monitor_id,
        config_file=args.config_file,
        check_interval=args.check_interval,
        tick_interval=args.tick_interval,
        probe_timeout=args.probe_timeout,
        auto_check=_is_true(args.auto_check),
        check_on_start=_is_true(args.check_on_start),
        reconcile_mode=args.reconcile_mode,
        overlap_policy=args.overlap_policy,
        save_on_exit=_is_true(args.save_on_exit),
        once=args.once,
        logging_type=args.logging_type,
        logging_config_file=args.logging_config_file,
    )
