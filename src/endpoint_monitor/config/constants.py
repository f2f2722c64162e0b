"""
Constants for the endpoint monitoring system.

This module defines default values for all configurable parameters
of the monitor. These constants are used as fallback values when neither
command-line arguments nor environment variables are provided.
"""

# Registry persistence defaults
DEFAULT_CONFIG_FILENAME = "servers.json"
DEFAULT_CONFIG_FILE = ""

# Built-in endpoint set used when the configuration file cannot be loaded
DEFAULT_HOST = "143.86.170.164"
DEFAULT_PORTS = (8025, 8081, 8000, 3000, 8061, 8080, 8086, 8082, 11434)

# Scheduling defaults (seconds)
DEFAULT_CHECK_INTERVAL = 30.0
DEFAULT_TICK_INTERVAL = 0.1
DEFAULT_AUTO_CHECK = "true"
DEFAULT_CHECK_ON_START = "true"

# HTTP probe defaults (seconds)
DEFAULT_PROBE_TIMEOUT = 5.0

# Cycle behaviour defaults
DEFAULT_RECONCILE_MODE = "id"
DEFAULT_OVERLAP_POLICY = "coalesce"
DEFAULT_SAVE_ON_EXIT = "false"

# Instance identification defaults
DEFAULT_MONITOR_ID_PREFIX = "endpoint-monitor-"

# Logging configuration defaults
DEFAULT_LOGGING_TYPE = "prod"
DEFAULT_LOGGING_CONFIG_FILE = ""
