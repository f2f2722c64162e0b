"""
HTTP client configuration module for the endpoint monitoring system.

This module creates the shared aiohttp session used by every probe.
"""

import logging

import aiohttp

from endpoint_monitor.config import MonitoringContext

# Module logger
logger = logging.getLogger(__name__)


def get_http_session(context: MonitoringContext) -> aiohttp.ClientSession:
    """
    Create an HTTP client session whose default timeout is the probe timeout.

    Must be called while an event loop is running.

    Args:
        context: Configuration context containing HTTP client settings.

    Returns:
        aiohttp.ClientSession: A session shared by all probes.
    """
    timeout = aiohttp.ClientTimeout(total=context.probe_timeout)
    logger.debug(f"Creating HTTP session with a {context.probe_timeout}s total timeout")
    return aiohttp.ClientSession(timeout=timeout)
