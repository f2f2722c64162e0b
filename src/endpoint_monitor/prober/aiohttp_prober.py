"""
HTTP prober implementation using the aiohttp library.

This module provides an implementation of the EndpointProber interface that
issues a single GET request per probe and classifies the outcome into an
endpoint Status.
"""

import logging
from typing import Optional

import aiohttp

from endpoint_monitor.config.constants import DEFAULT_PROBE_TIMEOUT
from endpoint_monitor.contracts import EndpointProber
from endpoint_monitor.domain import Status

# Module logger
logger = logging.getLogger(__name__)


class AiohttpProber(EndpointProber):
    """
    A concrete implementation of EndpointProber using the aiohttp library.

    It uses a shared aiohttp ClientSession. Each probe is a single GET with a
    bounded total timeout and no retries; the response body is never read.
    """

    def __init__(
        self,
        session: aiohttp.ClientSession,
        timeout: float = DEFAULT_PROBE_TIMEOUT,
    ) -> None:
        """
        Initializes the prober with a shared aiohttp ClientSession.

        Args:
            session: An active aiohttp.ClientSession to be used for requests.
            timeout: Total timeout in seconds applied to every probe.
        """
        self._session: aiohttp.ClientSession = session
        self._timeout: aiohttp.ClientTimeout = aiohttp.ClientTimeout(total=timeout)

    async def probe(self, url: str) -> Status:
        """
        Performs an HTTP GET against the URL and classifies the result.

        A response with a 2xx status is ONLINE, any other response is
        ERROR(status). Anything that prevents a response from being obtained
        (refused connection, DNS failure, timeout, malformed URL) is OFFLINE.

        Args:
            url: The URL to probe.

        Returns:
            Status: The classified status.
        """
        logger.debug(f"Probing {url}")
        status_code: Optional[int] = None

        try:
            async with self._session.get(url, timeout=self._timeout) as response:
                status_code = response.status
        except Exception as e:
            logger.debug(f"Probe of {url} failed: {type(e).__name__}: {e}")
            return Status.offline()

        status = Status.from_http_status(status_code)
        logger.debug(f"Probe of {url} returned {status_code} ({status.label})")
        return status
