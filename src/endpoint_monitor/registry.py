"""
In-memory endpoint registry.

This module provides the EndpointRegistry, the single shared mutable resource
of the monitor. Every read and write takes an internal lock for the duration
of the access only; the lock is never held across network I/O. Callers that
need to iterate receive a snapshot copy instead of the live list.
"""

import logging
import threading
from enum import Enum
from typing import Iterable, List, Optional, Sequence, Tuple

from .domain import Endpoint, RegistryStats, Status, new_endpoint_id
from .errors import ValidationError

# Module logger
logger = logging.getLogger(__name__)

MIN_PORT = 1
MAX_PORT = 65535


class ReconcileMode(str, Enum):
    """
    How probe results are matched back to live registry entries.

    BY_ID matches on the endpoint's stable identifier. BY_POSITION matches on
    the index in the snapshot; it is only correct when the registry was not
    mutated while the cycle was in flight and is kept for behavioral parity
    with the positional scheme.
    """

    BY_ID = "id"
    BY_POSITION = "position"


def parse_port(port_text: str) -> int:
    """
    Parses a user-supplied port number.

    Args:
        port_text: The raw text typed by the user.

    Returns:
        int: The port, guaranteed to be within 1-65535.

    Raises:
        ValidationError: If the text is not an integer in range.
    """
    text = str(port_text).strip()
    if not (text.isascii() and text.isdigit()):
        raise ValidationError("port", f"Port must be a number, got {port_text!r}.")
    port = int(text)
    if not MIN_PORT <= port <= MAX_PORT:
        raise ValidationError("port", f"Port must be between {MIN_PORT} and {MAX_PORT}, got {port}.")
    return port


def ensure_unique_ids(endpoints: Iterable[Endpoint]) -> List[Endpoint]:
    """
    Returns the endpoints in order, giving a fresh id to any entry whose id
    was already used by an earlier one.
    """
    seen = set()
    result: List[Endpoint] = []
    for endpoint in endpoints:
        if endpoint.id in seen:
            logger.warning(f"Endpoint '{endpoint.name}' repeats id {endpoint.id}; assigning a new one")
            endpoint = endpoint._replace(id=new_endpoint_id())
        seen.add(endpoint.id)
        result.append(endpoint)
    return result


class EndpointRegistry:
    """
    An ordered, lock-protected collection of endpoints.

    Order reflects insertion order and is preserved by every operation.
    """

    def __init__(self, endpoints: Optional[Iterable[Endpoint]] = None) -> None:
        self._lock = threading.Lock()
        self._endpoints: List[Endpoint] = ensure_unique_ids(endpoints or [])

    def __len__(self) -> int:
        with self._lock:
            return len(self._endpoints)

    def add(self, name: str, host: str, port_text: str) -> Endpoint:
        """
        Validates user input and appends a new unchecked endpoint.

        Args:
            name: Display name, must not be blank.
            host: IP address or hostname, must not be blank.
            port_text: Port as typed by the user.

        Returns:
            Endpoint: The endpoint that was appended.

        Raises:
            ValidationError: If any field is invalid. The registry is left untouched.
        """
        name = (name or "").strip()
        host = (host or "").strip()
        if not name:
            raise ValidationError("name", "Name must not be empty.")
        if not host:
            raise ValidationError("host", "Host must not be empty.")
        port = parse_port(port_text)

        endpoint = Endpoint.create(name=name, host=host, port=port)
        with self._lock:
            self._endpoints.append(endpoint)
        logger.info(f"Added endpoint '{endpoint.name}' at {endpoint.url}")
        return endpoint

    def remove(self, index: int) -> Optional[Endpoint]:
        """
        Removes the endpoint at the given position.

        Out-of-range indices are ignored, since the caller may hold an index
        captured before a concurrent mutation.

        Returns:
            Optional[Endpoint]: The removed endpoint, or None if nothing was removed.
        """
        with self._lock:
            if not 0 <= index < len(self._endpoints):
                removed = None
            else:
                removed = self._endpoints.pop(index)
        if removed is None:
            logger.debug(f"Ignoring removal of out-of-range index {index}")
        else:
            logger.info(f"Removed endpoint '{removed.name}' at {removed.url}")
        return removed

    def remove_by_id(self, endpoint_id: str) -> Optional[Endpoint]:
        with self._lock:
            for i, endpoint in enumerate(self._endpoints):
                if endpoint.id == endpoint_id:
                    return self._endpoints.pop(i)
        return None

    def snapshot(self) -> List[Endpoint]:
        """Returns a point-in-time copy of the registry contents."""
        with self._lock:
            return list(self._endpoints)

    def stats(self) -> RegistryStats:
        with self._lock:
            total = len(self._endpoints)
            online = sum(1 for e in self._endpoints if e.status.is_online)
        return RegistryStats(total=total, online=online, offline=total - online)

    def replace_all(self, endpoints: Iterable[Endpoint]) -> None:
        new_endpoints = ensure_unique_ids(endpoints)
        with self._lock:
            self._endpoints = new_endpoints

    def reconcile(
        self,
        snapshot: Sequence[Endpoint],
        statuses: Sequence[Status],
        mode: ReconcileMode = ReconcileMode.BY_ID,
    ) -> Tuple[int, int]:
        """
        Writes the statuses produced for a snapshot back onto the live registry.

        statuses[i] belongs to snapshot[i]. With BY_ID each status is applied to
        the live endpoint carrying the same id, and dropped if that endpoint has
        since been removed. With BY_POSITION statuses[i] is applied to whatever
        endpoint currently sits at index i: after a concurrent removal results
        shift onto the wrong endpoints and trailing results are dropped.

        Args:
            snapshot: The endpoints that were probed, in snapshot order.
            statuses: One status per snapshot entry.
            mode: The matching strategy.

        Returns:
            Tuple[int, int]: (applied, dropped) counts.
        """
        applied = 0
        dropped = 0
        with self._lock:
            if mode is ReconcileMode.BY_POSITION:
                for i, status in enumerate(statuses):
                    if i < len(self._endpoints):
                        self._endpoints[i] = self._endpoints[i].with_status(status)
                        applied += 1
                    else:
                        dropped += 1
            else:
                positions = {e.id: i for i, e in enumerate(self._endpoints)}
                for endpoint, status in zip(snapshot, statuses):
                    i = positions.get(endpoint.id)
                    if i is None:
                        dropped += 1
                        continue
                    self._endpoints[i] = self._endpoints[i].with_status(status)
                    applied += 1

        if dropped:
            logger.info(f"Dropped {dropped} probe result(s) for endpoints no longer in the registry")
        return applied, dropped
