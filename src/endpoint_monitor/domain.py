"""
Domain models for the endpoint monitoring system.

This module defines the core data structures used throughout the application:
endpoint statuses, monitored endpoints, probe outcomes and cycle reports.
These models are immutable so that registry snapshots can be shared freely
between the scheduler, the orchestrator and the presentation layer.
"""

from enum import Enum
from typing import List, NamedTuple, Optional, Tuple
from uuid import uuid4

RGB = Tuple[int, int, int]

SUCCESS_STATUS_MIN = 200
SUCCESS_STATUS_MAX = 299


class StatusKind(str, Enum):
    """
    Enumerates the mutually exclusive states an endpoint can be in.

    Inheriting from 'str' keeps the members JSON friendly; the values double
    as the tags written to the configuration file.
    """

    UNCHECKED = "Unchecked"
    ONLINE = "Online"
    OFFLINE = "Offline"
    ERROR = "Error"


class Status(NamedTuple):
    """
    The last known state of an endpoint.

    Only ERROR carries a payload: the HTTP status code of the failing
    response. Use the factory methods rather than the constructor.

    Attributes:
        kind: Which variant this status is.
        code: The HTTP status code for ERROR, None for every other kind.
    """

    kind: StatusKind
    code: Optional[int] = None

    @classmethod
    def unchecked(cls) -> "Status":
        return cls(StatusKind.UNCHECKED)

    @classmethod
    def online(cls) -> "Status":
        return cls(StatusKind.ONLINE)

    @classmethod
    def offline(cls) -> "Status":
        return cls(StatusKind.OFFLINE)

    @classmethod
    def error(cls, code: int) -> "Status":
        return cls(StatusKind.ERROR, int(code))

    @classmethod
    def from_http_status(cls, status_code: int) -> "Status":
        """
        Classifies an HTTP response status code.

        Args:
            status_code: The status code of a response that was received.

        Returns:
            Status: ONLINE for 2xx codes, ERROR(status_code) otherwise.
        """
        if SUCCESS_STATUS_MIN <= status_code <= SUCCESS_STATUS_MAX:
            return cls.online()
        return cls.error(status_code)

    @property
    def is_online(self) -> bool:
        return self.kind is StatusKind.ONLINE

    @property
    def label(self) -> str:
        """Display string for the presentation layer."""
        if self.kind is StatusKind.ONLINE:
            return "Online"
        if self.kind is StatusKind.OFFLINE:
            return "Offline"
        if self.kind is StatusKind.ERROR:
            return f"Error ({self.code})"
        return "Unchecked"

    @property
    def color(self) -> RGB:
        """Display color for the presentation layer, as an RGB tuple."""
        if self.kind is StatusKind.ONLINE:
            return (0, 150, 0)
        if self.kind is StatusKind.OFFLINE:
            return (200, 0, 0)
        if self.kind is StatusKind.ERROR:
            return (255, 165, 0)
        return (128, 128, 128)


def new_endpoint_id() -> str:
    return uuid4().hex


def build_url(host: str, port: int) -> str:
    return f"http://{host}:{port}"


class Endpoint(NamedTuple):
    """
    Represents a single monitored network target.

    The URL is derived from host and port on every access, so an edited
    endpoint can never carry a stale URL.

    Attributes:
        id: Stable unique identifier, used to reconcile probe results.
        name: Display label; not required to be unique.
        host: IP address or hostname.
        port: TCP port, 1-65535.
        status: Last known status.
    """

    id: str
    name: str
    host: str
    port: int
    status: Status = Status.unchecked()

    @classmethod
    def create(cls, name: str, host: str, port: int) -> "Endpoint":
        return cls(id=new_endpoint_id(), name=name, host=host, port=port)

    @property
    def url(self) -> str:
        return build_url(self.host, self.port)

    def with_status(self, status: Status) -> "Endpoint":
        return self._replace(status=status)

    def with_address(self, host: str, port: int) -> "Endpoint":
        return self._replace(host=host, port=port)


class RegistryStats(NamedTuple):
    """
    Aggregate counters shown in the presentation header.

    'offline' is every endpoint that is not ONLINE, including unchecked and
    erroring ones, so total == online + offline always holds.
    """

    total: int
    online: int
    offline: int


class ProbeOutcome(NamedTuple):
    """
    The result of probing one endpoint during a check cycle.

    Attributes:
        endpoint: The endpoint as it was in the cycle's snapshot.
        status: The freshly classified status.
        start_time: The start time from time.time() in seconds.
        end_time: The end time from time.time() in seconds.
    """

    endpoint: Endpoint
    status: Status
    start_time: float
    end_time: float

    @property
    def previous(self) -> Status:
        return self.endpoint.status

    @property
    def changed(self) -> bool:
        return self.previous != self.status


class CycleReport(NamedTuple):
    """
    Summary of one completed check cycle.

    Attributes:
        started_at: time.time() when the snapshot was taken.
        finished_at: time.time() after reconciliation.
        outcomes: One outcome per endpoint in the snapshot, in snapshot order.
        applied: Number of statuses written back to the registry.
        dropped: Number of statuses discarded during reconciliation.
    """

    started_at: float
    finished_at: float
    outcomes: List[ProbeOutcome]
    applied: int
    dropped: int

    @property
    def duration(self) -> float:
        return self.finished_at - self.started_at
