"""
Core interfaces for the endpoint monitoring system.

This module defines the abstract base classes the check orchestrator depends
on. Keeping the network probe and the result handling behind these contracts
lets the orchestrator be exercised with fakes and extended with new
processors without touching the cycle logic.
"""

import abc

from .domain import CycleReport, ProbeOutcome, Status


class EndpointProber(abc.ABC):
    """
    Abstract interface for a component that checks the reachability of one URL.

    Its responsibility is to encapsulate the network I/O of a single probe
    and classify the outcome.
    """

    @abc.abstractmethod
    async def probe(self, url: str) -> Status:
        """
        Issues a single request against the given URL.

        Args:
            url: The URL to probe.

        Returns:
            Status: ONLINE, OFFLINE or ERROR(code). Never UNCHECKED.

        Raises:
            Nothing: implementations must classify every failure into a Status
                rather than raising it.
        """
        pass


class ResultProcessor(abc.ABC):
    """
    Abstract interface for a component that acts on the results of a check cycle.

    Processors run after the registry has been reconciled. This enables a
    pipeline where several processors log transitions, render the registry
    or notify the user.
    """

    @abc.abstractmethod
    async def process(self, outcome: ProbeOutcome) -> None:
        """
        Handles the outcome of probing a single endpoint.

        Args:
            outcome: The probed endpoint, as snapshotted, and its new status.
        """
        pass

    @abc.abstractmethod
    async def complete(self, report: CycleReport) -> None:
        """
        Handles the end of a check cycle, after every outcome was processed.

        Args:
            report: Summary of the finished cycle.
        """
        pass
