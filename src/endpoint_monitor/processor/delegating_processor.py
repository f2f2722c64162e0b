"""
Delegating result processor implementation.

This module provides a composite implementation of the ResultProcessor interface
that delegates processing to multiple child processors concurrently. It ensures
that failures in one processor don't affect the others.
"""

import asyncio
import logging
from typing import Awaitable, Callable, List

from endpoint_monitor.contracts import ResultProcessor
from endpoint_monitor.domain import CycleReport, ProbeOutcome

# Module logger
logger = logging.getLogger(__name__)


class DelegatingResultProcessor(ResultProcessor):
    """
    A ResultProcessor that follows the Composite pattern.

    It holds a list of other ResultProcessor instances and delegates every
    call to each of them concurrently. If one processor fails, the others are
    still executed.
    """

    def __init__(self, processors: List[ResultProcessor]) -> None:
        """
        Initializes the delegator with a list of processors to delegate to.

        Args:
            processors: Objects that adhere to the ResultProcessor interface.
        """
        self._processors: List[ResultProcessor] = processors

    async def _run_safely(
        self, processor: ResultProcessor, call: Callable[[], Awaitable[None]], what: str
    ) -> None:
        """
        Runs one child call, logging instead of propagating its failure.

        Args:
            processor: The child processor, used for the log message.
            call: Zero-argument coroutine factory performing the actual call.
            what: Short description of the work, used for the log message.
        """
        try:
            await call()
        except Exception as e:
            logger.exception(f"Processor '{type(processor).__name__}' failed for {what} with error: {e}")

    async def process(self, outcome: ProbeOutcome) -> None:
        if not self._processors:
            return

        tasks = [
            self._run_safely(p, lambda p=p: p.process(outcome), f"endpoint {outcome.endpoint.url}")
            for p in self._processors
        ]
        await asyncio.gather(*tasks)

    async def complete(self, report: CycleReport) -> None:
        if not self._processors:
            return

        tasks = [
            self._run_safely(p, lambda p=p: p.complete(report), "cycle report")
            for p in self._processors
        ]
        await asyncio.gather(*tasks)
