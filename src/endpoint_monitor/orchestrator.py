"""
Check cycle orchestration for the endpoint monitoring system.

This module provides the CheckOrchestrator class, which runs check cycles:
it snapshots the registry, probes every endpoint concurrently, waits for all
probes, reconciles the statuses back into the registry and finally hands the
outcomes to the result processor pipeline.
"""

import asyncio
import logging
import time
from asyncio import Task
from enum import Enum
from typing import List, Optional, Set

from .contracts import EndpointProber, ResultProcessor
from .domain import CycleReport, Endpoint, ProbeOutcome, Status
from .registry import EndpointRegistry, ReconcileMode


class OverlapPolicy(str, Enum):
    """
    What a trigger does while a previous cycle is still running.

    COALESCE hands back the in-flight cycle so cycles never overlap.
    CONCURRENT starts an independent cycle next to it.
    """

    COALESCE = "coalesce"
    CONCURRENT = "concurrent"


class CheckOrchestrator:
    """
    Runs check cycles against an endpoint registry.

    Cycles are started with trigger(), which must be called from the thread
    running the event loop, and are observable through the returned task.
    """

    def __init__(
        self,
        registry: EndpointRegistry,
        prober: EndpointProber,
        processor: Optional[ResultProcessor] = None,
        reconcile_mode: ReconcileMode = ReconcileMode.BY_ID,
        overlap_policy: OverlapPolicy = OverlapPolicy.COALESCE,
    ) -> None:
        """
        Initializes a new CheckOrchestrator instance.

        Args:
            registry: The registry whose endpoints are checked and updated.
            prober: Component that performs the HTTP probe of one endpoint.
            processor: Optional component that receives outcomes and cycle reports.
            reconcile_mode: How statuses are matched back to live endpoints.
            overlap_policy: What trigger() does while a cycle is running.
        """
        self._registry: EndpointRegistry = registry
        self._prober: EndpointProber = prober
        self._processor: Optional[ResultProcessor] = processor
        self._reconcile_mode: ReconcileMode = reconcile_mode
        self._overlap_policy: OverlapPolicy = overlap_policy
        self._logger: logging.Logger = logging.getLogger(__name__)
        self._current: Optional[Task] = None
        self._tasks: Set[Task] = set()
        self._last_report: Optional[CycleReport] = None

    @property
    def is_running(self) -> bool:
        return any(not task.done() for task in self._tasks)

    @property
    def last_report(self) -> Optional[CycleReport]:
        return self._last_report

    def trigger(self) -> Task:
        """
        Starts a check cycle in the background.

        With the COALESCE policy a trigger arriving while a cycle is running
        returns that cycle's task instead of starting a new one.

        Returns:
            Task: The task running (or already running) the cycle.
        """
        if (
            self._overlap_policy is OverlapPolicy.COALESCE
            and self._current is not None
            and not self._current.done()
        ):
            self._logger.debug("Check cycle already in progress; coalescing trigger.")
            return self._current

        task = asyncio.create_task(self.run_check_cycle())
        self._tasks.add(task)
        task.add_done_callback(self._on_cycle_done)
        self._current = task
        return task

    def _on_cycle_done(self, task: Task) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            self._logger.error(f"Check cycle failed: {error!r}")

    async def wait_idle(self) -> None:
        """Waits until every running cycle has finished."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def _probe_one(self, endpoint: Endpoint) -> ProbeOutcome:
        """
        Probes a single snapshotted endpoint.

        A prober that raises despite its contract is logged and the endpoint
        is classified OFFLINE, so one broken probe never fails the cycle.
        """
        start_time: float = time.time()
        try:
            status = await self._prober.probe(endpoint.url)
        except Exception as e:
            self._logger.exception(f"Probe failed for endpoint {endpoint.id} ({endpoint.url}) with error: {e}")
            status = Status.offline()
        return ProbeOutcome(
            endpoint=endpoint,
            status=status,
            start_time=start_time,
            end_time=time.time(),
        )

    async def run_check_cycle(self) -> CycleReport:
        """
        Runs one complete check cycle.

        1. Snapshot the registry; probes only ever read from the snapshot.
        2. Probe every endpoint concurrently and wait for all of them.
        3. Reconcile the statuses into the live registry.
        4. Pass each outcome, then the report, to the processor.

        Returns:
            CycleReport: Summary of the cycle.
        """
        started_at: float = time.time()
        snapshot: List[Endpoint] = self._registry.snapshot()
        self._logger.debug(f"Starting check cycle for {len(snapshot)} endpoints.")

        outcomes: List[ProbeOutcome] = list(
            await asyncio.gather(*(self._probe_one(endpoint) for endpoint in snapshot))
        )

        applied, dropped = self._registry.reconcile(
            snapshot, [outcome.status for outcome in outcomes], self._reconcile_mode
        )
        report = CycleReport(
            started_at=started_at,
            finished_at=time.time(),
            outcomes=outcomes,
            applied=applied,
            dropped=dropped,
        )
        self._last_report = report

        stats = self._registry.stats()
        self._logger.info(
            f"Check cycle finished in {report.duration:.2f}s: "
            f"{stats.online}/{stats.total} online, {stats.offline} offline."
        )

        if self._processor is not None:
            await self._run_processor(report)
        return report

    async def _run_processor(self, report: CycleReport) -> None:
        assert self._processor is not None
        for outcome in report.outcomes:
            try:
                await self._processor.process(outcome)
            except Exception as e:
                self._logger.exception(f"Processing failed for endpoint {outcome.endpoint.id} with error: {e}")
        try:
            await self._processor.complete(report)
        except Exception as e:
            self._logger.exception(f"Completing the cycle report failed with error: {e}")
