"""
Unit tests for the CheckOrchestrator class.

The prober is replaced by a fake whose probes can be held open, which lets
the tests mutate the registry while a cycle is in flight.
"""

import asyncio
import logging
from typing import Dict, List, Optional
from unittest.mock import AsyncMock

import pytest

from endpoint_monitor.contracts import EndpointProber, ResultProcessor
from endpoint_monitor.domain import Endpoint, ProbeOutcome, RegistryStats, Status
from endpoint_monitor.orchestrator import CheckOrchestrator, OverlapPolicy
from endpoint_monitor.registry import EndpointRegistry, ReconcileMode


class GatedProber(EndpointProber):
    """Returns a fixed status per URL, optionally waiting on a gate first."""

    def __init__(self, statuses: Dict[str, Status], gate: Optional[asyncio.Event] = None) -> None:
        self._statuses = statuses
        self._gate = gate
        self.probed: List[str] = []
        self.all_started = asyncio.Event()

    async def probe(self, url: str) -> Status:
        self.probed.append(url)
        if len(self.probed) == len(self._statuses):
            self.all_started.set()
        if self._gate is not None:
            await self._gate.wait()
        return self._statuses[url]


@pytest.fixture
def endpoints() -> List[Endpoint]:
    return [
        Endpoint.create(name="a", host="10.0.0.1", port=8001),
        Endpoint.create(name="b", host="10.0.0.2", port=8002),
        Endpoint.create(name="c", host="10.0.0.3", port=8003),
    ]


@pytest.fixture
def statuses(endpoints: List[Endpoint]) -> Dict[str, Status]:
    return {
        endpoints[0].url: Status.online(),
        endpoints[1].url: Status.error(500),
        endpoints[2].url: Status.offline(),
    }


@pytest.fixture
def registry(endpoints: List[Endpoint]) -> EndpointRegistry:
    return EndpointRegistry(endpoints)


@pytest.fixture
def mock_processor() -> AsyncMock:
    return AsyncMock(spec=ResultProcessor)


@pytest.mark.asyncio
async def test_run_check_cycle_should_update_every_endpoint(
    registry: EndpointRegistry, statuses: Dict[str, Status], mock_processor: AsyncMock
) -> None:
    # Arrange
    orchestrator = CheckOrchestrator(registry, GatedProber(statuses), processor=mock_processor)

    # Act
    report = await orchestrator.run_check_cycle()

    # Assert
    assert [e.status for e in registry.snapshot()] == [Status.online(), Status.error(500), Status.offline()]
    assert (report.applied, report.dropped) == (3, 0)
    assert [o.status for o in report.outcomes] == [Status.online(), Status.error(500), Status.offline()]
    assert all(o.previous == Status.unchecked() for o in report.outcomes)
    assert mock_processor.process.await_count == 3
    mock_processor.complete.assert_awaited_once_with(report)
    assert orchestrator.last_report == report


@pytest.mark.asyncio
async def test_run_check_cycle_should_probe_concurrently(
    registry: EndpointRegistry, statuses: Dict[str, Status]
) -> None:
    # Arrange: every probe blocks until all three have started
    gate = asyncio.Event()
    prober = GatedProber(statuses, gate)
    orchestrator = CheckOrchestrator(registry, prober)

    # Act
    cycle = asyncio.create_task(orchestrator.run_check_cycle())
    await asyncio.wait_for(prober.all_started.wait(), timeout=1)
    gate.set()
    report = await cycle

    # Assert
    assert len(report.outcomes) == 3


@pytest.mark.asyncio
async def test_run_check_cycle_on_empty_registry() -> None:
    orchestrator = CheckOrchestrator(EndpointRegistry(), GatedProber({}))

    report = await orchestrator.run_check_cycle()

    assert report.outcomes == []
    assert (report.applied, report.dropped) == (0, 0)


@pytest.mark.asyncio
async def test_failing_probe_should_not_affect_others(
    registry: EndpointRegistry, endpoints: List[Endpoint], caplog: pytest.LogCaptureFixture
) -> None:
    # Arrange
    async def probe(url: str) -> Status:
        if url == endpoints[1].url:
            raise RuntimeError("boom")
        return Status.online()

    prober = AsyncMock(spec=EndpointProber)
    prober.probe.side_effect = probe
    orchestrator = CheckOrchestrator(registry, prober)

    # Act
    with caplog.at_level(logging.ERROR):
        await orchestrator.run_check_cycle()

    # Assert
    assert [e.status for e in registry.snapshot()] == [Status.online(), Status.offline(), Status.online()]
    assert "boom" in caplog.text


@pytest.mark.asyncio
async def test_processor_failure_should_not_abort_cycle(
    registry: EndpointRegistry, statuses: Dict[str, Status], mock_processor: AsyncMock
) -> None:
    mock_processor.process.side_effect = RuntimeError("processor down")
    orchestrator = CheckOrchestrator(registry, GatedProber(statuses), processor=mock_processor)

    report = await orchestrator.run_check_cycle()

    assert report.applied == 3
    mock_processor.complete.assert_awaited_once()


@pytest.mark.asyncio
async def test_removal_mid_cycle_by_position_shifts_and_drops_results(
    registry: EndpointRegistry, endpoints: List[Endpoint], statuses: Dict[str, Status]
) -> None:
    """
    Positional reconciliation is racy: the result probed for 'b' lands on 'c'
    and the result probed for 'c' is dropped.
    """
    # Arrange
    gate = asyncio.Event()
    prober = GatedProber(statuses, gate)
    orchestrator = CheckOrchestrator(registry, prober, reconcile_mode=ReconcileMode.BY_POSITION)

    # Act
    cycle = orchestrator.trigger()
    await asyncio.wait_for(prober.all_started.wait(), timeout=1)
    registry.remove(1)
    gate.set()
    report = await cycle

    # Assert
    live = registry.snapshot()
    assert [e.id for e in live] == [endpoints[0].id, endpoints[2].id]
    assert live[0].status == Status.online()
    assert live[1].status == Status.error(500)
    assert (report.applied, report.dropped) == (2, 1)


@pytest.mark.asyncio
async def test_removal_mid_cycle_by_id_keeps_results_on_their_endpoints(
    registry: EndpointRegistry, endpoints: List[Endpoint], statuses: Dict[str, Status]
) -> None:
    # Arrange
    gate = asyncio.Event()
    prober = GatedProber(statuses, gate)
    orchestrator = CheckOrchestrator(registry, prober, reconcile_mode=ReconcileMode.BY_ID)

    # Act
    cycle = orchestrator.trigger()
    await asyncio.wait_for(prober.all_started.wait(), timeout=1)
    registry.remove(1)
    gate.set()
    report = await cycle

    # Assert
    live = registry.snapshot()
    assert [e.id for e in live] == [endpoints[0].id, endpoints[2].id]
    assert live[0].status == Status.online()
    assert live[1].status == Status.offline()
    assert (report.applied, report.dropped) == (2, 1)


@pytest.mark.asyncio
async def test_trigger_should_coalesce_while_cycle_in_progress(
    registry: EndpointRegistry, statuses: Dict[str, Status]
) -> None:
    # Arrange
    gate = asyncio.Event()
    prober = GatedProber(statuses, gate)
    orchestrator = CheckOrchestrator(registry, prober, overlap_policy=OverlapPolicy.COALESCE)

    # Act
    first = orchestrator.trigger()
    second = orchestrator.trigger()
    await asyncio.sleep(0)
    running = orchestrator.is_running
    gate.set()
    await first

    # Assert
    assert first is second
    assert running is True
    assert len(prober.probed) == 3
    assert orchestrator.is_running is False


@pytest.mark.asyncio
async def test_trigger_should_start_new_cycle_after_previous_finished(
    registry: EndpointRegistry, statuses: Dict[str, Status]
) -> None:
    orchestrator = CheckOrchestrator(registry, GatedProber(statuses))

    first = orchestrator.trigger()
    await first
    second = orchestrator.trigger()
    await second

    assert first is not second


@pytest.mark.asyncio
async def test_trigger_should_run_independent_cycles_when_concurrent(
    registry: EndpointRegistry, statuses: Dict[str, Status]
) -> None:
    # Arrange
    gate = asyncio.Event()
    prober = GatedProber(statuses, gate)
    orchestrator = CheckOrchestrator(registry, prober, overlap_policy=OverlapPolicy.CONCURRENT)

    # Act
    first = orchestrator.trigger()
    second = orchestrator.trigger()
    gate.set()
    await orchestrator.wait_idle()

    # Assert
    assert first is not second
    assert first.done() and second.done()
    assert len(prober.probed) == 6


@pytest.mark.asyncio
async def test_outcomes_should_carry_snapshot_endpoint(
    registry: EndpointRegistry, endpoints: List[Endpoint], statuses: Dict[str, Status], mock_processor: AsyncMock
) -> None:
    orchestrator = CheckOrchestrator(registry, GatedProber(statuses), processor=mock_processor)

    await orchestrator.run_check_cycle()

    processed: List[ProbeOutcome] = [call.args[0] for call in mock_processor.process.await_args_list]
    assert [o.endpoint for o in processed] == endpoints
    assert all(o.end_time >= o.start_time for o in processed)


@pytest.mark.asyncio
async def test_run_check_cycle_should_update_every_copy_of_a_duplicated_record() -> None:
    # Arrange
    original = Endpoint(id="abc", name="web", host="10.0.0.1", port=80)
    registry = EndpointRegistry([original, original._replace(name="web-copy")])
    orchestrator = CheckOrchestrator(registry, GatedProber({original.url: Status.online()}))

    # Act
    report = await orchestrator.run_check_cycle()

    # Assert
    assert [e.status for e in registry.snapshot()] == [Status.online(), Status.online()]
    assert (report.applied, report.dropped) == (2, 0)
    assert registry.stats() == RegistryStats(total=2, online=2, offline=0)
