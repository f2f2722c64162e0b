"""
Console presentation of the endpoint registry.

This processor stands in for a graphical front end: after every check cycle
it renders the registry header counters and one line per endpoint.
"""

from typing import Callable, List, Sequence

from endpoint_monitor.contracts import ResultProcessor
from endpoint_monitor.domain import CycleReport, Endpoint, ProbeOutcome, RegistryStats
from endpoint_monitor.registry import EndpointRegistry


def render_registry(endpoints: Sequence[Endpoint], stats: RegistryStats) -> List[str]:
    """
    Renders a registry snapshot as text lines.

    Args:
        endpoints: The snapshot to render, in registry order.
        stats: The aggregate counters for the header.

    Returns:
        List[str]: A header line followed by one line per endpoint.
    """
    lines = [f"Total: {stats.total}  Online: {stats.online}  Offline: {stats.offline}"]
    if not endpoints:
        lines.append("  (no endpoints)")
        return lines

    name_width = max(len(e.name) for e in endpoints)
    url_width = max(len(e.url) for e in endpoints)
    for index, endpoint in enumerate(endpoints):
        lines.append(
            f"{index:>3}  {endpoint.name:<{name_width}}  {endpoint.url:<{url_width}}  {endpoint.status.label}"
        )
    return lines


class ConsoleProcessor(ResultProcessor):
    """Writes the rendered registry after each completed cycle."""

    def __init__(self, registry: EndpointRegistry, write: Callable[[str], None] = print) -> None:
        """
        Args:
            registry: The registry to render.
            write: Sink for each rendered line.
        """
        self._registry: EndpointRegistry = registry
        self._write: Callable[[str], None] = write

    async def process(self, outcome: ProbeOutcome) -> None:
        """Nothing to do per outcome; the registry is rendered once in complete()."""

    async def complete(self, report: CycleReport) -> None:
        for line in render_registry(self._registry.snapshot(), self._registry.stats()):
            self._write(line)
