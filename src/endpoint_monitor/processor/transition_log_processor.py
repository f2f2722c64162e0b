"""
Status transition logging.

This processor logs every endpoint whose status changed during a cycle, and
a one-line summary when the cycle completes.
"""

import logging

from endpoint_monitor.contracts import ResultProcessor
from endpoint_monitor.domain import CycleReport, ProbeOutcome, StatusKind

# Module logger
logger = logging.getLogger(__name__)


class TransitionLogProcessor(ResultProcessor):
    """Logs status changes; endpoints going down are logged as warnings."""

    async def process(self, outcome: ProbeOutcome) -> None:
        if not outcome.changed:
            return

        endpoint = outcome.endpoint
        message = (
            f"Endpoint '{endpoint.name}' ({endpoint.url}) changed from "
            f"{outcome.previous.label} to {outcome.status.label}"
        )
        if outcome.status.kind is StatusKind.ONLINE:
            logger.info(message)
        else:
            logger.warning(message)

    async def complete(self, report: CycleReport) -> None:
        changed = sum(1 for outcome in report.outcomes if outcome.changed)
        logger.debug(
            f"Cycle of {len(report.outcomes)} probes took {report.duration:.2f}s "
            f"({changed} changed, {report.dropped} dropped)."
        )
