"""
Main entry point for the endpoint monitoring application.

This module initializes and runs the monitor. It sets up logging, loads the
endpoint registry, creates the HTTP session and the check components, and
handles graceful shutdown when the application is terminated.
"""

import asyncio
import logging
from pathlib import Path

import aiohttp

from endpoint_monitor.config import MonitoringContext, get_context
from endpoint_monitor.config.http_config import get_http_session
from endpoint_monitor.config.logging_config import configure_logging
from endpoint_monitor.monitor import EndpointMonitor
from endpoint_monitor.orchestrator import CheckOrchestrator, OverlapPolicy
from endpoint_monitor.persistence import get_config_path
from endpoint_monitor.prober.aiohttp_prober import AiohttpProber
from endpoint_monitor.processor.console_processor import ConsoleProcessor
from endpoint_monitor.processor.delegating_processor import DelegatingResultProcessor
from endpoint_monitor.processor.transition_log_processor import TransitionLogProcessor
from endpoint_monitor.registry import EndpointRegistry, ReconcileMode
from endpoint_monitor.scheduler import CheckScheduler


async def run(context: MonitoringContext) -> None:
    """
    Set up and run the monitor.

    1. Loads the registry, falling back to the default endpoints
    2. Creates an HTTP session, the prober and the processor pipeline
    3. Runs one cycle and exits (--once) or ticks the scheduler until cancelled
    4. Waits for in-flight cycles, optionally saves, and closes the session

    Args:
        context: Configuration context containing all application settings.
    """
    logger: logging.Logger = logging.getLogger(__name__)
    logger.info("Starting application...")

    config_path = Path(context.config_file) if context.config_file else get_config_path()
    registry = EndpointRegistry()

    http_session: aiohttp.ClientSession = get_http_session(context)
    logger.info("configured: http_session")

    orchestrator = CheckOrchestrator(
        registry=registry,
        prober=AiohttpProber(session=http_session, timeout=context.probe_timeout),
        processor=DelegatingResultProcessor(
            [
                TransitionLogProcessor(),
                ConsoleProcessor(registry),
            ]
        ),
        reconcile_mode=ReconcileMode(context.reconcile_mode),
        overlap_policy=OverlapPolicy(context.overlap_policy),
    )
    scheduler = CheckScheduler(
        orchestrator,
        check_interval=context.check_interval,
        auto_check_enabled=context.auto_check,
    )
    monitor = EndpointMonitor(registry, orchestrator, scheduler, config_path)
    monitor.load(fallback_to_default=True)
    logger.info(f"Monitoring {len(registry)} endpoints (configuration: {config_path})")

    try:
        if context.once:
            await monitor.check_now()
        else:
            if context.check_on_start:
                monitor.check_now()
            logger.info("Monitor initialized. Starting scheduler loop...")
            await scheduler.run(context.tick_interval)

    except asyncio.CancelledError:
        logger.info("Application shutdown requested.")
    finally:
        logger.info("Shutting down resources...")
        scheduler.stop()
        await orchestrator.wait_idle()
        if context.save_on_exit:
            monitor.save()
        await http_session.close()
        logger.info("Shutdown complete.")


def main() -> None:
    try:
        # Parse command-line arguments and environment variables
        context: MonitoringContext = get_context()

        # Configure logging based on the context
        configure_logging(context)

        asyncio.run(run(context))
    except KeyboardInterrupt:
        logging.info("Shutdown initiated by user (Ctrl+C).")


if __name__ == "__main__":
    main()
