"""
Facade exposing the monitor's operations to a presentation layer.

A front end holds one EndpointMonitor and talks to nothing else: it reads
snapshots and counters, and forwards add/remove/save/load/check-now and the
auto-check toggle. The monitor owns the registry and the file it persists to.
"""

import logging
from asyncio import Task
from pathlib import Path
from typing import List

from .domain import Endpoint, RegistryStats
from .errors import PersistenceError
from .orchestrator import CheckOrchestrator
from .persistence import load_endpoints, load_or_default, save_endpoints
from .registry import EndpointRegistry
from .scheduler import CheckScheduler

# Module logger
logger = logging.getLogger(__name__)


class EndpointMonitor:
    def __init__(
        self,
        registry: EndpointRegistry,
        orchestrator: CheckOrchestrator,
        scheduler: CheckScheduler,
        config_path: Path,
    ) -> None:
        self.registry: EndpointRegistry = registry
        self.orchestrator: CheckOrchestrator = orchestrator
        self.scheduler: CheckScheduler = scheduler
        self.config_path: Path = config_path

    def snapshot(self) -> List[Endpoint]:
        return self.registry.snapshot()

    def stats(self) -> RegistryStats:
        return self.registry.stats()

    def add(self, name: str, host: str, port_text: str) -> Endpoint:
        """Adds an endpoint; raises ValidationError with the input left for correction."""
        return self.registry.add(name, host, port_text)

    def remove(self, index: int) -> None:
        self.registry.remove(index)

    def check_now(self) -> Task:
        return self.scheduler.check_now()

    def set_auto_check(self, enabled: bool) -> None:
        self.scheduler.set_auto_check(enabled)

    def save(self) -> bool:
        """
        Saves the registry to the configuration file.

        Returns:
            bool: False if the file could not be written; the registry is unaffected.
        """
        try:
            save_endpoints(self.registry.snapshot(), self.config_path)
        except PersistenceError as err:
            logger.error(f"Saving configuration failed: {err}")
            return False
        return True

    def load(self, fallback_to_default: bool = False) -> bool:
        """
        Replaces the registry with the content of the configuration file.

        Args:
            fallback_to_default: On failure, install the default endpoints instead
                of keeping the current registry.

        Returns:
            bool: True if the file was loaded.
        """
        if fallback_to_default:
            endpoints, loaded = load_or_default(self.config_path)
            self.registry.replace_all(endpoints)
            return loaded

        try:
            endpoints = load_endpoints(self.config_path)
        except PersistenceError as err:
            logger.error(f"Loading configuration failed: {err}")
            return False
        self.registry.replace_all(endpoints)
        return True
