"""Inventory orchestrator: owns the current snapshot and coordinates refreshes."""

import asyncio
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, List, Optional, Sequence, Tuple
import structlog

from cloudinventory.analytics.statistics import compute_stats
from cloudinventory.auth.roles import AuthService, Permission
from cloudinventory.core.exceptions import DiscoveryException
from cloudinventory.core.models import (
    CloudCredential,
    CloudProvider,
    CloudResource,
    CostTrendPoint,
    CredentialStatus,
    InventoryStats,
)
from cloudinventory.discovery.base import SUCCESS
from cloudinventory.discovery.snapshot import (
    ALL_PROVIDERS,
    InventorySource,
    SnapshotDiscoveryService,
)

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class InventorySnapshot:
    """One complete, immutable inventory with its statistics."""

    resources: Tuple[CloudResource, ...]
    stats: InventoryStats
    version: int = 0
    source: Optional[str] = None
    synced_at: Optional[datetime] = None


@dataclass
class InventoryState:
    """Single-writer holder of the current inventory.

    The snapshot reference is replaced as a whole on every load; it is never
    mutated in place.
    """

    cost_trend: Optional[Sequence[CostTrendPoint]] = None
    _snapshot: InventorySnapshot = field(init=False)

    def __post_init__(self):
        self._snapshot = InventorySnapshot(resources=(), stats=compute_stats([], self.cost_trend))

    @property
    def snapshot(self) -> InventorySnapshot:
        return self._snapshot

    @property
    def resources(self) -> Tuple[CloudResource, ...]:
        return self._snapshot.resources

    @property
    def stats(self) -> InventoryStats:
        return self._snapshot.stats

    @property
    def version(self) -> int:
        return self._snapshot.version

    @property
    def last_sync_time(self) -> Optional[datetime]:
        return self._snapshot.synced_at

    @property
    def is_empty(self) -> bool:
        return len(self._snapshot.resources) == 0

    def replace(self, resources: Sequence[CloudResource], source: str) -> InventorySnapshot:
        """Swap in a new scored inventory and recompute its statistics."""
        resources = tuple(resources)
        self._snapshot = InventorySnapshot(
            resources=resources,
            stats=compute_stats(resources, self.cost_trend),
            version=self._snapshot.version + 1,
            source=source,
            synced_at=datetime.now(timezone.utc),
        )
        return self._snapshot


class InventoryOrchestrator:
    """Coordinates snapshot fetches and imports into one InventoryState."""

    def __init__(self,
                 source: InventorySource,
                 state: Optional[InventoryState] = None,
                 auth: Optional[AuthService] = None,
                 account_label: str = "Production"):
        self.source = source
        self.state = state or InventoryState()
        self.auth = auth or AuthService()
        self.account_label = account_label
        self.credentials: Dict[str, CloudCredential] = {}
        self._in_flight = 0
        self.logger = logger.bind(orchestrator="inventory")

    @property
    def is_syncing(self) -> bool:
        return self._in_flight > 0

    async def refresh(self, provider: str = ALL_PROVIDERS, background: bool = False) -> InventorySnapshot:
        """Fetch a fresh snapshot and replace the inventory.

        Overlapping refreshes are neither deduplicated nor cancelled; the one
        that completes last wins.
        """
        service = SnapshotDiscoveryService(self.source, {
            "account_label": self.account_label,
            "provider": provider,
        })

        self._in_flight += 1
        try:
            result = await service.discover_with_metadata()
        finally:
            self._in_flight -= 1

        if result['status'] != SUCCESS:
            raise DiscoveryException(service.get_discovery_type(), result.get('error') or "unknown error")

        snapshot = self.state.replace(result['data'], source=f"snapshot:{provider}")
        self.logger.info(
            "Inventory refreshed",
            provider=provider,
            background=background,
            resources=len(snapshot.resources),
            version=snapshot.version,
            duration_seconds=result['metadata']['duration_seconds']
        )
        return snapshot

    async def connect(self, provider: str) -> InventorySnapshot:
        """Connect a provider account and sync it."""
        self.auth.require(Permission.MANAGE_CONNECTIONS)
        provider_enum = CloudProvider(provider)

        credential = CloudCredential(
            id=f"cred-{provider_enum.value.lower()}",
            name=f"{self.account_label} {provider_enum.value}",
            provider=provider_enum,
            status=CredentialStatus.SYNCING,
        )
        self.credentials[credential.id] = credential

        try:
            snapshot = await self.refresh(provider_enum.value)
        except DiscoveryException:
            self.credentials[credential.id] = credential.model_copy(update={"status": CredentialStatus.ERROR})
            raise

        self.credentials[credential.id] = credential.model_copy(update={
            "status": CredentialStatus.ACTIVE,
            "last_sync": snapshot.synced_at,
        })
        return snapshot

    def import_inventory(self, text: str) -> InventorySnapshot:
        """Replace the inventory with an imported JSON array.

        InventoryImportError propagates and the current inventory is kept.
        """
        self.auth.require(Permission.IMPORT_DATA)
        resources = self.source.import_from_serialized_form(text)
        snapshot = self.state.replace(resources, source="import")
        self.logger.info("Inventory imported", resources=len(snapshot.resources), version=snapshot.version)
        return snapshot

    def list_credentials(self) -> List[CloudCredential]:
        return list(self.credentials.values())


class AutoSyncScheduler:
    """Periodic background refresh of the inventory."""

    def __init__(self, orchestrator: InventoryOrchestrator, interval_minutes: float, enabled: bool = True):
        if interval_minutes <= 0:
            raise ValueError("interval_minutes must be positive")
        self.orchestrator = orchestrator
        self.interval_minutes = interval_minutes
        self.enabled = enabled
        self.runs = 0
        self.failures = 0
        self._task: Optional[asyncio.Task] = None
        self.logger = logger.bind(scheduler="auto_sync")

    @property
    def interval_seconds(self) -> float:
        return self.interval_minutes * 60

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def run_once(self) -> bool:
        """Run one background refresh; returns True when the inventory was replaced."""
        if not self.enabled or self.orchestrator.state.is_empty:
            return False

        self.logger.info("Executing auto-sync", interval_minutes=self.interval_minutes)
        try:
            await self.orchestrator.refresh(ALL_PROVIDERS, background=True)
        except Exception as e:
            self.failures += 1
            self.logger.error("Auto-sync failed", error=str(e))
            return False

        self.runs += 1
        return True

    async def _loop(self) -> None:
        while True:
            await asyncio.sleep(self.interval_seconds)
            await self.run_once()

    def start(self) -> asyncio.Task:
        if self.is_running:
            return self._task
        self.logger.info("Auto-sync scheduled", interval_minutes=self.interval_minutes)
        self._task = asyncio.create_task(self._loop())
        return self._task

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
        self.logger.info("Auto-sync stopped")
