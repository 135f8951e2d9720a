# src/cloudinventory/discovery/snapshot.py
"""Inventory source - simulated cloud snapshots and JSON imports."""

import asyncio
import json
from json import JSONDecodeError
from typing import Any, Dict, List, Optional
import structlog

from cloudinventory.compliance.engine import score_inventory
from cloudinventory.core.base_client import BaseClient
from cloudinventory.core.exceptions import InventoryImportError
from cloudinventory.core.models import CloudResource
from cloudinventory.discovery.base import BaseDiscoveryService
from cloudinventory.discovery.fixtures import REFERENCE_RESOURCES
from cloudinventory.mappers.resource_mapper import ResourceDataMapper

logger = structlog.get_logger(__name__)

ALL_PROVIDERS = "All"


class InventorySource(BaseClient):
    """Supplies scored inventory snapshots.

    There is no real cloud integration: a fetch waits for a simulated
    network latency and returns the reference data set.
    """

    def __init__(self, config: Optional[Dict[str, Any]] = None,
                 records: Optional[List[Dict[str, Any]]] = None):
        super().__init__(config or {}, "InventorySource")
        self.latency_seconds = float(self.config.get("simulated_latency_seconds", 1.5))
        self._records = records if records is not None else REFERENCE_RESOURCES
        self.mapper = ResourceDataMapper()

    async def connect(self) -> None:
        self._connected = True
        self.logger.info("Inventory source connected")

    async def disconnect(self) -> None:
        self._connected = False
        self.logger.info("Inventory source disconnected")

    async def health_check(self) -> bool:
        return self._connected

    async def fetch_snapshot(self, account_label: str, provider_filter: str = ALL_PROVIDERS) -> List[CloudResource]:
        """Fetch the reference snapshot, every resource scored.

        The simulated account always returns its complete inventory;
        ``provider_filter`` only labels the request. Narrow the result for
        display with ``InventoryQuery.provider``.
        """
        await self.ensure_connected()

        self.logger.info(
            "Fetching cloud snapshot",
            account=account_label,
            provider=provider_filter,
            latency_seconds=self.latency_seconds
        )
        await asyncio.sleep(self.latency_seconds)

        resources = score_inventory(self.mapper.map_resources(self._records))

        self.logger.info("Cloud snapshot fetched", resources=len(resources))
        return resources

    def import_from_serialized_form(self, text: str) -> List[CloudResource]:
        """Parse and score a JSON array of resource records."""
        return import_from_serialized_form(text, self.mapper)


def import_from_serialized_form(text: str, mapper: Optional[ResourceDataMapper] = None) -> List[CloudResource]:
    """Parse and score a JSON array of resource records.

    A valid JSON document that is not an array yields an empty inventory.
    Malformed JSON raises InventoryImportError.
    """
    try:
        parsed = json.loads(text)
    except (JSONDecodeError, TypeError) as e:
        logger.error("Failed to parse inventory import", error=str(e))
        if isinstance(e, JSONDecodeError):
            raise InventoryImportError(e.msg, line=e.lineno, column=e.colno) from e
        raise InventoryImportError(str(e)) from e

    if not isinstance(parsed, list):
        logger.warning("Inventory import is not a JSON array", parsed_type=type(parsed).__name__)
        return []

    mapper = mapper or ResourceDataMapper()
    resources = score_inventory(mapper.map_resources(parsed))
    logger.info("Inventory imported", records=len(parsed), resources=len(resources))
    return resources


def export_resource(resource: CloudResource) -> str:
    """Pretty-printed JSON for the download-metadata action."""
    return json.dumps(resource.to_wire(), indent=2)


def export_filename(resource: CloudResource) -> str:
    return f"{resource.name or resource.id or 'resource'}-metadata.json"


class SnapshotDiscoveryService(BaseDiscoveryService):
    """Discovery service wrapping a snapshot fetch."""

    def __init__(self, source: InventorySource, config: Dict[str, Any]):
        super().__init__(source, config)
        self.account_label = config.get("account_label", "Production")
        self.provider_filter = config.get("provider", ALL_PROVIDERS)

    async def discover(self) -> List[CloudResource]:
        return await self.client.fetch_snapshot(self.account_label, self.provider_filter)

    def get_discovery_type(self) -> str:
        return "cloud_snapshot"
