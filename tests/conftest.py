"""
Shared pytest fixtures for the cloud inventory test suite.

Provides:
- A resource factory producing CloudResource objects from camelCase records
- A zero-latency inventory source
- Scored reference inventory
"""
import os
from typing import Any, Dict

import pytest

# Keep tests independent of a developer's local configuration
os.environ.setdefault("SYNC_SIMULATED_LATENCY_SECONDS", "0")
os.environ.pop("GEMINI_API_KEY", None)

from cloudinventory.compliance.engine import score_inventory
from cloudinventory.core.models import CloudResource
from cloudinventory.discovery.fixtures import REFERENCE_RESOURCES
from cloudinventory.discovery.snapshot import InventorySource


@pytest.fixture
def make_resource():
    """Build a CloudResource; keyword overrides use the camelCase wire keys."""

    def _make(**overrides: Any) -> CloudResource:
        record: Dict[str, Any] = {
            "id": "res-1",
            "name": "test-resource",
            "provider": "AWS",
            "accountId": "123456789012",
            "type": "Function",
            "region": "us-east-1",
            "costPerMonth": 10.0,
            "tags": {"Owner": "Platform"},
            "status": "Running",
            "createdAt": "2024-01-01T00:00:00Z",
            "metadata": {},
        }
        record.update(overrides)
        return CloudResource.model_validate(record)

    return _make


@pytest.fixture
def source() -> InventorySource:
    return InventorySource({"simulated_latency_seconds": 0})


@pytest.fixture
def reference_inventory():
    return score_inventory(CloudResource.model_validate(r) for r in REFERENCE_RESOURCES)


@pytest.fixture
def by_id(reference_inventory):
    return {r.id: r for r in reference_inventory}
