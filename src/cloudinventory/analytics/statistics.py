# src/cloudinventory/analytics/statistics.py
"""
Aggregate statistics over a scored inventory.

Every figure is recomputed from scratch for the snapshot it is given.
"""

from collections import OrderedDict
from typing import Dict, Iterable, List, Optional, Sequence
import structlog

from cloudinventory.core.models import (
    CloudResource,
    CostTrendPoint,
    InventoryStats,
    ProviderCount,
    RiskLevel,
)
from cloudinventory.discovery.fixtures import COST_HISTORY

logger = structlog.get_logger(__name__)

HIGH_RISK_LEVELS = (RiskLevel.CRITICAL, RiskLevel.HIGH)


def total_cost(resources: Iterable[CloudResource]) -> float:
    return sum(r.cost_per_month for r in resources)


def untagged_count(resources: Iterable[CloudResource]) -> int:
    return sum(1 for r in resources if r.is_untagged)


def critical_risk_count(resources: Iterable[CloudResource]) -> int:
    return sum(1 for r in resources if r.risk_level in HIGH_RISK_LEVELS)


def provider_split(resources: Iterable[CloudResource]) -> List[ProviderCount]:
    """Resource count per provider, in first-seen order."""
    counts: Dict[str, int] = OrderedDict()
    for r in resources:
        name = r.provider_name or "Unknown"
        counts[name] = counts.get(name, 0) + 1
    return [ProviderCount(name=name, value=value) for name, value in counts.items()]


def cost_by_provider(resources: Iterable[CloudResource]) -> Dict[str, float]:
    costs: Dict[str, float] = {"AWS": 0.0, "Azure": 0.0, "GCP": 0.0}
    for r in resources:
        if r.provider_name:
            costs[r.provider_name] = costs.get(r.provider_name, 0.0) + r.cost_per_month
    return costs


def compute_stats(
    resources: Sequence[CloudResource],
    cost_trend: Optional[Sequence[CostTrendPoint]] = None
) -> InventoryStats:
    """Compute dashboard statistics for one inventory snapshot."""
    stats = InventoryStats(
        total_resources=len(resources),
        total_cost=total_cost(resources),
        untagged_count=untagged_count(resources),
        critical_risk_count=critical_risk_count(resources),
        provider_split=provider_split(resources),
        cost_trend=list(COST_HISTORY if cost_trend is None else cost_trend),
    )

    logger.debug(
        "Inventory statistics computed",
        total_resources=stats.total_resources,
        total_cost=stats.total_cost,
        critical_risk_count=stats.critical_risk_count
    )
    return stats
