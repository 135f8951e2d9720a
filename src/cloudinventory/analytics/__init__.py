# src/cloudinventory/analytics/__init__.py
"""
Analytics Module - statistics, queries and topology over the scored inventory
"""

from .statistics import compute_stats, cost_by_provider, provider_split, total_cost
from .queries import InventoryQuery
from .topology import build_topology

__all__ = [
    "compute_stats",
    "cost_by_provider",
    "provider_split",
    "total_cost",
    "InventoryQuery",
    "build_topology",
]
