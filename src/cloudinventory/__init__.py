"""Multi-cloud inventory with rule-based compliance scoring."""

__version__ = "0.1.0"
