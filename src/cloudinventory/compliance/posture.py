"""Compliance posture derived from a scored inventory."""

from typing import Any, Dict, List, Sequence

from cloudinventory.core.models import CloudResource, RiskLevel

POSTURE_FILTERS = ("All", "Critical", "High", "Medium", "Governance")


def security_score(resources: Sequence[CloudResource]) -> int:
    """Percentage of resources the engine rated Secure; 100 for an empty inventory."""
    if not resources:
        return 100
    at_risk = sum(1 for r in resources if r.risk_level != RiskLevel.SECURE)
    return round((len(resources) - at_risk) / len(resources) * 100)


def filter_issues(resources: Sequence[CloudResource], view: str = "All") -> List[CloudResource]:
    """Resources that need attention, narrowed to one posture view."""
    if view not in POSTURE_FILTERS:
        raise ValueError(f"Unknown posture filter: {view}")

    relevant = [r for r in resources if r.risk_level != RiskLevel.SECURE or r.is_untagged]

    if view == "Governance":
        return [r for r in relevant if r.is_untagged]
    if view != "All":
        return [r for r in relevant if r.risk_level == RiskLevel(view)]
    return sorted(relevant, key=lambda r: r.risk_level.rank, reverse=True)


def summarize_posture(resources: Sequence[CloudResource]) -> Dict[str, Any]:
    """Counts per risk level plus the overall score."""
    by_level = {level.value: 0 for level in RiskLevel}
    for r in resources:
        by_level[r.risk_level.value] += 1

    return {
        "security_score": security_score(resources),
        "total_resources": len(resources),
        "total_risks": len(resources) - by_level[RiskLevel.SECURE.value],
        "by_risk_level": by_level,
        "untagged_count": sum(1 for r in resources if r.is_untagged),
    }
