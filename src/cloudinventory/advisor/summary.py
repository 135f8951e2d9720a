# src/cloudinventory/advisor/summary.py
"""
Inventory summary sent to the AI advisor.

Keeps the prompt compact: totals, compliance findings, cost breakdowns and
optimization candidates instead of the raw resource list.
"""

import json
from collections import Counter
from typing import Any, Dict, Sequence

from cloudinventory.analytics.statistics import (
    HIGH_RISK_LEVELS,
    cost_by_provider,
    total_cost,
    untagged_count,
)
from cloudinventory.core.models import CloudResource, ResourceStatus, ResourceType

TOP_EXPENSIVE_LIMIT = 5
TYPE_DISTRIBUTION_LIMIT = 5
STOPPED_EXAMPLES_LIMIT = 3
RI_HIGH_POTENTIAL_THRESHOLD = 1000.0
RI_ELIGIBLE_TYPES = (ResourceType.COMPUTE_INSTANCE, ResourceType.DATABASE)


def _label(value: Any) -> Any:
    return getattr(value, "value", value)


def build_inventory_summary(resources: Sequence[CloudResource]) -> Dict[str, Any]:
    """Compact, JSON-serialisable view of a scored inventory."""
    high_risk = [r for r in resources if r.risk_level in HIGH_RISK_LEVELS]
    stopped = [r for r in resources if r.status == ResourceStatus.STOPPED]
    ri_candidates = [
        r for r in resources
        if r.resource_type in RI_ELIGIBLE_TYPES and r.status == ResourceStatus.RUNNING
    ]
    ri_eligible_cost = total_cost(ri_candidates)

    if ri_eligible_cost > RI_HIGH_POTENTIAL_THRESHOLD and ri_candidates:
        ri_description = (
            "High potential for savings! Recommend purchasing Reserved Instances (AWS/Azure) "
            "or Savings Plans (AWS/GCP) for a 1-3 year term to save 40-72% on these consistent workloads."
        )
    else:
        ri_description = (
            "Running Compute Instances and Databases suitable for Reserved Instances or Savings Plans."
        )

    type_counts = Counter(_label(r.resource_type) for r in resources)
    top_expensive = sorted(resources, key=lambda r: r.cost_per_month, reverse=True)[:TOP_EXPENSIVE_LIMIT]

    return {
        "overview": {
            "totalMonthlyCost": total_cost(resources),
            "totalResourceCount": len(resources),
            "untaggedResourceCount": untagged_count(resources),
            "highRiskCount": len(high_risk),
        },
        "complianceFindings": [
            {
                "id": r.id,
                "name": r.name,
                "issues": list(r.security_issues),
                "type": _label(r.resource_type),
                "riskLevel": r.risk_level.value,
            }
            for r in high_risk
        ],
        "costsByProvider": cost_by_provider(resources),
        "resourceTypeDistribution": dict(type_counts.most_common(TYPE_DISTRIBUTION_LIMIT)),
        "optimizationInsights": {
            "stoppedResources": {
                "count": len(stopped),
                "monthlyWastedCost": total_cost(stopped),
                "examples": [
                    f"{r.name} ({_label(r.resource_type)})" for r in stopped[:STOPPED_EXAMPLES_LIMIT]
                ],
            },
            "reservedInstanceOpportunities": {
                "eligibleResourceCount": len(ri_candidates),
                "monthlyEligibleCost": ri_eligible_cost,
                "description": ri_description,
            },
            "topExpensiveResources": [
                {
                    "name": r.name,
                    "type": _label(r.resource_type),
                    "provider": _label(r.provider),
                    "status": _label(r.status),
                    "cost": r.cost_per_month,
                }
                for r in top_expensive
            ],
        },
    }


def summarize_inventory(resources: Sequence[CloudResource]) -> str:
    return json.dumps(build_inventory_summary(resources), indent=2)


def build_prompt(resources: Sequence[CloudResource], question: str) -> str:
    """Advisor prompt: role, summarized inventory and the user's question."""
    summary = summarize_inventory(resources)
    return f"""
You are a Senior Cloud Security Architect and FinOps Specialist. You are analyzing a cloud inventory that has undergone automated compliance checks against industry standards (like CIS Benchmarks).

Inventory Data & Compliance Findings:
{summary}

User Question: {question}

Analysis Instructions:
1. Review 'complianceFindings' (derived from automated checks). If there are CIS violations (e.g., Public Buckets, Unencrypted DBs), prioritize these security risks above cost.
2. Explain *why* these are risks using standard industry terminology (e.g., "Data Exfiltration risk", "Compliance Violation").
3. Recommend specific remediation steps (e.g., "Enable server-side encryption with KMS", "Restrict Security Group 0.0.0.0/0").
4. After security, address 'optimizationInsights' for cost savings (Stopped resources, Reserved Instances).
5. Provide concrete, data-backed recommendations.
6. Use Markdown for formatting (Alerts for Critical risks, bullet points).
"""
