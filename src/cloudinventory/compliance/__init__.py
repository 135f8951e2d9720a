"""
Compliance Module - rule-based risk scoring and posture
"""

from .engine import (
    RULES,
    ComplianceResult,
    ComplianceRule,
    RuleHit,
    apply_security_controls,
    evaluate,
    score,
    score_inventory,
)
from .posture import filter_issues, security_score, summarize_posture

__all__ = [
    "RULES",
    "ComplianceResult",
    "ComplianceRule",
    "RuleHit",
    "apply_security_controls",
    "evaluate",
    "score",
    "score_inventory",
    "filter_issues",
    "security_score",
    "summarize_posture",
]
