# src/cloudinventory/compliance/engine.py
"""
Compliance scoring engine.

- Rules are pure predicates over a resource's type, tags and metadata.
- Rules are evaluated in a fixed order; every rule that fires contributes its
  finding, and the resource's risk level is the most severe contribution.
- Absent or wrong-typed metadata never raises: boolean checks treat it as
  false and port checks treat it as "not open".
"""

from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, List, NamedTuple, Optional, Tuple

from cloudinventory.core.models import CloudResource, ResourceType, RiskLevel

STANDARD_TAG_KEYS = ("Owner", "CostCenter", "Environment")
APPROVED_BUCKET_ENCRYPTION = ("AES256", "AWS-KMS")
ADMIN_PORTS = (22, 3389)
BASTION_MARKER = "Bastion"
OUTDATED_SSL_POLICY_MARKER = "2016"

GOVERNANCE = "governance"
SECURITY = "security"


@dataclass(frozen=True)
class ComplianceRule:
    """A single check in the rule table."""

    rule_id: str
    control: str
    category: str
    severity: RiskLevel
    message: str
    applies_to: Optional[ResourceType]
    check: Callable[[CloudResource, Dict[str, Any]], bool]

    def applies(self, resource: CloudResource) -> bool:
        return self.applies_to is None or resource.resource_type == self.applies_to


@dataclass(frozen=True)
class RuleHit:
    """A rule that fired for a resource."""

    rule_id: str
    control: str
    category: str
    severity: RiskLevel
    message: str


class ComplianceResult(NamedTuple):
    risk_level: RiskLevel
    issues: List[str]


# --- Pure rule helpers -----------------------------------------------------

def is_untagged(resource: CloudResource, m: Dict[str, Any]) -> bool:
    return len(resource.tags) == 0


def lacks_standard_tags(resource: CloudResource, m: Dict[str, Any]) -> bool:
    if len(resource.tags) == 0:
        return False
    return not any(key in resource.tags for key in STANDARD_TAG_KEYS)


def bucket_is_public(resource: CloudResource, m: Dict[str, Any]) -> bool:
    return m.get("publicAccess") is True


def bucket_lacks_encryption(resource: CloudResource, m: Dict[str, Any]) -> bool:
    return m.get("encryption") not in APPROVED_BUCKET_ENCRYPTION


def instance_is_public(resource: CloudResource, m: Dict[str, Any]) -> bool:
    if not m.get("publicIp"):
        return False
    return BASTION_MARKER not in resource.tags.get("Type", "")


def admin_ports_open(resource: CloudResource, m: Dict[str, Any]) -> bool:
    ports = m.get("openPorts")
    if not isinstance(ports, (list, tuple)):
        return False
    return any(
        isinstance(port, int) and not isinstance(port, bool) and port in ADMIN_PORTS
        for port in ports
    )


def database_unencrypted(resource: CloudResource, m: Dict[str, Any]) -> bool:
    return m.get("storageEncrypted") is not True


def dashboard_enabled(resource: CloudResource, m: Dict[str, Any]) -> bool:
    return m.get("dashboardEnabled") is True


def rbac_disabled(resource: CloudResource, m: Dict[str, Any]) -> bool:
    return m.get("rbacEnabled") is False


def uses_outdated_tls(resource: CloudResource, m: Dict[str, Any]) -> bool:
    policy = m.get("sslPolicy")
    if m.get("scheme") != "internet-facing" or not isinstance(policy, str):
        return False
    return OUTDATED_SSL_POLICY_MARKER in policy


# --- Rule table (evaluation order) ----------------------------------------

RULES: Tuple[ComplianceRule, ...] = (
    ComplianceRule(
        rule_id="GOV-TAG-001", control="Governance", category=GOVERNANCE,
        severity=RiskLevel.LOW, applies_to=None, check=is_untagged,
        message="Resource is completely untagged",
    ),
    ComplianceRule(
        rule_id="GOV-TAG-002", control="Governance", category=GOVERNANCE,
        severity=RiskLevel.LOW, applies_to=None, check=lacks_standard_tags,
        message="Missing standard tags (Owner/CostCenter/Environment)",
    ),
    ComplianceRule(
        rule_id="STG-PUB-001", control="CIS 2.1", category=SECURITY,
        severity=RiskLevel.CRITICAL, applies_to=ResourceType.STORAGE_BUCKET, check=bucket_is_public,
        message="Storage bucket has public access enabled",
    ),
    ComplianceRule(
        rule_id="STG-ENC-001", control="CIS 2.2", category=SECURITY,
        severity=RiskLevel.HIGH, applies_to=ResourceType.STORAGE_BUCKET, check=bucket_lacks_encryption,
        message="Storage bucket server-side encryption not enabled",
    ),
    ComplianceRule(
        rule_id="VM-PUB-001", control="CIS 4.1", category=SECURITY,
        severity=RiskLevel.HIGH, applies_to=ResourceType.COMPUTE_INSTANCE, check=instance_is_public,
        message="Compute instance exposed to public internet",
    ),
    ComplianceRule(
        rule_id="VM-NET-001", control="Network Security", category=SECURITY,
        severity=RiskLevel.HIGH, applies_to=ResourceType.COMPUTE_INSTANCE, check=admin_ports_open,
        message="Critical ports (22/3389) open to all inbound traffic",
    ),
    ComplianceRule(
        rule_id="DB-ENC-001", control="CIS 3.1", category=SECURITY,
        severity=RiskLevel.HIGH, applies_to=ResourceType.DATABASE, check=database_unencrypted,
        message="Database storage is not encrypted at rest",
    ),
    ComplianceRule(
        rule_id="K8S-DASH-001", control="CIS 5.1", category=SECURITY,
        severity=RiskLevel.HIGH, applies_to=ResourceType.KUBERNETES_CLUSTER, check=dashboard_enabled,
        message="Dashboard is enabled (high attack surface)",
    ),
    ComplianceRule(
        rule_id="K8S-RBAC-001", control="CIS 5.6", category=SECURITY,
        severity=RiskLevel.HIGH, applies_to=ResourceType.KUBERNETES_CLUSTER, check=rbac_disabled,
        message="RBAC is not enabled",
    ),
    ComplianceRule(
        rule_id="LB-TLS-001", control="TLS Security", category=SECURITY,
        severity=RiskLevel.MEDIUM, applies_to=ResourceType.LOAD_BALANCER, check=uses_outdated_tls,
        message="Using outdated SSL policy (pre-TLS 1.2)",
    ),
)


# --- Scoring ---------------------------------------------------------------

def evaluate(resource: CloudResource) -> List[RuleHit]:
    """Return every rule that fires for the resource, in evaluation order."""
    m = resource.metadata
    hits: List[RuleHit] = []
    for rule in RULES:
        if rule.applies(resource) and rule.check(resource, m):
            hits.append(RuleHit(
                rule_id=rule.rule_id,
                control=rule.control,
                category=rule.category,
                severity=rule.severity,
                message=rule.message,
            ))
    return hits


def score(resource: CloudResource) -> ComplianceResult:
    """Compute the risk level and findings for one resource."""
    risk = RiskLevel.SECURE
    issues: List[str] = []
    for hit in evaluate(resource):
        issues.append(hit.message)
        risk = risk.raise_to(hit.severity)
    return ComplianceResult(risk_level=risk, issues=issues)


def apply_security_controls(resource: CloudResource) -> CloudResource:
    """Return a copy of the resource carrying freshly derived risk fields."""
    result = score(resource)
    return resource.model_copy(update={
        "risk_level": result.risk_level,
        "security_issues": list(result.issues),
    })


def score_inventory(resources: Iterable[CloudResource]) -> List[CloudResource]:
    """Score every resource of a snapshot independently."""
    return [apply_security_controls(r) for r in resources]
