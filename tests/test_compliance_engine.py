"""
Unit tests for the compliance scoring engine.

- Covers every rule in the table plus the governance exclusivity rule.
- Verifies the raise-only risk merge and purity of the engine.
"""

import pytest

from cloudinventory.compliance.engine import (
    RULES,
    apply_security_controls,
    evaluate,
    score,
    score_inventory,
)
from cloudinventory.core.models import RiskLevel

UNTAGGED = "Resource is completely untagged"
MISSING_TAGS = "Missing standard tags (Owner/CostCenter/Environment)"
PUBLIC_BUCKET = "Storage bucket has public access enabled"
BUCKET_ENCRYPTION = "Storage bucket server-side encryption not enabled"
PUBLIC_COMPUTE = "Compute instance exposed to public internet"
ADMIN_PORTS = "Critical ports (22/3389) open to all inbound traffic"
DB_ENCRYPTION = "Database storage is not encrypted at rest"
K8S_DASHBOARD = "Dashboard is enabled (high attack surface)"
K8S_RBAC = "RBAC is not enabled"
OUTDATED_TLS = "Using outdated SSL policy (pre-TLS 1.2)"


def test_database_with_project_tag_only(make_resource):
    db = make_resource(type="Database", tags={"Project": "CRM"}, metadata={"storageEncrypted": False})

    result = score(db)

    assert result.risk_level == RiskLevel.HIGH
    assert result.issues == [MISSING_TAGS, DB_ENCRYPTION]


def test_untagged_public_unencrypted_bucket(make_resource):
    bucket = make_resource(
        type="Storage Bucket",
        tags={},
        metadata={"publicAccess": True, "encryption": "None"},
    )

    risk, issues = score(bucket)

    assert risk == RiskLevel.CRITICAL
    assert issues == [UNTAGGED, PUBLIC_BUCKET, BUCKET_ENCRYPTION]


@pytest.mark.parametrize("rtype", ["Compute Instance", "Storage Bucket", "Database", "VPC", "Function"])
def test_untagged_never_secure_and_no_missing_tags_finding(make_resource, rtype):
    resource = make_resource(type=rtype, tags={}, metadata={
        "storageEncrypted": True, "encryption": "AES256",
    })

    risk, issues = score(resource)

    assert risk != RiskLevel.SECURE
    assert issues.count(UNTAGGED) == 1
    assert MISSING_TAGS not in issues


def test_public_bucket_is_critical_even_with_other_findings(make_resource):
    bucket = make_resource(
        type="Storage Bucket",
        tags={"Project": "Logs"},
        metadata={"publicAccess": True, "encryption": "AES256"},
    )

    risk, issues = score(bucket)

    assert risk == RiskLevel.CRITICAL
    assert issues == [MISSING_TAGS, PUBLIC_BUCKET]


@pytest.mark.parametrize("encryption", ["AES256", "AWS-KMS"])
def test_bucket_with_approved_encryption_is_secure(make_resource, encryption):
    bucket = make_resource(type="Storage Bucket", metadata={"publicAccess": False, "encryption": encryption})

    assert score(bucket) == (RiskLevel.SECURE, [])


def test_bucket_without_encryption_field_is_flagged(make_resource):
    bucket = make_resource(type="Storage Bucket", metadata={})

    assert score(bucket) == (RiskLevel.HIGH, [BUCKET_ENCRYPTION])


def test_public_access_must_be_exactly_true(make_resource):
    bucket = make_resource(type="Storage Bucket", metadata={"publicAccess": "true", "encryption": "AES256"})

    assert score(bucket).risk_level == RiskLevel.SECURE


def test_public_compute_and_admin_ports(make_resource):
    vm = make_resource(
        type="Compute Instance",
        tags={"Environment": "Dev"},
        metadata={"publicIp": "20.40.10.5", "openPorts": [22, 8080]},
    )

    assert score(vm) == (RiskLevel.HIGH, [PUBLIC_COMPUTE, ADMIN_PORTS])


def test_bastion_host_may_have_public_ip(make_resource):
    bastion = make_resource(
        type="Compute Instance",
        tags={"Owner": "SecOps", "Type": "Bastion-Linux"},
        metadata={"publicIp": "1.2.3.4"},
    )

    assert score(bastion) == (RiskLevel.SECURE, [])


@pytest.mark.parametrize("ports", [[3389], (22,), [443, 3389]])
def test_admin_ports_detected(make_resource, ports):
    vm = make_resource(type="Compute Instance", metadata={"openPorts": list(ports)})

    assert score(vm).issues == [ADMIN_PORTS]


@pytest.mark.parametrize("ports", ["22", 22, {"22": True}, ["22"], [True], None])
def test_wrong_typed_open_ports_are_not_open(make_resource, ports):
    vm = make_resource(type="Compute Instance", metadata={"openPorts": ports})

    assert score(vm) == (RiskLevel.SECURE, [])


def test_database_encryption_requires_explicit_true(make_resource):
    missing = make_resource(type="Database", metadata={})
    encrypted = make_resource(type="Database", metadata={"storageEncrypted": True})
    stringly = make_resource(type="Database", metadata={"storageEncrypted": "yes"})

    assert score(missing).issues == [DB_ENCRYPTION]
    assert score(encrypted).issues == []
    assert score(stringly).issues == [DB_ENCRYPTION]


def test_kubernetes_dashboard_and_rbac(make_resource):
    cluster = make_resource(
        type="Kubernetes Cluster",
        tags={"Environment": "Development", "Owner": "Platform"},
        metadata={"dashboardEnabled": True, "rbacEnabled": False},
    )

    assert score(cluster) == (RiskLevel.HIGH, [K8S_DASHBOARD, K8S_RBAC])


def test_kubernetes_absent_rbac_flag_does_not_fire(make_resource):
    cluster = make_resource(type="Kubernetes Cluster", metadata={"dashboardEnabled": False})

    assert score(cluster) == (RiskLevel.SECURE, [])


def test_outdated_tls_on_internet_facing_load_balancer(make_resource):
    lb = make_resource(
        type="Load Balancer",
        metadata={"scheme": "internet-facing", "sslPolicy": "ELBSecurityPolicy-2016-08"},
    )

    assert score(lb) == (RiskLevel.MEDIUM, [OUTDATED_TLS])


def test_internal_load_balancer_tls_is_ignored(make_resource):
    lb = make_resource(
        type="Load Balancer",
        metadata={"scheme": "internal", "sslPolicy": "ELBSecurityPolicy-2016-08"},
    )

    assert score(lb) == (RiskLevel.SECURE, [])


def test_medium_finding_raises_governance_low(make_resource):
    lb = make_resource(
        type="Load Balancer",
        tags={"Service": "Frontend"},
        metadata={"scheme": "internet-facing", "sslPolicy": "ELBSecurityPolicy-2016-08"},
    )

    assert score(lb) == (RiskLevel.MEDIUM, [MISSING_TAGS, OUTDATED_TLS])


def test_later_medium_never_downgrades_critical(make_resource):
    # A load balancer rule can never fire for a bucket, so check the merge directly.
    assert RiskLevel.CRITICAL.raise_to(RiskLevel.MEDIUM) == RiskLevel.CRITICAL
    assert RiskLevel.LOW.raise_to(RiskLevel.MEDIUM) == RiskLevel.MEDIUM
    assert RiskLevel.SECURE.raise_to(RiskLevel.SECURE) == RiskLevel.SECURE


def test_rules_only_apply_to_their_type(make_resource):
    vpc = make_resource(type="VPC", metadata={
        "publicAccess": True,
        "publicIp": "1.1.1.1",
        "storageEncrypted": False,
        "dashboardEnabled": True,
    })

    assert score(vpc) == (RiskLevel.SECURE, [])


def test_unknown_type_and_missing_metadata_are_total(make_resource):
    odd = make_resource(type="Message Queue", metadata=None)
    typeless = make_resource(type=None)

    assert score(odd) == (RiskLevel.SECURE, [])
    assert score(typeless) == (RiskLevel.SECURE, [])


def test_secure_when_no_rule_fires_and_standard_tag_present(make_resource):
    for tag in ("Owner", "CostCenter", "Environment"):
        resource = make_resource(type="Function", tags={tag: "x", "Project": "Media"})
        assert score(resource) == (RiskLevel.SECURE, [])


def test_scoring_is_idempotent_and_pure(make_resource):
    bucket = make_resource(type="Storage Bucket", tags={}, metadata={"publicAccess": True})
    before = bucket.model_dump()

    first = apply_security_controls(bucket)
    second = apply_security_controls(first)

    assert score(bucket) == score(bucket)
    assert first.risk_level == second.risk_level == RiskLevel.CRITICAL
    assert first.security_issues == second.security_issues
    assert bucket.model_dump() == before
    assert bucket.risk_level == RiskLevel.SECURE


def test_stale_risk_fields_are_overwritten(make_resource):
    resource = make_resource(riskLevel="Critical", securityIssues=["stale"])

    scored = apply_security_controls(resource)

    assert scored.risk_level == RiskLevel.SECURE
    assert scored.security_issues == []


def test_evaluate_reports_controls_in_order(make_resource):
    bucket = make_resource(type="Storage Bucket", tags={}, metadata={"publicAccess": True})

    hits = evaluate(bucket)

    assert [h.control for h in hits] == ["Governance", "CIS 2.1", "CIS 2.2"]
    assert [h.category for h in hits] == ["governance", "security", "security"]


def test_rule_ids_are_unique():
    ids = [rule.rule_id for rule in RULES]
    assert len(ids) == len(set(ids))


def test_reference_inventory_scores(by_id):
    expected = {
        "i-0a1b2c3d4e5f": RiskLevel.SECURE,
        "db-mysql-prod-01": RiskLevel.SECURE,
        "s3-legacy-logs": RiskLevel.CRITICAL,
        "vm-jenkins-build": RiskLevel.HIGH,
        "vpc-main-prod": RiskLevel.SECURE,
        "lb-frontend-app": RiskLevel.MEDIUM,
        "func-resize-img": RiskLevel.LOW,
        "aks-cluster-dev": RiskLevel.HIGH,
    }
    assert {rid: r.risk_level for rid, r in by_id.items()} == expected


def test_score_inventory_accepts_any_iterable(make_resource):
    resources = (make_resource(id=f"f-{n}", tags={}) for n in range(3))

    scored = score_inventory(resources)

    assert [r.id for r in scored] == ["f-0", "f-1", "f-2"]
    assert all(r.security_issues == [UNTAGGED] for r in scored)
