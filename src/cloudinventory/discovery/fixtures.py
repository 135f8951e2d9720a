"""Reference snapshot returned by the simulated cloud fetch."""

from typing import Any, Dict, List

from cloudinventory.core.models import CostTrendPoint

REFERENCE_RESOURCES: List[Dict[str, Any]] = [
    {
        "id": "i-0a1b2c3d4e5f",
        "name": "prod-api-cluster-01",
        "provider": "AWS",
        "accountId": "123456789012",
        "type": "Compute Instance",
        "region": "us-east-1",
        "costPerMonth": 245.50,
        "tags": {"Environment": "Production", "Owner": "DevOps"},
        "status": "Running",
        "createdAt": "2023-11-15T08:00:00Z",
        "metadata": {"instanceType": "m5.xlarge", "imageId": "ami-0c55b159cbfafe1f0", "publicIp": None},
    },
    {
        "id": "db-mysql-prod-01",
        "name": "customer-records-primary",
        "provider": "GCP",
        "accountId": "gcp-proj-8821",
        "type": "Database",
        "region": "us-central1",
        "costPerMonth": 520.00,
        "tags": {"Project": "CRM", "CostCenter": "CC-901"},
        "status": "Running",
        "createdAt": "2023-01-10T12:30:00Z",
        "metadata": {"engine": "MySQL 8.0", "storage": "500GB SSD", "storageEncrypted": True},
    },
    {
        "id": "s3-legacy-logs",
        "name": "company-legacy-logs-archive",
        "provider": "AWS",
        "accountId": "123456789012",
        "type": "Storage Bucket",
        "region": "us-west-2",
        "costPerMonth": 1200.00,
        "tags": {},
        "status": "Running",
        "createdAt": "2020-05-20T09:15:00Z",
        "metadata": {"sizeGB": 45000, "storageClass": "Standard", "publicAccess": True, "encryption": "None"},
    },
    {
        "id": "vm-jenkins-build",
        "name": "ci-cd-build-agent",
        "provider": "Azure",
        "accountId": "sub-8829-1120",
        "type": "Compute Instance",
        "region": "westeurope",
        "costPerMonth": 180.00,
        "tags": {"Environment": "Dev"},
        "status": "Running",
        "createdAt": "2024-02-01T14:20:00Z",
        "metadata": {"size": "Standard_D4s_v3", "os": "Ubuntu 22.04", "publicIp": "20.40.10.5", "openPorts": [22, 8080]},
    },
    {
        "id": "vpc-main-prod",
        "name": "vpc-production-network",
        "provider": "AWS",
        "accountId": "123456789012",
        "type": "VPC",
        "region": "us-east-1",
        "costPerMonth": 0,
        "tags": {"Environment": "Production"},
        "status": "Running",
        "createdAt": "2022-06-15T10:00:00Z",
        "metadata": {"cidr": "10.0.0.0/16"},
    },
    {
        "id": "lb-frontend-app",
        "name": "app-ingress-alb",
        "provider": "AWS",
        "accountId": "123456789012",
        "type": "Load Balancer",
        "region": "us-east-1",
        "costPerMonth": 45.00,
        "tags": {"Service": "Frontend"},
        "status": "Running",
        "createdAt": "2023-11-20T11:00:00Z",
        "metadata": {"scheme": "internet-facing", "type": "application", "sslPolicy": "ELBSecurityPolicy-2016-08"},
    },
    {
        "id": "func-resize-img",
        "name": "image-processor-lambda",
        "provider": "AWS",
        "accountId": "123456789012",
        "type": "Function",
        "region": "us-east-1",
        "costPerMonth": 12.45,
        "tags": {"Project": "Media"},
        "status": "Running",
        "createdAt": "2024-03-05T16:45:00Z",
        "metadata": {"runtime": "nodejs18.x", "memory": "128MB"},
    },
    {
        "id": "aks-cluster-dev",
        "name": "dev-k8s-cluster",
        "provider": "Azure",
        "accountId": "sub-8829-1120",
        "type": "Kubernetes Cluster",
        "region": "eastus",
        "costPerMonth": 350.00,
        "tags": {"Environment": "Development", "Owner": "Platform"},
        "status": "Running",
        "createdAt": "2024-01-15T09:30:00Z",
        "metadata": {"version": "1.28.5", "nodes": 3, "dashboardEnabled": True, "rbacEnabled": False},
    },
]

COST_HISTORY: List[CostTrendPoint] = [
    CostTrendPoint(name="Jan", aws=4000, azure=2400, gcp=2400),
    CostTrendPoint(name="Feb", aws=3000, azure=1398, gcp=2210),
    CostTrendPoint(name="Mar", aws=2000, azure=9800, gcp=2290),
    CostTrendPoint(name="Apr", aws=2780, azure=3908, gcp=2000),
    CostTrendPoint(name="May", aws=1890, azure=4800, gcp=2181),
    CostTrendPoint(name="Jun", aws=2390, azure=3800, gcp=2500),
]
