"""
Cloud Inventory Data Models
Shared data models for inventoried multi-cloud resources and derived statistics
"""

import math
from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError, field_validator
from typing import List, Optional, Dict, Any, Type, Union
from datetime import datetime
from enum import Enum


class CloudProvider(str, Enum):
    """Cloud provider enumeration."""
    AWS = "AWS"
    AZURE = "Azure"
    GCP = "GCP"


class ResourceType(str, Enum):
    """Resource type enumeration."""
    COMPUTE_INSTANCE = "Compute Instance"
    STORAGE_BUCKET = "Storage Bucket"
    DATABASE = "Database"
    LOAD_BALANCER = "Load Balancer"
    VPC = "VPC"
    FUNCTION = "Function"
    KUBERNETES_CLUSTER = "Kubernetes Cluster"


class ResourceStatus(str, Enum):
    """Resource lifecycle status enumeration."""
    RUNNING = "Running"
    STOPPED = "Stopped"
    TERMINATED = "Terminated"
    UNKNOWN = "Unknown"


class RiskLevel(str, Enum):
    """Risk level assigned by the compliance engine, most severe first."""
    CRITICAL = "Critical"
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"
    SECURE = "Secure"

    @property
    def rank(self) -> int:
        """Ordinal severity: Secure=0 up to Critical=4."""
        return _RISK_RANK[self]

    def raise_to(self, other: "RiskLevel") -> "RiskLevel":
        """Return the more severe of the two levels; never downgrades."""
        return other if other.rank > self.rank else self


_RISK_RANK = {
    RiskLevel.SECURE: 0,
    RiskLevel.LOW: 1,
    RiskLevel.MEDIUM: 2,
    RiskLevel.HIGH: 3,
    RiskLevel.CRITICAL: 4,
}


class UserRole(str, Enum):
    """Simulated RBAC role."""
    ADMIN = "Admin"
    EDITOR = "Editor"
    VIEWER = "Viewer"


class CredentialStatus(str, Enum):
    ACTIVE = "Active"
    ERROR = "Error"
    SYNCING = "Syncing"


_DATETIME = TypeAdapter(datetime)


def _as_text(value: Any) -> Optional[str]:
    if value is None or isinstance(value, str):
        return value
    return str(value)


def _as_enum(enum_cls: Type[Enum], value: Any, default: Any = None) -> Any:
    """Map a raw value onto ``enum_cls``; unrecognised values stay plain strings."""
    text = _as_text(value)
    if text is None:
        return default
    try:
        return enum_cls(text)
    except ValueError:
        return text


class InventoryBaseModel(BaseModel):
    """Base model with the camelCase wire format used by imports and exports."""

    model_config = ConfigDict(
        populate_by_name=True,
        extra="ignore",
    )


class CloudResource(InventoryBaseModel):
    """One inventoried cloud entity.

    ``risk_level`` and ``security_issues`` are derived by the compliance
    engine and are replaced wholesale whenever the resource is scored.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)

    id: Optional[str] = None
    name: Optional[str] = None
    provider: Optional[Union[CloudProvider, str]] = None
    account_id: Optional[str] = Field(None, alias="accountId")
    resource_type: Optional[Union[ResourceType, str]] = Field(None, alias="type")
    region: Optional[str] = None
    cost_per_month: float = Field(0.0, ge=0, alias="costPerMonth", description="Monthly cost in USD")
    tags: Dict[str, str] = Field(default_factory=dict)
    status: Union[ResourceStatus, str] = ResourceStatus.UNKNOWN
    created_at: Optional[datetime] = Field(None, alias="createdAt")
    risk_level: RiskLevel = Field(RiskLevel.SECURE, alias="riskLevel")
    security_issues: List[str] = Field(default_factory=list, alias="securityIssues")
    metadata: Dict[str, Any] = Field(default_factory=dict)

    @field_validator('id', 'name', 'account_id', 'region', mode='before')
    @classmethod
    def coerce_text(cls, v):
        return _as_text(v)

    @field_validator('provider', mode='before')
    @classmethod
    def coerce_provider(cls, v):
        return _as_enum(CloudProvider, v)

    @field_validator('resource_type', mode='before')
    @classmethod
    def coerce_resource_type(cls, v):
        # Unknown types are kept as plain strings; no type-specific rule applies to them.
        return _as_enum(ResourceType, v)

    @field_validator('status', mode='before')
    @classmethod
    def coerce_status(cls, v):
        return _as_enum(ResourceStatus, v, default=ResourceStatus.UNKNOWN)

    @field_validator('cost_per_month', mode='before')
    @classmethod
    def coerce_cost(cls, v):
        if v is None or isinstance(v, bool):
            return 0.0
        try:
            cost = float(v)
        except (TypeError, ValueError):
            return 0.0
        return cost if math.isfinite(cost) and cost >= 0 else 0.0

    @field_validator('tags', mode='before')
    @classmethod
    def coerce_tags(cls, v):
        if not isinstance(v, dict):
            return {}
        return {str(k): "" if val is None else str(val) for k, val in v.items()}

    @field_validator('created_at', mode='before')
    @classmethod
    def coerce_created_at(cls, v):
        if v is None or isinstance(v, datetime):
            return v
        try:
            return _DATETIME.validate_python(v)
        except ValidationError:
            return None

    @field_validator('metadata', mode='before')
    @classmethod
    def coerce_metadata(cls, v):
        return v if isinstance(v, dict) else {}

    @field_validator('security_issues', mode='before')
    @classmethod
    def coerce_issues(cls, v):
        if not isinstance(v, (list, tuple)):
            return []
        return [str(issue) for issue in v]

    @field_validator('risk_level', mode='before')
    @classmethod
    def coerce_risk(cls, v):
        # Derived field; whatever an import carried is overwritten by the engine.
        try:
            return RiskLevel(v)
        except (ValueError, TypeError):
            return RiskLevel.SECURE

    @property
    def provider_name(self) -> Optional[str]:
        return getattr(self.provider, "value", self.provider)

    @property
    def is_untagged(self) -> bool:
        return len(self.tags) == 0

    def to_wire(self) -> Dict[str, Any]:
        """Serialise using the camelCase import/export keys."""
        return self.model_dump(mode="json", by_alias=True)


class ProviderCount(InventoryBaseModel):
    name: str
    value: int


class CostTrendPoint(InventoryBaseModel):
    """Monthly spend per provider; historical data, not derived from the inventory."""

    name: str
    aws: float = Field(0.0, alias="AWS")
    azure: float = Field(0.0, alias="Azure")
    gcp: float = Field(0.0, alias="GCP")


class InventoryStats(InventoryBaseModel):
    """Aggregate statistics over one scored inventory snapshot."""

    total_resources: int = Field(0, ge=0, alias="totalResources")
    total_cost: float = Field(0.0, ge=0, alias="totalCost")
    untagged_count: int = Field(0, ge=0, alias="untaggedCount")
    critical_risk_count: int = Field(0, ge=0, alias="criticalRiskCount")
    provider_split: List[ProviderCount] = Field(default_factory=list, alias="providerSplit")
    cost_trend: List[CostTrendPoint] = Field(default_factory=list, alias="costTrend")


class User(InventoryBaseModel):
    id: str
    name: str
    email: str
    role: UserRole
    avatar: Optional[str] = None


class CloudCredential(InventoryBaseModel):
    """A connected cloud account."""

    id: str
    name: str
    provider: CloudProvider
    last_sync: Optional[datetime] = Field(None, alias="lastSync")
    status: CredentialStatus = CredentialStatus.ACTIVE
