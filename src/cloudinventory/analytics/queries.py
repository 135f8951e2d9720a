"""Filtering and sorting over the scored inventory."""

from dataclasses import dataclass
from datetime import date, datetime, time, timezone
from typing import Any, List, Optional, Sequence

from cloudinventory.core.models import CloudResource

ALL = "All"

SORT_FIELDS = {
    "id": "id",
    "name": "name",
    "provider": "provider",
    "type": "resource_type",
    "region": "region",
    "cost": "cost_per_month",
    "costPerMonth": "cost_per_month",
    "status": "status",
    "createdAt": "created_at",
    "riskLevel": "risk_level",
}


def _as_utc(value: datetime) -> datetime:
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


def _sort_value(value: Any) -> Any:
    if hasattr(value, "value"):
        value = value.value
    if isinstance(value, datetime):
        return value.isoformat()
    return value


@dataclass
class InventoryQuery:
    """Search, filter and sort settings for an inventory listing."""

    search: str = ""
    provider: str = ALL
    status: str = ALL
    risk_level: str = ALL
    tags: str = ""
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    sort_field: str = "cost"
    descending: bool = True

    @property
    def active_filter_count(self) -> int:
        return sum([
            self.provider != ALL,
            self.status != ALL,
            self.risk_level != ALL,
            self.tags != "",
            self.start_date is not None,
            self.end_date is not None,
        ])

    def matches(self, resource: CloudResource) -> bool:
        return (
            self._matches_search(resource)
            and self._matches_enum(resource.provider, self.provider)
            and self._matches_enum(resource.status, self.status)
            and self._matches_enum(resource.risk_level, self.risk_level)
            and self._matches_tags(resource)
            and self._matches_dates(resource)
        )

    def apply(self, resources: Sequence[CloudResource]) -> List[CloudResource]:
        """Return the matching resources, sorted."""
        matched = [r for r in resources if self.matches(r)]
        return self._sort(matched)

    def _matches_search(self, resource: CloudResource) -> bool:
        term = self.search.lower()
        return term in (resource.name or "").lower() or term in (resource.id or "").lower()

    @staticmethod
    def _matches_enum(value: Any, wanted: str) -> bool:
        if wanted == ALL:
            return True
        return value is not None and _sort_value(value) == wanted

    def _matches_tags(self, resource: CloudResource) -> bool:
        if not self.tags:
            return True
        needle = self.tags.lower()
        items = [(k.lower(), v.lower()) for k, v in resource.tags.items()]

        if ":" in needle:
            key, _, value = (part.strip() for part in needle.partition(":"))
            if key and value:
                return any(key in k and value in v for k, v in items)
            return True
        return any(needle in k or needle in v for k, v in items)

    def _matches_dates(self, resource: CloudResource) -> bool:
        if self.start_date is None and self.end_date is None:
            return True
        if resource.created_at is None:
            return False
        created = _as_utc(resource.created_at)
        if self.start_date is not None:
            start = datetime.combine(self.start_date, time.min, tzinfo=timezone.utc)
            if created < start:
                return False
        if self.end_date is not None:
            end = datetime.combine(self.end_date, time.max, tzinfo=timezone.utc)
            if created > end:
                return False
        return True

    def _sort(self, resources: List[CloudResource]) -> List[CloudResource]:
        attr = SORT_FIELDS.get(self.sort_field)
        if attr is None:
            raise ValueError(f"Unknown sort field: {self.sort_field}")

        def key(resource: CloudResource):
            value = _sort_value(getattr(resource, attr))
            if isinstance(value, (int, float)) and not isinstance(value, bool):
                return (0, value, "")
            return (1, 0, "" if value is None else str(value))

        return sorted(resources, key=key, reverse=self.descending)
