"""Resource data mapping utilities."""

from typing import Any, Dict, List, Optional
import structlog

from cloudinventory.core.models import CloudResource

logger = structlog.get_logger(__name__)


class ResourceDataMapper:
    """Maps raw resource records from snapshots and imports to CloudResource."""

    def __init__(self):
        self.logger = logger.bind(mapper="resource")

    def map_resource(self, record: Any, index: Optional[int] = None) -> Optional[CloudResource]:
        """Map one raw record; returns None for records that are not JSON objects."""
        if not isinstance(record, dict):
            self.logger.warning(
                "Skipping non-object inventory record",
                index=index,
                record_type=type(record).__name__
            )
            return None

        # Field-level problems are coerced to "absent" by the model, never rejected.
        return CloudResource.model_validate(record)

    def map_resources(self, records: List[Any]) -> List[CloudResource]:
        """Map a list of raw records, preserving order and dropping unusable ones."""
        resources = []
        for index, record in enumerate(records):
            resource = self.map_resource(record, index)
            if resource is not None:
                resources.append(resource)
        return resources

    def to_record(self, resource: CloudResource) -> Dict[str, Any]:
        """Map a resource back to its camelCase record."""
        return resource.to_wire()
