"""Provider / type / resource hierarchy for the topology view."""

from typing import Any, Dict, List, Sequence

from cloudinventory.core.models import CloudProvider, CloudResource


def _type_name(resource: CloudResource) -> str:
    rtype = resource.resource_type
    if rtype is None:
        return "Unknown"
    return getattr(rtype, "value", rtype)


def build_topology(resources: Sequence[CloudResource], per_type_limit: int = 5) -> Dict[str, Any]:
    """Build root -> provider -> resource type -> resource nodes.

    Only the first ``per_type_limit`` resources of each type are attached
    so that the hierarchy stays readable.
    """
    root: Dict[str, Any] = {
        "id": "cloud-root",
        "name": "Cloud Infrastructure",
        "type": "Root",
        "children": [],
    }

    for provider in CloudProvider:
        provider_node: Dict[str, Any] = {
            "id": provider.value,
            "name": provider.value,
            "type": "Provider",
            "children": [],
        }
        root["children"].append(provider_node)

        provider_resources = [r for r in resources if r.provider == provider]
        type_names: List[str] = []
        for r in provider_resources:
            name = _type_name(r)
            if name not in type_names:
                type_names.append(name)

        for type_name in type_names:
            members = [r for r in provider_resources if _type_name(r) == type_name]
            provider_node["children"].append({
                "id": f"{provider.value}-{type_name}",
                "name": type_name,
                "type": "Type",
                "children": [
                    {
                        "id": r.id,
                        "name": r.name,
                        "type": "Resource",
                        "value": r.cost_per_month,
                        "riskLevel": r.risk_level.value,
                    }
                    for r in members[:per_type_limit]
                ],
            })

    return root
