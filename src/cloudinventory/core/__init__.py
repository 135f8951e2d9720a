from .exceptions import *
from .base_client import BaseClient
from .utils import *

__all__ = [
    "BaseClient",
    "InventoryException",
    "DiscoveryException",
    "InventoryImportError",
    "PermissionDeniedError",
    "AdvisorException",
    "ConfigurationException",
    "retry_with_backoff",
    "setup_logging",
]
