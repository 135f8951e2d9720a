"""Custom exceptions for the cloud inventory platform."""

from typing import Optional, Dict, Any


class InventoryException(Exception):
    """Base exception for the inventory platform."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class DiscoveryException(InventoryException):
    """Raised when snapshot discovery fails."""

    def __init__(self, discovery_type: str, message: str, details: Optional[Dict[str, Any]] = None):
        self.discovery_type = discovery_type
        super().__init__(f"Discovery failed for {discovery_type}: {message}", details)


class InventoryImportError(InventoryException):
    """Raised when an imported inventory document is not valid JSON."""

    def __init__(self, message: str, line: Optional[int] = None, column: Optional[int] = None):
        self.line = line
        self.column = column
        details = {"line": line, "column": column} if line is not None else {}
        super().__init__(f"Failed to import inventory: {message}", details)


class PermissionDeniedError(InventoryException):
    """Raised when the current user's role does not grant an action."""

    def __init__(self, action: str, role: str):
        self.action = action
        self.role = role
        super().__init__(f"Role {role} is not allowed to {action}")


class AdvisorException(InventoryException):
    """Raised when the AI advisor service cannot be reached."""
    pass


class ConfigurationException(InventoryException):
    """Raised when configuration is invalid."""
    pass
