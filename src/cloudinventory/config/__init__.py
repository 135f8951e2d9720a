from .settings import Settings, AdvisorSettings, SyncSettings, validate_environment

__all__ = ["Settings", "AdvisorSettings", "SyncSettings", "validate_environment"]
