from .roles import AuthService, MOCK_USERS, Permission, ROLE_PERMISSIONS, role_allows

__all__ = ["AuthService", "MOCK_USERS", "Permission", "ROLE_PERMISSIONS", "role_allows"]
