"""Static role simulation: role -> allowed actions."""

from enum import Enum
from typing import Dict, FrozenSet, List, Optional
import structlog

from cloudinventory.core.exceptions import PermissionDeniedError
from cloudinventory.core.models import User, UserRole

logger = structlog.get_logger(__name__)


class Permission(str, Enum):
    MANAGE_CONNECTIONS = "manage_connections"
    IMPORT_DATA = "import_data"
    VIEW_DETAILS = "view_details"


ROLE_PERMISSIONS: Dict[UserRole, FrozenSet[Permission]] = {
    UserRole.ADMIN: frozenset({
        Permission.MANAGE_CONNECTIONS,
        Permission.IMPORT_DATA,
        Permission.VIEW_DETAILS,
    }),
    UserRole.EDITOR: frozenset({
        Permission.MANAGE_CONNECTIONS,
        Permission.VIEW_DETAILS,
    }),
    UserRole.VIEWER: frozenset({
        Permission.VIEW_DETAILS,
    }),
}

MOCK_USERS: List[User] = [
    User(
        id="u1",
        name="Sarah Connor",
        email="sarah@skynet-defense.com",
        role=UserRole.ADMIN,
        avatar="https://api.dicebear.com/7.x/avataaars/svg?seed=Sarah&backgroundColor=b6e3f4",
    ),
    User(
        id="u2",
        name="John Doe",
        email="john@techcorp.com",
        role=UserRole.EDITOR,
        avatar="https://api.dicebear.com/7.x/avataaars/svg?seed=John&backgroundColor=c0aede",
    ),
    User(
        id="u3",
        name="Guest Observer",
        email="guest@auditor.com",
        role=UserRole.VIEWER,
        avatar="https://api.dicebear.com/7.x/avataaars/svg?seed=Guest&backgroundColor=ffdfbf",
    ),
]


def role_allows(role: UserRole, action) -> bool:
    try:
        permission = Permission(action)
    except ValueError:
        return False
    return permission in ROLE_PERMISSIONS.get(role, frozenset())


class AuthService:
    """Holds the simulated current user; there is no real authentication."""

    def __init__(self, users: Optional[List[User]] = None, current_user_id: Optional[str] = None):
        self.users = list(users or MOCK_USERS)
        self._current = self.users[0]
        if current_user_id:
            self.switch_user(current_user_id)

    @property
    def current_user(self) -> User:
        return self._current

    def switch_user(self, user_id: str) -> User:
        """Switch to another known user; unknown ids keep the current user."""
        for user in self.users:
            if user.id == user_id:
                self._current = user
                logger.info("Switched simulated user", user_id=user.id, role=user.role.value)
                break
        else:
            logger.warning("Unknown user id, keeping current user", user_id=user_id)
        return self._current

    def has_permission(self, action) -> bool:
        return role_allows(self._current.role, action)

    def require(self, action) -> None:
        if not self.has_permission(action):
            raise PermissionDeniedError(str(getattr(action, "value", action)), self._current.role.value)
