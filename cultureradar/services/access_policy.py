"""Access policy: which actor may perform which operation.

The policy is a plain table evaluated before each operation. `allowed` is
pure; `require` turns a denial into Unauthorized (no identity) or Forbidden
(identity, but not enough rights).
"""

import enum
from dataclasses import dataclass, field
from typing import FrozenSet, Iterable, Optional

from ..config.security import AuthConfig
from ..errors import Forbidden, Unauthorized
from ..models import Role


class Operation(str, enum.Enum):
    SEARCH_EVENTS = 'search_events'
    GET_EVENT = 'get_event'
    UPCOMING_EVENTS = 'upcoming_events'
    VIEW_LOCATIONS = 'view_locations'

    CREATE_EVENT = 'create_event'
    UPDATE_EVENT = 'update_event'
    DELETE_EVENT = 'delete_event'

    LIST_PENDING = 'list_pending'
    APPROVE_EVENTS = 'approve_events'
    FETCH_EXTERNAL = 'fetch_external'
    MANAGE_LOCATIONS = 'manage_locations'

    VIEW_OWN_PROFILE = 'view_own_profile'
    UPDATE_OWN_PROFILE = 'update_own_profile'
    DELETE_OWN_PROFILE = 'delete_own_profile'
    CHANGE_OWN_PASSWORD = 'change_own_password'

    LIST_USERS = 'list_users'
    VIEW_USER = 'view_user'
    EDIT_USER = 'edit_user'
    DELETE_USER = 'delete_user'


PUBLIC_OPERATIONS = frozenset({
    Operation.SEARCH_EVENTS,
    Operation.GET_EVENT,
    Operation.UPCOMING_EVENTS,
    Operation.VIEW_LOCATIONS,
})

# Any identity will do
AUTHENTICATED_OPERATIONS = frozenset({
    Operation.CREATE_EVENT,
})

# Only the owner of the resource
OWNER_OPERATIONS = frozenset({
    Operation.VIEW_OWN_PROFILE,
    Operation.UPDATE_OWN_PROFILE,
    Operation.DELETE_OWN_PROFILE,
    Operation.CHANGE_OWN_PASSWORD,
})

ADMIN_ONLY = frozenset({Role.ADMIN.value})
CURATORS = frozenset({Role.ADMIN.value, Role.MODERATOR.value})

ROLE_OPERATIONS = {
    Operation.DELETE_EVENT: ADMIN_ONLY,
    Operation.FETCH_EXTERNAL: ADMIN_ONLY,
    Operation.MANAGE_LOCATIONS: ADMIN_ONLY,
    Operation.LIST_USERS: ADMIN_ONLY,
    Operation.VIEW_USER: ADMIN_ONLY,
    Operation.EDIT_USER: ADMIN_ONLY,
    Operation.DELETE_USER: ADMIN_ONLY,
    Operation.LIST_PENDING: CURATORS,
    Operation.APPROVE_EVENTS: CURATORS,
}


@dataclass(frozen=True)
class Actor:
    """The authenticated identity behind a request."""
    id: int
    username: str
    roles: FrozenSet[str] = field(default_factory=frozenset)

    def has_role(self, role: Role) -> bool:
        return role.value in self.roles

    @property
    def is_admin(self) -> bool:
        return self.has_role(Role.ADMIN)


def allowed(
    operation: Operation,
    actor_roles: Optional[Iterable[str]],
    resource_owner_id: Optional[int] = None,
    actor_id: Optional[int] = None,
    enforce_event_ownership: bool = False,
) -> bool:
    """
    Decide whether an operation is permitted.

    Args:
        operation: The operation being attempted
        actor_roles: Role names of the actor, or None for an anonymous caller
        resource_owner_id: Owner of the target resource, when it has one
        actor_id: Identity of the actor
        enforce_event_ownership: Restrict event updates to the creator or an ADMIN
    """
    if operation in PUBLIC_OPERATIONS:
        return True
    if actor_roles is None:
        return False

    roles = frozenset(actor_roles)

    if operation in AUTHENTICATED_OPERATIONS:
        return True

    if operation is Operation.UPDATE_EVENT:
        if not enforce_event_ownership or Role.ADMIN.value in roles:
            return True
        return actor_id is not None and actor_id == resource_owner_id

    if operation in OWNER_OPERATIONS:
        return actor_id is not None and actor_id == resource_owner_id

    required = ROLE_OPERATIONS.get(operation)
    if required is None:
        return False
    return bool(roles & required)


def require(
    operation: Operation,
    actor: Optional[Actor],
    resource_owner_id: Optional[int] = None,
    enforce_event_ownership: Optional[bool] = None,
) -> None:
    """
    Raise unless the actor may perform the operation.

    Raises:
        Unauthorized: If the operation is not public and there is no actor
        Forbidden: If the actor is known but not permitted
    """
    if enforce_event_ownership is None:
        enforce_event_ownership = AuthConfig().enforce_event_ownership

    if actor is None:
        if operation in PUBLIC_OPERATIONS:
            return
        raise Unauthorized("Authentication required")

    if not allowed(operation, actor.roles, resource_owner_id, actor.id, enforce_event_ownership):
        raise Forbidden(f"Not allowed to {operation.value.replace('_', ' ')}")
