"""
OilDesk Server - Authorization Policy

Maps a user's role set and a resource's allowed roles to an allow/deny
decision. Evaluated on every protected access; decisions are never cached.
"""

from enum import Enum
from typing import Iterable, Union

from roles import Role, RoleSet


class Decision(str, Enum):
    ALLOW = "allow"
    DENY = "deny"


class _AnyAuthenticated:
    """Sentinel for resources open to any authenticated session"""

    def __repr__(self) -> str:
        return "ANY_AUTHENTICATED"


ANY_AUTHENTICATED = _AnyAuthenticated()

RequiredRoles = Union[_AnyAuthenticated, Iterable[Role]]


def Authorize(user_roles: RoleSet, required_roles: RequiredRoles) -> Decision:
    """
    Decide whether a role set may access a resource

    Args:
        user_roles: Roles held by the session's user
        required_roles: Allowed roles, or ANY_AUTHENTICATED

    Returns:
        Decision.ALLOW if the user holds any allowed role (or any role at
        all for ANY_AUTHENTICATED), Decision.DENY otherwise
    """
    if required_roles is ANY_AUTHENTICATED:
        return Decision.ALLOW if user_roles else Decision.DENY

    if user_roles.Intersects(Role(role) for role in required_roles):
        return Decision.ALLOW
    return Decision.DENY
