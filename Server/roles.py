"""
OilDesk Server - Role Catalog

Static definition of the five recognized roles, their categories, and the
RoleSet type used everywhere role logic runs.

Roles are stored as a comma-joined string (e.g. "admin" or
"oilOperator,wasteOperator"). ParseRoleSet and SerializeRoleSet are the only
places that string form is handled; everything else works on RoleSet.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterable, Iterator, Optional, Tuple


class Role(str, Enum):
    """Closed enumeration of roles"""
    ADMIN = "admin"
    ACCOUNTANT = "accountant"
    DIESEL_OPERATOR = "dieselOperator"
    OIL_OPERATOR = "oilOperator"
    WASTE_OPERATOR = "wasteOperator"


class Category(str, Enum):
    """Mutually exclusive role groupings"""
    ADMIN = "admin-category"
    OPERATOR = "operator-category"


_ROLE_CATEGORIES: Dict[Role, Category] = {
    Role.ADMIN: Category.ADMIN,
    Role.ACCOUNTANT: Category.ADMIN,
    Role.DIESEL_OPERATOR: Category.OPERATOR,
    Role.OIL_OPERATOR: Category.OPERATOR,
    Role.WASTE_OPERATOR: Category.OPERATOR,
}

# Display metadata for role editor screens
ROLE_DETAILS: Dict[Role, Dict[str, str]] = {
    Role.ADMIN: {"label": "Admin", "description": "Full control over the system"},
    Role.ACCOUNTANT: {"label": "Accountant", "description": "Access to financial reports"},
    Role.DIESEL_OPERATOR: {"label": "Diesel Operator", "description": "Access to diesel operations"},
    Role.OIL_OPERATOR: {"label": "Oil Operator", "description": "Access to oil operations"},
    Role.WASTE_OPERATOR: {"label": "Waste Operator", "description": "Access to waste operations"},
}

# Spellings written by the earlier dashboard, accepted when parsing only
LEGACY_ROLE_ALIASES: Dict[str, Role] = {
    "deizelOperator": Role.DIESEL_OPERATOR,
}

# Only these roles may sign in to the administrative application
ELIGIBLE_ROLES = frozenset({Role.ADMIN, Role.ACCOUNTANT})


def CategoryOf(role: Role) -> Category:
    """Get the category a role belongs to"""
    return _ROLE_CATEGORIES[role]


def AllRoles() -> Tuple[Role, ...]:
    """Get every role in catalog order"""
    return tuple(Role)


def ParseRole(value: str) -> Role:
    """
    Convert a stored role identifier to a Role

    Args:
        value: Role identifier (canonical or legacy spelling)

    Returns:
        Role

    Raises:
        ValueError: If the identifier is not a known role
    """
    if value in LEGACY_ROLE_ALIASES:
        return LEGACY_ROLE_ALIASES[value]
    return Role(value)


@dataclass(frozen=True, eq=False)
class RoleSet:
    """
    Unordered set of unique roles

    Equality ignores order; iteration follows insertion order so the roles
    display in the order they were selected.
    """
    roles: Tuple[Role, ...] = ()

    @classmethod
    def Of(cls, roles: Iterable[Role]) -> "RoleSet":
        """Build a RoleSet from any iterable, dropping duplicates"""
        ordered = []
        for role in roles:
            role = Role(role)
            if role not in ordered:
                ordered.append(role)
        return cls(tuple(ordered))

    def With(self, role: Role) -> "RoleSet":
        if role in self.roles:
            return self
        return RoleSet(self.roles + (role,))

    def Without(self, role: Role) -> "RoleSet":
        return RoleSet(tuple(r for r in self.roles if r != role))

    def Intersects(self, roles: Iterable[Role]) -> bool:
        return not frozenset(self.roles).isdisjoint(roles)

    def Categories(self) -> frozenset:
        return frozenset(CategoryOf(role) for role in self.roles)

    def IsValid(self) -> bool:
        """
        Check the category invariant

        A valid set is empty, entirely admin-category with at most one of
        admin/accountant, or entirely operator-category.
        """
        categories = self.Categories()
        if len(categories) > 1:
            return False
        if Role.ADMIN in self.roles and Role.ACCOUNTANT in self.roles:
            return False
        return True

    def __contains__(self, role) -> bool:
        return role in self.roles

    def __iter__(self) -> Iterator[Role]:
        return iter(self.roles)

    def __len__(self) -> int:
        return len(self.roles)

    def __bool__(self) -> bool:
        return bool(self.roles)

    def __eq__(self, other) -> bool:
        if not isinstance(other, RoleSet):
            return NotImplemented
        return frozenset(self.roles) == frozenset(other.roles)

    def __hash__(self) -> int:
        return hash(frozenset(self.roles))

    def __repr__(self) -> str:
        return f"RoleSet({SerializeRoleSet(self)!r})"


def ParseRoleSet(value: Optional[str]) -> RoleSet:
    """
    Parse a stored comma-joined role string

    Args:
        value: Stored roles string, may be None or empty

    Returns:
        RoleSet preserving the stored order

    Raises:
        ValueError: If any identifier is not a known role
    """
    if not value:
        return RoleSet()
    parts = [part.strip() for part in value.split(",")]
    return RoleSet.Of(ParseRole(part) for part in parts if part)


def SerializeRoleSet(role_set: RoleSet) -> str:
    """Serialize a RoleSet to the stored comma-joined form"""
    return ",".join(role.value for role in role_set)
