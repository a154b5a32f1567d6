"""
OilDesk Server - Role Selection Results

Tagged results returned by the role selection validator.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from roles import RoleSet


class ConflictReason(str, Enum):
    """Why a role toggle was refused"""
    ADMIN_ACCOUNTANT_CONFLICT = "AdminAccountantConflict"
    CATEGORY_MIX_CONFLICT = "CategoryMixConflict"


class SelectionError(str, Enum):
    """Why a role selection could not be committed"""
    EMPTY_SELECTION = "EmptySelection"


CONFLICT_MESSAGES = {
    ConflictReason.ADMIN_ACCOUNTANT_CONFLICT: "Admin and Accountant roles cannot be selected together",
    ConflictReason.CATEGORY_MIX_CONFLICT: "Admin/Accountant roles cannot be mixed with Operator roles",
    SelectionError.EMPTY_SELECTION: "Please select at least one role",
}


@dataclass(frozen=True)
class ToggleResult:
    """
    Outcome of toggling one role on a draft selection

    On rejection, roles holds the caller's unchanged set.
    """
    roles: RoleSet
    reason: Optional[ConflictReason] = None

    @property
    def ok(self) -> bool:
        return self.reason is None

    @property
    def message(self) -> Optional[str]:
        return CONFLICT_MESSAGES[self.reason] if self.reason else None


@dataclass(frozen=True)
class FinalizeResult:
    """Outcome of committing a draft selection"""
    roles: RoleSet
    error: Optional[SelectionError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def message(self) -> Optional[str]:
        return CONFLICT_MESSAGES[self.error] if self.error else None
