"""
OilDesk Server - Role Selection Validator

Enforces which role combinations are legal while a role set is being edited.
Nothing here persists anything: callers save the returned set only after an
explicit save or approve action, and only after Finalize succeeds.
"""

from roles import Role, RoleSet, CategoryOf
from models.infrastructure import (
    ConflictReason, SelectionError, ToggleResult, FinalizeResult
)

_EXCLUSIVE_PAIR = frozenset({Role.ADMIN, Role.ACCOUNTANT})


def TryToggleRole(current_set: RoleSet, candidate: Role) -> ToggleResult:
    """
    Toggle one role on a draft selection

    Removing a role always succeeds. Adding a role is refused when it would
    put admin and accountant together, or mix admin-category with
    operator-category roles.

    Args:
        current_set: Draft selection
        candidate: Role being toggled

    Returns:
        ToggleResult with the new set, or the unchanged set and a conflict reason
    """
    candidate = Role(candidate)

    if candidate in current_set:
        return ToggleResult(roles=current_set.Without(candidate))

    if candidate in _EXCLUSIVE_PAIR and current_set.Intersects(_EXCLUSIVE_PAIR - {candidate}):
        return ToggleResult(roles=current_set, reason=ConflictReason.ADMIN_ACCOUNTANT_CONFLICT)

    other_categories = current_set.Categories() - {CategoryOf(candidate)}
    if other_categories:
        return ToggleResult(roles=current_set, reason=ConflictReason.CATEGORY_MIX_CONFLICT)

    return ToggleResult(roles=current_set.With(candidate))


def Finalize(role_set: RoleSet) -> FinalizeResult:
    """
    Validate a draft selection before it is saved

    Args:
        role_set: Selection built through TryToggleRole

    Returns:
        FinalizeResult holding the unchanged set, or EmptySelection
    """
    if not role_set:
        return FinalizeResult(roles=role_set, error=SelectionError.EMPTY_SELECTION)
    return FinalizeResult(roles=role_set)


def BuildSelection(roles) -> ToggleResult:
    """
    Replay a list of roles through TryToggleRole

    Used when a whole selection arrives at once (API bodies, stored request
    roles). Stops at the first conflicting role.

    Args:
        roles: Iterable of Role values in selection order

    Returns:
        ToggleResult for the accumulated set
    """
    draft = RoleSet()
    for role in roles:
        if role in draft:
            continue
        result = TryToggleRole(draft, role)
        if not result.ok:
            return result
        draft = result.roles
    return ToggleResult(roles=draft)

