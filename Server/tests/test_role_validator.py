"""
Tests for the role selection validator in OilDesk Server

Covers the toggle rules, finalize, and exhaustive checks that toggling never
produces an invalid selection.
"""

import sys
from itertools import combinations
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from models.infrastructure import ConflictReason, SelectionError
from role_validator import TryToggleRole, Finalize, BuildSelection
from roles import Role, RoleSet, AllRoles


def _ValidSets():
    """Every RoleSet that respects the category invariant"""
    sets = []
    for size in range(len(AllRoles()) + 1):
        for roles in combinations(AllRoles(), size):
            role_set = RoleSet.Of(roles)
            if role_set.IsValid():
                sets.append(role_set)
    return sets


def test_toggle_admin_then_accountant():
    """Toggle admin onto {} succeeds; accountant onto {admin} conflicts"""
    result = TryToggleRole(RoleSet(), Role.ADMIN)
    assert result.ok
    assert result.roles == RoleSet.Of([Role.ADMIN])

    result = TryToggleRole(result.roles, Role.ACCOUNTANT)
    assert not result.ok
    assert result.reason == ConflictReason.ADMIN_ACCOUNTANT_CONFLICT
    assert result.roles == RoleSet.Of([Role.ADMIN])
    assert result.message == "Admin and Accountant roles cannot be selected together"

    print("Admin/accountant conflict test passed")


def test_toggle_operator_onto_admin():
    result = TryToggleRole(RoleSet.Of([Role.ADMIN]), Role.OIL_OPERATOR)
    assert result.reason == ConflictReason.CATEGORY_MIX_CONFLICT
    assert result.roles == RoleSet.Of([Role.ADMIN])

    result = TryToggleRole(RoleSet.Of([Role.WASTE_OPERATOR]), Role.ACCOUNTANT)
    assert result.reason == ConflictReason.CATEGORY_MIX_CONFLICT

    print("Category mix conflict test passed")


def test_operator_roles_combine():
    role_set = RoleSet()
    for role in (Role.OIL_OPERATOR, Role.DIESEL_OPERATOR, Role.WASTE_OPERATOR):
        result = TryToggleRole(role_set, role)
        assert result.ok
        role_set = result.roles

    assert len(role_set) == 3


def test_removal_always_succeeds():
    result = TryToggleRole(RoleSet.Of([Role.ACCOUNTANT]), Role.ACCOUNTANT)
    assert result.ok
    assert result.roles == RoleSet()


def test_toggle_never_breaks_invariant():
    """No toggle on a valid set yields an invalid one"""
    for role_set in _ValidSets():
        for role in AllRoles():
            result = TryToggleRole(role_set, role)
            assert result.roles.IsValid(), f"{role_set} + {role}"
            if not result.ok:
                assert result.roles == role_set


def test_double_toggle_is_identity():
    for role_set in _ValidSets():
        for role in AllRoles():
            first = TryToggleRole(role_set, role)
            if first.ok:
                assert TryToggleRole(first.roles, role).roles == role_set


def test_finalize():
    result = Finalize(RoleSet())
    assert not result.ok
    assert result.error == SelectionError.EMPTY_SELECTION

    for role_set in _ValidSets():
        if role_set:
            result = Finalize(role_set)
            assert result.ok
            assert result.roles is role_set


def test_build_selection():
    result = BuildSelection([Role.OIL_OPERATOR, Role.WASTE_OPERATOR, Role.OIL_OPERATOR])
    assert result.ok
    assert list(result.roles) == [Role.OIL_OPERATOR, Role.WASTE_OPERATOR]

    result = BuildSelection([Role.ACCOUNTANT, Role.ADMIN])
    assert result.reason == ConflictReason.ADMIN_ACCOUNTANT_CONFLICT
    assert result.roles == RoleSet.Of([Role.ACCOUNTANT])


if __name__ == "__main__":
    test_toggle_admin_then_accountant()
    test_toggle_operator_onto_admin()
    test_operator_roles_combine()
    test_removal_always_succeeds()
    test_toggle_never_breaks_invariant()
    test_double_toggle_is_identity()
    test_finalize()
    test_build_selection()
    print("\nAll role validator tests passed!")
