"""
Tests for the authorization policy in OilDesk Server
"""

import sys
from itertools import combinations
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from authorization import Authorize, Decision, ANY_AUTHENTICATED
from roles import Role, RoleSet, AllRoles


def _AllSubsets():
    subsets = []
    for size in range(len(AllRoles()) + 1):
        subsets.extend(combinations(AllRoles(), size))
    return subsets


def test_allow_iff_intersection():
    """Allow exactly when the user holds one of the required roles"""
    for user_roles in _AllSubsets():
        for required in _AllSubsets():
            decision = Authorize(RoleSet.Of(user_roles), required)
            expected = Decision.ALLOW if set(user_roles) & set(required) else Decision.DENY
            assert decision == expected


def test_any_authenticated_needs_roles():
    for user_roles in _AllSubsets():
        decision = Authorize(RoleSet.Of(user_roles), ANY_AUTHENTICATED)
        assert decision == (Decision.ALLOW if user_roles else Decision.DENY)


def test_report_viewer_access():
    viewers = [Role.ADMIN, Role.ACCOUNTANT]

    assert Authorize(RoleSet.Of([Role.ACCOUNTANT]), viewers) == Decision.ALLOW
    assert Authorize(RoleSet.Of([Role.ACCOUNTANT]), [Role.ADMIN]) == Decision.DENY
    assert Authorize(RoleSet.Of([Role.OIL_OPERATOR]), viewers) == Decision.DENY


if __name__ == "__main__":
    test_allow_iff_intersection()
    test_any_authenticated_needs_roles()
    test_report_viewer_access()
    print("\nAll authorization tests passed!")
