"""
OilDesk Server - Admin Roles Endpoints

Role catalog for the role editor and the toggle endpoint the editor calls
on every checkbox change. Also holds the helpers the users and requests
endpoints share for turning role lists into validated selections.
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status

from auth import RequireAdmin
from models.api import ToggleRoleRequest
from models.infrastructure import AdminSession, LifecycleError, LifecycleResult
from role_validator import TryToggleRole, BuildSelection
from roles import AllRoles, CategoryOf, ParseRole, RoleSet, ROLE_DETAILS
from routes.serializers import RoleSetToList

# Create logger
logger = logging.getLogger(__name__)

# Create router instance
router = APIRouter()

# HTTP status for each lifecycle failure
LIFECYCLE_STATUS_CODES = {
    LifecycleError.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    LifecycleError.ALREADY_TERMINAL: status.HTTP_409_CONFLICT,
    LifecycleError.EMPTY_SELECTION: status.HTTP_400_BAD_REQUEST,
    LifecycleError.INVALID_SELECTION: status.HTTP_400_BAD_REQUEST,
    LifecycleError.IN_FLIGHT: status.HTTP_409_CONFLICT,
    LifecycleError.NOT_APPROVED: status.HTTP_409_CONFLICT,
    LifecycleError.STORE_UNAVAILABLE: status.HTTP_503_SERVICE_UNAVAILABLE,
}


def ParseRoleList(values: List[str]) -> RoleSet:
    """
    Build a selection from role identifiers sent by the editor

    Args:
        values: Role identifiers in selection order

    Returns:
        RoleSet: Selection built one toggle at a time

    Raises:
        HTTPException: 400 for unknown identifiers or conflicting roles
    """
    try:
        roles = [ParseRole(value) for value in values]
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f"Unknown role: {str(e)}")

    selection = BuildSelection(roles)
    if not selection.ok:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"reason": selection.reason.value, "message": selection.message}
        )
    return selection.roles


def RaiseForLifecycle(result: LifecycleResult) -> None:
    """Raise the HTTPException matching a failed lifecycle result"""
    if result.ok:
        return
    raise HTTPException(
        status_code=LIFECYCLE_STATUS_CODES[result.error],
        detail={"reason": result.error.value, "message": result.message}
    )


# ==================== Admin - Role Catalog ====================

@router.get("/admin/api/roles", tags=["Admin"])
async def admin_list_roles(
    session: AdminSession = Depends(RequireAdmin)
):
    """
    List every role with its category and display text

    Args:
        session: Admin session from dependency

    Returns:
        List of roles in catalog order
    """
    roles_data = []
    for role in AllRoles():
        roles_data.append({
            "role": role.value,
            "category": CategoryOf(role).value,
            "label": ROLE_DETAILS[role]["label"],
            "description": ROLE_DETAILS[role]["description"]
        })

    return {
        "success": True,
        "roles": roles_data
    }


@router.post("/admin/api/roles/toggle", tags=["Admin"])
async def admin_toggle_role(
    request_data: ToggleRoleRequest,
    session: AdminSession = Depends(RequireAdmin)
):
    """
    Toggle one role on a draft selection

    Nothing is saved. A refused toggle returns the unchanged draft with the
    conflict reason so the editor can show the message.

    Args:
        request_data: Current draft and the role being toggled
        session: Admin session from dependency

    Returns:
        The resulting draft, and the conflict when the toggle was refused
    """
    draft = ParseRoleList(request_data.roles or [])

    try:
        candidate = ParseRole(request_data.role)
    except ValueError:
        raise HTTPException(status_code=400, detail=f"Unknown role: '{request_data.role}'")

    result = TryToggleRole(draft, candidate)

    return {
        "success": result.ok,
        "roles": RoleSetToList(result.roles),
        "reason": result.reason.value if result.reason else None,
        "message": result.message
    }
