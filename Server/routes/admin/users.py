"""
OilDesk Server - Admin Users Endpoints
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException

from auth import RequireAdmin
from exceptions import StoreUnavailableError
from models.api import UpdateUserRolesRequest, ToggleRoleRequest
from models.infrastructure import AdminSession, LifecycleResult
from routes.admin.roles import ParseRoleList, RaiseForLifecycle
from role_validator import TryToggleRole
from roles import ParseRole
from routes.serializers import UserToDict, RoleSetToList, RolesToList
from user_directory import SearchUsers, SaveUserRoles

# Create logger
logger = logging.getLogger(__name__)

# Create router instance
router = APIRouter()


# ==================== Admin - User Management ====================

@router.get("/admin/api/users", tags=["Admin"])
async def admin_list_users(
    search: Optional[str] = None,
    session: AdminSession = Depends(RequireAdmin)
):
    """
    List users, newest first

    Args:
        search: Optional text matched against name, email and roles
        session: Admin session from dependency

    Returns:
        List of users
    """
    from database import document_store

    try:
        users = SearchUsers(document_store, search)
    except StoreUnavailableError as e:
        raise HTTPException(status_code=503, detail=str(e))

    return {
        "success": True,
        "users": [UserToDict(user) for user in users]
    }


@router.get("/admin/api/users/{user_id}", tags=["Admin"])
async def admin_get_user(
    user_id: str,
    session: AdminSession = Depends(RequireAdmin)
):
    """
    Get one user

    Args:
        user_id: User identifier
        session: Admin session from dependency

    Returns:
        User details
    """
    from database import document_store

    try:
        user = document_store.Get("users", user_id)
    except StoreUnavailableError as e:
        raise HTTPException(status_code=503, detail=str(e))

    if not user:
        raise HTTPException(status_code=404, detail=f"User '{user_id}' not found")

    return {
        "success": True,
        "user": UserToDict(user)
    }


@router.put("/admin/api/users/{user_id}/roles", tags=["Admin"])
async def admin_update_user_roles(
    user_id: str,
    request_data: UpdateUserRolesRequest,
    session: AdminSession = Depends(RequireAdmin)
):
    """
    Save a user's role selection

    Args:
        user_id: User identifier
        request_data: Roles in selection order
        session: Admin session from dependency

    Returns:
        Success message with the saved roles
    """
    from database import document_store

    roles = ParseRoleList(request_data.roles)

    result: LifecycleResult = SaveUserRoles(document_store, user_id, roles)
    RaiseForLifecycle(result)

    logger.info(f"Admin '{session.user.email}' updated roles for user '{user_id}'")

    return {
        "success": True,
        "message": "Roles updated successfully",
        "roles": RoleSetToList(roles)
    }


@router.post("/admin/api/users/{user_id}/roles/toggle", tags=["Admin"])
async def admin_toggle_user_role(
    user_id: str,
    request_data: ToggleRoleRequest,
    session: AdminSession = Depends(RequireAdmin)
):
    """
    Toggle one role on the draft selection for a user

    The draft starts from the user's saved roles when no draft is sent. Nothing
    is saved until the roles are PUT.

    Args:
        user_id: User identifier
        request_data: Current draft and the role being toggled
        session: Admin session from dependency

    Returns:
        The resulting draft, and the conflict when the toggle was refused
    """
    from database import document_store

    try:
        user = document_store.Get("users", user_id)
    except StoreUnavailableError as e:
        raise HTTPException(status_code=503, detail=str(e))

    if not user:
        raise HTTPException(status_code=404, detail=f"User '{user_id}' not found")

    if request_data.roles is not None:
        draft = ParseRoleList(request_data.roles)
    else:
        draft = ParseRoleList(RolesToList(user.roles) or [])

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
