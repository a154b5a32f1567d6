"""
OilDesk Server - Admin Access Request Endpoints

Listing access requests and approving or rejecting pending ones.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException

from auth import RequireAdmin
from exceptions import StoreUnavailableError
from models.api import ApproveRequestBody
from models.database import RecordStatus
from models.infrastructure import AdminSession
from request_lifecycle import ApproveRequest, RejectRequest, ListRequests, ApprovalDraft, CheckPending
from routes.admin.roles import ParseRoleList, RaiseForLifecycle
from routes.serializers import RequestToDict, RoleSetToList

# Create logger
logger = logging.getLogger(__name__)

# Create router instance
router = APIRouter()


# ==================== Admin - Access Requests ====================

@router.get("/admin/api/requests", tags=["Admin"])
async def admin_list_requests(
    status: Optional[RecordStatus] = None,
    session: AdminSession = Depends(RequireAdmin)
):
    """
    List access requests, newest first

    Args:
        status: Optional status filter (pending, approved, rejected)
        session: Admin session from dependency

    Returns:
        List of requests
    """
    from database import document_store

    try:
        requests = ListRequests(document_store, status)
    except StoreUnavailableError as e:
        raise HTTPException(status_code=503, detail=str(e))

    return {
        "success": True,
        "requests": [RequestToDict(request) for request in requests]
    }


@router.get("/admin/api/requests/{request_id}", tags=["Admin"])
async def admin_get_request(
    request_id: str,
    session: AdminSession = Depends(RequireAdmin)
):
    """
    Get one access request with the initial role selection for approval

    Args:
        request_id: Request identifier
        session: Admin session from dependency

    Returns:
        Request details and approval draft
    """
    from database import document_store

    try:
        request = document_store.Get("user_requests", request_id)
    except StoreUnavailableError as e:
        raise HTTPException(status_code=503, detail=str(e))

    if not request:
        raise HTTPException(status_code=404, detail=f"Request '{request_id}' not found")

    return {
        "success": True,
        "request": RequestToDict(request),
        "approval_draft": RoleSetToList(ApprovalDraft(request))
    }


@router.post("/admin/api/requests/{request_id}/approve", tags=["Admin"])
async def admin_approve_request(
    request_id: str,
    request_data: ApproveRequestBody,
    session: AdminSession = Depends(RequireAdmin)
):
    """
    Approve a pending request and provision its user

    Args:
        request_id: Request identifier
        request_data: Roles to grant, and optionally the user id to provision
        session: Admin session from dependency

    Returns:
        Success message
    """
    from database import document_store

    try:
        request = document_store.Get("user_requests", request_id)
    except StoreUnavailableError as e:
        raise HTTPException(status_code=503, detail=str(e))

    # A decided request is reported as such whatever roles were sent
    RaiseForLifecycle(CheckPending(request))

    roles = ParseRoleList(request_data.roles)

    user_id = request_data.user_id or request.user_id
    if not user_id:
        raise HTTPException(status_code=400, detail="Request has no user identity; supply user_id")

    result = ApproveRequest(document_store, request_id, user_id, roles)
    RaiseForLifecycle(result)

    logger.info(f"Admin '{session.user.email}' approved request '{request_id}'")

    return {
        "success": True,
        "message": "Request approved successfully",
        "user_id": user_id,
        "roles": RoleSetToList(roles)
    }


@router.post("/admin/api/requests/{request_id}/reject", tags=["Admin"])
async def admin_reject_request(
    request_id: str,
    session: AdminSession = Depends(RequireAdmin)
):
    """
    Reject a pending request

    Args:
        request_id: Request identifier
        session: Admin session from dependency

    Returns:
        Success message
    """
    from database import document_store

    result = RejectRequest(document_store, request_id)
    RaiseForLifecycle(result)

    logger.info(f"Admin '{session.user.email}' rejected request '{request_id}'")

    return {
        "success": True,
        "message": "Request rejected successfully"
    }
