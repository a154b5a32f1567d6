"""
OilDesk Server - Authentication Endpoints

Token-based sign-in for API clients. The token references a server-side
session created from the same resolution the admin login page uses.
"""

import logging
from fastapi import APIRouter, Depends, HTTPException, status

from admin_sessions import CreateSession, DeleteSession, HasSessions
from auth import SignIn, CreateAccessToken, RequireAuthenticated
from exceptions import AuthError
from models.auth import LoginRequest, LoginResponse
from models.infrastructure import AdminSession
from routes.serializers import SessionUserToDict, RoleSetToList


# Create logger
logger = logging.getLogger(__name__)

# Create router instance
router = APIRouter()


# ==================== Authentication Endpoints ====================

@router.post("/auth/login", response_model=LoginResponse, tags=["Authentication"])
async def login(login_request: LoginRequest):
    """
    Authenticate an administrator and return a JWT token

    Args:
        login_request: Email and password

    Returns:
        LoginResponse: JWT token and expiration time

    Raises:
        HTTPException: 401 bad credentials, 403 denied, 409 sign-in already
        running, 503 store unavailable
    """
    from database import db_manager

    try:
        result = SignIn(login_request.email, login_request.password)
    except AuthError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(e),
            headers={"WWW-Authenticate": "Bearer"},
        )

    if result is None:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Sign-in already in progress. Please wait.")
    if result.is_denied:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=result.message)
    if not result.is_authenticated:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=result.message)

    expiration_hours = db_manager.GetSettingInt("jwt_expiration_hours")
    session = CreateSession(result, expiration_hours)

    access_token = CreateAccessToken(
        {"session_id": session.session_id, "identity_ref": session.identity_ref},
        expiration_hours
    )

    logger.info(f"User '{result.user.email}' logged in via API")

    return LoginResponse(
        token=access_token,
        expires_in=expiration_hours * 3600,
        name=result.user.name,
        roles=RoleSetToList(result.user.roles)
    )


@router.get("/auth/me", tags=["Authentication"])
async def current_user(session: AdminSession = Depends(RequireAuthenticated)):
    """
    Get the signed-in user

    Returns:
        dict: User snapshot held by the session
    """
    return {
        "authenticated": session.authenticated,
        "user": SessionUserToDict(session.user)
    }


@router.post("/auth/logout", tags=["Authentication"])
async def logout(session: AdminSession = Depends(RequireAuthenticated)):
    """
    End the caller's session

    Other sessions of the same identity stay open. The identity is signed
    out once its last session has ended.
    """
    from database import identity_provider

    DeleteSession(session.session_id)
    if not HasSessions(session.identity_ref):
        identity_provider.SignOut(session.identity_ref)

    return {"success": True, "message": "Signed out"}
