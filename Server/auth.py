"""
OilDesk Server - Authentication Utilities

This module provides authentication functionality including:
- Sign-in: credential verification followed by session resolution
- JWT token generation and validation for API clients
- Session and role dependencies for protected routes

A protected route never reads the users table: it re-uses the session that
was resolved at sign-in and re-evaluates the authorization policy against it
on every request.
"""

import secrets
import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError, jwt

from admin_sessions import GetSession, SESSION_COOKIE_NAME
from authorization import Authorize, Decision, ANY_AUTHENTICATED, RequiredRoles
from exceptions import StoreUnavailableError
from models.auth import TokenData
from models.infrastructure import AdminSession, SessionResult
from roles import Role
from session_resolver import ResolutionState

logger = logging.getLogger(__name__)

# JWT Configuration
# Tokens only reference in-memory sessions, so a per-process key is enough
SECRET_KEY = secrets.token_urlsafe(32)
ALGORITHM = "HS256"

# Security scheme for FastAPI; cookie sessions are accepted when no bearer token is sent
security = HTTPBearer(auto_error=False)


# ==================== Sign-in ====================

def SignIn(email: str, password: str) -> Optional[SessionResult]:
    """
    Verify credentials and resolve the resulting identity

    Args:
        email: Sign-in email
        password: Plain text password

    Returns:
        SessionResult for the identity, or None if a resolution for the same
        identity is still running

    Raises:
        AuthError: If the credentials are rejected
    """
    from database import identity_provider, session_tracker

    try:
        identity_ref = identity_provider.VerifyCredentials(email, password)
    except StoreUnavailableError:
        return SessionResult.Unavailable()

    if session_tracker.GetState(identity_ref) == ResolutionState.RESOLVING:
        return None

    return session_tracker.LastResult(identity_ref)


# ==================== JWT Token Functions ====================

def CreateAccessToken(data: dict, expires_hours: int) -> str:
    """
    Create a JWT access token

    Args:
        data: Dictionary containing session_id and identity_ref
        expires_hours: Hours until the token expires

    Returns:
        str: Encoded JWT token
    """
    to_encode = data.copy()
    to_encode.update({"exp": datetime.now(timezone.utc) + timedelta(hours=expires_hours)})
    return jwt.encode(to_encode, SECRET_KEY, algorithm=ALGORITHM)


def DecodeAccessToken(token: str) -> TokenData:
    """
    Decode and validate a JWT access token

    Args:
        token: JWT token string

    Returns:
        TokenData: Token data

    Raises:
        HTTPException: If token is invalid or expired
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    try:
        payload = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
        session_id: str = payload.get("session_id")
        identity_ref: str = payload.get("identity_ref")

        if session_id is None or identity_ref is None:
            raise credentials_exception

        return TokenData(session_id=session_id, identity_ref=identity_ref)

    except JWTError:
        raise credentials_exception


# ==================== Session Dependencies ====================

def GetCurrentSession(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)
) -> AdminSession:
    """
    FastAPI dependency to get the resolved session for the caller
    Accepts a bearer token (API clients) or the admin session cookie

    Returns:
        AdminSession: The caller's session

    Raises:
        HTTPException: 401 if there is no valid session
    """
    if credentials:
        token_data = DecodeAccessToken(credentials.credentials)
        session = GetSession(token_data.session_id)
    else:
        session = GetSession(request.cookies.get(SESSION_COOKIE_NAME))

    if session is None or not session.authenticated:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return session


def RequireRoles(required_roles: RequiredRoles):
    """
    Dependency factory to create a role checking dependency

    Args:
        required_roles: Allowed roles, or ANY_AUTHENTICATED

    Returns:
        Dependency function that checks the session against the policy

    Usage:
        @router.get("/something")
        async def some_endpoint(session: AdminSession = Depends(RequireRoles([Role.ADMIN]))):
            ...
    """
    if required_roles is not ANY_AUTHENTICATED:
        required_roles = frozenset(Role(role) for role in required_roles)

    def role_checker(session: AdminSession = Depends(GetCurrentSession)) -> AdminSession:
        """
        Check the current session against the allowed roles

        Raises:
            HTTPException: 403 Forbidden if the policy denies access
        """
        if Authorize(session.roles, required_roles) == Decision.DENY:
            logger.warning(f"Denied '{session.identity_ref}' access to a protected resource")
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="You do not have permission to access this page."
            )
        return session

    return role_checker


# Convenience dependencies matching the admin screens
RequireAdmin = RequireRoles([Role.ADMIN])
RequireReportViewer = RequireRoles([Role.ADMIN, Role.ACCOUNTANT])
RequireAuthenticated = RequireRoles(ANY_AUTHENTICATED)
