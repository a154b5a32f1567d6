"""
OilDesk Server - Admin Authentication Endpoints

This module contains the admin web interface sign-in, sign-out and denial
pages.
"""

import logging
from pathlib import Path
from typing import Optional

from fastapi import APIRouter, Request, Form
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.templating import Jinja2Templates

from admin_sessions import (
    CreateSession, GetSession, DeleteSession, HasSessions, CleanupExpiredSessions,
    SESSION_COOKIE_NAME
)
from auth import SignIn
from exceptions import AuthError
from models.infrastructure import DenialReason, DENIAL_MESSAGES


# Create logger
logger = logging.getLogger(__name__)

# Create router instance
router = APIRouter()

# Get the directory where server.py is located
script_dir = Path(__file__).parent.parent.parent

# Initialize Jinja2 templates
templates = Jinja2Templates(directory=str(script_dir / "templates"))

HOME_URL = "/admin/api/users"


def _LoginPage(request: Request, error: Optional[str], email: str = "", status_code: int = 200):
    return templates.TemplateResponse(
        request,
        "login.html",
        {"error": error, "email": email},
        status_code=status_code
    )


# ==================== Admin Authentication Endpoints ====================

@router.get("/admin", response_class=RedirectResponse, tags=["Admin"])
async def admin_root(request: Request):
    """Redirect /admin to the login page or the signed-in landing page"""
    session = GetSession(request.cookies.get(SESSION_COOKIE_NAME))
    if not session:
        return RedirectResponse(url="/admin/login", status_code=303)
    return RedirectResponse(url=HOME_URL, status_code=303)


@router.get("/admin/login", response_class=HTMLResponse, tags=["Admin"])
async def admin_login_page(request: Request):
    """
    Display admin login page

    Returns:
        HTML login form, or a redirect when already signed in
    """
    session = GetSession(request.cookies.get(SESSION_COOKIE_NAME))
    if session:
        return RedirectResponse(url=HOME_URL, status_code=303)

    return _LoginPage(request, None)


@router.post("/admin/login", response_class=HTMLResponse, tags=["Admin"])
async def admin_login_submit(
    request: Request,
    email: str = Form(...),
    password: str = Form(...)
):
    """
    Process admin login form submission

    Args:
        email: Email from form
        password: Password from form

    Returns:
        Redirect with session cookie on success, redirect to the denial page
        when the account may not use the panel, login form with an error
        otherwise
    """
    from database import db_manager

    CleanupExpiredSessions()

    try:
        result = SignIn(email, password)
    except AuthError as e:
        return _LoginPage(request, str(e), email)

    if result is None:
        return _LoginPage(request, "Sign-in already in progress. Please wait.", email, status_code=409)

    if result.is_denied:
        return RedirectResponse(url=f"/admin/denied?reason={result.reason.value}", status_code=303)

    if not result.is_authenticated:
        return _LoginPage(request, result.message, email, status_code=503)

    lifetime_hours = db_manager.GetSettingInt("session_lifetime_hours")
    session = CreateSession(result, lifetime_hours)

    response = RedirectResponse(url=HOME_URL, status_code=303)
    response.set_cookie(
        key=SESSION_COOKIE_NAME,
        value=session.session_id,
        max_age=lifetime_hours * 3600,
        httponly=True,
        samesite="lax"
    )

    return response


@router.post("/admin/logout", tags=["Admin"])
@router.get("/admin/logout", tags=["Admin"])
async def admin_logout(request: Request):
    """
    Logout endpoint - clears this session and redirects to the login page
    The identity is signed out once no other session remains
    Supports both GET and POST methods
    """
    from database import identity_provider

    session = DeleteSession(request.cookies.get(SESSION_COOKIE_NAME) or "")
    if session and not HasSessions(session.identity_ref):
        identity_provider.SignOut(session.identity_ref)

    response = RedirectResponse(url="/admin/login", status_code=303)
    response.delete_cookie(
        key=SESSION_COOKIE_NAME,
        path="/",
        samesite="lax"
    )

    return response


@router.get("/admin/denied", response_class=HTMLResponse, tags=["Admin"])
async def admin_denied(request: Request, reason: Optional[str] = None):
    """
    Display the access denied page

    Args:
        reason: Denial reason identifier from the login redirect
    """
    try:
        message = DENIAL_MESSAGES[DenialReason(reason)]
    except ValueError:
        message = DENIAL_MESSAGES[DenialReason.ROLE_NOT_ELIGIBLE]

    return templates.TemplateResponse(
        request,
        "denied.html",
        {"message": message},
        status_code=403
    )
