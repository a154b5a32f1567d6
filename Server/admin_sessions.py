"""
OilDesk Server - Admin Session Management

Simple cookie-based session management for the admin interface.
A session is created only from an Authenticated resolution and carries the
resolved user snapshot; it is handed to route handlers through dependencies.
Sessions are stored in-memory only (no persistence across restarts).
"""

import secrets
import logging
import threading
from datetime import datetime, timezone, timedelta
from typing import Optional, Dict

from models.infrastructure import AdminSession, SessionResult

logger = logging.getLogger(__name__)

# In-memory session storage
_sessions: Dict[str, AdminSession] = {}
_sessions_lock = threading.Lock()

# Session configuration
SESSION_COOKIE_NAME = "admin_session"
DEFAULT_SESSION_LIFETIME_HOURS = 24


def CreateSession(result: SessionResult, lifetime_hours: int = DEFAULT_SESSION_LIFETIME_HOURS) -> AdminSession:
    """
    Create a new admin session from an authenticated resolution

    Args:
        result: Authenticated SessionResult
        lifetime_hours: Hours until the session expires

    Returns:
        AdminSession object with new session ID

    Raises:
        ValueError: If the result is not Authenticated
    """
    if not result.is_authenticated:
        raise ValueError("Sessions can only be created for authenticated identities")

    now = datetime.now(timezone.utc)
    session = AdminSession(
        session_id=secrets.token_urlsafe(32),
        identity_ref=result.user.user_id,
        user=result.user,
        authenticated=True,
        created_at_utc=now,
        expires_at_utc=now + timedelta(hours=lifetime_hours)
    )

    with _sessions_lock:
        _sessions[session.session_id] = session

    logger.info(f"Created admin session for '{result.user.email}' (expires in {lifetime_hours} hours)")

    return session


def GetSession(session_id: str) -> Optional[AdminSession]:
    """
    Get an active session by ID

    Args:
        session_id: Session ID from cookie or token

    Returns:
        AdminSession if valid and not expired, None otherwise
    """
    if not session_id:
        return None

    with _sessions_lock:
        session = _sessions.get(session_id)
        if not session:
            return None

        if session.IsExpired():
            logger.info(f"Session expired for '{session.identity_ref}'")
            del _sessions[session_id]
            return None

    return session


def DeleteSession(session_id: str) -> Optional[AdminSession]:
    """
    Delete a session (logout)

    Args:
        session_id: Session ID to delete

    Returns:
        The deleted session, or None if it did not exist
    """
    with _sessions_lock:
        session = _sessions.pop(session_id, None)

    if session:
        logger.info(f"Deleted admin session for '{session.identity_ref}'")
    return session


def DeleteSessionsForIdentity(identity_ref: str) -> int:
    """
    Delete every session belonging to an identity

    Returns:
        Number of sessions deleted
    """
    with _sessions_lock:
        doomed = [sid for sid, session in _sessions.items() if session.identity_ref == identity_ref]
        for session_id in doomed:
            del _sessions[session_id]

    if doomed:
        logger.info(f"Deleted {len(doomed)} session(s) for '{identity_ref}'")
    return len(doomed)


def HasSessions(identity_ref: str) -> bool:
    """Whether an identity still has an unexpired session"""
    with _sessions_lock:
        return any(
            session.identity_ref == identity_ref and not session.IsExpired()
            for session in _sessions.values()
        )


def HandleIdentityChange(identity_ref: str, asserted: bool) -> None:
    """Identity listener: drop sessions when their identity is signed out"""
    if not asserted:
        DeleteSessionsForIdentity(identity_ref)


def CleanupExpiredSessions() -> int:
    """
    Remove all expired sessions from memory

    Returns:
        Number of sessions cleaned up
    """
    with _sessions_lock:
        expired_ids = [
            session_id
            for session_id, session in _sessions.items()
            if session.IsExpired()
        ]
        for session_id in expired_ids:
            del _sessions[session_id]

    if expired_ids:
        logger.info(f"Cleaned up {len(expired_ids)} expired admin sessions")

    return len(expired_ids)
