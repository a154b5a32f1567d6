"""
OilDesk Server - Session Resolver

Turns an asserted identity into a session decision by reading the matching
user record, and tracks the per-identity resolution state:

    Unresolved -> Resolving -> {Authenticated, Denied, Error}

Authenticated and Denied go back to Unresolved only when the identity is
signed out. Error may be retried by a new assertion.
"""

import logging
import threading
from datetime import datetime, timezone
from enum import Enum
from typing import Dict, Optional

from exceptions import StoreUnavailableError
from identity_provider import IdentityProvider
from managers.document_store import DocumentStore
from models.database import RecordStatus
from models.infrastructure import (
    DenialReason, SessionOutcome, SessionResult, SessionUser
)
from roles import ELIGIBLE_ROLES, ParseRoleSet, RoleSet

logger = logging.getLogger(__name__)


class ResolutionState(str, Enum):
    UNRESOLVED = "unresolved"
    RESOLVING = "resolving"
    AUTHENTICATED = "authenticated"
    DENIED = "denied"
    ERROR = "error"


_OUTCOME_STATES = {
    SessionOutcome.AUTHENTICATED: ResolutionState.AUTHENTICATED,
    SessionOutcome.DENIED: ResolutionState.DENIED,
    SessionOutcome.ERROR: ResolutionState.ERROR,
}


def Resolve(store: DocumentStore, identity_ref: str) -> SessionResult:
    """
    Resolve an identity to a session result

    Only approved users holding admin or accountant may sign in. On success
    the user's last_updated is touched; a failure to record that is logged
    and does not affect the result.

    Args:
        store: Document store holding the users collection
        identity_ref: Identity reference from the identity provider

    Returns:
        SessionResult: Authenticated, Denied(reason), or Error when the store
        could not be reached
    """
    try:
        user = store.Get("users", identity_ref)
    except StoreUnavailableError:
        return SessionResult.Unavailable()

    if user is None:
        return SessionResult.Denied(DenialReason.NO_RECORD)

    try:
        roles = ParseRoleSet(user.roles)
    except ValueError:
        logger.warning(f"User '{identity_ref}' has unrecognized roles '{user.roles}'")
        roles = RoleSet()

    if not roles.Intersects(ELIGIBLE_ROLES):
        return SessionResult.Denied(DenialReason.ROLE_NOT_ELIGIBLE)

    if user.status != RecordStatus.APPROVED.value:
        return SessionResult.Denied(DenialReason.NOT_APPROVED)

    now = datetime.now(timezone.utc)
    try:
        store.Update("users", identity_ref, {"last_updated": now})
    except StoreUnavailableError:
        logger.warning(f"Could not record sign-in time for user '{identity_ref}'")

    return SessionResult.Authenticated(SessionUser(
        user_id=user.user_id,
        name=user.name,
        email=user.email,
        phone=user.phone,
        roles=roles,
        status=user.status,
        created_at=user.created_at,
        last_updated=now
    ))


class SessionTracker:
    """
    Runs Resolve for identity assertion events, one resolution at a time per
    identity, and signs out identities that were denied
    """

    def __init__(self, store: DocumentStore, identity_provider: IdentityProvider):
        self.store = store
        self.identity_provider = identity_provider
        self._states: Dict[str, ResolutionState] = {}
        self._results: Dict[str, SessionResult] = {}
        self._lock = threading.Lock()
        identity_provider.OnIdentityChange(self.HandleIdentityChange)

    def HandleIdentityChange(self, identity_ref: str, asserted: bool) -> None:
        if asserted:
            self.HandleAssertion(identity_ref)
        else:
            self.HandleLoss(identity_ref)

    def HandleAssertion(self, identity_ref: str) -> Optional[SessionResult]:
        """
        Resolve an asserted identity

        Args:
            identity_ref: Identity that was just asserted

        Returns:
            SessionResult, or None when a resolution for this identity is
            already running (the event is ignored)
        """
        with self._lock:
            if self._states.get(identity_ref) == ResolutionState.RESOLVING:
                logger.info(f"Ignoring assertion for '{identity_ref}': resolution already in progress")
                return None
            self._states[identity_ref] = ResolutionState.RESOLVING

        try:
            result = Resolve(self.store, identity_ref)
        except Exception:
            with self._lock:
                self._states[identity_ref] = ResolutionState.ERROR
            raise

        with self._lock:
            self._states[identity_ref] = _OUTCOME_STATES[result.outcome]
            self._results[identity_ref] = result

        if result.is_authenticated:
            logger.info(f"Identity '{identity_ref}' authenticated as '{result.user.email}'")
        elif result.is_denied:
            logger.warning(f"Identity '{identity_ref}' denied: {result.reason.value}")
            self.identity_provider.SignOut(identity_ref)
        else:
            logger.error(f"Could not resolve identity '{identity_ref}': {result.error}")

        return result

    def HandleLoss(self, identity_ref: str) -> None:
        """Return an identity to Unresolved after sign-out"""
        with self._lock:
            self._states.pop(identity_ref, None)

    def GetState(self, identity_ref: str) -> ResolutionState:
        with self._lock:
            return self._states.get(identity_ref, ResolutionState.UNRESOLVED)

    def LastResult(self, identity_ref: str) -> Optional[SessionResult]:
        """Most recent resolution result, kept after sign-out for display"""
        with self._lock:
            return self._results.get(identity_ref)
