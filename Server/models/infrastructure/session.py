"""
OilDesk Server - Session Models

Dataclasses describing the outcome of resolving an identity against the
users collection, and the session value handed down to route handlers.
"""

from datetime import datetime, timezone
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from roles import RoleSet


class DenialReason(str, Enum):
    """Why an identity was refused a session"""
    NO_RECORD = "NoRecord"
    ROLE_NOT_ELIGIBLE = "RoleNotEligible"
    NOT_APPROVED = "NotApproved"


class SessionOutcome(str, Enum):
    AUTHENTICATED = "authenticated"
    DENIED = "denied"
    ERROR = "error"


DENIAL_MESSAGES = {
    DenialReason.NO_RECORD: "User account not found.",
    DenialReason.ROLE_NOT_ELIGIBLE: "Access denied. Only approved administrators and accountants can access this panel.",
    DenialReason.NOT_APPROVED: "Access denied. Only approved administrators and accountants can access this panel.",
}

STORE_UNAVAILABLE_MESSAGE = "Error loading user data. Please try again."


@dataclass(frozen=True)
class SessionUser:
    """Snapshot of a user record taken when the session was resolved"""
    user_id: str
    name: str
    email: str
    phone: str
    roles: RoleSet
    status: str
    created_at: Optional[datetime] = None
    last_updated: Optional[datetime] = None


@dataclass(frozen=True)
class SessionResult:
    """Tagged result of resolving an identity"""
    outcome: SessionOutcome
    user: Optional[SessionUser] = None
    reason: Optional[DenialReason] = None
    error: Optional[str] = None

    @classmethod
    def Authenticated(cls, user: SessionUser) -> "SessionResult":
        return cls(outcome=SessionOutcome.AUTHENTICATED, user=user)

    @classmethod
    def Denied(cls, reason: DenialReason) -> "SessionResult":
        return cls(outcome=SessionOutcome.DENIED, reason=reason)

    @classmethod
    def Unavailable(cls, error: str = STORE_UNAVAILABLE_MESSAGE) -> "SessionResult":
        return cls(outcome=SessionOutcome.ERROR, error=error)

    @property
    def is_authenticated(self) -> bool:
        return self.outcome == SessionOutcome.AUTHENTICATED

    @property
    def is_denied(self) -> bool:
        return self.outcome == SessionOutcome.DENIED

    @property
    def message(self) -> Optional[str]:
        """Plain-language message for the login and denial pages"""
        if self.reason:
            return DENIAL_MESSAGES[self.reason]
        return self.error


@dataclass
class AdminSession:
    """
    Represents a resolved session

    Holds the authenticated user snapshot plus the authenticated flag and
    the denial reason when resolution refused access.
    """
    session_id: str
    identity_ref: str
    user: Optional[SessionUser]
    authenticated: bool
    created_at_utc: datetime
    expires_at_utc: datetime
    denial_reason: Optional[str] = None

    @property
    def roles(self) -> RoleSet:
        return self.user.roles if self.user else RoleSet()

    def IsExpired(self) -> bool:
        """Check if session has expired"""
        return datetime.now(timezone.utc) >= self.expires_at_utc
