"""
OilDesk Server - Lifecycle Result Model

Tagged result returned by request lifecycle and role save operations.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class LifecycleError(str, Enum):
    NOT_FOUND = "NotFound"
    ALREADY_TERMINAL = "AlreadyTerminal"
    EMPTY_SELECTION = "EmptySelection"
    INVALID_SELECTION = "InvalidSelection"
    IN_FLIGHT = "InFlight"
    NOT_APPROVED = "NotApproved"
    STORE_UNAVAILABLE = "StoreUnavailable"


LIFECYCLE_MESSAGES = {
    LifecycleError.NOT_FOUND: "The record no longer exists.",
    LifecycleError.ALREADY_TERMINAL: "This request has already been approved or rejected.",
    LifecycleError.EMPTY_SELECTION: "Please select at least one role",
    LifecycleError.INVALID_SELECTION: "The selected roles cannot be combined.",
    LifecycleError.IN_FLIGHT: "This request is already being processed.",
    LifecycleError.NOT_APPROVED: "Roles can only be edited for approved users.",
    LifecycleError.STORE_UNAVAILABLE: "The database could not be reached. Please try again.",
}


@dataclass(frozen=True)
class LifecycleResult:
    error: Optional[LifecycleError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def message(self) -> Optional[str]:
        return LIFECYCLE_MESSAGES[self.error] if self.error else None
