"""
OilDesk Server - Infrastructure Models Package

This package contains dataclass models for sessions and the tagged results
returned by the role and request workflow.
"""

from models.infrastructure.role_selection import (
    ConflictReason, SelectionError, ToggleResult, FinalizeResult, CONFLICT_MESSAGES
)
from models.infrastructure.session import (
    DenialReason, SessionOutcome, SessionUser, SessionResult, AdminSession,
    DENIAL_MESSAGES, STORE_UNAVAILABLE_MESSAGE
)
from models.infrastructure.lifecycle_result import (
    LifecycleError, LifecycleResult, LIFECYCLE_MESSAGES
)

__all__ = [
    'ConflictReason',
    'SelectionError',
    'ToggleResult',
    'FinalizeResult',
    'CONFLICT_MESSAGES',
    'DenialReason',
    'SessionOutcome',
    'SessionUser',
    'SessionResult',
    'AdminSession',
    'DENIAL_MESSAGES',
    'STORE_UNAVAILABLE_MESSAGE',
    'LifecycleError',
    'LifecycleResult',
    'LIFECYCLE_MESSAGES',
]
