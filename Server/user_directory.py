"""
OilDesk Server - User Directory

User listing, search, and role editing for the users management screen.
"""

import logging
from datetime import datetime, timezone
from typing import List, Optional

from exceptions import StoreUnavailableError
from managers.document_store import DocumentStore
from models.database import User, RecordStatus
from models.infrastructure import LifecycleError, LifecycleResult
from role_validator import Finalize
from roles import RoleSet, SerializeRoleSet

logger = logging.getLogger(__name__)


def SearchUsers(store: DocumentStore, term: Optional[str] = None) -> List[User]:
    """
    List users, optionally filtered by a search term

    Args:
        store: Document store
        term: Case-insensitive text matched against name, email and roles

    Returns:
        List of User records, newest first
    """
    users = store.List("users")
    if not term:
        return users

    term = term.strip().lower()
    return [
        user for user in users
        if term in (user.name or "").lower()
        or term in (user.email or "").lower()
        or term in (user.roles or "").lower()
    ]


def SaveUserRoles(store: DocumentStore, user_id: str, roles: RoleSet) -> LifecycleResult:
    """
    Save an edited role selection to an existing, approved user

    Args:
        store: Document store
        user_id: User to update
        roles: Selection built through the role editor

    Returns:
        LifecycleResult: ok, or NotFound / NotApproved / EmptySelection /
        InvalidSelection / StoreUnavailable
    """
    try:
        user = store.Get("users", user_id)
    except StoreUnavailableError:
        return LifecycleResult(LifecycleError.STORE_UNAVAILABLE)

    if not user:
        return LifecycleResult(LifecycleError.NOT_FOUND)
    if user.status != RecordStatus.APPROVED.value:
        logger.warning(f"Refusing role edit for user '{user_id}' with status '{user.status}'")
        return LifecycleResult(LifecycleError.NOT_APPROVED)

    finalized = Finalize(roles)
    if not finalized.ok:
        return LifecycleResult(LifecycleError.EMPTY_SELECTION)
    if not roles.IsValid():
        return LifecycleResult(LifecycleError.INVALID_SELECTION)

    try:
        updated = store.Update("users", user_id, {
            "roles": SerializeRoleSet(finalized.roles),
            "last_updated": datetime.now(timezone.utc)
        })
    except StoreUnavailableError:
        return LifecycleResult(LifecycleError.STORE_UNAVAILABLE)

    if not updated:
        return LifecycleResult(LifecycleError.NOT_FOUND)

    logger.info(f"Roles for user '{user_id}' set to '{SerializeRoleSet(roles)}'")
    return LifecycleResult()
