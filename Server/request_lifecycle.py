"""
OilDesk Server - Request Lifecycle

Drives access requests from pending to approved or rejected. Approval writes
the request and provisions the user in a single transaction; terminal
requests are never touched again.

Each transition is submitted at most once: a request id already being
processed is refused with InFlight, and the store only updates rows that
are still pending.
"""

import logging
import threading
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import List, Optional, Set

from exceptions import StoreUnavailableError
from managers.document_store import DocumentStore
from models.database import AccessRequest, RecordStatus, TERMINAL_STATUSES
from models.infrastructure import LifecycleError, LifecycleResult
from role_validator import Finalize, TryToggleRole
from roles import RoleSet, ParseRole, ParseRoleSet, SerializeRoleSet

logger = logging.getLogger(__name__)

# Request ids with a transition currently running
_in_flight: Set[str] = set()
_in_flight_lock = threading.Lock()


@contextmanager
def _Submission(request_id: str):
    """Claim a request id for one transition; yields False if already claimed"""
    with _in_flight_lock:
        if request_id in _in_flight:
            claimed = False
        else:
            _in_flight.add(request_id)
            claimed = True
    try:
        yield claimed
    finally:
        if claimed:
            with _in_flight_lock:
                _in_flight.discard(request_id)


def CheckPending(request: Optional[AccessRequest]) -> LifecycleResult:
    """
    Whether a request can still be decided

    Returns:
        LifecycleResult: ok, or NotFound / AlreadyTerminal
    """
    if request is None:
        return LifecycleResult(LifecycleError.NOT_FOUND)
    if RecordStatus(request.status) in TERMINAL_STATUSES:
        return LifecycleResult(LifecycleError.ALREADY_TERMINAL)
    return LifecycleResult()


def RejectRequest(store: DocumentStore, request_id: str) -> LifecycleResult:
    """
    Reject a pending access request

    Args:
        store: Document store
        request_id: Request to reject

    Returns:
        LifecycleResult: ok, or NotFound / AlreadyTerminal / InFlight / StoreUnavailable
    """
    with _Submission(request_id) as claimed:
        if not claimed:
            return LifecycleResult(LifecycleError.IN_FLIGHT)

        try:
            error = store.RejectPendingRequest(request_id, datetime.now(timezone.utc))
        except StoreUnavailableError:
            return LifecycleResult(LifecycleError.STORE_UNAVAILABLE)

    if error:
        logger.info(f"Reject of request '{request_id}' refused: {error.value}")
        return LifecycleResult(error)

    logger.info(f"Request '{request_id}' rejected")
    return LifecycleResult()


def ApproveRequest(store: DocumentStore, request_id: str, user_id: str, roles: RoleSet) -> LifecycleResult:
    """
    Approve a pending access request and provision its user

    A request that no longer exists or was already decided is reported as
    such before the role selection is looked at.

    Args:
        store: Document store
        request_id: Request to approve
        user_id: Identity reference of the user record to create or update
        roles: Role selection to grant

    Returns:
        LifecycleResult: ok, or NotFound / AlreadyTerminal / EmptySelection /
        InvalidSelection / InFlight / StoreUnavailable
    """
    try:
        pending = CheckPending(store.Get("user_requests", request_id))
    except StoreUnavailableError:
        return LifecycleResult(LifecycleError.STORE_UNAVAILABLE)
    if not pending.ok:
        return pending

    finalized = Finalize(roles)
    if not finalized.ok:
        return LifecycleResult(LifecycleError.EMPTY_SELECTION)
    if not roles.IsValid():
        return LifecycleResult(LifecycleError.INVALID_SELECTION)

    with _Submission(request_id) as claimed:
        if not claimed:
            return LifecycleResult(LifecycleError.IN_FLIGHT)

        try:
            error = store.ApprovePendingRequest(
                request_id, user_id, SerializeRoleSet(finalized.roles), datetime.now(timezone.utc)
            )
        except StoreUnavailableError:
            return LifecycleResult(LifecycleError.STORE_UNAVAILABLE)

    if error:
        logger.info(f"Approve of request '{request_id}' refused: {error.value}")
        return LifecycleResult(error)

    logger.info(f"Request '{request_id}' approved; user '{user_id}' granted '{SerializeRoleSet(roles)}'")
    return LifecycleResult()


def ListRequests(store: DocumentStore, status: Optional[RecordStatus] = None) -> List[AccessRequest]:
    """
    List access requests, newest first

    Args:
        store: Document store
        status: Optional status filter

    Returns:
        List of AccessRequest records
    """
    filters = {"status": RecordStatus(status).value} if status else None
    return store.List("user_requests", filters)


def ApprovalDraft(request: AccessRequest) -> RoleSet:
    """
    Initial role selection for approving a request

    Starts from the roles the requester proposed. Proposed roles that are
    unknown or conflict with earlier ones are left out of the draft.
    """
    draft = RoleSet()
    if not request.roles:
        return draft

    for part in request.roles.split(","):
        try:
            role = ParseRole(part.strip())
        except ValueError:
            logger.warning(f"Request '{request.request_id}' proposes unknown role '{part}'")
            continue
        if role in draft:
            continue
        result = TryToggleRole(draft, role)
        if result.ok:
            draft = result.roles
    return draft


def ReconcileApprovals(store: DocumentStore) -> int:
    """
    Provision users for approved requests whose user record was never written

    The stored roles of each request go through the same checks as an
    approval. Requests whose roles are unknown, empty or conflicting are
    skipped and left for an administrator.

    Returns:
        Number of users provisioned
    """
    healed = 0
    for request in store.ListUnprovisionedApprovals():
        try:
            roles = ParseRoleSet(request.roles)
        except ValueError as e:
            logger.error(f"Cannot provision user for request '{request.request_id}': {str(e)}")
            continue

        finalized = Finalize(roles)
        if not finalized.ok or not roles.IsValid():
            logger.error(f"Cannot provision user for request '{request.request_id}': "
                         f"stored roles '{request.roles or ''}' are not a valid selection")
            continue

        if store.ProvisionUserFromRequest(request.request_id, SerializeRoleSet(finalized.roles), datetime.now(timezone.utc)):
            healed += 1
            logger.warning(f"Provisioned missing user '{request.user_id}' for approved request '{request.request_id}'")
    return healed
