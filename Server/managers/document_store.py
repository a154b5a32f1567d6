"""
OilDesk Server - Document Store

Narrow document-style access to the collections the workflow depends on:
get-by-id, list-all, update-by-id (partial field merge) and insert, plus the
transactional request transitions used by the request lifecycle.

Every SQLAlchemy failure is rolled back and re-raised as
StoreUnavailableError so callers can tell "try again" from "access refused".
"""

import logging
from datetime import datetime
from typing import Any, Dict, Optional

from sqlalchemy.exc import SQLAlchemyError

from exceptions import StoreUnavailableError
from managers.database_manager import DatabaseManager
from models.database import (
    User, AccessRequest, OilReport, DieselReport, WasteReport, RecordStatus
)
from models.infrastructure import LifecycleError

logger = logging.getLogger(__name__)

# Collection name -> (model, primary key attribute)
COLLECTIONS = {
    "users": (User, "user_id"),
    "user_requests": (AccessRequest, "request_id"),
    "oil_reports": (OilReport, "report_id"),
    "diesel_reports": (DieselReport, "report_id"),
    "waste_reports": (WasteReport, "report_id"),
}


class DocumentStore:
    """
    Document-style access to the database managed by a DatabaseManager
    """

    def __init__(self, db_manager: DatabaseManager):
        self.db_manager = db_manager

    # ==================== Generic Document Operations ====================

    def Get(self, collection: str, doc_id: str):
        """
        Get one document by id

        Args:
            collection: Collection name
            doc_id: Document id

        Returns:
            Detached model instance, or None if not found
        """
        model, _ = self._Collection(collection)
        session = self.db_manager.GetSession()
        try:
            return session.get(model, doc_id)
        except SQLAlchemyError as e:
            raise self._Unavailable(session, f"reading {collection}/{doc_id}", e)
        finally:
            session.close()

    def List(self, collection: str, filters: Optional[Dict[str, Any]] = None) -> list:
        """
        List documents in a collection, newest first

        Args:
            collection: Collection name
            filters: Optional field -> value equality filters

        Returns:
            List of detached model instances
        """
        model, _ = self._Collection(collection)
        session = self.db_manager.GetSession()
        try:
            query = session.query(model)
            for field, value in (filters or {}).items():
                query = query.filter(getattr(model, field) == value)
            return query.order_by(model.created_at.desc()).all()
        except SQLAlchemyError as e:
            raise self._Unavailable(session, f"listing {collection}", e)
        finally:
            session.close()

    def Update(self, collection: str, doc_id: str, fields: Dict[str, Any]) -> bool:
        """
        Merge fields into an existing document

        Args:
            collection: Collection name
            doc_id: Document id
            fields: Field values to overwrite; other fields are left alone

        Returns:
            bool: True if the document existed and was updated
        """
        model, _ = self._Collection(collection)
        self._CheckFields(model, fields)
        session = self.db_manager.GetSession()
        try:
            document = session.get(model, doc_id)
            if document is None:
                return False
            for field, value in fields.items():
                setattr(document, field, value)
            session.commit()
            return True
        except SQLAlchemyError as e:
            raise self._Unavailable(session, f"updating {collection}/{doc_id}", e)
        finally:
            session.close()

    def Insert(self, collection: str, fields: Dict[str, Any]) -> str:
        """
        Insert a new document

        Args:
            collection: Collection name
            fields: Field values; the id is generated when not supplied

        Returns:
            str: Id of the inserted document
        """
        model, key = self._Collection(collection)
        self._CheckFields(model, fields)
        session = self.db_manager.GetSession()
        try:
            document = model(**fields)
            session.add(document)
            session.commit()
            return getattr(document, key)
        except SQLAlchemyError as e:
            raise self._Unavailable(session, f"inserting into {collection}", e)
        finally:
            session.close()

    # ==================== Request Transitions ====================

    def RejectPendingRequest(self, request_id: str, now: datetime) -> Optional[LifecycleError]:
        """
        Move a pending request to rejected

        The update only matches rows still pending, so a request that was
        decided concurrently is left untouched.

        Returns:
            None on success, NOT_FOUND or ALREADY_TERMINAL otherwise
        """
        session = self.db_manager.GetSession()
        try:
            if session.get(AccessRequest, request_id) is None:
                return LifecycleError.NOT_FOUND

            updated = session.query(AccessRequest).filter(
                AccessRequest.request_id == request_id,
                AccessRequest.status == RecordStatus.PENDING.value
            ).update({
                AccessRequest.status: RecordStatus.REJECTED.value,
                AccessRequest.last_updated: now
            }, synchronize_session=False)

            if updated == 0:
                session.rollback()
                return LifecycleError.ALREADY_TERMINAL

            session.commit()
            return None
        except SQLAlchemyError as e:
            raise self._Unavailable(session, f"rejecting request {request_id}", e)
        finally:
            session.close()

    def ApprovePendingRequest(self, request_id: str, user_id: str, roles: str, now: datetime) -> Optional[LifecycleError]:
        """
        Approve a pending request and provision its user in one transaction

        Either both the request and the user record are written, or neither.

        Args:
            request_id: Request to approve
            user_id: Identity reference of the user record to upsert
            roles: Serialized role set
            now: Timestamp for last_updated (and created_at on insert)

        Returns:
            None on success, NOT_FOUND or ALREADY_TERMINAL otherwise
        """
        session = self.db_manager.GetSession()
        try:
            request = session.get(AccessRequest, request_id)
            if request is None:
                return LifecycleError.NOT_FOUND

            updated = session.query(AccessRequest).filter(
                AccessRequest.request_id == request_id,
                AccessRequest.status == RecordStatus.PENDING.value
            ).update({
                AccessRequest.status: RecordStatus.APPROVED.value,
                AccessRequest.roles: roles,
                AccessRequest.last_updated: now
            }, synchronize_session=False)

            if updated == 0:
                session.rollback()
                return LifecycleError.ALREADY_TERMINAL

            self._ProvisionUser(session, user_id, request, roles, now)
            session.commit()
            return None
        except SQLAlchemyError as e:
            raise self._Unavailable(session, f"approving request {request_id}", e)
        finally:
            session.close()

    def ListUnprovisionedApprovals(self) -> list:
        """
        Find approved requests whose user record is missing or not approved

        Returns:
            List of detached AccessRequest instances
        """
        session = self.db_manager.GetSession()
        try:
            approved = session.query(AccessRequest).filter(
                AccessRequest.status == RecordStatus.APPROVED.value,
                AccessRequest.user_id.isnot(None)
            ).all()

            inconsistent = []
            for request in approved:
                user = session.get(User, request.user_id)
                if user is None or user.status != RecordStatus.APPROVED.value:
                    inconsistent.append(request)
            return inconsistent
        except SQLAlchemyError as e:
            raise self._Unavailable(session, "scanning approved requests", e)
        finally:
            session.close()

    def ProvisionUserFromRequest(self, request_id: str, roles: str, now: datetime) -> bool:
        """
        Upsert the user record of an already approved request

        Args:
            request_id: Approved request
            roles: Serialized, already validated role set to grant
            now: Timestamp for last_updated (and created_at on insert)

        Returns:
            bool: True if a user was provisioned
        """
        session = self.db_manager.GetSession()
        try:
            request = session.get(AccessRequest, request_id)
            if request is None or request.status != RecordStatus.APPROVED.value or not request.user_id:
                return False
            self._ProvisionUser(session, request.user_id, request, roles, now)
            session.commit()
            return True
        except SQLAlchemyError as e:
            raise self._Unavailable(session, f"provisioning user for request {request_id}", e)
        finally:
            session.close()

    # ==================== Helpers ====================

    @staticmethod
    def _ProvisionUser(session, user_id: str, request: AccessRequest, roles: str, now: datetime) -> None:
        user = session.get(User, user_id)
        if user is None:
            user = User(user_id=user_id, created_at=now)
            session.add(user)

        user.name = request.name
        user.email = request.email
        user.phone = request.phone
        user.roles = roles
        user.status = RecordStatus.APPROVED.value
        user.last_updated = now

    @staticmethod
    def _Collection(collection: str):
        if collection not in COLLECTIONS:
            raise ValueError(f"Unknown collection '{collection}'")
        return COLLECTIONS[collection]

    @staticmethod
    def _CheckFields(model, fields: Dict[str, Any]) -> None:
        columns = set(model.__table__.columns.keys())
        unknown = set(fields) - columns
        if unknown:
            raise ValueError(f"Unknown fields for {model.__tablename__}: {sorted(unknown)}")

    @staticmethod
    def _Unavailable(session, action: str, error: Exception) -> StoreUnavailableError:
        session.rollback()
        logger.error(f"Database error while {action}: {str(error)}")
        return StoreUnavailableError(f"Database error while {action}")
