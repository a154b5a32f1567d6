"""
OilDesk Server - Identity Provider

Verifies sign-in credentials and announces identity assertion and loss
events. It answers "who is this?" only; whether that identity may use the
application is decided by the session resolver against the users table.

Listeners registered with OnIdentityChange are called as
callback(identity_ref, asserted) where asserted is True on sign-in and
False on sign-out.
"""

import logging
import threading
from collections import deque
from datetime import datetime, timezone
from typing import Callable, List

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from exceptions import AuthError, StoreUnavailableError, INVALID_CREDENTIALS, ACCOUNT_DISABLED
from managers.database_manager import DatabaseManager
from models.database import Credential

logger = logging.getLogger(__name__)

IdentityListener = Callable[[str, bool], None]


class IdentityProvider:
    """
    Credential verification backed by the credentials table
    """

    def __init__(self, db_manager: DatabaseManager):
        self.db_manager = db_manager
        self._listeners: List[IdentityListener] = []
        self._listeners_lock = threading.Lock()
        # Per-thread queue of events raised while listeners are running
        self._dispatch = threading.local()

    def OnIdentityChange(self, callback: IdentityListener) -> Callable[[], None]:
        """
        Register a listener for assertion and loss events

        Args:
            callback: Called with (identity_ref, asserted)

        Returns:
            Function that unregisters the listener
        """
        with self._listeners_lock:
            self._listeners.append(callback)

        def Unsubscribe() -> None:
            with self._listeners_lock:
                if callback in self._listeners:
                    self._listeners.remove(callback)

        return Unsubscribe

    def VerifyCredentials(self, email: str, password: str) -> str:
        """
        Verify an email and password, then announce the assertion

        Args:
            email: Sign-in email (case-insensitive)
            password: Plain text password

        Returns:
            str: Identity reference of the verified principal

        Raises:
            AuthError: If the credentials are wrong or the account is disabled
            StoreUnavailableError: If the credentials table cannot be read
        """
        session = self.db_manager.GetSession()
        try:
            credential = session.query(Credential).filter(
                Credential.email == email.strip().lower()
            ).first()

            if not credential or not self.db_manager.VerifyPassword(password, credential.password_hash):
                logger.warning(f"Failed sign-in attempt for '{email}'")
                raise AuthError(INVALID_CREDENTIALS)

            if credential.is_disabled:
                logger.warning(f"Sign-in attempt for disabled account '{email}'")
                raise AuthError(ACCOUNT_DISABLED)

            credential.last_login = datetime.now(timezone.utc)
            session.commit()
            identity_ref = credential.identity_ref

        except SQLAlchemyError as e:
            session.rollback()
            logger.error(f"Error verifying credentials for '{email}': {str(e)}")
            raise StoreUnavailableError("Credential store unavailable")
        finally:
            session.close()

        self._Notify(identity_ref, True)
        return identity_ref

    def SignOut(self, identity_ref: str) -> None:
        """
        Terminate an identity assertion

        Args:
            identity_ref: Identity to sign out
        """
        logger.info(f"Identity '{identity_ref}' signed out")
        self._Notify(identity_ref, False)

    def CreateCredential(self, email: str, password: str, identity_ref: str = None) -> str:
        """
        Register sign-in credentials for a new identity

        Args:
            email: Sign-in email
            password: Plain text password
            identity_ref: Optional fixed identity reference

        Returns:
            str: Identity reference

        Raises:
            ValueError: If the email is already registered
        """
        session = self.db_manager.GetSession()
        try:
            credential = Credential(
                email=email.strip().lower(),
                password_hash=self.db_manager.HashPassword(password),
                is_disabled=False
            )
            if identity_ref:
                credential.identity_ref = identity_ref
            session.add(credential)
            session.commit()
            logger.info(f"Registered credentials for '{credential.email}'")
            return credential.identity_ref

        except IntegrityError:
            session.rollback()
            raise ValueError(f"Email '{email}' is already registered")
        except SQLAlchemyError as e:
            session.rollback()
            logger.error(f"Error registering credentials for '{email}': {str(e)}")
            raise StoreUnavailableError("Credential store unavailable")
        finally:
            session.close()

    def _Notify(self, identity_ref: str, asserted: bool) -> None:
        """
        Deliver an event to every listener

        A listener may sign the identity out while handling an assertion.
        That event is queued and delivered after the current one has reached
        all listeners, so each listener sees events in the order they happened.
        """
        pending = getattr(self._dispatch, "pending", None)
        if pending is not None:
            pending.append((identity_ref, asserted))
            return

        pending = deque([(identity_ref, asserted)])
        self._dispatch.pending = pending
        try:
            while pending:
                event_ref, event_asserted = pending.popleft()
                with self._listeners_lock:
                    listeners = list(self._listeners)

                for listener in listeners:
                    listener(event_ref, event_asserted)
        finally:
            self._dispatch.pending = None
