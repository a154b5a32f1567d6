"""
OilDesk Server - Database Module

This module exports the global database, identity and session instances for
use across the application.
"""

from managers.database_manager import DatabaseManager
from managers.document_store import DocumentStore
from identity_provider import IdentityProvider
from session_resolver import SessionTracker

# Global instances
# Initialized in server.py lifespan handler (see InitializeServices)
db_manager: DatabaseManager = None
document_store: DocumentStore = None
identity_provider: IdentityProvider = None
session_tracker: SessionTracker = None


def InitializeServices(manager: DatabaseManager) -> None:
    """
    Build the global store, identity provider and session tracker

    Args:
        manager: DatabaseManager for the active database
    """
    global db_manager, document_store, identity_provider, session_tracker

    import admin_sessions

    db_manager = manager
    document_store = DocumentStore(manager)
    identity_provider = IdentityProvider(manager)
    session_tracker = SessionTracker(document_store, identity_provider)
    identity_provider.OnIdentityChange(admin_sessions.HandleIdentityChange)
