"""
Shared fixtures for OilDesk Server tests

Each test gets a fresh SQLite database under pytest's tmp_path.
"""

import sys
from datetime import datetime, timezone
from pathlib import Path

import pytest

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

import admin_sessions
import request_lifecycle
from managers.database_manager import DatabaseManager
from managers.document_store import DocumentStore
from models.database import RecordStatus


@pytest.fixture
def db_manager(tmp_path):
    manager = DatabaseManager(str(tmp_path / "oildesk.db"))
    manager.InitializeDatabase()
    yield manager
    manager.engine.dispose()


@pytest.fixture
def store(db_manager):
    return DocumentStore(db_manager)


@pytest.fixture(autouse=True)
def clear_process_state():
    """Sessions and in-flight markers are process globals"""
    admin_sessions._sessions.clear()
    request_lifecycle._in_flight.clear()
    yield
    admin_sessions._sessions.clear()
    request_lifecycle._in_flight.clear()


def add_user(store, user_id, roles, status=RecordStatus.APPROVED, name=None, email=None):
    """Insert a user record directly"""
    now = datetime.now(timezone.utc)
    return store.Insert("users", {
        "user_id": user_id,
        "name": name or user_id,
        "email": email or f"{user_id}@example.com",
        "phone": "555-0100",
        "roles": roles,
        "status": RecordStatus(status).value,
        "created_at": now,
        "last_updated": now,
    })


def add_request(store, request_id, user_id=None, roles=None, status=RecordStatus.PENDING, name="Requester"):
    """Insert an access request directly"""
    now = datetime.now(timezone.utc)
    return store.Insert("user_requests", {
        "request_id": request_id,
        "name": name,
        "email": f"{request_id}@example.com",
        "phone": "555-0199",
        "message": "Please grant access",
        "roles": roles,
        "status": RecordStatus(status).value,
        "user_id": user_id,
        "created_at": now,
        "last_updated": now,
    })
