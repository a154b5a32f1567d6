"""
Tests for the document store and user directory in OilDesk Server
"""

import importlib
import sys
from pathlib import Path

import pytest
from sqlalchemy.exc import OperationalError

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from conftest import add_user
from exceptions import StoreUnavailableError
from managers.database_manager import BOOTSTRAP_ADMIN_EMAIL
from managers.document_store import DocumentStore
from models.database import Credential, RecordStatus
from models.infrastructure import LifecycleError
from roles import Role, RoleSet
from user_directory import SearchUsers, SaveUserRoles


def test_bootstrap_admin(db_manager, store):
    """First initialization creates an approved admin with credentials"""
    session = db_manager.GetSession()
    try:
        credential = session.query(Credential).filter(Credential.email == BOOTSTRAP_ADMIN_EMAIL).one()
    finally:
        session.close()

    user = store.Get("users", credential.identity_ref)
    assert user.roles == "admin"
    assert user.status == "approved"

    # Second run finds existing credentials
    assert db_manager.InitializeDatabase() is None
    assert db_manager.GetSettingInt("session_lifetime_hours") == 24
    assert db_manager.GetSettingInt("jwt_expiration_hours") == 24


def test_insert_get_update(store):
    add_user(store, "u1", "oilOperator", name="Omar")

    assert store.Update("users", "u1", {"phone": "555-0111"})

    user = store.Get("users", "u1")
    assert user.phone == "555-0111"
    assert user.name == "Omar"
    assert user.roles == "oilOperator"

    assert not store.Update("users", "missing", {"phone": "1"})
    assert store.Get("users", "missing") is None


def test_insert_generates_report_id(store):
    report_id = store.Insert("oil_reports", {"barrels_count": 12, "tank_source": "T1"})

    report = store.Get("oil_reports", report_id)
    assert report.barrels_count == 12
    assert report.created_at is not None


def test_unknown_collection_and_fields(store):
    with pytest.raises(ValueError):
        store.Get("vehicles", "x")

    with pytest.raises(ValueError):
        store.Update("users", "u1", {"favourite_colour": "red"})


def test_list_filters(store):
    add_user(store, "u1", "admin")
    add_user(store, "u2", "accountant", status="pending")

    assert {u.user_id for u in store.List("users")} >= {"u1", "u2"}
    assert [u.user_id for u in store.List("users", {"status": "pending"})] == ["u2"]


def test_database_errors_become_store_unavailable(db_manager, monkeypatch):
    store = DocumentStore(db_manager)

    def broken_session():
        raise OperationalError("SELECT 1", {}, Exception("database is locked"))

    session = db_manager.GetSession()
    monkeypatch.setattr(session, "get", lambda *args, **kwargs: broken_session())
    monkeypatch.setattr(db_manager, "GetSession", lambda: session)

    with pytest.raises(StoreUnavailableError):
        store.Get("users", "u1")


def test_search_users(store):
    add_user(store, "u1", "admin", name="Alice Admin", email="alice@oildesk.local")
    add_user(store, "u2", "wasteOperator", name="Walter", email="walter@example.com")

    assert [u.user_id for u in SearchUsers(store, "ALICE")] == ["u1"]
    assert [u.user_id for u in SearchUsers(store, "example.com")] == ["u2"]
    assert [u.user_id for u in SearchUsers(store, "waste")] == ["u2"]
    assert len(SearchUsers(store, "")) == len(store.List("users"))


def test_save_user_roles(store):
    add_user(store, "u1", "oilOperator")

    result = SaveUserRoles(store, "u1", RoleSet.Of([Role.WASTE_OPERATOR, Role.DIESEL_OPERATOR]))
    assert result.ok
    assert store.Get("users", "u1").roles == "wasteOperator,dieselOperator"

    assert SaveUserRoles(store, "u1", RoleSet()).error == LifecycleError.EMPTY_SELECTION
    assert SaveUserRoles(store, "u1", RoleSet.Of([Role.ADMIN, Role.OIL_OPERATOR])).error == LifecycleError.INVALID_SELECTION
    assert SaveUserRoles(store, "ghost", RoleSet.Of([Role.ADMIN])).error == LifecycleError.NOT_FOUND

    assert store.Get("users", "u1").roles == "wasteOperator,dieselOperator"


def test_save_user_roles_requires_approved_user(store):
    add_user(store, "u2", "accountant", status=RecordStatus.PENDING)
    add_user(store, "u3", "oilOperator", status=RecordStatus.REJECTED)

    assert SaveUserRoles(store, "u2", RoleSet.Of([Role.ADMIN])).error == LifecycleError.NOT_APPROVED
    assert SaveUserRoles(store, "u3", RoleSet.Of([Role.WASTE_OPERATOR])).error == LifecycleError.NOT_APPROVED
    # Status is checked before the selection
    assert SaveUserRoles(store, "u2", RoleSet()).error == LifecycleError.NOT_APPROVED

    assert store.Get("users", "u2").roles == "accountant"
    assert store.Get("users", "u3").roles == "oilOperator"


def test_store_module_imports_cleanly():
    module = importlib.import_module("managers.document_store")

    assert callable(module.DocumentStore.List)
    assert callable(module.DocumentStore.ListUnprovisionedApprovals)
    assert module.DocumentStore.List.__annotations__["return"] is list
