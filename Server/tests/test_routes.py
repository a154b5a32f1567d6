"""
HTTP tests for OilDesk Server routes

Runs the routers against a temporary database through FastAPI's TestClient.
"""

import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from conftest import add_user, add_request
import database
from models.database import RecordStatus
from routes import status as status_routes, auth as auth_routes, reports as report_routes
from routes.admin import auth as admin_auth, users as admin_users
from routes.admin import roles as admin_roles, requests as admin_requests

PASSWORD = "correct-horse"


@pytest.fixture
def client(db_manager):
    database.InitializeServices(db_manager)

    app = FastAPI()
    for module in (status_routes, auth_routes, report_routes, admin_auth, admin_users, admin_roles, admin_requests):
        app.include_router(module.router)

    return TestClient(app)


def register(store, email, roles, status=RecordStatus.APPROVED, name="Test User"):
    """Create credentials and a user record; returns the identity reference"""
    identity_ref = database.identity_provider.CreateCredential(email, PASSWORD)
    add_user(store, identity_ref, roles, status=status, name=name, email=email)
    return identity_ref


def login(client, email):
    response = client.post("/auth/login", json={"email": email, "password": PASSWORD})
    assert response.status_code == 200, response.text
    return {"Authorization": f"Bearer {response.json()['token']}"}


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"
    assert response.json()["database"] == "ok"


def test_api_login_and_me(client, store):
    register(store, "boss@example.com", "admin", name="Boss")

    body = client.post("/auth/login", json={"email": "BOSS@example.com", "password": PASSWORD}).json()
    assert body["roles"] == ["admin"]
    assert body["token_type"] == "bearer"
    assert body["expires_in"] == 24 * 3600

    headers = login(client, "boss@example.com")

    response = client.get("/auth/me", headers=headers)

    assert response.status_code == 200
    assert response.json()["user"]["name"] == "Boss"
    assert response.json()["user"]["roles"] == ["admin"]


def test_api_login_failures(client, store):
    register(store, "driver@example.com", "dieselOperator")
    register(store, "newbie@example.com", "accountant", status=RecordStatus.PENDING)

    response = client.post("/auth/login", json={"email": "driver@example.com", "password": "nope"})
    assert response.status_code == 401
    assert response.json()["detail"] == "Invalid email or password. Please try again."

    response = client.post("/auth/login", json={"email": "driver@example.com", "password": PASSWORD})
    assert response.status_code == 403
    assert "Only approved administrators and accountants" in response.json()["detail"]

    response = client.post("/auth/login", json={"email": "newbie@example.com", "password": PASSWORD})
    assert response.status_code == 403


def test_unauthenticated_requests_rejected(client):
    assert client.get("/auth/me").status_code == 401
    assert client.get("/admin/api/users").status_code == 401
    assert client.get("/api/reports/oil", headers={"Authorization": "Bearer not-a-token"}).status_code == 401


def test_accountant_access(client, store):
    register(store, "books@example.com", "accountant")
    headers = login(client, "books@example.com")

    assert client.get("/api/reports/oil", headers=headers).status_code == 200
    assert client.get("/api/reports/waste", headers=headers).status_code == 200
    assert client.post("/api/reports/oil", json={"barrels_count": 1}, headers=headers).status_code == 403
    assert client.get("/admin/api/users", headers=headers).status_code == 403
    assert client.get("/admin/api/requests", headers=headers).status_code == 403


def test_api_logout_ends_session(client, store):
    register(store, "boss@example.com", "admin")
    headers = login(client, "boss@example.com")

    assert client.post("/auth/logout", headers=headers).status_code == 200
    assert client.get("/auth/me", headers=headers).status_code == 401


def test_api_logout_keeps_other_sessions(client, store):
    identity_ref = register(store, "boss@example.com", "admin")
    laptop = login(client, "boss@example.com")
    phone = login(client, "boss@example.com")
    events = []
    database.identity_provider.OnIdentityChange(lambda ref, asserted: events.append((ref, asserted)))

    assert client.post("/auth/logout", headers=laptop).status_code == 200

    assert client.get("/auth/me", headers=laptop).status_code == 401
    assert client.get("/auth/me", headers=phone).status_code == 200
    assert events == []

    assert client.post("/auth/logout", headers=phone).status_code == 200

    assert client.get("/auth/me", headers=phone).status_code == 401
    assert events == [(identity_ref, False)]


def test_reports_create_and_edit(client, store):
    admin_ref = register(store, "boss@example.com", "admin", name="Boss")
    headers = login(client, "boss@example.com")

    response = client.post("/api/reports/diesel", json={
        "client_name": "Harbor Fuel",
        "total_quantity_liters": 1200.5,
        "submission_date": "2024-05-01T08:30:00Z",
        "user_id": "someone-else"
    }, headers=headers)
    assert response.status_code == 200
    report_id = response.json()["report_id"]

    report = client.get(f"/api/reports/diesel/{report_id}", headers=headers).json()["report"]
    assert report["client_name"] == "Harbor Fuel"
    assert report["user_id"] == admin_ref
    assert report["user_name"] == "Boss"

    response = client.patch(f"/api/reports/diesel/{report_id}", json={
        "receipt_number": "R-77",
        "created_at": "2000-01-01T00:00:00Z"
    }, headers=headers)
    assert response.status_code == 200

    report = client.get(f"/api/reports/diesel/{report_id}", headers=headers).json()["report"]
    assert report["receipt_number"] == "R-77"
    assert report["client_name"] == "Harbor Fuel"
    assert not report["created_at"].startswith("2000")

    assert client.patch(f"/api/reports/diesel/{report_id}", json={"user_id": "x"}, headers=headers).status_code == 400
    assert client.patch("/api/reports/diesel/missing", json={"notes": "x"}, headers=headers).status_code == 404
    assert client.post("/api/reports/oil", json={"barrels_count": "many"}, headers=headers).status_code == 422
    assert client.get("/api/reports/coal", headers=headers).status_code == 422

    listing = client.get("/api/reports/diesel", headers=headers).json()["reports"]
    assert [r["report_id"] for r in listing] == [report_id]


def test_reports_summary(client, store):
    register(store, "books@example.com", "accountant")
    headers = login(client, "books@example.com")
    base = datetime(2024, 5, 1, tzinfo=timezone.utc)

    for day, (operation, liters, net) in enumerate([("Refining", 1000.0, 800.0), ("Refining", 500.0, 450.0), (None, 250.0, None)]):
        store.Insert("oil_reports", {
            "operation_chosen": operation,
            "total_quantity_liters": liters,
            "total_net_production": net,
            "user_name": "Omar",
            "created_at": base + timedelta(days=day)
        })
    for day in range(4):
        store.Insert("waste_reports", {
            "supply_type": "Garage",
            "total_quantity_liters": 100.0,
            "barrels_delivered": 2,
            "user_name": "Walter",
            "created_at": base + timedelta(days=day, hours=12)
        })

    response = client.get("/api/reports/summary", headers=headers)

    assert response.status_code == 200
    body = response.json()
    assert body["oil"]["report_count"] == 3
    assert body["oil"]["total_quantity_liters"] == 1750.0
    assert body["oil"]["total_net_production"] == 1250.0
    assert body["oil"]["operations"] == {"Refining": 2}
    assert body["waste"]["total_quantity_liters"] == 400.0
    assert body["waste"]["barrels_delivered"] == 8
    assert body["waste"]["supply_types"] == {"Garage": 4}

    recent = body["recent"]
    assert len(recent) == 5
    assert [entry["kind"] for entry in recent] == ["waste", "waste", "oil", "waste", "oil"]
    assert recent[2]["detail"] == "N/A"
    assert recent[0]["user_name"] == "Walter"


def test_reports_summary_empty(client, store):
    register(store, "boss@example.com", "admin")
    headers = login(client, "boss@example.com")

    assert client.get("/api/reports/summary").status_code == 401

    body = client.get("/api/reports/summary", headers=headers).json()
    assert body["oil"] == {"report_count": 0, "total_quantity_liters": 0, "total_net_production": 0, "operations": {}}
    assert body["waste"]["barrels_delivered"] == 0
    assert body["recent"] == []


def test_request_approval_flow(client, store):
    register(store, "boss@example.com", "admin")
    headers = login(client, "boss@example.com")
    add_request(store, "r1", user_id="u1", roles="accountant")

    response = client.get("/admin/api/requests/r1", headers=headers)
    assert response.json()["approval_draft"] == ["accountant"]

    response = client.post("/admin/api/requests/r1/approve", json={"roles": ["admin", "accountant"]}, headers=headers)
    assert response.status_code == 400
    assert response.json()["detail"]["reason"] == "AdminAccountantConflict"

    response = client.post("/admin/api/requests/r1/approve", json={"roles": []}, headers=headers)
    assert response.status_code == 400
    assert response.json()["detail"]["reason"] == "EmptySelection"

    response = client.post("/admin/api/requests/r1/approve", json={"roles": ["accountant"]}, headers=headers)
    assert response.status_code == 200
    assert response.json()["user_id"] == "u1"
    assert store.Get("users", "u1").roles == "accountant"

    response = client.post("/admin/api/requests/r1/reject", headers=headers)
    assert response.status_code == 409
    assert response.json()["detail"]["reason"] == "AlreadyTerminal"

    for roles in ([], ["admin", "accountant"], ["bogus"]):
        response = client.post("/admin/api/requests/r1/approve", json={"roles": roles}, headers=headers)
        assert response.status_code == 409
        assert response.json()["detail"]["reason"] == "AlreadyTerminal"

    response = client.post("/admin/api/requests/nope/approve", json={"roles": []}, headers=headers)
    assert response.status_code == 404

    assert client.post("/admin/api/requests/nope/reject", headers=headers).status_code == 404

    pending = client.get("/admin/api/requests", params={"status": "pending"}, headers=headers).json()["requests"]
    assert pending == []
    approved = client.get("/admin/api/requests", params={"status": "approved"}, headers=headers).json()["requests"]
    assert [r["request_id"] for r in approved] == ["r1"]


def test_approve_needs_user_id(client, store):
    register(store, "boss@example.com", "admin")
    headers = login(client, "boss@example.com")
    add_request(store, "r2")

    response = client.post("/admin/api/requests/r2/approve", json={"roles": ["oilOperator"]}, headers=headers)
    assert response.status_code == 400

    response = client.post("/admin/api/requests/r2/approve", json={"roles": ["oilOperator"], "user_id": "u2"}, headers=headers)
    assert response.status_code == 200
    assert store.Get("users", "u2").roles == "oilOperator"


def test_user_role_editing(client, store):
    register(store, "boss@example.com", "admin")
    headers = login(client, "boss@example.com")
    add_user(store, "u5", "oilOperator", name="Olga")

    users = client.get("/admin/api/users", params={"search": "olga"}, headers=headers).json()["users"]
    assert [u["user_id"] for u in users] == ["u5"]

    response = client.post("/admin/api/users/u5/roles/toggle", json={"role": "admin"}, headers=headers)
    assert response.json()["success"] is False
    assert response.json()["reason"] == "CategoryMixConflict"
    assert response.json()["roles"] == ["oilOperator"]

    response = client.post("/admin/api/users/u5/roles/toggle", json={"role": "wasteOperator"}, headers=headers)
    assert response.json()["roles"] == ["oilOperator", "wasteOperator"]

    response = client.put("/admin/api/users/u5/roles", json={"roles": ["wasteOperator", "deizelOperator"]}, headers=headers)
    assert response.status_code == 200
    assert store.Get("users", "u5").roles == "wasteOperator,dieselOperator"

    response = client.put("/admin/api/users/u5/roles", json={"roles": []}, headers=headers)
    assert response.status_code == 400

    response = client.put("/admin/api/users/ghost/roles", json={"roles": ["admin"]}, headers=headers)
    assert response.status_code == 404

    add_user(store, "u6", "accountant", status=RecordStatus.PENDING)
    response = client.put("/admin/api/users/u6/roles", json={"roles": ["admin"]}, headers=headers)
    assert response.status_code == 409
    assert response.json()["detail"]["reason"] == "NotApproved"
    assert store.Get("users", "u6").roles == "accountant"


def test_role_catalog_and_toggle(client, store):
    register(store, "boss@example.com", "admin")
    headers = login(client, "boss@example.com")

    roles = client.get("/admin/api/roles", headers=headers).json()["roles"]
    assert [r["role"] for r in roles] == ["admin", "accountant", "dieselOperator", "oilOperator", "wasteOperator"]
    assert roles[1]["category"] == "admin-category"

    response = client.post("/admin/api/roles/toggle", json={"roles": ["admin"], "role": "accountant"}, headers=headers)
    assert response.json()["message"] == "Admin and Accountant roles cannot be selected together"

    response = client.post("/admin/api/roles/toggle", json={"roles": ["admin"], "role": "admin"}, headers=headers)
    assert response.json() == {"success": True, "roles": [], "reason": None, "message": None}


def test_web_login_sets_cookie(client, store):
    register(store, "boss@example.com", "admin")

    response = client.post(
        "/admin/login",
        data={"email": "boss@example.com", "password": PASSWORD},
        follow_redirects=False
    )

    assert response.status_code == 303
    assert "admin_session" in response.cookies
    assert client.get("/admin/api/users").status_code == 200

    response = client.get("/admin/logout", follow_redirects=False)
    assert response.status_code == 303
    client.cookies.clear()
    assert client.get("/admin/api/users").status_code == 401


def test_web_login_denied_redirects(client, store):
    register(store, "driver@example.com", "wasteOperator")

    response = client.post(
        "/admin/login",
        data={"email": "driver@example.com", "password": PASSWORD},
        follow_redirects=False
    )

    assert response.status_code == 303
    assert response.headers["location"] == "/admin/denied?reason=RoleNotEligible"

    response = client.get("/admin/denied", params={"reason": "NoRecord"})
    assert response.status_code == 403
    assert "User account not found." in response.text


def test_web_login_bad_password(client, store):
    register(store, "boss@example.com", "admin")

    response = client.post("/admin/login", data={"email": "boss@example.com", "password": "nope"})

    assert response.status_code == 200
    assert "Invalid email or password" in response.text
    assert "admin_session" not in response.cookies
