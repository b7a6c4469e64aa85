from fastapi.testclient import TestClient

from legal_office.core import messages
from legal_office.core.security import decode_access_token
from legal_office.main import app
from conftest import DEFAULT_PASSWORD, bearer, create_profile

client = TestClient(app)


def test_login_returns_token_and_profile(lawyer):
    response = client.post("/api/auth/login", json={"email": "Lawyer@Example.com ", "password": DEFAULT_PASSWORD})
    assert response.status_code == 200

    body = response.json()
    assert body["success"] == 1
    assert body["metadata"]["statusCode"] == 200

    data = body["data"]
    assert data["token_type"] == "bearer"
    assert data["token"] == data["access_token"]
    assert data["user"]["id"] == lawyer.id
    assert "hashed_password" not in data["user"]

    claims = decode_access_token(data["access_token"])
    assert claims["sub"] == lawyer.id
    assert claims["role"] == "lawyer"
    assert claims["email"] == "lawyer@example.com"


def test_login_with_wrong_password(lawyer):
    response = client.post("/api/auth/login", json={"email": "lawyer@example.com", "password": "wrong-pass"})
    assert response.status_code == 401

    body = response.json()
    assert body["success"] == 0
    assert body["metadata"]["statusCode"] == 401
    assert body["data"]["message"] == messages.INVALID_CREDENTIALS
    assert response.headers["WWW-Authenticate"] == "Bearer"


def test_login_requires_credentials():
    response = client.post("/api/auth/login", json={"email": "  ", "password": ""})
    assert response.status_code == 422
    assert response.json()["data"]["message"] == messages.CREDENTIALS_REQUIRED


def test_login_rejects_inactive_account(db):
    create_profile(db, "sleeping@example.com", is_active=False)
    response = client.post("/api/auth/login", json={"email": "sleeping@example.com", "password": DEFAULT_PASSWORD})
    assert response.status_code == 401


def test_register_lawyer_and_login():
    payload = {
        "email": "new.lawyer@example.com",
        "password": "strong-pass",
        "full_name": "محامي جديد",
        "license_number": "L-123",
    }
    response = client.post("/api/auth/register", json=payload)
    assert response.status_code == 201
    profile = response.json()["data"]
    assert profile["role"] == "lawyer"
    assert profile["license_number"] == "L-123"

    login = client.post("/api/auth/login", json={"email": payload["email"], "password": payload["password"]})
    assert login.status_code == 200


def test_register_duplicate_email(lawyer):
    response = client.post("/api/auth/register", json={
        "email": "LAWYER@example.com",
        "password": "strong-pass",
        "full_name": "Copy",
    })
    assert response.status_code == 409
    assert response.json()["data"]["message"] == messages.EMAIL_IN_USE


def test_register_rejects_weak_password():
    response = client.post("/api/auth/register", json={
        "email": "weak@example.com",
        "password": "123",
        "full_name": "Weak",
    })
    assert response.status_code == 422


def test_first_admin_bootstraps_then_requires_admin(lawyer_headers):
    payload = {"email": "boss@example.com", "password": "boss-pass", "full_name": "Boss"}
    first = client.post("/api/auth/register-admin", json=payload)
    assert first.status_code == 201
    assert first.json()["data"]["role"] == "admin"

    second = {"email": "boss2@example.com", "password": "boss-pass", "full_name": "Boss 2"}
    assert client.post("/api/auth/register-admin", json=second).status_code == 401
    assert client.post("/api/auth/register-admin", json=second, headers=lawyer_headers).status_code == 403

    login = client.post("/api/auth/login", json={"email": "boss@example.com", "password": "boss-pass"})
    admin_headers = {"Authorization": f"Bearer {login.json()['data']['access_token']}"}
    assert client.post("/api/auth/register-admin", json=second, headers=admin_headers).status_code == 201


def test_me_requires_token():
    response = client.get("/api/auth/me")
    assert response.status_code == 401
    assert response.json()["data"]["message"] == messages.LOGIN_REQUIRED


def test_me_rejects_garbage_token():
    response = client.get("/api/auth/me", headers={"Authorization": "Bearer not-a-jwt"})
    assert response.status_code == 401


def test_deactivated_user_token_is_rejected(db, lawyer, lawyer_headers):
    lawyer.is_active = False
    db.commit()

    response = client.get("/api/auth/me", headers=lawyer_headers)
    assert response.status_code == 401


def test_update_profile_and_change_password(lawyer_headers):
    response = client.put("/api/auth/me", json={"phone": "0100000000", "specialization": "Criminal"},
                          headers=lawyer_headers)
    assert response.status_code == 200
    assert response.json()["data"]["specialization"] == "Criminal"

    wrong = client.post("/api/auth/me/password",
                        json={"current_password": "nope", "new_password": "another-pass"},
                        headers=lawyer_headers)
    assert wrong.status_code == 401

    changed = client.post("/api/auth/me/password",
                          json={"current_password": DEFAULT_PASSWORD, "new_password": "another-pass"},
                          headers=lawyer_headers)
    assert changed.status_code == 200

    login = client.post("/api/auth/login", json={"email": "lawyer@example.com", "password": "another-pass"})
    assert login.status_code == 200


def test_lawyer_cannot_manage_users(lawyer_headers):
    response = client.get("/api/users", headers=lawyer_headers)
    assert response.status_code == 403
    assert response.json()["metadata"]["statusCode"] == 403


def test_admin_manages_users(lawyer, other_lawyer, admin, admin_headers):
    listed = client.get("/api/users", params={"role": "lawyer"}, headers=admin_headers)
    assert listed.status_code == 200
    assert {p["email"] for p in listed.json()["data"]} == {"lawyer@example.com", "other@example.com"}

    updated = client.put(f"/api/users/{lawyer.id}", json={"is_active": False}, headers=admin_headers)
    assert updated.status_code == 200
    assert updated.json()["data"]["is_active"] is False

    conflict = client.put(f"/api/users/{other_lawyer.id}", json={"email": "lawyer@example.com"},
                          headers=admin_headers)
    assert conflict.status_code == 409

    assert client.delete(f"/api/users/{admin.id}", headers=admin_headers).status_code == 422
    assert client.delete(f"/api/users/{other_lawyer.id}", headers=admin_headers).status_code == 200
    assert client.get(f"/api/users/{other_lawyer.id}", headers=admin_headers).status_code == 404


def test_admin_cannot_demote_or_deactivate_themselves(admin, lawyer, admin_headers):
    url = f"/api/users/{admin.id}"
    assert client.put(url, json={"role": "lawyer"}, headers=admin_headers).status_code == 422
    assert client.put(url, json={"is_active": False}, headers=admin_headers).status_code == 422

    me = client.get("/api/auth/me", headers=admin_headers)
    assert me.status_code == 200
    assert me.json()["data"]["role"] == "admin"

    renamed = client.put(url, json={"full_name": "Head Admin", "role": "admin"}, headers=admin_headers)
    assert renamed.status_code == 200
    promoted = client.put(f"/api/users/{lawyer.id}", json={"role": "admin"}, headers=admin_headers)
    assert promoted.json()["data"]["role"] == "admin"


def test_deleting_a_lawyer_removes_their_records(lawyer, lawyer_headers, admin_headers):
    owned = client.post("/api/clients", json={"name": "Nile Trading"}, headers=lawyer_headers).json()["data"]
    client.post("/api/cases", json={"title": "T", "type": "civil", "court": "C", "client_id": owned["id"]},
                headers=lawyer_headers)
    invoice = client.post("/api/invoices", json={
        "client_id": owned["id"], "date": "2030-01-01", "due_date": "2030-01-31",
        "items": [{"description": "Consultation", "amount": 300}],
    }, headers=lawyer_headers)
    assert invoice.status_code == 201

    assert client.delete(f"/api/users/{lawyer.id}", headers=admin_headers).status_code == 200

    for path in ("/api/invoices", "/api/cases", "/api/clients"):
        response = client.get(path, headers=admin_headers)
        assert response.status_code == 200
        assert response.json()["data"] == []


def test_logout(lawyer_headers):
    response = client.post("/api/auth/logout", headers=lawyer_headers)
    assert response.status_code == 200
    assert response.json()["data"]["message"] == "Logged out successfully"


def test_health():
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["data"]["database"] is True


def test_bearer_helper_matches_login(lawyer):
    headers = bearer(lawyer)
    assert client.get("/api/auth/me", headers=headers).json()["data"]["email"] == lawyer.email
