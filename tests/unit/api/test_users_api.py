"""
Name: Users / Claims HTTP API Tests

Responsibilities:
  - Validate every /api route (status codes and bodies)
  - Ensure bearer tokens and the admin claim are enforced
  - Ensure typed service errors map to RFC7807 responses
  - Ensure responses never expose password hashes

Notes:
  - APP_ENV=test => the container wires in-memory adapters
"""

import pytest
from fastapi.testclient import TestClient
from userauth.api.main import create_app
from userauth.container import get_user_repository, get_user_service, reset_container
from userauth.crosscutting.config import get_settings
from userauth.domain.entities import NewUser
from userauth.domain.identifiers import new_record_id
from userauth.identity.tokens import issue_token

pytestmark = pytest.mark.unit

PASSWORD = "analytical-engine"


@pytest.fixture
def client():
    reset_container()
    yield TestClient(create_app())
    reset_container()


def _create_user(email: str = "ada@example.com", claims=None) -> str:
    return get_user_service().create(
        NewUser(
            name="Ada",
            surnames="Lovelace",
            email=email,
            password=PASSWORD,
            claims=list(claims or []),
        )
    )


def _auth(user_id: str, claims=()) -> dict:
    token = issue_token(user_id, get_settings().jwt_secret, list(claims))
    return {"Authorization": f"Bearer {token}"}


# =============================================================================
# Public routes
# =============================================================================


def _signup(**overrides) -> dict:
    return {
        "name": "Ada",
        "surnames": "Lovelace",
        "email": "ada@example.com",
        "password": PASSWORD,
        **overrides,
    }


def test_create_user(client):
    response = client.post("/api/users", json=_signup())

    assert response.status_code == 201
    inserted_id = response.json()["inserted_id"]
    assert get_user_service().get_by_id(inserted_id).claims == []


def test_create_user_with_claims_requires_token(client):
    response = client.post("/api/users", json=_signup(claims=[0]))

    assert response.status_code == 401
    assert get_user_repository().count() == 0


def test_create_user_with_claims_requires_admin(client):
    operator_id = _create_user(email="op@example.com", claims=[1])

    response = client.post(
        "/api/users", json=_signup(claims=[0]), headers=_auth(operator_id, [1])
    )

    assert response.status_code == 403
    assert response.json()["detail"] == "Missing required claim: admin"
    assert get_user_repository().count() == 1


def test_create_user_with_claims_as_admin(client):
    admin_id = _create_user(email="admin@example.com", claims=[0])

    response = client.post(
        "/api/users", json=_signup(claims=[0, 1]), headers=_auth(admin_id, [0])
    )

    assert response.status_code == 201
    inserted_id = response.json()["inserted_id"]
    assert get_user_service().get_by_id(inserted_id).claims == [0, 1]


def test_create_user_invalid_claim(client):
    admin_id = _create_user(email="admin@example.com", claims=[0])

    response = client.post(
        "/api/users", json=_signup(claims=[99999]), headers=_auth(admin_id, [0])
    )

    assert response.status_code == 422
    assert response.headers["content-type"].startswith("application/problem+json")
    assert "99999" in response.json()["detail"]
    assert get_user_repository().count() == 1


def test_create_user_duplicate_email(client):
    _create_user()

    response = client.post(
        "/api/users",
        json={
            "name": "Other",
            "surnames": "Person",
            "email": "ada@example.com",
            "password": "x",
        },
    )

    assert response.status_code == 409
    assert response.json()["code"] == "CONFLICT"


def test_login_ok(client):
    user_id = _create_user(claims=[0])

    response = client.post(
        "/api/users/login", json={"email": "ada@example.com", "password": PASSWORD}
    )

    assert response.status_code == 200
    body = response.json()
    assert body["token"]
    assert body["user"]["id"] == user_id
    assert body["user"]["claims"] == [0]
    assert "password_hash" not in body["user"]


def test_login_wrong_password(client):
    _create_user()

    response = client.post(
        "/api/users/login", json={"email": "ada@example.com", "password": "nope"}
    )

    assert response.status_code == 401
    assert response.json()["detail"] == "incorrect password"
    assert response.headers["WWW-Authenticate"] == "Bearer"


def test_login_unknown_email(client):
    response = client.post(
        "/api/users/login", json={"email": "ghost@example.com", "password": "nope"}
    )

    assert response.status_code == 401
    assert response.json()["detail"] == "email not found"


def test_get_claims(client):
    response = client.get("/api/claims")

    assert response.status_code == 200
    assert response.json() == {"0": "admin", "1": "operator"}


def test_get_claims_backend_down(client):
    get_user_repository().set_available(False)

    response = client.get("/api/claims")

    assert response.status_code == 503
    assert response.json()["code"] == "SERVICE_UNAVAILABLE"


# =============================================================================
# Authenticated routes
# =============================================================================


def test_list_users_requires_token(client):
    response = client.get("/api/users")

    assert response.status_code == 401
    assert "token" in response.json()["detail"].lower()


def test_list_users_rejects_bad_token(client):
    response = client.get("/api/users", headers={"Authorization": "Bearer nope"})

    assert response.status_code == 401


def test_list_users(client):
    user_id = _create_user()

    response = client.get("/api/users", headers=_auth(user_id))

    assert response.status_code == 200
    body = response.json()
    assert [user["email"] for user in body] == ["ada@example.com"]
    assert all("password_hash" not in user for user in body)


def test_get_user_by_id_and_email(client):
    user_id = _create_user()
    headers = _auth(user_id)

    by_id = client.get(f"/api/users/{user_id}", headers=headers)
    by_email = client.get("/api/users/email/ada@example.com", headers=headers)

    assert by_id.status_code == 200
    assert by_email.status_code == 200
    assert by_id.json() == by_email.json()


def test_get_user_invalid_id(client):
    user_id = _create_user()

    response = client.get("/api/users/not-an-id", headers=_auth(user_id))

    assert response.status_code == 400
    assert response.json()["code"] == "INVALID_ID"


def test_get_user_missing(client):
    user_id = _create_user()

    response = client.get(f"/api/users/{new_record_id()}", headers=_auth(user_id))

    assert response.status_code == 404


def test_patch_user_name(client):
    user_id = _create_user()

    response = client.patch(
        f"/api/users/{user_id}", json={"name": "Augusta"}, headers=_auth(user_id)
    )

    assert response.status_code == 204
    assert get_user_service().get_by_id(user_id).name == "Augusta"


def test_patch_user_wrong_old_password(client):
    user_id = _create_user()

    response = client.patch(
        f"/api/users/{user_id}",
        json={"old_password": "nope", "new_password": "new-pass"},
        headers=_auth(user_id),
    )

    assert response.status_code == 401
    assert response.json()["detail"] == "old password incorrect"


def test_patch_user_rejects_boolean_claims(client):
    user_id = _create_user()

    response = client.patch(
        f"/api/users/{user_id}", json={"claims": [True]}, headers=_auth(user_id)
    )

    assert response.status_code == 422


def test_patch_own_claims_requires_admin(client):
    operator_id = _create_user(email="op@example.com", claims=[1])
    victim_id = _create_user(email="victim@example.com")

    response = client.patch(
        f"/api/users/{operator_id}",
        json={"claims": [0]},
        headers=_auth(operator_id, [1]),
    )

    assert response.status_code == 403
    assert get_user_service().get_by_id(operator_id).claims == [1]

    relogin = client.post(
        "/api/users/login", json={"email": "op@example.com", "password": PASSWORD}
    )
    token = relogin.json()["token"]
    delete = client.delete(
        f"/api/users/{victim_id}", headers={"Authorization": f"Bearer {token}"}
    )
    assert delete.status_code == 403
    assert get_user_repository().count() == 2


def test_patch_other_user_requires_admin(client):
    user_id = _create_user()
    other_id = _create_user(email="grace@example.com")

    response = client.patch(
        f"/api/users/{other_id}", json={"name": "Mallory"}, headers=_auth(user_id)
    )

    assert response.status_code == 403
    assert response.json()["code"] == "FORBIDDEN"
    assert get_user_service().get_by_id(other_id).name == "Ada"


def test_patch_other_user_claims_as_admin(client):
    admin_id = _create_user(email="admin@example.com", claims=[0])
    user_id = _create_user()

    response = client.patch(
        f"/api/users/{user_id}", json={"claims": [1]}, headers=_auth(admin_id, [0])
    )

    assert response.status_code == 204
    assert get_user_service().get_by_id(user_id).claims == [1]


def test_patch_email_is_stripped_and_login_still_works(client):
    user_id = _create_user()

    response = client.patch(
        f"/api/users/{user_id}", json={"email": " b@x.io "}, headers=_auth(user_id)
    )

    assert response.status_code == 204
    assert get_user_service().get_by_id(user_id).email == "b@x.io"
    for email in (" b@x.io ", "b@x.io"):
        login = client.post(
            "/api/users/login", json={"email": email, "password": PASSWORD}
        )
        assert login.status_code == 200


def test_delete_requires_admin_claim(client):
    user_id = _create_user()

    response = client.delete(f"/api/users/{user_id}", headers=_auth(user_id))

    assert response.status_code == 403
    assert response.json()["code"] == "FORBIDDEN"


def test_delete_as_admin(client):
    admin_id = _create_user(email="admin@example.com", claims=[0])
    user_id = _create_user()

    response = client.delete(f"/api/users/{user_id}", headers=_auth(admin_id, [0]))

    assert response.status_code == 204
    assert get_user_repository().count() == 1


def test_delete_unknown_id(client):
    admin_id = _create_user(email="admin@example.com", claims=[0])

    response = client.delete(
        f"/api/users/{new_record_id()}", headers=_auth(admin_id, [0])
    )

    assert response.status_code == 404


def test_atomic_transaction(client):
    admin_id = _create_user(email="admin@example.com", claims=[0])

    response = client.post("/api/users/atomic-transaction", headers=_auth(admin_id, [0]))

    assert response.status_code == 204
    assert get_user_repository().count() == 3


def test_atomic_transaction_rollback(client):
    admin_id = _create_user(email="admin@example.com", claims=[0])
    _create_user(email="Entity2")

    response = client.post("/api/users/atomic-transaction", headers=_auth(admin_id, [0]))

    assert response.status_code == 500
    assert response.json()["code"] == "TRANSACTION_ABORTED"
    assert get_user_repository().count() == 2


# =============================================================================
# Operational routes
# =============================================================================


def test_healthz(client):
    response = client.get("/healthz")

    assert response.status_code == 200
    assert response.json()["ok"] is True


def test_healthz_backend_down(client):
    get_user_repository().set_available(False)

    response = client.get("/healthz")

    assert response.status_code == 503
    assert response.json()["db"] == "disconnected"


def test_request_id_is_propagated(client):
    response = client.get("/api/claims", headers={"X-Request-Id": "req-123"})

    assert response.headers["X-Request-Id"] == "req-123"


def test_metrics_exposes_counters(client):
    client.post(
        "/api/users/login", json={"email": "ghost@example.com", "password": "x"}
    )

    response = client.get("/metrics")

    assert response.status_code == 200
    assert "userauth_login_attempts_total" in response.text
