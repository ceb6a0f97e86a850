from jose import jwt

from charnoks.core.config import settings
from charnoks.core.jwt import create_access_token, decode_access_token, token_user_id

from conftest import add_user, auth_header


def test_signup_creates_a_worker_and_login_returns_token(client):
    res = client.post(
        "/auth/signup",
        json={"email": "new.hire@charnoks.com", "password": "long-enough-pw"},
    )

    assert res.status_code == 201
    user = res.json()
    assert user["role"] == "worker"
    assert user["displayName"] == "new.hire"

    login = client.post(
        "/auth/login",
        data={"username": "new.hire@charnoks.com", "password": "long-enough-pw"},
    )
    assert login.status_code == 200
    token = login.json()["access_token"]

    payload = decode_access_token(token)
    assert payload["sub"] == str(user["id"])
    assert payload["role"] == "worker"

    me = client.get("/users/me", headers={"Authorization": f"Bearer {token}"})
    assert me.json()["email"] == "new.hire@charnoks.com"


def test_signup_rejects_weak_or_duplicate_passwords(client, worker):
    assert client.post(
        "/auth/signup", json={"email": "a@charnoks.com", "password": "password123"}
    ).status_code == 400
    assert client.post(
        "/auth/signup", json={"email": "a@charnoks.com", "password": "1234567890"}
    ).status_code == 400
    assert client.post(
        "/auth/signup", json={"email": "worker@charnoks.com", "password": "long-enough-pw"}
    ).status_code == 409


def test_login_rejects_wrong_password(client, worker):
    res = client.post("/auth/login", data={"username": "worker@charnoks.com", "password": "nope-nope"})
    assert res.status_code == 401


def test_tampered_and_non_access_tokens_are_refused(client, worker):
    token = create_access_token(worker["id"], "worker")
    assert decode_access_token(token) is not None
    assert token_user_id(token) == worker["id"]

    res = client.get("/users/me", headers={"Authorization": f"Bearer {token}x"})
    assert res.status_code == 401

    refresh = jwt.encode(
        {"sub": str(worker["id"]), "type": "refresh"},
        settings.SECRET_KEY,
        algorithm=settings.ALGORITHM,
    )
    assert decode_access_token(refresh) is None
    assert token_user_id(refresh) is None
    res = client.get("/users/me", headers={"Authorization": f"Bearer {refresh}"})
    assert res.status_code == 401


def test_owner_sets_roles_and_workers_cannot(client, owner, worker):
    res = client.put(f"/users/{worker['id']}/role", json={"role": "owner"}, headers=worker["headers"])
    assert res.status_code == 403

    res = client.put(f"/users/{worker['id']}/role", json={"role": "owner"}, headers=owner["headers"])
    assert res.status_code == 200
    assert res.json()["role"] == "owner"

    # The stored role is authoritative, not the one baked into the old token
    assert client.get("/users", headers=worker["headers"]).status_code == 200

    res = client.put(f"/users/{worker['id']}/role", json={"role": "boss"}, headers=owner["headers"])
    assert res.status_code == 400

    assert client.put("/users/9999/role", json={"role": "worker"}, headers=owner["headers"]).status_code == 404


def test_promote_owner_requires_internal_secret(client, session_factory):
    user_id = add_user(session_factory, "first@charnoks.com")

    res = client.post("/internal/promote-owner", params={"email": "first@charnoks.com", "secret": "wrong"})
    assert res.status_code == 403

    res = client.post(
        "/internal/promote-owner",
        params={"email": "first@charnoks.com", "secret": settings.INTERNAL_ADMIN_SECRET},
    )
    assert res.status_code == 200

    me = client.get("/users/me", headers=auth_header(user_id, "worker")).json()
    assert me["role"] == "owner"


def test_expenses_are_recorded_per_worker(client, worker, owner, session_factory):
    other_id = add_user(session_factory, "ben@charnoks.com")

    res = client.post("/expenses", json={"description": "Ice", "amount": 3.2}, headers=worker["headers"])
    assert res.status_code == 201
    assert res.json()["workerId"] == worker["id"]
    assert res.json()["amount"] == 3.2

    client.post("/expenses", json={"description": "Bags", "amount": 1}, headers=auth_header(other_id, "worker"))

    mine = client.get("/expenses", headers=worker["headers"]).json()
    assert [e["description"] for e in mine] == ["Ice"]

    everything = client.get("/expenses", headers=owner["headers"]).json()
    assert {e["description"] for e in everything} == {"Ice", "Bags"}


def test_expense_amount_must_be_positive(client, worker):
    res = client.post("/expenses", json={"description": "Ice", "amount": 0}, headers=worker["headers"])
    assert res.status_code == 400
    assert res.json()["error"]["kind"] == "InvalidRequest"


def test_signup_measures_password_length_in_bytes(client):
    # 40 characters but 80 bytes, past what bcrypt accepts
    res = client.post("/auth/signup", json={"email": "jose@charnoks.com", "password": "é" * 40})
    assert res.status_code == 400
    assert res.json()["error"]["kind"] == "InvalidRequest"

    res = client.post("/auth/signup", json={"email": "jose@charnoks.com", "password": "é" * 36})
    assert res.status_code == 201

    login = client.post("/auth/login", data={"username": "jose@charnoks.com", "password": "é" * 36})
    assert login.status_code == 200


def test_token_without_numeric_subject_is_refused(client, worker):
    token = jwt.encode(
        {"sub": "not-a-number", "type": "access"},
        settings.SECRET_KEY,
        algorithm=settings.ALGORITHM,
    )
    assert token_user_id(token) is None
    assert client.get("/users/me", headers={"Authorization": f"Bearer {token}"}).status_code == 401


def test_notes_are_shared_between_workers(client, worker, session_factory):
    other_id = add_user(session_factory, "ben@charnoks.com")

    res = client.post(
        "/notes",
        json={"category": "Delivery Note", "title": "Crates", "description": "12 crates in", "amount": 40},
        headers=worker["headers"],
    )
    assert res.status_code == 201
    note = res.json()
    assert note["authorId"] == worker["id"]
    assert note["amount"] == 40
    assert note["date"]

    res = client.post(
        "/notes",
        json={"category": "Reminder", "title": "Call supplier"},
        headers=auth_header(other_id, "worker"),
    )
    assert res.status_code == 201
    assert res.json()["amount"] is None

    everything = client.get("/notes", headers=worker["headers"]).json()
    assert {n["title"] for n in everything} == {"Crates", "Call supplier"}

    reminders = client.get("/notes", params={"category": "Reminder"}, headers=worker["headers"]).json()
    assert [n["title"] for n in reminders] == ["Call supplier"]


def test_note_category_must_be_known(client, worker):
    res = client.post("/notes", json={"category": "Gossip", "title": "x"}, headers=worker["headers"])
    assert res.status_code == 400
    assert res.json()["error"]["kind"] == "InvalidRequest"

    assert client.get("/notes").status_code == 401
