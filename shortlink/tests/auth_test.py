import base64
import json

import pytest
from itsdangerous import TimestampSigner

from shortlink.core.config import settings
from shortlink.core.exceptions import InvalidCredentialsError
from shortlink.db import repository
from shortlink.services import auth

ADMIN_PASSWORD = "correct horse battery staple"
USER_PASSWORD = "hunter2-but-longer"


def test_passwords_are_salted_argon2_hashes():
    first = auth.hash_password("s3cret")
    second = auth.hash_password("s3cret")
    assert first.startswith("$argon2")
    assert "s3cret" not in first
    assert first != second
    assert auth.verify_password("s3cret", first)
    assert not auth.verify_password("wrong", first)


def test_verify_against_garbage_hash_is_false():
    assert auth.verify_password("s3cret", "not-a-hash") is False


def test_stored_password_is_hashed(db_session, regular_user):
    stored = repository.find_user(db_session, username="bob")
    assert stored.password != USER_PASSWORD
    assert auth.verify_password(USER_PASSWORD, stored.password)


def test_authenticate_success(db_session, admin_user):
    user = auth.authenticate(db_session, "admin", ADMIN_PASSWORD)
    assert user.id == admin_user.id
    assert user.is_admin


def test_wrong_password_and_unknown_user_look_the_same(db_session, regular_user):
    with pytest.raises(InvalidCredentialsError) as wrong_password:
        auth.authenticate(db_session, "bob", "not-the-password")
    with pytest.raises(InvalidCredentialsError) as unknown_user:
        auth.authenticate(db_session, "nobody", "whatever")
    assert str(wrong_password.value) == str(unknown_user.value) == "Invalid username or password"


def test_login_endpoint(client, admin_user):
    response = client.post("/login", json={"username": "admin", "password": ADMIN_PASSWORD})
    assert response.status_code == 200
    assert response.json() == {"username": "admin", "is_admin": True}
    assert "user_token" in response.cookies


def test_login_endpoint_failures_are_generic(client, regular_user):
    bad_password = client.post("/login", json={"username": "bob", "password": "nope"})
    unknown = client.post("/login", json={"username": "ghost", "password": "nope"})
    assert bad_password.status_code == unknown.status_code == 401
    assert bad_password.text == unknown.text == "Invalid username or password"
    assert "user_token" not in bad_password.cookies


def test_logout_drops_privileges(admin_client):
    assert admin_client.get("/admin").status_code == 200
    assert admin_client.post("/logout").status_code == 204
    assert admin_client.get("/admin").status_code == 401


def test_session_for_deleted_user_is_anonymous(admin_client, db_session, admin_user):
    repository.delete_user(db_session, admin_user.id)
    assert admin_client.get("/admin").status_code == 401


def test_forged_cookie_is_ignored(client, admin_user):
    client.cookies.set("user_token", "eyJ1c2VyX2lkIjogMX0=.forged.signature")
    assert client.get("/admin").status_code == 401


def test_login_page(client):
    response = client.get("/login")
    assert response.status_code == 200
    assert response.text == "Login page"


def _signed_session(secret_key, data):
    payload = base64.b64encode(json.dumps(data).encode("utf-8"))
    return TimestampSigner(secret_key).sign(payload).decode("utf-8")


def test_session_cookie_needs_the_configured_key(client, admin_user):
    session = {"user_id": admin_user.id, "username": admin_user.username}

    client.cookies.set("user_token", _signed_session("change-me", session))
    assert client.get("/admin").status_code == 401

    client.cookies.set("user_token", _signed_session(settings.SECRET_KEY, session))
    assert client.get("/admin").status_code == 200


def test_me_requires_login(client):
    response = client.get("/me")
    assert response.status_code == 401
    assert response.text == "Unauthorized"


def test_me_returns_logged_in_user(user_client, admin_client):
    assert user_client.get("/me").json() == {"username": "bob", "is_admin": False}
    assert admin_client.get("/me").json() == {"username": "admin", "is_admin": True}
