import pytest

from shortlink.core.config import settings
from shortlink.db import repository
from shortlink.db.Models.models import NEVER_EXPIRES
from shortlink.db.repository import Search
from shortlink.utils.encoding import default_codec


def _token_from_link(link: str) -> str:
    return link.rsplit("/r/", 1)[1]


def test_create_short_url_success(admin_client):
    """Test successful URL shortening."""
    response = admin_client.post("/shorten", json={"url": "https://example.com"})
    assert response.status_code == 201
    assert response.headers["content-type"].startswith("text/plain")
    link = response.text
    assert link.startswith(f"{settings.BASE_URL}/r/")
    token = _token_from_link(link)
    assert len(token) >= 6
    assert default_codec.decode(token.split("g", 1)[0]) == 1


def test_create_with_expiry(admin_client, db_session):
    response = admin_client.post("/shorten", json={"url": "https://example.com/exp", "exp": 4_102_444_800})
    assert response.status_code == 201
    share = repository.find_share(db_session, Search.by_url("https://example.com/exp"))
    assert share.exp == 4_102_444_800


def test_create_accepts_largest_expiry(admin_client, db_session):
    response = admin_client.post("/shorten", json={"url": "https://example.com/far", "exp": NEVER_EXPIRES})
    assert response.status_code == 201
    share = repository.find_share(db_session, Search.by_url("https://example.com/far"))
    assert share.never_expires()


def test_create_requires_login(client):
    response = client.post("/shorten", json={"url": "https://example.com"})
    assert response.status_code == 401
    assert response.text == "Unauthorized"


def test_create_requires_admin(user_client, db_session):
    response = user_client.post("/shorten", json={"url": "https://example.com"})
    assert response.status_code == 401
    assert repository.count_shares(db_session) == 0


def test_create_rejects_wrong_content_type(admin_client):
    response = admin_client.post(
        "/shorten",
        content='{"url": "https://example.com"}',
        headers={"content-type": "text/plain"},
    )
    assert response.status_code == 415


def test_create_accepts_json_with_charset(admin_client):
    response = admin_client.post(
        "/shorten",
        content='{"url": "https://example.com"}',
        headers={"content-type": "application/json; charset=utf-8"},
    )
    assert response.status_code == 201


def test_create_rejects_large_payload(admin_client):
    body = '{"url": "https://example.com/' + "a" * settings.MAX_PAYLOAD_BYTES + '"}'
    response = admin_client.post("/shorten", content=body, headers={"content-type": "application/json"})
    assert response.status_code == 413


@pytest.mark.parametrize("body", [
    "not json",
    "{}",
    '{"url": ""}',
    '{"url": "ftp://example.com"}',
    '{"url": "http://"}',
    '{"url": "https://example.com", "exp": "soon"}',
    '{"url": "https://example.com", "exp": -5}',
    '{"url": "https://example.com", "exp": 18446744073709551616}',
])
def test_create_rejects_unparseable_payload(admin_client, body):
    response = admin_client.post("/shorten", content=body, headers={"content-type": "application/json"})
    assert response.status_code == 400, f"Should reject: {body}"


def test_redirect_success(admin_client):
    """Test successful redirect."""
    link = admin_client.post("/shorten", json={"url": "https://example.com/redirect-test"}).text
    token = _token_from_link(link)

    response = admin_client.get(f"/r/{token}", follow_redirects=False)
    assert response.status_code == 302
    assert response.headers["location"] == "https://example.com/redirect-test"


def test_redirect_works_without_login(admin_client):
    link = admin_client.post("/shorten", json={"url": "https://example.com/public"}).text
    admin_client.post("/logout")
    response = admin_client.get(f"/r/{_token_from_link(link)}", follow_redirects=False)
    assert response.status_code == 302


def test_redirect_not_found(client):
    """A valid-looking but unknown token is a plain 404."""
    response = client.get("/r/a1gXyZ9q", follow_redirects=False)
    assert response.status_code == 404
    assert response.text == "not found"


def test_redirect_garbled_token_is_not_found(client):
    response = client.get("/r/bad-token!", follow_redirects=False)
    assert response.status_code == 404
    assert response.text == "not found"


def test_delete_requires_admin(admin_client, user_client, db_session):
    token = _token_from_link(admin_client.post("/shorten", json={"url": "https://example.com"}).text)

    response = user_client.delete(f"/r/{token}")
    assert response.status_code == 401
    assert response.text == "Unauthorized"
    assert repository.count_shares(db_session) == 1


def test_delete_share(admin_client):
    token = _token_from_link(admin_client.post("/shorten", json={"url": "https://example.com"}).text)

    response = admin_client.delete(f"/r/{token}")
    assert response.status_code == 204

    assert admin_client.get(f"/r/{token}", follow_redirects=False).status_code == 404
    assert admin_client.delete(f"/r/{token}").status_code == 404


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"
