from fastapi.testclient import TestClient

from nonceguard.presentation.dependencies import get_nonce_store
from tests.fakes import FakeErroredStore


def _issue(client: TestClient, action: str = "signup-form") -> str:
    response = client.get(f"/forms/{action}/nonce")
    assert response.status_code == 200
    return response.json()["nonce"]


def test_valid_nonce_is_accepted_once(client):
    nonce = _issue(client)

    first = client.post("/signup", headers={"X-Nonce": nonce})
    assert first.status_code == 200
    assert first.json() == {"status": "ok"}

    replay = client.post("/signup", headers={"X-Nonce": nonce})
    assert replay.status_code == 403
    assert replay.json() == {"detail": "invalid nonce"}


def test_missing_header_is_forbidden(client):
    _issue(client)
    response = client.post("/signup")
    assert response.status_code == 403


def test_nonce_for_other_action_is_forbidden(client):
    nonce = _issue(client, "download-ebook")
    response = client.post("/signup", headers={"X-Nonce": nonce})
    assert response.status_code == 403


def test_nonce_is_bound_to_session(client, other_client):
    nonce = _issue(client)
    response = other_client.post("/signup", headers={"X-Nonce": nonce})
    assert response.status_code == 403
    # still usable by the session it was issued to
    assert client.post("/signup", headers={"X-Nonce": nonce}).status_code == 200


def test_missing_session_cookie_is_unauthorized(app):
    bare = TestClient(app)
    assert bare.get("/forms/signup-form/nonce").status_code == 401
    assert bare.post("/signup", headers={"X-Nonce": "a:b:1:c"}).status_code == 401


def test_custom_header_name(client):
    nonce = _issue(client, "custom-form")
    assert client.post("/custom", headers={"X-Nonce": nonce}).status_code == 403
    assert client.post("/custom", headers={"X-Csrf": nonce}).status_code == 200


def test_store_outage_is_service_unavailable(app, client):
    app.dependency_overrides[get_nonce_store] = lambda: FakeErroredStore()

    response = client.post("/signup", headers={"X-Nonce": "s:signup-form:9999999999:d"})

    assert response.status_code == 503
    assert response.json() == {"detail": "nonce store unavailable"}
