"""Route guard tests."""

from tests.conftest import COOKIE_NAME


def test_dashboard_without_cookie_redirects_to_login(client):
    response = client.get("/dashboard", follow_redirects=False)

    assert response.status_code == 307
    assert response.headers["location"] == "/login"


def test_nested_dashboard_routes_are_guarded(client):
    for path in ("/dashboard/knowledge", "/dashboard/chatbot/test"):
        response = client.get(path, follow_redirects=False)
        assert response.status_code == 307


def test_empty_cookie_redirects(client):
    client.cookies.set(COOKIE_NAME, "")
    response = client.get("/dashboard/chatbot", follow_redirects=False)

    assert response.status_code == 307


def test_guard_never_reaches_the_backend(client, fake_backend):
    client.post("/dashboard/knowledge/documents", json={}, follow_redirects=False)

    assert fake_backend.requests == []


def test_unprotected_routes_pass(client):
    assert client.get("/health").status_code == 200
    assert client.get("/login").status_code == 200
    assert client.get("/dashboards-info", follow_redirects=False).status_code == 404


def test_forged_cookie_passes_guard_but_view_rejects_session(client, fake_backend):
    client.cookies.set(COOKIE_NAME, "forged-but-present")
    response = client.get("/dashboard", follow_redirects=False)

    assert response.status_code == 401
    data = response.json()
    assert data["status"] == "error"
    assert data["error"] == "No active session"
    assert data["login_url"] == "/login"
    assert fake_backend.requests == []
