import pytest

from app.core.config import settings
from app.core.middleware import is_gated_path


@pytest.mark.parametrize("path, gated", [
    ("/", True),
    ("/admin", True),
    ("/movies/3", True),
    ("/login", False),
    ("/health", False),
    ("/assets/index.js", False),
    ("/api/movies", False),
    ("/api/auth/login", False),
])
def test_is_gated_path(path, gated):
    assert is_gated_path(path) is gated


def test_page_without_cookie_redirects_to_login(client):
    response = client.get("/", follow_redirects=False)
    assert response.status_code == 307
    assert response.headers["location"] == "/login"


def test_short_cookie_is_dropped(client):
    client.cookies.set(settings.AUTH_COOKIE_NAME, "short")
    response = client.get("/admin", follow_redirects=False)
    assert response.status_code == 307
    assert response.headers["location"] == "/login"
    assert settings.AUTH_COOKIE_NAME in response.headers.get("set-cookie", "")


def test_cookie_at_the_length_limit_is_dropped(client):
    client.cookies.set(settings.AUTH_COOKIE_NAME, "x" * settings.TOKEN_MIN_LENGTH)
    response = client.get("/admin", follow_redirects=False)
    assert response.status_code == 307
    assert response.headers["location"] == "/login"


def test_long_cookie_passes_the_gate(client):
    client.cookies.set(settings.AUTH_COOKIE_NAME, "x" * (settings.TOKEN_MIN_LENGTH + 1))
    response = client.get("/somewhere", follow_redirects=False)
    assert response.status_code != 307


def test_api_paths_are_not_redirected(client):
    response = client.get("/api/auth/me", follow_redirects=False)
    assert response.status_code == 401


def test_health_is_public(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy"}
