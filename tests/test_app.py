"""Tests for application wiring, configuration and admin access."""

from unittest.mock import Mock

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError

from portfolio_api.config import Settings
from portfolio_api.main import create_app
from portfolio_api.storage import DatabaseStorage, get_storage


def test_root_and_health(client):
    assert client.get("/").json() == {"name": "PortfolioAPI", "version": "1.0.0", "status": "running"}
    assert client.get("/health").json() == {"status": "healthy"}


def test_admin_disabled_without_secret(settings):
    settings.admin_key = None
    with TestClient(create_app(settings)) as client:
        responses = [
            client.get("/api/contact", headers={"Authorization": "Bearer anything"}),
            client.post("/api/blog", json={}),
            client.delete("/api/projects/some-id"),
            client.get("/api/blog", params={"published": "false"}),
        ]
        public = client.get("/api/blog")

    for response in responses:
        assert response.status_code == 503
        assert response.json() == {"error": "Admin operations not configured"}
    assert public.status_code == 200


def test_missing_token_is_unauthenticated(client):
    response = client.get("/api/contact")

    assert response.status_code == 401
    assert response.headers["WWW-Authenticate"] == "Bearer"


def test_non_bearer_scheme_is_unauthenticated(client):
    response = client.get("/api/contact", headers={"Authorization": "Basic dGVzdDp0ZXN0"})

    assert response.status_code == 401


def test_wrong_token_is_forbidden(client):
    response = client.get("/api/contact", headers={"Authorization": "Bearer wrong-key"})

    assert response.status_code == 403
    assert response.json() == {"error": "Invalid admin token"}


def test_token_comparison_is_exact(client):
    response = client.get("/api/contact", headers={"Authorization": "Bearer TEST-ADMIN-KEY"})

    assert response.status_code == 403


def test_settings_from_env(monkeypatch):
    monkeypatch.setenv("DATABASE_URL", "sqlite://")
    monkeypatch.setenv("ADMIN_KEY", "secret")
    monkeypatch.setenv("APP_ENV", "development")
    monkeypatch.setenv("TRUST_PROXY", "yes")
    monkeypatch.setenv("CONTACT_RATE_LIMIT", "5")
    monkeypatch.setenv("LOG_FILE", "")
    monkeypatch.delenv("SENDGRID_API_KEY", raising=False)
    monkeypatch.delenv("CONTACT_EMAIL", raising=False)

    settings = Settings.from_env()

    assert settings.admin_key == "secret"
    assert settings.admin_enabled
    assert settings.dev_mode is True
    assert settings.trust_proxy is True
    assert settings.contact_rate_limit == 5
    assert settings.contact_rate_window_seconds == 900
    assert settings.log_file is None
    assert settings.mail_configured is False
    assert settings.contact_email is None


def test_blank_admin_key_disables_admin(monkeypatch):
    monkeypatch.setenv("DATABASE_URL", "sqlite://")
    monkeypatch.setenv("ADMIN_KEY", "   ")

    assert Settings.from_env().admin_enabled is False


def test_production_is_default_mode(monkeypatch):
    monkeypatch.setenv("DATABASE_URL", "sqlite://")
    monkeypatch.delenv("APP_ENV", raising=False)

    assert Settings.from_env().dev_mode is False


def test_database_url_is_required(monkeypatch):
    monkeypatch.delenv("DATABASE_URL", raising=False)

    with pytest.raises(ValueError):
        Settings.from_env()


class BrokenStorage(DatabaseStorage):
    """Storage whose reads fail the way a dropped database connection does."""

    def list_blog_posts(self, published_only=False):
        raise OperationalError("SELECT * FROM blog_posts", {}, Exception("password=hunter2 host=db"))

    def list_projects(self, featured_only=False):
        raise RuntimeError("unexpected secret detail")


@pytest.fixture
def broken_db():
    return Mock()


@pytest.fixture
def broken_app(app, broken_db):
    app.dependency_overrides[get_storage] = lambda: BrokenStorage(broken_db)
    yield app
    app.dependency_overrides.clear()


def test_database_failure_returns_generic_500(broken_app, broken_db):
    with TestClient(broken_app) as client:
        response = client.get("/api/blog")

    assert response.status_code == 500
    assert response.json() == {"error": "Failed to fetch blog posts"}
    assert "hunter2" not in response.text
    assert "SELECT" not in response.text
    broken_db.rollback.assert_called_once()


def test_unexpected_failure_returns_internal_server_error(broken_app):
    with TestClient(broken_app, raise_server_exceptions=False) as client:
        response = client.get("/api/projects")

    assert response.status_code == 500
    assert response.json() == {"error": "Internal server error"}
    assert "secret" not in response.text
