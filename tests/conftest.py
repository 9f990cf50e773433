"""Shared test fixtures for API tests."""

import pytest
from fastapi.testclient import TestClient

from portfolio_api.config import Settings
from portfolio_api.database import create_db_engine, create_session_factory, init_db
from portfolio_api.main import create_app
from portfolio_api.notifications import ContactNotifier
from portfolio_api.rate_limit import FixedWindowRateLimiter
from portfolio_api.storage import DatabaseStorage

ADMIN_KEY = "test-admin-key"


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float):
        self.now += seconds


class FakeMail:
    """Stands in for FastMail; records messages instead of sending them."""

    def __init__(self, fail: bool = False):
        self.fail = fail
        self.messages = []

    async def send_message(self, message, template_name=None):
        if self.fail:
            raise ConnectionError("SMTP relay unreachable")
        self.messages.append(message)


@pytest.fixture
def settings():
    return Settings(
        database_url="sqlite://",
        admin_key=ADMIN_KEY,
        contact_email="owner@example.com",
        mail_api_key="SG.test",
        log_file=None,
    )


@pytest.fixture
def fake_mail():
    return FakeMail()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def app(settings, fake_mail, clock):
    app = create_app(settings, notifier=ContactNotifier(settings, fastmail=fake_mail))
    app.state.contact_limiter = FixedWindowRateLimiter(
        max_requests=settings.contact_rate_limit,
        window_seconds=settings.contact_rate_window_seconds,
        clock=clock,
    )
    return app


@pytest.fixture
def client(app):
    with TestClient(app) as client:
        yield client


@pytest.fixture
def admin_headers():
    return {"Authorization": f"Bearer {ADMIN_KEY}"}


@pytest.fixture
def db_session():
    """Session on a fresh in-memory database, for storage-level tests."""
    engine = create_db_engine("sqlite://")
    init_db(engine)
    session = create_session_factory(engine)()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()


@pytest.fixture
def storage(db_session):
    return DatabaseStorage(db_session)


def make_post(**overrides):
    post = {
        "title": "Hello World",
        "slug": "hello-world",
        "content": "# Hello\n\nFirst post.",
        "excerpt": "First post.",
        "published": True,
    }
    post.update(overrides)
    return post


def make_project(**overrides):
    project = {
        "title": "Portfolio Site",
        "slug": "portfolio-site",
        "description": "The site you are looking at.",
        "technologies": ["Python", "FastAPI"],
        "featured": False,
        "orderIndex": 0,
    }
    project.update(overrides)
    return project


def make_contact(**overrides):
    contact = {
        "name": "Ada Lovelace",
        "email": "ada@example.com",
        "subject": "Hello",
        "message": "I enjoyed your latest post.",
    }
    contact.update(overrides)
    return contact
