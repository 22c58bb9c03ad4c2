import os
import re

# Must be set before the app modules read their configuration
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SECRET_KEY"] = "test-secret"
os.environ["EMAIL_BACKEND"] = "console"
os.environ["APP_BASE_URL"] = "http://frontend.test"

import pytest
from fastapi.testclient import TestClient

from src.api.auth import pwd_context
from src.api.database import SessionLocal, engine
from src.api.mailer import Mailer, get_mailer
from src.api.main import app
from src.api.models import Base

TOKEN_RE = re.compile(r"token=([A-Za-z0-9_\-]+)")


class Outbox(Mailer):
    """Keeps sent messages in memory."""

    def __init__(self):
        self.messages = []

    def send(self, to, subject, html):
        self.messages.append({"to": to, "subject": subject, "html": html})

    def last_token(self, to=None):
        for message in reversed(self.messages):
            if to is None or message["to"] == to:
                return TOKEN_RE.search(message["html"]).group(1)
        raise AssertionError(f"no email sent to {to}")


@pytest.fixture(scope="session", autouse=True)
def fast_hashing():
    pwd_context.update(bcrypt__rounds=4)


@pytest.fixture(autouse=True)
def tables():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    session = SessionLocal()
    yield session
    session.close()


@pytest.fixture
def outbox():
    box = Outbox()
    app.dependency_overrides[get_mailer] = lambda: box
    yield box
    app.dependency_overrides.pop(get_mailer, None)


@pytest.fixture
def client(outbox):
    return TestClient(app)


@pytest.fixture
def register(client, outbox):
    """Sign up, verify and log in; returns the login response body."""

    def _register(email="a@x.com", password="secret-pw", verify=True):
        resp = client.post("/api/auth/signup", json={"email": email, "password": password})
        assert resp.status_code == 200, resp.text
        if verify:
            resp = client.get("/api/auth/verify-email", params={"token": outbox.last_token(email)})
            assert resp.status_code == 200, resp.text
        resp = client.post("/api/auth/login", json={"email": email, "password": password})
        assert resp.status_code == 200, resp.text
        return resp.json()

    return _register


@pytest.fixture
def auth_headers(register):
    def _headers(email="a@x.com", password="secret-pw"):
        return {"x-auth-token": register(email, password)["token"]}

    return _headers
