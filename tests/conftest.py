import time

import pytest
from fastapi.testclient import TestClient
from sqlmodel import Session

from photostudio.app import create_app
from photostudio.config import Settings
from photostudio.security import TokenService

ADMIN_EMAIL = "admin@studio.test"
ADMIN_PASSWORD = "adminpass"
PASSWORD = "secret1"


class FakeClock:
    def __init__(self, now: float):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def settings():
    return Settings(
        database_url="sqlite://",
        jwt_secret="test-secret",
        token_ttl_seconds=3600,
        bcrypt_rounds=4,
        admin_email=ADMIN_EMAIL,
        admin_password=ADMIN_PASSWORD,
    )


@pytest.fixture
def clock():
    return FakeClock(time.time())


@pytest.fixture
def app(settings, clock):
    tokens = TokenService(settings.jwt_secret, settings.token_ttl_seconds, clock=clock)
    return create_app(settings, tokens=tokens)


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c


@pytest.fixture
def session(app):
    with Session(app.state.engine) as s:
        yield s


def bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


def register(client, email, password=PASSWORD, first_name="Ann", **extra):
    body = {"first_name": first_name, "email": email, "password": password, **extra}
    return client.post("/api/auth/register", json=body)


def login(client, email, password=PASSWORD) -> str:
    r = client.post("/api/auth/login", json={"email": email, "password": password})
    assert r.status_code == 200, r.text
    return r.json()["token"]


@pytest.fixture
def admin_headers(client):
    return bearer(login(client, ADMIN_EMAIL, ADMIN_PASSWORD))


@pytest.fixture
def make_customer(client):
    """Register + log in a customer; returns (user_id, headers)."""
    def _make(email, first_name="Ann"):
        r = register(client, email, first_name=first_name)
        assert r.status_code == 201, r.text
        return r.json()["user"]["id"], bearer(login(client, email))
    return _make


@pytest.fixture
def customer(make_customer):
    return make_customer("alice@example.com", first_name="Alice")


@pytest.fixture
def make_photo(client, admin_headers):
    def _make(**fields):
        body = {"file_path": "/uploads/p.jpg", **fields}
        r = client.post("/api/gallery", json=body, headers=admin_headers)
        assert r.status_code == 201, r.text
        return r.json()["photo"]
    return _make
