import itertools
import os

os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from marketplace.database.session import Base, build_engine, get_db
from marketplace.main import app as fastapi_app
from marketplace.services.auth_service import session_store
from marketplace.services.image_service import image_service

PASSWORD = "secret123"
PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 24

_names = itertools.count(1)


@pytest.fixture
def engine():
    eng = build_engine("sqlite://", poolclass=StaticPool)
    Base.metadata.create_all(bind=eng)
    yield eng
    Base.metadata.drop_all(bind=eng)
    eng.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)


@pytest.fixture
def db_session(session_factory):
    db = session_factory()
    yield db
    db.close()


@pytest.fixture
def app(session_factory, tmp_path, monkeypatch):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    fastapi_app.dependency_overrides[get_db] = override_get_db
    monkeypatch.setattr(image_service, "base_dir", tmp_path / "uploads")
    session_store.clear()
    yield fastapi_app
    fastapi_app.dependency_overrides.clear()
    session_store.clear()


@pytest.fixture
def make_client(app):
    clients = []

    def _make():
        client = TestClient(app)
        clients.append(client)
        return client

    yield _make
    for client in clients:
        client.close()


@pytest.fixture
def anon(make_client):
    return make_client()


def register(client, user_type, username=None, **extra):
    username = username or f"{user_type}{next(_names)}"
    payload = {"username": username, "email": f"{username}@example.com", "password": PASSWORD}
    if user_type == "provider":
        payload["businessName"] = f"{username} Ltd"
    payload.update(extra)
    return client.post(f"/api/auth/register/{user_type}", json=payload)


@pytest.fixture
def login_as(make_client):
    """Register a fresh account of ``user_type`` and return a client holding its session cookie."""

    def _login(user_type, **extra):
        client = make_client()
        r = register(client, user_type, **extra)
        assert r.status_code == 201, r.text
        username = r.json()[user_type]["username"]
        r = client.post("/api/auth/login", json={"username": username, "password": PASSWORD, "userType": user_type})
        assert r.status_code == 200, r.text
        client.user_id = r.json()["userId"]
        client.username = username
        return client

    return _login


@pytest.fixture
def customer(login_as):
    return login_as("customer", address="1 Test Street")


@pytest.fixture
def dealer(login_as):
    return login_as("dealer", warehouse="Warehouse T")


@pytest.fixture
def provider(login_as):
    return login_as("provider")


@pytest.fixture
def substance(provider):
    r = provider.post("/api/substances/", json={"substanceName": "Caffeine Powder", "category": "Stimulants"})
    assert r.status_code == 201, r.text
    return r.json()["substance"]


@pytest.fixture
def stocked(dealer, substance):
    r = dealer.post("/api/inventory/", json={"substance_id": substance["id"], "quantityAvailable": 10})
    assert r.status_code == 201, r.text
    return r.json()["inventoryItem"]


@pytest.fixture
def order(customer, dealer, substance, stocked):
    body = {
        "dealer_id": dealer.user_id,
        "items": [{"substance_id": substance["id"], "quantity": 2, "unitPrice": 25.50}],
        "deliveryAddress": "1 Test Street",
    }
    r = customer.post("/api/orders/", json=body)
    assert r.status_code == 201, r.text
    return r.json()["order"]
