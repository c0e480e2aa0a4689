"""
Pytest fixtures shared by the HaatBazar backend tests.

Every test gets a fresh in-memory store seeded with a small catalog and an application
built around it. Users authenticate with development mock tokens
(`Authorization: Bearer mock_jwt_token_<uid>`); admin endpoints are reached by overriding
`get_principal`.
"""
from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from haatbazar.config import Settings
from haatbazar.core.auth import get_principal
from haatbazar.main import create_app
from haatbazar.schemas.principal import Principal
from haatbazar.store import MemoryStore

BASE_TIME = datetime(2024, 1, 1, tzinfo=timezone.utc)

CATALOG = [
    {
        "id": "p-shoe",
        "name": "Trail Running Shoe",
        "description": "Lightweight shoe for mountain trails",
        "price": 89.99,
        "image": "/images/shoe.jpg",
        "brand": "Peak",
        "category": "footwear",
        "count_in_stock": 12,
    },
    {
        "id": "p-sock",
        "name": "Wool Socks",
        "description": "Warm socks, pairs well with any SHOE",
        "price": 9.5,
        "image": "/images/socks.jpg",
        "brand": "Peak",
        "category": "footwear",
        "count_in_stock": 40,
    },
    {
        "id": "p-kettle",
        "name": "Copper Kettle",
        "description": "Hand-hammered copper kettle",
        "price": 45.0,
        "image": "/images/kettle.jpg",
        "brand": "Thimi",
        "category": "kitchen",
        "count_in_stock": 3,
    },
]


def seed_catalog(store: MemoryStore) -> None:
    for offset, product in enumerate(CATALOG):
        data = {k: v for k, v in product.items() if k != "id"}
        data.update({"rating": 0.0, "num_reviews": 0, "created_at": BASE_TIME + timedelta(minutes=offset)})
        store.insert("products", data, doc_id=product["id"])


def auth(uid: str) -> dict:
    return {"Authorization": f"Bearer mock_jwt_token_{uid}"}


@pytest.fixture
def settings():
    return Settings(
        _env_file=None,
        store_backend="memory",
        allow_mock_tokens=True,
        cart_max_retries=3,
        verify_product_exists=True,
        search_limit=10,
    )


@pytest.fixture
def store():
    store = MemoryStore()
    seed_catalog(store)
    return store


@pytest.fixture
def app(settings, store):
    app = create_app(settings=settings, store=store)
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
def test_client(app):
    with TestClient(app) as client:
        yield client


@pytest.fixture
def as_admin(app):
    """Route every request through an admin principal."""
    admin = Principal(uid="admin-1", role="admin", email="admin@haatbazar.test")
    app.dependency_overrides[get_principal] = lambda: admin
    return admin


@pytest.fixture
def alice():
    return auth("alice")


@pytest.fixture
def bob():
    return auth("bob")
