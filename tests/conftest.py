"""Root conftest: shared fixtures and test configuration."""

import os

# Must be set before product_api.core.config.get_settings() is first called
TEST_API_KEY = "test-api-key"
os.environ["API_KEY"] = TEST_API_KEY
os.environ.setdefault("APP_ENV", "development")

import pytest
from fastapi.testclient import TestClient
from mongomock_motor import AsyncMongoMockClient

from product_api.main import app
from product_api.api.deps import product_repo
from product_api.domain.repositories.product_repo import ProductRepo


@pytest.fixture(scope="function")
def mongo_db():
    """Fresh in-memory Mongo database per test."""
    return AsyncMongoMockClient()["product_api_test"]


@pytest.fixture(scope="function")
def repo(mongo_db):
    return ProductRepo(mongo_db)


@pytest.fixture(scope="function")
def client(repo):
    """
    Test client sending a valid API key, wired to the in-memory store.
    The lifespan is not entered, so no real Mongo connection is attempted.
    """
    app.dependency_overrides[product_repo] = lambda: repo
    yield TestClient(app, headers={"x-api-key": TEST_API_KEY})
    app.dependency_overrides.clear()


@pytest.fixture(scope="function")
def anon_client(repo):
    """Same app and store, but no API key header."""
    app.dependency_overrides[product_repo] = lambda: repo
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture(scope="function")
def create_product(client):
    """Factory: POST a valid product (fields overridable) and return its JSON."""
    def _create(**overrides):
        payload = {"name": "Laptop", "description": "16GB RAM", "price": 1200, "category": "electronics"}
        payload.update(overrides)
        response = client.post("/api/products", json=payload)
        assert response.status_code == 201, response.text
        return response.json()
    return _create
