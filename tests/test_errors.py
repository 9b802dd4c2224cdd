"""Tests for the terminal error handling."""
import os
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient
from pymongo.errors import ServerSelectionTimeoutError

from product_api.main import app
from product_api.api.deps import product_repo
from product_api.core.errors import ERROR_TABLE, ApiError, ErrorKind
from product_api.domain.repositories.product_repo import ProductRepo

TEST_API_KEY = os.environ["API_KEY"]


@pytest.fixture
def client_with_repo():
    """Client factory bound to an arbitrary store object."""
    def _make(repo_obj, **kwargs):
        app.dependency_overrides[product_repo] = lambda: repo_obj
        return TestClient(app, headers={"x-api-key": TEST_API_KEY}, **kwargs)
    yield _make
    app.dependency_overrides.clear()


@pytest.mark.parametrize(
    "kind,status,key",
    [
        (ErrorKind.VALIDATION, 400, "error"),
        (ErrorKind.AUTH, 403, "message"),
        (ErrorKind.NOT_FOUND, 404, "message"),
        (ErrorKind.STORE_UNAVAILABLE, 500, "error"),
        (ErrorKind.INTERNAL, 500, "error"),
    ],
)
def test_error_kind_lookup(kind, status, key):
    err = ApiError(kind, "boom")

    assert err.status_code == status
    assert err.to_body() == {key: "boom"}


def test_every_kind_has_a_table_entry():
    assert set(ERROR_TABLE) == set(ErrorKind)


def test_explicit_status_overrides_table():
    err = ApiError(ErrorKind.VALIDATION, "too big", status_code=413)

    assert err.status_code == 413
    assert err.to_body() == {"error": "too big"}


def test_default_message():
    assert ApiError(ErrorKind.INTERNAL).to_body() == {"error": "Internal Server Error"}


def test_store_outage_returns_500_without_details(client_with_repo):
    col = MagicMock()
    col.find_one = AsyncMock(side_effect=ServerSelectionTimeoutError("localhost:27017: connection refused"))
    db = MagicMock()
    db.__getitem__.return_value = col
    client = client_with_repo(ProductRepo(db))

    response = client.get("/api/products/abc")

    assert response.status_code == 500
    assert response.json() == {"error": "Product store is unavailable."}
    assert "27017" not in response.text


def test_unexpected_exception_is_a_generic_500(client_with_repo):
    broken = MagicMock()
    broken.find_by_id = AsyncMock(side_effect=RuntimeError("secret stack detail"))
    client = client_with_repo(broken, raise_server_exceptions=False)

    response = client.get("/api/products/abc")

    assert response.status_code == 500
    assert response.json() == {"error": "Internal Server Error"}
    assert "secret" not in response.text
