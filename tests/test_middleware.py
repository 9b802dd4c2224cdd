"""Tests for the API key gate and request logging."""
import logging
import re

import pytest

from product_api.api.middleware import api_key_matches

FORBIDDEN = {"message": "Forbidden: Invalid API Key"}


@pytest.mark.parametrize(
    "method,path",
    [
        ("GET", "/"),
        ("GET", "/api/products"),
        ("GET", "/api/products/some-id"),
        ("GET", "/api/products/search?name=phone"),
        ("GET", "/api/products/stats"),
        ("DELETE", "/api/products/some-id"),
        ("GET", "/health"),
        ("GET", "/no-such-route"),
    ],
)
def test_missing_api_key_is_forbidden(anon_client, method, path):
    response = anon_client.request(method, path)

    assert response.status_code == 403
    assert response.json() == FORBIDDEN


def test_wrong_api_key_is_forbidden(anon_client):
    response = anon_client.get("/api/products", headers={"x-api-key": "nope"})

    assert response.status_code == 403
    assert response.json() == FORBIDDEN


@pytest.mark.parametrize("key", ["TEST-API-KEY", "test-api-ke", "test-api-key2"])
def test_api_key_must_match_exactly(anon_client, key):
    response = anon_client.get("/api/products", headers={"x-api-key": key})

    assert response.status_code == 403


def test_rejected_create_never_reaches_the_store(client, anon_client):
    response = anon_client.post(
        "/api/products", json={"name": "Laptop", "price": 1200, "category": "electronics"}
    )

    assert response.status_code == 403
    assert client.get("/api/products").json() == []


def test_rejected_delete_leaves_product_in_place(client, anon_client, create_product):
    created = create_product()

    response = anon_client.delete(f"/api/products/{created['id']}")

    assert response.status_code == 403
    assert client.get(f"/api/products/{created['id']}").status_code == 200


def test_auth_runs_before_validation(anon_client):
    # invalid body, but the missing key is reported first
    response = anon_client.post("/api/products", json={"price": -1})

    assert response.status_code == 403


def test_api_key_matches():
    assert api_key_matches("secret", "secret")
    assert not api_key_matches("secret", "Secret")
    assert not api_key_matches(None, "secret")
    assert not api_key_matches("", "secret")


def test_unset_secret_matches_nothing():
    assert not api_key_matches("anything", None)
    assert not api_key_matches("", "")


def test_request_is_logged_with_iso_timestamp(client, caplog):
    caplog.set_level(logging.INFO, logger="product_api.api.middleware")

    client.get("/api/products")

    lines = [r.getMessage() for r in caplog.records if r.name == "product_api.api.middleware"]
    assert any(
        re.fullmatch(r"\[\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}(\.\d+)?\+00:00\] GET /api/products", line)
        for line in lines
    )


def test_forbidden_request_is_still_logged(anon_client, caplog):
    caplog.set_level(logging.INFO, logger="product_api.api.middleware")

    anon_client.delete("/api/products/abc")

    lines = [r.getMessage() for r in caplog.records if r.name == "product_api.api.middleware"]
    assert any(line.endswith("] DELETE /api/products/abc") for line in lines)
