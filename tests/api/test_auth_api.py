"""Tests for account and session endpoints."""

from httpx import AsyncClient

from src.core.services import CollectionGateway
from src.infrastructure.storage import InMemoryKeyValueStore


async def test_me_without_session(client: AsyncClient):
    response = await client.get("/api/auth/me")
    assert response.status_code == 200
    assert response.json() == {"authenticated": False, "user": None}


async def test_register_logs_in_and_seeds(client: AsyncClient, logged_in: dict):
    assert logged_in["email"] == "owner@shop.com"
    assert logged_in["shop_name"] == "Acme Supplies"
    assert logged_in["id"].startswith("user_")
    assert "password_hash" not in logged_in

    me = (await client.get("/api/auth/me")).json()
    assert me["authenticated"] is True
    assert me["user"]["id"] == logged_in["id"]

    products = (await client.get("/api/products")).json()
    assert {p["name"] for p in products["products"]} == {
        "Web Design Basic",
        "SEO Audit",
        "Logo Design",
    }


async def test_register_duplicate_email(client: AsyncClient, logged_in: dict):
    response = await client.post(
        "/api/auth/register",
        json={"email": "owner@shop.com", "password": "other", "shop_name": "Other"},
    )
    assert response.status_code == 409
    assert response.json()["error_code"] == "DUPLICATE_EMAIL"


async def test_register_missing_field(client: AsyncClient):
    response = await client.post(
        "/api/auth/register", json={"email": "owner@shop.com", "password": "x"}
    )
    assert response.status_code == 422
    body = response.json()
    assert body["error_code"] == "VALIDATION_ERROR"
    assert "shop_name" in body["detail"]


async def test_logout_then_login(client: AsyncClient, logged_in: dict):
    logout = await client.post("/api/auth/logout")
    assert logout.json() == {"authenticated": False, "user": None}
    assert (await client.get("/api/products")).status_code == 401

    login = await client.post(
        "/api/auth/login", json={"email": "owner@shop.com", "password": "secret"}
    )
    assert login.status_code == 200
    assert login.json()["id"] == logged_in["id"]
    assert (await client.get("/api/products")).status_code == 200


async def test_login_wrong_password(client: AsyncClient, logged_in: dict):
    await client.post("/api/auth/logout")
    response = await client.post(
        "/api/auth/login", json={"email": "owner@shop.com", "password": "wrong"}
    )
    assert response.status_code == 401
    assert response.json()["error_code"] == "INVALID_CREDENTIALS"
    assert (await client.get("/api/auth/me")).json()["authenticated"] is False


async def test_login_unknown_email(client: AsyncClient):
    response = await client.post(
        "/api/auth/login", json={"email": "nobody@shop.com", "password": "secret"}
    )
    assert response.status_code == 401


async def test_session_persisted_without_credentials(
    client: AsyncClient,
    logged_in: dict,
    api_store: InMemoryKeyValueStore,
    api_gateway: CollectionGateway,
):
    raw = await api_store.get(api_gateway.session_key)
    assert raw is not None
    assert logged_in["id"] in raw
    assert "pbkdf2" not in raw
    assert "pbkdf2" in (await api_store.get(api_gateway.users_key))


async def test_users_are_isolated(client: AsyncClient, logged_in: dict):
    await client.post(
        "/api/products", json={"name": "Only Mine", "price": 10, "unit": "pcs"}
    )
    await client.post("/api/auth/logout")
    await client.post(
        "/api/auth/register",
        json={"email": "second@shop.com", "password": "pw", "shop_name": "Second"},
    )

    names = {p["name"] for p in (await client.get("/api/products")).json()["products"]}
    assert "Only Mine" not in names
    assert len(names) == 3
