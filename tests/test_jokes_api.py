"""Tests for the jokes CRUD endpoints and /user."""

import pytest

from conftest import bearer, login_user, register_user


async def _login(client, username):
    await register_user(client, username, "pw1")
    tokens = await login_user(client, username, "pw1")
    return bearer(tokens["accessToken"])


async def _create(client, headers, name="Frog", content="What do frogs drink? Croak-a-cola."):
    response = await client.post("/jokes/new", json={"name": name, "content": content}, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()["joke"]


@pytest.mark.asyncio
async def test_current_user(async_client):
    headers = await _login(async_client, "alice")
    response = await async_client.get("/user", headers=headers)
    assert response.status_code == 200
    assert response.json()["user"]["username"] == "alice"


@pytest.mark.asyncio
async def test_current_user_requires_token(async_client):
    response = await async_client.get("/user")
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_create_and_fetch_joke(async_client):
    headers = await _login(async_client, "alice")
    me = (await async_client.get("/user", headers=headers)).json()["user"]

    joke = await _create(async_client, headers)
    assert joke["jokesterId"] == me["id"]
    assert joke["name"] == "Frog"

    response = await async_client.get(f"/jokes/{joke['id']}")
    assert response.status_code == 200
    assert response.json()["joke"]["content"] == joke["content"]


@pytest.mark.asyncio
async def test_create_joke_validation(async_client):
    headers = await _login(async_client, "alice")
    response = await async_client.post("/jokes/new", json={"name": "Only a name"}, headers=headers)
    assert response.status_code == 422

    response = await async_client.post("/jokes/new", json={"name": "x", "content": "y"})
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_list_public_and_own(async_client):
    alice = await _login(async_client, "alice")
    bob = await _login(async_client, "bob")
    await _create(async_client, alice, name="A1")
    await _create(async_client, bob, name="B1")

    response = await async_client.get("/jokes")
    assert response.status_code == 200
    assert {j["name"] for j in response.json()["jokeListItems"]} == {"A1", "B1"}

    response = await async_client.get("/jokes", headers=alice)
    assert [j["name"] for j in response.json()["jokeListItems"]] == ["A1"]

    response = await async_client.get("/jokes", headers=bearer("expired-or-garbage"))
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_missing_joke_404(async_client):
    response = await async_client.get("/jokes/does-not-exist")
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_only_owner_can_delete(async_client):
    alice = await _login(async_client, "alice")
    bob = await _login(async_client, "bob")
    joke = await _create(async_client, alice)

    response = await async_client.delete(f"/jokes/{joke['id']}", headers=bob)
    assert response.status_code == 403

    response = await async_client.delete(f"/jokes/{joke['id']}", headers=alice)
    assert response.status_code == 200

    response = await async_client.get(f"/jokes/{joke['id']}")
    assert response.status_code == 404
