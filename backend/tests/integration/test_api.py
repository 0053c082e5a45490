import httpx
import pytest_asyncio

from recipeshare.app import create_app
from recipeshare.models import SessionUser


@pytest_asyncio.fixture
async def app(tmp_path):
    app = create_app(str(tmp_path / "api.db"))
    async with app.router.lifespan_context(app):
        yield app


@pytest_asyncio.fixture
async def client(app):
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


async def test_health(client):
    response = await client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"
    assert response.json()["realtime_sessions"] == 0


async def test_user_round_trip(client):
    created = await client.post("/api/users/", json={"uid": "u1", "display_name": "Me", "email": "me@example.com"})
    assert created.status_code == 201

    fetched = await client.get("/api/users/u1")
    assert fetched.json()["display_name"] == "Me"

    assert (await client.get("/api/users/ghost")).status_code == 404


async def test_recipe_crud(client):
    created = await client.post("/api/recipes/", json={"user_id": "u1", "title": "Bread"})
    assert created.status_code == 201
    recipe_id = created.json()["id"]

    updated = await client.put(f"/api/recipes/{recipe_id}", json={"title": "Rye bread"})
    assert updated.json()["title"] == "Rye bread"

    assert (await client.delete(f"/api/recipes/{recipe_id}")).status_code == 200
    assert (await client.get(f"/api/recipes/{recipe_id}")).status_code == 404


async def test_confirm_request(app, client):
    backend = app.state.relation_backend
    relation_id = await backend.create_relation(SessionUser(uid="u1"), "u2")

    confirmed = await client.post(f"/api/following/requests/{relation_id}/confirm")
    assert confirmed.status_code == 200
    assert confirmed.json()["confirmed"] is True

    listed = await client.get("/api/following/u1")
    assert [r["id"] for r in listed.json()] == [relation_id]

    missing = await client.post("/api/following/requests/nope/confirm")
    assert missing.status_code == 404
