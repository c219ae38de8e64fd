"""Slug-addressed tenant endpoints and subscription upgrade."""

import pytest
from httpx import AsyncClient


@pytest.mark.asyncio
async def test_get_own_tenant(client: AsyncClient, seeded, login_as):
    headers = await login_as("user@acme.test")

    resp = await client.get("/v1/tenants/acme", headers=headers)
    assert resp.status_code == 200
    data = resp.json()
    assert data["slug"] == "acme"
    assert data["notes_limit"] == 3
    assert data["current_notes_count"] == 0
    assert data["can_create_notes"] is True


@pytest.mark.asyncio
async def test_foreign_slug_is_forbidden_not_not_found(client: AsyncClient, seeded, login_as):
    headers = await login_as("admin@acme.test")

    for path in ("/v1/tenants/globex", "/v1/tenants/globex/subscription"):
        resp = await client.get(path, headers=headers)
        assert resp.status_code == 403, path
        assert resp.json()["error"] == "forbidden"

    resp = await client.post("/v1/tenants/globex/upgrade", headers=headers)
    assert resp.status_code == 403


@pytest.mark.asyncio
async def test_member_cannot_upgrade(client: AsyncClient, seeded, login_as):
    headers = await login_as("user@acme.test")

    resp = await client.post("/v1/tenants/acme/upgrade", headers=headers)
    assert resp.status_code == 403

    resp = await client.get("/v1/tenants/acme/subscription", headers=headers)
    assert resp.json()["plan"] == "free"
    assert resp.json()["can_upgrade"] is False


@pytest.mark.asyncio
async def test_admin_upgrade_lifts_quota(client: AsyncClient, seeded, login_as):
    admin = await login_as("admin@acme.test")
    member = await login_as("user@acme.test")
    for i in range(3):
        assert (await client.post(
            "/v1/notes", json={"title": f"n{i}", "content": "c"}, headers=member
        )).status_code == 201
    assert (await client.post(
        "/v1/notes", json={"title": "blocked", "content": "c"}, headers=member
    )).status_code == 403

    resp = await client.get("/v1/tenants/acme/subscription", headers=admin)
    assert resp.json()["can_upgrade"] is True
    assert resp.json()["can_create_notes"] is False

    resp = await client.post("/v1/tenants/acme/upgrade", headers=admin)
    assert resp.status_code == 200, resp.text
    assert resp.json()["tenant"]["subscription"] == "pro"
    assert resp.json()["notes_limit"] is None

    resp = await client.post("/v1/tenants/acme/upgrade", headers=admin)
    assert resp.status_code == 400
    assert resp.json()["error"] == "already_pro"

    for i in range(3):
        assert (await client.post(
            "/v1/notes", json={"title": f"pro{i}", "content": "c"}, headers=member
        )).status_code == 201

    # Upgrade is scoped to acme only
    globex = await login_as("user@globex.test")
    resp = await client.get("/v1/tenants/globex/subscription", headers=globex)
    assert resp.json()["plan"] == "free"


@pytest.mark.asyncio
async def test_health(client: AsyncClient):
    resp = await client.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}
