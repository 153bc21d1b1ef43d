"""Role API tests."""
import pytest
from httpx import AsyncClient


async def _permissions(client, headers) -> dict:
    response = await client.get("/api/v1/permissions", headers=headers)
    assert response.status_code == 200
    return {p["name"]: p["id"] for p in response.json()["permissions"]}


async def _owner_role(client, headers, company_id) -> dict:
    response = await client.get(f"/api/v1/companies/{company_id}/roles", headers=headers)
    return next(r for r in response.json()["roles"] if r["name"] == "owner")


@pytest.mark.asyncio
async def test_permission_catalog_sorted(client: AsyncClient, auth_headers):
    response = await client.get("/api/v1/permissions", headers=auth_headers)

    names = [p["name"] for p in response.json()["permissions"]]
    assert names == sorted(names)
    assert "batch:view" in names


@pytest.mark.asyncio
async def test_create_role_normalizes_name(client: AsyncClient, auth_headers, company):
    perms = await _permissions(client, auth_headers)
    response = await client.post(
        f"/api/v1/companies/{company.id}/roles",
        headers=auth_headers,
        json={"name": "  Viewer ", "permission_ids": [perms["batch:view"]]},
    )

    assert response.status_code == 201
    data = response.json()
    assert data["name"] == "viewer"
    assert [p["name"] for p in data["permissions"]] == ["batch:view"]

    duplicate = await client.post(
        f"/api/v1/companies/{company.id}/roles", headers=auth_headers, json={"name": "VIEWER"}
    )
    assert duplicate.status_code == 409
    assert duplicate.json()["field"] == "name"


@pytest.mark.asyncio
@pytest.mark.parametrize("name", ["owner", "Owner", " OWNER "])
async def test_cannot_create_owner_role(client: AsyncClient, auth_headers, company, name):
    response = await client.post(
        f"/api/v1/companies/{company.id}/roles", headers=auth_headers, json={"name": name}
    )
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_unknown_permission_rejected(client: AsyncClient, auth_headers, company):
    response = await client.post(
        f"/api/v1/companies/{company.id}/roles",
        headers=auth_headers,
        json={"name": "broken", "permission_ids": ["nope"]},
    )
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_update_replaces_permission_set(client: AsyncClient, auth_headers, company):
    perms = await _permissions(client, auth_headers)
    created = await client.post(
        f"/api/v1/companies/{company.id}/roles",
        headers=auth_headers,
        json={"name": "clerk", "permission_ids": [perms["batch:view"], perms["land:view"]]},
    )
    role_id = created.json()["id"]

    response = await client.put(
        f"/api/v1/companies/{company.id}/roles/{role_id}",
        headers=auth_headers,
        json={"permission_ids": [perms["farmer:view"], perms["land:view"]]},
    )
    assert response.status_code == 200
    assert {p["name"] for p in response.json()["permissions"]} == {"farmer:view", "land:view"}

    # Renaming alone leaves permissions untouched
    response = await client.put(
        f"/api/v1/companies/{company.id}/roles/{role_id}",
        headers=auth_headers,
        json={"name": "Field Clerk"},
    )
    data = response.json()
    assert data["name"] == "field clerk"
    assert {p["name"] for p in data["permissions"]} == {"farmer:view", "land:view"}

    response = await client.put(
        f"/api/v1/companies/{company.id}/roles/{role_id}",
        headers=auth_headers,
        json={"permission_ids": []},
    )
    assert response.json()["permissions"] == []


@pytest.mark.asyncio
async def test_owner_role_is_immutable(client: AsyncClient, auth_headers, company):
    owner_role = await _owner_role(client, auth_headers, company.id)
    url = f"/api/v1/companies/{company.id}/roles/{owner_role['id']}"

    assert (await client.put(url, headers=auth_headers, json={"name": "boss"})).status_code == 400
    assert (await client.put(url, headers=auth_headers, json={"permission_ids": []})).status_code == 400
    assert (await client.delete(url, headers=auth_headers)).status_code == 400


@pytest.mark.asyncio
async def test_cannot_rename_to_owner(client: AsyncClient, auth_headers, company):
    created = await client.post(
        f"/api/v1/companies/{company.id}/roles", headers=auth_headers, json={"name": "editor"}
    )
    response = await client.put(
        f"/api/v1/companies/{company.id}/roles/{created.json()['id']}",
        headers=auth_headers,
        json={"name": "Owner"},
    )
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_delete_role_in_use(client: AsyncClient, auth_headers, company, make_user):
    """A role cannot be deleted while someone holds it."""
    member = await make_user("member@example.com")
    created = await client.post(
        f"/api/v1/companies/{company.id}/roles", headers=auth_headers, json={"name": "editor"}
    )
    role_id = created.json()["id"]
    await client.post(
        f"/api/v1/companies/{company.id}/members",
        headers=auth_headers,
        json={"user_id": member.id, "role_ids": [role_id]},
    )

    response = await client.delete(
        f"/api/v1/companies/{company.id}/roles/{role_id}", headers=auth_headers
    )
    assert response.status_code == 400
    assert "assigned to 1 user" in response.json()["detail"]

    detail = await client.get(f"/api/v1/companies/{company.id}/roles/{role_id}", headers=auth_headers)
    assert [u["email"] for u in detail.json()["users"]] == ["member@example.com"]

    await client.delete(f"/api/v1/companies/{company.id}/members/{member.id}", headers=auth_headers)
    response = await client.delete(
        f"/api/v1/companies/{company.id}/roles/{role_id}", headers=auth_headers
    )
    assert response.status_code == 200


@pytest.mark.asyncio
async def test_roles_hidden_from_outsiders(client: AsyncClient, company, outsider, headers_for):
    response = await client.get(
        f"/api/v1/companies/{company.id}/roles", headers=headers_for(outsider)
    )
    assert response.status_code == 404
