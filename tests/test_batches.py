"""Batch, batch source and lineage API tests."""
import pytest
import pytest_asyncio
from httpx import AsyncClient
from sqlalchemy import func, select

from app.models.batch import Batch, BatchAttribute, BatchRelation, BatchSource


LAND = {
    "name": "North Slope",
    "area_hectares": 12.5,
    "latitude": -1.28,
    "longitude": 36.82,
    "location": "Kiambu",
    "geo_polygon": "POLYGON((36.8 -1.2, 36.9 -1.2, 36.9 -1.3, 36.8 -1.2))",
}


@pytest.fixture
def base_url(company) -> str:
    return f"/api/v1/companies/{company.id}"


@pytest_asyncio.fixture
async def commodity_id(client: AsyncClient, auth_headers, base_url) -> str:
    response = await client.post(
        f"{base_url}/commodities", headers=auth_headers, json={"name": "Coffee", "code": "COF"}
    )
    return response.json()["id"]


async def _batch(client, headers, base_url, commodity_id, lot_code="LOT-1") -> dict:
    response = await client.post(
        f"{base_url}/batches",
        headers=headers,
        json={
            "commodity_id": commodity_id,
            "lot_code": lot_code,
            "harvest_date": "2024-05-01T00:00:00Z",
        },
    )
    assert response.status_code == 201
    return response.json()


async def _source_refs(client, headers, base_url, suffix="") -> tuple:
    group = await client.post(f"{base_url}/farmer-groups", headers=headers, json={"name": f"Coop{suffix}"})
    land = await client.post(f"{base_url}/lands", headers=headers, json={**LAND, "name": f"Plot{suffix}"})
    return group.json()["id"], land.json()["id"]


async def _total(client, headers, base_url, batch_id) -> float:
    response = await client.get(f"{base_url}/batches/{batch_id}", headers=headers)
    return response.json()["total_kg"]


@pytest.mark.asyncio
async def test_create_batch(client: AsyncClient, auth_headers, base_url, commodity_id):
    batch = await _batch(client, auth_headers, base_url, commodity_id)

    assert batch["total_kg"] == 0
    assert batch["commodity"]["code"] == "COF"

    duplicate = await client.post(
        f"{base_url}/batches",
        headers=auth_headers,
        json={"commodity_id": commodity_id, "lot_code": "LOT-1", "harvest_date": "2024-06-01T00:00:00Z"},
    )
    assert duplicate.status_code == 409
    assert duplicate.json() == {"detail": "Lot code already exists for this company", "field": "lot_code"}


@pytest.mark.asyncio
async def test_create_batch_unknown_commodity(client: AsyncClient, auth_headers, base_url):
    response = await client.post(
        f"{base_url}/batches",
        headers=auth_headers,
        json={"commodity_id": "missing", "lot_code": "LOT-1", "harvest_date": "2024-05-01T00:00:00Z"},
    )
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_total_kg_cannot_be_written(client: AsyncClient, auth_headers, base_url, commodity_id):
    batch = await _batch(client, auth_headers, base_url, commodity_id)

    response = await client.put(
        f"{base_url}/batches/{batch['id']}", headers=auth_headers, json={"total_kg": 999}
    )
    assert response.status_code == 400

    response = await client.put(
        f"{base_url}/batches/{batch['id']}", headers=auth_headers, json={"lot_code": "LOT-9"}
    )
    assert response.status_code == 200
    assert response.json()["lot_code"] == "LOT-9"
    assert response.json()["total_kg"] == 0


@pytest.mark.asyncio
async def test_total_kg_follows_sources(client: AsyncClient, auth_headers, base_url, commodity_id):
    """Adding 100, adding 50, then deleting the first leaves 50."""
    batch = await _batch(client, auth_headers, base_url, commodity_id)
    sources_url = f"{base_url}/batches/{batch['id']}/sources"
    group_a, land_a = await _source_refs(client, auth_headers, base_url, "A")
    group_b, land_b = await _source_refs(client, auth_headers, base_url, "B")

    first = await client.post(
        sources_url, headers=auth_headers,
        json={"farmer_group_id": group_a, "land_id": land_a, "volume_kg": 100},
    )
    assert first.status_code == 201
    assert await _total(client, auth_headers, base_url, batch["id"]) == 100

    second = await client.post(
        sources_url, headers=auth_headers,
        json={"farmer_group_id": group_b, "land_id": land_b, "volume_kg": 50},
    )
    assert second.status_code == 201
    assert await _total(client, auth_headers, base_url, batch["id"]) == 150

    response = await client.put(
        f"{sources_url}/{second.json()['id']}", headers=auth_headers, json={"volume_kg": 70}
    )
    assert response.status_code == 200
    assert await _total(client, auth_headers, base_url, batch["id"]) == 170

    response = await client.delete(f"{sources_url}/{first.json()['id']}", headers=auth_headers)
    assert response.status_code == 200
    assert await _total(client, auth_headers, base_url, batch["id"]) == 70


@pytest.mark.asyncio
async def test_source_rules(client: AsyncClient, auth_headers, base_url, commodity_id, outsider, headers_for):
    batch = await _batch(client, auth_headers, base_url, commodity_id)
    sources_url = f"{base_url}/batches/{batch['id']}/sources"
    group, land = await _source_refs(client, auth_headers, base_url)
    payload = {"farmer_group_id": group, "land_id": land, "volume_kg": 10, "land_snapshot": {"area": 12.5}}

    negative = await client.post(sources_url, headers=auth_headers, json={**payload, "volume_kg": -1})
    assert negative.status_code == 400

    created = await client.post(sources_url, headers=auth_headers, json=payload)
    assert created.status_code == 201
    assert created.json()["land_snapshot"] == {"area": 12.5}
    assert created.json()["farmer_group"]["name"] == "Coop"

    duplicate = await client.post(sources_url, headers=auth_headers, json=payload)
    assert duplicate.status_code == 409
    assert await _total(client, auth_headers, base_url, batch["id"]) == 10

    # Groups and lands of another company are not visible here
    other = await client.post("/api/v1/companies", headers=headers_for(outsider), json={"name": "Other Co"})
    other_url = f"/api/v1/companies/{other.json()['id']}"
    foreign_group = await client.post(f"{other_url}/farmer-groups", headers=headers_for(outsider), json={"name": "X"})
    response = await client.post(
        sources_url, headers=auth_headers,
        json={**payload, "farmer_group_id": foreign_group.json()["id"]},
    )
    assert response.status_code == 404
    assert response.json()["detail"] == "Farmer group not found or doesn't belong to this company"


@pytest.mark.asyncio
async def test_attributes(client: AsyncClient, auth_headers, base_url, commodity_id):
    batch = await _batch(client, auth_headers, base_url, commodity_id)
    url = f"{base_url}/batches/{batch['id']}/attributes"

    created = await client.post(url, headers=auth_headers, json={"key": "moisture", "value": "11.5", "unit": "%"})
    assert created.status_code == 201
    assert created.json()["recorded_at"] is not None

    missing_value = await client.post(url, headers=auth_headers, json={"key": "grade", "value": " "})
    assert missing_value.status_code == 400

    updated = await client.put(f"{url}/{created.json()['id']}", headers=auth_headers, json={"value": "12"})
    assert updated.json()["value"] == "12"
    assert updated.json()["unit"] == "%"

    listed = await client.get(url, headers=auth_headers)
    assert len(listed.json()["batch_attributes"]) == 1


@pytest.mark.asyncio
async def test_lineage(client: AsyncClient, auth_headers, base_url, commodity_id):
    parent = await _batch(client, auth_headers, base_url, commodity_id, "LOT-P")
    child = await _batch(client, auth_headers, base_url, commodity_id, "LOT-C")
    url = f"{base_url}/batches/{parent['id']}/relations"

    self_link = await client.post(url, headers=auth_headers, json={"child_batch_id": parent["id"]})
    assert self_link.status_code == 400

    link = await client.post(url, headers=auth_headers, json={"child_batch_id": child["id"]})
    assert link.status_code == 201
    again = await client.post(url, headers=auth_headers, json={"child_batch_id": child["id"]})
    assert again.status_code == 409

    detail = await client.get(f"{base_url}/batches/{child['id']}", headers=auth_headers)
    assert [r["parent_batch_id"] for r in detail.json()["parents"]] == [parent["id"]]

    response = await client.delete(f"{url}/{link.json()['id']}", headers=auth_headers)
    assert response.status_code == 200
    detail = await client.get(f"{base_url}/batches/{child['id']}", headers=auth_headers)
    assert detail.json()["parents"] == []


@pytest.mark.asyncio
async def test_delete_batch_cascades(client: AsyncClient, auth_headers, base_url, commodity_id, db_session):
    """Sources, attributes and relations go with the batch."""
    batch = await _batch(client, auth_headers, base_url, commodity_id, "LOT-1")
    other = await _batch(client, auth_headers, base_url, commodity_id, "LOT-2")
    batch_url = f"{base_url}/batches/{batch['id']}"
    group, land = await _source_refs(client, auth_headers, base_url, "A")
    _, second_land = await _source_refs(client, auth_headers, base_url, "B")

    for land_id, volume in ((land, 10), (second_land, 5)):
        await client.post(
            f"{batch_url}/sources", headers=auth_headers,
            json={"farmer_group_id": group, "land_id": land_id, "volume_kg": volume},
        )
    await client.post(f"{batch_url}/attributes", headers=auth_headers, json={"key": "grade", "value": "AA"})
    await client.post(f"{batch_url}/relations", headers=auth_headers, json={"child_batch_id": other["id"]})

    response = await client.delete(batch_url, headers=auth_headers)
    assert response.status_code == 200

    for model in (BatchSource, BatchAttribute, BatchRelation):
        assert await db_session.scalar(select(func.count()).select_from(model)) == 0
    remaining = await db_session.execute(select(Batch.id))
    assert remaining.scalars().all() == [other["id"]]

    assert (await client.get(batch_url, headers=auth_headers)).status_code == 404


@pytest.mark.asyncio
async def test_source_update_rejects_foreign_land(client: AsyncClient, auth_headers, base_url, commodity_id, outsider, headers_for):
    batch = await _batch(client, auth_headers, base_url, commodity_id)
    sources_url = f"{base_url}/batches/{batch['id']}/sources"
    group, land = await _source_refs(client, auth_headers, base_url)
    created = await client.post(
        sources_url, headers=auth_headers,
        json={"farmer_group_id": group, "land_id": land, "volume_kg": 25},
    )
    assert created.status_code == 201

    other = await client.post("/api/v1/companies", headers=headers_for(outsider), json={"name": "Other Co"})
    other_url = f"/api/v1/companies/{other.json()['id']}"
    foreign_land = await client.post(f"{other_url}/lands", headers=headers_for(outsider), json=LAND)

    response = await client.put(
        f"{sources_url}/{created.json()['id']}", headers=auth_headers,
        json={"land_id": foreign_land.json()["id"], "volume_kg": 99},
    )
    assert response.status_code == 404
    assert response.json()["detail"] == "Land not found or doesn't belong to this company"

    assert await _total(client, auth_headers, base_url, batch["id"]) == 25
    listed = await client.get(sources_url, headers=auth_headers)
    assert [s["land_id"] for s in listed.json()["batch_sources"]] == [land]


@pytest.mark.asyncio
async def test_delete_child_batch_removes_relation(client: AsyncClient, auth_headers, base_url, commodity_id, db_session):
    parent = await _batch(client, auth_headers, base_url, commodity_id, "LOT-P")
    child = await _batch(client, auth_headers, base_url, commodity_id, "LOT-C")
    link = await client.post(
        f"{base_url}/batches/{parent['id']}/relations", headers=auth_headers,
        json={"child_batch_id": child["id"]},
    )
    assert link.status_code == 201

    response = await client.delete(f"{base_url}/batches/{child['id']}", headers=auth_headers)
    assert response.status_code == 200

    assert await db_session.scalar(select(func.count()).select_from(BatchRelation)) == 0
    detail = await client.get(f"{base_url}/batches/{parent['id']}", headers=auth_headers)
    assert detail.json()["children"] == []


@pytest.mark.asyncio
async def test_viewer_cannot_create(client: AsyncClient, auth_headers, base_url, company, make_user, headers_for):
    viewer = await make_user("viewer@example.com")
    catalog = await client.get("/api/v1/permissions", headers=auth_headers)
    view_id = next(p["id"] for p in catalog.json()["permissions"] if p["name"] == "batch:view")
    role = await client.post(f"{base_url}/roles", headers=auth_headers, json={"name": "viewer", "permission_ids": [view_id]})
    await client.post(f"{base_url}/members", headers=auth_headers,
                      json={"user_id": viewer.id, "role_ids": [role.json()["id"]]})

    assert (await client.get(f"{base_url}/batches", headers=headers_for(viewer))).status_code == 200
    response = await client.post(
        f"{base_url}/batches", headers=headers_for(viewer),
        json={"commodity_id": "x", "lot_code": "L", "harvest_date": "2024-05-01T00:00:00Z"},
    )
    assert response.status_code == 403
    assert response.json()["detail"] == "You don't have permission to create batches"
