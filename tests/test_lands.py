"""Land API tests."""
import pytest
from httpx import AsyncClient


LAND = {
    "name": "River Plot",
    "area_hectares": 3.2,
    "latitude": 6.5,
    "longitude": -1.6,
    "location": "Ashanti",
    "geo_polygon": "POLYGON((0 0, 1 0, 1 1, 0 0))",
    "is_deforestation_free": True,
}


@pytest.mark.asyncio
async def test_land_crud(client: AsyncClient, auth_headers, company):
    url = f"/api/v1/companies/{company.id}/lands"

    created = await client.post(url, headers=auth_headers, json=LAND)
    assert created.status_code == 201
    land_id = created.json()["id"]
    assert created.json()["is_deforestation_free"] is True

    updated = await client.put(f"{url}/{land_id}", headers=auth_headers, json={"area_hectares": 4})
    assert updated.status_code == 200
    assert updated.json()["area_hectares"] == 4
    assert updated.json()["name"] == "River Plot"

    listed = await client.get(url, headers=auth_headers)
    assert [land["id"] for land in listed.json()["lands"]] == [land_id]

    assert (await client.delete(f"{url}/{land_id}", headers=auth_headers)).status_code == 200
    assert (await client.get(f"{url}/{land_id}", headers=auth_headers)).status_code == 404


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "override, message",
    [
        ({"area_hectares": 0}, "Area in hectares must be a positive number"),
        ({"latitude": 91}, "Latitude must be between -90 and 90"),
        ({"longitude": -181}, "Longitude must be between -180 and 180"),
        ({"name": "  "}, "Name is required"),
        ({"geo_polygon": ""}, "GeoPolygon is required"),
    ],
)
async def test_land_validation(client: AsyncClient, auth_headers, company, override, message):
    response = await client.post(
        f"/api/v1/companies/{company.id}/lands", headers=auth_headers, json={**LAND, **override}
    )
    assert response.status_code == 400
    assert response.json()["detail"] == message


@pytest.mark.asyncio
async def test_land_in_use_cannot_be_deleted(client: AsyncClient, auth_headers, company):
    base = f"/api/v1/companies/{company.id}"
    land_id = (await client.post(f"{base}/lands", headers=auth_headers, json=LAND)).json()["id"]
    group_id = (await client.post(f"{base}/farmer-groups", headers=auth_headers, json={"name": "Coop"})).json()["id"]
    commodity_id = (await client.post(f"{base}/commodities", headers=auth_headers, json={"name": "Cocoa", "code": "COC"})).json()["id"]
    batch_id = (await client.post(
        f"{base}/batches", headers=auth_headers,
        json={"commodity_id": commodity_id, "lot_code": "L1", "harvest_date": "2024-05-01T00:00:00Z"},
    )).json()["id"]
    await client.post(
        f"{base}/batches/{batch_id}/sources", headers=auth_headers,
        json={"farmer_group_id": group_id, "land_id": land_id, "volume_kg": 20},
    )

    assert (await client.delete(f"{base}/lands/{land_id}", headers=auth_headers)).status_code == 400
    assert (await client.delete(f"{base}/farmer-groups/{group_id}", headers=auth_headers)).status_code == 400


@pytest.mark.asyncio
async def test_lands_are_tenant_scoped(client: AsyncClient, auth_headers, company, outsider, headers_for):
    land_id = (await client.post(
        f"/api/v1/companies/{company.id}/lands", headers=auth_headers, json=LAND
    )).json()["id"]
    other = await client.post("/api/v1/companies", headers=headers_for(outsider), json={"name": "Other Co"})

    response = await client.get(
        f"/api/v1/companies/{other.json()['id']}/lands/{land_id}", headers=headers_for(outsider)
    )
    assert response.status_code == 404
    assert response.json()["detail"] == "Land not found"
