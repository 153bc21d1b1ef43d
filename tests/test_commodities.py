"""Commodity API tests."""
import pytest
from httpx import AsyncClient


@pytest.mark.asyncio
async def test_commodity_crud(client: AsyncClient, auth_headers, company):
    url = f"/api/v1/companies/{company.id}/commodities"

    created = await client.post(url, headers=auth_headers, json={"name": "Cocoa", "code": "COC"})
    assert created.status_code == 201
    commodity_id = created.json()["id"]

    duplicate = await client.post(url, headers=auth_headers, json={"name": "Cacao", "code": "COC"})
    assert duplicate.status_code == 409
    assert duplicate.json()["field"] == "code"

    blank = await client.post(url, headers=auth_headers, json={"name": " ", "code": "X"})
    assert blank.status_code == 400

    updated = await client.put(f"{url}/{commodity_id}", headers=auth_headers, json={"name": "Cacao"})
    assert updated.json()["name"] == "Cacao"
    assert updated.json()["code"] == "COC"

    deleted = await client.delete(f"{url}/{commodity_id}", headers=auth_headers)
    assert deleted.status_code == 200
    assert (await client.get(f"{url}/{commodity_id}", headers=auth_headers)).status_code == 404


@pytest.mark.asyncio
async def test_commodity_shows_only_own_batches(client: AsyncClient, auth_headers, company, outsider, headers_for):
    """Commodities are shared; their batch lists are not."""
    url = f"/api/v1/companies/{company.id}/commodities"
    commodity_id = (await client.post(url, headers=auth_headers, json={"name": "Tea", "code": "TEA"})).json()["id"]

    other = await client.post("/api/v1/companies", headers=headers_for(outsider), json={"name": "Other Co"})
    other_id = other.json()["id"]
    batch = {"commodity_id": commodity_id, "lot_code": "LOT-1", "harvest_date": "2024-05-01T00:00:00Z"}
    await client.post(f"/api/v1/companies/{other_id}/batches", headers=headers_for(outsider), json=batch)

    mine = await client.get(f"{url}/{commodity_id}", headers=auth_headers)
    assert mine.json()["batches"] == []

    theirs = await client.get(
        f"/api/v1/companies/{other_id}/commodities/{commodity_id}", headers=headers_for(outsider)
    )
    assert [b["lot_code"] for b in theirs.json()["batches"]] == ["LOT-1"]

    # Referenced anywhere means it stays
    response = await client.delete(f"{url}/{commodity_id}", headers=auth_headers)
    assert response.status_code == 400
    assert response.json()["detail"] == "Cannot delete commodity with existing batches"
