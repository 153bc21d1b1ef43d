"""Company API tests."""
import uuid
from datetime import datetime, timedelta, timezone

import pytest
from httpx import AsyncClient
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError

from app.core.errors import ConflictError
from app.core.permissions import PERMISSION_NAMES
from app.core.store import is_unique_violation
from app.models.company import Company
from app.models.membership import Membership
from app.models.role import Role
from app.services.companies import CompanyService


@pytest.mark.asyncio
async def test_create_company_bootstraps_owner(client: AsyncClient, auth_headers, db_session):
    """Creating a company creates the owner role and the creator's membership."""
    response = await client.post(
        "/api/v1/companies", headers=auth_headers, json={"name": "  Acme  "}
    )

    assert response.status_code == 201
    data = response.json()
    assert data["name"] == "Acme"
    assert data["is_owner"] is True
    assert data["roles"] == ["owner"]
    assert set(data["permissions"]) == PERMISSION_NAMES
    assert data["has_active_subscription"] is False

    roles = await db_session.execute(select(Role).where(Role.company_id == data["id"]))
    roles = roles.scalars().all()
    assert [r.name for r in roles] == ["owner"]
    assert {p.name for p in roles[0].permissions} == PERMISSION_NAMES

    count = await db_session.scalar(
        select(func.count(Membership.id)).where(Membership.company_id == data["id"])
    )
    assert count == 1


@pytest.mark.asyncio
async def test_duplicate_company_name_conflicts(client: AsyncClient, auth_headers, company, db_session):
    response = await client.post(
        "/api/v1/companies", headers=auth_headers, json={"name": "Acme Coffee"}
    )

    assert response.status_code == 409
    assert response.json() == {"detail": "Company name already exists", "field": "name"}

    # Nothing from the failed bootstrap survives
    count = await db_session.scalar(select(func.count(Company.id)))
    assert count == 1


@pytest.mark.asyncio
async def test_unknown_creator_is_not_reported_as_conflict(db_session):
    """A foreign-key failure propagates instead of becoming a name conflict."""
    with pytest.raises(IntegrityError):
        await CompanyService.create_company(db_session, str(uuid.uuid4()), "Unique Name Co")

    count = await db_session.scalar(
        select(func.count(Company.id)).where(Company.name == "Unique Name Co")
    )
    assert count == 0


@pytest.mark.asyncio
async def test_unique_violation_detection(db_session, owner):
    await CompanyService.create_company(db_session, owner.id, "Acme Coffee")

    with pytest.raises(ConflictError):
        await CompanyService.create_company(db_session, owner.id, "Acme Coffee")

    with pytest.raises(IntegrityError) as excinfo:
        await CompanyService.create_company(db_session, str(uuid.uuid4()), "Acme Tea")
    assert not is_unique_violation(excinfo.value)


@pytest.mark.asyncio
async def test_blank_company_name_rejected(client: AsyncClient, auth_headers):
    response = await client.post("/api/v1/companies", headers=auth_headers, json={"name": "   "})
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_requires_authentication(client: AsyncClient):
    response = await client.get("/api/v1/companies")
    assert response.status_code == 401

    response = await client.get(
        "/api/v1/companies", headers={"Authorization": "Bearer not-a-token"}
    )
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_list_and_get_company(client: AsyncClient, auth_headers, company):
    response = await client.get("/api/v1/companies", headers=auth_headers)
    assert response.status_code == 200
    assert [c["id"] for c in response.json()["companies"]] == [company.id]

    response = await client.get(f"/api/v1/companies/{company.id}", headers=auth_headers)
    assert response.status_code == 200
    data = response.json()
    assert data["is_owner"] is True
    assert len(data["members"]) == 1
    assert data["members"][0]["roles"][0]["name"] == "owner"

    response = await client.get("/api/v1/companies/name/Acme Coffee", headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["id"] == company.id


@pytest.mark.asyncio
async def test_outsider_cannot_see_company(client: AsyncClient, company, outsider, headers_for):
    response = await client.get(f"/api/v1/companies/{company.id}", headers=headers_for(outsider))

    assert response.status_code == 404
    assert response.json()["detail"] == "Company not found or access denied"


@pytest.mark.asyncio
async def test_active_subscription_is_derived(client: AsyncClient, auth_headers, company, db_session):
    company.stripe_current_period_end = datetime.now(timezone.utc) + timedelta(days=30)
    db_session.add(company)
    await db_session.commit()

    response = await client.get(f"/api/v1/companies/{company.id}", headers=auth_headers)
    assert response.json()["has_active_subscription"] is True


@pytest.mark.asyncio
async def test_me_reports_subscription(client: AsyncClient, auth_headers, company, db_session):
    response = await client.get("/api/v1/me", headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["user"]["email"] == "owner@example.com"
    assert response.json()["subscription"] is None

    company.stripe_subscription_id = "sub_123"
    company.stripe_price_id = "price_basic"
    company.stripe_current_period_end = datetime.now(timezone.utc) + timedelta(days=30)
    db_session.add(company)
    await db_session.commit()

    response = await client.get("/api/v1/me", headers=auth_headers)
    subscription = response.json()["subscription"]
    assert subscription["is_active"] is True
    assert subscription["price_id"] == "price_basic"

    company.stripe_current_period_end = datetime.now(timezone.utc) - timedelta(days=1)
    db_session.add(company)
    await db_session.commit()

    response = await client.get("/api/v1/me", headers=auth_headers)
    assert response.json()["subscription"] is None


@pytest.mark.asyncio
async def test_me_requires_authentication(client: AsyncClient):
    response = await client.get("/api/v1/me")
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_rename_company(client: AsyncClient, auth_headers, company):
    response = await client.put(
        f"/api/v1/companies/{company.id}", headers=auth_headers, json={"name": "Acme Cocoa"}
    )
    assert response.status_code == 200
    assert response.json()["name"] == "Acme Cocoa"


@pytest.mark.asyncio
async def test_delete_company_removes_everything(client: AsyncClient, auth_headers, company, db_session):
    commodity = await client.post(
        f"/api/v1/companies/{company.id}/commodities",
        headers=auth_headers,
        json={"name": "Coffee", "code": "COF"},
    )
    await client.post(
        f"/api/v1/companies/{company.id}/batches",
        headers=auth_headers,
        json={
            "commodity_id": commodity.json()["id"],
            "lot_code": "LOT-1",
            "harvest_date": "2024-05-01T00:00:00Z",
        },
    )

    response = await client.delete(f"/api/v1/companies/{company.id}", headers=auth_headers)
    assert response.status_code == 200

    for model in (Company, Role, Membership):
        assert await db_session.scalar(select(func.count()).select_from(model)) == 0

    response = await client.get(f"/api/v1/companies/{company.id}", headers=auth_headers)
    assert response.status_code == 404
