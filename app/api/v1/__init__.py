"""API v1 router."""
from fastapi import APIRouter

from app.api.v1.batches import router as batches_router
from app.api.v1.commodities import router as commodities_router
from app.api.v1.companies import router as companies_router
from app.api.v1.lands import router as lands_router
from app.api.v1.me import router as me_router
from app.api.v1.members import members_router, admins_router
from app.api.v1.permissions import router as permissions_router
from app.api.v1.roles import router as roles_router
from app.api.v1.users import router as users_router
from app.api.v1.workers import farmers_router, groups_router


router = APIRouter(prefix="/v1")

COMPANY = "/companies/{company_id}"

router.include_router(me_router, prefix="/me", tags=["Me"])
router.include_router(permissions_router, prefix="/permissions", tags=["Permissions"])
router.include_router(users_router, prefix="/users", tags=["Users"])
router.include_router(companies_router, prefix="/companies", tags=["Companies"])
router.include_router(roles_router, prefix=f"{COMPANY}/roles", tags=["Roles"])
router.include_router(members_router, prefix=f"{COMPANY}/members", tags=["Members"])
router.include_router(admins_router, prefix=f"{COMPANY}/admins", tags=["Admins"])
router.include_router(commodities_router, prefix=f"{COMPANY}/commodities", tags=["Commodities"])
router.include_router(batches_router, prefix=f"{COMPANY}/batches", tags=["Batches"])
router.include_router(lands_router, prefix=f"{COMPANY}/lands", tags=["Lands"])
router.include_router(farmers_router, prefix=f"{COMPANY}/farmers", tags=["Farmers"])
router.include_router(groups_router, prefix=f"{COMPANY}/farmer-groups", tags=["Farmer Groups"])
