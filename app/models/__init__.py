"""SQLAlchemy models."""
from app.models.user import User
from app.models.company import Company
from app.models.permission import Permission, role_permissions
from app.models.role import Role
from app.models.membership import Membership
from app.models.commodity import Commodity
from app.models.land import Land
from app.models.farmer import Farmer, FarmerGroup, FarmerGroupFarmer
from app.models.batch import Batch, BatchSource, BatchAttribute, BatchRelation

__all__ = [
    "User", "Company", "Permission", "role_permissions", "Role", "Membership",
    "Commodity", "Land", "Farmer", "FarmerGroup", "FarmerGroupFarmer",
    "Batch", "BatchSource", "BatchAttribute", "BatchRelation",
]
