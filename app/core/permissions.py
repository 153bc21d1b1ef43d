"""Permission catalog.

The catalog is code-defined and synced into the ``permissions`` table on
startup. Naming: ``<resource>[:<sub-resource>]:<action>``.
"""
from typing import NamedTuple


OWNER_ROLE = "owner"


class PermissionDef(NamedTuple):
    id: str
    name: str
    description: str


PERMISSION_CATALOG: tuple[PermissionDef, ...] = (
    # Company
    PermissionDef("0.1.3", "company:update", "Update company details"),
    PermissionDef("0.1.4", "company:delete", "Delete the company"),

    # Members and roles
    PermissionDef("1.1.1", "member:role:view", "View roles"),
    PermissionDef("1.1.2", "member:role:create", "Create roles"),
    PermissionDef("1.1.3", "member:role:update", "Update roles"),
    PermissionDef("1.1.4", "member:role:delete", "Delete roles"),
    PermissionDef("1.2.1", "member:user:view", "View members"),
    PermissionDef("1.2.2", "member:user:create", "Add members"),
    PermissionDef("1.2.3", "member:user:update", "Change member roles"),
    PermissionDef("1.2.4", "member:user:delete", "Remove members"),
    PermissionDef("1.3.1", "member:permission:view", "View permissions"),

    # Admins
    PermissionDef("2.1.2", "admin:user:create", "Add admins"),
    PermissionDef("2.1.3", "admin:user:update", "Change admin roles"),
    PermissionDef("2.1.4", "admin:user:delete", "Remove admins"),

    # Commodities
    PermissionDef("3.1.1", "commodity:view", "View commodities"),
    PermissionDef("3.1.2", "commodity:create", "Create commodities"),
    PermissionDef("3.1.3", "commodity:update", "Update commodities"),
    PermissionDef("3.1.4", "commodity:delete", "Delete commodities"),

    # Batches
    PermissionDef("4.1.1", "batch:view", "View batches"),
    PermissionDef("4.1.2", "batch:create", "Create batches"),
    PermissionDef("4.1.3", "batch:update", "Update batches and their lineage"),
    PermissionDef("4.1.4", "batch:delete", "Delete batches"),
    PermissionDef("4.2.1", "batch_source:view", "View batch sources"),
    PermissionDef("4.2.2", "batch_source:create", "Create batch sources"),
    PermissionDef("4.2.3", "batch_source:update", "Update batch sources"),
    PermissionDef("4.2.4", "batch_source:delete", "Delete batch sources"),
    PermissionDef("4.3.1", "batch_attribute:view", "View batch attributes"),
    PermissionDef("4.3.2", "batch_attribute:create", "Create batch attributes"),
    PermissionDef("4.3.3", "batch_attribute:update", "Update batch attributes"),
    PermissionDef("4.3.4", "batch_attribute:delete", "Delete batch attributes"),

    # Land
    PermissionDef("5.1.1", "land:view", "View land parcels"),
    PermissionDef("5.1.2", "land:create", "Create land parcels"),
    PermissionDef("5.1.3", "land:update", "Update land parcels"),
    PermissionDef("5.1.4", "land:delete", "Delete land parcels"),

    # Workers
    PermissionDef("6.1.1", "farmer:view", "View farmers"),
    PermissionDef("6.1.2", "farmer:create", "Create farmers"),
    PermissionDef("6.1.3", "farmer:update", "Update farmers"),
    PermissionDef("6.1.4", "farmer:delete", "Delete farmers"),
    PermissionDef("6.2.1", "farmer_group:view", "View farmer groups"),
    PermissionDef("6.2.2", "farmer_group:create", "Create farmer groups"),
    PermissionDef("6.2.3", "farmer_group:update", "Update farmer groups"),
    PermissionDef("6.2.4", "farmer_group:delete", "Delete farmer groups"),
)

PERMISSION_NAMES = frozenset(p.name for p in PERMISSION_CATALOG)
