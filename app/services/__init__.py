"""Service layer: authorization, tenant bootstrap and resource lifecycles."""
