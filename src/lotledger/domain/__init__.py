"""Domain layer for lotledger application."""

__all__ = [
    "CatalogService",
    "ClientService",
    "CommissionService",
    "EntityService",
]


# Services import the database layer, which imports domain.entities,
# so they are loaded on first access only
def __getattr__(name):
    if name == "CatalogService":
        from lotledger.domain.catalog import CatalogService
        return CatalogService
    if name == "ClientService":
        from lotledger.domain.client import ClientService
        return ClientService
    if name == "CommissionService":
        from lotledger.domain.commission import CommissionService
        return CommissionService
    if name == "EntityService":
        from lotledger.domain.entity import EntityService
        return EntityService
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")
