"""Read-side services built on top of the catalog store."""

from tourcatalog.services.catalog_lookup import CatalogLookupService, process_relation

__all__ = ["CatalogLookupService", "process_relation"]
