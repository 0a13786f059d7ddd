"""Upstream tour API providers."""

from tourcatalog.providers.upstream.http_catalog_provider import HttpCatalogProvider

__all__ = ["HttpCatalogProvider"]
