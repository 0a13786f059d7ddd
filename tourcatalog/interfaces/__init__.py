"""Public interface definitions for external data sources.

The ingestion pipeline talks to the upstream tour API only through
:class:`ICatalogSource`.  The concrete adapter is built in
``tourcatalog/main.py`` and injected into the pipeline, so unit tests can
pass a fake source without any HTTP at all.

CONCRETE PROVIDER MAP:
    Interface       →  Concrete implementations (in tourcatalog/providers/)
    ─────────────────────────────────────────────────────────────────────
    ICatalogSource  →  HttpCatalogProvider
"""

from tourcatalog.interfaces.catalog_source import ICatalogSource

__all__ = ["ICatalogSource"]
