"""Ingestion pipeline components for the tour catalog."""

from tourcatalog.pipeline.catalog_store import CatalogSnapshot, CatalogStore
from tourcatalog.pipeline.orchestrator import CatalogIngestionPipeline
from tourcatalog.pipeline.retry import RetryingFetchTask
from tourcatalog.pipeline.scheduler import RefreshScheduler
from tourcatalog.pipeline.status_register import StatusRegister

__all__ = [
    "CatalogIngestionPipeline",
    "CatalogSnapshot",
    "CatalogStore",
    "RefreshScheduler",
    "RetryingFetchTask",
    "StatusRegister",
]
