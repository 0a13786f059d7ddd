"""Configuration module: Settings, the YAML loader and typed ingestion config."""

from tourcatalog.config.ingestion import IngestionConfig, UpstreamConfig
from tourcatalog.config.loader import build_ingestion_config, build_upstream_config, load_config
from tourcatalog.config.settings import Settings

__all__ = [
    "IngestionConfig",
    "Settings",
    "UpstreamConfig",
    "build_ingestion_config",
    "build_upstream_config",
    "load_config",
]
