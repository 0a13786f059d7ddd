"""YAML configuration loader with environment variable overrides.

# ─── CONFIGURATION HIERARCHY ──────────────────────────────────────────
#
# Configuration is loaded in layers (later layers override earlier):
#
#   1. config/config.yaml : Static defaults checked into the repo
#   2. .env file          : Local developer overrides (not committed)
#   3. Environment vars   : Set at deploy time
#
# load_config() reads the YAML file first, then deep-merges the values
# that come from Settings on top.  Empty env values (e.g. an unset
# UPSTREAM_BASE_URL) do not clobber the YAML value.
#
#   base      = {"upstream": {"base_url": "https://...", "paths": {...}}}
#   overrides = {"upstream": {"base_url": "http://localhost:9000/api"}}
#   result    = {"upstream": {"base_url": "http://localhost:9000/api", "paths": {...}}}
# ──────────────────────────────────────────────────────────────────────
"""

from pathlib import Path

import yaml

from tourcatalog.config.ingestion import IngestionConfig, UpstreamConfig
from tourcatalog.config.settings import Settings


def load_config(path: str = "config/config.yaml", settings: Settings | None = None) -> dict:
    """Load YAML config and merge with environment-based Settings.

    Args:
        path: Path to the YAML configuration file.  A missing file is
              treated as empty so the built-in defaults apply.
        settings: Settings instance to take overrides from.  A fresh
                  ``Settings()`` is read when omitted.

    Returns:
        Fully resolved configuration dictionary.
    """
    config_path = Path(path)
    if config_path.exists():
        with open(config_path) as f:
            yaml_config = yaml.safe_load(f) or {}
    else:
        yaml_config = {}

    settings = settings or Settings()
    # Server, logging and provider identity settings are read from Settings
    # directly in main.py; only the upstream URL feeds the merged config.
    env_overrides: dict = {"upstream": {}}
    if settings.upstream_base_url:
        env_overrides["upstream"]["base_url"] = settings.upstream_base_url

    _deep_merge(yaml_config, env_overrides)
    return yaml_config


def build_ingestion_config(config: dict) -> IngestionConfig:
    """Validate the ``ingestion:`` block of a loaded config."""
    return IngestionConfig.from_mapping(config.get("ingestion"))


def build_upstream_config(config: dict) -> UpstreamConfig:
    """Validate the ``upstream:`` block of a loaded config.

    Keys that only the HTTP provider cares about (``provider_name``,
    ``user_agent``) are stripped before validation.
    """
    upstream = {
        key: value
        for key, value in (config.get("upstream") or {}).items()
        if key in ("base_url", "paths")
    }
    return UpstreamConfig.from_mapping(upstream)


def _deep_merge(base: dict, overrides: dict) -> None:
    """Recursively merge overrides into base dict, mutating base in place."""
    for key, value in overrides.items():
        if key in base and isinstance(base[key], dict) and isinstance(value, dict):
            _deep_merge(base[key], value)
        else:
            base[key] = value
