"""Application settings loaded from environment variables via pydantic-settings.

# ─── HOW SETTINGS WORK ────────────────────────────────────────────────
#
# pydantic-settings reads configuration from TWO sources (in priority order):
#
#   1. **Environment variables**: e.g., UPSTREAM_BASE_URL=http://localhost:9000/api
#   2. **.env file**: key=value lines in the project root .env file
#
# Field name `upstream_base_url` maps to env var `UPSTREAM_BASE_URL`.
# Defaults below apply when neither source sets a value.
#
# Ingestion timings (retries, backoff, refresh intervals) live in
# config/config.yaml instead; see loader.py.
# ──────────────────────────────────────────────────────────────────────
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """tourcatalog application settings.

    Environment variables override defaults. Loaded from .env file when present.
    """

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # === Upstream tour API ===
    # Empty string = "use the base_url from config.yaml".
    upstream_base_url: str = ""
    upstream_provider_name: str = "groupietrackers"
    upstream_user_agent: str = "tourcatalog/0.1.0"
    # Client-wide default; each fetch attempt passes its own attempt_timeout.
    upstream_timeout: float = 30.0

    # === App Config ===
    app_host: str = "0.0.0.0"
    app_port: int = 8080
    app_env: str = "development"
    log_level: str = "INFO"
