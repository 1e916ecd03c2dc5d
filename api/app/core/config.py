from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    app_name: str = "reading-list-api"
    environment: str = "dev"
    store_backend: Literal["airtable", "memory"] = "airtable"
    airtable_pat: str | None = None
    airtable_base_id: str | None = None
    airtable_table: str = "Units"
    airtable_api_url: str = "https://api.airtable.com/v0"
    airtable_timeout_seconds: float = 10.0
    airtable_hash_field: str = "hash"
    basic_auth_username: str | None = None
    basic_auth_password: str | None = None
    canonical_keep_fragment: bool = True
    otel_enabled: bool = True
    otel_service_name: str = "reading-list-api"
    otel_exporter_otlp_endpoint: str | None = None
    otel_trace_sample_ratio: float = 1.0
    otel_log_correlation: bool = True

    model_config = SettingsConfigDict(env_prefix="RL_", extra="ignore")


@lru_cache
def get_settings() -> Settings:
    return Settings()
