from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    app_name: str = "jobintel"
    environment: str = "dev"
    log_level: str = "INFO"
    career_primary_intel_cap: int = Field(default=5, ge=0)
    linkedin_primary_intel_cap: int = Field(default=10, ge=0)
    extra_trusted_job_hosts: str | None = None
    extra_red_flag_fragments: str | None = None
    url_normalization_overrides_json: str | None = None
    otel_enabled: bool = False
    otel_service_name: str = "jobintel"
    otel_exporter_otlp_endpoint: str | None = None
    otel_exporter_otlp_headers: str | None = None
    otel_trace_sample_ratio: float = Field(default=1.0, ge=0.0, le=1.0)
    otel_log_correlation: bool = True

    model_config = SettingsConfigDict(env_prefix="JOBINTEL_", extra="ignore")


@lru_cache
def get_settings() -> Settings:
    return Settings()


def split_csv(raw: str | None) -> frozenset[str]:
    if not raw:
        return frozenset()
    return frozenset(item.strip().lower().lstrip(".") for item in raw.split(",") if item.strip())
