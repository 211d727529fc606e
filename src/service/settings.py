from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ServiceSettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Upstream lookup page
    source_base_url: str = Field(default="https://buscaplacas.com.br", alias="PLATE_SOURCE_BASE_URL")
    source_partner_ref: str = Field(default="nwgpa12", alias="PLATE_SOURCE_REF")
    source_timeout_seconds: float = Field(default=10.0, alias="PLATE_SOURCE_TIMEOUT_SECONDS")
    source_user_agent: str = Field(
        default=(
            "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
            "(KHTML, like Gecko) Chrome/91.0.4472.124 Safari/537.36"
        ),
        alias="PLATE_SOURCE_USER_AGENT",
    )

    # HTTP surface
    rate_limit_rpm: int = Field(default=120, alias="RATE_LIMIT_RPM")
    rate_limit_trust_forwarded: bool = Field(default=False, alias="RATE_LIMIT_TRUST_FORWARDED")
    cors_allow_origins: str = Field(default="*", alias="CORS_ALLOW_ORIGINS")
    metrics_latency_samples: int = Field(default=10_000, alias="METRICS_LATENCY_SAMPLES")

    # Logging
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    log_format: str = Field(default="json", alias="LOG_FORMAT")

    @property
    def cors_origins(self) -> list[str]:
        return [o.strip() for o in self.cors_allow_origins.split(",") if o.strip()]
