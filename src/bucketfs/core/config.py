"""Configuration management for bucketfs."""

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Library settings with environment variable support."""

    log_level: str = "INFO"
    log_format: Literal["json", "keyvalue"] = "json"
    otel_enabled: bool = False
    otel_service_name: str = "bucketfs"
    otel_exporter_endpoint: str = "http://localhost:4317"
    list_page_size: int = Field(default=1000, ge=1, le=1000)

    model_config = {
        "env_prefix": "BUCKETFS_",
        "case_sensitive": False,
    }


settings = Settings()
