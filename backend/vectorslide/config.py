"""Application configuration from environment variables."""

from __future__ import annotations

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    vectorslide_env: str = "development"
    vectorslide_log_level: str = "info"

    # CORS
    cors_origins: list[str] = ["http://localhost:3000"]

    # Conversion defaults
    default_canvas: str = "widescreen"
    default_profile: str | None = None  # None = pick per document
    output_basename: str = "converted-presentation"

    # Batch execution
    max_workers: int = 4
    document_timeout_s: float = 30.0
    max_upload_bytes: int = 10 * 1024 * 1024

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


settings = Settings()
