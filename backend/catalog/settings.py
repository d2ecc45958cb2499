"""
Service Configuration

All settings come from environment variables with sensible defaults.
"""

import os
from dataclasses import dataclass


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("true", "1", "yes")


@dataclass
class Settings:
    """Top-level settings for the catalog service."""
    # Storage
    images_dir: str = "images"
    compressed_images_dir: str = "compressed_images"
    database_path: str = "catalog.db"

    # Fetching
    fetch_timeout_seconds: float = 30.0
    fetch_retries: int = 0
    fetch_retry_backoff_seconds: float = 0.5
    require_success_status: bool = True

    # Compression
    max_image_width: int = 800
    jpeg_quality: int = 80

    # Pipeline
    pipeline_max_concurrency: int = 1
    cleanup_on_failure: bool = True

    # Server
    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 8080


def load_settings() -> Settings:
    """Build Settings from the environment."""
    return Settings(
        images_dir=os.getenv("IMAGES_DIR", "images"),
        compressed_images_dir=os.getenv("COMPRESSED_IMAGES_DIR", "compressed_images"),
        database_path=os.getenv("DATABASE_PATH", "catalog.db"),
        fetch_timeout_seconds=float(os.getenv("FETCH_TIMEOUT_SECONDS", "30")),
        fetch_retries=int(os.getenv("FETCH_RETRIES", "0")),
        fetch_retry_backoff_seconds=float(os.getenv("FETCH_RETRY_BACKOFF_SECONDS", "0.5")),
        require_success_status=_env_bool("REQUIRE_SUCCESS_STATUS", True),
        max_image_width=int(os.getenv("MAX_IMAGE_WIDTH", "800")),
        jpeg_quality=int(os.getenv("JPEG_QUALITY", "80")),
        pipeline_max_concurrency=int(os.getenv("PIPELINE_MAX_CONCURRENCY", "1")),
        cleanup_on_failure=_env_bool("CLEANUP_ON_FAILURE", True),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "8080")),
    )
