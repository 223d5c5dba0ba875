"""Central application configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path


def _split_csv(value: str) -> tuple[str, ...]:
    return tuple(item.strip() for item in value.split(",") if item.strip())


@dataclass(frozen=True)
class Config:
    """Central application configuration.

    Reads from environment variables with sensible defaults.
    All paths are resolved relative to project root.
    """

    # Paths
    catalog_dir: Path = field(
        default_factory=lambda: Path(os.getenv("CATALOG_DIR", "data/catalog"))
    )

    # Elasticsearch
    elasticsearch_url: str = field(
        default_factory=lambda: os.getenv("ELASTICSEARCH_URL", "http://localhost:9200")
    )
    elastic_cloud_id: str | None = field(
        default_factory=lambda: os.getenv("ELASTIC_CLOUD_ID") or None
    )
    elastic_api_key: str | None = field(
        default_factory=lambda: os.getenv("ELASTIC_API_KEY") or None
    )
    index_name: str = field(default_factory=lambda: os.getenv("INDEX_NAME", "pets"))

    # Search
    max_page_size: int = 100
    max_result_window: int = 10_000

    # Server
    host: str = field(default_factory=lambda: os.getenv("HOST", "0.0.0.0"))
    port: int = field(default_factory=lambda: int(os.getenv("PORT", "8000")))
    cors_origins: tuple[str, ...] = field(
        default_factory=lambda: _split_csv(os.getenv("CORS_ORIGINS", "*"))
    )


def get_config() -> Config:
    """Get application configuration.

    Returns:
        Config instance with values from environment or defaults.
    """
    return Config()
