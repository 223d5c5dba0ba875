"""Elasticsearch client construction and readiness checks."""

from __future__ import annotations

import logging
import time

from elasticsearch import Elasticsearch, TransportError

from src.config import Config
from src.errors import InfrastructureError

logger = logging.getLogger(__name__)


def build_es_client(config: Config) -> Elasticsearch:
    """Build an Elasticsearch client for a local node or Elastic Cloud.

    Args:
        config: Application config; ``elastic_cloud_id`` wins over the URL.

    Returns:
        Elasticsearch client instance (not yet verified).
    """
    if config.elastic_cloud_id:
        return Elasticsearch(
            cloud_id=config.elastic_cloud_id, api_key=config.elastic_api_key
        )
    if config.elastic_api_key:
        return Elasticsearch(config.elasticsearch_url, api_key=config.elastic_api_key)
    return Elasticsearch(config.elasticsearch_url)


def _target(config: Config) -> str:
    return config.elastic_cloud_id or config.elasticsearch_url


def create_es_client(config: Config) -> Elasticsearch:
    """Create and verify an Elasticsearch client connection.

    Raises:
        InfrastructureError: If the cluster does not answer a ping.
    """
    es = build_es_client(config)
    if not es.ping():
        raise InfrastructureError(f"Cannot connect to Elasticsearch at {_target(config)}")
    logger.info("Connected to Elasticsearch at %s", _target(config))
    return es


def wait_for_elasticsearch(config: Config, timeout: int = 120, interval: float = 5) -> bool:
    """Poll the cluster until it answers a ping or ``timeout`` seconds pass.

    Returns:
        True if ES is healthy, False if timeout reached.
    """
    es = build_es_client(config)
    target = _target(config)
    deadline = time.monotonic() + timeout

    while time.monotonic() < deadline:
        try:
            if es.ping():
                logger.info("Elasticsearch is ready at %s", target)
                return True
        except TransportError as exc:
            logger.debug("Ping to %s failed: %s", target, exc)
        logger.info("Waiting for Elasticsearch...")
        time.sleep(interval)

    logger.error("Elasticsearch not available at %s after %ds", target, timeout)
    return False
