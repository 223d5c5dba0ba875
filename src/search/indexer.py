"""Elasticsearch index creation and bulk document indexing."""

from __future__ import annotations

import logging

from elasticsearch import Elasticsearch
from elasticsearch.helpers import bulk

from src.data.schemas import PetDocument

logger = logging.getLogger(__name__)

PET_INDEX_NAME = "pets"

_KEYWORD = {"type": "keyword"}

PET_INDEX_MAPPING = {
    "settings": {
        "number_of_shards": 1,
        "number_of_replicas": 0,
        "max_result_window": 10_000,
    },
    "mappings": {
        "dynamic": "strict",
        "properties": {
            "pet_id": {"type": "long"},
            "name": {"type": "text", "fields": {"keyword": _KEYWORD}},
            "species": _KEYWORD,
            "breed": _KEYWORD,
            "gender": _KEYWORD,
            "size": _KEYWORD,
            "age_in_months": {"type": "integer"},
            "description": {"type": "text", "analyzer": "standard"},
            "is_castrated": {"type": "boolean"},
            "is_vaccinated": {"type": "boolean"},
            "is_adopted": {"type": "boolean"},
            "created_at": {"type": "date"},
            "owner": {
                "properties": {
                    "id": {"type": "long"},
                    "name": _KEYWORD,
                    "email": {"type": "keyword", "index": False},
                    "phone_number": {"type": "keyword", "index": False},
                    "profile_picture_url": {"type": "keyword", "index": False},
                    "state": _KEYWORD,
                    "city": _KEYWORD,
                    "neighborhood": _KEYWORD,
                    "street": {"type": "keyword", "index": False},
                    "street_number": {"type": "keyword", "index": False},
                }
            },
            # nested keeps each tag's name and category together in queries
            "tags": {
                "type": "nested",
                "properties": {
                    "name": _KEYWORD,
                    "category": _KEYWORD,
                },
            },
            "image_urls": {"type": "keyword", "index": False},
        },
    },
}


def create_index(es: Elasticsearch, index_name: str = PET_INDEX_NAME) -> None:
    """Create the pets index with the listing mapping.

    Deletes existing index if present and recreates it.

    Args:
        es: Elasticsearch client.
        index_name: Name of the index to create.
    """
    if es.indices.exists(index=index_name):
        logger.info("Deleting existing index '%s'", index_name)
        es.indices.delete(index=index_name)

    es.indices.create(index=index_name, body=PET_INDEX_MAPPING)
    logger.info("Created index '%s'", index_name)


def index_pets(
    es: Elasticsearch,
    documents: list[PetDocument],
    index_name: str = PET_INDEX_NAME,
    batch_size: int = 100,
    refresh: bool = True,
) -> int:
    """Bulk index pet documents keyed by pet id.

    Args:
        es: Elasticsearch client.
        documents: Denormalized pet documents.
        index_name: Target index name.
        batch_size: Bulk indexing batch size.
        refresh: Refresh the index afterwards so documents are searchable.

    Returns:
        Number of successfully indexed documents.
    """

    def _generate_actions():
        for document in documents:
            yield {
                "_index": index_name,
                "_id": str(document.pet_id),
                "_source": document.model_dump(mode="json"),
            }

    success, errors = bulk(es, _generate_actions(), chunk_size=batch_size)

    if errors:
        logger.error("Bulk indexing errors: %s", errors)

    if refresh:
        es.indices.refresh(index=index_name)

    logger.info("Indexed %d documents into '%s'", success, index_name)
    return success
