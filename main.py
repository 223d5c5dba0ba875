#!/usr/bin/env python3
"""PetHub Search: Single entry point.

Waits for Elasticsearch, loads the pet catalog, rebuilds the search index,
and launches the FastAPI service.

Usage:
    python main.py
    python main.py --skip-index
    python main.py --catalog-dir data/catalog
    python main.py --port 8000
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
)
logger = logging.getLogger("pethub-search")


def rebuild_index(config, documents) -> int:
    """Recreate the search index from catalog documents.

    Returns:
        Number of documents indexed.
    """
    from src.search.es_client import build_es_client
    from src.search.indexer import create_index, index_pets

    es = build_es_client(config)
    try:
        create_index(es, config.index_name)
        return index_pets(es, documents, index_name=config.index_name)
    finally:
        es.close()


def main() -> None:
    """Orchestrate the pipeline: wait for ES -> load catalog -> index -> serve."""
    parser = argparse.ArgumentParser(description="PetHub pet search service")
    parser.add_argument(
        "--skip-index",
        action="store_true",
        help="Serve the existing index without reloading the catalog",
    )
    parser.add_argument(
        "--catalog-dir", type=Path, default=None, help="Directory of catalog CSV tables"
    )
    parser.add_argument("--port", type=int, default=None, help="Server port")
    parser.add_argument("--host", type=str, default=None, help="Server host")
    parser.add_argument("--es-url", type=str, default=None, help="Elasticsearch URL")
    parser.add_argument(
        "--es-timeout",
        type=int,
        default=120,
        help="Seconds to wait for Elasticsearch before giving up",
    )
    args = parser.parse_args()

    # the app reads ELASTICSEARCH_URL again when it starts up
    if args.es_url:
        os.environ["ELASTICSEARCH_URL"] = args.es_url

    from src.config import get_config

    config = get_config()
    catalog_dir = args.catalog_dir or config.catalog_dir
    host = args.host or config.host
    port = args.port or config.port

    # Step 1: Ensure Elasticsearch is running
    logger.info("Step 1/3: Waiting for Elasticsearch at %s", config.elasticsearch_url)
    from src.search.es_client import wait_for_elasticsearch

    if not wait_for_elasticsearch(config, timeout=args.es_timeout):
        logger.error("Elasticsearch not available after waiting. Exiting.")
        sys.exit(1)

    # Step 2: Load catalog and rebuild the index
    if not args.skip_index:
        logger.info("Step 2/3: Indexing catalog from %s", catalog_dir)
        from src.data.catalog import load_catalog

        try:
            documents = load_catalog(catalog_dir)
        except FileNotFoundError as exc:
            logger.error("Cannot load catalog: %s", exc)
            sys.exit(1)

        indexed = rebuild_index(config, documents)
        logger.info("Indexed %d of %d pets", indexed, len(documents))
    else:
        logger.info("Step 2/3: Skipping indexing (--skip-index)")

    # Step 3: Launch FastAPI server
    logger.info("Step 3/3: Serving on %s:%d", host, port)
    import uvicorn

    from src.api.app import create_app

    uvicorn.run(create_app(), host=host, port=port)


if __name__ == "__main__":
    main()
