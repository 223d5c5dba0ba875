"""Filtered, paginated pet search over the Elasticsearch read model."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from datetime import datetime, timezone

from elasticsearch import ApiError, Elasticsearch, TransportError

from src.data.schemas import PetDocument, PetSearchResponse, PetSummary
from src.errors import InfrastructureError, SearchValidationError
from src.search.assembler import assemble_hits, to_pet_summary
from src.search.filters import SearchParams, normalize_filters, normalize_page
from src.search.pagination import build_page
from src.search.query_builder import build_search_body, exceeds_result_window

logger = logging.getLogger(__name__)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class PetSearcher:
    """Search engine for adoptable pet listings.

    Runs the normalize, compose, page and assemble stages for each call.
    Holds no per-request state, so one instance serves concurrent requests.

    Args:
        es_client: Connected Elasticsearch client.
        index_name: Elasticsearch index to search.
        max_page_size: Upper bound applied to the requested page size.
        max_result_window: The index's ``index.max_result_window``.
        now: Clock returning the current UTC time.
    """

    def __init__(
        self,
        es_client: Elasticsearch,
        index_name: str = "pets",
        max_page_size: int = 100,
        max_result_window: int = 10_000,
        now: Callable[[], datetime] = _utc_now,
    ) -> None:
        self.es = es_client
        self.index_name = index_name
        self.max_page_size = max_page_size
        self.max_result_window = max_result_window
        self.now = now

    def search(
        self,
        params: SearchParams,
        page: int = 1,
        page_size: int = 10,
    ) -> PetSearchResponse:
        """Search non-adopted pets matching every supplied filter.

        Args:
            params: Raw filter parameters.
            page: 1-based page number; values below 1 are clamped.
            page_size: Items per page; clamped to ``[1, max_page_size]``.

        Returns:
            PetSearchResponse with the requested page and full-result totals.

        Raises:
            SearchValidationError: If a filter value cannot be parsed, or the
                page reaches past the index result window while matches remain.
            InfrastructureError: If the index query fails.
        """
        start = time.monotonic()
        filters = normalize_filters(params, self.now().date())
        request = normalize_page(page, page_size, self.max_page_size)
        body = build_search_body(filters, request, self.max_result_window)

        response = self._search(body)
        total_count = _total_hits(response)
        if exceeds_result_window(request, self.max_result_window) and request.offset < total_count:
            raise SearchValidationError(
                [
                    {
                        "field": "page",
                        "message": (
                            f"Only the first {self.max_result_window} matches can be paged; "
                            "narrow the filters to reach the rest."
                        ),
                    }
                ]
            )
        items = assemble_hits(response["hits"]["hits"])

        elapsed_ms = (time.monotonic() - start) * 1000
        logger.info(
            "Search %s page=%d size=%d -> %d/%d in %.1fms",
            filters,
            request.page,
            request.page_size,
            len(items),
            total_count,
            elapsed_ms,
        )
        return build_page(items, total_count, request)

    def get_pet(self, pet_id: int) -> PetSummary | None:
        """Fetch a single listing by id, adopted or not.

        Returns:
            PetSummary, or None if no listing has this id.
        """
        response = self._search({"query": {"term": {"pet_id": pet_id}}, "size": 1})
        hits = response["hits"]["hits"]
        if not hits:
            return None
        return to_pet_summary(PetDocument.model_validate(hits[0]["_source"]))

    def _search(self, body: dict) -> dict:
        try:
            return self.es.search(index=self.index_name, body=body)
        except (ApiError, TransportError) as exc:
            logger.exception("Query against index '%s' failed", self.index_name)
            raise InfrastructureError(
                f"Search index '{self.index_name}' query failed"
            ) from exc


def _total_hits(response: dict) -> int:
    total = response["hits"]["total"]
    if isinstance(total, dict):
        return int(total["value"])
    return int(total)
