"""Compose Elasticsearch queries from a canonical filter set.

Every active filter becomes one clause in a ``bool.filter`` list, so the
clauses are ANDed and none of them affects scoring. Tag filters use
``nested`` queries so a tag's name and category are matched on the same tag.
"""

from __future__ import annotations

from src.data.schemas import TagCategory
from src.search.filters import SearchFilters
from src.search.pagination import PageRequest

# created_at alone is not unique; pet_id breaks ties so pages are reproducible.
SEARCH_SORT: list[dict] = [
    {"created_at": {"order": "desc"}},
    {"pet_id": {"order": "asc"}},
]

_WILDCARD_SPECIALS = ("\\", "*", "?")


def escape_wildcard(value: str) -> str:
    """Escape characters that have meaning in an ES wildcard pattern."""
    for char in _WILDCARD_SPECIALS:
        value = value.replace(char, "\\" + char)
    return value


def _tag_clause(name: str, category: TagCategory) -> dict:
    """Clause matching pets with at least one tag of this name and category."""
    return {
        "nested": {
            "path": "tags",
            "query": {
                "bool": {
                    "filter": [
                        {"term": {"tags.name": name}},
                        {"term": {"tags.category": category.value}},
                    ]
                }
            },
        }
    }


def build_filter_clauses(filters: SearchFilters) -> list[dict]:
    """Translate each active filter into an ES filter clause.

    The adopted-pet exclusion is always the first clause. Each requested
    color gets its own nested clause, so a pet must carry every color.

    Args:
        filters: Canonical filter set.

    Returns:
        List of clauses to be ANDed.
    """
    clauses: list[dict] = [{"term": {"is_adopted": False}}]

    if filters.state:
        clauses.append({"term": {"owner.state": filters.state}})
    if filters.city:
        clauses.append({"term": {"owner.city": filters.city}})

    if filters.species:
        clauses.append({"term": {"species": filters.species}})
    if filters.gender:
        clauses.append({"term": {"gender": filters.gender.value}})
    if filters.size:
        clauses.append({"term": {"size": filters.size.value}})
    if filters.breed:
        clauses.append(
            {"wildcard": {"breed": {"value": f"*{escape_wildcard(filters.breed)}*"}}}
        )

    if filters.age:
        clauses.append(
            {
                "range": {
                    "age_in_months": {
                        "gte": filters.age.minimum,
                        "lte": filters.age.maximum,
                    }
                }
            }
        )

    if filters.posted:
        window: dict = {"gte": filters.posted.start.isoformat()}
        if filters.posted.end is not None:
            window["lt"] = filters.posted.end.isoformat()
        clauses.append({"range": {"created_at": window}})

    for color in filters.colors:
        clauses.append(_tag_clause(color, TagCategory.COLOR))
    if filters.pattern:
        clauses.append(_tag_clause(filters.pattern, TagCategory.PATTERN))
    if filters.coat:
        clauses.append(_tag_clause(filters.coat, TagCategory.COAT))

    return clauses


def build_search_query(filters: SearchFilters) -> dict:
    return {"bool": {"filter": build_filter_clauses(filters)}}


def exceeds_result_window(request: PageRequest, max_result_window: int = 10_000) -> bool:
    """Whether the page reaches past the last hit Elasticsearch will return."""
    return request.offset + request.page_size > max_result_window


def build_search_body(
    filters: SearchFilters,
    request: PageRequest,
    max_result_window: int = 10_000,
) -> dict:
    """Build the full search body: query, sort, window and exact total.

    Pages that reach past ``max_result_window`` cannot be fetched, so they
    are sent as count-only requests (``size`` 0). The caller decides from the
    exact total whether such a page is simply past the end of the results.

    Args:
        filters: Canonical filter set.
        request: Requested page.
        max_result_window: The index's ``index.max_result_window`` setting.

    Returns:
        Elasticsearch search request body.
    """
    body: dict = {
        "query": build_search_query(filters),
        "track_total_hits": True,
    }

    if exceeds_result_window(request, max_result_window):
        body["size"] = 0
        return body

    body["sort"] = SEARCH_SORT
    body["from"] = request.offset
    body["size"] = request.page_size
    return body
