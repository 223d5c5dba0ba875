"""FastAPI routes for pet search, pet detail, and health check."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, Path, Query, Request, status

from src.data.schemas import ErrorResponse, PetSearchResponse, PetSummary
from src.search.filters import SearchParams

router = APIRouter()

# Upper bound of the index's ``long`` pet_id field.
MAX_PET_ID = 2**63 - 1

# Handlers that call the blocking Elasticsearch client are plain ``def`` so
# FastAPI runs them in its threadpool.


@router.get("/health")
def health_check(request: Request) -> dict:
    """Health check endpoint for monitoring.

    Returns:
        Dict with system health status.
    """
    es = request.app.state.es_client
    es_healthy = es.ping()
    return {
        "status": "healthy" if es_healthy else "degraded",
        "elasticsearch": "connected" if es_healthy else "disconnected",
    }


@router.get(
    "/api/pets/search",
    response_model=PetSearchResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
def search_pets(
    request: Request,
    state: str | None = None,
    city: str | None = None,
    species: str | None = None,
    gender: str | None = Query(None, description="Male, Female or Unknown"),
    size: str | None = Query(None, description="Small, Medium or Large"),
    breed: str | None = Query(None, description="Substring of the breed name"),
    colors: str | None = Query(None, description="Comma-separated colors; all must match"),
    pattern: str | None = None,
    coat: str | None = None,
    age: str | None = Query(None, description="Baby, Young or Adult"),
    posted: str | None = Query(None, description="Today, ThisWeek, ThisMonth or ThisYear"),
    page: int = 1,
    page_size: int = Query(10, alias="pageSize"),
) -> PetSearchResponse:
    """Search adoptable pets by any combination of filters.

    Returns:
        PetSearchResponse as JSON.
    """
    params = SearchParams(
        state=state,
        city=city,
        species=species,
        gender=gender,
        size=size,
        breed=breed,
        colors=colors,
        pattern=pattern,
        coat=coat,
        age=age,
        posted=posted,
    )
    searcher = request.app.state.searcher
    return searcher.search(params, page=page, page_size=page_size)


@router.get(
    "/api/pets/{pet_id}",
    response_model=PetSummary,
    responses={404: {"model": ErrorResponse}},
)
def get_pet(request: Request, pet_id: int = Path(..., ge=1, le=MAX_PET_ID)) -> PetSummary:
    """Return a single pet listing by id."""
    pet = request.app.state.searcher.get_pet(pet_id)
    if pet is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Pet with ID {pet_id} not found.",
        )
    return pet
