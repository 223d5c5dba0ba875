"""FastAPI application factory with lifespan management."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from src.config import get_config
from src.data.schemas import ErrorDetail, ErrorResponse
from src.errors import InfrastructureError, SearchValidationError
from src.search.es_client import create_es_client
from src.search.searcher import PetSearcher

logger = logging.getLogger(__name__)

INTERNAL_ERROR_MESSAGE = "An internal server error occurred. Please try again later."


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Initialize shared resources on startup, clean up on shutdown.

    Creates the Elasticsearch client and the PetSearcher shared across
    all requests.
    """
    config = get_config()

    app.state.config = config
    app.state.es_client = create_es_client(config)
    app.state.searcher = PetSearcher(
        es_client=app.state.es_client,
        index_name=config.index_name,
        max_page_size=config.max_page_size,
        max_result_window=config.max_result_window,
    )

    yield

    app.state.es_client.close()


def _error_response(status_code: int, detail: str, errors: list[dict] | None = None) -> JSONResponse:
    body = ErrorResponse(
        detail=detail,
        errors=[ErrorDetail(**e) for e in errors or []],
    )
    return JSONResponse(status_code=status_code, content=body.model_dump())


async def search_validation_handler(request: Request, exc: SearchValidationError) -> JSONResponse:
    return _error_response(status.HTTP_400_BAD_REQUEST, "Invalid search parameters", exc.errors)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report malformed query values (e.g. ``page=abc``) as 400, not 422."""
    errors = [
        {"field": str(err["loc"][-1]), "message": err["msg"]}
        for err in exc.errors()
    ]
    return _error_response(status.HTTP_400_BAD_REQUEST, "Invalid request parameters", errors)


async def infrastructure_error_handler(request: Request, exc: InfrastructureError) -> JSONResponse:
    # details were logged where the failure happened; clients get a generic message
    logger.error("Request %s %s failed: %s", request.method, request.url.path, exc)
    return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, INTERNAL_ERROR_MESSAGE)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(SearchValidationError, search_validation_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(InfrastructureError, infrastructure_error_handler)


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Returns:
        Configured FastAPI application instance.
    """
    config = get_config()

    app = FastAPI(
        title="PetHub Search",
        description="Filtered, paginated search over adoptable pet listings",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(config.cors_origins),
        allow_methods=["GET", "OPTIONS"],
        allow_headers=["Authorization", "Content-Type"],
    )
    register_exception_handlers(app)

    from src.api.routes import router

    app.include_router(router)

    return app
