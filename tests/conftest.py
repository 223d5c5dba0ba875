"""Shared test fixtures for the PetHub search test suite."""

from __future__ import annotations

import re
from collections.abc import Callable
from datetime import datetime, timezone
from pathlib import Path
from typing import Any
from unittest.mock import MagicMock

import pytest

from src.data.schemas import OwnerSummary, PetDocument, TagInfo
from src.search.searcher import PetSearcher

# Thursday; the current week started on Sunday 2026-10-11.
FIXED_NOW = datetime(2026, 10, 15, 12, 0, tzinfo=timezone.utc)


def make_owner(owner_id: int = 1, **overrides: Any) -> OwnerSummary:
    data = {
        "id": owner_id,
        "name": "Ana Souza",
        "email": "ana@example.com",
        "phone_number": "11987654321",
        "state": "SP",
        "city": "São Paulo",
        "neighborhood": "Bela Vista",
        "street": "Avenida Paulista",
        "street_number": "1000",
    }
    data.update(overrides)
    return OwnerSummary(**data)


def make_pet(pet_id: int, **overrides: Any) -> PetDocument:
    """Build a non-adopted dog listing, overriding any field."""
    data: dict[str, Any] = {
        "pet_id": pet_id,
        "name": f"Pet {pet_id}",
        "species": "Dog",
        "breed": "Labrador",
        "gender": "Male",
        "size": "Medium",
        "age_in_months": 24,
        "description": "A friendly dog",
        "is_castrated": True,
        "is_vaccinated": True,
        "is_adopted": False,
        "created_at": datetime(2026, 1, 1, tzinfo=timezone.utc),
        "owner": make_owner(),
        "tags": [],
        "image_urls": [f"https://img.example.com/{pet_id}.jpg"],
    }
    data.update(overrides)
    return PetDocument(**data)


def color(name: str) -> TagInfo:
    return TagInfo(name=name, category="Color")


# ---------------------------------------------------------------------------
# In-memory Elasticsearch
# ---------------------------------------------------------------------------


def _lookup(doc: dict, field: str) -> Any:
    value: Any = doc
    for part in field.split("."):
        if not isinstance(value, dict):
            return None
        value = value.get(part)
    return value


def _comparable(value: Any) -> Any:
    if isinstance(value, str):
        try:
            return datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return value
    return value


def _wildcard_regex(pattern: str) -> re.Pattern:
    out = []
    chars = iter(pattern)
    for char in chars:
        if char == "\\":
            out.append(re.escape(next(chars, "\\")))
        elif char == "*":
            out.append(".*")
        elif char == "?":
            out.append(".")
        else:
            out.append(re.escape(char))
    return re.compile("".join(out), re.DOTALL)


def _matches(doc: dict, query: dict, prefix: str = "") -> bool:
    ((kind, spec),) = query.items()

    def field_value(field: str) -> Any:
        if prefix and field.startswith(prefix):
            field = field[len(prefix):]
        return _lookup(doc, field)

    if kind == "match_all":
        return True
    if kind == "bool":
        clauses = spec.get("filter", []) + spec.get("must", [])
        if any(_matches(doc, c, prefix) for c in spec.get("must_not", [])):
            return False
        return all(_matches(doc, c, prefix) for c in clauses)
    if kind == "term":
        ((field, expected),) = spec.items()
        if isinstance(expected, dict):
            expected = expected["value"]
        actual = field_value(field)
        if isinstance(actual, list):
            return expected in actual
        return actual == expected
    if kind == "range":
        ((field, bounds),) = spec.items()
        actual = _comparable(field_value(field))
        if actual is None:
            return False
        checks = {
            "gte": lambda a, b: a >= b,
            "gt": lambda a, b: a > b,
            "lte": lambda a, b: a <= b,
            "lt": lambda a, b: a < b,
        }
        return all(checks[op](actual, _comparable(bound)) for op, bound in bounds.items())
    if kind == "wildcard":
        ((field, options),) = spec.items()
        actual = field_value(field)
        return isinstance(actual, str) and bool(
            _wildcard_regex(options["value"]).fullmatch(actual)
        )
    if kind == "nested":
        path = spec["path"]
        items = field_value(path) or []
        return any(_matches(item, spec["query"], prefix=path + ".") for item in items)
    raise NotImplementedError(f"Unsupported query type: {kind}")


class FakeElasticsearch:
    """Evaluates the query subset the search composer emits over dicts."""

    def __init__(self, documents: list[PetDocument] | None = None) -> None:
        self.documents = [d.model_dump(mode="json") for d in documents or []]
        self.requests: list[dict] = []

    def ping(self) -> bool:
        return True

    def search(self, index: str, body: dict) -> dict:
        self.requests.append(body)
        query = body.get("query", {"match_all": {}})
        matched = [d for d in self.documents if _matches(d, query)]

        # apply keys last-to-first; stable sorts compose into a multi-key sort
        for sort_spec in reversed(body.get("sort", [])):
            ((field, options),) = sort_spec.items()
            matched.sort(
                key=lambda d, f=field: _comparable(_lookup(d, f)),
                reverse=options["order"] == "desc",
            )

        start = body.get("from", 0)
        size = body.get("size", 10)
        window = matched[start:start + size]
        return {
            "hits": {
                "total": {"value": len(matched), "relation": "eq"},
                "hits": [
                    {"_id": str(d["pet_id"]), "_score": None, "_source": d}
                    for d in window
                ],
            }
        }


@pytest.fixture
def fixed_now() -> datetime:
    return FIXED_NOW


@pytest.fixture
def sample_pet_document() -> PetDocument:
    """Create a sample PetDocument for testing."""
    return make_pet(
        12345,
        name="Buddy",
        breed="Golden Retriever",
        tags=[color("Golden"), TagInfo(name="Long", category="Coat")],
        image_urls=["https://img.example.com/a.jpg", "https://img.example.com/b.jpg"],
    )


@pytest.fixture
def es_hit(sample_pet_document: PetDocument) -> dict:
    """Create a sample Elasticsearch hit document."""
    return {
        "_id": "12345",
        "_score": None,
        "_source": sample_pet_document.model_dump(mode="json"),
    }


@pytest.fixture
def mock_es_client() -> MagicMock:
    """Create a mock Elasticsearch client."""
    mock = MagicMock()
    mock.ping.return_value = True
    mock.indices.exists.return_value = False
    mock.indices.create.return_value = {"acknowledged": True}
    return mock


@pytest.fixture
def make_searcher(fixed_now: datetime) -> Callable[..., PetSearcher]:
    """Build a PetSearcher over an in-memory index with a fixed clock."""

    def _make(documents: list[PetDocument], **kwargs) -> PetSearcher:
        return PetSearcher(
            FakeElasticsearch(documents), index_name="test_pets", now=lambda: fixed_now, **kwargs
        )

    return _make


@pytest.fixture
def five_pets() -> list[PetDocument]:
    """Five adoptable pets, three of them dogs, plus one adopted dog."""
    return [
        make_pet(1, species="Dog", breed="Golden Retriever"),
        make_pet(2, species="Cat", breed="Siamese"),
        make_pet(3, species="Dog", breed="Beagle"),
        make_pet(4, species="Rabbit", breed="Holland Lop"),
        make_pet(5, species="Dog", breed="Labrador"),
        make_pet(6, species="Dog", breed="Pug", is_adopted=True),
    ]


@pytest.fixture
def tmp_catalog_dir(tmp_path: Path) -> Path:
    """Create an empty catalog directory."""
    catalog_dir = tmp_path / "catalog"
    catalog_dir.mkdir()
    return catalog_dir


@pytest.fixture
def pet_factory() -> Callable[..., PetDocument]:
    """Expose ``make_pet`` to tests."""
    return make_pet


@pytest.fixture
def owner_factory() -> Callable[..., OwnerSummary]:
    return make_owner
