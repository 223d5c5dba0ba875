"""Validation and canonicalization of pet search parameters.

Turns the raw, all-optional query parameters into a ``SearchFilters`` value
where blank inputs are gone, enum-like strings are parsed, and the age and
posting-date buckets are resolved to concrete ranges.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone
from enum import Enum
from typing import TypeVar

from pydantic import BaseModel

from src.data.schemas import AgeRange, PetGender, PetSize, PostedDate
from src.errors import SearchValidationError
from src.search.pagination import PageRequest

logger = logging.getLogger(__name__)

E = TypeVar("E", bound=Enum)

# Inclusive month bounds. The reference buckets overlapped at 36 months
# (Young 12-36, Adult 36-96); 36 belongs to Adult only.
AGE_BOUNDS: dict[AgeRange, tuple[int, int]] = {
    AgeRange.BABY: (0, 11),
    AgeRange.YOUNG: (12, 35),
    AgeRange.ADULT: (36, 96),
}


class SearchParams(BaseModel):
    """Raw search parameters exactly as received from the caller."""

    state: str | None = None
    city: str | None = None
    species: str | None = None
    gender: str | None = None
    size: str | None = None
    breed: str | None = None
    colors: str | None = None
    pattern: str | None = None
    coat: str | None = None
    age: str | None = None
    posted: str | None = None


@dataclass(frozen=True)
class AgeBounds:
    minimum: int
    maximum: int


@dataclass(frozen=True)
class DateWindow:
    """Half-open creation-time window ``[start, end)``; ``end=None`` is unbounded."""

    start: datetime
    end: datetime | None = None


@dataclass(frozen=True)
class SearchFilters:
    """Canonical filter set. ``None`` or empty means "no constraint"."""

    state: str | None = None
    city: str | None = None
    species: str | None = None
    gender: PetGender | None = None
    size: PetSize | None = None
    breed: str | None = None
    colors: tuple[str, ...] = ()
    pattern: str | None = None
    coat: str | None = None
    age: AgeBounds | None = None
    posted: DateWindow | None = None

    def is_empty(self) -> bool:
        return self == SearchFilters()


def _clean(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    return value or None


def _split_names(value: str | None) -> tuple[str, ...]:
    """Split a comma list, trimming entries and dropping blanks and repeats."""
    if value is None:
        return ()
    names: list[str] = []
    for part in value.split(","):
        name = part.strip()
        if name and name not in names:
            names.append(name)
    return tuple(names)


def _parse_enum(
    enum_cls: type[E],
    field_name: str,
    raw: str | None,
    errors: list[dict[str, str]],
) -> E | None:
    value = _clean(raw)
    if value is None:
        return None
    for member in enum_cls:
        if member.value.lower() == value.lower():
            return member
    allowed = ", ".join(m.value for m in enum_cls)
    errors.append(
        {
            "field": field_name,
            "message": f"'{value}' is not a valid {field_name}; expected one of: {allowed}",
        }
    )
    return None


def resolve_age_bounds(bucket: AgeRange) -> AgeBounds:
    minimum, maximum = AGE_BOUNDS[bucket]
    return AgeBounds(minimum=minimum, maximum=maximum)


def start_of_week(today: date) -> date:
    """Return the Sunday on or before ``today``.

    Weeks start on Sunday. ``date.weekday()`` counts Monday as 0, so Sunday
    (6) maps to an offset of 0 and Saturday (5) to an offset of 6.
    """
    return today - timedelta(days=(today.weekday() + 1) % 7)


def resolve_posted_window(bucket: PostedDate, today: date) -> DateWindow:
    """Resolve a posting-date bucket against ``today`` (a UTC date).

    Args:
        bucket: The requested posting-date bucket.
        today: Current date in UTC.

    Returns:
        DateWindow with UTC midnight boundaries.
    """

    def midnight(day: date) -> datetime:
        return datetime.combine(day, time.min, tzinfo=timezone.utc)

    if bucket is PostedDate.TODAY:
        return DateWindow(start=midnight(today), end=midnight(today + timedelta(days=1)))
    if bucket is PostedDate.THIS_WEEK:
        return DateWindow(start=midnight(start_of_week(today)))
    if bucket is PostedDate.THIS_MONTH:
        return DateWindow(start=midnight(today.replace(day=1)))
    return DateWindow(start=midnight(today.replace(month=1, day=1)))


def normalize_filters(params: SearchParams, today: date) -> SearchFilters:
    """Validate raw parameters and build the canonical filter set.

    All unparseable fields are reported together rather than stopping at
    the first one.

    Args:
        params: Raw search parameters.
        today: Current UTC date, used to resolve the posting-date bucket.

    Returns:
        SearchFilters with blank fields removed and buckets resolved.

    Raises:
        SearchValidationError: If an enum-like field cannot be parsed.
    """
    errors: list[dict[str, str]] = []

    gender = _parse_enum(PetGender, "gender", params.gender, errors)
    size = _parse_enum(PetSize, "size", params.size, errors)
    age_range = _parse_enum(AgeRange, "age", params.age, errors)
    posted = _parse_enum(PostedDate, "posted", params.posted, errors)

    if errors:
        logger.info("Rejected search parameters: %s", errors)
        raise SearchValidationError(errors)

    return SearchFilters(
        state=_clean(params.state),
        city=_clean(params.city),
        species=_clean(params.species),
        gender=gender,
        size=size,
        breed=_clean(params.breed),
        colors=_split_names(params.colors),
        pattern=_clean(params.pattern),
        coat=_clean(params.coat),
        age=resolve_age_bounds(age_range) if age_range else None,
        posted=resolve_posted_window(posted, today) if posted else None,
    )


def normalize_page(page: int, page_size: int, max_page_size: int = 100) -> PageRequest:
    """Clamp pagination input into a valid window.

    ``page`` and ``page_size`` below 1 become 1; ``page_size`` above
    ``max_page_size`` becomes ``max_page_size``.
    """
    return PageRequest(
        page=max(1, page),
        page_size=max(1, min(max_page_size, page_size)),
    )
