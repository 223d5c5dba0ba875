"""Pydantic models for data validation and serialization."""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class PetGender(str, Enum):
    MALE = "Male"
    FEMALE = "Female"
    UNKNOWN = "Unknown"


class PetSize(str, Enum):
    SMALL = "Small"
    MEDIUM = "Medium"
    LARGE = "Large"


class TagCategory(str, Enum):
    COLOR = "Color"
    PATTERN = "Pattern"
    COAT = "Coat"


class AgeRange(str, Enum):
    """Age bucket filter. Bounds live in ``src.search.filters``."""

    BABY = "Baby"
    YOUNG = "Young"
    ADULT = "Adult"


class PostedDate(str, Enum):
    """Posting-date bucket filter, resolved against the current UTC date."""

    TODAY = "Today"
    THIS_WEEK = "ThisWeek"
    THIS_MONTH = "ThisMonth"
    THIS_YEAR = "ThisYear"


class ApiModel(BaseModel):
    """Base for models serialized to API clients with camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class TagInfo(ApiModel):
    name: str
    category: TagCategory


class OwnerSummary(ApiModel):
    """Public view of a listing owner.

    Only contact and address fields are kept; credentials and any other
    columns of the users table are dropped on validation.
    """

    id: int
    name: str
    email: str = ""
    phone_number: str = ""
    profile_picture_url: str = ""
    state: str = ""
    city: str = ""
    neighborhood: str = ""
    street: str = ""
    street_number: str = ""


class PetDocument(BaseModel):
    """Denormalized pet listing as stored in the search index.

    Joins a pet row with its owner, species, breed, tags and images so a
    single document answers every search filter.
    """

    pet_id: int = Field(description="Primary key of the pet listing")
    name: str | None = Field(default=None, description="Display name, if any")
    species: str = Field(description="Species name, e.g. 'Dog'")
    breed: str = Field(description="Breed name")
    gender: PetGender
    size: PetSize
    age_in_months: int = Field(ge=0)
    description: str = ""
    is_castrated: bool = False
    is_vaccinated: bool = False
    is_adopted: bool = False
    created_at: datetime = Field(description="Listing creation time (UTC)")
    owner: OwnerSummary
    tags: list[TagInfo] = Field(default_factory=list)
    image_urls: list[str] = Field(default_factory=list)

    @field_validator("created_at")
    @classmethod
    def _as_utc(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)


class PetSummary(ApiModel):
    """A single pet listing returned to API clients."""

    id: int
    name: str | None = None
    species_name: str
    breed_name: str
    gender: PetGender
    size: PetSize
    age_in_months: int
    description: str = ""
    is_castrated: bool = False
    is_vaccinated: bool = False
    is_adopted: bool = False
    created_at: datetime
    owner: OwnerSummary
    tags: list[TagInfo] = Field(default_factory=list)
    image_urls: list[str] = Field(default_factory=list)


class PetSearchResponse(ApiModel):
    """One page of search results plus pagination metadata."""

    items: list[PetSummary] = Field(default_factory=list)
    page: int
    page_size: int
    total_count: int = 0
    total_pages: int = 0
    has_previous_page: bool = False
    has_next_page: bool = False


class ErrorDetail(BaseModel):
    field: str
    message: str


class ErrorResponse(BaseModel):
    detail: str
    errors: list[ErrorDetail] = Field(default_factory=list)
