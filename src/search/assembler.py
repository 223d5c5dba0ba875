"""Map search index hits to API response records."""

from __future__ import annotations

from src.data.schemas import PetDocument, PetSummary


def to_pet_summary(document: PetDocument) -> PetSummary:
    """Convert an indexed pet document into its public summary."""
    return PetSummary(
        id=document.pet_id,
        name=document.name,
        species_name=document.species,
        breed_name=document.breed,
        gender=document.gender,
        size=document.size,
        age_in_months=document.age_in_months,
        description=document.description,
        is_castrated=document.is_castrated,
        is_vaccinated=document.is_vaccinated,
        is_adopted=document.is_adopted,
        created_at=document.created_at,
        owner=document.owner,
        tags=list(document.tags),
        image_urls=list(document.image_urls),
    )


def assemble_hits(hits: list[dict]) -> list[PetSummary]:
    """Convert raw Elasticsearch hits to summaries, keeping hit order.

    Args:
        hits: Raw Elasticsearch hit documents.

    Returns:
        List of PetSummary objects.
    """
    return [to_pet_summary(PetDocument.model_validate(hit["_source"])) for hit in hits]
