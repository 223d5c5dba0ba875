"""Load the relational pet catalog and denormalize it into index documents."""

from __future__ import annotations

import logging
from pathlib import Path

import pandas as pd
from pydantic import ValidationError

from src.data.schemas import OwnerSummary, PetDocument, TagInfo

logger = logging.getLogger(__name__)

REQUIRED_TABLES = ("species", "breeds", "tags", "users", "pets")
OPTIONAL_TABLES = ("pet_tags", "pet_images")

_TRUE_VALUES = {"1", "true", "yes", "y", "t"}


def _read_table(catalog_dir: Path, name: str, required: bool = True) -> pd.DataFrame:
    """Read one catalog table as strings, with blanks kept as ``""``."""
    path = catalog_dir / f"{name}.csv"
    if not path.exists():
        if required:
            raise FileNotFoundError(f"Catalog table not found: {path}")
        logger.info("Optional catalog table %s not found, skipping", path)
        return pd.DataFrame()
    return pd.read_csv(path, dtype=str, keep_default_na=False)


def _as_bool(value: str) -> bool:
    return value.strip().lower() in _TRUE_VALUES


def _group_tags(pet_tags: pd.DataFrame, tag_map: dict[int, TagInfo]) -> dict[int, list[TagInfo]]:
    """Group tag associations by pet, collapsing repeated (pet, tag) pairs."""
    grouped: dict[int, list[TagInfo]] = {}
    if pet_tags.empty:
        return grouped

    pairs = pet_tags.astype({"pet_id": int, "tag_id": int}).drop_duplicates(
        subset=["pet_id", "tag_id"]
    )
    for pet_id, tag_id in zip(pairs["pet_id"], pairs["tag_id"], strict=True):
        tag = tag_map.get(tag_id)
        if tag is None:
            logger.warning("Pet %d references unknown tag %d, ignoring", pet_id, tag_id)
            continue
        grouped.setdefault(pet_id, []).append(tag)
    return grouped


def _group_images(pet_images: pd.DataFrame) -> dict[int, list[str]]:
    grouped: dict[int, list[str]] = {}
    if pet_images.empty:
        return grouped
    for pet_id, url in zip(pet_images["pet_id"].astype(int), pet_images["url"], strict=True):
        if url.strip():
            grouped.setdefault(pet_id, []).append(url.strip())
    return grouped


def load_catalog(catalog_dir: Path) -> list[PetDocument]:
    """Join the catalog tables into one document per pet.

    Expects ``species``, ``breeds``, ``tags``, ``users`` and ``pets`` CSV
    files, plus optional ``pet_tags`` and ``pet_images`` join tables. Pets
    whose species, breed or owner cannot be resolved, or whose breed belongs
    to another species, are skipped with a warning.

    Args:
        catalog_dir: Directory holding the catalog CSV files.

    Returns:
        List of PetDocument objects ordered by pet id.

    Raises:
        FileNotFoundError: If a required table is missing.
    """
    logger.info("Loading pet catalog from %s", catalog_dir)

    species_df = _read_table(catalog_dir, "species")
    breeds_df = _read_table(catalog_dir, "breeds")
    tags_df = _read_table(catalog_dir, "tags")
    users_df = _read_table(catalog_dir, "users")
    pets_df = _read_table(catalog_dir, "pets")
    pet_tags_df = _read_table(catalog_dir, "pet_tags", required=False)
    pet_images_df = _read_table(catalog_dir, "pet_images", required=False)

    species_map = dict(zip(species_df["id"].astype(int), species_df["name"], strict=True))
    breed_map = {
        int(row["id"]): (row["name"], int(row["species_id"]))
        for _, row in breeds_df.iterrows()
    }
    tag_map = {
        int(row["id"]): TagInfo(name=row["name"], category=row["category"])
        for _, row in tags_df.iterrows()
    }
    owner_map = {
        int(row["id"]): OwnerSummary.model_validate(row.to_dict())
        for _, row in users_df.iterrows()
    }
    tags_by_pet = _group_tags(pet_tags_df, tag_map)
    images_by_pet = _group_images(pet_images_df)

    documents: list[PetDocument] = []
    for _, row in pets_df.iterrows():
        pet_id = int(row["id"])
        species_id = int(row["species_id"])
        breed = breed_map.get(int(row["breed_id"]))
        owner = owner_map.get(int(row["user_id"]))

        if species_id not in species_map or breed is None or owner is None:
            logger.warning("Pet %d has a dangling species, breed or owner, skipping", pet_id)
            continue
        breed_name, breed_species_id = breed
        if breed_species_id != species_id:
            logger.warning(
                "Pet %d breed '%s' does not belong to species '%s', skipping",
                pet_id,
                breed_name,
                species_map[species_id],
            )
            continue

        try:
            document = PetDocument(
                pet_id=pet_id,
                name=row["name"].strip() or None,
                species=species_map[species_id],
                breed=breed_name,
                gender=row["gender"],
                size=row["size"],
                age_in_months=int(row["age_in_months"]),
                description=row.get("description", ""),
                is_castrated=_as_bool(row.get("is_castrated", "")),
                is_vaccinated=_as_bool(row.get("is_vaccinated", "")),
                is_adopted=_as_bool(row.get("is_adopted", "")),
                created_at=row["created_at"],
                owner=owner,
                tags=tags_by_pet.get(pet_id, []),
                image_urls=images_by_pet.get(pet_id, []),
            )
        except (ValidationError, ValueError) as exc:
            logger.warning("Pet %d failed validation, skipping: %s", pet_id, exc)
            continue
        documents.append(document)

    documents.sort(key=lambda d: d.pet_id)
    logger.info("Catalog: %d pets loaded, %d skipped", len(documents), len(pets_df) - len(documents))
    return documents
