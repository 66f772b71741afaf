"""Cruising region registry.

Named bounding boxes for common sailing regions, loaded from YAML. Used to
resolve free-text location names ("the Med", "Tenerife") into cruising
region preferences for proximity scoring.
"""
import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Literal, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

from crewmatch.exceptions import RegionRegistryError
from crewmatch.matching.models import BoundingBox, GeoPoint, PreferredLocation
from crewmatch.matching.proximity import haversine_km

logger = logging.getLogger(__name__)

Category = Literal[
    "mediterranean",
    "atlantic",
    "caribbean",
    "northern_europe",
    "pacific",
    "indian_ocean",
    "south_america",
    "arctic",
    "antarctic",
]

# Letters, digits and accented Latin letters count as "inside a word"
_WORD_CHAR = re.compile(r"[a-z0-9À-ɏ]")


class BBoxEntry(BaseModel):
    """Bounding box as written in the registry file."""

    min_lng: float = Field(ge=-180, le=180)
    min_lat: float = Field(ge=-90, le=90)
    max_lng: float = Field(ge=-180, le=180)
    max_lat: float = Field(ge=-90, le=90)

    @model_validator(mode="after")
    def validate_bounds(self):
        """Ensure min bounds do not exceed max bounds."""
        if self.min_lng > self.max_lng or self.min_lat > self.max_lat:
            raise ValueError("Bounding box minimums must not exceed maximums")
        return self


class RegionEntry(BaseModel):
    """One region as written in the registry file."""

    name: str = Field(min_length=1)
    aliases: list[str] = Field(default_factory=list)
    category: Category
    bbox: BBoxEntry
    description: Optional[str] = None

    @field_validator("aliases", mode="before")
    @classmethod
    def filter_empty_strings(cls, v):
        """Remove empty strings from lists."""
        if isinstance(v, list):
            return [str(item).strip() for item in v if item and str(item).strip()]
        return v


@dataclass(frozen=True)
class LocationRegion:
    """A named cruising region."""

    name: str
    aliases: tuple[str, ...]
    category: str
    bbox: BoundingBox
    description: Optional[str] = None

    @property
    def center(self) -> GeoPoint:
        return self.bbox.center

    def to_preferred_location(self) -> PreferredLocation:
        """Use this region as a cruising-region location preference."""
        return PreferredLocation(point=self.center, bbox=self.bbox, name=self.name)


@dataclass(frozen=True)
class LocationSearchResult:
    """A region found in free text."""

    region: LocationRegion
    matched_on: Literal["name", "alias"]
    matched_term: str


def normalize_text(text: str) -> str:
    """Lowercase, unify apostrophes and collapse whitespace."""
    text = text.lower().strip().replace("’", "'").replace("‘", "'")
    return re.sub(r"\s+", " ", text)


def is_exact_phrase_in_text(normalized_text: str, normalized_phrase: str) -> bool:
    """
    Check whether a phrase occurs in text on word boundaries.

    "nice" matches "sailing near nice" but not "nicely".
    """
    if not normalized_phrase:
        return False

    start = 0
    while True:
        idx = normalized_text.find(normalized_phrase, start)
        if idx == -1:
            return False

        end = idx + len(normalized_phrase)
        before = normalized_text[idx - 1] if idx > 0 else " "
        after = normalized_text[end] if end < len(normalized_text) else " "
        if not _WORD_CHAR.match(before) and not _WORD_CHAR.match(after):
            return True

        start = idx + 1


class RegionRegistry:
    """Lookup and distance queries over cruising regions."""

    def __init__(self, regions: list[LocationRegion]):
        self.regions = list(regions)

    @classmethod
    def from_yaml(cls, path) -> "RegionRegistry":
        """
        Load a registry from a YAML file.

        Args:
            path: Path to a YAML file with a top-level `regions` list

        Returns:
            RegionRegistry with regions in file order

        Raises:
            RegionRegistryError: If the file is missing, unparsable or invalid
        """
        path = Path(path)
        try:
            with open(path, encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except OSError as e:
            raise RegionRegistryError(path, str(e)) from e
        except yaml.YAMLError as e:
            raise RegionRegistryError(path, f"YAML error: {e}") from e

        raw_regions = data.get("regions") if isinstance(data, dict) else None
        if not isinstance(raw_regions, list):
            raise RegionRegistryError(path, "expected a top-level 'regions' list")

        regions = []
        for index, raw in enumerate(raw_regions):
            try:
                entry = RegionEntry.model_validate(raw)
            except ValidationError as e:
                raise RegionRegistryError(path, f"region {index}: {e}") from e
            regions.append(
                LocationRegion(
                    name=entry.name,
                    aliases=tuple(entry.aliases),
                    category=entry.category,
                    bbox=BoundingBox(
                        min_lng=entry.bbox.min_lng,
                        min_lat=entry.bbox.min_lat,
                        max_lng=entry.bbox.max_lng,
                        max_lat=entry.bbox.max_lat,
                    ),
                    description=entry.description,
                )
            )

        logger.debug("Loaded %d cruising regions from %s", len(regions), path)
        return cls(regions)

    def search_location(self, text: str) -> list[LocationSearchResult]:
        """
        Find regions whose name or an alias occurs in text.

        Longer matched terms come first, so "Greek Islands" outranks
        "Greece" when both appear.
        """
        normalized = normalize_text(text or "")
        results: list[LocationSearchResult] = []

        for region in self.regions:
            if is_exact_phrase_in_text(normalized, normalize_text(region.name)):
                results.append(LocationSearchResult(region, "name", region.name))
                continue

            for alias in region.aliases:
                if is_exact_phrase_in_text(normalized, normalize_text(alias)):
                    results.append(LocationSearchResult(region, "alias", alias))
                    break

        results.sort(key=lambda r: len(r.matched_term), reverse=True)
        return results

    def get_location_bbox(self, query: str) -> Optional[LocationRegion]:
        """Best-matching region for a query, or None."""
        results = self.search_location(query)
        return results[0].region if results else None

    def list_regions(self, category: Optional[str] = None) -> list[LocationRegion]:
        if category is None:
            return list(self.regions)
        return [r for r in self.regions if r.category == category]

    def get_categories(self) -> list[str]:
        """Categories in first-seen order."""
        return list(dict.fromkeys(r.category for r in self.regions))

    def sort_regions_by_distance(
        self,
        point: GeoPoint,
        regions: Optional[list[LocationRegion]] = None,
    ) -> list[tuple[LocationRegion, float]]:
        """Regions with their distance (km) from point, nearest first."""
        candidates = self.regions if regions is None else regions
        ranked = [(region, distance_to_region(point, region)) for region in candidates]
        ranked.sort(key=lambda pair: pair[1])
        return ranked


def load_regions(path) -> list[LocationRegion]:
    """Read the regions defined in a registry file."""
    return RegionRegistry.from_yaml(path).regions


def distance_to_region(point: GeoPoint, region: LocationRegion) -> float:
    """Great-circle distance in km from point to a region's center."""
    return haversine_km(point, region.center)


_registry_cache: dict[Path, RegionRegistry] = {}


def get_registry(path=None) -> RegionRegistry:
    """Load (once) and return the region registry.

    Args:
        path: Registry file; defaults to the configured regions path
    """
    if path is None:
        from config.settings import settings

        path = settings.regions_path

    key = Path(path).resolve()
    if key not in _registry_cache:
        _registry_cache[key] = RegionRegistry.from_yaml(key)
    return _registry_cache[key]
