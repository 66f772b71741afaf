"""Scoring inputs and outputs for crew-to-leg matching."""
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

MIN_EXPERIENCE_LEVEL = 1
MAX_EXPERIENCE_LEVEL = 4


class RiskLevel(str, Enum):
    """Coarse classification of sailing conditions, as stored by the data store."""

    COASTAL = "Coastal sailing"
    OFFSHORE = "Offshore sailing"
    EXTREME = "Extreme sailing"

    @classmethod
    def parse(cls, label) -> Optional["RiskLevel"]:
        """Resolve a risk label in any of its stored spellings.

        Accepts "Coastal sailing", "CoastalSailing", "coastal_sailing" and
        "coastal". Returns None for anything else.
        """
        if isinstance(label, cls):
            return label
        if not isinstance(label, str):
            return None

        key = "".join(ch for ch in label.lower() if ch.isalpha())
        if key.endswith("sailing"):
            key = key[: -len("sailing")]
        return _RISK_KEYS.get(key)


_RISK_KEYS = {
    "coastal": RiskLevel.COASTAL,
    "offshore": RiskLevel.OFFSHORE,
    "extreme": RiskLevel.EXTREME,
}


@dataclass(frozen=True)
class GeoPoint:
    """A coordinate in degrees."""

    lat: float
    lng: float


@dataclass(frozen=True)
class BoundingBox:
    """A cruising region's extent in degrees."""

    min_lng: float
    min_lat: float
    max_lng: float
    max_lat: float

    @property
    def center(self) -> GeoPoint:
        return GeoPoint(
            lat=(self.min_lat + self.max_lat) / 2,
            lng=(self.min_lng + self.max_lng) / 2,
        )

    def contains(self, point: GeoPoint) -> bool:
        """Inclusive containment check."""
        return (
            self.min_lng <= point.lng <= self.max_lng
            and self.min_lat <= point.lat <= self.max_lat
        )


@dataclass(frozen=True)
class PreferredLocation:
    """A location preference: either a single point or a cruising region."""

    point: Optional[GeoPoint] = None
    bbox: Optional[BoundingBox] = None
    name: Optional[str] = None

    def __post_init__(self):
        if self.point is None and self.bbox is None:
            raise ValueError("PreferredLocation needs a point or a bounding box")

    @property
    def is_cruising_region(self) -> bool:
        return self.bbox is not None


@dataclass(frozen=True)
class CandidateProfile:
    """The searching crew member's attributes relevant to matching.

    Raises ValueError for an experience level outside 1-4. Build from
    data-store rows with records.parse_profile, which clamps instead.
    """

    skills: frozenset[str] = frozenset()
    risk_levels: tuple[RiskLevel, ...] = ()
    experience_level: Optional[int] = None
    preferred_departure: Optional[PreferredLocation] = None
    preferred_arrival: Optional[PreferredLocation] = None

    def __post_init__(self):
        if self.experience_level is not None and not (
            MIN_EXPERIENCE_LEVEL <= self.experience_level <= MAX_EXPERIENCE_LEVEL
        ):
            raise ValueError(f"experience_level out of range: {self.experience_level}")

    @property
    def has_location_preference(self) -> bool:
        return self.preferred_departure is not None or self.preferred_arrival is not None


@dataclass(frozen=True)
class LegCandidate:
    """One bookable leg being scored.

    Raises ValueError for a minimum experience level outside 1-4. Build
    from data-store rows with records.parse_leg, which clamps instead.
    """

    leg_id: str
    required_skills: frozenset[str] = frozenset()
    leg_risk_level: Optional[RiskLevel] = None
    journey_risk_level: Optional[RiskLevel] = None
    min_experience_level: Optional[int] = None
    start_waypoint: Optional[GeoPoint] = None
    end_waypoint: Optional[GeoPoint] = None

    def __post_init__(self):
        if self.min_experience_level is not None and not (
            MIN_EXPERIENCE_LEVEL <= self.min_experience_level <= MAX_EXPERIENCE_LEVEL
        ):
            raise ValueError(
                f"min_experience_level out of range: {self.min_experience_level}"
            )

    @property
    def effective_risk_level(self) -> Optional[RiskLevel]:
        """Leg-level risk overrides the journey's."""
        return self.leg_risk_level or self.journey_risk_level


@dataclass(frozen=True)
class SkillMatch:
    """Skill, risk and experience fit for one candidate/leg pair."""

    percentage: int  # 0-100
    experience_matches: bool
    risk_matches: bool = True
    matching_skills: list[str] = field(default_factory=list)
    missing_skills: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class MatchResult:
    """Ranking output for one leg."""

    leg_id: str
    skill_match_percentage: int  # 0-100
    experience_matches: bool
    composite_score: float  # 0-100, used for ordering
    departure_proximity: Optional[float] = None
    arrival_proximity: Optional[float] = None
    matching_skills: list[str] = field(default_factory=list)
    missing_skills: list[str] = field(default_factory=list)
