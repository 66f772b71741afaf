"""Pydantic models turning data-store rows into scoring inputs.

Rows come from the profile and leg/journey stores with loosely typed
fields: skills as JSON strings, risk levels as a single label or a list,
locations as JSON objects with an optional cruising-region bbox. These
models normalize everything once so the scorers only see typed values.
Malformed optional data becomes "no constraint" instead of an error.
"""
import json
import logging
import math
from collections.abc import Mapping
from typing import Any, Optional

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
    model_validator,
)

from crewmatch.exceptions import RecordError
from crewmatch.matching.crew_search import CrewCandidate, CrewRequirements
from crewmatch.matching.models import (
    MAX_EXPERIENCE_LEVEL,
    MIN_EXPERIENCE_LEVEL,
    BoundingBox,
    CandidateProfile,
    GeoPoint,
    LegCandidate,
    PreferredLocation,
    RiskLevel,
)
from crewmatch.matching.skills import normalize_skill_names

logger = logging.getLogger(__name__)


def _as_float(value: Any) -> Optional[float]:
    """A finite float, or None for anything else (bool, NaN, inf, huge ints)."""
    if isinstance(value, bool):
        return None
    try:
        if isinstance(value, (int, float)):
            number = float(value)
        elif isinstance(value, str):
            number = float(value.strip())
        else:
            return None
    except (ValueError, OverflowError):
        return None
    return number if math.isfinite(number) else None


def _as_mapping(value: Any) -> Optional[Mapping]:
    """Accept a mapping or a JSON object string."""
    if isinstance(value, str):
        try:
            value = json.loads(value)
        except ValueError:
            return None
    return value if isinstance(value, Mapping) else None


def _skill_list(value: Any) -> list[str]:
    return normalize_skill_names(value if isinstance(value, (list, tuple)) else None)


def _stringify_id(value: Any) -> Any:
    if isinstance(value, (int, str)) and not isinstance(value, bool):
        return str(value).strip()
    return value


def coerce_experience_level(value: Any) -> Optional[int]:
    """Clamp an experience level into 1-4; unusable values mean no level."""
    if isinstance(value, int) and not isinstance(value, bool):
        # Ints of any size clamp; float() would overflow past ~1e308
        level = value
    else:
        number = _as_float(value)
        if number is None or not number.is_integer():
            if value is not None:
                logger.warning("Ignoring non-integer experience level: %r", value)
            return None
        level = int(number)

    clamped = min(MAX_EXPERIENCE_LEVEL, max(MIN_EXPERIENCE_LEVEL, level))
    if clamped != level:
        logger.warning("Clamped experience level %d to %d", level, clamped)
    return clamped


def parse_risk_levels(value: Any) -> list[RiskLevel]:
    """Parse one label or a list of labels, dropping unknown ones."""
    if value is None:
        return []
    if isinstance(value, (str, RiskLevel)):
        value = [value]
    if not isinstance(value, (list, tuple, set, frozenset)):
        return []

    levels: list[RiskLevel] = []
    for label in value:
        level = RiskLevel.parse(label)
        if level is None:
            logger.warning("Ignoring unknown risk level: %r", label)
        elif level not in levels:
            levels.append(level)

    # Keep the ordering of the tiers themselves
    order = list(RiskLevel)
    return sorted(levels, key=order.index)


def parse_point(value: Any) -> Optional[GeoPoint]:
    """Parse {lat, lng} or a GeoJSON Point into a GeoPoint."""
    data = _as_mapping(value)
    if data is None:
        return None

    if data.get("type") == "Point" and isinstance(data.get("coordinates"), (list, tuple)):
        coordinates = data["coordinates"]
        if len(coordinates) < 2:
            return None
        lng, lat = _as_float(coordinates[0]), _as_float(coordinates[1])
    else:
        lat, lng = _as_float(data.get("lat")), _as_float(data.get("lng"))

    if lat is None or lng is None:
        return None
    if not (-90 <= lat <= 90 and -180 <= lng <= 180):
        logger.warning("Ignoring out-of-range coordinate: lat=%s lng=%s", lat, lng)
        return None
    return GeoPoint(lat=lat, lng=lng)


def parse_bbox(value: Any) -> Optional[BoundingBox]:
    """Parse a {minLng, minLat, maxLng, maxLat} mapping (camel or snake case)."""
    data = _as_mapping(value)
    if data is None:
        return None

    def pick(camel: str, snake: str) -> Optional[float]:
        return _as_float(data.get(camel, data.get(snake)))

    min_lng = pick("minLng", "min_lng")
    min_lat = pick("minLat", "min_lat")
    max_lng = pick("maxLng", "max_lng")
    max_lat = pick("maxLat", "max_lat")
    if None in (min_lng, min_lat, max_lng, max_lat):
        return None
    if not all(-180 <= lng <= 180 for lng in (min_lng, max_lng)) or not all(
        -90 <= lat <= 90 for lat in (min_lat, max_lat)
    ):
        logger.warning("Ignoring out-of-range bounding box: %r", dict(data))
        return None
    if min_lng > max_lng or min_lat > max_lat:
        logger.warning("Ignoring inverted bounding box: %r", dict(data))
        return None
    return BoundingBox(min_lng=min_lng, min_lat=min_lat, max_lng=max_lng, max_lat=max_lat)


def parse_location(value: Any) -> Optional[PreferredLocation]:
    """Parse a stored location preference; a complete bbox wins over the point."""
    data = _as_mapping(value)
    if data is None:
        return None

    bbox = parse_bbox(data.get("bbox"))
    point = parse_point(data)
    if bbox is None and point is None:
        return None

    name = data.get("name")
    return PreferredLocation(
        point=point,
        bbox=bbox,
        name=str(name) if name else None,
    )


class ProfileRecord(BaseModel):
    """A crew profile row."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    skills: list[str] = Field(default_factory=list)
    risk_level: list[RiskLevel] = Field(
        default_factory=list,
        validation_alias=AliasChoices("risk_level", "risk_levels"),
    )
    sailing_experience: Optional[int] = Field(
        default=None,
        validation_alias=AliasChoices("sailing_experience", "experience_level"),
    )
    preferred_departure_location: Optional[PreferredLocation] = None
    preferred_arrival_location: Optional[PreferredLocation] = None

    @field_validator("skills", mode="before")
    @classmethod
    def normalize_skills(cls, v):
        return _skill_list(v)

    @field_validator("risk_level", mode="before")
    @classmethod
    def normalize_risk_levels(cls, v):
        return parse_risk_levels(v)

    @field_validator("sailing_experience", mode="before")
    @classmethod
    def clamp_experience(cls, v):
        return coerce_experience_level(v)

    @field_validator("preferred_departure_location", "preferred_arrival_location", mode="before")
    @classmethod
    def normalize_location(cls, v):
        if isinstance(v, PreferredLocation):
            return v
        return parse_location(v)

    def to_profile(self) -> CandidateProfile:
        return CandidateProfile(
            skills=frozenset(self.skills),
            risk_levels=tuple(self.risk_level),
            experience_level=self.sailing_experience,
            preferred_departure=self.preferred_departure_location,
            preferred_arrival=self.preferred_arrival_location,
        )


class LegRecord(BaseModel):
    """A leg row joined with its journey's risk level and end waypoints."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    leg_id: str = Field(validation_alias=AliasChoices("leg_id", "id"), min_length=1)
    skills: list[str] = Field(default_factory=list)
    leg_risk_level: Optional[RiskLevel] = Field(
        default=None,
        validation_alias=AliasChoices("leg_risk_level", "risk_level"),
    )
    journey_risk_level: Optional[RiskLevel] = None
    min_experience_level: Optional[int] = None
    start_waypoint: Optional[GeoPoint] = None
    end_waypoint: Optional[GeoPoint] = None

    @field_validator("leg_id", mode="before")
    @classmethod
    def stringify_id(cls, v):
        return _stringify_id(v)

    @field_validator("skills", mode="before")
    @classmethod
    def normalize_skills(cls, v):
        return _skill_list(v)

    @field_validator("leg_risk_level", "journey_risk_level", mode="before")
    @classmethod
    def parse_risk(cls, v):
        # Legs occasionally store a one-element list
        if isinstance(v, (list, tuple)):
            v = v[0] if len(v) == 1 else None
        level = RiskLevel.parse(v)
        if level is None and v not in (None, ""):
            logger.warning("Ignoring unknown leg risk level: %r", v)
        return level

    @field_validator("min_experience_level", mode="before")
    @classmethod
    def clamp_experience(cls, v):
        return coerce_experience_level(v)

    @field_validator("start_waypoint", "end_waypoint", mode="before")
    @classmethod
    def normalize_waypoint(cls, v):
        if isinstance(v, GeoPoint):
            return v
        return parse_point(v)

    def to_leg(self) -> LegCandidate:
        return LegCandidate(
            leg_id=self.leg_id,
            required_skills=frozenset(self.skills),
            leg_risk_level=self.leg_risk_level,
            journey_risk_level=self.journey_risk_level,
            min_experience_level=self.min_experience_level,
            start_waypoint=self.start_waypoint,
            end_waypoint=self.end_waypoint,
        )


def parse_profile(row: Any) -> CandidateProfile:
    """Build a CandidateProfile from a profile row."""
    if not isinstance(row, Mapping):
        raise RecordError("profile row is not a mapping", row)
    try:
        return ProfileRecord.model_validate(dict(row)).to_profile()
    except ValidationError as e:
        raise RecordError(str(e), row) from e


def parse_leg(row: Any) -> LegCandidate:
    """Build a LegCandidate from a leg row."""
    if not isinstance(row, Mapping):
        raise RecordError("leg row is not a mapping", row)
    try:
        return LegRecord.model_validate(dict(row)).to_leg()
    except ValidationError as e:
        raise RecordError(f"leg row without a usable id: {e.error_count()} error(s)", row) from e


def parse_legs(rows: list[Any], skip_invalid: bool = False) -> list[LegCandidate]:
    """
    Build LegCandidates from leg rows.

    Args:
        rows: Leg rows from the leg/journey store
        skip_invalid: Log and skip unusable rows instead of raising

    Returns:
        LegCandidates in input order
    """
    legs: list[LegCandidate] = []
    for index, row in enumerate(rows):
        try:
            legs.append(parse_leg(row))
        except RecordError as e:
            if not skip_invalid:
                raise
            logger.warning("Skipping leg row %d: %s", index, e.reason)
    return legs


class CrewRecord(BaseModel):
    """A crew profile row as used by crew search."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    id: str = Field(validation_alias=AliasChoices("id", "crew_id"), min_length=1)
    skills: list[str] = Field(default_factory=list)
    risk_level: list[RiskLevel] = Field(
        default_factory=list,
        validation_alias=AliasChoices("risk_level", "risk_levels"),
    )
    sailing_experience: Optional[int] = Field(
        default=None,
        validation_alias=AliasChoices("sailing_experience", "experience_level"),
    )
    preferred_departure_location: Optional[PreferredLocation] = None

    @field_validator("id", mode="before")
    @classmethod
    def stringify_id(cls, v):
        return _stringify_id(v)

    @field_validator("skills", mode="before")
    @classmethod
    def normalize_skills(cls, v):
        return _skill_list(v)

    @field_validator("risk_level", mode="before")
    @classmethod
    def normalize_risk_levels(cls, v):
        return parse_risk_levels(v)

    @field_validator("sailing_experience", mode="before")
    @classmethod
    def clamp_experience(cls, v):
        return coerce_experience_level(v)

    @field_validator("preferred_departure_location", mode="before")
    @classmethod
    def normalize_location(cls, v):
        if isinstance(v, PreferredLocation):
            return v
        return parse_location(v)

    def to_candidate(self) -> CrewCandidate:
        location = self.preferred_departure_location
        if location is None:
            point = None
        else:
            point = location.point or location.bbox.center
        return CrewCandidate(
            crew_id=self.id,
            experience_level=self.sailing_experience,
            risk_levels=tuple(self.risk_level),
            skills=frozenset(self.skills),
            location=point,
        )


class RequirementsRecord(BaseModel):
    """A skipper's crew search request."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    experience_level: Optional[int] = Field(
        default=None,
        validation_alias=AliasChoices("experience_level", "experienceLevel"),
    )
    risk_levels: list[RiskLevel] = Field(
        default_factory=list,
        validation_alias=AliasChoices("risk_levels", "riskLevels"),
    )
    skills: list[str] = Field(default_factory=list)
    location: Optional[GeoPoint] = None
    radius_km: Optional[float] = Field(default=None, gt=0)
    limit: Optional[int] = Field(default=None, ge=1)

    @field_validator("skills", mode="before")
    @classmethod
    def normalize_skills(cls, v):
        return _skill_list(v)

    @field_validator("risk_levels", mode="before")
    @classmethod
    def normalize_risk_levels(cls, v):
        return parse_risk_levels(v)

    @field_validator("experience_level", mode="before")
    @classmethod
    def clamp_experience(cls, v):
        return coerce_experience_level(v)

    @model_validator(mode="before")
    @classmethod
    def split_location(cls, data):
        # Requests carry the radius inside the location object
        if isinstance(data, Mapping) and isinstance(data.get("location"), Mapping):
            data = dict(data)
            location = data["location"]
            if "radius" in location and data.get("radius_km") is None:
                data["radius_km"] = location["radius"]
        return data

    @field_validator("location", mode="before")
    @classmethod
    def normalize_location(cls, v):
        if isinstance(v, GeoPoint):
            return v
        return parse_point(v)

    def to_requirements(self) -> CrewRequirements:
        return CrewRequirements(
            experience_level=self.experience_level,
            risk_levels=tuple(self.risk_levels),
            skills=frozenset(self.skills),
            location=self.location,
            radius_km=self.radius_km,
            limit=self.limit,
        )


def parse_crew(rows: list[Any], skip_invalid: bool = False) -> list[CrewCandidate]:
    """Build CrewCandidates from crew profile rows."""
    candidates: list[CrewCandidate] = []
    for index, row in enumerate(rows):
        try:
            if not isinstance(row, Mapping):
                raise RecordError("crew row is not a mapping", row)
            try:
                candidates.append(CrewRecord.model_validate(dict(row)).to_candidate())
            except ValidationError as e:
                raise RecordError(f"crew row without a usable id: {e.error_count()} error(s)", row) from e
        except RecordError as e:
            if not skip_invalid:
                raise
            logger.warning("Skipping crew row %d: %s", index, e.reason)
    return candidates


def parse_requirements(data: Any) -> CrewRequirements:
    """Build CrewRequirements from a search request body."""
    if data is None:
        return CrewRequirements()
    if not isinstance(data, Mapping):
        raise RecordError("requirements are not a mapping", data)
    try:
        return RequirementsRecord.model_validate(dict(data)).to_requirements()
    except ValidationError as e:
        raise RecordError(str(e), data) from e
