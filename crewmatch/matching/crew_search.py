"""Crew search: score crew members against a skipper's requirements.

The owner-side mirror of leg ranking. A skipper states a minimum experience
level, acceptable risk levels, wanted skills and optionally a location; crew
members are filtered on the hard criteria and ranked by fit.
"""
import logging
from dataclasses import dataclass, field
from typing import Optional

from crewmatch.matching.models import GeoPoint, RiskLevel
from crewmatch.matching.proximity import haversine_km
from crewmatch.matching.skill_matcher import round_half_up

logger = logging.getLogger(__name__)

EXPERIENCE_WEIGHT = 34
RISK_WEIGHT = 33
SKILLS_WEIGHT = 33

# Score when the skipper specified no criteria at all
NEUTRAL_CREW_SCORE = 50

DEFAULT_LIMIT = 10
MAX_LIMIT = 50
DEFAULT_RADIUS_KM = 500.0


@dataclass(frozen=True)
class CrewRequirements:
    """What a skipper is looking for."""

    experience_level: Optional[int] = None
    risk_levels: tuple[RiskLevel, ...] = ()
    skills: frozenset[str] = frozenset()
    location: Optional[GeoPoint] = None
    radius_km: Optional[float] = None
    limit: Optional[int] = None


@dataclass(frozen=True)
class CrewCandidate:
    """A crew member as seen by crew search."""

    crew_id: str
    experience_level: Optional[int] = None
    risk_levels: tuple[RiskLevel, ...] = ()
    skills: frozenset[str] = frozenset()
    location: Optional[GeoPoint] = None


@dataclass(frozen=True)
class CrewMatch:
    """A crew member with their match score."""

    candidate: CrewCandidate
    match_score: int  # 0-100
    distance_km: Optional[float] = None


@dataclass
class CrewSearchResult:
    """Ranked crew matches; total_count is before the limit is applied."""

    matches: list[CrewMatch] = field(default_factory=list)
    total_count: int = 0


def score_crew(candidate: CrewCandidate, requirements: CrewRequirements) -> int:
    """
    Score a crew member against a skipper's requirements.

    Only criteria the skipper specified count towards the maximum:
    experience 34, risk 33, skills 33 (proportional to overlap).

    Returns:
        Match score 0-100, or 50 when no criteria were given
    """
    score = 0.0
    max_score = 0

    if requirements.experience_level is not None:
        max_score += EXPERIENCE_WEIGHT
        level = candidate.experience_level
        if level is not None and level >= requirements.experience_level:
            score += EXPERIENCE_WEIGHT

    if requirements.risk_levels:
        max_score += RISK_WEIGHT
        if set(candidate.risk_levels) & set(requirements.risk_levels):
            score += RISK_WEIGHT

    if requirements.skills:
        max_score += SKILLS_WEIGHT
        matched = len(requirements.skills & candidate.skills)
        score += SKILLS_WEIGHT * matched / len(requirements.skills)

    if max_score == 0:
        return NEUTRAL_CREW_SCORE

    final = round_half_up(score * 100 / max_score)
    logger.debug("Crew %s: %.1f/%d -> %d%%", candidate.crew_id, score, max_score, final)
    return final


class CrewSearch:
    """Filter and rank crew members for a skipper."""

    def __init__(
        self,
        default_limit: int = DEFAULT_LIMIT,
        max_limit: int = MAX_LIMIT,
        default_radius_km: float = DEFAULT_RADIUS_KM,
    ):
        """
        Initialize crew search.

        Args:
            default_limit: Matches returned when the requirements set no limit
            max_limit: Cap applied to any requested limit
            default_radius_km: Search radius when the requirements set none
        """
        self.default_limit = default_limit
        self.max_limit = max_limit
        self.default_radius_km = default_radius_km

    def _passes_filters(
        self,
        candidate: CrewCandidate,
        requirements: CrewRequirements,
    ) -> tuple[bool, Optional[float]]:
        """Hard filters; also returns the distance when it was computed."""
        if requirements.experience_level is not None:
            if candidate.experience_level is None or candidate.experience_level < requirements.experience_level:
                return False, None

        if requirements.risk_levels:
            if not set(candidate.risk_levels) & set(requirements.risk_levels):
                return False, None

        distance = None
        if requirements.location is not None and candidate.location is not None:
            distance = haversine_km(requirements.location, candidate.location)
            radius = requirements.radius_km or self.default_radius_km
            if distance > radius:
                return False, distance

        return True, distance

    def search(
        self,
        candidates: list[CrewCandidate],
        requirements: CrewRequirements,
    ) -> CrewSearchResult:
        """
        Search crew members.

        Args:
            candidates: Crew members to consider
            requirements: Skipper's requirements

        Returns:
            CrewSearchResult sorted by score descending, at most `limit` matches
        """
        scored: list[CrewMatch] = []
        for candidate in candidates:
            passes, distance = self._passes_filters(candidate, requirements)
            if not passes:
                continue
            scored.append(
                CrewMatch(
                    candidate=candidate,
                    match_score=score_crew(candidate, requirements),
                    distance_km=distance,
                )
            )

        scored.sort(key=lambda m: m.match_score, reverse=True)

        limit = requirements.limit or self.default_limit
        limit = max(1, min(limit, self.max_limit))

        logger.info("Crew search: %d of %d candidates matched", len(scored), len(candidates))
        return CrewSearchResult(matches=scored[:limit], total_count=len(scored))


def search_crew(
    candidates: list[CrewCandidate],
    requirements: CrewRequirements,
) -> CrewSearchResult:
    """Search crew members with the default limits."""
    return CrewSearch().search(candidates, requirements)


def get_crew_search(settings=None) -> CrewSearch:
    """Factory: create a CrewSearch from application settings."""
    if settings is None:
        from config.settings import settings

    return CrewSearch(
        default_limit=settings.crew_search_default_limit,
        max_limit=settings.crew_search_max_limit,
        default_radius_km=settings.crew_search_radius_km,
    )
