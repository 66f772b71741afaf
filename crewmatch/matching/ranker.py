"""Leg ranking: combine skill fit and proximity into one ordering."""
import logging
from typing import Optional

from crewmatch.matching.models import CandidateProfile, LegCandidate, MatchResult
from crewmatch.matching.proximity import ProximityScorer
from crewmatch.matching.skill_matcher import SkillMatcher

logger = logging.getLogger(__name__)

SKILL_WEIGHT = 0.5
DEPARTURE_WEIGHT = 0.25
ARRIVAL_WEIGHT = 0.25


class RankingAggregator:
    """Rank legs for one candidate by a composite of skill and proximity scores."""

    def __init__(
        self,
        skill_matcher: Optional[SkillMatcher] = None,
        proximity_scorer: Optional[ProximityScorer] = None,
        skill_weight: float = SKILL_WEIGHT,
        departure_weight: float = DEPARTURE_WEIGHT,
        arrival_weight: float = ARRIVAL_WEIGHT,
    ):
        """
        Initialize ranking aggregator.

        Args:
            skill_matcher: SkillMatcher instance (default settings if omitted)
            proximity_scorer: ProximityScorer instance (default settings if omitted)
            skill_weight: Weight of the skill percentage when location preferences exist
            departure_weight: Weight of departure proximity
            arrival_weight: Weight of arrival proximity
        """
        self.skill_matcher = skill_matcher or SkillMatcher()
        self.proximity_scorer = proximity_scorer or ProximityScorer()
        self.skill_weight = skill_weight
        self.departure_weight = departure_weight
        self.arrival_weight = arrival_weight

    def score_leg(self, profile: CandidateProfile, leg: LegCandidate) -> MatchResult:
        """Score a single leg without ranking."""
        skill = self.skill_matcher.match(profile, leg)

        if not profile.has_location_preference:
            return MatchResult(
                leg_id=leg.leg_id,
                skill_match_percentage=skill.percentage,
                experience_matches=skill.experience_matches,
                composite_score=float(skill.percentage),
                matching_skills=skill.matching_skills,
                missing_skills=skill.missing_skills,
            )

        departure = self.proximity_scorer.score(leg.start_waypoint, profile.preferred_departure)
        arrival = self.proximity_scorer.score(leg.end_waypoint, profile.preferred_arrival)
        composite = (
            skill.percentage * self.skill_weight
            + departure * self.departure_weight
            + arrival * self.arrival_weight
        )

        return MatchResult(
            leg_id=leg.leg_id,
            skill_match_percentage=skill.percentage,
            experience_matches=skill.experience_matches,
            composite_score=min(100.0, max(0.0, composite)),
            departure_proximity=departure,
            arrival_proximity=arrival,
            matching_skills=skill.matching_skills,
            missing_skills=skill.missing_skills,
        )

    def rank_legs(
        self,
        profile: CandidateProfile,
        legs: list[LegCandidate],
    ) -> list[MatchResult]:
        """
        Score and rank legs.

        Args:
            profile: Candidate doing the search
            legs: Legs to rank

        Returns:
            One MatchResult per leg, sorted by composite score descending.
            Legs with equal scores keep their input order.
        """
        results = [self.score_leg(profile, leg) for leg in legs]

        # list.sort is stable, including with reverse=True
        results.sort(key=lambda r: r.composite_score, reverse=True)

        logger.debug(
            "Ranked %d legs (location preference: %s)",
            len(results),
            profile.has_location_preference,
        )
        return results

    def filter_by_score(
        self,
        results: list[MatchResult],
        min_score: float,
    ) -> list[MatchResult]:
        """Keep results with a composite score of at least min_score."""
        return [r for r in results if r.composite_score >= min_score]

    def get_top_legs(
        self,
        results: list[MatchResult],
        n: int = 10,
    ) -> list[MatchResult]:
        """Get top N ranked results."""
        return results[:n]


def rank_legs(profile: CandidateProfile, legs: list[LegCandidate]) -> list[MatchResult]:
    """Rank legs with default weights and penalties."""
    return RankingAggregator().rank_legs(profile, legs)


def get_ranker(settings=None) -> RankingAggregator:
    """Factory: create a RankingAggregator from application settings.

    Args:
        settings: Settings instance; the global settings are used if omitted

    Returns:
        A RankingAggregator wired with the configured penalty, decay and weights.
    """
    if settings is None:
        from config.settings import settings

    weights = (settings.skill_weight, settings.departure_weight, settings.arrival_weight)
    if abs(sum(weights) - 1.0) > 1e-6:
        logger.warning(
            "Ranking weights sum to %.3f, not 1.0; composite scores will be clamped to 0-100.",
            sum(weights),
        )

    return RankingAggregator(
        skill_matcher=SkillMatcher(risk_penalty=settings.risk_mismatch_penalty),
        proximity_scorer=ProximityScorer(
            decay_km_per_point=settings.proximity_decay_km_per_point,
            neutral_score=settings.neutral_proximity_score,
        ),
        skill_weight=settings.skill_weight,
        departure_weight=settings.departure_weight,
        arrival_weight=settings.arrival_weight,
    )
