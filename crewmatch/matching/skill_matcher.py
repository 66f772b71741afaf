"""Skill, risk and experience matching between a crew member and a leg."""
import logging
import math
from enum import Enum
from typing import Iterable, Optional

from crewmatch.matching.models import CandidateProfile, LegCandidate, SkillMatch
from crewmatch.matching.skills import normalize_skill_names

logger = logging.getLogger(__name__)

# Points taken off the skill percentage when the leg's risk tier is not one
# the candidate declared willingness for.
RISK_MISMATCH_PENALTY = 20


class MatchTier(str, Enum):
    """Display bucket for a match percentage."""

    STRONG = "strong"  # >= 80
    GOOD = "good"  # >= 50
    PARTIAL = "partial"  # >= 25
    WEAK = "weak"


def round_half_up(value: float) -> int:
    """Round .5 away from zero for positive values (2.5 -> 3, not 2)."""
    return int(math.floor(value + 0.5))


def check_experience_level_match(
    user_experience_level: Optional[int],
    leg_min_experience_level: Optional[int],
) -> bool:
    """Whether a user's experience level satisfies a leg's minimum.

    An absent level on either side applies no constraint.
    """
    if user_experience_level is None or leg_min_experience_level is None:
        return True
    return user_experience_level >= leg_min_experience_level


def get_matching_and_missing_skills(
    user_skills: Iterable,
    leg_skills: Iterable,
) -> tuple[list[str], list[str]]:
    """Split a leg's required skills into those the user has and those missing.

    Both inputs are normalized, so display names and JSON skill objects
    compare equal to their canonical form.
    """
    user = set(normalize_skill_names(user_skills))
    required = normalize_skill_names(leg_skills)

    matching = [skill for skill in required if skill in user]
    missing = [skill for skill in required if skill not in user]
    return matching, missing


def classify_match(percentage: float, experience_matches: bool = True) -> MatchTier:
    """Bucket a match percentage; insufficient experience is always weak."""
    if not experience_matches:
        return MatchTier.WEAK
    if percentage >= 80:
        return MatchTier.STRONG
    if percentage >= 50:
        return MatchTier.GOOD
    if percentage >= 25:
        return MatchTier.PARTIAL
    return MatchTier.WEAK


class SkillMatcher:
    """Score how well a candidate's skills, risk tolerance and experience fit a leg."""

    def __init__(self, risk_penalty: int = RISK_MISMATCH_PENALTY):
        """
        Initialize skill matcher.

        Args:
            risk_penalty: Points subtracted when the leg's risk tier is not
                among the candidate's declared risk levels
        """
        self.risk_penalty = max(0, risk_penalty)

    def match(self, profile: CandidateProfile, leg: LegCandidate) -> SkillMatch:
        """
        Match one candidate against one leg.

        Args:
            profile: Candidate being scored
            leg: Leg to score against

        Returns:
            SkillMatch with the clamped percentage and its breakdown
        """
        required = sorted(leg.required_skills)
        matching = [skill for skill in required if skill in profile.skills]
        missing = [skill for skill in required if skill not in profile.skills]

        if not required:
            skill_component = 100
        else:
            skill_component = round_half_up(100 * len(matching) / len(required))

        risk_matches = self._risk_matches(profile, leg)
        percentage = skill_component if risk_matches else skill_component - self.risk_penalty
        percentage = min(100, max(0, percentage))

        experience_matches = check_experience_level_match(
            profile.experience_level, leg.min_experience_level
        )

        logger.debug(
            "Leg %s: skills %d/%d, risk_matches=%s, experience_matches=%s -> %d%%",
            leg.leg_id,
            len(matching),
            len(required),
            risk_matches,
            experience_matches,
            percentage,
        )

        return SkillMatch(
            percentage=percentage,
            experience_matches=experience_matches,
            risk_matches=risk_matches,
            matching_skills=matching,
            missing_skills=missing,
        )

    @staticmethod
    def _risk_matches(profile: CandidateProfile, leg: LegCandidate) -> bool:
        """No leg risk or no candidate preference is neutral."""
        leg_risk = leg.effective_risk_level
        if leg_risk is None or not profile.risk_levels:
            return True
        return leg_risk in profile.risk_levels


def compute_skill_match(
    profile: CandidateProfile,
    leg: LegCandidate,
    risk_penalty: int = RISK_MISMATCH_PENALTY,
) -> int:
    """Skill match percentage (0-100) for one candidate/leg pair."""
    return SkillMatcher(risk_penalty=risk_penalty).match(profile, leg).percentage
