"""Crew-to-leg matching and ranking."""
from .models import CandidateProfile, LegCandidate, MatchResult, RiskLevel
from .proximity import ProximityScorer, compute_proximity
from .ranker import RankingAggregator, get_ranker, rank_legs
from .skill_matcher import SkillMatcher, compute_skill_match

__all__ = [
    "CandidateProfile",
    "LegCandidate",
    "MatchResult",
    "RiskLevel",
    "ProximityScorer",
    "compute_proximity",
    "RankingAggregator",
    "get_ranker",
    "rank_legs",
    "SkillMatcher",
    "compute_skill_match",
]
