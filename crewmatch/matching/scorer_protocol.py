"""Interfaces for the two ranking directions.

Crew members rank legs (LegScorer); skippers rank crew (CrewScorer).
RankingAggregator and CrewSearch are the weighted-score implementations.
A host can swap in its own engine as long as it keeps these signatures.
"""
from typing import Protocol, runtime_checkable

from crewmatch.matching.crew_search import CrewCandidate, CrewRequirements, CrewSearchResult
from crewmatch.matching.models import CandidateProfile, LegCandidate, MatchResult


@runtime_checkable
class LegScorer(Protocol):
    """Ranks legs for one crew member, best first, dropping none."""

    def rank_legs(
        self, profile: CandidateProfile, legs: list[LegCandidate]
    ) -> list[MatchResult]:
        ...


@runtime_checkable
class CrewScorer(Protocol):
    """Filters and ranks crew members for one skipper's requirements."""

    def search(
        self, candidates: list[CrewCandidate], requirements: CrewRequirements
    ) -> CrewSearchResult:
        ...
