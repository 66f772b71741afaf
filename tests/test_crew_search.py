"""Tests for crew search scoring."""
import pytest

from config.settings import Settings
from crewmatch.matching.crew_search import (
    NEUTRAL_CREW_SCORE,
    CrewCandidate,
    CrewRequirements,
    CrewSearch,
    get_crew_search,
    score_crew,
    search_crew,
)
from crewmatch.matching.models import GeoPoint, RiskLevel
from crewmatch.matching.scorer_protocol import CrewScorer


@pytest.fixture
def requirements():
    """A skipper wanting an offshore-capable crew with some experience."""
    return CrewRequirements(
        experience_level=2,
        risk_levels=(RiskLevel.OFFSHORE,),
        skills=frozenset({"navigation", "first_aid", "cooking", "engine_maintenance"}),
    )


class TestScoreCrew:
    """Tests for score_crew."""

    def test_no_criteria_is_neutral(self):
        candidate = CrewCandidate(crew_id="c1", experience_level=3)
        assert score_crew(candidate, CrewRequirements()) == NEUTRAL_CREW_SCORE

    def test_perfect_match(self, requirements):
        candidate = CrewCandidate(
            crew_id="c1",
            experience_level=4,
            risk_levels=(RiskLevel.COASTAL, RiskLevel.OFFSHORE),
            skills=frozenset({"navigation", "first_aid", "cooking", "engine_maintenance", "diving"}),
        )
        assert score_crew(candidate, requirements) == 100

    def test_partial_skills(self, requirements):
        """34 + 33 + 33/4 = 75.25 of 100."""
        candidate = CrewCandidate(
            crew_id="c1",
            experience_level=3,
            risk_levels=(RiskLevel.OFFSHORE,),
            skills=frozenset({"navigation"}),
        )
        assert score_crew(candidate, requirements) == 75

    def test_only_specified_criteria_count(self):
        """With only skills requested, skills alone make up the score."""
        candidate = CrewCandidate(crew_id="c1", skills=frozenset({"navigation"}))
        requirements = CrewRequirements(skills=frozenset({"navigation", "cooking"}))

        assert score_crew(candidate, requirements) == 50

    def test_missing_experience_scores_nothing_for_it(self):
        candidate = CrewCandidate(crew_id="c1", risk_levels=(RiskLevel.OFFSHORE,))
        requirements = CrewRequirements(experience_level=1, risk_levels=(RiskLevel.OFFSHORE,))

        # 33 of 67
        assert score_crew(candidate, requirements) == 49


class TestCrewSearch:
    """Tests for CrewSearch filtering and ranking."""

    def test_filters_hard_criteria(self, requirements):
        candidates = [
            CrewCandidate("novice", experience_level=1, risk_levels=(RiskLevel.OFFSHORE,)),
            CrewCandidate("unknown", risk_levels=(RiskLevel.OFFSHORE,)),
            CrewCandidate("coastal", experience_level=3, risk_levels=(RiskLevel.COASTAL,)),
            CrewCandidate("ok", experience_level=2, risk_levels=(RiskLevel.OFFSHORE,)),
        ]

        result = search_crew(candidates, requirements)

        assert [m.candidate.crew_id for m in result.matches] == ["ok"]
        assert result.total_count == 1

    def test_ranks_by_score_stably(self, requirements):
        base = dict(experience_level=3, risk_levels=(RiskLevel.OFFSHORE,))
        candidates = [
            CrewCandidate("one-skill-a", skills=frozenset({"navigation"}), **base),
            CrewCandidate("all-skills", skills=requirements.skills, **base),
            CrewCandidate("one-skill-b", skills=frozenset({"cooking"}), **base),
        ]

        result = search_crew(candidates, requirements)

        assert [m.candidate.crew_id for m in result.matches] == ["all-skills", "one-skill-a", "one-skill-b"]
        assert [m.match_score for m in result.matches] == [100, 75, 75]

    def test_radius_filter(self):
        requirements = CrewRequirements(location=GeoPoint(lat=0, lng=0), radius_km=100)
        candidates = [
            CrewCandidate("near", location=GeoPoint(lat=0, lng=0.5)),
            CrewCandidate("far", location=GeoPoint(lat=0, lng=2)),
            CrewCandidate("anywhere"),
        ]

        result = search_crew(candidates, requirements)

        ids = [m.candidate.crew_id for m in result.matches]
        assert ids == ["near", "anywhere"]
        assert result.matches[0].distance_km == pytest.approx(55.6, abs=0.1)
        assert result.matches[1].distance_km is None

    def test_default_radius(self):
        requirements = CrewRequirements(location=GeoPoint(lat=0, lng=0))
        candidates = [
            CrewCandidate("within", location=GeoPoint(lat=0, lng=4)),
            CrewCandidate("beyond", location=GeoPoint(lat=0, lng=5)),
        ]

        result = CrewSearch(default_radius_km=500).search(candidates, requirements)

        assert [m.candidate.crew_id for m in result.matches] == ["within"]

    def test_limit_is_capped(self):
        candidates = [CrewCandidate(f"crew-{i}") for i in range(60)]

        result = search_crew(candidates, CrewRequirements(limit=100))

        assert len(result.matches) == 50
        assert result.total_count == 60

    def test_default_limit(self):
        candidates = [CrewCandidate(f"crew-{i}") for i in range(15)]

        result = search_crew(candidates, CrewRequirements())

        assert len(result.matches) == 10
        assert result.total_count == 15

    def test_empty(self):
        result = search_crew([], CrewRequirements())

        assert result.matches == []
        assert result.total_count == 0

    def test_satisfies_protocol(self):
        assert isinstance(CrewSearch(), CrewScorer)

    def test_settings_factory(self):
        search = get_crew_search(Settings(crew_search_default_limit=3, crew_search_radius_km=50))
        candidates = [CrewCandidate(f"crew-{i}") for i in range(5)]

        assert len(search.search(candidates, CrewRequirements()).matches) == 3
        assert search.default_radius_km == 50
