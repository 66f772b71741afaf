"""Pytest fixtures for Crew Match tests."""
import sys
from pathlib import Path

import pytest
import yaml

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from crewmatch.matching.models import (
    BoundingBox,
    CandidateProfile,
    GeoPoint,
    LegCandidate,
    PreferredLocation,
    RiskLevel,
)


# =============================================================================
# SCORING INPUT FIXTURES
# =============================================================================


@pytest.fixture
def make_profile():
    """
    Factory fixture for candidate profiles.

    Usage:
        profile = make_profile(skills={"navigation"}, experience_level=2)
    """

    def _make(
        skills=(),
        risk_levels=(),
        experience_level=None,
        preferred_departure=None,
        preferred_arrival=None,
    ):
        return CandidateProfile(
            skills=frozenset(skills),
            risk_levels=tuple(risk_levels),
            experience_level=experience_level,
            preferred_departure=preferred_departure,
            preferred_arrival=preferred_arrival,
        )

    return _make


@pytest.fixture
def make_leg():
    """Factory fixture for leg candidates."""

    def _make(
        leg_id="leg-1",
        required_skills=(),
        leg_risk_level=None,
        journey_risk_level=None,
        min_experience_level=None,
        start_waypoint=None,
        end_waypoint=None,
    ):
        return LegCandidate(
            leg_id=leg_id,
            required_skills=frozenset(required_skills),
            leg_risk_level=leg_risk_level,
            journey_risk_level=journey_risk_level,
            min_experience_level=min_experience_level,
            start_waypoint=start_waypoint,
            end_waypoint=end_waypoint,
        )

    return _make


@pytest.fixture
def canary_islands():
    """Cruising-region preference around the Canary Islands."""
    return PreferredLocation(
        point=GeoPoint(lat=28.5, lng=-16.0),
        bbox=BoundingBox(min_lng=-18.5, min_lat=27.5, max_lng=-13.3, max_lat=29.5),
        name="Canary Islands",
    )


@pytest.fixture
def offshore_profile(make_profile):
    """A crew member comfortable up to offshore sailing."""
    return make_profile(
        skills={"navigation", "cooking", "first_aid"},
        risk_levels=(RiskLevel.COASTAL, RiskLevel.OFFSHORE),
        experience_level=3,
    )


# =============================================================================
# FILE FIXTURES
# =============================================================================


@pytest.fixture
def write_yaml(tmp_path):
    """Write a document to a YAML file under tmp_path and return its path."""

    def _write(data, name="data.yaml"):
        path = tmp_path / name
        path.write_text(yaml.safe_dump(data, allow_unicode=True), encoding="utf-8")
        return path

    return _write
