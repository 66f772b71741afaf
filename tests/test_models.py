"""Tests for scoring input models and skill names."""
import pytest

from crewmatch.matching.models import (
    BoundingBox,
    CandidateProfile,
    GeoPoint,
    LegCandidate,
    PreferredLocation,
    RiskLevel,
)
from crewmatch.matching.skills import (
    normalize_skill_names,
    to_canonical_skill_name,
    to_display_skill_name,
)


class TestRiskLevel:
    """Tests for risk label parsing."""

    @pytest.mark.parametrize(
        "label",
        ["Coastal sailing", "CoastalSailing", "coastal_sailing", "coastal", "COASTAL"],
    )
    def test_parse_spellings(self, label):
        assert RiskLevel.parse(label) == RiskLevel.COASTAL

    def test_parse_unknown(self):
        assert RiskLevel.parse("Ocean racing") is None
        assert RiskLevel.parse(None) is None
        assert RiskLevel.parse(3) is None

    def test_parse_passes_through_members(self):
        assert RiskLevel.parse(RiskLevel.EXTREME) is RiskLevel.EXTREME

    def test_values_are_stored_labels(self):
        assert RiskLevel.OFFSHORE.value == "Offshore sailing"


class TestGeometry:
    """Tests for GeoPoint and BoundingBox."""

    def test_center(self):
        box = BoundingBox(min_lng=-10, min_lat=20, max_lng=10, max_lat=40)
        assert box.center == GeoPoint(lat=30, lng=0)

    def test_contains_is_inclusive(self):
        box = BoundingBox(min_lng=0, min_lat=0, max_lng=1, max_lat=1)

        assert box.contains(GeoPoint(lat=0, lng=0))
        assert box.contains(GeoPoint(lat=1, lng=1))
        assert box.contains(GeoPoint(lat=0.5, lng=0.5))
        assert not box.contains(GeoPoint(lat=1.01, lng=0.5))

    def test_preferred_location_needs_point_or_box(self):
        with pytest.raises(ValueError):
            PreferredLocation()

    def test_cruising_region_flag(self, canary_islands):
        assert canary_islands.is_cruising_region
        assert not PreferredLocation(point=GeoPoint(lat=0, lng=0)).is_cruising_region


class TestProfileAndLeg:
    """Tests for CandidateProfile and LegCandidate invariants."""

    @pytest.mark.parametrize("level", [0, 5])
    def test_profile_experience_out_of_range(self, level):
        with pytest.raises(ValueError):
            CandidateProfile(experience_level=level)

    def test_leg_experience_out_of_range(self):
        with pytest.raises(ValueError):
            LegCandidate(leg_id="x", min_experience_level=9)

    def test_location_preference_flag(self, make_profile):
        assert not make_profile().has_location_preference
        assert make_profile(
            preferred_arrival=PreferredLocation(point=GeoPoint(lat=0, lng=0))
        ).has_location_preference

    def test_effective_risk_level(self, make_leg):
        assert make_leg().effective_risk_level is None
        assert make_leg(journey_risk_level=RiskLevel.OFFSHORE).effective_risk_level == RiskLevel.OFFSHORE
        assert (
            make_leg(leg_risk_level=RiskLevel.COASTAL, journey_risk_level=RiskLevel.OFFSHORE).effective_risk_level
            == RiskLevel.COASTAL
        )


class TestSkillNames:
    """Tests for skill name normalization."""

    def test_canonical(self):
        assert to_canonical_skill_name("Navigation") == "navigation"
        assert to_canonical_skill_name("  Sailing   Experience ") == "sailing_experience"
        assert to_canonical_skill_name(None) == ""

    def test_display(self):
        assert to_display_skill_name("sailing_experience") == "Sailing Experience"
        assert to_display_skill_name("") == ""

    def test_normalize_mixed_inputs(self):
        """Strings, JSON strings and objects all end up canonical and unique."""
        values = [
            "Navigation",
            "navigation",
            "",
            None,
            {"name": "First Aid"},
            '{"skill_name": "Engine Maintenance", "description": "Yanmar diesel"}',
            "{broken",
        ]

        assert normalize_skill_names(values) == [
            "navigation",
            "first_aid",
            "engine_maintenance",
            "broken",
        ]

    def test_normalize_rejects_scalars(self):
        """A bare string is not a list of skills."""
        assert normalize_skill_names("navigation") == []
        assert normalize_skill_names(None) == []
