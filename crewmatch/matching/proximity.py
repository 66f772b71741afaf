"""Geographic proximity scoring between a leg waypoint and a location preference."""
import math
from typing import Optional

from crewmatch.matching.models import GeoPoint, PreferredLocation

EARTH_RADIUS_KM = 6371.0

# Score lost per kilometre: 100 - distance/50 reaches zero at 5000 km
DECAY_KM_PER_POINT = 50.0

# Returned when either side is unknown, so missing data neither helps nor hurts
NEUTRAL_SCORE = 50.0


def haversine_km(a: GeoPoint, b: GeoPoint) -> float:
    """Great-circle distance between two points in kilometres."""
    d_lat = math.radians(b.lat - a.lat)
    d_lng = math.radians(b.lng - a.lng)

    h = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(a.lat)) * math.cos(math.radians(b.lat)) * math.sin(d_lng / 2) ** 2
    )
    h = min(1.0, h)  # rounding can push antipodal points past 1
    return EARTH_RADIUS_KM * 2 * math.atan2(math.sqrt(h), math.sqrt(1 - h))


class ProximityScorer:
    """Score closeness of a waypoint to a preferred point or cruising region."""

    def __init__(
        self,
        decay_km_per_point: float = DECAY_KM_PER_POINT,
        neutral_score: float = NEUTRAL_SCORE,
    ):
        if decay_km_per_point <= 0:
            raise ValueError("decay_km_per_point must be positive")
        self.decay_km_per_point = decay_km_per_point
        self.neutral_score = neutral_score

    def score(
        self,
        waypoint: Optional[GeoPoint],
        preferred: Optional[PreferredLocation],
    ) -> float:
        """
        Proximity score in [0, 100].

        A waypoint inside a preferred cruising region scores 100. Otherwise
        the score decays linearly with distance to the preferred point, or to
        the region's center.
        """
        if waypoint is None or preferred is None:
            return self.neutral_score

        if preferred.bbox is not None:
            if preferred.bbox.contains(waypoint):
                return 100.0
            target = preferred.bbox.center
        else:
            target = preferred.point

        return self._decay(haversine_km(waypoint, target))

    def _decay(self, distance_km: float) -> float:
        return max(0.0, 100.0 - distance_km / self.decay_km_per_point)


def compute_proximity(
    waypoint: Optional[GeoPoint],
    preferred: Optional[PreferredLocation],
) -> float:
    """Proximity score with the default decay and neutral score."""
    return _default_scorer.score(waypoint, preferred)


_default_scorer = ProximityScorer()
