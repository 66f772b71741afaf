"""Command line entry point for Crew Match.

Usage:
    crewmatch rank legs.yaml [--top N] [--min-score X]
    crewmatch crew search.yaml
    crewmatch regions [--category mediterranean] [--near LAT LNG]

Input files are YAML or JSON. `rank` expects a `profile` mapping and a
`legs` list; `crew` expects a `requirements` mapping and a `crew` list.
"""
import argparse
import logging
import sys
from pathlib import Path

import yaml

from config.settings import settings
from crewmatch.exceptions import CrewMatchError
from crewmatch.geo.regions import get_registry
from crewmatch.logging_config import setup_logging
from crewmatch.matching.crew_search import get_crew_search
from crewmatch.matching.models import GeoPoint
from crewmatch.matching.ranker import get_ranker
from crewmatch.matching.records import parse_crew, parse_legs, parse_profile, parse_requirements
from crewmatch.matching.skill_matcher import classify_match

logger = logging.getLogger(__name__)


def _load_document(path: str) -> dict:
    """Load a YAML or JSON document (JSON is valid YAML)."""
    with open(Path(path), encoding="utf-8") as f:
        data = yaml.safe_load(f)
    if not isinstance(data, dict):
        raise CrewMatchError(f"{path}: expected a mapping at the top level")
    return data


def cmd_rank(args) -> int:
    """Rank legs for a crew profile."""
    data = _load_document(args.file)
    profile = parse_profile(data.get("profile") or {})
    legs = parse_legs(data.get("legs") or [], skip_invalid=args.skip_invalid)

    ranker = get_ranker(settings)
    results = ranker.rank_legs(profile, legs)
    if args.min_score is not None:
        results = ranker.filter_by_score(results, args.min_score)
    if args.top is not None:
        results = ranker.get_top_legs(results, n=args.top)

    logger.info("Ranked %d legs", len(legs))
    for position, result in enumerate(results, start=1):
        tier = classify_match(result.skill_match_percentage, result.experience_matches)
        experience = "ok" if result.experience_matches else "below minimum"
        print(
            f"{position:>3}. {result.leg_id:<24} score={result.composite_score:6.2f} "
            f"skills={result.skill_match_percentage:>3}% ({tier.value}) experience={experience}"
        )
        if result.missing_skills:
            print(f"     missing: {', '.join(result.missing_skills)}")
    return 0


def cmd_crew(args) -> int:
    """Search crew for a skipper's requirements."""
    data = _load_document(args.file)
    requirements = parse_requirements(data.get("requirements"))
    candidates = parse_crew(data.get("crew") or [], skip_invalid=args.skip_invalid)

    result = get_crew_search(settings).search(candidates, requirements)
    print(f"{len(result.matches)} of {result.total_count} matching crew")
    for match in result.matches:
        distance = f" {match.distance_km:.0f} km" if match.distance_km is not None else ""
        print(f"  {match.candidate.crew_id:<24} score={match.match_score:>3}{distance}")
    return 0


def cmd_regions(args) -> int:
    """List cruising regions."""
    registry = get_registry(args.registry)

    regions = registry.list_regions(args.category)
    if args.near:
        point = GeoPoint(lat=args.near[0], lng=args.near[1])
        for region, distance in registry.sort_regions_by_distance(point, regions):
            print(f"  {region.name:<32} {region.category:<16} {distance:8.0f} km")
    else:
        for region in regions:
            print(f"  {region.name:<32} {region.category}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="crewmatch", description="Crew-to-leg matching")
    parser.add_argument("--log-level", default=None, help="Override the configured log level")
    parser.add_argument(
        "--trace-scoring", action="store_true", help="Log per-leg scoring breakdowns at DEBUG"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    rank = subparsers.add_parser("rank", help="Rank legs for a crew profile")
    rank.add_argument("file", help="YAML/JSON file with `profile` and `legs`")
    rank.add_argument("--top", type=int, default=None, help="Show only the top N legs")
    rank.add_argument("--min-score", type=float, default=None, help="Hide legs below this score")
    rank.add_argument("--skip-invalid", action="store_true", help="Skip unusable leg rows")
    rank.set_defaults(func=cmd_rank)

    crew = subparsers.add_parser("crew", help="Search crew for a skipper")
    crew.add_argument("file", help="YAML/JSON file with `requirements` and `crew`")
    crew.add_argument("--skip-invalid", action="store_true", help="Skip unusable crew rows")
    crew.set_defaults(func=cmd_crew)

    regions = subparsers.add_parser("regions", help="List cruising regions")
    regions.add_argument("--category", default=None, help="Only this category")
    regions.add_argument(
        "--near", nargs=2, type=float, metavar=("LAT", "LNG"), help="Sort by distance from a point"
    )
    regions.add_argument("--registry", default=None, help="Alternative regions YAML file")
    regions.set_defaults(func=cmd_regions)

    return parser


def main(argv=None) -> int:
    """Run the command line."""
    args = build_parser().parse_args(argv)
    setup_logging(level=args.log_level, trace_scoring=args.trace_scoring)

    try:
        return args.func(args)
    except (CrewMatchError, OSError, yaml.YAMLError) as e:
        logger.error("Error: %s", e)
        return 1


if __name__ == "__main__":
    sys.exit(main())
