"""Skill name normalization.

Profiles, journeys and legs store skills in slightly different shapes:
display names ("Sailing Experience"), canonical names ("sailing_experience"),
JSON strings carrying a description, or already-parsed objects. Everything is
compared in canonical form.
"""
import json
import logging
import re
from typing import Any, Iterable

logger = logging.getLogger(__name__)

_WHITESPACE = re.compile(r"\s+")

# Keys under which a skill object may carry its name, in lookup order
_NAME_KEYS = ("skill_name", "skillName", "skill Name", "name")


def to_canonical_skill_name(skill_name: Any) -> str:
    """Convert a skill name to canonical storage format.

    "Navigation" -> "navigation", "Sailing Experience" -> "sailing_experience".
    """
    if not isinstance(skill_name, str):
        return ""
    return _WHITESPACE.sub("_", skill_name.strip().lower())


def to_display_skill_name(canonical_name: Any) -> str:
    """Convert a canonical skill name to Title Case with spaces."""
    if not isinstance(canonical_name, str) or not canonical_name:
        return ""
    return " ".join(word[:1].upper() + word[1:] for word in canonical_name.split("_"))


def _name_from_mapping(value: dict) -> str:
    for key in _NAME_KEYS:
        name = value.get(key)
        if name:
            return str(name)
    return ""


def _extract_skill_name(value: Any) -> str:
    if isinstance(value, dict):
        return _name_from_mapping(value)

    if not isinstance(value, str):
        return ""

    stripped = value.strip()
    if stripped.startswith("{"):
        try:
            parsed = json.loads(stripped)
        except ValueError:
            # Not JSON after all: drop the braces and use what's left
            return stripped.strip("{}")
        if isinstance(parsed, dict):
            return _name_from_mapping(parsed)
        return ""

    return stripped


def normalize_skill_names(values: Iterable[Any] | None) -> list[str]:
    """Normalize a list of skills to canonical names.

    Accepts plain strings, JSON strings ('{"skill_name": "navigation"}') and
    mappings with a skill name key. Order is preserved, empty names and
    duplicates are dropped.
    """
    if values is None or isinstance(values, (str, bytes, dict)):
        return []

    seen: set[str] = set()
    names: list[str] = []
    for value in values:
        canonical = to_canonical_skill_name(_extract_skill_name(value))
        if not canonical:
            if value not in (None, ""):
                logger.debug("Ignoring unrecognised skill entry: %r", value)
            continue
        if canonical not in seen:
            seen.add(canonical)
            names.append(canonical)

    return names
