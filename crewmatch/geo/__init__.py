"""Cruising regions and geographic lookups."""
from .regions import LocationRegion, RegionRegistry, get_registry, load_regions

__all__ = ["LocationRegion", "RegionRegistry", "get_registry", "load_regions"]
