"""
Hierarchical geographic regions.

Regions are addressed by dash-joined paths from country down to city:
- Country:  India
- Province: India-Tamil Nadu
- City:     India-Tamil Nadu-Keelakarai

The registry builds the tree from path strings and answers exact-path
lookups in constant time; `is_subregion` answers prefix containment.
"""

from regions.loader import LoadReport, load_regions_csv
from regions.models import ROOT_PATH, SEPARATOR, Region, is_subregion, join_path, split_path
from regions.registry import (
    InvalidRegionPathError,
    RegionError,
    RegionNotFoundError,
    RegionRegistry,
)

__all__ = [
    "InvalidRegionPathError",
    "LoadReport",
    "ROOT_PATH",
    "Region",
    "RegionError",
    "RegionNotFoundError",
    "RegionRegistry",
    "SEPARATOR",
    "is_subregion",
    "join_path",
    "load_regions_csv",
    "split_path",
]
