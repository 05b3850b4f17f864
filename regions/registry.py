"""
Region registry: owns the region tree and its flat lookup index.

The tree is stored as an arena keyed by full path. Every node is indexed
twice: once in the flat `full_path -> Region` map used for constant-time
lookup, and once in its parent's child map used for tree walks. Reads
vastly outnumber writes (regions are registered once at startup from a
reference dataset), so the duplication is kept.
"""

from __future__ import annotations

import logging
from typing import Dict, Iterable, Iterator, List, Optional

from .models import ROOT_PATH, SEPARATOR, Region, join_path, split_path

LOG = logging.getLogger("regions.registry")


class RegionError(Exception):
    """Base exception for region errors."""

    pass


class RegionNotFoundError(RegionError, KeyError):
    """A region path does not resolve to a registered region."""

    def __init__(self, path: str):
        super().__init__(path)
        self.path = path

    def __str__(self) -> str:
        return f"Region not found: {self.path!r}"


class InvalidRegionPathError(RegionError, ValueError):
    """A region segment cannot be represented in a dash-joined path."""

    pass


class RegionRegistry:
    """
    Hierarchical namespace of regions built from dash-delimited paths.

    Example:
        registry = RegionRegistry()
        city = registry.add_region("India-Tamil Nadu-Keelakarai")
        registry.get_region("India-Tamil Nadu")   # created as a prefix
        registry.get_region("Narnia")             # None
    """

    def __init__(self) -> None:
        self._root = Region(name="", full_path=ROOT_PATH, parent_path=None)
        self._by_path: Dict[str, Region] = {}
        # parent full path -> segment name -> child full path
        self._children: Dict[str, Dict[str, str]] = {ROOT_PATH: {}}

    @property
    def root(self) -> Region:
        return self._root

    def add_region(self, path: str) -> Region:
        """
        Register a region and every missing prefix of its path.

        Idempotent: registering a known path returns the existing node.
        Consecutive separators yield empty segments, which are accepted
        as ordinary segment names below the top level. The empty path
        resolves to the root.

        Args:
            path: Dash-joined path such as "India-Tamil Nadu-Keelakarai"

        Returns:
            The region for the full path
        """
        return self._walk(path.split(SEPARATOR))

    def add_segments(self, segments: Iterable[str]) -> Region:
        """
        Register a region from already-separated segment names.

        Raises:
            InvalidRegionPathError: If no segments are given or a segment
                contains the path separator
        """
        parts = list(segments)
        if not parts:
            raise InvalidRegionPathError("Region path needs at least one segment")
        for part in parts:
            if SEPARATOR in part:
                raise InvalidRegionPathError(
                    f"Segment {part!r} contains the path separator {SEPARATOR!r}"
                )
        return self._walk(parts)

    def _walk(self, parts: List[str]) -> Region:
        current = self._root
        full_path = ROOT_PATH

        for part in parts:
            if current.is_root and part == ROOT_PATH:
                # An empty top-level segment would collide with the root's path.
                continue
            full_path = part if current.is_root else f"{full_path}{SEPARATOR}{part}"

            siblings = self._children[current.full_path]
            child_path = siblings.get(part)
            if child_path is not None:
                current = self._by_path[child_path]
                continue

            node = Region(name=part, full_path=full_path, parent_path=current.full_path)
            siblings[part] = full_path
            self._children[full_path] = {}
            self._by_path[full_path] = node
            LOG.debug("Registered region %r", full_path)
            current = node

        return current

    def get_region(self, path: str) -> Optional[Region]:
        """Look up a region by full path; None if it was never registered."""
        return self._by_path.get(path)

    def require_region(self, path: str) -> Region:
        """Look up a region by full path, raising RegionNotFoundError if absent."""
        region = self._by_path.get(path)
        if region is None:
            raise RegionNotFoundError(path)
        return region

    def children(self, region: Region) -> List[Region]:
        """Direct children of a region, in registration order."""
        child_map = self._children.get(region.full_path, {})
        return [self._by_path[path] for path in child_map.values()]

    def parent_of(self, region: Region) -> Optional[Region]:
        """Parent of a region; None for the root."""
        if region.parent_path is None:
            return None
        if region.parent_path == ROOT_PATH:
            return self._root
        return self._by_path.get(region.parent_path)

    def ancestors(self, region: Region) -> List[Region]:
        """Registered ancestors from the top level down, excluding the root."""
        parts = split_path(region.full_path)
        return [self._by_path[join_path(parts[:i])] for i in range(1, len(parts))]

    def __contains__(self, path: object) -> bool:
        return path in self._by_path

    def __len__(self) -> int:
        return len(self._by_path)

    def __iter__(self) -> Iterator[Region]:
        return iter(self._by_path.values())
