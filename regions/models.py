"""
Hierarchical geographic region model.

Regions are addressed by dash-joined paths from the root of the hierarchy:

    India                         # Country
    India-Tamil Nadu              # Province
    India-Tamil Nadu-Keelakarai   # City

The full path doubles as display format and identity key. The implicit
root has the empty path and contains every other region.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Optional

SEPARATOR = "-"
ROOT_PATH = ""


def split_path(path: str) -> List[str]:
    """Split a region path into its segments. The root path has none."""
    if path == ROOT_PATH:
        return []
    return path.split(SEPARATOR)


def join_path(segments: Iterable[str]) -> str:
    """Join segments back into a canonical region path."""
    return SEPARATOR.join(segments)


@dataclass(frozen=True)
class Region:
    """
    Node in the region hierarchy.

    Immutable and hashable. The parent is held by path rather than by
    reference; the owning RegionRegistry resolves it.

    Examples:
        >>> r = Region(name="Keelakarai", full_path="India-Tamil Nadu-Keelakarai",
        ...            parent_path="India-Tamil Nadu")
        >>> r.depth
        3
        >>> Region("Tamil Nadu", "India-Tamil Nadu", "India").contains(r)
        True
    """

    name: str
    full_path: str
    parent_path: Optional[str] = None

    @property
    def segments(self) -> List[str]:
        return split_path(self.full_path)

    @property
    def depth(self) -> int:
        """Number of segments below the root. The root has depth 0."""
        return len(self.segments)

    @property
    def is_root(self) -> bool:
        return self.parent_path is None and self.full_path == ROOT_PATH

    def contains(self, other: "Region") -> bool:
        """Check if `other` is this region or lies anywhere below it."""
        return is_subregion(other, self)

    def __str__(self) -> str:
        return self.full_path

    def __repr__(self) -> str:
        return f"Region({self.full_path!r})"


def is_subregion(candidate: Region, reference: Optional[Region]) -> bool:
    """
    Check whether `candidate` equals or descends from `reference`.

    The test is purely positional on path segments: the reference's
    segments must be a prefix of the candidate's. A root reference (empty
    path) matches everything; a missing reference matches nothing.

    Examples:
        India-Tamil Nadu-Keelakarai under India-Tamil Nadu   # True
        India-Tamil Nadu under India-Tamil Nadu              # True
        India-Tamil Nadu under India-Tamil Nadu-Keelakarai   # False
        India-Tamil under India-Tamil Nadu                   # False
    """
    if reference is None:
        return False
    if reference.full_path == ROOT_PATH:
        return True

    candidate_parts = split_path(candidate.full_path)
    reference_parts = split_path(reference.full_path)
    if len(candidate_parts) < len(reference_parts):
        return False
    return candidate_parts[: len(reference_parts)] == reference_parts
