"""
Distributor record.

A distributor holds the regions it was authorized for, the regions it
explicitly excludes, and id-keyed links to its parent and child
distributors. `effective_regions` is derived state maintained by
DistributorGraph; it is never written directly by callers.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Set

from regions.models import Region


@dataclass
class Distributor:
    """A principal operating in a set of regions."""

    id: str
    name: str
    authorized_regions: Dict[str, Region] = field(default_factory=dict)
    excluded_regions: Dict[str, Region] = field(default_factory=dict)
    effective_regions: Dict[str, Region] = field(default_factory=dict)
    parent_ids: Set[str] = field(default_factory=set)
    child_ids: Set[str] = field(default_factory=set)

    def __hash__(self) -> int:
        return hash(self.id)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Distributor):
            return False
        return self.id == other.id

    @property
    def authorized_paths(self) -> List[str]:
        return sorted(self.authorized_regions)

    @property
    def excluded_paths(self) -> List[str]:
        return sorted(self.excluded_regions)

    @property
    def effective_paths(self) -> List[str]:
        return sorted(self.effective_regions)
