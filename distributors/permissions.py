"""
Permission calculus over distributors.

Pure functions: none of them mutate a distributor or consult a registry.

Rules:
- A parent vetoes any region under one of its excluded regions.
- Otherwise a parent grants a region under any of its effective regions.
- A region flows down only if every parent grants it (joint custody).
- A distributor's own excluded regions always win.
"""

from __future__ import annotations

from typing import Dict, Iterable

from regions.models import Region, is_subregion

from .models import Distributor


def _under_any(region: Region, references: Iterable[Region]) -> bool:
    return any(is_subregion(region, ref) for ref in references)


def parent_grants(parent: Distributor, candidate: Region) -> bool:
    """Check a single parent's gate: no exclusion covers it, some effective region does."""
    if _under_any(candidate, parent.excluded_regions.values()):
        return False
    return _under_any(candidate, parent.effective_regions.values())


def allowed_by_all_parents(candidate: Region, parents: Iterable[Distributor]) -> bool:
    """
    Check that every parent grants `candidate`.

    Zero parents trivially passes.
    """
    return all(parent_grants(parent, candidate) for parent in parents)


def compute_effective_regions(
    distributor: Distributor, parents: Iterable[Distributor]
) -> Dict[str, Region]:
    """
    Derive a distributor's effective regions from its own sets and its parents.

    Each authorized region is validated against the parent gate on its
    own, so a region can stay authorized while dropping out of the
    effective set after a parent revokes it. Excluded paths are removed
    last.
    """
    parents = list(parents)
    if not parents:
        effective = dict(distributor.authorized_regions)
    else:
        effective = {
            path: region
            for path, region in distributor.authorized_regions.items()
            if allowed_by_all_parents(region, parents)
        }

    for path in distributor.excluded_regions:
        effective.pop(path, None)
    return effective


def has_permission(distributor: Distributor, region: Region) -> bool:
    """
    Point-in-time permission query.

    Local exclusions are checked again here rather than trusted to the
    cached effective set; the distributor's effective regions are
    alternatives, so any one of them suffices.
    """
    if _under_any(region, distributor.excluded_regions.values()):
        return False
    return _under_any(region, distributor.effective_regions.values())
