"""
Distributor graph: mutations and propagation of effective regions.

Every mutation recomputes the touched distributor and then cascades the
recomputation to everything reachable through child links, so that once
a call returns the distributor and all of its descendants are consistent.

The parent -> child relation is a general directed graph. It may branch
and rejoin (diamonds) and, unless cycles are rejected, it may loop. The
cascade therefore does not recurse naively: reachable distributors are
condensed into strongly connected components and recomputed in
topological order, each one exactly once per mutation.

Requires: networkx>=3.0
"""

from __future__ import annotations

import logging
from typing import Dict, Iterable, Iterator, List, Optional

import networkx as nx

from regions.models import Region

from .models import Distributor
from .permissions import allowed_by_all_parents, compute_effective_regions, has_permission

LOG = logging.getLogger("distributors.graph")


class DistributorError(Exception):
    """Base exception for distributor graph errors."""

    pass


class DistributorNotFoundError(DistributorError, KeyError):
    """No distributor is registered under the given id."""

    def __init__(self, distributor_id: str):
        super().__init__(distributor_id)
        self.distributor_id = distributor_id

    def __str__(self) -> str:
        return f"Distributor not found: {self.distributor_id!r}"


class DistributorExistsError(DistributorError, ValueError):
    """A distributor with the given id is already registered."""

    pass


class AuthorizationDeniedError(DistributorError):
    """A region was refused because some parent does not grant it."""

    def __init__(self, distributor_id: str, region: Region):
        super().__init__(
            f"cannot add region {region.full_path}: "
            "not authorized by all parent distributors"
        )
        self.distributor_id = distributor_id
        self.region = region


class CyclicDelegationError(DistributorError):
    """Linking a parent would make a distributor its own ancestor."""

    pass


class DistributorGraph:
    """
    Registry of distributors and their delegation links.

    Example:
        graph = DistributorGraph()
        graph.create_distributor("P", "Parent", [tamil_nadu])
        graph.create_distributor("C", "Child")
        graph.add_parent("C", "P")
        graph.add_region("C", keelakarai)
        graph.has_permission("C", keelakarai)   # True
        graph.exclude_region("P", keelakarai)
        graph.has_permission("C", keelakarai)   # False
    """

    def __init__(self, reject_cycles: bool = False):
        """
        Args:
            reject_cycles: Refuse parent links that would close a cycle
                instead of tolerating them.
        """
        self.reject_cycles = reject_cycles
        self._distributors: Dict[str, Distributor] = {}
        self._links = nx.DiGraph()  # parent id -> child id
        self._rank: Dict[str, int] = {}  # creation order

    # ─────────────────────────────────────────────────────────────────
    # Registry
    # ─────────────────────────────────────────────────────────────────

    def create_distributor(
        self,
        distributor_id: str,
        name: str,
        authorized: Iterable[Region] = (),
    ) -> Distributor:
        """
        Register a new distributor seeded with authorized regions.

        A fresh distributor has no parents, so the seed regions are not
        gated.

        Raises:
            DistributorExistsError: If the id is already taken
        """
        if distributor_id in self._distributors:
            raise DistributorExistsError(f"Distributor already exists: {distributor_id!r}")

        distributor = Distributor(id=distributor_id, name=name)
        for region in authorized:
            distributor.authorized_regions[region.full_path] = region

        self._distributors[distributor_id] = distributor
        self._rank[distributor_id] = len(self._rank)
        self._links.add_node(distributor_id)
        self._refresh(distributor)

        LOG.info(
            "Created distributor %s (%s) with %d authorized regions",
            distributor_id,
            name,
            len(distributor.authorized_regions),
        )
        return distributor

    def get(self, distributor_id: str) -> Optional[Distributor]:
        return self._distributors.get(distributor_id)

    def require(self, distributor_id: str) -> Distributor:
        distributor = self._distributors.get(distributor_id)
        if distributor is None:
            raise DistributorNotFoundError(distributor_id)
        return distributor

    def parents_of(self, distributor_id: str) -> List[Distributor]:
        distributor = self.require(distributor_id)
        return self._ordered(distributor.parent_ids)

    def children_of(self, distributor_id: str) -> List[Distributor]:
        distributor = self.require(distributor_id)
        return self._ordered(distributor.child_ids)

    def __contains__(self, distributor_id: object) -> bool:
        return distributor_id in self._distributors

    def __len__(self) -> int:
        return len(self._distributors)

    def __iter__(self) -> Iterator[Distributor]:
        return iter(self._distributors.values())

    # ─────────────────────────────────────────────────────────────────
    # Mutations
    # ─────────────────────────────────────────────────────────────────

    def add_region(self, distributor_id: str, region: Region) -> None:
        """
        Authorize a region for a distributor.

        Fails closed: the region must currently be granted by every
        parent, otherwise nothing changes.

        Raises:
            AuthorizationDeniedError: If some parent does not grant the region
        """
        distributor = self.require(distributor_id)
        if not allowed_by_all_parents(region, self._parents(distributor)):
            LOG.warning("Denied %s for distributor %s", region.full_path, distributor_id)
            raise AuthorizationDeniedError(distributor_id, region)

        distributor.authorized_regions[region.full_path] = region
        LOG.info("Authorized %s for distributor %s", region.full_path, distributor_id)
        self._refresh(distributor)
        self._propagate(distributor_id)

    def remove_region(self, distributor_id: str, region: Region) -> None:
        """Withdraw a region from a distributor's authorized set."""
        distributor = self.require(distributor_id)
        distributor.authorized_regions.pop(region.full_path, None)
        LOG.info("Removed %s from distributor %s", region.full_path, distributor_id)
        self._refresh(distributor)
        self._propagate(distributor_id)

    def exclude_region(self, distributor_id: str, region: Region) -> None:
        """
        Add a standing veto on a region and everything below it.

        The region does not need to be authorized; the veto also applies
        to regions authorized later.
        """
        distributor = self.require(distributor_id)
        distributor.excluded_regions[region.full_path] = region
        LOG.info("Excluded %s for distributor %s", region.full_path, distributor_id)
        self._refresh(distributor)
        self._propagate(distributor_id)

    def add_parent(self, child_id: str, parent_id: Optional[str]) -> None:
        """
        Link `parent_id` as a parent of `child_id`.

        A None parent is a no-op. Re-linking an existing parent is
        harmless.

        Raises:
            CyclicDelegationError: If cycles are rejected and the link
                would make the child its own ancestor
        """
        if parent_id is None:
            return
        child = self.require(child_id)
        parent = self.require(parent_id)

        if self.reject_cycles and self._reaches(child_id, parent_id):
            raise CyclicDelegationError(
                f"Linking {parent_id!r} as parent of {child_id!r} would create a cycle"
            )

        child.parent_ids.add(parent_id)
        parent.child_ids.add(child_id)
        self._links.add_edge(parent_id, child_id)
        LOG.info("Linked %s as parent of %s", parent_id, child_id)
        self._refresh(child)
        self._propagate(child_id)

    # ─────────────────────────────────────────────────────────────────
    # Queries
    # ─────────────────────────────────────────────────────────────────

    def has_permission(self, distributor_id: str, region: Region) -> bool:
        """Check whether a distributor may currently operate in a region."""
        return has_permission(self.require(distributor_id), region)

    def descendants(self, distributor_id: str) -> List[str]:
        """Ids recomputed by a mutation of `distributor_id`, in cascade order."""
        self.require(distributor_id)
        return self._cascade_order(distributor_id)

    # ─────────────────────────────────────────────────────────────────
    # Recomputation
    # ─────────────────────────────────────────────────────────────────

    def _parents(self, distributor: Distributor) -> List[Distributor]:
        return [self._distributors[pid] for pid in distributor.parent_ids]

    def _ordered(self, ids: Iterable[str]) -> List[Distributor]:
        return [self._distributors[i] for i in sorted(ids, key=self._rank.__getitem__)]

    def _reaches(self, source_id: str, target_id: str) -> bool:
        return source_id == target_id or nx.has_path(self._links, source_id, target_id)

    def _refresh(self, distributor: Distributor) -> None:
        distributor.effective_regions = compute_effective_regions(
            distributor, self._parents(distributor)
        )
        LOG.debug(
            "Recomputed %s: %d effective regions",
            distributor.id,
            len(distributor.effective_regions),
        )

    def _cascade_order(self, origin_id: str) -> List[str]:
        """
        Order in which the descendants of `origin_id` are recomputed.

        Strongly connected components come out in topological order, so a
        distributor is only recomputed after every parent it has inside
        the cascade. Members of one component follow creation order. The
        origin itself is excluded even when it sits on a cycle.
        """
        reachable = nx.descendants(self._links, origin_id)
        reachable.discard(origin_id)
        if not reachable:
            return []

        condensed = nx.condensation(self._links.subgraph(reachable))
        order: List[str] = []
        for component in nx.topological_sort(condensed):
            members = condensed.nodes[component]["members"]
            order.extend(sorted(members, key=self._rank.__getitem__))
        return order

    def _propagate(self, origin_id: str) -> None:
        order = self._cascade_order(origin_id)
        for distributor_id in order:
            self._refresh(self._distributors[distributor_id])
        if order:
            LOG.debug("Propagated change from %s to %d descendants", origin_id, len(order))
