"""
Distributor permission graph.

Distributors hold authorized and excluded regions plus links to parent
distributors whose own authorization must also be satisfied. The graph
keeps every distributor's effective region set consistent as its own
sets or any ancestor's sets change.

Usage:
    from distributors import DistributorGraph

    graph = DistributorGraph()
    graph.create_distributor("D1", "North", [india])
    graph.create_distributor("D2", "South")
    graph.add_parent("D2", "D1")
    graph.add_region("D2", tamil_nadu)
    graph.has_permission("D2", keelakarai)
"""

from distributors.graph import (
    AuthorizationDeniedError,
    CyclicDelegationError,
    DistributorError,
    DistributorExistsError,
    DistributorGraph,
    DistributorNotFoundError,
)
from distributors.models import Distributor
from distributors.permissions import (
    allowed_by_all_parents,
    compute_effective_regions,
    has_permission,
    parent_grants,
)

__all__ = [
    "AuthorizationDeniedError",
    "CyclicDelegationError",
    "Distributor",
    "DistributorError",
    "DistributorExistsError",
    "DistributorGraph",
    "DistributorNotFoundError",
    "allowed_by_all_parents",
    "compute_effective_regions",
    "has_permission",
    "parent_grants",
]
