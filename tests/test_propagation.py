"""
Tests for propagation of effective regions through the distributor graph.

Graphs used:

    chain:    root -> mid -> leaf
    diamond:  top -> left, top -> right, left -> bottom, right -> bottom
    cycle:    a -> b -> a
"""

from __future__ import annotations

import logging

import pytest

from distributors import AuthorizationDeniedError, CyclicDelegationError, DistributorGraph

KEELAKARAI = "India-Tamil Nadu-Keelakarai"
CHENNAI = "India-Tamil Nadu-Chennai"
TAMIL_NADU = "India-Tamil Nadu"
INDIA = "India"


@pytest.fixture
def chain(graph, registry):
    graph.create_distributor("root", "Root", [registry.get_region(INDIA)])
    graph.create_distributor("mid", "Mid")
    graph.create_distributor("leaf", "Leaf")
    graph.add_parent("mid", "root")
    graph.add_parent("leaf", "mid")
    graph.add_region("mid", registry.get_region(TAMIL_NADU))
    graph.add_region("leaf", registry.get_region(KEELAKARAI))
    return graph


class TestScenario:
    def test_parent_exclusion_revokes_child(self, registry):
        """Excluding a city on the parent revokes it on the child without touching the child."""
        registry.add_region("India-Tamil Nadu-Keelakarai")
        registry.add_region("India-Tamil Nadu")
        graph = DistributorGraph()
        graph.create_distributor("P", "Parent", [registry.get_region(TAMIL_NADU)])
        graph.create_distributor("C", "Child")
        graph.add_parent("C", "P")

        keelakarai = registry.get_region(KEELAKARAI)
        graph.add_region("C", keelakarai)
        assert graph.has_permission("C", keelakarai)

        graph.exclude_region("P", keelakarai)
        assert not graph.has_permission("C", keelakarai)
        assert graph.get("C").effective_paths == []


class TestChain:
    def test_reaches_grandchildren(self, chain, registry):
        assert chain.has_permission("leaf", registry.get_region(KEELAKARAI))

        chain.exclude_region("root", registry.get_region(TAMIL_NADU))

        assert chain.get("mid").effective_paths == []
        assert chain.get("leaf").effective_paths == []
        assert not chain.has_permission("leaf", registry.get_region(KEELAKARAI))

    def test_removal_at_root_reaches_grandchildren(self, chain, registry):
        chain.remove_region("root", registry.get_region(INDIA))
        assert not chain.has_permission("leaf", registry.get_region(KEELAKARAI))

    def test_restoring_root_restores_descendants(self, chain, registry):
        """Authorized regions survive revocation and come back when the parent re-grants."""
        chain.remove_region("root", registry.get_region(INDIA))
        chain.add_region("root", registry.get_region(INDIA))

        assert chain.get("leaf").effective_paths == [KEELAKARAI]
        assert chain.has_permission("leaf", registry.get_region(KEELAKARAI))

    def test_parent_exclusion_of_subregion_keeps_broader_grant(self, graph, registry):
        """The parent gate validates whole authorized regions, not their subregions."""
        graph.create_distributor("p", "P", [registry.get_region(TAMIL_NADU)])
        graph.create_distributor("c", "C")
        graph.add_parent("c", "p")
        graph.add_region("c", registry.get_region(TAMIL_NADU))

        graph.exclude_region("p", registry.get_region(KEELAKARAI))

        assert not graph.has_permission("p", registry.get_region(KEELAKARAI))
        assert graph.get("c").effective_paths == [TAMIL_NADU]

    def test_unrelated_subtree_untouched(self, chain, registry):
        chain.exclude_region("root", registry.get_region("India-Karnataka"))
        assert chain.has_permission("leaf", registry.get_region(KEELAKARAI))

    def test_descendants_order(self, chain):
        assert chain.descendants("root") == ["mid", "leaf"]
        assert chain.descendants("leaf") == []


class TestMultipleParents:
    @pytest.fixture
    def joint(self, graph, registry):
        graph.create_distributor("P1", "India", [registry.get_region(INDIA)])
        graph.create_distributor("P2", "Tamil Nadu", [registry.get_region(TAMIL_NADU)])
        graph.create_distributor("C", "Child")
        graph.add_parent("C", "P1")
        graph.add_parent("C", "P2")
        graph.add_region("C", registry.get_region(KEELAKARAI))
        return graph

    def test_granted_only_when_both_grant(self, joint, registry):
        keelakarai = registry.get_region(KEELAKARAI)
        assert joint.has_permission("P1", keelakarai)
        assert joint.has_permission("P2", keelakarai)
        assert joint.has_permission("C", keelakarai)

    def test_revoking_from_either_parent_revokes_child(self, joint, registry):
        keelakarai = registry.get_region(KEELAKARAI)
        joint.exclude_region("P2", keelakarai)

        assert joint.has_permission("P1", keelakarai)
        assert not joint.has_permission("C", keelakarai)

    def test_removal_from_other_parent_revokes_child(self, joint, registry):
        joint.remove_region("P1", registry.get_region(INDIA))
        assert not joint.has_permission("C", registry.get_region(KEELAKARAI))

    def test_child_cannot_exceed_narrower_parent(self, joint, registry):
        with pytest.raises(AuthorizationDeniedError):
            joint.add_region("C", registry.get_region("India-Karnataka"))


class TestDiamond:
    @pytest.fixture
    def diamond(self, graph, registry):
        graph.create_distributor("top", "Top", [registry.get_region(INDIA)])
        for name in ("left", "right", "bottom"):
            graph.create_distributor(name, name.title())
        graph.add_parent("left", "top")
        graph.add_parent("right", "top")
        graph.add_parent("bottom", "left")
        graph.add_parent("bottom", "right")
        for name in ("left", "right", "bottom"):
            graph.add_region(name, registry.get_region(TAMIL_NADU))
        return graph

    def test_bottom_recomputed_after_both_sides(self, diamond):
        order = diamond.descendants("top")
        assert set(order) == {"left", "right", "bottom"}
        assert order[-1] == "bottom"

    def test_revocation_reaches_bottom(self, diamond, registry):
        diamond.exclude_region("top", registry.get_region(TAMIL_NADU))

        for name in ("left", "right", "bottom"):
            assert diamond.get(name).effective_paths == []

    def test_regrant_reaches_bottom(self, diamond, registry):
        diamond.remove_region("top", registry.get_region(INDIA))
        assert diamond.get("bottom").effective_paths == []

        diamond.add_region("top", registry.get_region(INDIA))
        assert diamond.get("bottom").effective_paths == [TAMIL_NADU]


class TestCycles:
    def test_cycle_is_tolerated_and_terminates(self, graph, registry):
        graph.create_distributor("a", "A", [registry.get_region(TAMIL_NADU)])
        graph.create_distributor("b", "B", [registry.get_region(TAMIL_NADU)])
        graph.add_parent("b", "a")
        graph.add_parent("a", "b")

        assert graph.has_permission("b", registry.get_region(CHENNAI))

        graph.exclude_region("a", registry.get_region(TAMIL_NADU))

        assert graph.descendants("a") == ["b"]
        assert graph.get("b").effective_paths == []
        assert not graph.has_permission("b", registry.get_region(CHENNAI))

    def test_each_descendant_visited_once(self, graph, registry, caplog):
        for name in ("a", "b", "c"):
            graph.create_distributor(name, name, [registry.get_region(INDIA)])
        graph.add_parent("b", "a")
        graph.add_parent("c", "b")
        graph.add_parent("a", "c")

        with caplog.at_level(logging.DEBUG, logger="distributors.graph"):
            caplog.clear()
            graph.exclude_region("a", registry.get_region(TAMIL_NADU))

        recomputed = [r.getMessage().split()[1].rstrip(":") for r in caplog.records
                      if r.getMessage().startswith("Recomputed")]
        assert recomputed == ["a", "b", "c"]

    def test_self_parent_tolerated(self, graph, registry):
        graph.create_distributor("a", "A", [registry.get_region(INDIA)])
        graph.add_parent("a", "a")
        assert graph.has_permission("a", registry.get_region(KEELAKARAI))

    def test_reject_cycles(self, registry):
        graph = DistributorGraph(reject_cycles=True)
        for name in ("a", "b", "c"):
            graph.create_distributor(name, name)
        graph.add_parent("b", "a")
        graph.add_parent("c", "b")

        with pytest.raises(CyclicDelegationError):
            graph.add_parent("a", "c")
        with pytest.raises(CyclicDelegationError):
            graph.add_parent("a", "a")

        assert graph.get("a").parent_ids == set()
        assert graph.get("c").child_ids == set()

    def test_reject_cycles_allows_diamonds(self):
        graph = DistributorGraph(reject_cycles=True)
        for name in ("top", "left", "right", "bottom"):
            graph.create_distributor(name, name)
        graph.add_parent("left", "top")
        graph.add_parent("right", "top")
        graph.add_parent("bottom", "left")
        graph.add_parent("bottom", "right")

        assert graph.get("bottom").parent_ids == {"left", "right"}
