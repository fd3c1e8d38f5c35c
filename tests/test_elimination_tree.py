"""
Tests for elimination tree construction.
"""

import pytest

from cliquetree.inference.elimination_tree import (
    EliminationTree,
    EliminationTreeNode,
    build_elimination_tree,
)
from cliquetree.inference.symbolic import SymbolicFactor


def keys_of(nodes):
    return [node.key for node in nodes]


class TestBuildEliminationTree:
    """Tests for parent computation and factor assignment."""

    def test_chain(self):
        f1 = SymbolicFactor((1, 2))
        f2 = SymbolicFactor((2, 3))
        f3 = SymbolicFactor((3,))

        etree = build_elimination_tree([f1, f2, f3], [1, 2, 3])

        assert keys_of(etree.roots) == [3]
        node3 = etree.roots[0]
        assert node3.factors == [f3]
        assert keys_of(node3.children) == [2]
        node2 = node3.children[0]
        assert node2.factors == [f2]
        assert keys_of(node2.children) == [1]
        assert node2.children[0].factors == [f1]
        assert etree.remaining_factors == []

    def test_star_children_in_elimination_order(self):
        g1 = SymbolicFactor((1, 3))
        g2 = SymbolicFactor((2, 3))
        g3 = SymbolicFactor((3,))

        etree = build_elimination_tree([g1, g2, g3], [1, 2, 3])

        assert keys_of(etree.roots) == [3]
        assert keys_of(etree.roots[0].children) == [1, 2]

        reversed_etree = build_elimination_tree([g1, g2, g3], [2, 1, 3])
        assert keys_of(reversed_etree.roots[0].children) == [2, 1]

    def test_fill_in_creates_chain(self):
        # The cycle 1-2-4-3-1 gets a fill-in edge 2-3 when 1 is eliminated
        factors = [
            SymbolicFactor((1, 2)),
            SymbolicFactor((1, 3)),
            SymbolicFactor((2, 4)),
            SymbolicFactor((3, 4)),
        ]

        etree = build_elimination_tree(factors, [1, 2, 3, 4])

        assert keys_of(etree.roots) == [4]
        node4 = etree.roots[0]
        assert node4.factors == []
        node3 = node4.children[0]
        node2 = node3.children[0]
        node1 = node2.children[0]
        assert (node3.key, node2.key, node1.key) == (3, 2, 1)
        assert node1.factors == [factors[0], factors[1]]
        assert node2.factors == [factors[2]]
        assert node3.factors == [factors[3]]

    def test_forest(self):
        etree = build_elimination_tree(
            [SymbolicFactor((1, 2)), SymbolicFactor((3, 4))], [1, 2, 3, 4]
        )

        assert keys_of(etree.roots) == [2, 4]
        assert keys_of(etree.roots[0].children) == [1]
        assert keys_of(etree.roots[1].children) == [3]

    def test_remaining_factors(self):
        empty = SymbolicFactor(())
        outside = SymbolicFactor((9,))
        factors = [SymbolicFactor((1, 2)), empty, None, outside]

        etree = build_elimination_tree(factors, [1, 2])

        assert etree.remaining_factors == [empty, outside]
        assert len(etree) == 2

    def test_duplicate_ordering_raises(self):
        with pytest.raises(ValueError):
            build_elimination_tree([SymbolicFactor((1, 2))], [1, 2, 1])

    def test_unused_variable_raises(self):
        with pytest.raises(ValueError):
            build_elimination_tree([SymbolicFactor((1, 2))], [1, 2, 3])

    def test_empty(self):
        etree = build_elimination_tree([], [])
        assert etree.roots == []
        assert len(etree) == 0


class TestEliminationTree:
    """Tests for the forest helpers."""

    def test_nodes_in_post_order(self):
        etree = build_elimination_tree(
            [SymbolicFactor((1, 3)), SymbolicFactor((2, 3)), SymbolicFactor((3, 4))],
            [1, 2, 3, 4]
        )
        assert [node.key for node in etree.nodes()] == [1, 2, 3, 4]

    def test_str(self):
        etree = EliminationTree(roots=[
            EliminationTreeNode(key=2, children=[EliminationTreeNode(key=1)])
        ])
        assert str(etree) == "2 (0 factors)\n  1 (0 factors)"
