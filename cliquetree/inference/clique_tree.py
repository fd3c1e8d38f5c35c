"""
Clique tree construction from an elimination tree.

The elimination tree is walked once, depth-first. On the way down every
elimination-tree node gets its own single-variable clique, provisionally
attached to its parent's clique. On the way up each node is symbolically
eliminated, and each of its child cliques is merged into it when eliminating
the node introduced no separator variable beyond what the child already had:

    own_nr_parents + own_nr_frontals == child_conditional.nr_parents()

`own_nr_frontals` grows as children are merged, so the test for a later
sibling uses the updated count. Merge results therefore depend on the order
of the children, and that order is part of the output's contract.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Iterator, List, Optional, Protocol, Tuple
import logging

from .elimination_tree import EliminationTree, EliminationTreeNode
from .symbolic import Key, eliminate_symbolic
from .traversal import depth_first_forest, format_forest

logger = logging.getLogger(__name__)


class Conditional(Protocol):
    """What the builder needs from an elimination result's conditional."""

    def nr_parents(self) -> int:
        ...

    def __len__(self) -> int:
        ...


# eliminate(factors, key) -> (conditional, remaining_factor)
EliminateFunction = Callable[[List[Any], Key], Tuple[Conditional, Any]]


@dataclass
class CliqueNode:
    """
    A clique of the clique tree.

    Attributes:
        ordered_frontal_keys: Variables eliminated in this clique, earliest first
        factors: Elimination-tree factors absorbed into this clique
        children: Child cliques, owned by this clique
        problem_size: Cost estimate of this clique and the cliques below it
    """
    ordered_frontal_keys: List[Key] = field(default_factory=list)
    factors: List[Any] = field(default_factory=list)
    children: List['CliqueNode'] = field(default_factory=list)
    problem_size: int = 0

    @property
    def nr_frontals(self) -> int:
        return len(self.ordered_frontal_keys)


@dataclass
class ConstructorTraversalData:
    """
    Per elimination-tree node state while building the clique tree.

    `child_conditionals` and `child_factors` are filled by the children's
    post-order visits, in the same order as the elimination-tree children.
    """
    parent: Optional['ConstructorTraversalData']
    clique: CliqueNode
    child_conditionals: List[Any] = field(default_factory=list)
    child_factors: List[Any] = field(default_factory=list)


def visitor_pre(
    node: EliminationTreeNode,
    parent_data: ConstructorTraversalData
) -> ConstructorTraversalData:
    """Seed a clique for `node` and attach it below the parent's clique."""
    clique = CliqueNode(ordered_frontal_keys=[node.key], factors=list(node.factors))
    parent_data.clique.children.append(clique)
    return ConstructorTraversalData(parent=parent_data, clique=clique)


def make_visitor_post(
    eliminate: EliminateFunction
) -> Callable[[EliminationTreeNode, ConstructorTraversalData], None]:
    """Return the post-order visitor performing elimination with `eliminate`."""

    def visitor_post(node: EliminationTreeNode, data: ConstructorTraversalData) -> None:
        # Eliminate this node's variable from its own factors plus everything
        # its children passed up
        factors = list(node.factors) + list(data.child_factors)
        conditional, remaining_factor = eliminate(factors, node.key)

        data.parent.child_conditionals.append(conditional)
        data.parent.child_factors.append(remaining_factor)

        clique = data.clique
        own_nr_frontals = 1
        own_nr_parents = conditional.nr_parents()
        nr_merged = 0
        combined_problem_size = len(conditional) * len(factors)

        assert len(clique.children) == len(data.child_conditionals), (
            f"Clique for {node.key} has {len(clique.children)} children but "
            f"{len(data.child_conditionals)} child conditionals"
        )

        for i, child_conditional in enumerate(data.child_conditionals):
            if own_nr_parents + own_nr_frontals != child_conditional.nr_parents():
                continue

            # Earlier merges removed children, shifting positions left
            position = i - nr_merged
            child = clique.children[position]

            # Keys are collected reversed and put in order after the loop
            clique.ordered_frontal_keys.extend(reversed(child.ordered_frontal_keys))
            clique.factors.extend(child.factors)
            clique.children.extend(child.children)
            combined_problem_size = max(combined_problem_size, child.problem_size)
            own_nr_frontals += child.nr_frontals

            del clique.children[position]
            nr_merged += 1

        clique.ordered_frontal_keys.reverse()
        clique.problem_size = max(
            [combined_problem_size] + [child.problem_size for child in clique.children]
        )

        if nr_merged:
            logger.debug(
                f"Merged {nr_merged} child cliques into {node.key}: "
                f"frontals {clique.ordered_frontal_keys}"
            )

    return visitor_post


@dataclass
class CliqueTree:
    """
    A forest of cliques produced from an elimination tree.

    Attributes:
        roots: Root cliques
        remaining_factors: Elimination-tree factors not involved in elimination
    """
    roots: List[CliqueNode] = field(default_factory=list)
    remaining_factors: List[Any] = field(default_factory=list)

    @classmethod
    def from_elimination_tree(
        cls,
        elimination_tree: EliminationTree,
        eliminate: EliminateFunction = eliminate_symbolic
    ) -> 'CliqueTree':
        return build_clique_tree(elimination_tree, eliminate)

    def cliques(self) -> Iterator[CliqueNode]:
        """Iterate over all cliques in depth-first pre-order."""
        visited = []
        depth_first_forest(self, None, lambda clique, _: visited.append(clique))
        return iter(visited)

    def frontal_keys(self) -> List[Key]:
        """All frontal variables, clique by clique in pre-order."""
        return [key for clique in self.cliques() for key in clique.ordered_frontal_keys]

    def __len__(self) -> int:
        return sum(1 for _ in self.cliques())

    def __str__(self) -> str:
        return format_forest(
            self,
            lambda clique: (
                f"{clique.ordered_frontal_keys} "
                f"({len(clique.factors)} factors, size {clique.problem_size})"
            )
        )


def build_clique_tree(
    elimination_tree: EliminationTree,
    eliminate: EliminateFunction = eliminate_symbolic
) -> CliqueTree:
    """
    Build a clique tree from an elimination tree.

    The elimination tree must be in valid depth-first post-order (children
    eliminated before parents); this is not checked.

    Args:
        elimination_tree: Input forest exposing `roots` and `remaining_factors`
        eliminate: Single-variable elimination operation,
                   `eliminate(factors, key) -> (conditional, remaining_factor)`.
                   The conditional must provide `nr_parents()` and `__len__`
                   (its total number of keys, frontal plus parents); the
                   length feeds the `problem_size` estimate.

    Returns:
        CliqueTree with the compacted cliques and the untouched factors

    Raises:
        Whatever `eliminate` raises; no partial tree is returned
    """
    # Dummy root gathering the top-level cliques
    root_data = ConstructorTraversalData(parent=None, clique=CliqueNode())

    depth_first_forest(
        elimination_tree, root_data, visitor_pre, make_visitor_post(eliminate)
    )

    tree = CliqueTree(
        roots=root_data.clique.children,
        remaining_factors=list(getattr(elimination_tree, 'remaining_factors', []))
    )
    logger.debug(f"Built clique tree with {len(tree)} cliques and {len(tree.roots)} roots")
    return tree
