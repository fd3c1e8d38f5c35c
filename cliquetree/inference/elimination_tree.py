"""
Elimination trees.

An elimination tree has one node per variable. A node's factors are the
factors whose earliest-eliminated variable is the node's variable, and a
node's parent is the next variable its elimination connects to. Children are
always eliminated before their parent.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Sequence
import logging

from .symbolic import Key
from .traversal import depth_first_forest, format_forest

logger = logging.getLogger(__name__)


@dataclass
class EliminationTreeNode:
    """
    A single variable of an elimination tree.

    Attributes:
        key: The variable eliminated at this node
        factors: Factors first involved at this node (in input order)
        children: Child nodes, eliminated before this one
    """
    key: Key
    factors: List[Any] = field(default_factory=list)
    children: List['EliminationTreeNode'] = field(default_factory=list)


@dataclass
class EliminationTree:
    """
    A forest of elimination-tree nodes.

    Attributes:
        roots: Root nodes, eliminated last in their trees
        remaining_factors: Factors that involve no eliminated variable
    """
    roots: List[EliminationTreeNode] = field(default_factory=list)
    remaining_factors: List[Any] = field(default_factory=list)

    def nodes(self) -> Iterator[EliminationTreeNode]:
        """Iterate over all nodes in depth-first post-order."""
        visited = []
        depth_first_forest(self, None, lambda node, _: None,
                           lambda node, _: visited.append(node))
        return iter(visited)

    def __len__(self) -> int:
        return sum(1 for _ in self.nodes())

    def __str__(self) -> str:
        return format_forest(
            self, lambda node: f"{node.key} ({len(node.factors)} factors)"
        )


def build_elimination_tree(
    factors: Sequence[Any],
    ordering: Sequence[Key]
) -> EliminationTree:
    """
    Build the elimination tree of `factors` for a variable `ordering`.

    Each factor is attached to the node of its earliest-eliminated variable.
    Parents are found with the usual ancestor search with path compression:
    when variable j shares a factor with an earlier variable k, the current
    root of k's subtree becomes a child of j.

    Args:
        factors: Factors exposing a `keys` attribute (None entries are skipped)
        ordering: Elimination order; every variable must occur in some factor

    Returns:
        EliminationTree whose roots and child lists are in elimination order

    Raises:
        ValueError: If the ordering repeats a variable, or names a variable
                    that no factor involves
    """
    position: Dict[Key, int] = {}
    for j, key in enumerate(ordering):
        if key in position:
            raise ValueError(f"Variable {key} appears more than once in the ordering")
        position[key] = j

    n = len(ordering)

    # Variable index: for each ordered variable, the factors that involve it
    involved: List[List[int]] = [[] for _ in range(n)]
    remaining_factors = []
    for i, factor in enumerate(factors):
        if factor is None:
            continue
        columns = sorted({position[key] for key in factor.keys if key in position})
        if not columns:
            remaining_factors.append(factor)
            continue
        for j in columns:
            involved[j].append(i)

    for j, key in enumerate(ordering):
        if not involved[j]:
            raise ValueError(f"Variable {key} in the ordering is not involved in any factor")

    parents: List[Optional[int]] = [None] * n
    ancestors: List[Optional[int]] = [None] * n
    previous_column: Dict[int, int] = {}
    nodes = [EliminationTreeNode(key=key) for key in ordering]

    for j in range(n):
        for i in involved[j]:
            k = previous_column.get(i)
            if k is None:
                nodes[j].factors.append(factors[i])
            else:
                r = k
                while ancestors[r] is not None and ancestors[r] != j:
                    next_r = ancestors[r]
                    ancestors[r] = j
                    r = next_r
                if ancestors[r] is None:
                    ancestors[r] = j
                    parents[r] = j
            previous_column[i] = j

    roots = []
    for j in range(n):
        if parents[j] is None:
            roots.append(nodes[j])
        else:
            nodes[parents[j]].children.append(nodes[j])

    logger.debug(
        f"Built elimination tree: {n} variables, {len(roots)} roots, "
        f"{len(remaining_factors)} remaining factors"
    )

    return EliminationTree(roots=roots, remaining_factors=remaining_factors)
