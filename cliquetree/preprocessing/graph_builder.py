"""
Graph Builder for clique trees.

This module flattens a clique tree into an indexed clique graph:
1. Clique graph: per-clique frontal and separator variables, tree edges
2. Verification of the junction-tree properties of the result
3. Conversion to PyTorch Geometric Data for downstream models
"""

from dataclasses import dataclass, field
from typing import Any, List, Optional, Sequence, Tuple
import logging
import math

import torch
from torch_geometric.data import Data

from ..inference.clique_tree import CliqueTree, build_clique_tree
from ..inference.elimination_tree import build_elimination_tree
from ..inference.ordering import compute_ordering
from ..inference.symbolic import Key, eliminate_symbolic_frontals
from ..inference.traversal import depth_first_forest
from .dimacs import CNF, cnf_to_factors

logger = logging.getLogger(__name__)


@dataclass
class CliqueGraph:
    """
    Indexed view of a clique tree.

    Cliques are numbered in depth-first pre-order, so a parent always has a
    smaller index than its children.

    Attributes:
        frontal_keys: Frontal variables of each clique, in elimination order
        separator_keys: Separator (parent) variables of each clique, sorted
        num_factors: Number of factors absorbed by each clique
        problem_sizes: Cost estimate of each clique
        parent_index: Index of each clique's parent, -1 for roots
        clique_edges: (parent, child) index pairs
    """
    frontal_keys: List[List[Key]] = field(default_factory=list)
    separator_keys: List[List[Key]] = field(default_factory=list)
    num_factors: List[int] = field(default_factory=list)
    problem_sizes: List[int] = field(default_factory=list)
    parent_index: List[int] = field(default_factory=list)
    clique_edges: List[Tuple[int, int]] = field(default_factory=list)

    @property
    def num_cliques(self) -> int:
        return len(self.frontal_keys)

    def scope(self, index: int) -> List[Key]:
        """Frontal followed by separator variables of clique `index`."""
        return self.frontal_keys[index] + self.separator_keys[index]


@dataclass
class _CliqueVisit:
    index: int
    parent: Optional['_CliqueVisit'] = None
    child_factors: List[Any] = field(default_factory=list)


def build_clique_graph(tree: CliqueTree) -> CliqueGraph:
    """
    Build a clique graph from a clique tree.

    Separators are recovered by symbolically eliminating each clique's
    frontal variables from its factors and the factors passed up by its
    children, so the clique factors must expose a `keys` attribute.

    Args:
        tree: Clique tree to flatten

    Returns:
        CliqueGraph object
    """
    graph = CliqueGraph()

    def visit_pre(clique, parent: _CliqueVisit) -> _CliqueVisit:
        index = graph.num_cliques
        graph.frontal_keys.append(list(clique.ordered_frontal_keys))
        graph.separator_keys.append([])
        graph.num_factors.append(len(clique.factors))
        graph.problem_sizes.append(clique.problem_size)
        graph.parent_index.append(parent.index)
        if parent.index >= 0:
            graph.clique_edges.append((parent.index, index))
        return _CliqueVisit(index=index, parent=parent)

    def visit_post(clique, visit: _CliqueVisit) -> None:
        _, separator_factor = eliminate_symbolic_frontals(
            list(clique.factors) + visit.child_factors,
            list(clique.ordered_frontal_keys)
        )
        graph.separator_keys[visit.index] = list(separator_factor.keys)
        visit.parent.child_factors.append(separator_factor)

    depth_first_forest(tree, _CliqueVisit(index=-1), visit_pre, visit_post)
    return graph


def verify_clique_tree(graph: CliqueGraph, factors: Sequence[Any]) -> Tuple[bool, List[str]]:
    """
    Verify that a clique graph is a valid junction tree for `factors`.

    Properties checked:
    1. Coverage: each factor's variables are contained in at least one clique
    2. Uniqueness: each variable is frontal in exactly one clique
    3. Separators: a clique's separator lies inside its parent's scope, and
       root cliques have no separator
    4. Connectivity: for any variable, the cliques containing it form a
       connected subtree

    Args:
        graph: Clique graph to verify
        factors: Factors the tree was built from (exposing `keys`)

    Returns:
        Tuple of (is_valid, list of error messages)
    """
    errors = []
    scopes = [set(graph.scope(i)) for i in range(graph.num_cliques)]

    # Coverage
    for factor_idx, factor in enumerate(factors):
        if factor is None or not factor.keys:
            continue
        factor_keys = set(factor.keys)
        if not any(factor_keys.issubset(scope) for scope in scopes):
            errors.append(f"Factor {factor_idx} not covered: vars {sorted(factor_keys)}")

    # Uniqueness of frontal variables
    frontal_owner = {}
    for index, keys in enumerate(graph.frontal_keys):
        for key in keys:
            if key in frontal_owner:
                errors.append(
                    f"Variable {key} is frontal in cliques {frontal_owner[key]} and {index}"
                )
            frontal_owner[key] = index

    # Separators
    for index, separator in enumerate(graph.separator_keys):
        parent = graph.parent_index[index]
        if parent < 0:
            if separator:
                errors.append(f"Root clique {index} has separator {separator}")
        elif not set(separator).issubset(scopes[parent]):
            errors.append(
                f"Separator {separator} of clique {index} not in parent {parent}"
            )

    # Connectivity (running intersection property)
    adj = {i: set() for i in range(graph.num_cliques)}
    for c1, c2 in graph.clique_edges:
        adj[c1].add(c2)
        adj[c2].add(c1)

    for key in frontal_owner:
        cliques_with_key = [i for i, scope in enumerate(scopes) if key in scope]
        if len(cliques_with_key) <= 1:
            continue

        visited = {cliques_with_key[0]}
        queue = [cliques_with_key[0]]
        while queue:
            current = queue.pop(0)
            for neighbor in adj[current]:
                if neighbor not in visited and neighbor in cliques_with_key:
                    visited.add(neighbor)
                    queue.append(neighbor)

        if len(visited) != len(cliques_with_key):
            errors.append(
                f"Variable {key} violates connectivity: "
                f"cliques {cliques_with_key}, connected {sorted(visited)}"
            )

    return len(errors) == 0, errors


def clique_graph_to_pyg(graph: CliqueGraph, label: Optional[float] = None) -> Data:
    """
    Convert a clique graph to a PyTorch Geometric Data object.

    Node features per clique are
    [num_frontals, num_separator, num_factors, log1p(problem_size)].

    Args:
        graph: CliqueGraph object
        label: Optional graph-level label

    Returns:
        PyTorch Geometric Data object with bidirectional tree edges
    """
    features = [
        [
            float(len(graph.frontal_keys[i])),
            float(len(graph.separator_keys[i])),
            float(graph.num_factors[i]),
            math.log1p(graph.problem_sizes[i]),
        ]
        for i in range(graph.num_cliques)
    ]
    x = torch.tensor(features, dtype=torch.float).reshape(graph.num_cliques, 4)

    if graph.clique_edges:
        src = [e[0] for e in graph.clique_edges]
        dst = [e[1] for e in graph.clique_edges]
        # Make bidirectional
        edge_index = torch.tensor([src + dst, dst + src], dtype=torch.long)
    else:
        edge_index = torch.zeros((2, 0), dtype=torch.long)

    data = Data(
        x=x,
        edge_index=edge_index,
        num_nodes=graph.num_cliques,
        num_cliques=graph.num_cliques,
    )

    # Keep variable lists as Python lists (PyG supports this)
    data.frontal_keys = graph.frontal_keys
    data.separator_keys = graph.separator_keys
    data.clique_parent = torch.tensor(graph.parent_index, dtype=torch.long)

    if label is not None:
        data.y = torch.tensor([label], dtype=torch.float)

    return data


def cnf_to_clique_tree(cnf: CNF, ordering: str = 'min_degree') -> CliqueTree:
    """Build the clique tree of a CNF formula's clause factors."""
    factors = cnf_to_factors(cnf)
    elimination_tree = build_elimination_tree(factors, compute_ordering(factors, ordering))
    return build_clique_tree(elimination_tree)


def cnf_to_clique_graph_data(
    cnf: CNF,
    ordering: str = 'min_degree',
    label: Optional[float] = None
) -> Data:
    """
    Convenience function to convert CNF directly to PyG Data.

    Args:
        cnf: Parsed CNF formula
        ordering: Name of the elimination ordering to use
        label: Optional graph-level label

    Returns:
        PyTorch Geometric Data object
    """
    graph = build_clique_graph(cnf_to_clique_tree(cnf, ordering))
    logger.debug(f"CNF with {cnf.num_variables} variables -> {graph.num_cliques} cliques")
    return clique_graph_to_pyg(graph, label)
