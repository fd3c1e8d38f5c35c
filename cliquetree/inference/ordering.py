"""
Variable orderings for elimination.

These are simple reference orderings used to drive elimination-tree
construction from the command line and in tests; they make no attempt to be
competitive with dedicated fill-reducing ordering tools.
"""

from typing import Any, Dict, List, Sequence, Set

from .symbolic import Key, scope_of


def natural_ordering(factors: Sequence[Any]) -> List[Key]:
    """Return all variables of `factors` in ascending order."""
    return sorted(scope_of(f for f in factors if f is not None))


def _interaction_graph(factors: Sequence[Any]) -> Dict[Key, Set[Key]]:
    """Adjacency of the graph with an edge between variables sharing a factor."""
    adj: Dict[Key, Set[Key]] = {}
    for factor in factors:
        if factor is None:
            continue
        keys = list(factor.keys)
        for key in keys:
            adj.setdefault(key, set())
        for i, k1 in enumerate(keys):
            for k2 in keys[i + 1:]:
                if k1 != k2:
                    adj[k1].add(k2)
                    adj[k2].add(k1)
    return adj


def min_degree_ordering(factors: Sequence[Any]) -> List[Key]:
    """
    Greedy minimum-degree elimination ordering.

    Repeatedly eliminates the variable with the fewest remaining neighbours
    (ties broken by the smallest variable), connecting its neighbours into a
    clique after each step.

    Args:
        factors: Factors exposing a `keys` attribute

    Returns:
        Elimination ordering covering every variable of `factors`
    """
    adj = _interaction_graph(factors)
    remaining = set(adj)
    ordering = []

    while remaining:
        vertex = min(remaining, key=lambda v: (len(adj[v] & remaining), v))
        neighbors = list(adj[vertex] & remaining)

        # Fill-in edges
        for i, n1 in enumerate(neighbors):
            for n2 in neighbors[i + 1:]:
                adj[n1].add(n2)
                adj[n2].add(n1)

        ordering.append(vertex)
        remaining.remove(vertex)

    return ordering


ORDERINGS = {
    'natural': natural_ordering,
    'min_degree': min_degree_ordering,
}


def compute_ordering(factors: Sequence[Any], method: str = 'min_degree') -> List[Key]:
    """
    Compute an elimination ordering by name.

    Raises:
        ValueError: If `method` is not a known ordering
    """
    if method not in ORDERINGS:
        raise ValueError(
            f"Unknown ordering method: {method} (expected one of {sorted(ORDERINGS)})"
        )
    return ORDERINGS[method](factors)
