"""
Clique tree construction for sparse factorization of graphical models.

Submodules:
- inference: symbolic elimination, elimination trees, traversal, clique trees
- preprocessing: DIMACS input, clique graph flattening and PyG export
"""

from .inference import (
    CliqueNode,
    CliqueTree,
    EliminationError,
    EliminationTree,
    EliminationTreeNode,
    SymbolicConditional,
    SymbolicFactor,
    build_clique_tree,
    build_elimination_tree,
    compute_ordering,
    depth_first_forest,
    eliminate_symbolic,
)

__all__ = [
    'CliqueNode',
    'CliqueTree',
    'EliminationError',
    'EliminationTree',
    'EliminationTreeNode',
    'SymbolicConditional',
    'SymbolicFactor',
    'build_clique_tree',
    'build_elimination_tree',
    'compute_ordering',
    'depth_first_forest',
    'eliminate_symbolic',
]
