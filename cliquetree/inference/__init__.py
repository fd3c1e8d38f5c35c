"""
Symbolic inference structures.

Provides:
- Symbolic factors, conditionals and elimination
- Elimination trees and variable orderings
- Depth-first forest traversal
- Clique tree construction from elimination trees
"""

from .symbolic import (
    EliminationError,
    SymbolicConditional,
    SymbolicFactor,
    eliminate_symbolic,
    eliminate_symbolic_frontals,
    scope_of,
)
from .traversal import depth_first_forest, format_forest
from .elimination_tree import (
    EliminationTree,
    EliminationTreeNode,
    build_elimination_tree,
)
from .ordering import compute_ordering, min_degree_ordering, natural_ordering
from .clique_tree import (
    CliqueNode,
    CliqueTree,
    ConstructorTraversalData,
    build_clique_tree,
)

__all__ = [
    # Symbolic elimination
    'EliminationError',
    'SymbolicConditional',
    'SymbolicFactor',
    'eliminate_symbolic',
    'eliminate_symbolic_frontals',
    'scope_of',
    # Traversal
    'depth_first_forest',
    'format_forest',
    # Elimination trees
    'EliminationTree',
    'EliminationTreeNode',
    'build_elimination_tree',
    # Orderings
    'compute_ordering',
    'min_degree_ordering',
    'natural_ordering',
    # Clique trees
    'CliqueNode',
    'CliqueTree',
    'ConstructorTraversalData',
    'build_clique_tree',
]
