"""
Preprocessing utilities for clique trees.

Provides:
- CNF parsing (DIMACS format) and clause-to-factor conversion
- Clique graph construction and verification
- PyTorch Geometric export
"""

from .dimacs import CNF, cnf_to_factors, parse_dimacs, parse_dimacs_string
from .graph_builder import (
    CliqueGraph,
    build_clique_graph,
    clique_graph_to_pyg,
    cnf_to_clique_graph_data,
    cnf_to_clique_tree,
    verify_clique_tree,
)

__all__ = [
    # CNF parsing
    'CNF',
    'cnf_to_factors',
    'parse_dimacs',
    'parse_dimacs_string',
    # Graph building
    'CliqueGraph',
    'build_clique_graph',
    'clique_graph_to_pyg',
    'cnf_to_clique_graph_data',
    'cnf_to_clique_tree',
    'verify_clique_tree',
]
