"""
DIMACS CNF input.

CNF formulas are a convenient source of sparse factor graphs: every clause
becomes a symbolic factor over the variables it mentions.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List
import re

from ..inference.symbolic import SymbolicFactor

_PROBLEM_LINE = re.compile(r'p\s+cnf\s+(\d+)\s+(\d+)')


@dataclass
class CNF:
    """
    A CNF formula parsed from DIMACS format.

    Attributes:
        num_variables: Number of variables declared in the problem line
        num_clauses: Number of clauses actually read
        clauses: Clauses as lists of non-zero literals (sign = polarity)
        comments: Comment lines, without the leading 'c'
    """
    num_variables: int
    num_clauses: int
    clauses: List[List[int]]
    comments: List[str] = field(default_factory=list)


def _parse_lines(lines: Iterable[str]) -> CNF:
    comments = []
    num_variables = None
    clauses = []
    current_clause = []

    for line_num, line in enumerate(lines, 1):
        line = line.strip()
        if not line:
            continue

        if line.startswith('c'):
            comments.append(line[1:].strip())
            continue

        if line.startswith('p'):
            match = _PROBLEM_LINE.match(line)
            if not match:
                raise ValueError(f"Invalid problem line at line {line_num}: {line}")
            num_variables = int(match.group(1))
            continue

        # Benchmark files sometimes end with a '%' marker line
        if line.startswith('%'):
            break

        try:
            literals = [int(x) for x in line.split()]
        except ValueError as e:
            raise ValueError(f"Invalid literal at line {line_num}: {line}") from e

        for lit in literals:
            if lit == 0:
                if current_clause:
                    clauses.append(current_clause)
                    current_clause = []
            else:
                current_clause.append(lit)

    # Last clause may lack its terminating 0
    if current_clause:
        clauses.append(current_clause)

    if num_variables is None:
        raise ValueError("Missing problem line (p cnf ...)")

    return CNF(
        num_variables=num_variables,
        num_clauses=len(clauses),
        clauses=clauses,
        comments=comments
    )


def parse_dimacs(filepath: str | Path) -> CNF:
    """
    Parse a DIMACS CNF file.

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the problem line or a literal is malformed
    """
    filepath = Path(filepath)
    if not filepath.exists():
        raise FileNotFoundError(f"CNF file not found: {filepath}")

    with open(filepath, 'r') as f:
        return _parse_lines(f)


def parse_dimacs_string(content: str) -> CNF:
    """Parse DIMACS CNF content held in a string."""
    return _parse_lines(content.strip().split('\n'))


def cnf_to_factors(cnf: CNF) -> List[SymbolicFactor]:
    """
    Convert each clause into a symbolic factor over its variables.

    Variables keep their 1-indexed DIMACS numbering; repeated variables within
    a clause are collapsed.
    """
    return [
        SymbolicFactor(keys=tuple(sorted({abs(lit) for lit in clause})))
        for clause in cnf.clauses
    ]
