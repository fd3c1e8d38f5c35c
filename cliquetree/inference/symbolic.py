"""
Symbolic factors and conditionals.

Symbolic elimination only tracks variable scopes: eliminating a set of
frontal variables from a group of factors yields a conditional over the
frontals given the remaining variables (its parents), and a factor over
exactly those parents.
"""

from dataclasses import dataclass
from typing import Any, Hashable, Iterable, Sequence, Tuple

Key = Hashable


class EliminationError(RuntimeError):
    """Raised when a variable cannot be eliminated from a set of factors."""


@dataclass(frozen=True)
class SymbolicFactor:
    """
    A factor described only by the variables it involves.

    Attributes:
        keys: Variables in the factor's scope
    """
    keys: Tuple[Key, ...] = ()

    def __len__(self) -> int:
        return len(self.keys)

    def __contains__(self, key: Key) -> bool:
        return key in self.keys


@dataclass(frozen=True)
class SymbolicConditional:
    """
    Result of symbolically eliminating one or more variables.

    Attributes:
        keys: Frontal variables first (in elimination order), then parents
        nr_frontals: Number of leading entries of `keys` that are frontal
    """
    keys: Tuple[Key, ...]
    nr_frontals: int = 1

    @property
    def frontals(self) -> Tuple[Key, ...]:
        return self.keys[:self.nr_frontals]

    @property
    def parents(self) -> Tuple[Key, ...]:
        return self.keys[self.nr_frontals:]

    def nr_parents(self) -> int:
        return len(self.keys) - self.nr_frontals

    def __len__(self) -> int:
        return len(self.keys)


def scope_of(factors: Iterable[Any]) -> set:
    """Return the union of the scopes of `factors` (each exposing `keys`)."""
    keys = set()
    for factor in factors:
        keys.update(factor.keys)
    return keys


def eliminate_symbolic_frontals(
    factors: Sequence[Any],
    keys: Sequence[Key]
) -> Tuple[SymbolicConditional, SymbolicFactor]:
    """
    Symbolically eliminate several variables together from `factors`.

    Args:
        factors: Factors exposing a `keys` attribute
        keys: Variables to eliminate; they become the conditional's
              frontals, in the given order

    Returns:
        Tuple of (conditional, remaining_factor). The remaining factor's scope
        is exactly the conditional's parents, sorted.

    Raises:
        EliminationError: If a requested variable is not in any factor
    """
    frontals = list(keys)

    all_keys = scope_of(factors)
    missing = [key for key in frontals if key not in all_keys]
    if missing:
        raise EliminationError(
            f"Requested to eliminate variables {missing} that are not in any of "
            f"the {len(factors)} factors"
        )

    parents = sorted(all_keys.difference(frontals))
    conditional = SymbolicConditional(
        keys=tuple(frontals) + tuple(parents),
        nr_frontals=len(frontals)
    )
    return conditional, SymbolicFactor(keys=tuple(parents))


def eliminate_symbolic(
    factors: Sequence[Any],
    key: Key
) -> Tuple[SymbolicConditional, SymbolicFactor]:
    """Symbolically eliminate the single variable `key` from `factors`."""
    return eliminate_symbolic_frontals(factors, [key])
