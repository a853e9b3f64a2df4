"""Data structures for exact enumeration over small networks."""

from dataclasses import dataclass, field
from typing import Any

from ergmlab.graph.types import Graph
from ergmlab.terms.types import Term


@dataclass(frozen=True)
class CanonicalClass:
    """Labeled networks sharing one fingerprint, treated as one structure.

    The representative is a frozen copy of the first labeled graph seen with
    this fingerprint; multiplicity counts every labeled graph grouped under it.
    Equality and hashing go through the fingerprint, multiplicity and
    statistics, never the representative graph.
    """

    fingerprint: tuple[Any, ...]
    representative: Graph = field(compare=False, repr=False)
    multiplicity: int
    statistics: tuple[float, ...]  # classification statistics, term order
    terms: tuple[Term, ...] = field(compare=False, repr=False, default=())

    @property
    def edge_count(self) -> int:
        return self.representative.edge_count
