"""Mixing matrix: dyads cross-tabulated by ego group, alter group and tie state.

For a directed graph every ordered pair (i, j), i != j, lands in cell
[group(i), group(j), tie]. For an undirected graph every unordered pair is
counted once, as (i, j) with i < j, so the two off-diagonal cells of a group
pair split that pair's dyads between them; pooled_counts() merges them when a
symmetric view is needed.
"""

import logging
from collections.abc import Hashable, Sequence
from dataclasses import dataclass
from typing import Any

import numpy as np

from ergmlab.errors import InvalidArgument
from ergmlab.graph.types import Graph

log = logging.getLogger(__name__)


def total_dyads(n: int, directed: bool) -> int:
    """Number of dyads: n(n-1) ordered or n(n-1)/2 unordered."""
    pairs = n * (n - 1)
    return pairs if directed else pairs // 2


def _ordered_groups(values: Sequence[Hashable]) -> tuple[Any, ...]:
    distinct = list(dict.fromkeys(values))
    try:
        return tuple(sorted(distinct))
    except TypeError:
        return tuple(distinct)


@dataclass(frozen=True, eq=False)
class MixingMatrix:
    """Immutable group x group x tie-state dyad counts.

    Uses frozen=True but omits slots=True since numpy arrays don't interact
    well with __slots__.
    """

    counts: np.ndarray  # int64, shape (G, G, 2); [..., 0] no tie, [..., 1] tie
    groups: tuple[Any, ...]  # group labels, index order of the first two axes
    group_sizes: tuple[int, ...]  # nodes per group
    directed: bool
    attribute: str = ""

    @property
    def n(self) -> int:
        return int(sum(self.group_sizes))

    @property
    def tie_counts(self) -> np.ndarray:
        """m_gh1: tied dyads per cell, shape (G, G)."""
        return self.counts[..., 1]

    @property
    def dyad_counts(self) -> np.ndarray:
        """m_gh+: all dyads per cell, shape (G, G)."""
        return self.counts.sum(axis=-1)

    def index(self, group: Any) -> int:
        try:
            return self.groups.index(group)
        except ValueError:
            raise InvalidArgument(
                f"unknown group {group!r}; groups are {list(self.groups)}"
            ) from None

    def pooled_counts(self) -> np.ndarray:
        """Counts with undirected group pairs merged into both cells.

        Directed matrices are returned unchanged.
        """
        if self.directed:
            return self.counts.copy()
        pooled = self.counts + self.counts.transpose(1, 0, 2)
        diag = np.arange(len(self.groups))
        pooled[diag, diag] = self.counts[diag, diag]
        return pooled

    def densities(self) -> np.ndarray:
        """p_gh = m_gh1 / m_gh+; NaN where a group pair has no dyads."""
        pooled = self.pooled_counts()
        ties = pooled[..., 1].astype(np.float64)
        dyads = pooled.sum(axis=-1).astype(np.float64)
        with np.errstate(divide="ignore", invalid="ignore"):
            p = np.where(dyads > 0, ties / dyads, np.nan)
        if np.isnan(p).any():
            empty = [
                (self.groups[g], self.groups[h]) for g, h in np.argwhere(np.isnan(p))
            ]
            log.debug("Density undefined for group pairs with no dyads: %s", empty)
        return p

    def as_dict(self) -> dict[str, Any]:
        """Plain-Python view for external reporting."""
        return {
            "attribute": self.attribute,
            "directed": self.directed,
            "groups": list(self.groups),
            "group_sizes": list(self.group_sizes),
            "counts": self.counts.tolist(),
        }


def build_mixing_matrix(graph: Graph, group_attr: str) -> MixingMatrix:
    """Cross-tabulate every dyad of graph by the groups of its endpoints.

    Raises:
        MissingAttribute: If group_attr is absent on any node.
    """
    values = graph.attribute(group_attr)
    groups = _ordered_groups(values)
    position = {g: k for k, g in enumerate(groups)}
    codes = np.array([position[v] for v in values], dtype=np.int64)
    sizes = tuple(int(c) for c in np.bincount(codes, minlength=len(groups)))

    if graph.directed:
        rows, cols = np.nonzero(~np.eye(graph.n, dtype=bool))
    else:
        rows, cols = np.triu_indices(graph.n, k=1)
    ties = graph.adjacency[rows, cols].astype(np.int64)

    counts = np.zeros((len(groups), len(groups), 2), dtype=np.int64)
    np.add.at(counts, (codes[rows], codes[cols], ties), 1)

    expected = total_dyads(graph.n, graph.directed)
    if int(counts.sum()) != expected:
        raise RuntimeError(
            f"mixing matrix holds {int(counts.sum())} dyads, expected {expected}"
        )
    counts.flags.writeable = False

    log.debug(
        "Mixing matrix on %r: %d groups, %d tied dyads",
        group_attr,
        len(groups),
        int(counts[..., 1].sum()),
    )
    return MixingMatrix(
        counts=counts,
        groups=groups,
        group_sizes=sizes,
        directed=graph.directed,
        attribute=group_attr,
    )
