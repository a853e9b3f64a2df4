"""Graph container for ERGM statistics: directed or undirected, no self-loops.

Nodes are the 0-based integers 0..n-1. Ties live in a dense uint8 adjacency
matrix; for undirected graphs the matrix is kept symmetric, while the edge
list reports every tie once as (i, j) with i < j.
"""

from collections.abc import Iterable, Iterator, Mapping, Sequence
from contextlib import contextmanager
from typing import Any, Literal

import numpy as np
import scipy.sparse

from ergmlab.errors import InvalidArgument, MissingAttribute

Direction = Literal["in", "out", "total"]
Dyad = tuple[int, int]

_DIRECTIONS = ("in", "out", "total")


class Graph:
    """Simple labeled graph with node attributes and reversible toggles.

    The only mutators are add_edge, remove_edge and toggle. A graph must not
    be shared between concurrent callers while any of them toggles ties.
    """

    def __init__(
        self,
        n: int,
        directed: bool,
        attributes: Mapping[str, Sequence[Any]] | None = None,
    ) -> None:
        if isinstance(n, bool) or not isinstance(n, (int, np.integer)) or n < 1:
            raise InvalidArgument(f"node count must be an integer >= 1, got {n!r}")
        self._n = int(n)
        self._directed = bool(directed)
        self._adj = np.zeros((self._n, self._n), dtype=np.uint8)
        self._frozen = False
        self._attributes: dict[str, tuple[Any, ...]] = {}
        for name, values in (attributes or {}).items():
            values = tuple(values)
            if len(values) != self._n:
                raise InvalidArgument(
                    f"attribute {name!r} has {len(values)} values "
                    f"for {self._n} nodes"
                )
            self._attributes[str(name)] = values

    @classmethod
    def create(
        cls,
        node_count: int,
        directed: bool,
        attributes: Mapping[str, Sequence[Any]] | None = None,
        edges: Iterable[Dyad] = (),
    ) -> "Graph":
        """Build a graph from a node count, an attribute table and an edge list."""
        graph = cls(node_count, directed, attributes)
        for i, j in edges:
            graph.add_edge(i, j)
        return graph

    @classmethod
    def from_adjacency(
        cls,
        matrix: np.ndarray | scipy.sparse.spmatrix,
        directed: bool,
        attributes: Mapping[str, Sequence[Any]] | None = None,
    ) -> "Graph":
        """Build a graph from a square 0/1 adjacency matrix.

        Undirected input must be symmetric. The diagonal must be empty.
        """
        if scipy.sparse.issparse(matrix):
            matrix = matrix.toarray()
        arr = np.asarray(matrix)
        if arr.ndim != 2 or arr.shape[0] != arr.shape[1]:
            raise InvalidArgument(f"adjacency must be square, got shape {arr.shape}")
        binary = (arr != 0).astype(np.uint8)
        if binary.diagonal().any():
            raise InvalidArgument("adjacency has self-loops on the diagonal")
        if not directed and not np.array_equal(binary, binary.T):
            raise InvalidArgument("undirected adjacency must be symmetric")
        graph = cls(arr.shape[0], directed, attributes)
        graph._adj[:] = binary
        return graph

    # ── Basic properties ─────────────────────────────────────────────

    @property
    def n(self) -> int:
        return self._n

    @property
    def directed(self) -> bool:
        return self._directed

    @property
    def adjacency(self) -> np.ndarray:
        """Read-only view of the adjacency matrix."""
        view = self._adj.view()
        view.flags.writeable = False
        return view

    @property
    def frozen(self) -> bool:
        return self._frozen

    def freeze(self) -> "Graph":
        """Make this graph read-only in place and return it.

        Mutators raise on a frozen graph; copy() gives a mutable clone.
        """
        self._frozen = True
        self._adj.flags.writeable = False
        return self

    @property
    def edge_count(self) -> int:
        total = int(self._adj.sum())
        return total if self._directed else total // 2

    def edges(self) -> list[Dyad]:
        """Edge list; undirected ties appear once as (i, j) with i < j."""
        adj = self._adj if self._directed else np.triu(self._adj)
        rows, cols = np.nonzero(adj)
        return list(zip(rows.tolist(), cols.tolist()))

    def dyads(self) -> Iterator[Dyad]:
        """All dyads: ordered pairs if directed, i < j pairs otherwise."""
        for i in range(self._n):
            for j in range(self._n):
                if i == j or (not self._directed and j < i):
                    continue
                yield i, j

    def dyad_count(self) -> int:
        pairs = self._n * (self._n - 1)
        return pairs if self._directed else pairs // 2

    # ── Attributes ───────────────────────────────────────────────────

    @property
    def attribute_names(self) -> tuple[str, ...]:
        return tuple(self._attributes)

    def has_attribute(self, name: str) -> bool:
        return name in self._attributes

    def attribute(self, name: str) -> tuple[Any, ...]:
        """Values of a node attribute, one per node.

        Raises:
            MissingAttribute: If the attribute is unknown or None on any node.
        """
        if name not in self._attributes:
            raise MissingAttribute(f"graph has no node attribute {name!r}")
        values = self._attributes[name]
        missing = [i for i, v in enumerate(values) if v is None]
        if missing:
            raise MissingAttribute(
                f"attribute {name!r} is missing on nodes {missing}"
            )
        return values

    @property
    def attributes(self) -> dict[str, tuple[Any, ...]]:
        return dict(self._attributes)

    # ── Tie queries and mutation ─────────────────────────────────────

    def _check_node(self, i: int) -> int:
        if isinstance(i, bool) or not isinstance(i, (int, np.integer)):
            raise InvalidArgument(f"node index must be an integer, got {i!r}")
        if not 0 <= i < self._n:
            raise InvalidArgument(
                f"node index {i} out of range for {self._n} nodes"
            )
        return int(i)

    def _check_dyad(self, i: int, j: int) -> Dyad:
        i, j = self._check_node(i), self._check_node(j)
        if i == j:
            raise InvalidArgument(f"self-loop ({i}, {j}) is not allowed")
        return i, j

    def has_edge(self, i: int, j: int) -> bool:
        i, j = self._check_dyad(i, j)
        return bool(self._adj[i, j])

    def _set(self, i: int, j: int, value: int) -> None:
        if self._frozen:
            raise InvalidArgument(f"{self!r} is frozen; mutate a copy() instead")
        self._adj[i, j] = value
        if not self._directed:
            self._adj[j, i] = value

    def add_edge(self, i: int, j: int) -> None:
        """Add tie (i, j). Adding a tie that is already present is an error."""
        i, j = self._check_dyad(i, j)
        if self._adj[i, j]:
            raise InvalidArgument(f"edge ({i}, {j}) already present")
        self._set(i, j, 1)

    def remove_edge(self, i: int, j: int) -> None:
        """Remove tie (i, j). Removing an absent tie is an error."""
        i, j = self._check_dyad(i, j)
        if not self._adj[i, j]:
            raise InvalidArgument(f"edge ({i}, {j}) not present")
        self._set(i, j, 0)

    def toggle(self, i: int, j: int) -> bool:
        """Flip the tie state of (i, j) and return the previous state.

        Calling toggle again on the same dyad restores the original state.
        """
        i, j = self._check_dyad(i, j)
        previous = bool(self._adj[i, j])
        self._set(i, j, 0 if previous else 1)
        return previous

    # ── Degrees and neighbourhoods ───────────────────────────────────

    def degrees(self, direction: Direction = "total") -> np.ndarray:
        """Degree vector of shape (n,). Undirected graphs ignore direction."""
        if direction not in _DIRECTIONS:
            raise InvalidArgument(
                f"direction must be one of {_DIRECTIONS}, got {direction!r}"
            )
        out_deg = self._adj.sum(axis=1, dtype=np.int64)
        if not self._directed:
            return out_deg
        in_deg = self._adj.sum(axis=0, dtype=np.int64)
        if direction == "out":
            return out_deg
        if direction == "in":
            return in_deg
        return out_deg + in_deg

    def degree(self, i: int, direction: Direction = "total") -> int:
        i = self._check_node(i)
        return int(self.degrees(direction)[i])

    def neighbors(self, i: int) -> set[int]:
        """Nodes tied to i in either direction."""
        i = self._check_node(i)
        mask = (self._adj[i] | self._adj[:, i]).astype(bool)
        return set(np.flatnonzero(mask).tolist())

    def successors(self, i: int) -> set[int]:
        i = self._check_node(i)
        return set(np.flatnonzero(self._adj[i]).tolist())

    def predecessors(self, i: int) -> set[int]:
        i = self._check_node(i)
        return set(np.flatnonzero(self._adj[:, i]).tolist())

    def common_neighbors(self, i: int, j: int) -> set[int]:
        """Nodes tied (in any direction) to both i and j."""
        i, j = self._check_dyad(i, j)
        return (self.neighbors(i) & self.neighbors(j)) - {i, j}

    # ── Conversion ───────────────────────────────────────────────────

    def copy(self) -> "Graph":
        clone = Graph(self._n, self._directed, self._attributes)
        clone._adj[:] = self._adj
        return clone

    def to_csr(self) -> scipy.sparse.csr_matrix:
        """Adjacency as a scipy CSR matrix (float64, symmetric if undirected)."""
        return scipy.sparse.csr_matrix(self._adj.astype(np.float64))

    def __repr__(self) -> str:
        kind = "directed" if self._directed else "undirected"
        return (
            f"Graph(n={self._n}, {kind}, edges={self.edge_count}, "
            f"attributes={list(self._attributes)})"
        )


@contextmanager
def toggled(graph: Graph, i: int, j: int) -> Iterator[bool]:
    """Toggle (i, j) for the duration of a block, then toggle it back.

    Yields the state the dyad had before the toggle. The revert runs even if
    the block raises, so the caller always gets its graph back unchanged.
    """
    previous = graph.toggle(i, j)
    try:
        yield previous
    finally:
        graph.toggle(i, j)
