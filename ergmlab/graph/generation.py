"""Bernoulli (Erdős–Rényi) graph sampling.

The edges-only ERGM is exactly the Bernoulli graph with
p = expit(theta_edges), which makes these graphs a convenient null reference
and a source of random test networks.
"""

import logging
from collections.abc import Mapping, Sequence
from typing import Any

import numpy as np

from ergmlab.errors import InvalidArgument
from ergmlab.graph.types import Graph

log = logging.getLogger(__name__)


def sample_adjacency(
    n: int, p: float, directed: bool, rng: np.random.Generator
) -> np.ndarray:
    """Sample a 0/1 adjacency matrix with independent Bernoulli(p) dyads.

    Args:
        n: Number of vertices.
        p: Tie probability for every dyad.
        directed: If False, only the upper triangle is drawn and mirrored.
        rng: numpy random Generator for reproducibility.

    Returns:
        uint8 array of shape (n, n) with an empty diagonal.
    """
    uniform = rng.random((n, n))
    edges = (uniform < p).astype(np.uint8)
    if not directed:
        edges = np.triu(edges, k=1)
        edges = edges | edges.T
    np.fill_diagonal(edges, 0)
    return edges


def bernoulli_graph(
    n: int,
    p: float,
    directed: bool,
    rng: np.random.Generator,
    attributes: Mapping[str, Sequence[Any]] | None = None,
) -> Graph:
    """Draw a Bernoulli random graph.

    Args:
        n: Number of vertices (>= 1).
        p: Tie probability in [0, 1].
        directed: Directedness of the result.
        rng: numpy random Generator.
        attributes: Optional node attribute table.

    Returns:
        A new Graph.

    Raises:
        InvalidArgument: If p is outside [0, 1].
    """
    if not 0.0 <= p <= 1.0:
        raise InvalidArgument(f"tie probability must be in [0, 1], got {p}")
    adj = sample_adjacency(n, p, directed, rng)
    graph = Graph.from_adjacency(adj, directed, attributes)
    log.debug(
        "Bernoulli graph sampled (n=%d, p=%.3f, directed=%s, edges=%d)",
        n,
        p,
        directed,
        graph.edge_count,
    )
    return graph
