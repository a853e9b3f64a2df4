"""Network statistic evaluation g(y) for a list of ERGM terms.

Every statistic is computed from the whole adjacency matrix with numpy;
the change-statistic engine holds the matching local formulas.

Directed conventions:
    triangles  transitive triples (i, j, h) with i->j, j->h and i->h, so a
               complete directed triad counts 6.
    twopath    paths i->j->h with i != h.
    gwesp      shared partners are outgoing two-paths (i->h->j) of the edge
               i->j.
    kstar      uses total degree (in + out).
"""

import logging
from collections.abc import Callable, Sequence

import numpy as np
from scipy.special import comb

from ergmlab.errors import InvalidArgument, UnknownTerm
from ergmlab.graph.types import Graph
from ergmlab.statistics.attributes import category_values, node_values
from ergmlab.terms.types import (
    DIRECTED_ONLY,
    GWESP,
    AbsDiff,
    Edges,
    IStar,
    KStar,
    Mutual,
    NodeEFactor,
    NodeIFactor,
    NodeMatch,
    NodeOFactor,
    OStar,
    Term,
    Triangles,
    TwoPath,
    term_label,
)

log = logging.getLogger(__name__)


def gwesp_weight(shared_partners: np.ndarray | int, alpha: float) -> np.ndarray | float:
    """f(p) = e^alpha * (1 - (1 - e^-alpha)^p)."""
    r = 1.0 - np.exp(-alpha)
    return np.exp(alpha) * (1.0 - np.power(r, shared_partners))


def _adj(graph: Graph) -> np.ndarray:
    return graph.adjacency.astype(np.int64)


def _edges(graph: Graph, term: Edges) -> float:
    return float(graph.edge_count)


def _kstar(graph: Graph, term: KStar) -> float:
    return float(comb(graph.degrees("total"), term.k).sum())


def _istar(graph: Graph, term: IStar) -> float:
    return float(comb(graph.degrees("in"), term.k).sum())


def _ostar(graph: Graph, term: OStar) -> float:
    return float(comb(graph.degrees("out"), term.k).sum())


def _twopath(graph: Graph, term: TwoPath) -> float:
    if not graph.directed:
        return float(comb(graph.degrees(), 2).sum())
    A = _adj(graph)
    through = graph.degrees("in") @ graph.degrees("out")
    # in*out also counts i->j->i for each reciprocated pair, twice per pair
    return float(through - 2 * _mutual_count(A))


def _triangles(graph: Graph, term: Triangles) -> float:
    A = _adj(graph)
    if graph.directed:
        return float(((A @ A) * A).sum())
    return float(np.trace(A @ A @ A) // 6)


def _mutual_count(A: np.ndarray) -> int:
    return int((A * A.T).sum()) // 2


def _mutual(graph: Graph, term: Mutual) -> float:
    return float(_mutual_count(_adj(graph)))


def _nodeofactor(graph: Graph, term: NodeOFactor) -> float:
    x = node_values(graph, term.name, term.attribute, term.level)
    return float(x @ graph.degrees("total"))


def _nodeifactor(graph: Graph, term: NodeIFactor) -> float:
    x = node_values(graph, term.name, term.attribute, term.level)
    return float(x @ graph.degrees("in"))


def _nodeefactor(graph: Graph, term: NodeEFactor) -> float:
    x = node_values(graph, term.name, term.attribute, term.level)
    return float(x @ graph.degrees("out"))


def _nodematch(graph: Graph, term: NodeMatch) -> float:
    values = category_values(graph, term.attribute)
    return float(sum(1 for i, j in graph.edges() if values[i] == values[j]))


def _absdiff(graph: Graph, term: AbsDiff) -> float:
    x = node_values(graph, term.name, term.attribute)
    edges = graph.edges()
    if not edges:
        return 0.0
    rows, cols = np.array(edges).T
    return float(np.abs(x[rows] - x[cols]).sum())


def _gwesp(graph: Graph, term: GWESP) -> float:
    A = _adj(graph)
    shared = A @ A
    if not graph.directed:
        A = np.triu(A)
    sp = shared[A.astype(bool)]
    return float(np.sum(gwesp_weight(sp, term.alpha)))


_EVALUATORS: dict[type, Callable[[Graph, Term], float]] = {
    Edges: _edges,
    KStar: _kstar,
    IStar: _istar,
    OStar: _ostar,
    TwoPath: _twopath,
    Triangles: _triangles,
    Mutual: _mutual,
    NodeOFactor: _nodeofactor,
    NodeIFactor: _nodeifactor,
    NodeEFactor: _nodeefactor,
    NodeMatch: _nodematch,
    AbsDiff: _absdiff,
    GWESP: _gwesp,
}


def check_term_applies(graph: Graph, term: Term) -> None:
    """Reject unknown terms and directed-only terms on undirected graphs."""
    if type(term) not in _EVALUATORS:
        raise UnknownTerm(f"not a recognized term: {term!r}")
    if type(term) in DIRECTED_ONLY and not graph.directed:
        raise InvalidArgument(
            f"term {term_label(term)!r} requires a directed graph"
        )


def evaluate(graph: Graph, terms: Sequence[Term]) -> np.ndarray:
    """Statistic vector g(y), one float per term in term order.

    Raises:
        UnknownTerm: If an entry is not a recognized term.
        MissingAttribute: If a referenced attribute is absent.
        InvalidParameter: If attribute values do not fit the term.
        InvalidArgument: If a directed-only term meets an undirected graph.
    """
    for term in terms:
        check_term_applies(graph, term)
    stats = np.array(
        [_EVALUATORS[type(term)](graph, term) for term in terms],
        dtype=np.float64,
    )
    log.debug("Evaluated %d terms on %r", len(stats), graph)
    return stats


def evaluate_named(graph: Graph, terms: Sequence[Term]) -> dict[str, float]:
    """Statistics keyed by term label, in term order."""
    stats = evaluate(graph, terms)
    return {term_label(t): float(v) for t, v in zip(terms, stats)}
