"""Change statistics: g(y+) - g(y-) for a single dyad.

y+ and y- agree with the current graph everywhere except the dyad, which is
present in y+ and absent in y-. All local formulas read the y- state; when
the dyad is currently tied, it is toggled off for the computation and
restored before returning.
"""

import logging
from collections.abc import Callable, Sequence

import numpy as np
from scipy.special import comb

from ergmlab.graph.types import Dyad, Graph, toggled
from ergmlab.statistics.attributes import category_values, node_values
from ergmlab.statistics.evaluate import check_term_applies, evaluate, gwesp_weight
from ergmlab.terms.types import (
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
)

log = logging.getLogger(__name__)


def _edges(graph: Graph, A: np.ndarray, i: int, j: int, term: Edges) -> float:
    return 1.0


def _kstar(graph: Graph, A: np.ndarray, i: int, j: int, term: KStar) -> float:
    deg = graph.degrees("total")
    return float(comb(deg[i], term.k - 1) + comb(deg[j], term.k - 1))


def _istar(graph: Graph, A: np.ndarray, i: int, j: int, term: IStar) -> float:
    return float(comb(graph.degrees("in")[j], term.k - 1))


def _ostar(graph: Graph, A: np.ndarray, i: int, j: int, term: OStar) -> float:
    return float(comb(graph.degrees("out")[i], term.k - 1))


def _twopath(graph: Graph, A: np.ndarray, i: int, j: int, term: TwoPath) -> float:
    if not graph.directed:
        deg = graph.degrees()
        return float(deg[i] + deg[j])
    # new paths h->i->j and i->j->h, minus the two closed walks i->j->i, j->i->j
    return float(A[:, i].sum() + A[j].sum() - 2 * A[j, i])


def _triangles(graph: Graph, A: np.ndarray, i: int, j: int, term: Triangles) -> float:
    if not graph.directed:
        return float(A[i] @ A[j])
    # the new arc as shortcut i->j, as first leg i->j->h, as second leg h->i->j
    shortcut = A[i] @ A[:, j]
    first_leg = A[i] @ A[j]
    second_leg = A[:, i] @ A[:, j]
    return float(shortcut + first_leg + second_leg)


def _mutual(graph: Graph, A: np.ndarray, i: int, j: int, term: Mutual) -> float:
    return float(A[j, i])


def _nodeofactor(graph: Graph, A: np.ndarray, i: int, j: int, term: NodeOFactor) -> float:
    x = node_values(graph, term.name, term.attribute, term.level)
    return float(x[i] + x[j])


def _nodeifactor(graph: Graph, A: np.ndarray, i: int, j: int, term: NodeIFactor) -> float:
    x = node_values(graph, term.name, term.attribute, term.level)
    return float(x[j]) if graph.directed else float(x[i] + x[j])


def _nodeefactor(graph: Graph, A: np.ndarray, i: int, j: int, term: NodeEFactor) -> float:
    x = node_values(graph, term.name, term.attribute, term.level)
    return float(x[i]) if graph.directed else float(x[i] + x[j])


def _nodematch(graph: Graph, A: np.ndarray, i: int, j: int, term: NodeMatch) -> float:
    values = category_values(graph, term.attribute)
    return 1.0 if values[i] == values[j] else 0.0


def _absdiff(graph: Graph, A: np.ndarray, i: int, j: int, term: AbsDiff) -> float:
    x = node_values(graph, term.name, term.attribute)
    return float(abs(x[i] - x[j]))


def _gwesp(graph: Graph, A: np.ndarray, i: int, j: int, term: GWESP) -> float:
    # f(p + 1) - f(p) = r^p, so every edge that gains one partner adds r^sp
    r = 1.0 - np.exp(-term.alpha)
    if not graph.directed:
        partners = np.flatnonzero(A[i] & A[j])
        total = gwesp_weight(len(partners), term.alpha)
        for h in partners:
            total += r ** (A[i] @ A[h]) + r ** (A[j] @ A[h])
        return float(total)
    total = gwesp_weight(A[i] @ A[:, j], term.alpha)
    # edges i->h gain the two-path i->j->h
    for h in np.flatnonzero(A[i] & A[j]):
        total += r ** (A[i] @ A[:, h])
    # edges h->j gain the two-path h->i->j
    for h in np.flatnonzero(A[:, i] & A[:, j]):
        total += r ** (A[h] @ A[:, j])
    return float(total)


_CHANGE_STATISTICS: dict[type, Callable[[Graph, np.ndarray, int, int, Term], float]] = {
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


def _local_changes(graph: Graph, i: int, j: int, terms: Sequence[Term]) -> np.ndarray:
    A = graph.adjacency.astype(np.int64)
    return np.array(
        [_CHANGE_STATISTICS[type(t)](graph, A, i, j, t) for t in terms],
        dtype=np.float64,
    )


def change_statistic(graph: Graph, dyad: Dyad, terms: Sequence[Term]) -> np.ndarray:
    """Change statistic vector for toggling dyad (i, j) from absent to present.

    The graph is left exactly as it was passed in. Frozen graphs are
    accepted; a tied dyad is then removed on a scratch copy.

    Raises:
        InvalidArgument: On a self-loop or out-of-range node index, or a
            directed-only term on an undirected graph.
        UnknownTerm, MissingAttribute, InvalidParameter: As for evaluate.
    """
    i, j = dyad
    present = graph.has_edge(i, j)
    for term in terms:
        check_term_applies(graph, term)
    if present:
        # frozen graphs (class representatives) are toggled on a copy
        target = graph.copy() if graph.frozen else graph
        with toggled(target, i, j):
            delta = _local_changes(target, i, j, terms)
    else:
        delta = _local_changes(graph, i, j, terms)
    log.debug("Change statistic for (%d, %d), present=%s: %s", i, j, present, delta)
    return delta


def change_statistic_reference(
    graph: Graph, dyad: Dyad, terms: Sequence[Term]
) -> np.ndarray:
    """Reference implementation: evaluate y+ and y- on copies and subtract.

    Slow, but independent of the local formulas, which makes it the oracle
    the incremental engine is tested against.
    """
    i, j = dyad
    with_tie = graph.copy()
    without_tie = graph.copy()
    if with_tie.has_edge(i, j):
        without_tie.remove_edge(i, j)
    else:
        with_tie.add_edge(i, j)
    return evaluate(with_tie, terms) - evaluate(without_tie, terms)


def change_statistic_matrix(graph: Graph, terms: Sequence[Term]) -> np.ndarray:
    """Change statistics for every dyad as an (n, n, len(terms)) array.

    Undirected results are mirrored across the diagonal. The diagonal holds
    NaN since self-loops are not dyads.
    """
    out = np.full((graph.n, graph.n, len(terms)), np.nan)
    for i, j in graph.dyads():
        delta = change_statistic(graph, (i, j), terms)
        out[i, j] = delta
        if not graph.directed:
            out[j, i] = delta
    return out
