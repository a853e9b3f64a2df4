"""Exhaustive enumeration of small labeled networks and fingerprint classes.

This is a teaching and verification tool, not an inference method: the
number of labeled graphs is 2^(n(n-1)) directed or 2^(n(n-1)/2) undirected,
so sizes are capped by EnumerationConfig and anything larger is refused
before work starts.

A class fingerprint holds the classification statistics, the sorted degree
sequence and, by default, a canonical code: the smallest dyad bitmask the
graph takes under any relabeling of its nodes. Two graphs share a canonical
code exactly when they are isomorphic, so every class is one isomorphism
class (split further only by attribute-dependent statistics) and all of its
labeled members carry the same weight under any structural model. With
canonical_labeling switched off the fingerprint is a heuristic that merges
non-isomorphic graphs from undirected n = 6 and directed n = 4 on.
"""

import logging
from collections.abc import Mapping, Sequence
from functools import lru_cache
from itertools import permutations
from typing import Any

import numpy as np

from ergmlab.config.defaults import DEFAULT_CONFIG
from ergmlab.config.engine import EngineConfig
from ergmlab.config.hashing import enumeration_key
from ergmlab.errors import InvalidArgument, ResourceLimitExceeded
from ergmlab.exact.types import CanonicalClass
from ergmlab.graph.types import Graph
from ergmlab.statistics.evaluate import evaluate
from ergmlab.terms.model import validate_terms
from ergmlab.terms.serialization import term_to_dict
from ergmlab.terms.types import Edges, KStar, Mutual, Term, Triangles

log = logging.getLogger(__name__)

# Keyed by enumeration_key; holds attribute-free runs only.
_CLASS_CACHE: dict[str, list[CanonicalClass]] = {}

# n! relabelings per graph; 8! = 40320 and 56 directed dyads fit an int64 code.
MAX_CANONICAL_NODES = 8

# Upper bound on graph x relabeling codes held in memory at once.
_CODE_BLOCK = 1 << 22


def _dyad_total(n: int, directed: bool) -> int:
    pairs = n * (n - 1)
    return pairs if directed else pairs // 2


def check_enumeration_size(
    n: int, directed: bool, config: EngineConfig = DEFAULT_CONFIG
) -> int:
    """Validate n against the configured cap and return the graph count.

    Raises:
        InvalidArgument: If n < 1.
        ResourceLimitExceeded: If n exceeds the cap for this directedness.
    """
    if isinstance(n, bool) or not isinstance(n, (int, np.integer)) or n < 1:
        raise InvalidArgument(f"node count must be an integer >= 1, got {n!r}")
    n = int(n)
    cap = (
        config.enumeration.max_nodes_directed
        if directed
        else config.enumeration.max_nodes_undirected
    )
    if n > cap:
        kind = "directed" if directed else "undirected"
        raise ResourceLimitExceeded(
            f"refusing to enumerate {kind} graphs on {n} nodes "
            f"(2^{_dyad_total(n, directed)} graphs); cap is n <= {cap}"
        )
    count = 2 ** _dyad_total(n, directed)
    cap_count = 2 ** _dyad_total(cap, directed)
    if count > config.enumeration.warn_fraction * cap_count:
        log.warning(
            "Enumerating %d labeled graphs (n=%d, directed=%s); "
            "this is close to the configured cap",
            count,
            n,
            directed,
        )
    return count


def enumerate_all(
    n: int,
    directed: bool,
    attributes: Mapping[str, Sequence[Any]] | None = None,
    config: EngineConfig = DEFAULT_CONFIG,
) -> list[Graph]:
    """All labeled graphs on n nodes, ordered by dyad bitmask.

    Bit b of the index is the tie state of the b-th dyad in Graph.dyads()
    order, so index 0 is the empty graph and the last one is complete.

    Args:
        n: Number of nodes.
        directed: Directedness of every graph produced.
        attributes: Optional node attribute table shared by all graphs.
        config: Engine configuration carrying the size caps.

    Raises:
        InvalidArgument: If n < 1.
        ResourceLimitExceeded: If n exceeds the configured cap.
    """
    count = check_enumeration_size(n, directed, config)
    n = int(n)
    template = Graph(n, directed, attributes)
    dyads = list(template.dyads())
    rows = np.array([i for i, _ in dyads], dtype=np.int64)
    cols = np.array([j for _, j in dyads], dtype=np.int64)
    bits = (np.arange(count, dtype=np.int64)[:, None] >> np.arange(len(dyads))) & 1

    graphs: list[Graph] = []
    for mask_bits in bits:
        adj = np.zeros((n, n), dtype=np.uint8)
        adj[rows, cols] = mask_bits
        if not directed:
            adj[cols, rows] = mask_bits
        graphs.append(Graph.from_adjacency(adj, directed, attributes))

    log.info("Enumerated %d labeled graphs (n=%d, directed=%s)", count, n, directed)
    return graphs


@lru_cache(maxsize=None)
def _relabel_weights(n: int, directed: bool) -> np.ndarray:
    """(dyads, n!) matrix: bit weight each dyad lands on under each relabeling.

    Column p sends dyad (i, j) to (perm[i], perm[j]); the code of the
    relabeled graph is then bits @ column.
    """
    dyads = list(Graph(n, directed).dyads())
    position = {d: k for k, d in enumerate(dyads)}
    perms = list(permutations(range(n)))
    weights = np.zeros((len(dyads), len(perms)), dtype=np.int64)
    for p, perm in enumerate(perms):
        for k, (i, j) in enumerate(dyads):
            a, b = perm[i], perm[j]
            if not directed and a > b:
                a, b = b, a
            weights[k, p] = 1 << position[(a, b)]
    weights.flags.writeable = False
    return weights


def canonical_codes(graphs: Sequence[Graph]) -> np.ndarray:
    """Canonical code of each graph: its minimum dyad bitmask over relabelings.

    Isomorphic graphs, and only those, get equal codes. All graphs must share
    one node count and directedness.

    Raises:
        InvalidArgument: If graphs mix node counts or directedness.
        ResourceLimitExceeded: If n exceeds MAX_CANONICAL_NODES.
    """
    if not graphs:
        return np.zeros(0, dtype=np.int64)
    n, directed = graphs[0].n, graphs[0].directed
    if any(g.n != n or g.directed != directed for g in graphs):
        raise InvalidArgument("canonical codes need graphs of one size and directedness")
    if n > MAX_CANONICAL_NODES:
        raise ResourceLimitExceeded(
            f"canonical labeling tries n! relabelings; n={n} exceeds "
            f"{MAX_CANONICAL_NODES}"
        )
    dyads = list(graphs[0].dyads())
    rows = np.array([i for i, _ in dyads], dtype=np.int64)
    cols = np.array([j for _, j in dyads], dtype=np.int64)
    bits = np.stack([g.adjacency for g in graphs])[:, rows, cols].astype(np.int64)

    weights = _relabel_weights(n, directed)
    step = max(1, _CODE_BLOCK // len(graphs))
    codes = np.full(len(graphs), np.iinfo(np.int64).max, dtype=np.int64)
    for start in range(0, weights.shape[1], step):
        block = bits @ weights[:, start : start + step]
        np.minimum(codes, block.min(axis=1), out=codes)
    return codes


def default_classification_terms(directed: bool) -> tuple[Term, ...]:
    """edges, 2-stars and triangles, plus mutual dyads when directed."""
    terms: tuple[Term, ...] = (Edges(), KStar(2), Triangles())
    if directed:
        terms += (Mutual(),)
    return terms


def degree_sequence(graph: Graph) -> tuple[Any, ...]:
    """Sorted degree sequence; (out, in) pairs for directed graphs."""
    if not graph.directed:
        return tuple(sorted(graph.degrees().tolist()))
    pairs = zip(graph.degrees("out").tolist(), graph.degrees("in").tolist())
    return tuple(sorted(pairs))


def _fingerprint_key(
    graph: Graph,
    terms: Sequence[Term],
    include_degree_sequence: bool,
    code: int | None,
) -> tuple[Any, ...]:
    key = tuple(np.round(evaluate(graph, terms), 9).tolist())
    if include_degree_sequence:
        key += (degree_sequence(graph),)
    if code is not None:
        key += (code,)
    return key


def fingerprint(
    graph: Graph,
    terms: Sequence[Term],
    include_degree_sequence: bool = True,
    canonical_labeling: bool = True,
) -> tuple[Any, ...]:
    """Relabeling-invariant key: rounded statistics, degree sequence, code."""
    code = int(canonical_codes([graph])[0]) if canonical_labeling else None
    return _fingerprint_key(graph, terms, include_degree_sequence, code)


def canonicalize(
    graphs: Sequence[Graph],
    terms: Sequence[Term] | None = None,
    config: EngineConfig = DEFAULT_CONFIG,
) -> list[CanonicalClass]:
    """Group labeled graphs into fingerprint classes.

    Each representative is a frozen copy of the first member seen, so
    classes stay read-only even when the input graphs are later mutated.

    Args:
        graphs: Graphs sharing one node count and directedness.
        terms: Classification terms; defaults to default_classification_terms.
        config: Engine configuration (fingerprint options).

    Returns:
        Classes in order of first appearance. Multiplicities sum to
        len(graphs).

    Raises:
        InvalidArgument: If graphs mix node counts or directedness.
    """
    if not graphs:
        return []
    first = graphs[0]
    for g in graphs:
        if g.n != first.n or g.directed != first.directed:
            raise InvalidArgument(
                "canonicalize needs graphs of one size and directedness, "
                f"got {first!r} and {g!r}"
            )
    if terms is None:
        terms = default_classification_terms(first.directed)
    terms = validate_terms(terms)
    options = config.classification
    if options.canonical_labeling:
        codes: list[int | None] = canonical_codes(graphs).tolist()
    else:
        codes = [None] * len(graphs)

    groups: dict[tuple[Any, ...], list[Any]] = {}
    for g, code in zip(graphs, codes):
        key = _fingerprint_key(g, terms, options.include_degree_sequence, code)
        entry = groups.get(key)
        if entry is None:
            groups[key] = [g, 1]
        else:
            entry[1] += 1

    classes = [
        CanonicalClass(
            fingerprint=key,
            representative=rep.copy().freeze(),
            multiplicity=count,
            statistics=tuple(float(v) for v in evaluate(rep, terms)),
            terms=terms,
        )
        for key, (rep, count) in groups.items()
    ]
    log.info(
        "Canonicalized %d graphs into %d classes (n=%d, directed=%s)",
        len(graphs),
        len(classes),
        first.n,
        first.directed,
    )
    return classes


def enumerate_classes(
    n: int,
    directed: bool,
    terms: Sequence[Term] | None = None,
    config: EngineConfig = DEFAULT_CONFIG,
) -> list[CanonicalClass]:
    """Enumerate and canonicalize, reusing earlier runs with the same key.

    Cached classes are shared between calls; their representatives are
    frozen, so callers must copy() one before mutating it.
    """
    check_enumeration_size(n, directed, config)
    n = int(n)
    if terms is None:
        terms = default_classification_terms(directed)
    terms = validate_terms(terms)
    key = enumeration_key(n, directed, [term_to_dict(t) for t in terms], config)
    cached = _CLASS_CACHE.get(key)
    if cached is not None:
        log.info("Class cache hit for %s", key)
        return list(cached)
    classes = canonicalize(enumerate_all(n, directed, config=config), terms, config)
    _CLASS_CACHE[key] = classes
    return list(classes)


def clear_class_cache() -> None:
    _CLASS_CACHE.clear()
