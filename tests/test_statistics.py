"""Tests for the statistic evaluator on small hand-checked networks."""

import math

import numpy as np
import pytest

from ergmlab.errors import InvalidArgument, InvalidParameter, MissingAttribute, UnknownTerm
from ergmlab.graph import Graph
from ergmlab.statistics import evaluate, evaluate_named, gwesp_weight
from ergmlab.terms import (
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
    Triangles,
    TwoPath,
)


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def paw() -> Graph:
    """Triangle 0-1-2 with a pendant 3 hanging off node 2."""
    return Graph.create(
        4,
        directed=False,
        attributes={
            "sex": ["F", "F", "M", "M"],
            "age": [10, 12, 15, 11],
            "smoker": [True, False, False, True],
        },
        edges=[(0, 1), (1, 2), (0, 2), (2, 3)],
    )


@pytest.fixture
def digraph() -> Graph:
    """Arcs 0->1, 1->0, 1->2, 0->2."""
    return Graph.create(
        3,
        directed=True,
        attributes={"x": [1, 2, 3]},
        edges=[(0, 1), (1, 0), (1, 2), (0, 2)],
    )


# ---------------------------------------------------------------------------
# Undirected
# ---------------------------------------------------------------------------

class TestUndirectedStatistics:
    """Structural and attribute statistics on the paw graph."""

    def test_structural_terms(self, paw: Graph) -> None:
        stats = evaluate(paw, [Edges(), KStar(2), KStar(3), Triangles(), TwoPath()])
        assert stats.tolist() == [4.0, 5.0, 1.0, 1.0, 5.0]

    def test_gwesp_one_partner_per_triangle_edge(self, paw: Graph) -> None:
        # f(1) = 1 for every alpha; the pendant edge has no partner
        for alpha in (0.1, 0.5, 2.0):
            assert evaluate(paw, [GWESP(alpha)])[0] == pytest.approx(3.0)

    def test_gwesp_complete_graph(self) -> None:
        k4 = Graph.create(4, directed=False, edges=[(i, j) for i in range(4) for j in range(i + 1, 4)])
        alpha = 0.5
        expected = 6 * math.exp(alpha) * (1 - (1 - math.exp(-alpha)) ** 2)
        assert evaluate(k4, [GWESP(alpha)])[0] == pytest.approx(expected)

    def test_nodematch(self, paw: Graph) -> None:
        assert evaluate(paw, [NodeMatch("sex")])[0] == 2.0

    def test_absdiff(self, paw: Graph) -> None:
        assert evaluate(paw, [AbsDiff("age")])[0] == 14.0

    def test_nodeofactor_numeric_and_level(self, paw: Graph) -> None:
        stats = evaluate(paw, [NodeOFactor("age"), NodeOFactor("sex", level="M")])
        assert stats.tolist() == [100.0, 4.0]

    def test_boolean_attribute_counts_as_indicator(self, paw: Graph) -> None:
        # smokers are nodes 0 (degree 2) and 3 (degree 1)
        assert evaluate(paw, [NodeOFactor("smoker")])[0] == 3.0

    def test_factor_terms_agree_when_undirected(self, paw: Graph) -> None:
        stats = evaluate(
            paw,
            [NodeOFactor("age"), NodeIFactor("age"), NodeEFactor("age")],
        )
        assert stats[0] == stats[1] == stats[2]

    def test_empty_graph_is_all_zero(self) -> None:
        g = Graph.create(5, directed=False, attributes={"age": [1, 2, 3, 4, 5]})
        stats = evaluate(g, [Edges(), KStar(2), Triangles(), GWESP(0.5), AbsDiff("age")])
        assert stats.tolist() == [0.0] * 5

    def test_term_order_is_preserved(self, paw: Graph) -> None:
        forward = evaluate(paw, [Edges(), Triangles()])
        backward = evaluate(paw, [Triangles(), Edges()])
        assert forward.tolist() == backward[::-1].tolist()

    def test_evaluate_named(self, paw: Graph) -> None:
        assert evaluate_named(paw, [Edges(), NodeMatch("sex")]) == {
            "edges": 4.0,
            "nodematch.sex": 2.0,
        }


# ---------------------------------------------------------------------------
# Directed
# ---------------------------------------------------------------------------

class TestDirectedStatistics:
    """Directed conventions: transitive triples, OTP shared partners."""

    def test_edges_and_mutual(self, digraph: Graph) -> None:
        assert evaluate(digraph, [Edges(), Mutual()]).tolist() == [4.0, 1.0]

    def test_stars(self, digraph: Graph) -> None:
        stats = evaluate(digraph, [KStar(2), IStar(2), OStar(2)])
        assert stats.tolist() == [7.0, 1.0, 2.0]

    def test_twopath_excludes_returns(self, digraph: Graph) -> None:
        # 0->1->2 and 1->0->2; 0->1->0 and 1->0->1 do not count
        assert evaluate(digraph, [TwoPath()])[0] == 2.0

    def test_triangles_are_transitive_triples(self, digraph: Graph) -> None:
        # (0, 1, 2) and (1, 0, 2)
        assert evaluate(digraph, [Triangles()])[0] == 2.0

    def test_complete_triad_counts_six(self) -> None:
        g = Graph.create(3, directed=True, edges=[(i, j) for i in range(3) for j in range(3) if i != j])
        assert evaluate(g, [Triangles()])[0] == 6.0

    def test_gwesp_outgoing_two_paths(self, digraph: Graph) -> None:
        # sp(1,2) = 1 via 0, sp(0,2) = 1 via 1, others 0
        assert evaluate(digraph, [GWESP(0.7)])[0] == pytest.approx(2.0)

    def test_factor_terms(self, digraph: Graph) -> None:
        stats = evaluate(
            digraph,
            [NodeOFactor("x"), NodeIFactor("x"), NodeEFactor("x")],
        )
        assert stats.tolist() == [15.0, 9.0, 6.0]


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------

class TestEvaluatorErrors:
    """Bad terms and missing attributes surface immediately."""

    def test_unknown_term(self, paw: Graph) -> None:
        with pytest.raises(UnknownTerm):
            evaluate(paw, ["edges"])  # type: ignore[list-item]

    def test_missing_attribute(self, paw: Graph) -> None:
        with pytest.raises(MissingAttribute, match="race"):
            evaluate(paw, [NodeMatch("race")])

    def test_categorical_needs_level(self, paw: Graph) -> None:
        with pytest.raises(InvalidParameter, match="numeric"):
            evaluate(paw, [AbsDiff("sex")])

    @pytest.mark.parametrize("term", [Mutual(), IStar(2), OStar(2)])
    def test_directed_only_terms(self, paw: Graph, term) -> None:
        with pytest.raises(InvalidArgument, match="directed graph"):
            evaluate(paw, [term])


def test_gwesp_weight_closed_form() -> None:
    alpha = 0.8
    p = np.arange(5)
    expected = np.exp(alpha) * (1 - (1 - np.exp(-alpha)) ** p)
    assert np.allclose(gwesp_weight(p, alpha), expected)
    assert gwesp_weight(0, alpha) == 0.0
