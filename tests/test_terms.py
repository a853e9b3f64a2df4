"""Tests for term construction, labels, models, JSON round-trips and fit_with."""

import json

import numpy as np
import pytest

from ergmlab.errors import InvalidArgument, InvalidParameter, UnknownTerm
from ergmlab.graph import Graph
from ergmlab.terms import (
    GWESP,
    AbsDiff,
    Edges,
    KStar,
    Model,
    Mutual,
    NodeMatch,
    NodeOFactor,
    Triangles,
    TwoPath,
    fit_with,
    make_term,
    model_from_json,
    model_to_json,
    term_from_dict,
    term_label,
    term_to_dict,
)


class TestMakeTerm:
    """Building terms by name."""

    def test_known_terms(self) -> None:
        assert make_term("edges") == Edges()
        assert make_term("kstar", k=3) == KStar(3)
        assert make_term("nodematch", attribute="sex") == NodeMatch("sex")
        assert make_term("gwesp", alpha=0.5, fixed=True) == GWESP(0.5)

    def test_unknown_name(self) -> None:
        with pytest.raises(UnknownTerm, match="unknown term 'isolates'"):
            make_term("isolates")

    def test_missing_parameter(self) -> None:
        with pytest.raises(InvalidParameter):
            make_term("nodematch")

    def test_extra_parameter(self) -> None:
        with pytest.raises(InvalidParameter, match="unexpected parameters"):
            make_term("nodematch", attribute="sex", k=2)

    @pytest.mark.parametrize("k", [1, 0, -2, 2.0, True])
    def test_kstar_rejects_bad_k(self, k) -> None:
        with pytest.raises(InvalidParameter):
            KStar(k)

    @pytest.mark.parametrize("alpha", [0, -0.5, float("inf"), "0.5"])
    def test_gwesp_rejects_bad_alpha(self, alpha) -> None:
        with pytest.raises(InvalidParameter):
            GWESP(alpha)

    def test_gwesp_requires_fixed(self) -> None:
        with pytest.raises(InvalidParameter, match="fixed=True"):
            GWESP(0.5, fixed=False)

    def test_attribute_name_required(self) -> None:
        with pytest.raises(InvalidParameter, match="attribute name"):
            AbsDiff("")


class TestLabels:
    """statnet-style coefficient labels."""

    @pytest.mark.parametrize(
        "term,label",
        [
            (Edges(), "edges"),
            (KStar(2), "kstar2"),
            (TwoPath(), "twopath"),
            (Triangles(), "triangles"),
            (Mutual(), "mutual"),
            (NodeMatch("sex"), "nodematch.sex"),
            (NodeOFactor("sex", level="F"), "nodeofactor.sex.F"),
            (AbsDiff("age"), "absdiff.age"),
            (GWESP(0.25), "gwesp.fixed.0.25"),
        ],
    )
    def test_label(self, term, label) -> None:
        assert term_label(term) == label

    def test_label_of_non_term(self) -> None:
        with pytest.raises(UnknownTerm):
            term_label("edges")  # type: ignore[arg-type]


class TestModel:
    """Model validation and helpers."""

    def test_coefficients_aligned_with_terms(self) -> None:
        model = Model((Edges(), KStar(2)), [-1.0, 0.25])
        assert model.labels == ("edges", "kstar2")
        assert model.coefficient(KStar(2)) == 0.25
        assert len(model) == 2

    def test_length_mismatch(self) -> None:
        with pytest.raises(InvalidArgument, match="2 terms but 1 coefficients"):
            Model((Edges(), KStar(2)), [0.5])

    def test_duplicate_terms(self) -> None:
        with pytest.raises(InvalidArgument, match="duplicate term 'kstar2'"):
            Model((KStar(2), Edges(), KStar(2)), [0.0, 0.0, 0.0])

    def test_same_kind_different_parameters_allowed(self) -> None:
        model = Model((KStar(2), KStar(3)), [0.1, -0.1])
        assert model.labels == ("kstar2", "kstar3")

    def test_non_term_rejected(self) -> None:
        with pytest.raises(UnknownTerm):
            Model(("edges",), [0.0])  # type: ignore[arg-type]

    def test_non_finite_coefficient(self) -> None:
        with pytest.raises(InvalidArgument, match="finite"):
            Model((Edges(),), [float("nan")])

    def test_null_model(self) -> None:
        model = Model.null((Edges(), Triangles()))
        assert model.coefficients.tolist() == [0.0, 0.0]

    def test_coefficients_read_only(self) -> None:
        model = Model((Edges(),), [1.0])
        with pytest.raises(ValueError):
            model.coefficients[0] = 2.0

    def test_linear_predictor(self) -> None:
        model = Model((Edges(), TwoPath()), [-0.5, 0.2])
        assert model.linear_predictor(np.array([1.0, 3.0])) == pytest.approx(0.1)
        with pytest.raises(InvalidArgument, match="does not match"):
            model.linear_predictor(np.array([1.0]))


class TestSerialization:
    """JSON round-trip through dacite."""

    def test_model_round_trip(self) -> None:
        model = Model(
            (Edges(), KStar(2), NodeOFactor("sex", level="F"), GWESP(0.5)),
            [-2.0, 0.1, 0.3, 0.7],
        )
        restored = model_from_json(model_to_json(model))
        assert restored.terms == model.terms
        assert np.array_equal(restored.coefficients, model.coefficients)

    def test_term_dict_form(self) -> None:
        assert term_to_dict(KStar(2)) == {"name": "kstar", "k": 2}
        assert term_to_dict(Edges()) == {"name": "edges"}

    def test_integer_alpha_is_cast(self) -> None:
        term = term_from_dict({"name": "gwesp", "alpha": 1, "fixed": True})
        assert term == GWESP(1.0)
        assert isinstance(term.alpha, float)

    def test_unknown_key_rejected(self) -> None:
        with pytest.raises(InvalidParameter):
            term_from_dict({"name": "kstar", "k": 2, "decay": 0.5})

    def test_unknown_name_rejected(self) -> None:
        with pytest.raises(UnknownTerm):
            term_from_dict({"name": "isolates"})

    def test_model_missing_key(self) -> None:
        payload = json.dumps({"terms": [{"name": "edges"}]})
        with pytest.raises(InvalidArgument, match="missing key"):
            model_from_json(payload)


class TestFitWith:
    """The external estimator seam."""

    def test_wraps_estimator_output(self) -> None:
        g = Graph.create(4, directed=False, edges=[(0, 1), (1, 2)])
        calls = []

        def estimator(graph, terms):
            calls.append((graph, terms))
            return [-1.2, 0.4]

        model = fit_with(estimator, g, [Edges(), KStar(2)])
        assert model.coefficients.tolist() == [-1.2, 0.4]
        assert calls[0][1] == (Edges(), KStar(2))

    def test_wrong_number_of_coefficients(self) -> None:
        g = Graph.create(4, directed=False)
        with pytest.raises(InvalidArgument):
            fit_with(lambda graph, terms: [0.0], g, [Edges(), KStar(2)])
