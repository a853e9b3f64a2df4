"""ERGM model: ordered terms paired with coefficients, plus the estimator seam.

Estimation itself (MCMC-MLE and friends) happens outside this package. An
estimator is anything callable as ``estimator(graph, terms)`` returning one
coefficient per term; ``fit_with`` turns that output into a validated Model.
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Protocol

import numpy as np

from ergmlab.errors import InvalidArgument, UnknownTerm
from ergmlab.graph.types import Graph
from ergmlab.terms.types import Term, is_term, term_label

log = logging.getLogger(__name__)


def validate_terms(terms: Sequence[Term]) -> tuple[Term, ...]:
    """Check that every entry is a term and that no term repeats."""
    terms = tuple(terms)
    for term in terms:
        if not is_term(term):
            raise UnknownTerm(f"not a term: {term!r}")
    seen: set[Term] = set()
    for term in terms:
        if term in seen:
            raise InvalidArgument(f"duplicate term {term_label(term)!r}")
        seen.add(term)
    return terms


@dataclass(frozen=True, eq=False)
class Model:
    """Ordered terms with one real coefficient each.

    Term order fixes the coordinate order of every statistic vector computed
    against this model. Uses frozen=True but omits slots=True since numpy
    arrays don't interact well with __slots__.
    """

    terms: tuple[Term, ...]
    coefficients: np.ndarray

    def __post_init__(self) -> None:
        terms = validate_terms(self.terms)
        coefs = np.array(self.coefficients, dtype=np.float64).reshape(-1)
        if coefs.shape[0] != len(terms):
            raise InvalidArgument(
                f"{len(terms)} terms but {coefs.shape[0]} coefficients"
            )
        if not np.all(np.isfinite(coefs)):
            raise InvalidArgument(f"coefficients must be finite, got {coefs}")
        coefs.flags.writeable = False
        object.__setattr__(self, "terms", terms)
        object.__setattr__(self, "coefficients", coefs)

    @classmethod
    def null(cls, terms: Sequence[Term]) -> "Model":
        """Model with every coefficient zero (uniform over networks)."""
        return cls(tuple(terms), np.zeros(len(terms)))

    @property
    def labels(self) -> tuple[str, ...]:
        return tuple(term_label(t) for t in self.terms)

    def coefficient(self, term: Term) -> float:
        try:
            return float(self.coefficients[self.terms.index(term)])
        except ValueError:
            raise InvalidArgument(f"term {term!r} is not in the model") from None

    def linear_predictor(self, stats: np.ndarray) -> float:
        """theta . stats for a statistic (or change statistic) vector."""
        stats = np.asarray(stats, dtype=np.float64)
        if stats.shape != self.coefficients.shape:
            raise InvalidArgument(
                f"statistic vector shape {stats.shape} does not match "
                f"{self.coefficients.shape}"
            )
        return float(self.coefficients @ stats)

    def __len__(self) -> int:
        return len(self.terms)

    def __repr__(self) -> str:
        pairs = ", ".join(
            f"{label}={coef:g}" for label, coef in zip(self.labels, self.coefficients)
        )
        return f"Model({pairs})"


class Estimator(Protocol):
    """External fitting routine: network and terms in, coefficients out."""

    def __call__(self, graph: Graph, terms: tuple[Term, ...]) -> Sequence[float]:
        ...


def fit_with(estimator: Estimator, graph: Graph, terms: Sequence[Term]) -> Model:
    """Run an external estimator and wrap its coefficients in a Model.

    Raises:
        InvalidArgument: If the estimator returns the wrong number of
            coefficients or non-finite values.
    """
    terms = validate_terms(terms)
    coefficients = estimator(graph, terms)
    model = Model(terms, np.asarray(coefficients, dtype=np.float64))
    log.info("Fitted model: %r", model)
    return model
