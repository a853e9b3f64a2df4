"""Exact ERGM probabilities over enumerated network classes.

P(Y = y) = exp(theta . g(y)) / kappa(theta), where kappa sums the weight of
every labeled network. Classes carry multiplicities, so
kappa = sum_c m_c * w_c. All sums run in log space via logsumexp so that
large coefficients do not overflow.
"""

import logging
from collections.abc import Sequence

import numpy as np
from scipy.special import expit, logsumexp

from ergmlab.config.defaults import DEFAULT_CONFIG
from ergmlab.config.engine import EngineConfig
from ergmlab.errors import InvalidArgument
from ergmlab.exact.types import CanonicalClass
from ergmlab.graph.types import Dyad, Graph
from ergmlab.statistics.change import change_statistic, change_statistic_matrix
from ergmlab.statistics.evaluate import evaluate
from ergmlab.terms.model import Model
from ergmlab.terms.types import Term

log = logging.getLogger(__name__)


def log_weight(graph: Graph, model: Model) -> float:
    """theta . g(graph)."""
    return model.linear_predictor(evaluate(graph, model.terms))


def unnormalized_weight(graph: Graph, model: Model) -> float:
    """exp(theta . g(graph))."""
    return float(np.exp(log_weight(graph, model)))


def _class_log_weights(
    classes: Sequence[CanonicalClass], model: Model
) -> tuple[np.ndarray, np.ndarray]:
    if not classes:
        raise InvalidArgument("need at least one class")
    log_w = np.array([log_weight(c.representative, model) for c in classes])
    mult = np.array([c.multiplicity for c in classes], dtype=np.float64)
    return log_w, mult


def log_normalizing_constant(
    classes: Sequence[CanonicalClass], model: Model
) -> float:
    """log kappa(theta) = log sum_c m_c exp(theta . g_c)."""
    log_w, mult = _class_log_weights(classes, model)
    return float(logsumexp(log_w, b=mult))


def _check_total(total: float, config: EngineConfig) -> None:
    if abs(total - 1.0) > config.tolerance:
        log.warning(
            "Probabilities sum to %.12f, outside tolerance %g",
            total,
            config.tolerance,
        )


def distribution(
    classes: Sequence[CanonicalClass],
    model: Model,
    config: EngineConfig = DEFAULT_CONFIG,
) -> dict[CanonicalClass, float]:
    """Probability of each class: m_c w_c / sum m w.

    Every labeled member of a class has the same weight, so the result does
    not depend on node labels. Under the null model the class probabilities
    are proportional to multiplicities.
    """
    log_w, mult = _class_log_weights(classes, model)
    log_z = logsumexp(log_w, b=mult)
    probs = np.exp(np.log(mult) + log_w - log_z)
    _check_total(float(probs.sum()), config)
    return dict(zip(classes, probs.tolist()))


def graph_probabilities(
    classes: Sequence[CanonicalClass],
    model: Model,
    config: EngineConfig = DEFAULT_CONFIG,
) -> dict[CanonicalClass, float]:
    """Probability of any single labeled network in each class: w_c / sum m w.

    Weighted by multiplicity these sum to one.
    """
    log_w, mult = _class_log_weights(classes, model)
    probs = np.exp(log_w - logsumexp(log_w, b=mult))
    _check_total(float(probs @ mult), config)
    return dict(zip(classes, probs.tolist()))


def expected_statistics(
    classes: Sequence[CanonicalClass],
    model: Model,
    terms: Sequence[Term] | None = None,
) -> np.ndarray:
    """E_theta[g(Y)] for the given terms (default: the model's own terms)."""
    if terms is None:
        terms = model.terms
    probs = distribution(classes, model)
    stats = np.array([evaluate(c.representative, terms) for c in classes])
    weights = np.array([probs[c] for c in classes])
    return weights @ stats


def exact_log_likelihood(
    graph: Graph, model: Model, classes: Sequence[CanonicalClass]
) -> float:
    """log P(Y = graph) = theta . g(graph) - log kappa(theta).

    Raises:
        InvalidArgument: If the classes were built for another node count or
            directedness.
    """
    rep = classes[0].representative if classes else None
    if rep is None or rep.n != graph.n or rep.directed != graph.directed:
        raise InvalidArgument(
            f"classes do not describe graphs like {graph!r}"
        )
    return log_weight(graph, model) - log_normalizing_constant(classes, model)


def conditional_tie_probability(graph: Graph, dyad: Dyad, model: Model) -> float:
    """P(Y_ij = 1 | rest of the network) = 1 / (1 + exp(-theta . delta_ij))."""
    delta = change_statistic(graph, dyad, model.terms)
    return float(expit(model.linear_predictor(delta)))


def conditional_probability_matrix(graph: Graph, model: Model) -> np.ndarray:
    """Conditional tie probability for every dyad; NaN on the diagonal."""
    deltas = change_statistic_matrix(graph, model.terms)
    return expit(deltas @ model.coefficients)
