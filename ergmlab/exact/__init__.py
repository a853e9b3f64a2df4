"""Exact ERGM probabilities by exhaustive enumeration of small networks."""

from ergmlab.exact.distribution import (
    conditional_probability_matrix,
    conditional_tie_probability,
    distribution,
    exact_log_likelihood,
    expected_statistics,
    graph_probabilities,
    log_normalizing_constant,
    log_weight,
    unnormalized_weight,
)
from ergmlab.exact.enumeration import (
    MAX_CANONICAL_NODES,
    canonical_codes,
    canonicalize,
    check_enumeration_size,
    clear_class_cache,
    default_classification_terms,
    degree_sequence,
    enumerate_all,
    enumerate_classes,
    fingerprint,
)
from ergmlab.exact.types import CanonicalClass

__all__ = [
    "CanonicalClass",
    "MAX_CANONICAL_NODES",
    "canonical_codes",
    "canonicalize",
    "check_enumeration_size",
    "clear_class_cache",
    "conditional_probability_matrix",
    "conditional_tie_probability",
    "default_classification_terms",
    "degree_sequence",
    "distribution",
    "enumerate_all",
    "enumerate_classes",
    "exact_log_likelihood",
    "expected_statistics",
    "fingerprint",
    "graph_probabilities",
    "log_normalizing_constant",
    "log_weight",
    "unnormalized_weight",
]
