"""Statistic evaluation and change statistics for ERGM terms."""

from ergmlab.statistics.attributes import category_values, node_values
from ergmlab.statistics.change import (
    change_statistic,
    change_statistic_matrix,
    change_statistic_reference,
)
from ergmlab.statistics.evaluate import (
    check_term_applies,
    evaluate,
    evaluate_named,
    gwesp_weight,
)

__all__ = [
    "category_values",
    "change_statistic",
    "change_statistic_matrix",
    "change_statistic_reference",
    "check_term_applies",
    "evaluate",
    "evaluate_named",
    "gwesp_weight",
    "node_values",
]
