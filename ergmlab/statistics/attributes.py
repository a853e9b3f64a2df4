"""Node attribute lookups shared by the evaluator and the change engine."""

from numbers import Real
from typing import Any

import numpy as np

from ergmlab.errors import InvalidParameter
from ergmlab.graph.types import Graph


def node_values(graph: Graph, kind: str, attribute: str, level: Any = None) -> np.ndarray:
    """Numeric per-node values x(i) for an attribute-based term.

    With a level, x(i) is the indicator attr(i) == level, which is how
    categorical attributes enter factor terms. Without one, the attribute
    must be numeric; booleans count as 0/1.

    Raises:
        MissingAttribute: If the attribute is absent on any node.
        InvalidParameter: If values are non-numeric and no level is given.
    """
    values = graph.attribute(attribute)
    if level is not None:
        return np.array([1.0 if v == level else 0.0 for v in values])
    bad = [v for v in values if not isinstance(v, (Real, np.bool_))]
    if bad:
        raise InvalidParameter(
            f"{kind} needs numeric values for attribute {attribute!r} "
            f"(got {bad[0]!r}); pass level= for a categorical attribute"
        )
    return np.array([float(v) for v in values])


def category_values(graph: Graph, attribute: str) -> tuple[Any, ...]:
    """Raw attribute values for equality-based terms such as nodematch."""
    return graph.attribute(attribute)
