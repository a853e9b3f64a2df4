"""Term specifications, ERGM models and the external estimator seam."""

from ergmlab.terms.model import Estimator, Model, fit_with, validate_terms
from ergmlab.terms.serialization import (
    model_from_dict,
    model_from_json,
    model_to_dict,
    model_to_json,
    term_from_dict,
    term_to_dict,
)
from ergmlab.terms.types import (
    DIRECTED_ONLY,
    GWESP,
    TERM_TYPES,
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
    is_term,
    make_term,
    term_label,
)

__all__ = [
    "DIRECTED_ONLY",
    "GWESP",
    "TERM_TYPES",
    "AbsDiff",
    "Edges",
    "Estimator",
    "IStar",
    "KStar",
    "Model",
    "Mutual",
    "NodeEFactor",
    "NodeIFactor",
    "NodeMatch",
    "NodeOFactor",
    "OStar",
    "Term",
    "Triangles",
    "TwoPath",
    "fit_with",
    "is_term",
    "make_term",
    "model_from_dict",
    "model_from_json",
    "model_to_dict",
    "model_to_json",
    "term_from_dict",
    "term_label",
    "term_to_dict",
    "validate_terms",
]
