"""JSON round-trip for terms and fitted models.

A model serializes as ``{"terms": [{"name": "kstar", "k": 2}, ...],
"coefficients": [...]}``. Term parameters are parsed with dacite in strict
mode so unknown keys are rejected instead of silently dropped.
"""

import json
from dataclasses import asdict
from typing import Any

from dacite import Config as DaciteConfig, DaciteError, from_dict

from ergmlab.errors import InvalidArgument, InvalidParameter, UnknownTerm
from ergmlab.terms.model import Model
from ergmlab.terms.types import TERM_TYPES, Term, is_term

TERM_CONFIG = DaciteConfig(cast=[float], check_types=True, strict=True)


def term_to_dict(term: Term) -> dict[str, Any]:
    if not is_term(term):
        raise UnknownTerm(f"not a term: {term!r}")
    return {"name": term.name, **asdict(term)}


def term_from_dict(d: dict[str, Any]) -> Term:
    """Rebuild a term from its dict form.

    Raises:
        UnknownTerm: If the name is missing or unrecognized.
        InvalidParameter: If parameters are missing, extra or mistyped.
    """
    params = dict(d)
    name = params.pop("name", None)
    cls = TERM_TYPES.get(name)
    if cls is None:
        raise UnknownTerm(f"unknown term {name!r}")
    try:
        return from_dict(data_class=cls, data=params, config=TERM_CONFIG)
    except DaciteError as exc:
        raise InvalidParameter(f"{name}: {exc}") from exc


def model_to_dict(model: Model) -> dict[str, Any]:
    return {
        "terms": [term_to_dict(t) for t in model.terms],
        "coefficients": model.coefficients.tolist(),
    }


def model_from_dict(d: dict[str, Any]) -> Model:
    extra = set(d) - {"terms", "coefficients"}
    if extra:
        raise InvalidArgument(f"unexpected model keys {sorted(extra)}")
    try:
        terms = tuple(term_from_dict(t) for t in d["terms"])
        coefficients = d["coefficients"]
    except KeyError as exc:
        raise InvalidArgument(f"model is missing key {exc}") from None
    return Model(terms, coefficients)


def model_to_json(model: Model) -> str:
    """Serialize a Model with sorted keys and 2-space indent."""
    return json.dumps(model_to_dict(model), indent=2, sort_keys=True)


def model_from_json(json_str: str) -> Model:
    return model_from_dict(json.loads(json_str))
