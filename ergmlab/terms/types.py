"""ERGM term specifications as a closed set of frozen variants.

Each term kind is its own dataclass carrying only the parameters that kind
needs, validated on construction. Engines dispatch on the variant type
through a single function table, so adding a term means adding one class
here and one entry to each table.
"""

import math
from dataclasses import dataclass, fields
from typing import Any, ClassVar, Union

from ergmlab.errors import InvalidParameter, UnknownTerm


def _check_k(kind: str, k: Any) -> None:
    if isinstance(k, bool) or not isinstance(k, int):
        raise InvalidParameter(f"{kind} requires an integer k, got {k!r}")
    if k < 2:
        raise InvalidParameter(f"{kind} requires k >= 2, got {k}")


def _check_attribute(kind: str, attribute: Any) -> None:
    if not isinstance(attribute, str) or not attribute:
        raise InvalidParameter(
            f"{kind} requires an attribute name, got {attribute!r}"
        )


@dataclass(frozen=True, slots=True)
class Edges:
    """Number of edges."""

    name: ClassVar[str] = "edges"


@dataclass(frozen=True, slots=True)
class KStar:
    """Sum over nodes of C(degree, k)."""

    k: int
    name: ClassVar[str] = "kstar"

    def __post_init__(self) -> None:
        _check_k(self.name, self.k)


@dataclass(frozen=True, slots=True)
class IStar:
    """Sum over nodes of C(in-degree, k); directed graphs only."""

    k: int
    name: ClassVar[str] = "istar"

    def __post_init__(self) -> None:
        _check_k(self.name, self.k)


@dataclass(frozen=True, slots=True)
class OStar:
    """Sum over nodes of C(out-degree, k); directed graphs only."""

    k: int
    name: ClassVar[str] = "ostar"

    def __post_init__(self) -> None:
        _check_k(self.name, self.k)


@dataclass(frozen=True, slots=True)
class TwoPath:
    """Number of two-paths (2-stars if undirected, i->j->h with i != h if directed)."""

    name: ClassVar[str] = "twopath"


@dataclass(frozen=True, slots=True)
class Triangles:
    """Triangles; transitive triples on directed graphs."""

    name: ClassVar[str] = "triangles"


@dataclass(frozen=True, slots=True)
class Mutual:
    """Reciprocated dyads, counted once each; directed graphs only."""

    name: ClassVar[str] = "mutual"


@dataclass(frozen=True, slots=True)
class NodeOFactor:
    """Sum over edges of x(i) + x(j)."""

    attribute: str
    level: Any = None
    name: ClassVar[str] = "nodeofactor"

    def __post_init__(self) -> None:
        _check_attribute(self.name, self.attribute)


@dataclass(frozen=True, slots=True)
class NodeIFactor:
    """Sum over nodes of x(i) times in-degree."""

    attribute: str
    level: Any = None
    name: ClassVar[str] = "nodeifactor"

    def __post_init__(self) -> None:
        _check_attribute(self.name, self.attribute)


@dataclass(frozen=True, slots=True)
class NodeEFactor:
    """Sum over nodes of x(i) times out-degree."""

    attribute: str
    level: Any = None
    name: ClassVar[str] = "nodeefactor"

    def __post_init__(self) -> None:
        _check_attribute(self.name, self.attribute)


@dataclass(frozen=True, slots=True)
class NodeMatch:
    """Edges whose endpoints share an attribute value."""

    attribute: str
    name: ClassVar[str] = "nodematch"

    def __post_init__(self) -> None:
        _check_attribute(self.name, self.attribute)


@dataclass(frozen=True, slots=True)
class AbsDiff:
    """Sum over edges of |x(i) - x(j)| for a numeric attribute."""

    attribute: str
    name: ClassVar[str] = "absdiff"

    def __post_init__(self) -> None:
        _check_attribute(self.name, self.attribute)


@dataclass(frozen=True, slots=True)
class GWESP:
    """Geometrically weighted edgewise shared partners with fixed decay.

    Only the fixed-decay form is supported; the curved variant, where alpha
    is estimated alongside the coefficients, belongs to the fitting side.
    """

    alpha: float
    fixed: bool = True
    name: ClassVar[str] = "gwesp"

    def __post_init__(self) -> None:
        if isinstance(self.alpha, bool) or not isinstance(self.alpha, (int, float)):
            raise InvalidParameter(f"gwesp requires a numeric alpha, got {self.alpha!r}")
        if not math.isfinite(self.alpha) or self.alpha <= 0:
            raise InvalidParameter(f"gwesp requires alpha > 0, got {self.alpha}")
        if self.fixed is not True:
            raise InvalidParameter("gwesp is only supported with fixed=True")


Term = Union[
    Edges,
    KStar,
    IStar,
    OStar,
    TwoPath,
    Triangles,
    Mutual,
    NodeOFactor,
    NodeIFactor,
    NodeEFactor,
    NodeMatch,
    AbsDiff,
    GWESP,
]

TERM_TYPES: dict[str, type] = {
    cls.name: cls
    for cls in (
        Edges,
        KStar,
        IStar,
        OStar,
        TwoPath,
        Triangles,
        Mutual,
        NodeOFactor,
        NodeIFactor,
        NodeEFactor,
        NodeMatch,
        AbsDiff,
        GWESP,
    )
}

# Terms that only make sense when ties have a direction.
DIRECTED_ONLY: frozenset[type] = frozenset({IStar, OStar, Mutual})


def is_term(obj: Any) -> bool:
    return type(obj) in TERM_TYPES.values()


def make_term(name: str, **params: Any) -> Term:
    """Build a term from its name and parameters.

    Example: make_term("kstar", k=2), make_term("nodematch", attribute="sex").

    Raises:
        UnknownTerm: If name is not a recognized kind.
        InvalidParameter: If params do not match the kind's parameter set.
    """
    cls = TERM_TYPES.get(name)
    if cls is None:
        raise UnknownTerm(
            f"unknown term {name!r}; expected one of {sorted(TERM_TYPES)}"
        )
    expected = {f.name for f in fields(cls)}
    extra = set(params) - expected
    if extra:
        raise InvalidParameter(
            f"{name} got unexpected parameters {sorted(extra)}; "
            f"accepts {sorted(expected)}"
        )
    try:
        return cls(**params)
    except TypeError as exc:
        raise InvalidParameter(f"{name}: {exc}") from exc


def _format_number(value: float) -> str:
    return f"{value:g}"


def term_label(term: Term) -> str:
    """statnet-style coefficient label, e.g. kstar2, nodematch.sex."""
    if isinstance(term, (KStar, IStar, OStar)):
        return f"{term.name}{term.k}"
    if isinstance(term, (NodeOFactor, NodeIFactor, NodeEFactor)):
        if term.level is None:
            return f"{term.name}.{term.attribute}"
        return f"{term.name}.{term.attribute}.{term.level}"
    if isinstance(term, (NodeMatch, AbsDiff)):
        return f"{term.name}.{term.attribute}"
    if isinstance(term, GWESP):
        return f"gwesp.fixed.{_format_number(term.alpha)}"
    if is_term(term):
        return term.name
    raise UnknownTerm(f"not a term: {term!r}")
