"""Segregation and homophily measures computed from a mixing matrix.

A zero denominator is a legitimate data condition (a group with no ties, a
group pair with no dyads), so undefined measures return NaN instead of
raising; NaN cells propagate through the formulas.
"""

import logging
from typing import Any

import numpy as np

from ergmlab.errors import InvalidArgument
from ergmlab.mixing.matrix import MixingMatrix

log = logging.getLogger(__name__)

NAN = float("nan")


def assortativity(matrix: MixingMatrix) -> float:
    """Assortativity coefficient on the group-pair tie densities.

    With p_gh = m_gh1 / m_gh+, e = p / sum(p), a and b the row and column
    sums of e:

        r = (sum_g e_gg - sum_g a_g b_g) / (1 - sum_g a_g b_g)

    r is 1 when every tie falls within groups. There is no fixed lower
    bound; the minimum depends on the group structure. Returns NaN if any
    group pair has no dyads, if there are no ties, or if the denominator
    vanishes (a single group).
    """
    p = matrix.densities()
    if np.isnan(p).any():
        return NAN
    # Unnormalized form of the formula above: multiply through by sum(p)^2.
    within = float(np.trace(p))
    between = float(p[~np.eye(len(p), dtype=bool)].sum())
    total = within + between
    ab = float(p.sum(axis=1) @ p.sum(axis=0))
    denominator = total * total - ab
    if total == 0.0 or denominator == 0.0:
        log.debug("Assortativity undefined (total=%g, denominator=%g)", total, denominator)
        return NAN
    return (within * total - ab) / denominator


def _two_groups(
    matrix: MixingMatrix, group1: Any = None, group2: Any = None
) -> tuple[int, int]:
    if len(matrix.groups) != 2:
        raise InvalidArgument(
            f"Freeman index needs exactly two groups, got {len(matrix.groups)}"
        )
    if group1 is None and group2 is None:
        return 0, 1
    g, h = matrix.index(group1), matrix.index(group2)
    if g == h:
        raise InvalidArgument(f"group1 and group2 must differ, both are {group1!r}")
    return g, h


def freeman_index(matrix: MixingMatrix, group1: Any = None, group2: Any = None) -> float:
    """Freeman segregation index for a two-group network.

    p is the share of ties that cross groups, pi the share of dyads that
    cross groups; the index is 1 - p / pi, in [0, 1] when cross-group ties
    are no more common than chance. NaN when there are no ties or no
    cross-group dyads.

    Raises:
        InvalidArgument: If the matrix does not have exactly two groups, or
            the named groups are not those two.
    """
    g, h = _two_groups(matrix, group1, group2)
    ties = matrix.tie_counts
    dyads = matrix.dyad_counts
    total_ties = int(ties.sum())
    total_dyads = int(dyads.sum())
    between_ties = int(ties[g, h] + ties[h, g])
    between_dyads = int(dyads[g, h] + dyads[h, g])
    if total_ties == 0 or between_dyads == 0:
        log.debug(
            "Freeman index undefined (ties=%d, between dyads=%d)",
            total_ties,
            between_dyads,
        )
        return NAN
    p = between_ties / total_ties
    pi = between_dyads / total_dyads
    return 1.0 - p / pi


def _sent_ties(matrix: MixingMatrix) -> np.ndarray:
    """Ties sent from group g to group h; undirected ties count both ways."""
    ties = matrix.tie_counts
    if matrix.directed:
        return ties
    return ties + ties.T


def coleman_index(matrix: MixingMatrix, group: Any) -> float:
    """Coleman's homophily index for one group.

    T is the number of ties sent by the group, O the number landing inside
    it, and E = T (n_g - 1) / (n - 1) the within-group count expected if
    alters were chosen at random. Then

        (O - E) / (T - E)   if O >= E
        (O - E) / E         otherwise

    so the index runs from -1 (no within-group ties) through 0 (chance) to
    1 (only within-group ties). NaN when the relevant denominator is zero.

    Raises:
        InvalidArgument: If group is not in the matrix.
    """
    g = matrix.index(group)
    sent = _sent_ties(matrix)
    total = float(sent[g].sum())
    observed = float(sent[g, g])
    n = matrix.n
    if n < 2:
        return NAN
    expected = total * (matrix.group_sizes[g] - 1) / (n - 1)
    denominator = total - expected if observed >= expected else expected
    if denominator == 0.0:
        log.debug("Coleman index undefined for group %r", group)
        return NAN
    return (observed - expected) / denominator


def coleman_indices(matrix: MixingMatrix) -> dict[Any, float]:
    """Coleman index for every group, keyed by group label."""
    return {group: coleman_index(matrix, group) for group in matrix.groups}


def ei_index(matrix: MixingMatrix) -> float:
    """Krackhardt-Stern E-I index: (external - internal) / all ties.

    -1 when every tie is within groups, 1 when every tie crosses groups.
    NaN without ties.
    """
    ties = matrix.tie_counts
    internal = int(np.trace(ties))
    external = int(ties.sum()) - internal
    if internal + external == 0:
        return NAN
    return (external - internal) / (external + internal)
