"""Mixing matrices and the segregation measures derived from them."""

from ergmlab.mixing.matrix import MixingMatrix, build_mixing_matrix, total_dyads
from ergmlab.mixing.segregation import (
    assortativity,
    coleman_index,
    coleman_indices,
    ei_index,
    freeman_index,
)

__all__ = [
    "MixingMatrix",
    "assortativity",
    "build_mixing_matrix",
    "coleman_index",
    "coleman_indices",
    "ei_index",
    "freeman_index",
    "total_dyads",
]
