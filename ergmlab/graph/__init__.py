"""Graph representation with node attributes and reversible dyad toggles."""

from ergmlab.graph.generation import bernoulli_graph, sample_adjacency
from ergmlab.graph.types import Direction, Dyad, Graph, toggled

__all__ = [
    "Direction",
    "Dyad",
    "Graph",
    "bernoulli_graph",
    "sample_adjacency",
    "toggled",
]
