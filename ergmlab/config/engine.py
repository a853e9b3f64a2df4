"""Engine configuration dataclasses, all frozen and slotted for immutability."""

from dataclasses import dataclass, field


@dataclass(frozen=True, slots=True)
class EnumerationConfig:
    """Size caps for exhaustive network enumeration.

    Enumeration visits 2^(n(n-1)) directed or 2^(n(n-1)/2) undirected
    labeled graphs, so the caps are the only resource control.
    """

    max_nodes_directed: int = 4  # 2^12 = 4096 graphs
    max_nodes_undirected: int = 6  # 2^15 = 32768 graphs
    warn_fraction: float = 0.5  # warn once a run exceeds this share of the cap


@dataclass(frozen=True, slots=True)
class ClassificationConfig:
    """Fingerprint options for grouping labeled graphs into classes.

    canonical_labeling adds the minimum dyad bitmask over all node
    relabelings, which makes classes exact isomorphism classes (refined by
    the classification statistics). It costs n! relabelings per graph.
    """

    include_degree_sequence: bool = True
    canonical_labeling: bool = True


@dataclass(frozen=True, slots=True)
class EngineConfig:
    """Top-level configuration composing all sub-configs.

    Cross-parameter validation runs in __post_init__ to reject invalid
    configurations early.
    """

    enumeration: EnumerationConfig = field(default_factory=EnumerationConfig)
    classification: ClassificationConfig = field(
        default_factory=ClassificationConfig
    )
    tolerance: float = 1e-9  # probability normalization check
    description: str = ""

    def __post_init__(self) -> None:
        if self.enumeration.max_nodes_directed < 1:
            raise ValueError(
                f"max_nodes_directed must be >= 1, "
                f"got {self.enumeration.max_nodes_directed}"
            )
        if self.enumeration.max_nodes_undirected < 1:
            raise ValueError(
                f"max_nodes_undirected must be >= 1, "
                f"got {self.enumeration.max_nodes_undirected}"
            )
        if not 0.0 < self.enumeration.warn_fraction <= 1.0:
            raise ValueError(
                f"warn_fraction must be in (0, 1], "
                f"got {self.enumeration.warn_fraction}"
            )
        if self.tolerance <= 0.0:
            raise ValueError(f"tolerance must be > 0, got {self.tolerance}")
