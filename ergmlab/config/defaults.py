"""Default engine configuration, the single source of truth for engine parameters."""

from ergmlab.config.engine import EngineConfig

# Directed enumeration stops at n=4 (4096 graphs), undirected at n=6
# (32768 graphs).
DEFAULT_CONFIG = EngineConfig()
