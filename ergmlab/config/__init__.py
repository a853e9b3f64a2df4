"""Engine configuration system with frozen, hashable, serializable dataclasses."""

from ergmlab.config.engine import (
    ClassificationConfig,
    EngineConfig,
    EnumerationConfig,
)
from ergmlab.config.defaults import DEFAULT_CONFIG
from ergmlab.config.hashing import config_hash, enumeration_key, stable_hash
from ergmlab.config.serialization import (
    config_from_dict,
    config_from_json,
    config_to_dict,
    config_to_json,
)

__all__ = [
    "ClassificationConfig",
    "EngineConfig",
    "EnumerationConfig",
    "DEFAULT_CONFIG",
    "config_hash",
    "enumeration_key",
    "stable_hash",
    "config_from_dict",
    "config_from_json",
    "config_to_dict",
    "config_to_json",
]
