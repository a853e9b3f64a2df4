"""JSON round-trip for EngineConfig, parsed back through dacite."""

import json
from dataclasses import asdict
from typing import Any

from dacite import from_dict, Config as DaciteConfig

from ergmlab.config.engine import EngineConfig

# strict: unknown keys raise UnexpectedDataError
STRICT = DaciteConfig(cast=[tuple], check_types=True, strict=True)


def config_to_dict(config: EngineConfig) -> dict[str, Any]:
    return asdict(config)


def config_from_dict(d: dict[str, Any]) -> EngineConfig:
    """Build an EngineConfig from nested plain dicts.

    Missing keys take their dataclass defaults, so a partial dict such as
    {"enumeration": {"max_nodes_undirected": 5}} is enough. Validation in
    EngineConfig.__post_init__ still runs on the result.

    Raises:
        dacite.UnexpectedDataError: On a key no config field declares.
        dacite.WrongTypeError: On a value of the wrong type.
        ValueError: If the assembled config fails validation.
    """
    return from_dict(data_class=EngineConfig, data=d, config=STRICT)


def config_to_json(config: EngineConfig) -> str:
    """Sorted keys, 2-space indent, so saved configs diff cleanly."""
    return json.dumps(config_to_dict(config), indent=2, sort_keys=True)


def config_from_json(json_str: str) -> EngineConfig:
    return config_from_dict(json.loads(json_str))
