"""Stable short hashes of configs and enumeration requests (SHA-256, sorted JSON)."""

import hashlib
import json
from dataclasses import asdict, is_dataclass
from typing import Any


def _drop_path(d: dict[str, Any], dotted: str) -> None:
    """Delete d[a][b]...[z] for dotted == "a.b...z"; unknown paths are ignored.

    _drop_path(d, "enumeration.warn_fraction") drops one nested field,
    _drop_path(d, "description") a top-level one.
    """
    *parents, leaf = dotted.split(".")
    node = d
    for key in parents:
        child = node.get(key)
        if not isinstance(child, dict):
            return
        node = child
    node.pop(leaf, None)


def stable_hash(payload: Any) -> str:
    """First 16 hex characters of SHA-256 over compact, key-sorted JSON.

    Values json cannot encode fall back to str(), which covers attribute
    levels such as numpy scalars inside term payloads.
    """
    text = json.dumps(
        payload, sort_keys=True, ensure_ascii=True, separators=(",", ":"), default=str
    )
    return hashlib.sha256(text.encode("utf-8")).hexdigest()[:16]


def config_hash(config: Any, exclude_fields: list[str] | None = None) -> str:
    """Hash any config dataclass, optionally ignoring some fields.

    Args:
        config: EngineConfig or one of its sub-configs.
        exclude_fields: Dotted field paths left out of the hash.

    Raises:
        TypeError: If config is not a dataclass instance.
    """
    if not is_dataclass(config) or isinstance(config, type):
        raise TypeError(f"config_hash expects a dataclass instance, got {type(config)!r}")
    d = asdict(config)
    for dotted in exclude_fields or ():
        _drop_path(d, dotted)
    return stable_hash(d)


def enumeration_key(
    n: int, directed: bool, term_payload: list[dict[str, Any]], config: Any
) -> str:
    """Cache key for an enumerate-and-canonicalize run.

    Only the classification options and the term list matter; the
    description and the caps do not change which classes come out.
    """
    return stable_hash(
        {
            "n": n,
            "directed": directed,
            "terms": term_payload,
            "classification": config_hash(config.classification),
        }
    )
