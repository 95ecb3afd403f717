"""Stable SHA-256 fingerprints of run configs."""

import hashlib
import json
from dataclasses import asdict
from typing import Any, Iterable

from klpart.config.experiment import RunConfig

HASH_LENGTH = 16


def _drop_path(tree: dict[str, Any], dotted: str) -> None:
    """Delete ``a.b.c`` from nested dicts; missing paths are ignored."""
    *parents, leaf = dotted.split(".")
    node: Any = tree
    for key in parents:
        node = node.get(key) if isinstance(node, dict) else None
    if isinstance(node, dict):
        node.pop(leaf, None)


def canonical_json(obj: Any) -> str:
    """Compact, key-sorted, ASCII-only JSON used as hash input."""
    return json.dumps(obj, sort_keys=True, ensure_ascii=True, separators=(",", ":"))


def config_hash(config: Any, exclude_fields: Iterable[str] = ()) -> str:
    """Fingerprint a config dataclass.

    Args:
        config: RunConfig or any of its sections.
        exclude_fields: Dotted paths left out of the hash, e.g.
            ``"partition.record_swaps"``.

    Returns:
        The first 16 hex digits of SHA-256 over the canonical JSON.
    """
    tree = asdict(config)
    for dotted in exclude_fields:
        _drop_path(tree, dotted)
    digest = hashlib.sha256(canonical_json(tree).encode("utf-8")).hexdigest()
    return digest[:HASH_LENGTH]


def generator_config_hash(config: RunConfig) -> str:
    """Hash of config.generator alone, used as the graph cache key.

    Seed and partition parameters are not part of it; the cache key adds
    the seed separately.

    Raises:
        ValueError: If the config has no generator section.
    """
    if config.generator is None:
        raise ValueError("config has no generator section")
    return config_hash(config.generator)


def full_config_hash(config: RunConfig) -> str:
    """Hash of the whole run config, seed included."""
    return config_hash(config)
