"""JSON serialization and deserialization for run configs."""

import copy
import json
from dataclasses import asdict
from typing import Any

from dacite import from_dict, Config as DaciteConfig

from klpart.config.experiment import RunConfig

_DACITE_CONFIG = DaciteConfig(cast=[tuple], check_types=True, strict=True)


def config_to_json(config: RunConfig) -> str:
    """Serialize a RunConfig to a JSON string.

    Uses sorted keys and 2-space indent for human readability and diffability.
    """
    return json.dumps(asdict(config), indent=2, sort_keys=True)


def config_from_json(json_str: str) -> RunConfig:
    """Deserialize a JSON string to a RunConfig.

    Uses dacite with strict=True to reject unknown keys (catches schema drift)
    and cast=[tuple] to convert JSON arrays back to tuples for tags.
    Integral JSON numbers are accepted for float fields such as margin_percent.
    """
    return config_from_dict(json.loads(json_str))


def config_to_dict(config: RunConfig) -> dict[str, Any]:
    """Convert a RunConfig to a plain dictionary."""
    return asdict(config)


def config_from_dict(d: dict[str, Any]) -> RunConfig:
    """Reconstruct a RunConfig from a plain dictionary."""
    d = copy.deepcopy(d)
    _coerce_floats(d)
    return from_dict(data_class=RunConfig, data=d, config=_DACITE_CONFIG)


def _coerce_floats(d: dict[str, Any]) -> None:
    """Promote ints to floats for float-typed fields (JSON drops the '.0')."""
    partition = d.get("partition")
    if isinstance(partition, dict) and isinstance(partition.get("margin_percent"), int):
        if not isinstance(partition["margin_percent"], bool):
            partition["margin_percent"] = float(partition["margin_percent"])
    generator = d.get("generator")
    if isinstance(generator, dict) and isinstance(generator.get("edge_probability"), int):
        if not isinstance(generator["edge_probability"], bool):
            generator["edge_probability"] = float(generator["edge_probability"])
