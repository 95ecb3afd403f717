"""Run configuration system with frozen, hashable, serializable dataclasses."""

from klpart.config.experiment import (
    RunConfig,
    PartitionConfig,
    GeneratorConfig,
)
from klpart.config.defaults import DEFAULT_CONFIG, GENERATED_CONFIG
from klpart.config.hashing import config_hash, generator_config_hash, full_config_hash
from klpart.config.serialization import (
    config_to_json,
    config_from_json,
    config_to_dict,
    config_from_dict,
)

__all__ = [
    "RunConfig",
    "PartitionConfig",
    "GeneratorConfig",
    "DEFAULT_CONFIG",
    "GENERATED_CONFIG",
    "config_hash",
    "generator_config_hash",
    "full_config_hash",
    "config_to_json",
    "config_from_json",
    "config_to_dict",
    "config_from_dict",
]
