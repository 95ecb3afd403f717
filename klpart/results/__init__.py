"""Result schema validation, writing, and run ID generation."""

from klpart.results.schema import build_result, validate_result, write_result, load_result
from klpart.results.run_id import generate_run_id
from klpart.results.writer import (
    PartitionText,
    format_result,
    parse_partition,
    read_partition,
    write_partition,
)

__all__ = [
    "build_result",
    "validate_result",
    "write_result",
    "load_result",
    "generate_run_id",
    "PartitionText",
    "format_result",
    "parse_partition",
    "read_partition",
    "write_partition",
]
