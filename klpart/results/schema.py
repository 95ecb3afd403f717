"""result.json assembly, validation and I/O.

Validation is plain Python: each check appends a readable message, and an
empty list means the payload is well formed.
"""

import json
import logging
from dataclasses import asdict
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from klpart.config.experiment import RunConfig
from klpart.config.hashing import full_config_hash
from klpart.partition.orchestrator import PartitionResult
from klpart.reproducibility.git_hash import get_git_hash
from klpart.results.run_id import generate_run_id
from klpart.results.writer import write_partition

log = logging.getLogger(__name__)

SCHEMA_VERSION = "1.0"

# Top-level field -> expected JSON type.
FIELD_TYPES: dict[str, type] = {
    "schema_version": str,
    "run_id": str,
    "timestamp": str,
    "description": str,
    "tags": list,
    "config": dict,
    "metrics": dict,
    "partition": dict,
}
REQUIRED_TOP_FIELDS = frozenset(FIELD_TYPES)

REQUIRED_METRICS_FIELDS = frozenset({"cut_edges", "num_vertices", "num_edges"})


def _check_partition(block: dict[str, Any], num_vertices: Any) -> list[str]:
    parts = block.get("parts")
    if not isinstance(parts, list):
        return ["partition.parts must be a list of member lists"]

    problems = []
    sizes = block.get("sizes")
    if sizes is not None and sizes != [len(p) for p in parts]:
        problems.append("partition.sizes does not match member lists")

    members = [v for p in parts for v in p]
    if len(members) != len(set(members)):
        problems.append("partition.parts lists a vertex more than once")
    elif isinstance(num_vertices, int) and sorted(members) != list(range(num_vertices)):
        problems.append(
            f"partition.parts does not cover vertices 0..{num_vertices - 1} exactly once"
        )
    return problems


def validate_result(result: dict[str, Any]) -> list[str]:
    """Check a result payload.

    Covers presence and JSON type of every top-level field, an ISO 8601
    timestamp, the required metrics, and that partition.parts places every
    vertex 0..num_vertices-1 in exactly one subset.

    Returns:
        Error messages, empty when the payload is valid.
    """
    errors: list[str] = []

    missing = REQUIRED_TOP_FIELDS - result.keys()
    if missing:
        errors.append(f"Missing required top-level fields: {sorted(missing)}")

    for name, expected in FIELD_TYPES.items():
        if name in result and not isinstance(result[name], expected):
            errors.append(f"{name} must be a {expected.__name__}")

    if isinstance(result.get("timestamp"), str):
        try:
            datetime.fromisoformat(result["timestamp"])
        except ValueError:
            errors.append("timestamp must be in ISO 8601 format")

    metrics = result.get("metrics")
    if isinstance(metrics, dict):
        errors.extend(
            f"metrics.{name} is required"
            for name in sorted(REQUIRED_METRICS_FIELDS - metrics.keys())
        )
    else:
        metrics = {}

    if isinstance(result.get("partition"), dict):
        errors.extend(_check_partition(result["partition"], metrics.get("num_vertices")))

    return errors


def _raise_if_invalid(result: dict[str, Any], source: str) -> None:
    errors = validate_result(result)
    if errors:
        detail = "\n".join(f"  - {e}" for e in errors)
        raise ValueError(f"Result validation failed for {source}:\n{detail}")


def build_result(
    config: RunConfig,
    partition_result: PartitionResult,
    num_vertices: int,
    num_edges: int,
    run_id: str,
    metadata: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """Assemble the result.json payload for a finished run."""
    metrics = {
        "cut_edges": partition_result.cut_edges,
        "initial_cut_edges": partition_result.initial_cut_edges,
        "num_vertices": num_vertices,
        "num_edges": num_edges,
        "passes": partition_result.passes,
        "converged": partition_result.converged,
        "pass_cuts": list(partition_result.pass_cuts),
    }
    provenance = {
        "code_hash": get_git_hash(),
        "config_hash": full_config_hash(config),
    }
    provenance.update(metadata or {})
    return {
        "schema_version": SCHEMA_VERSION,
        "run_id": run_id,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "description": config.description,
        "tags": list(config.tags),
        "config": asdict(config),
        "metrics": metrics,
        "partition": {
            "sizes": partition_result.sizes,
            "parts": partition_result.parts,
        },
        "metadata": provenance,
    }


def write_result(
    config: RunConfig,
    partition_result: PartitionResult,
    num_vertices: int,
    num_edges: int,
    metadata: dict[str, Any] | None = None,
    results_dir: str | Path = "results",
) -> Path:
    """Write result.json and partition.txt under {results_dir}/{run_id}/.

    Returns:
        The run directory.

    Raises:
        ValueError: If the assembled payload fails validation. Nothing is
            written in that case.
    """
    run_id = generate_run_id(config, num_vertices)
    payload = build_result(
        config, partition_result, num_vertices, num_edges, run_id, metadata
    )
    _raise_if_invalid(payload, run_id)

    out_dir = Path(results_dir) / run_id
    out_dir.mkdir(parents=True, exist_ok=True)
    (out_dir / "result.json").write_text(json.dumps(payload, indent=2))
    write_partition(out_dir / "partition.txt", partition_result)

    log.info("Result written to %s", out_dir)
    return out_dir


def load_result(result_path: str | Path) -> dict[str, Any]:
    """Read a result.json file and validate it.

    Raises:
        FileNotFoundError: If the file doesn't exist.
        ValueError: If the payload fails validation.
    """
    path = Path(result_path)
    payload = json.loads(path.read_text())
    _raise_if_invalid(payload, str(path))
    return payload
