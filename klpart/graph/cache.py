"""On-disk cache of generated graphs keyed by generator hash and seed.

A margin or k sweep over one generated graph draws the graph once; later
runs read the CSR arrays back from ``{cache_dir}/{key}/graph.npz``.
"""

import json
import logging
from datetime import datetime, timezone
from pathlib import Path

import numpy as np

from klpart.config.experiment import RunConfig
from klpart.config.hashing import generator_config_hash
from klpart.graph.generator import generate_graph
from klpart.graph.types import Graph, load_graph

log = logging.getLogger(__name__)

DEFAULT_CACHE_DIR = Path(".cache/graphs")

ARRAYS_FILE = "graph.npz"
METADATA_FILE = "metadata.json"


def graph_cache_key(config: RunConfig) -> str:
    """Cache key "{generator_hash}_s{seed}", e.g. "a1b2c3d4e5f6a7b8_s42".

    Partition parameters, description and tags do not affect the key.
    """
    return f"{generator_config_hash(config)}_s{config.seed}"


def save_graph(
    graph: Graph, config: RunConfig, cache_dir: Path = DEFAULT_CACHE_DIR
) -> Path:
    """Store graph arrays plus a metadata sidecar; returns the entry directory."""
    entry = Path(cache_dir) / graph_cache_key(config)
    entry.mkdir(parents=True, exist_ok=True)

    np.savez_compressed(
        entry / ARRAYS_FILE, neighbors=graph.neighbors, offsets=graph.offsets
    )
    metadata = {
        "num_vertices": graph.num_vertices,
        "num_edges": graph.num_edges,
        "config_hash": generator_config_hash(config),
        "seed": config.seed,
        "created": datetime.now(timezone.utc).isoformat(),
    }
    (entry / METADATA_FILE).write_text(json.dumps(metadata, indent=2))

    log.info("Graph cached at %s", entry)
    return entry


def load_cached_graph(
    config: RunConfig, cache_dir: Path = DEFAULT_CACHE_DIR
) -> Graph | None:
    """Return the cached graph for config, or None when no complete entry exists.

    Arrays pass through load_graph, so a corrupted entry raises
    StructuralError instead of yielding a malformed Graph.
    """
    entry = Path(cache_dir) / graph_cache_key(config)
    arrays_path, metadata_path = entry / ARRAYS_FILE, entry / METADATA_FILE
    if not (arrays_path.exists() and metadata_path.exists()):
        return None

    metadata = json.loads(metadata_path.read_text())
    with np.load(arrays_path, allow_pickle=False) as arrays:
        graph = load_graph(
            metadata["num_vertices"], arrays["neighbors"], arrays["offsets"]
        )
    log.debug("Read cached graph from %s", entry)
    return graph


def generate_or_load_graph(
    config: RunConfig, cache_dir: Path = DEFAULT_CACHE_DIR
) -> Graph:
    """Cached graph for config, generating and storing it on a miss."""
    graph = load_cached_graph(config, cache_dir)
    if graph is not None:
        log.info("Cache hit for %s", graph_cache_key(config))
        return graph

    log.info("Cache miss for %s, generating", graph_cache_key(config))
    graph = generate_graph(config)
    save_graph(graph, config, cache_dir)
    return graph
