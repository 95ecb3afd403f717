"""Random undirected G(n, p) graph generator with validation and retry.

Every unordered pair {u, v} is an edge independently with probability p.
Graphs that fail validation (connectivity in particular) are redrawn with
an incremented seed.
"""

import logging

import numpy as np

from klpart.config.experiment import GeneratorConfig, RunConfig
from klpart.graph.types import Graph, load_graph
from klpart.graph.validation import validate_graph

log = logging.getLogger(__name__)


class GraphGenerationError(Exception):
    """Raised when graph generation fails after all retry attempts."""


def sample_edges(n: int, p: float, rng: np.random.Generator) -> np.ndarray:
    """Sample the upper triangle of an undirected adjacency matrix.

    Args:
        n: Number of vertices.
        p: Edge probability.
        rng: numpy random Generator for reproducibility.

    Returns:
        (m, 2) int array of edges with u < v, sorted lexicographically.
    """
    iu, ju = np.triu_indices(n, k=1)
    keep = rng.random(len(iu)) < p
    return np.column_stack((iu[keep], ju[keep]))


def edges_to_graph(n: int, edges: np.ndarray) -> Graph:
    """Build a symmetric CSR Graph from an (m, 2) array of u < v edges."""
    src = np.concatenate((edges[:, 0], edges[:, 1]))
    dst = np.concatenate((edges[:, 1], edges[:, 0]))
    order = np.lexsort((dst, src))
    src, dst = src[order], dst[order]
    offsets = np.zeros(n + 1, dtype=np.int64)
    np.cumsum(np.bincount(src, minlength=n), out=offsets[1:])
    return load_graph(n, dst, offsets)


def generate_random_graph(
    gen: GeneratorConfig, seed: int, require_connected: bool = True
) -> Graph:
    """Generate a valid random undirected graph.

    Implements the full generation pipeline:
    1. Sample edges via Bernoulli draws over the upper triangle
    2. Build symmetric CSR arrays
    3. Validate graph (self-loops, symmetry, connectivity)
    4. Retry with incremented seed on failure

    Args:
        gen: Generator parameters.
        seed: Base seed; attempt i uses seed + i.
        require_connected: Reject disconnected draws.

    Returns:
        A validated Graph.

    Raises:
        GraphGenerationError: If no valid graph produced after max_retries.
    """
    last_errors: list[str] = []

    for attempt in range(gen.max_retries):
        rng = np.random.default_rng(seed + attempt)
        edges = sample_edges(gen.n, gen.edge_probability, rng)
        graph = edges_to_graph(gen.n, edges)

        errors = validate_graph(graph, require_connected=require_connected)
        if not errors:
            log.info(
                "Graph generated successfully on attempt %d (n=%d, edges=%d)",
                attempt,
                gen.n,
                graph.num_edges,
            )
            return graph

        last_errors = errors
        log.warning(
            "Graph generation attempt %d failed: %s",
            attempt,
            "; ".join(errors),
        )

    raise GraphGenerationError(
        f"Failed to generate valid graph after {gen.max_retries} attempts. "
        f"Last errors: {'; '.join(last_errors)}"
    )


def generate_graph(config: RunConfig) -> Graph:
    """Generate the graph described by config.generator using config.seed."""
    if config.generator is None:
        raise ValueError("config has no generator section")
    return generate_random_graph(config.generator, config.seed)
