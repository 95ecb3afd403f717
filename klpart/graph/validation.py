"""Load-time validation of undirected CSR graphs.

The partitioning engine assumes a symmetric adjacency relation without
self-loops. These checks are run by the collaborators that construct
graphs (the text reader and the random generator), never by the engine.
"""

import logging

import numpy as np

from klpart.graph.types import Graph, first_duplicate_entry

log = logging.getLogger(__name__)


def is_symmetric(graph: Graph) -> bool:
    """True if v is a neighbor of u whenever u is a neighbor of v."""
    adj = graph.to_sparse()
    return (adj != adj.T).nnz == 0


def count_self_loops(graph: Graph) -> int:
    return int(graph.to_sparse().diagonal().sum())


def connected_components(graph: Graph) -> np.ndarray:
    """Label each vertex with a component index.

    Iterative depth-first search over the CSR arrays with an explicit
    stack, so large vertex counts cannot exhaust the interpreter's
    recursion limit.

    Returns:
        int array of length n; labels are assigned in order of the lowest
        vertex id in each component, starting at 0.
    """
    n = graph.num_vertices
    labels = np.full(n, -1, dtype=np.int64)
    offsets = graph.offsets
    neighbors = graph.neighbors
    current = 0

    for root in range(n):
        if labels[root] >= 0:
            continue
        labels[root] = current
        stack = [root]
        while stack:
            v = stack.pop()
            for u in neighbors[offsets[v] : offsets[v + 1]]:
                if labels[u] < 0:
                    labels[u] = current
                    stack.append(int(u))
        current += 1

    return labels


def is_connected(graph: Graph) -> bool:
    return bool(connected_components(graph).max() == 0)


def validate_graph(graph: Graph, require_connected: bool = False) -> list[str]:
    """Validate an undirected graph for use by the partitioner.

    Checks (cheapest first):
    1. No self-loops
    2. No vertex lists the same neighbor twice
    3. Symmetric adjacency
    4. Connectivity (only when require_connected)

    Args:
        graph: Graph to check.
        require_connected: Also require a single connected component.

    Returns:
        List of error strings (empty = valid graph).
    """
    errors: list[str] = []

    loops = count_self_loops(graph)
    if loops:
        errors.append(f"Self-loops detected: {loops} vertices")

    duplicate = first_duplicate_entry(
        graph.num_vertices, graph.neighbors, graph.offsets
    )
    if duplicate is not None:
        v, u = duplicate
        errors.append(f"Duplicate neighbor entry: vertex {v} lists {u} twice")

    if not is_symmetric(graph):
        errors.append("Adjacency is not symmetric")

    if require_connected:
        n_components = int(connected_components(graph).max()) + 1
        if n_components != 1:
            errors.append(f"Not connected: {n_components} components found")

    log.debug(
        "Validated graph n=%d edges=%d: %d errors",
        graph.num_vertices,
        graph.num_edges,
        len(errors),
    )
    return errors
