"""Cut-edge counting over a full assignment."""

import numpy as np

from klpart.errors import StructuralError
from klpart.graph.types import Graph


def _check_assignment(graph: Graph, assignment: np.ndarray) -> None:
    if len(assignment) != graph.num_vertices:
        raise StructuralError(
            f"assignment length ({len(assignment)}) != "
            f"num_vertices ({graph.num_vertices})"
        )


def cut_edge_mask(graph: Graph, assignment: np.ndarray) -> np.ndarray:
    """Boolean mask over ``graph.edges()`` marking edges whose endpoints differ."""
    assignment = np.asarray(assignment)
    _check_assignment(graph, assignment)
    edges = graph.edges()
    return assignment[edges[:, 0]] != assignment[edges[:, 1]]


def count_cut_edges(graph: Graph, assignment: np.ndarray) -> int:
    """Number of undirected edges whose endpoints lie in different subsets.

    Each edge is visited once as (u, v) with u < v. Pure: neither argument
    is modified.

    Args:
        graph: The graph.
        assignment: Subset index per vertex, length num_vertices.

    Returns:
        Cut-edge count.
    """
    return int(cut_edge_mask(graph, assignment).sum())
