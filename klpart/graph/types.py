"""Compressed (CSR) undirected graph used as the partitioning substrate."""

from dataclasses import dataclass
from typing import Sequence

import numpy as np
import scipy.sparse

from klpart.errors import StructuralError


@dataclass(frozen=True)
class Graph:
    """Immutable CSR adjacency structure.

    ``neighbors[offsets[v]:offsets[v + 1]]`` is the adjacency list of vertex
    ``v``. Each undirected edge appears twice, once per endpoint. Symmetry
    and the absence of self-loops are assumed here and checked only by
    ``klpart.graph.validation``. Uses frozen=True but omits slots=True since
    numpy arrays don't interact well with __slots__.
    """

    num_vertices: int
    neighbors: np.ndarray  # int64, concatenated adjacency lists
    offsets: np.ndarray  # int64, length num_vertices + 1

    @property
    def num_edges(self) -> int:
        """Number of undirected edges."""
        return len(self.neighbors) // 2

    def degree(self, v: int) -> int:
        return int(self.offsets[v + 1] - self.offsets[v])

    def degrees(self) -> np.ndarray:
        return np.diff(self.offsets)

    def neighbors_of(self, v: int) -> np.ndarray:
        """O(degree) view of the neighbors of vertex v."""
        return self.neighbors[self.offsets[v] : self.offsets[v + 1]]

    def edges(self) -> np.ndarray:
        """Every undirected edge once, as an (m, 2) array with u < v."""
        rows = np.repeat(np.arange(self.num_vertices), self.degrees())
        mask = rows < self.neighbors
        return np.column_stack((rows[mask], self.neighbors[mask]))

    def to_sparse(self) -> scipy.sparse.csr_matrix:
        """Binary scipy CSR adjacency matrix (n x n) built from this layout."""
        data = np.ones(len(self.neighbors), dtype=np.int8)
        adj = scipy.sparse.csr_matrix(
            (data, self.neighbors, self.offsets),
            shape=(self.num_vertices, self.num_vertices),
            copy=True,
        )
        # Collapse duplicate entries to a single edge.
        adj.sum_duplicates()
        adj.data[:] = 1
        return adj


def first_duplicate_entry(
    vertex_count: int, neighbors: np.ndarray, offsets: np.ndarray
) -> tuple[int, int] | None:
    """Smallest (v, u) such that u appears more than once in v's list, or None."""
    rows = np.repeat(np.arange(vertex_count, dtype=np.int64), np.diff(offsets))
    keys = np.sort(rows * vertex_count + neighbors)
    repeated = keys[1:][keys[1:] == keys[:-1]]
    if len(repeated) == 0:
        return None
    v, u = divmod(int(repeated[0]), vertex_count)
    return v, u


def load_graph(
    vertex_count: int,
    neighbors: Sequence[int] | np.ndarray,
    offsets: Sequence[int] | np.ndarray,
) -> Graph:
    """Build a Graph after structural validation of the CSR arrays.

    Checks offsets length, monotonicity and bounds, and that neighbor ids
    are in range and listed at most once per vertex. Symmetry is not
    checked here.

    Args:
        vertex_count: Number of vertices (>= 1).
        neighbors: Concatenated adjacency lists.
        offsets: Per-vertex boundaries into ``neighbors``.

    Returns:
        An immutable Graph with read-only arrays.

    Raises:
        StructuralError: If any structural invariant is violated.
    """
    if vertex_count < 1:
        raise StructuralError(f"vertex_count must be >= 1, got {vertex_count}")

    nbrs = np.asarray(neighbors, dtype=np.int64).ravel()
    offs = np.asarray(offsets, dtype=np.int64).ravel()

    if len(offs) != vertex_count + 1:
        raise StructuralError(
            f"offsets length ({len(offs)}) must equal "
            f"vertex_count + 1 ({vertex_count + 1})"
        )
    if offs[0] != 0:
        raise StructuralError(f"offsets[0] must be 0, got {offs[0]}")
    if np.any(np.diff(offs) < 0):
        raise StructuralError("offsets must be non-decreasing")
    if offs[-1] != len(nbrs):
        raise StructuralError(
            f"offsets[-1] ({offs[-1]}) must equal number of "
            f"neighbor entries ({len(nbrs)})"
        )
    if len(nbrs) and (nbrs.min() < 0 or nbrs.max() >= vertex_count):
        raise StructuralError(
            f"neighbor ids must lie in [0, {vertex_count}), "
            f"got range [{nbrs.min()}, {nbrs.max()}]"
        )
    duplicate = first_duplicate_entry(vertex_count, nbrs, offs)
    if duplicate is not None:
        v, u = duplicate
        raise StructuralError(f"duplicate neighbor entry: vertex {v} lists {u} twice")

    nbrs = nbrs.copy()
    offs = offs.copy()
    nbrs.flags.writeable = False
    offs.flags.writeable = False
    return Graph(num_vertices=int(vertex_count), neighbors=nbrs, offsets=offs)


def graph_from_edges(num_vertices: int, edges: Sequence[tuple[int, int]]) -> Graph:
    """Build a symmetric Graph from an undirected edge list.

    Each pair is stored in both directions; adjacency lists are sorted.
    Duplicate pairs and self-loops are dropped.
    """
    pairs = {
        (min(u, v), max(u, v)) for u, v in edges if u != v
    }
    for u, v in pairs:
        if u < 0 or v >= num_vertices:
            raise StructuralError(
                f"edge ({u}, {v}) references a vertex outside [0, {num_vertices})"
            )
    adjacency: list[list[int]] = [[] for _ in range(num_vertices)]
    for u, v in pairs:
        adjacency[u].append(v)
        adjacency[v].append(u)

    offsets = [0]
    neighbors: list[int] = []
    for adj in adjacency:
        neighbors.extend(sorted(adj))
        offsets.append(len(neighbors))
    return load_graph(num_vertices, neighbors, offsets)
