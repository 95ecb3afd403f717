"""KL gain (D-value) evaluation between two designated subsets."""

import numpy as np

from klpart.graph.types import Graph


def eligible_mask(
    assignment: np.ndarray, part_a: int, part_b: int, locked: np.ndarray
) -> np.ndarray:
    """Vertices currently in part_a or part_b that are not locked."""
    return ((assignment == part_a) | (assignment == part_b)) & ~locked


def compute_gains(
    graph: Graph,
    assignment: np.ndarray,
    part_a: int,
    part_b: int,
    locked: np.ndarray,
    rows: np.ndarray | None = None,
) -> np.ndarray:
    """Compute gain(v) for every eligible vertex.

    gain(v) = (#neighbors in the other designated subset)
              - (#neighbors in v's own subset)

    A positive gain means moving v across reduces more cut edges than it
    creates. Neighbors in any third subset do not contribute: they stay cut
    whichever side of the A/B boundary v ends up on.

    Args:
        graph: The graph.
        assignment: Current (possibly already swapped) subset per vertex.
        part_a: First designated subset.
        part_b: Second designated subset.
        locked: Boolean lock mask; locked vertices are not scored.
        rows: Optional precomputed source vertex per neighbor entry
            (``np.repeat(arange(n), degrees)``), reused across rounds.

    Returns:
        int64 array of length n. Ineligible vertices hold 0; use
        ``eligible_mask`` to tell them apart from zero-gain vertices.
    """
    n = graph.num_vertices
    if rows is None:
        rows = np.repeat(np.arange(n), graph.degrees())

    own = assignment[rows]
    nbr = assignment[graph.neighbors]
    other = part_a + part_b - own

    contribution = (nbr == other).astype(np.int64) - (nbr == own).astype(np.int64)
    gains = np.bincount(rows, weights=contribution, minlength=n).astype(np.int64)

    gains[~eligible_mask(assignment, part_a, part_b, locked)] = 0
    return gains
