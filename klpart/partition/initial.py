"""Random near-balanced initial assignment."""

import numpy as np


def initial_assignment(n: int, k: int, rng: np.random.Generator) -> np.ndarray:
    """Assign vertices to k subsets round-robin over a random permutation.

    Position i of a uniform random permutation of vertex ids goes to subset
    ``i mod k``, so every subset gets ``ceil(n/k)`` or ``floor(n/k)``
    vertices. All randomness comes from ``rng``; repeated calls with fresh
    generators seeded identically return identical assignments.

    Args:
        n: Number of vertices.
        k: Number of subsets (2 <= k <= n is enforced by the orchestrator).
        rng: numpy random Generator.

    Returns:
        int64 array of length n mapping vertex -> subset index.
    """
    order = rng.permutation(n)
    assignment = np.empty(n, dtype=np.int64)
    assignment[order] = np.arange(n) % k
    return assignment
