"""One Kernighan-Lin pass between two subsets with best-prefix commit.

Each round recomputes gains against the working assignment, picks the
unlocked pair (v1 in A, v2 in B) with the largest combined gain, swaps and
locks it. Once no unlocked pair remains (or min(|A|, |B|) rounds ran), the
prefix of the swap sequence with the lowest global cut is committed to the
caller's assignment, and only if it beats the cut before the call.
"""

import logging
from dataclasses import dataclass

import numpy as np
import scipy.sparse

from klpart.errors import ParameterError
from klpart.graph.types import Graph
from klpart.partition.cut import count_cut_edges
from klpart.partition.gain import compute_gains

log = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class SwapRecord:
    """A single tentative swap generated during one refinement call."""

    v1: int  # moved from part_a to part_b
    v2: int  # moved from part_b to part_a
    gain: int  # combined gain of the pair when it was chosen
    cut_edges: int  # global cut count after this and all earlier swaps


@dataclass(frozen=True)
class RefineResult:
    """Outcome of refine_pair.

    ``swaps`` holds the full generated sequence (committed prefix plus the
    discarded tail) and is empty unless recording was requested.
    """

    part_a: int
    part_b: int
    improved: bool
    num_committed: int
    cut_before: int
    cut_after: int
    swaps: tuple[SwapRecord, ...] = ()


def best_prefix(cut_before: int, cuts: np.ndarray) -> int:
    """Length of the swap prefix to commit.

    Picks the prefix with the minimum cumulative cut (the shortest one on
    ties). Returns 0 unless that minimum is strictly below ``cut_before``.
    """
    if len(cuts) == 0:
        return 0
    p = int(np.argmin(cuts)) + 1
    if cuts[p - 1] < cut_before:
        return p
    return 0


def _count_values(values: np.ndarray, table: np.ndarray, offset: int) -> np.ndarray:
    """table[values - offset] with 0 for values outside the table."""
    idx = values - offset
    inside = (idx >= 0) & (idx < len(table))
    counts = np.zeros(len(values), dtype=np.int64)
    counts[inside] = table[idx[inside]]
    return counts


def best_pair(
    gain_a: np.ndarray,
    gain_b: np.ndarray,
    edge_rows: np.ndarray,
    edge_cols: np.ndarray,
) -> tuple[int, int, int]:
    """Pair (i, j) maximizing gain_a[i] + gain_b[j] - 2 * adjacent(i, j).

    Equivalent to the first maximum of the dense |A| x |B| combined-gain
    matrix in row-major order, without building it. With U = max(gain_a) +
    max(gain_b) the best value lies in [U - 2, U], so each target level is
    tested for every row at once: a row reaches ``target`` through a
    non-adjacent column holding ``target - gain_a[i]`` or an adjacent column
    holding ``target - gain_a[i] + 2``.

    Args:
        gain_a: Gains of the candidate rows (unlocked vertices of A).
        gain_b: Gains of the candidate columns (unlocked vertices of B).
        edge_rows: Row index of every A-B edge, no repeated pairs.
        edge_cols: Column index of every A-B edge.

    Returns:
        (i, j, combined_gain).
    """
    offset = int(gain_b.min())
    table = np.bincount(gain_b - offset)
    num_rows = len(gain_a)

    target = int(gain_a.max()) + int(gain_b.max())
    while True:
        free = target - gain_a
        linked = free + 2
        edge_gain = gain_b[edge_cols]
        adj_free = np.bincount(
            edge_rows[edge_gain == free[edge_rows]], minlength=num_rows
        )
        adj_linked = np.bincount(
            edge_rows[edge_gain == linked[edge_rows]], minlength=num_rows
        )
        reached = (_count_values(free, table, offset) > adj_free) | (adj_linked > 0)
        if reached.any():
            break
        target -= 1

    i = int(np.argmax(reached))
    adjacent = np.zeros(len(gain_b), dtype=bool)
    adjacent[edge_cols[edge_rows == i]] = True
    match = np.where(adjacent, gain_b == linked[i], gain_b == free[i])
    return i, int(np.argmax(match)), target


def refine_pair(
    graph: Graph,
    assignment: np.ndarray,
    part_a: int,
    part_b: int,
    record_swaps: bool = False,
    adjacency: scipy.sparse.csr_matrix | None = None,
    rows: np.ndarray | None = None,
) -> RefineResult:
    """Run one KL pass between subsets part_a and part_b.

    The assignment is modified in place when an improving prefix exists
    and left untouched otherwise.

    Best-pair ties are broken by the first maximum in row-major order of
    the (v1, v2) gain matrix, i.e. smallest v1 id, then smallest v2 id.
    Negative combined gains are still swapped and recorded so that the
    best-prefix rule can climb out of a local dip.

    Args:
        graph: The graph.
        assignment: Mutable subset index per vertex.
        part_a: First subset index.
        part_b: Second subset index, distinct from part_a.
        record_swaps: Materialise SwapRecord entries for playback.
        adjacency: Optional cached ``graph.to_sparse()``.
        rows: Optional cached source vertex per neighbor entry.

    Returns:
        RefineResult describing what was committed.

    Raises:
        ParameterError: If part_a == part_b.
    """
    if part_a == part_b:
        raise ParameterError(f"part_a and part_b must differ, got {part_a}")

    if adjacency is None:
        adjacency = graph.to_sparse()
    if rows is None:
        rows = np.repeat(np.arange(graph.num_vertices), graph.degrees())

    cut_before = count_cut_edges(graph, assignment)
    working = assignment.copy()
    locked = np.zeros(graph.num_vertices, dtype=bool)

    m = min(
        int(np.count_nonzero(assignment == part_a)),
        int(np.count_nonzero(assignment == part_b)),
    )
    moved_a = np.empty(m, dtype=np.int64)
    moved_b = np.empty(m, dtype=np.int64)
    gains_taken = np.empty(m, dtype=np.int64)
    cuts = np.empty(m, dtype=np.int64)

    cut = cut_before
    steps = 0
    for _ in range(m):
        gains = compute_gains(graph, working, part_a, part_b, locked, rows)
        cand_a = np.flatnonzero((working == part_a) & ~locked)
        cand_b = np.flatnonzero((working == part_b) & ~locked)
        if len(cand_a) == 0 or len(cand_b) == 0:
            break

        cross = adjacency[cand_a][:, cand_b].tocoo()
        i, j, gain = best_pair(gains[cand_a], gains[cand_b], cross.row, cross.col)
        v1, v2 = int(cand_a[i]), int(cand_b[j])

        working[v1] = part_b
        working[v2] = part_a
        locked[v1] = True
        locked[v2] = True
        # Swapping v1 and v2 lowers the global cut by exactly their combined gain.
        cut -= gain

        moved_a[steps] = v1
        moved_b[steps] = v2
        gains_taken[steps] = gain
        cuts[steps] = cut
        steps += 1

    p = best_prefix(cut_before, cuts[:steps])
    if p:
        assignment[moved_a[:p]] = part_b
        assignment[moved_b[:p]] = part_a
    cut_after = int(cuts[p - 1]) if p else cut_before

    swaps: tuple[SwapRecord, ...] = ()
    if record_swaps:
        swaps = tuple(
            SwapRecord(
                v1=int(moved_a[s]),
                v2=int(moved_b[s]),
                gain=int(gains_taken[s]),
                cut_edges=int(cuts[s]),
            )
            for s in range(steps)
        )

    log.debug(
        "refine_pair(%d, %d): %d candidate swaps, committed %d, cut %d -> %d",
        part_a,
        part_b,
        steps,
        p,
        cut_before,
        cut_after,
    )
    return RefineResult(
        part_a=part_a,
        part_b=part_b,
        improved=p > 0,
        num_committed=p,
        cut_before=cut_before,
        cut_after=cut_after,
        swaps=swaps,
    )
