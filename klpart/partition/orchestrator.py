"""k-way partitioning driver: initial assignment, KL passes, balance check.

Stage progression of a single run:
UNINITIALIZED -> INITIALIZING -> REFINING -> VALIDATING -> DONE (or FAILED).
"""

import logging
import math
from dataclasses import dataclass, field
from enum import Enum

import numpy as np

from klpart.errors import BalanceViolationError, ParameterError
from klpart.graph.types import Graph
from klpart.partition.cut import count_cut_edges
from klpart.partition.initial import initial_assignment
from klpart.partition.refine import RefineResult, refine_pair

log = logging.getLogger(__name__)

DEFAULT_MAX_PASSES = 10


class PartitionStage(str, Enum):
    UNINITIALIZED = "uninitialized"
    INITIALIZING = "initializing"
    REFINING = "refining"
    VALIDATING = "validating"
    DONE = "done"
    FAILED = "failed"


@dataclass(frozen=True, slots=True)
class BalanceBounds:
    """Allowed subset sizes; min_allowed is None when the lower bound is off."""

    ideal: float
    max_allowed: int
    min_allowed: int | None = None


@dataclass
class PartitionResult:
    """Final state of a successful partition run."""

    assignment: np.ndarray  # int64, vertex -> subset
    parts: list[list[int]]  # sorted member ids per subset
    cut_edges: int
    initial_cut_edges: int
    initial_assignment: np.ndarray  # copy of the assignment before refinement
    passes: int  # number of passes executed
    converged: bool  # stopped because a pass made no improvement
    pass_cuts: list[int] = field(default_factory=list)  # cut after each pass
    stage: PartitionStage = PartitionStage.DONE
    refinements: list[RefineResult] = field(default_factory=list)

    @property
    def sizes(self) -> list[int]:
        return [len(p) for p in self.parts]


def validate_parameters(
    num_vertices: int, num_parts: int, margin_percent: float, max_passes: int
) -> None:
    """Reject invalid run parameters before any computation.

    Raises:
        ParameterError: On num_parts outside [2, num_vertices], negative
            margin, or a non-positive pass limit.
    """
    if num_parts < 2:
        raise ParameterError(f"num_parts must be >= 2, got {num_parts}")
    if num_parts > num_vertices:
        raise ParameterError(
            f"num_parts ({num_parts}) must not exceed "
            f"number of vertices ({num_vertices})"
        )
    if margin_percent < 0:
        raise ParameterError(f"margin_percent must be >= 0, got {margin_percent}")
    if max_passes < 1:
        raise ParameterError(f"max_passes must be >= 1, got {max_passes}")


def balance_bounds(
    num_vertices: int,
    num_parts: int,
    margin_percent: float,
    enforce_lower_bound: bool = False,
) -> BalanceBounds:
    """Compute allowed subset sizes.

    max_allowed = ceil(ideal * (1 + margin / 100)) with ideal = n / k,
    evaluated as ceil(n * (100 + margin) / (100 * k)) so integral margins
    don't pick up float noise (e.g. 10 * 1.1 = 11.000000000000002).
    min_allowed = floor(ideal) when the lower bound is enforced.
    """
    ideal = num_vertices / num_parts
    max_allowed = math.ceil(num_vertices * (100 + margin_percent) / (100 * num_parts))
    min_allowed = num_vertices // num_parts if enforce_lower_bound else None
    return BalanceBounds(ideal=ideal, max_allowed=max_allowed, min_allowed=min_allowed)


def check_balance(sizes: list[int], bounds: BalanceBounds) -> None:
    """Raise BalanceViolationError if any subset size is out of bounds."""
    violations = []
    for part, size in enumerate(sizes):
        if size > bounds.max_allowed:
            violations.append(f"subset {part} has {size} > {bounds.max_allowed}")
        elif bounds.min_allowed is not None and size < bounds.min_allowed:
            violations.append(f"subset {part} has {size} < {bounds.min_allowed}")
    if violations:
        raise BalanceViolationError(
            "Balance violated: " + "; ".join(violations),
            sizes=list(sizes),
            max_allowed=bounds.max_allowed,
            min_allowed=bounds.min_allowed,
        )


def group_parts(assignment: np.ndarray, num_parts: int) -> list[list[int]]:
    """Member vertex ids of each subset, ascending."""
    return [np.flatnonzero(assignment == p).tolist() for p in range(num_parts)]


def run_pass(
    graph: Graph,
    assignment: np.ndarray,
    num_parts: int,
    record_swaps: bool = False,
    **cached,
) -> list[RefineResult]:
    """Refine every pair (i, j), i < j, in lexicographic order.

    Pairs run one after another against the same assignment since each
    refinement changes the membership the next pair sees.
    """
    results = []
    for i in range(num_parts):
        for j in range(i + 1, num_parts):
            results.append(
                refine_pair(graph, assignment, i, j, record_swaps, **cached)
            )
    return results


def partition(
    graph: Graph,
    num_parts: int,
    margin_percent: float = 10.0,
    *,
    rng: np.random.Generator | None = None,
    seed: int | None = None,
    max_passes: int = DEFAULT_MAX_PASSES,
    enforce_lower_bound: bool = False,
    record_swaps: bool = False,
) -> PartitionResult:
    """Partition graph into num_parts balanced subsets with KL refinement.

    Args:
        graph: The graph to partition.
        num_parts: Number of subsets, 2 <= num_parts <= num_vertices.
        margin_percent: Allowed oversize of a subset relative to n / k, in %.
        rng: numpy Generator for the initial assignment. Takes precedence
            over ``seed``.
        seed: Seed for a fresh Generator when ``rng`` is not given. With
            neither, the initial assignment is drawn from OS entropy.
        max_passes: Upper bound on passes over all subset pairs.
        enforce_lower_bound: Also require every subset to hold at least
            floor(n / k) vertices.
        record_swaps: Keep every RefineResult with its SwapRecords.

    Returns:
        PartitionResult for the refined, balance-checked assignment.

    Raises:
        ParameterError: Invalid num_parts, margin or max_passes.
        BalanceViolationError: Refined sizes fall outside the bounds.
    """
    n = graph.num_vertices
    validate_parameters(n, num_parts, margin_percent, max_passes)

    stage = PartitionStage.INITIALIZING
    if rng is None:
        rng = np.random.default_rng(seed)
    assignment = initial_assignment(n, num_parts, rng)
    initial = assignment.copy()
    initial_cut = count_cut_edges(graph, assignment)
    log.info(
        "Stage %s: n=%d, k=%d, initial cut=%d",
        stage.value,
        n,
        num_parts,
        initial_cut,
    )

    stage = PartitionStage.REFINING
    log.debug("Stage %s: max_passes=%d", stage.value, max_passes)
    cached = {
        "adjacency": graph.to_sparse(),
        "rows": np.repeat(np.arange(n), graph.degrees()),
    }
    pass_cuts: list[int] = []
    refinements: list[RefineResult] = []
    converged = False
    passes = 0

    while passes < max_passes:
        results = run_pass(graph, assignment, num_parts, record_swaps, **cached)
        passes += 1
        pass_cuts.append(count_cut_edges(graph, assignment))
        if record_swaps:
            refinements.extend(results)

        committed = sum(r.num_committed for r in results)
        log.info(
            "Pass %d: %d swaps committed, cut=%d",
            passes,
            committed,
            pass_cuts[-1],
        )
        if not any(r.improved for r in results):
            converged = True
            break

    if not converged:
        log.info("Pass limit %d reached before convergence", max_passes)

    stage = PartitionStage.VALIDATING
    log.debug("Stage %s", stage.value)
    parts = group_parts(assignment, num_parts)
    sizes = [len(p) for p in parts]
    bounds = balance_bounds(n, num_parts, margin_percent, enforce_lower_bound)
    try:
        check_balance(sizes, bounds)
    except BalanceViolationError:
        stage = PartitionStage.FAILED
        log.warning(
            "Stage %s: sizes=%s, bounds=[%s, %d]",
            stage.value,
            sizes,
            bounds.min_allowed,
            bounds.max_allowed,
        )
        raise

    stage = PartitionStage.DONE
    cut = count_cut_edges(graph, assignment)
    log.info("Stage %s: cut=%d, sizes=%s, passes=%d", stage.value, cut, sizes, passes)

    return PartitionResult(
        assignment=assignment,
        parts=parts,
        cut_edges=cut,
        initial_cut_edges=initial_cut,
        initial_assignment=initial,
        passes=passes,
        converged=converged,
        pass_cuts=pass_cuts,
        stage=stage,
        refinements=refinements,
    )
