"""Kernighan-Lin partitioning engine.

Public operations for front ends: ``load_graph``, ``partition`` and
``count_cut_edges``.
"""

from klpart.errors import (
    BalanceViolationError,
    ParameterError,
    PartitionError,
    StructuralError,
)
from klpart.graph.types import Graph, load_graph
from klpart.partition.cut import count_cut_edges, cut_edge_mask
from klpart.partition.gain import compute_gains, eligible_mask
from klpart.partition.initial import initial_assignment
from klpart.partition.orchestrator import (
    DEFAULT_MAX_PASSES,
    BalanceBounds,
    PartitionResult,
    PartitionStage,
    balance_bounds,
    check_balance,
    partition,
)
from klpart.partition.refine import RefineResult, SwapRecord, refine_pair

__all__ = [
    "BalanceBounds",
    "BalanceViolationError",
    "DEFAULT_MAX_PASSES",
    "Graph",
    "ParameterError",
    "PartitionError",
    "PartitionResult",
    "PartitionStage",
    "RefineResult",
    "StructuralError",
    "SwapRecord",
    "balance_bounds",
    "check_balance",
    "compute_gains",
    "count_cut_edges",
    "cut_edge_mask",
    "eligible_mask",
    "initial_assignment",
    "load_graph",
    "partition",
    "refine_pair",
]
