"""Step-by-step playback of recorded KL swaps.

Works on the RefineResult log that partition(..., record_swaps=True)
returns. Each refinement call contributes its full tentative swap sequence;
only the first ``num_committed`` swaps of each call were kept.
"""

from typing import Iterator

import matplotlib.pyplot as plt
import numpy as np

from klpart.partition.refine import RefineResult
from klpart.visualization.style import CUT_EDGE_COLOR, PALETTE, THRESHOLD_COLOR


def replay_committed(
    initial_assignment: np.ndarray, refinements: list[RefineResult]
) -> Iterator[tuple[int, np.ndarray]]:
    """Yield (cut_edges, assignment) after every committed swap, in order.

    The yielded arrays are fresh copies. Replaying every refinement of a
    run reproduces the run's final assignment.
    """
    state = np.array(initial_assignment, copy=True)
    for ref in refinements:
        for swap in ref.swaps[: ref.num_committed]:
            state[swap.v1] = ref.part_b
            state[swap.v2] = ref.part_a
            yield swap.cut_edges, state.copy()


def plot_swap_playback(refinements: list[RefineResult]) -> plt.Figure:
    """Plot the cut count along every tentative swap of a run.

    Each refinement call is a segment starting at its cut_before. Committed
    swaps are drawn solid, discarded tail swaps dashed, and the committed
    prefix end is marked.
    """
    fig, ax = plt.subplots(figsize=(10, 4))
    x = 0
    for idx, ref in enumerate(refinements):
        if not ref.swaps:
            continue
        cuts = [ref.cut_before] + [s.cut_edges for s in ref.swaps]
        steps = np.arange(x, x + len(cuts))
        p = ref.num_committed
        color = PALETTE[idx % len(PALETTE)]
        ax.plot(steps[: p + 1], cuts[: p + 1], color=color, linewidth=1.5)
        ax.plot(steps[p:], cuts[p:], color=color, linewidth=1.0, linestyle="--", alpha=0.6)
        if p:
            ax.scatter([steps[p]], [cuts[p]], color=CUT_EDGE_COLOR, zorder=3, s=20)
        x += len(cuts)

    if x == 0:
        ax.text(
            0.5, 0.5, "No swaps recorded",
            transform=ax.transAxes, ha="center", va="center",
            fontsize=12, color="gray",
        )
    ax.set_xlabel("Tentative swap")
    ax.set_ylabel("Cut edges")
    ax.set_title("KL swap playback (solid = committed prefix)")
    fig.tight_layout()
    return fig


def plot_pass_cuts(initial_cut: int, pass_cuts: list[int]) -> plt.Figure:
    """Plot the cut count after each pass, starting from the initial cut."""
    fig, ax = plt.subplots(figsize=(6, 4))
    values = [initial_cut] + list(pass_cuts)
    ax.plot(np.arange(len(values)), values, marker="o", color=PALETTE[0])
    ax.axhline(values[-1], color=THRESHOLD_COLOR, linestyle=":", linewidth=1)
    ax.set_xlabel("Pass")
    ax.set_ylabel("Cut edges")
    ax.set_title("Cut edges per pass")
    fig.tight_layout()
    return fig
