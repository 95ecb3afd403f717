"""Orchestrator: render all figures for a single partition run.

Saves to {output_dir}/figures/ as PNG + SVG.
"""

import logging
from pathlib import Path

from klpart.graph.types import Graph
from klpart.partition.orchestrator import PartitionResult
from klpart.visualization.style import apply_style, save_figure

log = logging.getLogger(__name__)


def render_all(
    graph: Graph, result: PartitionResult, output_dir: str | Path
) -> list[Path]:
    """Generate all figures for a single run.

    Each plot type is wrapped in try/except to ensure one failure
    doesn't block the others.

    Args:
        graph: The partitioned graph.
        result: The partition outcome.
        output_dir: Run directory; figures go to {output_dir}/figures/.

    Returns:
        List of paths to generated figure files.
    """
    apply_style()
    figures_dir = Path(output_dir) / "figures"
    generated_files: list[Path] = []

    # ── Circular layout before/after ──────────────────────────────────
    try:
        from klpart.visualization.circular import plot_before_after

        fig = plot_before_after(graph, result.assignment, result.cut_edges)
        generated_files.extend(save_figure(fig, figures_dir, "partition_circular"))
        log.info("Generated: partition_circular")
    except Exception as e:
        log.warning("Failed to generate partition_circular: %s", e)

    # ── Cut per pass ──────────────────────────────────────────────────
    if result.pass_cuts:
        try:
            from klpart.visualization.swaps import plot_pass_cuts

            fig = plot_pass_cuts(result.initial_cut_edges, result.pass_cuts)
            generated_files.extend(save_figure(fig, figures_dir, "pass_cuts"))
            log.info("Generated: pass_cuts")
        except Exception as e:
            log.warning("Failed to generate pass_cuts: %s", e)

    # ── Swap playback (only when swaps were recorded) ─────────────────
    if result.refinements:
        try:
            from klpart.visualization.swaps import plot_swap_playback

            fig = plot_swap_playback(result.refinements)
            generated_files.extend(save_figure(fig, figures_dir, "swap_playback"))
            log.info("Generated: swap_playback")
        except Exception as e:
            log.warning("Failed to generate swap_playback: %s", e)

    return generated_files
