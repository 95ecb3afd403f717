"""Circular-layout drawing of a graph coloured by subset.

Vertices sit on a circle. With an assignment, they are ordered subset by
subset so each subset occupies a contiguous arc and cut edges are drawn
in the cut colour; without one, vertices keep id order and a neutral colour.
"""

import matplotlib.pyplot as plt
import numpy as np
from matplotlib.collections import LineCollection

from klpart.graph.types import Graph
from klpart.partition.cut import cut_edge_mask
from klpart.visualization.style import (
    CUT_EDGE_COLOR,
    EDGE_COLOR,
    UNASSIGNED_COLOR,
    subset_color,
)

# Vertex labels are only drawn below this size to keep figures legible.
MAX_LABELLED_VERTICES = 60


def circular_positions(
    num_vertices: int, assignment: np.ndarray | None = None
) -> np.ndarray:
    """Vertex coordinates on the unit circle, shape (n, 2).

    With an assignment, vertices are placed in (subset, id) order.
    """
    if assignment is None:
        order = np.arange(num_vertices)
    else:
        order = np.lexsort((np.arange(num_vertices), assignment))
    angles = np.empty(num_vertices)
    angles[order] = 2 * np.pi * np.arange(num_vertices) / num_vertices
    return np.column_stack((np.cos(angles), np.sin(angles)))


def plot_circular(
    graph: Graph,
    assignment: np.ndarray | None = None,
    title: str = "",
    ax: plt.Axes | None = None,
) -> plt.Figure:
    """Draw the graph on a circle.

    Args:
        graph: Graph to draw.
        assignment: Optional subset per vertex. None draws the unpartitioned
            graph.
        title: Axes title.
        ax: Optional axes to draw into; a new figure is created otherwise.

    Returns:
        The matplotlib Figure containing the drawing.
    """
    if ax is None:
        fig, ax = plt.subplots(figsize=(6, 6))
    else:
        fig = ax.figure

    pos = circular_positions(graph.num_vertices, assignment)
    edges = graph.edges()
    segments = np.stack((pos[edges[:, 0]], pos[edges[:, 1]]), axis=1)

    if assignment is None:
        cut = np.zeros(len(edges), dtype=bool)
        node_colors = [UNASSIGNED_COLOR] * graph.num_vertices
    else:
        cut = cut_edge_mask(graph, assignment)
        node_colors = [subset_color(int(p)) for p in assignment]
    ax.add_collection(
        LineCollection(segments[~cut], colors=[EDGE_COLOR], linewidths=0.6, alpha=0.6)
    )
    ax.add_collection(
        LineCollection(segments[cut], colors=[CUT_EDGE_COLOR], linewidths=0.9)
    )

    ax.scatter(
        pos[:, 0], pos[:, 1], s=80, c=node_colors, edgecolors="black",
        linewidths=0.5, zorder=3,
    )
    if graph.num_vertices <= MAX_LABELLED_VERTICES:
        for v, (x, y) in enumerate(pos):
            ax.annotate(
                str(v), (x * 1.1, y * 1.1), ha="center", va="center", fontsize=7,
            )

    ax.set_xlim(-1.25, 1.25)
    ax.set_ylim(-1.25, 1.25)
    ax.set_aspect("equal")
    ax.axis("off")
    ax.set_title(title)
    return fig


def plot_before_after(
    graph: Graph, assignment: np.ndarray, cut_edges: int | None = None
) -> plt.Figure:
    """Side-by-side drawing of the graph before and after partitioning."""
    fig, (ax_before, ax_after) = plt.subplots(1, 2, figsize=(12, 6))
    plot_circular(graph, None, title="Before partitioning", ax=ax_before)
    after_title = "After partitioning"
    if cut_edges is not None:
        after_title += f" (cut edges: {cut_edges})"
    plot_circular(graph, assignment, title=after_title, ax=ax_after)
    fig.tight_layout()
    return fig
