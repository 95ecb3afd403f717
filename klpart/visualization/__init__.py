"""Static figures for partition runs: circular layouts and swap playback.

Provides render_all() to generate all figures for a single run.
"""

from klpart.visualization.render import render_all
from klpart.visualization.style import apply_style, save_figure

__all__ = [
    "render_all",
    "apply_style",
    "save_figure",
]
