"""Shared figure style: seaborn theme, subset colours, PNG + SVG export."""

import matplotlib
matplotlib.use("Agg")  # headless

import matplotlib.pyplot as plt
import seaborn as sns
from pathlib import Path

# One colour per subset index, colorblind-safe.
PALETTE = sns.color_palette("colorblind", n_colors=10)
UNASSIGNED_COLOR = (0.75, 0.75, 0.75)
EDGE_COLOR = (0.5, 0.5, 0.5)
CUT_EDGE_COLOR = PALETTE[3]
THRESHOLD_COLOR = (0.4, 0.4, 0.4)

FIGURE_FORMATS = ("png", "svg")
SAVE_DPI = 300

_RC_PARAMS = {
    "figure.dpi": 150,
    "savefig.dpi": SAVE_DPI,
    "font.size": 10,
    "axes.titlesize": 12,
    "axes.labelsize": 11,
    "svg.fonttype": "none",
}


def subset_color(part: int) -> tuple[float, float, float]:
    """Colour for subset index ``part``, cycling through the palette."""
    return PALETTE[part % len(PALETTE)]


def apply_style() -> None:
    """Set the whitegrid theme and figure defaults. Safe to call repeatedly."""
    sns.set_theme(style="whitegrid", rc=_RC_PARAMS)


def save_figure(fig: plt.Figure, output_dir: Path, name: str) -> tuple[Path, ...]:
    """Write ``fig`` once per format in FIGURE_FORMATS, then close it.

    Args:
        fig: Figure to save.
        output_dir: Target directory, created if absent.
        name: File stem.

    Returns:
        Written paths, in FIGURE_FORMATS order (PNG first).
    """
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    paths = tuple(output_dir / f"{name}.{fmt}" for fmt in FIGURE_FORMATS)
    for path in paths:
        fig.savefig(path, dpi=SAVE_DPI, bbox_inches="tight")
    plt.close(fig)
    return paths
