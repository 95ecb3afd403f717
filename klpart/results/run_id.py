"""Run ID generation with scannable parameter slug format."""

from datetime import datetime, timezone

from klpart.config.experiment import RunConfig


def generate_run_id(config: RunConfig, num_vertices: int) -> str:
    """Generate a scannable run ID from config parameters.

    Format: n{n}_k{k}_m{margin}_s{seed}_{YYYYMMDD}_{HHMMSS}
    Example: n40_k2_m10_s42_20260224_143012

    The slug encodes key parameters so run directories are identifiable
    at a glance in file listings without opening result.json.
    """
    ts = datetime.now(timezone.utc)
    margin = config.partition.margin_percent
    margin_slug = f"{margin:g}".replace(".", "p")
    return (
        f"n{num_vertices}"
        f"_k{config.partition.num_parts}"
        f"_m{margin_slug}"
        f"_s{config.seed}"
        f"_{ts.strftime('%Y%m%d_%H%M%S')}"
    )
