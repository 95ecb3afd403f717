"""Run configuration as frozen, slotted dataclasses."""

from dataclasses import dataclass, field


@dataclass(frozen=True, slots=True)
class PartitionConfig:
    """Partitioning engine parameters."""

    num_parts: int = 2  # k, number of subsets
    margin_percent: float = 10.0  # allowed oversize relative to n / k
    max_passes: int = 10  # pass limit over all subset pairs
    enforce_lower_bound: bool = False  # also require size >= floor(n / k)
    record_swaps: bool = False  # keep SwapRecords for playback


@dataclass(frozen=True, slots=True)
class GeneratorConfig:
    """Random G(n, p) graph generation parameters."""

    n: int = 40  # number of vertices
    edge_probability: float = 0.15  # independent probability of each edge
    max_retries: int = 10  # attempts to draw a connected graph


@dataclass(frozen=True, slots=True)
class RunConfig:
    """Top-level run configuration composing all sub-configs.

    ``generator`` is None when the graph comes from a file. Cross-parameter
    validation runs in __post_init__ to reject invalid configurations early.
    """

    partition: PartitionConfig = field(default_factory=PartitionConfig)
    generator: GeneratorConfig | None = None
    seed: int = 42
    description: str = ""
    tags: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        """Cross-parameter validation."""
        if self.partition.num_parts < 2:
            raise ValueError(
                f"num_parts must be >= 2, got {self.partition.num_parts}"
            )
        if self.partition.margin_percent < 0:
            raise ValueError(
                f"margin_percent must be >= 0, got {self.partition.margin_percent}"
            )
        if self.partition.max_passes < 1:
            raise ValueError(
                f"max_passes must be >= 1, got {self.partition.max_passes}"
            )
        if self.generator is not None:
            if not 0.0 <= self.generator.edge_probability <= 1.0:
                raise ValueError(
                    f"edge_probability ({self.generator.edge_probability}) "
                    f"must lie in [0, 1]"
                )
            if self.partition.num_parts > self.generator.n:
                raise ValueError(
                    f"num_parts ({self.partition.num_parts}) must be "
                    f"<= n ({self.generator.n})"
                )
