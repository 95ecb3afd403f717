"""Default run parameters, defined once for the CLI and tests."""

from klpart.config.experiment import GeneratorConfig, RunConfig

# All-default values: k=2, margin=10%, 10 passes, upper bound only, seed=42.
# Graph comes from a file unless a generator config is supplied.
DEFAULT_CONFIG = RunConfig()

# Default config with a generated 40-vertex G(n, p) graph.
GENERATED_CONFIG = RunConfig(generator=GeneratorConfig())
