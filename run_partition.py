#!/usr/bin/env python3
"""Entry point for running Kernighan-Lin graph partitioning.

Chains all stages into a single executable command:
graph loading (file or generated) -> partitioning -> result writing ->
visualization.

Usage:
    python run_partition.py --graph graph.txt --parts 4 --margin 10
    python run_partition.py --config config.json
    python run_partition.py --config config.json --dry-run
    python run_partition.py --generate --parts 3 --seed 7 --verbose
"""

import argparse
import logging
import sys
import time
from contextlib import contextmanager
from dataclasses import replace
from pathlib import Path
from typing import Generator

from klpart.config import (
    DEFAULT_CONFIG,
    GeneratorConfig,
    RunConfig,
    config_from_json,
    full_config_hash,
)
from klpart.errors import BalanceViolationError, PartitionError

log = logging.getLogger(__name__)


@contextmanager
def stage_timer(name: str) -> Generator[None, None, None]:
    """Context manager that prints stage banners with elapsed time."""
    print(f"\n=== {name} ===")
    log.info("Starting: %s", name)
    t0 = time.monotonic()
    yield
    elapsed = time.monotonic() - t0
    print(f"... done in {elapsed:.1f}s")
    log.info("Completed: %s in %.1fs", name, elapsed)


def build_config(args: argparse.Namespace) -> RunConfig:
    """Load the JSON config (or defaults) and apply command-line overrides."""
    if args.config:
        config = config_from_json(Path(args.config).read_text())
    else:
        config = DEFAULT_CONFIG

    part_overrides = {}
    if args.parts is not None:
        part_overrides["num_parts"] = args.parts
    if args.margin is not None:
        part_overrides["margin_percent"] = args.margin
    if args.max_passes is not None:
        part_overrides["max_passes"] = args.max_passes
    if args.enforce_lower_bound:
        part_overrides["enforce_lower_bound"] = True
    if args.record_swaps:
        part_overrides["record_swaps"] = True

    overrides = {}
    if part_overrides:
        overrides["partition"] = replace(config.partition, **part_overrides)
    if args.seed is not None:
        overrides["seed"] = args.seed
    if args.generate and config.generator is None:
        overrides["generator"] = GeneratorConfig()
    return replace(config, **overrides) if overrides else config


def run_pipeline(
    config: RunConfig,
    graph_path: Path | None = None,
    results_dir: str = "results",
    restarts: int = 0,
    figures: bool = True,
    cache_dir: Path | None = None,
) -> Path:
    """Execute the full partition pipeline.

    Args:
        config: Run configuration.
        graph_path: Graph text file. When None, the graph is generated from
            config.generator.
        results_dir: Base directory for results output.
        restarts: Extra attempts with derived seeds after a balance violation.
        figures: Render figures after writing results.
        cache_dir: Override for the generated-graph cache directory.

    Returns:
        Path to the output directory.
    """
    from klpart.graph import generate_or_load_graph, read_graph
    from klpart.graph.cache import DEFAULT_CACHE_DIR
    from klpart.partition import partition
    from klpart.reproducibility import derive_seed, get_git_hash, make_rng, set_seed
    from klpart.results import write_result
    from klpart.visualization import render_all

    pipeline_start = time.monotonic()
    set_seed(config.seed)
    log.info("Seed: %d", config.seed)
    log.info("Git hash: %s", get_git_hash())

    # ── Stage 1: Graph ─────────────────────────────────────────────
    with stage_timer("Graph Loading"):
        if graph_path is not None:
            graph = read_graph(graph_path).graph
        else:
            graph = generate_or_load_graph(config, cache_dir or DEFAULT_CACHE_DIR)
        log.info("Graph: n=%d, edges=%d", graph.num_vertices, graph.num_edges)

    # ── Stage 2: Partitioning ──────────────────────────────────────
    pc = config.partition
    with stage_timer("Partitioning"):
        attempt = 0
        while True:
            seed = config.seed if attempt == 0 else derive_seed(config.seed, attempt)
            try:
                result = partition(
                    graph,
                    pc.num_parts,
                    pc.margin_percent,
                    rng=make_rng(seed),
                    max_passes=pc.max_passes,
                    enforce_lower_bound=pc.enforce_lower_bound,
                    record_swaps=pc.record_swaps,
                )
                break
            except BalanceViolationError as e:
                if attempt >= restarts:
                    raise
                attempt += 1
                log.warning("Attempt %d failed (%s); retrying with seed %d",
                            attempt, e, derive_seed(config.seed, attempt))
        log.info(
            "Cut edges: %d (initial %d), sizes=%s",
            result.cut_edges, result.initial_cut_edges, result.sizes,
        )

    # ── Stage 3: Results ───────────────────────────────────────────
    with stage_timer("Write Results"):
        output_dir = write_result(
            config,
            result,
            graph.num_vertices,
            graph.num_edges,
            metadata={
                "graph_source": str(graph_path) if graph_path else "generated",
                "attempts": attempt + 1,
                "partition_seed": seed,
            },
            results_dir=results_dir,
        )

    # ── Stage 4: Visualization ─────────────────────────────────────
    figure_files: list[Path] = []
    if figures:
        with stage_timer("Visualization"):
            figure_files = render_all(graph, result, output_dir)
            log.info("Generated %d figure files", len(figure_files))

    total_elapsed = time.monotonic() - pipeline_start
    print(f"\n{'=' * 60}")
    print(f"Partitioning complete in {total_elapsed:.1f}s")
    print(f"  Run:        {output_dir.name}")
    print(f"  Output:     {output_dir}")
    print(f"  Cut edges:  {result.cut_edges}")
    print(f"  Sizes:      {result.sizes}")
    print(f"  Passes:     {result.passes} ({'converged' if result.converged else 'pass limit'})")
    print(f"  Figures:    {len(figure_files)} files")
    print(f"{'=' * 60}")

    return output_dir


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Partition a graph with the Kernighan-Lin heuristic"
    )
    source = parser.add_mutually_exclusive_group()
    source.add_argument("--graph", type=str, help="Path to graph text file")
    source.add_argument(
        "--generate",
        action="store_true",
        help="Generate a random graph (generator section of config or defaults)",
    )
    parser.add_argument("--config", type=str, help="Path to run config JSON file")
    parser.add_argument("--parts", type=int, help="Number of subsets")
    parser.add_argument("--margin", type=float, help="Balance margin in percent")
    parser.add_argument("--max-passes", type=int, help="Pass limit")
    parser.add_argument("--seed", type=int, help="Seed for the initial assignment")
    parser.add_argument(
        "--enforce-lower-bound",
        action="store_true",
        help="Also require every subset to hold at least floor(n / k) vertices",
    )
    parser.add_argument(
        "--record-swaps",
        action="store_true",
        help="Record every tentative swap for playback figures",
    )
    parser.add_argument(
        "--restarts",
        type=int,
        default=0,
        help="Retries with derived seeds after a balance violation",
    )
    parser.add_argument(
        "--results-dir", type=str, default="results", help="Base output directory"
    )
    parser.add_argument("--cache-dir", type=str, help="Generated-graph cache directory")
    parser.add_argument("--no-figures", action="store_true", help="Skip figure rendering")
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Show the run plan without partitioning",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable DEBUG-level logging",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)

    # Configure logging
    log_level = logging.DEBUG if args.verbose else logging.INFO
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.config and not Path(args.config).exists():
        print(f"Error: config file not found: {args.config}", file=sys.stderr)
        sys.exit(1)
    graph_path = Path(args.graph) if args.graph else None
    if graph_path is not None and not graph_path.exists():
        print(f"Error: graph file not found: {graph_path}", file=sys.stderr)
        sys.exit(1)

    try:
        config = build_config(args)
    except ValueError as e:
        print(f"Error: invalid configuration: {e}", file=sys.stderr)
        sys.exit(1)

    if graph_path is None and config.generator is None:
        print("Error: provide --graph, --generate or a config with a "
              "generator section", file=sys.stderr)
        sys.exit(1)

    pc = config.partition
    print(f"Config hash: {full_config_hash(config)}")
    print(f"Partition:   k={pc.num_parts}, margin={pc.margin_percent}%, "
          f"max_passes={pc.max_passes}, lower_bound={pc.enforce_lower_bound}")
    if graph_path is not None:
        print(f"Graph:       {graph_path}")
    else:
        gen = config.generator
        print(f"Graph:       generated n={gen.n}, p={gen.edge_probability}")
    print(f"Seed:        {config.seed}")

    if args.dry_run:
        print("\nPipeline plan:")
        print("  1. Load or generate graph")
        print(f"  2. Partition into {pc.num_parts} subsets "
              f"(restarts={args.restarts})")
        print(f"  3. Write {args.results_dir}/<run_id>/result.json + partition.txt")
        print(f"  4. Figures: {'skipped' if args.no_figures else 'figures/ (PNG + SVG)'}")
        print("\n[dry-run] Config loaded successfully. Exiting.")
        return

    try:
        run_pipeline(
            config,
            graph_path=graph_path,
            results_dir=args.results_dir,
            restarts=args.restarts,
            figures=not args.no_figures,
            cache_dir=Path(args.cache_dir) if args.cache_dir else None,
        )
    except PartitionError as e:
        log.error("Partitioning failed: %s", e)
        sys.exit(1)
    except Exception:
        log.exception("Pipeline failed")
        sys.exit(1)


if __name__ == "__main__":
    main()
