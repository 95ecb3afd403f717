"""Reader and writer for the semicolon-separated CSR graph text format.

Layout (one field per line):
1. vertex count
2. concatenated neighbor lists, separated by ';'
3. per-vertex offsets into line 2, separated by ';' (vertex count + 1 values)
4. optional vertex group ids, separated by ';'
5. optional group offsets, separated by ';'

Lines 4-5 are preserved on the returned GraphFile but not used by the
partitioner.
"""

import logging
from dataclasses import dataclass
from pathlib import Path

import numpy as np

from klpart.errors import GraphFormatError, StructuralError
from klpart.graph.types import Graph, load_graph
from klpart.graph.validation import validate_graph

log = logging.getLogger(__name__)

SEPARATOR = ";"


@dataclass(frozen=True)
class GraphFile:
    """A parsed graph file: the graph plus optional group lines."""

    graph: Graph
    groups: np.ndarray | None = None
    group_offsets: np.ndarray | None = None


def _parse_ints(text: str, line_no: int) -> list[int]:
    text = text.strip()
    if not text:
        return []
    try:
        return [int(tok.strip()) for tok in text.split(SEPARATOR) if tok.strip()]
    except ValueError as e:
        raise GraphFormatError(f"invalid integer list: {e}", line=line_no) from e


def parse_graph(text: str, check_symmetry: bool = True) -> GraphFile:
    """Parse graph text into a GraphFile.

    Args:
        text: Full file contents.
        check_symmetry: Reject graphs whose adjacency is not symmetric or
            that contain self-loops.

    Returns:
        GraphFile with the validated graph.

    Raises:
        GraphFormatError: On missing lines, bad integers, structural
            violations or (with check_symmetry) asymmetric adjacency.
    """
    # Line 2 is legitimately empty for an edgeless graph; only trailing
    # blank lines are dropped.
    lines = text.splitlines()
    while lines and not lines[-1].strip():
        lines.pop()
    if len(lines) < 3:
        raise GraphFormatError(f"expected at least 3 lines, got {len(lines)}")

    try:
        vertex_count = int(lines[0].strip())
    except ValueError as e:
        raise GraphFormatError(f"invalid vertex count: {lines[0]!r}", line=1) from e

    neighbors = _parse_ints(lines[1], 2)
    offsets = _parse_ints(lines[2], 3)

    try:
        graph = load_graph(vertex_count, neighbors, offsets)
    except StructuralError as e:
        raise GraphFormatError(str(e)) from e

    if check_symmetry:
        errors = validate_graph(graph)
        if errors:
            raise GraphFormatError("; ".join(errors))

    groups = group_offsets = None
    if len(lines) >= 5:
        groups = np.asarray(_parse_ints(lines[3], 4), dtype=np.int64)
        group_offsets = np.asarray(_parse_ints(lines[4], 5), dtype=np.int64)
    elif len(lines) == 4:
        log.warning("Ignoring vertex group line without group offsets line")

    return GraphFile(graph=graph, groups=groups, group_offsets=group_offsets)


def read_graph(path: str | Path, check_symmetry: bool = True) -> GraphFile:
    """Read a graph text file from disk."""
    path = Path(path)
    graph_file = parse_graph(path.read_text(), check_symmetry=check_symmetry)
    log.info(
        "Graph loaded from %s: n=%d, edges=%d",
        path,
        graph_file.graph.num_vertices,
        graph_file.graph.num_edges,
    )
    return graph_file


def format_graph(graph: Graph) -> str:
    """Render a Graph in the text format (3 lines, trailing newline)."""
    return "\n".join(
        [
            str(graph.num_vertices),
            SEPARATOR.join(str(int(v)) for v in graph.neighbors),
            SEPARATOR.join(str(int(o)) for o in graph.offsets),
        ]
    ) + "\n"


def write_graph(path: str | Path, graph: Graph) -> Path:
    """Write a Graph to disk in the text format, creating parent dirs."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(format_graph(graph))
    log.info("Graph written to %s", path)
    return path
