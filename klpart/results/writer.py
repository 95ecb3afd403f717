"""Plain-text partition result format.

Layout:
1. number of subsets
2. cut-edge count
3+. one line per subset: member count followed by member ids, space separated
"""

import logging
from dataclasses import dataclass
from pathlib import Path

from klpart.errors import GraphFormatError
from klpart.partition.orchestrator import PartitionResult

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class PartitionText:
    """Contents of a parsed result file."""

    num_parts: int
    cut_edges: int
    parts: list[list[int]]


def format_result(result: PartitionResult) -> str:
    lines = [str(len(result.parts)), str(result.cut_edges)]
    for members in result.parts:
        lines.append(" ".join([str(len(members))] + [str(v) for v in members]))
    return "\n".join(lines) + "\n"


def write_partition(path: str | Path, result: PartitionResult) -> Path:
    """Write a PartitionResult in the text format, creating parent dirs."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(format_result(result))
    log.info("Partition written to %s", path)
    return path


def parse_partition(text: str) -> PartitionText:
    """Parse result text back into subsets.

    Raises:
        GraphFormatError: On missing lines, bad integers or a member count
            that disagrees with the ids listed on its line.
    """
    lines = [ln for ln in text.splitlines() if ln.strip()]
    if len(lines) < 2:
        raise GraphFormatError(f"expected at least 2 lines, got {len(lines)}")
    try:
        num_parts = int(lines[0])
        cut_edges = int(lines[1])
    except ValueError as e:
        raise GraphFormatError(f"invalid header: {e}") from e

    if len(lines) - 2 != num_parts:
        raise GraphFormatError(
            f"header declares {num_parts} subsets but {len(lines) - 2} follow"
        )

    parts: list[list[int]] = []
    for line_no, line in enumerate(lines[2:], start=3):
        try:
            values = [int(tok) for tok in line.split()]
        except ValueError as e:
            raise GraphFormatError(str(e), line=line_no) from e
        size, members = values[0], values[1:]
        if size != len(members):
            raise GraphFormatError(
                f"size {size} != {len(members)} listed members", line=line_no
            )
        parts.append(members)

    return PartitionText(num_parts=num_parts, cut_edges=cut_edges, parts=parts)


def read_partition(path: str | Path) -> PartitionText:
    return parse_partition(Path(path).read_text())
