"""Tests for the semicolon-separated CSR graph text format."""

import pytest

from klpart.errors import GraphFormatError, StructuralError
from klpart.graph.io import format_graph, parse_graph, read_graph, write_graph
from klpart.graph.types import graph_from_edges, load_graph

TRIANGLE_TEXT = "3\n1;2;0;2;0;1\n0;2;4;6\n"


class TestParseGraph:
    """parse_graph accepts valid text and rejects malformed input."""

    def test_parse_triangle(self) -> None:
        graph_file = parse_graph(TRIANGLE_TEXT)
        graph = graph_file.graph
        assert graph.num_vertices == 3
        assert graph.neighbors.tolist() == [1, 2, 0, 2, 0, 1]
        assert graph.offsets.tolist() == [0, 2, 4, 6]
        assert graph_file.groups is None
        assert graph_file.group_offsets is None

    def test_whitespace_around_tokens(self) -> None:
        graph = parse_graph(" 3 \n 1 ; 2;0 ;2;0;1\n0; 2;4;6 \n\n").graph
        assert graph.num_edges == 3

    def test_group_lines_preserved(self) -> None:
        text = TRIANGLE_TEXT + "0;1;2\n0;1;3\n"
        graph_file = parse_graph(text)
        assert graph_file.groups.tolist() == [0, 1, 2]
        assert graph_file.group_offsets.tolist() == [0, 1, 3]

    def test_edgeless_graph(self) -> None:
        graph = parse_graph("2\n\n0;0;0\n").graph
        assert graph.num_vertices == 2
        assert graph.num_edges == 0

    def test_too_few_lines(self) -> None:
        with pytest.raises(GraphFormatError, match="at least 3 lines"):
            parse_graph("3\n1;2\n")

    def test_bad_vertex_count(self) -> None:
        with pytest.raises(GraphFormatError, match="line 1"):
            parse_graph("three\n1;2;0;2;0;1\n0;2;4;6\n")

    def test_bad_neighbor_token(self) -> None:
        with pytest.raises(GraphFormatError, match="line 2") as exc_info:
            parse_graph("3\n1;x;0;2;0;1\n0;2;4;6\n")
        assert exc_info.value.line == 2

    def test_offsets_length_mismatch(self) -> None:
        with pytest.raises(GraphFormatError, match="offsets length"):
            parse_graph("3\n1;2;0;2;0;1\n0;2;6\n")

    def test_format_error_is_structural_error(self) -> None:
        with pytest.raises(StructuralError):
            parse_graph("3\n1;2;0;2;0;1\n0;2;6\n")

    def test_duplicate_edge_rejected(self) -> None:
        with pytest.raises(GraphFormatError, match="duplicate neighbor entry"):
            parse_graph("2\n1;1;0;0\n0;2;4\n")

    def test_asymmetric_rejected(self) -> None:
        with pytest.raises(GraphFormatError, match="symmetric"):
            parse_graph("2\n1\n0;1;1\n")

    def test_asymmetric_allowed_without_check(self) -> None:
        graph = parse_graph("2\n1\n0;1;1\n", check_symmetry=False).graph
        assert graph.neighbors.tolist() == [1]


class TestWriteGraph:
    """format_graph / write_graph produce the same text the reader expects."""

    def test_format_triangle(self) -> None:
        graph = load_graph(3, [1, 2, 0, 2, 0, 1], [0, 2, 4, 6])
        assert format_graph(graph) == TRIANGLE_TEXT

    def test_write_then_read(self, tmp_path) -> None:
        graph = graph_from_edges(5, [(0, 1), (1, 2), (2, 3), (3, 4), (4, 0)])
        path = write_graph(tmp_path / "sub" / "ring.txt", graph)
        assert path.exists()
        loaded = read_graph(path).graph
        assert loaded.num_vertices == 5
        assert loaded.neighbors.tolist() == graph.neighbors.tolist()
        assert loaded.offsets.tolist() == graph.offsets.tolist()
