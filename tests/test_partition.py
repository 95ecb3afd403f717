"""Tests for the k-way partition driver: end-to-end cases, balance and errors."""

import numpy as np
import pytest

from klpart.config.experiment import GeneratorConfig
from klpart.errors import BalanceViolationError, ParameterError
from klpart.graph.generator import generate_random_graph
from klpart.graph.types import graph_from_edges, load_graph
from klpart.partition import (
    PartitionStage,
    balance_bounds,
    check_balance,
    count_cut_edges,
    partition,
)
from klpart.visualization.swaps import replay_committed

TRIANGLE = [(0, 1), (0, 2), (1, 2)]
TWO_TRIANGLES = [(0, 1), (0, 2), (1, 2), (3, 4), (3, 5), (4, 5), (2, 3)]


def _fixed_initial(values):
    """Replacement for initial_assignment returning a fixed array."""

    def _initial(num_vertices, num_parts, rng):
        return np.array(values, dtype=np.int64)

    return _initial


@pytest.fixture
def two_triangles():
    return graph_from_edges(6, TWO_TRIANGLES)


@pytest.fixture
def random_graph():
    return generate_random_graph(GeneratorConfig(n=50, edge_probability=0.12), seed=3)


class TestEndToEnd:
    """Small graphs with known optimal cuts."""

    @pytest.mark.parametrize("seed", range(6))
    def test_triangle_into_two(self, seed) -> None:
        """A 2 + 1 split of a triangle always cuts two of its three edges."""
        graph = graph_from_edges(3, TRIANGLE)
        result = partition(graph, 2, 50.0, seed=seed)
        assert sorted(result.sizes) == [1, 2]
        assert result.cut_edges == 2
        assert result.stage == PartitionStage.DONE

    @pytest.mark.parametrize("seed", range(10))
    def test_two_triangles_recovered(self, seed) -> None:
        graph = graph_from_edges(6, TWO_TRIANGLES)
        result = partition(graph, 2, 0.0, seed=seed)
        assert result.cut_edges == 1
        assert sorted(result.parts) == [[0, 1, 2], [3, 4, 5]]
        assert result.converged

    @pytest.mark.parametrize("edges,n", [(TWO_TRIANGLES, 6), (TRIANGLE, 3)])
    def test_one_vertex_per_subset(self, edges, n) -> None:
        graph = graph_from_edges(n, edges)
        result = partition(graph, n, 0.0, seed=0)
        assert result.cut_edges == len(edges)
        assert result.sizes == [1] * n

    def test_single_subset_rejected(self, two_triangles, monkeypatch) -> None:
        def _fail(*args, **kwargs):
            raise AssertionError("initial assignment must not be drawn")

        monkeypatch.setattr("klpart.partition.orchestrator.initial_assignment", _fail)
        with pytest.raises(ParameterError):
            partition(two_triangles, 1, 10.0, seed=0)

    def test_edgeless_graph(self) -> None:
        graph = load_graph(4, [], [0, 0, 0, 0, 0])
        result = partition(graph, 2, 0.0, seed=1)
        assert result.cut_edges == 0
        assert result.sizes == [2, 2]
        assert result.passes == 1
        assert result.converged


class TestParameters:
    @pytest.mark.parametrize(
        "num_parts,margin,max_passes,match",
        [
            (1, 10.0, 10, "num_parts"),
            (0, 10.0, 10, "num_parts"),
            (7, 10.0, 10, "must not exceed"),
            (2, -1.0, 10, "margin_percent"),
            (2, 10.0, 0, "max_passes"),
        ],
    )
    def test_rejected(self, two_triangles, num_parts, margin, max_passes, match) -> None:
        with pytest.raises(ParameterError, match=match):
            partition(two_triangles, num_parts, margin, seed=0, max_passes=max_passes)

    def test_parameter_error_is_value_error(self, two_triangles) -> None:
        with pytest.raises(ValueError):
            partition(two_triangles, 1, seed=0)


class TestBalance:
    def test_bounds(self) -> None:
        bounds = balance_bounds(10, 3, 10.0)
        assert bounds.max_allowed == 4  # ceil(3.333 * 1.1) = ceil(3.667)
        assert bounds.min_allowed is None

    def test_bounds_integral_margin_exact(self) -> None:
        """20 vertices in two subsets with a 10% margin allow exactly 11."""
        assert balance_bounds(20, 2, 10.0).max_allowed == 11

    def test_bounds_zero_margin(self) -> None:
        assert balance_bounds(7, 2, 0.0).max_allowed == 4

    def test_lower_bound(self) -> None:
        bounds = balance_bounds(10, 3, 10.0, enforce_lower_bound=True)
        assert bounds.min_allowed == 3

    def test_check_balance_reports_sizes(self) -> None:
        bounds = balance_bounds(6, 2, 0.0)
        with pytest.raises(BalanceViolationError) as excinfo:
            check_balance([5, 1], bounds)
        assert excinfo.value.sizes == [5, 1]
        assert excinfo.value.max_allowed == 3
        assert "subset 0 has 5 > 3" in str(excinfo.value)

    def test_violation_raised(self, two_triangles, monkeypatch) -> None:
        monkeypatch.setattr(
            "klpart.partition.orchestrator.initial_assignment",
            _fixed_initial([0, 0, 0, 0, 0, 1]),
        )
        with pytest.raises(BalanceViolationError) as excinfo:
            partition(two_triangles, 2, 0.0, seed=0)
        assert excinfo.value.sizes == [5, 1]
        assert excinfo.value.max_allowed == 3

    def test_wide_margin_accepts_uneven_sizes(self, two_triangles, monkeypatch) -> None:
        monkeypatch.setattr(
            "klpart.partition.orchestrator.initial_assignment",
            _fixed_initial([0, 0, 0, 0, 1, 1]),
        )
        result = partition(two_triangles, 2, 50.0, seed=0)
        assert result.sizes == [4, 2]

    def test_lower_bound_enforced_only_when_enabled(
        self, two_triangles, monkeypatch
    ) -> None:
        monkeypatch.setattr(
            "klpart.partition.orchestrator.initial_assignment",
            _fixed_initial([0, 0, 0, 0, 1, 2]),
        )
        result = partition(two_triangles, 3, 100.0, seed=0)
        assert result.sizes == [4, 1, 1]

        with pytest.raises(BalanceViolationError) as excinfo:
            partition(two_triangles, 3, 100.0, seed=0, enforce_lower_bound=True)
        assert excinfo.value.min_allowed == 2

    def test_random_start_always_balanced(self, random_graph) -> None:
        for seed in range(5):
            result = partition(random_graph, 4, 0.0, seed=seed)
            assert max(result.sizes) - min(result.sizes) <= 1


class TestPasses:
    def test_pass_limit(self, two_triangles, monkeypatch) -> None:
        monkeypatch.setattr(
            "klpart.partition.orchestrator.initial_assignment",
            _fixed_initial([0, 0, 1, 0, 1, 1]),
        )
        result = partition(two_triangles, 2, 0.0, max_passes=1)
        assert result.passes == 1
        assert not result.converged
        assert result.pass_cuts == [1]
        assert result.initial_cut_edges == 5

    def test_stops_after_non_improving_pass(self, two_triangles, monkeypatch) -> None:
        monkeypatch.setattr(
            "klpart.partition.orchestrator.initial_assignment",
            _fixed_initial([0, 0, 1, 0, 1, 1]),
        )
        result = partition(two_triangles, 2, 0.0)
        assert result.passes == 2
        assert result.converged
        assert result.pass_cuts == [1, 1]

    @pytest.mark.parametrize("k", [2, 3, 5])
    def test_cut_never_increases(self, random_graph, k) -> None:
        result = partition(random_graph, k, 10.0, seed=11)
        cuts = [result.initial_cut_edges] + result.pass_cuts
        assert all(b <= a for a, b in zip(cuts, cuts[1:]))
        assert result.cut_edges == cuts[-1]
        assert result.cut_edges == count_cut_edges(random_graph, result.assignment)


class TestResultShape:
    def test_every_vertex_in_one_subset(self, random_graph) -> None:
        result = partition(random_graph, 4, 10.0, seed=2)
        members = sorted(v for part in result.parts for v in part)
        assert members == list(range(random_graph.num_vertices))
        for p, part in enumerate(result.parts):
            assert part == sorted(part)
            assert all(result.assignment[v] == p for v in part)

    def test_initial_assignment_preserved(self, random_graph) -> None:
        result = partition(random_graph, 3, 10.0, seed=2)
        assert count_cut_edges(random_graph, result.initial_assignment) == (
            result.initial_cut_edges
        )
        np.testing.assert_array_equal(
            np.bincount(result.initial_assignment, minlength=3),
            np.bincount(result.assignment, minlength=3),
        )

    def test_refinements_only_when_recorded(self, random_graph) -> None:
        assert partition(random_graph, 3, 10.0, seed=2).refinements == []
        recorded = partition(random_graph, 3, 10.0, seed=2, record_swaps=True)
        # Three pairs per pass.
        assert len(recorded.refinements) == 3 * recorded.passes

    def test_replay_reproduces_final_assignment(self, random_graph) -> None:
        result = partition(random_graph, 3, 10.0, seed=4, record_swaps=True)
        final = result.initial_assignment
        last_cut = result.initial_cut_edges
        for cut, state in replay_committed(result.initial_assignment, result.refinements):
            final, last_cut = state, cut
        np.testing.assert_array_equal(final, result.assignment)
        assert last_cut == result.cut_edges


class TestDeterminism:
    def test_same_seed_same_result(self, random_graph) -> None:
        a = partition(random_graph, 3, 10.0, seed=99)
        b = partition(random_graph, 3, 10.0, seed=99)
        np.testing.assert_array_equal(a.assignment, b.assignment)
        assert a.cut_edges == b.cut_edges
        assert a.pass_cuts == b.pass_cuts

    def test_rng_takes_precedence_over_seed(self, random_graph) -> None:
        a = partition(random_graph, 3, 10.0, rng=np.random.default_rng(5), seed=1)
        b = partition(random_graph, 3, 10.0, seed=5)
        np.testing.assert_array_equal(a.initial_assignment, b.initial_assignment)

    def test_different_seeds_differ_initially(self, random_graph) -> None:
        a = partition(random_graph, 3, 10.0, seed=1)
        b = partition(random_graph, 3, 10.0, seed=2)
        assert not np.array_equal(a.initial_assignment, b.initial_assignment)
