"""Tests for the Gaussian elimination engine."""

import dataclasses

import numpy as np
import pytest

from solver import GaussianSolver, InvalidDimensions, solve_system
from solver import engine
from solver.constants import EPSILON


def _ops(solution):
    return [s.operation for s in solution.steps]


def _descriptions(solution):
    return [s.description for s in solution.steps]


# ── Classification scenarios ─────────────────────────────────────────────

class TestUnique:
    def test_two_by_two(self):
        result = GaussianSolver([[2, 1], [1, -1]], [3, 0]).solve()
        assert result.type == "unique"
        assert result.solution == [1.0, 1.0]
        assert result.is_homogeneous is False
        assert result.coefficient_rank == 2
        assert result.augmented_rank == 2
        assert result.pivot_vars is None
        assert result.free_vars is None

    def test_trace(self):
        result = GaussianSolver([[2, 1], [1, -1]], [3, 0]).solve()
        assert _ops(result) == [
            "normalization", "elimination", "normalization", "elimination",
        ]
        assert _descriptions(result) == [
            "Row 1 divided by 2",
            "Row 2 -= 1 × Row 1",
            "Row 2 divided by -1.5",
            "Row 1 -= 0.5 × Row 2",
        ]
        first = result.steps[0]
        assert first.matrix == ((1.0, 0.5), (1.0, -1.0))
        assert first.vector == (1.5, 0.0)
        last = result.steps[-1]
        assert last.matrix == ((1.0, 0.0), (0.0, 1.0))
        assert last.vector == (1.0, 1.0)

    def test_homogeneous_trivial_solution(self):
        result = GaussianSolver([[1, 2], [3, 4]], [0, 0]).solve()
        assert result.type == "unique"
        assert result.solution == [0.0, 0.0]
        assert result.is_homogeneous is True
        assert "trivial" in result.explanation

    def test_three_by_three_with_swap(self):
        result = GaussianSolver(
            [[0, 2, 1], [1, -2, -3], [-1, 1, 2]], [-8, 0, 3],
        ).solve()
        assert result.type == "unique"
        assert _ops(result)[0] == "partial pivot"
        assert result.steps[0].description == "Swap row 1 with row 2"
        np.testing.assert_allclose(result.solution, [-4.0, -5.0, 2.0], atol=1e-3)

    @pytest.mark.parametrize("n", [2, 3, 4, 5])
    def test_substitution_reproduces_rhs(self, n):
        rng = np.random.default_rng(seed=20250508 + n)
        matrix = rng.integers(-3, 4, size=(n, n)) + np.eye(n, dtype=int) * (4 * n)
        expected = rng.integers(-5, 6, size=n)
        rhs = matrix @ expected

        result = GaussianSolver(matrix.tolist(), rhs.tolist()).solve()

        assert result.type == "unique"
        assert len(result.solution) == n
        np.testing.assert_allclose(matrix @ np.array(result.solution), rhs, atol=1e-2)


class TestNoSolution:
    def test_parallel_rows(self):
        result = GaussianSolver([[1, 1], [2, 2]], [2, 5]).solve()
        assert result.type == "no-solution"
        assert result.solution is None
        assert result.coefficient_rank == 1
        assert result.augmented_rank == 2
        assert "INCONSISTENT" in result.explanation

    def test_parallel_rows_trace(self):
        result = GaussianSolver([[1, 1], [2, 2]], [2, 5]).solve()
        assert _ops(result) == ["partial pivot", "normalization", "elimination"]
        assert _descriptions(result) == [
            "Swap row 1 with row 2",
            "Row 1 divided by 2",
            "Row 2 -= 1 × Row 1",
        ]
        assert result.steps[-1].vector == (2.5, -0.5)

    def test_overdetermined_inconsistent(self):
        result = GaussianSolver([[1, 0], [0, 1], [1, 1]], [1, 2, 4]).solve()
        assert result.type == "no-solution"
        assert result.coefficient_rank == 2
        assert result.augmented_rank == 3

    def test_zero_row_with_constant(self):
        result = GaussianSolver([[0, 0]], [3]).solve()
        assert result.type == "no-solution"
        assert result.steps == []


class TestInfinite:
    def test_dependent_rows(self):
        result = GaussianSolver([[1, 1], [2, 2]], [2, 4]).solve()
        assert result.type == "infinite"
        assert result.pivot_vars == [0]
        assert result.free_vars == [1]
        assert result.solution == ["x1 = 2 + (-1)·t0", "x2 = t0"]
        assert "Free variables: x2" in result.explanation

    def test_all_zero_homogeneous(self):
        result = GaussianSolver([[0, 0], [0, 0]], [0, 0]).solve()
        assert result.type == "infinite"
        assert result.is_homogeneous is True
        assert result.pivot_vars == []
        assert result.free_vars == [0, 1]
        assert result.solution == ["x1 = t0", "x2 = t1"]
        assert result.steps == []

    def test_three_variables_one_free(self):
        result = GaussianSolver(
            [[1, 2, 3], [2, 4, 6], [1, 1, 1]], [6, 12, 3],
        ).solve()
        assert result.type == "infinite"
        assert result.pivot_vars == [0, 1]
        assert result.free_vars == [2]
        assert result.solution == [
            "x1 = 0 + (1)·t0",
            "x2 = 3 + (-2)·t0",
            "x3 = t0",
        ]
        assert _ops(result) == [
            "partial pivot", "normalization", "elimination", "elimination",
            "partial pivot", "normalization", "elimination",
        ]
        assert _descriptions(result)[4] == "Swap row 2 with row 3"
        assert _descriptions(result)[5] == "Row 2 divided by -1"

    def test_wide_system(self):
        result = GaussianSolver([[1, 2, -1]], [4]).solve()
        assert result.type == "infinite"
        assert result.solution == [
            "x1 = 4 + (-2)·t0 + (1)·t1",
            "x2 = t0",
            "x3 = t1",
        ]

    @pytest.mark.parametrize(
        "matrix,vector",
        [
            ([[1, 1], [2, 2]], [2, 4]),
            ([[0, 0], [0, 0]], [0, 0]),
            ([[1, 2, 3], [2, 4, 6], [1, 1, 1]], [6, 12, 3]),
            ([[1, 2, -1]], [4]),
            ([[0, 1, 0, 2], [0, 2, 0, 4]], [1, 2]),
        ],
    )
    def test_pivot_and_free_partition_columns(self, matrix, vector):
        result = GaussianSolver(matrix, vector).solve()
        n_vars = len(matrix[0])
        assert result.type == "infinite"
        assert len(result.pivot_vars) + len(result.free_vars) == n_vars
        assert set(result.pivot_vars).isdisjoint(result.free_vars)
        assert sorted(result.pivot_vars + result.free_vars) == list(range(n_vars))


class TestSingular:
    def test_rank_equals_variables_with_extra_rows(self):
        # Consistent, rank == variables, but rows > variables.
        result = GaussianSolver([[1, 0], [0, 1], [1, 1]], [1, 2, 3]).solve()
        assert result.type == "singular"
        assert result.coefficient_rank == 2
        assert result.augmented_rank == 2
        assert result.solution is None
        assert "SINGULAR" in result.explanation


# ── Construction ─────────────────────────────────────────────────────────

class TestConstruction:
    def test_row_count_mismatch(self):
        with pytest.raises(InvalidDimensions, match="2 rows but the vector has 3"):
            GaussianSolver([[1, 2], [3, 4]], [1, 2, 3])

    def test_ragged_rows(self):
        with pytest.raises(InvalidDimensions, match="Row 2 has 1 coefficients"):
            GaussianSolver([[1, 2], [3]], [1, 2])

    def test_invalid_dimensions_is_value_error(self):
        with pytest.raises(ValueError):
            GaussianSolver([[1]], [])

    def test_augmented_has_one_extra_column(self):
        augmented = engine.build_augmented([[1, 2, 3], [4, 5, 6]], [7, 8])
        assert augmented.shape == (2, 4)
        assert augmented[:, -1].tolist() == [7.0, 8.0]

    def test_inputs_are_not_mutated(self):
        matrix = [[2, 1], [1, -1]]
        vector = [3, 0]
        GaussianSolver(matrix, vector).solve()
        assert matrix == [[2, 1], [1, -1]]
        assert vector == [3, 0]

    def test_numpy_inputs_are_not_mutated(self):
        matrix = np.array([[1.0, 1.0], [2.0, 2.0]])
        vector = np.array([2.0, 5.0])
        GaussianSolver(matrix, vector).solve()
        assert matrix.tolist() == [[1.0, 1.0], [2.0, 2.0]]
        assert vector.tolist() == [2.0, 5.0]

    @pytest.mark.parametrize(
        "vector,expected",
        [
            ([0, 0], True),
            ([EPSILON / 2, -EPSILON / 2], True),
            ([0, 1e-9], False),
            ([3, 0], False),
        ],
    )
    def test_is_homogeneous_uses_tolerance(self, vector, expected):
        solver = GaussianSolver([[1, 0], [0, 1]], vector)
        assert solver.is_homogeneous is expected
        assert solver.solve().is_homogeneous is expected


# ── Trace and result objects ─────────────────────────────────────────────

def test_solve_is_memoized():
    solver = GaussianSolver([[2, 1], [1, -1]], [3, 0])
    assert solver.solve() is solver.solve()


@pytest.mark.filterwarnings("ignore::RuntimeWarning")
def test_overflowing_pivot_still_gives_a_solution():
    # 1e305 / 1e-5 overflows float64 during normalization.
    result = GaussianSolver([[1e-5, 1e305], [0, 1]], [0, 0]).solve()
    assert result.type in {"unique", "infinite", "no-solution", "singular"}
    assert result.steps[0].description == "Row 1 divided by 0"
    assert result.steps[0].matrix[0][1] == float("inf")
    assert result.steps[-1].description == "Row 1 -= inf × Row 2"


@pytest.mark.filterwarnings("ignore::RuntimeWarning")
def test_solve_system_with_overflow_returns_result():
    result = solve_system([[1e-5, 1e305], [0, 1]], [0, 0])
    assert result["result"]["type"] == "unique"
    assert "inf" in result["steps"][0]["expression"]


def test_fresh_instances_give_identical_results():
    a = GaussianSolver([[1, 2, 3], [2, 4, 6], [1, 1, 1]], [6, 12, 3]).solve()
    b = GaussianSolver([[1, 2, 3], [2, 4, 6], [1, 1, 1]], [6, 12, 3]).solve()
    assert a.to_dict() == b.to_dict()


def test_steps_are_immutable():
    step = GaussianSolver([[2, 1], [1, -1]], [3, 0]).solve().steps[0]
    with pytest.raises(dataclasses.FrozenInstanceError):
        step.description = "changed"


def test_last_step_matches_classified_matrix():
    solver = GaussianSolver([[1, 2, 3], [2, 4, 6], [1, 1, 1]], [6, 12, 3])
    result = solver.solve()
    reduced = solver._state.augmented
    assert [list(r) for r in result.steps[-1].matrix] == reduced[:, :-1].tolist()
    assert list(result.steps[-1].vector) == reduced[:, -1].tolist()


def test_solution_to_dict():
    data = GaussianSolver([[1, 1], [2, 2]], [2, 4]).solve().to_dict()
    assert data["type"] == "infinite"
    assert data["pivot_vars"] == [0]
    assert data["free_vars"] == [1]
    assert data["steps"][0] == {
        "operation": "partial pivot",
        "description": "Swap row 1 with row 2",
        "matrix": [[2.0, 2.0], [1.0, 1.0]],
        "vector": [4.0, 2.0],
    }


def test_empty_system_is_unique():
    result = GaussianSolver([], []).solve()
    assert result.type == "unique"
    assert result.solution == []


# ── solve_system result dict ─────────────────────────────────────────────

def test_solve_system_required_fields():
    result = solve_system([[2, 1], [1, -1]], [3, 0])

    required_fields = {
        "given",
        "method",
        "steps",
        "final_answer",
        "verification_steps",
        "result",
        "summary",
    }
    assert required_fields.issubset(set(result.keys()))
    assert result["final_answer"] == "x1 = 1\nx2 = 1"
    assert [s["step_number"] for s in result["steps"]] == [1, 2, 3, 4]
    assert result["steps"][0]["description"] == "Normalization"
    assert result["steps"][0]["explanation"] == "Row 1 divided by 2"

    summary = result["summary"]
    assert isinstance(summary["runtime_ms"], (int, float)) and summary["runtime_ms"] >= 0
    assert summary["total_steps"] == 4
    assert summary["validation_status"] == "pass"
    assert "NumPy" in summary["library"]


def test_solve_system_non_unique_skips_verification():
    result = solve_system([[1, 1], [2, 2]], [2, 4])
    assert result["verification_steps"] == []
    assert result["summary"]["validation_status"] == "n/a"
    assert result["final_answer"] == "x1 = 2 + (-1)·t0\nx2 = t0"


def test_solve_system_propagates_invalid_dimensions():
    with pytest.raises(InvalidDimensions):
        solve_system([[1, 2], [3, 4]], [1, 2, 3])
