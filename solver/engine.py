"""Step-by-step linear system solver using Gaussian elimination.

Takes a coefficient matrix and a constant vector, reduces the augmented
matrix with partial pivoting, classifies the system by rank and returns
the solution together with a human-readable trace of every row
operation (swap, normalization, elimination).
"""

import logging
import time
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

import numpy as np

from solver import formatting
from solver.constants import EPSILON, PRECISION, is_zero, round_value
from solver.errors import InvalidDimensions
from solver.verification import build_verification_steps, solution_holds

logger = logging.getLogger(__name__)

# Step labels
OP_PIVOT = "partial pivot"
OP_NORMALIZE = "normalization"
OP_ELIMINATE = "elimination"

# Solution kinds
UNIQUE = "unique"
INFINITE = "infinite"
NO_SOLUTION = "no-solution"
SINGULAR = "singular"


@dataclass(frozen=True)
class Step:
    """Snapshot of the augmented matrix right after one row operation."""

    operation: str
    description: str
    matrix: tuple
    vector: tuple

    def to_dict(self) -> dict:
        return {
            "operation": self.operation,
            "description": self.description,
            "matrix": [list(row) for row in self.matrix],
            "vector": list(self.vector),
        }


@dataclass
class Solution:
    """Classified result of one solve.

    ``solution`` holds numbers for ``unique`` and parametric equations for
    ``infinite``; it is ``None`` for ``no-solution`` and ``singular``.
    ``pivot_vars`` / ``free_vars`` are only set for ``infinite``.
    """

    type: str
    steps: list
    explanation: str
    solution: Optional[list] = None
    pivot_vars: Optional[list] = None
    free_vars: Optional[list] = None
    is_homogeneous: bool = False
    coefficient_rank: int = 0
    augmented_rank: int = 0

    def to_dict(self) -> dict:
        return {
            "type": self.type,
            "solution": None if self.solution is None else list(self.solution),
            "pivot_vars": self.pivot_vars,
            "free_vars": self.free_vars,
            "is_homogeneous": self.is_homogeneous,
            "coefficient_rank": self.coefficient_rank,
            "augmented_rank": self.augmented_rank,
            "explanation": self.explanation,
            "steps": [s.to_dict() for s in self.steps],
        }


# ── Elimination state ───────────────────────────────────────────────────

@dataclass
class EliminationState:
    """The augmented matrix being reduced and the trace recorded so far."""

    augmented: np.ndarray
    steps: list = field(default_factory=list)

    @property
    def n_rows(self) -> int:
        return self.augmented.shape[0]

    @property
    def n_vars(self) -> int:
        return self.augmented.shape[1] - 1

    def record(self, operation: str, description: str) -> None:
        matrix = tuple(
            tuple(round_value(v) for v in row[:-1]) for row in self.augmented
        )
        vector = tuple(round_value(row[-1]) for row in self.augmented)
        self.steps.append(Step(operation, description, matrix, vector))
        logger.debug("%s: %s", operation, description)


def build_augmented(matrix, vector) -> np.ndarray:
    """Append *vector* to *matrix* as an extra column (copies both)."""
    n_rows = len(matrix)
    if n_rows != len(vector):
        raise InvalidDimensions(
            f"The matrix has {n_rows} rows but the vector has "
            f"{len(vector)} entries."
        )
    n_cols = len(matrix[0]) if n_rows else 0
    augmented = np.zeros((n_rows, n_cols + 1), dtype=np.float64)
    for i, (row, const) in enumerate(zip(matrix, vector)):
        if len(row) != n_cols:
            raise InvalidDimensions(
                f"Row {i + 1} has {len(row)} coefficients; expected {n_cols}."
            )
        augmented[i, :n_cols] = [float(v) for v in row]
        augmented[i, n_cols] = float(const)
    return augmented


def forward_eliminate(state: EliminationState) -> None:
    """Reduce the augmented matrix in place, one pivot column at a time."""
    a = state.augmented
    n_rows, n_vars = state.n_rows, state.n_vars
    pivot_row = 0

    for col in range(n_vars):
        if pivot_row >= n_rows:
            break

        # Partial pivoting: largest magnitude at or below the pivot row
        max_row = pivot_row + int(np.argmax(np.abs(a[pivot_row:, col])))
        if is_zero(a[max_row, col]):
            continue

        if max_row != pivot_row:
            a[[pivot_row, max_row]] = a[[max_row, pivot_row]]
            state.record(
                OP_PIVOT,
                f"Swap row {pivot_row + 1} with row {max_row + 1}",
            )

        pivot = a[pivot_row, col]
        a[pivot_row, col:] = np.round(a[pivot_row, col:] / pivot, PRECISION)
        state.record(
            OP_NORMALIZE,
            f"Row {pivot_row + 1} divided by {formatting.fmt_num(round_value(pivot))}",
        )

        for i in range(n_rows):
            if i == pivot_row or is_zero(a[i, col]):
                continue
            factor = a[i, col]
            a[i, col:] = np.round(a[i, col:] - factor * a[pivot_row, col:], PRECISION)
            state.record(
                OP_ELIMINATE,
                f"Row {i + 1} -= {formatting.fmt_num(round_value(factor))}"
                f" × Row {pivot_row + 1}",
            )

        pivot_row += 1


def count_nonzero_rows(block: np.ndarray) -> int:
    """Rank of a reduced block: rows with at least one non-negligible entry."""
    if block.size == 0:
        return 0
    return int(np.count_nonzero(np.any(np.abs(block) >= EPSILON, axis=1)))


def back_substitute(state: EliminationState) -> list[float]:
    """Read the variable values off the reduced matrix, last row first."""
    a = state.augmented
    n_vars = state.n_vars
    values = [0.0] * n_vars

    for i in range(state.n_rows - 1, -1, -1):
        nonzero = np.flatnonzero(np.abs(a[i]) >= EPSILON)
        if nonzero.size == 0 or nonzero[0] >= n_vars:
            continue
        p = int(nonzero[0])
        total = sum(a[i, j] * values[j] for j in range(p + 1, n_vars))
        values[p] = round_value(a[i, n_vars] - total)

    return [round_value(v) for v in values]


def split_pivot_columns(state: EliminationState) -> tuple[list[int], list[int]]:
    """Partition the variable columns into pivot and free columns."""
    a = state.augmented
    pivot_cols, free_cols = [], []
    row = 0
    for col in range(state.n_vars):
        if row < state.n_rows and not is_zero(a[row, col]):
            pivot_cols.append(col)
            row += 1
        else:
            free_cols.append(col)
    return pivot_cols, free_cols


# ── Solver ──────────────────────────────────────────────────────────────

class GaussianSolver:
    """Solve ``A·x = b`` once, keeping the full elimination trace.

    The inputs are copied into an owned augmented matrix at construction;
    they are never mutated.  ``solve()`` is computed on the first call and
    the same ``Solution`` is returned afterwards.
    """

    def __init__(self, matrix, vector) -> None:
        self._state = EliminationState(build_augmented(matrix, vector))
        self.is_homogeneous = all(is_zero(float(v)) for v in vector)
        self._solution: Optional[Solution] = None

    @property
    def n_equations(self) -> int:
        return self._state.n_rows

    @property
    def n_variables(self) -> int:
        return self._state.n_vars

    def solve(self) -> Solution:
        if self._solution is None:
            self._solution = self._solve()
        return self._solution

    def _solve(self) -> Solution:
        state = self._state
        forward_eliminate(state)

        n_rows, n_vars = state.n_rows, state.n_vars
        coefficient_rank = count_nonzero_rows(state.augmented[:, :n_vars])
        augmented_rank = count_nonzero_rows(state.augmented)

        if coefficient_rank < augmented_rank:
            kind = NO_SOLUTION
        elif coefficient_rank == n_vars == n_rows:
            kind = UNIQUE
        elif coefficient_rank < n_vars:
            kind = INFINITE
        else:
            kind = SINGULAR
        logger.info(
            "Classified %dx%d system as %s (rank %d, augmented rank %d)",
            n_rows, n_vars, kind, coefficient_rank, augmented_rank,
        )

        result = Solution(
            type=kind,
            steps=state.steps,
            explanation="",
            is_homogeneous=self.is_homogeneous,
            coefficient_rank=coefficient_rank,
            augmented_rank=augmented_rank,
        )

        if kind == UNIQUE:
            result.solution = back_substitute(state)
        elif kind == INFINITE:
            pivot_cols, free_cols = split_pivot_columns(state)
            result.solution = formatting.parametric_solution(
                state.augmented.tolist(), pivot_cols, free_cols,
            )
            result.pivot_vars = pivot_cols
            result.free_vars = free_cols

        result.explanation = formatting.build_explanation(
            n_rows, n_vars, coefficient_rank, augmented_rank,
            self.is_homogeneous, kind, result.free_vars or (),
        )
        return result


# ── Public entry point ──────────────────────────────────────────────────

def solve_system(matrix, vector) -> dict:
    """Solve ``A·x = b`` and return the full result dict.

    Raises ``InvalidDimensions`` when *matrix* and *vector* do not fit.
    """
    t_start = time.perf_counter()

    solver = GaussianSolver(matrix, vector)
    solution = solver.solve()
    n_eq, n_var = solver.n_equations, solver.n_variables

    steps = []
    for i, step in enumerate(solution.steps, 1):
        steps.append({
            "step_number": i,
            "description": step.operation.capitalize(),
            "expression": formatting.format_augmented(step.matrix, step.vector),
            "explanation": step.description,
        })

    verification_steps = []
    validation_status = "n/a"
    if solution.type == UNIQUE:
        verification_steps = build_verification_steps(
            matrix, vector, solution.solution)
        for i, s in enumerate(verification_steps, 1):
            s["step_number"] = i
        ok = solution_holds(matrix, vector, solution.solution)
        validation_status = "pass" if ok else "fail"

    runtime_ms = round((time.perf_counter() - t_start) * 1000, 2)

    return {
        "given": {
            "problem": "Solve the system of linear equations",
            "inputs": {
                "augmented_matrix": formatting.format_augmented(matrix, vector),
                "number_of_equations": str(n_eq),
                "number_of_variables": str(n_var),
            },
        },
        "method": {
            "name": "Gaussian Elimination (Partial Pivoting)",
            "description": (
                "Reduce the augmented matrix [A | b] row by row, then "
                "classify the system by comparing ranks."
            ),
            "parameters": {
                "precision": f"{PRECISION} decimal places",
                "zero_tolerance": f"{EPSILON:g}",
                "approach": "Pivot → Normalize → Eliminate → Classify by rank",
            },
        },
        "steps": steps,
        "final_answer": formatting.final_answer(solution),
        "verification_steps": verification_steps,
        "result": solution.to_dict(),
        "summary": {
            "runtime_ms": runtime_ms,
            "total_steps": len(steps),
            "verification_steps": len(verification_steps),
            "validation_status": validation_status,
            "timestamp": datetime.now().strftime("%Y-%m-%d %H:%M:%S"),
            "library": f"NumPy {np.__version__}",
        },
    }
