"""Substitute a computed solution back into the original system.

Produces the same ``{description, expression, explanation}`` step layout
the rest of the project uses, so a front end can show the check right
after the elimination trace.
"""

import numpy as np

from solver.constants import VERIFY_TOLERANCE
from solver.formatting import fmt_num, variable_name


def residuals(matrix, vector, values) -> np.ndarray:
    """Return ``A·x − b`` evaluated on the ORIGINAL inputs."""
    b = np.asarray(vector, dtype=np.float64)
    x = np.asarray(values, dtype=np.float64)
    A = np.asarray(matrix, dtype=np.float64).reshape(len(b), len(x))
    return A @ x - b


def solution_holds(matrix, vector, values,
                   tolerance: float = VERIFY_TOLERANCE) -> bool:
    """True when every equation is satisfied within *tolerance*."""
    r = residuals(matrix, vector, values)
    return bool(np.all(np.abs(r) <= tolerance))


def build_verification_steps(matrix, vector, values) -> list[dict]:
    """One step per equation, framed by an opening and a closing step."""
    assignment = ", ".join(
        f"{variable_name(j)} = {fmt_num(v)}" for j, v in enumerate(values)
    )
    steps = [{
        "description": "Substitute into every equation",
        "expression": assignment,
        "explanation": "Plug the solution back into each original equation.",
    }]

    r = residuals(matrix, vector, values)
    all_ok = True
    for i, (b, res) in enumerate(zip(vector, r)):
        lhs = float(b) + float(res)
        ok = abs(res) <= VERIFY_TOLERANCE
        all_ok = all_ok and ok
        steps.append({
            "description": f"Equation ({i + 1})",
            "expression": (
                f"LHS = {fmt_num(lhs)},  RHS = {fmt_num(b)}"
                f"  →  {'✓' if ok else '✗'}"
            ),
            "explanation": (
                f"Both sides ≈ {fmt_num(lhs)}."
                if ok else
                f"Sides differ by {fmt_num(abs(res), 6)}."
            ),
        })

    if all_ok:
        steps.append({
            "description": "All equations verified",
            "expression": "All equations satisfied  ✓",
            "explanation": "The solution is correct.",
        })
    else:
        steps.append({
            "description": "Verification failed",
            "expression": "Some equations are not satisfied  ✗",
            "explanation": (
                "Rounding during elimination moved the solution outside the "
                "verification tolerance."
            ),
        })
    return steps
