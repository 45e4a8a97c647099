"""Text helpers for the elimination trace, parametric answers and analysis.

Everything here is a pure function over plain numbers so the strings the
user sees can be checked with literal expected values, independently of
the elimination itself.
"""

import math

from solver.constants import PRECISION, is_zero, round_value


# ── Numbers and names ───────────────────────────────────────────────────

def fmt_num(value: float, max_decimals: int = PRECISION) -> str:
    """Format a float into a clean decimal string.

    - Removes trailing zeros after the decimal point.
    - Uses up to *max_decimals* digits of precision.
    - Returns integers without a decimal point (e.g. ``7`` not ``7.0``).
    - Never prints a negative zero.
    - Prints ``inf`` / ``-inf`` / ``nan`` for non-finite values.
    """
    value = float(value)
    if not math.isfinite(value):
        return str(value)
    if abs(value - round(value)) < 1e-12:
        return str(int(round(value)))
    formatted = f"{value:.{max_decimals}f}".rstrip("0").rstrip(".")
    if formatted in ("-0", ""):
        return "0"
    return formatted


def variable_name(index: int) -> str:
    """``0`` → ``x1``: variables are shown 1-based."""
    return f"x{index + 1}"


def parameter_name(k: int) -> str:
    """``0`` → ``t0``: one parameter per free column, in column order."""
    return f"t{k}"


def _plural(n: int, word: str) -> str:
    return f"{n} {word}{'s' if n != 1 else ''}"


# ── Grids ───────────────────────────────────────────────────────────────

def format_augmented(matrix, vector) -> str:
    """Render ``[A | b]`` one row per line with right-aligned columns."""
    cells = [[fmt_num(v) for v in row] for row in matrix]
    consts = [fmt_num(v) for v in vector]
    width = max((len(c) for row in cells for c in row), default=1)
    const_width = max((len(c) for c in consts), default=1)
    lines = []
    for row, const in zip(cells, consts):
        left = "  ".join(c.rjust(width) for c in row)
        lines.append(f"[ {left} | {const.rjust(const_width)} ]")
    return "\n".join(lines)


# ── Parametric solution ─────────────────────────────────────────────────

def parametric_solution(rows, pivot_cols, free_cols) -> list[str]:
    """Build the general solution of an underdetermined system.

    *rows* is the reduced augmented matrix (constants in the last column).
    The i-th pivot column belongs to the i-th row.  Each pivot variable is
    written as its row constant plus one ``(coef)·t_k`` term per free
    column with a non-zero coefficient; each free variable then gets its
    own ``x = t_k`` line.
    """
    equations = []
    for i, pivot in enumerate(pivot_cols):
        row = rows[i]
        expression = fmt_num(round_value(row[-1]))
        for k, free in enumerate(free_cols):
            coef = round_value(-row[free])
            if not is_zero(coef):
                expression += f" + ({fmt_num(coef)})·{parameter_name(k)}"
        equations.append(f"{variable_name(pivot)} = {expression}")
    for k, free in enumerate(free_cols):
        equations.append(f"{variable_name(free)} = {parameter_name(k)}")
    return equations


# ── Analysis text ───────────────────────────────────────────────────────

def build_explanation(n_equations: int, n_variables: int,
                      coefficient_rank: int, augmented_rank: int,
                      is_homogeneous: bool, kind: str,
                      free_vars=()) -> str:
    """Compose the natural-language analysis of an already classified system.

    *kind* is the classification the engine chose; this function only
    describes it using the same counters.
    """
    lines = [
        f"System of {_plural(n_equations, 'equation')} with "
        f"{_plural(n_variables, 'variable')}",
        f"- Rank of the coefficient matrix: {coefficient_rank}",
        f"- Rank of the augmented matrix: {augmented_rank}",
        "- HOMOGENEOUS system" if is_homogeneous else "- NON-HOMOGENEOUS system",
        "",
    ]

    if kind == "no-solution":
        lines.append("→ INCONSISTENT system (no solution)")
        lines.append(
            f"The coefficient rank ({coefficient_rank}) is smaller than the "
            f"augmented rank ({augmented_rank}): some row reduces to "
            f"0 = non-zero value, which is a contradiction."
        )
    elif kind == "unique":
        lines.append("→ CONSISTENT, DETERMINED system (unique solution)")
        lines.append(
            "Unique trivial solution (every variable is zero)."
            if is_homogeneous else "Every variable has a pivot."
        )
    elif kind == "infinite":
        lines.append("→ CONSISTENT, UNDETERMINED system (infinitely many solutions)")
        lines.append(f"Number of free variables: {n_variables - coefficient_rank}")
        if is_homogeneous:
            lines.append("Homogeneous system with non-trivial solutions.")
        if free_vars:
            lines.append(
                "Free variables: " + ", ".join(variable_name(c) for c in free_vars)
            )
    else:
        lines.append("→ SINGULAR system (no unique classification)")
        lines.append(
            f"The rank ({coefficient_rank}) matches the number of variables "
            f"but not the number of equations ({n_equations}); the system "
            f"could not be reduced to a square determined form."
        )
    return "\n".join(lines)


def final_answer(solution) -> str:
    """One line per variable (or a verdict) for a ``Solution``."""
    if solution.type == "unique":
        return "\n".join(
            f"{variable_name(j)} = {fmt_num(v)}"
            for j, v in enumerate(solution.solution)
        )
    if solution.type == "infinite":
        return "\n".join(solution.solution)
    if solution.type == "no-solution":
        return "No solution: the system is inconsistent."
    return "No unique solution: the system is singular."
