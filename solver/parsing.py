"""Turn user-typed cells into the numbers the solver works with.

Cells may hold integers, decimals, scientific notation or small
arithmetic such as ``1/3`` or ``-(2/5)``.  Empty or non-numeric cells are
rejected with a message naming the offending cell.
"""

import math
import re

from sympy import Pow, preorder_traversal
from sympy.parsing.sympy_parser import (
    parse_expr, standard_transformations, convert_xor, rationalize,
)

TRANSFORMATIONS = standard_transformations + (
    convert_xor,
    rationalize,  # Convert decimals like "12.5" to exact Rational(25, 2)
)

# Digits, a decimal point, exponent marker and arithmetic only.
_CELL_CHARS = re.compile(r"^[0-9eE.+\-*/^()\s]+$")
# An exponent marker must follow a digit or a decimal point.
_BARE_EXPONENT = re.compile(r"(^|[^0-9.])[eE]")

# Largest exponent magnitude accepted in a cell, e.g. "2^10" or "10^-3".
MAX_EXPONENT = 64
# Largest decimal exponent in scientific notation; float64 ends near 1e308.
MAX_SCIENTIFIC_EXPONENT = 308
_SCIENTIFIC = re.compile(r"[eE][+-]?(\d+)")


def _is_power(node) -> bool:
    """A power other than the reciprocal SymPy uses to represent division."""
    return isinstance(node, Pow) and node.exp != -1


def _check_powers(expr, s: str, label: str) -> None:
    """Refuse powers before they are evaluated.

    Every non-reciprocal power needs a numeric exponent of at most
    MAX_EXPONENT in magnitude, and neither its base nor its exponent may
    hold another power, so ``9^9^9`` is rejected without being computed.
    """
    for node in preorder_traversal(expr):
        if not _is_power(node):
            continue
        nested = (
            any(_is_power(n) for n in preorder_traversal(node.base))
            or any(_is_power(n) for n in preorder_traversal(node.exp))
        )
        if nested or not node.exp.is_number:
            raise ValueError(f"{label} has nested or symbolic powers: '{s}'.")
        try:
            too_large = abs(float(node.exp)) > MAX_EXPONENT
        except (TypeError, ValueError):
            too_large = True
        if too_large:
            raise ValueError(
                f"{label} has an exponent larger than {MAX_EXPONENT}: '{s}'."
            )


def parse_number(text, label: str = "Value") -> float:
    """Parse one cell into a float.

    Numbers (``int``/``float``) are accepted as-is.  Raises ValueError when
    the text is empty, contains anything but a numeric expression, or
    does not evaluate to a finite real number.
    """
    if isinstance(text, bool):
        raise ValueError(f"{label} must be a number.")
    if isinstance(text, (int, float)):
        value = float(text)
    else:
        s = str(text).strip()
        if not s:
            raise ValueError(f"{label} is empty.")
        if not _CELL_CHARS.match(s) or _BARE_EXPONENT.search(s):
            raise ValueError(f"{label} is not a number: '{s}'.")
        for digits in _SCIENTIFIC.findall(s):
            if len(digits) > 3 or int(digits) > MAX_SCIENTIFIC_EXPONENT:
                raise ValueError(f"{label} is out of range: '{s}'.")
        try:
            unevaluated = parse_expr(s, transformations=TRANSFORMATIONS, evaluate=False)
        except Exception as e:
            raise ValueError(f"{label} is not a number: '{s}'. Error: {e}")
        _check_powers(unevaluated, s, label)
        expr = parse_expr(s, transformations=TRANSFORMATIONS)
        if not expr.is_number or not expr.is_real:
            raise ValueError(f"{label} is not a real number: '{s}'.")
        value = float(expr)
    if not math.isfinite(value):
        raise ValueError(f"{label} must be finite.")
    return value


def parse_system(matrix_fields, vector_fields) -> tuple[list[list[float]], list[float]]:
    """Parse a grid of coefficient cells and a column of constants.

    Row/column counts are not checked here; the solver reports those.
    """
    matrix = [
        [parse_number(cell, f"Row {i + 1}, column {j + 1}")
         for j, cell in enumerate(row)]
        for i, row in enumerate(matrix_fields)
    ]
    vector = [
        parse_number(cell, f"Constant {i + 1}")
        for i, cell in enumerate(vector_fields)
    ]
    return matrix, vector


def parse_equation_rows(lines) -> tuple[list[list[float]], list[float]]:
    """Parse rows written as ``a11 a12 ... | b1``.

    Coefficients may be separated by whitespace or commas.
    """
    matrix_fields, vector_fields = [], []
    for i, line in enumerate(lines):
        if line.count("|") != 1:
            raise ValueError(
                f"Row {i + 1} must contain exactly one '|' before the constant. "
                f"Example: 2 1 | 3"
            )
        left, right = line.split("|")
        cells = [c for c in re.split(r"[\s,]+", left.strip()) if c]
        if not cells:
            raise ValueError(f"Row {i + 1} has no coefficients.")
        matrix_fields.append(cells)
        vector_fields.append(right.strip())
    return parse_system(matrix_fields, vector_fields)
