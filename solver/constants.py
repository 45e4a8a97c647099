"""Fixed numeric policy shared by the elimination engine and its helpers."""

# Decimal places kept after every operation that mutates the augmented matrix.
PRECISION = 4

# Magnitudes below this are treated as exactly zero.
EPSILON = 1e-10

# Residual allowed when substituting a solution back into the original
# equations.  Intermediate values are rounded to PRECISION places, so the
# residual can drift well above EPSILON on larger systems.
VERIFY_TOLERANCE = 1e-3


def round_value(value: float) -> float:
    """Round *value* to PRECISION decimal places as a plain float.

    Adding ``0.0`` turns a rounded ``-0.0`` into ``0.0``.
    """
    return round(float(value), PRECISION) + 0.0


def is_zero(value: float) -> bool:
    return abs(value) < EPSILON
