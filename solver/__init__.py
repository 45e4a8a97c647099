"""Linear system solver with a step-by-step elimination trace."""

import logging as _logging

from solver.engine import GaussianSolver, Solution, Step, solve_system
from solver.errors import InvalidDimensions

_logging.getLogger(__name__).addHandler(_logging.NullHandler())

__all__ = [
    "GaussianSolver",
    "InvalidDimensions",
    "Solution",
    "Step",
    "solve_system",
]
