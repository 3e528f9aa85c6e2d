# src/meshsolve/simulation/solver.py
import logging

import numpy as np

from ..constants import DEFAULT_PIVOT_TOLERANCE
from .exceptions import DimensionMismatchError, SingularSystemError
from .lu import check_divisor, lu_decompose
from .results import LUFactors

logger = logging.getLogger(__name__)


def solve_lu_system(factors: LUFactors, rhs, pivot_tolerance: float = DEFAULT_PIVOT_TOLERANCE) -> np.ndarray:
    """
    Solves `L @ U @ x = rhs` by forward substitution (`L @ y = rhs`) followed by
    back substitution (`U @ x = y`).

    Raises:
        DimensionMismatchError: If `rhs` does not match the factor dimension.
        SingularSystemError: If a diagonal divisor vanishes or the solution is not finite.
    """
    if not isinstance(factors, LUFactors):
        raise TypeError("factors must be an LUFactors object produced by lu_decompose.")
    lower, upper = factors.lower, factors.upper
    b = np.asarray(rhs, dtype=float)
    dim = factors.dimension
    if b.ndim != 1 or b.shape[0] != dim:
        raise DimensionMismatchError(
            details="Right-hand side length does not match the matrix dimension.",
            expected=dim, found=b.shape[0] if b.ndim == 1 else b.size
        )

    logger.debug(f"Solving {dim}x{dim} triangular systems...")

    # Forward substitution, L*Y = B
    y = np.zeros(dim, dtype=float)
    check_divisor(lower[0, 0], 0, pivot_tolerance, "forward substitution")
    y[0] = b[0] / lower[0, 0]
    for i in range(1, dim):
        subtract = 0.0
        for j in range(i - 1, -1, -1):
            subtract -= y[j] * lower[i, j]
        check_divisor(lower[i, i], i, pivot_tolerance, "forward substitution")
        y[i] = (b[i] + subtract) / lower[i, i]

    # Back substitution, U*X = Y
    x = np.zeros(dim, dtype=float)
    check_divisor(upper[dim - 1, dim - 1], dim - 1, pivot_tolerance, "back substitution")
    x[dim - 1] = y[dim - 1] / upper[dim - 1, dim - 1]
    for i in range(dim - 2, -1, -1):
        subtract = 0.0
        for j in range(i + 1, dim):
            subtract -= x[j] * upper[i, j]
        check_divisor(upper[i, i], i, pivot_tolerance, "back substitution")
        x[i] = (y[i] + subtract) / upper[i, i]

    if np.any(np.isnan(x)) or np.any(np.isinf(x)):
        logger.error("NaN or Inf detected in the solution vector.")
        raise SingularSystemError(details="Solve resulted in NaN/Inf values.", stage="back substitution")

    return x


def solve_linear_system(matrix, rhs, pivot_tolerance: float = DEFAULT_PIVOT_TOLERANCE) -> np.ndarray:
    """Solves `matrix @ x = rhs` with Doolittle LU decomposition and triangular substitution."""
    b = np.asarray(rhs, dtype=float)
    a = np.asarray(matrix, dtype=float)
    if a.ndim == 2 and b.ndim == 1 and a.shape[0] != b.shape[0]:
        raise DimensionMismatchError(
            details="Voltage vector length does not match the impedance matrix dimension.",
            expected=a.shape[0], found=b.shape[0]
        )
    factors = lu_decompose(a, pivot_tolerance)
    return solve_lu_system(factors, b, pivot_tolerance)
