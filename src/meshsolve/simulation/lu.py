# src/meshsolve/simulation/lu.py
import logging

import numpy as np

from ..constants import DEFAULT_PIVOT_TOLERANCE
from .exceptions import DimensionMismatchError, SingularSystemError
from .results import LUFactors

logger = logging.getLogger(__name__)


def check_divisor(value: float, index: int, tolerance: float, stage: str) -> None:
    """
    Raises SingularSystemError unless |value| is strictly above `tolerance`.

    NaN divisors fail the comparison and are rejected as well.
    """
    if not abs(value) > tolerance:
        logger.error(f"Zero pivot at index {index} during {stage}: {value!r} (tolerance {tolerance:.1e}).")
        raise SingularSystemError(
            details=f"Diagonal divisor {value!r} at index {index} is not above the pivot tolerance {tolerance:.1e}.",
            pivot_index=index,
            pivot_value=float(value),
            stage=stage,
        )


def lu_decompose(matrix, pivot_tolerance: float = DEFAULT_PIVOT_TOLERANCE) -> LUFactors:
    """
    Factors a square matrix into unit lower and upper triangular matrices using
    the Doolittle algorithm, without pivoting.

    Row i first produces U[i][k] for k >= i, then L[k][i] for k > i. Every
    partial sum is accumulated in index order, so the result is reproducible
    bit for bit.

    Args:
        matrix: Square array-like of shape (n, n), n >= 1.
        pivot_tolerance: Divisors U[i][i] with magnitude at or below this value
                         are treated as zero.

    Returns:
        The LUFactors with `lower @ upper == matrix` up to rounding.

    Raises:
        DimensionMismatchError: If the input is empty or not square.
        SingularSystemError: If the input holds non-finite values or a divisor
                             U[i][i] vanishes before it is used.
    """
    a = np.asarray(matrix, dtype=float)
    if a.ndim != 2 or a.shape[0] != a.shape[1]:
        raise DimensionMismatchError(details=f"LU decomposition requires a square matrix, got shape {a.shape}.")
    dim = a.shape[0]
    if dim == 0:
        raise DimensionMismatchError(details="LU decomposition requires at least one row.", expected=1, found=0)
    if not np.all(np.isfinite(a)):
        raise SingularSystemError(details="Matrix contains NaN or infinite entries.", stage="decomposition")

    logger.debug(f"Decomposing {dim}x{dim} matrix (Doolittle, no pivoting)...")
    lower = np.zeros((dim, dim), dtype=float)
    upper = np.zeros((dim, dim), dtype=float)

    for i in range(dim):
        # Upper triangular row i
        for k in range(i, dim):
            total = 0.0
            for j in range(i):
                total += lower[i, j] * upper[j, k]
            upper[i, k] = a[i, k] - total

        lower[i, i] = 1.0
        if i == dim - 1:
            break

        # Lower triangular column i
        check_divisor(upper[i, i], i, pivot_tolerance, "decomposition")
        for k in range(i + 1, dim):
            total = 0.0
            for j in range(i):
                total += lower[k, j] * upper[j, i]
            lower[k, i] = (a[k, i] - total) / upper[i, i]

    logger.debug("LU decomposition successful.")
    return LUFactors(lower=lower, upper=upper)
