# src/meshsolve/simulation/exceptions.py
"""
Defines custom, diagnosable exceptions for the numerical stage: assembling the
mesh-current system, factorizing it, and mapping the solution back.

All exceptions here inherit from `DiagnosableError`, so they can be caught
explicitly, caught together under the common base, and always produce a
user-facing report.
"""
import numpy as np
from typing import Optional
from dataclasses import dataclass

from ..errors import DiagnosableError, format_diagnostic_report


@dataclass()
class SingularSystemError(DiagnosableError, np.linalg.LinAlgError):
    """
    Raised when a zero or near-zero diagonal divisor is met during LU
    decomposition or either substitution pass.

    The factorization never pivots, so such a divisor cannot be avoided. This
    class also derives from `LinAlgError` so generic numerical handlers catch it.
    """
    details: str
    pivot_index: Optional[int] = None
    pivot_value: Optional[float] = None
    stage: str = "decomposition"

    def __str__(self):
        where = f" at pivot {self.pivot_index}" if self.pivot_index is not None else ""
        return f"Singular system detected during {self.stage}{where}: {self.details}"

    def get_diagnostic_report(self) -> str:
        """Generates the diagnostic report for a singular system error."""
        value_str = f" (value {self.pivot_value:.6e})" if self.pivot_value is not None else ""
        return format_diagnostic_report(
            error_type="Singular Impedance Matrix",
            details=f"Stage: {self.stage}{value_str}\n{self.details}",
            suggestion=(
                "The LU factorization does not reorder rows, so a vanishing diagonal entry stops the solve. "
                "Check for meshes with zero self-impedance or meshes whose impedances cancel exactly. "
                "Declaring the meshes in a different order can also avoid a zero leading entry."
            ),
            context={'pivot_index': self.pivot_index}
        )


@dataclass()
class DimensionMismatchError(DiagnosableError, ValueError):
    """
    Raised when the impedance matrix, voltage vector, current vector and mesh
    count do not agree in size. This is a contract violation between stages.
    """
    details: str
    expected: Optional[int] = None
    found: Optional[int] = None

    def __str__(self):
        if self.expected is not None and self.found is not None:
            return f"{self.details} (expected {self.expected}, found {self.found})"
        return self.details

    def get_diagnostic_report(self) -> str:
        return format_diagnostic_report(
            error_type="Dimension Mismatch",
            details=str(self),
            suggestion="This indicates a programming error in how the linear system was built or consumed. Please review the traceback.",
            context={}
        )
