# src/meshsolve/analysis/exceptions.py
"""
Defines custom, diagnosable exceptions for the analysis services.
"""
from dataclasses import dataclass
from ..errors import Diagnosable, format_diagnostic_report


@dataclass()
class TopologyAnalysisError(ValueError, Diagnosable):
    """Custom exception for unexpected failures while analysing mesh adjacency."""
    circuit_name: str
    details: str

    def __str__(self):
        return f"Topology analysis of '{self.circuit_name}' failed: {self.details}"

    def get_diagnostic_report(self) -> str:
        return format_diagnostic_report(
            error_type="Topology Analysis Error",
            details=self.details,
            suggestion="This may indicate an internal error or a fundamental problem with the circuit's mesh structure.",
            context={}
        )
