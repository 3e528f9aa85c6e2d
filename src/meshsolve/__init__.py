# src/meshsolve/__init__.py
import logging

logger = logging.getLogger(__name__)

from .units import ureg, pint, Quantity, VOLTAGE_DIMENSIONALITY, IMPEDANCE_DIMENSIONALITY
from .data_structures import Branch, ElementKind, Mesh, ResistiveElement
from .topology import CircuitTopology
from .parser import NetlistParser
from .circuit_builder import CircuitBuilder
from .simulation import (
    BranchCurrentMode,
    SolverConfig,
    SolveResult,
    run_solve,
    solve_circuit_file,
)
from .reporting import format_report, write_report
from .errors import MeshSolveError, CircuitBuildError, SolveRunError

__all__ = [
    # Units
    "ureg", "pint", "Quantity",
    "VOLTAGE_DIMENSIONALITY", "IMPEDANCE_DIMENSIONALITY",
    # Data Structures
    "Branch", "ElementKind", "Mesh", "ResistiveElement", "CircuitTopology",
    # Parser
    "NetlistParser",
    # Builder
    "CircuitBuilder",
    # Solving
    "BranchCurrentMode", "SolverConfig", "SolveResult", "run_solve", "solve_circuit_file",
    # Reporting
    "format_report", "write_report",
    # Top-Level Errors (Actionable Diagnostics)
    "MeshSolveError", "CircuitBuildError", "SolveRunError",
]
